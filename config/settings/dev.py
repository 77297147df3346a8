# config/settings/dev.py
from .base import *  # noqa: F403

DEBUG = True

ALLOWED_HOSTS = ["*"]
