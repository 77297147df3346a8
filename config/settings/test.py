"""
Test-specific Django settings.

Uses SQLite for tests to avoid database permission issues.
This is faster and doesn't require special database permissions.
"""

from .base import *  # noqa: F403

# Use SQLite for tests (in-memory, fast, no permissions needed)
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Speed up password hashing for tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Run Celery tasks inline
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

# Disable logging during tests
LOGGING_CONFIG = None
