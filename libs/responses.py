"""
JSON response envelopes shared by the API views.

Every failure is reported as ``{"success": false, "error": "<category>: <message>"}``
so callers can tell error categories apart without parsing status codes.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from django.http import JsonResponse

logger = logging.getLogger(__name__)


class BadRequest(ValueError):
    """Raised by views for malformed query parameters or bodies."""


def json_success(payload: dict[str, Any] | None = None, status: int = 200) -> JsonResponse:
    """Return a success envelope merged with ``payload``."""
    body: dict[str, Any] = {"success": True}
    if payload:
        body.update(payload)
    return JsonResponse(body, status=status)


def json_error(message: str, status: int = 400, **extra: Any) -> JsonResponse:
    """Return a failure envelope."""
    body: dict[str, Any] = {"success": False, "error": message}
    body.update(extra)
    return JsonResponse(body, status=status)


def json_list(items: list[Any], status: int = 200) -> JsonResponse:
    """Return a bare JSON array."""
    return JsonResponse(items, status=status, safe=False)


def api_view(view):
    """Translate BadRequest to 400 and anything unexpected to 500."""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except BadRequest as e:
            return json_error(f"Invalid request: {e}", status=400)
        except Exception as e:
            logger.exception("Unexpected error in %s", view.__name__)
            return json_error(f"Unexpected error: {e}", status=500)

    return wrapper
