"""Project-wide DRF exception handler.

Framework errors (authentication, validation, parsing, throttling) are
rendered in a single shape so clients have one contract to parse::

    {"type": "validation_error",
     "errors": [{"code": "required", "detail": "...", "attr": "items"}]}

Domain errors raised by the service layer never reach this handler:
views translate them into ``{"detail": ...}`` responses themselves.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import exceptions
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


def _error_type(exc: Exception) -> str:
    if isinstance(exc, exceptions.ValidationError):
        return "validation_error"
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return "client_error"
    if isinstance(exc, exceptions.APIException) and exc.status_code >= 500:
        return "server_error"
    return "client_error"


def _flatten(detail: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(detail, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in detail.items():
            nested = key if attr is None else f"{attr}.{key}"
            errors.extend(_flatten(value, attr if key == "non_field_errors" else nested))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, value in enumerate(detail):
            nested = attr
            if isinstance(value, (dict, list)) and attr is not None:
                nested = f"{attr}.{index}"
            errors.extend(_flatten(value, nested))
        return errors
    return [
        {
            "code": getattr(detail, "code", "error"),
            "detail": str(detail),
            "attr": attr,
        }
    ]


def standardized_exception_handler(exc: Exception, context: Dict[str, Any]):
    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = exc.detail if isinstance(exc, exceptions.APIException) else response.data
    response.data = {
        "type": _error_type(exc),
        "errors": _flatten(detail),
    }
    logger.warning(
        "api.error",
        status_code=response.status_code,
        error_type=response.data["type"],
    )
    return response
