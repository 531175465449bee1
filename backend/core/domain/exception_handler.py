"""
core.domain.exception_handler — DRF-compatible global exception handler.

Maps domain exceptions from ``core.domain.exceptions`` to proper
DRF ``Response`` objects so that views don't need per-endpoint
try/except boilerplate, and gives every error body the same shape::

    {"code": "NOT_FOUND", "detail": "Complaint not found."}

Validation errors keep their per-field structure under ``detail``.

Register in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from rest_framework import exceptions as drf_exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import (
    Conflict,
    DomainError,
    InvalidReference,
    NotFound,
    PermissionDenied,
    PersistenceError,
)

logger = logging.getLogger(__name__)

# Domain exception → HTTP status code (most specific first)
_STATUS_MAP: dict[type, int] = {
    PermissionDenied:  403,
    NotFound:          404,
    Conflict:          409,
    InvalidReference:  400,
    PersistenceError:  500,
    DomainError:       400,  # catch-all base class last
}

# HTTP status → error code for exceptions raised by DRF itself
_DRF_CODES: dict[int, str] = {
    400: "VALIDATION",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    406: "NOT_ACCEPTABLE",
    415: "UNSUPPORTED_MEDIA_TYPE",
    429: "RATE_LIMITED",
}


def _drf_error_body(exc: Exception, response: Response) -> dict:
    code = _DRF_CODES.get(response.status_code, "ERROR")
    if isinstance(exc, drf_exceptions.ValidationError):
        return {"code": code, "detail": response.data}
    data = response.data
    if isinstance(data, dict) and "detail" in data:
        detail = data["detail"]
    else:
        detail = data
    return {"code": code, "detail": detail}


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    The default DRF handler is called first.  If it recognises the
    exception its payload is re-shaped into ``{code, detail}``.
    Otherwise domain exceptions are matched against ``_STATUS_MAP``, and
    a stray ``DatabaseError`` becomes an opaque ``PERSISTENCE`` error.
    """
    response = drf_default_handler(exc, context)
    if response is not None:
        response.data = _drf_error_body(exc, response)
        return response

    for exc_class, status_code in _STATUS_MAP.items():
        if isinstance(exc, exc_class):
            logger.warning(
                "Domain exception [%s] in %s: %s",
                exc_class.__name__,
                context.get("view", "unknown"),
                exc,
            )
            return Response(
                {"code": exc.code, "detail": str(exc)},
                status=status_code,
            )

    if isinstance(exc, DatabaseError):
        logger.exception(
            "Unhandled database error in %s",
            context.get("view", "unknown"),
        )
        fallback = PersistenceError()
        return Response(
            {"code": fallback.code, "detail": fallback.message},
            status=500,
        )

    # Not ours, let DRF handle it
    return None
