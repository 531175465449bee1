"""
core.domain.transactions — Helpers for safe multi-row writes.

Every operation that mutates more than one row runs inside a single
``transaction.atomic()`` block.  The helpers here cover the two recurring
needs of those blocks:

* ``lock_for_update`` — re-read a row with ``select_for_update`` so that
  concurrent writers to the same complaint serialise on the row lock.
* ``translate_integrity_error`` — turn a driver ``IntegrityError`` into
  the matching domain exception (``Conflict`` / ``InvalidReference`` /
  ``PersistenceError``) without leaking SQL text to callers.

Usage::

    from django.db import IntegrityError, transaction
    from core.domain.transactions import lock_for_update, translate_integrity_error

    try:
        with transaction.atomic():
            complaint = lock_for_update(Complaint, complaint_id)
            ...
    except IntegrityError as exc:
        raise translate_integrity_error(exc) from exc
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from django.db import IntegrityError, models

from core.domain.exceptions import (
    Conflict,
    DomainError,
    InvalidReference,
    NotFound,
    PersistenceError,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=models.Model)

# PostgreSQL SQLSTATE classes
_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


def lock_for_update(model_class: type[M], pk: Any, *, label: str | None = None) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update().get(pk=pk)``
    that must be called inside an ``atomic()`` block.

    Args:
        model_class: The Django model class.
        pk:          Primary key value.
        label:       Human name used in the ``NotFound`` message.

    Returns:
        The locked model instance.

    Raises:
        NotFound: If no row with that PK exists.
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except model_class.DoesNotExist:
        raise NotFound(f"{label or model_class.__name__} not found.")


def _sqlstate(exc: IntegrityError) -> str | None:
    cause = exc.__cause__
    return getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)


def translate_integrity_error(exc: IntegrityError) -> DomainError:
    """
    Classify an ``IntegrityError`` raised by the database driver.

    PostgreSQL exposes the SQLSTATE on the wrapped driver exception;
    SQLite only offers the message text, so both are consulted.

    Returns:
        ``Conflict`` for unique violations, ``InvalidReference`` for
        foreign-key violations, ``PersistenceError`` for anything else.
    """
    state = _sqlstate(exc)
    text = str(exc).lower()

    if state == _UNIQUE_VIOLATION or "unique" in text:
        return Conflict("Resource already exists.")
    if state == _FOREIGN_KEY_VIOLATION or "foreign key" in text:
        return InvalidReference("Referenced resource not found.")

    logger.error("Unclassified integrity error (sqlstate=%s)", state)
    return PersistenceError("Database constraint violation.")
