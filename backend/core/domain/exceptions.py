"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  The global DRF exception handler
(``core.domain.exception_handler``) maps them to HTTP responses.

Every class carries a stable, machine-readable ``code`` that is returned
to API clients alongside the human-readable message.

Mapping cheatsheet
------------------
┌─────────────────────┬──────────────┬──────┐
│ Domain Exception    │ code         │ HTTP │
├─────────────────────┼──────────────┼──────┤
│ DomainError         │ VALIDATION   │ 400  │
│ InvalidReference    │ REFERENCE    │ 400  │
│ PermissionDenied    │ FORBIDDEN    │ 403  │
│ NotFound            │ NOT_FOUND    │ 404  │
│ Conflict            │ DUPLICATE    │ 409  │
│ PersistenceError    │ PERSISTENCE  │ 500  │
└─────────────────────┴──────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import NotFound

    complaint = Complaint.objects.filter(protocol_number=number).first()
    if complaint is None:
        raise NotFound("Complaint not found.")
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    code = "VALIDATION"

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class PermissionDenied(DomainError):
    """
    The actor is not allowed to read or mutate the resource.

    Maps to HTTP 403.
    """

    code = "FORBIDDEN"

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist (unknown protocol number,
    complaint id, evidence id or notification id).

    Maps to HTTP 404.
    """

    code = "NOT_FOUND"

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    A uniqueness conflict: protocol-number collision that survived the
    retry, or a duplicate account identity (email / BI number).

    Maps to HTTP 409.
    """

    code = "DUPLICATE"

    def __init__(self, message: str = "The resource already exists.") -> None:
        super().__init__(message)


class InvalidReference(DomainError):
    """
    A write pointed at a row that does not exist (foreign-key violation),
    e.g. a status update against a complaint deleted underneath it.

    Maps to HTTP 400.
    """

    code = "REFERENCE"

    def __init__(self, message: str = "Referenced resource not found.") -> None:
        super().__init__(message)


class PersistenceError(DomainError):
    """
    Generic storage failure.  The message returned to clients never
    includes driver or SQL detail.

    Maps to HTTP 500.
    """

    code = "PERSISTENCE"

    def __init__(self, message: str = "The operation could not be stored. Please try again.") -> None:
        super().__init__(message)
