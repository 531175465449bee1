"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF handler rendering every error as ``{code, detail}``.
notifications      Notification creation helper (fired after commit).
transactions       ``select_for_update`` and ``IntegrityError`` helpers.
access             Role helpers shared by every app's access rules.

Usage from any app::

    from core.domain.exceptions import DomainError, NotFound
    from core.domain.notifications import NotificationService
    from core.domain.transactions import lock_for_update
    from core.domain.access import require_role
"""
