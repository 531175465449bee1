"""
core.domain.notifications — Notification creation helper.

Centralises notification creation so every app uses one consistent
entry-point rather than directly constructing ``Notification`` objects.

Design decisions
----------------
* **After commit, fire-and-forget** — callers use ``notify_on_commit``
  so the notification is only written once the state change it
  describes is durable.  A failure to write it is logged and never
  propagated back into the (already committed) request.
* **Supports multiple recipients** — pass a single ``User`` or an
  iterable of ``User`` instances.
* **Complaint link** — ``complaint`` is optional; when given it lets the
  inbox show the protocol number next to the message.

Usage::

    from core.domain.notifications import NotificationService

    NotificationService.notify_on_commit(
        recipients=complaint.reporter_user,
        event_type="status_changed",
        complaint=complaint,
        context={"status": "investigating"},
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from django.db import DatabaseError, models, transaction

if TYPE_CHECKING:
    from accounts.models import User
    from core.models import Notification

logger = logging.getLogger(__name__)

# ── Event-type → (title, message template, notification_type) ────────
# Message templates are formatted with the ``context`` dict.
_EVENT_TEMPLATES: dict[str, tuple[str, str, str]] = {
    "status_changed": (
        "Atualização da denúncia",
        "A sua denúncia {protocol_number} foi atualizada: {description}",
        "update",
    ),
    "investigator_assigned": (
        "Investigador atribuído",
        "A denúncia {protocol_number} foi-lhe atribuída para investigação.",
        "assignment",
    ),
}


def _render(event_type: str, context: dict[str, Any]) -> tuple[str, str, str]:
    title, template, kind = _EVENT_TEMPLATES.get(
        event_type,
        (event_type.replace("_", " ").title(), "Event: " + event_type, "system"),
    )
    try:
        message = template.format(**context)
    except KeyError:
        message = template
    return title, message, kind


class NotificationService:
    """
    Stateless helper for creating ``Notification`` records.

    All methods are classmethods — no instance state is needed.
    """

    @classmethod
    def create(
        cls,
        *,
        recipients: User | Iterable[User],
        event_type: str,
        complaint: models.Model | None = None,
        context: dict[str, Any] | None = None,
    ) -> list[Notification]:
        """
        Create one ``Notification`` per recipient.

        Args:
            recipients: A single ``User`` or iterable of ``User`` instances.
            event_type: Key into ``_EVENT_TEMPLATES``.  If unknown the
                        raw event_type is used as title.
            complaint:  Optional complaint the notification refers to.
            context:    Values interpolated into the message template.

        Returns:
            List of created ``Notification`` instances.
        """
        from core.models import Notification  # lazy import

        if isinstance(recipients, models.Model):
            recipients = [recipients]
        else:
            recipients = [r for r in recipients if r is not None]

        if not recipients:
            logger.warning(
                "NotificationService.create called with empty recipients "
                "for event_type=%s",
                event_type,
            )
            return []

        ctx = dict(context or {})
        if complaint is not None:
            ctx.setdefault("protocol_number", getattr(complaint, "protocol_number", ""))
        title, message, kind = _render(event_type, ctx)

        notifications = [
            Notification.objects.create(
                recipient=recipient,
                complaint=complaint,
                title=title,
                message=message,
                notification_type=kind,
            )
            for recipient in recipients
        ]

        logger.info(
            "Created %d notification(s) [%s] for complaint=%s",
            len(notifications),
            event_type,
            getattr(complaint, "pk", None),
        )
        return notifications

    @classmethod
    def notify_on_commit(cls, **kwargs: Any) -> None:
        """
        Schedule ``create`` to run after the surrounding transaction
        commits.  Outside a transaction it runs immediately.
        """

        def _send() -> None:
            try:
                cls.create(**kwargs)
            except DatabaseError:
                logger.exception(
                    "Failed to deliver notification [%s]",
                    kwargs.get("event_type"),
                )

        transaction.on_commit(_send)
