"""
Core app models.

Provides the abstract timestamp base used across the project and the
in-app ``Notification`` inbox.
"""

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides self-updating ``created_at`` and
    ``updated_at`` timestamp fields for every concrete child model.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True


class NotificationType(models.TextChoices):
    UPDATE = "update", "Status Update"
    ASSIGNMENT = "assignment", "Assignment"
    SYSTEM = "system", "System"


class Notification(TimeStampedModel):
    """
    In-app message delivered to a registered reporter when something
    public happens on one of their complaints (e.g. a status change).
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="Recipient",
    )
    complaint = models.ForeignKey(
        "complaints.Complaint",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
        verbose_name="Complaint",
    )
    title = models.CharField(max_length=255, verbose_name="Title")
    message = models.TextField(verbose_name="Message")
    notification_type = models.CharField(
        max_length=20,
        choices=NotificationType.choices,
        default=NotificationType.UPDATE,
        verbose_name="Type",
    )
    is_read = models.BooleanField(default=False, verbose_name="Read")

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="core_notif_recipient_read_idx"),
        ]

    def __str__(self):
        return f"[{self.recipient}] {self.title}"
