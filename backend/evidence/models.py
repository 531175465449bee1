"""
Evidence app models.

A complaint may carry any number of file attachments (photos, PDFs,
short videos).  Files live in Django's default storage under
``complaints/``; the row keeps the original file name, MIME type, size,
an optional description and who uploaded it.

Evidence rows may be added or removed independently of the complaint's
own lifecycle.
"""

import os
import uuid

from django.conf import settings
from django.db import models

from core.constants import EVIDENCE_UPLOAD_DIR
from core.models import TimeStampedModel


def evidence_upload_path(instance, filename: str) -> str:
    """Random storage name that keeps the original extension."""
    ext = os.path.splitext(filename)[1].lower()
    return f"{EVIDENCE_UPLOAD_DIR}/{uuid.uuid4().hex}{ext}"


class Evidence(TimeStampedModel):
    """
    File attachment of a ``Complaint``.

    ``created_at`` (from ``TimeStampedModel``) is the upload timestamp.
    """

    complaint = models.ForeignKey(
        "complaints.Complaint",
        on_delete=models.CASCADE,
        related_name="evidence",
        verbose_name="Complaint",
    )
    file = models.FileField(
        upload_to=evidence_upload_path,
        max_length=255,
        verbose_name="File",
    )
    file_name = models.CharField(
        max_length=255,
        verbose_name="Original File Name",
    )
    mime_type = models.CharField(
        max_length=100,
        verbose_name="MIME Type",
    )
    file_size = models.PositiveBigIntegerField(verbose_name="Size (bytes)")
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Description",
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="uploaded_evidence",
        verbose_name="Uploaded By",
    )

    class Meta:
        verbose_name = "Evidence"
        verbose_name_plural = "Evidence"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.file_name} (complaint #{self.complaint_id})"
