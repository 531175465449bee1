"""
Evidence app serializers.

Request validation for multipart uploads and the read representation
of stored attachments.  **No business logic** lives here — storage,
persistence and access checks belong to ``services.py``.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings
from rest_framework import serializers

from core.constants import (
    EVIDENCE_ALLOWED_MIME_TYPES,
    EVIDENCE_MAX_FILE_SIZE,
    EVIDENCE_MAX_FILES_PER_UPLOAD,
)

from .models import Evidence


def _max_file_size() -> int:
    return getattr(settings, "EVIDENCE_MAX_FILE_SIZE", EVIDENCE_MAX_FILE_SIZE)


def _max_files() -> int:
    return getattr(settings, "EVIDENCE_MAX_FILES_PER_UPLOAD", EVIDENCE_MAX_FILES_PER_UPLOAD)


class EvidenceUploadSerializer(serializers.Serializer):
    """
    Multipart body for ``POST /api/v1/evidence/complaints/{id}/evidence/``.

    ``files``        : one or more files (field repeated per file)
    ``descriptions`` : optional, matched to ``files`` by position
    """

    files = serializers.ListField(
        child=serializers.FileField(allow_empty_file=False),
        allow_empty=False,
        help_text="Images (jpeg/png/webp), PDF or MP4; 10 MB each.",
    )
    descriptions = serializers.ListField(
        child=serializers.CharField(allow_blank=True, max_length=2000),
        required=False,
        default=list,
    )

    def validate_files(self, files: list[Any]) -> list[Any]:
        if len(files) > _max_files():
            raise serializers.ValidationError(
                f"Too many files: at most {_max_files()} per upload."
            )
        errors = []
        for upload in files:
            content_type = getattr(upload, "content_type", "") or ""
            if content_type not in EVIDENCE_ALLOWED_MIME_TYPES:
                errors.append(f"{upload.name}: file type '{content_type}' is not allowed.")
            elif upload.size > _max_file_size():
                errors.append(f"{upload.name}: file exceeds the {_max_file_size()} byte limit.")
        if errors:
            raise serializers.ValidationError(errors)
        return files


class EvidenceReadSerializer(serializers.ModelSerializer):
    """
    Read-only representation of an attachment.
    """

    file_url = serializers.SerializerMethodField()
    file_type = serializers.CharField(source="mime_type", read_only=True)
    uploaded_at = serializers.DateTimeField(source="created_at", read_only=True)
    uploaded_by = serializers.SerializerMethodField()

    class Meta:
        model = Evidence
        fields = [
            "id",
            "complaint",
            "file_name",
            "file_url",
            "file_type",
            "file_size",
            "description",
            "uploaded_at",
            "uploaded_by",
        ]
        read_only_fields = fields

    def get_file_url(self, obj: Evidence) -> str | None:
        if not obj.file:
            return None
        url = obj.file.url
        request = self.context.get("request")
        return request.build_absolute_uri(url) if request is not None else url

    def get_uploaded_by(self, obj: Evidence) -> str | None:
        return obj.uploaded_by.display_name if obj.uploaded_by else None
