"""
Evidence Service Layer.

All business logic for complaint attachments lives here.  Views stay
thin: validate with a serializer, call a service method, serialize.

Architecture
------------
- ``EvidenceQueryService``  — attachment listing for a complaint.
- ``EvidenceUploadService`` — storage write + row insert.
- ``EvidenceDeleteService`` — guarded removal of row and stored file.

Storage / database ordering
---------------------------
Files reach storage *before* their rows are inserted:

  1. every file is written to the default storage
     (failure → files already written are removed, nothing is inserted)
  2. all rows are inserted in one transaction
     (failure → rows roll back; the stored files are left behind and
     logged as orphans)

So a row never references a file that failed to write.  Deletion runs
the other way round: the row goes first and the stored file is removed
once the transaction has committed.
"""

from __future__ import annotations

import logging
from typing import Any

from django.core.files.storage import default_storage
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import QuerySet

from complaints.models import Complaint
from complaints.services import ComplaintAccessService
from core.domain.access import is_authenticated
from core.domain.exceptions import NotFound, PermissionDenied, PersistenceError
from core.domain.transactions import translate_integrity_error

from .models import Evidence, evidence_upload_path

logger = logging.getLogger(__name__)


def _get_complaint(complaint_id: int) -> Complaint:
    complaint = Complaint.objects.filter(pk=complaint_id).first()
    if complaint is None:
        raise NotFound("Complaint not found.")
    return complaint


def _remove_stored_file(name: str) -> None:
    try:
        default_storage.delete(name)
    except OSError:
        logger.warning("Could not delete stored evidence file %s", name, exc_info=True)


# ═══════════════════════════════════════════════════════════════════
#  Query Service
# ═══════════════════════════════════════════════════════════════════


class EvidenceQueryService:

    @staticmethod
    def list_for_complaint(complaint_id: int, actor: Any) -> QuerySet[Evidence]:
        """
        Attachments of a complaint, newest first.

        Raises:
            NotFound: unknown complaint.
            PermissionDenied: the actor may not read the complaint.
        """
        complaint = _get_complaint(complaint_id)
        ComplaintAccessService.ensure_can_read(actor, complaint)
        return (
            Evidence.objects
            .filter(complaint=complaint)
            .select_related("uploaded_by")
            .order_by("-created_at", "-id")
        )


# ═══════════════════════════════════════════════════════════════════
#  Upload Service
# ═══════════════════════════════════════════════════════════════════


class EvidenceUploadService:

    @staticmethod
    def upload(
        complaint_id: int,
        files: list[Any],
        descriptions: list[str] | None,
        actor: Any,
    ) -> list[Evidence]:
        """
        Store ``files`` and attach them to the complaint.

        Parameters
        ----------
        complaint_id : int
        files : list[UploadedFile]
            Already validated for type, size and count by
            ``EvidenceUploadSerializer``.
        descriptions : list[str] | None
            Matched to ``files`` by position; missing entries are blank.
        actor : User | AnonymousUser
            Recorded as ``uploaded_by`` when authenticated.

        Returns
        -------
        list[Evidence]

        Raises
        ------
        NotFound
            Unknown complaint.
        PermissionDenied
            Authenticated actor unrelated to the complaint.
        PersistenceError
            Storage or database failure.
        """
        complaint = _get_complaint(complaint_id)
        ComplaintAccessService.ensure_can_read(actor, complaint)
        uploader = actor if is_authenticated(actor) else None
        descriptions = list(descriptions or [])

        stored: list[str] = []
        try:
            for upload in files:
                stored.append(default_storage.save(evidence_upload_path(None, upload.name), upload))
        except Exception as exc:
            # storage backends raise their own error types (S3, GCS, ...)
            logger.exception("Evidence storage write failed for complaint=%s", complaint.pk)
            for name in stored:
                _remove_stored_file(name)
            raise PersistenceError("Could not store the uploaded files.") from exc

        try:
            with transaction.atomic():
                evidence = [
                    Evidence.objects.create(
                        complaint=complaint,
                        file=name,
                        file_name=upload.name,
                        mime_type=upload.content_type,
                        file_size=upload.size,
                        description=(descriptions[i] if i < len(descriptions) else "") or "",
                        uploaded_by=uploader,
                    )
                    for i, (upload, name) in enumerate(zip(files, stored))
                ]
        except IntegrityError as exc:
            logger.error("Evidence rows rolled back; orphaned files: %s", stored)
            raise translate_integrity_error(exc) from exc
        except DatabaseError as exc:
            logger.exception("Evidence rows rolled back; orphaned files: %s", stored)
            raise PersistenceError() from exc

        logger.info(
            "Uploaded %d evidence file(s) to complaint=%s",
            len(evidence),
            complaint.pk,
        )
        return evidence


# ═══════════════════════════════════════════════════════════════════
#  Delete Service
# ═══════════════════════════════════════════════════════════════════


class EvidenceDeleteService:

    @staticmethod
    def delete(evidence_id: int, actor: Any) -> None:
        """
        Delete an attachment.  Allowed for the uploader, the complaint's
        reporter, investigators and admins.

        Raises:
            NotFound: unknown evidence id.
            PermissionDenied: the actor may not delete it.
        """
        with transaction.atomic():
            evidence = (
                Evidence.objects
                .select_for_update()
                .select_related("complaint")
                .filter(pk=evidence_id)
                .first()
            )
            if evidence is None:
                raise NotFound("Evidence not found.")
            if not ComplaintAccessService.can_delete_evidence(actor, evidence, evidence.complaint):
                raise PermissionDenied("Not authorized to delete this evidence.")

            name = evidence.file.name
            evidence.delete()
            if name:
                transaction.on_commit(lambda: _remove_stored_file(name))

        logger.info("Evidence id=%s deleted by user=%s", evidence_id, actor.pk)
