"""
Complaints app Service Layer.

This module is the **single source of truth** for all business logic
in the ``complaints`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in
a DRF ``Response``.

Architecture
------------
- ``ProtocolNumberService``      — Per-day ``DENUNCIA-YYYYMMDD-NNNN`` numbers.
- ``ComplaintSubmissionService`` — Atomic creation (base + detail + first update).
- ``ComplaintWorkflowService``   — Status updates and investigator assignment.
- ``ComplaintAccessService``     — Who may read / write / delete what.
- ``ComplaintReadModelService``  — Composite tracking view.
- ``ComplaintQueryService``      — "My complaints" listing by identity.

Lifecycle Overview
------------------

  SUBMISSION (one transaction)
  ────────────────────────────
  protocol number → Complaint(status=submitted)
                  → <TypeDetails>         (exactly one, chosen by registry)
                  → ComplaintUpdate("submitted", public, no actor)
  * unique-number collision → whole transaction retried once with a
    fresh number, then DUPLICATE

  STATUS UPDATE (one transaction)
  ───────────────────────────────
  lock complaint row → set status → append ComplaintUpdate
  * public entry + reporter account → notification after commit

  Any of the six statuses may follow any other; staff decide.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Any

from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.db.models.functions import Length
from django.utils import timezone

from core.constants import (
    DEFAULT_PAGE_SIZE,
    MIN_UPDATE_DESCRIPTION_LENGTH,
    PROTOCOL_MAX_ATTEMPTS,
    PROTOCOL_PREFIX,
    PROTOCOL_SEQUENCE_DIGITS,
)
from core.domain.access import ADMIN, STAFF_ROLES, has_role, is_authenticated, require_role
from core.domain.exceptions import (
    Conflict,
    DomainError,
    NotFound,
    PermissionDenied,
    PersistenceError,
)
from core.domain.notifications import NotificationService
from core.domain.transactions import lock_for_update, translate_integrity_error

from .models import (
    Complaint,
    ComplaintStatus,
    ComplaintUpdate,
    ProtocolSequence,
)
from .registry import ComplaintTypeHandler, detail_accessors, get_handler

logger = logging.getLogger(__name__)

User = get_user_model()

INITIAL_UPDATE_DESCRIPTION = "Denúncia submetida e registrada no sistema"
ASSIGNMENT_UPDATE_DESCRIPTION = "Investigador atribuído ao caso"


# ═══════════════════════════════════════════════════════════════════
#  Protocol Numbers
# ═══════════════════════════════════════════════════════════════════


class ProtocolNumberService:
    """
    Issues ``DENUNCIA-YYYYMMDD-NNNN`` numbers, 1-based per calendar day
    (server local date, all complaint types share the sequence).
    """

    @staticmethod
    def format(day: datetime.date, value: int) -> str:
        return f"{PROTOCOL_PREFIX}-{day:%Y%m%d}-{value:0{PROTOCOL_SEQUENCE_DIGITS}d}"

    @staticmethod
    def next_protocol_number(day: datetime.date | None = None) -> str:
        """
        Reserve the next number for ``day`` (default: today).

        Must run inside the submitting ``transaction.atomic()`` block:
        the day's ``ProtocolSequence`` row stays locked until that
        transaction ends, so concurrent submissions queue behind it and
        never read the same value.  The counter never falls behind the
        highest suffix already issued for the day, so a retry after a
        collision always gets a number above the one that was taken.
        """
        day = day or timezone.localdate()
        counter, _ = ProtocolSequence.objects.select_for_update().get_or_create(day=day)

        value = max(counter.last_value, ProtocolNumberService.highest_issued(day)) + 1
        counter.last_value = value
        counter.save(update_fields=["last_value"])
        return ProtocolNumberService.format(day, value)

    @staticmethod
    def highest_issued(day: datetime.date) -> int:
        """Largest sequence suffix among complaints numbered on ``day``."""
        prefix = ProtocolNumberService.format(day, 0)[:-PROTOCOL_SEQUENCE_DIGITS]
        # longer suffix means larger number; equal lengths compare as text
        latest = (
            Complaint.objects.filter(protocol_number__startswith=prefix)
            .annotate(number_length=Length("protocol_number"))
            .order_by("-number_length", "-protocol_number")
            .values_list("protocol_number", flat=True)
            .first()
        )
        if latest is None:
            return 0
        suffix = latest[len(prefix):]
        return int(suffix) if suffix.isdigit() else 0


# ═══════════════════════════════════════════════════════════════════
#  Submission
# ═══════════════════════════════════════════════════════════════════


class ComplaintSubmissionService:
    """
    Creates a complaint together with its type-detail row and its
    initial timeline entry.  Either all three rows commit or none do.
    """

    @staticmethod
    def submit(validated_data: dict[str, Any], actor: Any = None) -> Complaint:
        """
        Persist a new complaint.

        Parameters
        ----------
        validated_data : dict
            Output of ``ComplaintCreateSerializer``.  Identity fields are
            already ``None`` for anonymous complaints and
            ``type_details`` is already validated for the type.
        actor : User | AnonymousUser | None
            Linked as ``reporter_user`` when authenticated.

        Returns
        -------
        Complaint
            The committed complaint (status ``submitted``).

        Raises
        ------
        DomainError
            Unknown ``complaint_type`` (nothing is written).
        Conflict
            Protocol-number collision that survived the retry, or any
            other uniqueness violation.
        InvalidReference / PersistenceError
            Other database failures; nothing is left behind.
        """
        data = dict(validated_data)
        complaint_type = data.pop("complaint_type")
        try:
            handler = get_handler(complaint_type)
        except KeyError:
            raise DomainError(f"Unknown complaint type: {complaint_type}.")

        type_details = dict(data.pop("type_details", None) or {})
        reporter_user = actor if is_authenticated(actor) else None

        for attempt in range(1, PROTOCOL_MAX_ATTEMPTS + 1):
            protocol_number = None
            try:
                with transaction.atomic():
                    protocol_number = ProtocolNumberService.next_protocol_number()
                    complaint = ComplaintSubmissionService._create_rows(
                        handler,
                        protocol_number,
                        data,
                        type_details,
                        reporter_user,
                    )
            except IntegrityError as exc:
                collided = (
                    protocol_number is not None
                    and Complaint.objects.filter(protocol_number=protocol_number).exists()
                )
                if not collided:
                    raise translate_integrity_error(exc) from exc
                logger.warning(
                    "Protocol number %s already taken (attempt %d/%d)",
                    protocol_number,
                    attempt,
                    PROTOCOL_MAX_ATTEMPTS,
                )
                continue
            except DatabaseError as exc:
                logger.exception("Complaint submission failed")
                raise PersistenceError() from exc

            logger.info(
                "Complaint submitted protocol=%s type=%s anonymous=%s",
                complaint.protocol_number,
                complaint.complaint_type,
                complaint.is_anonymous,
            )
            return complaint

        raise Conflict("Could not allocate a unique protocol number. Please try again.")

    @staticmethod
    def _create_rows(
        handler: ComplaintTypeHandler,
        protocol_number: str,
        data: dict[str, Any],
        type_details: dict[str, Any],
        reporter_user: Any,
    ) -> Complaint:
        complaint = Complaint.objects.create(
            protocol_number=protocol_number,
            complaint_type=handler.complaint_type,
            status=ComplaintStatus.SUBMITTED,
            reporter_user=reporter_user,
            is_anonymous=data.get("is_anonymous", False),
            reporter_name=data.get("reporter_name"),
            reporter_contact=data.get("reporter_contact"),
            reporter_email=data.get("reporter_email"),
            reporter_bi=data.get("reporter_bi"),
            incident_date=data.get("incident_date"),
            incident_time=data.get("incident_time"),
            location=data.get("location") or "",
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            description=data["description"],
        )
        handler.detail_model.objects.create(complaint=complaint, **type_details)
        ComplaintUpdate.objects.create(
            complaint=complaint,
            status=ComplaintStatus.SUBMITTED,
            description=INITIAL_UPDATE_DESCRIPTION,
            is_public=True,
            updated_by=None,
        )
        return complaint


# ═══════════════════════════════════════════════════════════════════
#  Status Workflow
# ═══════════════════════════════════════════════════════════════════


class ComplaintWorkflowService:
    """
    Staff-side mutations of an existing complaint.  Each one locks the
    complaint row, changes it and appends a timeline entry in a single
    transaction, so ``complaint.status`` always equals the status of the
    newest entry.
    """

    @staticmethod
    def apply_status_update(
        complaint_id: int,
        actor: Any,
        new_status: str,
        description: str,
        is_public: bool = True,
    ) -> ComplaintUpdate:
        """
        Move a complaint to ``new_status`` and record why.

        Raises
        ------
        PermissionDenied
            Actor is not an investigator or admin.
        DomainError
            Unknown status or description shorter than 5 characters.
        NotFound
            No complaint with ``complaint_id``.
        InvalidReference / Conflict / PersistenceError
            Database failures; neither write is kept.
        """
        require_role(
            actor,
            *STAFF_ROLES,
            message="Only investigators and administrators can update complaint status.",
        )
        if new_status not in ComplaintStatus.values:
            raise DomainError(f"Invalid status: {new_status}.")
        description = (description or "").strip()
        if len(description) < MIN_UPDATE_DESCRIPTION_LENGTH:
            raise DomainError(
                f"Description must be at least {MIN_UPDATE_DESCRIPTION_LENGTH} characters."
            )

        try:
            with transaction.atomic():
                complaint = lock_for_update(Complaint, complaint_id, label="Complaint")
                complaint.status = new_status
                complaint.save(update_fields=["status", "updated_at"])
                update = ComplaintUpdate.objects.create(
                    complaint=complaint,
                    status=new_status,
                    description=description,
                    updated_by=actor,
                    is_public=is_public,
                )
                if is_public and complaint.reporter_user_id is not None:
                    NotificationService.notify_on_commit(
                        recipients=complaint.reporter_user,
                        event_type="status_changed",
                        complaint=complaint,
                        context={"status": new_status, "description": description},
                    )
        except IntegrityError as exc:
            raise translate_integrity_error(exc) from exc
        except DatabaseError as exc:
            logger.exception("Status update failed for complaint=%s", complaint_id)
            raise PersistenceError() from exc

        logger.info(
            "Complaint %s moved to %s by user=%s (public=%s)",
            complaint.protocol_number,
            new_status,
            actor.pk,
            is_public,
        )
        return update

    @staticmethod
    def assign_investigator(
        complaint_id: int,
        actor: Any,
        investigator_id: int,
        description: str = "",
    ) -> Complaint:
        """
        Admin-only: set ``complaint.investigator`` and append a private
        timeline entry carrying the unchanged current status.

        Raises
        ------
        PermissionDenied
            Actor is not an admin.
        DomainError
            Assignee is missing, inactive, or not staff.
        NotFound
            No complaint with ``complaint_id``.
        """
        require_role(actor, ADMIN, message="Only administrators can assign investigators.")

        investigator = User.objects.filter(pk=investigator_id, is_active=True).first()
        if investigator is None or not has_role(investigator, *STAFF_ROLES):
            raise DomainError("Assignee must be an active investigator or administrator.")

        try:
            with transaction.atomic():
                complaint = lock_for_update(Complaint, complaint_id, label="Complaint")
                complaint.investigator = investigator
                complaint.save(update_fields=["investigator", "updated_at"])
                ComplaintUpdate.objects.create(
                    complaint=complaint,
                    status=complaint.status,
                    description=(description or "").strip() or ASSIGNMENT_UPDATE_DESCRIPTION,
                    updated_by=actor,
                    is_public=False,
                )
                NotificationService.notify_on_commit(
                    recipients=investigator,
                    event_type="investigator_assigned",
                    complaint=complaint,
                )
        except IntegrityError as exc:
            raise translate_integrity_error(exc) from exc

        logger.info(
            "Complaint %s assigned to investigator=%s by user=%s",
            complaint.protocol_number,
            investigator.pk,
            actor.pk,
        )
        return complaint


# ═══════════════════════════════════════════════════════════════════
#  Access Control
# ═══════════════════════════════════════════════════════════════════


class ComplaintAccessService:
    """
    Access rules for complaints and their attachments.

    Read: anyone without credentials may look a complaint up by its
    protocol number.  An authenticated actor must be the linked
    reporter, the assigned investigator, an admin, or hold the BI number
    recorded on the (non-anonymous) complaint.  Anonymous complaints
    have ``reporter_bi = NULL`` and therefore never match by BI.
    """

    @staticmethod
    def can_read(actor: Any, complaint: Complaint) -> bool:
        if not is_authenticated(actor):
            return True
        if complaint.reporter_user_id is not None and complaint.reporter_user_id == actor.pk:
            return True
        if complaint.investigator_id is not None and complaint.investigator_id == actor.pk:
            return True
        if has_role(actor, ADMIN):
            return True
        actor_bi = getattr(actor, "bi_number", None)
        return bool(
            complaint.reporter_bi is not None
            and actor_bi
            and complaint.reporter_bi == actor_bi
        )

    @staticmethod
    def can_write_status(actor: Any) -> bool:
        return has_role(actor, *STAFF_ROLES)

    @staticmethod
    def can_delete_evidence(actor: Any, evidence: Any, complaint: Complaint) -> bool:
        if not is_authenticated(actor):
            return False
        if evidence.uploaded_by_id is not None and evidence.uploaded_by_id == actor.pk:
            return True
        if complaint.reporter_user_id is not None and complaint.reporter_user_id == actor.pk:
            return True
        return has_role(actor, *STAFF_ROLES)

    @staticmethod
    def ensure_can_read(actor: Any, complaint: Complaint) -> None:
        if not ComplaintAccessService.can_read(actor, complaint):
            raise PermissionDenied("Access denied to this complaint.")


# ═══════════════════════════════════════════════════════════════════
#  Read Model
# ═══════════════════════════════════════════════════════════════════


def _detail_or_none(complaint: Complaint, handler: ComplaintTypeHandler) -> Any:
    try:
        return getattr(complaint, handler.accessor)
    except ObjectDoesNotExist:
        logger.error(
            "Complaint id=%s has no %s row",
            complaint.pk,
            handler.accessor,
        )
        return None


class ComplaintReadModelService:
    """
    Builds the public tracking view of a complaint.  The result is a
    plain dict rendered by ``ComplaintCompositeSerializer``; reporter
    identity fields are never part of it.
    """

    @staticmethod
    def get_by_protocol(protocol_number: str) -> Complaint:
        complaint = (
            Complaint.objects
            .select_related("investigator", *detail_accessors())
            .filter(protocol_number=protocol_number)
            .first()
        )
        if complaint is None:
            raise NotFound("Complaint not found.")
        return complaint

    @staticmethod
    def get_composite_view(protocol_number: str, actor: Any) -> dict[str, Any]:
        complaint = ComplaintReadModelService.get_by_protocol(protocol_number)
        ComplaintAccessService.ensure_can_read(actor, complaint)
        return ComplaintReadModelService.build_composite_view(complaint)

    @staticmethod
    def build_composite_view(complaint: Complaint) -> dict[str, Any]:
        """
        Assemble base fields, the type-detail object, the public
        timeline (newest first), investigator contact and next steps.
        """
        handler = get_handler(complaint.complaint_type)
        detail = _detail_or_none(complaint, handler)
        type_details = dict(handler.detail_serializer(detail).data) if detail is not None else {}

        updates = (
            complaint.updates
            .filter(is_public=True)
            .select_related("updated_by")
            .order_by("-created_at", "-id")
        )
        timeline = [
            {
                "date": update.created_at,
                "status": update.status,
                "description": update.description,
                "updated_by": update.updated_by.display_name if update.updated_by else None,
            }
            for update in updates
        ]

        investigator = None
        if complaint.investigator is not None:
            investigator = {
                "name": complaint.investigator.display_name,
                "phone": complaint.investigator.phone,
                "email": complaint.investigator.email,
            }

        next_steps: list[str] = []
        if complaint.status == ComplaintStatus.INVESTIGATING:
            next_steps = list(handler.next_steps)

        return {
            "id": complaint.pk,
            "protocol_number": complaint.protocol_number,
            "complaint_type": complaint.complaint_type,
            "status": complaint.status,
            "incident_date": complaint.incident_date,
            "incident_time": complaint.incident_time,
            "location": complaint.location,
            "latitude": complaint.latitude,
            "longitude": complaint.longitude,
            "description": complaint.description,
            "is_anonymous": complaint.is_anonymous,
            "created_at": complaint.created_at,
            "updated_at": complaint.updated_at,
            "investigator": investigator,
            "updates": timeline,
            "next_steps": next_steps,
            "type_details": type_details,
        }


# ═══════════════════════════════════════════════════════════════════
#  Identity Listing
# ═══════════════════════════════════════════════════════════════════


class ComplaintQueryService:
    """
    Complaints belonging to the calling identity: the account-linked
    reporter OR a non-anonymous complaint whose reporter BI equals the
    caller's BI number.
    """

    @staticmethod
    def identity_queryset(actor: Any) -> QuerySet[Complaint]:
        if not is_authenticated(actor):
            return Complaint.objects.none()
        condition = Q(reporter_user=actor)
        bi_number = getattr(actor, "bi_number", None)
        if bi_number:
            condition |= Q(reporter_bi=bi_number)
        return Complaint.objects.filter(condition)

    @staticmethod
    def summarize(complaint: Complaint) -> dict[str, Any]:
        handler = get_handler(complaint.complaint_type)
        detail = _detail_or_none(complaint, handler)
        return {
            "id": complaint.pk,
            "protocol_number": complaint.protocol_number,
            "complaint_type": complaint.complaint_type,
            "status": complaint.status,
            "created_at": complaint.created_at,
            "updated_at": complaint.updated_at,
            "display_name": handler.display_name(detail, complaint),
            "brief_info": handler.brief_info(detail, complaint),
        }

    @staticmethod
    def list_for_identity(actor: Any, filters: dict[str, Any]) -> dict[str, Any]:
        """
        Paginated summaries for ``GET /complaints/my/``.

        ``filters`` is the validated ``MyComplaintsFilterSerializer``
        data (``status``, ``type``, ``page``, ``limit``).
        """
        qs = ComplaintQueryService.identity_queryset(actor)
        if filters.get("status"):
            qs = qs.filter(status=filters["status"])
        if filters.get("type"):
            qs = qs.filter(complaint_type=filters["type"])

        page = filters.get("page") or 1
        limit = filters.get("limit") or DEFAULT_PAGE_SIZE
        total = qs.count()
        offset = (page - 1) * limit

        rows = (
            qs.select_related(*detail_accessors())
            .order_by("-created_at", "-id")[offset:offset + limit]
        )
        return {
            "complaints": [ComplaintQueryService.summarize(c) for c in rows],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit) if total else 0,
            },
        }
