"""
Core app services — **Service Layer**.

Cross-app read endpoints: public search, statistics and the in-app
notification inbox.  Views delegate all logic to the classes defined
here.

╔══════════════════════════════════════════════════════════════════════╗
║  CROSS-APP IMPORT RULEBOOK                                         ║
║                                                                    ║
║  ``complaints`` imports ``core`` at module level (models, domain,  ║
║  constants), so this module must NOT import ``complaints`` at the  ║
║  module level.  Models come from ``apps.get_model`` and enums or   ║
║  the type registry are imported inside the method that uses them.  ║
╚══════════════════════════════════════════════════════════════════════╝
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Any

from django.apps import apps
from django.db.models import Count, Q, QuerySet
from django.db.models.functions import TruncDate
from django.utils import timezone

from core.constants import DASHBOARD_ACTIVITY_DAYS, DEFAULT_PAGE_SIZE
from core.domain.access import STAFF_ROLES, require_role
from core.domain.exceptions import NotFound

from .models import Notification

logger = logging.getLogger(__name__)


def _paginate(qs: QuerySet, page: int, limit: int) -> tuple[QuerySet, dict[str, int]]:
    """Slice ``qs`` to one page and return it with the pagination block."""
    total = qs.count()
    offset = (page - 1) * limit
    return qs[offset:offset + limit], {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit) if total else 0,
    }


def _type_key(complaint_type: str) -> str:
    """``missing-person`` → ``missing_person`` for statistics payloads."""
    return complaint_type.replace("-", "_")


# ════════════════════════════════════════════════════════════════════
#  Search Service
# ════════════════════════════════════════════════════════════════════

class SearchService:
    """
    Public lookups.  Neither result carries reporter identity fields.
    """

    #: Shown when a missing-person row has no physical description.
    NO_DESCRIPTION: str = "Sem descrição disponível"

    @staticmethod
    def search_missing_persons(filters: dict[str, Any]) -> dict[str, Any]:
        """
        Filter missing-person complaints.

        ``filters`` is the validated ``MissingPersonSearchSerializer``
        data: ``q``, ``gender``, ``age_min``, ``age_max``, ``province``,
        ``status``, ``page``, ``limit``.  ``q`` matches the person's
        name, last-seen location or the complaint location; ``province``
        is a substring of the complaint location.
        """
        from complaints.models import ComplaintType

        MissingPersonDetails = apps.get_model("complaints", "MissingPersonDetails")
        qs = MissingPersonDetails.objects.select_related("complaint").filter(
            complaint__complaint_type=ComplaintType.MISSING_PERSON,
        )

        term = (filters.get("q") or "").strip()
        if term:
            qs = qs.filter(
                Q(full_name__icontains=term)
                | Q(last_seen_location__icontains=term)
                | Q(complaint__location__icontains=term)
            )
        if filters.get("gender"):
            qs = qs.filter(gender=filters["gender"])
        if filters.get("age_min") is not None:
            qs = qs.filter(age__gte=filters["age_min"])
        if filters.get("age_max") is not None:
            qs = qs.filter(age__lte=filters["age_max"])
        if filters.get("province"):
            qs = qs.filter(complaint__location__icontains=filters["province"].strip())
        if filters.get("status"):
            qs = qs.filter(complaint__status=filters["status"])

        page_qs, pagination = _paginate(
            qs.order_by("-complaint__created_at", "-complaint_id"),
            filters.get("page") or 1,
            filters.get("limit") or DEFAULT_PAGE_SIZE,
        )
        persons = [
            {
                "id": detail.complaint_id,
                "protocol_number": detail.complaint.protocol_number,
                "full_name": detail.full_name,
                "age": detail.age,
                "gender": detail.gender or None,
                "last_seen_location": detail.last_seen_location or detail.complaint.location,
                "last_seen_date": detail.last_seen_date or detail.complaint.incident_date,
                "status": detail.complaint.status,
                "photo_url": None,
                "description": detail.physical_description or SearchService.NO_DESCRIPTION,
            }
            for detail in page_qs
        ]
        return {"persons": persons, "pagination": pagination}

    @staticmethod
    def search_cases_by_bi(bi_number: str) -> dict[str, Any]:
        """
        Complaints whose stored reporter BI equals ``bi_number``, newest
        first.  Anonymous complaints have no stored BI and never match.
        """
        from complaints.registry import detail_accessors, get_handler

        Complaint = apps.get_model("complaints", "Complaint")
        complaints = (
            Complaint.objects
            .filter(reporter_bi=bi_number, is_anonymous=False)
            .select_related(*detail_accessors())
            .order_by("-created_at", "-id")
        )

        cases = []
        for complaint in complaints:
            handler = get_handler(complaint.complaint_type)
            detail = getattr(complaint, handler.accessor, None)
            cases.append({
                "id": complaint.pk,
                "protocol_number": complaint.protocol_number,
                "complaint_type": complaint.complaint_type,
                "status": complaint.status,
                "created_at": complaint.created_at,
                "relationship": handler.relationship(detail),
                "person_info": {
                    "name": handler.display_name(detail, complaint),
                    "brief_description": handler.search_description,
                },
            })
        logger.info("Case search by BI returned %d result(s)", len(cases))
        return {"cases": cases}


# ════════════════════════════════════════════════════════════════════
#  Statistics Service
# ════════════════════════════════════════════════════════════════════

class StatsService:
    """
    Aggregate counters.  Every type and status key is always present,
    zero-filled, so clients can render fixed widgets.
    """

    @staticmethod
    def dashboard(actor: Any) -> dict[str, Any]:
        """
        Organisation-wide totals for investigators and admins.

        Raises:
            PermissionDenied: for citizens.
        """
        from complaints.models import ComplaintStatus, ComplaintType

        require_role(actor, *STAFF_ROLES, message="Only staff can view the dashboard.")
        Complaint = apps.get_model("complaints", "Complaint")

        by_type = {_type_key(value): 0 for value in ComplaintType.values}
        for row in Complaint.objects.values("complaint_type").annotate(count=Count("id")).order_by():
            by_type[_type_key(row["complaint_type"])] = row["count"]

        by_status = {value: 0 for value in ComplaintStatus.values}
        for row in Complaint.objects.values("status").annotate(count=Count("id")).order_by():
            by_status[row["status"]] = row["count"]

        since = timezone.now() - timedelta(days=DASHBOARD_ACTIVITY_DAYS)
        activity = (
            Complaint.objects
            .filter(created_at__gte=since)
            .annotate(date=TruncDate("created_at"))
            .values("date")
            .annotate(complaints=Count("id"))
            .order_by("-date")
        )

        resolved = by_status[ComplaintStatus.RESOLVED.value]
        closed = resolved + by_status[ComplaintStatus.ARCHIVED.value]
        success_rate = round(resolved / closed * 100, 1) if closed else 0.0

        return {
            "total_complaints": sum(by_status.values()),
            "by_type": by_type,
            "by_status": by_status,
            "recent_activity": [
                {"date": row["date"], "complaints": row["complaints"]}
                for row in activity
            ],
            "success_rate": success_rate,
        }

    @staticmethod
    def my_summary(actor: Any) -> dict[str, Any]:
        """
        Totals over the caller's complaints, matched the same way as
        ``GET /complaints/my/``.
        """
        from complaints.models import ComplaintStatus, ComplaintType
        from complaints.services import ComplaintQueryService

        rows = (
            ComplaintQueryService.identity_queryset(actor)
            .values("complaint_type")
            .annotate(
                total=Count("id"),
                investigating=Count("id", filter=Q(status=ComplaintStatus.INVESTIGATING)),
                resolved=Count("id", filter=Q(status=ComplaintStatus.RESOLVED)),
            )
            .order_by()
        )

        by_type = {
            _type_key(value): {"total": 0, "investigating": 0, "resolved": 0}
            for value in ComplaintType.values
        }
        totals = {"total": 0, "investigating": 0, "resolved": 0}
        for row in rows:
            bucket = by_type[_type_key(row["complaint_type"])]
            for key in totals:
                bucket[key] = row[key]
                totals[key] += row[key]

        return {**totals, "by_type": by_type}


# ════════════════════════════════════════════════════════════════════
#  Notification Inbox Service
# ════════════════════════════════════════════════════════════════════

class NotificationInboxService:
    """
    Read side of ``Notification``: a user only ever sees their own rows.
    Rows are created by ``core.domain.notifications.NotificationService``.
    """

    #: Page size when the client sends no ``limit``.
    DEFAULT_LIMIT: int = 20

    @staticmethod
    def list_for_user(user: Any, filters: dict[str, Any]) -> dict[str, Any]:
        qs = Notification.objects.filter(recipient=user)
        if filters.get("unread_only"):
            qs = qs.filter(is_read=False)

        page_qs, pagination = _paginate(
            qs.select_related("complaint").order_by("-created_at", "-id"),
            filters.get("page") or 1,
            filters.get("limit") or NotificationInboxService.DEFAULT_LIMIT,
        )
        return {
            "notifications": list(page_qs),
            "unread_count": Notification.objects.filter(recipient=user, is_read=False).count(),
            "pagination": pagination,
        }

    @staticmethod
    def mark_read(user: Any, notification_id: int) -> Notification:
        """
        Raises:
            NotFound: unknown id, or a notification of another user.
        """
        notification = Notification.objects.filter(pk=notification_id, recipient=user).first()
        if notification is None:
            raise NotFound("Notification not found.")
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read", "updated_at"])
        return notification

    @staticmethod
    def mark_all_read(user: Any) -> int:
        updated = Notification.objects.filter(recipient=user, is_read=False).update(
            is_read=True,
            updated_at=timezone.now(),
        )
        logger.info("Marked %d notification(s) read for user=%s", updated, user.pk)
        return updated
