"""
Core app serializers.

Query-parameter validation for the search, statistics and notification
endpoints, plus the **response-only** serializers describing their
output.  Response serializers work on the plain dicts produced by
``core.services``.
"""

from __future__ import annotations

from rest_framework import serializers

from complaints.models import ComplaintStatus, Gender
from core.constants import (
    BI_NUMBER_REGEX,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_SEARCH_QUERY_LENGTH,
)

from .models import Notification


class _PageParamsSerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(
        min_value=1,
        max_value=MAX_PAGE_SIZE,
        required=False,
        default=DEFAULT_PAGE_SIZE,
    )


class PaginationSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    total = serializers.IntegerField()
    total_pages = serializers.IntegerField()


# ════════════════════════════════════════════════════════════════════
#  Search
# ════════════════════════════════════════════════════════════════════

class MissingPersonSearchSerializer(_PageParamsSerializer):
    """
    Query parameters for ``GET /api/v1/search/missing-persons/``.
    """

    q = serializers.CharField(
        required=False,
        trim_whitespace=True,
        min_length=MIN_SEARCH_QUERY_LENGTH,
        help_text="Matches name, last-seen location or complaint location.",
    )
    gender = serializers.ChoiceField(choices=Gender.choices, required=False)
    age_min = serializers.IntegerField(min_value=0, max_value=150, required=False)
    age_max = serializers.IntegerField(min_value=0, max_value=150, required=False)
    province = serializers.CharField(required=False, trim_whitespace=True)
    status = serializers.ChoiceField(choices=ComplaintStatus.choices, required=False)

    def validate(self, attrs):
        age_min, age_max = attrs.get("age_min"), attrs.get("age_max")
        if age_min is not None and age_max is not None and age_min > age_max:
            raise serializers.ValidationError({"age_max": "Must be greater than or equal to age_min."})
        return attrs


class CaseSearchSerializer(serializers.Serializer):
    """Query parameters for ``GET /api/v1/search/cases/``."""

    bi_number = serializers.RegexField(
        regex=BI_NUMBER_REGEX,
        error_messages={"invalid": "Invalid BI format."},
    )


class MissingPersonSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    protocol_number = serializers.CharField()
    full_name = serializers.CharField()
    age = serializers.IntegerField(allow_null=True)
    gender = serializers.CharField(allow_null=True)
    last_seen_location = serializers.CharField()
    last_seen_date = serializers.DateField(allow_null=True)
    status = serializers.CharField()
    photo_url = serializers.CharField(allow_null=True)
    description = serializers.CharField()


class MissingPersonSearchResponseSerializer(serializers.Serializer):
    persons = MissingPersonSerializer(many=True)
    pagination = PaginationSerializer()


class PersonInfoSerializer(serializers.Serializer):
    name = serializers.CharField()
    brief_description = serializers.CharField()


class CaseResultSerializer(serializers.Serializer):
    """
    One complaint found by BI number.

    ``relationship`` is ``family_member`` for a missing-person complaint
    that names the reporter's relationship, ``reporter`` otherwise.
    """

    id = serializers.IntegerField()
    protocol_number = serializers.CharField()
    complaint_type = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
    relationship = serializers.CharField()
    person_info = PersonInfoSerializer()


class CaseSearchResponseSerializer(serializers.Serializer):
    cases = CaseResultSerializer(many=True)


# ════════════════════════════════════════════════════════════════════
#  Statistics
# ════════════════════════════════════════════════════════════════════

class DailyActivitySerializer(serializers.Serializer):
    date = serializers.DateField()
    complaints = serializers.IntegerField()


class DashboardStatsSerializer(serializers.Serializer):
    """
    Example::

        {
            "total_complaints": 12,
            "by_type": {"missing_person": 3, "common_crime": 5, ...},
            "by_status": {"submitted": 4, "investigating": 2, ...},
            "recent_activity": [{"date": "2025-01-31", "complaints": 2}],
            "success_rate": 66.7
        }
    """

    total_complaints = serializers.IntegerField()
    by_type = serializers.DictField(child=serializers.IntegerField())
    by_status = serializers.DictField(child=serializers.IntegerField())
    recent_activity = DailyActivitySerializer(many=True)
    success_rate = serializers.FloatField()


class TypeSummarySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    investigating = serializers.IntegerField()
    resolved = serializers.IntegerField()


class MySummarySerializer(TypeSummarySerializer):
    by_type = serializers.DictField(child=TypeSummarySerializer())


# ════════════════════════════════════════════════════════════════════
#  Notifications
# ════════════════════════════════════════════════════════════════════

class NotificationFilterSerializer(_PageParamsSerializer):
    unread_only = serializers.BooleanField(required=False, default=False)
    limit = serializers.IntegerField(min_value=1, max_value=MAX_PAGE_SIZE, required=False, default=20)


class NotificationSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source="notification_type", read_only=True)
    complaint_protocol = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = ["id", "title", "message", "type", "is_read", "created_at", "complaint_protocol"]
        read_only_fields = fields

    def get_complaint_protocol(self, obj: Notification) -> str | None:
        return obj.complaint.protocol_number if obj.complaint_id else None


class NotificationListSerializer(serializers.Serializer):
    notifications = NotificationSerializer(many=True)
    unread_count = serializers.IntegerField()
    pagination = PaginationSerializer()


# ════════════════════════════════════════════════════════════════════
#  Health
# ════════════════════════════════════════════════════════════════════

class HealthSerializer(serializers.Serializer):
    status = serializers.CharField()
    service = serializers.CharField()
    version = serializers.CharField()
    timestamp = serializers.DateTimeField()
