"""
Complaints app serializers.

Contains all Request and Response serializers for the Complaints API.
Serializers handle field definitions, read/write constraints, and
field-level validation only.  **No business logic, transactions or
access checks live here** — those belong in ``services.py``.

Structure
---------
1. Filter / query-param serializers
2. Type-detail serializers (one per complaint type)
3. Write serializers (submission, status update, assignment)
4. Read serializers (composite view, summaries)
"""

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from core.constants import (
    BI_NUMBER_REGEX,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_COMPLAINT_DESCRIPTION_LENGTH,
    MIN_LOCATION_LENGTH,
    MIN_UPDATE_DESCRIPTION_LENGTH,
)

from .models import (
    CommonCrimeDetails,
    ComplaintStatus,
    ComplaintType,
    CorruptionDetails,
    CyberCrimeDetails,
    DomesticViolenceDetails,
    MissingPersonDetails,
)

_IDENTITY_FIELDS = ("reporter_name", "reporter_contact", "reporter_email", "reporter_bi")


# ═══════════════════════════════════════════════════════════════════
#  1. Filter / Query-Parameter Serializers
# ═══════════════════════════════════════════════════════════════════


class MyComplaintsFilterSerializer(serializers.Serializer):
    """
    Query parameters for ``GET /api/v1/complaints/my/``.

    ``status`` : one of ``ComplaintStatus``
    ``type``   : one of ``ComplaintType``
    ``page``   : 1-based page number
    ``limit``  : page size, 1..50 (default 10)
    """

    status = serializers.ChoiceField(choices=ComplaintStatus.choices, required=False)
    type = serializers.ChoiceField(choices=ComplaintType.choices, required=False)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(
        min_value=1,
        max_value=MAX_PAGE_SIZE,
        required=False,
        default=DEFAULT_PAGE_SIZE,
    )


# ═══════════════════════════════════════════════════════════════════
#  2. Type-Detail Serializers
# ═══════════════════════════════════════════════════════════════════


class MissingPersonDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = MissingPersonDetails
        exclude = ["complaint"]
        extra_kwargs = {"full_name": {"required": True, "allow_blank": False}}


class CommonCrimeDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommonCrimeDetails
        exclude = ["complaint"]


class CorruptionDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = CorruptionDetails
        exclude = ["complaint"]


class DomesticViolenceDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = DomesticViolenceDetails
        exclude = ["complaint"]


class CyberCrimeDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = CyberCrimeDetails
        exclude = ["complaint"]


# ═══════════════════════════════════════════════════════════════════
#  3. Write Serializers
# ═══════════════════════════════════════════════════════════════════


class ComplaintCreateSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/v1/complaints/``.

    ``type_details`` is validated by the detail serializer registered for
    ``complaint_type``; the cleaned dict replaces the raw one.  When
    ``is_anonymous`` is true every reporter identity field is discarded,
    whatever the client sent.
    """

    complaint_type = serializers.ChoiceField(choices=ComplaintType.choices)
    is_anonymous = serializers.BooleanField(required=False, default=False)
    incident_date = serializers.DateField(required=False, allow_null=True)
    incident_time = serializers.TimeField(
        required=False,
        allow_null=True,
        input_formats=["%H:%M"],
        help_text="HH:MM",
    )
    location = serializers.CharField(
        required=False,
        min_length=MIN_LOCATION_LENGTH,
        max_length=500,
    )
    description = serializers.CharField(min_length=MIN_COMPLAINT_DESCRIPTION_LENGTH)
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)

    reporter_name = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=255)
    reporter_contact = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=50)
    reporter_email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    reporter_bi = serializers.RegexField(
        BI_NUMBER_REGEX,
        required=False,
        allow_null=True,
        allow_blank=True,
        error_messages={"invalid": "Invalid BI number format."},
    )

    type_details = serializers.DictField(required=False, default=dict)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        from .registry import get_handler

        for name in _IDENTITY_FIELDS:
            if attrs.get("is_anonymous") or not attrs.get(name):
                attrs[name] = None

        handler = get_handler(attrs["complaint_type"])
        detail = handler.detail_serializer(data=attrs.get("type_details") or {})
        if not detail.is_valid():
            raise serializers.ValidationError({"type_details": detail.errors})
        attrs["type_details"] = dict(detail.validated_data)
        return attrs


class StatusUpdateSerializer(serializers.Serializer):
    """
    Request body for ``PUT /api/v1/complaints/{id}/update/``.
    """

    status = serializers.ChoiceField(choices=ComplaintStatus.choices)
    description = serializers.CharField(min_length=MIN_UPDATE_DESCRIPTION_LENGTH)
    is_public = serializers.BooleanField(required=False, default=True)


class AssignInvestigatorSerializer(serializers.Serializer):
    """
    Request body for ``PUT /api/v1/complaints/{id}/assign/``.
    """

    investigator_id = serializers.IntegerField(min_value=1)
    description = serializers.CharField(required=False, allow_blank=True, default="", max_length=2000)


# ═══════════════════════════════════════════════════════════════════
#  4. Read Serializers
# ═══════════════════════════════════════════════════════════════════


class ComplaintCreatedSerializer(serializers.Serializer):
    """Response of a successful submission."""

    id = serializers.IntegerField()
    protocol_number = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()


class StatusUpdateResultSerializer(serializers.Serializer):
    update_id = serializers.IntegerField(source="pk")
    complaint_id = serializers.IntegerField()
    status = serializers.CharField()
    is_public = serializers.BooleanField()
    created_at = serializers.DateTimeField()


class InvestigatorContactSerializer(serializers.Serializer):
    name = serializers.CharField()
    phone = serializers.CharField(allow_blank=True)
    email = serializers.EmailField()


class TimelineEntrySerializer(serializers.Serializer):
    date = serializers.DateTimeField()
    status = serializers.CharField()
    description = serializers.CharField()
    updated_by = serializers.CharField(allow_null=True)


class ComplaintCompositeSerializer(serializers.Serializer):
    """
    Public tracking view of a complaint, as assembled by
    ``ComplaintReadModelService.build_composite_view``.

    Never carries reporter identity fields.
    """

    id = serializers.IntegerField()
    protocol_number = serializers.CharField()
    complaint_type = serializers.CharField()
    status = serializers.CharField()
    incident_date = serializers.DateField(allow_null=True)
    incident_time = serializers.TimeField(allow_null=True, format="%H:%M")
    location = serializers.CharField(allow_blank=True)
    latitude = serializers.FloatField(allow_null=True)
    longitude = serializers.FloatField(allow_null=True)
    description = serializers.CharField()
    is_anonymous = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    investigator = InvestigatorContactSerializer(allow_null=True)
    updates = TimelineEntrySerializer(many=True)
    next_steps = serializers.ListField(child=serializers.CharField())
    type_details = serializers.DictField()


class ComplaintSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    protocol_number = serializers.CharField()
    complaint_type = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    display_name = serializers.CharField()
    brief_info = serializers.CharField()


class PaginationSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    total = serializers.IntegerField()
    total_pages = serializers.IntegerField()


class MyComplaintsResponseSerializer(serializers.Serializer):
    complaints = ComplaintSummarySerializer(many=True)
    pagination = PaginationSerializer()
