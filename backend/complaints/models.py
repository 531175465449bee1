"""
Complaints app models.

Covers the complaint lifecycle — from submission (base record, one
type-specific detail record and the initial timeline entry, all born in
one transaction), through status updates by investigators, to
resolution or archival.  Complaints are never deleted; archival is a
status.
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from core.constants import DEFAULT_CURRENCY
from core.domain.exceptions import DomainError
from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class ComplaintType(models.TextChoices):
    """Closed set of complaint categories.  Each has its own detail model."""

    MISSING_PERSON = "missing-person", "Missing Person"
    COMMON_CRIME = "common-crime", "Common Crime"
    CORRUPTION = "corruption", "Corruption"
    DOMESTIC_VIOLENCE = "domestic-violence", "Domestic Violence"
    CYBER_CRIME = "cyber-crime", "Cyber Crime"


class ComplaintStatus(models.TextChoices):
    """
    submitted → received → reviewing → investigating → {resolved, archived}

    Transitions are not constrained: staff may set any of these values.
    """

    SUBMITTED = "submitted", "Submitted"
    RECEIVED = "received", "Received"
    REVIEWING = "reviewing", "Reviewing"
    INVESTIGATING = "investigating", "Investigating"
    RESOLVED = "resolved", "Resolved"
    ARCHIVED = "archived", "Archived"


class Gender(models.TextChoices):
    MALE = "male", "Male"
    FEMALE = "female", "Female"
    OTHER = "other", "Other"
    PREFER_NOT_SAY = "prefer_not_say", "Prefer not to say"


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Complaint(TimeStampedModel):
    """
    Base record of a citizen complaint.

    * ``protocol_number`` is the human-facing identifier
      (``DENUNCIA-YYYYMMDD-NNNN``) used for anonymous tracking.
    * When ``is_anonymous`` is true every reporter identity field is
      null; a database constraint enforces it.
    * ``complaint_type`` cannot change once the row exists.
    """

    protocol_number = models.CharField(
        max_length=32,
        unique=True,
        verbose_name="Protocol Number",
    )
    complaint_type = models.CharField(
        max_length=30,
        choices=ComplaintType.choices,
        db_index=True,
        verbose_name="Complaint Type",
    )
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        default=ComplaintStatus.SUBMITTED,
        db_index=True,
        verbose_name="Current Status",
    )
    is_anonymous = models.BooleanField(default=False, verbose_name="Anonymous")

    # ── Reporter identity ───────────────────────────────────────────
    reporter_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reported_complaints",
        verbose_name="Reporter Account",
    )
    reporter_name = models.CharField(max_length=255, null=True, blank=True, verbose_name="Reporter Name")
    reporter_contact = models.CharField(max_length=50, null=True, blank=True, verbose_name="Reporter Contact")
    reporter_email = models.EmailField(null=True, blank=True, verbose_name="Reporter Email")
    reporter_bi = models.CharField(
        max_length=14,
        null=True,
        blank=True,
        db_index=True,
        verbose_name="Reporter BI Number",
    )

    # ── When / where the incident occurred ──────────────────────────
    incident_date = models.DateField(null=True, blank=True, verbose_name="Incident Date")
    incident_time = models.TimeField(null=True, blank=True, verbose_name="Incident Time")
    location = models.CharField(max_length=500, blank=True, default="", verbose_name="Location")
    latitude = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)],
    )
    longitude = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)],
    )
    description = models.TextField(verbose_name="Description")

    investigator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_complaints",
        verbose_name="Assigned Investigator",
    )

    class Meta:
        verbose_name = "Complaint"
        verbose_name_plural = "Complaints"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(is_anonymous=False)
                    | Q(
                        reporter_name__isnull=True,
                        reporter_contact__isnull=True,
                        reporter_email__isnull=True,
                        reporter_bi__isnull=True,
                    )
                ),
                name="complaint_anonymous_has_no_identity",
            ),
        ]

    def __str__(self):
        return f"{self.protocol_number} [{self.get_complaint_type_display()}]"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_complaint_type = instance.__dict__.get("complaint_type")
        return instance

    def save(self, *args, **kwargs):
        loaded = getattr(self, "_loaded_complaint_type", None)
        if not self._state.adding and loaded is not None and loaded != self.complaint_type:
            raise DomainError("complaint_type cannot be changed after creation.")
        super().save(*args, **kwargs)
        self._loaded_complaint_type = self.complaint_type

    def get_detail(self):
        """Return the type-detail row matching ``complaint_type``."""
        from .registry import get_handler

        return getattr(self, get_handler(self.complaint_type).accessor)


class ComplaintUpdate(TimeStampedModel):
    """
    Append-only timeline entry.

    Every complaint has at least one (the initial ``submitted`` entry).
    The complaint's ``status`` always equals the ``status`` of its most
    recent entry.  Private entries (``is_public=False``) never appear in
    the public tracking view.
    """

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="updates",
        verbose_name="Complaint",
    )
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        verbose_name="Status",
    )
    description = models.TextField(verbose_name="Description")
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="complaint_updates",
        verbose_name="Updated By",
    )
    is_public = models.BooleanField(default=True, verbose_name="Public")

    class Meta:
        verbose_name = "Complaint Update"
        verbose_name_plural = "Complaint Updates"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.complaint_id} → {self.status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise DomainError("Complaint updates are append-only.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise DomainError("Complaint updates are append-only.")


class ProtocolSequence(models.Model):
    """
    Per-day protocol counter.  The row for a day is locked with
    ``select_for_update`` while the next number is issued.
    """

    day = models.DateField(unique=True, verbose_name="Day")
    last_value = models.PositiveIntegerField(default=0, verbose_name="Last Issued Value")

    class Meta:
        verbose_name = "Protocol Sequence"
        verbose_name_plural = "Protocol Sequences"

    def __str__(self):
        return f"{self.day:%Y%m%d}: {self.last_value}"


# ────────────────────────────────────────────────────────────────────
# Type-detail models (exactly one per complaint)
# ────────────────────────────────────────────────────────────────────

class ComplaintDetailBase(models.Model):
    complaint = models.OneToOneField(
        Complaint,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="%(class)s",
        verbose_name="Complaint",
    )

    class Meta:
        abstract = True


class MissingPersonDetails(ComplaintDetailBase):
    full_name = models.CharField(max_length=255, verbose_name="Full Name")
    age = models.PositiveSmallIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=20, choices=Gender.choices, blank=True, default="")
    physical_description = models.TextField(blank=True, default="")
    last_seen_location = models.CharField(max_length=500, blank=True, default="")
    last_seen_date = models.DateField(null=True, blank=True)
    last_seen_time = models.TimeField(null=True, blank=True)
    clothing_description = models.TextField(blank=True, default="")
    last_seen_with = models.TextField(blank=True, default="")
    medical_conditions = models.TextField(blank=True, default="")
    frequent_places = models.TextField(blank=True, default="")
    relationship_to_reporter = models.CharField(max_length=100, blank=True, default="")

    class Meta:
        verbose_name = "Missing Person Details"
        verbose_name_plural = "Missing Person Details"


class CommonCrimeDetails(ComplaintDetailBase):
    crime_type = models.CharField(max_length=100, blank=True, default="")
    other_crime_type = models.CharField(max_length=255, blank=True, default="")
    brief_description = models.TextField(blank=True, default="")
    people_involved = models.TextField(blank=True, default="")

    class Meta:
        verbose_name = "Common Crime Details"
        verbose_name_plural = "Common Crime Details"


class CorruptionDetails(ComplaintDetailBase):
    corruption_type = models.CharField(max_length=100, blank=True, default="")
    institution = models.CharField(max_length=255, blank=True, default="")
    official_name = models.CharField(max_length=255, blank=True, default="")
    estimated_amount = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    how_known = models.TextField(blank=True, default="")

    class Meta:
        verbose_name = "Corruption Details"
        verbose_name_plural = "Corruption Details"


class DomesticViolenceDetails(ComplaintDetailBase):
    victim_name = models.CharField(max_length=255, blank=True, default="")
    victim_age = models.PositiveSmallIntegerField(null=True, blank=True)
    victim_gender = models.CharField(max_length=20, choices=Gender.choices, blank=True, default="")
    relationship_with_aggressor = models.CharField(max_length=100, blank=True, default="")
    violence_type = models.CharField(max_length=100, blank=True, default="")
    frequency = models.CharField(max_length=100, blank=True, default="")
    children_involved = models.BooleanField(null=True, blank=True)
    needs_medical_help = models.BooleanField(null=True, blank=True)

    class Meta:
        verbose_name = "Domestic Violence Details"
        verbose_name_plural = "Domestic Violence Details"


class CyberCrimeDetails(ComplaintDetailBase):
    cyber_crime_type = models.CharField(max_length=100, blank=True, default="")
    platform = models.CharField(max_length=100, blank=True, default="")
    url = models.CharField(max_length=2048, blank=True, default="")
    contact_method = models.CharField(max_length=100, blank=True, default="")
    suspect_info = models.TextField(blank=True, default="")
    estimated_loss = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)

    class Meta:
        verbose_name = "Cyber Crime Details"
        verbose_name_plural = "Cyber Crime Details"
