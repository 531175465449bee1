"""
Accounts app models.

Defines the custom ``User`` model that extends Django's ``AbstractUser``
with the identity data citizens register with (email, full name,
Angolan phone number, BI number) and a fixed ``role``.
"""

from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models

from core.constants import BI_NUMBER_REGEX, PHONE_REGEX


class UserRole(models.TextChoices):
    CITIZEN = "citizen", "Citizen"
    INVESTIGATOR = "investigator", "Investigator"
    ADMIN = "admin", "Administrator"


bi_number_validator = RegexValidator(
    regex=BI_NUMBER_REGEX,
    message="BI number must be 9 digits, 2 capital letters and 3 digits (e.g. 123456789LA012).",
)
phone_validator = RegexValidator(
    regex=PHONE_REGEX,
    message="Phone number must be in the format +244XXXXXXXXX.",
)


class User(AbstractUser):
    """
    Custom user model for the complaint intake system.

    Citizens register with email, password, full name and BI number
    (the national identity document).  Login is supported via either
    the email or the BI number together with the password.

    ``role`` drives every access decision:

    * ``citizen``       — submits and follows their own complaints.
    * ``investigator``  — updates the status of complaints.
    * ``admin``         — everything above, plus investigator assignment.

    Superusers are treated as ``admin`` regardless of the stored role.
    """

    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    full_name = models.CharField(
        max_length=255,
        verbose_name="Full Name",
    )
    phone = models.CharField(
        max_length=13,
        blank=True,
        default="",
        validators=[phone_validator],
        verbose_name="Phone Number",
    )
    bi_number = models.CharField(
        max_length=14,
        unique=True,
        null=True,
        blank=True,
        validators=[bi_number_validator],
        verbose_name="BI Number",
        help_text="National identity document number.",
    )
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.CITIZEN,
        db_index=True,
        verbose_name="Role",
    )

    # Fields required when creating a superuser via CLI
    REQUIRED_FIELDS = ["email", "full_name"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.email} ({self.role_name})"

    @property
    def role_name(self) -> str:
        if self.is_superuser:
            return UserRole.ADMIN
        return self.role

    @property
    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.username
