"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here — all domain
rules are delegated to ``services.py``.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from core.constants import BI_NUMBER_REGEX, PHONE_REGEX

from .services import AuthenticationService

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class RegisterRequestSerializer(serializers.Serializer):
    """
    Validates new-citizen registration data.

    Required fields: email, password, full_name, bi_number.
    Optional: phone (``+244`` followed by 9 digits).

    The ``password`` field is write-only and will be hashed by the
    service layer before persisting.  Uniqueness of email / BI number
    is checked by the service so it can answer with ``DUPLICATE``.
    """

    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=6,
        style={"input_type": "password"},
        help_text="Minimum 6 characters.",
    )
    full_name = serializers.CharField(min_length=2, max_length=255)
    phone = serializers.RegexField(
        PHONE_REGEX,
        required=False,
        allow_blank=True,
        error_messages={"invalid": "Phone number must be in the format +244XXXXXXXXX."},
    )
    bi_number = serializers.RegexField(
        BI_NUMBER_REGEX,
        error_messages={"invalid": "Invalid BI number format."},
    )

    def validate_email(self, value: str) -> str:
        return value.strip().lower()

    def validate_full_name(self, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError("Full name is required.")
        return value


class LoginRequestSerializer(serializers.Serializer):
    """
    Documents the login body for the OpenAPI schema.

    The client sends ``identifier`` (email or BI number) together with
    ``password``.
    """

    identifier = serializers.CharField(help_text="Email or BI number.")
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom SimpleJWT serializer that:

    1. Accepts ``identifier`` + ``password`` instead of
       ``username`` + ``password``.
    2. Resolves the user via the ``EmailOrBIAuthBackend``.
    3. Injects ``role`` and ``bi_number`` claims into the token payload.
    """

    username_field = "identifier"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop(self.username_field, None)
        self.fields["identifier"] = serializers.CharField(
            help_text="Email or BI number.",
        )

    @classmethod
    def get_token(cls, user) -> Any:
        token = super().get_token(user)
        AuthenticationService.add_claims(token, user)
        return token

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        """
        Authenticate using the custom ``EmailOrBIAuthBackend``.

        Returns a dict containing ``access`` and ``refresh``; the
        authenticated user is left on ``self.user`` for the view.
        """
        user = authenticate(
            request=self.context.get("request"),
            identifier=attrs.get("identifier"),
            password=attrs.get("password"),
        )

        if user is None:
            raise serializers.ValidationError(
                {"detail": "Invalid credentials."},
                code="authentication",
            )

        if not user.is_active:
            raise serializers.ValidationError(
                {"detail": "User account is disabled."},
                code="authentication",
            )

        refresh = self.get_token(user)
        self.user = user
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Public profile of a user, returned by register / login / me.
    """

    role = serializers.CharField(source="role_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "phone",
            "bi_number",
            "role",
            "is_active",
            "date_joined",
        ]
        read_only_fields = fields


class TokenResponseSerializer(serializers.Serializer):
    """
    Serializes the JWT token pair returned after register / login.
    """

    access = serializers.CharField(read_only=True)
    refresh = serializers.CharField(read_only=True)
    user = UserDetailSerializer(read_only=True)
