"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service method, and return the
result wrapped in a DRF ``Response``.

Architecture
------------
- ``UserRegistrationService``  — citizen self-registration.
- ``AuthenticationService``    — JWT issuance with identity claims.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework_simplejwt.tokens import RefreshToken

from core.domain.exceptions import Conflict

from .models import UserRole

logger = logging.getLogger(__name__)

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Registration Service
# ═══════════════════════════════════════════════════════════════════


class UserRegistrationService:
    """
    Encapsulates the citizen registration flow.
    """

    @staticmethod
    def register_user(validated_data: dict[str, Any]) -> User:
        """
        Create a new user with the ``citizen`` role.

        Parameters
        ----------
        validated_data : dict
            Cleaned data from ``RegisterRequestSerializer`` containing
            ``email``, ``password``, ``full_name``, ``bi_number`` and
            optionally ``phone``.

        Returns
        -------
        User
            The newly created (and saved) ``User`` instance.  Its
            ``username`` mirrors the email address.

        Raises
        ------
        core.domain.exceptions.Conflict
            If the email or BI number is already registered.
        """
        data = dict(validated_data)
        password = data.pop("password")
        email = data["email"]
        bi_number = data.get("bi_number") or None

        # Pre-check uniqueness so errors name the offending field
        conflicts = []
        if User.objects.filter(email__iexact=email).exists():
            conflicts.append("email")
        if bi_number and User.objects.filter(bi_number=bi_number).exists():
            conflicts.append("bi_number")
        if conflicts:
            raise Conflict(
                f"The following field(s) already exist: {', '.join(conflicts)}."
            )

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=email,
                    email=email,
                    password=password,
                    full_name=data["full_name"],
                    phone=data.get("phone") or "",
                    bi_number=bi_number,
                    role=UserRole.CITIZEN,
                )
        except IntegrityError:
            raise Conflict("A user with this email or BI number already exists.")

        logger.info("Registered citizen account id=%s", user.pk)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """
    JWT token generation.  Credential checking itself lives in
    ``accounts.backends.EmailOrBIAuthBackend``.
    """

    @staticmethod
    def add_claims(token: RefreshToken, user: User) -> RefreshToken:
        """
        Add identity claims so API consumers can decode role info
        without a separate call.
        """
        token["role"] = user.role_name
        token["bi_number"] = user.bi_number
        return token

    @staticmethod
    def generate_tokens(user: User) -> dict[str, str]:
        """
        Issue a JWT access/refresh token pair for the given user.

        Returns
        -------
        dict
            ``{"access": "<token>", "refresh": "<token>"}``.
        """
        refresh = AuthenticationService.add_claims(RefreshToken.for_user(user), user)
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }
