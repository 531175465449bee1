"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating test users.
  - ``auth_header`` fixture for authenticated requests (JWT).
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            user = create_user()
            # or with explicit fields:
            user = create_user(
                email="ana@example.ao",
                full_name="Ana Silva",
                bi_number="123456789LA042",
                role="investigator",
            )
    """
    from accounts.models import User, UserRole

    _counter = 0

    def _factory(
        *,
        email: str | None = None,
        password: str = "TestPass123!",
        full_name: str | None = None,
        bi_number: str | None = None,
        role: str = UserRole.CITIZEN,
        is_active: bool = True,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if email is None:
            email = f"user{_counter}@test.local"
        if full_name is None:
            full_name = f"Test User {_counter}"
        if bi_number is None:
            bi_number = f"{_counter:09d}LA{_counter % 1000:03d}"

        return User.objects.create_user(
            username=email,
            email=email,
            password=password,
            full_name=full_name,
            bi_number=bi_number,
            role=role,
            is_active=is_active,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Returns a helper that creates a user and an ``Authorization`` header
    dict with a valid JWT access token.

    Usage::

        def test_protected(auth_header, api_client):
            user, header = auth_header(role="admin")
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
    """
    from accounts.services import AuthenticationService

    def _make(**user_kwargs) -> tuple:
        user = create_user(**user_kwargs)
        tokens = AuthenticationService.generate_tokens(user)
        return user, {"Authorization": f"Bearer {tokens['access']}"}

    return _make
