"""
Smoke tests — verify that Django boots, URL routing resolves, and
the core domain modules behave as documented.

Most tests here need no database; the few that do are marked with
``@pytest.mark.django_db``.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from django.db import IntegrityError
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure every app's named URLs reverse under ``/api/v1/``."""

    EXPECTED_URLS = [
        # (url_name, kwargs, expected_path)
        ("accounts:register", {}, "/api/v1/auth/register/"),
        ("accounts:login", {}, "/api/v1/auth/login/"),
        ("complaint-list", {}, "/api/v1/complaints/"),
        ("complaint-my", {}, "/api/v1/complaints/my/"),
        ("complaint-update-status", {"complaint_id": 7}, "/api/v1/complaints/7/update/"),
        ("complaint-assign", {"complaint_id": 7}, "/api/v1/complaints/7/assign/"),
        (
            "complaint-detail",
            {"protocol_number": "DENUNCIA-20250101-0001"},
            "/api/v1/complaints/DENUNCIA-20250101-0001/",
        ),
        ("evidence:complaint-evidence", {"complaint_id": 7}, "/api/v1/evidence/complaints/7/evidence/"),
        ("evidence:evidence-detail", {"evidence_id": 3}, "/api/v1/evidence/3/"),
        ("core:search-missing-persons", {}, "/api/v1/search/missing-persons/"),
        ("core:search-cases", {}, "/api/v1/search/cases/"),
        ("core:stats-dashboard", {}, "/api/v1/stats/dashboard/"),
        ("core:notification-read-all", {}, "/api/v1/notifications/read-all/"),
        ("health", {}, "/health/"),
    ]

    @pytest.mark.parametrize("url_name,kwargs,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, kwargs: dict, expected_path: str):
        assert reverse(url_name, kwargs=kwargs) == expected_path

    @pytest.mark.parametrize("url_name,kwargs,expected_path", EXPECTED_URLS)
    def test_path_resolves_to_view(self, url_name: str, kwargs: dict, expected_path: str):
        match = resolve(expected_path)
        assert match.func is not None

    def test_my_is_not_taken_for_a_protocol_number(self):
        assert resolve("/api/v1/complaints/my/").url_name == "complaint-my"


# ════════════════════════════════════════════════════════════════════
#  Exception Behaviour Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptions:
    """Unit tests for domain exception classes."""

    def test_domain_error_message(self):
        from core.domain.exceptions import DomainError
        err = DomainError("test message")
        assert str(err) == "test message"
        assert err.code == "VALIDATION"

    def test_codes_follow_the_hierarchy(self):
        from core.domain.exceptions import (
            Conflict,
            DomainError,
            InvalidReference,
            NotFound,
            PermissionDenied,
            PersistenceError,
        )
        codes = {
            cls: cls().code
            for cls in (Conflict, InvalidReference, NotFound, PermissionDenied, PersistenceError)
        }
        assert all(issubclass(cls, DomainError) for cls in codes)
        assert sorted(codes.values()) == [
            "DUPLICATE", "FORBIDDEN", "NOT_FOUND", "PERSISTENCE", "REFERENCE",
        ]

    def test_unique_violation_becomes_conflict(self):
        from core.domain.exceptions import Conflict
        from core.domain.transactions import translate_integrity_error

        exc = IntegrityError("UNIQUE constraint failed: complaints_complaint.protocol_number")
        assert isinstance(translate_integrity_error(exc), Conflict)

    def test_sqlstate_wins_over_message(self):
        from core.domain.exceptions import InvalidReference
        from core.domain.transactions import translate_integrity_error

        exc = IntegrityError("insert or update violates constraint")
        exc.__cause__ = MagicMock(sqlstate="23503")
        assert isinstance(translate_integrity_error(exc), InvalidReference)

    def test_unclassified_violation_is_persistence_error(self):
        from core.domain.exceptions import PersistenceError
        from core.domain.transactions import translate_integrity_error

        exc = IntegrityError("CHECK constraint failed")
        assert type(translate_integrity_error(exc)) is PersistenceError


# ════════════════════════════════════════════════════════════════════
#  Access Helper Unit Tests
# ════════════════════════════════════════════════════════════════════

class TestAccessHelpers:
    """Unit tests for core.domain.access helpers."""

    def _user(self, role: str = "citizen", superuser: bool = False):
        user = MagicMock()
        user.is_authenticated = True
        user.is_superuser = superuser
        user.role = role
        return user

    def test_require_role_raises(self):
        from core.domain.access import require_role
        from core.domain.exceptions import PermissionDenied

        with pytest.raises(PermissionDenied):
            require_role(self._user("citizen"), "investigator", "admin")

    def test_require_role_passes(self):
        from core.domain.access import require_role
        require_role(self._user("investigator"), "investigator", "admin")

    def test_superuser_is_admin(self):
        from core.domain.access import get_user_role_name
        assert get_user_role_name(self._user("citizen", superuser=True)) == "admin"

    def test_anonymous_has_no_role(self):
        from django.contrib.auth.models import AnonymousUser
        from core.domain.access import get_user_role_name, has_role

        assert get_user_role_name(AnonymousUser()) is None
        assert get_user_role_name(None) is None
        assert not has_role(AnonymousUser(), "citizen")


# ════════════════════════════════════════════════════════════════════
#  Notification Rendering
# ════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestNotificationService:

    def test_empty_recipients_create_nothing(self):
        from core.domain.notifications import NotificationService
        assert NotificationService.create(recipients=[], event_type="status_changed") == []

    def test_unknown_event_falls_back_to_system_type(self, create_user):
        from core.domain.notifications import NotificationService

        user = create_user()
        [notification] = NotificationService.create(recipients=user, event_type="weekly_digest")
        assert notification.title == "Weekly Digest"
        assert notification.notification_type == "system"

    def test_notify_on_commit_outside_transaction_runs_immediately(self, create_user):
        from core.domain.notifications import NotificationService
        from core.models import Notification

        user = create_user()
        with pytest.MonkeyPatch.context() as mp:
            mp.setattr("django.db.transaction.on_commit", lambda func, *a, **kw: func())
            NotificationService.notify_on_commit(recipients=user, event_type="status_changed")
        assert Notification.objects.filter(recipient=user).count() == 1
