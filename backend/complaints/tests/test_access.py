"""
Unit tests — ``ComplaintAccessService`` decision table.

Built on unsaved model instances: the guard only compares ids, roles
and BI numbers, so no database is needed.
"""

from __future__ import annotations

import pytest
from django.contrib.auth.models import AnonymousUser

from accounts.models import User, UserRole
from complaints.models import Complaint
from complaints.services import ComplaintAccessService
from core.domain.exceptions import PermissionDenied
from evidence.models import Evidence


def _user(pk: int, role: str = UserRole.CITIZEN, bi_number: str | None = None, **extra) -> User:
    return User(pk=pk, email=f"u{pk}@test.ao", role=role, bi_number=bi_number, **extra)


def _complaint(**overrides) -> Complaint:
    data = {
        "protocol_number": "DENUNCIA-20250101-0001",
        "complaint_type": "common-crime",
        "description": "Descrição suficiente.",
    }
    data.update(overrides)
    return Complaint(**data)


REPORTER = _user(1, bi_number="123456789LA001")
INVESTIGATOR = _user(2, role=UserRole.INVESTIGATOR)
OTHER_INVESTIGATOR = _user(3, role=UserRole.INVESTIGATOR)
ADMIN = _user(4, role=UserRole.ADMIN)
STRANGER = _user(5, bi_number="987654321LA002")
SUPERUSER = _user(6, is_superuser=True)


# ── Read ─────────────────────────────────────────────────────────────

def test_anonymous_caller_may_read_any_complaint():
    assert ComplaintAccessService.can_read(AnonymousUser(), _complaint())
    assert ComplaintAccessService.can_read(None, _complaint())


@pytest.mark.parametrize(
    "actor,expected",
    [
        (REPORTER, True),
        (INVESTIGATOR, True),
        (OTHER_INVESTIGATOR, False),
        (ADMIN, True),
        (SUPERUSER, True),
        (STRANGER, False),
    ],
)
def test_read_rules_for_authenticated_actors(actor, expected):
    complaint = _complaint(reporter_user_id=REPORTER.pk, investigator_id=INVESTIGATOR.pk)
    assert ComplaintAccessService.can_read(actor, complaint) is expected


def test_matching_bi_grants_read():
    complaint = _complaint(reporter_bi=STRANGER.bi_number)
    assert ComplaintAccessService.can_read(STRANGER, complaint)


def test_anonymous_complaint_never_matches_by_bi():
    complaint = _complaint(is_anonymous=True, reporter_bi=None)
    actor_without_bi = _user(7, bi_number=None)
    assert not ComplaintAccessService.can_read(actor_without_bi, complaint)
    assert not ComplaintAccessService.can_read(STRANGER, complaint)


def test_ensure_can_read_raises_forbidden():
    with pytest.raises(PermissionDenied) as excinfo:
        ComplaintAccessService.ensure_can_read(STRANGER, _complaint())
    assert excinfo.value.code == "FORBIDDEN"


# ── Write ────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "actor,expected",
    [
        (AnonymousUser(), False),
        (REPORTER, False),
        (INVESTIGATOR, True),
        (ADMIN, True),
        (SUPERUSER, True),
    ],
)
def test_status_write_requires_staff(actor, expected):
    assert ComplaintAccessService.can_write_status(actor) is expected


# ── Evidence deletion ────────────────────────────────────────────────

@pytest.mark.parametrize(
    "actor,expected",
    [
        (AnonymousUser(), False),
        (REPORTER, True),
        (STRANGER, False),
        (OTHER_INVESTIGATOR, True),
        (ADMIN, True),
    ],
)
def test_evidence_delete_rules(actor, expected):
    complaint = _complaint(reporter_user_id=REPORTER.pk)
    evidence = Evidence(uploaded_by_id=None)
    assert ComplaintAccessService.can_delete_evidence(actor, evidence, complaint) is expected


def test_uploader_may_delete_own_evidence():
    complaint = _complaint()
    evidence = Evidence(uploaded_by_id=STRANGER.pk)
    assert ComplaintAccessService.can_delete_evidence(STRANGER, evidence, complaint)
