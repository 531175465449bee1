"""
Integration tests — status workflow and investigator assignment.

Endpoints under test:
    PUT /api/v1/complaints/{id}/update/   (named URL: complaint-update-status)
    PUT /api/v1/complaints/{id}/assign/   (named URL: complaint-assign)

Covers:
  1. Staff update status; the timeline gains one entry and the
     complaint status always equals the newest entry's status
  2. Citizens get 403, anonymous callers 401, unknown ids 404
  3. Bad status / short description rejected with nothing written
  4. A crash between the two writes leaves the complaint untouched
  5. Public updates notify the linked reporter after commit; private
     ones do not
  6. Admin-only assignment with a private timeline entry
"""

from __future__ import annotations

from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole
from accounts.services import AuthenticationService
from complaints.models import Complaint, ComplaintStatus, ComplaintType, ComplaintUpdate
from complaints.services import (
    ASSIGNMENT_UPDATE_DESCRIPTION,
    ComplaintSubmissionService,
    ComplaintWorkflowService,
)
from core.domain.exceptions import DomainError, PermissionDenied
from core.models import Notification

User = get_user_model()


def _make_user(email: str, role: str, bi_number: str, **extra) -> User:
    return User.objects.create_user(
        username=email,
        email=email,
        password="Segura!2024",
        full_name=email.split("@")[0].title(),
        bi_number=bi_number,
        role=role,
        **extra,
    )


class WorkflowTestBase(TestCase):

    @classmethod
    def setUpTestData(cls) -> None:
        cls.citizen = _make_user("reporter@test.ao", UserRole.CITIZEN, "100000001LA001")
        cls.investigator = _make_user(
            "investigador@test.ao",
            UserRole.INVESTIGATOR,
            "100000002LA002",
            phone="+244923111222",
        )
        cls.admin = _make_user("admin@test.ao", UserRole.ADMIN, "100000003LA003")

    def setUp(self) -> None:
        self.client = APIClient()
        self.complaint = ComplaintSubmissionService.submit(
            {
                "complaint_type": ComplaintType.COMMON_CRIME,
                "description": "Roubo de telemóvel na paragem.",
                "location": "Luanda",
                "type_details": {"crime_type": "roubo"},
            },
            actor=self.citizen,
        )

    def auth(self, user) -> None:
        token = AuthenticationService.generate_tokens(user)["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def update_url(self, complaint_id: int | None = None) -> str:
        return reverse(
            "complaint-update-status",
            kwargs={"complaint_id": complaint_id or self.complaint.pk},
        )

    def assign_url(self, complaint_id: int | None = None) -> str:
        return reverse(
            "complaint-assign",
            kwargs={"complaint_id": complaint_id or self.complaint.pk},
        )


class TestStatusUpdate(WorkflowTestBase):

    def put_status(self, payload: dict, expected: int = status.HTTP_200_OK, url: str | None = None):
        response = self.client.put(url or self.update_url(), payload, format="json")
        self.assertEqual(response.status_code, expected, msg=response.data)
        return response

    def test_investigator_updates_status(self) -> None:
        self.auth(self.investigator)
        response = self.put_status(
            {"status": ComplaintStatus.INVESTIGATING, "description": "Caso em investigação."}
        )
        self.assertEqual(response.data["status"], ComplaintStatus.INVESTIGATING)
        self.assertTrue(response.data["is_public"])
        self.assertEqual(response.data["complaint_id"], self.complaint.pk)

        self.complaint.refresh_from_db()
        self.assertEqual(self.complaint.status, ComplaintStatus.INVESTIGATING)
        self.assertEqual(self.complaint.updates.count(), 2)
        latest = self.complaint.updates.order_by("-created_at", "-id").first()
        self.assertEqual(latest.pk, response.data["update_id"])
        self.assertEqual(latest.updated_by, self.investigator)

    def test_status_tracks_newest_entry_over_several_updates(self) -> None:
        self.auth(self.admin)
        for new_status in (
            ComplaintStatus.RECEIVED,
            ComplaintStatus.RESOLVED,
            ComplaintStatus.REVIEWING,
        ):
            self.put_status({"status": new_status, "description": f"Mudança para {new_status}"})

        self.complaint.refresh_from_db()
        latest = self.complaint.updates.order_by("-created_at", "-id").first()
        self.assertEqual(self.complaint.status, ComplaintStatus.REVIEWING)
        self.assertEqual(latest.status, self.complaint.status)
        self.assertEqual(self.complaint.updates.count(), 4)

    def test_citizen_is_forbidden(self) -> None:
        self.auth(self.citizen)
        response = self.put_status(
            {"status": ComplaintStatus.RESOLVED, "description": "Tentativa indevida."},
            expected=status.HTTP_403_FORBIDDEN,
        )
        self.assertEqual(response.data["code"], "FORBIDDEN")
        self.complaint.refresh_from_db()
        self.assertEqual(self.complaint.status, ComplaintStatus.SUBMITTED)

    def test_anonymous_caller_is_unauthorized(self) -> None:
        self.put_status(
            {"status": ComplaintStatus.RESOLVED, "description": "Sem credenciais."},
            expected=status.HTTP_401_UNAUTHORIZED,
        )

    def test_unknown_complaint_is_not_found(self) -> None:
        self.auth(self.investigator)
        response = self.put_status(
            {"status": ComplaintStatus.RECEIVED, "description": "Não existe."},
            expected=status.HTTP_404_NOT_FOUND,
            url=self.update_url(999999),
        )
        self.assertEqual(response.data["code"], "NOT_FOUND")

    def test_invalid_status_rejected(self) -> None:
        self.auth(self.investigator)
        self.put_status(
            {"status": "closed", "description": "Estado inválido."},
            expected=status.HTTP_400_BAD_REQUEST,
        )
        self.assertEqual(self.complaint.updates.count(), 1)

    def test_short_description_rejected(self) -> None:
        self.auth(self.investigator)
        self.put_status(
            {"status": ComplaintStatus.RECEIVED, "description": "ok"},
            expected=status.HTTP_400_BAD_REQUEST,
        )
        self.assertEqual(self.complaint.updates.count(), 1)

    def test_crash_between_writes_keeps_previous_state(self) -> None:
        self.auth(self.investigator)
        with mock.patch.object(
            ComplaintUpdate.objects,
            "create",
            side_effect=DatabaseError("connection lost"),
        ):
            response = self.put_status(
                {"status": ComplaintStatus.RESOLVED, "description": "Caso resolvido."},
                expected=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        self.assertEqual(response.data["code"], "PERSISTENCE")
        self.complaint.refresh_from_db()
        self.assertEqual(self.complaint.status, ComplaintStatus.SUBMITTED)
        self.assertEqual(self.complaint.updates.count(), 1)

    def test_public_update_notifies_reporter_after_commit(self) -> None:
        self.auth(self.investigator)
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            self.put_status(
                {"status": ComplaintStatus.INVESTIGATING, "description": "Equipa designada."}
            )

        self.assertEqual(len(callbacks), 1)
        notification = Notification.objects.get(recipient=self.citizen)
        self.assertEqual(notification.complaint, self.complaint)
        self.assertEqual(notification.notification_type, "update")
        self.assertIn(self.complaint.protocol_number, notification.message)
        self.assertIn("Equipa designada.", notification.message)

    def test_private_update_sends_no_notification(self) -> None:
        self.auth(self.investigator)
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            self.put_status(
                {
                    "status": ComplaintStatus.REVIEWING,
                    "description": "Nota interna da equipa.",
                    "is_public": False,
                }
            )

        self.assertEqual(callbacks, [])
        self.assertFalse(Notification.objects.exists())

    def test_rolled_back_update_sends_no_notification(self) -> None:
        self.auth(self.investigator)
        with mock.patch.object(
            ComplaintUpdate.objects,
            "create",
            side_effect=DatabaseError("connection lost"),
        ), self.captureOnCommitCallbacks(execute=True):
            self.put_status(
                {"status": ComplaintStatus.RESOLVED, "description": "Caso resolvido."},
                expected=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        self.assertFalse(Notification.objects.exists())


class TestWorkflowServiceGuards(WorkflowTestBase):
    """Service-level checks, without the HTTP layer."""

    def test_role_checked_before_input(self) -> None:
        with self.assertRaises(PermissionDenied):
            ComplaintWorkflowService.apply_status_update(
                self.complaint.pk, self.citizen, "bogus", ""
            )

    def test_description_is_trimmed_before_length_check(self) -> None:
        with self.assertRaises(DomainError):
            ComplaintWorkflowService.apply_status_update(
                self.complaint.pk, self.investigator, ComplaintStatus.RECEIVED, "   ab   "
            )

    def test_complaint_type_is_immutable(self) -> None:
        complaint = Complaint.objects.get(pk=self.complaint.pk)
        complaint.complaint_type = ComplaintType.CORRUPTION
        with self.assertRaises(DomainError):
            complaint.save()

    def test_timeline_entries_are_append_only(self) -> None:
        entry = self.complaint.updates.first()
        entry.description = "Reescrito"
        with self.assertRaises(DomainError):
            entry.save()
        with self.assertRaises(DomainError):
            entry.delete()


class TestAssignInvestigator(WorkflowTestBase):

    def test_admin_assigns_investigator(self) -> None:
        self.auth(self.admin)
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.put(
                self.assign_url(),
                {"investigator_id": self.investigator.pk},
                format="json",
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data["investigator_id"], self.investigator.pk)

        self.complaint.refresh_from_db()
        self.assertEqual(self.complaint.investigator, self.investigator)
        self.assertEqual(self.complaint.status, ComplaintStatus.SUBMITTED)

        entry = self.complaint.updates.order_by("-created_at", "-id").first()
        self.assertFalse(entry.is_public)
        self.assertEqual(entry.status, ComplaintStatus.SUBMITTED)
        self.assertEqual(entry.description, ASSIGNMENT_UPDATE_DESCRIPTION)

        notification = Notification.objects.get(recipient=self.investigator)
        self.assertEqual(notification.notification_type, "assignment")
        self.assertFalse(Notification.objects.filter(recipient=self.citizen).exists())

    def test_investigator_cannot_assign(self) -> None:
        self.auth(self.investigator)
        response = self.client.put(
            self.assign_url(),
            {"investigator_id": self.investigator.pk},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_citizen_cannot_be_assigned(self) -> None:
        self.auth(self.admin)
        response = self.client.put(
            self.assign_url(),
            {"investigator_id": self.citizen.pk},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.complaint.refresh_from_db()
        self.assertIsNone(self.complaint.investigator)

    def test_assignment_of_unknown_complaint_is_not_found(self) -> None:
        self.auth(self.admin)
        response = self.client.put(
            self.assign_url(999999),
            {"investigator_id": self.investigator.pk},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
