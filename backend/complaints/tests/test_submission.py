"""
Integration tests — complaint submission (POST /api/v1/complaints/).

Covers:
  1. One complaint of every type, each with exactly one detail row
     and one public ``submitted`` timeline entry
  2. Anonymity discards reporter identity whatever the client sent
  3. A bearer token links the complaint to the account
  4. Invalid input (type, type details, description, time format)
     is rejected with no rows written
  5. A failure after the base row rolls back the whole submission
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
from complaints.models import (
    CommonCrimeDetails,
    Complaint,
    ComplaintStatus,
    ComplaintType,
    ComplaintUpdate,
    CorruptionDetails,
    CyberCrimeDetails,
    DomesticViolenceDetails,
    MissingPersonDetails,
)
from complaints.services import INITIAL_UPDATE_DESCRIPTION

User = get_user_model()

_TYPE_DETAILS = {
    ComplaintType.MISSING_PERSON: (
        MissingPersonDetails,
        {"full_name": "João Manuel", "age": 14, "gender": "male", "last_seen_location": "Viana"},
    ),
    ComplaintType.COMMON_CRIME: (CommonCrimeDetails, {"crime_type": "roubo"}),
    ComplaintType.CORRUPTION: (
        CorruptionDetails,
        {"institution": "Conservatória", "estimated_amount": "150000.00"},
    ),
    ComplaintType.DOMESTIC_VIOLENCE: (
        DomesticViolenceDetails,
        {"victim_name": "Ana", "children_involved": True},
    ),
    ComplaintType.CYBER_CRIME: (
        CyberCrimeDetails,
        {"cyber_crime_type": "burla", "platform": "WhatsApp", "url": "https://exemplo.ao/x"},
    ),
}


def _payload(complaint_type=ComplaintType.COMMON_CRIME, **overrides) -> dict:
    data = {
        "complaint_type": complaint_type,
        "description": "Descrição detalhada do ocorrido no bairro.",
        "location": "Luanda, Maianga",
        "incident_date": "2025-02-01",
        "incident_time": "14:30",
        "type_details": dict(_TYPE_DETAILS[complaint_type][1]),
    }
    data.update(overrides)
    return data


class TestComplaintSubmission(TestCase):

    @classmethod
    def setUpTestData(cls) -> None:
        cls.citizen = User.objects.create_user(
            username="cidadao@test.ao",
            email="cidadao@test.ao",
            password="Segura!2024",
            full_name="Cidadão Teste",
            bi_number="111111111LA111",
            role=UserRole.CITIZEN,
        )

    def setUp(self) -> None:
        self.client = APIClient()
        self.url = reverse("complaint-list")

    def auth(self, user) -> None:
        token = AuthenticationService.generate_tokens(user)["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def submit(self, payload: dict, expected: int = status.HTTP_201_CREATED):
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, expected, msg=response.data)
        return response

    # ── Happy path ──────────────────────────────────────────────────

    def test_every_type_creates_base_detail_and_initial_update(self) -> None:
        for complaint_type, (detail_model, _) in _TYPE_DETAILS.items():
            with self.subTest(complaint_type=complaint_type):
                response = self.submit(_payload(complaint_type))
                self.assertEqual(response.data["message"], "Denúncia registrada com sucesso")
                self.assertEqual(response.data["status"], ComplaintStatus.SUBMITTED)

                complaint = Complaint.objects.get(pk=response.data["id"])
                self.assertEqual(complaint.complaint_type, complaint_type)
                self.assertEqual(detail_model.objects.filter(complaint=complaint).count(), 1)

                updates = list(complaint.updates.all())
                self.assertEqual(len(updates), 1)
                self.assertEqual(updates[0].status, ComplaintStatus.SUBMITTED)
                self.assertEqual(updates[0].description, INITIAL_UPDATE_DESCRIPTION)
                self.assertTrue(updates[0].is_public)
                self.assertIsNone(updates[0].updated_by)

    def test_protocol_numbers_increase_across_types(self) -> None:
        first = self.submit(_payload(ComplaintType.CORRUPTION)).data["protocol_number"]
        second = self.submit(_payload(ComplaintType.CYBER_CRIME)).data["protocol_number"]
        self.assertRegex(first, r"^DENUNCIA-\d{8}-0001$")
        self.assertRegex(second, r"^DENUNCIA-\d{8}-0002$")

    def test_empty_type_details_still_creates_detail_row(self) -> None:
        response = self.submit(_payload(ComplaintType.COMMON_CRIME, type_details={}))
        complaint = Complaint.objects.get(pk=response.data["id"])
        self.assertEqual(complaint.get_detail().crime_type, "")

    def test_corruption_currency_defaults_to_kwanza(self) -> None:
        response = self.submit(_payload(ComplaintType.CORRUPTION))
        detail = CorruptionDetails.objects.get(complaint_id=response.data["id"])
        self.assertEqual(detail.currency, "AOA")

    # ── Identity ────────────────────────────────────────────────────

    def test_anonymous_complaint_stores_no_identity(self) -> None:
        response = self.submit(
            _payload(
                is_anonymous=True,
                reporter_name="Alguém",
                reporter_contact="+244923000000",
                reporter_email="alguem@test.ao",
                reporter_bi="222222222LA222",
            )
        )
        complaint = Complaint.objects.get(pk=response.data["id"])
        self.assertTrue(complaint.is_anonymous)
        self.assertIsNone(complaint.reporter_name)
        self.assertIsNone(complaint.reporter_contact)
        self.assertIsNone(complaint.reporter_email)
        self.assertIsNone(complaint.reporter_bi)

    def test_identified_complaint_keeps_identity(self) -> None:
        response = self.submit(
            _payload(reporter_name="Maria", reporter_bi="222222222LA222")
        )
        complaint = Complaint.objects.get(pk=response.data["id"])
        self.assertFalse(complaint.is_anonymous)
        self.assertEqual(complaint.reporter_name, "Maria")
        self.assertEqual(complaint.reporter_bi, "222222222LA222")
        self.assertIsNone(complaint.reporter_user)

    def test_token_links_reporter_account(self) -> None:
        self.auth(self.citizen)
        response = self.submit(_payload())
        complaint = Complaint.objects.get(pk=response.data["id"])
        self.assertEqual(complaint.reporter_user, self.citizen)

    # ── Validation ──────────────────────────────────────────────────

    def test_unknown_type_rejected(self) -> None:
        payload = _payload()
        payload["complaint_type"] = "arson"
        response = self.submit(payload, expected=status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "VALIDATION")
        self.assertFalse(Complaint.objects.exists())

    def test_short_description_rejected(self) -> None:
        self.submit(_payload(description="curta"), expected=status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Complaint.objects.exists())

    def test_missing_person_requires_full_name(self) -> None:
        response = self.submit(
            _payload(ComplaintType.MISSING_PERSON, type_details={"age": 9}),
            expected=status.HTTP_400_BAD_REQUEST,
        )
        self.assertIn("type_details", response.data["detail"])
        self.assertFalse(Complaint.objects.exists())

    def test_invalid_detail_field_rejected(self) -> None:
        self.submit(
            _payload(ComplaintType.MISSING_PERSON, type_details={"full_name": "X", "gender": "robot"}),
            expected=status.HTTP_400_BAD_REQUEST,
        )
        self.assertFalse(MissingPersonDetails.objects.exists())

    def test_incident_time_must_be_hh_mm(self) -> None:
        self.submit(_payload(incident_time="2pm"), expected=status.HTTP_400_BAD_REQUEST)

    def test_malformed_reporter_bi_rejected(self) -> None:
        self.submit(_payload(reporter_bi="12345"), expected=status.HTTP_400_BAD_REQUEST)

    # ── Atomicity ───────────────────────────────────────────────────

    def test_failure_after_base_row_leaves_nothing(self) -> None:
        with mock.patch.object(
            ComplaintUpdate.objects,
            "create",
            side_effect=DatabaseError("disk full"),
        ):
            response = self.submit(_payload(), expected=status.HTTP_500_INTERNAL_SERVER_ERROR)

        self.assertEqual(response.data["code"], "PERSISTENCE")
        self.assertNotIn("disk full", str(response.data["detail"]))
        self.assertFalse(Complaint.objects.exists())
        self.assertFalse(CommonCrimeDetails.objects.exists())
