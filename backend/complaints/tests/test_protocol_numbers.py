"""
Unit tests — protocol number generation and the submission retry.

Protocol numbers look like ``DENUNCIA-YYYYMMDD-NNNN`` and count from
0001 each calendar day across all complaint types.
"""

from __future__ import annotations

import datetime
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest import mock

import pytest
from django.db import connection, transaction
from django.utils import timezone

from complaints.models import Complaint, ComplaintType, ProtocolSequence
from complaints.services import ComplaintSubmissionService, ProtocolNumberService
from core.domain.exceptions import Conflict

DAY = datetime.date(2025, 3, 7)


def _submission(**overrides) -> dict:
    data = {
        "complaint_type": ComplaintType.COMMON_CRIME,
        "is_anonymous": True,
        "description": "Assalto à mão armada perto do mercado.",
        "location": "Luanda",
        "type_details": {"crime_type": "roubo"},
    }
    data.update(overrides)
    return data


def test_format_pads_sequence_to_four_digits():
    assert ProtocolNumberService.format(DAY, 1) == "DENUNCIA-20250307-0001"
    assert ProtocolNumberService.format(DAY, 42) == "DENUNCIA-20250307-0042"


def test_format_grows_past_four_digits():
    assert ProtocolNumberService.format(DAY, 12345) == "DENUNCIA-20250307-12345"


@pytest.mark.django_db
def test_numbers_are_sequential_within_a_day():
    first = ProtocolNumberService.next_protocol_number(DAY)
    second = ProtocolNumberService.next_protocol_number(DAY)
    assert first == "DENUNCIA-20250307-0001"
    assert second == "DENUNCIA-20250307-0002"
    assert ProtocolSequence.objects.get(day=DAY).last_value == 2


@pytest.mark.django_db
def test_sequence_restarts_each_day():
    ProtocolNumberService.next_protocol_number(DAY)
    ProtocolNumberService.next_protocol_number(DAY)
    next_day = DAY + datetime.timedelta(days=1)
    assert ProtocolNumberService.next_protocol_number(next_day) == "DENUNCIA-20250308-0001"


@pytest.mark.django_db
def test_counter_never_falls_behind_existing_complaints():
    Complaint.objects.create(
        protocol_number="DENUNCIA-20250307-0001",
        complaint_type=ComplaintType.CORRUPTION,
        description="Pedido de suborno na repartição.",
    )
    assert ProtocolNumberService.next_protocol_number(DAY) == "DENUNCIA-20250307-0002"


@pytest.mark.django_db
def test_submission_uses_todays_date():
    complaint = ComplaintSubmissionService.submit(_submission())
    today = timezone.localdate()
    assert complaint.protocol_number == ProtocolNumberService.format(today, 1)


@pytest.mark.django_db
def test_collision_is_retried_with_a_fresh_number():
    taken = ComplaintSubmissionService.submit(_submission()).protocol_number
    fresh = ProtocolNumberService.format(DAY, 99)

    with mock.patch.object(
        ProtocolNumberService,
        "next_protocol_number",
        side_effect=[taken, fresh],
    ) as generator:
        complaint = ComplaintSubmissionService.submit(_submission())

    assert generator.call_count == 2
    assert complaint.protocol_number == fresh
    assert Complaint.objects.count() == 2


@pytest.mark.django_db
def test_second_collision_is_reported_as_duplicate():
    taken = ComplaintSubmissionService.submit(_submission()).protocol_number

    with mock.patch.object(
        ProtocolNumberService,
        "next_protocol_number",
        side_effect=[taken, taken],
    ):
        with pytest.raises(Conflict) as excinfo:
            ComplaintSubmissionService.submit(_submission())

    assert excinfo.value.code == "DUPLICATE"
    assert Complaint.objects.count() == 1


# ── Highest issued suffix ────────────────────────────────────────────

def _existing(protocol_number: str) -> Complaint:
    return Complaint.objects.create(
        protocol_number=protocol_number,
        complaint_type=ComplaintType.COMMON_CRIME,
        description="Furto registado por outro canal.",
    )


@pytest.mark.django_db
def test_submission_skips_past_a_higher_existing_number():
    today = timezone.localdate()
    _existing(ProtocolNumberService.format(today, 2))

    complaint = ComplaintSubmissionService.submit(_submission())

    assert complaint.protocol_number == ProtocolNumberService.format(today, 3)


@pytest.mark.django_db
def test_gaps_in_the_day_do_not_reuse_numbers():
    _existing("DENUNCIA-20250307-0001")
    _existing("DENUNCIA-20250307-0005")
    assert ProtocolNumberService.next_protocol_number(DAY) == "DENUNCIA-20250307-0006"


@pytest.mark.django_db
def test_five_digit_suffix_counts_as_highest():
    _existing("DENUNCIA-20250307-9999")
    _existing("DENUNCIA-20250307-10000")
    assert ProtocolNumberService.highest_issued(DAY) == 10000
    assert ProtocolNumberService.next_protocol_number(DAY) == "DENUNCIA-20250307-10001"


@pytest.mark.django_db
def test_stale_counter_catches_up_with_issued_numbers():
    ProtocolSequence.objects.create(day=DAY, last_value=1)
    _existing("DENUNCIA-20250307-0007")
    assert ProtocolNumberService.next_protocol_number(DAY) == "DENUNCIA-20250307-0008"


@pytest.mark.django_db
def test_other_days_do_not_affect_the_sequence():
    _existing("DENUNCIA-20250306-0042")
    assert ProtocolNumberService.highest_issued(DAY) == 0


@pytest.mark.django_db
def test_retry_after_a_stale_read_gets_the_next_free_number():
    # Another writer committed 0001 after our first read of the day.
    today = timezone.localdate()
    _existing(ProtocolNumberService.format(today, 1))
    real_highest = ProtocolNumberService.highest_issued
    reads = []

    def first_read_is_stale(day):
        reads.append(day)
        return 0 if len(reads) == 1 else real_highest(day)

    with mock.patch.object(
        ProtocolNumberService, "highest_issued", side_effect=first_read_is_stale
    ):
        complaint = ComplaintSubmissionService.submit(_submission())

    assert len(reads) == 2
    assert complaint.protocol_number == ProtocolNumberService.format(today, 2)
    assert Complaint.objects.count() == 2


# ── Concurrent submissions ───────────────────────────────────────────

def _suffixes(numbers: list[str]) -> list[int]:
    prefixes = {number.rsplit("-", 1)[0] for number in numbers}
    assert len(prefixes) == 1
    return sorted(int(number.rsplit("-", 1)[1]) for number in numbers)


@pytest.mark.django_db
def test_interleaved_reservations_get_distinct_numbers():
    # Both submissions reserve before either inserts its complaint.
    with transaction.atomic():
        first = ProtocolNumberService.next_protocol_number(DAY)
        second = ProtocolNumberService.next_protocol_number(DAY)
        for number in (first, second):
            _existing(number)

    assert first != second
    assert _suffixes([first, second]) == [1, 2]


@pytest.mark.django_db
def test_same_instant_submissions_differ_only_in_suffix():
    with mock.patch("complaints.services.timezone.localdate", return_value=DAY):
        numbers = [
            ComplaintSubmissionService.submit(_submission()).protocol_number
            for _ in range(2)
        ]
    assert numbers == ["DENUNCIA-20250307-0001", "DENUNCIA-20250307-0002"]


@pytest.mark.skipif(
    not connection.features.has_select_for_update,
    reason="needs row-level locks (PostgreSQL)",
)
@pytest.mark.django_db(transaction=True)
def test_parallel_submissions_get_unique_numbers():
    workers = 6
    barrier = threading.Barrier(workers)

    def submit_one(_) -> str:
        try:
            barrier.wait(timeout=10)
            return ComplaintSubmissionService.submit(_submission()).protocol_number
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        numbers = list(pool.map(submit_one, range(workers)))

    assert len(set(numbers)) == workers
    assert _suffixes(numbers) == list(range(1, workers + 1))
    assert Complaint.objects.count() == workers
