"""Tests for overlap detection between services at a church location."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.common import ServiceStatus
from app.models.service import ChurchService, NO_OVERLAP_CONSTRAINT
from app.services.service_conflicts import is_overlap_violation, is_overlapping, overlaps

UTC = timezone.utc
NINE = datetime(2024, 1, 7, 9, 0, tzinfo=UTC)
TEN = datetime(2024, 1, 7, 10, 0, tzinfo=UTC)


def hours(n: float) -> timedelta:
    return timedelta(hours=n)


class TestOverlaps:
    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ((NINE, TEN), (NINE + hours(0.5), TEN + hours(0.5)), True),
            ((NINE, TEN), (TEN, TEN + hours(1)), False),
            ((NINE, TEN), (NINE - hours(1), NINE), False),
            ((NINE, TEN + hours(2)), (NINE + hours(1), TEN), True),
            ((NINE, TEN), (TEN + hours(1), TEN + hours(2)), False),
        ],
    )
    def test_half_open_and_symmetric(self, a, b, expected):
        assert overlaps(*a, *b) is expected
        assert overlaps(*b, *a) is expected

    def test_interval_overlaps_itself(self):
        assert overlaps(NINE, TEN, NINE, TEN)


@pytest.fixture
def booked(session):
    service = ChurchService(
        church_code="acme",
        title="Sunday Service",
        status=ServiceStatus.PENDING_PUBLISH,
        datetime_start=NINE,
        datetime_end=TEN,
        location_code="hall",
        location_name="Hall",
    )
    session.add(service)
    session.commit()
    return service


class TestIsOverlapping:
    def test_clash_at_same_location(self, session, booked):
        assert is_overlapping(session, "acme", "hall", NINE + hours(0.5), TEN + hours(0.5))

    def test_touching_intervals_do_not_clash(self, session, booked):
        assert not is_overlapping(session, "acme", "hall", TEN, TEN + hours(1))
        assert not is_overlapping(session, "acme", "hall", NINE - hours(1), NINE)

    def test_other_location_or_church_does_not_clash(self, session, booked):
        assert not is_overlapping(session, "acme", "chapel", NINE, TEN)
        assert not is_overlapping(session, "other", "hall", NINE, TEN)

    def test_published_services_count_too(self, session, booked):
        booked.status = ServiceStatus.PUBLISHED
        session.commit()
        assert is_overlapping(session, "acme", "hall", NINE, TEN)

    def test_excluding_the_service_itself(self, session, booked):
        assert is_overlapping(session, "acme", "hall", NINE, TEN)
        assert not is_overlapping(session, "acme", "hall", NINE, TEN, exclude_service_id=booked.id)


class DriverError(Exception):
    def __init__(self, message, sqlstate=None):
        super().__init__(message)
        self.sqlstate = sqlstate


class TestIsOverlapViolation:
    def test_exclusion_sqlstate(self):
        error = IntegrityError("INSERT", {}, DriverError("conflicting key value", sqlstate="23P01"))
        assert is_overlap_violation(error)

    def test_constraint_name_without_sqlstate(self):
        error = IntegrityError("INSERT", {}, DriverError(f'violates exclusion constraint "{NO_OVERLAP_CONSTRAINT}"'))
        assert is_overlap_violation(error)

    def test_unrelated_integrity_error(self):
        error = IntegrityError("INSERT", {}, DriverError("UNIQUE constraint failed: churches.code", sqlstate="23505"))
        assert not is_overlap_violation(error)
