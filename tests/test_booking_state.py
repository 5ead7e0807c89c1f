"""Unit tests for booking entity state transitions."""

from datetime import date

import pytest

from wanderer.domain.entities import Booking, check_trip_dates
from wanderer.domain.enums import BookingStatus
from wanderer.domain.errors import (
    ForbiddenError,
    InvalidTransitionError,
    ValidationError,
)

TOURIST, GUIDE, OUTSIDER = 1, 2, 3


def _booking(status=BookingStatus.PENDING) -> Booking:
    return Booking(id=5, tourist_id=TOURIST, guide_id=GUIDE, status=status)


class TestBookingStateMachine:
    def test_initial_status_is_pending(self):
        assert Booking().status == BookingStatus.PENDING

    def test_guide_confirms(self):
        b = _booking()
        b.transition_to(BookingStatus.CONFIRMED, GUIDE)
        assert b.status == BookingStatus.CONFIRMED
        assert b.resolved_by == GUIDE
        assert b.updated_at is not None

    @pytest.mark.parametrize("actor", [TOURIST, GUIDE])
    def test_either_side_cancels_pending(self, actor):
        b = _booking()
        b.transition_to(BookingStatus.CANCELLED, actor)
        assert b.status == BookingStatus.CANCELLED
        assert b.resolved_by == actor

    @pytest.mark.parametrize("actor", [TOURIST, GUIDE])
    def test_either_side_cancels_confirmed(self, actor):
        b = _booking(BookingStatus.CONFIRMED)
        b.transition_to(BookingStatus.CANCELLED, actor)
        assert b.status == BookingStatus.CANCELLED

    def test_tourist_cannot_confirm(self):
        b = _booking()
        with pytest.raises(ForbiddenError):
            b.transition_to(BookingStatus.CONFIRMED, TOURIST)
        assert b.status == BookingStatus.PENDING
        assert b.resolved_by is None

    def test_outsider_is_forbidden_before_anything_else(self):
        with pytest.raises(ForbiddenError):
            _booking().transition_to(BookingStatus.CONFIRMED, OUTSIDER)
        with pytest.raises(ForbiddenError):
            _booking(BookingStatus.CANCELLED).transition_to(BookingStatus.CONFIRMED, OUTSIDER)

    def test_confirmed_cannot_be_confirmed_again(self):
        with pytest.raises(InvalidTransitionError):
            _booking(BookingStatus.CONFIRMED).transition_to(BookingStatus.CONFIRMED, GUIDE)

    @pytest.mark.parametrize(
        "target, actor",
        [
            (BookingStatus.CONFIRMED, GUIDE),
            (BookingStatus.CANCELLED, TOURIST),
            (BookingStatus.PENDING, GUIDE),
        ],
    )
    def test_cancelled_is_final(self, target, actor):
        b = _booking(BookingStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            b.transition_to(target, actor)
        assert b.status == BookingStatus.CANCELLED

    def test_wrong_state_reported_before_wrong_role(self):
        # tourist confirming an already cancelled booking
        with pytest.raises(InvalidTransitionError):
            _booking(BookingStatus.CANCELLED).transition_to(BookingStatus.CONFIRMED, TOURIST)


class TestTripDates:
    def test_single_day_trip(self):
        check_trip_dates(date(2026, 3, 1), date(2026, 3, 1))

    def test_end_before_start(self):
        with pytest.raises(ValidationError):
            check_trip_dates(date(2026, 3, 2), date(2026, 3, 1))
