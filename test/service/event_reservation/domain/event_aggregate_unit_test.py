"""
Unit tests for the Event aggregate

Test Focus:
1. Creation rules, one reason per violated rule
2. Capacity bookkeeping: remaining = capacity - seats of active reservations
3. update_details is all-or-nothing and never drops capacity below reserved seats
4. A cancelled event refuses new reservations
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import pytest

from src.platform.exception.exceptions import (
    CapacityExceededError,
    DomainError,
    ErrorKind,
    NotFoundError,
)
from src.platform.types.entity_id import NIL_ID, new_entity_id
from src.service.event_reservation.domain.aggregate.event_aggregate import Event
from src.service.event_reservation.domain.enum.error_reason import ErrorReason
from src.service.event_reservation.domain.enum.event_category import EventCategory
from src.service.event_reservation.domain.value_object.location import Location


NOW = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
USER_ID = UUID('00000000-0000-0000-0000-000000000001')


@pytest.fixture
def details() -> dict[str, Any]:
    return {
        'title': 'Jazz Night',
        'description': 'An evening of live jazz.',
        'start_at': NOW + timedelta(days=1),
        'duration': timedelta(hours=2),
        'location': Location.create(city='Taipei', address_line='1 Music Road'),
        'capacity': 10,
        'category': EventCategory.MUSIC,
    }


@pytest.fixture
def event(details: dict[str, Any]) -> Event:
    return Event.create(**details, now=NOW)


@pytest.mark.unit
class TestCreateEvent:
    def test_new_event_has_full_capacity(self, event: Event) -> None:
        assert event.remaining_capacity == 10
        assert event.reserved_seats == 0
        assert event.reservations == ()
        assert event.is_cancelled is False
        assert event.version == 0
        assert event.end_at == NOW + timedelta(days=1, hours=2)

    def test_text_fields_are_trimmed(self, details: dict[str, Any]) -> None:
        event = Event.create(**(details | {'title': '  Jazz  ', 'description': ' d '}), now=NOW)

        assert event.title == 'Jazz'
        assert event.description == 'd'

    @pytest.mark.parametrize(
        'overrides,reason',
        [
            ({'title': '  '}, ErrorReason.TITLE_REQUIRED),
            ({'title': 'x' * 201}, ErrorReason.TITLE_TOO_LONG),
            ({'description': ''}, ErrorReason.DESCRIPTION_REQUIRED),
            ({'start_at': datetime(2030, 1, 2, 12, 0)}, ErrorReason.START_TIME_INVALID),
            ({'start_at': NOW - timedelta(minutes=6)}, ErrorReason.START_IN_PAST),
            ({'duration': timedelta(minutes=14)}, ErrorReason.DURATION_TOO_SHORT),
            ({'capacity': 0}, ErrorReason.CAPACITY_NOT_POSITIVE),
            ({'capacity': 10_001}, ErrorReason.CAPACITY_TOO_LARGE),
            ({'category': 'karaoke'}, ErrorReason.CATEGORY_INVALID),
        ],
    )
    def test_each_violation_has_its_own_reason(
        self, details: dict[str, Any], overrides: dict[str, Any], reason: ErrorReason
    ) -> None:
        with pytest.raises(DomainError) as exc_info:
            Event.create(**(details | overrides), now=NOW)

        assert exc_info.value.reason == reason
        assert exc_info.value.kind == ErrorKind.VALIDATION

    def test_start_within_grace_period_is_accepted(self, details: dict[str, Any]) -> None:
        event = Event.create(**(details | {'start_at': NOW - timedelta(minutes=4)}), now=NOW)

        assert event.start_at == NOW - timedelta(minutes=4)

    def test_boundary_values_are_accepted(self, details: dict[str, Any]) -> None:
        event = Event.create(
            **(
                details
                | {'title': 'x' * 200, 'duration': timedelta(minutes=15), 'capacity': 10_000}
            ),
            now=NOW,
        )

        assert event.capacity == 10_000


@pytest.mark.unit
class TestReserve:
    def test_reserve_reduces_remaining_capacity(self, event: Event) -> None:
        view = event.reserve(user_id=USER_ID, quantity=4, now=NOW)

        assert view.quantity == 4
        assert view.event_id == event.id
        assert view.user_id == USER_ID
        assert view.reserved_at == NOW
        assert view.is_cancelled is False
        assert event.remaining_capacity == 6
        assert event.reservations == (view,)

    def test_reserve_up_to_exact_capacity(self, event: Event) -> None:
        event.reserve(user_id=USER_ID, quantity=10, now=NOW)

        assert event.remaining_capacity == 0

    def test_reserve_beyond_capacity_fails(self, event: Event) -> None:
        event.reserve(user_id=USER_ID, quantity=8, now=NOW)

        with pytest.raises(CapacityExceededError) as exc_info:
            event.reserve(user_id=USER_ID, quantity=3, now=NOW)

        assert exc_info.value.kind == ErrorKind.CAPACITY_EXCEEDED
        assert exc_info.value.message == 'Not enough availability.'
        assert event.remaining_capacity == 2
        assert len(event.reservations) == 1

    def test_cancelled_event_refuses_reservations_even_with_seats_left(
        self, event: Event
    ) -> None:
        event.cancel()

        with pytest.raises(DomainError) as exc_info:
            event.reserve(user_id=USER_ID, quantity=1, now=NOW)

        assert exc_info.value.reason == ErrorReason.EVENT_CANCELLED
        assert event.remaining_capacity == 10

    @pytest.mark.parametrize('user_id', [None, NIL_ID])
    def test_missing_user_is_rejected(self, event: Event, user_id) -> None:
        with pytest.raises(DomainError) as exc_info:
            event.reserve(user_id=user_id, quantity=1, now=NOW)

        assert exc_info.value.reason == ErrorReason.INVALID_USER

    @pytest.mark.parametrize('quantity', [0, -1])
    def test_non_positive_quantity_is_rejected(self, event: Event, quantity: int) -> None:
        with pytest.raises(DomainError) as exc_info:
            event.reserve(user_id=USER_ID, quantity=quantity, now=NOW)

        assert exc_info.value.reason == ErrorReason.INVALID_QUANTITY

    def test_cancelled_check_comes_before_quantity_check(self, event: Event) -> None:
        event.cancel()

        with pytest.raises(DomainError) as exc_info:
            event.reserve(user_id=USER_ID, quantity=0, now=NOW)

        assert exc_info.value.reason == ErrorReason.EVENT_CANCELLED


@pytest.mark.unit
class TestCancelReservation:
    def test_cancel_frees_seats_for_new_reservations(self, event: Event) -> None:
        first = event.reserve(user_id=USER_ID, quantity=10, now=NOW)

        cancelled = event.cancel_reservation(reservation_id=first.id)
        again = event.reserve(user_id=USER_ID, quantity=10, now=NOW)

        assert cancelled.is_cancelled is True
        assert again.quantity == 10
        assert event.remaining_capacity == 0
        assert event.active_reservation_count == 1
        assert len(event.reservations) == 2

    def test_cancel_is_idempotent(self, event: Event) -> None:
        view = event.reserve(user_id=USER_ID, quantity=3, now=NOW)

        event.cancel_reservation(reservation_id=view.id)
        event.cancel_reservation(reservation_id=view.id)

        assert event.remaining_capacity == 10
        assert event.find_reservation(view.id).is_cancelled is True

    def test_unknown_reservation_is_not_found(self, event: Event) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            event.cancel_reservation(reservation_id=new_entity_id())

        assert exc_info.value.reason == ErrorReason.RESERVATION_NOT_FOUND

    def test_views_cannot_change_the_aggregate(self, event: Event) -> None:
        view = event.reserve(user_id=USER_ID, quantity=3, now=NOW)

        with pytest.raises(AttributeError):
            view.is_cancelled = True  # type: ignore[misc]

        assert event.remaining_capacity == 7


@pytest.mark.unit
class TestUpdateDetails:
    def test_capacity_below_reserved_seats_fails_and_changes_nothing(
        self, event: Event, details: dict[str, Any]
    ) -> None:
        """
        Given: capacity 10 with 4 seats reserved
        When: capacity is updated to 3
        Then: capacity error, and every field keeps its old value
        """
        event.reserve(user_id=USER_ID, quantity=4, now=NOW)

        with pytest.raises(DomainError) as exc_info:
            event.update_details(**(details | {'capacity': 3, 'title': 'New title'}), now=NOW)

        assert exc_info.value.reason == ErrorReason.CAPACITY_BELOW_RESERVED
        assert event.capacity == 10
        assert event.title == 'Jazz Night'
        assert event.remaining_capacity == 6

    def test_capacity_equal_to_reserved_seats_is_allowed(
        self, event: Event, details: dict[str, Any]
    ) -> None:
        event.reserve(user_id=USER_ID, quantity=4, now=NOW)

        event.update_details(**(details | {'capacity': 4}), now=NOW)

        assert event.remaining_capacity == 0

    def test_replaces_every_field(self, event: Event, details: dict[str, Any]) -> None:
        new_details = {
            'title': 'Rock Night',
            'description': 'Loud.',
            'start_at': NOW + timedelta(days=3),
            'duration': timedelta(hours=3),
            'location': Location.create(city='Tainan', address_line='2 Temple Road'),
            'capacity': 50,
            'category': EventCategory.ART,
        }

        event.update_details(**new_details, now=NOW)

        assert event.title == 'Rock Night'
        assert event.description == 'Loud.'
        assert event.start_at == NOW + timedelta(days=3)
        assert event.duration == timedelta(hours=3)
        assert str(event.location) == '2 Temple Road, Tainan'
        assert event.capacity == 50
        assert event.category == EventCategory.ART

    def test_identical_update_is_idempotent(self, event: Event, details: dict[str, Any]) -> None:
        event.update_details(**details, now=NOW)
        snapshot = (event.title, event.capacity, event.start_at, event.location)

        event.update_details(**details, now=NOW)

        assert (event.title, event.capacity, event.start_at, event.location) == snapshot

    def test_invalid_field_changes_nothing(self, event: Event, details: dict[str, Any]) -> None:
        with pytest.raises(DomainError):
            event.update_details(**(details | {'capacity': 20, 'title': ''}), now=NOW)

        assert event.capacity == 10


@pytest.mark.unit
class TestCancelEvent:
    def test_cancel_is_idempotent_and_keeps_reservations(self, event: Event) -> None:
        view = event.reserve(user_id=USER_ID, quantity=2, now=NOW)

        event.cancel()
        event.cancel()

        assert event.is_cancelled is True
        assert event.find_reservation(view.id).is_cancelled is False
        assert event.remaining_capacity == 8
