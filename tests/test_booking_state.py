"""Unit tests for the booking state machine and role resolution."""

import pytest

from src.domain.entities import Booking, Car, role_of
from src.domain.enums import TERMINAL_STATES, BookingState, UserBookingRole
from src.domain.exceptions import InvalidStateTransitionError
from src.domain.transitions import (
    allowed_transitions,
    can_transition,
    validate_transition,
)
from tests.helpers import OWNER_ID, RENTER_ID, STRANGER_ID, hours_from_now

OWNER = UserBookingRole.OWNER
RENTER = UserBookingRole.RENTER


class TestBookingStateMachine:
    # ── Valid transitions ─────────────────────────────────────────

    def test_owner_confirms_pending(self):
        validate_transition(BookingState.PENDING, BookingState.CONFIRMED, OWNER, 1)

    def test_owner_cancels_pending(self):
        validate_transition(BookingState.PENDING, BookingState.CANCELED, OWNER, 1)

    def test_renter_picks_up_confirmed(self):
        validate_transition(BookingState.CONFIRMED, BookingState.PICKED_UP, RENTER, 1)

    def test_renter_returns_picked_up(self):
        validate_transition(BookingState.PICKED_UP, BookingState.RETURNED, RENTER, 1)

    @pytest.mark.parametrize("state", list(BookingState))
    @pytest.mark.parametrize("role", list(UserBookingRole))
    def test_same_state_always_allowed(self, state, role):
        validate_transition(state, state, role, 1)

    # ── Invalid transitions ───────────────────────────────────────

    def test_renter_cannot_confirm(self):
        with pytest.raises(InvalidStateTransitionError):
            validate_transition(BookingState.PENDING, BookingState.CONFIRMED, RENTER, 1)

    def test_renter_cannot_cancel(self):
        with pytest.raises(InvalidStateTransitionError):
            validate_transition(BookingState.PENDING, BookingState.CANCELED, RENTER, 1)

    def test_owner_cannot_pick_up(self):
        with pytest.raises(InvalidStateTransitionError):
            validate_transition(BookingState.CONFIRMED, BookingState.PICKED_UP, OWNER, 1)

    def test_pending_to_returned_fails(self):
        with pytest.raises(InvalidStateTransitionError):
            validate_transition(BookingState.PENDING, BookingState.RETURNED, RENTER, 1)

    def test_confirmed_cannot_be_canceled(self):
        with pytest.raises(InvalidStateTransitionError):
            validate_transition(BookingState.CONFIRMED, BookingState.CANCELED, OWNER, 1)

    @pytest.mark.parametrize("terminal", sorted(TERMINAL_STATES))
    def test_terminal_states_are_final(self, terminal):
        for target in BookingState:
            if target is terminal:
                continue
            assert not can_transition(terminal, target, OWNER)
            assert not can_transition(terminal, target, RENTER)

    def test_error_carries_context(self):
        with pytest.raises(InvalidStateTransitionError) as info:
            validate_transition(BookingState.RETURNED, BookingState.PENDING, OWNER, 42)
        err = info.value
        assert err.booking_id == 42
        assert err.from_state is BookingState.RETURNED
        assert err.to_state is BookingState.PENDING
        assert "RETURNED" in str(err) and "PENDING" in str(err)

    def test_string_states_are_accepted(self):
        validate_transition("PENDING", "CONFIRMED", OWNER, 1)

    # ── Reachable states per role ─────────────────────────────────

    def test_allowed_transitions(self):
        assert allowed_transitions(BookingState.PENDING, OWNER) == {
            BookingState.CONFIRMED,
            BookingState.CANCELED,
        }
        assert allowed_transitions(BookingState.PENDING, RENTER) == set()
        assert allowed_transitions(BookingState.CONFIRMED, RENTER) == {
            BookingState.PICKED_UP
        }
        assert allowed_transitions(BookingState.RETURNED, RENTER) == set()


class TestRoleOf:
    def _booking(self, renter_id=RENTER_ID):
        return Booking(
            id=1,
            car_id=1,
            renter_id=renter_id,
            start_date=hours_from_now(24),
            end_date=hours_from_now(48),
        )

    def test_owner(self):
        car = Car(id=1, owner_id=OWNER_ID)
        assert role_of(car, self._booking(), OWNER_ID) is UserBookingRole.OWNER

    def test_renter(self):
        car = Car(id=1, owner_id=OWNER_ID)
        assert role_of(car, self._booking(), RENTER_ID) is UserBookingRole.RENTER

    def test_stranger(self):
        car = Car(id=1, owner_id=OWNER_ID)
        assert role_of(car, self._booking(), STRANGER_ID) is UserBookingRole.NONE

    def test_owner_renting_own_car_is_owner(self):
        car = Car(id=1, owner_id=OWNER_ID)
        booking = self._booking(renter_id=OWNER_ID)
        assert role_of(car, booking, OWNER_ID) is UserBookingRole.OWNER
