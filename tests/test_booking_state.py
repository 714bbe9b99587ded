import pytest

from app.core.exceptions import AlreadyCancelled, AuthorizationError, InvalidTransition
from app.domain.booking_state import (
    BookingActor,
    BookingStatus,
    assert_booking_transition,
    can_delete,
    is_terminal,
)


class TestAdminTransitions:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (BookingStatus.PENDING, BookingStatus.CONFIRMED),
            (BookingStatus.PENDING, BookingStatus.CANCELLED),
            (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
            (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
        ],
    )
    def test_allowed(self, current, target):
        assert assert_booking_transition(current, target) is target

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (BookingStatus.PENDING, BookingStatus.COMPLETED),
            (BookingStatus.PENDING, BookingStatus.PENDING),
            (BookingStatus.CONFIRMED, BookingStatus.PENDING),
            (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
            (BookingStatus.COMPLETED, BookingStatus.CONFIRMED),
            (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
        ],
    )
    def test_rejected(self, current, target):
        with pytest.raises(InvalidTransition):
            assert_booking_transition(current, target)

    def test_cancelling_twice_reports_already_cancelled(self):
        with pytest.raises(AlreadyCancelled):
            assert_booking_transition(BookingStatus.CANCELLED, BookingStatus.CANCELLED)

    def test_accepts_plain_strings(self):
        assert assert_booking_transition("pending", "confirmed") is BookingStatus.CONFIRMED


class TestOwnerTransitions:
    def test_owner_may_cancel_pending(self):
        result = assert_booking_transition(
            BookingStatus.PENDING, BookingStatus.CANCELLED, BookingActor.OWNER
        )
        assert result is BookingStatus.CANCELLED

    def test_owner_may_cancel_confirmed(self):
        result = assert_booking_transition(
            BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingActor.OWNER
        )
        assert result is BookingStatus.CANCELLED

    def test_owner_cannot_confirm(self):
        with pytest.raises(AuthorizationError):
            assert_booking_transition(
                BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingActor.OWNER
            )

    def test_owner_cannot_cancel_completed(self):
        with pytest.raises(InvalidTransition):
            assert_booking_transition(
                BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingActor.OWNER
            )


def test_terminal_states():
    assert is_terminal(BookingStatus.CANCELLED)
    assert is_terminal(BookingStatus.COMPLETED)
    assert not is_terminal(BookingStatus.PENDING)
    assert not is_terminal(BookingStatus.CONFIRMED)


def test_only_pending_and_cancelled_are_deletable():
    assert can_delete("pending")
    assert can_delete("cancelled")
    assert not can_delete("confirmed")
    assert not can_delete("completed")
