"""
Unit tests for the debounced booking id lookup.

FakeTimer stands in for threading.Timer so tests decide when the debounce
period elapses.
"""

from __future__ import annotations

import threading
from typing import Callable
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from lettings_admin.errors import BookingDateNotFound
from lettings_admin.schemas.assignment import AssignmentForm, AssignmentPrefill
from lettings_admin.services.booking_lookup import BookingLookupSession


class FakeTimer:
    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.function()


class TimerRecorder:
    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer


def prefill_for(booking_id: str) -> AssignmentPrefill:
    return AssignmentPrefill(
        booking_date_id=booking_id,
        start_date="2024-06-01",
        end_date="2024-06-05",
        postcode="LS2 7HY",
        contractor_name="Dan Price",
        contractor_email="dan@buildco.example",
        team_size=4,
    )


@pytest.fixture
def walk_up_form() -> AssignmentForm:
    return AssignmentForm(
        property_id="P1",
        property_name="Mill House",
        postcode="LS1 4AP",
        landlord_name="Mary Shaw",
        landlord_contact="07700 900001",
    )


@pytest.fixture
def timers() -> TimerRecorder:
    return TimerRecorder()


@pytest.mark.unit
def test_clearing_before_debounce_issues_no_lookup(
    walk_up_form: AssignmentForm, timers: TimerRecorder
) -> None:
    lookup = MagicMock(side_effect=prefill_for)
    session = BookingLookupSession(None, walk_up_form, timer_factory=timers, lookup=lookup)

    session.on_booking_id_input("D")
    session.on_booking_id_input("D1")
    session.on_booking_id_input("")

    for timer in timers.timers:
        timer.fire()

    lookup.assert_not_called()
    assert all(timer.cancelled for timer in timers.timers)
    assert session.form.booking_date_id == ""
    assert session.form.postcode == ""


@pytest.mark.unit
def test_only_last_keystroke_is_looked_up(walk_up_form: AssignmentForm, timers: TimerRecorder) -> None:
    lookup = MagicMock(side_effect=prefill_for)
    session = BookingLookupSession(None, walk_up_form, timer_factory=timers, lookup=lookup)

    session.on_booking_id_input("D")
    session.on_booking_id_input("D1 ")
    for timer in timers.timers:
        timer.fire()

    lookup.assert_called_once_with("D1")
    assert timers.timers[0].interval == 0.5
    assert session.form.booking_date_id == "D1"
    assert session.form.contractor_name == "Dan Price"
    assert session.form.postcode == "LS2 7HY"
    assert session.form.property_name == "Mill House"
    assert session.form.landlord_name == "Mary Shaw"
    assert session.is_loading is False


@pytest.mark.unit
def test_result_arriving_after_clear_is_discarded(walk_up_form: AssignmentForm, timers: TimerRecorder) -> None:
    """The lookup is already running when the input is cleared; its result must not land."""
    session: BookingLookupSession

    def slow_lookup(booking_id: str) -> AssignmentPrefill:
        session.on_booking_id_input("")
        return prefill_for(booking_id)

    session = BookingLookupSession(None, walk_up_form, timer_factory=timers, lookup=slow_lookup)

    session.on_booking_id_input("D1")
    timers.timers[0].fire()

    assert session.form.booking_date_id == ""
    assert session.form.contractor_name == ""
    assert session.form.team_size == 0


@pytest.mark.unit
def test_result_superseded_by_new_input_is_discarded(
    walk_up_form: AssignmentForm, timers: TimerRecorder
) -> None:
    session: BookingLookupSession

    def slow_lookup(booking_id: str) -> AssignmentPrefill:
        if booking_id == "D1":
            session.on_booking_id_input("D2")
        return prefill_for(booking_id)

    session = BookingLookupSession(None, walk_up_form, timer_factory=timers, lookup=slow_lookup)

    session.on_booking_id_input("D1")
    timers.timers[0].fire()
    assert session.form.booking_date_id == "D2"
    assert session.form.contractor_name == ""

    timers.timers[1].fire()
    assert session.form.booking_date_id == "D2"
    assert session.form.contractor_name == "Dan Price"


@pytest.mark.unit
def test_not_found_sets_error_message(walk_up_form: AssignmentForm, timers: TimerRecorder) -> None:
    lookup = MagicMock(side_effect=BookingDateNotFound("D404"))
    session = BookingLookupSession(None, walk_up_form, timer_factory=timers, lookup=lookup)

    session.on_booking_id_input("D404")
    timers.timers[0].fire()

    assert session.error_message == "Booking ID not found. Please check and try again."
    assert session.form.booking_date_id == "D404"

    session.on_booking_id_input("")
    assert session.error_message == ""


@pytest.mark.unit
def test_database_error_sets_generic_message(walk_up_form: AssignmentForm, timers: TimerRecorder) -> None:
    lookup = MagicMock(side_effect=OperationalError("SELECT", {}, Exception("down")))
    session = BookingLookupSession(None, walk_up_form, timer_factory=timers, lookup=lookup)

    session.on_booking_id_input("D1")
    timers.timers[0].fire()

    assert session.error_message == "Error fetching booking data. Please try again."


@pytest.mark.unit
def test_unexpected_error_sets_generic_message_and_stops_loading(
    walk_up_form: AssignmentForm, timers: TimerRecorder
) -> None:
    lookup = MagicMock(side_effect=ValueError("bad booking row"))
    session = BookingLookupSession(None, walk_up_form, timer_factory=timers, lookup=lookup)

    session.on_booking_id_input("D1")
    timers.timers[0].fire()

    assert session.is_loading is False
    assert session.error_message == "Error fetching booking data. Please try again."
    assert session.form.contractor_name == ""


@pytest.mark.unit
def test_existing_booking_never_looks_up(walk_up_form: AssignmentForm, timers: TimerRecorder) -> None:
    lookup = MagicMock()
    session = BookingLookupSession(
        None, walk_up_form, is_new_booking=False, timer_factory=timers, lookup=lookup
    )

    session.on_booking_id_input("D1")

    assert timers.timers == []
    assert session.form.booking_date_id == "D1"
    lookup.assert_not_called()


@pytest.mark.unit
def test_cancel_drops_pending_lookup(walk_up_form: AssignmentForm, timers: TimerRecorder) -> None:
    lookup = MagicMock(side_effect=prefill_for)
    session = BookingLookupSession(None, walk_up_form, timer_factory=timers, lookup=lookup)

    session.on_booking_id_input("D1")
    session.cancel()
    timers.timers[0].function()

    lookup.assert_not_called()


@pytest.mark.unit
def test_real_timer_fires_after_debounce(walk_up_form: AssignmentForm) -> None:
    done = threading.Event()

    def lookup(booking_id: str) -> AssignmentPrefill:
        done.set()
        return prefill_for(booking_id)

    session = BookingLookupSession(None, walk_up_form, debounce_seconds=0.01, lookup=lookup)
    session.on_booking_id_input("D1")

    assert done.wait(timeout=2)
