"""
Debounced booking id lookup for walk-up assignment forms.

Staff type a booking date id into a walk-up form; once typing pauses for
LOOKUP_DEBOUNCE_SECONDS the id is looked up and the booking fields of the form
are filled in. Every keystroke starts a new generation: a pending timer is
cancelled and any lookup already running for an older generation is ignored
when it completes.
"""

import threading
from typing import Any, Callable, Optional

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from lettings_admin.config import LOOKUP_DEBOUNCE_SECONDS
from lettings_admin.errors import LookupNotFound
from lettings_admin.schemas.assignment import AssignmentForm, AssignmentPrefill
from lettings_admin.services.assignment_form import apply_prefill, clear_prefill, lookup_booking_by_id

logger = structlog.get_logger(__name__)

LOOKUP_FAILED_MESSAGE = "Error fetching booking data. Please try again."

TimerFactory = Callable[[float, Callable[[], None]], Any]
Lookup = Callable[[str], AssignmentPrefill]


class BookingLookupSession:
    """
    Holds one assignment form and reacts to edits of its booking id field.

    Args:
        engine: SQLAlchemy engine used by the default lookup
        form: The form being edited
        is_new_booking: Lookups only run for walk-up bookings
        debounce_seconds: Quiet period before a lookup is started
        timer_factory: Builds a startable, cancellable timer; threading.Timer by default
        lookup: Replaces lookup_booking_by_id (takes the trimmed booking id)
    """

    def __init__(
        self,
        engine: Optional[Engine],
        form: AssignmentForm,
        is_new_booking: bool = True,
        debounce_seconds: float = LOOKUP_DEBOUNCE_SECONDS,
        timer_factory: TimerFactory = threading.Timer,
        lookup: Optional[Lookup] = None,
    ) -> None:
        self.form = form
        self.is_new_booking = is_new_booking
        self.debounce_seconds = debounce_seconds
        self.error_message = ""
        self.is_loading = False

        self._timer_factory = timer_factory
        self._lookup = lookup or (lambda booking_id: lookup_booking_by_id(engine, booking_id))
        self._lock = threading.Lock()
        self._timer: Optional[Any] = None
        self._generation = 0

    def on_booking_id_input(self, value: str) -> None:
        """Record an edit of the booking id field and schedule a lookup if one is due."""
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            generation = self._generation

            self.form = self.form.model_copy(update={"booking_date_id": value})
            if not self.is_new_booking:
                return

            if not value.strip():
                self.form = clear_prefill(self.form)
                self.error_message = ""
                self.is_loading = False
                logger.debug("booking_lookup_cleared")
                return

            timer = self._timer_factory(
                self.debounce_seconds, lambda: self._run_lookup(value.strip(), generation)
            )
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        """Drop any pending or in-flight lookup, e.g. when the form is closed."""
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            self.is_loading = False

    def _cancel_pending(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _run_lookup(self, booking_id: str, generation: int) -> None:
        with self._lock:
            if not self._is_current(generation):
                return
            self._timer = None
            self.is_loading = True

        prefill: Optional[AssignmentPrefill] = None
        error_message = ""
        try:
            prefill = self._lookup(booking_id)
        except LookupNotFound as e:
            error_message = str(e)
        except SQLAlchemyError as e:
            logger.error("booking_lookup_failed", booking_date_id=booking_id, error=str(e))
            error_message = LOOKUP_FAILED_MESSAGE
        except Exception:
            logger.exception("booking_lookup_crashed", booking_date_id=booking_id)
            error_message = LOOKUP_FAILED_MESSAGE

        with self._lock:
            if not self._is_current(generation):
                logger.debug("booking_lookup_discarded", booking_date_id=booking_id)
                return

            try:
                self.error_message = error_message
                if prefill is not None:
                    self.form = apply_prefill(self.form, prefill)
            finally:
                self.is_loading = False
