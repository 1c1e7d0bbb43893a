"""
Immutable dashboard snapshot and the transitions that produce new snapshots.

The dashboard holds stats, properties, bookings and one filter selection per
list. Each event yields a new DashboardState; nothing is mutated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Literal, Optional, Union

import structlog

from lettings_admin.schemas.bookings import ExpandedBooking
from lettings_admin.schemas.properties import DashboardStats, Property
from lettings_admin.services.filters import (
    BOOKING_FILTERS,
    PROPERTY_FILTERS,
    FilterSelection,
    apply_filters,
)
from lettings_admin.utils.datetime import utc_now

logger = structlog.get_logger(__name__)

FilterTarget = Literal["properties", "bookings"]

DEFAULT_SELECTION = FilterSelection(frozenset({"search"}))


@dataclass(frozen=True)
class DashboardState:
    stats: DashboardStats = field(default_factory=DashboardStats)
    properties: tuple[Property, ...] = ()
    bookings: tuple[ExpandedBooking, ...] = ()
    property_filters: FilterSelection = DEFAULT_SELECTION
    booking_filters: FilterSelection = DEFAULT_SELECTION
    assignment_message: str = ""
    fetched_at: Optional[datetime] = None


@dataclass(frozen=True)
class DataFetched:
    stats: DashboardStats
    properties: tuple[Property, ...]
    bookings: tuple[ExpandedBooking, ...]
    fetched_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class FilterChanged:
    """
    A filter was switched on or off, or its value was edited.

    active=False switches the filter off (and forgets its value). Otherwise the
    filter is switched on, with value stored when given.
    """

    target: FilterTarget
    name: str
    active: bool = True
    value: Any = None


@dataclass(frozen=True)
class AssignmentSubmitted:
    message: str


Event = Union[DataFetched, FilterChanged, AssignmentSubmitted]


def _change_selection(selection: FilterSelection, event: FilterChanged) -> FilterSelection:
    if not event.active:
        return selection.deactivate(event.name)
    return selection.activate(event.name, event.value)


def reduce(state: DashboardState, event: Event) -> DashboardState:
    """
    Apply one event to a snapshot.

    Args:
        state: Current snapshot
        event: DataFetched, FilterChanged or AssignmentSubmitted

    Returns:
        DashboardState: The next snapshot

    Raises:
        ValueError: For an unknown event type or filter target
    """
    if isinstance(event, DataFetched):
        logger.debug(
            "dashboard_data_fetched",
            properties=len(event.properties),
            bookings=len(event.bookings),
        )
        return replace(
            state,
            stats=event.stats,
            properties=tuple(event.properties),
            bookings=tuple(event.bookings),
            fetched_at=event.fetched_at,
        )

    if isinstance(event, FilterChanged):
        if event.target == "properties":
            return replace(state, property_filters=_change_selection(state.property_filters, event))
        if event.target == "bookings":
            return replace(state, booking_filters=_change_selection(state.booking_filters, event))
        raise ValueError(f"Unknown filter target: {event.target}")

    if isinstance(event, AssignmentSubmitted):
        return replace(state, assignment_message=event.message)

    raise ValueError(f"Unknown dashboard event: {type(event).__name__}")


def visible_properties(state: DashboardState) -> list[Property]:
    return apply_filters(state.properties, PROPERTY_FILTERS, state.property_filters)


def visible_bookings(state: DashboardState) -> list[ExpandedBooking]:
    return apply_filters(state.bookings, BOOKING_FILTERS, state.booking_filters)
