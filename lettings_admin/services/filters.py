"""
Toggleable filters over in-memory property, booking and booked-property lists.

A filter definition names a predicate and how it reads an item. A
FilterSelection says which definitions are switched on and what value each one
holds. Only definitions that are both active and hold a usable value are
applied, and all applied predicates must match. The source list is never
modified.

Example:
    >>> selection = FilterSelection().activate("bedrooms", "3")
    >>> apply_filters(properties, PROPERTY_FILTERS, selection)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Sequence, Union

import structlog

from lettings_admin.schemas.properties import AMENITY_FLAGS, SAFETY_FLAGS
from lettings_admin.utils.address import format_full_address

logger = structlog.get_logger(__name__)

Getter = Callable[[Any], Any]
FieldRef = Union[str, Getter]

TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})


def read_field(item: Any, ref: FieldRef) -> Any:
    """Read a field from a model or a mapping; dotted names walk nested values."""
    if callable(ref):
        return ref(item)

    value = item
    for part in ref.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Search:
    """Case-insensitive substring match on any of several fields."""

    name: str
    fields: tuple[FieldRef, ...]

    def parse(self, value: Any) -> Optional[str]:
        term = _as_text(value).strip().lower()
        return term or None

    def matches(self, item: Any, term: str) -> bool:
        return any(term in _as_text(read_field(item, ref)).lower() for ref in self.fields)


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match on one field."""

    name: str
    field: FieldRef

    def parse(self, value: Any) -> Optional[str]:
        term = _as_text(value).strip().lower()
        return term or None

    def matches(self, item: Any, term: str) -> bool:
        return term in _as_text(read_field(item, self.field)).lower()


@dataclass(frozen=True)
class Equals:
    """Exact match on one field; dates compare by their YYYY-MM-DD form."""

    name: str
    field: FieldRef

    def parse(self, value: Any) -> Optional[str]:
        text = _as_text(value)
        return text or None

    def matches(self, item: Any, expected: str) -> bool:
        return _as_text(read_field(item, self.field)) == expected


@dataclass(frozen=True)
class AtLeast:
    """Numeric field >= the selected minimum."""

    name: str
    field: FieldRef

    def parse(self, value: Any) -> Optional[int]:
        return _as_int(value)

    def matches(self, item: Any, minimum: int) -> bool:
        actual = read_field(item, self.field)
        return actual is not None and actual >= minimum


@dataclass(frozen=True)
class Exactly:
    """Numeric field == the selected value."""

    name: str
    field: FieldRef

    def parse(self, value: Any) -> Optional[int]:
        return _as_int(value)

    def matches(self, item: Any, expected: int) -> bool:
        return read_field(item, self.field) == expected


@dataclass(frozen=True)
class Flag:
    """Boolean field that must be strictly True while the filter is on and ticked."""

    name: str
    field: FieldRef

    def parse(self, value: Any) -> Optional[bool]:
        if value is True:
            return True
        if isinstance(value, str) and value.strip().lower() in TRUE_STRINGS:
            return True
        return None

    def matches(self, item: Any, _: bool) -> bool:
        return read_field(item, self.field) is True


Predicate = Union[Search, Contains, Equals, AtLeast, Exactly, Flag]


@dataclass(frozen=True)
class FilterSelection:
    """
    Which filters are switched on and the value each one holds.

    Instances are immutable; every change returns a new selection. Switching a
    filter off also forgets its value, so switching it back on never
    re-applies a stale value.
    """

    active: frozenset[str] = frozenset()
    values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def activate(self, name: str, value: Any = None) -> FilterSelection:
        values = dict(self.values)
        if value is not None:
            values[name] = value
        return FilterSelection(self.active | {name}, MappingProxyType(values))

    def deactivate(self, name: str) -> FilterSelection:
        values = {k: v for k, v in self.values.items() if k != name}
        return FilterSelection(self.active - {name}, MappingProxyType(values))

    def set_value(self, name: str, value: Any) -> FilterSelection:
        values = dict(self.values)
        values[name] = value
        return FilterSelection(self.active, MappingProxyType(values))

    def toggle(self, name: str) -> FilterSelection:
        return self.deactivate(name) if name in self.active else self.activate(name)

    def key(self) -> tuple[tuple[str, str], ...]:
        """Hashable form of the active filters and their values."""
        return tuple(sorted((name, repr(self.values.get(name))) for name in self.active))

    @classmethod
    def from_params(
        cls, params: Mapping[str, Any], definitions: Sequence[Predicate]
    ) -> FilterSelection:
        """Selection with every known filter that has a non-empty value in params switched on."""
        known = {d.name for d in definitions}
        values = {name: value for name, value in params.items() if name in known and value not in (None, "")}
        return cls(frozenset(values), MappingProxyType(values))


def applied_predicates(
    definitions: Sequence[Predicate], selection: FilterSelection
) -> list[tuple[Predicate, Any]]:
    """Active definitions paired with their parsed values; unusable values are dropped."""
    applied = []
    for definition in definitions:
        if definition.name not in selection.active:
            continue
        parsed = definition.parse(selection.values.get(definition.name))
        if parsed is None:
            continue
        applied.append((definition, parsed))
    return applied


def apply_filters(
    items: Sequence[Any], definitions: Sequence[Predicate], selection: FilterSelection
) -> list[Any]:
    """
    Return the items that satisfy every applied filter.

    Args:
        items: Source collection (left unmodified)
        definitions: Filters that may be applied to this kind of item
        selection: Which filters are on and their values

    Returns:
        list: Matching items in source order
    """
    applied = applied_predicates(definitions, selection)
    if not applied:
        return list(items)
    return [item for item in items if all(p.matches(item, value) for p, value in applied)]


class FilterEngine:
    """
    Remembers the last filtered view and recomputes only when the collection
    object, the active filters or their values change.
    """

    def __init__(self, definitions: Sequence[Predicate]) -> None:
        self.definitions = tuple(definitions)
        self._source: Optional[Sequence[Any]] = None
        self._key: Optional[tuple[tuple[str, str], ...]] = None
        self._result: list[Any] = []
        self.computations = 0

    def apply(self, items: Sequence[Any], selection: FilterSelection) -> list[Any]:
        key = selection.key()
        if items is self._source and key == self._key:
            return self._result

        self._result = apply_filters(items, self.definitions, selection)
        self._source = items
        self._key = key
        self.computations += 1
        logger.debug("filters_applied", total=len(items), matched=len(self._result))
        return self._result


def _first_date(attr: str) -> Getter:
    def getter(booking: Any) -> Any:
        dates = read_field(booking, "booking_dates") or []
        return read_field(dates[0], attr) if dates else None

    return getter


PROPERTY_FILTERS: tuple[Predicate, ...] = (
    Search("search", ("property_name", format_full_address, "property_type")),
    Contains("postcode", "postcode"),
    Equals("city", "city"),
    Equals("property_type", "property_type"),
    Equals("parking_type", "parking_type"),
    AtLeast("bedrooms", "bedrooms"),
    AtLeast("beds", "beds"),
    AtLeast("bathrooms", "bathrooms"),
    Exactly("max_occupancy", "max_occupancy"),
    *(Flag(name, name) for name in AMENITY_FLAGS + SAFETY_FLAGS),
)

BOOKING_FILTERS: tuple[Predicate, ...] = (
    Search("search", ("full_name", "email", "company_name")),
    Contains("contractor_code", "contractor.code"),
    Contains("property_id", "assigned_property.id"),
    Equals("city", "city"),
    Equals("status", "status"),
    Equals("start_date", _first_date("start_date")),
    Equals("end_date", _first_date("end_date")),
)

BOOKED_PROPERTY_FILTERS: tuple[Predicate, ...] = (
    Contains("property_id", "property_id"),
    Equals("start_date", "start_date"),
    Equals("end_date", "end_date"),
)
