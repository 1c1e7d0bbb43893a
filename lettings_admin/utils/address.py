"""Address composition for properties with structured or legacy flattened addresses."""

from typing import Any, Mapping, Union

ADDRESS_PARTS: tuple[str, ...] = (
    "house_address",
    "locality",
    "city",
    "county",
    "postcode",
    "country",
)


def _field(source: Union[Mapping[str, Any], Any], name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def format_full_address(source: Union[Mapping[str, Any], Any]) -> str:
    """
    Compose a one-line address from a property's structured address fields.

    Parts are joined with ", " in the order house address, locality, city,
    county, postcode, country, skipping empty parts. The legacy full_address
    field is only used when every structured part is empty.

    Args:
        source: A Property model or a raw property row

    Returns:
        str: The composed address, or "" if nothing is known

    Example:
        >>> format_full_address({"house_address": "4 Mill Lane", "city": "Leeds", "postcode": "LS1 4AP"})
        '4 Mill Lane, Leeds, LS1 4AP'
    """
    parts = [str(value) for value in (_field(source, name) for name in ADDRESS_PARTS) if value]
    if parts:
        return ", ".join(parts)
    return _field(source, "full_address") or ""
