from typing import Any, TypeVar

# Type aliases for better clarity
DocumentData = dict[str, Any]
FilterSpec = dict[str, Any]
SortSpec = list[tuple[str, int]]
Cursor = Any

# Generic type variable for browsed items
T = TypeVar("T")

# Constants
DEFAULT_PAGE_SIZE = 20
DEFAULT_SCAN_BATCH_SIZE = 500

_NO_VALUE = object()


def merge_filters(
    base: FilterSpec | None = None,
    override: FilterSpec | None = None,
    **kwargs: Any
) -> FilterSpec:
    """Merge multiple filter dictionaries with proper precedence.

    Args:
        base: Base filter dict
        override: Override filter dict (takes precedence over base)
        **kwargs: Additional filters (highest precedence)

    Returns:
        Merged filter dictionary
    """
    return {**(base or {}), **(override or {}), **kwargs}


def get_field(item: Any, field: str, default: Any = None) -> Any:
    """Read a field from a mapping by key or from an object by attribute.

    Dotted names such as ``profile.createdAt`` walk into nested values, the
    way MongoDB resolves them, unless the flat key itself is present.
    """
    if isinstance(item, dict) and field in item:
        return item[field]

    current = item
    for part in field.split("."):
        if isinstance(current, dict):
            if part not in current:
                return default
            current = current[part]
        else:
            current = getattr(current, part, _NO_VALUE)
            if current is _NO_VALUE:
                return default
    return current


def get_item_id(item: Any) -> Any:
    """Return the identity of a browsed item, accepting ``id`` or ``_id``."""
    value = get_field(item, "id")
    if value is None:
        value = get_field(item, "_id")
    return value
