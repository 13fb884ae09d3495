"""Settings resolution for Record configuration."""

from __future__ import annotations

from pagewalk.core.query import SortDirection
from pagewalk.utils.types import DEFAULT_PAGE_SIZE


def _pluralize(name: str) -> str:
    """Naive pluralization for collection names.

    Args:
        name: Singular class name

    Returns:
        Pluralized collection name
    """
    lower = name.lower()
    if lower.endswith("s"):
        return lower + "es"
    if lower.endswith("y") and not lower.endswith(("ay", "ey", "iy", "oy", "uy")):
        return lower[:-1] + "ies"
    return lower + "s"


def _setting(cls: type, name: str):
    settings = getattr(cls, "Settings", None)
    return getattr(settings, name, None) if settings is not None else None


class SettingsResolver:
    """Resolves browsing settings from the inner Settings class of a Record."""

    @staticmethod
    def get_collection_name(cls: type) -> str:
        """Collection name from Settings, or the pluralized class name."""
        return _setting(cls, "collection") or _pluralize(cls.__name__)

    @staticmethod
    def get_connection_alias(cls: type) -> str:
        return _setting(cls, "connection_alias") or "default"

    @staticmethod
    def get_search_fields(cls: type) -> frozenset[str]:
        """Fields the client-side search overlay looks at."""
        return frozenset(_setting(cls, "search_fields") or ())

    @staticmethod
    def get_ordering(cls: type) -> tuple[str, SortDirection]:
        """Order field and direction; a leading '-' means descending.

        Example: ``order_by = "-created_at"``
        """
        order_by = _setting(cls, "order_by") or "_id"
        if order_by.startswith("-"):
            return order_by[1:], SortDirection.DESCENDING
        return order_by, SortDirection.ASCENDING

    @staticmethod
    def get_page_size(cls: type) -> int:
        page_size = _setting(cls, "page_size") or DEFAULT_PAGE_SIZE
        if page_size < 1:
            raise ValueError(f"{cls.__name__}.Settings.page_size must be >= 1")
        return page_size
