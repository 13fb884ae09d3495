from __future__ import annotations

from pagewalk.utils.types import Cursor


class PageCursorCache:
    """Append-only table of page-ending cursors.

    Index 0 holds the cursor that ends page 1, index 1 the one ending page 2,
    and so on. Entries may be overwritten by a refetch of the same page, but
    never skipped: a cursor for page N can only be recorded once page N-1 has
    one.
    """

    def __init__(self) -> None:
        self._cursors: list[Cursor] = []

    def __len__(self) -> int:
        return len(self._cursors)

    def __contains__(self, index: int) -> bool:
        return 0 <= index < len(self._cursors)

    @property
    def frontier(self) -> int:
        """Highest page number with a recorded cursor (0 when empty)."""
        return len(self._cursors)

    def get(self, index: int) -> Cursor | None:
        if index in self:
            return self._cursors[index]
        return None

    def set(self, index: int, cursor: Cursor) -> None:
        if index < 0:
            raise ValueError("index must be >= 0")
        if index < len(self._cursors):
            self._cursors[index] = cursor
        elif index == len(self._cursors):
            self._cursors.append(cursor)
        else:
            raise ValueError(
                f"Cannot record cursor for page {index + 1}: "
                f"cache frontier is page {self.frontier}"
            )

    def clear(self) -> None:
        self._cursors.clear()
