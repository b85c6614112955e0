from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from crunch.components.cookie_types import CookieType

Position = Tuple[int, int]


@dataclass(slots=True, eq=False)
class Cookie:
    """A typed token occupying one grid cell.

    Identity is the cell: two cookies compare equal when they sit on the same
    ``(column, row)`` regardless of type, since a cell holds at most one live
    cookie. ``column``/``row`` are rewritten in place whenever the board moves
    the cookie, so they always name the slot holding it.
    """
    column: int
    row: int
    cookie_type: CookieType

    @property
    def position(self) -> Position:
        return (self.column, self.row)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cookie):
            return NotImplemented
        return self.column == other.column and self.row == other.row

    def __hash__(self) -> int:
        return hash((self.column, self.row))

    def __repr__(self) -> str:
        return f"type:{self.cookie_type} square:({self.column},{self.row})"
