from dataclasses import dataclass, field
from typing import Set

from crunch.components.cookie import Cookie
from crunch.components.grid import Grid
from crunch.components.swap import Swap
from crunch.components.tile import Tile


@dataclass(slots=True)
class Board:
    """Board entity state: the static tile shape, the live cookies, and the
    swaps currently allowed on them.

    Only board operations write to ``tiles`` and ``cookies``.
    """
    columns: int
    rows: int
    tiles: Grid[Tile] = field(init=False)
    cookies: Grid[Cookie] = field(init=False)
    possible_swaps: Set[Swap] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.tiles = Grid(self.columns, self.rows)
        self.cookies = Grid(self.columns, self.rows)

    def has_tiles(self) -> bool:
        return len(self.tiles) > 0
