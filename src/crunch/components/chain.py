from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterator, List

from crunch.components.cookie import Cookie, Position


class ChainType(Enum):
    HORIZONTAL = "Horizontal"
    VERTICAL = "Vertical"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, eq=False)
class Chain:
    """Run of three or more same-typed cookies along one axis.

    Cookies are kept in scan order (left to right, or bottom to top). Equality
    and hashing use the set of member cells, so the same run found twice
    compares equal whatever order it was collected in.
    """
    chain_type: ChainType
    cookies: List[Cookie] = field(default_factory=list)

    def add(self, cookie: Cookie) -> None:
        self.cookies.append(cookie)

    def first_cookie(self) -> Cookie:
        return self.cookies[0]

    def last_cookie(self) -> Cookie:
        return self.cookies[-1]

    @property
    def length(self) -> int:
        return len(self.cookies)

    def positions(self) -> FrozenSet[Position]:
        return frozenset(cookie.position for cookie in self.cookies)

    def __len__(self) -> int:
        return len(self.cookies)

    def __iter__(self) -> Iterator[Cookie]:
        return iter(self.cookies)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chain):
            return NotImplemented
        return self.positions() == other.positions()

    def __hash__(self) -> int:
        return hash(self.positions())

    def __repr__(self) -> str:
        return f"type:{self.chain_type} cookies:{self.cookies}"
