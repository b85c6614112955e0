from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from crunch.components.cookie import Cookie, Position


@dataclass(slots=True, eq=False)
class Swap:
    """Unordered exchange of two cookies.

    ``Swap(a, b) == Swap(b, a)``. The key is read from the cookies' current
    coordinates, so a candidate describes the pre-swap cells until it is
    applied.
    """
    cookie_a: Cookie
    cookie_b: Cookie

    def key(self) -> Tuple[Position, Position]:
        first, second = sorted((self.cookie_a.position, self.cookie_b.position))
        return first, second

    @property
    def is_adjacent(self) -> bool:
        (ac, ar), (bc, br) = self.cookie_a.position, self.cookie_b.position
        return (abs(ac - bc) == 1 and ar == br) or (abs(ar - br) == 1 and ac == bc)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Swap):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    def __repr__(self) -> str:
        return f"swap {self.cookie_a!r} with {self.cookie_b!r}"
