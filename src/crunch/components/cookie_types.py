from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List

MIN_COOKIE_TYPES = 3


class CookieType(Enum):
    """Closed set of token kinds a cookie can take."""
    BLEU = 1
    ROUGE = 2
    JAUNE = 3
    BLANC = 4
    VERT = 5
    VIOLET = 6

    @property
    def sprite_name(self) -> str:
        return self.name.lower()

    @property
    def highlighted_sprite_name(self) -> str:
        return self.sprite_name + "-Highlighted"

    def __str__(self) -> str:
        return self.sprite_name


DEFAULT_COOKIE_TYPES: List[CookieType] = [
    CookieType.BLEU,
    CookieType.ROUGE,
    CookieType.JAUNE,
    CookieType.BLANC,
]


@dataclass(slots=True)
class CookieTypes:
    """Singleton component listing the cookie types that generation may draw.

    Order is preserved so seeded draws are reproducible. At least three
    distinct types are required, otherwise the no-match generator could run
    out of candidates.
    """
    spawnable: List[CookieType] = field(default_factory=lambda: list(DEFAULT_COOKIE_TYPES))

    def __post_init__(self) -> None:
        seen: set[CookieType] = set()
        filtered: List[CookieType] = []
        for cookie_type in self.spawnable:
            if not isinstance(cookie_type, CookieType):
                cookie_type = CookieType[str(cookie_type).upper()]
            if cookie_type not in seen:
                filtered.append(cookie_type)
                seen.add(cookie_type)
        if len(filtered) < MIN_COOKIE_TYPES:
            raise ValueError(
                f"At least {MIN_COOKIE_TYPES} distinct cookie types are required, got {len(filtered)}"
            )
        self.spawnable = filtered

    def all_types(self) -> List[CookieType]:
        return list(self.spawnable)

    def draw(self, rng: random.Random, exclude: Iterable[CookieType | None] = ()) -> CookieType:
        """Uniformly draw a spawnable type that is not in ``exclude``."""
        excluded = set(exclude)
        available = [t for t in self.spawnable if t not in excluded]
        if not available:
            raise ValueError(f"Every cookie type is excluded: {sorted(t.sprite_name for t in excluded if t)}")
        return rng.choice(available)
