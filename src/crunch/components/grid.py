from __future__ import annotations

from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class Grid(Generic[T]):
    """Fixed-size column/row storage where absent cells hold ``None``.

    Coordinates outside ``[0, columns) x [0, rows)`` are a caller bug and
    raise ``IndexError`` instead of wrapping or returning ``None``.
    """

    def __init__(self, columns: int, rows: int):
        if columns <= 0 or rows <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {columns}x{rows}")
        self.columns = columns
        self.rows = rows
        self._slots: List[Optional[T]] = [None] * (columns * rows)

    def _index(self, column: int, row: int) -> int:
        if not (0 <= column < self.columns and 0 <= row < self.rows):
            raise IndexError(f"({column}, {row}) outside {self.columns}x{self.rows} grid")
        return row * self.columns + column

    def get(self, column: int, row: int) -> Optional[T]:
        return self._slots[self._index(column, row)]

    def set(self, column: int, row: int, value: Optional[T]) -> None:
        self._slots[self._index(column, row)] = value

    def dimensions(self) -> Tuple[int, int]:
        return self.columns, self.rows

    def clear(self) -> None:
        self._slots = [None] * (self.columns * self.rows)

    def __getitem__(self, key: Tuple[int, int]) -> Optional[T]:
        return self.get(*key)

    def __setitem__(self, key: Tuple[int, int], value: Optional[T]) -> None:
        self.set(key[0], key[1], value)

    def items(self) -> Iterator[Tuple[int, int, T]]:
        """Yield ``(column, row, value)`` for occupied cells, bottom row first."""
        for row in range(self.rows):
            for column in range(self.columns):
                value = self._slots[row * self.columns + column]
                if value is not None:
                    yield column, row, value

    def __len__(self) -> int:
        return sum(1 for value in self._slots if value is not None)
