from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


HIDDEN = "H"
FLAGGED = "F"
HAZARD = "M"
ZERO = "0"


def index(row: int, col: int, cols: int) -> int:
    return row * cols + col


def coords(idx: int, cols: int) -> Tuple[int, int]:
    return divmod(idx, cols)


def in_bounds(row: int, col: int, rows: int, cols: int) -> bool:
    return 0 <= row < rows and 0 <= col < cols


def neighbors(r: int, c: int, rows: int, cols: int) -> Iterator[Tuple[int, int]]:
    for nr in range(max(0, r - 1), min(rows, r + 2)):
        for nc in range(max(0, c - 1), min(cols, c + 2)):
            if nr == r and nc == c:
                continue
            yield nr, nc


def orthogonal(r: int, c: int, rows: int, cols: int) -> Iterator[Tuple[int, int]]:
    """N, S, W, E neighbors that fall inside the board."""
    if r > 0:
        yield r - 1, c
    if r < rows - 1:
        yield r + 1, c
    if c > 0:
        yield r, c - 1
    if c < cols - 1:
        yield r, c + 1


def empty(count: int) -> str:
    if not 0 <= count <= 8:
        raise ValueError("invalid neighbor count")
    return str(count)


@dataclass(frozen=True)
class Cell:
    row: int
    col: int
    content: str

    @property
    def is_hidden(self) -> bool:
        return self.content == HIDDEN

    @property
    def is_flagged(self) -> bool:
        return self.content == FLAGGED

    @property
    def is_hazard(self) -> bool:
        return self.content == HAZARD

    @property
    def is_revealed(self) -> bool:
        return self.content not in (HIDDEN, FLAGGED)

    @property
    def count(self) -> Optional[int]:
        if self.content.isdigit():
            return int(self.content)
        return None
