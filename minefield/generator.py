from __future__ import annotations

import logging
from typing import List, Protocol, Set

from .cells import HAZARD, ZERO, index, neighbors
from .difficulty import BoardConfig


logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def random(self) -> float: ...


def excluded_indices(row: int, col: int, rows: int, cols: int) -> Set[int]:
    ex = {index(row, col, cols)}
    for nr, nc in neighbors(row, col, rows, cols):
        ex.add(index(nr, nc, cols))
    return ex


def generate_layout(config: BoardConfig, seed_row: int, seed_col: int, rng: RandomSource) -> List[str]:
    """Place exactly ``config.hazards`` hazards outside the seed's 3x3 zone.

    Single row-major pass. Each eligible cell becomes a hazard with
    probability ``hazards / cells``, unless the eligible cells still ahead
    are exactly the hazards still owed, in which case it is forced. Cells
    inside the safe zone are skipped without drawing.
    """
    rows, cols, total = config.rows, config.cols, config.hazards
    excluded = excluded_indices(seed_row, seed_col, rows, cols)
    n = rows * cols
    cells_left = n - len(excluded)
    if total > cells_left:
        raise ValueError("insufficient_space_for_mines")

    layout = [ZERO] * n
    p = total / n
    placed = 0
    for i in range(n):
        if placed == total:
            break
        if i in excluded:
            continue
        if cells_left == total - placed or rng.random() < p:
            layout[i] = HAZARD
            placed += 1
        cells_left -= 1

    logger.debug(
        "[minefield] generated layout rows=%d cols=%d hazards=%d seed=(%d,%d)",
        rows, cols, placed, seed_row, seed_col,
    )
    return layout
