from __future__ import annotations

import logging
import random
from typing import List, Optional, Union

from .adjacency import derive_counts
from .cells import FLAGGED, HAZARD, HIDDEN, ZERO, Cell, in_bounds, index
from .difficulty import BoardConfig, Difficulty, resolve_difficulty
from .errors import OutOfBounds
from .generator import RandomSource, generate_layout
from .reveal import RevealOutcome, RevealStatus, reveal_cell


logger = logging.getLogger(__name__)


class Game:
    """One game of Minefield: the Solution and Visible grids plus terminal state.

    Hazards are placed lazily on the first reveal or flag, so the first
    action's 3x3 neighborhood is always safe.
    """

    def __init__(self, config: BoardConfig, rng: Optional[RandomSource] = None) -> None:
        self.config = config
        self._rng = rng if rng is not None else random.Random()
        n = config.rows * config.cols
        self._solution: List[str] = [ZERO] * n
        self._visible: List[str] = [HIDDEN] * n
        self._generated = False
        self._dead = False

    @classmethod
    def for_difficulty(cls, level: Union[Difficulty, int, str], rng: Optional[RandomSource] = None) -> "Game":
        return cls(resolve_difficulty(level).config, rng=rng)

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def cols(self) -> int:
        return self.config.cols

    @property
    def hazards(self) -> int:
        return self.config.hazards

    @property
    def generated(self) -> bool:
        return self._generated

    def _check(self, row: int, col: int) -> None:
        if not in_bounds(row, col, self.rows, self.cols):
            raise OutOfBounds(row, col)

    def ensure_generated(self, row: int, col: int) -> None:
        self._check(row, col)
        if self._generated:
            return
        layout = generate_layout(self.config, row, col, self._rng)
        self._solution = derive_counts(layout, self.rows, self.cols)
        self._visible = [HIDDEN] * len(layout)
        self._generated = True

    def reveal(self, row: int, col: int) -> RevealOutcome:
        self.ensure_generated(row, col)
        outcome = reveal_cell(self._solution, self._visible, self.rows, self.cols, row, col)
        if outcome.status is RevealStatus.HAZARD_HIT:
            self._dead = True
            logger.info("[minefield] hazard hit at (%d,%d)", row, col)
        elif outcome.status is RevealStatus.REVEALED and self.is_won():
            logger.info("[minefield] board cleared rows=%d cols=%d", self.rows, self.cols)
        return outcome

    def toggle_flag(self, row: int, col: int) -> None:
        self.ensure_generated(row, col)
        i = index(row, col, self.cols)
        if self._visible[i] == HIDDEN:
            self._visible[i] = FLAGGED
        elif self._visible[i] == FLAGGED:
            self._visible[i] = HIDDEN

    def is_dead(self) -> bool:
        return self._dead

    def is_won(self) -> bool:
        # flags count as cleared; only a Hidden cell blocks the win
        return self._generated and HIDDEN not in self._visible

    def cell(self, row: int, col: int) -> Cell:
        self._check(row, col)
        return Cell(row, col, self._visible[index(row, col, self.cols)])

    def visible_view(self) -> List[List[str]]:
        return self._rows_of(self._visible)

    def solution_view(self) -> List[List[str]]:
        if not self._dead:
            raise ValueError("game_in_progress")
        return self._rows_of(self._solution)

    def _rows_of(self, grid: List[str]) -> List[List[str]]:
        return [grid[r * self.cols:(r + 1) * self.cols] for r in range(self.rows)]


def new_game(level: Union[Difficulty, int, str] = Difficulty.EASY, rng_seed: Optional[int] = None) -> Game:
    return Game.for_difficulty(level, rng=random.Random(rng_seed))
