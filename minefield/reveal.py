from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Set, Tuple

from .cells import FLAGGED, HAZARD, HIDDEN, ZERO, index, orthogonal


logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


class RevealStatus(str, Enum):
    ALREADY_REVEALED = "already_revealed"
    FLAGGED = "flagged"
    HAZARD_HIT = "hazard_hit"
    REVEALED = "revealed"


@dataclass(frozen=True)
class RevealOutcome:
    status: RevealStatus
    cells: FrozenSet[Coord] = frozenset()

    @property
    def hit_hazard(self) -> bool:
        return self.status is RevealStatus.HAZARD_HIT


def _zero_component(solution: List[str], rows: int, cols: int, row: int, col: int) -> List[Coord]:
    # breadth-first over N/S/W/E steps between zero cells, in discovery order
    zero_cells = [(row, col)]
    seen = {(row, col)}
    q = deque([(row, col)])
    while q:
        r, c = q.popleft()
        for nr, nc in orthogonal(r, c, rows, cols):
            if (nr, nc) in seen:
                continue
            if solution[index(nr, nc, cols)] == ZERO:
                seen.add((nr, nc))
                zero_cells.append((nr, nc))
                q.append((nr, nc))
    return zero_cells


def _copy(solution: List[str], visible: List[str], r: int, c: int, cols: int, changed: Set[Coord]) -> None:
    i = index(r, c, cols)
    if visible[i] != solution[i]:
        visible[i] = solution[i]
        changed.add((r, c))


def reveal_cell(
    solution: List[str],
    visible: List[str],
    rows: int,
    cols: int,
    row: int,
    col: int,
) -> RevealOutcome:
    """Reveal ``(row, col)`` on ``visible`` and cascade from zero cells.

    A zero cell pulls in its whole 4-connected zero region; each cell of the
    region then exposes its non-hazard N/S/W/E neighbors, flagged ones
    included. Hazards are never exposed by the cascade.
    """
    i = index(row, col, cols)
    if visible[i] == FLAGGED:
        return RevealOutcome(RevealStatus.FLAGGED)
    if solution[i] == HAZARD:
        hit = frozenset({(row, col)}) if visible[i] != HAZARD else frozenset()
        visible[i] = HAZARD
        return RevealOutcome(RevealStatus.HAZARD_HIT, hit)
    if visible[i] != HIDDEN:
        return RevealOutcome(RevealStatus.ALREADY_REVEALED)

    changed: Set[Coord] = set()
    _copy(solution, visible, row, col, cols, changed)
    if solution[i] == ZERO:
        zero_cells = _zero_component(solution, rows, cols, row, col)
        for r, c in zero_cells:
            _copy(solution, visible, r, c, cols, changed)
            for nr, nc in orthogonal(r, c, rows, cols):
                if solution[index(nr, nc, cols)] != HAZARD:
                    _copy(solution, visible, nr, nc, cols, changed)
        logger.debug("[minefield] cascade zero_cells=%d revealed=%d", len(zero_cells), len(changed))
    return RevealOutcome(RevealStatus.REVEALED, frozenset(changed))
