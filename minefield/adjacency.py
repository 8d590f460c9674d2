from __future__ import annotations

from typing import List

from .cells import HAZARD, coords, empty, index, neighbors


def derive_counts(layout: List[str], rows: int, cols: int) -> List[str]:
    """Write each non-hazard cell's hazardous-neighbor count into ``layout``."""
    for i, ch in enumerate(layout):
        if ch == HAZARD:
            continue
        r, c = coords(i, cols)
        cnt = 0
        for nr, nc in neighbors(r, c, rows, cols):
            if layout[index(nr, nc, cols)] == HAZARD:
                cnt += 1
        layout[i] = empty(cnt)
    return layout
