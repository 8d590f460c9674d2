import random

import pytest

from minefield.adjacency import derive_counts
from minefield.cells import HAZARD, coords, index, neighbors
from minefield.difficulty import BoardConfig, Difficulty
from minefield.generator import generate_layout


def safe_zone(r0, c0, rows, cols):
    return {
        (r0 + dr, c0 + dc)
        for dr in (-1, 0, 1)
        for dc in (-1, 0, 1)
        if 0 <= r0 + dr < rows and 0 <= c0 + dc < cols
    }


def hazard_cells(layout, cols):
    return {coords(i, cols) for i, ch in enumerate(layout) if ch == HAZARD}


@pytest.mark.parametrize("tier", list(Difficulty))
@pytest.mark.parametrize("seed_cell", ["center", "corner", "edge"])
def test_every_tier_gets_exact_count_and_safe_zone(tier, seed_cell):
    cfg = tier.config
    r0, c0 = {
        "center": (cfg.rows // 2, cfg.cols // 2),
        "corner": (cfg.rows - 1, 0),
        "edge": (0, cfg.cols // 2),
    }[seed_cell]
    for seed in range(25):
        layout = generate_layout(cfg, r0, c0, random.Random(seed))
        mines = hazard_cells(layout, cfg.cols)
        assert len(mines) == cfg.hazards
        assert not mines & safe_zone(r0, c0, cfg.rows, cfg.cols)


def test_seed_5_5_on_easy_board_keeps_rows_4_to_6_clear():
    cfg = Difficulty.EASY.config
    for seed in range(50):
        layout = generate_layout(cfg, 5, 5, random.Random(seed))
        for r in range(4, 7):
            for c in range(4, 7):
                assert layout[index(r, c, cfg.cols)] != HAZARD


def test_low_draws_fill_first_eligible_cells(constant):
    cfg = BoardConfig(10, 10, 10)
    rng = constant(0.0)
    layout = generate_layout(cfg, 5, 5, rng)
    assert hazard_cells(layout, cfg.cols) == {(0, c) for c in range(10)}
    # stops drawing once the quota is met
    assert rng.calls == 10


def test_high_draws_force_the_last_eligible_cells(constant):
    cfg = BoardConfig(10, 10, 10)
    layout = generate_layout(cfg, 0, 0, constant(0.999))
    assert hazard_cells(layout, cfg.cols) == {(9, c) for c in range(10)}


def test_forced_placement_skips_safe_zone_in_last_rows(constant):
    cfg = BoardConfig(10, 10, 12)
    layout = generate_layout(cfg, 9, 9, constant(0.999))
    mines = hazard_cells(layout, cfg.cols)
    assert len(mines) == 12
    assert not mines & safe_zone(9, 9, 10, 10)
    assert mines == {(8, c) for c in range(4, 8)} | {(9, c) for c in range(8)}


def test_corner_seed_uses_real_eligible_count(constant):
    # a corner seed excludes only 4 cells
    cfg = BoardConfig(4, 4, 7)
    layout = generate_layout(cfg, 0, 0, constant(0.999))
    mines = hazard_cells(layout, 4)
    assert len(mines) == 7
    assert not mines & safe_zone(0, 0, 4, 4)


def test_centered_seed_can_fill_every_eligible_cell(constant):
    cfg = BoardConfig(4, 4, 7)
    layout = generate_layout(cfg, 1, 1, constant(0.5))
    assert hazard_cells(layout, 4) == {(3, 0), (3, 1), (3, 2), (3, 3), (0, 3), (1, 3), (2, 3)}


def test_counts_match_brute_force():
    cfg = Difficulty.HARD.config
    for seed in range(10):
        layout = derive_counts(generate_layout(cfg, 3, 17, random.Random(seed)), cfg.rows, cfg.cols)
        for i, ch in enumerate(layout):
            if ch == HAZARD:
                continue
            r, c = coords(i, cfg.cols)
            expected = sum(
                1 for nr, nc in neighbors(r, c, cfg.rows, cfg.cols)
                if layout[index(nr, nc, cfg.cols)] == HAZARD
            )
            assert int(ch) == expected
            assert 0 <= int(ch) <= 8


def test_count_of_eight():
    layout = ["M", "M", "M", "M", "0", "M", "M", "M", "M"]
    derive_counts(layout, 3, 3)
    assert layout[4] == "8"
    assert layout.count("M") == 8
