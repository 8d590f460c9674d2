from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import InvalidDifficulty


SAFE_ZONE_SIZE = 9


@dataclass(frozen=True)
class BoardConfig:
    rows: int
    cols: int
    hazards: int

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError("invalid board size")
        if self.hazards < 0:
            raise ValueError("invalid mine count")
        if self.hazards > self.rows * self.cols - SAFE_ZONE_SIZE:
            raise ValueError("too_many_mines_for_board")

    @property
    def cells(self) -> int:
        return self.rows * self.cols


class Difficulty(Enum):
    EASY = (1, BoardConfig(10, 10, 10))
    MEDIUM = (2, BoardConfig(15, 15, 20))
    HARD = (3, BoardConfig(20, 20, 40))

    @property
    def level(self) -> int:
        return self.value[0]

    @property
    def config(self) -> BoardConfig:
        return self.value[1]

    @property
    def label(self) -> str:
        return self.name.lower()


def resolve_difficulty(value: Union[Difficulty, int, str]) -> Difficulty:
    """Map a tier, level number or tier name to a Difficulty."""
    if isinstance(value, Difficulty):
        return value
    if isinstance(value, bool):
        raise InvalidDifficulty(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text.isdigit():
            value = int(text)
        else:
            for tier in Difficulty:
                if tier.label == text:
                    return tier
            raise InvalidDifficulty(value)
    if isinstance(value, int):
        for tier in Difficulty:
            if tier.level == value:
                return tier
    raise InvalidDifficulty(value)
