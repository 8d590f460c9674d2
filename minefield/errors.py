from __future__ import annotations


class OutOfBounds(ValueError):
    """Raised when a move targets a cell outside the board."""

    def __init__(self, row: int, col: int) -> None:
        super().__init__("out of bounds")
        self.row = row
        self.col = col


class InvalidDifficulty(ValueError):
    def __init__(self, value: object) -> None:
        super().__init__("invalid_difficulty")
        self.value = value
