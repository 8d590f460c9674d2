import pytest

from minefield.cells import index
from minefield.generator import excluded_indices


class Rigged:
    """Random source that lays hazards exactly on the given cells.

    Draws are consumed by eligible cells in row-major order, so the script is
    built by walking the board the same way the generator does.
    """

    def __init__(self, rows, cols, seed, hazards):
        ex = excluded_indices(seed[0], seed[1], rows, cols)
        wanted = {index(r, c, cols) for r, c in hazards}
        self._draws = [0.0 if i in wanted else 0.999 for i in range(rows * cols) if i not in ex]
        self.calls = 0

    def random(self):
        value = self._draws[self.calls] if self.calls < len(self._draws) else 0.999
        self.calls += 1
        return value


class Constant:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


@pytest.fixture
def rigged():
    return Rigged


@pytest.fixture
def constant():
    return Constant
