"""Two-part Zobrist hashing of work functions."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from listadversary.common import diameter_bound, factorials

DEFAULT_SEED = 12345


@dataclass(frozen=True)
class DoubleHash:
    """A 128-bit hash split into two 64-bit halves."""

    first_part: int = 0
    second_part: int = 0


class DoubleZobrist:
    """Random tables indexed by permutation and work-function value."""

    def __init__(self, size: int, seed: int = DEFAULT_SEED) -> None:
        self.size = size
        rows = factorials(size)[size]
        self.columns = diameter_bound(size) + 1
        generator = random.Random(seed)
        self.zobrist_first: list[list[int]] = []
        self.zobrist_second: list[list[int]] = []
        for _ in range(rows):
            first_row, second_row = [], []
            for _ in range(self.columns):
                first_row.append(generator.getrandbits(64))
                second_row.append(generator.getrandbits(64))
            self.zobrist_first.append(first_row)
            self.zobrist_second.append(second_row)

    def hash(self, values: Sequence[int]) -> DoubleHash:
        """Hash the work-function values, one per permutation."""
        if len(values) != len(self.zobrist_first):
            raise ValueError(f"expected {len(self.zobrist_first)} values, got {len(values)}")
        first = 0
        second = 0
        for row, value in zip(self.zobrist_first, values):
            if not 0 <= value < self.columns:
                raise ValueError(f"work-function value {value} out of range")
            first ^= row[value]
            # Both halves are drawn from the first table.
            second ^= row[value]
        return DoubleHash(first, second)