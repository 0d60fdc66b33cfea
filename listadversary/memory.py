"""Algorithm memories: a per-position bitfield and a per-pair flag set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from listadversary.common import canonical_index, canonical_ordering, max_memory_pairs

_PAIR_BITS = 64


@dataclass
class BitfieldMemory:
    """One bit per list position."""

    size: int
    data: int = 0

    @classmethod
    def max_value(cls, size: int) -> int:
        return (1 << size) - 1

    def _check(self, pos: int) -> None:
        if not 0 <= pos < self.size:
            raise IndexError(f"position {pos} out of range for size {self.size}")

    def access(self, pos: int) -> int:
        self._check(pos)
        return (self.data >> pos) & 1

    def set_true(self, pos: int) -> None:
        self._check(pos)
        self.data |= 1 << pos

    def set_false(self, pos: int) -> None:
        self._check(pos)
        self.data &= ~(1 << pos)

    def recompute(self, alg_relabeling: Sequence[int]) -> "BitfieldMemory":
        """Memory with each set bit moved to its relabeled position."""
        if len(alg_relabeling) != self.size:
            raise ValueError("relabeling has the wrong length")
        new_mem = BitfieldMemory(self.size)
        for position, relabeled in enumerate(alg_relabeling):
            if self.access(position):
                new_mem.set_true(relabeled)
        return new_mem

    def format(self) -> str:
        """Bits from position 0 upwards."""
        return "".join(str(self.access(pos)) for pos in range(self.size))


@dataclass
class PairsMemory:
    """One flag per unordered pair of list positions."""

    size: int
    data: int = 0

    @classmethod
    def max_value(cls, size: int) -> int:
        return max_memory_pairs(size)

    @staticmethod
    def _check(pos: int) -> None:
        if not 0 <= pos < _PAIR_BITS:
            raise IndexError(f"bit {pos} out of range")

    def access(self, pos: int) -> int:
        self._check(pos)
        return (self.data >> pos) & 1

    def set_true(self, pos: int) -> None:
        self._check(pos)
        self.data |= 1 << pos

    def set_false(self, pos: int) -> None:
        self._check(pos)
        self.data &= ~(1 << pos)

    def access_sorted_pair(self, i: int, j: int) -> int:
        return self.access(canonical_index(self.size, i, j))

    def access_pair(self, i: int, j: int) -> int:
        return self.access_sorted_pair(min(i, j), max(i, j))

    def flag_sorted_pair(self, i: int, j: int) -> None:
        self.set_true(canonical_index(self.size, i, j))

    def flag_unsorted_pair(self, i: int, j: int) -> None:
        self.flag_sorted_pair(min(i, j), max(i, j))

    def clear_sorted_pair(self, i: int, j: int) -> None:
        self.set_false(canonical_index(self.size, i, j))

    def clear_unsorted_pair(self, i: int, j: int) -> None:
        self.clear_sorted_pair(min(i, j), max(i, j))

    def flagged_pairs(self) -> list[tuple[int, int]]:
        """Flagged sorted pairs in canonical order."""
        order = canonical_ordering(self.size)
        return [pair for pair, bit in sorted(order.items(), key=lambda kv: kv[1]) if self.access(bit)]

    def recompute(self, alg_relabeling: Sequence[int]) -> "PairsMemory":
        """Memory with every flagged pair relabeled."""
        if len(alg_relabeling) != self.size:
            raise ValueError("relabeling has the wrong length")
        new_mem = PairsMemory(self.size)
        for i, j in self.flagged_pairs():
            new_mem.flag_unsorted_pair(alg_relabeling[i], alg_relabeling[j])
        return new_mem

    def format(self) -> str:
        return "".join(f"The pair ({i},{j}) has been flagged.\n" for i, j in self.flagged_pairs())