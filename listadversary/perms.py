"""Permutations of list positions: lexicographic indexing, swaps and moves."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Iterator, Sequence

from listadversary.common import factorials

PermTuple = tuple[int, ...]


def identity(size: int) -> PermTuple:
    """The identity permutation (0, 1, ..., size-1)."""
    return tuple(range(size))


def full_inverse(size: int) -> PermTuple:
    """The reversed permutation (size-1, ..., 0)."""
    return tuple(reversed(range(size)))


def next_permutation(perm: Sequence[int]) -> PermTuple | None:
    """The lexicographically next permutation, or None if perm is the largest."""
    items = list(perm)
    i = len(items) - 1
    while i > 0 and items[i - 1] >= items[i]:
        i -= 1
    if i <= 0:
        return None
    j = len(items) - 1
    while items[j] <= items[i - 1]:
        j -= 1
    items[i - 1], items[j] = items[j], items[i - 1]
    items[i:] = reversed(items[i:])
    return tuple(items)


def iterate_permutations(size: int) -> Iterator[PermTuple]:
    """All permutations of range(size) in lexicographic order."""
    return itertools.permutations(range(size))


def format_permutation(perm: Sequence[int]) -> str:
    """Render a permutation as '(a,b,c)'."""
    return "(" + ",".join(str(x) for x in perm) + ")"


def lexindex(perm: Sequence[int]) -> int:
    """Lexicographic rank of a permutation of range(len(perm))."""
    size = len(perm)
    if size == 0:
        return 0
    facts = factorials(size)
    total = perm[0] * facts[size - 1]
    for i, value in enumerate(perm[1:], start=1):
        smaller_after = sum(1 for later in perm[i + 1:] if later < value)
        total += smaller_after * facts[size - 1 - i]
    return total


def perm_from_index(index: int, size: int) -> PermTuple:
    """The permutation of range(size) with the given lexicographic rank."""
    facts = factorials(size)
    if not 0 <= index < facts[size]:
        raise ValueError(f"index {index} out of range for permutations of {size} items")
    remaining = list(range(size))
    result = []
    for i in range(size):
        block = facts[size - i - 1]
        relpos, index = divmod(index, block)
        result.append(remaining.pop(relpos))
    return tuple(result)


def swapped(perm: Sequence[int], swap_target: int) -> PermTuple:
    """Swap positions swap_target and swap_target+1; -1 is a no-op."""
    items = list(perm)
    if swap_target == -1:
        return tuple(items)
    if not 0 <= swap_target < len(items) - 1:
        raise IndexError(f"swap position {swap_target} out of range")
    items[swap_target], items[swap_target + 1] = items[swap_target + 1], items[swap_target]
    return tuple(items)


def inverse(perm: Sequence[int]) -> PermTuple:
    """The inverse permutation."""
    result = [0] * len(perm)
    for position, value in enumerate(perm):
        result[value] = position
    return tuple(result)


def recompute_alg_perm(alg_perm: Sequence[int], opt_single_swap: Sequence[int]) -> PermTuple:
    """Relabel ALG's list by OPT's relabeling."""
    return tuple(opt_single_swap[x] for x in alg_perm)


def inversion_count(perm: Sequence[int]) -> int:
    """Number of inversions of a permutation."""
    return sum(1 for a, b in itertools.combinations(perm, 2) if a > b)


@dataclass(frozen=True)
class Permutation:
    """An immutable permutation of list items."""

    data: PermTuple

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", tuple(self.data))

    @classmethod
    def from_index(cls, index: int, size: int) -> "Permutation":
        return cls(perm_from_index(index, size))

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[int]:
        return iter(self.data)

    def __getitem__(self, position: int) -> int:
        return self.data[position]

    def __str__(self) -> str:
        return f"{self.id()}: {format_permutation(self.data)}"

    def id(self) -> int:
        """Lexicographic rank."""
        return lexindex(self.data)

    def swap(self, swap_source: int) -> "Permutation":
        """Copy with positions swap_source and swap_source+1 exchanged."""
        if not 0 <= swap_source <= len(self.data) - 2:
            raise ValueError(f"swap position {swap_source} out of range")
        return Permutation(swapped(self.data, swap_source))

    def move_from_position_to_position(self, source_pos: int, target_pos: int) -> "Permutation":
        """Copy with the item at source_pos moved forward to target_pos."""
        if source_pos <= target_pos:
            return Permutation(self.data)
        items = list(self.data)
        items.insert(target_pos, items.pop(source_pos))
        return Permutation(items)

    def move_forward(self, element: int, target_pos: int) -> "Permutation":
        """Copy with element moved forward to target_pos."""
        return self.move_from_position_to_position(self.position(element), target_pos)

    def compose_right(self, right_perm: "Permutation") -> "Permutation":
        return Permutation(tuple(self.data[r] for r in right_perm.data))

    def mtf(self, element: int) -> "Permutation":
        """Copy with element moved to the front."""
        return self.move_forward(element, 0)

    def position(self, element: int) -> int:
        """Position of element, or -1 if absent."""
        try:
            return self.data.index(element)
        except ValueError:
            return -1

    def inversions(self) -> int:
        return inversion_count(self.data)

    def inversions_wrt(self, other: "Permutation") -> int:
        """Number of inversions between this list and other."""
        inv = inverse(self.data)
        return inversion_count(tuple(inv[x] for x in other.data))