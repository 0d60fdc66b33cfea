"""Shared constants, cost formulas and small helpers for the list-update adversary search."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Mapping, Sequence

EPSILON = 0.0001
MULTIPLIER = 100
ALG_MULTIPLIER = 2
ADV_MULTIPLIER = 1
RECENCY_RATIO = 0.6

ALG_DEBUG = False
GRAPH_DEBUG = False
FRONT_ACCESS_COSTS_ONE = True


@dataclass(frozen=True)
class DataFiles:
    """Names of the data files used for one list size and competitive ratio."""

    workfunctions_log: str
    graph_binary: str
    reachable_workfunctions: str
    last_three: str
    reachable_vertices: str
    reachable_after_decisions: str
    last_three_after_decisions: str
    pairwise_workfunctions: str
    pairwise_potentials: str
    pairwise_workfunctions_binary: str


def data_files(size: int, ratio: float) -> DataFiles:
    """Return the data file names for the given list size and ratio."""
    ratio_text = f"{ratio:f}"
    return DataFiles(
        workfunctions_log=f"wfs-{size}.log",
        graph_binary=f"wfs-graph-{size}-ratio-{ratio_text}.bin",
        reachable_workfunctions=f"wfs-reachable-v2-{size}.bin",
        last_three=f"last-three-maximizers-{size}.bin",
        reachable_vertices=f"reachable-subgraph-{size}-ratio-{ratio_text}.bin",
        reachable_after_decisions=f"reachable-after-decisions-{size}-ratio-{ratio_text}.bin",
        last_three_after_decisions=f"last-three-after-{size}-ratio-{ratio_text}.bin",
        pairwise_workfunctions=f"pwfs-{size}.log",
        pairwise_potentials=f"pwfs-pots-{size}.log",
        pairwise_workfunctions_binary=f"pwfs-reachable-v2-{size}.bin",
    )


def edge_weight(opt_cost: float, alg_cost: float, ratio: float) -> float:
    """Weight of an edge: the ratio times OPT's cost minus ALG's cost."""
    return ratio * opt_cost - alg_cost


@lru_cache(maxsize=None)
def _canonical(size: int) -> tuple[tuple[tuple[int, int], int], ...]:
    pairs = ((i, j) for i in range(size) for j in range(i + 1, size))
    return tuple((pair, counter) for counter, pair in enumerate(pairs))


def canonical_ordering(size: int) -> dict[tuple[int, int], int]:
    """Map each sorted pair (i, j), i < j, to its bit index in lexicographic order."""
    return dict(_canonical(size))


def canonical_index(size: int, i: int, j: int) -> int:
    """Bit index of the sorted pair (i, j); raises ValueError for an invalid pair."""
    lookup: Mapping[tuple[int, int], int] = dict(_canonical(size))
    try:
        return lookup[(i, j)]
    except KeyError:
        raise ValueError(f"({i},{j}) is not a sorted pair of a list of size {size}") from None


def max_memory_pairs(size: int) -> int:
    """Largest value of a pair-flag memory for the given list size."""
    if size < 2:
        raise ValueError("a pair memory needs a list of at least two items")
    last = canonical_index(size, size - 2, size - 1)
    return (1 << (last + 1)) - 1


@lru_cache(maxsize=None)
def factorials(size: int) -> tuple[int, ...]:
    """Return (0!, 1!, ..., size!)."""
    if size < 0:
        raise ValueError("size must be non-negative")
    return tuple(math.factorial(k) for k in range(size + 1))


def diameter_bound(n: int) -> int:
    """Largest number of inversions between two permutations of n items."""
    return (n * (n - 1)) // 2


def triple_contains(triple: Sequence[int], element: int) -> bool:
    """Whether element is one of the first three entries of triple."""
    return element in tuple(triple[:3])


def format_array(values: Iterable[int]) -> str:
    """Render values as '[a,b,c,]'."""
    return "[" + "".join(f"{value}," for value in values) + "]"