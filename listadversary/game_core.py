"""Potentials of the bipartite game graph between the adversary and the algorithm.

Adversary vertices are pairs (work function, ALG list); algorithm vertices
additionally carry the request just presented.  This module holds the vertex
encoding, the edge costs, the work function algorithm (WFA) helpers and the
binary persistence of potentials and of the last three maximizer choices.
"""

from __future__ import annotations

import os
import struct
import sys
from array import array
from dataclasses import dataclass
from typing import BinaryIO, Sequence

from listadversary.common import MULTIPLIER, factorials
from listadversary.perms import Permutation, format_permutation

SHORT_MIN = -(1 << 15)
SHORT_MAX = (1 << 15) - 1

_SIZE_FIELD = struct.Struct("<Q")
_SHORT_BYTES = 2
_TRIPLE_BYTES = 3


@dataclass(frozen=True)
class WorkfunctionSpace:
    """The reachable work functions and how requests move between them.

    ``values[w][p]`` is the value of work function ``w`` at the permutation of
    rank ``p``; ``adjacency[w][r]`` is the work function reached from ``w`` after
    request ``r``; ``update_costs[w][r]`` is OPT's cost of serving ``r`` at ``w``.
    """

    size: int
    values: Sequence[Sequence[int]]
    adjacency: Sequence[Sequence[int]]
    update_costs: Sequence[Sequence[int]]

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError("the list must hold at least one item")
        values = tuple(tuple(row) for row in self.values)
        adjacency = tuple(tuple(row) for row in self.adjacency)
        update_costs = tuple(tuple(row) for row in self.update_costs)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "adjacency", adjacency)
        object.__setattr__(self, "update_costs", update_costs)

        count = len(values)
        if count == 0:
            raise ValueError("at least one work function is needed")
        if len(adjacency) != count or len(update_costs) != count:
            raise ValueError("values, adjacency and update costs must cover the same work functions")
        perm_count = factorials(self.size)[self.size]
        for row in values:
            if len(row) != perm_count:
                raise ValueError(f"each work function needs {perm_count} values")
        for row in adjacency:
            if len(row) != self.size:
                raise ValueError(f"each adjacency row needs {self.size} entries")
            if any(not 0 <= target < count for target in row):
                raise ValueError("adjacency points to an unknown work function")
        for row in update_costs:
            if len(row) != self.size:
                raise ValueError(f"each update cost row needs {self.size} entries")

    def __len__(self) -> int:
        return len(self.values)


def _read_exact(handle: BinaryIO, nbytes: int, message: str) -> bytes:
    data = handle.read(nbytes)
    if len(data) != nbytes:
        raise ValueError(message)
    return data


def _read_size(handle: BinaryIO, message: str) -> int:
    (value,) = _SIZE_FIELD.unpack(_read_exact(handle, _SIZE_FIELD.size, message))
    return value


def _to_bytes(typecode: str, values: Sequence[int]) -> bytes:
    data = array(typecode, values)
    if sys.byteorder == "big":
        data.byteswap()
    return data.tobytes()


def _from_bytes(typecode: str, payload: bytes) -> list[int]:
    data = array(typecode)
    data.frombytes(payload)
    if sys.byteorder == "big":
        data.byteswap()
    return data.tolist()


class GameGraphCore:
    """Potential arrays over the adversary and algorithm vertices of the game."""

    def __init__(
        self,
        space: WorkfunctionSpace,
        ratio: float,
        wfa_adjacencies: bool = False,
        binary_loadfile: str | os.PathLike | None = None,
    ) -> None:
        self.space = space
        self.size = space.size
        self.ratio = ratio
        self.perm_count = factorials(self.size)[self.size]
        self.perms = [Permutation.from_index(i, self.size) for i in range(self.perm_count)]
        self._distance = [[a.inversions_wrt(b) for b in self.perms] for a in self.perms]
        self._positions = [[p.position(r) for r in range(self.size)] for p in self.perms]

        self.advsize = len(space) * self.perm_count
        self.algsize = self.advsize * self.size
        self.adv_vertices = [0] * self.advsize
        self.alg_vertices = [0] * self.algsize

        self.wfa_adjacencies = wfa_adjacencies
        self.wfa_minimum_values: list[int] | None = [0] * self.advsize if wfa_adjacencies else None
        self.last_three_maximizers: list[list[int]] | None = None
        self.opt_decision_map: dict[int, list[int]] = {}
        self.adv_vertices_reachable: list[int] = []
        self.alg_vertices_reachable: list[int] = []

        if binary_loadfile:
            self.load_graph_binary(binary_loadfile)

    @property
    def reachable_advsize(self) -> int:
        return len(self.adv_vertices_reachable)

    @property
    def reachable_algsize(self) -> int:
        return len(self.alg_vertices_reachable)

    def reset_potentials(self) -> None:
        self.adv_vertices = [0] * self.advsize
        self.alg_vertices = [0] * self.algsize

    def init_last_three(self) -> None:
        """Start every adversary vertex with no remembered maximizers."""
        self.last_three_maximizers = [[-1, -1, -1] for _ in range(self.advsize)]

    def decode_adv(self, index: int) -> tuple[int, int]:
        """(work function index, permutation index) of an adversary vertex."""
        return divmod(index, self.perm_count)

    def encode_adv(self, wf_index: int, perm_index: int) -> int:
        return wf_index * self.perm_count + perm_index

    def decode_alg(self, index: int) -> tuple[int, int, int]:
        """(work function index, permutation index, request) of an algorithm vertex."""
        rest, request_index = divmod(index, self.size)
        wf_index, perm_index = divmod(rest, self.perm_count)
        return wf_index, perm_index, request_index

    def encode_alg(self, wf_index: int, perm_index: int, request_index: int) -> int:
        return (wf_index * self.perm_count + perm_index) * self.size + request_index

    def describe_adv(self, index: int) -> str:
        wf_index, perm_index = self.decode_adv(index)
        return (
            f"WF index {wf_index}, perm_index {perm_index}.\n"
            f"{self.perms[perm_index]}\n"
            f"Work function {wf_index}: \n"
        )

    def describe_alg(self, index: int) -> str:
        wf_index, perm_index, req = self.decode_alg(index)
        return (
            f"ALG vertex: index {wf_index}, perm_index {perm_index}, request {req}.\n"
            f"{self.perms[perm_index]}\n"
            f"Work function {wf_index}: \n"
        )

    def adv_cost(self, wf_index: int, req: int) -> int:
        """OPT's scaled cost of serving req, truncated to an integer."""
        return int(self.ratio * MULTIPLIER * self.space.update_costs[wf_index][req])

    def alg_cost(self, perm_index_one: int, perm_index_two: int, req: int) -> int:
        """ALG's scaled cost of serving req and then moving between the two lists."""
        access = self._positions[perm_index_one][req]
        return MULTIPLIER * (access + self._distance[perm_index_one][perm_index_two])

    def write_graph_binary(self, path: str | os.PathLike) -> None:
        """Write both potential arrays as 16-bit values after their 64-bit sizes."""
        with open(path, "wb") as handle:
            handle.write(_SIZE_FIELD.pack(self.advsize))
            handle.write(_SIZE_FIELD.pack(self.algsize))
            handle.write(_to_bytes("h", self.adv_vertices))
            handle.write(_to_bytes("h", self.alg_vertices))

    def load_graph_binary(self, path: str | os.PathLike) -> None:
        """Load potentials written by write_graph_binary for a graph of the same shape."""
        with open(path, "rb") as handle:
            advsize = _read_size(handle, "ADVSIZE was not read correctly.")
            algsize = _read_size(handle, "ALGSIZE was not read correctly.")
            if advsize != self.advsize or algsize != self.algsize:
                raise ValueError(
                    f"binary file holds {advsize} ADV and {algsize} ALG vertices, "
                    f"the graph has {self.advsize} and {self.algsize}"
                )
            adv = _read_exact(
                handle, advsize * _SHORT_BYTES, "The adversary potential array was not read correctly."
            )
            alg = _read_exact(
                handle, algsize * _SHORT_BYTES, "The algorithm potential array was not read correctly."
            )
        self.adv_vertices = _from_bytes("h", adv)
        self.alg_vertices = _from_bytes("h", alg)

    def serialize_last_three(self, path: str | os.PathLike) -> None:
        if self.last_three_maximizers is None:
            raise RuntimeError("the last three maximizers are not initialised")
        flat = [r for triple in self.last_three_maximizers for r in triple]
        with open(path, "wb") as handle:
            handle.write(_SIZE_FIELD.pack(self.advsize))
            handle.write(_to_bytes("b", flat))

    def deserialize_last_three(self, path: str | os.PathLike) -> None:
        with open(path, "rb") as handle:
            advsize = _read_size(handle, "ADVSIZE was not read correctly.")
            if advsize != self.advsize:
                raise ValueError(f"file holds {advsize} ADV vertices, the graph has {self.advsize}")
            payload = _read_exact(
                handle,
                advsize * _TRIPLE_BYTES,
                "The last three choices array was not read correctly.",
            )
        flat = _from_bytes("b", payload)
        self.last_three_maximizers = [
            flat[i:i + _TRIPLE_BYTES] for i in range(0, len(flat), _TRIPLE_BYTES)
        ]

    def min_adv_potential(self) -> int:
        return min(self.adv_vertices, default=SHORT_MAX)

    def reachable_min_adv_potential(self) -> int:
        return min((self.adv_vertices[i] for i in self.adv_vertices_reachable), default=SHORT_MAX)

    def wfa_cost(self, wf_index: int, current_alg_index: int, perm_index: int) -> int:
        """Work function value at perm_index plus the distance from ALG's current list."""
        return self.space.values[wf_index][perm_index] + self._distance[perm_index][current_alg_index]

    def workfunction_algorithm_minimum(self, wf_index: int, perm_index: int) -> int:
        return min(self.wfa_cost(wf_index, perm_index, p) for p in range(self.perm_count))

    def build_wfa_minima(self) -> None:
        """Store the WFA minimum of every adversary vertex."""
        if self.wfa_minimum_values is None:
            raise RuntimeError("the graph was built without WFA adjacencies")
        self.wfa_minimum_values = [
            self.workfunction_algorithm_minimum(*self.decode_adv(index)) for index in range(self.advsize)
        ]

    def wfa_unique_minimizer(self, wf_index: int, perm_index: int) -> tuple[bool, int]:
        """(True, p) if p is the only WFA minimizer, otherwise (False, -1)."""
        if self.wfa_minimum_values is None:
            raise RuntimeError("the graph was built without WFA adjacencies")
        minimum = self.wfa_minimum_values[self.encode_adv(wf_index, perm_index)]
        minimizer = 0
        seen = False
        for p in range(self.perm_count):
            if self.wfa_cost(wf_index, perm_index, p) == minimum:
                if seen:
                    return False, -1
                seen = True
                minimizer = p
        return True, minimizer