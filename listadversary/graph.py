"""The explicit adversary graph over (ALG list, ALG memory) states."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Sequence

from listadversary.common import FRONT_ACCESS_COSTS_ONE, edge_weight
from listadversary.memory import BitfieldMemory
from listadversary.perms import (
    PermTuple,
    format_permutation,
    identity,
    iterate_permutations,
    lexindex,
    recompute_alg_perm,
    swapped,
)

AlgStep = Callable[[PermTuple, BitfieldMemory, int], "tuple[Sequence[int], BitfieldMemory, float]"]


def iterate_memory_and_permutation(size: int) -> Iterator[tuple[PermTuple, BitfieldMemory]]:
    """Every (permutation, memory) pair, permutations in lexicographic order."""
    limit = BitfieldMemory.max_value(size)
    for perm in iterate_permutations(size):
        for data in range(limit + 1):
            yield perm, BitfieldMemory(size, data)


@dataclass
class AdvEdge:
    """An edge: either OPT presents an item, or OPT swaps two adjacent items."""

    id: int
    source: int
    target: int
    alg_cost: float
    opt_cost: float
    presented_item: int = -1
    opt_swap: int = -1

    def describe(self) -> str:
        if self.presented_item == -1:
            return f'{self.source} -> {self.target} [label="swap {self.opt_swap},{self.opt_swap + 1}"];'
        return (
            f'{self.source} -> {self.target} [label="req: {self.presented_item}, '
            f'a_cost: {self.alg_cost:f}, o_cost: {self.opt_cost:f}"];'
        )

    def weight(self, ratio: float) -> float:
        return edge_weight(self.opt_cost, self.alg_cost, ratio)


@dataclass
class AdversaryVertex:
    """A state before OPT presents an item."""

    id: int
    perm: PermTuple
    memory: BitfieldMemory
    edges: list[AdvEdge] = field(default_factory=list)
    reachable: bool = False

    def position(self, item: int) -> int:
        """Position of item in ALG's list, 0 if absent."""
        try:
            return self.perm.index(item)
        except ValueError:
            return 0

    def describe(self) -> str:
        return f'{self.id} [label="{self.memory.data},{format_permutation(self.perm)}"];'


class AdversaryGraph:
    """All states of a list of the given size, with presentation and swap edges."""

    def __init__(self, size: int, alg_step: AlgStep, ratio: float) -> None:
        self.size = size
        self.ratio = ratio
        self.alg_step = alg_step
        self._memory_range = BitfieldMemory.max_value(size) + 1
        self.edgecounter = 0
        self.reachable_vertices = 0
        self._vertices = [
            AdversaryVertex(self.vertex_id(perm, mem), perm, mem)
            for perm, mem in iterate_memory_and_permutation(size)
        ]
        for vertex in self._vertices:
            self._build_presentation_edges(vertex)
            self._build_translation_edges(vertex)

    def _add_edge(self, vertex: AdversaryVertex, **kwargs) -> None:
        vertex.edges.append(AdvEdge(id=self.edgecounter, source=vertex.id, **kwargs))
        self.edgecounter += 1

    def _build_presentation_edges(self, vertex: AdversaryVertex) -> None:
        for item in range(self.size):
            new_perm, new_mem, alg_cost = self.alg_step(
                vertex.perm, BitfieldMemory(self.size, vertex.memory.data), item
            )
            opt_cost = item + 1 if FRONT_ACCESS_COSTS_ONE else item
            target = self.get_vert(tuple(new_perm), new_mem)
            self._add_edge(
                vertex, target=target.id, alg_cost=alg_cost, opt_cost=opt_cost, presented_item=item
            )

    def _build_translation_edges(self, vertex: AdversaryVertex) -> None:
        for opt_swap in range(self.size - 1):
            single_swap = swapped(identity(self.size), opt_swap)
            new_mem = vertex.memory.recompute(single_swap)
            new_perm = recompute_alg_perm(vertex.perm, single_swap)
            target = self.get_vert(new_perm, new_mem)
            self._add_edge(vertex, target=target.id, alg_cost=0, opt_cost=1, opt_swap=opt_swap)

    def __len__(self) -> int:
        return len(self._vertices)

    def vertex_id(self, perm: Sequence[int], memory: BitfieldMemory) -> int:
        if not 0 <= memory.data < self._memory_range:
            raise ValueError(f"memory value {memory.data} out of range")
        return lexindex(perm) * self._memory_range + memory.data

    def get_vert(self, perm: Sequence[int], memory: BitfieldMemory) -> AdversaryVertex:
        return self.vertex(self.vertex_id(perm, memory))

    def vertex(self, vertex_id: int) -> AdversaryVertex:
        if not 0 <= vertex_id < len(self._vertices):
            raise IndexError(f"no vertex with id {vertex_id}")
        return self._vertices[vertex_id]

    def vertices(self) -> Iterator[AdversaryVertex]:
        return iter(self._vertices)

    def edge_weight(self, edge: AdvEdge) -> float:
        return edge.weight(self.ratio)

    def locate_edge(self, source: AdversaryVertex, target: AdversaryVertex) -> AdvEdge | None:
        """The first edge from source to target, or None."""
        return next((e for e in source.edges if e.target == target.id), None)

    def _sequence_edges(self, sequence: Sequence[int]) -> Iterator[AdvEdge]:
        for a, b in zip(sequence, sequence[1:]):
            edge = self.locate_edge(self.vertex(a), self.vertex(b))
            if edge is None:
                raise ValueError(f"no edge from {a} to {b}")
            yield edge

    def total_alg_cost(self, sequence: Sequence[int]) -> float:
        return float(sum(e.alg_cost for e in self._sequence_edges(sequence)))

    def total_opt_cost(self, sequence: Sequence[int]) -> float:
        return float(sum(e.opt_cost for e in self._sequence_edges(sequence)))

    def describe_sequence(self, sequence: Sequence[int]) -> str:
        total = len(sequence)
        parts = []
        for counter, vertex_id in enumerate(sequence):
            vertex = self.vertex(vertex_id)
            parts.append(f"Vertex {counter}/{total}:\n{vertex.describe()}\n")
            parts.append(f"Memory content for vertex {counter}/{total}:\n{vertex.memory.format()}\n")
            if counter < total - 1:
                edge = self.locate_edge(vertex, self.vertex(sequence[counter + 1]))
                if edge is None:
                    raise ValueError(f"no edge from {vertex_id} to {sequence[counter + 1]}")
                parts.append(edge.describe() + "\n")
        return "".join(parts)

    def describe(self) -> str:
        lines = []
        for vertex in self._vertices:
            lines.append(vertex.describe())
            lines.extend(e.describe() for e in vertex.edges)
        return "\n".join(lines) + "\n"

    def dfs_reachability(self) -> int:
        """Mark every vertex reachable from vertex 0; return how many there are."""
        start = self.vertex(0)
        visited = {start.id}
        stack = [start]
        while stack:
            vertex = stack.pop()
            vertex.reachable = True
            for edge in vertex.edges:
                if edge.target not in visited:
                    visited.add(edge.target)
                    stack.append(self._vertices[edge.target])
        self.reachable_vertices = len(visited)
        return self.reachable_vertices