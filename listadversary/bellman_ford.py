"""Negative-cycle detection on the reachable part of an adversary graph."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from listadversary.graph import AdversaryGraph

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NegativeCycle:
    """A cycle of vertex ids (first equals last) with ALG's and OPT's total costs."""

    cycle: list[int]
    alg_cost: float
    opt_cost: float

    @property
    def ratio(self) -> float:
        return self.alg_cost / self.opt_cost


def extract_cycle(pred: Sequence[int], start: int) -> list[int]:
    """Follow predecessors from start to a repeat and return the cycle, closed."""
    with_tail = [start]
    visited = {start}
    p = pred[start]
    while p not in visited:
        if p < 0:
            raise ValueError(f"vertex {with_tail[-1]} has no predecessor")
        with_tail.append(p)
        visited.add(p)
        p = pred[p]
    with_tail.append(p)
    with_tail.reverse()
    cycle = [with_tail[0]]
    for vertex in with_tail[1:]:
        if vertex == cycle[0]:
            break
        cycle.append(vertex)
    cycle.append(cycle[0])
    return cycle


def bellman_ford(graph: AdversaryGraph) -> NegativeCycle | None:
    """Find a negative cycle reachable from vertex 0, or return None."""
    n = len(graph)
    distances = [math.inf] * n
    pred = [-1] * n
    distances[0] = 0.0
    pred[0] = 0
    reachable = [v for v in graph.vertices() if v.reachable]

    def relaxable(edge) -> bool:
        return (
            distances[edge.source] != math.inf
            and distances[edge.source] + graph.edge_weight(edge) < distances[edge.target]
        )

    for iteration in range(graph.reachable_vertices):
        log.debug("Iteration %d.", iteration)
        updated = False
        for vertex in reachable:
            for edge in vertex.edges:
                if relaxable(edge):
                    distances[edge.target] = distances[edge.source] + graph.edge_weight(edge)
                    pred[edge.target] = edge.source
                    updated = True
        if not updated:
            return None
        if distances[0] < 0.0:
            log.debug("Negative cycle found in the graph.")
            break

    for vertex in reachable:
        for edge in vertex.edges:
            if relaxable(edge):
                cycle = extract_cycle(pred, edge.source)
                return NegativeCycle(cycle, graph.total_alg_cost(cycle), graph.total_opt_cost(cycle))
    return None