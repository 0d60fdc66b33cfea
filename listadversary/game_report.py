"""Reports on a solved game graph: potential propagation, potential walks and decision listings."""

from __future__ import annotations

from collections import deque
from typing import Sequence

from listadversary.game_decisions import DecisionGameGraph, _format_triple


class GameGraph(DecisionGameGraph):
    """The full game graph, with human-readable reports of its potentials and decisions."""

    def wfa_lowerbound_potential_propagation(self) -> int:
        """Propagate from adversary vertex 0 along edges that can affect the potentials.

        The adversary follows every request whose value is at least its current
        potential; ALG follows the moves minimizing the work function algorithm's
        cost.  Returns the number of adversary and algorithm vertices visited.
        """
        adv_processed: set[int] = set()
        alg_processed: set[int] = set()
        current_adv = {0}
        current_alg: set[int] = set()

        while current_adv:
            for adv_index in current_adv:
                if adv_index in adv_processed:
                    continue
                adv_processed.add(adv_index)
                wf_index, perm_index = self.decode_adv(adv_index)
                current_pot = self.adv_vertices[adv_index]
                for request in range(self.size):
                    # Maximizing: any value equal or larger could affect the potential.
                    if self._adv_candidate(wf_index, perm_index, request) < current_pot:
                        continue
                    new_wf_index = self.space.adjacency[wf_index][request]
                    alg_index = self.encode_alg(new_wf_index, perm_index, request)
                    if alg_index not in alg_processed:
                        current_alg.add(alg_index)
            current_adv = set()

            for alg_index in current_alg:
                if alg_index in alg_processed:
                    continue
                alg_processed.add(alg_index)
                wf_index, perm_index, _ = self.decode_alg(alg_index)
                for p in self._wfa_targets(wf_index, perm_index):
                    target = self.encode_adv(wf_index, p)
                    if target not in adv_processed:
                        current_adv.add(target)
            current_alg = set()

        return len(adv_processed) + len(alg_processed)

    def shortest_path_line(self, index_adv: int, path: Sequence[int]) -> str:
        """One line listing the request path that first reached an adversary vertex."""
        return f"adv{index_adv} shortest request path: " + "".join(f"{r}, " for r in path)

    def _describe_tight_edges(self, index: int) -> tuple[list[str], list[int]]:
        wf_index, perm_index, request = self.decode_alg(index)
        potential = self.alg_vertices[index]
        tight = [
            p for p in range(self.perm_count)
            if self.adv_vertices[self.encode_adv(wf_index, p)] + self.alg_cost(perm_index, p, request)
            == potential
        ]
        wfa_minimum = self.workfunction_algorithm_minimum(wf_index, perm_index)
        lines = []
        targets = []
        for tight_index, p in enumerate(tight):
            next_adv = self.encode_adv(wf_index, p)
            parts = [f"Tight edge {tight_index}/{len(tight)} between alg{index} and adv{next_adv}."]
            move_cost = self.wfa_cost(wf_index, perm_index, p)
            if move_cost == wfa_minimum:
                parts.append(f" Minimum of WFA ({move_cost} = {wfa_minimum}).")
            else:
                parts.append(f" Nonoptimal in terms of WFA ({move_cost} != {wfa_minimum}).")
            if p == perm_index:
                parts.append(f" Stay: {self.perms[perm_index]}")
            else:
                parts.append(" Move")
                if self.perms[p][0] == request:
                    parts.append(" (RIF)")
                parts.append(f": {self.perms[perm_index]} -> {self.perms[p]}")
            lines.append("".join(parts) + "\n")
            targets.append(next_adv)
        return lines, targets

    def potential_report(self) -> str:
        """Walk breadth-first from adversary vertex 0 and describe the potentials met.

        Adversary vertices expand along every request; algorithm vertices only
        along tight edges, i.e. moves that attain their potential.
        """
        adv_visited = {0}
        alg_visited: set[int] = set()
        queue: deque[tuple[bool, int, tuple[int, ...]]] = deque([(True, 0, ())])
        out: list[str] = []

        while queue:
            is_adv, index, path = queue.popleft()
            if is_adv:
                wf_index, perm_index = self.decode_adv(index)
                out.append(self.describe_adv(index))
                out.append(f"adv{index}: adv potential {self.adv_vertices[index]}.\n")
                out.append(self.shortest_path_line(index, path) + "\n")
                for request in range(self.size):
                    next_wf = self.space.adjacency[wf_index][request]
                    next_alg = self.encode_alg(next_wf, perm_index, request)
                    out.append(
                        f"adv{index} with req {request}: updated work function number {next_wf}. "
                        f"Next alg{next_alg}.\n"
                    )
                    if next_alg not in alg_visited:
                        alg_visited.add(next_alg)
                        queue.append((False, next_alg, path + (request,)))
            else:
                out.append(self.describe_alg(index))
                out.append(f"alg{index}: alg potential {self.alg_vertices[index]}.\n")
                lines, targets = self._describe_tight_edges(index)
                out.extend(lines)
                for next_adv in targets:
                    if next_adv not in adv_visited:
                        adv_visited.add(next_adv)
                        queue.append((True, next_adv, path))
        return "".join(out)

    def top_three_for_reachable(self) -> list[str]:
        """One line per reachable adversary vertex with its remembered maximizers."""
        last_three = self._require_last_three()
        return [
            f"Reachable #{k}: vertex index {index}, {_format_triple(last_three[index][:3])}"
            for k, index in enumerate(self.adv_vertices_reachable)
        ]

    def opt_decision_map_report(self) -> list[str]:
        """One line per reachable adversary vertex with its allowed OPT requests."""
        return [
            f"Reachable #{k}: vertex index {index}, {_format_triple(self._decision(index)[:3])}"
            for k, index in enumerate(self.adv_vertices_reachable)
        ]