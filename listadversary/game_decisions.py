"""OPT decisions on the reachable part of the game graph.

The adversary is restricted to a few requests per vertex: the last three
maximizers of an earlier run, or an explicit decision map.  Only vertices
reachable from adversary vertex 0 are updated, with ALG following the work
function algorithm (WFA).  The decision search narrows each adversary vertex
to a single request for which OPT still wins.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterable

from listadversary.common import triple_contains
from listadversary.game_core import (
    _SIZE_FIELD,
    _TRIPLE_BYTES,
    _from_bytes,
    _read_exact,
    _read_size,
    _to_bytes,
)
from listadversary.game_updates import UpdatingGameGraph

log = logging.getLogger(__name__)

_UINT64_BYTES = 8


def _format_triple(triple: Iterable[int]) -> str:
    return "[" + ",".join(str(r) for r in triple if r != -1) + "]"


class DecisionGameGraph(UpdatingGameGraph):
    """A game graph solved on its reachable part under restricted OPT choices."""

    # Helpers.

    def _decision(self, index: int) -> list[int]:
        """The decision triple of an adversary vertex; an absent one becomes [0, 0, 0]."""
        return self.opt_decision_map.setdefault(index, [0, 0, 0])

    def _reachable_adv_update(self, allowed_for: Callable[[int], list[int]]) -> bool:
        changed = False
        for index in self.adv_vertices_reachable:
            triple = allowed_for(index)
            new_pot, _ = self._best_request(index, lambda request: triple_contains(triple, request))
            changed |= self._set_adv(index, new_pot)
        return changed

    def _wfa_targets(self, wf_index: int, perm_index: int) -> list[int]:
        minimum = self._require_wfa_minima()[self.encode_adv(wf_index, perm_index)]
        return [
            p for p in range(self.perm_count)
            if self.wfa_cost(wf_index, perm_index, p) == minimum
        ]

    # Potential updates on the reachable vertices.

    def reachable_update_adv_only_use_last_three(self, iteration: int) -> bool:
        """Update reachable adversary vertices using only their last three maximizers."""
        last_three = self._require_last_three()
        return self._reachable_adv_update(lambda index: last_three[index])

    def reachable_linear_update_adv_opt_decisions(self) -> bool:
        """Update reachable adversary vertices using only the requests of the decision map."""

        def allowed_for(index: int) -> list[int]:
            if index not in self.opt_decision_map:
                raise KeyError(f"adversary vertex {index} has no decision")
            return self.opt_decision_map[index]

        return self._reachable_adv_update(allowed_for)

    def reachable_update_alg_wfa_faster(self) -> bool:
        """Update reachable algorithm vertices, ALG moving only to WFA minimizers."""
        changed = False
        for index in self.alg_vertices_reachable:
            wf_index, perm_index, req = self.decode_alg(index)
            targets = self._wfa_targets(wf_index, perm_index)
            new_pot = self._cheapest(wf_index, perm_index, req, targets)
            changed |= self._set_alg(index, new_pot)
        return changed

    def reachable_linear_update_alg_wfa_faster(self) -> bool:
        """Sequential form of reachable_update_alg_wfa_faster."""
        return self.reachable_update_alg_wfa_faster()

    # Reachability.

    def reinitialize_reachable_arrays(self, reachable_adv: Iterable[int], reachable_alg: Iterable[int]) -> None:
        """Replace the reachable vertex lists by the given sets, in increasing order."""
        self.adv_vertices_reachable = sorted(set(reachable_adv))
        self.alg_vertices_reachable = sorted(set(reachable_alg))

    def wfa_reachable_via(self, last_three: bool = False) -> tuple[int, int]:
        """Collect the vertices reachable from adversary vertex 0.

        The adversary uses the last three maximizers if last_three is true and
        the decision map otherwise; ALG moves to WFA minimizers.  Returns the
        numbers of reachable adversary and algorithm vertices.
        """
        triples = self._require_last_three() if last_three else None
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
                triple = triples[adv_index] if triples is not None else self._decision(adv_index)
                for request in range(self.size):
                    if not triple_contains(triple, request):
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

        self.reinitialize_reachable_arrays(adv_processed, alg_processed)
        log.debug(
            "Reachable via the chosen moves: %d adv vertices, %d alg vertices.",
            len(adv_processed), len(alg_processed),
        )
        return len(adv_processed), len(alg_processed)

    def serialize_reachable_arrays(self, path: str | os.PathLike) -> None:
        """Write both reachable lists, each as a 64-bit count followed by 64-bit indices."""
        with open(path, "wb") as handle:
            handle.write(_SIZE_FIELD.pack(self.reachable_advsize))
            handle.write(_to_bytes("Q", self.adv_vertices_reachable))
            handle.write(_SIZE_FIELD.pack(self.reachable_algsize))
            handle.write(_to_bytes("Q", self.alg_vertices_reachable))

    def deserialize_reachable_arrays(self, path: str | os.PathLike) -> None:
        """Load reachable lists written by serialize_reachable_arrays."""
        with open(path, "rb") as handle:
            advsize = _read_size(handle, "Reachable ADV size was not read correctly.")
            adv = _read_exact(
                handle, advsize * _UINT64_BYTES, "The reachable ADV array was not read correctly."
            )
            algsize = _read_size(handle, "Reachable ALG size was not read correctly.")
            alg = _read_exact(
                handle, algsize * _UINT64_BYTES, "The reachable ALG array was not read correctly."
            )
        self.adv_vertices_reachable = _from_bytes("Q", adv)
        self.alg_vertices_reachable = _from_bytes("Q", alg)

    # Decisions.

    def serialize_decisions(self, path: str | os.PathLike) -> None:
        """Write the decision triples of the reachable adversary vertices, in reachable order."""
        flat = [r for index in self.adv_vertices_reachable for r in self._decision(index)]
        with open(path, "wb") as handle:
            handle.write(_SIZE_FIELD.pack(self.reachable_advsize))
            handle.write(_to_bytes("b", flat))

    def deserialize_decisions(self, path: str | os.PathLike) -> None:
        """Load a decision map written by serialize_decisions for the same reachable list."""
        with open(path, "rb") as handle:
            count = _read_size(handle, "ADVSIZE was not read correctly.")
            if count != self.reachable_advsize:
                raise ValueError(
                    f"file holds {count} decisions, {self.reachable_advsize} vertices are reachable"
                )
            payload = _read_exact(
                handle, count * _TRIPLE_BYTES, "The decision array was not read correctly."
            )
        flat = _from_bytes("b", payload)
        self.opt_decision_map = {
            index: flat[k * _TRIPLE_BYTES:(k + 1) * _TRIPLE_BYTES]
            for k, index in enumerate(self.adv_vertices_reachable)
        }

    def build_decision_map(self) -> None:
        """Add the last three maximizers of every reachable vertex that has no decision yet."""
        last_three = self._require_last_three()
        for index in self.adv_vertices_reachable:
            self.opt_decision_map.setdefault(index, list(last_three[index]))

    def update_decision_map(self) -> None:
        """Keep decisions only for the currently reachable adversary vertices."""
        old = self.opt_decision_map
        self.opt_decision_map = {
            index: old.get(index, [0, 0, 0]) for index in self.adv_vertices_reachable
        }

    def find_first_decision(self) -> tuple[bool, int]:
        """(True, index) for the first reachable vertex with at least two choices, else (False, 0)."""
        for index in self.adv_vertices_reachable:
            minus_ones = self._decision(index)[:3].count(-1)
            if minus_ones >= 3:
                raise ValueError(f"adversary vertex {index} has no choice left")
            if minus_ones <= 1:
                return True, index
        return False, 0

    def reachable_reset_potentials(self) -> None:
        """Zero the potentials of the reachable vertices."""
        for index in self.adv_vertices_reachable:
            self.adv_vertices[index] = 0
        for index in self.alg_vertices_reachable:
            self.alg_vertices[index] = 0

    def opt_wins_via_decisions(self) -> bool:
        """Iterate reachable potentials under the decision map; True if OPT wins."""
        self.reachable_reset_potentials()
        anything_updated = True
        iteration = 0
        while anything_updated:
            if self.reachable_min_adv_potential() <= 0:
                adv_updated = self.reachable_linear_update_adv_opt_decisions()
                alg_updated = self.reachable_linear_update_alg_wfa_faster()
                anything_updated = adv_updated or alg_updated
            if self.reachable_min_adv_potential() >= 1:
                log.debug("OPT won in %d iterations.", iteration)
                return True
            iteration += 1
        log.debug("Potential stabilized in %d iterations.", iteration)
        return False

    def _require_reachable(self) -> None:
        if self.reachable_algsize == 0:
            raise RuntimeError("no reachable vertices are known")

    def lowerbound_via_last_choices(self, decisions_from_scratch: bool = True) -> bool:
        """Solve with the current decision map, first building it from the last three if asked."""
        self._require_reachable()
        if decisions_from_scratch:
            self.build_decision_map()
        return self.opt_wins_via_decisions()

    def lowerbound_via_decisions(self) -> int:
        """Fix one request per vertex while OPT keeps winning; return the number of decisions."""
        self._require_reachable()
        self.build_decision_map()
        decisions = 0
        while True:
            exists, index = self.find_first_decision()
            if not exists:
                break
            decisions += 1
            old = list(self.opt_decision_map[index])
            log.debug("Old decision array at %d: %s.", index, old)
            opt_wins = False
            for i, choice in enumerate(old):
                if choice == -1:
                    continue
                self.opt_decision_map[index] = [
                    old[j] if j == i else -1 for j in range(_TRIPLE_BYTES)
                ]
                opt_wins = self.opt_wins_via_decisions()
                if opt_wins:
                    log.debug("OPT wins if it sends %d at %d.", choice, index)
                    break
                log.debug("ALG wins if OPT sends %d at %d.", choice, index)
            if not opt_wins:
                raise RuntimeError(f"no decision at adversary vertex {index} lets OPT win")
            self.wfa_reachable_via()
            self.update_decision_map()

        for k, index in enumerate(self.adv_vertices_reachable):
            log.debug(
                "Reachable #%d: vertex index %d, %s", k, index, _format_triple(self.opt_decision_map[index])
            )
        log.debug("Made %d decisions.", decisions)
        return decisions