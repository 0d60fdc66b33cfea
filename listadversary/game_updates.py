"""Potential updates of the game graph: adversary maximization and algorithm minimization.

Each update sweeps one side of the bipartite graph and reports whether any
potential changed.  Adversary vertices take the best request for OPT;
algorithm vertices take the cheapest move allowed by the chosen rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from listadversary.common import triple_contains
from listadversary.game_core import SHORT_MAX, SHORT_MIN, GameGraphCore

log = logging.getLogger(__name__)

_SHORT_RANGE = 1 << 16


def _to_short(value: int) -> int:
    """Wrap value into the signed 16-bit range used for stored potentials."""
    return (value - SHORT_MIN) % _SHORT_RANGE + SHORT_MIN


@dataclass(frozen=True)
class PotentialOutcome:
    """Result of iterating potentials: whether OPT won and after how many iterations."""

    opt_wins: bool
    iterations: int


class UpdatingGameGraph(GameGraphCore):
    """A game graph whose potentials can be updated round by round."""

    # Adversary side.

    def _adv_candidate(self, wf_index: int, perm_index: int, request: int) -> int:
        new_wf_index = self.space.adjacency[wf_index][request]
        alg_index = self.encode_alg(new_wf_index, perm_index, request)
        return self.alg_vertices[alg_index] - self.adv_cost(wf_index, request)

    def _best_request(self, index: int, allowed: Callable[[int], bool]) -> tuple[int, int]:
        """(new potential, maximizing request or -1) over the allowed requests."""
        wf_index, perm_index = self.decode_adv(index)
        new_pot = SHORT_MIN
        maximizer = -1
        for request in range(self.size):
            if not allowed(request):
                continue
            candidate = self._adv_candidate(wf_index, perm_index, request)
            if candidate > new_pot:
                new_pot = candidate
                maximizer = request
        return new_pot, maximizer

    def _set_adv(self, index: int, new_pot: int) -> bool:
        new_pot = _to_short(new_pot)
        if self.adv_vertices[index] == new_pot:
            return False
        self.adv_vertices[index] = new_pot
        return True

    def _require_last_three(self) -> list[list[int]]:
        if self.last_three_maximizers is None:
            raise RuntimeError("the last three maximizers are not initialised")
        return self.last_three_maximizers

    def update_adv(self) -> bool:
        """Set every adversary potential to its best request value."""
        changed = False
        for index in range(self.advsize):
            new_pot, _ = self._best_request(index, lambda request: True)
            changed |= self._set_adv(index, new_pot)
        return changed

    def update_adv_save_last_three(self, iteration: int) -> bool:
        """Like update_adv, remembering the maximizing request cyclically by iteration."""
        last_three = self._require_last_three()
        slot = iteration % 3
        changed = False
        for index in range(self.advsize):
            new_pot, maximizer = self._best_request(index, lambda request: True)
            if self._set_adv(index, new_pot):
                changed = True
                if not triple_contains(last_three[index], maximizer):
                    last_three[index][slot] = maximizer
        return changed

    def update_adv_only_use_last_three(self, iteration: int) -> bool:
        """Like update_adv, but only the remembered requests may be presented."""
        last_three = self._require_last_three()
        changed = False
        for index in range(self.advsize):
            triple = last_three[index]
            new_pot, _ = self._best_request(index, lambda request: triple_contains(triple, request))
            changed |= self._set_adv(index, new_pot)
        return changed

    # Algorithm side.

    def _set_alg(self, index: int, new_pot: int) -> bool:
        new_pot = _to_short(new_pot)
        if self.alg_vertices[index] == new_pot:
            return False
        self.alg_vertices[index] = new_pot
        return True

    def _cheapest(self, wf_index: int, perm_index: int, req: int, targets: Iterable[int]) -> int:
        new_pot = SHORT_MAX
        for p in targets:
            candidate = self.adv_vertices[self.encode_adv(wf_index, p)] + self.alg_cost(perm_index, p, req)
            if candidate < new_pot:
                new_pot = candidate
        return new_pot

    def _update_alg_with(self, targets: Callable[[int, int, int], Iterable[int]]) -> bool:
        changed = False
        for index in range(self.algsize):
            wf_index, perm_index, req = self.decode_alg(index)
            new_pot = self._cheapest(wf_index, perm_index, req, targets(wf_index, perm_index, req))
            changed |= self._set_alg(index, new_pot)
        return changed

    def _require_wfa_minima(self) -> list[int]:
        if self.wfa_minimum_values is None:
            raise RuntimeError("the graph was built without WFA adjacencies")
        return self.wfa_minimum_values

    def update_alg(self) -> bool:
        """ALG may move to any list."""
        return self._update_alg_with(lambda wf, perm, req: range(self.perm_count))

    def update_alg_wfa(self) -> bool:
        """ALG may only move to lists minimizing the work function algorithm's cost."""

        def targets(wf_index: int, perm_index: int, req: int) -> list[int]:
            minimum = self.workfunction_algorithm_minimum(wf_index, perm_index)
            return [
                p for p in range(self.perm_count)
                if self.wfa_cost(wf_index, perm_index, p) <= minimum
            ]

        return self._update_alg_with(targets)

    def update_alg_wfa_faster(self) -> bool:
        """As update_alg_wfa, using the precomputed WFA minima."""
        minima = self._require_wfa_minima()

        def targets(wf_index: int, perm_index: int, req: int) -> list[int]:
            minimum = minima[self.encode_adv(wf_index, perm_index)]
            return [
                p for p in range(self.perm_count)
                if self.wfa_cost(wf_index, perm_index, p) == minimum
            ]

        return self._update_alg_with(targets)

    def update_alg_wfa_unique_only(self) -> bool:
        """ALG follows a unique WFA minimizer; where there is none the potential is 0."""
        minima = self._require_wfa_minima()
        changed = False
        for index in range(self.algsize):
            wf_index, perm_index, req = self.decode_alg(index)
            minimum = minima[self.encode_adv(wf_index, perm_index)]
            unique, p = self.wfa_unique_minimizer(wf_index, perm_index)
            if unique:
                if self.wfa_cost(wf_index, perm_index, p) != minimum:
                    continue
                new_pot = self._cheapest(wf_index, perm_index, req, (p,))
            else:
                new_pot = 0
            changed |= self._set_alg(index, new_pot)
        return changed

    def update_alg_stay_or_mtf(self) -> bool:
        """ALG either stays or moves the request to the front."""

        def targets(wf_index: int, perm_index: int, req: int) -> tuple[int, int]:
            return perm_index, self.perms[perm_index].mtf(req).id()

        return self._update_alg_with(targets)

    def update_alg_request_moves_forward(self) -> bool:
        """ALG may move the requested item forward to any position."""

        def targets(wf_index: int, perm_index: int, req: int) -> list[int]:
            perm = self.perms[perm_index]
            request_pos = perm.position(req)
            return [perm.move_forward(req, target).id() for target in range(request_pos + 1)]

        return self._update_alg_with(targets)

    def update_alg_single_swap(self) -> bool:
        """ALG may stay or perform one adjacent swap."""

        def targets(wf_index: int, perm_index: int, req: int) -> list[int]:
            perm = self.perms[perm_index]
            return [
                perm.swap(swap).id() if swap < self.size - 1 else perm_index
                for swap in range(self.size)
            ]

        return self._update_alg_with(targets)

    # Driver.

    def iterate_potentials(
        self,
        adv_update: Callable[[int], bool] | None = None,
        alg_update: Callable[[], bool] | None = None,
    ) -> PotentialOutcome:
        """Alternate updates until the minimum adversary potential reaches 1 or nothing changes.

        adv_update is called with the iteration number, alg_update with no
        arguments; they default to update_adv and update_alg_request_moves_forward.
        """
        if adv_update is None:
            adv_update = lambda iteration: self.update_adv()  # noqa: E731
        if alg_update is None:
            alg_update = self.update_alg_request_moves_forward

        anything_updated = True
        iteration = 0
        while anything_updated:
            log.debug("Iteration %d.", iteration)
            if self.min_adv_potential() <= 0:
                adv_updated = adv_update(iteration)
                alg_updated = alg_update()
                anything_updated = adv_updated or alg_updated
            if self.min_adv_potential() >= 1:
                log.debug("The min ADV potential is higher than one.")
                return PotentialOutcome(True, iteration)
            iteration += 1
        log.debug("The potentials have stabilized with min potential 0.")
        return PotentialOutcome(False, iteration)