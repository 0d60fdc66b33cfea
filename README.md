# listadversary

A library for searching for lower bounds on the competitive ratio of list
update algorithms. An instance is modelled as a game between an adversary
(OPT), which presents requests and rearranges its list, and an online
algorithm (ALG), which pays for accesses and rearrangements. Potentials are
propagated through the game graph until either the adversary is shown to win
at the given ratio or the potentials settle.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

Running the tests needs pytest:

```
pip install .[test]
pytest
```

## Modules

- `listadversary.common`: factorial tables (`factorials`), the canonical
  ordering of sorted pairs (`canonical_ordering`, `max_memory_pairs`), the
  parametrised edge weight `edge_weight(opt_cost, alg_cost, ratio)`,
  `diameter_bound`, `triple_contains`, `format_array`, and the standard data
  file names as a `DataFiles` record from `data_files(size, ratio)`.
- `listadversary.perms`: permutations of small lists as tuples: `identity`,
  `full_inverse`, `next_permutation`, `iterate_permutations`, `lexindex`,
  `perm_from_index`, `swapped`, `inverse`, `recompute_alg_perm`,
  `inversion_count`, `format_permutation`, and the immutable `Permutation`
  class with `id`, `swap`, `move_forward`, `mtf`, `position`, `compose_right`,
  `inversions` and `inversions_wrt`.
- `listadversary.memory`: the algorithm's memory states. `BitfieldMemory`
  keeps one bit per list position, `PairsMemory` one bit per unordered pair;
  both follow a relabelling of the list with `recompute`.
- `listadversary.storage`: `write_distance_array` and `read_distance_array`
  store a list of floats as a 64-bit little-endian length followed by 32-bit
  floats; `distance_file_name(size)` gives the default file name. A truncated
  file raises `ValueError`.
- `listadversary.flatset`: `CharFlatSet`, a lossy fixed-size membership table
  for 64-bit hashes (slot chosen by the top bits, lowest byte stored), with the
  helpers `quicklog`, `logpart`, `two_to` and `power_of_two_below`.
- `listadversary.zobrist`: `DoubleZobrist`, seeded Zobrist tables that hash a
  work function's values into a `DoubleHash`.
- `listadversary.graph`: `AdversaryGraph`, the explicit graph of
  (ALG list, `BitfieldMemory`) states. Every vertex has one presentation edge
  per item and one translation edge per adjacent swap of OPT's list. It offers
  vertex lookup, `dfs_reachability`, `locate_edge`, `total_alg_cost`,
  `total_opt_cost` and text descriptions of the graph and of vertex sequences.
- `listadversary.bellman_ford`: `bellman_ford(graph)` searches the reachable
  part of an `AdversaryGraph` for a negative cycle and returns a
  `NegativeCycle` (vertex ids, ALG cost, OPT cost, `ratio`) or `None`;
  `extract_cycle` recovers a cycle from a predecessor list.
- `listadversary.game_core`, `listadversary.game_updates`,
  `listadversary.game_decisions`, `listadversary.game_report`: the bipartite
  game graph over a `WorkfunctionSpace`. `GameGraph` (the most complete class)
  holds adversary and algorithm potentials as 16-bit values and:
  - updates them with `update_adv`, `update_adv_save_last_three`,
    `update_adv_only_use_last_three` and, for ALG, `update_alg` (any move),
    `update_alg_wfa`, `update_alg_wfa_faster`, `update_alg_wfa_unique_only`
    (work function algorithm), `update_alg_stay_or_mtf`,
    `update_alg_request_moves_forward` and `update_alg_single_swap`;
  - runs them to a conclusion with `iterate_potentials`, which returns whether
    OPT won and after how many iterations;
  - writes and loads potentials, last-three maximizers, reachable vertex lists
    and decision maps in binary files;
  - restricts the adversary to reachable vertices and a decision map
    (`wfa_reachable_via`, `opt_wins_via_decisions`,
    `lowerbound_via_last_choices`, `lowerbound_via_decisions`);
  - produces text reports (`potential_report`, `top_three_for_reachable`,
    `opt_decision_map_report`) and counts the vertices met by
    `wfa_lowerbound_potential_propagation`.

Progress messages go to the standard `logging` module at debug level.

## Examples

```python
from listadversary.perms import iterate_permutations, lexindex, perm_from_index

assert len(list(iterate_permutations(4))) == 24
assert lexindex((2, 0, 3, 1)) == 13
assert perm_from_index(13, 4) == (2, 0, 3, 1)
```

```python
from listadversary.memory import PairsMemory

memory = PairsMemory(size=4)
memory.flag_sorted_pair(2, 3)
memory.flag_sorted_pair(1, 3)
memory.flag_sorted_pair(0, 1)
relabelled = memory.recompute((1, 2, 3, 0))
print(relabelled.flagged_pairs())  # [(0, 2), (0, 3), (1, 2)]
```

An `AdversaryGraph` needs the algorithm's single step as a function of
(list, memory, requested item) returning (new list, new memory, cost):

```python
from listadversary.bellman_ford import bellman_ford
from listadversary.graph import AdversaryGraph


def move_to_front(perm, memory, item):
    position = perm.index(item)
    new_perm = (item,) + tuple(x for x in perm if x != item)
    return new_perm, memory, position + 1


graph = AdversaryGraph(size=3, alg_step=move_to_front, ratio=2.0)
graph.dfs_reachability()
cycle = bellman_ford(graph)
print(cycle if cycle is None else (cycle.cycle, cycle.ratio))
```

## What the package does not do

- It contains no online algorithm of its own for `AdversaryGraph`: the step
  function must be supplied by the caller.
- It does not enumerate the reachable work functions. A `WorkfunctionSpace`
  (work function values, adjacency by request and OPT's update costs) must be
  built by the caller before a `GameGraph` can be created.
- It has no command-line program; it is used as a library.