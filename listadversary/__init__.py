"""Permutations, algorithm memories, adversary graphs and game-graph potentials for list update lower bounds."""

__version__ = "0.1.0"