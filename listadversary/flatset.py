"""A lossy hash set keyed by the top bits of 64-bit hashes, storing one byte per slot."""

from __future__ import annotations

import logging

_MASK64 = (1 << 64) - 1

log = logging.getLogger(__name__)


def quicklog(x: int) -> int:
    """Floor of log2(x); 0 for x <= 1."""
    return max(x.bit_length() - 1, 0)


def logpart(x: int, log: int) -> int:
    """The top log bits of the 64-bit value x."""
    if not 0 <= log <= 64:
        raise ValueError("log must be between 0 and 64")
    return (x & _MASK64) >> (64 - log)


def two_to(x: int) -> int:
    """2 to the power x."""
    return 1 << x


def power_of_two_below(x: int) -> int:
    """The largest power of two not exceeding x (1 for x <= 1)."""
    return two_to(quicklog(x))


class CharFlatSet:
    """Approximate membership table: the slot is chosen by the top hash bits, the byte kept is the lowest."""

    def __init__(self, logbytes: int, descriptor: str = "") -> None:
        if not 0 <= logbytes <= 64:
            raise ValueError("logbytes must be between 0 and 64")
        self.htsize = power_of_two_below(two_to(logbytes))
        self.logsize = quicklog(self.htsize)
        self.descriptor = descriptor
        self.collisions = 0
        self.insertions = 0
        self._table = bytearray(self.htsize)
        log.debug(
            "Creating %s state cache with %d elements (logsize %d).",
            descriptor, self.htsize, self.logsize,
        )

    def trim(self, hash_value: int) -> int:
        """Slot index of a hash."""
        return logpart(hash_value, self.logsize)

    def lastchar(self, hash_value: int) -> int:
        """Lowest byte of a hash."""
        return hash_value & 0xFF

    def insert(self, hash_value: int) -> None:
        self.insertions += 1
        pos = self.trim(hash_value)
        if self._table[pos] != 0:
            self.collisions += 1
        self._table[pos] = self.lastchar(hash_value)

    def __contains__(self, hash_value: int) -> bool:
        return self._table[self.trim(hash_value)] == self.lastchar(hash_value)

    def __len__(self) -> int:
        return self.htsize