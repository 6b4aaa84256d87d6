"""Randomness sources producing `BigInt` values.

Everything in the toolkit that consumes entropy takes a `RandomSource` argument instead of reaching for a process-wide
generator. `SystemRandomSource` draws from the OS CSPRNG via `secrets`; `SeededRandomSource` is reproducible and meant
for tests and demonstrations only. A single `SeededRandomSource` must not be shared between threads.

Typical usage example:

    rng = SeededRandomSource(1234)
    k = rng.randrange(1, p - 1)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import random
import secrets

from hacrypt.bigint import BigInt
from hacrypt.bigint import LIMB_BITS


class RandomSource:
    """Template for randomness sources.

    Subclasses supply uniformly random 32-bit words via `_word`, every other draw is derived from it.
    """

    def _word(self) -> int:
        raise NotImplementedError

    def randbits(self, k: int) -> BigInt:
        """A uniformly random non-negative integer below `2**k`."""
        if k < 0:
            raise ValueError("Number of bits must be non-negative")
        whole, rest = divmod(k, LIMB_BITS)
        limbs = [self._word() for _ in range(whole)]
        if rest:
            limbs.append(self._word() >> (LIMB_BITS - rest))
        return BigInt.from_limbs(limbs)

    def randbelow(self, bound: BigInt | int) -> BigInt:
        """A uniformly random integer in `[0, bound)`, by rejection sampling.

        Args:
            bound: Exclusive upper bound, must be positive.

        Returns:
            The drawn integer.

        Raises:
            ValueError: If `bound` is not positive.
        """
        bound = BigInt(bound)
        if bound <= 0:
            raise ValueError("Bound must be positive")
        k = bound.bit_length()
        while True:
            candidate = self.randbits(k)
            if candidate < bound:
                return candidate

    def randrange(self, lower: BigInt | int, upper: BigInt | int) -> BigInt:
        """A uniformly random integer in `[lower, upper)`."""
        lower, upper = BigInt(lower), BigInt(upper)
        if lower >= upper:
            raise ValueError("Empty range")
        return lower + self.randbelow(upper - lower)


class SystemRandomSource(RandomSource):
    """Cryptographically secure source backed by `secrets`."""

    def _word(self) -> int:
        return secrets.randbits(LIMB_BITS)


class SeededRandomSource(RandomSource):
    """Deterministic source backed by a seeded `random.Random`. Not for key material anyone relies on."""

    def __init__(self, seed: int | str | bytes | None = None) -> None:
        self._rng = random.Random(seed)

    def _word(self) -> int:
        return self._rng.getrandbits(LIMB_BITS)


def resolve(rng: RandomSource | None) -> RandomSource:
    """Return `rng`, or a fresh OS-backed source when none was injected."""
    return SystemRandomSource() if rng is None else rng
