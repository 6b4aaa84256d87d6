"""Primality testing and random prime generation over `BigInt`.

Candidates are first run through trial division by a cached table of small primes, which is conclusive for anything
below the square of the largest table entry, and otherwise through the Miller-Rabin test as described in HAC 4.24 and
FIPS 186-5 Appendix B.3.

Typical usage example:

    get_pre_primes(12000)
    rng = SeededRandomSource(7)
    p = random_prime(128, rng)
    assert is_probable_prime(p, rng=rng)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging

from hacrypt.bigint import BigInt
from hacrypt.bigint import ONE
from hacrypt.entropy import RandomSource
from hacrypt.entropy import resolve
from hacrypt.errors import KeyGenerationError
from hacrypt.modular import mod_exp

_log = logging.getLogger(__name__)

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_DEFAULT_SIEVE_BOUND: int = 10000
_SEARCH_FACTOR: int = 20
_MIN_SEARCH: int = 100
_SAFE_SEARCH_FACTOR: int = 10
_MIN_SAFE_SEARCH: int = 1000


def _sieve(n: int = _DEFAULT_SIEVE_BOUND) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes over odd numbers only, sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = _DEFAULT_SIEVE_BOUND, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    The table is cached module-wide and only ever replaced as a whole. Regeneration occurs if the requested range is
    greater than the cached one, forced by `change` or the cache is empty.

    Args:
        n: The number up to which to generate primes. Must be >= 0.
            Ignored if smaller or equal than the cached bound, `change` is False and the cache is non-empty.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order.

    Raises:
        ValueError: If `n` is negative.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: BigInt) -> tuple[bool, bool]:
    """Check the provided `no` against the known small primes.

    Args:
         no: The number to check, at least 2.

    Returns:
        Pair of (may be prime, verdict is conclusive).
    """
    for prime in get_pre_primes():
        if no < prime * prime:
            return True, True
        if no % prime == 0:
            return False, True
    return True, False


def _default_rounds(bits: int) -> int:
    """Miller-Rabin iterations per FIPS 186-5 Appendix C.1."""
    if bits <= 512:
        return 40
    if bits <= 1024:
        return 56
    if bits <= 1536:
        return 64
    if bits <= 2048:
        return 70
    return 74


def _miller_rabin(w: BigInt, iters: int, rng: RandomSource) -> bool:
    """Perform Miller-Rabin primality test.

    Writes `w - 1 = 2**a * m` with `m` odd, then for each random base `b` in `[2, w - 2]` checks that the sequence
    `b**m, b**(2m), ...` either starts at 1 or reaches `w - 1`.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.
        rng: Source of the random bases.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    if w.is_even():
        return False
    tw = w - ONE
    a = tw.lowest_set_bit()
    m = tw >> a
    for _ in range(iters):
        b = rng.randrange(2, tw)
        z = mod_exp(b, m, w)
        if z == 1 or z == tw:
            continue
        for _ in range(1, a):
            z = z * z % w
            if z == tw:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def is_probable_prime(n: BigInt | int, rounds: int | None = None, rng: RandomSource | None = None) -> bool:
    """Performs a composite primality test: trial division first, then Miller-Rabin.

    Numbers below the square of the largest cached small prime are decided exactly by trial division. Larger numbers
    pass through Miller-Rabin, wrongly accepting a composite with probability at most `4**-rounds`.

    Args:
        n: The candidate to test.
        rounds: Number of Miller-Rabin iterations to perform.
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1.
        rng: Source of Miller-Rabin bases. Defaults to a fresh OS-backed source.

    Returns:
        True if `n` is (probably) prime, False otherwise.

    Raises:
        ValueError: If `rounds` is given and below 1.
    """
    if rounds is not None and rounds < 1:
        raise ValueError("rounds must be >= 1")
    n = BigInt(n)
    if n < 2:
        return False
    maybe, conclusive = _trial_division(n)
    if conclusive:
        return maybe
    if rounds is None:
        rounds = _default_rounds(n.bit_length())
    return _miller_rabin(n, rounds, resolve(rng))


def _candidate(bit_length: int, rng: RandomSource, top_bits: int) -> BigInt:
    mask = ONE
    for i in range(top_bits):
        mask = mask | (ONE << (bit_length - 1 - i))
    return rng.randbits(bit_length) | mask


def random_prime(bit_length: int,
                 rng: RandomSource | None = None,
                 rounds: int | None = None,
                 top_bits: int = 1) -> BigInt:
    """Generate a probable prime of exactly `bit_length` bits.

    Each candidate is drawn uniformly with its top `top_bits` bits and its lowest bit forced on, then tested with
    `is_probable_prime`. Setting two top bits guarantees that the product of two such primes has exactly the combined
    bit length.

    Args:
        bit_length: Size of the prime in bits, at least 2 (at least 3 when `top_bits` is 2).
        rng: Source of candidates and Miller-Rabin bases. Defaults to a fresh OS-backed source.
        rounds: Miller-Rabin iterations, passed to `is_probable_prime`.
        top_bits: Number of leading bits forced to 1, either 1 or 2.

    Returns:
        A probable prime.

    Raises:
        KeyGenerationError: If `max(100, 20 * bit_length)` candidates were all composite.
        ValueError: If the size or `top_bits` is invalid.
    """
    if top_bits not in (1, 2):
        raise ValueError("top_bits must be 1 or 2")
    if bit_length < top_bits + 1:
        raise ValueError(f"bit_length must be at least {top_bits + 1}")
    rng = resolve(rng)
    rep_cap = max(_MIN_SEARCH, _SEARCH_FACTOR * bit_length)
    for attempt in range(1, rep_cap + 1):
        candidate = _candidate(bit_length, rng, top_bits)
        if is_probable_prime(candidate, rounds, rng):
            _log.debug("Found %d-bit probable prime after %d candidates", bit_length, attempt)
            return candidate
    raise KeyGenerationError(
        f"Ran an improbable {rep_cap} loops with no {bit_length}-bit prime found. Check the random source.")


def random_safe_prime(bit_length: int, rng: RandomSource | None = None, rounds: int | None = None) -> BigInt:
    """Generate a safe prime `p = 2q + 1`, with `q` also prime, of exactly `bit_length` bits.

    Args:
        bit_length: Size of `p` in bits, at least 3.
        rng: Source of candidates and Miller-Rabin bases. Defaults to a fresh OS-backed source.
        rounds: Miller-Rabin iterations, passed to `is_probable_prime`.

    Returns:
        A probable safe prime.

    Raises:
        KeyGenerationError: If `max(1000, 10 * bit_length**2)` candidates failed.
        ValueError: If the size is too small.
    """
    if bit_length < 3:
        raise ValueError("bit_length must be at least 3")
    rng = resolve(rng)
    rep_cap = max(_MIN_SAFE_SEARCH, _SAFE_SEARCH_FACTOR * bit_length * bit_length)
    for attempt in range(1, rep_cap + 1):
        q = _candidate(bit_length - 1, rng, 1)
        p = (q << 1) + ONE
        # Cheap exact screening of both halves before any Miller-Rabin round.
        if not _trial_division(q)[0] or not _trial_division(p)[0]:
            continue
        if is_probable_prime(q, rounds, rng) and is_probable_prime(p, rounds, rng):
            _log.debug("Found %d-bit safe prime after %d candidates", bit_length, attempt)
            return p
    raise KeyGenerationError(
        f"Ran an improbable {rep_cap} loops with no {bit_length}-bit safe prime found. Check the random source.")
