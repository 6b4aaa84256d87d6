"""Key generation for RSA, ElGamal and DSA.

Every generator takes the requested size in bits and an injected `RandomSource`; the cost is dominated by the prime
searches in `hacrypt.primes`. Search loops are bounded and raise `KeyGenerationError` when exhausted.

Typical usage example:

    rng = SeededRandomSource(42)
    rsa_pair = generate_rsa(512, rng)
    elg_pair = generate_elgamal(256, rng, safe_prime=True)
    dsa_pair = generate_dsa(512, rng)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging

from hacrypt.bigint import BigInt
from hacrypt.bigint import ONE
from hacrypt.entropy import RandomSource
from hacrypt.entropy import resolve
from hacrypt.errors import KeyGenerationError
from hacrypt.keys import DSAPrivateKey
from hacrypt.keys import ElGamalPrivateKey
from hacrypt.keys import Keypair
from hacrypt.keys import RSAPrivateKey
from hacrypt.keys import Scheme
from hacrypt.modular import gcd
from hacrypt.modular import mod_exp
from hacrypt.modular import mod_inverse
from hacrypt.primes import get_pre_primes
from hacrypt.primes import is_probable_prime
from hacrypt.primes import random_prime
from hacrypt.primes import random_safe_prime

_log = logging.getLogger(__name__)

DEFAULT_PUBLIC_EXPONENT: int = 65537
_EXPONENT_TRIES: int = 64
_GENERATOR_TRIES: int = 100
_PRIME_PAIR_TRIES: int = 100
_DSA_Q_TRIES: int = 16
_MIN_RSA_BITS: int = 16
_MIN_GROUP_BITS: int = 8
_MIN_DSA_BITS: int = 16


def _choose_exponent(phi: BigInt, rng: RandomSource, preferred: int | None) -> BigInt:
    """Pick a public exponent coprime to `phi`.

    The preferred exponent is used if it is valid, otherwise random odd exponents in `[3, phi)` are drawn.

    Raises:
        KeyGenerationError: If no valid exponent turned up within the retry bound.
    """
    if preferred is not None:
        e = BigInt(preferred)
        if 1 < e < phi and gcd(e, phi) == 1:
            return e
        _log.debug("Public exponent %s unusable for this modulus, drawing one at random", e)
    if phi > 3:
        for _ in range(_EXPONENT_TRIES):
            e = rng.randrange(3, phi) | ONE
            if e < phi and gcd(e, phi) == 1:
                return e
    raise KeyGenerationError(f"No public exponent coprime to phi found within {_EXPONENT_TRIES} tries")


def _rsa_keypair(p: BigInt, q: BigInt, e: BigInt) -> Keypair:
    n = p * q
    phi = (p - ONE) * (q - ONE)
    d = mod_inverse(e, phi)
    priv = RSAPrivateKey(n, e, d, p, q)
    return Keypair(Scheme.RSA, priv.public, priv)


def generate_rsa(bit_length: int,
                 rng: RandomSource | None = None,
                 public_exponent: int | None = DEFAULT_PUBLIC_EXPONENT,
                 rounds: int | None = None) -> Keypair:
    """Generates an RSA key pair with a modulus of exactly `bit_length` bits.

    Draws two distinct primes of `ceil(k/2)` and `floor(k/2)` bits with their two top bits set, so that `n = p*q`
    has exactly `k` bits, computes `phi = (p-1)(q-1)`, picks `e` and derives `d = e^-1 mod phi`.

    Args:
        bit_length: The modulus size in bits, at least 16.
        rng: Source of randomness. Defaults to a fresh OS-backed source.
        public_exponent: The preferred public exponent. Defaults (and recommended) to use 65537.
            If it is not coprime to phi, or `None` is given, a random exponent is drawn instead.
        rounds: Miller-Rabin iterations for the prime searches.

    Returns:
        The RSA keypair, with the private key carrying its CRT components.

    Raises:
        KeyGenerationError: If a prime, distinct prime pair or exponent could not be found within the retry bounds.
        ValueError: If `bit_length` is too small.
    """
    if bit_length < _MIN_RSA_BITS:
        raise ValueError(f"bit_length must be at least {_MIN_RSA_BITS}")
    rng = resolve(rng)
    p_bits = (bit_length + 1) // 2
    q_bits = bit_length - p_bits
    p = random_prime(p_bits, rng, rounds, top_bits=2)
    for _ in range(_PRIME_PAIR_TRIES):
        q = random_prime(q_bits, rng, rounds, top_bits=2)
        if q != p:  # (Un)Likely story.
            break
    else:
        raise KeyGenerationError("Could not draw two distinct primes")
    phi = (p - ONE) * (q - ONE)
    e = _choose_exponent(phi, rng, public_exponent)
    pair = _rsa_keypair(p, q, e)
    _log.debug("Generated %d-bit RSA key with e=%s", pair.public.n.bit_length(), e)
    return pair


def rsa_from_primes(p: BigInt | int, q: BigInt | int, e: BigInt | int = DEFAULT_PUBLIC_EXPONENT) -> Keypair:
    """Builds an RSA key pair from known primes and a public exponent.

    Args:
        p: Private prime 1.
        q: Private prime 2, distinct from `p`.
        e: The public exponent, coprime to `(p-1)(q-1)`.

    Returns:
        The RSA keypair.

    Raises:
        KeyGenerationError: If the primes are equal or composite, or `e` is not a valid exponent for them.
    """
    p, q, e = BigInt(p), BigInt(q), BigInt(e)
    if p == q:
        raise KeyGenerationError("p and q must be distinct")
    if not is_probable_prime(p) or not is_probable_prime(q):
        raise KeyGenerationError("p and q must be prime")
    phi = (p - ONE) * (q - ONE)
    if not 1 < e < phi or gcd(e, phi) != 1:
        raise KeyGenerationError(f"Public exponent {e} is not coprime to phi")
    return _rsa_keypair(p, q, e)


def _split_order(order: BigInt) -> tuple[list[int], BigInt]:
    """Split a group order into its distinct small prime factors and the cofactor free of them.

    Returns:
        Pair of (small primes dividing `order`, part of `order` with no prime factor in the sieve).
    """
    small = get_pre_primes()
    factors = []
    rest = order
    for prime in small:
        if rest < prime * prime:
            break
        if rest % prime == 0:
            factors.append(prime)
            while rest % prime == 0:
                rest //= prime
    if 1 < rest <= small[-1]:
        factors.append(int(rest))
        rest = ONE
    return factors, rest


def _find_generator(p: BigInt, rng: RandomSource) -> BigInt:
    """Find an element of large order in Z*_p.

    The small prime factors of `p - 1` are split off by trial division. A candidate `g` must satisfy
    `g^((p-1)/l) != 1` for every such prime `l`, so their full prime powers divide the order of `g`. If a cofactor is
    left over, `g` raised to the smooth part must not be 1 either, so the order also has a prime factor beyond the
    sieve. For a safe prime `p = 2q + 1` this is exactly `g^2 != 1` and `g^q != 1`. When `p - 1` factors completely
    the result generates all of Z*_p.
    """
    order = p - ONE
    factors, cofactor = _split_order(order)
    smooth = order // cofactor
    for _ in range(_GENERATOR_TRIES):
        g = rng.randrange(2, order)
        if any(mod_exp(g, order // f, p) == 1 for f in factors):
            continue
        if cofactor > 1 and mod_exp(g, smooth, p) == 1:
            continue
        return g
    raise KeyGenerationError(f"No generator found within {_GENERATOR_TRIES} tries")


def generate_elgamal(bit_length: int,
                     rng: RandomSource | None = None,
                     safe_prime: bool = False,
                     rounds: int | None = None) -> Keypair:
    """Generates an ElGamal key pair.

    Args:
        bit_length: The size of the prime modulus in bits, at least 8.
        rng: Source of randomness. Defaults to a fresh OS-backed source.
        safe_prime: Whether to require `(p-1)/2` to be prime too, so that `g` generates all of Z*_p.
            Considerably slower.
        rounds: Miller-Rabin iterations for the prime search.

    Returns:
        The ElGamal keypair with `x` in `[1, p-2]` and `y = g^x mod p`.

    Raises:
        KeyGenerationError: If a prime or generator could not be found within the retry bounds.
        ValueError: If `bit_length` is too small.
    """
    if bit_length < _MIN_GROUP_BITS:
        raise ValueError(f"bit_length must be at least {_MIN_GROUP_BITS}")
    rng = resolve(rng)
    if safe_prime:
        p = random_safe_prime(bit_length, rng, rounds)
    else:
        p = random_prime(bit_length, rng, rounds)
    g = _find_generator(p, rng)
    x = rng.randrange(1, p - ONE)
    y = mod_exp(g, x, p)
    priv = ElGamalPrivateKey(p, g, y, x)
    _log.debug("Generated %d-bit ElGamal key (safe prime: %s)", bit_length, safe_prime)
    return Keypair(Scheme.ELGAMAL, priv.public, priv)


def default_q_bits(bit_length: int) -> int:
    """Subgroup order size for a DSA modulus of `bit_length` bits, after the FIPS 186 (L, N) pairs."""
    if bit_length >= 3072:
        return 256
    if bit_length >= 2048:
        return 224
    if bit_length >= 1024:
        return 160
    return bit_length // 2


def _dsa_modulus(q: BigInt, bit_length: int, rng: RandomSource, rounds: int | None) -> BigInt | None:
    """Search for an L-bit prime `p` with `q | p - 1`, after FIPS 186-5 Appendix A.1.1.2 steps 11.1 to 11.10."""
    two_q = q << 1
    top = ONE << (bit_length - 1)
    for _ in range(4 * bit_length):
        x = rng.randbits(bit_length) | top
        p = x - (x % two_q - ONE)
        if p.bit_length() == bit_length and is_probable_prime(p, rounds, rng):
            return p
    return None


def generate_dsa(bit_length: int,
                 rng: RandomSource | None = None,
                 q_bits: int | None = None,
                 rounds: int | None = None) -> Keypair:
    """Generates DSA domain parameters and a key pair.

    Args:
        bit_length: The size L of the prime modulus `p` in bits, at least 16.
        rng: Source of randomness. Defaults to a fresh OS-backed source.
        q_bits: The size N of the subgroup order `q`. Defaults to `default_q_bits(bit_length)`.
        rounds: Miller-Rabin iterations for the prime searches.

    Returns:
        The DSA keypair with `x` in `[1, q-1]` and `y = g^x mod p`.

    Raises:
        KeyGenerationError: If the parameters could not be found within the retry bounds.
        ValueError: If the sizes are invalid.
    """
    if bit_length < _MIN_DSA_BITS:
        raise ValueError(f"bit_length must be at least {_MIN_DSA_BITS}")
    if q_bits is None:
        q_bits = default_q_bits(bit_length)
    if not 2 <= q_bits < bit_length:
        raise ValueError("q_bits must be in range [2, bit_length)")
    rng = resolve(rng)
    for attempt in range(1, _DSA_Q_TRIES + 1):
        q = random_prime(q_bits, rng, rounds)
        p = _dsa_modulus(q, bit_length, rng, rounds)
        if p is not None:
            _log.debug("Found DSA (%d, %d) primes with q attempt %d", bit_length, q_bits, attempt)
            break
    else:
        raise KeyGenerationError(f"No DSA modulus found within {_DSA_Q_TRIES} subgroup primes")
    cofactor = (p - ONE) // q
    for _ in range(_GENERATOR_TRIES):
        g = mod_exp(rng.randrange(2, p - ONE), cofactor, p)
        if g != 1:
            break
    else:
        raise KeyGenerationError(f"No DSA generator found within {_GENERATOR_TRIES} tries")
    x = rng.randrange(1, q)
    y = mod_exp(g, x, p)
    priv = DSAPrivateKey(p, q, g, y, x)
    return Keypair(Scheme.DSA, priv.public, priv)
