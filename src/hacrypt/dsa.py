"""The Digital Signature Algorithm over a prime-order subgroup of Z*_p (HAC 11.56, FIPS 186).

Typical usage example:

    pair = generate_dsa(512, rng)
    sig = sign(pair.private, digest("hello"), rng)
    assert verify(pair.public, digest("hello"), sig)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging

from hacrypt.bigint import BigInt
from hacrypt.entropy import RandomSource
from hacrypt.entropy import resolve
from hacrypt.errors import InvalidMessageError
from hacrypt.errors import SigningError
from hacrypt.keys import DSAPrivateKey
from hacrypt.keys import DSAPublicKey
from hacrypt.keys import Signature
from hacrypt.modular import mod_exp
from hacrypt.modular import mod_inverse

_log = logging.getLogger(__name__)

SIGN_TRIES: int = 64


def _reduce_digest(digest: BigInt | int, q: BigInt) -> BigInt:
    digest = BigInt(digest)
    if digest < 0:
        raise InvalidMessageError("Digest must be non-negative")
    return digest % q


def sign(key: DSAPrivateKey, digest: BigInt | int, rng: RandomSource | None = None) -> Signature:
    """Signs a message digest.

    Computes `r = (g^k mod p) mod q` and `s = k^-1 (h + x r) mod q` for a random `k` in `[1, q-1]`, redrawing `k`
    whenever `r` or `s` comes out as zero.

    Args:
        key: The signer's private key.
        digest: Non-negative digest of the message, reduced modulo `q`.
        rng: Source of the ephemeral exponent. Defaults to a fresh OS-backed source.

    Returns:
        The `(r, s)` signature.

    Raises:
        InvalidMessageError: If the digest is negative.
        SigningError: If every ephemeral value within the retry bound was degenerate.
    """
    rng = resolve(rng)
    h = _reduce_digest(digest, key.q)
    for attempt in range(SIGN_TRIES):
        k = rng.randrange(1, key.q)
        r = mod_exp(key.g, k, key.p) % key.q
        if not r:
            continue
        s = mod_inverse(k, key.q) * (h + key.x * r) % key.q
        if s:
            if attempt:
                _log.debug("DSA signature needed %d ephemeral redraws", attempt)
            return Signature(r, s)
    raise SigningError(f"No usable ephemeral value within {SIGN_TRIES} tries")


def verify(key: DSAPublicKey, digest: BigInt | int, signature: Signature | tuple) -> bool:
    """Verifies a signature.

    From `(r, s)` computes `w = s^-1 mod q`, `u1 = h w mod q`, `u2 = r w mod q` and
    `v = (g^u1 y^u2 mod p) mod q`, accepting iff `v == r`.

    Args:
        key: The signer's public key.
        digest: Non-negative digest of the message.
        signature: The `(r, s)` pair.

    Returns:
        True if the signature matches the digest, False otherwise, including for out-of-range components.
    """
    r, s = (BigInt(v) for v in signature)
    if not 0 < r < key.q or not 0 < s < key.q:
        return False
    h = _reduce_digest(digest, key.q)
    w = mod_inverse(s, key.q)
    u1 = h * w % key.q
    u2 = r * w % key.q
    v = mod_exp(key.g, u1, key.p) * mod_exp(key.y, u2, key.p) % key.p % key.q
    return v == r
