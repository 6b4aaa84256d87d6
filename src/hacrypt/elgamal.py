"""ElGamal public-key encryption (HAC 8.18) and ElGamal signatures (HAC 11.64).

Both operations draw a fresh ephemeral exponent per call, so encrypting or signing the same input twice normally gives
different outputs. Decryption and verification are deterministic.

Typical usage example:

    pair = generate_elgamal(256, rng)
    ct = encrypt(pair.public, 1234, rng)
    assert decrypt(pair.private, ct) == 1234
    sig = sign(pair.private, digest("hello"), rng)
    assert verify(pair.public, digest("hello"), sig)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging

from hacrypt.bigint import BigInt
from hacrypt.bigint import ONE
from hacrypt.entropy import RandomSource
from hacrypt.entropy import resolve
from hacrypt.errors import InvalidMessageError
from hacrypt.errors import NoInverseError
from hacrypt.errors import SigningError
from hacrypt.keys import ElGamalCiphertext
from hacrypt.keys import ElGamalPrivateKey
from hacrypt.keys import ElGamalPublicKey
from hacrypt.keys import Signature
from hacrypt.modular import mod_exp
from hacrypt.modular import mod_inverse

_log = logging.getLogger(__name__)

SIGN_TRIES: int = 64


def encrypt(key: ElGamalPublicKey, message: BigInt | int, rng: RandomSource | None = None) -> ElGamalCiphertext:
    """Encrypts an integer message under a fresh ephemeral exponent.

    Computes `c1 = g^k mod p` and `c2 = m * y^k mod p` for a random `k` in `[1, p-2]`.

    Args:
        key: The recipient's public key.
        message: The message, in range `[0, p-1]`.
        rng: Source of the ephemeral exponent. Defaults to a fresh OS-backed source.

    Returns:
        The ciphertext pair.

    Raises:
        InvalidMessageError: If the message is out of range for the key.
    """
    m = BigInt(message)
    if not 0 <= m < key.p:
        raise InvalidMessageError("Message representative must be in range [0, p-1]")
    k = resolve(rng).randrange(1, key.p - ONE)
    shared = mod_exp(key.y, k, key.p)
    return ElGamalCiphertext(mod_exp(key.g, k, key.p), m * shared % key.p)


def decrypt(key: ElGamalPrivateKey, ciphertext: ElGamalCiphertext | tuple) -> BigInt:
    """Decrypts a ciphertext pair, `m = c2 * (c1^x)^-1 mod p`.

    Args:
        key: The private key.
        ciphertext: The `(c1, c2)` pair.

    Returns:
        The message.

    Raises:
        InvalidMessageError: If `c1` is not in `[1, p-1]` or `c2` is not in `[0, p-1]`.
    """
    c1, c2 = (BigInt(c) for c in ciphertext)
    if not 1 <= c1 < key.p or not 0 <= c2 < key.p:
        raise InvalidMessageError("Ciphertext components out of range for the key")
    shared = mod_exp(c1, key.x, key.p)
    return c2 * mod_inverse(shared, key.p) % key.p


def _reduce_digest(digest: BigInt | int, order: BigInt) -> BigInt:
    digest = BigInt(digest)
    if digest < 0:
        raise InvalidMessageError("Digest must be non-negative")
    return digest % order


def sign(key: ElGamalPrivateKey, digest: BigInt | int, rng: RandomSource | None = None) -> Signature:
    """Signs a message digest.

    Draws `k` in `[1, p-2]` with `gcd(k, p-1) = 1` and computes `r = g^k mod p`, `s = k^-1 (h - x r) mod (p-1)`.
    Non-invertible `k` and `s = 0` are degenerate and trigger a fresh draw.

    Args:
        key: The signer's private key.
        digest: Non-negative digest of the message, reduced modulo `p - 1`.
        rng: Source of the ephemeral exponent. Defaults to a fresh OS-backed source.

    Returns:
        The `(r, s)` signature.

    Raises:
        InvalidMessageError: If the digest is negative.
        SigningError: If every ephemeral value within the retry bound was degenerate.
    """
    rng = resolve(rng)
    order = key.p - ONE
    h = _reduce_digest(digest, order)
    for attempt in range(SIGN_TRIES):
        k = rng.randrange(1, order)
        try:
            k_inv = mod_inverse(k, order)
        except NoInverseError:
            continue
        r = mod_exp(key.g, k, key.p)
        s = k_inv * (h - key.x * r) % order
        if s:
            if attempt:
                _log.debug("ElGamal signature needed %d ephemeral redraws", attempt)
            return Signature(r, s)
    raise SigningError(f"No usable ephemeral value within {SIGN_TRIES} tries")


def verify(key: ElGamalPublicKey, digest: BigInt | int, signature: Signature | tuple) -> bool:
    """Verifies a signature by checking `y^r * r^s ≡ g^h (mod p)`.

    Args:
        key: The signer's public key.
        digest: Non-negative digest of the message.
        signature: The `(r, s)` pair.

    Returns:
        True if the signature matches the digest, False otherwise, including for out-of-range components.
    """
    r, s = (BigInt(v) for v in signature)
    order = key.p - ONE
    if not 1 <= r < key.p or not 0 <= s < order:
        return False
    h = _reduce_digest(digest, order)
    lhs = mod_exp(key.y, r, key.p) * mod_exp(r, s, key.p) % key.p
    return lhs == mod_exp(key.g, h, key.p)
