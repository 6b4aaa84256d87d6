"""Textbook RSA encryption, decryption, signing and verification (HAC 8.3, 11.3).

No padding is applied: messages and digests are integers operated on directly. Decryption and signing use the CRT
when the private key carries its primes.

Typical usage example:

    pair = rsa_from_primes(61, 53, 17)
    c = encrypt(pair.public, 65)
    assert decrypt(pair.private, c) == 65
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from hacrypt.bigint import BigInt
from hacrypt.errors import InvalidMessageError
from hacrypt.keys import RSAPrivateKey
from hacrypt.keys import RSAPublicKey
from hacrypt.modular import mod_exp


def _check_range(value: BigInt, n: BigInt, what: str) -> BigInt:
    if not 0 <= value < n:
        raise InvalidMessageError(f"{what} representative must be in range [0, n-1]")
    return value


def _public_op(key: RSAPublicKey, value: BigInt) -> BigInt:
    return mod_exp(value, key.e, key.n)


def _private_op(key: RSAPrivateKey, value: BigInt) -> BigInt:
    """Performs the private RSA primitive, accelerated with the CRT when possible."""
    if not key.has_crt:
        return mod_exp(value, key.d, key.n)
    m_1 = mod_exp(value, key.exp1, key.p)
    m_2 = mod_exp(value, key.exp2, key.q)
    h = (m_1 - m_2) * key.coeff % key.p
    return m_2 + key.q * h


def encrypt(key: RSAPublicKey, message: BigInt | int) -> BigInt:
    """Encrypts an integer message, `c = m^e mod n`.

    Args:
        key: The recipient's public key.
        message: The message representative.

    Returns:
        The ciphertext.

    Raises:
        InvalidMessageError: If the message is out of range for the key.
    """
    m = _check_range(BigInt(message), key.n, "Message")
    return _public_op(key, m)


def decrypt(key: RSAPrivateKey, ciphertext: BigInt | int) -> BigInt:
    """Decrypts a ciphertext, `m = c^d mod n`.

    Args:
        key: The private key.
        ciphertext: The ciphertext representative.

    Returns:
        The message.

    Raises:
        InvalidMessageError: If the ciphertext is out of range for the key.
    """
    c = _check_range(BigInt(ciphertext), key.n, "Ciphertext")
    return _private_op(key, c)


def _reduce_digest(digest: BigInt | int, n: BigInt) -> BigInt:
    digest = BigInt(digest)
    if digest < 0:
        raise InvalidMessageError("Digest must be non-negative")
    return digest % n


def sign(key: RSAPrivateKey, digest: BigInt | int) -> BigInt:
    """Signs a message digest, `s = (h mod n)^d mod n`.

    Args:
        key: The signer's private key.
        digest: Non-negative digest of the message, reduced modulo `n`.

    Returns:
        The signature.

    Raises:
        InvalidMessageError: If the digest is negative.
    """
    return _private_op(key, _reduce_digest(digest, key.n))


def verify(key: RSAPublicKey, digest: BigInt | int, signature: BigInt | int) -> bool:
    """Verifies a signature by checking `s^e mod n == h mod n`.

    Args:
        key: The signer's public key.
        digest: Non-negative digest of the message.
        signature: The signature to check.

    Returns:
        True if the signature matches the digest, False otherwise, including for out-of-range signatures.
    """
    s = BigInt(signature)
    if not 0 <= s < key.n:
        return False
    return _public_op(key, s) == _reduce_digest(digest, key.n)
