"""Scheme-tagged entry points over the closed set of algorithms.

Consumers name a scheme and pass key records; each call dispatches to the module implementing that scheme. RSA and
ElGamal support encryption and signatures, DSA supports signatures only.

Typical usage example:

    pair = generate_keypair("dsa", 512)
    h = digest("Hi there!")
    sig = sign(pair.scheme, pair.private, h)
    assert verify(pair.scheme, pair.public, h, sig)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from typing import Any

from hacrypt import dsa
from hacrypt import elgamal
from hacrypt import keygen
from hacrypt import rsa
from hacrypt.bigint import BigInt
from hacrypt.entropy import RandomSource
from hacrypt.errors import UnsupportedOperationError
from hacrypt.keys import ElGamalCiphertext
from hacrypt.keys import KEY_TYPES
from hacrypt.keys import Keypair
from hacrypt.keys import PrivateKey
from hacrypt.keys import PublicKey
from hacrypt.keys import Scheme
from hacrypt.keys import Signature

Ciphertext = BigInt | ElGamalCiphertext
AnySignature = BigInt | Signature


def _scheme(scheme: Scheme | str) -> Scheme:
    return scheme if isinstance(scheme, Scheme) else Scheme(scheme)


def _expect(scheme: Scheme, key: Any, private: bool) -> None:
    expected = KEY_TYPES[scheme][1 if private else 0]
    if not isinstance(key, expected):
        raise TypeError(f"Expected {expected.__name__} for scheme {scheme.value}, got {type(key).__name__}")


def _pair(value: Any, what: str) -> tuple:
    if isinstance(value, BigInt) or not isinstance(value, tuple) or len(value) != 2:
        raise TypeError(f"{what} must be a pair of integers for this scheme")
    return value


def _single(value: Any, what: str) -> BigInt | int:
    if not isinstance(value, (BigInt, int)):
        raise TypeError(f"{what} must be a single integer for this scheme")
    return value


def generate_keypair(scheme: Scheme | str, bit_length: int, rng: RandomSource | None = None, **options) -> Keypair:
    """Generate a keypair for the scheme.

    Args:
        scheme: The scheme or its name.
        bit_length: Modulus size in bits.
        rng: Source of randomness. Defaults to a fresh OS-backed source.
        **options: Scheme specific options, see `hacrypt.keygen`.

    Returns:
        The keypair.
    """
    match _scheme(scheme):
        case Scheme.RSA:
            return keygen.generate_rsa(bit_length, rng, **options)
        case Scheme.ELGAMAL:
            return keygen.generate_elgamal(bit_length, rng, **options)
        case Scheme.DSA:
            return keygen.generate_dsa(bit_length, rng, **options)


def encrypt(scheme: Scheme | str,
            public: PublicKey,
            plaintext: BigInt | int,
            rng: RandomSource | None = None) -> Ciphertext:
    """Encrypt an integer plaintext.

    Raises:
        UnsupportedOperationError: If the scheme cannot encrypt.
        TypeError: If the key does not belong to the scheme.
    """
    scheme = _scheme(scheme)
    _expect(scheme, public, private=False)
    match scheme:
        case Scheme.RSA:
            return rsa.encrypt(public, plaintext)
        case Scheme.ELGAMAL:
            return elgamal.encrypt(public, plaintext, rng)
        case _:
            raise UnsupportedOperationError(f"Scheme {scheme.value} does not support encryption")


def decrypt(scheme: Scheme | str, private: PrivateKey, ciphertext: Ciphertext | tuple) -> BigInt:
    """Decrypt a ciphertext back into the integer plaintext.

    Raises:
        UnsupportedOperationError: If the scheme cannot decrypt.
        TypeError: If the key does not belong to the scheme or the ciphertext has the wrong shape.
    """
    scheme = _scheme(scheme)
    _expect(scheme, private, private=True)
    match scheme:
        case Scheme.RSA:
            return rsa.decrypt(private, _single(ciphertext, "Ciphertext"))
        case Scheme.ELGAMAL:
            return elgamal.decrypt(private, ElGamalCiphertext(*_pair(ciphertext, "Ciphertext")))
        case _:
            raise UnsupportedOperationError(f"Scheme {scheme.value} does not support decryption")


def sign(scheme: Scheme | str,
         private: PrivateKey,
         digest: BigInt | int,
         rng: RandomSource | None = None) -> AnySignature:
    """Sign a message digest.

    Raises:
        TypeError: If the key does not belong to the scheme.
    """
    scheme = _scheme(scheme)
    _expect(scheme, private, private=True)
    match scheme:
        case Scheme.RSA:
            return rsa.sign(private, digest)
        case Scheme.ELGAMAL:
            return elgamal.sign(private, digest, rng)
        case Scheme.DSA:
            return dsa.sign(private, digest, rng)


def verify(scheme: Scheme | str, public: PublicKey, digest: BigInt | int, signature: AnySignature | tuple) -> bool:
    """Verify a signature over a message digest.

    Returns:
        True if valid, False for any mismatch or out-of-range component.

    Raises:
        TypeError: If the key does not belong to the scheme or the signature has the wrong shape.
    """
    scheme = _scheme(scheme)
    _expect(scheme, public, private=False)
    match scheme:
        case Scheme.RSA:
            return rsa.verify(public, digest, _single(signature, "Signature"))
        case Scheme.ELGAMAL:
            return elgamal.verify(public, digest, Signature(*_pair(signature, "Signature")))
        case Scheme.DSA:
            return dsa.verify(public, digest, Signature(*_pair(signature, "Signature")))
