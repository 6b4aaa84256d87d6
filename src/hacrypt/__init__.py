"""Classical Public-Key Cryptography from First Principles, in an Academic Sense.

Provides an arbitrary-precision integer engine and, on top of it, modular arithmetic, Miller-Rabin primality testing,
key generation and textbook RSA, ElGamal and DSA following the Handbook of Applied Cryptography. Intended for study:
no padding, no constant-time arithmetic.

Typical usage example:

    rng = SeededRandomSource(2025)
    pair = generate_keypair("elgamal", 256, rng)
    c = encrypt(pair.scheme, pair.public, 1234, rng)
    m = decrypt(pair.scheme, pair.private, c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from hacrypt.bigint import BigInt
from hacrypt.entropy import RandomSource
from hacrypt.entropy import SeededRandomSource
from hacrypt.entropy import SystemRandomSource
from hacrypt.errors import BigIntArithmeticError
from hacrypt.errors import DivisionByZeroError
from hacrypt.errors import HacryptError
from hacrypt.errors import InvalidMessageError
from hacrypt.errors import KeyGenerationError
from hacrypt.errors import NoInverseError
from hacrypt.errors import ParseError
from hacrypt.errors import SigningError
from hacrypt.errors import UnsupportedOperationError
from hacrypt.hashing import digest
from hacrypt.keys import Keypair
from hacrypt.keys import Scheme
from hacrypt.keys import Signature
from hacrypt.modular import gcd
from hacrypt.modular import mod_exp
from hacrypt.modular import mod_inverse
from hacrypt.primes import is_probable_prime
from hacrypt.primes import random_prime
from hacrypt.schemes import decrypt
from hacrypt.schemes import encrypt
from hacrypt.schemes import generate_keypair
from hacrypt.schemes import sign
from hacrypt.schemes import verify

__version__ = "0.1.0"
__all__ = [
    "BigInt",
    "RandomSource",
    "SeededRandomSource",
    "SystemRandomSource",
    "HacryptError",
    "ParseError",
    "BigIntArithmeticError",
    "DivisionByZeroError",
    "NoInverseError",
    "InvalidMessageError",
    "KeyGenerationError",
    "SigningError",
    "UnsupportedOperationError",
    "Keypair",
    "Scheme",
    "Signature",
    "digest",
    "gcd",
    "mod_exp",
    "mod_inverse",
    "is_probable_prime",
    "random_prime",
    "generate_keypair",
    "encrypt",
    "decrypt",
    "sign",
    "verify",
]
