"""Exception hierarchy for the toolkit.

Every error raised by the arithmetic core and the algorithm layer derives from `HacryptError`, as well as from the
builtin exception family a caller would naturally expect (`ValueError` for bad values, `RuntimeError` for exhausted
search loops), so that either style of `except` clause keeps working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class HacryptError(Exception):
    """Base class of all toolkit errors."""


class ParseError(HacryptError, ValueError):
    """Text could not be parsed as an integer in the requested base."""


class BigIntArithmeticError(HacryptError, ArithmeticError):
    """An arithmetic or bit operation is undefined for its operands."""


class DivisionByZeroError(BigIntArithmeticError, ZeroDivisionError):
    """Division or modular reduction by zero."""


class NoInverseError(HacryptError, ValueError):
    """The modular inverse does not exist, as the value and modulus share a factor."""


class InvalidMessageError(HacryptError, ValueError):
    """A plaintext, ciphertext or digest is outside the range the key accepts."""


class KeyGenerationError(HacryptError, RuntimeError):
    """Key generation exceeded its retry bound looking for primes, exponents or generators."""


class SigningError(HacryptError, RuntimeError):
    """Signing exceeded its retry bound on degenerate ephemeral values."""


class UnsupportedOperationError(HacryptError, NotImplementedError):
    """The scheme has no such capability, such as encryption under DSA."""
