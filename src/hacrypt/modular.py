"""Modular arithmetic over `BigInt`: GCD, extended Euclid, modular inverse and square-and-multiply exponentiation.

All results are normalized into `[0, n)` for a positive modulus `n`, relying on the floor remainder convention of
`BigInt`.

Typical usage example:

    d = mod_inverse(17, 3120)
    c = mod_exp(65, 17, 3233)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from hacrypt.bigint import BigInt
from hacrypt.bigint import ONE
from hacrypt.bigint import ZERO
from hacrypt.errors import NoInverseError

Integer = BigInt | int


def gcd(a: Integer, b: Integer) -> BigInt:
    """Greatest common divisor by Euclid's algorithm.

    Args:
        a: The first integer, of any sign.
        b: The second integer, of any sign.

    Returns:
        The non-negative GCD. `gcd(0, 0)` is 0 by convention.
    """
    a, b = abs(BigInt(a)), abs(BigInt(b))
    while b:
        a, b = b, a % b
    return a


def lcm(a: Integer, b: Integer) -> BigInt:
    """Least common multiple, 0 if either argument is 0."""
    a, b = abs(BigInt(a)), abs(BigInt(b))
    if not a or not b:
        return ZERO
    return a // gcd(a, b) * b


def egcd(a: Integer, b: Integer) -> tuple[BigInt, BigInt, BigInt]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*s + b*t = g = gcd(a, b).

    Args:
        a: The first non-negative integer.
        b: The second non-negative integer.

    Returns:
        Greatest common divisor of two integers.
        As well as the Bezout coefficients.
    """
    r0, r1 = BigInt(a), BigInt(b)
    s0, s1, t0, t1 = ONE, ZERO, ZERO, ONE
    while r1:
        q, r = divmod(r0, r1)
        r0, r1 = r1, r
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def mod_inverse(a: Integer, modulus: Integer) -> BigInt:
    """Modular multiplicative inverse via the extended Euclidean algorithm.

    Args:
        a: The value to invert, any sign. It is reduced into `[0, modulus)` first.
        modulus: A positive modulus.

    Returns:
        The unique `x` in `[0, modulus)` with `a*x ≡ 1 (mod modulus)`.

    Raises:
        NoInverseError: If `gcd(a, modulus) != 1`.
        ValueError: If the modulus is not positive.
    """
    modulus = BigInt(modulus)
    if modulus <= 0:
        raise ValueError("Modulus must be positive")
    g, s, _ = egcd(BigInt(a) % modulus, modulus)
    if g != 1:
        raise NoInverseError(f"{a} has no inverse modulo {modulus}")
    return s % modulus


def mod_exp(base: Integer, exponent: Integer, modulus: Integer) -> BigInt:
    """Computes `base**exponent mod modulus` by left-to-right binary square-and-multiply.

    Uses O(log exponent) modular multiplications and never materializes the unreduced power.

    Args:
        base: The base, any sign.
        exponent: The exponent. A negative exponent exponentiates the modular inverse of `base`.
        modulus: A positive modulus. A modulus of 1 always yields 0.

    Returns:
        The result in `[0, modulus)`.

    Raises:
        NoInverseError: If the exponent is negative and `base` is not invertible.
        ValueError: If the modulus is not positive.
    """
    base, exponent, modulus = BigInt(base), BigInt(exponent), BigInt(modulus)
    if modulus <= 0:
        raise ValueError("Modulus must be positive")
    if modulus == 1:
        return ZERO
    if exponent < 0:
        base = mod_inverse(base, modulus)
        exponent = -exponent
    base = base % modulus
    result = ONE
    for i in range(exponent.bit_length() - 1, -1, -1):
        result = result * result % modulus
        if exponent.test_bit(i):
            result = result * base % modulus
    return result
