"""Message digests as `BigInt` values, for feeding the signature schemes.

Integers are hashed through their canonical decimal text, so `digest(2)` is the SHA-256 of the string "2".
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import hashlib

from hacrypt.bigint import BigInt

HASH_FUNCS = {
    "sha256": hashlib.sha256,
    "sha384": hashlib.sha384,
    "sha512": hashlib.sha512,
}


def digest(message: bytes | str | BigInt | int, algorithm: str = "sha256") -> BigInt:
    """Hash a message into a non-negative integer.

    Args:
        message: Bytes are hashed as-is, text as UTF-8 and integers as their decimal text.
        algorithm: Hash function (Implemented for sha256, sha384, sha512)

    Returns:
        The big-endian integer value of the hash.

    Raises:
        ValueError: If the algorithm is not supported.
    """
    try:
        hasher = HASH_FUNCS[algorithm]
    except KeyError:
        raise ValueError(f"Unsupported hash function: {algorithm}") from None
    if isinstance(message, (BigInt, int)):
        message = BigInt(message).format(10)
    if isinstance(message, str):
        message = message.encode("utf-8")
    return BigInt.from_bytes(hasher(message).digest())
