"""Key records, keypairs, ciphertexts and signatures for the supported schemes.

The scheme set is closed: `Scheme` enumerates it and `Keypair` tags its public and private records with one member.
All records are frozen dataclasses whose integer fields are coerced to `BigInt` on construction.

Typical usage example:

    pub = RSAPublicKey(3233, 17)
    priv = RSAPrivateKey(3233, 17, 2753, 61, 53)
    pair = Keypair(Scheme.RSA, pub, priv)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses
import enum
import typing

from hacrypt.bigint import BigInt
from hacrypt.modular import mod_inverse


class Scheme(enum.Enum):
    RSA = "rsa"
    ELGAMAL = "elgamal"
    DSA = "dsa"


class ElGamalCiphertext(typing.NamedTuple):
    c1: BigInt
    c2: BigInt


class Signature(typing.NamedTuple):
    """An `(r, s)` signature pair, as produced by DSA and ElGamal signing."""
    r: BigInt
    s: BigInt


class _Record:
    """Coerces every non-None dataclass field to `BigInt`."""

    def __post_init__(self) -> None:
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if value is not None:
                object.__setattr__(self, field.name, BigInt(value))


@dataclasses.dataclass(frozen=True)
class RSAPublicKey(_Record):
    """RSA public key.

    Attributes:
        n: The modulus.
        e: The public exponent.
    """
    n: BigInt
    e: BigInt

    @property
    def bit_length(self) -> int:
        return self.n.bit_length()


@dataclasses.dataclass(frozen=True)
class RSAPrivateKey(_Record):
    """RSA private key, optionally carrying the factorization and CRT components.

    When `p` and `q` are given, missing CRT components are derived.

    Attributes:
        n: The modulus.
        e: The public exponent.
        d: The private exponent.
        p: Private prime 1.
        q: Private prime 2.
        exp1: CRT component d mod (p-1).
        exp2: CRT component d mod (q-1).
        coeff: CRT component q^-1 mod p.
    """
    n: BigInt
    e: BigInt
    d: BigInt
    p: BigInt | None = None
    q: BigInt | None = None
    exp1: BigInt | None = None
    exp2: BigInt | None = None
    coeff: BigInt | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.p is None or self.q is None:
            return
        if self.exp1 is None:
            object.__setattr__(self, "exp1", self.d % (self.p - 1))
        if self.exp2 is None:
            object.__setattr__(self, "exp2", self.d % (self.q - 1))
        if self.coeff is None:
            object.__setattr__(self, "coeff", mod_inverse(self.q, self.p))

    @property
    def has_crt(self) -> bool:
        return self.p is not None and self.q is not None

    @property
    def public(self) -> RSAPublicKey:
        return RSAPublicKey(self.n, self.e)


@dataclasses.dataclass(frozen=True)
class ElGamalPublicKey(_Record):
    """ElGamal public key.

    Attributes:
        p: The prime modulus.
        g: The group generator.
        y: The public value g^x mod p.
    """
    p: BigInt
    g: BigInt
    y: BigInt


@dataclasses.dataclass(frozen=True)
class ElGamalPrivateKey(_Record):
    p: BigInt
    g: BigInt
    y: BigInt
    x: BigInt

    @property
    def public(self) -> ElGamalPublicKey:
        return ElGamalPublicKey(self.p, self.g, self.y)


@dataclasses.dataclass(frozen=True)
class DSAPublicKey(_Record):
    """DSA public key.

    Attributes:
        p: The prime modulus.
        q: The prime order of the subgroup generated by `g`.
        g: The subgroup generator.
        y: The public value g^x mod p.
    """
    p: BigInt
    q: BigInt
    g: BigInt
    y: BigInt


@dataclasses.dataclass(frozen=True)
class DSAPrivateKey(_Record):
    p: BigInt
    q: BigInt
    g: BigInt
    y: BigInt
    x: BigInt

    @property
    def public(self) -> DSAPublicKey:
        return DSAPublicKey(self.p, self.q, self.g, self.y)


PublicKey = RSAPublicKey | ElGamalPublicKey | DSAPublicKey
PrivateKey = RSAPrivateKey | ElGamalPrivateKey | DSAPrivateKey

KEY_TYPES: dict[Scheme, tuple[type, type]] = {
    Scheme.RSA: (RSAPublicKey, RSAPrivateKey),
    Scheme.ELGAMAL: (ElGamalPublicKey, ElGamalPrivateKey),
    Scheme.DSA: (DSAPublicKey, DSAPrivateKey),
}


@dataclasses.dataclass(frozen=True)
class Keypair:
    """Matched public and private records of one scheme instance.

    Raises:
        TypeError: If either record does not belong to `scheme`.
    """
    scheme: Scheme
    public: PublicKey
    private: PrivateKey

    def __post_init__(self) -> None:
        pub_type, priv_type = KEY_TYPES[self.scheme]
        if not isinstance(self.public, pub_type) or not isinstance(self.private, priv_type):
            raise TypeError(f"Key records do not match scheme {self.scheme.value}")


def scheme_of(key: PublicKey | PrivateKey) -> Scheme:
    """The scheme a key record belongs to."""
    for scheme, types in KEY_TYPES.items():
        if isinstance(key, types):
            return scheme
    raise TypeError(f"Not a key record: {type(key).__name__}")
