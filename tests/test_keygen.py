# pylint: disable=protected-access,missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses
import math

import pytest
import sympy

from hacrypt import keygen
from hacrypt.bigint import BigInt
from hacrypt.entropy import RandomSource
from hacrypt.errors import KeyGenerationError
from hacrypt.keys import DSAPrivateKey
from hacrypt.keys import DSAPublicKey
from hacrypt.keys import ElGamalPrivateKey
from hacrypt.keys import ElGamalPublicKey
from hacrypt.keys import Keypair
from hacrypt.keys import RSAPrivateKey
from hacrypt.keys import RSAPublicKey
from hacrypt.keys import Scheme
from hacrypt.keys import scheme_of

rsa_sizes = [16, 17, 32, 64, 65, 128, pytest.param(512, marks=pytest.mark.slow), pytest.param(
    1024, marks=pytest.mark.extreme)]


def test_rsa_from_primes_toy():
    pair = keygen.rsa_from_primes(61, 53, 17)
    assert pair.scheme is Scheme.RSA
    assert pair.public == RSAPublicKey(3233, 17)
    priv = pair.private
    assert priv.d == 2753
    assert (priv.p, priv.q) == (61, 53)
    assert (priv.exp1, priv.exp2, priv.coeff) == (53, 49, 38)
    assert isinstance(priv.n, BigInt)


@pytest.mark.parametrize("p,q,e", [
    (61, 61, 17),  # Equal primes
    (61, 55, 17),  # Composite q
    (1, 53, 17),
    (61, 53, 3),  # gcd(3, 3120) == 3
    (61, 53, 1),
    (61, 53, 3120),
    (61, 53, 65537),  # Exceeds phi
])
def test_rsa_from_primes_validates(p, q, e):
    with pytest.raises(KeyGenerationError):
        keygen.rsa_from_primes(p, q, e)


@pytest.mark.parametrize("size", rsa_sizes)
def test_generate_rsa(rng, size):
    pair = keygen.generate_rsa(size, rng, rounds=10)
    pub, priv = pair.public, pair.private
    assert pub.n.bit_length() == size
    assert pub.n == priv.p * priv.q
    assert priv.p != priv.q
    assert sympy.isprime(int(priv.p))
    assert sympy.isprime(int(priv.q))
    assert priv.p.bit_length() == (size + 1) // 2
    assert priv.q.bit_length() == size // 2
    phi = (priv.p - 1) * (priv.q - 1)
    assert math.gcd(int(pub.e), int(phi)) == 1
    assert pub.e * priv.d % phi == 1
    assert priv.exp1 == priv.d % (priv.p - 1)
    assert priv.coeff * priv.q % priv.p == 1


def test_generate_rsa_prefers_65537(rng):
    pair = keygen.generate_rsa(64, rng, rounds=10)
    phi = (pair.private.p - 1) * (pair.private.q - 1)
    if math.gcd(65537, int(phi)) == 1:
        assert pair.public.e == 65537


@pytest.mark.parametrize("preferred", [None, 4, 65536])
def test_generate_rsa_exponent_fallback(rng, preferred):
    pair = keygen.generate_rsa(32, rng, public_exponent=preferred, rounds=10)
    phi = (pair.private.p - 1) * (pair.private.q - 1)
    assert pair.public.e.is_odd()
    assert 3 <= pair.public.e < phi
    assert pair.public.e * pair.private.d % phi == 1


def test_generate_rsa_exponent_exhausted(mocker, rng):
    mocker.patch("hacrypt.keygen.gcd", return_value=BigInt(2))
    with pytest.raises(KeyGenerationError):
        keygen.generate_rsa(32, rng, rounds=10)


def test_generate_rsa_redraws_equal_primes(mocker, rng):
    p, q = BigInt(251), BigInt(241)
    mocker.patch("hacrypt.keygen.random_prime", side_effect=[p, p, q])
    pair = keygen.generate_rsa(16, rng)
    assert (pair.private.p, pair.private.q) == (p, q)
    assert pair.public.n == 60491
    assert keygen.random_prime.call_count == 3


def test_generate_rsa_equal_primes_exhausted(mocker, rng):
    mocker.patch("hacrypt.keygen.random_prime", return_value=BigInt(251))
    with pytest.raises(KeyGenerationError):
        keygen.generate_rsa(16, rng)


@pytest.mark.parametrize("size", [0, 8, 15])
def test_generate_rsa_validates(size):
    with pytest.raises(ValueError):
        keygen.generate_rsa(size)


@pytest.mark.parametrize("size", [8, 16, 64, 128])
def test_generate_elgamal(rng, size):
    pair = keygen.generate_elgamal(size, rng, rounds=10)
    pub, priv = pair.public, pair.private
    assert pair.scheme is Scheme.ELGAMAL
    assert pub.p.bit_length() == size
    assert sympy.isprime(int(pub.p))
    assert 1 <= priv.x <= pub.p - 2
    assert pub.y == pow(int(pub.g), int(priv.x), int(pub.p))
    assert 2 <= pub.g <= pub.p - 2
    # A quadratic non-residue.
    assert pow(int(pub.g), int(pub.p - 1) // 2, int(pub.p)) == int(pub.p) - 1


@pytest.mark.parametrize("size", [8, 16, 32])
def test_generate_elgamal_safe_prime(rng, size):
    pair = keygen.generate_elgamal(size, rng, safe_prime=True, rounds=10)
    p, g = int(pair.public.p), int(pair.public.g)
    assert p.bit_length() == size
    assert sympy.isprime((p - 1) // 2)
    assert sympy.n_order(g, p) == p - 1


@pytest.mark.parametrize("size", [8, 16, 24, 32, 40])
def test_generate_elgamal_generator_order(rng, size):
    pair = keygen.generate_elgamal(size, rng, rounds=10)
    p, g = int(pair.public.p), int(pair.public.g)
    order = sympy.n_order(g, p)
    factors = sympy.factorint(p - 1)
    for prime, power in factors.items():
        if prime < 10000:
            assert order % prime**power == 0
    large = [prime for prime in factors if prime >= 10000]
    if large:
        assert any(order % prime == 0 for prime in large)
    else:
        assert order == p - 1


def test_find_generator_skips_small_order(mocker):
    # 2356 = 2^2 * 19 * 31, so a square root of -1 is a non-residue of order 4 only.
    small_order = sympy.sqrt_mod(2356, 2357)
    rng = mocker.Mock(spec=RandomSource)
    rng.randrange.side_effect = [BigInt(small_order), BigInt(2)]
    assert keygen._find_generator(BigInt(2357), rng) == 2
    assert rng.randrange.call_count == 2


def test_split_order():
    assert keygen._split_order(BigInt(2356)) == ([2, 19, 31], 1)
    assert keygen._split_order(BigInt(2 * 3 * 3 * 10007 * 10009)) == ([2, 3], 10007 * 10009)
    assert keygen._split_order(BigInt(2 * 9973)) == ([2, 9973], 1)


def test_generate_elgamal_no_generator(mocker, rng):
    mocker.patch("hacrypt.keygen.mod_exp", return_value=BigInt(1))
    with pytest.raises(KeyGenerationError):
        keygen.generate_elgamal(32, rng)


def test_generate_elgamal_validates():
    with pytest.raises(ValueError):
        keygen.generate_elgamal(7)


@pytest.mark.parametrize("size,expected", [(16, 8), (512, 256), (1024, 160), (2047, 160), (2048, 224), (3072, 256),
                                           (15360, 256)])
def test_default_q_bits(size, expected):
    assert keygen.default_q_bits(size) == expected


@pytest.mark.parametrize("size,q_bits", [(16, None), (64, None), (128, 64), (160, 80),
                                         pytest.param(1024, None, marks=pytest.mark.slow)])
def test_generate_dsa(rng, size, q_bits):
    pair = keygen.generate_dsa(size, rng, q_bits=q_bits, rounds=10)
    pub, priv = pair.public, pair.private
    p, q, g = int(pub.p), int(pub.q), int(pub.g)
    assert pair.scheme is Scheme.DSA
    assert p.bit_length() == size
    assert q.bit_length() == (q_bits or keygen.default_q_bits(size))
    assert sympy.isprime(p)
    assert sympy.isprime(q)
    assert (p - 1) % q == 0
    assert g != 1
    assert pow(g, q, p) == 1
    assert 1 <= priv.x < q
    assert pub.y == pow(g, int(priv.x), p)


@pytest.mark.parametrize("size,q_bits", [(15, None), (64, 64), (64, 65), (64, 1)])
def test_generate_dsa_validates(size, q_bits):
    with pytest.raises(ValueError):
        keygen.generate_dsa(size, q_bits=q_bits)


def test_generate_dsa_modulus_exhausted(mocker, rng):
    mocker.patch("hacrypt.keygen._dsa_modulus", return_value=None)
    spy = mocker.spy(keygen, "random_prime")
    with pytest.raises(KeyGenerationError):
        keygen.generate_dsa(64, rng, rounds=5)
    assert spy.call_count == keygen._DSA_Q_TRIES


def test_keypair_validates_records():
    rsa_pair = keygen.rsa_from_primes(61, 53, 17)
    with pytest.raises(TypeError):
        Keypair(Scheme.DSA, rsa_pair.public, rsa_pair.private)
    with pytest.raises(TypeError):
        Keypair(Scheme.RSA, rsa_pair.private, rsa_pair.private)


def test_key_records():
    priv = RSAPrivateKey(3233, 17, 2753)
    assert not priv.has_crt
    assert priv.exp1 is None
    assert priv.public.bit_length == 12
    elg = ElGamalPrivateKey(2357, 2, 1185, 1751)
    assert elg.public == ElGamalPublicKey(2357, 2, 1185)
    dsa_priv = DSAPrivateKey(124540019, 17389, 10083255, 119946265, 12496)
    assert dsa_priv.public == DSAPublicKey(124540019, 17389, 10083255, 119946265)
    assert all(isinstance(v, BigInt) for v in dataclasses.astuple(dsa_priv))
    with pytest.raises(dataclasses.FrozenInstanceError):
        elg.x = 5


@pytest.mark.parametrize("key,scheme", [
    (RSAPublicKey(3233, 17), Scheme.RSA),
    (RSAPrivateKey(3233, 17, 2753), Scheme.RSA),
    (ElGamalPublicKey(2357, 2, 1185), Scheme.ELGAMAL),
    (DSAPrivateKey(124540019, 17389, 10083255, 119946265, 12496), Scheme.DSA),
])
def test_scheme_of(key, scheme):
    assert scheme_of(key) is scheme


def test_scheme_of_rejects():
    with pytest.raises(TypeError):
        scheme_of((3233, 17))
