# pylint: disable=protected-access,missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest
import sympy

from hacrypt import primes
from hacrypt.bigint import BigInt
from hacrypt.entropy import SeededRandomSource
from hacrypt.errors import KeyGenerationError

base_primetest_cases = [
    # Known Primes
    (2, True),
    (3, True),
    (5, True),
    (101, True),
    (3571, True),
    (9973, True),
    (10007, True),
    # Composite
    (4, False),
    (6, False),
    (9, False),
    (9409, False),  # 97**2
    # Fermat Pseudoprimes (numbers that fool naive tests)
    (341, False),  # 11 * 31
    (561, False),  # 3 * 11 * 17 (Carmichael number)
    (1105, False),  # 5 * 13 * 17 (Carmichael number)
    (1729, False),  # 7 * 13 * 19 (Carmichael number)
    (8911, False),  # 7 * 19 * 67 (Carmichael number)
    # Strong pseudoprimes to base 2
    (2047, False),
    (3277, False),
    (4033, False),
    (52633, False),
]

large_primetest_cases = [
    # Mersenne primes
    (2**61 - 1, True),
    (2**89 - 1, True),
    (2**107 - 1, True),
    (2**127 - 1, True),
    pytest.param(2**521 - 1, True, marks=pytest.mark.slow, id="LargeInt-M521"),
    # Semiprimes out of reach of trial division
    (10007 * 10009, False),
    (2**67 - 1, False),  # 193707721 * 761838257287
    ((2**61 - 1) * (2**89 - 1), False),
    (2**89 + 1, False),  # divisible by 3
]

carmichael_numbers = [561, 1105, 1729, 2465, 2821, 6601, 8911, 41041, 62745, 825265]


def id_generator(param):
    if isinstance(param, int) and param > 1000000:
        return f"LargeInt-{param.bit_length()}bits"
    return str(param)


@pytest.mark.parametrize("n", [0, 1, 2, 3, 9, 20, 25, 50, 1000, 5000, 10000])
def test_sieve_sane(n):
    assert primes._sieve(n) == list(sympy.primerange(2, n + 1))


@pytest.mark.parametrize(
    "n,expected", [(10**5, 9592), pytest.param(10**6, 78498, marks=pytest.mark.slow)])
def test_sieve_large_approx(n, expected):
    assert len(primes._sieve(n)) == expected


@pytest.mark.parametrize("n", [-27358709381728, -10, -1])
def test_get_pre_primes_errors(n):
    with pytest.raises(ValueError):
        primes.get_pre_primes(n)


def test_get_pre_primes_caches(mocker):
    mocked_primes = [2, 3, 5, 7, 11]
    mocker.patch("hacrypt.primes._sieve", return_value=mocked_primes)
    mocker.patch("hacrypt.primes._SMALL_PRIMES", [])
    mocker.patch("hacrypt.primes._SMALL_PRIMES_CAP", 0)
    n = 50

    rs = primes.get_pre_primes(n)
    primes._sieve.assert_called_once_with(n)
    assert rs == mocked_primes


@pytest.mark.parametrize("n", [25, 50])
def test_get_pre_primes_cache_hit(mocker, n):
    mocked_primes = [2, 3, 5, 7, 11]
    mocker.patch("hacrypt.primes._sieve")
    mocker.patch("hacrypt.primes._SMALL_PRIMES", mocked_primes)
    mocker.patch("hacrypt.primes._SMALL_PRIMES_CAP", 50)

    rs = primes.get_pre_primes(n)
    primes._sieve.assert_not_called()
    assert rs == mocked_primes


def test_get_pre_primes_cache_miss(mocker):
    mocked_primes = [2, 3, 5, 7, 11]
    greater_mocked_primes = [2, 3, 5, 7, 11, 13, 17, 19, 23]
    mocker.patch("hacrypt.primes._sieve", return_value=greater_mocked_primes)
    mocker.patch("hacrypt.primes._SMALL_PRIMES", mocked_primes)
    mocker.patch("hacrypt.primes._SMALL_PRIMES_CAP", 50)
    n = 75

    rs = primes.get_pre_primes(n)
    primes._sieve.assert_called_once_with(n)
    assert rs == greater_mocked_primes


def test_get_pre_primes_cache_forced(mocker):
    mocked_primes = [2, 3, 5, 7, 11]
    greater_mocked_primes = [2, 3, 5, 7, 11, 13, 17, 19, 23]
    mocker.patch("hacrypt.primes._sieve", return_value=mocked_primes)
    mocker.patch("hacrypt.primes._SMALL_PRIMES", greater_mocked_primes)
    mocker.patch("hacrypt.primes._SMALL_PRIMES_CAP", 75)
    n = 50

    rs = primes.get_pre_primes(n, change=True)
    primes._sieve.assert_called_with(n)
    assert rs == mocked_primes


@pytest.mark.parametrize("num,expected", base_primetest_cases, ids=id_generator)
def test_trial_division_conclusive(num, expected):
    assert primes._trial_division(BigInt(num)) == (expected, True)


@pytest.mark.parametrize("num", [2**61 - 1, 10007 * 10009, 2**67 - 1], ids=id_generator)
def test_trial_division_inconclusive(num):
    assert primes._trial_division(BigInt(num)) == (True, False)


def test_trial_division_small_factor():
    assert primes._trial_division(BigInt((2**89 - 1) * 9973)) == (False, True)


@pytest.mark.parametrize("n,expected", [(0, False), (1, False)] + base_primetest_cases + large_primetest_cases,
                         ids=id_generator)
def test_miller_rabin(rng, n, expected):
    assert primes._miller_rabin(BigInt(n), 20, rng) == expected


@pytest.mark.parametrize("n", carmichael_numbers)
def test_miller_rabin_carmichael(rng, n):
    assert not primes._miller_rabin(BigInt(n), 20, rng)


@pytest.mark.parametrize("n,expected", base_primetest_cases + large_primetest_cases, ids=id_generator)
def test_is_probable_prime(rng, n, expected):
    assert primes.is_probable_prime(n, rng=rng) == expected
    assert primes.is_probable_prime(BigInt(n), rounds=10, rng=rng) == expected


def test_is_probable_prime_agrees_below_bound():
    for n in range(-5, 3000):
        assert primes.is_probable_prime(n) == sympy.isprime(n), n


def test_is_probable_prime_validates():
    with pytest.raises(ValueError):
        primes.is_probable_prime(7, rounds=0)


@pytest.mark.parametrize("bits,expected", [(1, 40), (512, 40), (513, 56), (1024, 56), (1536, 64), (2048, 70),
                                           (3072, 74)])
def test_default_rounds(bits, expected):
    assert primes._default_rounds(bits) == expected


@pytest.mark.parametrize("bits", [2, 3, 8, 16, 31, 32, 33, 64, 128, pytest.param(256, marks=pytest.mark.slow)])
def test_random_prime(rng, bits):
    p = primes.random_prime(bits, rng)
    assert p.bit_length() == bits
    assert p.is_odd() or p == 2
    assert sympy.isprime(int(p))


@pytest.mark.parametrize("bits", [3, 8, 32, 64])
def test_random_prime_two_top_bits(rng, bits):
    p = primes.random_prime(bits, rng, top_bits=2)
    assert p >> (bits - 2) == 3
    assert sympy.isprime(int(p))


def test_random_prime_reproducible():
    a = primes.random_prime(64, SeededRandomSource(42))
    b = primes.random_prime(64, SeededRandomSource(42))
    assert a == b


@pytest.mark.parametrize("bits,top_bits", [(1, 1), (0, 1), (2, 2), (16, 3), (16, 0)])
def test_random_prime_validates(bits, top_bits):
    with pytest.raises(ValueError):
        primes.random_prime(bits, top_bits=top_bits)


def test_random_prime_faulty(mocker, rng):
    mocker.patch("hacrypt.primes.is_probable_prime", return_value=False)
    with pytest.raises(KeyGenerationError):
        primes.random_prime(64, rng)
    assert primes.is_probable_prime.call_count == 20 * 64


def test_random_prime_system_source():
    assert sympy.isprime(int(primes.random_prime(48)))


@pytest.mark.parametrize("bits", [3, 5, 16, 32, 48])
def test_random_safe_prime(rng, bits):
    p = primes.random_safe_prime(bits, rng)
    assert p.bit_length() == bits
    assert sympy.isprime(int(p))
    assert sympy.isprime(int(p) // 2)


def test_random_safe_prime_smallest(rng):
    assert primes.random_safe_prime(3, rng) == 7


def test_random_safe_prime_validates():
    with pytest.raises(ValueError):
        primes.random_safe_prime(2)


def test_random_safe_prime_faulty(mocker, rng):
    mocker.patch("hacrypt.primes.is_probable_prime", return_value=False)
    with pytest.raises(KeyGenerationError):
        primes.random_safe_prime(16, rng)
