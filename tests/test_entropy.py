# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import secrets

import pytest

from hacrypt import entropy
from hacrypt.bigint import BigInt


@pytest.mark.parametrize("k", [0, 1, 7, 32, 33, 64, 100])
def test_randbits_range(rng, k):
    for _ in range(50):
        value = rng.randbits(k)
        assert isinstance(value, BigInt)
        assert 0 <= value < 2**k


def test_randbits_negative(rng):
    with pytest.raises(ValueError):
        rng.randbits(-1)


@pytest.mark.parametrize("bound", [1, 2, 3, 1000, 2**32, 2**64 + 13])
def test_randbelow(rng, bound):
    for _ in range(50):
        assert 0 <= rng.randbelow(bound) < bound


@pytest.mark.parametrize("bound", [0, -5])
def test_randbelow_validates(rng, bound):
    with pytest.raises(ValueError):
        rng.randbelow(bound)


def test_randrange(rng):
    seen = {int(rng.randrange(-3, 3)) for _ in range(300)}
    assert seen == {-3, -2, -1, 0, 1, 2}
    with pytest.raises(ValueError):
        rng.randrange(5, 5)


def test_seeded_is_reproducible():
    a = entropy.SeededRandomSource("demo")
    b = entropy.SeededRandomSource("demo")
    assert [a.randbits(90) for _ in range(5)] == [b.randbits(90) for _ in range(5)]
    assert entropy.SeededRandomSource("other").randbits(90) != entropy.SeededRandomSource("demo").randbits(90)


def test_system_source_uses_secrets(mocker):
    mocker.patch("secrets.randbits", return_value=0xDEADBEEF)
    source = entropy.SystemRandomSource()
    assert source.randbits(64) == 0xDEADBEEF * (2**32 + 1)
    assert source.randbits(40) == 0xDEADBEEF + (0xDE << 32)
    secrets.randbits.assert_called_with(32)


def test_template_source():
    with pytest.raises(NotImplementedError):
        entropy.RandomSource().randbits(8)
    assert entropy.RandomSource().randbits(0) == 0


def test_resolve(rng):
    assert entropy.resolve(rng) is rng
    assert isinstance(entropy.resolve(None), entropy.SystemRandomSource)
