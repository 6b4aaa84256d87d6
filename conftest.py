"""Configures pytest further: speed tiers and a reproducible random source."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest

from hacrypt.entropy import SeededRandomSource


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run extremely slow key sizes")
    parser.addoption("--seed", action="store", default="hacrypt", help="seed for the deterministic random source")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    for item in items:
        for marker, skip in skipdict.items():
            if marker in item.keywords:
                item.add_marker(skip)


@pytest.fixture
def rng(request) -> SeededRandomSource:
    """A fresh seeded source per test, so each test is reproducible on its own."""
    return SeededRandomSource(f"{request.config.getoption('--seed')}:{request.node.nodeid}")
