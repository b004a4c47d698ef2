"""Shared fixtures for keytrie tests."""

import pytest

import keytrie


@pytest.fixture(scope="session")
def animals():
    """Automaton for the default keyword list, built once for all tests."""
    return keytrie.build(["cat", "dog", "bird"])


@pytest.fixture(scope="session")
def shared_prefix():
    return keytrie.build(["cat", "car", "category"])
