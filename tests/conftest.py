"""Pytest configuration and shared fixtures."""

import random

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from statformula.api.routes import router
from statformula.filters import KeyedFilter, OverridableFilter, ReplacerFilter


class Player:
    """Mutable game state read by replacer functions."""

    def __init__(self):
        self.health = 100
        self.level = 3
        self.attributes = {"health": 100, "mana": 50, "strength": 12}


@pytest.fixture
def player() -> Player:
    """A player whose stats the filters read live."""
    return Player()


@pytest.fixture
def level_filter(player) -> ReplacerFilter:
    """Replacer filter for {level}."""
    return ReplacerFilter("{level}", lambda: player.level)


@pytest.fixture
def roll_filter() -> OverridableFilter:
    """Overridable filter for {roll} whose replacer always rolls 4."""
    return OverridableFilter("{roll}", lambda: 4)


@pytest.fixture
def attribute_filter(player) -> KeyedFilter:
    """Keyed filter for {attribute:key}."""
    return KeyedFilter("attribute", lambda key: player.attributes.get(key))


@pytest.fixture
def rng() -> random.Random:
    """Seeded random generator."""
    return random.Random(1234)


@pytest.fixture
def test_client() -> TestClient:
    """Create a test client for the API routes."""
    app = FastAPI()
    app.include_router(router, prefix="/api")
    return TestClient(app)
