"""Shared test fixtures for checkersgame."""

import random

import pytest

from checkersgame.core.clock import ManualScheduler
from checkersgame.game.reducer import initialize


@pytest.fixture
def game():
    """A fresh game with default settings."""
    return initialize()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def rng():
    return random.Random(42)
