import random

import pytest

from break_block_build.config import GameConfig
from break_block_build.game import Game


class FakeKey(str):
    """Stand-in for a blessed Keystroke."""

    def __new__(cls, text='', name=None):
        key = super().__new__(cls, text)
        key.name = name
        key.is_sequence = name is not None
        return key


class FixedRng:
    """Deterministic rng returning the same roll every time."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value

    def choice(self, seq):
        return seq[0]

    def randrange(self, n):
        return 0


@pytest.fixture
def config():
    return GameConfig(width=800.0, height=600.0, seed=1234)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def game(config):
    return Game(config, rng=random.Random(1234))


@pytest.fixture
def empty_game(game):
    """A game with the opening block row removed."""
    game.blocks.clear()
    return game
