"""
Pytest fixtures for Gammon tests.
"""

import random

import pytest

from ..engine_core.game import BackgammonGame
from ..engine_core.state import BackgammonState, Player, INITIAL_LAYOUT


class FakeClock:
    """Clock that advances by a fixed step every time it is read."""

    def __init__(self, step: float = 0.001):
        self.now = 0.0
        self.step = step
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        self.now += self.step
        return self.now


@pytest.fixture
def rng() -> random.Random:
    """Seeded dice for reproducible tests."""
    return random.Random(7)


@pytest.fixture
def game() -> BackgammonGame:
    return BackgammonGame()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def opening_state() -> BackgammonState:
    """Standard opening, Black to move with a 6-5."""
    return BackgammonState.from_layout(INITIAL_LAYOUT, dice=(6, 5))


@pytest.fixture
def forced_win_state() -> BackgammonState:
    """Black's last disk on point 24 with a 1-1: bearing it off wins."""
    return BackgammonState.from_layout(
        {24: (Player.BLACK, 1), 1: (Player.WHITE, 1)},
        dice=(1, 1),
    )


@pytest.fixture
def bar_entry_state() -> BackgammonState:
    """Black has a disk on the bar, so entering it is the only move."""
    return BackgammonState.from_layout(
        {0: (Player.BLACK, 1), 10: (Player.BLACK, 1), 5: (Player.WHITE, 2)},
        dice=(3, 3),
    )


@pytest.fixture
def blocked_state() -> BackgammonState:
    """Black on the bar with both entry points closed."""
    return BackgammonState.from_layout(
        {0: (Player.BLACK, 1), 3: (Player.WHITE, 2), 5: (Player.WHITE, 2)},
        dice=(3, 5),
    )


@pytest.fixture
def endgame_state() -> BackgammonState:
    """Small race with several choices for Black."""
    return BackgammonState.from_layout(
        {
            20: (Player.BLACK, 1),
            22: (Player.BLACK, 1),
            3: (Player.WHITE, 1),
            5: (Player.WHITE, 1),
        },
        dice=(2, 1),
    )
