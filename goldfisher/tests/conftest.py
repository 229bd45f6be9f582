"""
Shared pytest fixtures for Goldfisher tests.

This module provides reusable fixtures for common test scenarios including:
- Empty games filled card by card
- Games built from decklists
- A mock strategy making simple decisions
"""

import pytest

from ..cards.parser import Deck
from ..engine.game import Game, GameConfig
from ..engine.types import Zone
from .mocks.mock_strategy import MockStrategy


# =============================================================================
# Game Fixtures
# =============================================================================

@pytest.fixture
def game():
    """
    Create an empty seeded game.

    Returns:
        Game: A game without a deck, cards are added with ``create_object``.

    Usage:
        def test_something(game):
            forest = game.create_object("Forest", Zone.BATTLEFIELD)
    """
    return Game(config=GameConfig(seed=42))


@pytest.fixture
def make(game):
    """
    Card factory for the ``game`` fixture.

    Returns:
        Callable creating a catalog card in a zone (battlefield by default).

    Usage:
        def test_payment(make):
            forest = make("Forest")
            elves = make("Llanowar Elves", Zone.HAND)
    """
    def _make(name: str, zone: Zone = Zone.BATTLEFIELD, sideboard: bool = False):
        return game.create_object(name, zone, sideboard=sideboard)
    return _make


@pytest.fixture
def forest_deck():
    """17 Forests and a single Llanowar Elves."""
    return Deck.from_text("17 Forest\n1 Llanowar Elves", name="Elves")


@pytest.fixture
def forest_game(forest_deck):
    return Game(forest_deck, GameConfig(seed=7))


# =============================================================================
# Strategy Fixtures
# =============================================================================

@pytest.fixture
def strategy():
    """
    Create a mock strategy that keeps every hand.

    Returns:
        MockStrategy: Plays lands and casts the first castable card.
    """
    return MockStrategy()
