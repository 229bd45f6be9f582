"""Goldfisher - Deck Goldfishing Simulator"""
from .engine.game import Game, GameConfig, GameResult
from .engine.simulation import SimulationConfig, SimulationRunner, run_simulation
from .cards.parser import Decklist, DecklistParser, Deck
from .cards.database import CardDatabase
from .ai import Strategy, get_strategy

__version__ = "1.0.0"
__all__ = ["Game", "GameConfig", "GameResult", "SimulationConfig", "SimulationRunner",
           "run_simulation", "Decklist", "DecklistParser", "Deck", "CardDatabase",
           "Strategy", "get_strategy"]
