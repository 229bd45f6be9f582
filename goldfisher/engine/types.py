"""Goldfisher - Core Types and Enumerations

This module defines the fundamental types, enumerations, and type aliases
used throughout the goldfishing engine: zones, card types, sub-types, mana
colors, game outcomes and the search filters used by tutor effects.
"""
from enum import Enum, auto
from typing import FrozenSet, Optional
from dataclasses import dataclass, field


# =============================================================================
# Type Aliases
# =============================================================================

ObjectId = int


# =============================================================================
# Mana Types
# =============================================================================

class ManaColor(Enum):
    """
    Types of mana that can be produced and spent.

    COLORLESS doubles as the generic part of a cost: a cost entry of
    ``{COLORLESS: 2}`` can be paid with any two mana.
    """
    WHITE = 'W'
    BLUE = 'U'
    BLACK = 'B'
    RED = 'R'
    GREEN = 'G'
    COLORLESS = 'C'

    @classmethod
    def from_symbol(cls, symbol: str) -> "ManaColor":
        """Get a mana color from its single letter symbol (W, U, B, R, G, C)."""
        for color in cls:
            if color.value == symbol.upper():
                return color
        raise ValueError(f"Unknown mana symbol: {symbol}")


# Colored requirements are checked and paid in this order
COLOR_ORDER = (
    ManaColor.WHITE,
    ManaColor.BLUE,
    ManaColor.BLACK,
    ManaColor.RED,
    ManaColor.GREEN,
)

# Every mana type, colorless last
ALL_MANA = COLOR_ORDER + (ManaColor.COLORLESS,)


# =============================================================================
# Card Types
# =============================================================================

class CardType(Enum):
    """Card types modeled by the engine."""
    CREATURE = auto()
    ENCHANTMENT = auto()
    ARTIFACT = auto()
    SORCERY = auto()
    INSTANT = auto()
    LAND = auto()

    def is_permanent(self) -> bool:
        """Returns True if cards of this type stay on the battlefield on resolution."""
        return self not in (CardType.INSTANT, CardType.SORCERY)


class SubType(Enum):
    """
    Sub-types the engine cares about.

    Creature types drive entry triggers (Wirewood Savage draws for Beasts),
    land types drive fetch land searches.
    """
    # Creature types
    HARPY = auto()
    BEAST = auto()

    # Basic land types
    PLAINS = auto()
    ISLAND = auto()
    SWAMP = auto()
    MOUNTAIN = auto()
    FOREST = auto()


# =============================================================================
# Zones
# =============================================================================

class Zone(Enum):
    """
    The six disjoint locations a game object can occupy.

    OUTSIDE holds the sideboard (wish targets) for the whole game.
    """
    LIBRARY = auto()      # Hidden, ordered
    HAND = auto()
    BATTLEFIELD = auto()
    GRAVEYARD = auto()
    EXILE = auto()
    OUTSIDE = auto()


ZONES = tuple(Zone)


# =============================================================================
# Game Outcome
# =============================================================================

class Outcome(Enum):
    """Final result of a goldfished game from our point of view."""
    WIN = auto()
    LOSE = auto()
    DRAW = auto()


@dataclass(frozen=True)
class GameStatus:
    """
    Status reported after every action.

    Attributes:
        outcome: None while the game continues, otherwise the final outcome
    """
    outcome: Optional[Outcome] = None

    @property
    def is_finished(self) -> bool:
        return self.outcome is not None

    @classmethod
    def finished(cls, outcome: Outcome) -> "GameStatus":
        return cls(outcome=outcome)


CONTINUE = GameStatus()


# =============================================================================
# Search Filters
# =============================================================================

class SearchKind(Enum):
    """What a tutor effect is allowed to find."""
    ANY = auto()
    CREATURE = auto()
    GREEN_CREATURE = auto()
    ENCHANTMENT_ARTIFACT = auto()
    BLUE_INSTANT = auto()
    BLUE = auto()
    LAND = auto()          # Library lands with one of ``land_types``
    WISH = auto()          # Sideboard cards with one of ``card_types``


@dataclass(frozen=True)
class SearchFilter:
    """
    A tutor restriction.

    Attributes:
        kind: The kind of search
        card_types: Card types a wish may fetch from the sideboard
        land_types: Land types a fetch land may find
    """
    kind: SearchKind = SearchKind.ANY
    card_types: FrozenSet[CardType] = field(default_factory=frozenset)
    land_types: FrozenSet[SubType] = field(default_factory=frozenset)

    @property
    def is_wish(self) -> bool:
        return self.kind is SearchKind.WISH

    @classmethod
    def wish(cls, *card_types: CardType) -> "SearchFilter":
        return cls(kind=SearchKind.WISH, card_types=frozenset(card_types))

    @classmethod
    def lands(cls, *land_types: SubType) -> "SearchFilter":
        return cls(kind=SearchKind.LAND, land_types=frozenset(land_types))
