"""Deck strategies making the decisions of goldfished games"""
from enum import Enum
from typing import Dict, List, Type

from .strategy import Strategy
from .aluren import Aluren
from .frantic_storm import FranticStorm
from .pattern_combo import PatternCombo


class StrategyKind(Enum):
    """Registered strategies, valued by their display name."""
    ALUREN = Aluren.NAME
    FRANTIC_STORM = FranticStorm.NAME
    PATTERN_COMBO = PatternCombo.NAME

    @property
    def slug(self) -> str:
        """Short command line name, e.g. ``pattern-combo``."""
        return self.name.lower().replace('_', '-')

    @classmethod
    def from_name(cls, name: str) -> "StrategyKind":
        """
        Look up a strategy by its display name or its slug.

        Raises:
            KeyError: If no strategy is registered under ``name``
        """
        for kind in cls:
            if name in (kind.value, kind.slug):
                return kind
        raise KeyError(f"unknown strategy: {name!r}, "
                       f"expected one of {', '.join(strategy_names())}")


STRATEGIES: Dict[StrategyKind, Type[Strategy]] = {
    StrategyKind.ALUREN: Aluren,
    StrategyKind.FRANTIC_STORM: FranticStorm,
    StrategyKind.PATTERN_COMBO: PatternCombo,
}


def strategy_names() -> List[str]:
    return [kind.value for kind in StrategyKind]


def strategy_slugs() -> List[str]:
    return [kind.slug for kind in StrategyKind]


def get_strategy(name: str) -> Strategy:
    """
    Create a fresh strategy by its registered name or slug.

    Raises:
        KeyError: If no strategy is registered under ``name``
    """
    return STRATEGIES[StrategyKind.from_name(name)]()


__all__ = [
    'Strategy',
    'Aluren',
    'FranticStorm',
    'PatternCombo',
    'StrategyKind',
    'STRATEGIES',
    'strategy_names',
    'strategy_slugs',
    'get_strategy',
]
