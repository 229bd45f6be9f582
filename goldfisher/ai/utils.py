"""
Goldfisher - Strategy Helpers.

Small predicates and lookups shared by the deck strategies. Candidates are
passed around grouped by card name (see ``group_by_name``), so most helpers
work on either a zone or such a mapping.
"""

from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from ..engine.effects import apply_search_filter, group_by_name
from ..engine.mana import sort_key_best_mana_to_play, sort_key_best_mana_to_use, sort_key_cmc
from ..engine.objects import GameObject
from ..engine.types import CardType, Zone

if TYPE_CHECKING:
    from ..engine.game import Game


Candidates = Dict[str, List[GameObject]]


# =============================================================================
# Predicates
# =============================================================================

def is_rector(card: GameObject) -> bool:
    return card.name == "Academy Rector"


def is_pattern(card: GameObject) -> bool:
    return card.name == "Pattern of Rebirth"


def is_sac_outlet(card: GameObject) -> bool:
    return card.is_sac_outlet


def is_enchantment_or_artifact(card: GameObject) -> bool:
    return card.has_type(CardType.ENCHANTMENT) or card.has_type(CardType.ARTIFACT)


# =============================================================================
# Lookups
# =============================================================================

def find_named(cards: Candidates, name: str) -> Optional[GameObject]:
    """First copy of ``name`` among the grouped candidates, if any."""
    copies = cards.get(name)
    if copies:
        return copies[0]
    return None


def find_first_named(cards: Candidates, names: Iterable[str]) -> Optional[GameObject]:
    """First copy of the first name in ``names`` found among the candidates."""
    for name in names:
        card = find_named(cards, name)
        if card is not None:
            return card
    return None


def first_candidate(cards: Candidates) -> Optional[GameObject]:
    for copies in cards.values():
        if copies:
            return copies[0]
    return None


def all_candidates(cards: Candidates) -> List[GameObject]:
    return [card for copies in cards.values() for card in copies]


def count_in_zones(game: "Game", zones: Iterable[Zone], *names: str) -> int:
    """Count objects with one of ``names`` in any of the given zones."""
    zones = tuple(zones)
    return sum(1 for obj in game.arena if obj.zone in zones and obj.name in names)


def count_in_hand(game: "Game", names: Iterable[str]) -> int:
    names = tuple(names)
    return game.hand.count(lambda card: card.name in names)


def find_n_with_priority(game: "Game", count: int,
                         priority_list: Iterable[str]) -> List[GameObject]:
    """
    Pick up to ``count`` distinct library cards.

    Names are taken in priority order, as many copies of each as still fit.
    When the priority names run out the rest is filled with any other
    library cards. Nothing is moved; the caller decides where the cards go.

    Args:
        game: The game whose library is searched
        count: Number of cards wanted
        priority_list: Card names, most wanted first

    Returns:
        At most ``count`` library objects, no object twice
    """
    found: List[GameObject] = []
    seen = set()

    for name in priority_list:
        for card in game.library:
            if len(found) >= count:
                return found
            if card.name == name and card.object_id not in seen:
                found.append(card)
                seen.add(card.object_id)

    for card in game.library:
        if len(found) >= count:
            break
        if card.object_id not in seen:
            found.append(card)
            seen.add(card.object_id)

    return found


__all__ = [
    'Candidates',
    'apply_search_filter',
    'group_by_name',
    'sort_key_best_mana_to_play',
    'sort_key_best_mana_to_use',
    'sort_key_cmc',
    'is_rector',
    'is_pattern',
    'is_sac_outlet',
    'is_enchantment_or_artifact',
    'find_named',
    'find_first_named',
    'first_candidate',
    'all_candidates',
    'count_in_zones',
    'count_in_hand',
    'find_n_with_priority',
]
