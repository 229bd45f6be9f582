"""Goldfisher - Effect Resolution

This module implements the closed set of card effects the engine knows
how to resolve. An effect is a tagged value (``EffectKind`` plus optional
amount and search filter) stored on the card; resolution looks the kind up
in a dispatch table.

Every "which card" choice is delegated to the strategy. Finding nothing is
a silent no-op that is still recorded in the event log. A draw against an
empty library inside an effect does not end the game directly, it leaves
a pending loss on the game that the action loop reports.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from .events import SearchEvent
from .mana import sort_key_best_mana_to_play
from .objects import GameObject
from .types import CardType, ManaColor, SearchFilter, SearchKind, Zone
from .zones import InvariantViolation, LibraryPosition

if TYPE_CHECKING:
    from .game import Game
    from ..ai.strategy import Strategy


# =============================================================================
# Effect definitions
# =============================================================================

class EffectKind(Enum):
    """Every effect the engine can resolve."""
    MILL = auto()                    # Opponent library -= amount
    DRAW = auto()                    # Draw amount
    UNTAP_LANDS = auto()             # Untap amount lands, all if None
    DAMAGE_EACH = auto()             # Each player takes amount
    SEARCH_TO_HAND = auto()
    SEARCH_TO_LIBRARY_TOP = auto()
    SEARCH_TO_BATTLEFIELD = auto()
    FETCH_LAND = auto()              # Sacrifice, pay 1 life, land onto battlefield
    IMPULSE = auto()                 # Look at top amount, keep one
    INTUITION = auto()
    CAVERN_HARPY = auto()
    UNEARTH = auto()
    WORDS_OF_WISDOM = auto()
    SNAP = auto()
    FRANTIC_SEARCH = auto()
    BRAIN_FREEZE = auto()
    MEDITATE = auto()
    BRAINSTORM = auto()
    PONDER = auto()
    PREORDAIN = auto()


@dataclass(frozen=True)
class Effect:
    """
    An on-resolve effect.

    Attributes:
        kind: Which effect
        amount: Numeric parameter (cards, damage, lands)
        search: Search restriction for tutors
    """
    kind: EffectKind
    amount: Optional[int] = None
    search: Optional[SearchFilter] = None

    def __str__(self) -> str:
        if self.amount is not None:
            return f"{self.kind.name}({self.amount})"
        if self.search is not None:
            return f"{self.kind.name}({self.search.kind.name})"
        return self.kind.name


# =============================================================================
# Search helpers
# =============================================================================

def group_by_name(objects: List[GameObject]) -> Dict[str, List[GameObject]]:
    """Group objects by card name, keeping the given order within each group."""
    grouped: Dict[str, List[GameObject]] = {}
    for obj in objects:
        grouped.setdefault(obj.name, []).append(obj)
    return grouped


def _matches(obj: GameObject, search: SearchFilter) -> bool:
    kind = search.kind
    if kind is SearchKind.ANY:
        return True
    if kind is SearchKind.CREATURE:
        return obj.is_creature
    if kind is SearchKind.GREEN_CREATURE:
        return obj.is_creature and obj.is_color(ManaColor.GREEN)
    if kind is SearchKind.ENCHANTMENT_ARTIFACT:
        return obj.has_type(CardType.ENCHANTMENT) or obj.has_type(CardType.ARTIFACT)
    if kind is SearchKind.BLUE_INSTANT:
        return obj.has_type(CardType.INSTANT) and obj.is_color(ManaColor.BLUE)
    if kind is SearchKind.BLUE:
        return obj.is_color(ManaColor.BLUE)
    if kind is SearchKind.LAND:
        return obj.is_land and bool(obj.sub_types & search.land_types)
    if kind is SearchKind.WISH:
        return bool(obj.card_types & search.card_types)
    return False


def apply_search_filter(game: "Game", search: Optional[SearchFilter]) -> List[GameObject]:
    """
    Get the objects a search may find.

    Wishes look at the sideboard (Outside zone), every other search looks
    at the library.
    """
    search = search or SearchFilter()
    zone = Zone.OUTSIDE if search.is_wish else Zone.LIBRARY
    return [obj for obj in game.arena.in_zone(zone) if _matches(obj, search)]


# =============================================================================
# Effect Resolver
# =============================================================================

Handler = Callable[["Game", GameObject, Effect, "Strategy"], None]


class EffectResolver:
    """
    Resolves effects against a game.

    Dispatch is a table from EffectKind to handler method; adding an effect
    means adding an EffectKind member and a handler here.
    """

    def __init__(self) -> None:
        self._handlers: Dict[EffectKind, Handler] = {
            EffectKind.MILL: self._mill,
            EffectKind.DRAW: self._draw,
            EffectKind.UNTAP_LANDS: self._untap_lands,
            EffectKind.DAMAGE_EACH: self._damage_each,
            EffectKind.SEARCH_TO_HAND: self._search_to_hand,
            EffectKind.SEARCH_TO_LIBRARY_TOP: self._search_to_library_top,
            EffectKind.SEARCH_TO_BATTLEFIELD: self._search_to_battlefield,
            EffectKind.FETCH_LAND: self._fetch_land,
            EffectKind.IMPULSE: self._impulse,
            EffectKind.INTUITION: self._intuition,
            EffectKind.CAVERN_HARPY: self._cavern_harpy,
            EffectKind.UNEARTH: self._unearth,
            EffectKind.WORDS_OF_WISDOM: self._words_of_wisdom,
            EffectKind.SNAP: self._snap,
            EffectKind.FRANTIC_SEARCH: self._frantic_search,
            EffectKind.BRAIN_FREEZE: self._brain_freeze,
            EffectKind.MEDITATE: self._meditate,
            EffectKind.BRAINSTORM: self._brainstorm,
            EffectKind.PONDER: self._ponder,
            EffectKind.PREORDAIN: self._preordain,
        }

    def resolve(self, game: "Game", source: GameObject, strategy: "Strategy") -> None:
        """Resolve the effect of ``source``, if it has one."""
        effect = source.effect
        if effect is None:
            return
        game.log(f'Resolving {effect} of "{source.name}"', "debug")
        self._handlers[effect.kind](game, source, effect, strategy)

    # -------------------------------------------------------------------------
    # Simple effects
    # -------------------------------------------------------------------------

    def _mill(self, game, source, effect, strategy):
        game.mill_opponent(effect.amount or 0)

    def _draw(self, game, source, effect, strategy):
        game.draw_n(effect.amount or 1)

    def _damage_each(self, game, source, effect, strategy):
        game.damage_each(effect.amount or 0)

    def _words_of_wisdom(self, game, source, effect, strategy):
        game.draw_n(2)
        game.mill_opponent(1)

    def _brain_freeze(self, game, source, effect, strategy):
        cards_to_mill = 3 * game.storm
        game.announce(f"Brain Freeze with Storm {game.storm}: milling opponent for {cards_to_mill}")
        game.mill_opponent(cards_to_mill)

    def _meditate(self, game, source, effect, strategy):
        game.draw_n(4)
        game.turns_to_skip += 1

    def _untap_lands(self, game, source, effect, strategy):
        self.untap_lands(game, effect.amount)

    def untap_lands(self, game: "Game", count: Optional[int]) -> None:
        """Untap the best tapped lands one at a time, all of them if count is None."""
        if count is None:
            count = len(game.tapped_lands())

        for _ in range(count):
            tapped = sorted(game.tapped_lands(), key=sort_key_best_mana_to_play)
            if not tapped:
                return
            land = tapped[-1]
            game.announce(f'Untapping "{land.name}"')
            land.is_tapped = False

    # -------------------------------------------------------------------------
    # Searches
    # -------------------------------------------------------------------------

    def _record_search(self, game: "Game", source: GameObject,
                       found: List[GameObject], destination: Optional[Zone]) -> None:
        game.emit(SearchEvent(
            source=source.name,
            found=[obj.name for obj in found],
            destination=destination,
        ))

    def _search_to_hand(self, game, source, effect, strategy):
        search = effect.search or SearchFilter()
        candidates = apply_search_filter(game, search)
        found = strategy.select_best(game, group_by_name(candidates))

        if found is not None:
            game.move(found, Zone.HAND)
            if not search.is_wish:
                game.shuffle_library()
        self._record_search(game, source, [found] if found else [], Zone.HAND)

        # Wishes exile themselves
        if search.is_wish and not source.on_battlefield:
            game.move(source, Zone.EXILE)

    def _search_to_library_top(self, game, source, effect, strategy):
        candidates = apply_search_filter(game, effect.search)
        found = strategy.select_best(game, group_by_name(candidates))

        if found is not None:
            game.shuffle_library()
            game.move(found, Zone.LIBRARY, LibraryPosition.TOP)
        self._record_search(game, source, [found] if found else [], Zone.LIBRARY)

    def _search_to_battlefield(self, game, source, effect, strategy):
        candidates = apply_search_filter(game, effect.search)
        found = strategy.select_best(game, group_by_name(candidates))

        if found is not None:
            game.put_onto_battlefield(found)
            game.shuffle_library()
        self._record_search(game, source, [found] if found else [], Zone.BATTLEFIELD)

    def _fetch_land(self, game, source, effect, strategy):
        if source.on_battlefield:
            game.move(source, Zone.GRAVEYARD)
        game.take_damage(1)
        self._search_to_battlefield(game, source, effect, strategy)

    # -------------------------------------------------------------------------
    # Looking at the top of the library
    # -------------------------------------------------------------------------

    def look_at_top(self, game: "Game", source: GameObject,
                    amount: int, strategy: "Strategy") -> None:
        """Look at the top cards, put the best one in hand and the rest on the bottom.

        Raises:
            InvariantViolation: If a looked-at object is not in the library
        """
        cards = game.arena.library.peek(amount)
        for card in cards:
            if card.zone != Zone.LIBRARY:
                raise InvariantViolation(
                    f"Card {card.name} is on the wrong zone {card.zone.name}!"
                )

        game.announce("Looking at cards: " + ", ".join(f'"{card.name}"' for card in cards))

        selected = strategy.select_best(game, group_by_name(cards))
        if selected is not None:
            game.move(selected, Zone.HAND)
        self._record_search(game, source, [selected] if selected else [], Zone.HAND)

        for card in cards:
            if selected is None or card.object_id != selected.object_id:
                game.move(card, Zone.LIBRARY, LibraryPosition.BOTTOM)

    def _impulse(self, game, source, effect, strategy):
        self.look_at_top(game, source, effect.amount or 1, strategy)

    def _ponder(self, game, source, effect, strategy):
        self.look_at_top(game, source, 3, strategy)

    def _preordain(self, game, source, effect, strategy):
        self.look_at_top(game, source, 2, strategy)

    def _brainstorm(self, game, source, effect, strategy):
        # The card is already in the graveyard, the hand ends one card larger
        hand_size = len(game.hand)
        game.draw_n(3)
        to_return = strategy.discard_to_hand_size(game, hand_size + 1)
        for card in to_return:
            game.move(card, Zone.LIBRARY, LibraryPosition.TOP)

    def _intuition(self, game, source, effect, strategy):
        found = list(strategy.select_intuition(game))
        game.announce("Searched for cards: " + ", ".join(f'"{card.name}"' for card in found)
                      + " with Intuition")
        self._record_search(game, source, found, Zone.HAND)

        if found:
            game.move(found.pop(), Zone.HAND)
        for card in found:
            game.move(card, Zone.GRAVEYARD)

    # -------------------------------------------------------------------------
    # Card specific effects
    # -------------------------------------------------------------------------

    def _bounce_named(self, game: "Game", name: str) -> bool:
        target = game.battlefield.find_named(name)
        if target is None:
            return False
        game.announce(f'Bouncing "{name}" back to hand')
        game.move(target, Zone.HAND)
        return True

    def _cavern_harpy(self, game, source, effect, strategy):
        if self._bounce_named(game, "Maggot Carrier"):
            return

        if game.battlefield.count_named("Wirewood Savage") > 0 and len(game.library) > 1:
            game.announce('Bouncing "Cavern Harpy" back to hand')
            game.move(source, Zone.HAND)
            return

        if self._bounce_named(game, "Cloud of Faeries"):
            return
        if self._bounce_named(game, "Raven Familiar"):
            return

        # Otherwise the Harpy returns itself
        game.announce('Bouncing "Cavern Harpy" back to hand')
        game.move(source, Zone.HAND)

    def _unearth(self, game, source, effect, strategy):
        targets = game.graveyard.filter(
            lambda obj: obj.is_creature and obj.mana_value <= 3
        )
        target = strategy.select_best(game, group_by_name(targets))
        if target is None:
            self._record_search(game, source, [], Zone.BATTLEFIELD)
            return

        game.announce(f'Returning "{target.name}" to the battlefield')
        game.put_onto_battlefield(target)
        self._record_search(game, source, [target], Zone.BATTLEFIELD)
        self.resolve(game, target, strategy)

    def _snap(self, game, source, effect, strategy):
        self._bounce_named(game, "Cloud of Faeries")
        self.untap_lands(game, 2)

    def _frantic_search(self, game, source, effect, strategy):
        hand_size = len(game.hand)
        game.draw_n(2)
        for card in strategy.discard_to_hand_size(game, hand_size):
            game.discard(card)
        self.untap_lands(game, 3)


__all__ = [
    'EffectKind',
    'Effect',
    'EffectResolver',
    'apply_search_filter',
    'group_by_name',
]
