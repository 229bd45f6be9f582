"""
Goldfisher - Strategy Base Class.

A Strategy makes every decision of a goldfished game: which hands to keep,
which action to take next, which card a search finds and which cards are
discarded. The engine only applies the rules of the chosen actions.

Subclasses implement the abstract methods and usually override
``discard_to_hand_size`` with a deck specific ordering of the hand.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..cards.parser import Decklist, default_decklist_path, load_deck_file
from ..engine.mana import PaymentPlan
from ..engine.objects import GameObject
from ..engine.types import CONTINUE, GameStatus, Outcome
from .utils import (
    Candidates, apply_search_filter, group_by_name, sort_key_best_mana_to_play,
)

if TYPE_CHECKING:
    from ..engine.game import Game


Castable = Sequence[Tuple[GameObject, PaymentPlan]]

# Damage needed to kill a goldfished opponent
LETHAL_DAMAGE = 20


class Strategy(ABC):
    """
    Base class for deck strategies.

    Attributes:
        NAME: Registered name of the strategy
        DECKLIST_FILE: Default decklist shipped in ``cards/decks``
    """

    NAME: str = ""
    DECKLIST_FILE: str = ""

    @property
    def name(self) -> str:
        return self.NAME

    def default_decklist(self) -> Decklist:
        """Load the decklist this strategy was written for."""
        return load_deck_file(default_decklist_path(self.DECKLIST_FILE))

    def cleanup(self) -> None:
        """Called during every cleanup step, resets per-turn state."""

    # =========================================================================
    # DECISIONS CONSUMED BY THE ENGINE
    # =========================================================================

    def game_status(self, game: "Game") -> GameStatus:
        """
        Check the win and loss conditions.

        Strategies with alternate win conditions extend this.
        """
        lethal = game.damage_dealt >= LETHAL_DAMAGE

        if game.life_total <= 0 and lethal:
            return GameStatus.finished(Outcome.DRAW)

        if game.life_total <= 0:
            return GameStatus.finished(Outcome.LOSE)

        if lethal:
            return GameStatus.finished(Outcome.WIN)

        if game.opponent_library <= 0:
            return GameStatus.finished(Outcome.WIN)

        return CONTINUE

    @abstractmethod
    def is_keepable_hand(self, game: "Game", mulligan_count: int) -> bool:
        """Decide whether to keep the current hand."""

    @abstractmethod
    def take_game_action(self, game: "Game") -> bool:
        """
        Take one action.

        Returns:
            True if an action was taken, False to pass the turn
        """

    @abstractmethod
    def select_best(self, game: "Game", cards: Candidates) -> Optional[GameObject]:
        """
        Pick the best card among candidates grouped by name.

        Returns:
            The chosen object, or None if there are no candidates
        """

    def select_intuition(self, game: "Game") -> List[GameObject]:
        """
        Pick up to three library cards for Intuition.

        The last card of the returned list is the one that goes to hand.
        """
        searchable = apply_search_filter(game, None)
        selected: List[GameObject] = []

        while searchable and len(selected) < 3:
            found = self.select_best(game, group_by_name(searchable))
            if found is None:
                break
            selected.append(found)
            searchable = [card for card in searchable if card.object_id != found.object_id]

        return selected

    def discard_to_hand_size(self, game: "Game", hand_size: int) -> List[GameObject]:
        """
        Choose the cards to get rid of so that ``hand_size`` cards remain.

        The default keeps ``hand_size`` successive ``select_best`` picks.
        """
        to_discard = list(game.hand)
        if len(to_discard) <= hand_size:
            return []

        for _ in range(hand_size):
            best = self.select_best(game, group_by_name(to_discard))
            if best is None:
                break
            to_discard = [card for card in to_discard if card.object_id != best.object_id]

        return to_discard

    # =========================================================================
    # SHARED ACTIONS
    # =========================================================================

    def cast_named(self, game: "Game", castable: Castable, card_name: str) -> bool:
        """Cast the first castable copy of ``card_name``."""
        for card, plan in castable:
            if card.name == card_name:
                game.cast_spell(self, card, plan)
                return True
        return False

    def cast_first_named(self, game: "Game", castable: Castable,
                         card_names: Sequence[str]) -> bool:
        """Cast the first card of a priority list that is castable."""
        for card_name in card_names:
            if self.cast_named(game, castable, card_name):
                return True
        return False

    def cast_mana_producers(self, game: "Game") -> bool:
        """Cast the castable mana creature producing the most colors."""
        mana_dorks = [(card, plan) for card, plan in game.find_castable()
                      if card.is_mana_dork]
        if not mana_dorks:
            return False

        mana_dorks.sort(key=lambda entry: sort_key_best_mana_to_play(entry[0]))
        card, plan = mana_dorks[-1]
        game.cast_spell(self, card, plan)
        return True

    def play_land(self, game: "Game") -> bool:
        """Play the land in hand producing the most colors, unlimited uses first."""
        if game.available_land_drops <= 0:
            return False

        lands = game.hand.filter(lambda card: card.is_land)
        if not lands:
            return False

        # TODO: Prefer the land that enables the most castable cards
        lands.sort(key=sort_key_best_mana_to_play)
        return game.play_land(lands[-1], self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


__all__ = [
    'Strategy',
    'Castable',
    'LETHAL_DAMAGE',
]
