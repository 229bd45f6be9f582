"""
Goldfisher - Premodern Frantic Storm Strategy.

Helm of Awakening and Sapphire Medallion make the blue spells cheap, Cloud
of Faeries, Snap, Turnabout and Frantic Search untap lands for more mana,
and the storm count built up during one big turn is turned into mill with
Brain Freeze.
"""

from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from ..engine.objects import GameObject
from ..engine.types import Zone
from .strategy import Strategy
from .utils import (
    Candidates, count_in_hand, find_first_named, first_candidate, sort_key_best_mana_to_play,
    sort_key_cmc,
)

if TYPE_CHECKING:
    from ..engine.game import Game


NAME = "Premodern - Frantic Storm"

COST_REDUCERS = ("Helm of Awakening", "Sapphire Medallion")
CANTRIPS = ("Frantic Search", "Impulse", "Meditate", "Sleight of Hand",
            "Merchant Scroll", "Words of Wisdom")

# Storm count at which Brain Freeze is the best card to find
BRAIN_FREEZE_STORM = 5


@dataclass
class ComboStatus:
    lands: int = 0
    mana_sources: int = 0
    cost_reducers: int = 0
    cantrips: int = 0
    cloud_of_faeries: int = 0


def brain_freeze_mill(storm: int, brain_freezes: int) -> int:
    """
    Cards milled by casting ``brain_freezes`` Brain Freezes in a row.

    Each cast adds one to the storm count before it resolves, and each
    copy mills 3.
    """
    return sum(3 * (storm + i + 1) for i in range(brain_freezes))


class FranticStorm(Strategy):
    """
    Goldfishes the Premodern Frantic Storm deck.

    Attributes:
        is_storming: Set once the turn is committed to going off, reset in cleanup
    """

    NAME = NAME
    DECKLIST_FILE = "frantic_storm.txt"

    def __init__(self):
        self.is_storming = False

    def cleanup(self) -> None:
        self.is_storming = False

    def combo_status(self, game: "Game", *zones: Zone) -> ComboStatus:
        status = ComboStatus()
        for obj in game.arena:
            if obj.zone not in zones:
                continue
            if obj.name in COST_REDUCERS:
                status.cost_reducers += 1
            if obj.name == "Cloud of Faeries":
                status.cloud_of_faeries += 1
            if obj.name in CANTRIPS:
                status.cantrips += 1
            if obj.is_land:
                status.lands += 1
            if obj.is_land or obj.is_mana_source:
                status.mana_sources += 1
        return status

    # =========================================================================
    # MULLIGANS
    # =========================================================================

    def is_keepable_hand(self, game: "Game", mulligan_count: int) -> bool:
        if mulligan_count >= 3:
            return True

        hand = self.combo_status(game, Zone.HAND)

        # The "perfect" hand
        if hand.cost_reducers >= 1 and hand.mana_sources >= 2 and hand.cantrips >= 1:
            return True

        if hand.lands == 0:
            return False

        if hand.mana_sources >= 6:
            return False

        return True

    # =========================================================================
    # SELECTIONS
    # =========================================================================

    def select_best(self, game: "Game", cards: Candidates) -> Optional[GameObject]:
        status = self.combo_status(game, Zone.HAND, Zone.BATTLEFIELD)

        wanted: List[str] = []
        if status.lands < 2:
            wanted.append("Island")
        if status.cost_reducers == 0:
            wanted.extend(COST_REDUCERS)
        if game.storm >= BRAIN_FREEZE_STORM:
            wanted.append("Brain Freeze")
        wanted.extend([
            "Meditate",
            "Impulse",
            "Cloud of Faeries",
            "Snap",
            "Merchant Scroll",
            "Cunning Wish",
            "Frantic Search",
            "Sleight of Hand",
            "Brain Freeze",
            "Turnabout",
            "Words of Wisdom",
            "Lotus Petal",
        ])

        card = find_first_named(cards, wanted)
        if card is not None:
            return card
        return first_candidate(cards)

    def discard_to_hand_size(self, game: "Game", hand_size: int) -> List[GameObject]:
        lands: List[GameObject] = []
        cost_reducers: List[GameObject] = []
        cantrips: List[GameObject] = []
        tutors: List[GameObject] = []
        untappers: List[GameObject] = []
        wincons: List[GameObject] = []
        petals: List[GameObject] = []
        other_cards: List[GameObject] = []

        cost_reducers_on_battlefield = game.battlefield.count(
            lambda obj: obj.name in COST_REDUCERS
        )

        for card in game.hand:
            if card.is_land:
                lands.append(card)
            elif card.name in COST_REDUCERS:
                cost_reducers.append(card)
            elif card.name in ("Frantic Search", "Meditate", "Impulse", "Sleight of Hand"):
                cantrips.append(card)
            elif card.name in ("Merchant Scroll", "Cunning Wish", "Intuition"):
                tutors.append(card)
            elif card.name == "Brain Freeze":
                wincons.append(card)
            elif card.name in ("Cloud of Faeries", "Snap", "Turnabout"):
                untappers.append(card)
            elif card.name == "Lotus Petal":
                petals.append(card)
            else:
                other_cards.append(card)

        lands.sort(key=sort_key_best_mana_to_play, reverse=True)

        ordered_hand: List[GameObject] = []

        # A balanced mix of lands and cost reducers first
        if cost_reducers_on_battlefield == 0:
            ordered_hand.extend(lands[:2])
            lands = lands[2:]
        if cost_reducers_on_battlefield < 2:
            ordered_hand.extend(cost_reducers[:1])
            cost_reducers = cost_reducers[1:]

        ordered_hand.extend(wincons)
        ordered_hand.extend(untappers[:2])
        ordered_hand.extend(cantrips[:2])
        ordered_hand.extend(tutors)
        # Petals over extra lands for quick kills
        ordered_hand.extend(petals)

        ordered_hand.extend(untappers[2:])
        ordered_hand.extend(lands)
        ordered_hand.extend(cantrips[2:])
        ordered_hand.extend(cost_reducers)
        ordered_hand.extend(other_cards)

        return ordered_hand[hand_size:]

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def take_game_action(self, game: "Game") -> bool:
        if self.play_land(game):
            return True

        battlefield = self.combo_status(game, Zone.BATTLEFIELD)
        castable = game.find_castable()

        if not self.is_storming and battlefield.cost_reducers < 2:
            # Lotus Petal is worth spending on a cost reducer
            if count_in_hand(game, COST_REDUCERS) > 0:
                if self.cast_named(game, castable, "Lotus Petal"):
                    return True
            if self.cast_first_named(game, castable, ["Sapphire Medallion", "Helm of Awakening"]):
                return True

        if not self.is_storming:
            hand = self.combo_status(game, Zone.HAND)
            if (battlefield.lands >= 2
                    and (battlefield.cost_reducers >= 1 or battlefield.lands >= 5)
                    and hand.cantrips >= 1):
                self.is_storming = True
                game.log("Time to start storming!")

        if self.is_storming:
            return self._storm(game, battlefield)

        # Dig for cost reducers with the cheap cantrips
        if self.cast_first_named(game, castable, ["Impulse", "Sleight of Hand", "Words of Wisdom"]):
            return True

        # Play something rather than discarding it
        if len(game.hand) > game.config.max_hand_size:
            if self.cast_first_named(game, castable,
                                     ["Lotus Petal", "Cloud of Faeries", "Merchant Scroll"]):
                return True

        return False

    def _storm(self, game: "Game", battlefield: ComboStatus) -> bool:
        # Floating everything makes the untappers pay off
        game.float_mana()
        castable = game.find_castable()

        if self.cast_first_named(game, castable, ["Lotus Petal", "Cloud of Faeries", "Turnabout"]):
            return True

        if battlefield.cloud_of_faeries > 0 and self.cast_named(game, castable, "Snap"):
            return True

        brain_freezes = count_in_hand(game, ["Brain Freeze"])
        if game.opponent_library <= brain_freeze_mill(game.storm, brain_freezes):
            if self.cast_named(game, castable, "Brain Freeze"):
                return True

        if self.cast_first_named(game, castable, [
            "Meditate",
            "Frantic Search",
            "Impulse",
            "Words of Wisdom",
            "Sleight of Hand",
            "Merchant Scroll",
            "Cunning Wish",
        ]):
            return True

        # Anything else, cheapest first
        if castable:
            card, plan = sorted(castable, key=lambda entry: sort_key_cmc(entry[0]))[0]
            game.cast_spell(self, card, plan)
            return True

        return False


__all__ = [
    'NAME',
    'COST_REDUCERS',
    'CANTRIPS',
    'ComboStatus',
    'FranticStorm',
    'brain_freeze_mill',
]
