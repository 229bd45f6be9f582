"""
Goldfisher - Premodern Aluren Strategy.

With Aluren on the battlefield every creature of mana value 3 or less is
cast for free. Cavern Harpy bounces a creature on entering and can return
itself to hand for 1 life, which loops Maggot Carrier for damage (Soul
Warden pays for the life), Raven Familiar or Wirewood Savage for cards and
Cloud of Faeries for mana.
"""

from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from ..engine.objects import GameObject
from ..engine.types import Zone
from .strategy import Strategy
from .utils import (
    Candidates, all_candidates, apply_search_filter, count_in_zones, find_first_named,
    find_n_with_priority, first_candidate, group_by_name, sort_key_best_mana_to_play,
)

if TYPE_CHECKING:
    from ..engine.game import Game


NAME = "Premodern - Aluren"

COMBO_PIECES = (
    "Maggot Carrier", "Soul Warden", "Wirewood Savage",
    "Raven Familiar", "Cloud of Faeries", "Cavern Harpy",
)


@dataclass
class ComboStatus:
    """Counts of the Aluren combo pieces in a set of zones."""
    mana_sources: int = 0
    lands: int = 0
    alurens: int = 0
    cloud_of_faeries: int = 0
    cavern_harpies: int = 0
    wirewood_savages: int = 0
    raven_familiars: int = 0
    soul_wardens: int = 0
    maggot_carriers: int = 0

    @property
    def draw_engines(self) -> int:
        return self.wirewood_savages + self.raven_familiars


_COUNTED_NAMES = {
    "Aluren": "alurens",
    "Cloud of Faeries": "cloud_of_faeries",
    "Cavern Harpy": "cavern_harpies",
    "Wirewood Savage": "wirewood_savages",
    "Raven Familiar": "raven_familiars",
    "Soul Warden": "soul_wardens",
    "Maggot Carrier": "maggot_carriers",
}


class Aluren(Strategy):
    """Goldfishes the Premodern Aluren combo deck."""

    NAME = NAME
    DECKLIST_FILE = "aluren.txt"

    def combo_status(self, game: "Game", *zones: Zone) -> ComboStatus:
        status = ComboStatus()

        for obj in game.arena:
            if obj.zone not in zones:
                continue

            attribute = _COUNTED_NAMES.get(obj.name)
            if attribute is not None:
                setattr(status, attribute, getattr(status, attribute) + 1)

            if obj.is_land:
                status.lands += 1
            if obj.is_mana_source and not obj.is_single_use_mana:
                status.mana_sources += 1

        return status

    # =========================================================================
    # MULLIGANS
    # =========================================================================

    def is_keepable_hand(self, game: "Game", mulligan_count: int) -> bool:
        if mulligan_count >= 3:
            # Just keep the hand with 4 cards
            return True

        hand = self.combo_status(game, Zone.HAND)

        if hand.lands == 0:
            return False

        # Too mana source heavy
        if hand.mana_sources >= 6:
            return False

        # One landers with at most one mana creature
        if hand.lands == 1 and hand.mana_sources <= 2:
            return False

        # Aluren with Cavern Harpy or a draw engine is always good enough
        if hand.alurens >= 1 and (hand.cavern_harpies >= 1 or hand.draw_engines >= 1):
            return True

        if hand.alurens >= 1 and mulligan_count > 0:
            return True

        # TODO: Give some value to tutors and draw spells
        return False

    # =========================================================================
    # SELECTIONS
    # =========================================================================

    def select_best(self, game: "Game", cards: Candidates) -> Optional[GameObject]:
        status = self.combo_status(game, Zone.HAND, Zone.BATTLEFIELD)
        battlefield = self.combo_status(game, Zone.BATTLEFIELD)

        if battlefield.alurens >= 1:
            card = self._best_with_aluren(status, cards)
        else:
            card = self._best_without_aluren(game, status, cards)

        if card is not None:
            return card

        card = find_first_named(cards, ("Living Wish", "Intuition", "Impulse"))
        if card is not None:
            return card

        return first_candidate(cards)

    def _best_with_aluren(self, status: ComboStatus, cards: Candidates) -> Optional[GameObject]:
        wanted: List[str] = []

        if status.cavern_harpies == 0:
            wanted.append("Cavern Harpy")
        if status.soul_wardens == 0 and status.draw_engines == 0:
            wanted.extend(["Wirewood Savage", "Raven Familiar"])
        if status.soul_wardens == 0:
            wanted.append("Soul Warden")
        if status.maggot_carriers == 0:
            wanted.append("Maggot Carrier")
        if status.draw_engines == 0:
            wanted.extend(["Wirewood Savage", "Raven Familiar"])
        wanted.append("Cloud of Faeries")

        return find_first_named(cards, wanted)

    def _best_without_aluren(self, game: "Game", status: ComboStatus,
                             cards: Candidates) -> Optional[GameObject]:
        if status.alurens == 0:
            card = find_first_named(cards, ("Aluren",))
            if card is not None:
                return card

        if status.mana_sources < 4:
            if game.available_land_drops > 0:
                lands = [card for card in all_candidates(cards) if card.is_land]
                if lands:
                    lands.sort(key=sort_key_best_mana_to_play)
                    return cards[lands[-1].name][0]

            card = find_first_named(cards, ("Birds of Paradise", "Wall of Roots"))
            if card is not None:
                return card

        wanted: List[str] = []
        if status.cavern_harpies == 0:
            wanted.append("Cavern Harpy")
        if status.draw_engines == 0:
            wanted.extend(["Raven Familiar", "Wirewood Savage"])
        if status.soul_wardens == 0:
            wanted.append("Soul Warden")
        if status.maggot_carriers == 0:
            wanted.append("Maggot Carrier")

        return find_first_named(cards, wanted)

    def select_intuition(self, game: "Game") -> List[GameObject]:
        searchable = apply_search_filter(game, None)
        found = self.select_best(game, group_by_name(searchable))
        if found is None:
            # Empty library
            return []

        cards: List[GameObject] = []

        if found.name == "Aluren":
            priority_list = ["Aluren"]
        elif found.name == "Cavern Harpy":
            priority_list = ["Cavern Harpy", "Unearth"]
        elif found.name in ("Wirewood Savage", "Raven Familiar"):
            priority_list = ["Wirewood Savage", "Raven Familiar"]
        elif found.name == "Birds of Paradise":
            priority_list = ["Birds of Paradise", "Wall of Roots", "City of Brass", "Gemstone Mine"]
        elif found.is_land:
            priority_list = ["City of Brass", "Gemstone Mine", "Llanowar Wastes", "Forest"]
        elif found.is_creature:
            cards.append(found)
            priority_list = ["Unearth", "Raven Familiar", "Soul Warden", "Wirewood Savage"]
        else:
            # Searching for Living Wish or Intuition makes no sense, grab
            # something useful instead
            priority_list = ["Unearth", "Raven Familiar", "Soul Warden",
                             "Wirewood Savage", "Impulse"]

        for card in find_n_with_priority(game, 3, priority_list):
            if len(cards) >= 3:
                break
            if card not in cards:
                cards.append(card)

        if len(cards) != 3 and len(cards) != len(game.library):
            game.log(f"Intuition found {len(cards)} cards", "warning")

        return cards

    def discard_to_hand_size(self, game: "Game", hand_size: int) -> List[GameObject]:
        is_aluren_on_battlefield = game.battlefield.find_named("Aluren") is not None

        lands: List[GameObject] = []
        alurens: List[GameObject] = []
        cavern_harpies: List[GameObject] = []
        draw_engines: List[GameObject] = []
        tutors: List[GameObject] = []
        wincons: List[GameObject] = []
        mana_dorks: List[GameObject] = []
        other_cards: List[GameObject] = []

        for card in game.hand:
            if card.is_land:
                lands.append(card)
            elif card.name == "Aluren":
                alurens.append(card)
            elif card.name == "Cavern Harpy":
                cavern_harpies.append(card)
            elif card.name in ("Wirewood Savage", "Raven Familiar"):
                draw_engines.append(card)
            elif card.name in ("Living Wish", "Intuition"):
                tutors.append(card)
            elif card.name in ("Maggot Carrier", "Soul Warden"):
                wincons.append(card)
            elif is_aluren_on_battlefield and card.name == "Unearth":
                wincons.append(card)
            elif card.is_mana_dork:
                mana_dorks.append(card)
            else:
                other_cards.append(card)

        # Best lands first
        lands.sort(key=sort_key_best_mana_to_play, reverse=True)

        ordered_hand: List[GameObject] = []

        # A balanced mix of lands and combo pieces first
        if not is_aluren_on_battlefield:
            ordered_hand.extend(lands[:2])
            lands = lands[2:]
            ordered_hand.extend(alurens[:1])
            alurens = alurens[1:]

        ordered_hand.extend(wincons)
        ordered_hand.extend(cavern_harpies[:1])
        cavern_harpies = cavern_harpies[1:]

        if not is_aluren_on_battlefield:
            ordered_hand.extend(draw_engines[:1])
            draw_engines = draw_engines[1:]

        ordered_hand.extend(tutors)
        # Mana creatures over extra lands for quick kills
        ordered_hand.extend(mana_dorks)

        # The rest, still in priority order
        ordered_hand.extend(lands)
        ordered_hand.extend(draw_engines)
        ordered_hand.extend(other_cards)
        ordered_hand.extend(cavern_harpies)
        ordered_hand.extend(alurens)

        return ordered_hand[hand_size:]

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def take_game_action(self, game: "Game") -> bool:
        if self.play_land(game):
            return True

        battlefield = self.combo_status(game, Zone.BATTLEFIELD)
        hand = self.combo_status(game, Zone.HAND)

        if battlefield.alurens == 0:
            return self._set_up_aluren(game, hand)
        return self._go_off(game, battlefield, hand)

    def _set_up_aluren(self, game: "Game", hand: ComboStatus) -> bool:
        castable = game.find_castable()
        others = ["Intuition", "Living Wish", "Impulse", "Soul Warden", "Maggot Carrier",
                  "Cloud of Faeries", "Raven Familiar", "Wirewood Savage", "Cavern Harpy"]

        if hand.alurens == 0:
            if self.cast_first_named(game, castable, ["Aluren"] + others):
                return True
            return self.cast_mana_producers(game)

        if self.cast_named(game, castable, "Aluren"):
            return True
        if self.cast_mana_producers(game):
            return True
        return self.cast_first_named(game, castable, others)

    def _go_off(self, game: "Game", battlefield: ComboStatus, hand: ComboStatus) -> bool:
        harpy = game.battlefield.find_named("Cavern Harpy")
        if harpy is not None:
            game.announce('Returning "Cavern Harpy" back to hand')
            game.move(harpy, Zone.HAND)
            game.take_damage(1)
            return True

        # Mana creatures are free with Aluren
        if self.cast_mana_producers(game):
            return True

        castable = game.find_castable()

        have = self.combo_status(game, Zone.HAND, Zone.BATTLEFIELD)
        priority_order = ["Soul Warden", "Maggot Carrier", "Wirewood Savage", "Living Wish"]
        if not (have.cavern_harpies and have.soul_wardens and have.draw_engines):
            priority_order.append("Intuition")
        if self.cast_first_named(game, castable, priority_order):
            return True

        # Keep a card in the library so that the turn can be passed
        if len(game.library) > 1 and self.cast_named(game, castable, "Raven Familiar"):
            return True

        lands_on_battlefield = game.battlefield.count(lambda obj: obj.is_land)
        if (hand.cloud_of_faeries >= 1 and hand.cavern_harpies >= 1
                and lands_on_battlefield > 0
                and sum(game.floating_mana.values()) < 5):
            # Cloud of Faeries untaps lands for more mana, at the cost of
            # life unless Soul Warden is around
            game.float_mana()
            castable = game.find_castable()
            if self.cast_named(game, castable, "Cloud of Faeries"):
                return True

        # Combo pieces may have been discarded
        in_graveyard = count_in_zones(game, (Zone.GRAVEYARD,), *COMBO_PIECES)
        if in_graveyard and self.cast_named(game, castable, "Unearth"):
            return True

        if (len(game.library) <= 1 and hand.maggot_carriers == 0
                and battlefield.maggot_carriers == 0):
            # Out of cards and no way to deal damage
            return False

        something_to_bounce = (battlefield.maggot_carriers > 0
                               or battlefield.cloud_of_faeries > 0
                               or battlefield.raven_familiars > 0)

        if hand.cavern_harpies >= 1 and (something_to_bounce or battlefield.wirewood_savages > 0):
            if self.cast_named(game, castable, "Cavern Harpy"):
                return True

        return False


__all__ = [
    'NAME',
    'COMBO_PIECES',
    'ComboStatus',
    'Aluren',
]
