"""
Goldfisher - Premodern Pattern Combo Strategy.

Pattern of Rebirth on a creature, or Academy Rector fetching it, plus a
sacrifice outlet assembles the combo. The sacrifice chains themselves are
not simulated: the game is won as soon as one of the known winning
battlefield combinations is in place.
"""

from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from ..engine.objects import GameObject
from ..engine.types import GameStatus, Outcome, Zone
from .strategy import Castable, Strategy
from .utils import (
    Candidates, all_candidates, find_named, first_candidate, is_enchantment_or_artifact,
    is_pattern, is_rector, sort_key_best_mana_to_play, sort_key_cmc,
)

if TYPE_CHECKING:
    from ..engine.game import Game


NAME = "Premodern - Pattern Combo"


@dataclass
class ComboStatus:
    """
    Combo pieces in the counted zones.

    ``pattern_on_sac_outlet`` and the single use sacrifice outlets (Cabal
    Therapy in the graveyard, untapped Phyrexian Tower) are always taken
    from the whole game.
    """
    mana_sources: int = 0
    lands: int = 0
    creatures: int = 0
    academy_rectors: int = 0
    multi_use_sac_outlets: int = 0
    single_use_sac_outlets: int = 0
    patterns: int = 0
    pattern_on_sac_outlet: bool = False


class PatternCombo(Strategy):
    """Goldfishes the Premodern Pattern of Rebirth / Academy Rector deck."""

    NAME = NAME
    DECKLIST_FILE = "pattern_combo.txt"

    def combo_status(self, game: "Game", include_hand: bool,
                     include_battlefield: bool) -> ComboStatus:
        zones = []
        if include_hand:
            zones.append(Zone.HAND)
        if include_battlefield:
            zones.append(Zone.BATTLEFIELD)

        status = ComboStatus()
        for obj in game.arena:
            if obj.zone not in zones:
                continue
            if obj.is_creature:
                status.creatures += 1
            if is_rector(obj):
                status.academy_rectors += 1
            if obj.is_sac_outlet:
                status.multi_use_sac_outlets += 1
            if is_pattern(obj):
                status.patterns += 1
            if obj.is_land:
                status.lands += 1
            if obj.is_mana_source and not obj.is_single_use_mana:
                status.mana_sources += 1

        status.pattern_on_sac_outlet = any(
            target.is_sac_outlet for target in self._pattern_targets(game)
        )

        cabal_therapies = game.graveyard.count_named("Cabal Therapy")
        untapped_towers = game.battlefield.count(
            lambda obj: obj.name == "Phyrexian Tower" and not obj.is_tapped
        )
        status.single_use_sac_outlets = cabal_therapies + untapped_towers

        return status

    def _pattern_targets(self, game: "Game") -> List[GameObject]:
        """Objects enchanted by a Pattern of Rebirth on the battlefield."""
        return [
            target
            for target in (game.get_object(pattern.attached_to)
                           for pattern in game.battlefield.filter(is_pattern)
                           if pattern.attached_to is not None)
            if target.zone == Zone.BATTLEFIELD
        ]

    # =========================================================================
    # WIN CONDITIONS
    # =========================================================================

    def game_status(self, game: "Game") -> GameStatus:
        status = super().game_status(game)
        if status.is_finished:
            return status

        if self.is_combo_assembled(game):
            game.announce("Combo assembled")
            return GameStatus.finished(Outcome.WIN)

        return status

    def is_combo_assembled(self, game: "Game") -> bool:
        """Check the battlefield for a winning combination."""
        # TODO: Make sure the required combo pieces are still in the library
        status = self.combo_status(game, include_hand=False, include_battlefield=True)

        # 1) Sac outlet + Pattern of Rebirth on another creature
        if (status.multi_use_sac_outlets >= 1 and status.patterns >= 1
                and not status.pattern_on_sac_outlet):
            return True

        # 2) Pattern of Rebirth on a sac outlet + a second sac outlet
        if (status.multi_use_sac_outlets >= 2 and status.patterns >= 1
                and status.pattern_on_sac_outlet):
            return True

        # 3) Sac outlet + Academy Rector + any redundant creature
        if (status.multi_use_sac_outlets >= 1 and status.academy_rectors >= 1
                and status.creatures >= 3):
            return True

        # 4) Academy Rector + Pattern of Rebirth + Cabal Therapy or Phyrexian Tower
        if (status.academy_rectors >= 1 and status.patterns >= 1
                and status.single_use_sac_outlets >= 1):
            return True

        # 5) Two Academy Rectors + a single use sac outlet + three creatures
        if (status.academy_rectors >= 2 and status.single_use_sac_outlets >= 1
                and status.creatures >= 3):
            return True

        # 6) Two Academy Rectors + two single use sac outlets: sacrifice the
        #    first for Pattern on the second, sacrifice the second for
        #    Iridescent Drake and Goblin Bombardment
        if status.academy_rectors >= 2 and status.single_use_sac_outlets >= 2:
            return True

        return False

    # =========================================================================
    # MULLIGANS
    # =========================================================================

    def is_keepable_hand(self, game: "Game", mulligan_count: int) -> bool:
        if mulligan_count >= 3:
            return True

        hand = self.combo_status(game, include_hand=True, include_battlefield=False)

        if hand.lands == 0:
            return False

        if hand.mana_sources >= 6:
            return False

        if hand.lands == 1 and hand.mana_sources <= 2:
            return False

        # Rector or Pattern with a sac outlet is always good
        if (hand.patterns >= 1 or hand.academy_rectors >= 1) and hand.multi_use_sac_outlets >= 1:
            return True

        # One combo piece and a creature is enough after two mulligans
        has_combo_piece = (hand.patterns >= 1 or hand.academy_rectors >= 1
                           or hand.multi_use_sac_outlets >= 1)
        if has_combo_piece and hand.creatures > 0 and mulligan_count > 1:
            return True

        return False

    # =========================================================================
    # SELECTIONS
    # =========================================================================

    def select_best(self, game: "Game", cards: Candidates) -> Optional[GameObject]:
        candidates = all_candidates(cards)
        if not candidates:
            return None

        if all(card.is_creature for card in candidates):
            card = find_named(cards, self.best_creature_to_find(game))
        elif all(is_enchantment_or_artifact(card) for card in candidates):
            card = find_named(cards, self.best_enchantment_or_artifact_to_find(game))
        else:
            card = None

        if card is not None:
            return card
        return first_candidate(cards)

    def _is_pattern_on_redundant_creature(self, game: "Game", status: ComboStatus) -> bool:
        for target in self._pattern_targets(game):
            if not target.is_sac_outlet:
                return True
            # A Pattern on a sac outlet needs another sac outlet
            if status.multi_use_sac_outlets >= 2:
                return True
        return False

    def best_creature_to_find(self, game: "Game") -> str:
        status = self.combo_status(game, include_hand=True, include_battlefield=True)

        if self._is_pattern_on_redundant_creature(game, status):
            return "Carrion Feeder"
        if status.academy_rectors == 0 and status.patterns == 0:
            return "Academy Rector"
        if status.multi_use_sac_outlets == 0:
            return "Carrion Feeder"
        if status.mana_sources < 4:
            return "Birds of Paradise"
        return "Academy Rector"

    def best_enchantment_or_artifact_to_find(self, game: "Game") -> str:
        status = self.combo_status(game, include_hand=True, include_battlefield=True)

        if self._is_pattern_on_redundant_creature(game, status):
            return "Goblin Bombardment"
        if status.academy_rectors == 0 and status.patterns == 0:
            return "Pattern of Rebirth"
        if status.multi_use_sac_outlets == 0:
            return "Goblin Bombardment"
        if status.mana_sources < 4:
            return "Lotus Petal"
        return "Pattern of Rebirth"

    def discard_to_hand_size(self, game: "Game", hand_size: int) -> List[GameObject]:
        lands: List[GameObject] = []
        patterns_or_rectors: List[GameObject] = []
        mana_dorks: List[GameObject] = []
        sac_outlets: List[GameObject] = []
        redundant_cards: List[GameObject] = []

        for card in game.hand:
            if card.is_land:
                lands.append(card)
            elif is_pattern(card) or is_rector(card):
                patterns_or_rectors.append(card)
            elif card.is_sac_outlet:
                sac_outlets.append(card)
            elif card.is_mana_dork:
                mana_dorks.append(card)
            else:
                redundant_cards.append(card)

        lands.sort(key=sort_key_best_mana_to_play, reverse=True)
        sac_outlets.sort(key=sort_key_cmc)

        ordered_hand = lands[:2] + patterns_or_rectors[:1] + sac_outlets[:1]
        # Mana creatures over extra lands for quick kills
        ordered_hand += mana_dorks
        ordered_hand += lands[2:] + patterns_or_rectors[1:] + sac_outlets[1:]
        ordered_hand += redundant_cards

        return ordered_hand[hand_size:]

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def take_game_action(self, game: "Game") -> bool:
        return (self.play_land(game)
                or self.cast_pattern_of_rebirth(game)
                or self.cast_academy_rector(game)
                or self.cast_sac_outlet(game)
                or self.cast_mana_producers(game)
                or self.cast_other_creature(game)
                or self.cast_others(game))

    def cast_pattern_of_rebirth(self, game: "Game") -> bool:
        if game.battlefield.find_first(is_pattern) is not None:
            return False

        creatures = game.battlefield.filter(lambda obj: obj.is_creature)
        if not creatures:
            return False

        pattern = next(((card, plan) for card, plan in game.find_castable()
                        if is_pattern(card)), None)
        if pattern is None:
            return False

        # Non sacrifice outlets make better targets
        non_sac_creatures = [creature for creature in creatures if not creature.is_sac_outlet]
        target = non_sac_creatures[0] if non_sac_creatures else creatures[0]

        card, plan = pattern
        game.cast_spell(self, card, plan, attach_to=target)
        return True

    def cast_academy_rector(self, game: "Game") -> bool:
        if game.battlefield.find_first(is_pattern) is not None:
            return False
        castable = game.find_castable()
        return self.cast_named(game, castable, "Academy Rector")

    def cast_sac_outlet(self, game: "Game") -> bool:
        return self._cast_cheapest(game, lambda card: card.is_sac_outlet)

    def cast_other_creature(self, game: "Game") -> bool:
        return self._cast_cheapest(game, lambda card: card.is_creature)

    def cast_others(self, game: "Game") -> bool:
        # Pattern of Rebirth without a creature to enchant is held back
        return self._cast_cheapest(game, lambda card: not is_pattern(card))

    def _cast_cheapest(self, game: "Game", predicate) -> bool:
        castable: Castable = [(card, plan) for card, plan in game.find_castable()
                              if predicate(card)]
        if not castable:
            return False

        card, plan = sorted(castable, key=lambda entry: sort_key_cmc(entry[0]))[0]
        game.cast_spell(self, card, plan)
        return True


__all__ = [
    'NAME',
    'ComboStatus',
    'PatternCombo',
]
