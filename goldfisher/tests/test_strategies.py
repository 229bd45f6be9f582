"""
Test suite for deck strategies - validates keep, search and play decisions.

Tests cover:
- Strategy registry
- Shared helpers (land choice, priority searches)
- Premodern Aluren search priorities
- Premodern Frantic Storm keeps and Brain Freeze math
- Premodern Pattern Combo win detection and Pattern targeting
- Complete games with every registered strategy
"""
import pytest

from ..ai import (
    Aluren, FranticStorm, PatternCombo, StrategyKind, get_strategy, strategy_names,
    strategy_slugs,
)
from ..ai.frantic_storm import brain_freeze_mill
from ..ai.utils import find_n_with_priority, group_by_name
from ..engine.effects import apply_search_filter
from ..engine.events import LandPlayedEvent, SpellCastEvent
from ..engine.game import Game, GameConfig
from ..engine.types import CardType, Outcome, SearchFilter, Zone
from .mocks.mock_strategy import MockStrategy


def put(game, name, zone, count=1):
    """Move maindeck copies of a card into a zone."""
    moved = []
    for obj in game.arena:
        if len(moved) >= count:
            break
        if obj.name == name and obj.zone is not zone and not obj.is_sideboard:
            game.move(obj, zone)
            moved.append(obj)
    assert len(moved) == count, f"not enough copies of {name}"
    return moved


def library_candidates(game):
    return group_by_name(list(game.library))


# =============================================================================
# REGISTRY TESTS
# =============================================================================

class TestRegistry:
    """Tests for looking strategies up by name."""

    def test_names(self):
        assert strategy_names() == [
            "Premodern - Aluren",
            "Premodern - Frantic Storm",
            "Premodern - Pattern Combo",
        ]

    @pytest.mark.parametrize("name, strategy_class", [
        ("Premodern - Aluren", Aluren),
        ("Premodern - Frantic Storm", FranticStorm),
        ("Premodern - Pattern Combo", PatternCombo),
    ])
    def test_get_strategy(self, name, strategy_class):
        strategy = get_strategy(name)

        assert isinstance(strategy, strategy_class)
        assert strategy.name == name

    def test_slugs(self):
        assert strategy_slugs() == ["aluren", "frantic-storm", "pattern-combo"]

    @pytest.mark.parametrize("slug, strategy_class", [
        ("aluren", Aluren),
        ("frantic-storm", FranticStorm),
        ("pattern-combo", PatternCombo),
    ])
    def test_get_strategy_by_slug(self, slug, strategy_class):
        assert isinstance(get_strategy(slug), strategy_class)
        assert StrategyKind.from_name(slug).value == strategy_class.NAME

    def test_fresh_instances(self):
        assert get_strategy("Premodern - Aluren") is not get_strategy("Premodern - Aluren")

    def test_unknown_strategy(self):
        with pytest.raises(KeyError) as excinfo:
            get_strategy("Legacy - Elves")

        assert "Legacy - Elves" in str(excinfo.value)


# =============================================================================
# SHARED HELPER TESTS
# =============================================================================

class TestSharedHelpers:
    """Tests for the helpers every strategy uses."""

    def test_play_land_order(self, game):
        """Test City of Brass goes first, then Gemstone Mine, then Llanowar Wastes."""
        strategy = Aluren()
        for _ in range(5):
            game.create_object("City of Brass", Zone.HAND)
        for _ in range(4):
            game.create_object("Gemstone Mine", Zone.HAND)
        game.create_object("Llanowar Wastes", Zone.HAND)
        game.available_land_drops = 10

        while strategy.play_land(game):
            pass

        played = [event.name for event in game.events.of_type(LandPlayedEvent)]
        assert played == ["City of Brass"] * 5 + ["Gemstone Mine"] * 4 + ["Llanowar Wastes"]

    def test_find_n_with_priority(self, game):
        for name in ("Forest", "Forest", "Aluren", "Forest", "Cavern Harpy"):
            game.create_object(name, Zone.LIBRARY)

        found = find_n_with_priority(game, 3, ["Aluren", "Cavern Harpy", "Aluren"])

        assert [card.name for card in found] == ["Aluren", "Cavern Harpy", "Forest"]
        assert len({card.object_id for card in found}) == 3
        assert len(game.library) == 5

    def test_find_n_with_small_library(self, game):
        game.create_object("Forest", Zone.LIBRARY)

        assert len(find_n_with_priority(game, 3, ["Aluren"])) == 1

    def test_default_intuition_picks_three(self, game):
        strategy = MockStrategy()
        for _ in range(5):
            game.create_object("Forest", Zone.LIBRARY)

        found = strategy.select_intuition(game)

        assert len(found) == 3
        assert len({card.object_id for card in found}) == 3

    def test_default_discard(self, game):
        strategy = MockStrategy()
        for _ in range(9):
            game.create_object("Forest", Zone.HAND)

        assert len(strategy.discard_to_hand_size(game, 7)) == 2
        assert strategy.discard_to_hand_size(game, 9) == []


# =============================================================================
# ALUREN TESTS
# =============================================================================

@pytest.fixture
def aluren_game():
    return Game(Aluren().default_decklist(), GameConfig(seed=1))


class TestAlurenSearches:
    """Tests for what the Aluren strategy looks for."""

    def test_aluren_first(self, aluren_game):
        best = Aluren().select_best(aluren_game, library_candidates(aluren_game))
        assert best.name == "Aluren"

    def test_lands_after_aluren(self, aluren_game):
        put(aluren_game, "Aluren", Zone.HAND)

        best = Aluren().select_best(aluren_game, library_candidates(aluren_game))

        assert best.name == "City of Brass"

    def test_harpy_with_enough_mana(self, aluren_game):
        put(aluren_game, "Aluren", Zone.HAND)
        put(aluren_game, "City of Brass", Zone.HAND, 4)

        best = Aluren().select_best(aluren_game, library_candidates(aluren_game))

        assert best.name == "Cavern Harpy"

    def test_draw_engine_after_harpy(self, aluren_game):
        put(aluren_game, "Aluren", Zone.HAND)
        put(aluren_game, "Cavern Harpy", Zone.HAND)
        put(aluren_game, "City of Brass", Zone.HAND, 4)

        best = Aluren().select_best(aluren_game, library_candidates(aluren_game))

        assert best.name == "Raven Familiar"

    @pytest.mark.parametrize("setup, expected", [
        ([], "Cavern Harpy"),
        ([("Cavern Harpy", Zone.HAND)], "Wirewood Savage"),
        ([("Cavern Harpy", Zone.HAND), ("Soul Warden", Zone.HAND)], "Wirewood Savage"),
        ([("Cavern Harpy", Zone.HAND), ("Wirewood Savage", Zone.GRAVEYARD)], "Raven Familiar"),
        ([("Cavern Harpy", Zone.HAND), ("Raven Familiar", Zone.BATTLEFIELD)], "Soul Warden"),
        ([("Cavern Harpy", Zone.HAND), ("Wirewood Savage", Zone.BATTLEFIELD)], "Soul Warden"),
    ])
    def test_with_aluren_on_battlefield(self, aluren_game, setup, expected):
        put(aluren_game, "Aluren", Zone.BATTLEFIELD)
        for name, zone in setup:
            put(aluren_game, name, zone)

        best = Aluren().select_best(aluren_game, library_candidates(aluren_game))

        assert best.name == expected

    def test_living_wish_for_maggot_carrier(self, aluren_game):
        put(aluren_game, "Aluren", Zone.BATTLEFIELD)
        put(aluren_game, "Cavern Harpy", Zone.HAND)
        put(aluren_game, "Raven Familiar", Zone.BATTLEFIELD)
        put(aluren_game, "Soul Warden", Zone.BATTLEFIELD)

        wish = SearchFilter.wish(CardType.CREATURE, CardType.LAND)
        candidates = group_by_name(apply_search_filter(aluren_game, wish))
        best = Aluren().select_best(aluren_game, candidates)

        assert best.name == "Maggot Carrier"
        assert best.is_sideboard

    def test_intuition_pile(self, aluren_game):
        found = Aluren().select_intuition(aluren_game)

        assert len(found) == 3
        assert [card.name for card in found] == ["Aluren"] * 3
        assert all(card.in_library for card in found)

    def test_harpy_intuition_pile(self, aluren_game):
        put(aluren_game, "Aluren", Zone.BATTLEFIELD)

        found = Aluren().select_intuition(aluren_game)

        assert [card.name for card in found] == ["Cavern Harpy"] * 3

    def test_keeps(self, aluren_game):
        strategy = Aluren()
        put(aluren_game, "Aluren", Zone.HAND)
        put(aluren_game, "Cavern Harpy", Zone.HAND)
        put(aluren_game, "City of Brass", Zone.HAND)
        put(aluren_game, "Forest", Zone.HAND)

        assert strategy.is_keepable_hand(aluren_game, 0)

    def test_no_land_mulligan(self, aluren_game):
        put(aluren_game, "Aluren", Zone.HAND)
        put(aluren_game, "Cavern Harpy", Zone.HAND)

        assert not Aluren().is_keepable_hand(aluren_game, 0)
        assert Aluren().is_keepable_hand(aluren_game, 3)

    def test_discard_keeps_combo(self, aluren_game):
        put(aluren_game, "Aluren", Zone.HAND)
        put(aluren_game, "Cavern Harpy", Zone.HAND)
        put(aluren_game, "Forest", Zone.HAND, 4)
        put(aluren_game, "City of Brass", Zone.HAND, 3)

        discarded = Aluren().discard_to_hand_size(aluren_game, 7)

        assert len(discarded) == 2
        assert all(card.name == "Forest" for card in discarded)


# =============================================================================
# FRANTIC STORM TESTS
# =============================================================================

class TestFranticStorm:
    """Tests for the Frantic Storm strategy."""

    def test_brain_freeze_mill(self):
        assert brain_freeze_mill(5, 2) == 3 * 6 + 3 * 7
        assert brain_freeze_mill(0, 1) == 3
        assert brain_freeze_mill(10, 0) == 0

    def test_cleanup_stops_storming(self):
        strategy = FranticStorm()
        strategy.is_storming = True

        strategy.cleanup()

        assert not strategy.is_storming

    def test_perfect_hand(self, game):
        for name in ("Helm of Awakening", "Island", "Island", "Impulse"):
            game.create_object(name, Zone.HAND)

        assert FranticStorm().is_keepable_hand(game, 0)

    def test_no_lands(self, game):
        for name in ("Impulse", "Brain Freeze", "Snap"):
            game.create_object(name, Zone.HAND)

        assert not FranticStorm().is_keepable_hand(game, 0)

    def test_flood(self, game):
        for _ in range(7):
            game.create_object("Island", Zone.HAND)

        assert not FranticStorm().is_keepable_hand(game, 0)

    def test_searches_for_lands_first(self, game):
        for name in ("Impulse", "Sapphire Medallion", "Island"):
            game.create_object(name, Zone.LIBRARY)

        best = FranticStorm().select_best(game, library_candidates(game))

        assert best.name == "Island"

    def test_searches_for_cost_reducers(self, game):
        game.create_object("Island", Zone.BATTLEFIELD)
        game.create_object("Island", Zone.BATTLEFIELD)
        for name in ("Island", "Impulse", "Sapphire Medallion"):
            game.create_object(name, Zone.LIBRARY)

        best = FranticStorm().select_best(game, library_candidates(game))

        assert best.name == "Sapphire Medallion"

    def test_casts_cost_reducer(self, game):
        strategy = FranticStorm()
        game.create_object("Island", Zone.BATTLEFIELD)
        game.create_object("Island", Zone.BATTLEFIELD)
        medallion = game.create_object("Sapphire Medallion", Zone.HAND)

        assert strategy.take_game_action(game)

        assert medallion.on_battlefield


# =============================================================================
# PATTERN COMBO TESTS
# =============================================================================

class TestPatternCombo:
    """Tests for the Pattern Combo strategy."""

    def test_pattern_on_creature_with_sac_outlet(self, game):
        game.create_object("Carrion Feeder", Zone.BATTLEFIELD)
        elves = game.create_object("Llanowar Elves", Zone.BATTLEFIELD)
        pattern = game.create_object("Pattern of Rebirth", Zone.BATTLEFIELD)
        pattern.attached_to = elves.object_id

        strategy = PatternCombo()

        assert strategy.is_combo_assembled(game)
        assert strategy.game_status(game).outcome is Outcome.WIN

    def test_pattern_on_only_sac_outlet(self, game):
        feeder = game.create_object("Carrion Feeder", Zone.BATTLEFIELD)
        pattern = game.create_object("Pattern of Rebirth", Zone.BATTLEFIELD)
        pattern.attached_to = feeder.object_id
        strategy = PatternCombo()

        assert not strategy.is_combo_assembled(game)

        game.create_object("Nantuko Husk", Zone.BATTLEFIELD)

        assert strategy.is_combo_assembled(game)

    def test_pattern_target_left_battlefield(self, game):
        """Test a Pattern whose creature died no longer counts as on an outlet."""
        feeder = game.create_object("Carrion Feeder", Zone.BATTLEFIELD)
        pattern = game.create_object("Pattern of Rebirth", Zone.BATTLEFIELD)
        pattern.attached_to = feeder.object_id
        strategy = PatternCombo()

        game.move(feeder, Zone.GRAVEYARD)

        assert pattern.attached_to == feeder.object_id
        status = strategy.combo_status(game, include_hand=False, include_battlefield=True)
        assert not status.pattern_on_sac_outlet

    def test_rector_with_sac_outlet_and_creature(self, game):
        for name in ("Academy Rector", "Carrion Feeder", "Llanowar Elves"):
            game.create_object(name, Zone.BATTLEFIELD)

        assert PatternCombo().is_combo_assembled(game)

    def test_rector_pattern_and_cabal_therapy(self, game):
        game.create_object("Academy Rector", Zone.BATTLEFIELD)
        game.create_object("Pattern of Rebirth", Zone.BATTLEFIELD)
        strategy = PatternCombo()

        assert not strategy.is_combo_assembled(game)

        game.create_object("Cabal Therapy", Zone.GRAVEYARD)

        assert strategy.is_combo_assembled(game)

    def test_tapped_tower_does_not_count(self, game):
        game.create_object("Academy Rector", Zone.BATTLEFIELD)
        game.create_object("Pattern of Rebirth", Zone.BATTLEFIELD)
        tower = game.create_object("Phyrexian Tower", Zone.BATTLEFIELD)
        tower.is_tapped = True

        assert not PatternCombo().is_combo_assembled(game)

        tower.is_tapped = False

        assert PatternCombo().is_combo_assembled(game)

    def test_pattern_targets_non_sac_creature(self, game):
        strategy = PatternCombo()
        game.create_object("Carrion Feeder", Zone.BATTLEFIELD)
        elves = game.create_object("Llanowar Elves", Zone.BATTLEFIELD)
        for _ in range(3):
            game.create_object("Forest", Zone.BATTLEFIELD)
        pattern = game.create_object("Pattern of Rebirth", Zone.HAND)

        assert strategy.cast_pattern_of_rebirth(game)

        assert pattern.attached_to == elves.object_id
        assert game.events.of_type(SpellCastEvent)[-1].target == "Llanowar Elves"
        assert strategy.game_status(game).outcome is Outcome.WIN

    def test_pattern_held_without_creatures(self, game):
        strategy = PatternCombo()
        for _ in range(4):
            game.create_object("Forest", Zone.BATTLEFIELD)
        pattern = game.create_object("Pattern of Rebirth", Zone.HAND)

        assert not strategy.take_game_action(game)

        assert pattern.in_hand

    def test_finds_rector_first(self, game):
        for name in ("Carrion Feeder", "Academy Rector"):
            game.create_object(name, Zone.LIBRARY)

        best = PatternCombo().select_best(game, library_candidates(game))

        assert best.name == "Academy Rector"

    def test_finds_pattern_first(self, game):
        for name in ("Goblin Bombardment", "Pattern of Rebirth"):
            game.create_object(name, Zone.LIBRARY)

        best = PatternCombo().select_best(game, library_candidates(game))

        assert best.name == "Pattern of Rebirth"

    def test_finds_sac_outlet_for_pattern(self, game):
        elves = game.create_object("Llanowar Elves", Zone.BATTLEFIELD)
        pattern = game.create_object("Pattern of Rebirth", Zone.BATTLEFIELD)
        pattern.attached_to = elves.object_id
        for name in ("Academy Rector", "Carrion Feeder"):
            game.create_object(name, Zone.LIBRARY)

        best = PatternCombo().select_best(game, library_candidates(game))

        assert best.name == "Carrion Feeder"

    def test_mixed_candidates(self, game):
        for name in ("Forest", "Academy Rector"):
            game.create_object(name, Zone.LIBRARY)

        best = PatternCombo().select_best(game, library_candidates(game))

        assert best.name == "Forest"


# =============================================================================
# COMPLETE GAME TESTS
# =============================================================================

class TestCompleteGames:
    """Every registered strategy plays its own deck to the end."""

    @pytest.mark.parametrize("name", strategy_names())
    def test_game_finishes(self, name):
        strategy = get_strategy(name)
        game = Game(strategy.default_decklist(), GameConfig(seed=2024))

        result = game.run(strategy)

        assert result.outcome in (Outcome.WIN, Outcome.LOSE, Outcome.DRAW)
        assert result.turn >= 1
        assert 0 <= result.mulligan_count <= 3
        assert sum(game.arena.zone_counts().values()) == 60
