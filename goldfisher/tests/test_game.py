"""
Test suite for the game controller - validates the turn engine end to end.

Tests cover:
- Mana sources with limited uses
- Land drops and lands entering tapped
- Casting spells and summoning sickness
- Drawing, mulligans and the cleanup step
- Win and loss conditions
- Complete games
"""
import pytest

from ..cards.parser import Deck
from ..engine.events import GameEndedEvent, MulliganEvent, SpellCastEvent
from ..engine.game import Game, GameConfig
from ..engine.mana import PaymentPlan
from ..engine.types import CONTINUE, ManaColor, Outcome, Zone
from ..engine.zones import LibraryPosition
from .mocks.mock_strategy import MockStrategy


# =============================================================================
# MANA SOURCE TESTS
# =============================================================================

class TestManaSources:
    """Tests for available mana sources and limited uses."""

    def test_gemstone_mine_runs_out(self, game, make):
        """Test a source with N uses goes away after the Nth use."""
        mine = make("Gemstone Mine")

        game.float_mana()
        game.untap()
        game.float_mana()
        game.untap()

        assert mine.on_battlefield
        assert mine.remaining_uses == 1

        game.float_mana()

        assert mine.in_graveyard
        assert sum(game.floating_mana.values()) == 3

    def test_lotus_petal_single_use(self, game, make, strategy):
        petal = make("Lotus Petal")
        elves = make("Llanowar Elves", Zone.HAND)

        plan = game.find_payment(elves)
        assert plan.sources == [petal]

        game.cast_spell(strategy, elves, plan)

        assert petal.in_graveyard
        assert elves.on_battlefield

    def test_elvish_spirit_guide_exiled_from_hand(self, game, make, strategy):
        guide = make("Elvish Spirit Guide", Zone.HAND)
        elves = make("Llanowar Elves", Zone.HAND)

        castable = dict((card.name, plan) for card, plan in game.find_castable())

        assert "Elvish Spirit Guide" not in castable
        assert castable["Llanowar Elves"].sources == [guide]

        game.cast_spell(strategy, elves, castable["Llanowar Elves"])

        assert guide.zone is Zone.EXILE

    def test_limited_sources_spent_last(self, game, make):
        city = make("City of Brass")
        make("Gemstone Mine")
        elves = make("Llanowar Elves", Zone.HAND)

        assert game.find_payment(elves).sources == [city]

    def test_summoning_sick_creatures_are_not_sources(self, game, make, strategy):
        elves = make("Llanowar Elves", Zone.HAND)
        make("Forest")

        game.cast_spell(strategy, elves, game.find_payment(elves))

        assert elves.is_summoning_sick
        assert elves not in game.available_mana_sources()

        game.untap()

        assert elves in game.available_mana_sources()

    def test_haste_mana_creature(self, game, make, strategy):
        wall = make("Wall of Roots", Zone.HAND)
        make("Forest")
        make("Forest")

        game.cast_spell(strategy, wall, game.find_payment(wall))

        assert not wall.is_summoning_sick
        assert wall in game.available_mana_sources()

    def test_float_mana_spreads_colors(self, game, make):
        for _ in range(3):
            make("City of Brass")

        game.float_mana()

        assert game.floating_mana == {ManaColor.GREEN: 2, ManaColor.BLUE: 1}
        assert game.tapped_lands() == game.battlefield.filter(lambda obj: obj.is_land)

    def test_mana_sources_count(self, game, make):
        """Test tapped and summoning sick sources count, cards off the battlefield do not."""
        make("Forest").is_tapped = True
        make("Llanowar Elves").is_summoning_sick = True
        make("Aluren")
        make("Forest", Zone.HAND)

        assert game.mana_sources_count() == 2
        assert len(game.available_mana_sources()) == 0


# =============================================================================
# LAND TESTS
# =============================================================================

class TestLands:
    """Tests for land drops."""

    def test_one_land_per_turn(self, game, make, strategy):
        first = make("Forest", Zone.HAND)
        second = make("Forest", Zone.HAND)

        assert game.play_land(first, strategy)
        assert not game.play_land(second, strategy)

        assert first.on_battlefield
        assert second.in_hand

    def test_tapland_leaves_nothing_castable(self, game, make, strategy):
        woodlot = make("Hickory Woodlot", Zone.HAND)
        make("Llanowar Elves", Zone.HAND)

        game.play_land(woodlot, strategy)

        assert woodlot.is_tapped
        assert game.find_castable() == []

    def test_strategy_plays_best_land(self, game, make, strategy):
        make("Forest", Zone.HAND)
        city = make("City of Brass", Zone.HAND)
        make("Gemstone Mine", Zone.HAND)

        assert strategy.play_land(game)

        assert city.on_battlefield


# =============================================================================
# CASTING TESTS
# =============================================================================

class TestCasting:
    """Tests for casting spells."""

    def test_cast_records_event(self, game, make, strategy):
        elves = make("Llanowar Elves", Zone.HAND)
        make("Forest")

        game.cast_spell(strategy, elves, game.find_payment(elves))

        event = game.events.of_type(SpellCastEvent)[-1]
        assert event.name == "Llanowar Elves"
        assert event.sources == ["Forest"]
        assert event.storm == 1

    def test_attach_to(self, game, make, strategy):
        elves = make("Llanowar Elves")
        pattern = make("Pattern of Rebirth", Zone.HAND)
        for _ in range(4):
            make("Forest")

        game.cast_spell(strategy, pattern, game.find_payment(pattern), attach_to=elves)

        assert pattern.on_battlefield
        assert pattern.attached_to == elves.object_id

    def test_cast_clears_floating_to_plan(self, game, make, strategy):
        wall = make("Wall of Roots", Zone.HAND)
        make("Forest")
        make("Ancient Tomb")

        game.cast_spell(strategy, wall, game.find_payment(wall))

        assert game.floating_mana == {ManaColor.COLORLESS: 1}

    def test_soul_warden_and_wirewood_savage(self, game, make, strategy):
        make("Soul Warden")
        make("Wirewood Savage")
        for _ in range(3):
            make("Island", Zone.LIBRARY)
        baloth = make("Ravenous Baloth", Zone.HAND)

        game.cast_spell(strategy, baloth, PaymentPlan())

        assert game.life_total == 21
        assert len(game.hand) == 1

    def test_wirewood_savage_leaves_one_card(self, game, make, strategy):
        make("Wirewood Savage")
        make("Island", Zone.LIBRARY)

        game.cast_spell(strategy, make("Cavern Harpy", Zone.HAND), PaymentPlan())

        assert len(game.library) == 1


# =============================================================================
# DRAW AND MULLIGAN TESTS
# =============================================================================

class TestDrawing:
    """Tests for drawing and mulligans."""

    def test_draw_from_empty_library_loses(self, game):
        status = game.draw()

        assert status.outcome is Outcome.LOSE
        assert game.pending_outcome is Outcome.LOSE

    def test_first_player_skips_first_draw(self, forest_game):
        forest_game.begin_turn()

        assert forest_game.draw_step() is CONTINUE
        assert len(forest_game.hand) == 0

    def test_second_player_draws_first_turn(self, forest_deck):
        game = Game(forest_deck, GameConfig(seed=3, on_the_play=False))
        game.begin_turn()

        game.draw_step()

        assert len(game.hand) == 1

    def test_keep_seven(self, forest_game, strategy):
        forest_game.find_starting_hand(strategy)

        assert len(forest_game.hand) == 7
        assert forest_game.mulligan_count == 0
        assert forest_game.opponent_library == 53

    def test_mulligan_floor_forces_keep(self):
        game = Game(Deck.from_text("60 Forest"), GameConfig(seed=1))
        strategy = MockStrategy(keep=False)

        game.find_starting_hand(strategy)

        assert strategy.keep_checks == [0, 1, 2]
        assert game.mulligan_count == 3
        assert len(game.hand) == 4
        assert len(game.library) == 56

        kept = game.events.of_type(MulliganEvent)[-1]
        assert kept.kept
        assert kept.forced
        assert len(kept.bottomed) == 3


# =============================================================================
# CLEANUP TESTS
# =============================================================================

class TestCleanup:
    """Tests for the cleanup step and the opponent's turn."""

    def test_discard_to_hand_size(self, game, make, strategy):
        for _ in range(9):
            make("Forest", Zone.HAND)
        game.floating_mana = {ManaColor.GREEN: 3}

        status = game.cleanup(strategy)

        assert status is CONTINUE
        assert len(game.hand) == 7
        assert len(game.graveyard) == 2
        assert game.floating_mana == {}
        assert game.opponent_library == 59

    def test_skipped_turn(self, game, strategy):
        game.turn = 2
        game.turns_to_skip = 1

        game.cleanup(strategy)

        assert game.turn == 3
        assert game.turns_to_skip == 0
        assert game.opponent_library == 58

    def test_opponent_decks_out(self, game, strategy):
        game.opponent_library = 0

        assert game.cleanup(strategy).outcome is Outcome.WIN


# =============================================================================
# GAME STATUS TESTS
# =============================================================================

class TestGameStatus:
    """Tests for the base win and loss conditions."""

    def test_continue(self, game, strategy):
        assert game.check_status(strategy) is CONTINUE

    def test_dead(self, game, strategy):
        game.take_damage(20)
        assert game.check_status(strategy).outcome is Outcome.LOSE

    def test_lethal_damage(self, game, strategy):
        game.deal_damage(20)
        assert game.check_status(strategy).outcome is Outcome.WIN

    def test_both_dead(self, game, strategy):
        game.damage_each(20)
        assert game.check_status(strategy).outcome is Outcome.DRAW

    def test_opponent_library_empty(self, game, strategy):
        game.mill_opponent(60)
        assert game.check_status(strategy).outcome is Outcome.WIN

    def test_pending_loss_first(self, game, strategy):
        game.deal_damage(20)
        game.draw()
        assert game.check_status(strategy).outcome is Outcome.LOSE


# =============================================================================
# COMPLETE GAME TESTS
# =============================================================================

class TestCompleteGames:
    """End to end tests with a real deck."""

    def test_first_turn_llanowar_elves(self, forest_game, strategy):
        elves = forest_game.library.find_named("Llanowar Elves")
        forest_game.move(elves, Zone.LIBRARY, LibraryPosition.TOP)

        forest_game.find_starting_hand(strategy)
        forest_game.begin_turn()
        forest_game.untap()
        forest_game.draw_step()
        status = forest_game.take_game_actions(strategy)

        assert status is CONTINUE
        assert elves.on_battlefield
        assert elves.is_summoning_sick
        cast = forest_game.events.of_type(SpellCastEvent)
        assert [(event.name, event.sources) for event in cast] == [
            ("Llanowar Elves", ["Forest"])
        ]

        forest_game.cleanup(strategy)
        forest_game.begin_turn()
        forest_game.untap()

        assert elves in forest_game.available_mana_sources()

    def test_deck_out(self, forest_game, strategy):
        """Test the deck loses to its own library on turn 13."""
        result = forest_game.run(strategy)

        assert result.outcome is Outcome.LOSE
        assert result.turn == 13
        assert result.reason == "drew from an empty library"
        assert result.mulligan_count == 0
        assert isinstance(result.events[-1], GameEndedEvent)

    def test_seeded_games_are_reproducible(self, forest_deck):
        first = Game(forest_deck, GameConfig(seed=5)).run(MockStrategy())
        second = Game(forest_deck, GameConfig(seed=5)).run(MockStrategy())

        assert ([event.describe() for event in first.events]
                == [event.describe() for event in second.events])

    def test_decklist_accepted(self, forest_deck, strategy):
        game = Game(forest_deck.decklist, GameConfig(seed=2))

        assert len(game.library) == 18

    def test_unknown_card(self):
        from ..cards.database import UnknownCardError
        from ..cards.parser import parse_decklist

        with pytest.raises(UnknownCardError):
            Game(parse_decklist("4 Black Lotus"))
