"""
Test suite for mana system - validates mana cost parsing and the payment solver.

Tests cover:
- Mana cost parsing (brace and compact formats)
- Colored and generic payments
- Floating mana
- Cost reductions (Aluren, Helm of Awakening, Sapphire Medallion)
- Source ordering keys
"""
import pytest

from ..engine.mana import (
    ManaCost, find_payment, reduced_cost, sort_key_best_mana_to_play,
    sort_key_best_mana_to_use,
)
from ..engine.objects import CostReduction
from ..engine.types import ManaColor, Zone


HELM = CostReduction.all_spells(ManaColor.COLORLESS, 1)
MEDALLION = CostReduction.colored_spells(ManaColor.BLUE, ManaColor.COLORLESS, 1)
ALUREN = CostReduction.free_creatures(3)


# =============================================================================
# MANA COST PARSING TESTS
# =============================================================================

class TestManaCostParsing:
    """Tests for parsing mana cost strings."""

    def test_parse_generic_and_colored(self):
        """Test parsing {2}{G}{G}."""
        cost = ManaCost.parse("{2}{G}{G}")
        assert cost.amounts == {ManaColor.COLORLESS: 2, ManaColor.GREEN: 2}
        assert cost.mana_value == 4

    def test_parse_compact_format(self):
        """Test parsing the compact 1U format."""
        cost = ManaCost.parse("1U")
        assert cost.amounts == {ManaColor.COLORLESS: 1, ManaColor.BLUE: 1}

    def test_parse_colorless_symbols(self):
        """Test {C}{C} is stored with the generic part."""
        cost = ManaCost.parse("{C}{C}")
        assert cost.amounts == {ManaColor.COLORLESS: 2}

    def test_parse_five_colors(self):
        cost = ManaCost.parse("{W}{U}{B}{R}{G}")
        assert cost.mana_value == 5
        assert len(cost.amounts) == 5

    def test_parse_empty_string(self):
        """Test parsing empty string (free spell / land)."""
        cost = ManaCost.parse("")
        assert cost.amounts == {}
        assert cost.mana_value == 0

    def test_parse_zero_cost(self):
        cost = ManaCost.parse("{0}")
        assert cost.mana_value == 0

    def test_parse_unknown_symbol(self):
        """Test an unknown mana letter is rejected."""
        with pytest.raises(ValueError):
            ManaCost.parse("{X}")

    def test_str_round_trip(self):
        assert str(ManaCost.parse("{1}{U}")) == "{1}{U}"
        assert str(ManaCost.parse("")) == "{0}"


# =============================================================================
# COLORED PAYMENT TESTS
# =============================================================================

class TestColoredPayment:
    """Tests for paying colored requirements."""

    def test_matching_basic_pays(self, make):
        """Test a Forest pays for Llanowar Elves and nothing floats."""
        elves = make("Llanowar Elves", Zone.HAND)
        forest = make("Forest")

        plan = find_payment(elves, [forest], {})

        assert plan is not None
        assert plan.sources == [forest]
        assert plan.floating == {}

    def test_wrong_color_fails(self, make):
        """Test an Island cannot pay for Llanowar Elves."""
        elves = make("Llanowar Elves", Zone.HAND)
        island = make("Island")

        assert find_payment(elves, [island], {}) is None

    def test_multicolored_cost(self, make):
        """Test Cavern Harpy takes one blue and one black source."""
        harpy = make("Cavern Harpy", Zone.HAND)
        island = make("Island")
        swamp = make("Swamp")
        forest = make("Forest")

        plan = find_payment(harpy, [forest, island, swamp], {})

        assert plan is not None
        assert plan.sources == [island, swamp]

    def test_floating_mana_used_first(self, make):
        """Test floating green is spent before any source."""
        elves = make("Llanowar Elves", Zone.HAND)
        forest = make("Forest")

        plan = find_payment(elves, [forest], {ManaColor.GREEN: 1})

        assert plan.is_free
        assert plan.floating == {}

    def test_card_never_pays_for_itself(self, make):
        """Test Elvish Spirit Guide in hand is not a source for itself."""
        guide = make("Elvish Spirit Guide", Zone.HAND)

        assert find_payment(guide, [guide], {}) is None

    def test_free_card(self, make):
        """Test Lotus Petal needs no sources."""
        petal = make("Lotus Petal", Zone.HAND)

        plan = find_payment(petal, [], {})

        assert plan is not None
        assert plan.is_free


# =============================================================================
# GENERIC PAYMENT TESTS
# =============================================================================

class TestGenericPayment:
    """Tests for paying the generic part of a cost."""

    def test_largest_yield_first(self, make):
        """Test Ancient Tomb alone pays a generic two."""
        altar = make("Altar of Dementia", Zone.HAND)
        island = make("Island")
        tomb = make("Ancient Tomb")

        plan = find_payment(altar, [island, tomb], {})

        assert plan.sources == [tomb]
        assert plan.floating == {}

    def test_excess_mana_floats(self, make):
        """Test the unused half of Ancient Tomb stays floating."""
        wall = make("Wall of Roots", Zone.HAND)
        forest = make("Forest")
        tomb = make("Ancient Tomb")

        plan = find_payment(wall, [forest, tomb], {})

        assert plan.sources == [forest, tomb]
        assert plan.floating == {ManaColor.COLORLESS: 1}

    def test_floating_mana_pays_generic(self, make):
        altar = make("Altar of Dementia", Zone.HAND)

        plan = find_payment(altar, [], {ManaColor.BLUE: 1, ManaColor.GREEN: 1})

        assert plan is not None
        assert plan.is_free
        assert plan.floating == {}

    def test_not_enough_mana(self, make):
        altar = make("Altar of Dementia", Zone.HAND)
        island = make("Island")

        assert find_payment(altar, [island], {}) is None


# =============================================================================
# SIDE EFFECT TESTS
# =============================================================================

class TestNoSideEffects:
    """The solver never mutates what it is handed."""

    def test_failed_search_leaves_inputs(self, make):
        harpy = make("Cavern Harpy", Zone.HAND)
        forest = make("Forest")
        sources = [forest]
        floating = {ManaColor.BLUE: 1}

        assert find_payment(harpy, sources, floating) is None

        assert sources == [forest]
        assert floating == {ManaColor.BLUE: 1}
        assert not forest.is_tapped

    def test_successful_search_leaves_inputs(self, make):
        elves = make("Llanowar Elves", Zone.HAND)
        floating = {ManaColor.GREEN: 1, ManaColor.BLUE: 1}

        plan = find_payment(elves, [], floating)

        assert plan.floating == {ManaColor.BLUE: 1}
        assert floating == {ManaColor.GREEN: 1, ManaColor.BLUE: 1}


# =============================================================================
# COST REDUCTION TESTS
# =============================================================================

class TestCostReductions:
    """Tests for Aluren, Helm of Awakening and Sapphire Medallion."""

    def test_aluren_makes_cheap_creatures_free(self, make):
        harpy = make("Cavern Harpy", Zone.HAND)
        raven = make("Raven Familiar", Zone.HAND)

        assert find_payment(harpy, [], {}, [ALUREN]).is_free
        assert find_payment(raven, [], {}, [ALUREN]).is_free

    def test_aluren_ignores_expensive_creatures(self, make):
        rector = make("Academy Rector", Zone.HAND)

        assert find_payment(rector, [], {}, [ALUREN]) is None

    def test_aluren_ignores_non_creatures(self, make):
        impulse = make("Impulse", Zone.HAND)

        assert find_payment(impulse, [], {}, [ALUREN]) is None

    def test_helm_reduces_every_spell(self, make):
        brain_freeze = make("Brain Freeze", Zone.HAND)
        island = make("Island")

        plan = find_payment(brain_freeze, [island], {}, [HELM])

        assert plan.sources == [island]

    def test_medallion_reduces_blue_spells(self, make):
        brain_freeze = make("Brain Freeze", Zone.HAND)
        island = make("Island")

        plan = find_payment(brain_freeze, [island], {}, [MEDALLION])

        assert plan.sources == [island]

    def test_medallion_ignores_colorless_spells(self, make):
        altar = make("Altar of Dementia", Zone.HAND)
        island = make("Island")

        assert find_payment(altar, [island], {}, [MEDALLION]) is None

    def test_reductions_stack(self, make):
        """Test Helm and Medallion together make Brain Freeze cost just {U}."""
        brain_freeze = make("Brain Freeze", Zone.HAND)

        cost = reduced_cost(brain_freeze, [HELM, MEDALLION])

        assert cost[ManaColor.BLUE] == 1
        assert cost[ManaColor.COLORLESS] <= 0

    def test_reduced_cost_free_creature(self, make):
        harpy = make("Cavern Harpy", Zone.HAND)
        assert reduced_cost(harpy, [ALUREN]) is None


# =============================================================================
# SOURCE ORDERING TESTS
# =============================================================================

class TestSourceOrdering:
    """Tests for the spending and land play sort keys."""

    def test_spend_unlimited_sources_before_limited(self, make):
        forest = make("Forest")
        gemstone = make("Gemstone Mine")
        city = make("City of Brass")

        ordered = sorted([gemstone, city, forest], key=sort_key_best_mana_to_use)

        assert ordered == [forest, city, gemstone]

    def test_best_land_to_play_sorts_last(self, make):
        forest = make("Forest")
        gemstone = make("Gemstone Mine")
        city = make("City of Brass")

        ordered = sorted([city, forest, gemstone], key=sort_key_best_mana_to_play)

        assert ordered == [forest, gemstone, city]
