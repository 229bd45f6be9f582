"""Goldfisher - Mana System

This module implements mana cost parsing and the mana payment solver.

The solver is greedy and side-effect free: it is handed the card to cast,
the candidate mana sources in the caller's preferred order, the floating
mana pool and the active cost reductions, and it answers with a payment
plan (which sources to use and what stays floating afterwards) or None.
Nothing passed in is ever mutated, so callers may try every card in hand
and commit only the plan they choose.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .objects import CostReduction, GameObject, ReductionKind
from .types import ALL_MANA, COLOR_ORDER, ManaColor, ObjectId


ManaPool = Dict[ManaColor, int]


# =============================================================================
# Mana Cost
# =============================================================================

@dataclass
class ManaCost:
    """A parsed mana cost or mana production.

    Examples:
        - "{2}{G}{G}" - two generic and two green
        - "{W}{U}{B}{R}{G}" - one of each color
        - "{C}{C}" - two colorless (Ancient Tomb)
        - "1U" - compact format, one generic and one blue

    Generic amounts and colorless symbols are both stored under
    ``ManaColor.COLORLESS``.

    Attributes:
        amounts: Mana type to amount
        original_string: The string the cost was parsed from
    """
    amounts: Dict[ManaColor, int] = field(default_factory=dict)
    original_string: str = ""

    @classmethod
    def parse(cls, cost_str: str) -> 'ManaCost':
        """Parse a mana cost string into a ManaCost object.

        Args:
            cost_str: The cost string (e.g., "{2}{U}{U}", "2UU", "WUBRG")

        Returns:
            A ManaCost object representing the parsed cost.

        Raises:
            ValueError: If a symbol is not a number or a mana letter
        """
        if not cost_str:
            return cls(amounts={}, original_string="")

        amounts: Dict[ManaColor, int] = {}

        # Handle curly brace format: {2}{U}{U}
        brace_pattern = r'\{([^}]+)\}'
        symbols = re.findall(brace_pattern, cost_str)
        if not symbols:
            # Handle compact format: 2UU, WUBRG
            symbols = re.findall(r'\d+|[A-Za-z]', cost_str)

        for symbol in symbols:
            symbol = symbol.strip().upper()
            if symbol.isdigit():
                color = ManaColor.COLORLESS
                amount = int(symbol)
            else:
                color = ManaColor.from_symbol(symbol)
                amount = 1
            if amount:
                amounts[color] = amounts.get(color, 0) + amount

        return cls(amounts=amounts, original_string=cost_str)

    @property
    def mana_value(self) -> int:
        return sum(self.amounts.values())

    def to_dict(self) -> Dict[ManaColor, int]:
        return dict(self.amounts)

    def __str__(self) -> str:
        parts = []
        generic = self.amounts.get(ManaColor.COLORLESS, 0)
        if generic:
            parts.append(f"{{{generic}}}")
        for color in COLOR_ORDER:
            parts.extend(f"{{{color.value}}}" for _ in range(self.amounts.get(color, 0)))
        return "".join(parts) or "{0}"


# =============================================================================
# Payment Plan
# =============================================================================

@dataclass
class PaymentPlan:
    """
    Result of a successful payment search.

    Attributes:
        sources: Mana sources to use, in the order they were picked
        floating: The floating mana pool after paying
    """
    sources: List[GameObject] = field(default_factory=list)
    floating: ManaPool = field(default_factory=dict)

    @property
    def is_free(self) -> bool:
        return not self.sources

    def source_names(self) -> List[str]:
        return [source.name for source in self.sources]


# =============================================================================
# Pool helpers
# =============================================================================

def is_empty_pool(pool: ManaPool) -> bool:
    """Returns True if no mana of any type is floating."""
    return all(amount == 0 for amount in pool.values())


def _take(pool: ManaPool, color: ManaColor, amount: int) -> int:
    """Remove up to ``amount`` of a color from the pool, returning what was taken."""
    available = pool.get(color, 0)
    taken = min(available, amount)
    if taken <= 0:
        return 0
    if available == taken:
        del pool[color]
    else:
        pool[color] = available - taken
    return taken


def _add(pool: ManaPool, color: ManaColor, amount: int) -> None:
    if amount > 0:
        pool[color] = pool.get(color, 0) + amount


# =============================================================================
# Source ordering
# =============================================================================

def _uses_or_unlimited(source: GameObject) -> float:
    return math.inf if source.remaining_uses is None else source.remaining_uses


def sort_key_best_mana_to_use(source: GameObject) -> Tuple[int, float]:
    """Sort key for spending mana sources, first element is spent first.

    Sources producing fewer colors are spent before flexible ones, and
    among equals the ones with the most uses left are spent first so that
    limited sources are saved.
    """
    return (source.color_count, -_uses_or_unlimited(source))


def sort_key_best_mana_to_play(source: GameObject) -> Tuple[int, float]:
    """Sort key for choosing a land to play, the best land sorts last."""
    return (source.color_count, _uses_or_unlimited(source))


def sort_key_cmc(card: GameObject) -> int:
    return card.mana_value


# =============================================================================
# Payment Solver
# =============================================================================

def reduced_cost(card: GameObject,
                 cost_reductions: Iterable[CostReduction]) -> Optional[Dict[ManaColor, int]]:
    """
    Apply cost reductions to a card's cost.

    Returns:
        The reduced cost, or None if the card can be cast for free
    """
    cost = dict(card.cost)

    for reduction in cost_reductions:
        if reduction.kind is ReductionKind.FREE_CREATURES:
            if card.is_creature and card.mana_value <= reduction.amount:
                return None
        elif reduction.kind is ReductionKind.COLOR:
            if reduction.gate is not None and card.is_color(reduction.gate):
                cost[reduction.mana] = cost.get(reduction.mana, 0) - reduction.amount
        elif reduction.kind is ReductionKind.ALL:
            cost[reduction.mana] = cost.get(reduction.mana, 0) - reduction.amount

    return cost


def find_payment(card: GameObject,
                 sources: Sequence[GameObject],
                 floating: ManaPool,
                 cost_reductions: Sequence[CostReduction] = ()) -> Optional[PaymentPlan]:
    """
    Find a way to pay for a card.

    Colored requirements are paid in W, U, B, R, G order, each from
    floating mana of that color first and then from sources in the given
    order. The generic part drains any floating mana and then the unused
    sources with the largest single-color yield. There is no backtracking:
    a greedy choice that strands a later requirement fails the search.

    Args:
        card: The card to pay for
        sources: Candidate mana sources in preferred spending order
        floating: Floating mana pool
        cost_reductions: Active cost reductions

    Returns:
        A PaymentPlan, or None if the card cannot be paid for
    """
    pool: ManaPool = {color: amount for color, amount in floating.items() if amount > 0}

    if not any(amount > 0 for amount in card.cost.values()):
        return PaymentPlan(sources=[], floating=pool)

    cost = reduced_cost(card, cost_reductions)
    if cost is None:
        return PaymentPlan(sources=[], floating=pool)

    # A card never pays for itself (Elvish Spirit Guide in hand)
    candidates = [source for source in sources if source.object_id != card.object_id]

    for color in COLOR_ORDER:
        required = cost.get(color, 0)
        if required <= 0:
            continue
        available = sum(source.produced_mana.get(color, 0) for source in candidates)
        if required > available + pool.get(color, 0):
            return None

    used: List[GameObject] = []
    used_ids: Set[ObjectId] = set()

    for color in COLOR_ORDER:
        required = cost.get(color, 0)
        if required <= 0:
            continue

        paid = _take(pool, color, required)
        if paid >= required:
            continue

        for source in candidates:
            amount = source.produced_mana.get(color, 0)
            if source.object_id in used_ids or amount <= 0:
                continue
            used.append(source)
            used_ids.add(source.object_id)
            paid += amount
            if paid >= required:
                _add(pool, color, paid - required)
                break

        if paid < required:
            return None

    generic = cost.get(ManaColor.COLORLESS, 0)
    if generic > 0:
        paid = 0
        for color in ALL_MANA:
            if paid >= generic:
                break
            paid += _take(pool, color, generic - paid)

        if paid < generic:
            remaining = [source for source in candidates
                         if source.object_id not in used_ids and source.is_mana_source]
            remaining.sort(key=lambda source: -source.max_yield)

            for source in remaining:
                color, amount = source.best_yield()
                used.append(source)
                used_ids.add(source.object_id)
                paid += amount
                if paid >= generic:
                    _add(pool, color, paid - generic)
                    break

        if paid < generic:
            return None

    return PaymentPlan(sources=used, floating=pool)


__all__ = [
    'ManaPool',
    'ManaCost',
    'PaymentPlan',
    'is_empty_pool',
    'sort_key_best_mana_to_use',
    'sort_key_best_mana_to_play',
    'sort_key_cmc',
    'reduced_cost',
    'find_payment',
]
