"""Goldfisher - Game Objects

This module implements the card instance model. Every card in a simulated
game is one GameObject living in the game's arena and addressed by its
``object_id`` handle. Relations between objects (an aura attached to a
creature) are stored as handles, never as object references.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional, Set, Tuple, TYPE_CHECKING

from .types import ALL_MANA, CardType, ManaColor, ObjectId, SubType, Zone

if TYPE_CHECKING:
    from .effects import Effect


# =============================================================================
# Cost Reductions
# =============================================================================

class ReductionKind(Enum):
    """Closed set of cost reduction rules."""
    ALL = auto()             # Reduce every spell (Helm of Awakening)
    COLOR = auto()           # Reduce spells with a colored requirement (Sapphire Medallion)
    FREE_CREATURES = auto()  # Creatures up to a mana value are free (Aluren)


@dataclass(frozen=True)
class CostReduction:
    """
    A cost reduction granted by a permanent on the battlefield.

    Attributes:
        kind: Which rule applies
        mana: Mana type the reduction is taken from (ALL, COLOR)
        amount: Reduction amount, or the mana value cap for FREE_CREATURES
        gate: For COLOR, the color a spell must require to be reduced
    """
    kind: ReductionKind
    mana: ManaColor = ManaColor.COLORLESS
    amount: int = 1
    gate: Optional[ManaColor] = None

    @classmethod
    def all_spells(cls, mana: ManaColor, amount: int) -> "CostReduction":
        return cls(kind=ReductionKind.ALL, mana=mana, amount=amount)

    @classmethod
    def colored_spells(cls, gate: ManaColor, mana: ManaColor, amount: int) -> "CostReduction":
        return cls(kind=ReductionKind.COLOR, mana=mana, amount=amount, gate=gate)

    @classmethod
    def free_creatures(cls, max_mana_value: int = 3) -> "CostReduction":
        return cls(kind=ReductionKind.FREE_CREATURES, amount=max_mana_value)


# =============================================================================
# Game Object
# =============================================================================

@dataclass
class GameObject:
    """
    A single card instance.

    Attributes:
        object_id: Stable handle into the game's arena
        name: Card name, also the key cards are grouped by
        card_types: Card types of the card
        sub_types: Creature and land sub-types
        zone: Current zone
        cost: Mana cost, color to amount (COLORLESS is the generic part)
        produced_mana: Mana the object can tap for, color to amount
        remaining_uses: Uses left for limited mana sources, None if unlimited
        is_sac_outlet: Whether the object can sacrifice other creatures
        is_summoning_sick: Entered the battlefield this turn
        is_tapped: Tapped on the battlefield
        has_haste: Ignores summoning sickness
        enters_tapped: Put onto the battlefield tapped
        effect: Effect resolved when the card resolves (or a land is played)
        attached_to: Handle of the object this one is attached to
        cost_reduction: Cost reduction granted while on the battlefield
        usable_from_hand: Mana source usable from the hand (Elvish Spirit Guide)
        is_sideboard: Object started the game in the sideboard
    """
    object_id: ObjectId
    name: str
    card_types: Set[CardType] = field(default_factory=set)
    sub_types: Set[SubType] = field(default_factory=set)
    zone: Zone = Zone.LIBRARY
    cost: Dict[ManaColor, int] = field(default_factory=dict)
    produced_mana: Dict[ManaColor, int] = field(default_factory=dict)
    remaining_uses: Optional[int] = None
    is_sac_outlet: bool = False
    is_summoning_sick: bool = False
    is_tapped: bool = False
    has_haste: bool = False
    enters_tapped: bool = False
    effect: Optional["Effect"] = None
    attached_to: Optional[ObjectId] = None
    cost_reduction: Optional[CostReduction] = None
    usable_from_hand: bool = False
    is_sideboard: bool = False

    # -------------------------------------------------------------------------
    # Type checks
    # -------------------------------------------------------------------------

    def has_type(self, card_type: CardType) -> bool:
        return card_type in self.card_types

    @property
    def is_creature(self) -> bool:
        return CardType.CREATURE in self.card_types

    @property
    def is_land(self) -> bool:
        return CardType.LAND in self.card_types

    @property
    def is_permanent(self) -> bool:
        return any(t.is_permanent() for t in self.card_types)

    def has_sub_type(self, sub_type: SubType) -> bool:
        return sub_type in self.sub_types

    # -------------------------------------------------------------------------
    # Mana
    # -------------------------------------------------------------------------

    @property
    def mana_value(self) -> int:
        """Total mana in the cost."""
        return sum(amount for amount in self.cost.values() if amount > 0)

    def is_color(self, color: ManaColor) -> bool:
        """A card is of a color when its cost requires that color."""
        return self.cost.get(color, 0) > 0

    @property
    def is_mana_source(self) -> bool:
        return bool(self.produced_mana)

    @property
    def is_mana_dork(self) -> bool:
        return self.is_creature and self.is_mana_source

    @property
    def is_single_use_mana(self) -> bool:
        return self.remaining_uses == 1

    @property
    def color_count(self) -> int:
        """Number of mana types the object can produce."""
        return len(self.produced_mana)

    def best_yield(self) -> Tuple[Optional[ManaColor], int]:
        """
        Get the mana type this source produces the most of.

        Returns:
            Tuple of (color, amount), (None, 0) for non-sources
        """
        best: Tuple[Optional[ManaColor], int] = (None, 0)
        for color in ALL_MANA:
            amount = self.produced_mana.get(color, 0)
            if amount > best[1]:
                best = (color, amount)
        return best

    @property
    def max_yield(self) -> int:
        return self.best_yield()[1]

    # -------------------------------------------------------------------------
    # Zone checks
    # -------------------------------------------------------------------------

    @property
    def in_library(self) -> bool:
        return self.zone is Zone.LIBRARY

    @property
    def in_hand(self) -> bool:
        return self.zone is Zone.HAND

    @property
    def on_battlefield(self) -> bool:
        return self.zone is Zone.BATTLEFIELD

    @property
    def in_graveyard(self) -> bool:
        return self.zone is Zone.GRAVEYARD

    def __hash__(self) -> int:
        return hash(self.object_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameObject):
            return NotImplemented
        return self.object_id == other.object_id

    def __repr__(self) -> str:
        return f"GameObject({self.object_id}: {self.name} [{self.zone.name}])"
