"""Goldfisher - Card Database

This module provides the static card catalog:
- Stores card data in structured dataclasses
- Maps card names to cost, types, mana production and on-resolve effect
- Offers lookup and filtering capabilities
- Creates engine GameObjects from database entries

The catalog is a curated subset: only the cards the bundled strategies and
their decklists need are modeled, and only the parts of each card the
engine cares about.
"""
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Iterator, List, Optional

from ..engine.effects import Effect, EffectKind
from ..engine.mana import ManaCost
from ..engine.objects import CostReduction, GameObject
from ..engine.types import (
    CardType, ManaColor, ObjectId, SearchFilter, SearchKind, SubType, Zone,
)


class UnknownCardError(KeyError):
    """Raised when a card name is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unimplemented card: {self.name}"


# =============================================================================
# Card Data
# =============================================================================

TYPE_MAPPING = {
    "creature": CardType.CREATURE,
    "enchantment": CardType.ENCHANTMENT,
    "artifact": CardType.ARTIFACT,
    "sorcery": CardType.SORCERY,
    "instant": CardType.INSTANT,
    "land": CardType.LAND,
}

SUBTYPE_MAPPING = {
    "harpy": SubType.HARPY,
    "beast": SubType.BEAST,
    "plains": SubType.PLAINS,
    "island": SubType.ISLAND,
    "swamp": SubType.SWAMP,
    "mountain": SubType.MOUNTAIN,
    "forest": SubType.FOREST,
}


@dataclass
class CardData:
    """
    Catalog entry for one card.

    Attributes:
        name: Card name
        mana_cost: Mana cost string (e.g., "{2}{U}{U}")
        types: List of card types (e.g., ["Creature"])
        subtypes: List of subtypes the engine cares about (e.g., ["Beast"])
        produces: Mana the card taps for (e.g., "{W}{U}{B}{R}{G}")
        remaining_uses: Uses for limited mana sources, None if unlimited
        is_sac_outlet: Whether the card can sacrifice creatures
        has_haste: Creature can tap for mana the turn it arrives
        enters_tapped: Land enters the battlefield tapped
        usable_from_hand: Mana source used straight from the hand
        effect: On-resolve effect
        cost_reduction: Cost reduction granted while on the battlefield
    """
    name: str
    mana_cost: str = ""
    types: List[str] = field(default_factory=list)
    subtypes: List[str] = field(default_factory=list)
    produces: str = ""
    remaining_uses: Optional[int] = None
    is_sac_outlet: bool = False
    has_haste: bool = False
    enters_tapped: bool = False
    usable_from_hand: bool = False
    effect: Optional[Effect] = None
    cost_reduction: Optional[CostReduction] = None

    @property
    def cmc(self) -> int:
        return ManaCost.parse(self.mana_cost).mana_value

    def is_creature(self) -> bool:
        return "Creature" in self.types

    def is_land(self) -> bool:
        return "Land" in self.types

    def is_mana_source(self) -> bool:
        return bool(self.produces)

    def card_types(self):
        return {TYPE_MAPPING[t.lower()] for t in self.types}

    def sub_types(self):
        return {SUBTYPE_MAPPING[t.lower()] for t in self.subtypes}


# =============================================================================
# Card Database
# =============================================================================

class CardDatabase:
    """
    Singleton card database.

    The database stores CardData objects and provides methods for:
    - Adding and retrieving cards
    - Searching and filtering cards
    - Creating GameObjects for a game
    """

    _instance: ClassVar[Optional['CardDatabase']] = None

    def __new__(cls) -> 'CardDatabase':
        """Ensure singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the database (only once due to singleton)."""
        if self._initialized:
            return

        self.cards: Dict[str, CardData] = {}
        self._name_index: Dict[str, str] = {}  # lowercase -> actual name
        self._initialized = True

        for card in CATALOG:
            self.add(card)

    def get(self, name: str) -> Optional[CardData]:
        """
        Get card data by name (case-insensitive).

        Args:
            name: Card name to look up

        Returns:
            CardData if found, None otherwise
        """
        if name in self.cards:
            return self.cards[name]

        actual_name = self._name_index.get(name.lower())
        if actual_name is not None:
            return self.cards.get(actual_name)

        return None

    def require(self, name: str) -> CardData:
        """
        Get card data by name.

        Raises:
            UnknownCardError: If the card is not in the catalog
        """
        card = self.get(name)
        if card is None:
            raise UnknownCardError(name)
        return card

    def add(self, card: CardData):
        """
        Add a card to the database.

        Args:
            card: CardData to add
        """
        self.cards[card.name] = card
        self._name_index[card.name.lower()] = card.name

    def search(self, query: str) -> List[CardData]:
        """Search for cards whose name contains the query (case-insensitive)."""
        query_lower = query.lower()
        return [card for card in self.cards.values() if query_lower in card.name.lower()]

    def by_type(self, card_type: str) -> List[CardData]:
        type_lower = card_type.lower()
        return [card for card in self.cards.values()
                if any(t.lower() == type_lower for t in card.types)]

    def create_object(self, name: str, object_id: ObjectId,
                      zone: Zone = Zone.LIBRARY, is_sideboard: bool = False) -> GameObject:
        """
        Create a GameObject from catalog data.

        Args:
            name: Card name
            object_id: Arena handle for the new object
            zone: Starting zone
            is_sideboard: Whether the object belongs to the sideboard

        Returns:
            A fresh GameObject

        Raises:
            UnknownCardError: If the card is not in the catalog
        """
        data = self.require(name)
        return GameObject(
            object_id=object_id,
            name=data.name,
            card_types=data.card_types(),
            sub_types=data.sub_types(),
            zone=zone,
            cost=ManaCost.parse(data.mana_cost).to_dict(),
            produced_mana=ManaCost.parse(data.produces).to_dict(),
            remaining_uses=data.remaining_uses,
            is_sac_outlet=data.is_sac_outlet,
            has_haste=data.has_haste,
            enters_tapped=data.enters_tapped,
            effect=data.effect,
            cost_reduction=data.cost_reduction,
            usable_from_hand=data.usable_from_hand,
            is_sideboard=is_sideboard,
        )

    def __len__(self) -> int:
        """Return number of cards in database."""
        return len(self.cards)

    def __contains__(self, name: str) -> bool:
        """Check if a card is in the database."""
        return self.get(name) is not None

    def __iter__(self) -> Iterator[CardData]:
        """Iterate over all cards."""
        return iter(self.cards.values())


# =============================================================================
# Catalog
# =============================================================================

FIVE_COLORS = "{W}{U}{B}{R}{G}"


def _effect(kind: EffectKind, amount: Optional[int] = None,
            search: Optional[SearchFilter] = None) -> Effect:
    return Effect(kind=kind, amount=amount, search=search)


def _fetch(*land_types: SubType) -> Effect:
    return _effect(EffectKind.FETCH_LAND, search=SearchFilter.lands(*land_types))


def _tutor(kind: EffectKind, search_kind: SearchKind) -> Effect:
    return _effect(kind, search=SearchFilter(kind=search_kind))


def _creature(name: str, cost: str, **kwargs) -> CardData:
    return CardData(name=name, mana_cost=cost, types=["Creature"], **kwargs)


def _land(name: str, produces: str = "", **kwargs) -> CardData:
    return CardData(name=name, types=["Land"], produces=produces, **kwargs)


CATALOG: List[CardData] = [
    # Creatures
    _creature("Llanowar Elves", "{G}", produces="{G}"),
    _creature("Fyndhorn Elves", "{G}", produces="{G}"),
    _creature("Birds of Paradise", "{G}", produces=FIVE_COLORS),
    _creature("Noble Hierarch", "{G}", produces="{W}{U}{G}"),
    _creature("Veteran Explorer", "{G}"),
    _creature("Xantid Swarm", "{G}"),
    _creature("Rofellos, Llanowar Emissary", "{G}{G}", produces="{G}"),
    _creature("Wall of Roots", "{1}{G}", produces="{G}", remaining_uses=5, has_haste=True),
    _creature("Elvish Spirit Guide", "{2}{G}", produces="{G}", remaining_uses=1,
              usable_from_hand=True),
    _creature("Carrion Feeder", "{B}", is_sac_outlet=True),
    _creature("Viscera Seer", "{B}", is_sac_outlet=True),
    _creature("Nantuko Husk", "{2}{B}", is_sac_outlet=True),
    _creature("Phyrexian Ghoul", "{2}{B}", is_sac_outlet=True),
    _creature("Academy Rector", "{3}{W}"),
    _creature("Mesmeric Fiend", "{1}{B}"),
    _creature("Iridescent Drake", "{3}{U}"),
    _creature("Karmic Guide", "{3}{W}{W}"),
    _creature("Volrath's Shapeshifter", "{1}{U}{U}"),
    _creature("Caller of the Claw", "{2}{G}"),
    _creature("Body Snatcher", "{2}{B}{B}"),
    _creature("Akroma, Angel of Wrath", "{5}{W}{W}{W}"),
    _creature("Phantom Nishoba", "{5}{G}{W}"),
    _creature("Soul Warden", "{W}"),
    _creature("Cavern Harpy", "{U}{B}", subtypes=["Harpy", "Beast"],
              effect=_effect(EffectKind.CAVERN_HARPY)),
    _creature("Cloud of Faeries", "{1}{U}", effect=_effect(EffectKind.UNTAP_LANDS, 2)),
    _creature("Raven Familiar", "{2}{U}", effect=_effect(EffectKind.IMPULSE, 3)),
    _creature("Wirewood Savage", "{2}{G}"),
    _creature("Maggot Carrier", "{2}{B}", effect=_effect(EffectKind.DAMAGE_EACH, 1)),
    _creature("Auramancer", "{2}{W}"),
    _creature("Monk Realist", "{1}{W}"),
    _creature("Plague Spitter", "{2}{B}"),
    _creature("Ravenous Baloth", "{2}{G}{G}", subtypes=["Beast"]),
    _creature("Uktabi Orangutan", "{2}{G}"),
    _creature("Bone Shredder", "{2}{B}"),
    _creature("Reveillark", "{4}{W}"),
    _creature("Body Double", "{4}{U}"),
    _creature("Protean Hulk", "{5}{G}{G}"),
    _creature("Mogg Fanatic", "{R}"),
    _creature("Progenitus", "{W}{W}{U}{U}{B}{B}{R}{R}{G}{G}"),

    # Enchantments
    CardData("Pattern of Rebirth", "{3}{G}", types=["Enchantment"]),
    CardData("Aluren", "{2}{G}{G}", types=["Enchantment"],
             cost_reduction=CostReduction.free_creatures(3)),
    CardData("Worship", "{3}{W}", types=["Enchantment"]),
    CardData("Pernicious Deed", "{1}{B}{G}", types=["Enchantment"]),
    CardData("Recurring Nightmare", "{2}{B}", types=["Enchantment"]),
    CardData("Seal of Cleansing", "{1}{W}", types=["Enchantment"]),
    CardData("City of Solitude", "{2}{G}", types=["Enchantment"]),
    CardData("Engineered Plague", "{2}{B}", types=["Enchantment"]),
    CardData("Circle of Protection: Red", "{1}{W}", types=["Enchantment"]),
    CardData("Warmth", "{1}{W}", types=["Enchantment"]),
    CardData("Goblin Bombardment", "{1}{R}", types=["Enchantment"], is_sac_outlet=True),

    # Artifacts
    CardData("Altar of Dementia", "{2}", types=["Artifact"], is_sac_outlet=True),
    CardData("Lotus Petal", "", types=["Artifact"], produces=FIVE_COLORS, remaining_uses=1),
    CardData("Helm of Awakening", "{2}", types=["Artifact"],
             cost_reduction=CostReduction.all_spells(ManaColor.COLORLESS, 1)),
    CardData("Sapphire Medallion", "{2}", types=["Artifact"],
             cost_reduction=CostReduction.colored_spells(ManaColor.BLUE, ManaColor.COLORLESS, 1)),
    CardData("Defense Grid", "{2}", types=["Artifact"]),
    CardData("Tormod's Crypt", "", types=["Artifact"]),

    # Sorceries
    CardData("Cabal Therapy", "{B}", types=["Sorcery"]),
    CardData("Duress", "{B}", types=["Sorcery"]),
    CardData("Vindicate", "{1}{W}{B}", types=["Sorcery"]),
    CardData("Unearth", "{B}", types=["Sorcery"], effect=_effect(EffectKind.UNEARTH)),
    CardData("Crippling Fatigue", "{1}{B}{B}", types=["Sorcery"]),
    CardData("Merchant Scroll", "{1}{U}", types=["Sorcery"],
             effect=_tutor(EffectKind.SEARCH_TO_HAND, SearchKind.BLUE_INSTANT)),
    CardData("Sleight of Hand", "{U}", types=["Sorcery"], effect=_effect(EffectKind.IMPULSE, 2)),
    CardData("Natural Order", "{2}{G}{G}", types=["Sorcery"],
             effect=_tutor(EffectKind.SEARCH_TO_BATTLEFIELD, SearchKind.GREEN_CREATURE)),
    CardData("Gitaxian Probe", "", types=["Sorcery"], effect=_effect(EffectKind.DRAW, 1)),
    CardData("Ponder", "{U}", types=["Sorcery"], effect=_effect(EffectKind.PONDER)),
    CardData("Preordain", "{U}", types=["Sorcery"], effect=_effect(EffectKind.PREORDAIN)),

    # Instants
    CardData("Swords to Plowshares", "{W}", types=["Instant"]),
    CardData("Worldly Tutor", "{G}", types=["Instant"],
             effect=_tutor(EffectKind.SEARCH_TO_LIBRARY_TOP, SearchKind.CREATURE)),
    CardData("Enlightened Tutor", "{W}", types=["Instant"],
             effect=_tutor(EffectKind.SEARCH_TO_LIBRARY_TOP, SearchKind.ENCHANTMENT_ARTIFACT)),
    CardData("Eladamri's Call", "{G}{W}", types=["Instant"],
             effect=_tutor(EffectKind.SEARCH_TO_HAND, SearchKind.CREATURE)),
    CardData("Impulse", "{1}{U}", types=["Instant"], effect=_effect(EffectKind.IMPULSE, 4)),
    CardData("Living Wish", "{1}{G}", types=["Instant"],
             effect=_effect(EffectKind.SEARCH_TO_HAND,
                            search=SearchFilter.wish(CardType.CREATURE, CardType.LAND))),
    CardData("Cunning Wish", "{2}{U}", types=["Instant"],
             effect=_effect(EffectKind.SEARCH_TO_HAND,
                            search=SearchFilter.wish(CardType.INSTANT))),
    CardData("Ray of Revelation", "{1}{W}", types=["Instant"]),
    CardData("Intuition", "{2}{U}", types=["Instant"], effect=_effect(EffectKind.INTUITION)),
    CardData("Naturalize", "{1}{G}", types=["Instant"]),
    CardData("Hydroblast", "{U}", types=["Instant"]),
    CardData("Blue Elemental Blast", "{U}", types=["Instant"]),
    CardData("Mana Short", "{2}{U}", types=["Instant"]),
    CardData("Words of Wisdom", "{1}{U}", types=["Instant"],
             effect=_effect(EffectKind.WORDS_OF_WISDOM)),
    CardData("Snap", "{1}{U}", types=["Instant"], effect=_effect(EffectKind.SNAP)),
    CardData("Brain Freeze", "{1}{U}", types=["Instant"], effect=_effect(EffectKind.BRAIN_FREEZE)),
    CardData("Frantic Search", "{2}{U}", types=["Instant"],
             effect=_effect(EffectKind.FRANTIC_SEARCH)),
    CardData("Meditate", "{2}{U}", types=["Instant"], effect=_effect(EffectKind.MEDITATE)),
    CardData("Chain of Vapor", "{U}", types=["Instant"]),
    CardData("Hurkyl's Recall", "{1}{U}", types=["Instant"]),
    CardData("Turnabout", "{2}{U}{U}", types=["Instant"],
             effect=_effect(EffectKind.UNTAP_LANDS)),
    CardData("Brainstorm", "{U}", types=["Instant"], effect=_effect(EffectKind.BRAINSTORM)),

    # Lands
    _land("City of Brass", FIVE_COLORS),
    _land("Reflecting Pool", FIVE_COLORS),
    _land("Gemstone Mine", FIVE_COLORS, remaining_uses=3),
    _land("Llanowar Wastes", "{B}{G}{C}"),
    _land("Brushland", "{W}{G}{C}"),
    _land("Yavimaya Coast", "{U}{G}{C}"),
    _land("Caves of Koilos", "{W}{B}{C}"),
    _land("Underground River", "{U}{B}{C}"),
    _land("Phyrexian Tower", "{C}"),
    _land("Ancient Tomb", "{C}{C}"),
    _land("Hickory Woodlot", "{G}{G}", remaining_uses=2, enters_tapped=True),
    CardData("Dryad Arbor", types=["Land", "Creature"], subtypes=["Forest"], produces="{G}"),
    _land("Plains", "{W}", subtypes=["Plains"]),
    _land("Island", "{U}", subtypes=["Island"]),
    _land("Swamp", "{B}", subtypes=["Swamp"]),
    _land("Mountain", "{R}", subtypes=["Mountain"]),
    _land("Forest", "{G}", subtypes=["Forest"]),
    _land("Tundra", "{W}{U}", subtypes=["Plains", "Island"]),
    _land("Underground Sea", "{U}{B}", subtypes=["Island", "Swamp"]),
    _land("Volcanic Island", "{U}{R}", subtypes=["Island", "Mountain"]),
    _land("Tropical Island", "{U}{G}", subtypes=["Island", "Forest"]),
    _land("Scrubland", "{W}{B}", subtypes=["Plains", "Swamp"]),
    _land("Badlands", "{B}{R}", subtypes=["Swamp", "Mountain"]),
    _land("Bayou", "{B}{G}", subtypes=["Swamp", "Forest"]),
    _land("Plateau", "{W}{R}", subtypes=["Plains", "Mountain"]),
    _land("Savannah", "{W}{G}", subtypes=["Plains", "Forest"]),
    _land("Taiga", "{R}{G}", subtypes=["Forest", "Mountain"]),
    _land("Flooded Strand", effect=_fetch(SubType.PLAINS, SubType.ISLAND)),
    _land("Marsh Flats", effect=_fetch(SubType.PLAINS, SubType.SWAMP)),
    _land("Windswept Heath", effect=_fetch(SubType.PLAINS, SubType.FOREST)),
    _land("Arid Mesa", effect=_fetch(SubType.PLAINS, SubType.MOUNTAIN)),
    _land("Polluted Delta", effect=_fetch(SubType.ISLAND, SubType.SWAMP)),
    _land("Scalding Tarn", effect=_fetch(SubType.ISLAND, SubType.MOUNTAIN)),
    _land("Misty Rainforest", effect=_fetch(SubType.ISLAND, SubType.FOREST)),
    _land("Verdant Catacombs", effect=_fetch(SubType.SWAMP, SubType.FOREST)),
    _land("Bloodstained Mire", effect=_fetch(SubType.SWAMP, SubType.MOUNTAIN)),
    _land("Wooded Foothills", effect=_fetch(SubType.FOREST, SubType.MOUNTAIN)),
]


def get_database() -> CardDatabase:
    """Get the global card database instance."""
    return CardDatabase()


def get_card(name: str) -> Optional[CardData]:
    """
    Get a card by name from the global database.

    Args:
        name: Card name

    Returns:
        CardData if found, None otherwise
    """
    return get_database().get(name)


def create_game_object(name: str, object_id: ObjectId, zone: Zone = Zone.LIBRARY,
                       is_sideboard: bool = False) -> GameObject:
    """Create a GameObject for a catalog card, see CardDatabase.create_object."""
    return get_database().create_object(name, object_id, zone=zone, is_sideboard=is_sideboard)


__all__ = [
    'UnknownCardError',
    'CardData',
    'CardDatabase',
    'CATALOG',
    'get_database',
    'get_card',
    'create_game_object',
]
