"""Goldfisher - Deck Parser

This module provides decklist parsing and deck construction for the engine.
It handles MTGO-format decklists, validates every name against the card
database, and populates a game's object arena with one GameObject per card.

Decklist Format:
    4 Card Name
    3 Another Card
    // Comment
    # Also a comment

    Sideboard
    2 Sideboard Card
    SB: 1 Another Sideboard Card
"""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, TYPE_CHECKING

from ..engine.objects import GameObject
from ..engine.types import Zone
from .database import CardDatabase, UnknownCardError, get_database

if TYPE_CHECKING:
    from ..engine.zones import ObjectArena


DECKS_DIRECTORY = Path(__file__).parent / "decks"


class DecklistError(ValueError):
    """Raised for a malformed decklist line or an invalid quantity."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class DecklistEntry:
    """
    A single entry in a decklist representing a card and its count.

    Attributes:
        count: Number of copies of this card
        card_name: The name of the card
        is_sideboard: True if this entry belongs to the sideboard
    """
    count: int
    card_name: str
    is_sideboard: bool = False

    def __post_init__(self):
        if self.count < 1:
            raise DecklistError(f"Card count must be at least 1, got {self.count}")
        if not self.card_name or not self.card_name.strip():
            raise DecklistError("Card name cannot be empty")
        self.card_name = self.card_name.strip()

    def __repr__(self) -> str:
        sb_marker = " (SB)" if self.is_sideboard else ""
        return f"DecklistEntry({self.count}x {self.card_name}{sb_marker})"


@dataclass
class Decklist:
    """
    A parsed decklist containing mainboard and sideboard entries.

    Attributes:
        name: The name of the deck
        entries: List of all DecklistEntry objects (main and sideboard)
    """
    name: str
    entries: List[DecklistEntry] = field(default_factory=list)

    @property
    def mainboard(self) -> List[DecklistEntry]:
        return [e for e in self.entries if not e.is_sideboard]

    @property
    def sideboard(self) -> List[DecklistEntry]:
        return [e for e in self.entries if e.is_sideboard]

    @property
    def mainboard_count(self) -> int:
        return sum(e.count for e in self.mainboard)

    @property
    def sideboard_count(self) -> int:
        return sum(e.count for e in self.sideboard)

    def get_card_counts(self) -> Dict[str, int]:
        """
        Get a dictionary mapping card names to their total count.

        Returns:
            Dict mapping card name to total count across main and sideboard
        """
        counts: Dict[str, int] = {}
        for entry in self.entries:
            counts[entry.card_name] = counts.get(entry.card_name, 0) + entry.count
        return counts

    def __repr__(self) -> str:
        return (f"Decklist({self.name}: {self.mainboard_count} main, "
                f"{self.sideboard_count} sideboard)")


# =============================================================================
# Decklist Parser
# =============================================================================

class DecklistParser:
    """
    Parser for MTGO-format decklists.

    Format Rules:
        - Lines starting with // or # are comments (ignored)
        - Empty lines are ignored
        - "Sideboard" marks the beginning of the sideboard section
        - An "SB:" prefix puts a single entry in the sideboard
        - Card entries are formatted as "N Card Name" where N is the count

    Any other line is an error.
    """

    CARD_PATTERN = re.compile(r'^(-?\d+)\s+(.+)$')
    SIDEBOARD_MARKERS = {'sideboard', 'sideboard:', 'sb:'}
    COMMENT_PREFIXES = ('//', '#')

    def parse(self, text: str, deck_name: Optional[str] = None) -> Decklist:
        """
        Parse a decklist from text.

        Args:
            text: The decklist text
            deck_name: Optional deck name

        Returns:
            Parsed Decklist object

        Raises:
            DecklistError: On a malformed line or a count below 1
        """
        entries: List[DecklistEntry] = []
        in_sideboard = False

        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()

            if not line:
                continue

            if line.startswith(self.COMMENT_PREFIXES):
                continue

            if self._is_sideboard_marker(line):
                in_sideboard = True
                continue

            is_sideboard = in_sideboard
            if line.lower().startswith('sb:'):
                line = line[3:].strip()
                is_sideboard = True

            match = self.CARD_PATTERN.match(line)
            if match is None:
                raise DecklistError(f"Cannot parse decklist entry {raw_line.strip()!r}",
                                    line_number)

            try:
                entries.append(DecklistEntry(
                    count=int(match.group(1)),
                    card_name=match.group(2),
                    is_sideboard=is_sideboard,
                ))
            except DecklistError as e:
                raise DecklistError(str(e), line_number) from e

        if deck_name is None:
            main_count = sum(e.count for e in entries if not e.is_sideboard)
            deck_name = f"Unnamed Deck ({main_count} cards)"

        return Decklist(name=deck_name, entries=entries)

    def parse_file(self, path) -> Decklist:
        """
        Parse a decklist from a file.

        Args:
            path: Path to the decklist file

        Returns:
            Parsed Decklist object

        Raises:
            FileNotFoundError: If the file does not exist
        """
        filepath = Path(path)

        if not filepath.exists():
            raise FileNotFoundError(f"Decklist file not found: {path}")

        name = filepath.stem.replace('_', ' ')

        with open(filepath, 'r', encoding='utf-8') as f:
            text = f.read()

        return self.parse(text, deck_name=name)

    def _is_sideboard_marker(self, line: str) -> bool:
        return line.lower().strip() in self.SIDEBOARD_MARKERS


# =============================================================================
# Deck Class (Game-Ready)
# =============================================================================

class Deck:
    """
    A validated decklist ready to be put into a game.

    Every name is checked against the card database when the Deck is built,
    so an unknown card fails before any game starts. ``populate`` then
    creates fresh objects for each game.
    """

    def __init__(self, decklist: Decklist, database: Optional[CardDatabase] = None):
        """
        Args:
            decklist: The source Decklist
            database: CardDatabase to look cards up in (global one by default)

        Raises:
            UnknownCardError: If any card is not in the database
        """
        self.decklist = decklist
        self.database = database or get_database()

        for entry in decklist.entries:
            if entry.card_name not in self.database:
                raise UnknownCardError(entry.card_name)

    @property
    def name(self) -> str:
        return self.decklist.name

    @property
    def size(self) -> int:
        return self.decklist.mainboard_count

    @property
    def sideboard_size(self) -> int:
        return self.decklist.sideboard_count

    def populate(self, arena: "ObjectArena") -> List[GameObject]:
        """
        Create one object per card in the arena.

        Mainboard cards go to the library in decklist order, sideboard
        cards to the Outside zone. The library is not shuffled.

        Returns:
            The created objects
        """
        created: List[GameObject] = []
        for entry in self.decklist.entries:
            zone = Zone.OUTSIDE if entry.is_sideboard else Zone.LIBRARY
            for _ in range(entry.count):
                obj = self.database.create_object(
                    entry.card_name, arena.next_id(), zone=zone,
                    is_sideboard=entry.is_sideboard,
                )
                created.append(arena.register(obj))
        return created

    @classmethod
    def from_file(cls, path, database: Optional[CardDatabase] = None) -> 'Deck':
        return cls(DecklistParser().parse_file(path), database)

    @classmethod
    def from_text(cls, text: str, database: Optional[CardDatabase] = None,
                  name: Optional[str] = None) -> 'Deck':
        return cls(DecklistParser().parse(text, deck_name=name), database)

    def __repr__(self) -> str:
        return f"Deck({self.name}: {self.size} cards, {self.sideboard_size} sideboard)"

    def __len__(self) -> int:
        return self.size


# =============================================================================
# Helper Functions
# =============================================================================

def find_unknown_cards(decklist: Decklist,
                       database: Optional[CardDatabase] = None) -> List[str]:
    """
    Find card names in a decklist that are not in the database.

    Returns:
        List of card names not found in the database, in decklist order
    """
    database = database or get_database()
    unknown: List[str] = []

    for entry in decklist.entries:
        if entry.card_name not in database and entry.card_name not in unknown:
            unknown.append(entry.card_name)

    return unknown


def parse_decklist(text: str, name: Optional[str] = None) -> Decklist:
    return DecklistParser().parse(text, deck_name=name)


def load_deck_file(filepath) -> Decklist:
    """
    Load a decklist from a file.

    Args:
        filepath: Path to the decklist file

    Returns:
        Parsed Decklist object
    """
    return DecklistParser().parse_file(filepath)


def default_decklist_path(file_name: str) -> Path:
    """Path of a decklist shipped with the package."""
    return DECKS_DIRECTORY / file_name


__all__ = [
    'DecklistError',
    'DecklistEntry',
    'Decklist',
    'DecklistParser',
    'Deck',
    'find_unknown_cards',
    'parse_decklist',
    'load_deck_file',
    'default_decklist_path',
]
