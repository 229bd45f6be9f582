"""Goldfisher - Zone System

This module implements the object arena and the six zones of a goldfished
game. Every card instance is created once during setup, receives an integer
handle and then only ever moves between zones.

Zones:
- Library: Hidden, ordered (top is the end of the list)
- Hand: Hidden, unordered
- Battlefield: Public, unordered
- Graveyard: Public, ordered
- Exile: Public, unordered
- Outside: The sideboard, wish targets
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, Iterator, List, Optional, Set
import random

from .objects import GameObject
from .types import ObjectId, Zone, ZONES


class InvariantViolation(RuntimeError):
    """Raised when an object's zone disagrees with where the engine found it.

    Never caught by the engine, the run is aborted.
    """
    pass


# =============================================================================
# ZONE CHANGE TRACKING
# =============================================================================

class LibraryPosition(Enum):
    """Where an object entering the library is put."""
    TOP = auto()
    BOTTOM = auto()


@dataclass
class ZoneChangeInfo:
    """Information about a zone change"""
    object_id: ObjectId
    name: str
    from_zone: Zone
    to_zone: Zone


# =============================================================================
# BASE ZONE CLASS
# =============================================================================

@dataclass
class ZoneObject:
    """Base container for zone management

    Library overrides the ordering behavior, the other zones use this class
    directly.
    """
    zone_type: Zone
    is_ordered: bool = False  # Whether order matters (library, graveyard)
    objects: List[GameObject] = field(default_factory=list)

    # Track object IDs for fast lookup
    _id_cache: Set[ObjectId] = field(default_factory=set)

    def __post_init__(self):
        """Initialize the ID cache"""
        self._id_cache = {obj.object_id for obj in self.objects}

    def add(self, obj: GameObject, position: Optional[int] = None) -> None:
        """Add object to zone

        Args:
            obj: The game object to add
            position: For ordered zones, where to insert (None = end/top)
        """
        obj.zone = self.zone_type
        if position is not None and self.is_ordered:
            self.objects.insert(position, obj)
        else:
            self.objects.append(obj)
        self._id_cache.add(obj.object_id)

    def remove(self, obj: GameObject) -> bool:
        """Remove object from zone

        Returns:
            True if object was found and removed
        """
        if obj.object_id not in self._id_cache:
            return False
        self.objects = [o for o in self.objects if o.object_id != obj.object_id]
        self._id_cache.discard(obj.object_id)
        return True

    def contains(self, obj: GameObject) -> bool:
        return obj.object_id in self._id_cache

        for obj in self.objects:
            if obj.object_id == object_id:
                return obj
        return None

    def filter(self, predicate: Callable[[GameObject], bool]) -> List[GameObject]:
        """Get all objects matching predicate"""
        return [obj for obj in self.objects if predicate(obj)]

    def find_first(self, predicate: Callable[[GameObject], bool]) -> Optional[GameObject]:
        for obj in self.objects:
            if predicate(obj):
                return obj
        return None

    def find_named(self, name: str) -> Optional[GameObject]:
        return self.find_first(lambda obj: obj.name == name)

    def count(self, predicate: Optional[Callable[[GameObject], bool]] = None) -> int:
        if predicate is None:
            return len(self.objects)
        return sum(1 for obj in self.objects if predicate(obj))

    def count_named(self, name: str) -> int:
        return self.count(lambda obj: obj.name == name)

    def names(self) -> List[str]:
        return [obj.name for obj in self.objects]

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[GameObject]:
        return iter(list(self.objects))

    def __bool__(self) -> bool:
        return bool(self.objects)


class Library(ZoneObject):
    """The library

    The library is hidden and ordered. The "top" of the library is the last
    element in the list (what gets drawn). The "bottom" is the first element.
    Shuffling uses the game's own random number generator so that seeded
    games are reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__(zone_type=Zone.LIBRARY, is_ordered=True)
        self.rng = rng or random.Random()

    def top(self) -> Optional[GameObject]:
        return self.objects[-1] if self.objects else None

    def peek(self, n: int = 1) -> List[GameObject]:
        """Look at top N cards without removing

        Returns cards in order from top to deeper (first element is top card)
        """
        if not self.objects or n <= 0:
            return []
        return list(reversed(self.objects[-n:]))

    def put_on_top(self, obj: GameObject) -> None:
        self.add(obj)

    def put_on_bottom(self, obj: GameObject) -> None:
        self.add(obj, position=0)

    def shuffle(self) -> None:
        self.rng.shuffle(self.objects)


# =============================================================================
# OBJECT ARENA
# =============================================================================

class ObjectArena:
    """Owns every game object of one game

    Objects are addressed by their integer handle, which is their index in
    the arena. Zone membership is kept in one ZoneObject per zone and every
    zone mutation goes through ``move`` so the object's own ``zone`` field
    and the zone buckets never disagree.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._objects: List[GameObject] = []
        self.library = Library(rng)
        self.zones: Dict[Zone, ZoneObject] = {
            Zone.LIBRARY: self.library,
            Zone.HAND: ZoneObject(zone_type=Zone.HAND),
            Zone.BATTLEFIELD: ZoneObject(zone_type=Zone.BATTLEFIELD),
            Zone.GRAVEYARD: ZoneObject(zone_type=Zone.GRAVEYARD, is_ordered=True),
            Zone.EXILE: ZoneObject(zone_type=Zone.EXILE),
            Zone.OUTSIDE: ZoneObject(zone_type=Zone.OUTSIDE),
        }

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def next_id(self) -> ObjectId:
        return len(self._objects)

    def register(self, obj: GameObject) -> GameObject:
        """Add a freshly created object to the arena in its current zone

        Raises:
            ValueError: If the object's handle does not match its arena slot
        """
        if obj.object_id != len(self._objects):
            raise ValueError(
                f"Object {obj.name} has handle {obj.object_id}, expected {len(self._objects)}"
            )
        self._objects.append(obj)
        self.zones[obj.zone].add(obj)
        return obj

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(self, object_id: ObjectId) -> GameObject:
        return self._objects[object_id]

    def zone(self, zone: Zone) -> ZoneObject:
        return self.zones[zone]

    def in_zone(self, zone: Zone) -> List[GameObject]:
        return list(self.zones[zone].objects)

    def all_objects(self) -> List[GameObject]:
        return list(self._objects)

    def maindeck_count(self) -> int:
        return sum(1 for obj in self._objects if not obj.is_sideboard)

    def zone_counts(self, include_sideboard: bool = False) -> Dict[Zone, int]:
        counts = {zone: 0 for zone in ZONES}
        for obj in self._objects:
            if include_sideboard or not obj.is_sideboard:
                counts[obj.zone] += 1
        return counts

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[GameObject]:
        return iter(list(self._objects))

    # -------------------------------------------------------------------------
    # Zone changes
    # -------------------------------------------------------------------------

    def move(self, obj: GameObject, to_zone: Zone,
             position: LibraryPosition = LibraryPosition.TOP) -> ZoneChangeInfo:
        """Move an object to another zone

        Tapped and summoning sick flags only mean something on the
        battlefield and are cleared when an object leaves it.

        Args:
            obj: The object to move
            to_zone: Destination zone
            position: Library position when moving to the library

        Returns:
            ZoneChangeInfo describing the move

        Raises:
            InvariantViolation: If the object is missing from its own zone
        """
        from_zone = obj.zone
        if not self.zones[from_zone].remove(obj):
            raise InvariantViolation(
                f"Card {obj.name} is on the wrong zone {from_zone.name}!"
            )

        if from_zone == Zone.BATTLEFIELD and to_zone != Zone.BATTLEFIELD:
            obj.is_tapped = False
            obj.is_summoning_sick = False
            obj.attached_to = None

        if to_zone == Zone.LIBRARY and position == LibraryPosition.BOTTOM:
            self.library.put_on_bottom(obj)
        else:
            self.zones[to_zone].add(obj)

        return ZoneChangeInfo(
            object_id=obj.object_id,
            name=obj.name,
            from_zone=from_zone,
            to_zone=to_zone,
        )
