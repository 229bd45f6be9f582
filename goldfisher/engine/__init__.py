"""Core engine components - lazy imports to avoid circular dependencies"""

# Core types can be imported directly
from .types import (
    CardType, ManaColor, Outcome, GameStatus, SearchFilter, SearchKind, SubType, Zone,
    CONTINUE,
)


# Other imports are lazy to avoid circular dependencies
def __getattr__(name):
    """Lazy import for engine components."""
    if name in ('Game', 'GameConfig', 'GameResult'):
        from . import game
        return getattr(game, name)
    elif name == 'GameObject':
        from .objects import GameObject
        return GameObject
    elif name == 'CostReduction':
        from .objects import CostReduction
        return CostReduction
    elif name in ('ObjectArena', 'InvariantViolation', 'LibraryPosition'):
        from . import zones
        return getattr(zones, name)
    elif name in ('ManaCost', 'PaymentPlan', 'find_payment'):
        from . import mana
        return getattr(mana, name)
    elif name in ('Effect', 'EffectKind', 'EffectResolver'):
        from . import effects
        return getattr(effects, name)
    elif name == 'EventLog':
        from .events import EventLog
        return EventLog
    elif name in ('SimulationConfig', 'SimulationResult', 'SimulationRunner'):
        from . import simulation
        return getattr(simulation, name)
    raise AttributeError(f"module 'engine' has no attribute {name!r}")
