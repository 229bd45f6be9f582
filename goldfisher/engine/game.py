"""Goldfisher - Main Game Class

This module implements the goldfished game controller. The Game class ties
together all engine systems:
- Object arena and zone management
- Turn structure (begin turn, untap, draw, actions, cleanup)
- Mulligans
- Mana payments through the greedy payment solver
- Effect resolution
- Structured event log and verbose logging

There is no opponent: the opponent is reduced to a library counter that
loses a card every turn, and every decision on our side is delegated to a
Strategy.
"""
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union, TYPE_CHECKING

from .effects import EffectResolver
from .events import (
    DrawEvent, Event, EventLog, GameEndedEvent, LandPlayedEvent, LifeChangeEvent,
    ManaFloatedEvent, MessageEvent, MulliganEvent, SpellCastEvent, TurnStartEvent,
    ZoneChangeEvent,
)
from .mana import ManaPool, PaymentPlan, find_payment, sort_key_best_mana_to_use
from .objects import CostReduction, GameObject
from .types import CONTINUE, ManaColor, ObjectId, Outcome, GameStatus, SubType, Zone
from .zones import InvariantViolation, LibraryPosition, ObjectArena, ZoneChangeInfo, ZoneObject

if TYPE_CHECKING:
    from ..ai.strategy import Strategy
    from ..cards.parser import Deck, Decklist


# =============================================================================
# CONFIGURATION AND RESULT DATACLASSES
# =============================================================================

@dataclass
class GameConfig:
    """
    Configuration settings for a game instance.

    Attributes:
        starting_life: Initial life total (default 20)
        hand_size: Number of cards in an opening hand (default 7)
        max_hand_size: Hand size discarded down to during cleanup (default 7)
        opponent_library: Opponent's library size before their opening hand (default 60)
        mulligan_floor: Mulligan count at which a hand is always kept (default 3)
        on_the_play: Whether we take the first turn and skip its draw (default True)
        verbose: Enable detailed logging output (default False)
        seed: Seed for the game's shuffles, None for a random game
    """
    starting_life: int = 20
    hand_size: int = 7
    max_hand_size: int = 7
    opponent_library: int = 60
    mulligan_floor: int = 3
    on_the_play: bool = True
    verbose: bool = False
    seed: Optional[int] = None


@dataclass
class GameResult:
    """
    Result of a completed game.

    Attributes:
        outcome: Win, Lose or Draw
        turn: Turn the game ended on
        mulligan_count: Mulligans taken before keeping
        events: The full event history of the game
        reason: How the game ended
    """
    outcome: Outcome
    turn: int
    mulligan_count: int
    events: List[Event] = field(default_factory=list)
    reason: str = ""

    @property
    def is_win(self) -> bool:
        return self.outcome is Outcome.WIN


# =============================================================================
# MAIN GAME CLASS
# =============================================================================

class Game:
    """
    Game controller for one goldfished game.

    The Game class is the central orchestrator that:
    - Owns the object arena and every zone
    - Runs the mulligan loop and the turn structure
    - Finds castable spells and pays for them
    - Applies the rules part of every action the strategy takes
    - Tracks the win and loss conditions

    Attributes:
        config: Game configuration
        arena: Object arena holding every card of the game
        events: Append-only event log
        turn: Current turn number (0 during mulligans)
        available_land_drops: Land drops left this turn
        floating_mana: Floating mana pool, cleared every cleanup
        life_total: Our life total
        damage_dealt: Damage dealt to the opponent
        opponent_library: Cards left in the opponent's library
        storm: Spells cast this turn
        mulligan_count: Mulligans taken
        turns_to_skip: Turns we skip after this one (Meditate)
        pending_outcome: Outcome forced by the engine (a failed draw)
    """

    def __init__(self, deck: Union["Deck", "Decklist", None] = None,
                 config: Optional[GameConfig] = None):
        """
        Initialize a new game.

        Args:
            deck: Deck (or Decklist) to play. None creates an empty game that
                  tests fill with ``create_object``.
            config: Game configuration settings. Uses defaults if not provided.

        Raises:
            UnknownCardError: If the deck holds a card missing from the catalog
        """
        self.config = config or GameConfig()
        self.rng = random.Random(self.config.seed)

        self.arena = ObjectArena(self.rng)
        self.events = EventLog()
        self.resolver = EffectResolver()

        self.turn = 0
        self.available_land_drops = 1
        self.floating_mana: ManaPool = {}
        self.life_total = self.config.starting_life
        self.damage_dealt = 0
        self.opponent_library = self.config.opponent_library
        self.storm = 0
        self.mulligan_count = 0
        self.turns_to_skip = 0
        self.pending_outcome: Optional[Outcome] = None

        if deck is not None:
            from ..cards.parser import Deck as GameDeck, Decklist as ParsedDecklist
            if isinstance(deck, ParsedDecklist):
                deck = GameDeck(deck)
            self.deck = deck
            deck.populate(self.arena)
            self.arena.library.shuffle()
            self.log(f"Deck size: {self.arena.maindeck_count()}", "debug")
        else:
            self.deck = None

    # =========================================================================
    # ZONE ACCESS
    # =========================================================================

    @property
    def library(self) -> ZoneObject:
        return self.arena.library

    @property
    def hand(self) -> ZoneObject:
        return self.arena.zone(Zone.HAND)

    @property
    def battlefield(self) -> ZoneObject:
        return self.arena.zone(Zone.BATTLEFIELD)

    @property
    def graveyard(self) -> ZoneObject:
        return self.arena.zone(Zone.GRAVEYARD)

    @property
    def exile(self) -> ZoneObject:
        return self.arena.zone(Zone.EXILE)

    @property
    def sideboard(self) -> ZoneObject:
        return self.arena.zone(Zone.OUTSIDE)

    @property
    def is_first_player(self) -> bool:
        return self.config.on_the_play

    def get_object(self, object_id: ObjectId) -> GameObject:
        return self.arena.get(object_id)

    def create_object(self, name: str, zone: Zone = Zone.LIBRARY,
                      sideboard: bool = False) -> GameObject:
        """
        Create a catalog card directly in a zone.

        Objects created in the library go on top. Used to set up game
        states without a decklist.
        """
        from ..cards.database import create_game_object
        obj = create_game_object(name, self.arena.next_id(), zone=zone, is_sideboard=sideboard)
        return self.arena.register(obj)

    def tapped_lands(self) -> List[GameObject]:
        return self.battlefield.filter(lambda obj: obj.is_land and obj.is_tapped)

    def cost_reductions(self) -> List[CostReduction]:
        return [obj.cost_reduction for obj in self.battlefield
                if obj.cost_reduction is not None]

    def mana_sources_count(self) -> int:
        """Count of mana sources on the battlefield, tapped or not."""
        return self.battlefield.count(lambda obj: obj.is_mana_source)

    # =========================================================================
    # EVENTS AND LOGGING
    # =========================================================================

    def emit(self, event: Event) -> Event:
        """Stamp an event with the current turn, record it and log it."""
        event.turn = self.turn
        self.events.emit(event)
        level = "debug" if isinstance(event, ZoneChangeEvent) else "info"
        self.log(event.describe(), level)
        return event

    def announce(self, message: str) -> None:
        """Record a free form action line."""
        self.emit(MessageEvent(message=message))

    def log(self, message: str, level: str = "info"):
        """
        Log a message if verbose mode is enabled.

        Args:
            message: The message to log
            level: Log level ("info", "debug", "warning", "error")
        """
        if self.config.verbose:
            prefix = {
                "info": "[INFO]",
                "debug": "[DEBUG]",
                "warning": "[WARN]",
                "error": "[ERROR]"
            }.get(level, "[INFO]")
            print(f"{prefix} Turn {self.turn}: {message}")

    def log_game_state(self):
        """Log life totals and the contents of every public zone (if verbose)."""
        if not self.config.verbose:
            return
        self.log(f"Life total: {self.life_total}, Damage dealt: {self.damage_dealt}, "
                 f"Opponent's library: {self.opponent_library}", "debug")
        self.log(f"Library: {len(self.library)} cards", "debug")
        for label, zone in (("Hand", self.hand), ("Battlefield", self.battlefield),
                            ("Graveyard", self.graveyard)):
            self.log(f"{label}: " + ", ".join(f'"{name}"' for name in zone.names()), "debug")

    # =========================================================================
    # ZONE CHANGES
    # =========================================================================

    def move(self, obj: GameObject, zone: Zone,
             position: LibraryPosition = LibraryPosition.TOP) -> ZoneChangeInfo:
        """
        Move an object to a zone and record the change.

        Every zone change in the game goes through this method.

        Args:
            obj: The object to move
            zone: Destination zone
            position: Library position when moving to the library
        """
        info = self.arena.move(obj, zone, position)
        self.emit(ZoneChangeEvent(
            object_id=info.object_id,
            name=info.name,
            from_zone=info.from_zone,
            to_zone=info.to_zone,
        ))
        return info

    def put_onto_battlefield(self, obj: GameObject) -> None:
        """Put an object onto the battlefield, applying enters tapped and summoning sickness."""
        self.move(obj, Zone.BATTLEFIELD)
        if obj.enters_tapped:
            obj.is_tapped = True
        if obj.is_creature and not obj.has_haste:
            obj.is_summoning_sick = True

    def shuffle_library(self) -> None:
        self.arena.library.shuffle()

    def discard(self, card: GameObject) -> None:
        self.announce(f'Discarding card "{card.name}"')
        self.move(card, Zone.GRAVEYARD)

    # =========================================================================
    # CARD DRAWING
    # =========================================================================

    def draw(self) -> GameStatus:
        """
        Draw a card from the library.

        Drawing from an empty library loses the game. The loss is also
        left as the pending outcome so that draws inside effects are
        reported by the next status check.

        Returns:
            CONTINUE, or a finished status with a Lose outcome
        """
        card = self.library.top()
        if card is None:
            self.emit(DrawEvent(object_id=None, library_remaining=0))
            self.pending_outcome = Outcome.LOSE
            return GameStatus.finished(Outcome.LOSE)

        self.move(card, Zone.HAND)
        self.emit(DrawEvent(
            object_id=card.object_id,
            name=card.name,
            library_remaining=len(self.library),
        ))
        return CONTINUE

    def draw_n(self, amount: int) -> GameStatus:
        """Draw ``amount`` cards, stopping at the first failed draw."""
        for _ in range(amount):
            status = self.draw()
            if status.is_finished:
                return status
        return CONTINUE

    # =========================================================================
    # LIFE AND DAMAGE
    # =========================================================================

    def _life_changed(self, life_delta: int, damage_delta: int) -> None:
        self.emit(LifeChangeEvent(
            life_total=self.life_total,
            damage_dealt=self.damage_dealt,
            life_delta=life_delta,
            damage_delta=damage_delta,
        ))

    def take_damage(self, amount: int) -> None:
        self.life_total -= amount
        self._life_changed(-amount, 0)

    def gain_life(self, amount: int) -> None:
        self.life_total += amount
        self._life_changed(amount, 0)

    def deal_damage(self, amount: int) -> None:
        self.damage_dealt += amount
        self._life_changed(0, amount)

    def damage_each(self, amount: int) -> None:
        self.life_total -= amount
        self.damage_dealt += amount
        self._life_changed(-amount, amount)

    def mill_opponent(self, amount: int) -> None:
        self.opponent_library -= amount
        self.announce(f"Opponent milled {amount}, {self.opponent_library} cards remaining")

    # =========================================================================
    # MANA
    # =========================================================================

    def available_mana_sources(self) -> List[GameObject]:
        """
        Mana sources usable right now, in spending order.

        Untapped and not summoning sick battlefield sources, plus sources
        that are used straight from the hand (Elvish Spirit Guide).
        """
        sources = [
            obj for obj in self.battlefield
            if obj.is_mana_source and not obj.is_tapped
            and not obj.is_summoning_sick and not obj.usable_from_hand
        ]
        sources.extend(self.hand.filter(
            lambda obj: obj.usable_from_hand and obj.is_mana_source
        ))
        sources.sort(key=sort_key_best_mana_to_use)
        return sources

    def find_payment(self, card: GameObject) -> Optional[PaymentPlan]:
        return find_payment(card, self.available_mana_sources(),
                            self.floating_mana, self.cost_reductions())

    def find_castable(self) -> List[Tuple[GameObject, PaymentPlan]]:
        """
        Find every castable card in hand.

        Returns:
            (card, payment plan) pairs for the non-land cards in hand that
            can be paid for right now, in hand order
        """
        sources = self.available_mana_sources()
        cost_reductions = self.cost_reductions()

        castable = []
        for card in self.hand:
            if card.is_land:
                continue
            plan = find_payment(card, sources, self.floating_mana, cost_reductions)
            if plan is not None:
                castable.append((card, plan))
        return castable

    def _use_mana_source(self, source: GameObject) -> None:
        """Tap a source or spend one of its uses; the last use removes it."""
        if source.remaining_uses is None:
            source.is_tapped = True
            return

        if source.remaining_uses > 1:
            source.remaining_uses -= 1
            source.is_tapped = True
            return

        source.remaining_uses = 0
        self.move(source, Zone.EXILE if source.in_hand else Zone.GRAVEYARD)

    def float_mana(self) -> None:
        """
        Tap every untapped land for mana, spreading the colors.

        Colors are produced in G, U, B, W, R priority while fewer than two
        of that color are floating, otherwise the land's first color.
        """
        colors = (ManaColor.GREEN, ManaColor.BLUE, ManaColor.BLACK,
                  ManaColor.WHITE, ManaColor.RED)

        lands = self.battlefield.filter(
            lambda obj: obj.is_land and obj.is_mana_source
            and not obj.is_tapped and not obj.is_summoning_sick
        )
        for land in lands:
            chosen = None
            for color in colors:
                if self.floating_mana.get(color, 0) < 2 and color in land.produced_mana:
                    chosen = color
                    break
            if chosen is None:
                chosen = next(iter(land.produced_mana))

            amount = land.produced_mana[chosen]
            self.floating_mana[chosen] = self.floating_mana.get(chosen, 0) + amount
            self.emit(ManaFloatedEvent(
                object_id=land.object_id,
                name=land.name,
                color=chosen.name.capitalize(),
                amount=amount,
            ))
            self._use_mana_source(land)

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def play_land(self, land: GameObject, strategy: Optional["Strategy"] = None) -> bool:
        """
        Play a land if a land drop is available.

        Lands with an effect (fetch lands) resolve it right away, which
        needs the strategy for the search.

        Returns:
            True if the land was played
        """
        if self.available_land_drops <= 0:
            return False

        self.available_land_drops -= 1
        self.emit(LandPlayedEvent(object_id=land.object_id, name=land.name))
        self.put_onto_battlefield(land)

        if land.effect is not None:
            if strategy is None:
                self.log(f'No strategy to resolve "{land.name}"', "warning")
            else:
                self.resolver.resolve(self, land, strategy)
        return True

    def cast_spell(self, strategy: "Strategy", card: GameObject, plan: PaymentPlan,
                   attach_to: Optional[GameObject] = None) -> None:
        """
        Cast a spell, paying with the given plan.

        The plan has to be fresh: it is trusted to be a valid payment at the
        time the spell is cast.

        Args:
            strategy: Strategy making choices for the spell's effect
            card: The card to cast
            plan: Payment plan from ``find_castable`` or ``find_payment``
            attach_to: Object the card gets attached to (Pattern of Rebirth)
        """
        self.storm += 1
        self.emit(SpellCastEvent(
            object_id=card.object_id,
            name=card.name,
            sources=plan.source_names(),
            target=attach_to.name if attach_to is not None else None,
            storm=self.storm,
        ))

        self.move(card, Zone.BATTLEFIELD if card.is_permanent else Zone.GRAVEYARD)
        card.attached_to = attach_to.object_id if attach_to is not None else None

        if card.is_creature:
            card.is_summoning_sick = not card.has_haste
            self._creature_entered(card)

        for source in plan.sources:
            self._use_mana_source(source)

        self.floating_mana = dict(plan.floating)

        self.resolver.resolve(self, card, strategy)

    def _creature_entered(self, creature: GameObject) -> None:
        if creature.has_sub_type(SubType.BEAST):
            for _ in range(self.battlefield.count_named("Wirewood Savage")):
                # Leave one card so that the turn can be passed
                if len(self.library) > 1:
                    self.draw()

        for _ in range(self.battlefield.count_named("Soul Warden")):
            self.gain_life(1)

    def untap(self) -> None:
        """Untap every permanent and clear summoning sickness."""
        for obj in self.battlefield:
            obj.is_tapped = False
            obj.is_summoning_sick = False

    # =========================================================================
    # MAIN GAME LOOP
    # =========================================================================

    def run(self, strategy: "Strategy") -> GameResult:
        """
        Play the game to completion.

        Args:
            strategy: Strategy making every decision

        Returns:
            GameResult with outcome, turn, mulligans and the event history
        """
        self.log("START OF GAME", "debug")
        self.find_starting_hand(strategy)

        status = self.check_pending()
        while not status.is_finished:
            self.begin_turn()
            self.untap()

            status = self.draw_step()
            if status.is_finished:
                break

            self.log_game_state()

            status = self.take_game_actions(strategy)
            if status.is_finished:
                break

            status = self.cleanup(strategy)

        reason = self._outcome_reason(status.outcome)
        self.emit(GameEndedEvent(outcome=status.outcome, reason=reason))
        self.log_game_state()

        return GameResult(
            outcome=status.outcome,
            turn=self.turn,
            mulligan_count=self.mulligan_count,
            events=self.events.history(),
            reason=reason,
        )

    def find_starting_hand(self, strategy: "Strategy") -> None:
        """
        Draw opening hands until the strategy keeps one.

        A hand is always kept once the mulligan floor is reached. After
        keeping, the strategy picks cards to put on the bottom, one per
        mulligan taken.
        """
        hand_size = self.config.hand_size

        # Assume the opponent also draws a full hand and keeps
        self.opponent_library -= hand_size

        while True:
            self.draw_n(hand_size)

            forced = self.mulligan_count >= self.config.mulligan_floor
            if forced or strategy.is_keepable_hand(self, self.mulligan_count):
                keep = max(hand_size - self.mulligan_count, 0)
                bottomed = []
                if len(self.hand) > keep:
                    bottomed = strategy.discard_to_hand_size(self, keep)
                for card in bottomed:
                    self.move(card, Zone.LIBRARY, LibraryPosition.BOTTOM)
                self.emit(MulliganEvent(
                    mulligan_count=self.mulligan_count,
                    kept=True,
                    forced=forced,
                    bottomed=[card.name for card in bottomed],
                ))
                return

            self.emit(MulliganEvent(mulligan_count=self.mulligan_count, kept=False))
            for card in self.hand:
                self.move(card, Zone.LIBRARY, LibraryPosition.BOTTOM)
            self.shuffle_library()
            self.mulligan_count += 1

    def begin_turn(self) -> None:
        self.available_land_drops = 1
        self.storm = 0
        self.turn += 1
        self.emit(TurnStartEvent())

    def draw_step(self) -> GameStatus:
        """Draw for the turn; the player on the play skips their first draw."""
        if self.turn == 1 and self.is_first_player:
            return CONTINUE
        return self.draw()

    def check_pending(self) -> GameStatus:
        if self.pending_outcome is not None:
            return GameStatus.finished(self.pending_outcome)
        return CONTINUE

    def check_status(self, strategy: "Strategy") -> GameStatus:
        """Engine outcomes first, then the strategy's win and loss conditions."""
        status = self.check_pending()
        if status.is_finished:
            return status
        return strategy.game_status(self)

    def take_game_actions(self, strategy: "Strategy") -> GameStatus:
        """Let the strategy act until it passes or the game ends."""
        while True:
            action_taken = strategy.take_game_action(self)
            status = self.check_status(strategy)
            if status.is_finished or not action_taken:
                return status

    def cleanup(self, strategy: "Strategy") -> GameStatus:
        """
        Cleanup step.

        Discards to hand size, empties the mana pool and passes the turn.
        The opponent draws for their turn, and drawing from an empty
        library wins us the game. Skipped turns pass straight back to the
        opponent.
        """
        to_discard = strategy.discard_to_hand_size(self, self.config.max_hand_size)
        if to_discard:
            self.announce("Discarding to hand size")
        for card in to_discard:
            self.discard(card)

        self.floating_mana.clear()
        strategy.cleanup()

        status = self._opponent_turn()
        while not status.is_finished and self.turns_to_skip > 0:
            self.turns_to_skip -= 1
            self.turn += 1
            self.announce("Skipping a turn")
            status = self._opponent_turn()
        return status

    def _opponent_turn(self) -> GameStatus:
        self.opponent_library -= 1
        if self.opponent_library < 0:
            self.announce("Opponent began their turn and drew from an empty library")
            return GameStatus.finished(Outcome.WIN)
        return CONTINUE

    def _outcome_reason(self, outcome: Optional[Outcome]) -> str:
        if self.pending_outcome is not None:
            return "drew from an empty library"
        if outcome is Outcome.DRAW:
            return "both players at zero life"
        if outcome is Outcome.LOSE:
            return "life total reached zero" if self.life_total <= 0 else "lost"
        if self.opponent_library < 0:
            return "opponent drew from an empty library"
        if self.opponent_library <= 0:
            return "opponent's library is empty"
        if self.damage_dealt >= self.config.starting_life:
            return "damage"
        return "combo assembled"


__all__ = [
    'GameConfig',
    'GameResult',
    'Game',
    'InvariantViolation',
]
