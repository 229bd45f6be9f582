"""Goldfisher - Simulation Runner

This module runs many goldfished games with one strategy and aggregates
the results. It handles:
- Game summaries for individual games
- Per-turn win and loss statistics
- Sequential and process-parallel execution
- Printing the results report

Games are independent: each builds its own arena from the decklist and
owns its shuffle stream, so games can be spread over worker processes and
merged afterwards.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from concurrent.futures import ProcessPoolExecutor, as_completed

from .game import Game, GameConfig
from .types import Outcome


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class SimulationConfig:
    """
    Configuration of a batch of simulated games.

    Attributes:
        games: Number of games to simulate (default 100)
        strategy: Registered strategy name (e.g. "Premodern - Aluren")
        decklist: Path to a decklist file, None for the strategy's default list
        verbose: Print game actions (slow)
        workers: Worker processes, 1 runs the games in this process
        seed: Base seed, game i is seeded with seed + i
    """
    games: int = 100
    strategy: str = ""
    decklist: Optional[str] = None
    verbose: bool = False
    workers: int = 1
    seed: Optional[int] = None

    def game_config(self, game_index: int) -> GameConfig:
        seed = None if self.seed is None else self.seed + game_index
        return GameConfig(verbose=self.verbose, seed=seed)


# =============================================================================
# GAME SUMMARY
# =============================================================================

@dataclass
class GameSummary:
    """
    Summary of a completed game.

    Only the fields the statistics need, so that results coming back from
    worker processes stay small.
    """
    game_number: int
    outcome: Outcome
    turn: int
    mulligan_count: int
    reason: str = ""

    def __str__(self) -> str:
        return (f"Game {self.game_number}: {self.outcome.name} on turn {self.turn} "
                f"({self.reason}, {self.mulligan_count} mulligans)")


# =============================================================================
# SIMULATION RESULT
# =============================================================================

@dataclass
class SimulationResult:
    """
    Aggregated results of a batch of games.

    Draws are counted as losses.

    Attributes:
        strategy: Strategy name
        deck_name: Name of the simulated deck
        games: Summaries of every game, in game number order
    """
    strategy: str
    deck_name: str
    games: List[GameSummary] = field(default_factory=list)

    @property
    def total_games(self) -> int:
        return len(self.games)

    @property
    def wins_by_turn(self) -> Dict[int, int]:
        """Win counts keyed by turn, sorted by turn."""
        return self._count_by_turn(win=True)

    @property
    def losses_by_turn(self) -> Dict[int, int]:
        return self._count_by_turn(win=False)

    def _count_by_turn(self, win: bool) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        for game in self.games:
            if (game.outcome is Outcome.WIN) == win:
                counts[game.turn] = counts.get(game.turn, 0) + 1
        return dict(sorted(counts.items()))

    @property
    def total_wins(self) -> int:
        return sum(1 for game in self.games if game.outcome is Outcome.WIN)

    @property
    def total_losses(self) -> int:
        return self.total_games - self.total_wins

    @property
    def win_rate(self) -> float:
        """
        Calculate the win rate.

        Returns:
            Win rate as a float (0.0 to 1.0)
        """
        if not self.games:
            return 0.0
        return self.total_wins / self.total_games

    @property
    def average_win_turn(self) -> Optional[float]:
        """Average turn of the won games, None without wins."""
        wins = [game.turn for game in self.games if game.outcome is Outcome.WIN]
        if not wins:
            return None
        return sum(wins) / len(wins)

    @property
    def average_mulligans(self) -> float:
        if not self.games:
            return 0.0
        return sum(game.mulligan_count for game in self.games) / len(self.games)

    def cumulative(self, win: bool = True) -> List[Tuple[int, int, float, float]]:
        """
        Per-turn percentages of all games.

        Returns:
            (turn, count, percentage, cumulative percentage) rows
        """
        counts = self.wins_by_turn if win else self.losses_by_turn
        rows = []
        running = 0.0
        for turn, count in counts.items():
            percentage = 100.0 * count / self.total_games
            running += percentage
            rows.append((turn, count, percentage, running))
        return rows

    def __str__(self) -> str:
        return (f"{self.deck_name} ({self.strategy}): {self.total_wins}/{self.total_games} "
                f"wins ({self.win_rate:.1%} win rate)")


# =============================================================================
# SIMULATION RUNNER
# =============================================================================

class SimulationRunner:
    """
    Runs a batch of goldfished games.

    Supports both sequential and parallel execution.

    Attributes:
        config: Simulation configuration
    """

    def __init__(self, config: SimulationConfig):
        """
        Resolves the strategy and loads the decklist up front so that an
        unknown strategy, a missing file or an invalid decklist fails
        before any game is played.

        Raises:
            KeyError: Unknown strategy name
            FileNotFoundError: Missing decklist file
            DecklistError: Malformed decklist
            UnknownCardError: Decklist card missing from the catalog
        """
        self.config = config
        self.deck = _load_deck(config)

    def run(self) -> SimulationResult:
        """
        Run the games.

        Uses worker processes when ``config.workers`` is above 1.

        Returns:
            SimulationResult with aggregated statistics
        """
        if self.config.workers > 1 and self.config.games > 1:
            return self.run_parallel(self.config.workers)

        games = _run_games(self.config, list(range(self.config.games)))
        return self._result(games)

    def run_parallel(self, num_workers: int = 4) -> SimulationResult:
        """
        Run the games in parallel using multiple processes.

        Each worker gets a contiguous slice of game numbers and rebuilds
        the deck from the configuration.

        Args:
            num_workers: Number of parallel worker processes

        Returns:
            SimulationResult with aggregated statistics
        """
        indices = list(range(self.config.games))
        chunk_size = max(1, -(-len(indices) // num_workers))
        chunks = [indices[i:i + chunk_size] for i in range(0, len(indices), chunk_size)]

        games: List[GameSummary] = []
        with ProcessPoolExecutor(max_workers=num_workers) as executor:
            futures = [
                executor.submit(_run_games, self.config, chunk)
                for chunk in chunks
            ]

            for i, future in enumerate(as_completed(futures)):
                games.extend(future.result())

                if self.config.verbose:
                    print(f"Completed batch {i + 1}/{len(chunks)}")

        games.sort(key=lambda game: game.game_number)
        return self._result(games)

    def _result(self, games: List[GameSummary]) -> SimulationResult:
        return SimulationResult(
            strategy=self.config.strategy,
            deck_name=self.deck.name,
            games=games,
        )


def _load_deck(config: SimulationConfig):
    from ..ai import get_strategy
    from ..cards.parser import Deck, load_deck_file

    strategy = get_strategy(config.strategy)
    if config.decklist is not None:
        return Deck(load_deck_file(config.decklist))
    return Deck(strategy.default_decklist())


def _run_games(config: SimulationConfig, game_indices: List[int]) -> List[GameSummary]:
    """
    Play a list of games.

    This function runs in a separate process when using run_parallel.
    """
    from ..ai import get_strategy

    deck = _load_deck(config)
    summaries = []
    for index in game_indices:
        strategy = get_strategy(config.strategy)
        game = Game(deck, config.game_config(index))
        result = game.run(strategy)
        summaries.append(GameSummary(
            game_number=index + 1,
            outcome=result.outcome,
            turn=result.turn,
            mulligan_count=result.mulligan_count,
            reason=result.reason,
        ))
    return summaries


def run_simulation(strategy: str, games: int = 100, decklist: Optional[str] = None,
                   verbose: bool = False, workers: int = 1,
                   seed: Optional[int] = None) -> SimulationResult:
    """
    Convenience function to run a batch of games.

    Example:
        result = run_simulation("Premodern - Aluren", games=1000, workers=4)
        print_results(result)
    """
    config = SimulationConfig(games=games, strategy=strategy, decklist=decklist,
                              verbose=verbose, workers=workers, seed=seed)
    return SimulationRunner(config).run()


def print_results(result: SimulationResult) -> None:
    """
    Pretty print simulation results.

    Example output:
        ============================================================
                                RESULTS
        ============================================================
        Aluren (Premodern - Aluren)
                           Average turn: 5.12
                      Average mulligans: 0.41
                 Wins per turn after 100 games:
        ============================================================
        Turn 03: 4 wins (4.0%) - cumulative 4.0%
        ...
    """
    width = 60
    separator = "=" * width

    average_turn = result.average_win_turn
    average_turn_str = "-" if average_turn is None else f"{average_turn:.2f}"

    print(separator)
    print("RESULTS".center(width))
    print(separator)
    print(f"{result.deck_name} ({result.strategy})")
    print(f"Average turn: {average_turn_str}".rjust(width // 2 + 10))
    print(f"Average mulligans: {result.average_mulligans:.2f}".rjust(width // 2 + 10))
    print(f"Wins per turn after {result.total_games} games:".rjust(width // 2 + 15))
    print(separator)

    for turn, wins, percentage, cumulative in result.cumulative(win=True):
        print(f"Turn {turn:02}: {wins} wins ({percentage:.1f}%) - cumulative {cumulative:.1f}%")

    for turn, losses, percentage, cumulative in result.cumulative(win=False):
        print(f"Turn {turn:02}: {losses} losses ({percentage:.1f}%) - "
              f"cumulative {cumulative:.1f}%")

    print(separator)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    'SimulationConfig',
    'GameSummary',
    'SimulationResult',
    'SimulationRunner',
    'run_simulation',
    'print_results',
]
