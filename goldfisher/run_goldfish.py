#!/usr/bin/env python3
"""
Goldfisher - Simulation Runner

Goldfish a deck with one of the registered strategies and print how fast it
wins.

Usage:
    goldfish --strategy aluren [--games 100] [--decklist deck.txt]
             [--verbose] [--workers 4] [--seed 1]

Example:
    python -m goldfisher.run_goldfish --strategy pattern-combo --games 1000
"""

import sys
import argparse
from pathlib import Path

from goldfisher.ai import StrategyKind, strategy_names, strategy_slugs
from goldfisher.cards.database import UnknownCardError
from goldfisher.cards.parser import DecklistError
from goldfisher.engine.simulation import SimulationConfig, SimulationRunner, print_results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Goldfish a deck against a passive opponent')
    parser.add_argument('--games', type=int, default=100,
                        help='Number of games to simulate (default: 100)')
    parser.add_argument('--strategy', required=True, choices=strategy_slugs() + strategy_names(),
                        help="Strategy to play the deck with, by slug or display name")
    parser.add_argument('--decklist', default=None,
                        help="Path to a decklist file (default: the strategy's own list)")
    parser.add_argument('--verbose', action='store_true', help='Show detailed game output')
    parser.add_argument('--workers', type=int, default=1,
                        help='Worker processes to spread the games over (default: 1)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for reproducible games')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.decklist is not None and not Path(args.decklist).exists():
        print(f"Error: Deck file not found: {args.decklist}")
        sys.exit(1)

    if args.games < 1:
        print(f"Error: Number of games must be at least 1, got {args.games}")
        sys.exit(1)

    config = SimulationConfig(
        games=args.games,
        strategy=StrategyKind.from_name(args.strategy).value,
        decklist=args.decklist,
        verbose=args.verbose,
        workers=max(1, args.workers),
        seed=args.seed,
    )

    try:
        runner = SimulationRunner(config)
    except (DecklistError, UnknownCardError) as e:
        print(f"Error: Invalid decklist: {e}")
        sys.exit(1)

    result = runner.run()
    print_results(result)
    return result


if __name__ == "__main__":
    main()
