"""
Mock objects for Goldfisher testing.

Modules:
- mock_strategy: MockStrategy, a minimal strategy that plays any land and
  casts anything castable
"""

from .mock_strategy import MockStrategy

__all__ = [
    'MockStrategy',
]
