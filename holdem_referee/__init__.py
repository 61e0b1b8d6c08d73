"""
Holdem Referee - authoritative move verification for Texas Hold'em

A rule engine for a turn-based Texas Hold'em table with:
- Pure Python verification core (no external poker dependencies)
- Strict recomputation of every claimed move, fail-closed
- FastAPI adapter exposing the verifier over HTTP

Usage:
    from holdem_referee.core import PokerLogic, VerifyMove
    done = PokerLogic().verify(VerifyMove(...))
"""

__version__ = "0.1.0"

from holdem_referee.core.card import Card
from holdem_referee.core.hand import HandRank, PokerHand, BestHandFinder
from holdem_referee.core.logic import PokerLogic
from holdem_referee.core.operations import VerifyMove, VerifyMoveDone

__all__ = [
    "Card",
    "HandRank",
    "PokerHand",
    "BestHandFinder",
    "PokerLogic",
    "VerifyMove",
    "VerifyMoveDone",
    "__version__",
]
