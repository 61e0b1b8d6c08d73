"""
Holdem Referee Core - Pure Python Texas Hold'em move verification

This module contains all rule logic without any network dependencies.
"""

from holdem_referee.core.card import Card, Rank, Suit, card_id_to_string
from holdem_referee.core.errors import (
    HackerDetected, OperationMismatch, RuleViolation, PotInvariantError, StateDecodeError,
)
from holdem_referee.core.hand import HandRank, PokerHand, BestHandFinder
from holdem_referee.core.logic import PokerLogic
from holdem_referee.core.operations import (
    Set, SetTurn, SetVisibility, Shuffle, AttemptChangeTokens, EndGame,
    Operation, VerifyMove, VerifyMoveDone,
)
from holdem_referee.core.rules import BettingRound, BlindStructure, PokerMove
from holdem_referee.core.state import Pot, PokerState, decode_state

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "card_id_to_string",
    "HackerDetected",
    "OperationMismatch",
    "RuleViolation",
    "PotInvariantError",
    "StateDecodeError",
    "HandRank",
    "PokerHand",
    "BestHandFinder",
    "PokerLogic",
    "Set",
    "SetTurn",
    "SetVisibility",
    "Shuffle",
    "AttemptChangeTokens",
    "EndGame",
    "Operation",
    "VerifyMove",
    "VerifyMoveDone",
    "BettingRound",
    "BlindStructure",
    "PokerMove",
    "Pot",
    "PokerState",
    "decode_state",
]
