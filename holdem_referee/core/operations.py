"""
Operations exchanged with the turn-based platform.

A move is a list of operations. The set of operation kinds is closed:
``Operation`` is the union of the six frozen dataclasses below, and code
that consumes operations dispatches over exactly these types.
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Set:
    """Assign ``value`` to a public state key."""
    key: str
    value: Any


@dataclass(frozen=True)
class SetTurn:
    """Give the turn to a player."""
    player_id: int


@dataclass(frozen=True)
class SetVisibility:
    """
    Change who can see a card slot.

    ``visible_to_player_ids`` of None means everyone; an empty tuple hides the
    card from everyone.
    """
    key: str
    visible_to_player_ids: Optional[Tuple[int, ...]] = None


@dataclass(frozen=True)
class Shuffle:
    """Shuffle the values held by the given keys."""
    keys: Tuple[str, ...]


@dataclass(frozen=True)
class AttemptChangeTokens:
    """Move tokens from players' bankrolls into the table pot."""
    player_id_to_tokens: Mapping[int, int]
    player_id_to_tokens_in_pot: Mapping[int, int]


@dataclass(frozen=True)
class EndGame:
    """The hand is over; ``payouts`` maps player id to chips won."""
    payouts: Mapping[int, int]


Operation = Union[Set, SetTurn, SetVisibility, Shuffle, AttemptChangeTokens, EndGame]

OPERATION_TYPES = (Set, SetTurn, SetVisibility, Shuffle, AttemptChangeTokens, EndGame)


@dataclass
class VerifyMove:
    """
    A request to verify the last move made at a table.

    Attributes:
        player_ids: Player ids in seat order
        last_state: Public state before the move (empty before the first deal)
        last_move: Operations the player claims the move produced
        last_move_player_id: Player who made the move
        token_pot: Chips each player has bought in for

    Player ids are positive: 0 is reserved for "no hacker" in VerifyMoveDone.

    Raises:
        ValueError: If any player id is not a positive integer.
    """
    player_ids: List[int]
    last_state: Dict[str, Any]
    last_move: List[Operation]
    last_move_player_id: int
    token_pot: Dict[int, int] = field(default_factory=dict)

    def __post_init__(self):
        for player_id in [*self.player_ids, self.last_move_player_id]:
            if not _is_player_id(player_id):
                raise ValueError(f"Player ids must be positive integers, got {player_id!r}")


@dataclass(frozen=True)
class VerifyMoveDone:
    """Verification result; ``hacker_player_id`` is 0 when the move is accepted."""
    hacker_player_id: int = 0
    message: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.hacker_player_id == 0


def find_set_value(key: str, operations: List[Operation]) -> Optional[Any]:
    """Value of the first Set on ``key``, or None when the move does not set it."""
    for operation in operations:
        if isinstance(operation, Set) and operation.key == key:
            return operation.value
    return None


def strictly_equal(expected: Any, actual: Any) -> bool:
    """
    Structural equality that also requires matching types.

    Plain ``==`` treats True as 1. Lists and tuples are interchangeable
    since the wire format only knows arrays.
    """
    if isinstance(expected, OPERATION_TYPES):
        if type(expected) is not type(actual):
            return False
        return all(
            strictly_equal(getattr(expected, name), getattr(actual, name))
            for name in expected.__dataclass_fields__
        )
    if isinstance(expected, Mapping):
        if not isinstance(actual, Mapping) or set(expected) != set(actual):
            return False
        return all(strictly_equal(expected[k], actual[k]) for k in expected)
    if isinstance(expected, (list, tuple)):
        if not isinstance(actual, (list, tuple)) or len(expected) != len(actual):
            return False
        return all(strictly_equal(e, a) for e, a in zip(expected, actual))
    if type(expected) is not type(actual):
        return False
    return expected == actual


def _is_player_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
