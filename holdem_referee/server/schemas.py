"""
Pydantic schemas for API request/response validation.

Operations travel as JSON objects tagged by ``type``; field names are
camelCase on the wire.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, PositiveInt

from holdem_referee.core.operations import (
    AttemptChangeTokens, EndGame, Operation, Set, SetTurn, SetVisibility, Shuffle,
    VerifyMove, VerifyMoveDone,
)


class WireModel(BaseModel):
    """Accepts both camelCase aliases and field names."""

    class Config:
        populate_by_name = True


# ============= Operation Schemas =============

class SetSchema(WireModel):
    type: Literal["Set"] = "Set"
    key: str
    value: Any = None

    def to_operation(self) -> Set:
        return Set(self.key, self.value)


class SetTurnSchema(WireModel):
    type: Literal["SetTurn"] = "SetTurn"
    player_id: int = Field(..., alias="playerId")

    def to_operation(self) -> SetTurn:
        return SetTurn(self.player_id)


class SetVisibilitySchema(WireModel):
    """``visibleToPlayerIds`` omitted or null means visible to everyone."""
    type: Literal["SetVisibility"] = "SetVisibility"
    key: str
    visible_to_player_ids: Optional[List[int]] = Field(default=None, alias="visibleToPlayerIds")

    def to_operation(self) -> SetVisibility:
        visible = None if self.visible_to_player_ids is None else tuple(self.visible_to_player_ids)
        return SetVisibility(self.key, visible)


class ShuffleSchema(WireModel):
    type: Literal["Shuffle"] = "Shuffle"
    keys: List[str]

    def to_operation(self) -> Shuffle:
        return Shuffle(tuple(self.keys))


class AttemptChangeTokensSchema(WireModel):
    type: Literal["AttemptChangeTokens"] = "AttemptChangeTokens"
    player_id_to_tokens: Dict[int, int] = Field(..., alias="playerIdToTokens")
    player_id_to_tokens_in_pot: Dict[int, int] = Field(..., alias="playerIdToTokensInPot")

    def to_operation(self) -> AttemptChangeTokens:
        return AttemptChangeTokens(
            dict(self.player_id_to_tokens), dict(self.player_id_to_tokens_in_pot)
        )


class EndGameSchema(WireModel):
    type: Literal["EndGame"] = "EndGame"
    payouts: Dict[int, int] = Field(default_factory=dict)

    def to_operation(self) -> EndGame:
        return EndGame(dict(self.payouts))


OperationSchema = Annotated[
    Union[
        SetSchema,
        SetTurnSchema,
        SetVisibilitySchema,
        ShuffleSchema,
        AttemptChangeTokensSchema,
        EndGameSchema,
    ],
    Field(discriminator="type"),
]


def operation_to_schema(operation: Operation) -> BaseModel:
    """Wire form of a core operation."""
    if isinstance(operation, Set):
        return SetSchema(key=operation.key, value=operation.value)
    if isinstance(operation, SetTurn):
        return SetTurnSchema(player_id=operation.player_id)
    if isinstance(operation, SetVisibility):
        visible = operation.visible_to_player_ids
        return SetVisibilitySchema(
            key=operation.key,
            visible_to_player_ids=None if visible is None else list(visible),
        )
    if isinstance(operation, Shuffle):
        return ShuffleSchema(keys=list(operation.keys))
    if isinstance(operation, AttemptChangeTokens):
        return AttemptChangeTokensSchema(
            player_id_to_tokens=dict(operation.player_id_to_tokens),
            player_id_to_tokens_in_pot=dict(operation.player_id_to_tokens_in_pot),
        )
    if isinstance(operation, EndGame):
        return EndGameSchema(payouts=dict(operation.payouts))
    raise TypeError(f"Unknown operation: {operation!r}")


# ============= Request Schemas =============

class VerifyMoveRequest(WireModel):
    """
    The last move of a table, as claimed by the player who made it.

    Player ids must be positive; 0 means "no hacker" in the response.
    """
    player_ids: List[PositiveInt] = Field(..., alias="playerIds", min_length=1)
    last_state: Dict[str, Any] = Field(default_factory=dict, alias="lastState")
    last_move: List[OperationSchema] = Field(..., alias="lastMove")
    last_move_player_id: int = Field(..., alias="lastMovePlayerId", gt=0)
    token_pot: Dict[int, int] = Field(default_factory=dict, alias="tokenPot")

    def to_verify_move(self) -> VerifyMove:
        return VerifyMove(
            player_ids=list(self.player_ids),
            last_state=dict(self.last_state),
            last_move=[op.to_operation() for op in self.last_move],
            last_move_player_id=self.last_move_player_id,
            token_pot=dict(self.token_pot),
        )


# ============= Response Schemas =============

class VerifyMoveResponse(WireModel):
    """``hackerPlayerId`` is 0 when the move is accepted."""
    hacker_player_id: int = Field(0, alias="hackerPlayerId")
    message: Optional[str] = None

    @classmethod
    def from_done(cls, done: VerifyMoveDone) -> "VerifyMoveResponse":
        return cls(hacker_player_id=done.hacker_player_id, message=done.message)


class ExpectedOperationsResponse(WireModel):
    operations: List[OperationSchema]


class HealthResponse(BaseModel):
    status: str = "ok"
    small_blind: int
    big_blind: int
