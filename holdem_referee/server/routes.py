"""
HTTP API Routes for Holdem Referee.

The platform posts every claimed move to /verify_move and applies it only
when the response names no hacker. /expected_operations returns the
canonical operations for a move, for clients that build their claims from
the same rules.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from holdem_referee.core.errors import HackerDetected
from holdem_referee.core.logic import PokerLogic
from holdem_referee.server.schemas import (
    ExpectedOperationsResponse, HealthResponse, VerifyMoveRequest, VerifyMoveResponse,
    operation_to_schema,
)

router = APIRouter()


def get_logic(request: Request) -> PokerLogic:
    """The verifier configured for this app."""
    return request.app.state.logic


@router.get("/health", response_model=HealthResponse)
async def health(logic: PokerLogic = Depends(get_logic)) -> HealthResponse:
    return HealthResponse(
        small_blind=logic.blinds.small_blind,
        big_blind=logic.blinds.big_blind,
    )


@router.post("/verify_move", response_model=VerifyMoveResponse)
async def verify_move(
    req: VerifyMoveRequest, logic: PokerLogic = Depends(get_logic)
) -> VerifyMoveResponse:
    """
    Verify a claimed move.

    Always answers 200 for a well-formed request; a rejected move is reported
    through ``hackerPlayerId``.
    """
    done = logic.verify(req.to_verify_move())
    return VerifyMoveResponse.from_done(done)


@router.post("/expected_operations", response_model=ExpectedOperationsResponse)
async def expected_operations(
    req: VerifyMoveRequest, logic: PokerLogic = Depends(get_logic)
) -> ExpectedOperationsResponse:
    """
    Canonical operations for the move described by ``lastMove``.

    Only the parts of ``lastMove`` that identify the move are read (buy-in,
    whether the mover leaves the hand, and the mover's new stack).
    """
    try:
        operations = logic.get_expected_operations(req.to_verify_move())
    except HackerDetected as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ExpectedOperationsResponse(
        operations=[operation_to_schema(op) for op in operations]
    )
