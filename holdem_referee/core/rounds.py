"""
Turn & Round State Machine.

Given the state before a move and the seats/stacks after it, decides who acts
next, whether the betting round closes, and whether the hand is over. The
result is a Transition that the Move Verifier turns into operations.

Round progression:

    PRE_FLOP -> FLOP -> TURN -> RIVER -> SHOWDOWN

A round closes when the turn would come back to the current better (the
last seat to bet or raise, or the first seat to act in the round). Pre-flop
the big blind keeps the option to act when nobody raised. When a round
closes with at most one seat still holding chips, the remaining board is
run out and the hand goes straight to SHOWDOWN.
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass
from enum import Enum, auto
import logging

from holdem_referee.core.card import card_key
from holdem_referee.core.errors import RuleViolation
from holdem_referee.core.operations import SetVisibility
from holdem_referee.core.rules import (
    BettingRound, PokerMove,
    FLOP_CARDS, TURN_CARDS, RIVER_CARDS,
    get_blind_positions, get_first_to_act_postflop,
)
from holdem_referee.core.state import PokerState


logger = logging.getLogger(__name__)


# Board slots turned face up when each round starts
BOARD_SLOTS = {
    BettingRound.PRE_FLOP: (),
    BettingRound.FLOP: tuple(range(FLOP_CARDS)),
    BettingRound.TURN: (FLOP_CARDS,),
    BettingRound.RIVER: (FLOP_CARDS + TURN_CARDS,),
    BettingRound.SHOWDOWN: (),
}

# Board cards already face up while a round is being played
REVEALED_BOARD_CARDS = {
    BettingRound.PRE_FLOP: 0,
    BettingRound.FLOP: FLOP_CARDS,
    BettingRound.TURN: FLOP_CARDS + TURN_CARDS,
    BettingRound.RIVER: FLOP_CARDS + TURN_CARDS + RIVER_CARDS,
    BettingRound.SHOWDOWN: FLOP_CARDS + TURN_CARDS + RIVER_CARDS,
}


class TransitionKind(Enum):
    CONTINUE = auto()       # same round, another seat acts
    NEXT_ROUND = auto()     # round closed, next street dealt
    SHOWDOWN = auto()       # river closed or board run out
    WIN_BY_FOLD = auto()    # one seat left in the hand


@dataclass(frozen=True)
class Transition:
    """
    Outcome of a move for the turn order.

    Attributes:
        kind: What happens next
        next_seat: Seat to act (CONTINUE and NEXT_ROUND)
        current_better: New current better, or None when it does not change
        new_round: Round after the move (all kinds but CONTINUE)
        board_slots: Board positions to reveal, in order
    """
    kind: TransitionKind
    next_seat: Optional[int] = None
    current_better: Optional[int] = None
    new_round: Optional[BettingRound] = None
    board_slots: Tuple[int, ...] = ()

    @property
    def round_closed(self) -> bool:
        return self.kind is not TransitionKind.CONTINUE

    @property
    def hand_over(self) -> bool:
        return self.kind in (TransitionKind.SHOWDOWN, TransitionKind.WIN_BY_FOLD)


def is_big_blind_option(state: PokerState, seat: int, big_blind: int) -> bool:
    """
    True while the big blind may still act on an unraised pre-flop pot.
    """
    if state.current_round is not BettingRound.PRE_FLOP:
        return False
    _, bb_seat = get_blind_positions(state.number_of_players)
    return seat == bb_seat and state.required_bet == big_blind


def find_next_to_act(
    state: PokerState,
    seat: int,
    move: PokerMove,
    chips_after: Sequence[int],
    big_blind: int,
) -> Optional[int]:
    """
    Next seat to act after ``seat`` makes ``move``, or None if the round closes.

    The walk follows the pre-move seats in hand, starting after the actor
    and ending on it. Seats without chips (all-in) are skipped.

    Raises:
        RuleViolation: If a bet or raise leaves nobody able to respond.
    """
    players = state.players_in_hand
    start = players.index(seat)
    count = len(players)
    aggressive = move in (PokerMove.BET, PokerMove.RAISE)

    if not aggressive and is_big_blind_option(state, seat, big_blind):
        # the big blind checked or folded its option
        return None

    for step in range(1, count + 1):
        candidate = players[(start + step) % count]
        if candidate == seat:
            break
        if not aggressive and candidate == state.current_better:
            if chips_after[candidate] > 0 and is_big_blind_option(state, candidate, big_blind):
                return candidate
            return None
        if chips_after[candidate] > 0:
            return candidate

    if aggressive:
        raise RuleViolation(f"{move.value} leaves no opponent able to respond")
    return None


def advance(
    state: PokerState,
    seat: int,
    move: PokerMove,
    players_after: Sequence[int],
    chips_after: Sequence[int],
    big_blind: int,
) -> Transition:
    """
    Work out the turn order after a move.

    Args:
        state: State before the move
        seat: Acting seat
        move: Classified move
        players_after: Seats in hand after the move
        chips_after: Stacks after the move
        big_blind: Big blind of the table

    Returns:
        Transition describing the next turn or the end of the round/hand
    """
    if len(players_after) == 1:
        logger.debug(f"Seat {players_after[0]} wins by fold")
        return Transition(TransitionKind.WIN_BY_FOLD, new_round=BettingRound.SHOWDOWN)

    next_seat = find_next_to_act(state, seat, move, chips_after, big_blind)
    if next_seat is not None:
        if move in (PokerMove.BET, PokerMove.RAISE):
            better = seat
        elif move is PokerMove.FOLD and seat == state.current_better:
            better = next_seat
        else:
            better = None
        return Transition(TransitionKind.CONTINUE, next_seat=next_seat, current_better=better)

    new_round = state.current_round.next_round
    if new_round is not BettingRound.SHOWDOWN and not has_betting_left(players_after, chips_after):
        logger.debug(f"Running out the board from {state.current_round.value}")
        new_round = BettingRound.SHOWDOWN

    if new_round is BettingRound.SHOWDOWN:
        return Transition(
            TransitionKind.SHOWDOWN,
            new_round=new_round,
            board_slots=unrevealed_board_slots(state.current_round),
        )

    first = get_first_to_act_postflop(players_after, chips_after, state.number_of_players)
    return Transition(
        TransitionKind.NEXT_ROUND,
        next_seat=first,
        current_better=first,
        new_round=new_round,
        board_slots=BOARD_SLOTS[new_round],
    )


def has_betting_left(players_in_hand: Sequence[int], player_chips: Sequence[int]) -> bool:
    """More betting needs at least two seats in the hand with chips."""
    return sum(1 for seat in players_in_hand if player_chips[seat] > 0) > 1


def unrevealed_board_slots(current_round: BettingRound) -> Tuple[int, ...]:
    """Board positions still face down while ``current_round`` is played."""
    total = FLOP_CARDS + TURN_CARDS + RIVER_CARDS
    return tuple(range(REVEALED_BOARD_CARDS[current_round], total))


def board_reveal_operations(state: PokerState, slots: Sequence[int]) -> List[SetVisibility]:
    return [SetVisibility(card_key(state.board[slot])) for slot in slots]


def hole_card_reveal_operations(state: PokerState, seats: Sequence[int]) -> List[SetVisibility]:
    """Show the hole cards of ``seats`` to everyone, in seat order."""
    return [
        SetVisibility(card_key(card))
        for seat in seats
        for card in state.hole_cards[seat]
    ]
