"""
Texas Hold'em Rules and Constants for the verified table.

Table conventions:

1. The dealer is always seat 0.

2. Heads-up (2 players): the dealer posts the small blind and acts first
   pre-flop; seat 1 posts the big blind and acts first after the flop.

3. Three or more players: seat 1 posts the small blind, seat 2 the big
   blind, seat 3 (wrapping) acts first pre-flop and the first seat left of
   the dealer still able to act opens every later round.

4. Minimum bet is the big blind. A raise must increase the bet by at least
   the size of the previous bet or raise (and never by less than the big
   blind). A player going all-in may always bet or raise for less.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


class BettingRound(Enum):
    """Betting rounds of a hand, in order. SHOWDOWN is terminal."""
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"

    @property
    def next_round(self) -> "BettingRound":
        rounds = list(BettingRound)
        index = rounds.index(self)
        if index == len(rounds) - 1:
            raise ValueError("SHOWDOWN has no next round")
        return rounds[index + 1]


class PokerMove(Enum):
    """Moves a seat can make on its turn."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"


@dataclass(frozen=True)
class BlindStructure:
    """Blind structure for a table."""
    small_blind: int
    big_blind: int


# Default table settings
DEFAULT_SMALL_BLIND = 100
DEFAULT_BIG_BLIND = 200
DEFAULT_BLINDS = BlindStructure(DEFAULT_SMALL_BLIND, DEFAULT_BIG_BLIND)
MIN_PLAYERS = 2
MAX_PLAYERS = 9
DEALER_SEAT = 0

# Cards
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1
BOARD_CARDS = 5
HAND_SIZE = 5

SEAT_PREFIX = "P"


def seat_name(seat: int) -> str:
    """State name of a seat: 0 -> 'P0'."""
    if not 0 <= seat < MAX_PLAYERS:
        raise ValueError(f"Seat must be 0-{MAX_PLAYERS - 1}, got {seat}")
    return f"{SEAT_PREFIX}{seat}"


def seat_index(name: str) -> int:
    """Seat index of a state name: 'P3' -> 3."""
    if (
        not isinstance(name, str)
        or len(name) != 2
        or not name.startswith(SEAT_PREFIX)
        or not name[1].isdigit()
    ):
        raise ValueError(f"Invalid seat name: {name!r}")
    seat = int(name[1])
    if seat >= MAX_PLAYERS:
        raise ValueError(f"Invalid seat name: {name!r}")
    return seat


def get_blind_positions(num_players: int) -> Tuple[int, int]:
    """
    Small blind and big blind seats.

    Heads-up the dealer (seat 0) is the small blind.
    """
    if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
        raise ValueError(f"Need {MIN_PLAYERS}-{MAX_PLAYERS} players, got {num_players}")
    if num_players == 2:
        return 0, 1
    return 1, 2


def get_first_to_act_preflop(num_players: int) -> int:
    """Heads-up the dealer acts first; otherwise the seat after the big blind."""
    if num_players == 2:
        return DEALER_SEAT
    return 3 % num_players


def get_first_to_act_postflop(
    players_in_hand: Sequence[int],
    player_chips: Sequence[int],
    num_players: int,
) -> Optional[int]:
    """
    First seat left of the dealer that is still in the hand and has chips.

    Returns None when nobody in the hand can act.
    """
    for offset in range(1, num_players + 1):
        seat = (DEALER_SEAT + offset) % num_players
        if seat in players_in_hand and player_chips[seat] > 0:
            return seat
    return None


def last_raise_increment(
    player_bets: Sequence[int],
    player_chips: Sequence[int],
    big_blind: int,
) -> int:
    """
    Size of the most recent full bet or raise in the current round.

    Derived from the per-seat bets. A level reached only by seats that are
    now all-in below the top bet was a short call, not a raise, and is left
    out. Raises never shrink within a round, so the largest gap between the
    remaining levels is the last full raise; a short all-in raise on top
    leaves it unchanged. Never less than the big blind.
    """
    top = max(player_bets, default=0)
    if top == 0:
        return big_blind
    levels = {0, top}
    levels.update(bet for bet, chips in zip(player_bets, player_chips) if chips > 0)
    ordered = sorted(levels)
    return max([big_blind] + [high - low for low, high in zip(ordered, ordered[1:])])


def calculate_min_raise(current_bet: int, last_raise_amount: int, big_blind: int) -> int:
    """
    Minimum total bet for a raise.

    The raise increment must be at least the previous raise, and at least
    the big blind.
    """
    return current_bet + max(last_raise_amount, big_blind)


def is_valid_raise(
    raise_total: int,
    current_bet: int,
    last_raise_amount: int,
    big_blind: int,
    is_all_in: bool,
) -> bool:
    """A raise is valid if it reaches the minimum raise or puts the player all-in."""
    if is_all_in:
        return raise_total > current_bet
    return raise_total >= calculate_min_raise(current_bet, last_raise_amount, big_blind)


def is_valid_bet(amount: int, big_blind: int, is_all_in: bool) -> bool:
    """An opening bet is at least the big blind unless the player is all-in."""
    if amount <= 0:
        return False
    return is_all_in or amount >= big_blind


