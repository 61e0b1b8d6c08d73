"""
State Codec - the public key-value state and its structured snapshot.

The platform stores a table as a flat mapping of keys to JSON-like values.
decode_state() turns that mapping into an immutable PokerState, and the
encode helpers turn pots and seat lists back into the same vocabulary.
Nothing here keeps state between calls.
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from dataclasses import dataclass, field

from holdem_referee.core.card import Card, NUM_CARDS, card_key
from holdem_referee.core.errors import StateDecodeError
from holdem_referee.core.rules import (
    BettingRound, PokerMove,
    BOARD_CARDS, HOLE_CARDS, MIN_PLAYERS, MAX_PLAYERS,
    seat_index, seat_name,
)


# Public state keys
PREVIOUS_MOVE = "previousMove"
PREVIOUS_MOVE_ALL_IN = "previousMoveAllIn"
NUMBER_OF_PLAYERS = "numberOfPlayers"
WHOSE_MOVE = "whoseMove"
CURRENT_BETTER = "currentBetter"
CURRENT_ROUND = "currentRound"
PLAYERS_IN_HAND = "playersInHand"
BOARD = "board"
HOLE_CARDS_KEY = "holeCards"
PLAYER_BETS = "playerBets"
PLAYER_CHIPS = "playerChips"
POTS = "pots"

# Pot keys
CHIPS = "chips"
CURRENT_POT_BET = "currentPotBet"
PLAYERS_IN_POT = "playersInPot"


@dataclass(frozen=True)
class Pot:
    """
    A pot (main pot or side pot).

    Attributes:
        chips: Chips in the pot, including this round's bets
        current_pot_bet: Amount each seat must have put in this pot this round
        players_in_pot: Seats eligible to win the pot
        player_bets: Per-seat chips put in this pot this round
    """
    chips: int
    current_pot_bet: int
    players_in_pot: Tuple[int, ...]
    player_bets: Tuple[int, ...]

    @property
    def round_chips(self) -> int:
        """Chips put in during the current round."""
        return sum(self.player_bets)

    @property
    def settled_chips(self) -> int:
        """Chips carried over from earlier rounds."""
        return self.chips - self.round_chips

    def outstanding(self, seat: int) -> int:
        """What ``seat`` still has to put in this pot to match it."""
        return self.current_pot_bet - self.player_bets[seat]


@dataclass(frozen=True)
class PokerState:
    """Snapshot of a hand, decoded fresh for every verification."""
    previous_move: PokerMove
    previous_move_all_in: bool
    number_of_players: int
    whose_move: int
    current_better: int
    current_round: BettingRound
    players_in_hand: Tuple[int, ...]
    board: Tuple[int, ...]
    hole_cards: Tuple[Tuple[int, ...], ...]
    player_bets: Tuple[int, ...]
    player_chips: Tuple[int, ...]
    pots: Tuple[Pot, ...]
    cards: Tuple[Optional[Card], ...] = field(default=(None,) * NUM_CARDS, repr=False)

    @property
    def required_bet(self) -> int:
        """Total a seat must have bet this round to stay in."""
        return sum(pot.current_pot_bet for pot in self.pots)

    def to_call(self, seat: int) -> int:
        return self.required_bet - self.player_bets[seat]

    @property
    def total_chips(self) -> int:
        """Chips on the table: pots plus stacks (round bets already sit in the pots)."""
        return sum(pot.chips for pot in self.pots) + sum(self.player_chips)

    def card_at(self, index: int) -> Card:
        card = self.cards[index]
        if card is None:
            raise StateDecodeError(f"Card {card_key(index)} is not available")
        return card

    def cards_for(self, indices: Sequence[int]) -> List[Card]:
        return [self.card_at(i) for i in indices]


def decode_state(api_state: Mapping[str, Any]) -> PokerState:
    """
    Build a PokerState from the public key-value state.

    Raises:
        StateDecodeError: If a required key is missing or has the wrong shape.
    """
    if not isinstance(api_state, Mapping):
        raise StateDecodeError("State must be a mapping")

    number_of_players = _get_int(api_state, NUMBER_OF_PLAYERS)
    if not MIN_PLAYERS <= number_of_players <= MAX_PLAYERS:
        raise StateDecodeError(f"{NUMBER_OF_PLAYERS} out of range: {number_of_players}")

    previous_move = _get_enum(api_state, PREVIOUS_MOVE, PokerMove)
    previous_move_all_in = _get(api_state, PREVIOUS_MOVE_ALL_IN, bool)
    whose_move = _get_seat(api_state, WHOSE_MOVE, number_of_players)
    current_better = _get_seat(api_state, CURRENT_BETTER, number_of_players)
    current_round = _get_enum(api_state, CURRENT_ROUND, BettingRound)

    players_in_hand = _decode_seats(
        _get(api_state, PLAYERS_IN_HAND, list), PLAYERS_IN_HAND, number_of_players
    )

    board = _decode_card_indices(_get(api_state, BOARD, list), BOARD, BOARD_CARDS)

    raw_hole_cards = _get(api_state, HOLE_CARDS_KEY, list)
    _check_length(raw_hole_cards, HOLE_CARDS_KEY, number_of_players)
    hole_cards = tuple(
        _decode_card_indices(cards, HOLE_CARDS_KEY, HOLE_CARDS) for cards in raw_hole_cards
    )

    player_bets = _decode_amounts(_get(api_state, PLAYER_BETS, list), PLAYER_BETS, number_of_players)
    player_chips = _decode_amounts(_get(api_state, PLAYER_CHIPS, list), PLAYER_CHIPS, number_of_players)

    raw_pots = _get(api_state, POTS, list)
    if not raw_pots:
        raise StateDecodeError("State has no pots")
    pots = tuple(_decode_pot(raw, number_of_players) for raw in raw_pots)

    return PokerState(
        previous_move=previous_move,
        previous_move_all_in=previous_move_all_in,
        number_of_players=number_of_players,
        whose_move=whose_move,
        current_better=current_better,
        current_round=current_round,
        players_in_hand=players_in_hand,
        board=board,
        hole_cards=hole_cards,
        player_bets=player_bets,
        player_chips=player_chips,
        pots=pots,
        cards=_decode_cards(api_state),
    )


def encode_pot(pot: Pot) -> Dict[str, Any]:
    """Wire form of a pot."""
    return {
        CHIPS: pot.chips,
        CURRENT_POT_BET: pot.current_pot_bet,
        PLAYERS_IN_POT: encode_seats(pot.players_in_pot),
        PLAYER_BETS: list(pot.player_bets),
    }


def encode_pots(pots: Sequence[Pot]) -> List[Dict[str, Any]]:
    return [encode_pot(pot) for pot in pots]


def encode_seats(seats: Sequence[int]) -> List[str]:
    return [seat_name(seat) for seat in seats]


# ============= Decoding helpers =============

def _get(api_state: Mapping[str, Any], key: str, expected_type: type) -> Any:
    if key not in api_state:
        raise StateDecodeError(f"Missing state key: {key}")
    value = api_state[key]
    if not _is_instance(value, expected_type):
        raise StateDecodeError(
            f"State key {key} must be {expected_type.__name__}, got {type(value).__name__}"
        )
    return value


def _is_instance(value: Any, expected_type: type) -> bool:
    # bool is an int subclass; chip counts must not be booleans
    if expected_type is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if expected_type is list:
        return isinstance(value, (list, tuple))
    return isinstance(value, expected_type)


def _get_int(api_state: Mapping[str, Any], key: str) -> int:
    return _get(api_state, key, int)


def _get_enum(api_state: Mapping[str, Any], key: str, enum_type):
    name = _get(api_state, key, str)
    try:
        return enum_type(name)
    except ValueError:
        raise StateDecodeError(f"Invalid {key}: {name!r}") from None


def _get_seat(api_state: Mapping[str, Any], key: str, number_of_players: int) -> int:
    return _decode_seat(_get(api_state, key, str), key, number_of_players)


def _decode_seat(name: Any, key: str, number_of_players: int) -> int:
    try:
        seat = seat_index(name)
    except ValueError:
        raise StateDecodeError(f"Invalid seat in {key}: {name!r}") from None
    if seat >= number_of_players:
        raise StateDecodeError(f"Seat {name} in {key} is not at the table")
    return seat


def _decode_seats(names: Sequence[Any], key: str, number_of_players: int) -> Tuple[int, ...]:
    seats = tuple(_decode_seat(name, key, number_of_players) for name in names)
    if len(set(seats)) != len(seats):
        raise StateDecodeError(f"Duplicate seat in {key}")
    return seats


def _check_length(values: Sequence[Any], key: str, length: int) -> None:
    if len(values) != length:
        raise StateDecodeError(f"{key} must have {length} entries, got {len(values)}")


def _decode_amounts(values: Sequence[Any], key: str, length: int) -> Tuple[int, ...]:
    _check_length(values, key, length)
    for value in values:
        if not _is_instance(value, int) or value < 0:
            raise StateDecodeError(f"{key} must hold non-negative integers, got {value!r}")
    return tuple(values)


def _decode_card_indices(values: Any, key: str, length: int) -> Tuple[int, ...]:
    if not _is_instance(values, list):
        raise StateDecodeError(f"{key} entries must be lists")
    _check_length(values, key, length)
    for value in values:
        if not _is_instance(value, int) or not 0 <= value < NUM_CARDS:
            raise StateDecodeError(f"{key} holds an invalid card index: {value!r}")
    return tuple(values)


def _decode_pot(raw: Any, number_of_players: int) -> Pot:
    if not isinstance(raw, Mapping):
        raise StateDecodeError("Pots must be mappings")
    chips = _get_int(raw, CHIPS)
    current_pot_bet = _get_int(raw, CURRENT_POT_BET)
    if chips < 0 or current_pot_bet < 0:
        raise StateDecodeError("Pot amounts must be non-negative")
    players = _decode_seats(_get(raw, PLAYERS_IN_POT, list), PLAYERS_IN_POT, number_of_players)
    if PLAYER_BETS in raw:
        bets = _decode_amounts(_get(raw, PLAYER_BETS, list), PLAYER_BETS, number_of_players)
    else:
        bets = (0,) * number_of_players
    return Pot(chips, current_pot_bet, players, bets)


def _decode_cards(api_state: Mapping[str, Any]) -> Tuple[Optional[Card], ...]:
    cards: List[Optional[Card]] = []
    for i in range(NUM_CARDS):
        value = api_state.get(card_key(i))
        if value is None:
            cards.append(None)
            continue
        try:
            cards.append(Card.from_string(value))
        except ValueError as e:
            raise StateDecodeError(f"Invalid card in {card_key(i)}: {e}") from None
    return tuple(cards)
