"""
Pytest configuration and shared fixtures for Holdem Referee tests.
"""

import copy
from typing import Dict, List, Optional, Sequence

import pytest
from holdem_referee.core.card import Card, Rank, Suit, NUM_CARDS, card_id_to_string, card_key
from holdem_referee.core.logic import PokerLogic
from holdem_referee.core.operations import EndGame, Set, SetTurn, VerifyMove
from holdem_referee.core.rules import seat_index, seat_name
from holdem_referee.core.state import (
    BOARD, CURRENT_ROUND, HOLE_CARDS_KEY, PLAYERS_IN_HAND, PLAYER_BETS, PLAYER_CHIPS,
    POTS, WHOSE_MOVE, CURRENT_POT_BET, CHIPS,
)


class Table:
    """
    Drives a hand through PokerLogic the way the platform would.

    Every move is built from the canonical operations, verified, and then
    applied to the public state. The deck is not really shuffled: card slots
    keep their deal order unless a test rigs them with ``rig``.
    """

    def __init__(self, logic: PokerLogic, player_ids: Sequence[int], buy_ins: Sequence[int]):
        self.logic = logic
        self.player_ids = list(player_ids)
        self.token_pot = dict(zip(player_ids, buy_ins))
        self.state: Dict = {}
        self.end_game: Optional[EndGame] = None
        self.history: List[List] = []

    # ----- requests -----

    def request(self, player_id: int, operations: List) -> VerifyMove:
        return VerifyMove(
            player_ids=list(self.player_ids),
            last_state=copy.deepcopy(self.state),
            last_move=list(operations),
            last_move_player_id=player_id,
            token_pot=dict(self.token_pot),
        )

    def apply(self, operations: List) -> None:
        for op in operations:
            if isinstance(op, Set):
                self.state[op.key] = copy.deepcopy(op.value)
            elif isinstance(op, EndGame):
                self.end_game = op
        self.history.append(operations)

    def submit(self, player_id: int, operations: List) -> List:
        done = self.logic.verify(self.request(player_id, operations))
        assert done.accepted, done.message
        self.apply(operations)
        return operations

    # ----- setup -----

    def deal(self) -> List:
        operations = self.logic.get_initial_move(
            self.player_ids, [self.token_pot[pid] for pid in self.player_ids]
        )
        return self.submit(self.player_ids[0], operations)

    def rig(self, hole_cards: Dict[int, str], board: str = "") -> None:
        """Place chosen cards in the slots of the given seats and the board."""
        wanted: Dict[int, str] = {}
        for seat, cards in hole_cards.items():
            for slot, text in zip(self.state[HOLE_CARDS_KEY][seat], _split(cards)):
                wanted[slot] = text
        for slot, text in zip(self.state[BOARD], _split(board)):
            wanted[slot] = text

        used = set(wanted.values())
        spare = [card_id_to_string(i) for i in range(NUM_CARDS)
                 if card_id_to_string(i) not in used]
        for i in range(NUM_CARDS):
            self.state[card_key(i)] = wanted[i] if i in wanted else spare.pop(0)

    # ----- moves -----

    def expected(self, claim: List) -> List:
        return self.logic.get_expected_operations(self.request(self.mover_id, claim))

    def play(self, claim: List) -> List:
        return self.submit(self.mover_id, self.expected(claim))

    def fold(self) -> List:
        remaining = [p for p in self.state[PLAYERS_IN_HAND] if p != seat_name(self.whose_move)]
        return self.play([Set(PLAYERS_IN_HAND, remaining)])

    def check(self) -> List:
        return self.play([SetTurn(self.mover_id)])

    def commit(self, amount: int) -> List:
        """Call, bet or raise by moving ``amount`` chips from the mover's stack."""
        return self.play([Set(PLAYER_CHIPS, self.chips_after(amount))])

    def call(self) -> List:
        seat = self.whose_move
        return self.commit(min(self.to_call, self.chips[seat]))

    def chips_after(self, amount: int) -> List[int]:
        chips = list(self.chips)
        chips[self.whose_move] -= amount
        return chips

    # ----- views -----

    @property
    def whose_move(self) -> int:
        return seat_index(self.state[WHOSE_MOVE])

    @property
    def mover_id(self) -> int:
        return self.player_ids[self.whose_move]

    @property
    def chips(self) -> List[int]:
        return self.state[PLAYER_CHIPS]

    @property
    def bets(self) -> List[int]:
        return self.state[PLAYER_BETS]

    @property
    def pots(self) -> List[Dict]:
        return self.state[POTS]

    @property
    def current_round(self) -> str:
        return self.state[CURRENT_ROUND]

    @property
    def required(self) -> int:
        return sum(pot[CURRENT_POT_BET] for pot in self.pots)

    @property
    def to_call(self) -> int:
        return self.required - self.bets[self.whose_move]

    @property
    def total_chips(self) -> int:
        return sum(pot[CHIPS] for pot in self.pots) + sum(self.chips)


def _split(cards: str) -> List[str]:
    cards = cards.replace(" ", "")
    return [cards[i:i + 2] for i in range(0, len(cards), 2)]


@pytest.fixture
def logic():
    """Verifier with the default 100/200 blinds."""
    return PokerLogic()


@pytest.fixture
def heads_up(logic):
    """Two players, 2000 chips each, blinds posted."""
    table = Table(logic, [42, 43], [2000, 2000])
    table.deal()
    return table


@pytest.fixture
def four_handed(logic):
    """Four players, 2000 chips each, blinds posted."""
    table = Table(logic, [11, 12, 13, 14], [2000, 2000, 2000, 2000])
    table.deal()
    return table


@pytest.fixture
def make_table(logic):
    """Factory for a dealt table with custom buy-ins (and optionally its own verifier)."""
    def _make(
        buy_ins: Sequence[int],
        player_ids: Optional[Sequence[int]] = None,
        verifier: Optional[PokerLogic] = None,
    ) -> Table:
        ids = list(player_ids) if player_ids else [101 + i for i in range(len(buy_ins))]
        table = Table(verifier or logic, ids, buy_ins)
        table.deal()
        return table
    return _make


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]
