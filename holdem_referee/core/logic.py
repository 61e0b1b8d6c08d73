"""
Move Verifier - the authoritative referee for a Texas Hold'em table.

A client proposes a move as a list of operations. PokerLogic rebuilds the
operations that move had to produce from the previous public state and
accepts the claim only if both lists are strictly equal, element by element:

    claimed = [SetTurn(42), Set("previousMove", "CALL"), ...]
    expected = logic.get_expected_operations(verify_move)
    claimed == expected  ->  VerifyMoveDone(hacker_player_id=0)
    otherwise            ->  VerifyMoveDone(hacker_player_id=<mover>)

The kind of move (fold, check, call, bet, raise) is read from the claim
itself: whether it removes the mover from the hand and how many chips it
takes from the mover's stack. Everything else must follow from the rules.

A hand starts from an empty state with one buy-in move per player, followed
by the initial deal made by the player in seat 0.
"""

from __future__ import annotations
from typing import Any, Dict, List, Sequence, Tuple
import logging

from holdem_referee.core.card import NUM_CARDS, card_id_to_string, card_key, card_keys
from holdem_referee.core.errors import (
    HackerDetected, OperationMismatch, RuleViolation, StateDecodeError,
)
from holdem_referee.core.hand import BestHandFinder, PokerHand
from holdem_referee.core.operations import (
    AttemptChangeTokens, EndGame, Operation, Set, SetTurn, SetVisibility, Shuffle,
    VerifyMove, VerifyMoveDone, find_set_value, strictly_equal,
)
from holdem_referee.core.pots import (
    apply_call, apply_raise, award_pots, check_ledger, open_side_pot,
    remove_player, reset_for_new_round, split_pots_for_partial_call,
)
from holdem_referee.core.rounds import (
    Transition, TransitionKind, advance,
    board_reveal_operations, hole_card_reveal_operations,
)
from holdem_referee.core.rules import (
    BettingRound, BlindStructure, PokerMove,
    DEFAULT_BLINDS, HOLE_CARDS, BOARD_CARDS, MIN_PLAYERS, MAX_PLAYERS,
    get_blind_positions, get_first_to_act_preflop,
    is_valid_bet, is_valid_raise, last_raise_increment, seat_name,
)
from holdem_referee.core.state import (
    PREVIOUS_MOVE, PREVIOUS_MOVE_ALL_IN, NUMBER_OF_PLAYERS, WHOSE_MOVE,
    CURRENT_BETTER, CURRENT_ROUND, PLAYERS_IN_HAND, BOARD, HOLE_CARDS_KEY,
    PLAYER_BETS, PLAYER_CHIPS, POTS,
    PokerState, Pot, decode_state, encode_pots, encode_seats,
)


logger = logging.getLogger(__name__)


class PokerLogic:
    """
    Stateless move verifier.

    One instance can serve any number of tables concurrently: every call
    decodes the state it is given and keeps nothing afterwards.

    Args:
        blinds: Blind structure of the table
    """

    def __init__(self, blinds: BlindStructure = DEFAULT_BLINDS):
        if not 0 < blinds.small_blind <= blinds.big_blind:
            raise ValueError(f"Invalid blinds: {blinds}")
        self.blinds = blinds

    @property
    def big_blind(self) -> int:
        return self.blinds.big_blind

    # ============= Entry point =============

    def verify(self, verify_move: VerifyMove) -> VerifyMoveDone:
        """
        Verify the last move of a table.

        Never raises: any failure, including unexpected ones, rejects the move
        and names the player who made it.
        """
        player_id = verify_move.last_move_player_id
        try:
            self.check_move_is_legal(verify_move)
        except HackerDetected as e:
            logger.warning(f"Rejected move by player {player_id}: {e}")
            return VerifyMoveDone(hacker_player_id=player_id, message=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error verifying move by player {player_id}")
            return VerifyMoveDone(
                hacker_player_id=player_id,
                message=f"Unexpected error: {type(e).__name__}: {e}",
            )

        logger.debug(f"Accepted move by player {player_id}")
        return VerifyMoveDone()

    def check_move_is_legal(self, verify_move: VerifyMove) -> None:
        """
        Raises:
            HackerDetected: If the claimed move is not exactly the expected one.
        """
        expected = self.get_expected_operations(verify_move)
        compare_operations(expected, verify_move.last_move)

        if not verify_move.last_state and not _is_buy_in(verify_move.last_move):
            # the initial deal may only be made by the first seat
            if verify_move.last_move_player_id != verify_move.player_ids[0]:
                raise RuleViolation("The initial move must be made by the player in seat 0")

    def get_expected_operations(self, verify_move: VerifyMove) -> List[Operation]:
        """Operations the last move was required to produce."""
        if not verify_move.last_move:
            raise OperationMismatch("Move has no operations")

        if not verify_move.last_state:
            if _is_buy_in(verify_move.last_move):
                player_id = verify_move.last_move_player_id
                amount = verify_move.token_pot.get(player_id, 0)
                return self.get_initial_buy_in_move(player_id, amount)
            starting_chips = self._starting_chips(verify_move)
            return self.get_initial_move(verify_move.player_ids, starting_chips)

        state = decode_state(verify_move.last_state)
        return self.get_move_operations(state, verify_move)

    # ============= Buy-in and initial deal =============

    def get_initial_buy_in_move(self, player_id: int, amount: int) -> List[Operation]:
        """Move the player's buy-in from their bankroll to the table."""
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise RuleViolation(f"Player {player_id} has no positive buy-in")
        return [AttemptChangeTokens({player_id: -amount}, {player_id: amount})]

    def get_initial_move(
        self, player_ids: Sequence[int], starting_chips: Sequence[int]
    ) -> List[Operation]:
        """
        Operations of the initial deal: blinds posted, deck shuffled, hole
        cards dealt face down to their owners.

        Args:
            player_ids: Player ids in seat order
            starting_chips: Buy-in of each seat

        Returns:
            Canonical operation list for the deal
        """
        n = len(player_ids)
        if not MIN_PLAYERS <= n <= MAX_PLAYERS:
            raise RuleViolation(f"Need {MIN_PLAYERS}-{MAX_PLAYERS} players, got {n}")
        if len(starting_chips) != n:
            raise RuleViolation("Every player needs a buy-in")
        for player_id, chips in zip(player_ids, starting_chips):
            if chips < self.big_blind:
                raise RuleViolation(
                    f"Player {player_id} bought in for {chips}, less than the big blind"
                )

        sb_seat, bb_seat = get_blind_positions(n)
        first = get_first_to_act_preflop(n)

        player_bets = [0] * n
        player_bets[sb_seat] = self.blinds.small_blind
        player_bets[bb_seat] = self.big_blind
        player_chips = [chips - bet for chips, bet in zip(starting_chips, player_bets)]
        bb_all_in = player_chips[bb_seat] == 0

        main_pot = Pot(
            chips=sum(player_bets),
            current_pot_bet=self.big_blind,
            players_in_pot=tuple(range(n)),
            player_bets=tuple(player_bets),
        )
        pots = [main_pot]
        if bb_all_in:
            pots.append(open_side_pot(main_pot, bb_seat))

        hole_cards = [[HOLE_CARDS * i + j for j in range(HOLE_CARDS)] for i in range(n)]
        board = list(range(HOLE_CARDS * n, HOLE_CARDS * n + BOARD_CARDS))

        operations: List[Operation] = [
            SetTurn(player_ids[first]),
            Set(PREVIOUS_MOVE, PokerMove.RAISE.value),
            Set(PREVIOUS_MOVE_ALL_IN, bb_all_in),
            Set(NUMBER_OF_PLAYERS, n),
            Set(WHOSE_MOVE, seat_name(first)),
            Set(CURRENT_BETTER, seat_name(bb_seat)),
            Set(CURRENT_ROUND, BettingRound.PRE_FLOP.value),
        ]
        operations.extend(Set(card_key(i), card_id_to_string(i)) for i in range(NUM_CARDS))
        operations.extend([
            Set(PLAYERS_IN_HAND, encode_seats(range(n))),
            Set(HOLE_CARDS_KEY, hole_cards),
            Set(BOARD, board),
            Set(PLAYER_BETS, player_bets),
            Set(PLAYER_CHIPS, player_chips),
            Set(POTS, encode_pots(pots)),
            Shuffle(tuple(card_keys(0, NUM_CARDS - 1))),
        ])

        dealt = set()
        for seat, cards in enumerate(hole_cards):
            for card in cards:
                operations.append(SetVisibility(card_key(card), (player_ids[seat],)))
                dealt.add(card)
        operations.extend(
            SetVisibility(card_key(i), ()) for i in range(NUM_CARDS) if i not in dealt
        )
        return operations

    def _starting_chips(self, verify_move: VerifyMove) -> List[int]:
        chips = []
        for player_id in verify_move.player_ids:
            amount = verify_move.token_pot.get(player_id)
            if not isinstance(amount, int) or isinstance(amount, bool):
                raise RuleViolation(f"Player {player_id} has not bought in")
            chips.append(amount)
        return chips

    # ============= Betting moves =============

    def get_move_operations(self, state: PokerState, verify_move: VerifyMove) -> List[Operation]:
        """Expected operations for a betting move made from ``state``."""
        player_ids = list(verify_move.player_ids)
        if len(player_ids) != state.number_of_players:
            raise StateDecodeError(
                f"{len(player_ids)} player ids for {state.number_of_players} seats"
            )
        if state.current_round is BettingRound.SHOWDOWN:
            raise RuleViolation("The hand is over")

        seat = state.whose_move
        if verify_move.last_move_player_id != player_ids[seat]:
            raise RuleViolation(
                f"Player {verify_move.last_move_player_id} moved out of turn "
                f"(it is {seat_name(seat)}'s move)"
            )
        if seat not in state.players_in_hand or state.player_chips[seat] == 0:
            raise RuleViolation(f"{seat_name(seat)} cannot act")
        check_ledger(state.pots, state.player_bets)

        move, amount = self.classify_move(state, seat, verify_move.last_move)
        logger.debug(f"{seat_name(seat)} {move.value} {amount} in {state.current_round.value}")
        return self.build_move_operations(state, player_ids, seat, move, amount)

    def classify_move(
        self, state: PokerState, seat: int, claimed: Sequence[Operation]
    ) -> Tuple[PokerMove, int]:
        """
        Read the kind of move and the chips it commits from the claim.

        Returns:
            (move, chips taken from the stack)
        """
        claimed_players = find_set_value(PLAYERS_IN_HAND, claimed)
        if claimed_players is not None:
            if not isinstance(claimed_players, (list, tuple)):
                raise OperationMismatch(f"{PLAYERS_IN_HAND} must be a list")
            if seat_name(seat) not in claimed_players:
                return PokerMove.FOLD, 0

        stack = state.player_chips[seat]
        claimed_chips = find_set_value(PLAYER_CHIPS, claimed)
        if claimed_chips is None:
            chips_after = stack
        else:
            if (
                not isinstance(claimed_chips, (list, tuple))
                or len(claimed_chips) != state.number_of_players
                or not isinstance(claimed_chips[seat], int)
                or isinstance(claimed_chips[seat], bool)
            ):
                raise OperationMismatch(f"Malformed {PLAYER_CHIPS}")
            chips_after = claimed_chips[seat]

        amount = stack - chips_after
        if amount < 0:
            raise RuleViolation("A move cannot add chips to the stack")
        if amount > stack:
            raise RuleViolation(f"{seat_name(seat)} cannot commit {amount} with {stack} chips")

        to_call = state.to_call(seat)
        required = state.required_bet
        if amount == 0:
            if to_call > 0:
                raise RuleViolation(f"Cannot check facing a bet of {to_call}")
            return PokerMove.CHECK, 0
        if required == 0:
            return PokerMove.BET, amount
        if amount == to_call or (amount == stack and amount < to_call):
            return PokerMove.CALL, amount
        if amount > to_call:
            return PokerMove.RAISE, amount
        raise RuleViolation(f"{amount} is neither a call of {to_call} nor all-in")

    def build_move_operations(
        self,
        state: PokerState,
        player_ids: Sequence[int],
        seat: int,
        move: PokerMove,
        amount: int,
    ) -> List[Operation]:
        """Canonical operations for ``move`` by ``seat`` committing ``amount``."""
        all_in = move in (PokerMove.CALL, PokerMove.BET, PokerMove.RAISE) and (
            amount == state.player_chips[seat]
        )
        self._check_bet_size(state, seat, move, amount, all_in)

        players_after = list(state.players_in_hand)
        bets_after = list(state.player_bets)
        chips_after = list(state.player_chips)
        pots = state.pots

        if move is PokerMove.FOLD:
            players_after.remove(seat)
            pots = remove_player(pots, seat)
        elif move is PokerMove.CALL:
            if all_in:
                pots = split_pots_for_partial_call(pots, seat, amount)
            else:
                pots = apply_call(pots, seat)
        elif move in (PokerMove.BET, PokerMove.RAISE):
            pots = apply_raise(pots, seat, amount - state.to_call(seat), all_in)
        bets_after[seat] += amount
        chips_after[seat] -= amount
        check_ledger(pots, bets_after)

        transition = advance(state, seat, move, players_after, chips_after, self.big_blind)
        move_marker = [
            Set(PREVIOUS_MOVE, move.value),
            Set(PREVIOUS_MOVE_ALL_IN, all_in),
        ]

        if not transition.round_closed:
            operations: List[Operation] = [SetTurn(player_ids[transition.next_seat])]
            operations.extend(move_marker)
            operations.append(Set(WHOSE_MOVE, seat_name(transition.next_seat)))
            if transition.current_better is not None:
                operations.append(Set(CURRENT_BETTER, seat_name(transition.current_better)))
            if move is PokerMove.FOLD:
                operations.append(Set(PLAYERS_IN_HAND, encode_seats(players_after)))
                operations.append(Set(POTS, encode_pots(pots)))
            elif move is not PokerMove.CHECK:
                operations.append(Set(PLAYER_BETS, bets_after))
                operations.append(Set(PLAYER_CHIPS, chips_after))
                operations.append(Set(POTS, encode_pots(pots)))
            return operations

        return self._close_round_operations(
            state, player_ids, move, transition, move_marker,
            players_after, chips_after, reset_for_new_round(pots),
        )

    def _close_round_operations(
        self,
        state: PokerState,
        player_ids: Sequence[int],
        move: PokerMove,
        transition: Transition,
        move_marker: List[Operation],
        players_after: List[int],
        chips_after: List[int],
        pots: Sequence[Pot],
    ) -> List[Operation]:
        operations: List[Operation] = []
        new_round = transition.new_round
        if transition.kind is TransitionKind.NEXT_ROUND:
            operations.append(SetTurn(player_ids[transition.next_seat]))
        operations.extend(move_marker)
        if transition.kind is TransitionKind.NEXT_ROUND:
            operations.append(Set(WHOSE_MOVE, seat_name(transition.next_seat)))
            operations.append(Set(CURRENT_BETTER, seat_name(transition.current_better)))
        operations.append(Set(CURRENT_ROUND, new_round.value))
        if move is PokerMove.FOLD:
            operations.append(Set(PLAYERS_IN_HAND, encode_seats(players_after)))
        operations.append(Set(PLAYER_BETS, [0] * state.number_of_players))
        if move is PokerMove.CALL:
            operations.append(Set(PLAYER_CHIPS, chips_after))
        operations.append(Set(POTS, encode_pots(pots)))
        operations.extend(board_reveal_operations(state, transition.board_slots))

        if not transition.hand_over:
            logger.debug(f"Round closed, {new_round.value} begins")
            return operations

        hands: Dict[int, PokerHand] = {}
        if transition.kind is TransitionKind.SHOWDOWN:
            operations.extend(hole_card_reveal_operations(state, players_after))
            hands = self.best_hands(state, players_after)
        payouts = award_pots(pots, sorted(players_after), hands)
        logger.debug(f"Hand over, payouts by seat: {payouts}")
        operations.append(EndGame({
            player_ids[s]: chips for s, chips in sorted(payouts.items())
        }))
        return operations

    def _check_bet_size(
        self, state: PokerState, seat: int, move: PokerMove, amount: int, all_in: bool
    ) -> None:
        if move is PokerMove.BET:
            if state.current_round is BettingRound.PRE_FLOP:
                raise RuleViolation("Cannot bet pre-flop; the blinds are already in")
            if not is_valid_bet(amount, self.big_blind, all_in):
                raise RuleViolation(f"Bet of {amount} is below the big blind of {self.big_blind}")
        elif move is PokerMove.RAISE:
            raise_total = state.player_bets[seat] + amount
            increment = last_raise_increment(
                state.player_bets, state.player_chips, self.big_blind
            )
            if not is_valid_raise(raise_total, state.required_bet, increment, self.big_blind, all_in):
                raise RuleViolation(
                    f"Raise to {raise_total} is below the minimum of "
                    f"{state.required_bet + increment}"
                )

    def best_hands(self, state: PokerState, seats: Sequence[int]) -> Dict[int, PokerHand]:
        """Best five-card hand of every seat in ``seats``."""
        board = state.cards_for(state.board)
        hands = {}
        for seat in seats:
            hands[seat] = BestHandFinder(board, state.cards_for(state.hole_cards[seat])).find()
            logger.debug(f"{seat_name(seat)} shows {hands[seat].describe()}")
        return hands


def compare_operations(expected: Sequence[Operation], claimed: Sequence[Any]) -> None:
    """
    Raises:
        OperationMismatch: At the first position where the lists differ.
    """
    for index, (want, got) in enumerate(zip(expected, claimed)):
        if not strictly_equal(want, got):
            raise OperationMismatch(
                f"Operation {index} differs: expected {want!r}, got {got!r}"
            )
    if len(expected) != len(claimed):
        raise OperationMismatch(
            f"Expected {len(expected)} operations, got {len(claimed)}"
        )


def _is_buy_in(operations: Sequence[Any]) -> bool:
    return len(operations) > 0 and isinstance(operations[0], AttemptChangeTokens)
