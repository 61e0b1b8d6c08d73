"""
Tests for PokerLogic move verification in heads-up play.

Each test drives the table through canonical moves and checks the exact
operations the verifier expects.
"""

import pytest
from holdem_referee.core.operations import EndGame, Set, SetTurn, SetVisibility
from holdem_referee.core.rules import PokerMove
from holdem_referee.core.state import decode_state


def pot(chips, current_pot_bet, players, bets):
    return {
        "chips": chips,
        "currentPotBet": current_pot_bet,
        "playersInPot": players,
        "playerBets": bets,
    }


class TestPreFlop:
    """Tests for the first betting round."""

    def test_small_blind_call(self, heads_up):
        ops = heads_up.call()
        assert ops == [
            SetTurn(43),
            Set("previousMove", "CALL"),
            Set("previousMoveAllIn", False),
            Set("whoseMove", "P1"),
            Set("playerBets", [200, 200]),
            Set("playerChips", [1800, 1800]),
            Set("pots", [pot(400, 200, ["P0", "P1"], [200, 200])]),
        ]

    def test_big_blind_check_deals_flop(self, heads_up):
        heads_up.call()
        ops = heads_up.check()
        assert ops == [
            SetTurn(43),
            Set("previousMove", "CHECK"),
            Set("previousMoveAllIn", False),
            Set("whoseMove", "P1"),
            Set("currentBetter", "P1"),
            Set("currentRound", "FLOP"),
            Set("playerBets", [0, 0]),
            Set("pots", [pot(400, 0, ["P0", "P1"], [0, 0])]),
            SetVisibility("C4"),
            SetVisibility("C5"),
            SetVisibility("C6"),
        ]

    def test_small_blind_raise(self, heads_up):
        ops = heads_up.commit(500)
        assert ops == [
            SetTurn(43),
            Set("previousMove", "RAISE"),
            Set("previousMoveAllIn", False),
            Set("whoseMove", "P1"),
            Set("currentBetter", "P0"),
            Set("playerBets", [600, 200]),
            Set("playerChips", [1400, 1800]),
            Set("pots", [pot(800, 600, ["P0", "P1"], [600, 200])]),
        ]

    def test_call_of_raise_closes_round(self, heads_up):
        heads_up.commit(500)
        ops = heads_up.call()
        assert ops[0] == SetTurn(43)
        assert Set("currentRound", "FLOP") in ops
        assert Set("playerChips", [1400, 1400]) in ops
        assert heads_up.whose_move == 1

    def test_small_blind_fold_wins_for_big_blind(self, heads_up):
        ops = heads_up.fold()
        assert ops == [
            Set("previousMove", "FOLD"),
            Set("previousMoveAllIn", False),
            Set("currentRound", "SHOWDOWN"),
            Set("playersInHand", ["P1"]),
            Set("playerBets", [0, 0]),
            Set("pots", [pot(300, 0, ["P1"], [0, 0])]),
            EndGame({43: 300}),
        ]

    def test_classify_moves(self, heads_up, logic):
        state = decode_state(heads_up.state)
        chips = heads_up.chips_after
        assert logic.classify_move(state, 0, [Set("playerChips", chips(100))]) == (PokerMove.CALL, 100)
        assert logic.classify_move(state, 0, [Set("playerChips", chips(500))]) == (PokerMove.RAISE, 500)
        assert logic.classify_move(state, 0, [Set("playersInHand", ["P1"])]) == (PokerMove.FOLD, 0)


class TestPostFlop:
    """Tests for the later betting rounds."""

    @pytest.fixture
    def on_flop(self, heads_up):
        heads_up.call()
        heads_up.check()
        return heads_up

    def test_big_blind_acts_first(self, on_flop):
        assert on_flop.whose_move == 1
        assert on_flop.current_round == "FLOP"

    def test_check_passes_turn(self, on_flop):
        ops = on_flop.check()
        assert ops == [
            SetTurn(42),
            Set("previousMove", "CHECK"),
            Set("previousMoveAllIn", False),
            Set("whoseMove", "P0"),
        ]

    def test_bet(self, on_flop):
        ops = on_flop.commit(400)
        assert ops == [
            SetTurn(42),
            Set("previousMove", "BET"),
            Set("previousMoveAllIn", False),
            Set("whoseMove", "P0"),
            Set("currentBetter", "P1"),
            Set("playerBets", [0, 400]),
            Set("playerChips", [1800, 1400]),
            Set("pots", [pot(800, 400, ["P0", "P1"], [0, 400])]),
        ]

    def test_bet_raise_call_moves_to_turn(self, on_flop):
        on_flop.commit(400)
        on_flop.commit(1200)
        ops = on_flop.call()
        assert ops == [
            SetTurn(43),
            Set("previousMove", "CALL"),
            Set("previousMoveAllIn", False),
            Set("whoseMove", "P1"),
            Set("currentBetter", "P1"),
            Set("currentRound", "TURN"),
            Set("playerBets", [0, 0]),
            Set("playerChips", [600, 600]),
            Set("pots", [pot(2800, 0, ["P0", "P1"], [0, 0])]),
            SetVisibility("C7"),
        ]

    def test_river_reveals_last_card(self, on_flop):
        on_flop.check()
        on_flop.check()
        on_flop.check()
        ops = on_flop.check()
        assert Set("currentRound", "RIVER") in ops
        assert ops[-1] == SetVisibility("C8")

    def test_checked_down_to_showdown(self, on_flop):
        for _ in range(5):
            on_flop.check()
        ops = on_flop.check()
        assert ops == [
            Set("previousMove", "CHECK"),
            Set("previousMoveAllIn", False),
            Set("currentRound", "SHOWDOWN"),
            Set("playerBets", [0, 0]),
            Set("pots", [pot(400, 0, ["P0", "P1"], [0, 0])]),
            SetVisibility("C0"),
            SetVisibility("C1"),
            SetVisibility("C2"),
            SetVisibility("C3"),
            EndGame({42: 200, 43: 200}),
        ]

    def test_chips_conserved_through_hand(self, on_flop):
        totals = [on_flop.total_chips]
        on_flop.commit(400)
        totals.append(on_flop.total_chips)
        on_flop.commit(1200)
        totals.append(on_flop.total_chips)
        on_flop.call()
        totals.append(on_flop.total_chips)
        for _ in range(4):
            on_flop.check()
            totals.append(on_flop.total_chips)
        assert set(totals) == {4000}
        assert sum(on_flop.end_game.payouts.values()) == 2800


class TestVerify:
    """Tests for the verify entry point."""

    def test_accepts_canonical_move(self, heads_up, logic):
        ops = heads_up.expected([Set("playerChips", heads_up.chips_after(100))])
        done = logic.verify(heads_up.request(42, ops))
        assert done.accepted
        assert done.message is None

    def test_rejects_partial_claim(self, heads_up, logic):
        claim = [Set("playerChips", heads_up.chips_after(100))]
        done = logic.verify(heads_up.request(42, claim))
        assert done.hacker_player_id == 42
        assert "differs" in done.message

    def test_rejects_extra_operation(self, heads_up, logic):
        ops = heads_up.expected([Set("playerChips", heads_up.chips_after(100))])
        done = logic.verify(heads_up.request(42, ops + [EndGame({42: 400})]))
        assert done.hacker_player_id == 42
        assert "Expected 7 operations, got 8" in done.message
