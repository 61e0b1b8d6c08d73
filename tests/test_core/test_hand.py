"""
Tests for hand evaluation.
"""

import pytest
from holdem_referee.core.card import parse_cards
from holdem_referee.core.hand import BestHandFinder, HandRank, PokerHand


def hand(cards: str) -> PokerHand:
    return PokerHand(parse_cards(cards))


class TestHandRanking:
    """Tests for ranking tuples."""

    def test_royal_flush(self, royal_flush):
        assert PokerHand(royal_flush).calculate_ranking() == (8, 14)

    def test_straight_flush(self):
        assert hand("9h 8h 7h 6h 5h").calculate_ranking() == (8, 9)

    def test_four_of_a_kind(self):
        assert hand("As Ah Ad Ac Ks").calculate_ranking() == (7, 14, 13)

    def test_full_house(self):
        assert hand("As Ah Ad Kc Ks").calculate_ranking() == (6, 14, 13)

    def test_flush(self):
        assert hand("As Ks Js 9s 2s").calculate_ranking() == (5, 14, 13, 11, 9, 2)

    def test_straight(self):
        assert hand("Ts 9h 8d 7c 6s").calculate_ranking() == (4, 10)

    def test_wheel_straight(self, wheel_straight):
        """A-2-3-4-5 is a five-high straight."""
        assert PokerHand(wheel_straight).calculate_ranking() == (4, 5)

    def test_wheel_straight_flush(self):
        assert hand("Ah 2h 3h 4h 5h").calculate_ranking() == (8, 5)

    def test_three_of_a_kind(self):
        assert hand("7s 7h 7d Ac 2s").calculate_ranking() == (3, 7, 14, 7, 7, 7, 2)

    def test_two_pair(self):
        assert hand("Ks Kh 4d 4c 9s").calculate_ranking() == (2, 13, 4, 13, 13, 9, 4, 4)

    def test_one_pair(self):
        assert hand("Qs Qh 9d 5c 2s").calculate_ranking() == (1, 12, 12, 12, 9, 5, 2)

    def test_high_card(self):
        assert hand("As Jh 9d 5c 2s").calculate_ranking() == (0, 14, 11, 9, 5, 2)

    def test_hand_rank(self):
        assert hand("As Ks Js 9s 2s").hand_rank == HandRank.FLUSH
        assert hand("As Jh 9d 5c 2s").hand_rank == HandRank.HIGH_CARD

    def test_requires_five_cards(self):
        with pytest.raises(ValueError):
            PokerHand(parse_cards("As Ks"))

    def test_describe(self):
        assert hand("2c 3c 4c 5c 7c").describe() == "Flush [2c, 3c, 4c, 5c, 7c]"


class TestHandComparison:
    """Tests for comparing hands."""

    def test_flush_beats_pair(self):
        flush = hand("2c 3c 4c 5c 7c")
        pair = hand("As Ah Kd Qc Js")
        assert flush.better_than(pair)
        assert not pair.better_than(flush)

    def test_tie_is_not_worse(self):
        a = hand("As Kh 9d 5c 2s")
        b = hand("Ah Kd 9c 5s 2h")
        assert a.better_than(b)
        assert b.better_than(a)
        assert a == b

    def test_kicker_decides(self):
        assert hand("As Ah Kd 5c 2s") > hand("Ad Ac Qd 5s 2h")

    def test_wheel_loses_to_six_high_straight(self, wheel_straight):
        assert hand("6s 5h 4d 3c 2s") > PokerHand(wheel_straight)

    def test_sorting(self):
        hands = [hand("As Ks Js 9s 2s"), hand("As Jh 9d 5c 2s"), hand("Ks Kh 4d 4c 9s")]
        ordered = sorted(hands)
        assert [h.hand_rank for h in ordered] == [
            HandRank.HIGH_CARD, HandRank.TWO_PAIR, HandRank.FLUSH,
        ]


class TestBestHandFinder:
    """Tests for picking the best five of seven cards."""

    def test_finds_flush(self):
        board = parse_cards("2h 7h 9h Jc 3d")
        best = BestHandFinder(board, parse_cards("Ah Kh")).find()
        assert best.calculate_ranking() == (5, 14, 13, 9, 7, 2)

    def test_board_plays(self):
        board = parse_cards("Ts Js Qs Ks As")
        best = BestHandFinder(board, parse_cards("2c 3d")).find()
        assert best.calculate_ranking() == (8, 14)

    def test_finds_wheel(self):
        board = parse_cards("Ah 2d 3c 9s Kh")
        best = BestHandFinder(board, parse_cards("4s 5c")).find()
        assert best.calculate_ranking() == (4, 5)

    def test_validates_board(self):
        with pytest.raises(ValueError):
            BestHandFinder(parse_cards("2h 7h 9h Jc"), parse_cards("Ah Kh"))

    def test_validates_hole_cards(self):
        with pytest.raises(ValueError):
            BestHandFinder(parse_cards("2h 7h 9h Jc 3d"), parse_cards("Ah"))
