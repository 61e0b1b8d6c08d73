"""
Hand Evaluation for Texas Hold'em showdowns.

A five-card hand is scored into a ranking tuple that compares
lexicographically; a higher tuple is a better hand:

    Straight flush   (8, high)
    Four of a kind   (7, quad, kicker)
    Full house       (6, trips, pair)
    Flush            (5, r1, r2, r3, r4, r5)
    Straight         (4, high)
    Three of a kind  (3, trips, r1 .. r5)
    Two pair         (2, high_pair, low_pair, r1 .. r5)
    One pair         (1, pair, r1 .. r5)
    High card        (0, r1 .. r5)

Rank values run from Two=2 to Ace=14 and r1 .. r5 are the five rank values
in descending order. A-2-3-4-5 (the wheel) is a five-high straight: its
ace counts as 1.

BestHandFinder picks the best five of the seven cards available to a seat
(five board cards plus two hole cards) by trying all 21 combinations.
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
from itertools import combinations
from enum import IntEnum
from collections import Counter

from holdem_referee.core.card import Card
from holdem_referee.core.rules import BOARD_CARDS, HAND_SIZE, HOLE_CARDS


class HandRank(IntEnum):
    """Hand categories; the value is the first element of the ranking tuple."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8


HAND_RANK_NAMES = {
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FLUSH: "Flush",
    HandRank.STRAIGHT: "Straight",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.ONE_PAIR: "One Pair",
    HandRank.HIGH_CARD: "High Card",
}

WHEEL = [14, 5, 4, 3, 2]

Ranking = Tuple[int, ...]


class PokerHand:
    """
    Exactly five cards and their ranking.

    Hands compare by ranking tuple, so ``max(hands)`` and ``sorted(hands)``
    work directly.
    """

    __slots__ = ("cards", "rank_values", "_ranking")

    def __init__(self, cards: Sequence[Card]):
        if cards is None or len(cards) != HAND_SIZE:
            raise ValueError(
                f"Expected: {HAND_SIZE} cards. Passed: {None if cards is None else len(cards)}"
            )
        self.cards: Tuple[Card, ...] = tuple(cards)

        values = sorted((c.rank.value_for_ranking for c in self.cards), reverse=True)
        if values == WHEEL:
            values = [5, 4, 3, 2, 1]
        self.rank_values: List[int] = values
        self._ranking: Optional[Ranking] = None

    def calculate_ranking(self) -> Ranking:
        """Return the ranking tuple described in the module docstring."""
        if self._ranking is None:
            self._ranking = self._compute_ranking()
        return self._ranking

    def _compute_ranking(self) -> Ranking:
        values = self.rank_values
        counts = Counter(values)
        straight = self._is_straight()
        flush = self._is_flush()

        if straight and flush:
            return (HandRank.STRAIGHT_FLUSH, values[0])

        quads = _ranks_with_count(counts, 4)
        if quads:
            return (HandRank.FOUR_OF_A_KIND, quads[0], _ranks_with_count(counts, 1)[0])

        trips = _ranks_with_count(counts, 3)
        pairs = _ranks_with_count(counts, 2)
        if trips and pairs:
            return (HandRank.FULL_HOUSE, trips[0], pairs[0])

        if flush:
            return (HandRank.FLUSH, *values)

        if straight:
            return (HandRank.STRAIGHT, values[0])

        if trips:
            return (HandRank.THREE_OF_A_KIND, trips[0], *values)

        if len(pairs) == 2:
            return (HandRank.TWO_PAIR, pairs[0], pairs[1], *values)

        if pairs:
            return (HandRank.ONE_PAIR, pairs[0], *values)

        return (HandRank.HIGH_CARD, *values)

    def _is_flush(self) -> bool:
        return len({c.suit for c in self.cards}) == 1

    def _is_straight(self) -> bool:
        values = self.rank_values
        return len(set(values)) == HAND_SIZE and values[0] - values[4] == 4

    @property
    def hand_rank(self) -> HandRank:
        return HandRank(self.calculate_ranking()[0])

    def better_than(self, other: PokerHand) -> bool:
        """
        Position-wise comparison of the two ranking tuples.

        The first position that differs decides; equal hands are not worse,
        so ties return True.
        """
        return self.calculate_ranking() >= other.calculate_ranking()

    def describe(self) -> str:
        """Human-readable description, e.g. 'Flush [2c, 3c, 4c, 5c, 7c]'."""
        return f"{HAND_RANK_NAMES[self.hand_rank]} {self}"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PokerHand):
            return self.calculate_ranking() == other.calculate_ranking()
        return NotImplemented

    def __lt__(self, other: PokerHand) -> bool:
        return self.calculate_ranking() < other.calculate_ranking()

    def __hash__(self) -> int:
        return hash(self.calculate_ranking())

    def __repr__(self) -> str:
        return f"PokerHand({self})"

    def __str__(self) -> str:
        return "[" + ", ".join(c.short_str for c in self.cards) + "]"


def _ranks_with_count(counts: Counter, count: int) -> List[int]:
    """Rank values that appear exactly ``count`` times, highest first."""
    return sorted((r for r, c in counts.items() if c == count), reverse=True)


class BestHandFinder:
    """
    Finds the best five-card hand for one seat at showdown.

    Usage:
        best = BestHandFinder(board, hole_cards).find()
    """

    def __init__(self, board: Sequence[Card], hole_cards: Sequence[Card]):
        if board is None or len(board) != BOARD_CARDS:
            raise ValueError(
                f"board list invalid. Expected: {BOARD_CARDS}; "
                f"Got: {None if board is None else len(board)}"
            )
        if hole_cards is None or len(hole_cards) != HOLE_CARDS:
            raise ValueError(
                f"holeCards list invalid. Expected: {HOLE_CARDS}; "
                f"Got: {None if hole_cards is None else len(hole_cards)}"
            )
        self.cards: List[Card] = list(board) + list(hole_cards)
        self._best: Optional[PokerHand] = None

    def find(self) -> PokerHand:
        """Return the best of the 21 five-card combinations (first one wins ties)."""
        if self._best is None:
            for combo in combinations(self.cards, HAND_SIZE):
                hand = PokerHand(combo)
                if self._best is None or hand > self._best:
                    self._best = hand
        return self._best
