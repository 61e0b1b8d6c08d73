"""
Cards and card keys for the verified Hold'em table.

A card is identified by its id in the canonical 52-card ordering:

    card_id = rank_index * 4 + suit_index

(rank_index 0 = Two ... 12 = Ace, suit_index 0 = clubs ... 3 = spades).
The public state stores cards in 52 slots ``C0`` .. ``C51``; before the
external shuffle slot ``Ci`` holds the string form of card id ``i``
("2c", "2d", ..., "As").
"""

from __future__ import annotations
from typing import List
from enum import IntEnum


class Suit(IntEnum):
    """Card suits, in card-id order."""
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3


class Rank(IntEnum):
    """Card ranks from 2 (lowest) to Ace (highest)."""
    TWO = 0
    THREE = 1
    FOUR = 2
    FIVE = 3
    SIX = 4
    SEVEN = 5
    EIGHT = 6
    NINE = 7
    TEN = 8
    JACK = 9
    QUEEN = 10
    KING = 11
    ACE = 12

    @property
    def value_for_ranking(self) -> int:
        """Rank value used by hand rankings: Two=2 ... Ace=14."""
        return int(self) + 2


SUIT_CHARS = {
    Suit.CLUBS: "c",
    Suit.DIAMONDS: "d",
    Suit.HEARTS: "h",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}

NUM_CARDS = 52
CARD_KEY_PREFIX = "C"


class Card:
    """
    A playing card represented as (rank, suit).

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As")
    - Card id (0-51): Card.from_int(51) = Ace of Spades
    """

    __slots__ = ("rank", "suit", "_int")

    def __init__(self, rank: Rank, suit: Suit):
        self.rank = Rank(rank)
        self.suit = Suit(suit)
        self._int = int(self.rank) * 4 + int(self.suit)

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from its two-character state form ("As", "Tc").

        Raises:
            ValueError: If the string is not a rank char followed by a suit char.
        """
        if not isinstance(s, str) or len(s) != 2:
            raise ValueError(f"Invalid card string: {s!r}")

        rank_char, suit_char = s[0].upper(), s[1].lower()
        if rank_char not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_char}")
        if suit_char not in CHAR_TO_SUIT:
            raise ValueError(f"Invalid suit: {suit_char}")

        return cls(CHAR_TO_RANK[rank_char], CHAR_TO_SUIT[suit_char])

    @classmethod
    def from_int(cls, card_id: int) -> Card:
        """Create a card from its id (0-51)."""
        if not 0 <= card_id < NUM_CARDS:
            raise ValueError(f"Card id must be 0-51, got {card_id}")
        return cls(Rank(card_id // 4), Suit(card_id % 4))

    def to_int(self) -> int:
        return self._int

    def __int__(self) -> int:
        return self._int

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Card):
            return self._int == other._int
        return False

    def __hash__(self) -> int:
        return self._int

    def __lt__(self, other: Card) -> bool:
        """Compare by rank only (for sorting)."""
        return self.rank < other.rank

    def __repr__(self) -> str:
        return f"Card({self.short_str})"

    @property
    def short_str(self) -> str:
        """State form like 'As', 'Kh'."""
        return f"{RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]}"


def card_id_to_string(card_id: int) -> str:
    """String form of a card id: 0 -> '2c', 51 -> 'As'."""
    return Card.from_int(card_id).short_str


def card_key(index: int) -> str:
    """State key of card slot ``index`` ('C7')."""
    if not 0 <= index < NUM_CARDS:
        raise ValueError(f"Card slot must be 0-51, got {index}")
    return f"{CARD_KEY_PREFIX}{index}"


def card_keys(from_inclusive: int, to_inclusive: int) -> List[str]:
    """Card slot keys for an inclusive range of indices."""
    return [card_key(i) for i in range(from_inclusive, to_inclusive + 1)]


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse space-separated or concatenated card strings.

    "As Kh Td" and "AsKhTd" both give three cards.
    """
    cards_str = cards_str.strip()
    if " " in cards_str:
        return [Card.from_string(s) for s in cards_str.split()]

    if len(cards_str) % 2:
        raise ValueError(f"Cannot parse cards: {cards_str}")
    return [Card.from_string(cards_str[i:i + 2]) for i in range(0, len(cards_str), 2)]
