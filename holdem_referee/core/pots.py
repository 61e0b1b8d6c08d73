"""
Pot Ledger - main pot and side pot bookkeeping.

Pots are kept oldest first. Each pot records, per seat, what that seat has
put into it during the current round, so that a short all-in can split a
pot exactly where the all-in player's money runs out:

    pots before:  [ main: bet 2000, players A B C ]
    C calls all-in for 800 more (having 0 in so far):
    pots after:   [ main: bet 800,  players A B C ]
                  [ side: bet 1200, players A B   ]

All functions are pure: they take a tuple of Pots and return a new one.
Chips are conserved by every operation; a split that would create or lose
chips raises PotInvariantError.
"""

from __future__ import annotations
from typing import Dict, Mapping, Sequence, Tuple
from dataclasses import replace
import logging

from holdem_referee.core.errors import PotInvariantError, RuleViolation
from holdem_referee.core.hand import PokerHand
from holdem_referee.core.state import Pot


logger = logging.getLogger(__name__)

Pots = Tuple[Pot, ...]


def apply_call(pots: Sequence[Pot], seat: int) -> Pots:
    """Bring ``seat`` level with every pot's requirement."""
    result = []
    for pot in pots:
        owed = pot.outstanding(seat)
        if owed < 0:
            raise PotInvariantError(f"Seat {seat} has over-contributed to a pot")
        result.append(_pay(pot, seat, owed))
    return tuple(result)


def split_pots_for_partial_call(pots: Sequence[Pot], seat: int, amount: int) -> Pots:
    """
    Apply an all-in call of ``amount`` that may not cover the full requirement.

    Pots are paid in order. The first pot the remaining chips cannot more
    than cover is split at the caller's level: the lower part keeps every
    player, the upper part (and every later pot) excludes the caller.

    Raises:
        RuleViolation: If ``amount`` exceeds what it takes to call.
        PotInvariantError: If the split would not conserve chips.
    """
    if amount <= 0:
        raise RuleViolation("An all-in call must put chips in")

    remaining = amount
    last_index = len(pots) - 1
    result = []
    split_done = False

    for index, pot in enumerate(pots):
        if split_done:
            result.append(replace(pot, players_in_pot=_without(pot.players_in_pot, seat)))
            continue

        owed = pot.outstanding(seat)
        if remaining > owed:
            result.append(_pay(pot, seat, owed))
            remaining -= owed
            continue

        capped, excess = _split_pot(pot, seat, remaining)
        result.append(capped)
        if excess.chips or excess.current_pot_bet or index == last_index:
            result.append(excess)
        logger.debug(
            f"Split pot {index} at {capped.current_pot_bet}: "
            f"{capped.chips} / {excess.chips} chips"
        )
        split_done = True

    if not split_done:
        raise RuleViolation("This is not an all-in call: amount exceeds the required bet")
    return tuple(result)


def _split_pot(pot: Pot, seat: int, amount: int) -> Tuple[Pot, Pot]:
    cap = pot.player_bets[seat] + amount
    bets = _replace_at(pot.player_bets, seat, cap)
    capped_bets = tuple(min(bet, cap) for bet in bets)
    excess_bets = tuple(bet - low for bet, low in zip(bets, capped_bets))

    settled = pot.settled_chips
    if settled < 0:
        raise PotInvariantError("Pot holds fewer chips than its recorded bets")

    capped_chips = settled + sum(capped_bets)
    excess_chips = sum(excess_bets)
    if capped_chips + excess_chips != pot.chips + amount:
        raise PotInvariantError("Invalid pot split.")

    capped = Pot(capped_chips, cap, pot.players_in_pot, capped_bets)
    excess = Pot(
        excess_chips,
        pot.current_pot_bet - cap,
        _without(pot.players_in_pot, seat),
        excess_bets,
    )
    return capped, excess


def apply_raise(pots: Sequence[Pot], seat: int, raise_by: int, all_in: bool) -> Pots:
    """
    Call every pot, then raise the newest pot by ``raise_by``.

    An opening bet is a raise over a zero requirement. When the raiser is
    all-in an empty pot is opened for the players who can still bet more.
    """
    if raise_by <= 0:
        raise RuleViolation("A bet or raise must increase the required bet")

    called = list(apply_call(pots, seat))
    newest = called[-1]
    called[-1] = Pot(
        newest.chips + raise_by,
        newest.current_pot_bet + raise_by,
        newest.players_in_pot,
        _replace_at(newest.player_bets, seat, newest.player_bets[seat] + raise_by),
    )
    if all_in:
        called.append(open_side_pot(called[-1], seat))
    return tuple(called)


def open_side_pot(pot: Pot, all_in_seat: int) -> Pot:
    """An empty pot for the players of ``pot`` other than the all-in seat."""
    return Pot(
        0,
        0,
        _without(pot.players_in_pot, all_in_seat),
        (0,) * len(pot.player_bets),
    )


def remove_player(pots: Sequence[Pot], seat: int) -> Pots:
    """Fold: the seat can no longer win any pot. No chips move."""
    return tuple(replace(pot, players_in_pot=_without(pot.players_in_pot, seat)) for pot in pots)


def reset_for_new_round(pots: Sequence[Pot]) -> Pots:
    """Clear every pot's requirement and per-seat round bets; chips stay."""
    return tuple(
        replace(pot, current_pot_bet=0, player_bets=(0,) * len(pot.player_bets))
        for pot in pots
    )


def check_ledger(pots: Sequence[Pot], player_bets: Sequence[int]) -> None:
    """
    Each seat's round bet must equal what the pots record for it.

    Raises:
        PotInvariantError: If the pots and the seat bets disagree.
    """
    for seat, bet in enumerate(player_bets):
        in_pots = sum(pot.player_bets[seat] for pot in pots)
        if in_pots != bet:
            raise PotInvariantError(
                f"Seat {seat} bet {bet} but pots record {in_pots}"
            )


def award_pots(
    pots: Sequence[Pot],
    contenders: Sequence[int],
    hands: Mapping[int, PokerHand],
) -> Dict[int, int]:
    """
    Distribute every pot to the best hand(s) among its eligible contenders.

    Args:
        pots: Final pots
        contenders: Seats still in the hand, in seat order
        hands: Best hand per contender (not needed when one contender is left)

    Returns:
        Chips won per seat (seats that win nothing are omitted)
    """
    if not contenders:
        raise PotInvariantError("Nobody left to award the pots to")

    payouts: Dict[int, int] = {}
    for pot in pots:
        if pot.chips == 0:
            continue
        eligible = [seat for seat in contenders if seat in pot.players_in_pot]
        if not eligible:
            eligible = list(contenders)

        if len(eligible) == 1:
            winners = eligible
        else:
            best = max(hands[seat] for seat in eligible)
            winners = [seat for seat in eligible if hands[seat] == best]

        share, odd_chips = divmod(pot.chips, len(winners))
        for i, seat in enumerate(winners):
            payouts[seat] = payouts.get(seat, 0) + share + (1 if i < odd_chips else 0)

    return payouts


def _pay(pot: Pot, seat: int, amount: int) -> Pot:
    if amount == 0:
        return pot
    return replace(
        pot,
        chips=pot.chips + amount,
        player_bets=_replace_at(pot.player_bets, seat, pot.player_bets[seat] + amount),
    )


def _replace_at(values: Sequence[int], index: int, value: int) -> Tuple[int, ...]:
    return tuple(value if i == index else v for i, v in enumerate(values))


def _without(seats: Sequence[int], seat: int) -> Tuple[int, ...]:
    return tuple(s for s in seats if s != seat)
