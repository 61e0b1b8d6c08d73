"""
Verification failures.

Every failure is a HackerDetected: the engine is fail-closed, so a claim it
cannot reproduce exactly is treated as cheating by the player who sent it.
These exceptions stay inside the core; PokerLogic.verify turns them into a
VerifyMoveDone naming the player.
"""


class HackerDetected(Exception):
    """Base class for every rejected move."""


class OperationMismatch(HackerDetected):
    """The claimed operations differ from the expected ones."""


class RuleViolation(HackerDetected):
    """The claimed move breaks a betting rule."""


class PotInvariantError(RuleViolation):
    """Pot bookkeeping would not conserve chips."""


class StateDecodeError(HackerDetected):
    """The public state is missing a key or holds a value of the wrong shape."""
