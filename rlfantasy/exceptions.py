"""Exceptions for workflow precondition failures.

Rule violations on roster mutations are not exceptions; they are returned as
ConstraintResult / MutationResult values.
"""


class PreconditionError(RuntimeError):
    """An operation was invoked in a state where it must not run."""


class IncompleteRosterError(PreconditionError):
    """Scoring was attempted on a roster that is not fully locked in."""


class WeekStateError(PreconditionError):
    """A week lifecycle gate does not permit the requested operation."""


class PlayerInUseError(PreconditionError):
    """A player cannot be deleted while a roster slot references them."""
