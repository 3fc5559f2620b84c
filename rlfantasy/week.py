"""Competition week lifecycle.

A week moves through:

    draft -> transfer-open <-> transfer-closed -> stats-locked -> scores-published

Publishing again from scores-published recomputes and overwrites the scores.
"""

from dataclasses import dataclass, replace
from typing import Optional

from .constants import (
    PHASE_DRAFT,
    PHASE_SCORES_PUBLISHED,
    PHASE_STATS_LOCKED,
    PHASE_TRANSFER_CLOSED,
    PHASE_TRANSFER_OPEN,
    WEEK_PHASES,
    WEEK_TRANSITIONS,
)
from .exceptions import WeekStateError


@dataclass(frozen=True)
class Week:
    """A competition week and its current lifecycle phase."""
    week_number: int
    phase: str = PHASE_DRAFT
    transfer_window_closes_at: Optional[str] = None

    def __post_init__(self):
        if self.phase not in WEEK_PHASES:
            raise ValueError(f'Invalid week phase: {self.phase}')

    @property
    def transfer_window_open(self) -> bool:
        return self.phase == PHASE_TRANSFER_OPEN

    @property
    def stats_locked(self) -> bool:
        return self.phase in (PHASE_STATS_LOCKED, PHASE_SCORES_PUBLISHED)

    @property
    def scores_published(self) -> bool:
        return self.phase == PHASE_SCORES_PUBLISHED

    @property
    def can_edit_stats(self) -> bool:
        return not self.stats_locked

    @property
    def can_draft(self) -> bool:
        """New rosters may be locked in before the week's stats are final."""
        return self.phase in (PHASE_DRAFT, PHASE_TRANSFER_OPEN)

    def transition(self, phase: str) -> 'Week':
        """Return the week moved to a new phase, or raise WeekStateError."""
        if phase not in WEEK_TRANSITIONS[self.phase]:
            raise WeekStateError(
                f'Week {self.week_number} cannot go from {self.phase} to {phase}'
            )
        return replace(self, phase=phase)

    def open_transfer_window(self, closes_at: Optional[str] = None) -> 'Week':
        week = self.transition(PHASE_TRANSFER_OPEN)
        return replace(week, transfer_window_closes_at=closes_at)

    def close_transfer_window(self) -> 'Week':
        return self.transition(PHASE_TRANSFER_CLOSED)

    def lock_stats(self) -> 'Week':
        return self.transition(PHASE_STATS_LOCKED)

    def mark_published(self) -> 'Week':
        return self.transition(PHASE_SCORES_PUBLISHED)

    def require_stats_editable(self) -> None:
        if not self.can_edit_stats:
            raise WeekStateError(f'Stats for week {self.week_number} are locked')

    def require_publishable(self) -> None:
        if not self.stats_locked:
            raise WeekStateError(
                f'Stats for week {self.week_number} must be locked before publishing scores'
            )
