"""Data models for the Rocket League fantasy engine."""

from dataclasses import asdict, dataclass, field, replace
from typing import Optional

from .constants import SLOT_ACTIVE, SLOT_SUBSTITUTE, STATS


@dataclass(frozen=True)
class Player:
    """A real-world player that can be drafted."""
    id: str
    name: str
    team: str  # source team id, e.g. 'thor'
    price: int = 0
    is_active: bool = True
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class SlotAssignment:
    """One player bound to one of the six roster slots."""
    player: Player
    slot_type: str
    role: Optional[str] = None  # active slots only
    sub_order: Optional[int] = None  # substitute slots only
    purchase_price: int = 0

    @property
    def player_id(self) -> str:
        return self.player.id

    @property
    def is_active(self) -> bool:
        return self.slot_type == SLOT_ACTIVE

    @property
    def label(self) -> str:
        """Slot identity as displayed, e.g. 'striker' or 'sub-2'."""
        if self.slot_type == SLOT_ACTIVE:
            return str(self.role)
        return f'sub-{self.sub_order}'


def slot_label(slot_type: str, role: Optional[str] = None, sub_order: Optional[int] = None) -> str:
    """Label for a slot identity that may not be filled yet."""
    if slot_type == SLOT_ACTIVE:
        return str(role)
    return f'sub-{sub_order}'


@dataclass(frozen=True)
class Roster:
    """A fantasy team: owner, budget and slot assignments."""
    team_id: str
    name: str
    owner: str = ''
    budget_remaining: int = 0
    slots: tuple[SlotAssignment, ...] = ()
    created_in_week: Optional[int] = None

    def find(self, player_id: str) -> Optional[SlotAssignment]:
        for slot in self.slots:
            if slot.player_id == player_id:
                return slot
        return None

    def slot_at(
        self, slot_type: str, role: Optional[str] = None, sub_order: Optional[int] = None
    ) -> Optional[SlotAssignment]:
        """Return the assignment occupying a slot identity, if any."""
        for slot in self.slots:
            if slot.slot_type != slot_type:
                continue
            if slot_type == SLOT_ACTIVE and slot.role == role:
                return slot
            if slot_type == SLOT_SUBSTITUTE and slot.sub_order == sub_order:
                return slot
        return None

    def active_slot(self, role: str) -> Optional[SlotAssignment]:
        return self.slot_at(SLOT_ACTIVE, role=role)

    def substitutes(self) -> list[SlotAssignment]:
        """Substitute slots in ascending rank order."""
        subs = [s for s in self.slots if s.slot_type == SLOT_SUBSTITUTE]
        return sorted(subs, key=lambda s: s.sub_order or 0)

    def with_slots(self, slots) -> 'Roster':
        return replace(self, slots=tuple(slots))


@dataclass(frozen=True)
class StatLine:
    """Stat totals for a period."""
    goals: int = 0
    assists: int = 0
    saves: int = 0
    shots: int = 0
    demos_received: int = 0

    def as_dict(self) -> dict[str, int]:
        return {stat: getattr(self, stat) for stat in STATS}


@dataclass(frozen=True)
class PlayerWeekStats:
    """Resolved statistics for one player in one week."""
    player_id: str
    games_played: int = 0
    goals: int = 0
    assists: int = 0
    saves: int = 0
    shots: int = 0
    demos_received: int = 0

    def totals(self) -> StatLine:
        return StatLine(
            goals=self.goals,
            assists=self.assists,
            saves=self.saves,
            shots=self.shots,
            demos_received=self.demos_received,
        )


@dataclass(frozen=True)
class Substitution:
    """A substitute who filled in for an active slot."""
    player_id: str
    player_name: str
    sub_order: int
    games_filled: int


@dataclass(frozen=True)
class PointsBreakdown:
    """Score breakdown for one active role slot."""
    player_id: str
    player_name: str
    role: str
    games_used: int = 0
    base_points: int = 0
    role_bonus: int = 0
    period_points: int = 0  # total across all games used, with role bonus
    total_points: int = 0  # rounded per-game average
    stats: StatLine = field(default_factory=StatLine)
    substitution: Optional[Substitution] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TeamScore:
    """A fantasy team's score for one week."""
    team_id: str
    team_name: str
    week: int
    total_points: int = 0
    breakdown: list[PointsBreakdown] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'team_id': self.team_id,
            'team_name': self.team_name,
            'week': self.week,
            'total_points': self.total_points,
            'breakdown': [entry.to_dict() for entry in self.breakdown],
        }


@dataclass(frozen=True)
class ConstraintResult:
    """Outcome of a roster constraint check."""
    valid: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> 'ConstraintResult':
        return cls(valid=True)

    @classmethod
    def reject(cls, reason: str) -> 'ConstraintResult':
        return cls(valid=False, reason=reason)


@dataclass(frozen=True)
class Transfer:
    """Audit record of a completed transfer."""
    team_id: str
    week: int
    sold_player_id: str
    sold_price: int
    bought_player_id: str
    bought_price: int


@dataclass(frozen=True)
class MutationResult:
    """
    Outcome of a roster mutation.

    On acceptance, roster holds the new roster state (and transfer the audit
    record, for transfers). On rejection, nothing should be persisted and
    reason is shown to the user as-is.
    """
    valid: bool
    reason: Optional[str] = None
    roster: Optional[Roster] = None
    transfer: Optional[Transfer] = None

    @classmethod
    def accept(cls, roster: Roster, transfer: Optional[Transfer] = None) -> 'MutationResult':
        return cls(valid=True, roster=roster, transfer=transfer)

    @classmethod
    def reject(cls, reason: str) -> 'MutationResult':
        return cls(valid=False, reason=reason)
