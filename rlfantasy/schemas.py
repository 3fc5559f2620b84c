"""Pydantic schemas for league rules and JSON data validation."""

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import ROLES, SLOT_ACTIVE, SLOT_SUBSTITUTE, SOURCE_TEAMS, STATS, WEEK_PHASES

SOURCE_TEAM_PATTERN = '^(' + '|'.join(SOURCE_TEAMS) + ')$'
ROLE_PATTERN = '^(' + '|'.join(ROLES) + ')$'
PHASE_PATTERN = '^(' + '|'.join(WEEK_PHASES) + ')$'


class LeagueRules(BaseModel):
    """Scoring and roster rules, loaded once and never mutated."""

    base_points: dict[str, int]
    role_multipliers: dict[str, dict[str, int]]
    salary_cap: int = Field(..., gt=0)
    games_in_series: int = Field(..., ge=1, le=9)
    substitute_slots: int = Field(3, ge=0, le=9)
    max_per_source_team: int = Field(..., ge=1)
    max_active_per_source_team: int = Field(..., ge=1)
    source_team_names: dict[str, str]

    @field_validator('base_points')
    @classmethod
    def validate_base_points(cls, v):
        """Ensure every tracked stat has a point value."""
        missing = [stat for stat in STATS if stat not in v]
        if missing:
            raise ValueError(f'Missing base points for: {", ".join(missing)}')
        for stat in v:
            if stat not in STATS:
                raise ValueError(f'Unknown stat: {stat}')
        return v

    @field_validator('role_multipliers')
    @classmethod
    def validate_role_multipliers(cls, v):
        """Ensure a full role x stat matrix with multipliers of at least 1."""
        for role in ROLES:
            if role not in v:
                raise ValueError(f'Missing multipliers for role: {role}')
            for stat in STATS:
                if stat not in v[role]:
                    raise ValueError(f'Missing {stat} multiplier for role: {role}')
                if v[role][stat] < 1:
                    raise ValueError(f'Invalid {stat} multiplier for {role}: {v[role][stat]}')
        for role in v:
            if role not in ROLES:
                raise ValueError(f'Invalid role: {role}')
        return v

    @model_validator(mode='after')
    def validate_limits(self):
        if self.max_active_per_source_team > self.max_per_source_team:
            raise ValueError('max_active_per_source_team cannot exceed max_per_source_team')
        return self

    @property
    def roster_size(self) -> int:
        return len(ROLES) + self.substitute_slots

    @property
    def sub_orders(self) -> tuple[int, ...]:
        """Substitute ranks in fallback order, 1 first."""
        return tuple(range(1, self.substitute_slots + 1))

    def team_display_name(self, team: str) -> str:
        return self.source_team_names.get(team, team)

    class Config:
        extra = 'forbid'
        frozen = True


class PlayerRecord(BaseModel):
    """A real-world player available to draft."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    team: str = Field(..., pattern=SOURCE_TEAM_PATTERN)
    price: int = Field(..., ge=0)
    is_active: bool = True
    aliases: list[str] = Field(default_factory=list)

    class Config:
        extra = 'forbid'


class PlayersFile(BaseModel):
    """Complete players.json file structure."""

    players: list[PlayerRecord]

    class Config:
        extra = 'forbid'


class SlotRecord(BaseModel):
    """One filled roster slot."""

    player_id: str = Field(..., min_length=1)
    slot_type: str = Field(..., pattern=f'^({SLOT_ACTIVE}|{SLOT_SUBSTITUTE})$')
    role: str | None = Field(None, pattern=ROLE_PATTERN)
    sub_order: int | None = Field(None, ge=1)
    purchase_price: int = Field(..., ge=0)

    @model_validator(mode='after')
    def validate_slot_identity(self):
        """Active slots carry a role, substitute slots carry a sub order."""
        if self.slot_type == SLOT_ACTIVE and (self.role is None or self.sub_order is not None):
            raise ValueError(f'Active slot for {self.player_id} needs a role and no sub_order')
        if self.slot_type == SLOT_SUBSTITUTE and (self.sub_order is None or self.role is not None):
            raise ValueError(f'Substitute slot for {self.player_id} needs a sub_order and no role')
        return self

    class Config:
        extra = 'forbid'


class RosterRecord(BaseModel):
    """A fantasy team and its slots."""

    team_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    owner: str = ''
    budget_remaining: int
    created_in_week: int | None = Field(None, ge=1)
    slots: list[SlotRecord] = Field(default_factory=list)

    @field_validator('slots')
    @classmethod
    def validate_unique_slots(cls, v):
        """Ensure no slot identity is filled twice."""
        seen = set()
        for slot in v:
            key = (slot.slot_type, slot.role, slot.sub_order)
            if key in seen:
                raise ValueError(f'Slot filled twice: {slot.role or f"sub-{slot.sub_order}"}')
            seen.add(key)
        return v

    class Config:
        extra = 'forbid'


class RostersFile(BaseModel):
    """Complete rosters.json file structure."""

    rosters: list[RosterRecord]

    class Config:
        extra = 'forbid'


class WeekRecord(BaseModel):
    """Competition week state."""

    week_number: int = Field(..., ge=1)
    phase: str = Field(..., pattern=PHASE_PATTERN)
    transfer_window_closes_at: str | None = None

    class Config:
        extra = 'forbid'


class WeeksFile(BaseModel):
    """Complete weeks.json file structure."""

    weeks: list[WeekRecord]

    class Config:
        extra = 'forbid'


class PlayerWeekStatsRecord(BaseModel):
    """Resolved statistics for one player in one week."""

    player_id: str = Field(..., min_length=1)
    games_played: int = Field(..., ge=0)
    goals: int = Field(0, ge=0)
    assists: int = Field(0, ge=0)
    saves: int = Field(0, ge=0)
    shots: int = Field(0, ge=0)
    demos_received: int = Field(0, ge=0)

    class Config:
        extra = 'forbid'


class WeekStatsFile(BaseModel):
    """Complete stats/week_N.json file structure."""

    week: int = Field(..., ge=1)
    stats: list[PlayerWeekStatsRecord]

    @field_validator('stats')
    @classmethod
    def validate_unique_players(cls, v):
        """Ensure each player appears at most once."""
        seen = set()
        for record in v:
            if record.player_id in seen:
                raise ValueError(f'Duplicate stats for player: {record.player_id}')
            seen.add(record.player_id)
        return v

    class Config:
        extra = 'forbid'


class TransferRecord(BaseModel):
    """Transaction log entry for a transfer."""

    team_id: str
    week: int = Field(..., ge=1)
    sold_player_id: str
    sold_price: int = Field(..., ge=0)
    bought_player_id: str
    bought_price: int = Field(..., ge=0)
    timestamp: str | None = None

    class Config:
        extra = 'forbid'


class TransfersFile(BaseModel):
    """Complete transfers.json file structure."""

    transfers: list[TransferRecord] = Field(default_factory=list)

    class Config:
        extra = 'forbid'
