from .models import (
    ConstraintResult,
    MutationResult,
    Player,
    PlayerWeekStats,
    PointsBreakdown,
    Roster,
    SlotAssignment,
    StatLine,
    Substitution,
    TeamScore,
    Transfer,
)
from .exceptions import IncompleteRosterError, PlayerInUseError, PreconditionError, WeekStateError
from .schemas import LeagueRules
from .config import default_rules, get_rules, clear_rules_cache
from .constraints import (
    can_add_player,
    validate_roster_constraints,
    can_swap_players,
    can_move_to_empty_slot,
)
from .scoring import calculate_base_points, calculate_role_points, score_stat_line
from .scorer import calculate_team_score, get_total_points, score_roster
from .transactions import (
    create_roster,
    add_player,
    transfer_player,
    swap_players,
    move_player,
)
from .week import Week
from .store import LeagueStore
from .publisher import publish_week_scores, build_standings

__all__ = [
    # Models
    'ConstraintResult',
    'MutationResult',
    'Player',
    'PlayerWeekStats',
    'PointsBreakdown',
    'Roster',
    'SlotAssignment',
    'StatLine',
    'Substitution',
    'TeamScore',
    'Transfer',
    'Week',
    # Errors
    'PreconditionError',
    'IncompleteRosterError',
    'WeekStateError',
    'PlayerInUseError',
    # Rules
    'LeagueRules',
    'default_rules',
    'get_rules',
    'clear_rules_cache',
    # Constraint checks
    'can_add_player',
    'validate_roster_constraints',
    'can_swap_players',
    'can_move_to_empty_slot',
    # Scoring
    'calculate_base_points',
    'calculate_role_points',
    'score_stat_line',
    'calculate_team_score',
    'get_total_points',
    'score_roster',
    # Roster mutations
    'create_roster',
    'add_player',
    'transfer_player',
    'swap_players',
    'move_player',
    # Storage and publishing
    'LeagueStore',
    'publish_week_scores',
    'build_standings',
]
