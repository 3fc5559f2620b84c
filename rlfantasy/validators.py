"""Validation functions for rosters, week stats, and scoring results."""

from typing import Iterable, Optional

from .config import get_rules
from .constants import ROLES, SLOT_ACTIVE, SLOT_SUBSTITUTE, STATS
from .models import PlayerWeekStats, PointsBreakdown, Roster
from .schemas import LeagueRules


def validate_roster_shape(roster: Roster, rules: Optional[LeagueRules] = None) -> list[str]:
    """
    Validate that a roster is complete and ready to be scored.

    Checks:
    - Three active slots plus the configured number of substitutes
    - Each active role and each substitute rank filled exactly once
    - No player on the roster twice
    - Budget not overdrawn

    Args:
        roster: Roster to validate
        rules: League rules (default: configured ruleset)

    Returns:
        List of validation error messages (empty if valid)
    """
    rules = rules or get_rules()
    errors = []

    if len(roster.slots) != rules.roster_size:
        errors.append(
            f'{roster.team_id} has {len(roster.slots)} players (need {rules.roster_size})'
        )

    # Each slot identity exactly once
    expected = [(SLOT_ACTIVE, role) for role in ROLES] + [
        (SLOT_SUBSTITUTE, order) for order in rules.sub_orders
    ]
    for slot_type, key in expected:
        if slot_type == SLOT_ACTIVE:
            count = sum(1 for s in roster.slots if s.slot_type == slot_type and s.role == key)
            label = key
        else:
            count = sum(1 for s in roster.slots if s.slot_type == slot_type and s.sub_order == key)
            label = f'sub-{key}'
        if count == 0:
            errors.append(f'{roster.team_id} has no {label}')
        elif count > 1:
            errors.append(f'{roster.team_id} has {count} players in {label}')

    # Duplicate players
    seen = set()
    duplicates = set()
    for slot in roster.slots:
        if slot.player_id in seen:
            duplicates.add(slot.player.name)
        seen.add(slot.player_id)

    if duplicates:
        errors.append(f'{roster.team_id} has duplicate players: {", ".join(sorted(duplicates))}')

    if roster.budget_remaining < 0:
        errors.append(f'{roster.team_id} is over budget by {-roster.budget_remaining}')

    return errors


def validate_week_stats(
    stats: Iterable[PlayerWeekStats], rules: Optional[LeagueRules] = None
) -> list[str]:
    """
    Validate resolved week statistics before they are saved.

    Checks:
    - Games played between 0 and the series length
    - All stat totals non-negative
    - No player listed twice

    Returns:
        List of validation error messages (empty if valid)
    """
    rules = rules or get_rules()
    errors = []
    seen = set()

    for record in stats:
        if record.player_id in seen:
            errors.append(f'Duplicate stats for {record.player_id}')
        seen.add(record.player_id)

        if record.games_played < 0 or record.games_played > rules.games_in_series:
            errors.append(
                f'{record.player_id} has {record.games_played} games played '
                f'(expected 0-{rules.games_in_series})'
            )
        for stat in STATS:
            if getattr(record, stat) < 0:
                errors.append(f'{record.player_id} has negative {stat}: {getattr(record, stat)}')

    return errors


def check_unplayed_stats(stats: Iterable[PlayerWeekStats]) -> list[str]:
    """
    Flag stat lines recorded for players who played no games.

    Scoring ignores such totals (a zero-game player is substituted), so they
    usually point at a stats entry error.

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    for record in stats:
        if record.games_played != 0:
            continue
        recorded = {stat: value for stat, value in record.totals().as_dict().items() if value}
        if recorded:
            details = ', '.join(f'{stat}={value}' for stat, value in recorded.items())
            warnings.append(f'{record.player_id} has stats but no games played ({details})')

    return warnings


def validate_breakdown(entry: PointsBreakdown) -> list[str]:
    """
    Check that a breakdown entry is internally consistent.

    Sanity checks:
    - Base points plus role bonus equals period points
    - Role bonus is never negative
    - No games used means no points

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    if entry.base_points + entry.role_bonus != entry.period_points:
        warnings.append(
            f'{entry.player_name} ({entry.role}) base {entry.base_points} + bonus '
            f'{entry.role_bonus} != period {entry.period_points}'
        )

    if entry.role_bonus < 0:
        warnings.append(f'{entry.player_name} ({entry.role}) has negative role bonus')

    if entry.games_used == 0 and entry.total_points != 0:
        warnings.append(
            f'{entry.player_name} ({entry.role}) scored {entry.total_points} with no games'
        )

    return warnings


def validate_team_score(team_id: str, team_total: int) -> list[str]:
    """
    Check that a team's weekly total is reasonable.

    Sanity checks:
    - Team total not negative
    - Team total not above 1500 (three slots averaging 500 per game)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    if team_total > 1500:
        warnings.append(f'{team_id} scored {team_total} pts (unusually high - check stats)')
    elif team_total < 0:
        warnings.append(f'{team_id} scored {team_total} pts (negative total - check stats)')

    return warnings
