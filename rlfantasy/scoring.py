"""Scoring functions for player stat lines."""

from typing import Optional

from .config import get_rules
from .constants import STATS
from .models import StatLine
from .schemas import LeagueRules
from .utils import round_half_away_from_zero


def calculate_base_points(stats: StatLine, rules: Optional[LeagueRules] = None) -> int:
    """
    Score a stat line without any role bonus.

    Scoring:
        - Goals: 50 points each
        - Assists: 35 points each
        - Saves: 25 points each
        - Shots: 15 points each
        - Demos received: -15 points each
    """
    rules = rules or get_rules()
    return sum(getattr(stats, stat) * rules.base_points[stat] for stat in STATS)


def calculate_role_points(stats: StatLine, role: str, rules: Optional[LeagueRules] = None) -> int:
    """
    Score a stat line with the role's multipliers applied.

    Each role doubles one stat:
        - striker: goals
        - midfield: assists
        - goalkeeper: saves

    Demos received always count at the flat base penalty.
    """
    rules = rules or get_rules()
    multipliers = rules.role_multipliers[role]
    return sum(
        getattr(stats, stat) * rules.base_points[stat] * multipliers[stat] for stat in STATS
    )


def score_stat_line(
    stats: StatLine, role: str, games: int, rules: Optional[LeagueRules] = None
) -> tuple[int, dict[str, int]]:
    """
    Score a period's stat line for a role as a per-game average.

    Args:
        stats: Stat totals across the games used
        role: Active role the stats are scored under
        games: Number of games the totals cover
        rules: League rules (default: configured ruleset)

    Returns:
        Tuple of (average, breakdown) where average is the period total divided
        by games, rounded half away from zero (0 when no games), and breakdown
        holds 'base_points', 'role_bonus' and 'period_points'
    """
    base = calculate_base_points(stats, rules)
    period = calculate_role_points(stats, role, rules)
    breakdown = {
        'base_points': base,
        'role_bonus': period - base,
        'period_points': period,
    }
    if games <= 0:
        return 0, breakdown
    return round_half_away_from_zero(period, games), breakdown
