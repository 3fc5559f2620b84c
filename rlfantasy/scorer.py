"""Team scoring with role bonuses and substitution fallback."""

import logging
from typing import Mapping, Optional

from .config import get_rules
from .constants import ROLES
from .exceptions import IncompleteRosterError
from .models import (
    PlayerWeekStats,
    PointsBreakdown,
    Roster,
    SlotAssignment,
    StatLine,
    Substitution,
    TeamScore,
)
from .schemas import LeagueRules
from .scoring import score_stat_line

logger = logging.getLogger('rlfantasy.scorer')


def _games_played(stats: Optional[PlayerWeekStats]) -> int:
    return stats.games_played if stats is not None else 0


def find_substitute(
    substitutes: list[SlotAssignment],
    week_stats: Mapping[str, PlayerWeekStats],
    consumed: set[str],
) -> Optional[SlotAssignment]:
    """
    Pick the first unconsumed substitute, by rank, who played this week.

    Args:
        substitutes: Substitute slots in ascending rank order
        week_stats: Player id to week stats; a missing entry means no games
        consumed: Substitute player ids already used in this scoring pass

    Returns:
        The chosen substitute slot, or None if nobody is eligible
    """
    for sub in substitutes:
        if sub.player_id in consumed:
            continue
        if _games_played(week_stats.get(sub.player_id)) > 0:
            return sub
    return None


def calculate_team_score(
    roster: Roster,
    week_stats: Mapping[str, PlayerWeekStats],
    rules: Optional[LeagueRules] = None,
) -> list[PointsBreakdown]:
    """
    Calculate a roster's point breakdown for a week.

    Active roles are scored in order striker, midfield, goalkeeper. An active
    player with no games that week is replaced by the first substitute (by
    rank) who played and has not already filled in for an earlier role. The
    substitute's stats are scored under the active slot's role.

    Args:
        roster: Roster with all three active roles filled
        week_stats: Player id to resolved week stats
        rules: League rules (default: configured ruleset)

    Returns:
        One PointsBreakdown per active role, in role order

    Raises:
        IncompleteRosterError: If any active role is empty
    """
    rules = rules or get_rules()

    missing = [role for role in ROLES if roster.active_slot(role) is None]
    if missing:
        raise IncompleteRosterError(
            f'{roster.name} ({roster.team_id}) is missing active roles: {", ".join(missing)}'
        )

    substitutes = roster.substitutes()
    consumed: set[str] = set()
    breakdown: list[PointsBreakdown] = []

    for role in ROLES:
        active = roster.active_slot(role)
        stats = week_stats.get(active.player_id)
        substitution = None
        totals = StatLine()
        games_used = 0

        if _games_played(stats) > 0:
            totals = stats.totals()
            games_used = stats.games_played
        else:
            sub = find_substitute(substitutes, week_stats, consumed)
            if sub is not None:
                consumed.add(sub.player_id)
                sub_stats = week_stats[sub.player_id]
                totals = sub_stats.totals()
                games_used = sub_stats.games_played
                substitution = Substitution(
                    player_id=sub.player_id,
                    player_name=sub.player.name,
                    sub_order=sub.sub_order or 0,
                    games_filled=games_used,
                )
                logger.debug(
                    f'{roster.team_id}: {sub.player.name} (sub-{sub.sub_order}) fills '
                    f'{role} for {active.player.name}, {games_used} games'
                )
            else:
                logger.debug(f'{roster.team_id}: no substitute available for {role}')

        average, points = score_stat_line(totals, role, games_used, rules)

        breakdown.append(
            PointsBreakdown(
                player_id=active.player_id,
                player_name=active.player.name,
                role=role,
                games_used=games_used,
                base_points=points['base_points'],
                role_bonus=points['role_bonus'],
                period_points=points['period_points'],
                total_points=average,
                stats=totals,
                substitution=substitution,
            )
        )

    return breakdown


def get_total_points(breakdown: list[PointsBreakdown]) -> int:
    """Calculate total team points from a breakdown (sum of per-game averages)."""
    return sum(entry.total_points for entry in breakdown)


def score_roster(
    roster: Roster,
    week: int,
    week_stats: Mapping[str, PlayerWeekStats],
    rules: Optional[LeagueRules] = None,
) -> TeamScore:
    """Score a roster for a week and wrap the result as a TeamScore."""
    breakdown = calculate_team_score(roster, week_stats, rules)
    return TeamScore(
        team_id=roster.team_id,
        team_name=roster.name,
        week=week,
        total_points=get_total_points(breakdown),
        breakdown=breakdown,
    )
