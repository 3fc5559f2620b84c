"""Weekly score publication and season standings."""

import logging
from typing import Optional

from .exceptions import IncompleteRosterError
from .models import TeamScore
from .schemas import LeagueRules
from .scorer import score_roster
from .store import LeagueStore
from .validators import validate_breakdown, validate_roster_shape, validate_team_score

logger = logging.getLogger('rlfantasy.publisher')


def publish_week_scores(
    store: LeagueStore,
    week_number: int,
    rules: Optional[LeagueRules] = None,
) -> list[TeamScore]:
    """
    Score every roster for a week and publish the results.

    All rosters are checked before anything is written, so a failure leaves
    the week's previous state untouched. Publishing an already published week
    recomputes and replaces its scores.

    Args:
        store: League store
        week_number: Week to publish
        rules: League rules (default: the store's ruleset)

    Returns:
        List of TeamScore, one per roster

    Raises:
        KeyError: If the week does not exist
        WeekStateError: If the week's stats are not locked yet
        IncompleteRosterError: If any roster is not complete
    """
    rules = rules or store.rules

    with store.week_lock(week_number):
        week = store.get_week(week_number)
        week.require_publishable()

        rosters = store.list_rosters()
        for roster in rosters:
            errors = validate_roster_shape(roster, rules)
            if errors:
                raise IncompleteRosterError(
                    f'Cannot publish week {week_number}: {"; ".join(errors)}'
                )

        week_stats = store.get_week_stats(week_number)
        logger.info(f'Loaded stats for {len(week_stats)} players in week {week_number}')

        scores = []
        for roster in rosters:
            score = score_roster(roster, week_number, week_stats, rules)
            for entry in score.breakdown:
                for warning in validate_breakdown(entry):
                    logger.warning(warning)
            for warning in validate_team_score(roster.team_id, score.total_points):
                logger.warning(warning)
            logger.info(f'Team "{roster.name}": {score.total_points} points')
            scores.append(score)

        store.replace_week_scores(week_number, scores)
        if not week.scores_published:
            store.save_week(week.mark_published())

        logger.info(f'Published scores for {len(scores)} teams in week {week_number}')
        return scores


def build_standings(store: LeagueStore) -> list[dict]:
    """
    Build the season leaderboard from all published weeks.

    Returns:
        List of standings entries sorted by total points (descending, ties
        broken by team name), each with rank, team_id, team_name, owner,
        total_points and weekly_points
    """
    owners = {roster.team_id: roster.owner for roster in store.list_rosters()}
    table: dict[str, dict] = {}

    for week in store.list_weeks():
        if not week.scores_published:
            continue
        for team in store.load_week_scores(week.week_number):
            entry = table.setdefault(
                team['team_id'],
                {
                    'team_id': team['team_id'],
                    'team_name': team['team_name'],
                    'owner': owners.get(team['team_id'], ''),
                    'total_points': 0,
                    'weekly_points': [],
                },
            )
            entry['team_name'] = team['team_name']
            entry['total_points'] += team['total_points']
            entry['weekly_points'].append(
                {'week': week.week_number, 'points': team['total_points']}
            )

    standings = sorted(table.values(), key=lambda e: (-e['total_points'], e['team_name']))
    for rank, entry in enumerate(standings, 1):
        entry['rank'] = rank
    return standings
