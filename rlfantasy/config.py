"""League rules configuration management."""

from functools import lru_cache
from pathlib import Path

from .constants import (
    BASE_POINTS,
    GAMES_IN_SERIES,
    MAX_ACTIVE_PER_SOURCE_TEAM,
    MAX_PER_SOURCE_TEAM,
    ROLE_MULTIPLIERS,
    SALARY_CAP,
    SOURCE_TEAM_NAMES,
    TEAM_SIZE,
)
from .schemas import LeagueRules
from .utils import load_json

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'league_config.json'


def default_rules() -> LeagueRules:
    """Build the built-in ruleset from the module constants."""
    return LeagueRules(
        base_points=dict(BASE_POINTS),
        role_multipliers={role: dict(m) for role, m in ROLE_MULTIPLIERS.items()},
        salary_cap=SALARY_CAP,
        games_in_series=GAMES_IN_SERIES,
        substitute_slots=TEAM_SIZE['substitutes'],
        max_per_source_team=MAX_PER_SOURCE_TEAM,
        max_active_per_source_team=MAX_ACTIVE_PER_SOURCE_TEAM,
        source_team_names=dict(SOURCE_TEAM_NAMES),
    )


@lru_cache(maxsize=1)
def _load_rules() -> LeagueRules:
    if not CONFIG_PATH.exists():
        return default_rules()
    return load_json(CONFIG_PATH, schema=LeagueRules)


def get_rules() -> LeagueRules:
    """
    Load league rules from data/league_config.json.

    The file is read once and cached. If it does not exist, the built-in
    ruleset is used. Each call returns a deep copy, so changes to the
    returned dicts never reach the cached rules.

    Returns:
        LeagueRules object with validated settings

    Raises:
        ValueError: If the config file has invalid structure

    Example:
        from rlfantasy.config import get_rules
        rules = get_rules()
        print(f"Salary cap: {rules.salary_cap}")
    """
    return _load_rules().model_copy(deep=True)


def get_salary_cap() -> int:
    """Get the salary cap (initial budget) from config."""
    return get_rules().salary_cap


def get_games_in_series() -> int:
    """Get the number of games in a weekly series from config."""
    return get_rules().games_in_series


def get_source_team_names() -> dict[str, str]:
    """Get source team id to display name mapping from config."""
    return get_rules().source_team_names


def clear_rules_cache() -> None:
    """
    Clear the rules cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    _load_rules.cache_clear()
