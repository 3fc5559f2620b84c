"""Tests for league rules loading and JSON helpers."""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from rlfantasy.config import (
    clear_rules_cache,
    default_rules,
    get_games_in_series,
    get_rules,
    get_salary_cap,
    get_source_team_names,
)
from rlfantasy.constants import BASE_POINTS, SALARY_CAP
from rlfantasy.logging_config import audit_log_path, setup_logging
from rlfantasy.schemas import LeagueRules, RostersFile
from rlfantasy.utils import load_json, load_json_or_default, save_json


@pytest.fixture(autouse=True)
def fresh_rules_cache():
    clear_rules_cache()
    yield
    clear_rules_cache()


class TestRulesLoading:
    """Tests for get_rules and its accessors."""

    def test_default_rules_match_constants(self):
        rules = default_rules()
        assert rules.base_points == BASE_POINTS
        assert rules.salary_cap == SALARY_CAP
        assert rules.roster_size == 6
        assert rules.team_display_name('354esports') == '354 Esports'
        assert rules.team_display_name('unknown') == 'unknown'

    def test_shipped_config_matches_defaults(self):
        assert get_rules() == default_rules()

    def test_config_file_read_once(self):
        with patch('rlfantasy.config.load_json', wraps=load_json) as loader:
            get_rules()
            get_rules()
        assert loader.call_count == 1

    def test_returned_rules_cannot_corrupt_cache(self):
        """Editing the dicts of one returned ruleset leaves later calls untouched."""
        rules = get_rules()
        rules.base_points['goals'] = 0
        rules.role_multipliers['striker']['goals'] = 9
        fresh = get_rules()
        assert fresh.base_points['goals'] == 50
        assert fresh.role_multipliers['striker']['goals'] == 2

    def test_accessors(self):
        assert get_salary_cap() == 10_000_000
        assert get_games_in_series() == 5
        assert get_source_team_names()['thor'] == 'Thor'

    def test_missing_config_file_uses_defaults(self, tmp_path):
        with patch('rlfantasy.config.CONFIG_PATH', tmp_path / 'missing.json'):
            clear_rules_cache()
            assert get_rules() == default_rules()

    def test_custom_config_file(self, tmp_path):
        config = default_rules().model_dump()
        config['salary_cap'] = 12_000_000
        path = tmp_path / 'league_config.json'
        save_json(path, config)

        with patch('rlfantasy.config.CONFIG_PATH', path):
            clear_rules_cache()
            assert get_salary_cap() == 12_000_000

    def test_invalid_config_file(self, tmp_path):
        path = tmp_path / 'league_config.json'
        path.write_text(json.dumps({'salary_cap': 1}))
        with patch('rlfantasy.config.CONFIG_PATH', path):
            clear_rules_cache()
            with pytest.raises(ValueError, match='Schema validation failed'):
                get_rules()


class TestLeagueRulesSchema:
    """Tests for LeagueRules validation."""

    def test_rules_are_frozen(self):
        rules = default_rules()
        with pytest.raises(ValidationError):
            rules.salary_cap = 1

    def test_missing_base_points(self):
        data = default_rules().model_dump()
        del data['base_points']['saves']
        with pytest.raises(ValidationError, match='Missing base points for: saves'):
            LeagueRules(**data)

    def test_multiplier_below_one(self):
        data = default_rules().model_dump()
        data['role_multipliers']['striker']['goals'] = 0
        with pytest.raises(ValidationError, match='Invalid goals multiplier'):
            LeagueRules(**data)

    def test_active_limit_above_total_limit(self):
        data = default_rules().model_dump()
        data['max_active_per_source_team'] = 3
        with pytest.raises(ValidationError):
            LeagueRules(**data)

    def test_extra_fields_forbidden(self):
        data = default_rules().model_dump()
        data['bonus_round'] = True
        with pytest.raises(ValidationError):
            LeagueRules(**data)


class TestJsonHelpers:
    """Tests for load_json / save_json."""

    def test_save_and_load_with_schema(self, tmp_path):
        path = tmp_path / 'nested' / 'rosters.json'
        save_json(path, RostersFile(rosters=[]))
        assert load_json(path, schema=RostersFile).rosters == []
        assert not (tmp_path / 'nested' / 'rosters.json.tmp').exists()

    def test_schema_failure_is_value_error(self, tmp_path):
        path = tmp_path / 'rosters.json'
        path.write_text(json.dumps({'rosters': [{'team_id': ''}]}))
        with pytest.raises(ValueError, match='Schema validation failed'):
            load_json(path, schema=RostersFile)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / 'nope.json')

    def test_default_only_for_missing_file(self, tmp_path):
        assert load_json_or_default(tmp_path / 'nope.json', {'ok': True}) == {'ok': True}

        path = tmp_path / 'broken.json'
        path.write_text('{not json')
        with pytest.raises(json.JSONDecodeError):
            load_json_or_default(path, {})


class TestLoggingSetup:
    """Tests for job logging setup."""

    @pytest.fixture(autouse=True)
    def reset_logger(self):
        yield
        logger = logging.getLogger('rlfantasy')
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []
        logger.setLevel(logging.NOTSET)

    def test_audit_log_path(self):
        path = audit_log_path(Path('data/logs'), 'publish', week=3)
        assert path.parent == Path('data/logs')
        assert path.name.startswith('publish_week3_')
        assert path.suffix == '.log'

    def test_audit_file_keeps_debug_records(self, tmp_path):
        """The console stays at INFO while the audit file records substitutions."""
        logger = setup_logging(tmp_path / 'logs', job='publish', week=1)
        logging.getLogger('rlfantasy.scorer').debug('sub-2 filled goalkeeper')

        console, audit = logger.handlers
        assert console.level == logging.INFO
        assert audit.level == logging.DEBUG

        log_files = list((tmp_path / 'logs').glob('publish_week1_*.log'))
        assert len(log_files) == 1
        audit.flush()
        assert 'sub-2 filled goalkeeper' in log_files[0].read_text()

    def test_console_only(self, tmp_path):
        logger = setup_logging(tmp_path / 'logs', console_level=logging.WARNING, log_to_file=False)
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert not (tmp_path / 'logs').exists()
