"""JSON-file league store: players, rosters, weeks, stats, scores and transfers.

Layout under the data directory:

    players.json
    rosters.json
    weeks.json
    transfers.json
    stats/week_{N}.json
    scores/week_{N}.json
"""

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, Optional

from .config import get_rules
from .exceptions import PlayerInUseError
from .models import (
    MutationResult,
    Player,
    PlayerWeekStats,
    Roster,
    SlotAssignment,
    TeamScore,
    Transfer,
)
from .schemas import (
    LeagueRules,
    PlayerRecord,
    PlayersFile,
    RosterRecord,
    RostersFile,
    SlotRecord,
    TransferRecord,
    TransfersFile,
    WeekRecord,
    WeeksFile,
    WeekStatsFile,
)
from .utils import load_json, load_json_or_default, save_json
from .validators import check_unplayed_stats, validate_week_stats
from .week import Week

logger = logging.getLogger('rlfantasy.store')


def player_from_record(record) -> Player:
    return Player(
        id=record.id,
        name=record.name,
        team=record.team,
        price=record.price,
        is_active=record.is_active,
        aliases=tuple(record.aliases),
    )


def roster_from_record(record: RosterRecord, players: dict[str, Player]) -> Roster:
    """Build a Roster from its stored record, resolving player ids."""
    slots = []
    for slot in record.slots:
        if slot.player_id not in players:
            raise ValueError(f'Roster {record.team_id} references unknown player: {slot.player_id}')
        slots.append(
            SlotAssignment(
                player=players[slot.player_id],
                slot_type=slot.slot_type,
                role=slot.role,
                sub_order=slot.sub_order,
                purchase_price=slot.purchase_price,
            )
        )
    return Roster(
        team_id=record.team_id,
        name=record.name,
        owner=record.owner,
        budget_remaining=record.budget_remaining,
        slots=tuple(slots),
        created_in_week=record.created_in_week,
    )


def player_to_record(player: Player) -> PlayerRecord:
    return PlayerRecord(
        id=player.id,
        name=player.name,
        team=player.team,
        price=player.price,
        is_active=player.is_active,
        aliases=list(player.aliases),
    )


def roster_to_record(roster: Roster) -> RosterRecord:
    return RosterRecord(
        team_id=roster.team_id,
        name=roster.name,
        owner=roster.owner,
        budget_remaining=roster.budget_remaining,
        created_in_week=roster.created_in_week,
        slots=[
            SlotRecord(
                player_id=s.player_id,
                slot_type=s.slot_type,
                role=s.role,
                sub_order=s.sub_order,
                purchase_price=s.purchase_price,
            )
            for s in roster.slots
        ],
    )


class LeagueStore:
    """
    League data stored as JSON files.

    Roster mutations go through mutate_roster, which holds a per-team lock for
    the whole read-check-write so two concurrent requests cannot both pass the
    constraint check against the same stale roster. Week phase changes, stats
    saves and publishing all hold the per-week lock (see week_lock), so stats
    cannot be written once the week has been locked.

    Stats are validated against the store's rules, which default to the
    configured ruleset from get_rules().
    """

    def __init__(self, data_dir: str | Path, rules: Optional[LeagueRules] = None):
        self.data_dir = Path(data_dir)
        self.rules = rules or get_rules()
        self._guard = threading.Lock()
        self._files_lock = threading.RLock()
        self._team_locks: dict[str, threading.Lock] = {}
        self._week_locks: dict[int, threading.RLock] = {}

    @property
    def players_path(self) -> Path:
        return self.data_dir / 'players.json'

    @property
    def rosters_path(self) -> Path:
        return self.data_dir / 'rosters.json'

    @property
    def weeks_path(self) -> Path:
        return self.data_dir / 'weeks.json'

    @property
    def transfers_path(self) -> Path:
        return self.data_dir / 'transfers.json'

    def stats_path(self, week_number: int) -> Path:
        return self.data_dir / 'stats' / f'week_{week_number}.json'

    def scores_path(self, week_number: int) -> Path:
        return self.data_dir / 'scores' / f'week_{week_number}.json'

    def team_lock(self, team_id: str) -> threading.Lock:
        with self._guard:
            return self._team_locks.setdefault(team_id, threading.Lock())

    def week_lock(self, week_number: int) -> threading.RLock:
        """
        Mutex that serializes phase changes, stats saves and publication for a week.

        Re-entrant, so a publisher holding it can still save the week's phase.
        """
        with self._guard:
            return self._week_locks.setdefault(week_number, threading.RLock())

    # Players

    def load_players(self) -> dict[str, Player]:
        data = load_json(self.players_path, schema=PlayersFile)
        return {record.id: player_from_record(record) for record in data.players}

    def get_player(self, player_id: str) -> Player:
        players = self.load_players()
        if player_id not in players:
            raise KeyError(f'Player not found: {player_id}')
        return players[player_id]

    def save_player(self, player: Player) -> None:
        """
        Insert a player, or replace an existing one's price, status and details.

        Price changes never touch rosters: slots keep the price that was paid.
        """
        with self._files_lock:
            players = self.load_players() if self.players_path.exists() else {}
            action = 'Updated' if player.id in players else 'Added'
            players[player.id] = player
            records = [player_to_record(p) for p in players.values()]
            save_json(self.players_path, PlayersFile(players=records))
        logger.info(f'{action} player {player.name} ({player.id}), price {player.price:,}')

    def delete_player(self, player_id: str) -> None:
        """
        Delete a player who is not on any roster.

        Raises:
            KeyError: If the player does not exist
            PlayerInUseError: If a roster slot still references the player
        """
        with self._files_lock:
            players = self.load_players()
            if player_id not in players:
                raise KeyError(f'Player not found: {player_id}')

            owners = [
                record.team_id
                for record in self._load_roster_records()
                if any(slot.player_id == player_id for slot in record.slots)
            ]
            if owners:
                raise PlayerInUseError(
                    f'Cannot delete {players[player_id].name}: on roster of {", ".join(owners)}'
                )

            del players[player_id]
            records = [player_to_record(p) for p in players.values()]
            save_json(self.players_path, PlayersFile(players=records))
        logger.info(f'Deleted player {player_id}')

    # Rosters

    def _load_roster_records(self) -> list[RosterRecord]:
        data = load_json_or_default(self.rosters_path, RostersFile(rosters=[]), schema=RostersFile)
        return data.rosters

    def list_rosters(self) -> list[Roster]:
        players = self.load_players()
        return [roster_from_record(r, players) for r in self._load_roster_records()]

    def get_roster(self, team_id: str) -> Roster:
        players = self.load_players()
        for record in self._load_roster_records():
            if record.team_id == team_id:
                return roster_from_record(record, players)
        raise KeyError(f'Roster not found: {team_id}')

    def save_roster(self, roster: Roster) -> None:
        """
        Insert or replace a roster.

        Raises:
            KeyError: If a slot references a player that no longer exists
        """
        with self._files_lock:
            players = self.load_players()
            missing = [s.player_id for s in roster.slots if s.player_id not in players]
            if missing:
                raise KeyError(f'Roster {roster.team_id} references unknown player: {missing[0]}')
            records = [r for r in self._load_roster_records() if r.team_id != roster.team_id]
            records.append(roster_to_record(roster))
            save_json(self.rosters_path, RostersFile(rosters=records))

    def mutate_roster(
        self, team_id: str, mutation: Callable[[Roster], MutationResult]
    ) -> MutationResult:
        """
        Apply a roster mutation atomically.

        The current roster is read, passed to mutation, and the result is
        persisted only if accepted. Transfers are appended to the log.

        Example:
            store.mutate_roster('team-1', lambda r: swap_players(r, 'p1', 'p4'))
        """
        with self.team_lock(team_id):
            roster = self.get_roster(team_id)
            result = mutation(roster)
            if not result.valid:
                return result
            self.save_roster(result.roster)
            if result.transfer is not None:
                self.append_transfer(result.transfer)
            return result

    # Weeks

    def list_weeks(self) -> list[Week]:
        data = load_json_or_default(self.weeks_path, WeeksFile(weeks=[]), schema=WeeksFile)
        return [
            Week(
                week_number=r.week_number,
                phase=r.phase,
                transfer_window_closes_at=r.transfer_window_closes_at,
            )
            for r in data.weeks
        ]

    def get_week(self, week_number: int) -> Week:
        for week in self.list_weeks():
            if week.week_number == week_number:
                return week
        raise KeyError(f'Week not found: {week_number}')

    def save_week(self, week: Week) -> None:
        """Persist a week's phase under its week lock."""
        with self.week_lock(week.week_number), self._files_lock:
            weeks = [w for w in self.list_weeks() if w.week_number != week.week_number]
            weeks.append(week)
            weeks.sort(key=lambda w: w.week_number)
            records = [
                WeekRecord(
                    week_number=w.week_number,
                    phase=w.phase,
                    transfer_window_closes_at=w.transfer_window_closes_at,
                )
                for w in weeks
            ]
            save_json(self.weeks_path, WeeksFile(weeks=records))

    # Stats

    def get_week_stats(self, week_number: int) -> dict[str, PlayerWeekStats]:
        """Resolved stats for a week, keyed by player id (empty if none saved)."""
        path = self.stats_path(week_number)
        if not path.exists():
            return {}
        data = load_json(path, schema=WeekStatsFile)
        return {
            r.player_id: PlayerWeekStats(
                player_id=r.player_id,
                games_played=r.games_played,
                goals=r.goals,
                assists=r.assists,
                saves=r.saves,
                shots=r.shots,
                demos_received=r.demos_received,
            )
            for r in data.stats
        }

    def save_week_stats(self, week_number: int, stats: Iterable[PlayerWeekStats]) -> None:
        """
        Save resolved stats for a week, replacing any previous entry.

        Raises:
            KeyError: If the week does not exist
            WeekStateError: If the week's stats are locked
            ValueError: If the stats fail validation
        """
        stats = list(stats)
        with self.week_lock(week_number):
            week = self.get_week(week_number)
            week.require_stats_editable()

            errors = validate_week_stats(stats, self.rules)
            if errors:
                raise ValueError(f'Invalid stats for week {week_number}: {"; ".join(errors)}')

            data = WeekStatsFile(
                week=week_number,
                stats=[
                    {
                        'player_id': s.player_id,
                        'games_played': s.games_played,
                        **s.totals().as_dict(),
                    }
                    for s in stats
                ],
            )
            save_json(self.stats_path(week_number), data)
            logger.info(f'Saved stats for {len(stats)} players in week {week_number}')
            for warning in check_unplayed_stats(stats):
                logger.warning(warning)

    # Transfers

    def load_transfers(self) -> list[TransferRecord]:
        data = load_json_or_default(
            self.transfers_path, TransfersFile(), schema=TransfersFile
        )
        return data.transfers

    def append_transfer(self, transfer: Transfer) -> None:
        with self._files_lock:
            transfers = self.load_transfers()
            transfers.append(
                TransferRecord(
                    team_id=transfer.team_id,
                    week=transfer.week,
                    sold_player_id=transfer.sold_player_id,
                    sold_price=transfer.sold_price,
                    bought_player_id=transfer.bought_player_id,
                    bought_price=transfer.bought_price,
                    timestamp=datetime.now(timezone.utc).isoformat(),
                )
            )
            save_json(self.transfers_path, TransfersFile(transfers=transfers))

    # Scores

    def replace_week_scores(self, week_number: int, scores: list[TeamScore]) -> None:
        """Write a week's scores, fully replacing any previous publication."""
        data = {
            'week': week_number,
            'published_at': datetime.now(timezone.utc).isoformat(),
            'teams': [score.to_dict() for score in scores],
        }
        save_json(self.scores_path(week_number), data)

    def load_week_scores(self, week_number: int) -> list[dict]:
        path = self.scores_path(week_number)
        if not path.exists():
            return []
        return load_json(path).get('teams', [])
