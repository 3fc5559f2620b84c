"""Roster constraint checks for per-source-team stacking limits.

A fantasy roster may hold at most ``max_per_source_team`` players from the same
real-world team, and at most ``max_active_per_source_team`` of those in active
slots. Every check here is pure: it looks at an in-memory roster snapshot and
returns a ConstraintResult, never raising for a rule violation.

Swap and move checks simulate the mutation and hand the simulated roster to
validate_roster_constraints, so the counting rules live in one place.
"""

from dataclasses import replace
from typing import Iterable, Optional

from .config import get_rules
from .constants import SLOT_ACTIVE
from .models import ConstraintResult, Player, Roster, SlotAssignment
from .schemas import LeagueRules


def count_players_from_team(slots: Iterable[SlotAssignment], team: str) -> int:
    """Count how many roster players come from a source team."""
    return sum(1 for s in slots if s.player.team == team)


def count_active_players_from_team(slots: Iterable[SlotAssignment], team: str) -> int:
    """Count how many active roster players come from a source team."""
    return sum(1 for s in slots if s.player.team == team and s.slot_type == SLOT_ACTIVE)


def can_add_player(
    roster: Roster,
    player: Player,
    slot_type: str,
    excluded_player_id: Optional[str] = None,
    rules: Optional[LeagueRules] = None,
) -> ConstraintResult:
    """
    Check whether a player can be added to a roster in a slot of the given kind.

    Args:
        roster: Current roster snapshot
        player: The player being added
        slot_type: 'active' or 'substitute'
        excluded_player_id: Player being sold/replaced; they are left out of
            the counts so "replace A with B" is checked in one step
        rules: League rules (default: configured ruleset)

    Returns:
        ConstraintResult; on rejection the reason names the limit and the team
    """
    rules = rules or get_rules()
    slots = list(roster.slots)

    if excluded_player_id is not None:
        if roster.find(excluded_player_id) is None:
            return ConstraintResult.reject(f'Player not found on roster: {excluded_player_id}')
        slots = [s for s in slots if s.player_id != excluded_player_id]

    if any(s.player_id == player.id for s in slots):
        return ConstraintResult.reject(f'{player.name} is already on your roster.')

    team_name = rules.team_display_name(player.team)
    max_total = rules.max_per_source_team
    max_active = rules.max_active_per_source_team

    if count_players_from_team(slots, player.team) >= max_total:
        return ConstraintResult.reject(
            f'You already have {max_total} players from {team_name}. '
            f'Maximum {max_total} allowed per RL team.'
        )

    if slot_type == SLOT_ACTIVE and count_active_players_from_team(slots, player.team) >= max_active:
        return ConstraintResult.reject(
            f'You already have an active player from {team_name}. '
            f'Only {max_active} active player per RL team allowed.'
        )

    return ConstraintResult.ok()


def validate_roster_constraints(
    roster: Roster, rules: Optional[LeagueRules] = None
) -> ConstraintResult:
    """
    Validate a whole roster against the stacking limits.

    Slots are grouped by source team and each group is checked against both
    the total and the active limit.
    """
    rules = rules or get_rules()

    team_counts: dict[str, dict[str, int]] = {}
    for slot in roster.slots:
        counts = team_counts.setdefault(slot.player.team, {'total': 0, 'active': 0})
        counts['total'] += 1
        if slot.slot_type == SLOT_ACTIVE:
            counts['active'] += 1

    for team, counts in team_counts.items():
        team_name = rules.team_display_name(team)
        if counts['total'] > rules.max_per_source_team:
            return ConstraintResult.reject(
                f'Too many players from {team_name}: {counts["total"]} '
                f'(max {rules.max_per_source_team})'
            )
        if counts['active'] > rules.max_active_per_source_team:
            return ConstraintResult.reject(
                f'Too many active players from {team_name}: {counts["active"]} '
                f'(max {rules.max_active_per_source_team})'
            )

    return ConstraintResult.ok()


def can_swap_players(
    roster: Roster,
    player1_id: str,
    player2_id: str,
    rules: Optional[LeagueRules] = None,
) -> ConstraintResult:
    """
    Check whether two roster players can exchange slots.

    Same-kind swaps (active/active, sub/sub) cannot change any team's counts
    and are always allowed. Cross-kind swaps are simulated and re-validated.
    A swap of a player with themselves is rejected.
    """
    player1 = roster.find(player1_id)
    player2 = roster.find(player2_id)

    if player1 is None or player2 is None:
        missing = player1_id if player1 is None else player2_id
        return ConstraintResult.reject(f'Player not found on roster: {missing}')

    if player1_id == player2_id:
        return ConstraintResult.reject('Cannot swap a player with themselves.')

    if player1.slot_type == player2.slot_type:
        return ConstraintResult.ok()

    simulated = []
    for slot in roster.slots:
        if slot.player_id == player1_id:
            slot = replace(
                slot, slot_type=player2.slot_type, role=player2.role, sub_order=player2.sub_order
            )
        elif slot.player_id == player2_id:
            slot = replace(
                slot, slot_type=player1.slot_type, role=player1.role, sub_order=player1.sub_order
            )
        simulated.append(slot)

    return validate_roster_constraints(roster.with_slots(simulated), rules)


def can_move_to_empty_slot(
    roster: Roster,
    player_id: str,
    target_slot_type: str,
    rules: Optional[LeagueRules] = None,
) -> ConstraintResult:
    """
    Check whether a player can move into a vacant slot of the given kind.

    Moves within the same kind only change role or sub order and are always
    allowed. Cross-kind moves are simulated and re-validated.
    """
    player = roster.find(player_id)
    if player is None:
        return ConstraintResult.reject(f'Player not found on roster: {player_id}')

    if player.slot_type == target_slot_type:
        return ConstraintResult.ok()

    simulated = [
        replace(s, slot_type=target_slot_type) if s.player_id == player_id else s
        for s in roster.slots
    ]
    return validate_roster_constraints(roster.with_slots(simulated), rules)
