"""Roster mutations: draft lock-in, draft picks, transfers, swaps and moves.

Each function takes the current roster snapshot and returns a MutationResult.
An accepted result carries the new roster (and, for transfers, the audit
record) for the caller to persist; a rejected result carries the reason to
show the user. Nothing here writes anywhere.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from .config import get_rules
from .constants import ROLES, SLOT_ACTIVE, SLOT_SUBSTITUTE
from .constraints import (
    can_add_player,
    can_move_to_empty_slot,
    can_swap_players,
    validate_roster_constraints,
)
from .models import MutationResult, Player, Roster, SlotAssignment, Transfer, slot_label
from .schemas import LeagueRules
from .validators import validate_roster_shape
from .week import Week

logger = logging.getLogger('rlfantasy.transactions')


def _reject(roster_id: str, reason: str) -> MutationResult:
    logger.info(f'Rejected mutation for {roster_id}: {reason}')
    return MutationResult.reject(reason)


def _check_slot_identity(
    slot_type: str, role: Optional[str], sub_order: Optional[int], rules: LeagueRules
) -> Optional[str]:
    """Return an error message if the slot identity is malformed."""
    if slot_type == SLOT_ACTIVE:
        if role not in ROLES or sub_order is not None:
            return f'Invalid active slot: role={role}, sub_order={sub_order}'
    elif slot_type == SLOT_SUBSTITUTE:
        if sub_order not in rules.sub_orders or role is not None:
            return f'Invalid substitute slot: role={role}, sub_order={sub_order}'
    else:
        return f'Invalid slot type: {slot_type}'
    return None


def create_roster(
    team_id: str,
    name: str,
    owner: str,
    assignments: Sequence[SlotAssignment],
    rules: Optional[LeagueRules] = None,
    week: Optional[Week] = None,
) -> MutationResult:
    """
    Lock in a new, complete roster.

    Each player is bought at their current price. The roster must fill every
    slot, fit under the salary cap, contain only active players and satisfy
    the stacking limits.

    Args:
        team_id: Fantasy team id
        name: Team display name
        owner: Owning user
        assignments: One assignment per slot
        rules: League rules (default: configured ruleset)
        week: Week the roster is created in; drafting must be open

    Returns:
        MutationResult with the new roster on acceptance
    """
    rules = rules or get_rules()

    if week is not None and not week.can_draft:
        return _reject(team_id, f'Team creation is closed for week {week.week_number}.')

    for slot in assignments:
        error = _check_slot_identity(slot.slot_type, slot.role, slot.sub_order, rules)
        if error:
            return _reject(team_id, error)
        if not slot.player.is_active:
            return _reject(team_id, f'{slot.player.name} is not available.')

    slots = tuple(replace(s, purchase_price=s.player.price) for s in assignments)
    total_cost = sum(s.purchase_price for s in slots)
    roster = Roster(
        team_id=team_id,
        name=name,
        owner=owner,
        budget_remaining=rules.salary_cap - total_cost,
        slots=slots,
        created_in_week=week.week_number if week is not None else None,
    )

    if total_cost > rules.salary_cap:
        return _reject(
            team_id, f'Team costs {total_cost:,}, which is over the {rules.salary_cap:,} budget.'
        )

    errors = validate_roster_shape(roster, rules)
    if errors:
        return _reject(team_id, errors[0])

    result = validate_roster_constraints(roster, rules)
    if not result.valid:
        return _reject(team_id, result.reason)

    logger.info(f'Created roster {team_id} ({name}), budget remaining {roster.budget_remaining:,}')
    return MutationResult.accept(roster)


def add_player(
    roster: Roster,
    player: Player,
    slot_type: str,
    role: Optional[str] = None,
    sub_order: Optional[int] = None,
    rules: Optional[LeagueRules] = None,
) -> MutationResult:
    """
    Draft a player into a vacant slot of a roster that is still being built.

    The player is bought at their current price out of the remaining budget.
    """
    rules = rules or get_rules()

    error = _check_slot_identity(slot_type, role, sub_order, rules)
    if error:
        return _reject(roster.team_id, error)

    label = slot_label(slot_type, role, sub_order)
    if roster.slot_at(slot_type, role, sub_order) is not None:
        return _reject(roster.team_id, f'The {label} slot is already filled.')

    if not player.is_active:
        return _reject(roster.team_id, f'{player.name} is not available.')

    if player.price > roster.budget_remaining:
        return _reject(
            roster.team_id,
            f'Not enough budget for {player.name}: costs {player.price:,}, '
            f'{roster.budget_remaining:,} remaining.',
        )

    result = can_add_player(roster, player, slot_type, rules=rules)
    if not result.valid:
        return _reject(roster.team_id, result.reason)

    slot = SlotAssignment(
        player=player,
        slot_type=slot_type,
        role=role,
        sub_order=sub_order,
        purchase_price=player.price,
    )
    new_roster = replace(
        roster,
        slots=roster.slots + (slot,),
        budget_remaining=roster.budget_remaining - player.price,
    )
    return MutationResult.accept(new_roster)


def transfer_player(
    roster: Roster,
    sold_player_id: str,
    bought: Player,
    week: Week,
    rules: Optional[LeagueRules] = None,
) -> MutationResult:
    """
    Sell a roster player and buy a replacement into the same slot.

    The sold player is refunded at the price paid for them; the bought player
    costs their current price. The stacking check leaves the sold player out
    of the counts, so the replacement is validated in a single step.

    Args:
        roster: Current roster
        sold_player_id: Player being sold
        bought: Player being bought
        week: Current week; its transfer window must be open
        rules: League rules (default: configured ruleset)

    Returns:
        MutationResult with the new roster and Transfer record on acceptance
    """
    rules = rules or get_rules()

    if not week.transfer_window_open:
        return _reject(roster.team_id, f'The transfer window for week {week.week_number} is closed.')

    sold = roster.find(sold_player_id)
    if sold is None:
        return _reject(roster.team_id, f'Player not found on roster: {sold_player_id}')

    if bought.id == sold_player_id:
        return _reject(roster.team_id, f'Cannot transfer {bought.name} for themselves.')

    if not bought.is_active:
        return _reject(roster.team_id, f'{bought.name} is not available.')

    new_budget = roster.budget_remaining + sold.purchase_price - bought.price
    if new_budget < 0:
        return _reject(
            roster.team_id,
            f'Not enough budget for {bought.name}: costs {bought.price:,}, '
            f'{roster.budget_remaining + sold.purchase_price:,} available after selling '
            f'{sold.player.name}.',
        )

    result = can_add_player(roster, bought, sold.slot_type, excluded_player_id=sold_player_id, rules=rules)
    if not result.valid:
        return _reject(roster.team_id, result.reason)

    slots = tuple(
        replace(s, player=bought, purchase_price=bought.price) if s.player_id == sold_player_id else s
        for s in roster.slots
    )
    new_roster = replace(roster, slots=slots, budget_remaining=new_budget)
    transfer = Transfer(
        team_id=roster.team_id,
        week=week.week_number,
        sold_player_id=sold_player_id,
        sold_price=sold.purchase_price,
        bought_player_id=bought.id,
        bought_price=bought.price,
    )

    logger.info(
        f'{roster.team_id} transferred {sold.player.name} -> {bought.name} '
        f'({sold.label}), budget {new_budget:,}'
    )
    return MutationResult.accept(new_roster, transfer)


def swap_players(
    roster: Roster,
    player1_id: str,
    player2_id: str,
    rules: Optional[LeagueRules] = None,
) -> MutationResult:
    """Exchange the slots (kind, role and sub order) of two roster players."""
    result = can_swap_players(roster, player1_id, player2_id, rules)
    if not result.valid:
        return _reject(roster.team_id, result.reason)

    first = roster.find(player1_id)
    second = roster.find(player2_id)

    slots = []
    for slot in roster.slots:
        if slot.player_id == player1_id:
            slot = replace(
                slot, slot_type=second.slot_type, role=second.role, sub_order=second.sub_order
            )
        elif slot.player_id == player2_id:
            slot = replace(
                slot, slot_type=first.slot_type, role=first.role, sub_order=first.sub_order
            )
        slots.append(slot)

    return MutationResult.accept(roster.with_slots(slots))


def move_player(
    roster: Roster,
    player_id: str,
    slot_type: str,
    role: Optional[str] = None,
    sub_order: Optional[int] = None,
    rules: Optional[LeagueRules] = None,
) -> MutationResult:
    """Move a roster player into a vacant slot."""
    rules = rules or get_rules()

    current = roster.find(player_id)
    if current is None:
        return _reject(roster.team_id, f'Player not found on roster: {player_id}')

    error = _check_slot_identity(slot_type, role, sub_order, rules)
    if error:
        return _reject(roster.team_id, error)

    label = slot_label(slot_type, role, sub_order)
    if current.label == label:
        return _reject(roster.team_id, f'{current.player.name} is already in the {label} slot.')

    if roster.slot_at(slot_type, role, sub_order) is not None:
        return _reject(roster.team_id, f'The {label} slot is not empty.')

    result = can_move_to_empty_slot(roster, player_id, slot_type, rules)
    if not result.valid:
        return _reject(roster.team_id, result.reason)

    slots = [
        replace(s, slot_type=slot_type, role=role, sub_order=sub_order) if s.player_id == player_id else s
        for s in roster.slots
    ]
    return MutationResult.accept(roster.with_slots(slots))
