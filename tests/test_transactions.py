"""Unit tests for roster mutations."""

import pytest

from rlfantasy.config import default_rules
from rlfantasy.models import Player, Roster, SlotAssignment
from rlfantasy.transactions import (
    add_player,
    create_roster,
    move_player,
    swap_players,
    transfer_player,
)
from rlfantasy.week import Week

THOR_A = Player(id='thor_a', name='Thor A', team='thor', price=2_000_000)
THOR_B = Player(id='thor_b', name='Thor B', team='thor', price=1_000_000)
THOR_C = Player(id='thor_c', name='Thor C', team='thor', price=1_500_000)
DUSTY_A = Player(id='dusty_a', name='Dusty A', team='dusty', price=2_000_000)
DUSTY_B = Player(id='dusty_b', name='Dusty B', team='dusty', price=800_000)
HAMAR_A = Player(id='hamar_a', name='Hamar A', team='hamar', price=2_000_000)
OMON_A = Player(id='omon_a', name='Omon A', team='omon', price=1_000_000)
STJARNAN_A = Player(id='stjarnan_a', name='Stjarnan A', team='stjarnan', price=500_000)
ESPORTS_A = Player(id='esports_a', name='354 A', team='354esports', price=3_000_000)
RETIRED = Player(id='retired', name='Retired', team='omon', price=100_000, is_active=False)

OPEN_WEEK = Week(week_number=2, phase='transfer-open')


def active(player, role):
    return SlotAssignment(player=player, slot_type='active', role=role)


def sub(player, order):
    return SlotAssignment(player=player, slot_type='substitute', sub_order=order)


def repriced(slot, price):
    player = Player(id=slot.player_id, name=slot.player.name, team=slot.player.team, price=price)
    return SlotAssignment(
        player=player, slot_type=slot.slot_type, role=slot.role, sub_order=slot.sub_order
    )


def lineup():
    return [
        active(THOR_A, 'striker'),
        active(DUSTY_A, 'midfield'),
        active(HAMAR_A, 'goalkeeper'),
        sub(THOR_B, 1),
        sub(OMON_A, 2),
        sub(STJARNAN_A, 3),
    ]


@pytest.fixture
def roster():
    result = create_roster('t1', 'Team One', 'owner1', lineup())
    assert result.valid
    return result.roster


class TestCreateRoster:
    """Tests for roster lock-in."""

    def test_budget_deducted(self, roster):
        assert roster.budget_remaining == 10_000_000 - 8_500_000
        assert roster.find('thor_a').purchase_price == 2_000_000

    def test_records_creation_week(self):
        result = create_roster('t1', 'Team One', 'owner1', lineup(), week=Week(week_number=1))
        assert result.roster.created_in_week == 1

    def test_over_salary_cap(self):
        expensive = [repriced(s, 2_000_000) for s in lineup()]
        result = create_roster('t1', 'Team One', 'owner1', expensive)
        assert not result.valid
        assert 'over the 10,000,000 budget' in result.reason

    def test_incomplete_roster(self):
        result = create_roster('t1', 'Team One', 'owner1', lineup()[:5])
        assert not result.valid
        assert 'need 6' in result.reason

    def test_stacking_limit(self):
        slots = lineup()
        slots[5] = sub(THOR_C, 3)
        result = create_roster('t1', 'Team One', 'owner1', slots)
        assert not result.valid
        assert result.reason == 'Too many players from Thor: 3 (max 2)'

    def test_inactive_player(self):
        slots = lineup()
        slots[4] = sub(RETIRED, 2)
        result = create_roster('t1', 'Team One', 'owner1', slots)
        assert not result.valid
        assert 'not available' in result.reason

    def test_drafting_closed(self):
        result = create_roster(
            't1', 'Team One', 'owner1', lineup(), week=Week(week_number=3, phase='stats-locked')
        )
        assert not result.valid
        assert 'closed' in result.reason

    def test_malformed_slot(self):
        slots = lineup()
        slots[0] = SlotAssignment(player=THOR_A, slot_type='active', role='winger')
        result = create_roster('t1', 'Team One', 'owner1', slots)
        assert not result.valid
        assert 'Invalid active slot' in result.reason

    def test_two_substitute_league(self):
        """With two substitute slots a five-player roster is complete."""
        rules = default_rules().model_copy(update={'substitute_slots': 2})
        result = create_roster('t1', 'Team One', 'owner1', lineup()[:5], rules=rules)
        assert result.valid

        result = create_roster('t1', 'Team One', 'owner1', lineup(), rules=rules)
        assert not result.valid
        assert 'Invalid substitute slot' in result.reason


class TestAddPlayer:
    """Tests for drafting into a partial roster."""

    @pytest.fixture
    def partial(self):
        return Roster(
            team_id='t1',
            name='Team One',
            budget_remaining=2_500_000,
            slots=(
                SlotAssignment(player=THOR_A, slot_type='active', role='striker', purchase_price=2_000_000),
            ),
        )

    def test_add_substitute(self, partial):
        result = add_player(partial, THOR_B, 'substitute', sub_order=1)
        assert result.valid
        assert result.roster.budget_remaining == 1_500_000
        assert result.roster.find('thor_b').label == 'sub-1'
        # input roster untouched
        assert len(partial.slots) == 1

    def test_second_active_from_team(self, partial):
        result = add_player(partial, THOR_B, 'active', role='goalkeeper')
        assert not result.valid
        assert 'active player from Thor' in result.reason

    def test_slot_taken(self, partial):
        result = add_player(partial, DUSTY_A, 'active', role='striker')
        assert not result.valid
        assert 'already filled' in result.reason

    def test_not_enough_budget(self, partial):
        result = add_player(partial, ESPORTS_A, 'active', role='midfield')
        assert not result.valid
        assert 'Not enough budget' in result.reason

    def test_invalid_sub_order(self, partial):
        result = add_player(partial, OMON_A, 'substitute', sub_order=4)
        assert not result.valid


class TestTransferPlayer:
    """Tests for transfers."""

    def test_transfer(self, roster):
        result = transfer_player(roster, 'omon_a', DUSTY_B, OPEN_WEEK)
        assert result.valid
        new = result.roster
        assert new.find('omon_a') is None
        slot = new.find('dusty_b')
        assert slot.label == 'sub-2'
        assert slot.purchase_price == 800_000
        assert new.budget_remaining == 1_500_000 + 1_000_000 - 800_000
        # input roster untouched
        assert roster.find('omon_a') is not None

    def test_transfer_over_budget(self, roster):
        result = transfer_player(roster, 'omon_a', ESPORTS_A, OPEN_WEEK)
        assert not result.valid
        assert 'Not enough budget for 354 A' in result.reason

    def test_transfer_budget_and_record(self, roster):
        result = transfer_player(roster, 'dusty_a', ESPORTS_A, OPEN_WEEK)
        assert result.valid
        assert result.roster.budget_remaining == 1_500_000 + 2_000_000 - 3_000_000
        assert result.transfer.sold_player_id == 'dusty_a'
        assert result.transfer.sold_price == 2_000_000
        assert result.transfer.bought_player_id == 'esports_a'
        assert result.transfer.bought_price == 3_000_000
        assert result.transfer.week == 2

    def test_refund_uses_price_paid(self, roster):
        """The sold player is refunded at purchase price, not current price."""
        discounted = roster.with_slots(
            [
                SlotAssignment(
                    player=s.player, slot_type=s.slot_type, role=s.role, sub_order=s.sub_order,
                    purchase_price=500_000 if s.player_id == 'dusty_a' else s.purchase_price,
                )
                for s in roster.slots
            ]
        )
        result = transfer_player(discounted, 'dusty_a', ESPORTS_A, OPEN_WEEK)
        assert not result.valid
        assert 'Not enough budget' in result.reason

    def test_window_closed(self, roster):
        result = transfer_player(roster, 'omon_a', STJARNAN_A, Week(week_number=2, phase='transfer-closed'))
        assert not result.valid
        assert 'transfer window for week 2 is closed' in result.reason

    def test_sold_player_not_on_roster(self, roster):
        result = transfer_player(roster, 'ghost', ESPORTS_A, OPEN_WEEK)
        assert not result.valid
        assert 'not found' in result.reason.lower()

    def test_same_team_replacement(self, roster):
        """Replacing a Thor active with another Thor player is one atomic check."""
        result = transfer_player(roster, 'thor_a', THOR_C, OPEN_WEEK)
        assert result.valid
        assert result.roster.find('thor_c').label == 'striker'

    def test_stacking_rejected(self, roster):
        """Buying a third Thor player is rejected with the team named."""
        result = transfer_player(roster, 'omon_a', THOR_C, OPEN_WEEK)
        assert not result.valid
        assert 'already have 2 players from Thor' in result.reason

    def test_buying_player_already_owned(self, roster):
        result = transfer_player(roster, 'omon_a', DUSTY_A, OPEN_WEEK)
        assert not result.valid
        assert 'already on your roster' in result.reason

    def test_inactive_player(self, roster):
        result = transfer_player(roster, 'omon_a', RETIRED, OPEN_WEEK)
        assert not result.valid
        assert 'not available' in result.reason

    def test_transfer_for_same_player_rejected(self, roster):
        """Selling and rebuying the same player would just reprice the slot."""
        cheaper = Player(id='dusty_a', name='Dusty A', team='dusty', price=500_000)
        result = transfer_player(roster, 'dusty_a', cheaper, OPEN_WEEK)
        assert not result.valid
        assert result.reason == 'Cannot transfer Dusty A for themselves.'
        assert result.transfer is None


class TestSwapAndMove:
    """Tests for swaps and moves."""

    def test_swap_actives(self, roster):
        result = swap_players(roster, 'thor_a', 'hamar_a')
        assert result.valid
        assert result.roster.find('thor_a').label == 'goalkeeper'
        assert result.roster.find('hamar_a').label == 'striker'

    def test_swap_active_and_sub(self, roster):
        result = swap_players(roster, 'dusty_a', 'omon_a')
        assert result.valid
        assert result.roster.find('dusty_a').label == 'sub-2'
        assert result.roster.find('omon_a').label == 'midfield'
        assert result.roster.find('omon_a').is_active

    def test_swap_rejected(self, roster):
        result = swap_players(roster, 'thor_b', 'dusty_a')
        assert not result.valid
        assert result.roster is None

    def test_self_swap_rejected(self, roster):
        assert not swap_players(roster, 'omon_a', 'omon_a').valid

    def test_move_to_empty_slot(self, roster):
        partial = roster.with_slots([s for s in roster.slots if s.player_id != 'dusty_a'])
        result = move_player(partial, 'omon_a', 'active', role='midfield')
        assert result.valid
        moved = result.roster.find('omon_a')
        assert (moved.slot_type, moved.role, moved.sub_order) == ('active', 'midfield', None)

    def test_move_blocked_by_stacking(self, roster):
        partial = roster.with_slots([s for s in roster.slots if s.player_id != 'dusty_a'])
        result = move_player(partial, 'thor_b', 'active', role='midfield')
        assert not result.valid
        assert 'Thor' in result.reason

    def test_move_to_occupied_slot(self, roster):
        result = move_player(roster, 'omon_a', 'substitute', sub_order=1)
        assert not result.valid
        assert 'not empty' in result.reason

    def test_move_to_own_slot_rejected(self, roster):
        result = move_player(roster, 'omon_a', 'substitute', sub_order=2)
        assert not result.valid
        assert 'already in the sub-2 slot' in result.reason

    def test_move_player_not_found(self, roster):
        result = move_player(roster, 'ghost', 'active', role='striker')
        assert not result.valid

    def test_custom_rules(self, roster):
        """A looser ruleset allows two active players from one team."""
        rules = default_rules().model_copy(update={'max_active_per_source_team': 2})
        partial = roster.with_slots([s for s in roster.slots if s.player_id != 'dusty_a'])
        assert move_player(partial, 'thor_b', 'active', role='midfield', rules=rules).valid
