"""Constants and mappings for the Rocket League fantasy league."""

# Statistics tracked per player per week, in scoring order
STATS = ('goals', 'assists', 'saves', 'shots', 'demos_received')

# Base points for each stat
BASE_POINTS = {
    'goals': 50,
    'assists': 35,
    'saves': 25,
    'shots': 15,
    'demos_received': -15,
}

# Active roles, in the order they are scored
ROLES = ('striker', 'midfield', 'goalkeeper')

# Role bonus multipliers (2 = double points)
ROLE_MULTIPLIERS = {
    'striker': {'goals': 2, 'assists': 1, 'saves': 1, 'shots': 1, 'demos_received': 1},
    'midfield': {'goals': 1, 'assists': 2, 'saves': 1, 'shots': 1, 'demos_received': 1},
    'goalkeeper': {'goals': 1, 'assists': 1, 'saves': 2, 'shots': 1, 'demos_received': 1},
}

# Slot kinds
SLOT_ACTIVE = 'active'
SLOT_SUBSTITUTE = 'substitute'
SLOT_KINDS = (SLOT_ACTIVE, SLOT_SUBSTITUTE)

# Initial budget for fantasy teams
SALARY_CAP = 10_000_000

# Number of games in a Bo5 series
GAMES_IN_SERIES = 5

# Team size constraints
TEAM_SIZE = {
    'total': 6,
    'active': 3,
    'substitutes': 3,
}

# Stacking limits per real-world team
MAX_PER_SOURCE_TEAM = 2
MAX_ACTIVE_PER_SOURCE_TEAM = 1

# Source team id to display name
SOURCE_TEAM_NAMES = {
    '354esports': '354 Esports',
    'dusty': 'Dusty',
    'hamar': 'Hamar',
    'omon': 'Omon',
    'thor': 'Thor',
    'stjarnan': 'Stjarnan',
}

SOURCE_TEAMS = tuple(SOURCE_TEAM_NAMES)

# Competition week phases, in lifecycle order
PHASE_DRAFT = 'draft'
PHASE_TRANSFER_OPEN = 'transfer-open'
PHASE_TRANSFER_CLOSED = 'transfer-closed'
PHASE_STATS_LOCKED = 'stats-locked'
PHASE_SCORES_PUBLISHED = 'scores-published'

WEEK_PHASES = (
    PHASE_DRAFT,
    PHASE_TRANSFER_OPEN,
    PHASE_TRANSFER_CLOSED,
    PHASE_STATS_LOCKED,
    PHASE_SCORES_PUBLISHED,
)

# Allowed phase transitions (publishing again from scores-published recomputes)
WEEK_TRANSITIONS = {
    PHASE_DRAFT: {PHASE_TRANSFER_OPEN},
    PHASE_TRANSFER_OPEN: {PHASE_TRANSFER_CLOSED},
    PHASE_TRANSFER_CLOSED: {PHASE_TRANSFER_OPEN, PHASE_STATS_LOCKED},
    PHASE_STATS_LOCKED: {PHASE_SCORES_PUBLISHED},
    PHASE_SCORES_PUBLISHED: {PHASE_SCORES_PUBLISHED},
}
