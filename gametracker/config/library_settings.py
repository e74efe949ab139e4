"""
Library Configuration Constants Module

Domain rules for accounts and the per-user game library. Request validation,
the library model and the listing endpoints all read their limits from here.
"""

from typing import Final, Tuple

# Lifecycle statuses a library entry can be in
STATUS_PLAYING: Final[str] = 'playing'
STATUS_COMPLETED: Final[str] = 'completed'
STATUS_DROPPED: Final[str] = 'dropped'
STATUS_PLANNED: Final[str] = 'plan-to-play'

GAME_STATUSES: Final[Tuple[str, ...]] = (
    STATUS_PLAYING,
    STATUS_COMPLETED,
    STATUS_DROPPED,
    STATUS_PLANNED,
)

# Library listing
SORT_KEYS: Final[Tuple[str, ...]] = ('name', 'rating', 'dateAdded', 'dateCompleted')
DEFAULT_SORT_KEY: Final[str] = 'dateAdded'
DEFAULT_SORT_ORDER: Final[str] = 'desc'

# Entry limits
USER_RATING_MIN: Final[int] = 1
USER_RATING_MAX: Final[int] = 10
NOTES_MAX_LENGTH: Final[int] = 500

# Account limits
USERNAME_MIN_LENGTH: Final[int] = 3
USERNAME_MAX_LENGTH: Final[int] = 20
PASSWORD_MIN_LENGTH: Final[int] = 6
PASSWORD_MAX_LENGTH: Final[int] = 72
# bcrypt rejects longer input, so multi-byte characters count per byte
PASSWORD_MAX_BYTES: Final[int] = 72
BIO_MAX_LENGTH: Final[int] = 300

# Result sizes
USER_SEARCH_MIN_LENGTH: Final[int] = 3
USER_SEARCH_LIMIT: Final[int] = 10
RECENT_GAMES_LIMIT: Final[int] = 5
RECENT_ACTIVITY_LIMIT: Final[int] = 5
TOP_GENRES_LIMIT: Final[int] = 5
