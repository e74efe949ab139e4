"""
User Data Models

Contains the user account, its embedded profile and stats, and the
library helpers the routes build on.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .game_entry import GameEntry, GameStatus
from ..utils.helpers import isoformat, utcnow


def round_rating(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


@dataclass
class UserProfile:
    """Public profile data."""
    bio: str = ''
    favorite_genres: List[str] = field(default_factory=list)
    join_date: datetime = field(default_factory=utcnow)

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> 'UserProfile':
        doc = doc or {}
        return cls(
            bio=doc.get('bio') or '',
            favorite_genres=list(doc.get('favorite_genres') or []),
            join_date=doc.get('join_date') or utcnow(),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            'bio': self.bio,
            'favorite_genres': self.favorite_genres,
            'join_date': self.join_date,
        }


@dataclass
class UserStats:
    """Aggregate library statistics, derived from the library."""
    total_games: int = 0
    completed_games: int = 0
    average_rating: float = 0.0

    @classmethod
    def compute(cls, library: Iterable[GameEntry]) -> 'UserStats':
        """
        Recompute stats from scratch.

        The average covers completed entries that carry a user rating and is
        0 when there are none.
        """
        library = list(library)
        completed = [game for game in library if game.is_completed]
        ratings = [game.user_rating for game in completed if game.user_rating is not None]

        average = round_rating(sum(ratings) / len(ratings)) if ratings else 0.0
        return cls(
            total_games=len(library),
            completed_games=len(completed),
            average_rating=average,
        )

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> 'UserStats':
        doc = doc or {}
        return cls(
            total_games=doc.get('total_games', 0),
            completed_games=doc.get('completed_games', 0),
            average_rating=doc.get('average_rating', 0.0),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            'total_games': self.total_games,
            'completed_games': self.completed_games,
            'average_rating': self.average_rating,
        }

    def to_json(self) -> Dict[str, Any]:
        return {
            'totalGames': self.total_games,
            'completedGames': self.completed_games,
            'averageRating': self.average_rating,
        }


@dataclass
class User:
    """User account with an embedded, insertion-ordered game library."""
    id: Optional[str]
    username: str
    email: str
    password: str  # bcrypt hash
    profile: UserProfile = field(default_factory=UserProfile)
    stats: UserStats = field(default_factory=UserStats)
    game_library: List[GameEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def has_game(self, game_id: int) -> bool:
        return any(game.game_id == game_id for game in self.game_library)

    def get_game(self, game_id: int) -> Optional[GameEntry]:
        for game in self.game_library:
            if game.game_id == game_id:
                return game
        return None

    def add_game(self, entry: GameEntry) -> bool:
        """Append an entry; returns False if the game is already tracked."""
        if self.has_game(entry.game_id):
            return False
        self.game_library.append(entry)
        self.update_stats()
        return True

    def remove_game(self, game_id: int) -> Optional[GameEntry]:
        """Remove and return an entry, or None if it is not in the library."""
        for index, game in enumerate(self.game_library):
            if game.game_id == game_id:
                removed = self.game_library.pop(index)
                self.update_stats()
                return removed
        return None

    def update_stats(self) -> UserStats:
        self.stats = UserStats.compute(self.game_library)
        return self.stats

    def recently_completed(self, limit: int) -> List[GameEntry]:
        completed = [game for game in self.game_library if game.status is GameStatus.COMPLETED]
        completed.sort(key=lambda game: game.date_completed or datetime.min, reverse=True)
        return completed[:limit]

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'User':
        """Load a user from a MongoDB document (fields may be projected out)."""
        return cls(
            id=str(doc['_id']) if doc.get('_id') is not None else None,
            username=doc.get('username', ''),
            email=doc.get('email', ''),
            password=doc.get('password', ''),
            profile=UserProfile.from_document(doc.get('profile')),
            stats=UserStats.from_document(doc.get('stats')),
            game_library=[GameEntry.from_document(game) for game in doc.get('game_library') or []],
            created_at=doc.get('created_at') or utcnow(),
            updated_at=doc.get('updated_at') or utcnow(),
        )

    def to_document(self) -> Dict[str, Any]:
        """Stored form, without ``_id``."""
        return {
            'username': self.username,
            'email': self.email,
            'password': self.password,
            'profile': self.profile.to_document(),
            'stats': self.stats.to_document(),
            'game_library': [game.to_document() for game in self.game_library],
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    def to_auth_json(self) -> Dict[str, Any]:
        """Account summary returned by the auth endpoints."""
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'stats': self.stats.to_json(),
        }

    def to_profile_json(self) -> Dict[str, Any]:
        return {
            'username': self.username,
            'bio': self.profile.bio,
            'favoriteGenres': self.profile.favorite_genres,
            'joinDate': isoformat(self.profile.join_date),
            'stats': self.stats.to_json(),
        }

    def to_search_json(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'username': self.username,
            'profile': {
                'bio': self.profile.bio,
                'joinDate': isoformat(self.profile.join_date),
            },
            'stats': self.stats.to_json(),
        }

    def to_public_json(self, recent_limit: int) -> Dict[str, Any]:
        """Public profile with the most recently completed games."""
        public = self.to_profile_json()
        public['recentGames'] = [
            {
                'name': game.name,
                'userRating': game.user_rating,
                'dateCompleted': isoformat(game.date_completed),
                'background_image': game.background_image,
            }
            for game in self.recently_completed(recent_limit)
        ]
        return public
