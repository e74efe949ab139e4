"""
Game Library Entry Models

Contains the library entry data structure and its lifecycle status enum.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.library_settings import (
    STATUS_COMPLETED, STATUS_DROPPED, STATUS_PLANNED, STATUS_PLAYING
)
from ..utils.helpers import isoformat, utcnow


class GameStatus(Enum):
    """Lifecycle status of a game in a user's library."""
    PLAYING = STATUS_PLAYING
    COMPLETED = STATUS_COMPLETED
    DROPPED = STATUS_DROPPED
    PLAN_TO_PLAY = STATUS_PLANNED


@dataclass
class GameEntry:
    """
    A user's tracked record for one catalog game.

    Display metadata (name, image, release date, catalog rating, platforms,
    genres) is copied from the catalog when the entry is added and is never
    re-fetched. ``date_completed`` is set only while the status is completed.
    """
    game_id: int
    name: str
    status: GameStatus
    background_image: Optional[str] = None
    released: Optional[str] = None
    rating: Optional[float] = None
    platforms: List[Dict[str, Any]] = field(default_factory=list)
    genres: List[Dict[str, Any]] = field(default_factory=list)
    user_rating: Optional[float] = None
    date_added: datetime = field(default_factory=utcnow)
    date_completed: Optional[datetime] = None
    notes: str = ''

    @property
    def is_completed(self) -> bool:
        return self.status is GameStatus.COMPLETED

    def set_status(self, status: GameStatus, now: Optional[datetime] = None) -> None:
        """
        Move the entry to a new status, keeping the completion date in step.

        Entering completed stamps the completion date; leaving it clears the
        date. Staying completed keeps the original stamp.
        """
        was_completed = self.is_completed
        self.status = status
        if status is GameStatus.COMPLETED:
            if not was_completed or self.date_completed is None:
                self.date_completed = now or utcnow()
        else:
            self.date_completed = None

    def apply_update(self, changes: Dict[str, Any], now: Optional[datetime] = None) -> None:
        """
        Merge a partial update into the entry.

        Args:
            changes: Only the fields the caller supplied, keyed by attribute
                name (``status``, ``user_rating``, ``notes``)
            now: Timestamp to use if the update completes the game
        """
        if 'user_rating' in changes:
            self.user_rating = changes['user_rating']
        if 'notes' in changes:
            self.notes = changes['notes']
        if 'status' in changes:
            self.set_status(GameStatus(changes['status']), now)

    @classmethod
    def create(cls, data: Dict[str, Any], now: Optional[datetime] = None) -> 'GameEntry':
        """Build a fresh entry from validated add-to-library data."""
        now = now or utcnow()
        entry = cls(
            game_id=data['game_id'],
            name=data['name'],
            status=GameStatus(data['status']),
            background_image=data.get('background_image'),
            released=data.get('released'),
            rating=data.get('rating'),
            platforms=list(data.get('platforms') or []),
            genres=list(data.get('genres') or []),
            date_added=now,
        )
        if entry.is_completed:
            entry.date_completed = now
        return entry

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'GameEntry':
        """Load an entry from its stored (snake_case) form."""
        return cls(
            game_id=doc['game_id'],
            name=doc['name'],
            status=GameStatus(doc['status']),
            background_image=doc.get('background_image'),
            released=doc.get('released'),
            rating=doc.get('rating'),
            platforms=doc.get('platforms') or [],
            genres=doc.get('genres') or [],
            user_rating=doc.get('user_rating'),
            date_added=doc.get('date_added') or utcnow(),
            date_completed=doc.get('date_completed'),
            notes=doc.get('notes') or '',
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            'game_id': self.game_id,
            'name': self.name,
            'background_image': self.background_image,
            'released': self.released,
            'rating': self.rating,
            'platforms': self.platforms,
            'genres': self.genres,
            'status': self.status.value,
            'user_rating': self.user_rating,
            'date_added': self.date_added,
            'date_completed': self.date_completed,
            'notes': self.notes,
        }

    def to_json(self) -> Dict[str, Any]:
        """Serialize for API responses."""
        return {
            'gameId': self.game_id,
            'name': self.name,
            'background_image': self.background_image,
            'released': self.released,
            'rating': self.rating,
            'platforms': self.platforms,
            'genres': self.genres,
            'status': self.status.value,
            'userRating': self.user_rating,
            'dateAdded': isoformat(self.date_added),
            'dateCompleted': isoformat(self.date_completed),
            'notes': self.notes,
        }
