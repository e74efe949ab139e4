"""
Library Service

Business logic for a user's game library: adding, updating and removing
entries, listing with filter and sort, and the detailed stats view.
Every mutation recomputes the user's stats in full before it is saved.
"""

import datetime
import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from bson.objectid import ObjectId

from ..config.library_settings import (
    DEFAULT_SORT_KEY,
    GAME_STATUSES,
    RECENT_ACTIVITY_LIMIT,
    SORT_KEYS,
    TOP_GENRES_LIMIT,
)
from ..database import Database
from ..models.game_entry import GameEntry, GameStatus
from ..models.user import User
from ..utils.activity_logger import activity_logger
from ..utils.helpers import isoformat, utcnow

logger = logging.getLogger(__name__)

EPOCH = datetime.datetime(1970, 1, 1)

NOT_IN_LIBRARY = "Game not found in library"

SORT_FIELDS = {
    'name': lambda game: game.name.casefold(),
    'rating': lambda game: game.user_rating or 0,
    'dateAdded': lambda game: game.date_added,
    'dateCompleted': lambda game: game.date_completed or EPOCH,
}


def filter_library(games: List[GameEntry], status: Optional[str] = None) -> List[GameEntry]:
    """Entries with the given status, or all entries when status is empty."""
    if not status:
        return list(games)
    return [game for game in games if game.status.value == status]


def sort_library(games: List[GameEntry], sort_by: Optional[str] = None,
                 order: Optional[str] = None) -> List[GameEntry]:
    """
    Sort entries without touching the input list.

    Unknown sort keys fall back to the date added. Any order other than
    ``asc`` is descending. The sort is stable in both directions, so ties
    keep their library order.
    """
    key = SORT_FIELDS.get(sort_by or DEFAULT_SORT_KEY, SORT_FIELDS[DEFAULT_SORT_KEY])
    return sorted(games, key=key, reverse=(order != 'asc'))


def library_breakdown(user: User) -> Dict[str, Any]:
    """Per-status counts, top genres and recent additions."""
    games = user.game_library
    counts = Counter(game.status for game in games)

    genre_counts = Counter()
    for game in games:
        for genre in game.genres:
            name = genre.get('name')
            if name:
                genre_counts[name] += 1
    # most_common keeps first-seen order among equal counts
    top_genres = dict(genre_counts.most_common(TOP_GENRES_LIMIT))

    recent = sorted(games, key=lambda game: game.date_added, reverse=True)[:RECENT_ACTIVITY_LIMIT]

    return {
        'totalGames': len(games),
        'playing': counts[GameStatus.PLAYING],
        'completed': counts[GameStatus.COMPLETED],
        'dropped': counts[GameStatus.DROPPED],
        'planToPlay': counts[GameStatus.PLAN_TO_PLAY],
        'averageRating': user.stats.average_rating,
        'topGenres': top_genres,
        'recentActivity': [
            {
                'name': game.name,
                'status': game.status.value,
                'dateAdded': isoformat(game.date_added),
            }
            for game in recent
        ],
    }


class LibraryService:
    """
    Manages the game library embedded in each user document.

    Mutations re-read the user document, apply the change in memory and
    write the library and stats back with a single ``update_one``.
    """
    
    def __init__(self, database: Database):
        self.database = database
        self.users_collection = database.users
    
    def _load_user(self, user_id: str) -> Optional[User]:
        doc = self.users_collection.find_one({"_id": ObjectId(user_id)})
        return User.from_document(doc) if doc else None
    
    def _save_library(self, user: User) -> None:
        user.updated_at = utcnow()
        self.users_collection.update_one(
            {"_id": ObjectId(user.id)},
            {"$set": {
                "game_library": [game.to_document() for game in user.game_library],
                "stats": user.stats.to_document(),
                "updated_at": user.updated_at
            }}
        )
    
    def list_games(self, user: User, status: Optional[str] = None,
                   sort_by: Optional[str] = None, order: Optional[str] = None) -> Dict[str, Any]:
        """
        List library entries with optional status filter and sort.
        
        Args:
            user: Library owner
            status: One of the lifecycle statuses, or None for all
            sort_by: ``name``, ``rating``, ``dateAdded`` or ``dateCompleted``
            order: ``asc`` or ``desc``
            
        Returns:
            Dictionary with success status and the serialized entries
        """
        if status and status not in GAME_STATUSES:
            return {
                "success": False,
                "error": f"status must be one of: {', '.join(GAME_STATUSES)}",
                "status": 400
            }
        if sort_by not in SORT_KEYS:
            sort_by = DEFAULT_SORT_KEY
        
        games = sort_library(filter_library(user.game_library, status), sort_by, order)
        return {"success": True, "games": [game.to_json() for game in games]}
    
    def get_game(self, user: User, game_id: int) -> Dict[str, Any]:
        """Single entry by catalog id."""
        game = user.get_game(game_id)
        if game is None:
            return {"success": False, "error": NOT_IN_LIBRARY, "status": 404}
        return {"success": True, "game": game.to_json()}
    
    def add_game(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add a catalog game to the library.
        
        Args:
            user_id: Library owner
            data: Validated entry fields (``game_id``, ``name``, ``status``, metadata)
            
        Returns:
            Dictionary with success status and the stored entry, or error
        """
        user = self._load_user(user_id)
        if user is None:
            return {"success": False, "error": "User not found", "status": 404}
        
        entry = GameEntry.create(data)
        if not user.add_game(entry):
            return {"success": False, "error": "Game already in library", "status": 400}
        
        self._save_library(user)
        activity_logger.log_library_event(
            user.id, 'game_added', entry.game_id,
            status=entry.status.value, stats=user.stats.to_json()
        )
        
        return {
            "success": True,
            "message": "Game added to library",
            "game": entry.to_json()
        }
    
    def update_game(self, user_id: str, game_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge supplied fields into an entry and recompute stats.
        
        Args:
            user_id: Library owner
            game_id: Catalog id of the entry
            changes: Only the supplied fields (``status``, ``user_rating``, ``notes``)
            
        Returns:
            Dictionary with success status and the updated entry, or error
        """
        user = self._load_user(user_id)
        if user is None:
            return {"success": False, "error": "User not found", "status": 404}
        
        game = user.get_game(game_id)
        if game is None:
            return {"success": False, "error": NOT_IN_LIBRARY, "status": 404}
        
        previous_status = game.status
        game.apply_update(changes)
        user.update_stats()
        self._save_library(user)
        
        event = 'game_completed' if game.is_completed and previous_status is not GameStatus.COMPLETED else 'game_updated'
        activity_logger.log_library_event(
            user.id, event, game_id,
            fields=sorted(changes), stats=user.stats.to_json()
        )
        
        return {
            "success": True,
            "message": "Game updated successfully",
            "game": game.to_json()
        }
    
    def remove_game(self, user_id: str, game_id: int) -> Dict[str, Any]:
        """Remove an entry by catalog id."""
        user = self._load_user(user_id)
        if user is None:
            return {"success": False, "error": "User not found", "status": 404}
        
        if user.remove_game(game_id) is None:
            return {"success": False, "error": NOT_IN_LIBRARY, "status": 404}
        
        self._save_library(user)
        activity_logger.log_library_event(user.id, 'game_removed', game_id, stats=user.stats.to_json())
        
        return {"success": True, "message": "Game removed from library"}
    
    def get_stats(self, user: User) -> Dict[str, Any]:
        """Detailed library statistics."""
        return {"success": True, **library_breakdown(user)}


# Global service instance
_library_service = None


def get_library_service() -> Optional[LibraryService]:
    """Get the global library service instance."""
    return _library_service


def initialize_library_service(database: Database) -> LibraryService:
    """Initialize the global library service instance."""
    global _library_service
    _library_service = LibraryService(database)
    return _library_service
