"""
User Service

Profile reads and edits, user search, and public profiles.
"""

import re
import logging
from typing import Any, Dict, List, Optional

from bson.objectid import ObjectId

from ..config.library_settings import RECENT_GAMES_LIMIT, USER_SEARCH_LIMIT, USER_SEARCH_MIN_LENGTH
from ..database import Database
from ..models.user import User
from ..utils.helpers import utcnow

logger = logging.getLogger(__name__)

# Never sent back to other users
PRIVATE_FIELDS = {"password": 0, "email": 0, "game_library": 0}


class UserService:
    """Read and edit user records other than credentials."""
    
    def __init__(self, database: Database):
        self.database = database
        self.users_collection = database.users
    
    def update_profile(self, user: User, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update bio and/or favourite genres.
        
        Args:
            user: The authenticated user
            changes: Supplied fields only (``bio``, ``favorite_genres``)
            
        Returns:
            Dictionary with success status and the updated profile
        """
        updates = {}
        if changes.get('bio') is not None:
            user.profile.bio = changes['bio']
            updates["profile.bio"] = user.profile.bio
        if changes.get('favorite_genres') is not None:
            # De-duplicate, keep first occurrence order
            user.profile.favorite_genres = list(dict.fromkeys(
                genre.strip() for genre in changes['favorite_genres'] if genre.strip()
            ))
            updates["profile.favorite_genres"] = user.profile.favorite_genres
        
        if updates:
            user.updated_at = utcnow()
            updates["updated_at"] = user.updated_at
            self.users_collection.update_one({"_id": ObjectId(user.id)}, {"$set": updates})
        
        return {
            "success": True,
            "message": "Profile updated successfully",
            "profile": user.to_profile_json()
        }
    
    def search_users(self, username: Optional[str], exclude_user_id: str) -> Dict[str, Any]:
        """
        Case-insensitive substring search on usernames.
        
        Args:
            username: Search text, at least three characters
            exclude_user_id: The caller, never part of the results
            
        Returns:
            Dictionary with success status and matching user summaries
        """
        if not username or len(username) < USER_SEARCH_MIN_LENGTH:
            return {
                "success": False,
                "error": f"Username must be at least {USER_SEARCH_MIN_LENGTH} characters",
                "status": 400
            }
        
        cursor = self.users_collection.find(
            {
                "username": {"$regex": re.escape(username), "$options": "i"},
                "_id": {"$ne": ObjectId(exclude_user_id)}
            },
            PRIVATE_FIELDS
        ).limit(USER_SEARCH_LIMIT)
        
        users: List[Dict[str, Any]] = [User.from_document(doc).to_search_json() for doc in cursor]
        return {"success": True, "users": users}
    
    def get_public_profile(self, username: str) -> Dict[str, Any]:
        """
        Public profile by exact username, with recently completed games.
        
        Returns:
            Dictionary with success status and profile or a 404 error
        """
        doc = self.users_collection.find_one({"username": username}, {"password": 0, "email": 0})
        if not doc:
            return {"success": False, "error": "User not found", "status": 404}
        
        return {
            "success": True,
            "profile": User.from_document(doc).to_public_json(RECENT_GAMES_LIMIT)
        }


# Global service instance
_user_service = None


def get_user_service() -> Optional[UserService]:
    """Get the global user service instance."""
    return _user_service


def initialize_user_service(database: Database) -> UserService:
    """Initialize the global user service instance."""
    global _user_service
    _user_service = UserService(database)
    return _user_service
