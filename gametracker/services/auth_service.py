"""
Authentication Service

Handles user registration, login, password hashing, and JWT token
management using MongoDB for data storage.
"""

import bcrypt
import jwt
import datetime
import logging
from typing import Optional, Dict, Any
from bson.errors import InvalidId
from bson.objectid import ObjectId
from flask import current_app
from pymongo.errors import DuplicateKeyError

from ..config.library_settings import PASSWORD_MAX_BYTES
from ..database import Database
from ..models.user import User, UserProfile
from ..utils.helpers import utcnow

logger = logging.getLogger(__name__)

INVALID_TOKEN = "Token is not valid"


class AuthService:
    """
    Authentication service for handling user registration, login, and token management.
    """
    
    def __init__(self, database: Database, jwt_secret: str, bcrypt_rounds: int = 10):
        """
        Initialize the authentication service.
        
        Args:
            database: Connected database wrapper
            jwt_secret: Secret key for JWT token generation
            bcrypt_rounds: bcrypt work factor for new password hashes
        """
        if not jwt_secret:
            raise ValueError("JWT secret is not configured")
        self.database = database
        self.users_collection = database.users
        self.jwt_secret = jwt_secret
        self.bcrypt_rounds = bcrypt_rounds
    
    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.
        
        Args:
            password: Plain text password
            
        Returns:
            Hashed password as string
        """
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')
    
    def verify_password(self, password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.
        
        Args:
            password: Plain text password
            hashed_password: Stored hashed password
            
        Returns:
            True if password matches, False otherwise
        """
        candidate = password.encode('utf-8')
        # bcrypt refuses anything past 72 bytes; no stored hash can match it
        if not hashed_password or len(candidate) > PASSWORD_MAX_BYTES:
            return False
        return bcrypt.checkpw(candidate, hashed_password.encode('utf-8'))
    
    def generate_token(self, user_id: str) -> str:
        """Issue a signed HS256 token carrying the user id."""
        payload = {
            "user_id": user_id,
            "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
                days=current_app.config.get('JWT_EXPIRATION_DAYS', 7)
            )
        }
        return jwt.encode(payload, self.jwt_secret, algorithm="HS256")
    
    def register_user(self, username: str, email: str, password: str) -> Dict[str, Any]:
        """
        Register a new user and log them in.
        
        Args:
            username: Validated, trimmed username
            email: Validated, lower-cased email
            password: Plain text password
            
        Returns:
            Dictionary with success status and token/user or error
        """
        if self.users_collection.find_one({"$or": [{"username": username}, {"email": email}]}):
            return {"success": False, "error": "User already exists", "status": 400}
        
        now = utcnow()
        user = User(
            id=None,
            username=username,
            email=email,
            password=self.hash_password(password),
            profile=UserProfile(join_date=now),
            created_at=now,
            updated_at=now
        )
        
        try:
            result = self.users_collection.insert_one(user.to_document())
        except DuplicateKeyError:
            return {"success": False, "error": "User already exists", "status": 400}
        
        user.id = str(result.inserted_id)
        logger.info("Registered user %s", username)
        
        return {
            "success": True,
            "message": "User registered successfully",
            "token": self.generate_token(user.id),
            "user": user.to_auth_json()
        }
    
    def login_user(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate a user by email and password and issue a token.
        
        Returns:
            Dictionary with success status and JWT token or error
        """
        doc = self.users_collection.find_one({"email": email.strip().lower()})
        if not doc or not self.verify_password(password, doc.get("password", "")):
            return {"success": False, "error": "Invalid credentials", "status": 400}
        
        user = User.from_document(doc)
        return {
            "success": True,
            "token": self.generate_token(user.id),
            "user": user.to_auth_json()
        }
    
    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a JWT token and load the user it belongs to.
        
        Args:
            token: JWT token string
            
        Returns:
            Dictionary with success status and the ``User`` or error
        """
        if not token:
            return {"success": False, "error": INVALID_TOKEN}
        
        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
        except jwt.InvalidTokenError:
            return {"success": False, "error": INVALID_TOKEN}
        
        user = self.get_user_by_id(payload.get("user_id"))
        if user is None:
            return {"success": False, "error": INVALID_TOKEN}
        
        return {"success": True, "user": user}
    
    def get_user_by_id(self, user_id: Optional[str]) -> Optional[User]:
        """
        Get a user by id.
        
        Args:
            user_id: User's unique identifier
            
        Returns:
            The ``User`` or None if the id is malformed or unknown
        """
        if not user_id:
            return None
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        
        doc = self.users_collection.find_one({"_id": object_id})
        return User.from_document(doc) if doc else None
    
    def change_password(self, user_id: str, current_password: str, new_password: str) -> Dict[str, Any]:
        """
        Replace the password after checking the current one.
        
        Returns:
            Dictionary with success status and message or error
        """
        user = self.get_user_by_id(user_id)
        if user is None:
            return {"success": False, "error": "User not found", "status": 404}
        
        if not self.verify_password(current_password, user.password):
            return {"success": False, "error": "Current password is incorrect", "status": 400}
        
        self.users_collection.update_one(
            {"_id": ObjectId(user_id)},
            {"$set": {"password": self.hash_password(new_password), "updated_at": utcnow()}}
        )
        
        return {"success": True, "message": "Password updated successfully"}
    
    def delete_account(self, user_id: str) -> Dict[str, Any]:
        """Delete the user document, library included."""
        result = self.users_collection.delete_one({"_id": ObjectId(user_id)})
        if result.deleted_count == 0:
            return {"success": False, "error": "User not found", "status": 404}
        
        logger.info("Deleted account %s", user_id)
        return {"success": True, "message": "Account deleted successfully"}


# Global service instance
_auth_service = None


def get_auth_service() -> Optional[AuthService]:
    """Get the global auth service instance."""
    return _auth_service


def initialize_auth_service(database: Database, jwt_secret: str, bcrypt_rounds: int = 10) -> Optional[AuthService]:
    """Initialize the global auth service instance."""
    global _auth_service
    try:
        _auth_service = AuthService(database, jwt_secret, bcrypt_rounds)
        return _auth_service
    except Exception as e:
        logger.error("Failed to initialize authentication service: %s", e)
        return None
