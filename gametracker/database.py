"""
MongoDB Connection

Owns the process-wide MongoClient and the collections the services use.
"""

import logging
from typing import Optional

from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

logger = logging.getLogger(__name__)


class Database:
    """
    Thin wrapper around a MongoDB database holding the ``users`` collection.

    Each user is one document; the game library and stats are embedded in it.
    """
    
    def __init__(self, mongo_uri: Optional[str] = None, db_name: str = 'game_tracker', client=None):
        """
        Args:
            mongo_uri: MongoDB connection string (ignored when ``client`` is given)
            db_name: Database name
            client: Pre-built client, e.g. a ``mongomock.MongoClient`` in tests
        """
        if client is None:
            if not mongo_uri:
                raise ValueError("MongoDB URI is not configured")
            client = MongoClient(mongo_uri, server_api=ServerApi('1'))
        self.client = client
        self.db = self.client[db_name]
        self.users = self.db.users
    
    def ping(self) -> None:
        """Raise if the server cannot be reached."""
        self.client.admin.command('ping')
        logger.info("Successfully connected to MongoDB")
    
    def ensure_indexes(self) -> None:
        """Create unique indexes on username and email."""
        self.users.create_index("username", unique=True)
        self.users.create_index("email", unique=True)
    
    def close_connection(self):
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()


# Global database instance
_database = None


def get_database() -> Optional[Database]:
    """Get the global database instance."""
    return _database


def initialize_database(mongo_uri: Optional[str] = None, db_name: str = 'game_tracker',
                        client=None) -> Optional[Database]:
    """Connect, ensure indexes and store the global database instance."""
    global _database
    try:
        database = Database(mongo_uri, db_name, client=client)
        if client is None:
            database.ping()
        database.ensure_indexes()
        _database = database
        return _database
    except Exception as e:
        logger.error("Failed to initialize database: %s", e)
        return None
