"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game_entry import GameEntry, GameStatus
from .user import User, UserProfile, UserStats

__all__ = ['GameEntry', 'GameStatus', 'User', 'UserProfile', 'UserStats']
