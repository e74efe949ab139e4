"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_auth
from .helpers import get_bearer_token, get_user_identity, isoformat, utcnow
from .activity_logger import activity_logger

__all__ = ['require_auth', 'get_bearer_token', 'get_user_identity', 'isoformat', 'utcnow', 'activity_logger']
