"""
Helper Functions

Contains utility functions used throughout the application.
"""

import datetime
from typing import Dict, Optional
from flask import request


def utcnow() -> datetime.datetime:
    """
    Current UTC time as a naive datetime, matching what MongoDB hands back.

    BSON dates hold milliseconds, so finer precision is dropped up front.
    """
    now = datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def isoformat(value: Optional[datetime.datetime]) -> Optional[str]:
    """Serialize a stored (naive UTC) timestamp for JSON responses."""
    if value is None:
        return None
    return value.isoformat(timespec='milliseconds') + 'Z'


def get_bearer_token(request_obj=None) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer`` header, if any."""
    if request_obj is None:
        request_obj = request

    auth_header = request_obj.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    token = auth_header[len('Bearer '):].strip()
    return token or None


def get_user_identity(request_obj=None) -> Dict[str, Optional[str]]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request
        
    user_ip = request_obj.remote_addr or 'unknown'
    user = getattr(request_obj, 'user', None)
    
    return {
        'user_ip': user_ip,
        'user_id': getattr(user, 'id', None),
        'username': getattr(user, 'username', None)
    }


def pop_status(result: Dict, default: int = 400) -> int:
    """Remove and return the HTTP status a service attached to a failed result."""
    return result.pop('status', default)
