"""
Authentication Decorators

Contains the decorator guarding bearer-token protected HTTP endpoints.
"""

from functools import wraps
from flask import request, jsonify

from .helpers import get_bearer_token


def require_auth(f):
    """
    Decorator to require authentication for protected HTTP endpoints.

    On success the authenticated ``User`` is attached as ``request.user``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.auth_service import get_auth_service
        
        auth_service = get_auth_service()
        if not auth_service:
            return jsonify({
                'success': False,
                'error': 'Authentication service unavailable'
            }), 500
            
        token = get_bearer_token(request)
        if not token:
            return jsonify({
                'success': False,
                'error': 'No token, authorization denied'
            }), 401
        
        result = auth_service.verify_token(token)
        if not result['success']:
            return jsonify({
                'success': False,
                'error': result['error']
            }), 401
        
        request.user = result['user']
        return f(*args, **kwargs)
    
    return decorated_function
