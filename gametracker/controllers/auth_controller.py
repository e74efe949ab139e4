"""
Authentication Controller

Handles registration, login and the current-user endpoint.
"""

from flask import Blueprint, request, jsonify
from ..schemas import LoginRequest, RegisterRequest, validate_payload
from ..services.auth_service import get_auth_service
from ..utils.decorators import require_auth
from ..utils.activity_logger import activity_logger
from ..utils.helpers import pop_status

auth_bp = Blueprint('auth', __name__)

SERVER_ERROR = {'success': False, 'error': 'Server error'}


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new user and return a JWT token."""
    try:
        auth_service = get_auth_service()
        if not auth_service:
            return jsonify({
                'success': False,
                'error': 'Authentication service unavailable'
            }), 500
        
        data = request.get_json(silent=True)
        activity_logger.log_user_action(request, 'register', extra_data=data)
        
        payload, error = validate_payload(RegisterRequest, data)
        if error:
            error_response = {'success': False, 'error': error}
            activity_logger.log_server_response(request, 'register', False, error_response)
            return jsonify(error_response), 400
        
        result = auth_service.register_user(payload.username, payload.email, payload.password)
        
        if result['success']:
            activity_logger.log_server_response(request, 'register', True, result)
            return jsonify(result), 201
        else:
            status = pop_status(result)
            activity_logger.log_server_response(request, 'register', False, result)
            return jsonify(result), status
            
    except Exception as e:
        activity_logger.log_error(request, e, 'register')
        return jsonify(SERVER_ERROR), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login a user and return JWT token."""
    try:
        auth_service = get_auth_service()
        if not auth_service:
            return jsonify({
                'success': False,
                'error': 'Authentication service unavailable'
            }), 500
        
        data = request.get_json(silent=True)
        activity_logger.log_user_action(request, 'login', extra_data=data)
        
        payload, error = validate_payload(LoginRequest, data)
        if error:
            error_response = {'success': False, 'error': error}
            activity_logger.log_server_response(request, 'login', False, error_response)
            return jsonify(error_response), 400
        
        result = auth_service.login_user(payload.email, payload.password)
        
        if result['success']:
            activity_logger.log_server_response(request, 'login', True, result)
            return jsonify(result)
        else:
            status = pop_status(result)
            activity_logger.log_server_response(request, 'login', False, result)
            return jsonify(result), status
            
    except Exception as e:
        activity_logger.log_error(request, e, 'login')
        return jsonify(SERVER_ERROR), 500


@auth_bp.route('/me', methods=['GET'])
@require_auth
def current_user():
    """Return the authenticated user's account summary."""
    try:
        response_data = {
            'success': True,
            'user': request.user.to_auth_json()
        }
        activity_logger.log_server_response(request, 'current_user', True, response_data)
        return jsonify(response_data)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'current_user')
        return jsonify(SERVER_ERROR), 500
