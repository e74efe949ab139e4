"""
User Controller

Profile, password, account deletion, user search and public profiles.
"""

from flask import Blueprint, request, jsonify
from ..schemas import PasswordChangeRequest, ProfileUpdateRequest, validate_payload
from ..services.auth_service import get_auth_service
from ..services.user_service import get_user_service
from ..utils.decorators import require_auth
from ..utils.activity_logger import activity_logger
from ..utils.helpers import pop_status

user_bp = Blueprint('users', __name__)

SERVER_ERROR = {'success': False, 'error': 'Server error'}


def _failure(action, result):
    status = pop_status(result)
    activity_logger.log_server_response(request, action, False, result)
    return jsonify(result), status


@user_bp.route('/profile', methods=['GET'])
@require_auth
def get_profile():
    """Get the authenticated user's profile."""
    try:
        response_data = {
            'success': True,
            'profile': request.user.to_profile_json()
        }
        activity_logger.log_server_response(request, 'get_profile', True, response_data)
        return jsonify(response_data)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'get_profile')
        return jsonify(SERVER_ERROR), 500


@user_bp.route('/profile', methods=['PUT'])
@require_auth
def update_profile():
    """Update bio and favourite genres."""
    try:
        data = request.get_json(silent=True)
        activity_logger.log_user_action(request, 'update_profile', extra_data=data)
        
        payload, error = validate_payload(ProfileUpdateRequest, data)
        if error:
            return _failure('update_profile', {'success': False, 'error': error})
        
        result = get_user_service().update_profile(request.user, payload.model_dump(exclude_unset=True))
        activity_logger.log_server_response(request, 'update_profile', True, result)
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'update_profile')
        return jsonify(SERVER_ERROR), 500


@user_bp.route('/password', methods=['PUT'])
@require_auth
def change_password():
    """Change password after confirming the current one."""
    try:
        activity_logger.log_user_action(request, 'change_password')
        
        payload, error = validate_payload(PasswordChangeRequest, request.get_json(silent=True))
        if error:
            return _failure('change_password', {'success': False, 'error': error})
        
        result = get_auth_service().change_password(
            request.user.id, payload.current_password, payload.new_password
        )
        if not result['success']:
            return _failure('change_password', result)
        
        activity_logger.log_server_response(request, 'change_password', True, result)
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'change_password')
        return jsonify(SERVER_ERROR), 500


@user_bp.route('/account', methods=['DELETE'])
@require_auth
def delete_account():
    """Delete the authenticated user's account and library."""
    try:
        activity_logger.log_user_action(request, 'delete_account')
        
        result = get_auth_service().delete_account(request.user.id)
        if not result['success']:
            return _failure('delete_account', result)
        
        activity_logger.log_server_response(request, 'delete_account', True, result)
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'delete_account')
        return jsonify(SERVER_ERROR), 500


@user_bp.route('/search', methods=['GET'])
@require_auth
def search_users():
    """Search other users by username."""
    try:
        username = request.args.get('username', '')
        activity_logger.log_user_action(request, 'search_users', query=username)
        
        result = get_user_service().search_users(username, request.user.id)
        if not result['success']:
            return _failure('search_users', result)
        
        activity_logger.log_server_response(request, 'search_users', True, result,
                                            result_count=len(result['users']))
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'search_users')
        return jsonify(SERVER_ERROR), 500


@user_bp.route('/<username>', methods=['GET'])
@require_auth
def get_public_profile(username):
    """Get another user's public profile."""
    try:
        result = get_user_service().get_public_profile(username)
        if not result['success']:
            return _failure('get_public_profile', result)
        
        activity_logger.log_server_response(request, 'get_public_profile', True, result)
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'get_public_profile')
        return jsonify(SERVER_ERROR), 500
