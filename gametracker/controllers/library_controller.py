"""
Library Controller

Handles the per-user game library endpoints and library stats.
"""

from flask import Blueprint, request, jsonify
from ..config.library_settings import DEFAULT_SORT_KEY, DEFAULT_SORT_ORDER
from ..schemas import AddGameRequest, UpdateGameRequest, validate_payload
from ..services.library_service import get_library_service
from ..utils.decorators import require_auth
from ..utils.activity_logger import activity_logger
from ..utils.helpers import pop_status

library_bp = Blueprint('library', __name__)

SERVER_ERROR = {'success': False, 'error': 'Server error'}


def _failure(action, result, game_id=None):
    status = pop_status(result)
    activity_logger.log_server_response(request, action, False, result, game_id)
    return jsonify(result), status


@library_bp.route('/library', methods=['GET'])
@require_auth
def list_library():
    """List library entries, optionally filtered by status and sorted."""
    try:
        status = request.args.get('status') or None
        sort_by = request.args.get('sortBy', DEFAULT_SORT_KEY)
        order = request.args.get('order', DEFAULT_SORT_ORDER)
        
        result = get_library_service().list_games(request.user, status, sort_by, order)
        if not result['success']:
            return _failure('list_library', result)
        
        activity_logger.log_server_response(request, 'list_library', True, result,
                                            status_filter=status, sort_by=sort_by, order=order)
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'list_library')
        return jsonify(SERVER_ERROR), 500


@library_bp.route('/library', methods=['POST'])
@require_auth
def add_game():
    """Add a catalog game to the library."""
    try:
        data = request.get_json(silent=True)
        game_id = data.get('gameId') if isinstance(data, dict) else None
        activity_logger.log_user_action(request, 'add_game', game_id)
        
        payload, error = validate_payload(AddGameRequest, data)
        if error:
            return _failure('add_game', {'success': False, 'error': error}, game_id)
        
        result = get_library_service().add_game(request.user.id, payload.model_dump())
        if not result['success']:
            return _failure('add_game', result, payload.game_id)
        
        activity_logger.log_server_response(request, 'add_game', True, result, payload.game_id)
        return jsonify(result), 201
        
    except Exception as e:
        activity_logger.log_error(request, e, 'add_game')
        return jsonify(SERVER_ERROR), 500


@library_bp.route('/library/<int:game_id>', methods=['GET'])
@require_auth
def get_game(game_id):
    """Get one library entry."""
    try:
        result = get_library_service().get_game(request.user, game_id)
        if not result['success']:
            return _failure('get_game', result, game_id)
        
        activity_logger.log_server_response(request, 'get_game', True, result, game_id)
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'get_game', game_id)
        return jsonify(SERVER_ERROR), 500


@library_bp.route('/library/<int:game_id>', methods=['PUT'])
@require_auth
def update_game(game_id):
    """Update status, rating and/or notes of a library entry."""
    try:
        data = request.get_json(silent=True)
        activity_logger.log_user_action(request, 'update_game', game_id, extra_data=data)
        
        payload, error = validate_payload(UpdateGameRequest, data)
        if error:
            return _failure('update_game', {'success': False, 'error': error}, game_id)
        
        result = get_library_service().update_game(request.user.id, game_id, payload.changes())
        if not result['success']:
            return _failure('update_game', result, game_id)
        
        activity_logger.log_server_response(request, 'update_game', True, result, game_id)
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'update_game', game_id)
        return jsonify(SERVER_ERROR), 500


@library_bp.route('/library/<int:game_id>', methods=['DELETE'])
@require_auth
def remove_game(game_id):
    """Remove an entry from the library."""
    try:
        activity_logger.log_user_action(request, 'remove_game', game_id)
        
        result = get_library_service().remove_game(request.user.id, game_id)
        if not result['success']:
            return _failure('remove_game', result, game_id)
        
        activity_logger.log_server_response(request, 'remove_game', True, result, game_id)
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'remove_game', game_id)
        return jsonify(SERVER_ERROR), 500


@library_bp.route('/stats', methods=['GET'])
@require_auth
def get_stats():
    """Detailed statistics for the authenticated user's library."""
    try:
        result = get_library_service().get_stats(request.user)
        activity_logger.log_server_response(request, 'get_stats', True, result)
        return jsonify(result)
        
    except Exception as e:
        activity_logger.log_error(request, e, 'get_stats')
        return jsonify(SERVER_ERROR), 500
