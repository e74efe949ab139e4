"""
Catalog Controller

Proxies game search and details lookups to the external catalog.
"""

from flask import Blueprint, request, jsonify
from ..services.catalog_service import CatalogError, get_catalog_service
from ..utils.activity_logger import activity_logger

catalog_bp = Blueprint('catalog', __name__)

SEARCH_FAILED = 'Error searching games. Please try again.'
DETAILS_FAILED = 'Error fetching game details. Please try again.'


@catalog_bp.route('/search', methods=['GET'])
def search():
    """Search the catalog by free text."""
    query = request.args.get('q', '')
    try:
        page_size = request.args.get('page_size', type=int)
        activity_logger.log_user_action(request, 'catalog_search', query=query, page_size=page_size)
        
        results = get_catalog_service().search_games(query, page_size)
        response_data = {'success': True, 'results': results}
        activity_logger.log_server_response(request, 'catalog_search', True, response_data,
                                            result_count=len(results))
        return jsonify(response_data)
        
    except CatalogError as e:
        activity_logger.log_error(request, e, 'catalog_search')
        return jsonify({'success': False, 'error': SEARCH_FAILED}), 502
    except Exception as e:
        activity_logger.log_error(request, e, 'catalog_search')
        return jsonify({'success': False, 'error': 'Server error'}), 500


@catalog_bp.route('/games/<int:game_id>', methods=['GET'])
def game_details(game_id):
    """Fetch catalog details for one game."""
    try:
        activity_logger.log_user_action(request, 'catalog_details', game_id)
        
        game = get_catalog_service().get_game_details(game_id)
        response_data = {'success': True, 'game': game}
        activity_logger.log_server_response(request, 'catalog_details', True, response_data, game_id)
        return jsonify(response_data)
        
    except CatalogError as e:
        activity_logger.log_error(request, e, 'catalog_details', game_id)
        if e.status_code == 404:
            return jsonify({'success': False, 'error': 'Game not found'}), 404
        return jsonify({'success': False, 'error': DETAILS_FAILED}), 502
    except Exception as e:
        activity_logger.log_error(request, e, 'catalog_details', game_id)
        return jsonify({'success': False, 'error': 'Server error'}), 500
