"""
Game Tracker Server Application Package

Backend for tracking a personal game library: accounts with bearer-token
auth, a per-user library of catalog games with status, rating and notes,
derived stats, and a proxy to the external game catalog.
"""

from flask import Flask, jsonify
from flask_cors import CORS
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.
    
    Services must be initialized (see ``services.initialize_services``)
    before the app handles requests.
    
    Args:
        config_class: Configuration class to use
        
    Returns:
        Flask application instance with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    
    # Initialize extensions
    origins = config_class.CORS_ORIGINS
    CORS(app, origins=origins if origins == '*' else [o.strip() for o in origins.split(',')])
    
    # Register blueprints
    from .controllers.auth_controller import auth_bp
    from .controllers.user_controller import user_bp
    from .controllers.library_controller import library_bp
    from .controllers.catalog_controller import catalog_bp
    
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(user_bp, url_prefix='/api/users')
    app.register_blueprint(library_bp, url_prefix='/api/games')
    app.register_blueprint(catalog_bp, url_prefix='/api/catalog')
    
    @app.route('/health', methods=['GET'])
    def health_check():
        """Simple liveness probe."""
        return jsonify({'status': 'ok', 'service': 'game-tracker'})
    
    return app
