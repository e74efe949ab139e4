"""
Game Tracker Server - Main Entry Point

This is the main entry point for the game tracker server.
It connects to MongoDB, initializes all services and starts the Flask application.
"""

import os
from gametracker import create_app
from gametracker.config import config
from gametracker.database import initialize_database
from gametracker.services import initialize_services
from gametracker.utils.activity_logger import activity_logger


def main():
    """Main function to initialize services and start the server."""
    config_class = config[os.getenv('APP_ENV', 'default')]
    try:
        print("Initializing services...")
        
        database = initialize_database(config_class.MONGO_URI, config_class.MONGO_DB_NAME)
        if database:
            print("✓ Database connected successfully")
        else:
            print("✗ Failed to connect to MongoDB (is MONGO_URI set?)")
            return
        
        auth_service = initialize_services(database, config_class)
        if auth_service:
            print("✓ Services initialized successfully")
        else:
            print("✗ Failed to initialize authentication service (is JWT_SECRET set?)")
            return
        
        print("Creating Flask application...")
        app = create_app(config_class)
        print("✓ Flask application created successfully")
        
        activity_logger.logger.info("Game Tracker Server starting")
        
        print(f"\nStarting Game Tracker Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print(f"Catalog available: {bool(config_class.RAWG_API_KEY)}")
        print("=" * 50)
        
        app.run(host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG)
        
    except KeyboardInterrupt:
        print("\nServer shutting down...")
        activity_logger.logger.info("Game Tracker Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        activity_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
