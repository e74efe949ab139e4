"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- library_settings.py: library rules and constants (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .library_settings import GAME_STATUSES, SORT_KEYS, STATUS_COMPLETED

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Library rules
    'GAME_STATUSES', 'SORT_KEYS', 'STATUS_COMPLETED'
]
