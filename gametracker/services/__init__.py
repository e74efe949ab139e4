"""
Services Package

Contains all business logic and service classes.
"""

from .auth_service import AuthService, get_auth_service, initialize_auth_service
from .user_service import UserService, get_user_service, initialize_user_service
from .library_service import LibraryService, get_library_service, initialize_library_service
from .catalog_service import CatalogError, CatalogService, get_catalog_service, initialize_catalog_service

__all__ = [
    'AuthService', 'get_auth_service', 'initialize_auth_service',
    'UserService', 'get_user_service', 'initialize_user_service',
    'LibraryService', 'get_library_service', 'initialize_library_service',
    'CatalogError', 'CatalogService', 'get_catalog_service', 'initialize_catalog_service',
    'initialize_services'
]


def initialize_services(database, config_class):
    """
    Create every service singleton from a configuration class.

    Args:
        database: Connected ``Database``
        config_class: Configuration class (see ``config.app_config``)
        
    Returns:
        The auth service, or None if it could not be created
    """
    initialize_user_service(database)
    initialize_library_service(database)
    initialize_catalog_service(
        config_class.RAWG_API_KEY,
        config_class.RAWG_BASE_URL,
        config_class.CATALOG_PAGE_SIZE,
        config_class.CATALOG_TIMEOUT_SECONDS
    )
    return initialize_auth_service(database, config_class.JWT_SECRET, config_class.BCRYPT_ROUNDS)
