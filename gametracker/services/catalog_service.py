"""
Catalog Service

Client for the third-party game catalog (RAWG). Searches by free text and
fetches game details. Failures are reported once, without retries.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """The catalog could not be queried."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CatalogService:
    """Client for the RAWG games API."""
    
    def __init__(self, api_key: Optional[str], base_url: str = 'https://api.rawg.io/api',
                 page_size: int = 10, timeout: float = 10):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.page_size = page_size
        self.timeout = timeout
        self.session = requests.Session()
    
    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self.api_key:
            raise CatalogError("Catalog API key is not configured")
        
        query = {'key': self.api_key, **(params or {})}
        try:
            response = self.session.get(f"{self.base_url}{path}", params=query, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Catalog request to %s failed: %s", path, e)
            raise CatalogError(f"Catalog request failed: {e}") from e
        
        if response.status_code != 200:
            logger.warning("Catalog request to %s returned HTTP %s", path, response.status_code)
            raise CatalogError(
                f"Catalog returned HTTP {response.status_code}", status_code=response.status_code
            )
        
        try:
            data = response.json()
        except ValueError as e:
            raise CatalogError("Catalog returned invalid JSON") from e
        
        if not isinstance(data, dict):
            logger.warning("Catalog request to %s returned a %s body", path, type(data).__name__)
            raise CatalogError("Catalog returned an unexpected response")
        return data
    
    def search_games(self, query: str, page_size: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Search the catalog.
        
        Args:
            query: Free text; blank queries return an empty list without a request
            page_size: Number of results, defaults to the configured page size
            
        Returns:
            The catalog's result list
        """
        query = (query or '').strip()
        if not query:
            return []
        
        data = self._get('/games', {'search': query, 'page_size': page_size or self.page_size})
        return data.get('results') or []
    
    def get_game_details(self, game_id: int) -> Dict[str, Any]:
        """Full catalog record for one game."""
        return self._get(f'/games/{game_id}')


# Global service instance
_catalog_service = None


def get_catalog_service() -> Optional[CatalogService]:
    """Get the global catalog service instance."""
    return _catalog_service


def initialize_catalog_service(api_key: Optional[str], base_url: str = 'https://api.rawg.io/api',
                               page_size: int = 10, timeout: float = 10) -> CatalogService:
    """Initialize the global catalog service instance."""
    global _catalog_service
    if not api_key:
        logger.warning("RAWG_API_KEY is not set; catalog search will fail")
    _catalog_service = CatalogService(api_key, base_url, page_size, timeout)
    return _catalog_service
