"""
Activity Logger Module for the Game Tracker Server

This module provides structured logging for user actions, server responses,
library changes and errors. Every entry is a JSON document on one line.
"""

import logging
import json
import os
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from .helpers import get_user_identity

# Keys whose values never reach the log files
SENSITIVE_KEYS = {'password', 'currentPassword', 'newPassword', 'token'}


class ActivityLogger:
    """
    Centralized logging system for the game tracker server.
    
    Features:
    - User action tracking with IP/user identification
    - Server response logging with sensitive fields masked
    - Library event logging (entries added, updated, removed)
    - JSON structured logs for easy parsing
    """
    
    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, level.upper(), logging.INFO)
        
        # Setup main activity logger
        self.logger = self._setup_logger()
        
    def _setup_logger(self) -> logging.Logger:
        """Setup the main activity logger with file handler."""
        logger = logging.getLogger('gametracker.activity')
        logger.setLevel(self.level)
        
        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()
        
        # Create log file with date
        log_file = self.log_dir / f"activity_log_{datetime.now().strftime('%Y-%m-%d')}.log"
        
        # File handler for detailed logs
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(self.level)
        
        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        
        file_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_formatter = logging.Formatter(
            '%(levelname)s: %(message)s'
        )
        
        file_handler.setFormatter(file_formatter)
        console_handler.setFormatter(console_formatter)
        
        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        
        return logger
    
    def _create_log_entry(self, 
                         event_type: str, 
                         action: str, 
                         user_info: Dict[str, Any],
                         details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)
    
    def log_user_action(self, 
                       request, 
                       action: str, 
                       game_id: Optional[int] = None,
                       **kwargs):
        """
        Log user actions with full context.
        
        Args:
            request: Flask request object
            action: Type of action (e.g., 'add_game', 'search_users')
            game_id: Catalog game id if applicable
            **kwargs: Additional details to log
        """
        user_info = get_user_identity(request)
        
        details = {
            'game_id': game_id,
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url,
            **self._sanitize_response_data(kwargs)
        }
        
        log_message = self._create_log_entry('USER_ACTION', action, user_info, details)
        self.logger.info(log_message)
    
    def log_server_response(self, 
                           request, 
                           action: str,
                           success: bool,
                           response_data: Dict[str, Any],
                           game_id: Optional[int] = None,
                           **kwargs):
        """
        Log server responses with full context.
        
        Args:
            request: Flask request object
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to client
            game_id: Catalog game id if applicable
            **kwargs: Additional details to log
        """
        user_info = get_user_identity(request)
        
        details = {
            'game_id': game_id,
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }
        
        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, user_info, details)
        
        if success:
            self.logger.info(log_message)
        else:
            self.logger.warning(log_message)
    
    def log_library_event(self,
                         user_id: str,
                         event: str,
                         game_id: Optional[int] = None,
                         **kwargs):
        """
        Log changes to a user's library (entries added, updated, removed).
        
        Args:
            user_id: Owner of the library
            event: Type of event (e.g., 'game_added', 'game_completed')
            game_id: Catalog game id
            **kwargs: Additional details, such as the recomputed stats
        """
        user_info = {'user_ip': None, 'user_id': user_id, 'username': None}
        
        details = {
            'game_id': game_id,
            **kwargs
        }
        
        log_message = self._create_log_entry('LIBRARY_EVENT', event, user_info, details)
        self.logger.info(log_message)
    
    def log_error(self, 
                 request, 
                 error: Exception,
                 action: str,
                 game_id: Optional[int] = None):
        """
        Log errors with full context.
        
        Args:
            request: Flask request object
            error: Exception that occurred
            action: Action that was being performed
            game_id: Catalog game id if applicable
        """
        user_info = get_user_identity(request)
        
        details = {
            'game_id': game_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }
        
        log_message = self._create_log_entry('ERROR', action, user_info, details)
        self.logger.error(log_message, exc_info=error)
    
    def _sanitize_response_data(self, data: Any) -> Any:
        """Mask passwords and tokens, and summarize long library listings."""
        if isinstance(data, list):
            return [self._sanitize_response_data(item) for item in data]
        if not isinstance(data, dict):
            return data
        
        sanitized = {}
        for key, value in data.items():
            if key in SENSITIVE_KEYS:
                sanitized[key] = '***'
            elif key == 'games' and isinstance(value, list):
                sanitized['games_count'] = len(value)
            else:
                sanitized[key] = self._sanitize_response_data(value)
        return sanitized


# Global logger instance
activity_logger = ActivityLogger(
    log_dir=os.getenv('LOG_DIR', 'logs'),
    level=os.getenv('LOG_LEVEL', 'INFO')
)
