"""
Services package for the Division tracker bot.

Session management, profile resolution and the concurrent stats pipeline.
"""

from .base import BaseService
from .name_cache import NameCacheService
from .session_manager import SessionManager, TicketStore
from .stats_service import StatsService

__all__ = ['BaseService', 'NameCacheService', 'SessionManager', 'TicketStore', 'StatsService']
