# services/__init__.py

"""
Модуль сервисов портала активности

Провайдеры реестра и источников, хранилище Google Sheets и сервис портала.
"""

from .sources import (
    SourceLayout,
    SourceRowProvider,
    ACTIVITY_LOG_LAYOUT,
    MONITOR_LAYOUT,
    LEGACY_LAYOUT,
    rows_to_entries
)
from .roster import RosterProvider
from .portal_service import PortalService, AuthorizationError, create_store

__all__ = [
    'SourceLayout',
    'SourceRowProvider',
    'ACTIVITY_LOG_LAYOUT',
    'MONITOR_LAYOUT',
    'LEGACY_LAYOUT',
    'rows_to_entries',
    'RosterProvider',
    'PortalService',
    'AuthorizationError',
    'create_store'
]
