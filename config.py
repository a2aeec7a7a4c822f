#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity Portal - Configuration
Централизованная конфигурация с валидацией

Версия: 1.0.0
Дата: 2026-01-20
"""

import os
import sys
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass
from enum import Enum


class Environment(Enum):
    """Среды выполнения"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreBackend(Enum):
    """Тип табличного хранилища"""
    JSON = "json"
    SHEETS = "sheets"


@dataclass
class StoreConfig:
    """Конфигурация хранилища"""
    backend: StoreBackend
    path: Path
    lock_file: Path
    lock_timeout_seconds: float = 30.0


@dataclass
class IntegrationsConfig:
    """Конфигурация интеграций"""
    google_sheet_id: Optional[str] = None
    google_credentials_file: str = "service_account.json"


@dataclass
class SheetNames:
    """Имена листов книги"""
    users: str = "Student Activity"
    logs: str = "Activity Logs"
    profiles: str = "Student Profiles"
    groups: str = "Groups"
    courses: str = "Student Courses"
    legacy: str = ""  # пусто - устаревший лист не читается
    monitor_prefix: str = "M"
    monitor_count: int = 10

    @property
    def monitor_sheets(self) -> List[str]:
        return [f"{self.monitor_prefix}{i}" for i in range(1, self.monitor_count + 1)]


@dataclass
class SecurityConfig:
    """Конфигурация безопасности"""
    admin_name: Optional[str] = None
    admin_credential: Optional[str] = None

    @property
    def admin_enabled(self) -> bool:
        return bool(self.admin_name and self.admin_credential)


class PortalConfig:
    """Главный класс конфигурации"""

    def __init__(self):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Загрузка конфигурации из переменных окружения"""

        # Директории
        self.data_dir = Path(os.getenv('DATA_DIR', 'data'))
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        # Хранилище
        self.store = StoreConfig(
            backend=StoreBackend(os.getenv('STORE_BACKEND', 'json').lower()),
            path=self.data_dir / os.getenv('STORE_FILE', 'portal_store.json'),
            lock_file=self.data_dir / os.getenv('LOCK_FILE', 'portal_store.lock'),
            lock_timeout_seconds=float(os.getenv('LOCK_TIMEOUT', 30))
        )

        # Интеграции
        self.integrations = IntegrationsConfig(
            google_sheet_id=os.getenv('GOOGLE_SHEET_ID'),
            google_credentials_file=os.getenv('GOOGLE_CREDENTIALS_FILE', 'service_account.json')
        )

        # Листы
        self.sheets = SheetNames(
            users=os.getenv('SHEET_USERS', 'Student Activity'),
            logs=os.getenv('SHEET_LOGS', 'Activity Logs'),
            profiles=os.getenv('SHEET_PROFILES', 'Student Profiles'),
            groups=os.getenv('SHEET_GROUPS', 'Groups'),
            courses=os.getenv('SHEET_COURSES', 'Student Courses'),
            legacy=os.getenv('SHEET_LEGACY', ''),
            monitor_prefix=os.getenv('MONITOR_SHEET_PREFIX', 'M'),
            monitor_count=int(os.getenv('MONITOR_SHEET_COUNT', 10))
        )

        # Безопасность
        self.security = SecurityConfig(
            admin_name=os.getenv('ADMIN_NAME'),
            admin_credential=os.getenv('ADMIN_CREDENTIAL')
        )

        # Логирование
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        self.log_to_file = os.getenv('LOG_TO_FILE', 'true').lower() == 'true'
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Валидация конфигурации"""
        errors = []

        if self.store.backend == StoreBackend.SHEETS and not self.integrations.google_sheet_id:
            errors.append("Для STORE_BACKEND=sheets нужен GOOGLE_SHEET_ID")

        if self.store.lock_timeout_seconds <= 0:
            errors.append("LOCK_TIMEOUT должен быть положительным числом")

        if self.sheets.monitor_count < 0:
            errors.append("MONITOR_SHEET_COUNT не может быть отрицательным")

        if bool(self.security.admin_name) != bool(self.security.admin_credential):
            errors.append("ADMIN_NAME и ADMIN_CREDENTIAL задаются только вместе")

        if errors:
            raise ValueError("Ошибки конфигурации:\n" + "\n".join(f"• {error}" for error in errors))

    def ensure_directories(self):
        """Создание необходимых директорий"""
        for directory in [self.data_dir, self.log_dir]:
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """Получение конфигурации логирования"""
        handler_configs = {
            'console': {
                'class': 'logging.StreamHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'stream': sys.stderr
            }
        }
        # файловый обработчик объявляется только при LOG_TO_FILE
        if self.log_to_file:
            handler_configs['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"portal_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }
        handlers = list(handler_configs)

        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': handler_configs,
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'gspread': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'urllib3': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация конфигурации в словарь"""
        return {
            'environment': self.environment.value,
            'store': {
                'backend': self.store.backend.value,
                'path': str(self.store.path),
                'lock_timeout_seconds': self.store.lock_timeout_seconds
            },
            'google_sheet_id': self.integrations.google_sheet_id,
            'sheets': {
                'users': self.sheets.users,
                'logs': self.sheets.logs,
                'monitors': self.sheets.monitor_sheets,
                'legacy': self.sheets.legacy or None
            },
            'admin_enabled': self.security.admin_enabled,
            'admin_credential': "***" if self.security.admin_credential else None,  # Скрываем токен
            'log_level': self.log_level.value
        }


# Глобальный экземпляр конфигурации
config = PortalConfig()

__all__ = [
    'config',
    'PortalConfig',
    'Environment',
    'LogLevel',
    'StoreBackend',
    'StoreConfig',
    'IntegrationsConfig',
    'SheetNames',
    'SecurityConfig'
]
