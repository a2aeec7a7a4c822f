#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity Portal - Core Data Models
Модели движка сверки записей активности

Версия: 1.0.0
Дата: 2026-01-20
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Set

from utils.datetime_utils import parse_day_key
from utils.validators import normalize_email

# ===== EXCEPTIONS =====

class ConfigurationError(ValueError):
    """Ошибка конфигурации (например, неверная раскладка колонок источника)"""
    pass

# ===== IDENTITY =====

@dataclass
class Identity:
    """Каноническая запись участника из реестра"""
    canonical_name: str
    credential_id: str = ""
    email: Optional[str] = None
    status: str = ""
    is_monitor: bool = False

    def __post_init__(self):
        self.canonical_name = str(self.canonical_name).strip()
        self.credential_id = str(self.credential_id or "")
        self.email = normalize_email(self.email)

    def verify_credential(self, presented: Any) -> bool:
        """Сравнение предъявленного токена со строкой из реестра (строгое равенство)"""
        if presented is None or not self.credential_id.strip():
            return False
        return self.credential_id.strip() == str(presented).strip()

# ===== ACTIVITY ENTRIES =====

@dataclass
class ActivityEntry:
    """Одна сырая запись активности из любого источника"""
    raw_author_name: str = ""
    raw_date: str = ""
    raw_author_email: Optional[str] = None
    category: str = ""
    summary: str = ""
    proof_ref: str = ""
    file_ref: str = ""
    duration_label: str = ""
    source_tag: str = ""


@dataclass
class SourceRows:
    """Набор записей одного источника (лист с собственной раскладкой колонок)"""
    source_tag: str
    entries: List[ActivityEntry] = field(default_factory=list)
    include_in_history: bool = True

    def __len__(self) -> int:
        return len(self.entries)

# ===== AGGREGATES =====

@dataclass
class AggregateStats:
    """Статистика по одной канонической личности"""
    active_day_keys: Set[str] = field(default_factory=set)
    most_recent_day_key: Optional[str] = None

    def fold(self, day_key: str) -> None:
        """Добавить день; самый свежий день сравнивается как дата, а не строка"""
        self.active_day_keys.add(day_key)
        if self.most_recent_day_key is None:
            self.most_recent_day_key = day_key
            return
        new_day = parse_day_key(day_key)
        current_day = parse_day_key(self.most_recent_day_key)
        if new_day is not None and (current_day is None or new_day > current_day):
            self.most_recent_day_key = day_key

    def merge(self, other: "AggregateStats") -> None:
        for day_key in sorted(other.active_day_keys):
            self.fold(day_key)

    @property
    def days_completed(self) -> int:
        return len(self.active_day_keys)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'active_day_keys': sorted(self.active_day_keys),
            'days_completed': self.days_completed,
            'most_recent_day_key': self.most_recent_day_key or ""
        }

# ===== HISTORY =====

@dataclass
class HistoryRecord:
    """Запись истории для отображения"""
    day_key: str
    time_label: str
    name: str
    category: str
    summary: str
    proof_ref: str
    file_ref: str
    duration_label: str
    source_tag: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
