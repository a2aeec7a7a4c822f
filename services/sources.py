#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity Portal - Source Row Provider
Чтение листов-источников и приведение строк к ActivityEntry

Каждый тип источника имеет свою фиксированную раскладку колонок. Раскладка
передаётся как конфигурация, движок сверки получает уже именованные поля.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, List, Optional, Sequence

from config import SheetNames
from core.models import ActivityEntry, ConfigurationError, SourceRows
from database.store import TableStore
from shared.models import DEFAULT_CATEGORY

logger = logging.getLogger(__name__)

# ===== РАСКЛАДКИ КОЛОНОК =====

@dataclass(frozen=True)
class SourceLayout:
    """Индексы колонок (с 0) для одного типа источника; None - колонки нет"""
    kind: str
    date: int
    name: Optional[int] = None
    email: Optional[int] = None
    category: Optional[int] = None
    summary: Optional[int] = None
    proof: Optional[int] = None
    file: Optional[int] = None
    duration: Optional[int] = None
    header_rows: int = 1
    include_in_history: bool = True

    def __post_init__(self):
        columns = self.columns()
        errors = []
        if self.date is None:
            errors.append("не задана колонка даты")
        if self.name is None and self.email is None:
            errors.append("нужна колонка имени или e-mail")
        for field_name, index in columns.items():
            if not isinstance(index, int) or isinstance(index, bool) or index < 0:
                errors.append(f"колонка {field_name}: неверный индекс {index!r}")
        indexes = list(columns.values())
        if len(indexes) != len(set(indexes)):
            errors.append("индексы колонок повторяются")
        if self.header_rows < 0:
            errors.append("header_rows не может быть отрицательным")
        if errors:
            raise ConfigurationError(f"Раскладка {self.kind!r}: " + "; ".join(errors))

    def columns(self) -> dict:
        skip = {"kind", "header_rows", "include_in_history"}
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in skip and getattr(self, f.name) is not None
        }


# Лист, куда пишет портал: Name, Date, Category, Summary, Proof, File, Duration
ACTIVITY_LOG_LAYOUT = SourceLayout(
    kind="activity_log", name=0, date=1, category=2, summary=3, proof=4, file=5, duration=6
)

# Листы мониторов M1-M10: Timestamp, Email, Name, Course, Duration, Issues, Learning
MONITOR_LAYOUT = SourceLayout(
    kind="monitor", date=0, email=1, name=2, category=3, duration=4, summary=6
)

# Устаревший лист активности: Name, Timestamp; в историю не попадает
LEGACY_LAYOUT = SourceLayout(
    kind="legacy", name=0, date=1, include_in_history=False
)

# ===== ПРЕОБРАЗОВАНИЕ СТРОК =====

def _get(row: Sequence[Any], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ""
    value = row[index]
    if value is None:
        return ""
    return str(value).strip()


def rows_to_entries(rows: Sequence[Sequence[Any]], layout: SourceLayout, source_tag: str) -> List[ActivityEntry]:
    """Строки листа (с заголовком) в записи; короткие строки читаются как пустые поля"""
    entries = []
    for row in rows[layout.header_rows:]:
        if not isinstance(row, (list, tuple)):
            continue
        entries.append(ActivityEntry(
            raw_author_name=_get(row, layout.name),
            raw_date=_get(row, layout.date),
            raw_author_email=_get(row, layout.email) or None,
            category=_get(row, layout.category) or DEFAULT_CATEGORY,
            summary=_get(row, layout.summary),
            proof_ref=_get(row, layout.proof),
            file_ref=_get(row, layout.file),
            duration_label=_get(row, layout.duration),
            source_tag=source_tag
        ))
    return entries

# ===== ПРОВАЙДЕР =====

class SourceRowProvider:
    """Читает все источники в фиксированном порядке: устаревший лист, мониторы, лог портала"""

    def __init__(self, store: TableStore, sheets: SheetNames):
        self.store = store
        self.sheets = sheets

    def source_plan(self) -> List[tuple]:
        plan = []
        if self.sheets.legacy:
            plan.append((self.sheets.legacy, LEGACY_LAYOUT))
        for sheet in self.sheets.monitor_sheets:
            plan.append((sheet, MONITOR_LAYOUT))
        plan.append((self.sheets.logs, ACTIVITY_LOG_LAYOUT))
        return plan

    def load(self) -> List[SourceRows]:
        available = set(self.store.sheet_names())
        sources = []
        for sheet, layout in self.source_plan():
            if sheet not in available:
                continue
            entries = rows_to_entries(self.store.read_rows(sheet), layout, sheet)
            sources.append(SourceRows(
                source_tag=sheet,
                entries=entries,
                include_in_history=layout.include_in_history
            ))
            logger.debug(f"Источник {sheet!r}: {len(entries)} строк")
        return sources

    def monitor_contacts(self) -> List[tuple]:
        """Пары (имя, e-mail) из листов мониторов, в порядке листов"""
        contacts = []
        for source in self.load():
            for entry in source.entries:
                if entry.raw_author_name and entry.raw_author_email:
                    contacts.append((entry.raw_author_name, entry.raw_author_email))
        return contacts
