#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity Portal - Log Aggregator
Свод записей активности из нескольких источников по каноническим участникам

Порядок определения автора записи:
1. Совпадение e-mail с реестром (имеет приоритет над именем)
2. Имя уже встречалось как ключ свода в этом проходе
3. Нечёткое сопоставление имени с реестром (первое совпадение)
4. Нераспознанное имя становится собственным ключом свода

Свод пересчитывается с нуля при каждом вызове и не хранит состояние.
"""

import logging
from typing import AbstractSet, Dict, Iterable, List, Optional

from core.dates import resolve_date_key
from core.identity import find_equivalent
from core.models import ActivityEntry, AggregateStats, Identity, SourceRows
from utils.validators import is_email_like, normalize_email

logger = logging.getLogger(__name__)


class LogAggregator:
    """Сопоставляет записи с реестром и сворачивает их в статистику по дням"""

    def __init__(self, roster: Iterable[Identity]):
        self.roster: List[Identity] = list(roster)
        self._by_email: Dict[str, str] = {}
        for identity in self.roster:
            if identity.email and identity.email not in self._by_email:
                self._by_email[identity.email] = identity.canonical_name

    # ===== ОПРЕДЕЛЕНИЕ АВТОРА =====

    def match_email(self, raw_email: Optional[str]) -> Optional[str]:
        if not is_email_like(raw_email):
            return None
        return self._by_email.get(normalize_email(raw_email))

    def resolve_author(self, entry: ActivityEntry, seen_keys: AbstractSet[str]) -> Optional[str]:
        """Каноническое имя автора; None, если нет ни e-mail из реестра, ни имени"""
        by_email = self.match_email(entry.raw_author_email)
        if by_email:
            return by_email

        raw_name = (entry.raw_author_name or "").strip()
        if not raw_name:
            return None

        if raw_name in seen_keys:
            return raw_name

        identity = find_equivalent(raw_name, self.roster, key=lambda i: i.canonical_name)
        if identity is not None:
            return identity.canonical_name

        logger.debug(f"Нераспознанный участник {raw_name!r} ({entry.source_tag})")
        return raw_name

    # ===== СВОД =====

    def aggregate(self, sources: Iterable[SourceRows]) -> Dict[str, AggregateStats]:
        stats: Dict[str, AggregateStats] = {}
        skipped = 0

        for source in sources:
            for entry in source.entries:
                day_key = resolve_date_key(entry.raw_date)
                if day_key is None:
                    skipped += 1
                    continue

                author = self.resolve_author(entry, stats.keys())
                if author is None:
                    skipped += 1
                    continue

                stats.setdefault(author, AggregateStats()).fold(day_key)

        if skipped:
            logger.debug(f"Пропущено записей без даты или автора: {skipped}")
        return stats


def aggregate(sources: Iterable[SourceRows], roster: Iterable[Identity]) -> Dict[str, AggregateStats]:
    return LogAggregator(roster).aggregate(sources)


def merge_stats(*stats_maps: Dict[str, AggregateStats]) -> Dict[str, AggregateStats]:
    """Объединение сводов: по каждому участнику - объединение множеств дней"""
    merged: Dict[str, AggregateStats] = {}
    for stats_map in stats_maps:
        for name, stats in stats_map.items():
            merged.setdefault(name, AggregateStats()).merge(stats)
    return merged
