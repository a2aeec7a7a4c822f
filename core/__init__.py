#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity Portal - Core Package
Движок сверки записей активности: токены имён, сопоставление участников,
ключи дней и свод статистики
"""

from .tokenizer import tokenize

from .identity import (
    are_names_equivalent,
    find_equivalent
)

from .dates import (
    resolve_date_key,
    extract_time_label
)

from .models import (
    ConfigurationError,
    Identity,
    ActivityEntry,
    SourceRows,
    AggregateStats,
    HistoryRecord
)

from .aggregator import (
    LogAggregator,
    aggregate,
    merge_stats
)

from .history import build_history

__all__ = [
    # Matching
    'tokenize',
    'are_names_equivalent',
    'find_equivalent',

    # Dates
    'resolve_date_key',
    'extract_time_label',

    # Models
    'ConfigurationError',
    'Identity',
    'ActivityEntry',
    'SourceRows',
    'AggregateStats',
    'HistoryRecord',

    # Aggregation
    'LogAggregator',
    'aggregate',
    'merge_stats',
    'build_history'
]
