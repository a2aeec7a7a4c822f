# core/history.py

import logging
from datetime import date
from typing import Iterable, List, Set

from core.aggregator import LogAggregator
from core.dates import extract_time_label, resolve_date_key
from core.models import HistoryRecord, Identity, SourceRows
from utils.datetime_utils import parse_day_key

logger = logging.getLogger(__name__)


def build_history(target: Identity, sources: Iterable[SourceRows], roster: Iterable[Identity]) -> List[HistoryRecord]:
    """
    История записей одного участника, новые сверху

    Автор каждой записи определяется так же, как при своде, но без свёртки.
    Записи без распознанной даты не попадают в историю.
    """
    aggregator = LogAggregator(roster)
    seen_keys: Set[str] = set()
    records: List[HistoryRecord] = []

    for source in sources:
        for entry in source.entries:
            day_key = resolve_date_key(entry.raw_date)
            if day_key is None:
                continue

            author = aggregator.resolve_author(entry, seen_keys)
            if author is None:
                continue
            seen_keys.add(author)

            if author != target.canonical_name or not source.include_in_history:
                continue

            records.append(HistoryRecord(
                day_key=day_key,
                time_label=extract_time_label(entry.raw_date),
                name=entry.raw_author_name,
                category=entry.category,
                summary=entry.summary,
                proof_ref=entry.proof_ref,
                file_ref=entry.file_ref,
                duration_label=entry.duration_label,
                source_tag=entry.source_tag or source.source_tag
            ))

    # sort стабилен: при равных днях сохраняется порядок источников
    records.sort(key=lambda r: parse_day_key(r.day_key) or date.min, reverse=True)
    logger.debug(f"История {target.canonical_name!r}: {len(records)} записей")
    return records
