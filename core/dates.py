#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity Portal - Date Key Resolver
Разбор дат и времени неизвестного формата в канонический ключ дня

Значения читаются "как отображаются" в таблице: строки вида 23-01-2026,
01/10/2026 9:05 AM, Jan 5, 2026 • 21:30 или ISO.
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Optional

import pandas as pd

from utils.datetime_utils import format_day_key, format_time_label
from utils.validators import is_valid_day_key

logger = logging.getLogger(__name__)

BULLET = "•"
RELATIVE_WORDS = {"now", "today", "yesterday", "tomorrow"}

NUMERIC_DATE_PATTERN = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})")
TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?\s*(AM|PM|am|pm)?")

# Общий разбор допускается только для полной даты: день, месяц и год в строке.
# Иначе парсер подставляет недостающее (текущий день или год 1).
_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"
YEAR_PATTERN = re.compile(r"(?<!\d)\d{4}(?!\d)")
ISO_DATE_PATTERN = re.compile(r"(?<!\d)\d{4}[-/.]\d{1,2}[-/.]\d{1,2}(?!\d)")
NAMED_DATE_PATTERN = re.compile(
    rf"\b{_MONTH}\s+\d{{1,2}}(?![\d:])|(?<![\d:])\d{{1,2}}(?:st|nd|rd|th)?\s+{_MONTH}",
    re.IGNORECASE
)


def _clean(raw: Any) -> str:
    """Приводит значение к строке и заменяет разделитель даты и времени пробелом"""
    if raw is None:
        return ""
    return str(raw).strip().replace(BULLET, " ").strip()


def _has_full_date(text: str) -> bool:
    if ISO_DATE_PATTERN.search(text):
        return True
    return bool(YEAR_PATTERN.search(text) and NAMED_DATE_PATTERN.search(text))


def _generic_parse(text: str) -> Optional[datetime]:
    """Общий разбор даты/времени; None, если строка не распознана или дата неполная"""
    # pandas понимает "now"/"today" как текущий момент - это не дата записи
    if text.lower() in RELATIVE_WORDS or not _has_full_date(text):
        return None
    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Не удалось разобрать дату {text!r}: {e}")
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def resolve_date_key(raw: Any) -> Optional[str]:
    """
    Канонический ключ дня YYYY-MM-DD или None

    Для числовых дат разделитель не говорит о порядке дня и месяца:
    - первая часть больше 12 - это день;
    - иначе вторая часть больше 12 - это день;
    - иначе (оба значения до 12) - сначала месяц.
    """
    text = _clean(raw)
    if not text:
        return None

    match = NUMERIC_DATE_PATTERN.match(text)
    if match:
        p1, p2, year = int(match.group(1)), int(match.group(2)), int(match.group(3))
        if p1 > 12:
            day, month = p1, p2
        else:
            # p2 > 12 или неоднозначная дата: месяц первым
            month, day = p1, p2
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            logger.debug(f"Несуществующая дата: {text!r}")
            return None

    parsed = _generic_parse(text)
    if parsed is None:
        return None
    day_key = format_day_key(parsed)
    return day_key if is_valid_day_key(day_key) else None


def extract_time_label(raw: Any) -> str:
    """Время для отображения в формате hh:mm AM/PM; пустая строка, если времени нет"""
    text = _clean(raw)
    if not text:
        return ""

    match = TIME_PATTERN.search(text)
    if match:
        hour = int(match.group(1))
        minute = match.group(2)
        marker = match.group(4)
        if marker:
            return f"{hour:02d}:{minute} {marker.upper()}"
        suffix = "PM" if hour >= 12 else "AM"
        hour = hour % 12 or 12
        return f"{hour:02d}:{minute} {suffix}"

    parsed = _generic_parse(text)
    if parsed is None:
        return ""
    return format_time_label(parsed)
