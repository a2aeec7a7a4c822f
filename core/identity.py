#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity Portal - Identity Matcher
Сопоставление свободно написанных имён с каноническими записями реестра

Сравнение только по точному совпадению токенов: "Kanishk" и "Kanishka"
разные люди. Пороговые значения подобраны эмпирически и вынесены в константы.
"""

import logging
from typing import Any, Iterable, Optional, TypeVar

from core.tokenizer import tokenize

logger = logging.getLogger(__name__)

# ===== ПОРОГИ СОПОСТАВЛЕНИЯ =====

RATIO_THRESHOLD = 0.7
RATIO_MIN_TOKENS = 3
SHORT_NAME_MIN_MATCHES = 2

T = TypeVar("T")


def _fold(name: Any) -> str:
    return str(name).lower().strip()


def are_names_equivalent(name_a: Any, name_b: Any) -> bool:
    """
    Решает, обозначают ли два имени одного человека

    Порядок правил:
    1. Точное совпадение без учёта регистра и пробелов по краям
    2. Полное вхождение токенов короткого имени в длинное
    3. Для имён от 3 токенов - доля совпавших токенов больше порога
    4. Для коротких имён - минимум два совпавших токена
    """
    if name_a is None or name_b is None:
        return False

    folded_a = _fold(name_a)
    folded_b = _fold(name_b)
    if folded_a and folded_a == folded_b:
        return True

    tokens_a = set(tokenize(folded_a))
    tokens_b = set(tokenize(folded_b))
    if not tokens_a or not tokens_b:
        return False

    match_count = len(tokens_a & tokens_b)
    min_len = min(len(tokens_a), len(tokens_b))
    max_len = max(len(tokens_a), len(tokens_b))

    if match_count == min_len:
        return True

    if max_len >= RATIO_MIN_TOKENS:
        return match_count / max_len > RATIO_THRESHOLD

    return match_count >= SHORT_NAME_MIN_MATCHES


def find_equivalent(name: Any, candidates: Iterable[T], key=None) -> Optional[T]:
    """Первый кандидат (в порядке перечисления), эквивалентный имени"""
    for candidate in candidates:
        candidate_name = key(candidate) if key else candidate
        if are_names_equivalent(candidate_name, name):
            return candidate
    logger.debug(f"Имя не сопоставлено с реестром: {name!r}")
    return None
