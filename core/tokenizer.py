# core/tokenizer.py

import re
from typing import Any, List

# Токены короче этой длины (инициалы) не участвуют в сопоставлении
MIN_TOKEN_LENGTH = 2

_NON_WORD = re.compile(r"[^\w\s]|_")


def tokenize(raw: Any) -> List[str]:
    """Разбивает имя на нормализованные токены: нижний регистр, без пунктуации, длина > 1"""
    if raw is None:
        return []
    cleaned = _NON_WORD.sub("", str(raw).lower())
    return [token for token in cleaned.split() if len(token) >= MIN_TOKEN_LENGTH]
