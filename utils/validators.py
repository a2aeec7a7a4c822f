import re
from typing import Any, Optional

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")
DAY_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_email(value: Any) -> Optional[str]:
    """Приводит e-mail к нижнему регистру; пустое значение -> None"""
    if value is None:
        return None
    email = str(value).strip().lower()
    return email or None


def is_email_like(value: Any) -> bool:
    email = normalize_email(value)
    return bool(email and EMAIL_PATTERN.match(email))


def is_valid_day_key(day_key: str) -> bool:
    return isinstance(day_key, str) and bool(DAY_KEY_PATTERN.match(day_key))
