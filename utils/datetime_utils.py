from datetime import datetime, date
from typing import Optional

import pytz

from utils.validators import is_valid_day_key

# Все ключи дней считаются в одной зоне отчётности (UTC+5:30)
REPORTING_TZ = pytz.timezone("Asia/Kolkata")

DAY_KEY_FORMAT = "%Y-%m-%d"
TIME_LABEL_FORMAT = "%I:%M %p"


def now_reporting() -> datetime:
    return datetime.now(REPORTING_TZ)


def today_key() -> str:
    return now_reporting().strftime(DAY_KEY_FORMAT)


def to_reporting(dt: datetime) -> datetime:
    """Наивное время считается уже локальным для зоны отчётности"""
    if dt.tzinfo is None:
        return REPORTING_TZ.localize(dt)
    return dt.astimezone(REPORTING_TZ)


def format_day_key(dt: datetime) -> str:
    return to_reporting(dt).strftime(DAY_KEY_FORMAT)


def format_time_label(dt: datetime) -> str:
    return to_reporting(dt).strftime(TIME_LABEL_FORMAT)


def parse_day_key(day_key: str) -> Optional[date]:
    if not is_valid_day_key(day_key):
        return None
    try:
        return datetime.strptime(day_key, DAY_KEY_FORMAT).date()
    except (TypeError, ValueError):
        return None
