# services/roster.py

import logging
from typing import List, Optional, Sequence

from core.identity import find_equivalent
from core.models import Identity
from database.store import TableStore
from utils.validators import normalize_email

logger = logging.getLogger(__name__)

NAME_COL = 0
CREDENTIAL_COL = 1
STATUS_COL = 2
DEFAULT_MONITOR_COL = 3


def find_column(headers: Sequence[str], exact: str = None, contains: str = None) -> int:
    """Индекс колонки по заголовку (без учёта регистра) или -1"""
    for index, header in enumerate(headers):
        title = str(header).strip().lower()
        if exact is not None and title == exact:
            return index
        if contains is not None and contains in title:
            return index
    return -1


def _cell(row: Sequence[str], index: int) -> str:
    return row[index] if 0 <= index < len(row) else ""


def _is_checked(value) -> bool:
    return value is True or str(value).strip().lower() == "true"


class RosterProvider:
    """Реестр участников из листа пользователей (Name, ID, Status, ..., Email)"""

    def __init__(self, store: TableStore, users_sheet: str):
        self.store = store
        self.users_sheet = users_sheet

    def load(self) -> List[Identity]:
        rows = self.store.read_rows_or_empty(self.users_sheet)
        if len(rows) < 2:
            return []

        headers = rows[0]
        email_col = find_column(headers, exact="email")
        monitor_col = find_column(headers, contains="monitor")
        if monitor_col < 0:
            monitor_col = DEFAULT_MONITOR_COL

        roster = []
        for row in rows[1:]:
            name = row[NAME_COL].strip() if row else ""
            if not name:
                continue
            roster.append(Identity(
                canonical_name=name,
                credential_id=str(_cell(row, CREDENTIAL_COL)),
                email=normalize_email(_cell(row, email_col)) if email_col >= 0 else None,
                status=str(_cell(row, STATUS_COL)),
                is_monitor=_is_checked(_cell(row, monitor_col))
            ))
        logger.debug(f"Реестр: {len(roster)} участников")
        return roster

    def email_column(self) -> int:
        rows = self.store.read_rows_or_empty(self.users_sheet)
        return find_column(rows[0], exact="email") if rows else -1

    @staticmethod
    def find_by_name(roster: List[Identity], name: str) -> Optional[Identity]:
        return find_equivalent(name, roster, key=lambda i: i.canonical_name)

    @staticmethod
    def find_by_email(roster: List[Identity], email: str) -> Optional[Identity]:
        email = normalize_email(email)
        if not email:
            return None
        return next((i for i in roster if i.email == email), None)
