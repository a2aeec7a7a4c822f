# services/google_sheets.py

import logging
from typing import Any, List, Sequence

import gspread
from gspread.exceptions import APIError, SpreadsheetNotFound, WorksheetNotFound

from database.exceptions import DatabaseConnectionError, DatabaseError, SheetNotFoundError
from database.store import Row, TableStore

logger = logging.getLogger(__name__)


def get_sheets_client(credentials_file: str) -> gspread.Client:
    try:
        return gspread.service_account(filename=credentials_file)
    except (OSError, ValueError) as e:
        logger.error(f"Ошибка авторизации Google Sheets: {e}")
        raise DatabaseConnectionError(f"Ошибка авторизации Google Sheets: {e}") from e


class GoogleSheetsStore(TableStore):
    """Хранилище поверх книги Google Sheets; значения читаются как отображаются"""

    def __init__(self, sheet_id: str, credentials_file: str, client: gspread.Client = None):
        self.sheet_id = sheet_id
        self.client = client or get_sheets_client(credentials_file)
        try:
            self.book = self.client.open_by_key(sheet_id)
        except (SpreadsheetNotFound, APIError) as e:
            raise DatabaseConnectionError(f"Не удалось открыть таблицу {sheet_id}: {e}") from e

    def _worksheet(self, sheet: str) -> gspread.Worksheet:
        try:
            return self.book.worksheet(sheet)
        except WorksheetNotFound as e:
            raise SheetNotFoundError(f"Лист {sheet!r} не найден") from e

    def sheet_names(self) -> List[str]:
        try:
            return [ws.title for ws in self.book.worksheets()]
        except APIError as e:
            raise DatabaseError(f"Ошибка чтения списка листов: {e}") from e

    def read_rows(self, sheet: str) -> List[Row]:
        try:
            return self._worksheet(sheet).get_all_values()
        except APIError as e:
            raise DatabaseError(f"Ошибка чтения листа {sheet!r}: {e}") from e

    def append_row(self, sheet: str, row: Sequence[Any]) -> None:
        try:
            self._worksheet(sheet).append_row(list(row), value_input_option="USER_ENTERED")
        except APIError as e:
            raise DatabaseError(f"Ошибка записи в лист {sheet!r}: {e}") from e

    def update_cell(self, sheet: str, row: int, col: int, value: Any) -> None:
        try:
            self._worksheet(sheet).update_cell(row, col, value)
        except APIError as e:
            raise DatabaseError(f"Ошибка записи в лист {sheet!r}: {e}") from e

    def create_sheet(self, sheet: str, headers: Sequence[str]) -> None:
        try:
            worksheet = self.book.add_worksheet(title=sheet, rows=1000, cols=max(len(headers), 10))
            if headers:
                worksheet.append_row(list(headers))
                worksheet.format("1:1", {"textFormat": {"bold": True}})
        except APIError as e:
            raise DatabaseError(f"Ошибка создания листа {sheet!r}: {e}") from e
