# database/store.py

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from database.exceptions import DatabaseError, SheetNotFoundError

logger = logging.getLogger(__name__)

Row = List[str]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


class TableStore:
    """
    Табличное хранилище: книга из именованных листов со строками ячеек

    Чтение всегда полным сканированием листа, значения - отображаемые строки,
    первая строка листа - заголовок.
    """

    def sheet_names(self) -> List[str]:
        raise NotImplementedError

    def refresh(self) -> None:
        """Сбросить локальный кэш перед записью под блокировкой"""
        pass

    def has_sheet(self, sheet: str) -> bool:
        return sheet in self.sheet_names()

    def read_rows(self, sheet: str) -> List[Row]:
        raise NotImplementedError

    def append_row(self, sheet: str, row: Sequence[Any]) -> None:
        raise NotImplementedError

    def update_cell(self, sheet: str, row: int, col: int, value: Any) -> None:
        """Запись ячейки; row и col нумеруются с 1, как в таблицах"""
        raise NotImplementedError

    def create_sheet(self, sheet: str, headers: Sequence[str]) -> None:
        raise NotImplementedError

    def ensure_sheet(self, sheet: str, headers: Sequence[str]) -> None:
        if not self.has_sheet(sheet):
            logger.info(f"📄 Создаём лист {sheet!r}")
            self.create_sheet(sheet, headers)

    def read_rows_or_empty(self, sheet: str) -> List[Row]:
        """Строки листа или пустой список, если листа нет"""
        if not self.has_sheet(sheet):
            return []
        return self.read_rows(sheet)


class JsonTableStore(TableStore):
    """Книга в одном JSON файле: {"лист": [[ячейки], ...]}"""

    def __init__(self, path):
        self.path = Path(path)
        self._sheets: Optional[Dict[str, List[Row]]] = None

    def _load(self) -> Dict[str, List[Row]]:
        if self._sheets is None:
            if self.path.exists():
                try:
                    with open(self.path, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                except json.JSONDecodeError as e:
                    raise DatabaseError(f"Повреждён файл хранилища {self.path}: {e}") from e
                self._sheets = {
                    name: [[_cell(value) for value in row] for row in rows]
                    for name, rows in raw.items()
                }
            else:
                self._sheets = {}
        return self._sheets

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._load(), f, ensure_ascii=False, indent=2)

    def refresh(self) -> None:
        self._sheets = None

    def sheet_names(self) -> List[str]:
        return list(self._load().keys())

    def read_rows(self, sheet: str) -> List[Row]:
        sheets = self._load()
        if sheet not in sheets:
            raise SheetNotFoundError(f"Лист {sheet!r} не найден")
        return [list(row) for row in sheets[sheet]]

    def append_row(self, sheet: str, row: Sequence[Any]) -> None:
        sheets = self._load()
        if sheet not in sheets:
            raise SheetNotFoundError(f"Лист {sheet!r} не найден")
        sheets[sheet].append([_cell(value) for value in row])
        self._save()

    def update_cell(self, sheet: str, row: int, col: int, value: Any) -> None:
        sheets = self._load()
        if sheet not in sheets:
            raise SheetNotFoundError(f"Лист {sheet!r} не найден")
        rows = sheets[sheet]
        while len(rows) < row:
            rows.append([])
        target = rows[row - 1]
        while len(target) < col:
            target.append("")
        target[col - 1] = _cell(value)
        self._save()

    def create_sheet(self, sheet: str, headers: Sequence[str]) -> None:
        sheets = self._load()
        sheets.setdefault(sheet, [[_cell(h) for h in headers]] if headers else [])
        self._save()

    def load_sheet(self, sheet: str, rows: Sequence[Sequence[Any]]) -> None:
        """Заменить содержимое листа целиком (импорт, тестовые данные)"""
        self._load()[sheet] = [[_cell(value) for value in row] for row in rows]
        self._save()
