#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity Portal - Portal Service
Операции портала поверх табличного хранилища

Чтение (участники, история, профили, группы) идёт без блокировки.
Любая запись выполняется под StoreLock; если хранилище занято дольше
таймаута, вызывающий получает DatabaseLockError и повторяет запрос.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from config import PortalConfig, StoreBackend
from core.aggregator import LogAggregator
from core.history import build_history
from core.identity import are_names_equivalent
from core.models import AggregateStats, Identity
from database.store import JsonTableStore, TableStore
from services.roster import RosterProvider, find_column
from services.sources import SourceRowProvider
from shared.models import (
    CourseProgressUpdate,
    LogSubmission,
    MonitorGroup,
    Profile,
    ProfileUpdate,
    UserSummary
)
from utils.process_lock import StoreLock

logger = logging.getLogger(__name__)

LOG_HEADERS = ["Name", "Date", "Category", "Summary", "Proof", "File", "Duration"]
PROFILE_HEADERS = ["Name", "Bio", "Photo", "LinkedIn", "Instagram"]
COURSE_HEADERS = ["Name", "Course Progress (JSON)"]

GROUPS_MAX_COLUMNS = 20


class AuthorizationError(Exception):
    """Предъявленный идентификатор не совпадает с реестром"""
    pass


def create_store(portal_config: PortalConfig) -> TableStore:
    """Хранилище по конфигурации: локальный JSON или Google Sheets"""
    if portal_config.store.backend == StoreBackend.SHEETS:
        from services.google_sheets import GoogleSheetsStore
        return GoogleSheetsStore(
            portal_config.integrations.google_sheet_id,
            portal_config.integrations.google_credentials_file
        )
    return JsonTableStore(portal_config.store.path)


def _reference_only(value: Optional[str]) -> str:
    """Ссылки храним как есть; встроенные base64-файлы не поддерживаются"""
    if not value:
        return ""
    if "base64," in value:
        logger.warning("⚠️ Встроенный файл base64 отброшен: загрузка файлов не поддерживается")
        return ""
    return value


class PortalService:
    """
    Сервис портала активности

    Возможности:
    - Список участников со статистикой дней (свод пересчитывается каждый раз)
    - История записей участника
    - Добавление записи активности
    - Профили, группы мониторов, прогресс курсов
    - Заполнение пустых e-mail в реестре по листам мониторов
    """

    def __init__(self, store: TableStore, portal_config: PortalConfig = None):
        if portal_config is None:
            from config import config as portal_config
        self.config = portal_config
        self.store = store
        self.roster_provider = RosterProvider(store, portal_config.sheets.users)
        self.source_provider = SourceRowProvider(store, portal_config.sheets)

    def _lock(self) -> StoreLock:
        return StoreLock(self.config.store.lock_file, timeout=self.config.store.lock_timeout_seconds)

    # ===== РЕЕСТР И АВТОРИЗАЦИЯ =====

    def admin_identity(self) -> Optional[Identity]:
        security = self.config.security
        if not security.admin_enabled:
            return None
        return Identity(canonical_name=security.admin_name, credential_id=security.admin_credential)

    def _is_admin(self, name: str, credential: Any) -> bool:
        admin = self.admin_identity()
        return bool(admin and name == admin.canonical_name and admin.verify_credential(credential))

    def _is_admin_credential(self, credential: Any) -> bool:
        admin = self.admin_identity()
        return bool(admin and admin.verify_credential(credential))

    def find_identity(self, name: str, roster: List[Identity] = None) -> Optional[Identity]:
        if roster is None:
            roster = self.roster_provider.load()
        return RosterProvider.find_by_name(roster, name)

    def is_valid_user(self, name: str, credential: Any) -> bool:
        """Имя сопоставляется с реестром, затем идентификатор сравнивается строго"""
        if not name or not credential:
            return False
        if self._is_admin(name, credential):
            return True
        identity = self.find_identity(name)
        return bool(identity and identity.verify_credential(credential))

    def _authorize(self, name: str, credential: Any) -> None:
        if not self.is_valid_user(name, credential):
            logger.warning(f"⛔️ Неверный идентификатор для {name!r}")
            raise AuthorizationError("Invalid Intern ID")

    # ===== СТАТИСТИКА =====

    def get_stats(self) -> Dict[str, AggregateStats]:
        roster = self.roster_provider.load()
        sources = self.source_provider.load()
        return LogAggregator(roster).aggregate(sources)

    def get_users(self) -> List[Dict[str, Any]]:
        roster = self.roster_provider.load()
        stats = LogAggregator(roster).aggregate(self.source_provider.load())
        photos = {p.name: p.photo for p in self._load_profiles() if p.photo}

        users = []
        for identity in roster:
            user_stats = stats.get(identity.canonical_name)
            users.append(UserSummary(
                name=identity.canonical_name,
                status=identity.status,
                days_completed=user_stats.days_completed if user_stats else 0,
                last_log_date=(user_stats.most_recent_day_key or "") if user_stats else "",
                photo=photos.get(identity.canonical_name, ""),
                is_monitor=identity.is_monitor,
                has_course_access=identity.is_monitor
            ).model_dump(by_alias=True))

        admin = self.admin_identity()
        if admin:
            users.append(UserSummary(
                name=admin.canonical_name,
                status="Active",
                role="admin",
                is_monitor=True,
                has_course_access=True
            ).model_dump(by_alias=True))

        unmatched = [name for name in stats if not any(i.canonical_name == name for i in roster)]
        if unmatched:
            logger.info(f"🔍 Записи без участника в реестре: {len(unmatched)} имён")
        logger.info(f"👥 Участников: {len(roster)}")
        return users

    # ===== ИСТОРИЯ =====

    def get_history(self, name: str, credential: Any) -> List[Dict[str, Any]]:
        if not name:
            return []
        admin_reader = self._is_admin_credential(credential)
        if not admin_reader and not self.is_valid_user(name, credential):
            logger.warning(f"⛔️ История недоступна для {name!r}: неверный идентификатор")
            return []

        roster = self.roster_provider.load()
        target = self.find_identity(name, roster) or Identity(canonical_name=name)
        records = build_history(target, self.source_provider.load(), roster)
        logger.info(f"📜 История {target.canonical_name!r}: {len(records)} записей")
        return [record.to_dict() for record in records]

    # ===== ЗАПИСЬ АКТИВНОСТИ =====

    def submit_log(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        submission = LogSubmission.model_validate(payload)
        self._authorize(submission.name, submission.intern_id)

        sheet = self.config.sheets.logs
        with self._lock():
            self.store.refresh()
            self.store.ensure_sheet(sheet, LOG_HEADERS)
            self.store.append_row(sheet, [
                submission.name,
                submission.date,
                submission.category,
                submission.summary,
                _reference_only(submission.proof),
                _reference_only(submission.file),
                submission.duration
            ])

        logger.info(f"✅ Запись активности добавлена: {submission.name!r} {submission.date!r}")
        return {"success": True}

    # ===== ПРОФИЛИ =====

    def _load_profiles(self) -> List[Profile]:
        rows = self.store.read_rows_or_empty(self.config.sheets.profiles)
        profiles = []
        for row in rows[1:]:
            if not row or not row[0].strip():
                continue
            padded = list(row) + [""] * (len(PROFILE_HEADERS) - len(row))
            profiles.append(Profile(
                name=padded[0],
                bio=padded[1],
                photo=padded[2],
                linkedin=padded[3],
                instagram=padded[4]
            ))
        return profiles

    def get_profile(self, name: str) -> Dict[str, Any]:
        for profile in self._load_profiles():
            if are_names_equivalent(profile.name, name):
                return profile.model_dump()
        return {}

    def save_profile(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        update = ProfileUpdate.model_validate(payload)
        self._authorize(update.name, update.intern_id)

        sheet = self.config.sheets.profiles
        with self._lock():
            self.store.refresh()
            self.store.ensure_sheet(sheet, PROFILE_HEADERS)
            rows = self.store.read_rows(sheet)
            row_index = next(
                (i + 1 for i, row in enumerate(rows) if i > 0 and row and row[0] == update.name),
                None
            )

            photo = _reference_only(update.photo)
            values = {
                2: update.bio,
                3: photo or None,
                4: update.linkedin,
                5: update.instagram
            }

            if row_index is not None:
                for col, value in values.items():
                    if value is not None:
                        self.store.update_cell(sheet, row_index, col, value)
                current = rows[row_index - 1]
                photo = photo or (current[2] if len(current) > 2 else "")
            else:
                self.store.append_row(sheet, [
                    update.name,
                    update.bio or "",
                    photo,
                    update.linkedin or "",
                    update.instagram or ""
                ])

        logger.info(f"✅ Профиль сохранён: {update.name!r}")
        return {"success": True, "photo": photo}

    # ===== ГРУППЫ МОНИТОРОВ =====

    def get_groups(self) -> List[Dict[str, Any]]:
        """Группы: вторая строка листа - мониторы, ниже - участники; колонки с B"""
        rows = self.store.read_rows_or_empty(self.config.sheets.groups)
        data = [row[1:1 + GROUPS_MAX_COLUMNS] for row in rows[1:]]
        if not data:
            return []

        groups = []
        headers = data[0]
        for col, monitor in enumerate(headers):
            if not monitor.strip():
                continue
            members = [row[col] for row in data[1:] if col < len(row) and row[col].strip()]
            groups.append(MonitorGroup(monitor=monitor, members=members).model_dump())
        return groups

    # ===== ПРОГРЕСС КУРСОВ =====

    def get_course_progress(self, name: str) -> Dict[str, Any]:
        rows = self.store.read_rows_or_empty(self.config.sheets.courses)
        row = next((r for r in rows[1:] if r and r[0] == name), None)
        if row is None or len(row) < 2 or not row[1]:
            return {}
        try:
            progress = json.loads(row[1])
        except json.JSONDecodeError:
            logger.warning(f"⚠️ Повреждён прогресс курсов для {name!r}")
            return {}
        return progress if isinstance(progress, dict) else {}

    def save_course_progress(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        update = CourseProgressUpdate.model_validate(payload)
        self._authorize(update.name, update.intern_id)

        sheet = self.config.sheets.courses
        blob = json.dumps(update.progress, ensure_ascii=False)
        with self._lock():
            self.store.refresh()
            self.store.ensure_sheet(sheet, COURSE_HEADERS)
            rows = self.store.read_rows(sheet)
            row_index = next(
                (i + 1 for i, row in enumerate(rows) if i > 0 and row and row[0] == update.name),
                None
            )
            if row_index is not None:
                self.store.update_cell(sheet, row_index, 2, blob)
            else:
                self.store.append_row(sheet, [update.name, blob])

        return {"success": True}

    # ===== СИНХРОНИЗАЦИЯ E-MAIL =====

    def sync_student_emails(self) -> int:
        """Заполняет пустые e-mail в реестре по парам (имя, e-mail) из листов мониторов"""
        contacts: Dict[str, str] = {}
        for name, email in self.source_provider.monitor_contacts():
            if "@" in email:
                contacts[name.strip()] = email.strip()

        sheet = self.config.sheets.users
        updates = 0
        with self._lock():
            self.store.refresh()
            rows = self.store.read_rows_or_empty(sheet)
            if not rows:
                logger.warning(f"⚠️ Лист реестра {sheet!r} не найден")
                return 0

            email_col = find_column(rows[0], exact="email")
            if email_col < 0:
                email_col = len(rows[0])
                self.store.update_cell(sheet, 1, email_col + 1, "Email")

            for i, row in enumerate(rows[1:], start=2):
                name = row[0].strip() if row else ""
                current = row[email_col].strip() if email_col < len(row) else ""
                if not name or current:
                    continue

                found = contacts.get(name)
                if found is None:
                    found = next(
                        (email for contact_name, email in contacts.items()
                         if are_names_equivalent(name, contact_name)),
                        None
                    )
                if found:
                    self.store.update_cell(sheet, i, email_col + 1, found)
                    updates += 1

        logger.info(f"📧 Синхронизировано e-mail: {updates}")
        return updates
