#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity Portal - Command Line
Запуск операций портала из командной строки, результат печатается как JSON

Версия: 1.0.0
Дата: 2026-01-20
"""

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from config import config
from core.dates import extract_time_label, resolve_date_key
from core.identity import are_names_equivalent
from database.exceptions import DatabaseError, DatabaseLockError
from services.portal_service import AuthorizationError, PortalService, create_store
from utils.datetime_utils import today_key
from utils.logger import setup_logger

logger = logging.getLogger(__name__)


def _print(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Портал учёта активности')
    parser.add_argument('--dev', action='store_true', help='Режим разработки (DEBUG логи)')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('users', help='Участники со статистикой дней')
    sub.add_parser('stats', help='Свод по всем ключам, включая нераспознанные имена')
    sub.add_parser('groups', help='Группы мониторов')
    sub.add_parser('sync-emails', help='Заполнить пустые e-mail в реестре')
    sub.add_parser('config', help='Показать конфигурацию')

    history = sub.add_parser('history', help='История записей участника')
    history.add_argument('name')
    history.add_argument('--id', dest='intern_id', required=True, help='Идентификатор участника')

    profile = sub.add_parser('profile', help='Профиль участника')
    profile.add_argument('name')

    submit = sub.add_parser('submit', help='Добавить запись активности')
    submit.add_argument('name')
    submit.add_argument('--id', dest='intern_id', required=True)
    submit.add_argument('--date', default=None, help='По умолчанию сегодня (зона отчётности)')
    submit.add_argument('--category', default='')
    submit.add_argument('--summary', default='')
    submit.add_argument('--proof', default='')
    submit.add_argument('--duration', default='')

    match = sub.add_parser('match', help='Проверить эквивалентность двух имён')
    match.add_argument('name_a')
    match.add_argument('name_b')

    date = sub.add_parser('date', help='Разобрать дату/время')
    date.add_argument('raw')

    return parser


def run(args, service_factory=None) -> int:
    if args.command == 'match':
        _print({"equivalent": are_names_equivalent(args.name_a, args.name_b)})
        return 0
    if args.command == 'date':
        _print({"day_key": resolve_date_key(args.raw), "time": extract_time_label(args.raw)})
        return 0
    if args.command == 'config':
        _print(config.to_dict())
        return 0

    service = service_factory() if service_factory else PortalService(create_store(config), config)

    if args.command == 'users':
        _print(service.get_users())
    elif args.command == 'stats':
        _print({name: stats.to_dict() for name, stats in sorted(service.get_stats().items())})
    elif args.command == 'groups':
        _print(service.get_groups())
    elif args.command == 'sync-emails':
        _print({"updated": service.sync_student_emails()})
    elif args.command == 'history':
        _print(service.get_history(args.name, args.intern_id))
    elif args.command == 'profile':
        _print(service.get_profile(args.name))
    elif args.command == 'submit':
        _print(service.submit_log({
            "name": args.name,
            "internId": args.intern_id,
            "date": args.date or today_key(),
            "category": args.category,
            "summary": args.summary,
            "proof": args.proof,
            "duration": args.duration
        }))
    return 0


def main(argv=None) -> int:
    """Главная функция запуска"""
    args = build_parser().parse_args(argv)

    config.ensure_directories()
    setup_logger(config)
    if args.dev:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.info("🔧 Режим разработки активирован")

    try:
        return run(args)
    except AuthorizationError as e:
        logger.error(f"⛔️ {e}")
        _print({"success": False, "error": str(e)})
        return 2
    except ValidationError as e:
        logger.error(f"❌ Неверные данные запроса: {e}")
        _print({"success": False, "error": "Invalid request"})
        return 2
    except DatabaseLockError as e:
        logger.error(f"⏳ {e}")
        _print({"success": False, "error": "Busy, try again"})
        return 3
    except DatabaseError as e:
        logger.error(f"💥 Ошибка хранилища: {e}")
        _print({"success": False, "error": str(e)})
        return 1


if __name__ == "__main__":
    sys.exit(main())
