# database/exceptions.py


class DatabaseError(Exception):
    """Базовое исключение для ошибок хранилища"""
    pass


class DatabaseConnectionError(DatabaseError):
    """Ошибка подключения к хранилищу"""
    pass


class DatabaseLockError(DatabaseError):
    """Хранилище занято: блокировка записи не получена вовремя"""
    pass


class SheetNotFoundError(DatabaseError):
    """Лист не найден в книге"""
    pass
