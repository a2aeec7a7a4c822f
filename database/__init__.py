# database/__init__.py

from .exceptions import (
    DatabaseError,
    DatabaseConnectionError,
    DatabaseLockError,
    SheetNotFoundError
)

from .store import (
    TableStore,
    JsonTableStore
)

__all__ = [
    'DatabaseError',
    'DatabaseConnectionError',
    'DatabaseLockError',
    'SheetNotFoundError',
    'TableStore',
    'JsonTableStore'
]
