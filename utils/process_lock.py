import os
import sys
import time
import logging
import threading
from pathlib import Path
from typing import Optional, IO

from database.exceptions import DatabaseLockError

logger = logging.getLogger(__name__)

DEFAULT_WAIT_SECONDS = 30.0
POLL_INTERVAL_SECONDS = 0.1


class StoreLock:
    """Межпроцессная блокировка записи в хранилище с ограниченным ожиданием"""

    # Один файл блокировки - один локальный мьютекс для потоков процесса
    _thread_locks = {}
    _registry_lock = threading.Lock()

    def __init__(self, lockfile, timeout: float = DEFAULT_WAIT_SECONDS):
        self.lockfile = Path(lockfile)
        self.timeout = timeout
        self.fp: Optional[IO] = None

        # Создаём директорию для lock файла
        self.lockfile.parent.mkdir(exist_ok=True, parents=True)

        key = str(self.lockfile.resolve())
        with StoreLock._registry_lock:
            self._thread_lock = StoreLock._thread_locks.setdefault(key, threading.Lock())

    def acquire(self) -> None:
        """Захватывает блокировку или выбрасывает DatabaseLockError по истечении ожидания"""
        deadline = time.monotonic() + self.timeout

        if not self._thread_lock.acquire(timeout=max(self.timeout, 0)):
            raise DatabaseLockError(f"Хранилище занято: не дождались блокировки за {self.timeout} с")

        try:
            self.fp = open(self.lockfile, "a+")
            while not self._try_lock_file():
                if time.monotonic() >= deadline:
                    raise DatabaseLockError(f"Хранилище занято: не дождались блокировки за {self.timeout} с")
                time.sleep(POLL_INTERVAL_SECONDS)
        except BaseException:
            self._close_file()
            self._thread_lock.release()
            raise

        logger.debug(f"Блокировка захвачена (PID: {os.getpid()})")

    def _try_lock_file(self) -> bool:
        try:
            if sys.platform == "win32":
                import msvcrt
                self.fp.seek(0)
                msvcrt.locking(self.fp.fileno(), msvcrt.LK_NBLCK, 1)
            else:
                import fcntl
                fcntl.flock(self.fp, fcntl.LOCK_EX | fcntl.LOCK_NB)
            return True
        except (IOError, OSError):
            return False

    def _close_file(self):
        if self.fp:
            self.fp.close()
            self.fp = None

    def release(self) -> None:
        """Освобождает блокировку"""
        if self.fp is None:
            return
        try:
            if sys.platform == "win32":
                import msvcrt
                self.fp.seek(0)
                msvcrt.locking(self.fp.fileno(), msvcrt.LK_UNLCK, 1)
            else:
                import fcntl
                fcntl.flock(self.fp, fcntl.LOCK_UN)
        except (IOError, OSError) as e:
            logger.warning(f"Ошибка освобождения блокировки: {e}")
        finally:
            self._close_file()
            self._thread_lock.release()
            logger.debug(f"Блокировка освобождена (PID: {os.getpid()})")

    def __enter__(self):
        """Поддержка context manager"""
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Поддержка context manager"""
        self.release()
