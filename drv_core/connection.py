# MIT License © 2025 Motohiro Suzuki
"""
drv_core/connection.py

Opaque connection handle.

- open_connection(): forwards to sqlite3_open; failure -> None (no handle)
- Connection.execute(): forwards the statement verbatim to sqlite3_exec
  (no callback, no callback context); the statement is never inspected
- Connection.close(): forwards to sqlite3_close once; later calls are no-ops

A liveness flag guards every operation: a closed handle raises
ConnectionClosedError instead of touching a dangling native reference.
"""

from __future__ import annotations

import ctypes
import logging
import os
from typing import Any, Optional, Union

from drv_core.errors import ConnectionClosedError
from drv_core.symbols import CLOSE, ERRMSG, EXECUTE, FREE, OPEN, Resolved

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _decode(raw: Any) -> str:
    if raw is None:
        return "(no message)"
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return str(raw)


class Connection:
    def __init__(self, driver: Any, db: ctypes.c_void_p, path: str) -> None:
        self._driver = driver
        self._db: Optional[ctypes.c_void_p] = db
        self.path = path

    @property
    def driver(self) -> Any:
        return self._driver

    @property
    def live(self) -> bool:
        return self._db is not None

    def _require_live(self) -> ctypes.c_void_p:
        if self._db is None:
            raise ConnectionClosedError(f"connection to {self.path!r} is closed")
        return self._db

    def execute(self, statement: str) -> bool:
        """
        Run statement as-is. Returns True on success, False on failure
        (the error is logged and the handle stays usable).
        """
        db = self._require_live()
        exec_fn = self._driver.fn(EXECUTE)
        free_fn = self._driver.fn(FREE)

        err = ctypes.c_void_p()
        rc = exec_fn(db, statement.encode("utf-8"), None, None, ctypes.pointer(err))
        if not rc:
            return True

        if err.value:
            msg = _decode(ctypes.string_at(err.value))
            free_fn(err.value)
        else:
            msg = _decode(self._driver.fn(ERRMSG)(db))
        logger.error("SQL error: %s", msg)
        return False

    def close(self) -> None:
        if self._db is None:
            logger.debug("close ignored; connection to %r already closed", self.path)
            return
        close_fn = self._driver.fn(CLOSE)
        db, self._db = self._db, None
        rc = close_fn(db)
        if rc:
            logger.warning("close of %r returned rc=%s", self.path, rc)

    def __enter__(self) -> "Connection":
        self._require_live()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "live" if self.live else "closed"
        return f"<Connection {self.path!r} {state}>"


def open_connection(driver: Any, path: PathLike) -> Optional[Connection]:
    """
    Open (or create) the database at path.

    On failure the native error message is logged once and None is
    returned; the partial native reference SQLite hands back is closed.
    """
    p = os.fspath(path)
    open_fn = driver.fn(OPEN)
    errmsg_fn = driver.fn(ERRMSG)

    db = ctypes.c_void_p()
    rc = open_fn(p.encode("utf-8"), ctypes.pointer(db))
    if not rc:
        return Connection(driver, db, p)

    logger.error("Cannot open database: %s", _decode(errmsg_fn(db)))
    if db.value and isinstance(driver.slots.get(CLOSE), Resolved):
        driver.fn(CLOSE)(db)
    return None


def close_connection(handle: Optional[Connection]) -> None:
    if handle is None:
        return
    handle.close()
