# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import ctypes
import io
from typing import Any, Dict, List, Optional, Tuple

import pytest

from drv_core.driver import Driver, initialize
from drv_core.symbols import (
    CLOSE,
    DATABASE_CAPABILITIES,
    ERRMSG,
    EXECUTE,
    FORMAT,
    FREE,
    INPUT_STREAM,
    OPEN,
    READ_LINE,
    Resolved,
    Slot,
)


class FakeNative:
    """
    Python stand-ins for the sqlite3 / libc entry points, with the same
    calling conventions the ctypes prototypes use.
    """

    SQLITE_CANTOPEN = 14
    SQLITE_ERROR = 1

    def __init__(self, stdin: bytes = b"") -> None:
        self.stdin = io.BytesIO(stdin)
        self.fail_paths: set = set()
        self.bad_statements: set = {b"NOT VALID SQL"}
        self.opened: List[Tuple[bytes, int]] = []
        self.executed: List[Tuple[int, bytes]] = []
        self.closed: List[int] = []
        self.freed: List[int] = []
        self.allocated: List[int] = []
        self._buffers: Dict[int, Any] = {}
        self._next_db = 0x1000

    # int sqlite3_open(const char*, sqlite3**)
    def open(self, path: bytes, dbp: Any) -> int:
        self._next_db += 0x10
        dbp.contents.value = self._next_db
        self.opened.append((path, self._next_db))
        return self.SQLITE_CANTOPEN if path in self.fail_paths else 0

    # int sqlite3_exec(sqlite3*, const char*, cb, arg, char**)
    def exec(self, db: Any, sql: bytes, cb: Any, arg: Any, errp: Any) -> int:
        assert cb is None and arg is None
        self.executed.append((db.value, sql))
        if sql not in self.bad_statements:
            return 0
        buf = ctypes.create_string_buffer(b'near "NOT": syntax error')
        addr = ctypes.addressof(buf)
        self._buffers[addr] = buf
        self.allocated.append(addr)
        errp.contents.value = addr
        return self.SQLITE_ERROR

    # int sqlite3_close(sqlite3*)
    def close(self, db: Any) -> int:
        self.closed.append(db.value if isinstance(db, ctypes.c_void_p) else db)
        return 0

    # void sqlite3_free(void*)
    def free(self, addr: int) -> None:
        self.freed.append(addr)
        self._buffers.pop(addr, None)

    # const char *sqlite3_errmsg(sqlite3*)
    def errmsg(self, db: Any) -> bytes:
        return b"unable to open database file"

    # char *fgets(char*, int, FILE*)
    def fgets(self, buf: Any, size: int, stream: Any) -> Optional[int]:
        line = self.stdin.readline(size - 1)
        if not line:
            return None
        ctypes.memmove(buf, line, len(line))
        return ctypes.addressof(buf)

    # int snprintf(char*, size_t, const char*, const char*)
    def snprintf(self, buf: Any, size: int, fmt: bytes, value: bytes) -> int:
        out = fmt % value
        data = out[: size - 1]
        ctypes.memmove(buf, data, len(data))
        return len(out)

    def slots(self) -> Dict[str, Slot]:
        table = {
            OPEN: self.open,
            EXECUTE: self.exec,
            CLOSE: self.close,
            FREE: self.free,
            ERRMSG: self.errmsg,
            READ_LINE: self.fgets,
            FORMAT: self.snprintf,
            INPUT_STREAM: object(),
        }
        return {cap: Resolved(cap, f"fake_{cap}", fn) for cap, fn in table.items()}


@pytest.fixture()
def fake() -> FakeNative:
    return FakeNative()


@pytest.fixture()
def fake_driver(fake: FakeNative) -> Driver:
    return Driver(fake.slots(), library="fake")


@pytest.fixture(scope="session")
def real_driver() -> Driver:
    drv = initialize()
    missing = [c for c in DATABASE_CAPABILITIES if c in drv.unresolved]
    if missing:
        pytest.skip(f"libsqlite3 not loadable here: {missing}")
    return drv
