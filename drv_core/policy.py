# MIT License © 2025 Motohiro Suzuki
"""
Driver policy (minimal)

- candidates:    library identifiers tried in order by initialize()
- strict:        raise DriverInitError instead of leaving slots Unresolved
- input_buffer:  default read_line() buffer size
- format_buffer: default format_string() destination size
"""

from __future__ import annotations

import ctypes.util
import functools
import sys
from dataclasses import dataclass, field, replace
from typing import Tuple


@functools.lru_cache(maxsize=None)
def default_candidates() -> Tuple[str, ...]:
    if sys.platform == "darwin":
        names = ["libsqlite3.dylib", "libsqlite3.0.dylib"]
    elif sys.platform == "win32":
        names = ["sqlite3.dll", "winsqlite3.dll"]
    else:
        # unversioned dev symlink first, then the runtime soname
        names = ["libsqlite3.so", "libsqlite3.so.0"]

    found = ctypes.util.find_library("sqlite3")
    if found and found not in names:
        names.append(found)
    return tuple(names)


@dataclass(frozen=True)
class DriverPolicy:
    candidates: Tuple[str, ...] = field(default_factory=default_candidates)
    strict: bool = False
    input_buffer: int = 256
    format_buffer: int = 512

    def with_library_first(self, path: str) -> "DriverPolicy":
        rest = tuple(c for c in self.candidates if c != path)
        return replace(self, candidates=(path,) + rest)
