# MIT License © 2025 Motohiro Suzuki
"""
Canonical native loader entrypoint

Purpose:
- Provide a stable import path: `from drv_core.native import load_library`
- Provide the process default symbol namespace (libc facilities such as
  fgets / snprintf / stdin), which is always present

Windows: the C runtime does not export `stdin` as a data symbol, so the
input_stream capability stays Unresolved there and read_line() raises
UnresolvedCapabilityError. format_string() resolves via _snprintf.

This keeps higher-level modules (e.g., driver.py) independent from the
actual loader module name.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import sys
from typing import Optional, Sequence, Tuple

from .dylib_loader import load_first as _load_first


def load_library(candidates: Sequence[str], *, mode: Optional[int] = None) -> Tuple[ctypes.CDLL, str]:
    """
    Load the first loadable shared library among candidates.

    Args:
        candidates: Library identifiers (sonames or paths), tried in order.
        mode: Optional ctypes dlopen mode (defaults to RTLD_GLOBAL).
    """
    return _load_first(candidates, mode=mode)


def process_namespace() -> ctypes.CDLL:
    """
    Return a handle on the process's default symbol namespace.

    On POSIX this is dlopen(NULL): every symbol already loaded into the
    process, libc included. Windows has no such handle, so the C runtime
    is opened instead.
    """
    if sys.platform == "win32":
        return ctypes.CDLL(ctypes.util.find_library("c") or "msvcrt")
    return ctypes.CDLL(None)
