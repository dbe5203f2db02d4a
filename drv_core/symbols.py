# MIT License © 2025 Motohiro Suzuki
"""
drv_core/symbols.py

Capabilities of the dispatch table and how each one is resolved.

A slot is either Resolved(capability, symbol, target) or
Unresolved(capability, reason). Forwarding code goes through require(),
which never hands out an Unresolved slot.

Function symbols are bound with their C prototype (argtypes/restype)
right after lookup, so every later call is type-checked by ctypes.
"""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

from drv_core.errors import UnresolvedCapabilityError

# -----------------------------
# Capability names
# -----------------------------

OPEN = "open"
EXECUTE = "execute"
CLOSE = "close"
FREE = "free"
ERRMSG = "errmsg"
READ_LINE = "read_line"
FORMAT = "format"
INPUT_STREAM = "input_stream"

DATABASE_CAPABILITIES = (OPEN, EXECUTE, CLOSE, FREE, ERRMSG)
STANDARD_CAPABILITIES = (READ_LINE, FORMAT, INPUT_STREAM)
ALL_CAPABILITIES = DATABASE_CAPABILITIES + STANDARD_CAPABILITIES


# -----------------------------
# Slot sum type
# -----------------------------

@dataclass(frozen=True)
class Resolved:
    capability: str
    symbol: str
    target: Any


@dataclass(frozen=True)
class Unresolved:
    capability: str
    reason: str


Slot = Union[Resolved, Unresolved]


def require(slot: Optional[Slot], capability: str) -> Any:
    """
    Return the callable (or data object) behind a Resolved slot.
    """
    if isinstance(slot, Resolved):
        return slot.target
    if isinstance(slot, Unresolved):
        raise UnresolvedCapabilityError(capability, slot.reason)
    raise UnresolvedCapabilityError(capability, "slot missing from dispatch table")


# -----------------------------
# Symbol specs
# -----------------------------

@dataclass(frozen=True)
class SymbolSpec:
    capability: str
    names: Tuple[str, ...]
    argtypes: Optional[Tuple[Any, ...]] = None
    restype: Any = None
    data: bool = False


# sqlite3 library
SQLITE_SYMBOLS = (
    # int sqlite3_open(const char *filename, sqlite3 **ppDb)
    SymbolSpec(OPEN, ("sqlite3_open",), (ctypes.c_char_p, ctypes.POINTER(ctypes.c_void_p)), ctypes.c_int),
    # int sqlite3_exec(sqlite3*, const char *sql, callback, void *arg, char **errmsg)
    SymbolSpec(
        EXECUTE,
        ("sqlite3_exec",),
        (ctypes.c_void_p, ctypes.c_char_p, ctypes.c_void_p, ctypes.c_void_p, ctypes.POINTER(ctypes.c_void_p)),
        ctypes.c_int,
    ),
    # int sqlite3_close(sqlite3*)
    SymbolSpec(CLOSE, ("sqlite3_close",), (ctypes.c_void_p,), ctypes.c_int),
    # void sqlite3_free(void*)
    SymbolSpec(FREE, ("sqlite3_free",), (ctypes.c_void_p,), None),
    # const char *sqlite3_errmsg(sqlite3*)
    SymbolSpec(ERRMSG, ("sqlite3_errmsg",), (ctypes.c_void_p,), ctypes.c_char_p),
)

# process default namespace (libc)
STANDARD_SYMBOLS = (
    # char *fgets(char *s, int size, FILE *stream)
    SymbolSpec(READ_LINE, ("fgets",), (ctypes.c_char_p, ctypes.c_int, ctypes.c_void_p), ctypes.c_void_p),
    # int snprintf(char *str, size_t size, const char *format, ...)
    # bound with the single-substitution shape it is always called with
    SymbolSpec(
        FORMAT,
        ("snprintf", "_snprintf"),
        (ctypes.c_char_p, ctypes.c_size_t, ctypes.c_char_p, ctypes.c_char_p),
        ctypes.c_int,
    ),
    # FILE *stdin  (glibc/musl: stdin, macOS: __stdinp)
    SymbolSpec(INPUT_STREAM, ("stdin", "__stdinp"), data=True),
)


def resolve(lib: Optional[ctypes.CDLL], spec: SymbolSpec, *, missing_lib_reason: str = "library not loaded") -> Slot:
    """
    Look up spec.names in order against lib and bind the first hit.
    """
    if lib is None:
        return Unresolved(spec.capability, missing_lib_reason)

    for name in spec.names:
        if spec.data:
            try:
                target = ctypes.c_void_p.in_dll(lib, name)
            except ValueError:
                continue
            return Resolved(spec.capability, name, target)

        try:
            # item access returns a fresh function object (getattr caches it on lib)
            fn = lib[name]
        except AttributeError:
            continue
        if spec.argtypes is not None:
            fn.argtypes = list(spec.argtypes)
        fn.restype = spec.restype
        return Resolved(spec.capability, name, fn)

    return Unresolved(spec.capability, f"symbol not found; tried {list(spec.names)}")


def resolve_all(lib: Optional[ctypes.CDLL], specs: Sequence[SymbolSpec], **kw: Any) -> Tuple[Slot, ...]:
    return tuple(resolve(lib, s, **kw) for s in specs)
