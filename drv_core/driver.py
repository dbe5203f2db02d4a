# MIT License © 2025 Motohiro Suzuki
"""
drv_core/driver.py

Dispatch table + initialize()

要点:
- initialize() loads libsqlite3 from an ordered candidate list and resolves
  every capability; the result is an explicit Driver context object, not a
  process global
- the slot mapping is read-only once built (no slot is ever reassigned)
- unresolved capabilities are reported (Driver.unresolved) and logged;
  DriverPolicy(strict=True) turns them into DriverInitError
- every forwarding call goes through Driver.fn(), which refuses Unresolved slots
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from drv_core import connection as _conn
from drv_core import text_io as _text
from drv_core.errors import ConnectionClosedError, DriverError, DriverInitError, LibraryLoadError
from drv_core.native import load_library, process_namespace
from drv_core.policy import DriverPolicy
from drv_core.symbols import (
    ALL_CAPABILITIES,
    SQLITE_SYMBOLS,
    STANDARD_SYMBOLS,
    Resolved,
    Slot,
    Unresolved,
    require,
    resolve_all,
)

logger = logging.getLogger(__name__)


class Driver:
    """
    Read-only dispatch table plus the forwarding API built on it.
    """

    def __init__(
        self,
        slots: Mapping[str, Slot],
        *,
        library: Optional[str] = None,
        policy: Optional[DriverPolicy] = None,
    ) -> None:
        table: Dict[str, Slot] = {}
        for cap in ALL_CAPABILITIES:
            table[cap] = slots.get(cap) or Unresolved(cap, "slot missing from dispatch table")
        self._slots = MappingProxyType(table)
        self.library = library
        self.policy = policy or DriverPolicy()

    # -----------------------------
    # Table access
    # -----------------------------
    @property
    def slots(self) -> Mapping[str, Slot]:
        return self._slots

    def fn(self, capability: str) -> Any:
        return require(self._slots.get(capability), capability)

    @property
    def unresolved(self) -> Tuple[str, ...]:
        return tuple(cap for cap, slot in self._slots.items() if not isinstance(slot, Resolved))

    @property
    def ok(self) -> bool:
        return not self.unresolved

    # -----------------------------
    # Forwarding API
    # -----------------------------
    def open(self, path: str) -> Optional["_conn.Connection"]:
        return _conn.open_connection(self, path)

    def _own(self, handle: Optional["_conn.Connection"]) -> "_conn.Connection":
        if handle is None:
            raise ConnectionClosedError("no connection handle (open failed or never opened)")
        if handle.driver is not self:
            raise DriverError(f"{handle!r} was opened by a different driver")
        return handle

    def execute(self, handle: Optional["_conn.Connection"], statement: str) -> bool:
        return self._own(handle).execute(statement)

    def close(self, handle: Optional["_conn.Connection"]) -> None:
        if handle is None:
            return
        self._own(handle).close()

    def read_line(self, prompt: str, max_length: Optional[int] = None) -> Optional[str]:
        if max_length is None:
            max_length = self.policy.input_buffer
        return _text.read_line(self, prompt, max_length)

    def format_string(self, template: str, value: str, size: Optional[int] = None) -> str:
        if size is None:
            size = self.policy.format_buffer
        return _text.format_string(self, template, value, size)

    def __repr__(self) -> str:
        return f"Driver(library={self.library!r}, unresolved={list(self.unresolved)})"


def initialize(policy: Optional[DriverPolicy] = None) -> Driver:
    """
    Load the native library, resolve every capability, return a Driver.

    Load or lookup failures leave slots Unresolved; they are not raised
    unless policy.strict is set.
    """
    policy = policy or DriverPolicy()

    lib = None
    library = None
    missing_reason = "library not loaded"
    try:
        lib, library = load_library(policy.candidates)
    except LibraryLoadError as e:
        missing_reason = f"library not loaded; tried {list(e.tried)}"
        logger.warning("native database library not found; tried %s", list(e.tried))

    slots: Dict[str, Slot] = {}
    for slot in resolve_all(lib, SQLITE_SYMBOLS, missing_lib_reason=missing_reason):
        slots[slot.capability] = slot
    for slot in resolve_all(process_namespace(), STANDARD_SYMBOLS):
        slots[slot.capability] = slot

    driver = Driver(slots, library=library, policy=policy)
    if driver.unresolved:
        if policy.strict:
            raise DriverInitError(driver.unresolved)
        logger.warning("driver initialized with unresolved capabilities: %s", list(driver.unresolved))
    else:
        logger.debug("driver initialized from %s", library)
    return driver
