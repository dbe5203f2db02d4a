# MIT License © 2025 Motohiro Suzuki
"""
drv_core/errors.py

Error taxonomy for the driver layer.

- LibraryLoadError           : no candidate library could be loaded
- UnresolvedCapabilityError  : a forwarding call hit an Unresolved slot
- DriverInitError            : strict initialize() found unresolved slots
- ConnectionClosedError      : handle used after close()
"""

from __future__ import annotations

from typing import Sequence


class DriverError(RuntimeError):
    pass


class LibraryLoadError(DriverError):
    def __init__(self, message: str, tried: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.tried = tuple(tried)


class UnresolvedCapabilityError(DriverError):
    def __init__(self, capability: str, reason: str) -> None:
        super().__init__(f"capability {capability!r} is unresolved: {reason}")
        self.capability = capability
        self.reason = reason


class DriverInitError(DriverError):
    def __init__(self, unresolved: Sequence[str]) -> None:
        super().__init__(f"driver initialization left capabilities unresolved: {list(unresolved)}")
        self.unresolved = tuple(unresolved)


class ConnectionClosedError(DriverError):
    pass
