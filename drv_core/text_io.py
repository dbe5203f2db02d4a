# MIT License © 2025 Motohiro Suzuki
"""
drv_core/text_io.py

libc passthroughs routed through the dispatch table:
- read_line():     prompt on stdout, fgets() from the C stdin stream
- format_string(): snprintf() with one substitution value

Neither function escapes or validates what it carries.
"""

from __future__ import annotations

import ctypes
import logging
import sys
from typing import Any, Optional

from drv_core.errors import DriverError
from drv_core.symbols import FORMAT, INPUT_STREAM, READ_LINE

logger = logging.getLogger(__name__)


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


def read_line(driver: Any, prompt: str, max_length: int) -> Optional[str]:
    """
    Read one line of at most max_length - 1 bytes.

    Returns the line without its terminator, or None at end of input.
    """
    if not isinstance(max_length, int) or max_length < 2:
        raise ValueError(f"max_length must be int >= 2, got {max_length!r}")

    fgets_fn = driver.fn(READ_LINE)
    stream = driver.fn(INPUT_STREAM)

    sys.stdout.write(prompt)
    sys.stdout.flush()

    buf = ctypes.create_string_buffer(max_length)
    if not fgets_fn(buf, max_length, stream):
        return None
    return _strip_terminator(buf.value.decode("utf-8", errors="replace"))


def format_string(driver: Any, template: str, value: str, size: int) -> str:
    """
    snprintf(dst, size, template, value), returned as str.

    Output longer than size - 1 bytes is truncated the way snprintf does;
    a multi-byte character cut by the bound is dropped from the result.
    """
    if not isinstance(size, int) or size <= 0:
        raise ValueError(f"size must be positive int, got {size!r}")

    fmt_fn = driver.fn(FORMAT)
    buf = ctypes.create_string_buffer(size)
    n = fmt_fn(buf, size, template.encode("utf-8"), value.encode("utf-8"))
    if n is not None and n < 0:
        raise DriverError(f"format failed rc={n}")
    if n is not None and n >= size:
        logger.debug("formatted output truncated: needed %d bytes, had %d", n + 1, size)
    return buf.value.decode("utf-8", errors="ignore")
