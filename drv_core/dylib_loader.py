# MIT License © 2025 Motohiro Suzuki
"""
drv_core/dylib_loader.py

Shared library loader (Linux/macOS/Windows)

Purpose:
- load a native library with ctypes.CDLL from an ordered list of candidates
- a candidate may be a bare soname (platform search rules apply) or a path

Strategy:
1) try each candidate in order (dlopen search rules, RTLD_GLOBAL)
2) the first load that succeeds wins; if none do, raise LibraryLoadError
   listing every attempt
"""

from __future__ import annotations

import ctypes
import logging
from typing import List, Optional, Sequence, Tuple

from drv_core.errors import LibraryLoadError

logger = logging.getLogger(__name__)


def load_first(candidates: Sequence[str], *, mode: Optional[int] = None) -> Tuple[ctypes.CDLL, str]:
    """
    Load the first loadable library among candidates.

    Returns: (library, identifier that loaded)
    """
    if not candidates:
        raise LibraryLoadError("no library candidates given")

    if mode is None:
        mode = ctypes.RTLD_GLOBAL

    tried: List[str] = []
    errors: List[str] = []
    for cand in candidates:
        tried.append(cand)
        try:
            lib = ctypes.CDLL(cand, mode=mode)
        except OSError as e:
            errors.append(f" - {cand}: {e}")
            logger.debug("library candidate failed: %s (%s)", cand, e)
            continue
        logger.debug("library loaded: %s", cand)
        return lib, cand

    raise LibraryLoadError(
        "failed to load native library; tried:\n" + "\n".join(errors),
        tried=tried,
    )
