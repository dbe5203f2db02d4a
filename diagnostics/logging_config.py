# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO


def setup_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
    # driver errors belong on the diagnostic stream, not next to prompts/results
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=stream if stream is not None else sys.stderr,
    )
