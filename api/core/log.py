"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this only installs the root
handler once, at startup.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    resolved = logging.getLevelName((level or "INFO").strip().upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    # httpx logs every request at INFO; that's noise for an upload proxy.
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
