"""Process wide logging bootstrap for CLI entrypoints."""

from __future__ import annotations

import logging

_DEF_FMT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_handler_attached = False


def init_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the root logger and set its level.

    Repeated calls only adjust the level, so tests and embedding hosts can
    call this freely.
    """

    global _handler_attached

    root_logger = logging.getLogger()
    if not _handler_attached:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEF_FMT))
        root_logger.addHandler(handler)
        _handler_attached = True

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root_logger.setLevel(level)
    return root_logger
