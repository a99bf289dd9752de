from __future__ import annotations

import logging
from typing import Optional

from .config import Config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
HANDLER_NAME = "archsim"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    lvl = level or Config.LOG_LEVEL
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(lvl).upper(), logging.INFO))
    for handler in root.handlers:
        if handler.get_name() == HANDLER_NAME:
            return
    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
