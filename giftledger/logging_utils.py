"""Mini README: Logging setup shared by every giftledger module.

Structure:
    * configure_root_logger - installs one stream handler on the root logger;
      later calls only change the level (the CLI applies ``log_level`` this way).
    * get_logger - returns a named logger after the one-time setup.

Modules keep a module-level ``LOGGER = get_logger(__name__)``. The web factory
and CLI commands may run setup repeatedly in one process; the handler is
only ever added once.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_HANDLER_INSTALLED = False
_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Install the ledger's stream handler once and set the root level."""

    global _HANDLER_INSTALLED
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if _HANDLER_INSTALLED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
    _HANDLER_INSTALLED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Named logger; triggers the default setup on first use."""

    if not _HANDLER_INSTALLED:
        configure_root_logger()
    return logging.getLogger(name)
