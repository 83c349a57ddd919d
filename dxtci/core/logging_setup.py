from __future__ import annotations

import logging

from dxtci.core.settings import env_str

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        name = (env_str("DXTCI_LOG_LEVEL", "INFO") or "INFO").upper()
        level = getattr(logging, name, logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
