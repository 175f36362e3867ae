"""Logging configuration for the engine and its HTTP stack."""

import logging
import sys
from typing import Optional

from txn_engine.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are chatty at INFO (one line per request)
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging to stdout.

    level overrides settings.log_level. Cache, enrichment and retry
    messages come from the txn_engine.* loggers.
    """
    level_name = (level or get_settings().log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("txn_engine").setLevel(log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
