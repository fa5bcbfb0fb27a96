"""
Shared configuration for the proof checker.

Defines defaults, the CheckerConfig dataclass used by the CLI and the web
API, and the one place logging handlers get installed.
"""

import logging
import os
import sys
from dataclasses import dataclass, replace
from typing import Mapping, Optional

ENV_PREFIX = "LOGICALA_"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - [%(levelname)s] - %(name)s - %(message)s"

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CheckerConfig:
    """How a proof should be checked.

    strict: every identifier must be declared with ``let``
    semantic_check: also ask z3 whether the sequent is valid at all
    log_level: level for the ``logicala`` loggers
    """
    strict: bool = False
    semantic_check: bool = False
    log_level: str = DEFAULT_LOG_LEVEL


def parse_flag(value: Optional[str]) -> Optional[bool]:
    """Read "1", "true", "yes" or "on" (any case) as True, other text as False.

    None stays None, meaning the flag was not given.
    """
    if value is None:
        return None
    return value.strip().lower() in TRUTHY


def load_config(environ: Mapping[str, str] = None, **overrides) -> CheckerConfig:
    """Build a config from ``LOGICALA_*`` environment variables.

    Keyword overrides that are not None win over the environment.
    """
    if environ is None:
        environ = os.environ

    config = CheckerConfig()
    strict = parse_flag(environ.get(ENV_PREFIX + "STRICT"))
    if strict is not None:
        config = replace(config, strict=strict)
    semantic = parse_flag(environ.get(ENV_PREFIX + "SEMANTIC"))
    if semantic is not None:
        config = replace(config, semantic_check=semantic)
    level = environ.get(ENV_PREFIX + "LOG_LEVEL")
    if level:
        config = replace(config, log_level=level.strip().upper())

    given = {k: v for k, v in overrides.items() if v is not None}
    return replace(config, **given)


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Attach a stderr handler to the package logger, once."""
    logger = logging.getLogger("logicala")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
