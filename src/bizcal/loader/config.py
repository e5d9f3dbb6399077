from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

LOAD_PATH_ENV = "BIZCAL_LOAD_PATH"
LOG_LEVEL_ENV = "BIZCAL_LOG_LEVEL"

_DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True, slots=True)
class Settings:
    """Environment-backed settings for calendar loading."""

    load_path: tuple[Path, ...] = ()
    log_level: str = _DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        env = os.environ if environ is None else environ
        raw_path = env.get(LOAD_PATH_ENV) or ""
        load_path = tuple(
            Path(p.strip()) for p in raw_path.split(os.pathsep) if p.strip()
        )
        log_level = (env.get(LOG_LEVEL_ENV) or "").strip().upper() or _DEFAULT_LOG_LEVEL
        return cls(load_path=load_path, log_level=log_level)


def configure_logging(level: Union[str, int, None] = None) -> logging.Logger:
    """Attach a plain stderr handler to the ``bizcal`` logger."""
    if level is None:
        level = Settings.from_env().log_level
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level {level!r}.")
        level = value

    logger = logging.getLogger("bizcal")
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
