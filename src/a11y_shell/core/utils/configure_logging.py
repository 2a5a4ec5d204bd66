import logging
import sys
from typing import Any, Dict, Optional, Union

from tqdm import tqdm

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"


class LogWithTqdm(logging.Handler):
    """
    Logging handler that writes through `tqdm.write()`, so log records do not
    tear the progress bar shown while several documents are audited.
    """
    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _level(value: Union[str, int], fallback: int) -> int:
    if isinstance(value, str):
        return getattr(logging, value.upper(), fallback)
    return value


def configure_logger(
        general_level: Union[str, int] = 'WARNING',
        module_specific_levels: Optional[Dict[str, Union[str, int]]] = None,
        silenced_loggers: Optional[Dict[str, Union[str, int]]] = None
) -> None:
    """
    Configures the root logger with a tqdm-friendly handler, then applies
    per-module levels and raises the level of noisy third-party loggers.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(_level(general_level, logging.WARNING))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, level in (module_specific_levels or {}).items():
        logging.getLogger(name).setLevel(_level(level, logging.INFO))

    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(_level(level, logging.CRITICAL))


def configure_from_settings(settings: Dict[str, Any], level_override: Optional[str] = None) -> None:
    """Applies the 'debug' and 'logging' sections of the configuration."""
    logging_cfg = settings.get("logging", {})
    configure_logger(
        level_override or settings.get("debug", {}).get("level", "WARNING"),
        module_specific_levels=logging_cfg.get("module_levels"),
        silenced_loggers=logging_cfg.get("silenced")
    )
