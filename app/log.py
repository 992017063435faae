"""Project logger.

Everything logs through ``log``; ``configure_logging`` is called once at
startup to attach a console handler with a short level prefix.
"""

import logging

_LEVEL_ABBREV: dict[int, str] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("bookfinder")


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler using ``mm-dd HH:MM:SS [LVL] message``."""
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(
        _AbbrevLevelFormatter(
            fmt="%(asctime)s [%(levelabbr)s] %(message)s",
            datefmt="%m-%d %H:%M:%S",
        )
    )

    log.handlers.clear()
    log.addHandler(handler)
    log.setLevel(resolved_level)
    log.propagate = False
