import logging

_LOGGERS: dict[str, logging.Logger] = {}
_LEVEL = "INFO"

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Create or retrieve a named console logger.

    Parameters:
    - name: logger namespace below ``rankconsole`` (e.g. application.steps)

    New loggers take the level last passed to :func:`set_level`.
    """
    if name in _LOGGERS:
        return _LOGGERS[name]

    logger = logging.getLogger(f"rankconsole.{name}")
    logger.setLevel(_LEVEL)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(handler)

    logger.propagate = False
    _LOGGERS[name] = logger

    return logger


def set_level(level: str) -> None:
    """Apply ``level`` (``Settings.log_level``) to every logger, current and future."""
    global _LEVEL
    _LEVEL = level.upper()
    for logger in _LOGGERS.values():
        logger.setLevel(_LEVEL)
