import json
import logging
import sys
import time

_LEVEL = "INFO"
_managed: dict[str, logging.Logger] = {}


class JsonLogFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # attach contextual info if provided
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload.update(ctx)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(_LEVEL)
        logger.propagate = False
    _managed[name] = logger
    return logger


def set_log_level(level: str) -> None:
    """
    Apply LOG_LEVEL from config to every logger handed out so far, and to
    any created later.
    """
    global _LEVEL
    _LEVEL = level.upper()
    for logger in _managed.values():
        logger.setLevel(_LEVEL)
