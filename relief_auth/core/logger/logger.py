import logging
import sys
import json
from typing import Any, Dict, Optional
from functools import lru_cache

from relief_auth.infra.config.settings import settings

SERVICE_LOGGER_NAME = "ReliefAuth"

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record; `extra` fields become top-level keys"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name
        }

        payload = None
        if isinstance(record.msg, str) and record.msg.startswith("{"):
            try:
                payload = json.loads(record.msg)
            except json.JSONDecodeError:
                payload = None

        if isinstance(payload, dict):
            log_data.update(payload)
        else:
            log_data["message"] = record.getMessage()

        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class Logger:
    """Thin wrapper that keeps every service log line in the JSON format"""

    def __init__(self, name: str = SERVICE_LOGGER_NAME):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
        self.logger.propagate = True

        # loggers are process-wide; avoid stacking handlers on re-creation
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JsonFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: int,
        message: Any,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        if isinstance(message, dict):
            message = json.dumps(message, default=str)

        self.logger.log(level, message, extra=extra or {}, exc_info=exc_info)

    def debug(self, message: Any, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra)

    def info(self, message: Any, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra)

    def warning(self, message: Any, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, extra)

    def error(self, message: Any, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False) -> None:
        self._log(logging.ERROR, message, extra, exc_info)


logger = Logger()


@lru_cache()
def get_logger(name: Optional[str] = None) -> Logger:
    """Module logger, or the service-wide one when no name is given"""
    return Logger(name) if name else logger
