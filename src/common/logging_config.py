import logging
import json
import os
import uuid
import datetime
from typing import Any, Optional, Union
from contextvars import ContextVar, Token

# Request id of the sync call being served; copied into worker threads with the context
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Account identifiers that must never reach a log sink unhashed
REDACTED_KEYS = {"iban", "bban", "pan", "maskedPan"}


class JSONFormatter(logging.Formatter):
    """
    Formats each record as a single JSON line.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "request_id": _request_id.get() or "GLOBAL",
        }

        if hasattr(record, "extra_fields") and isinstance(record.extra_fields, dict):
            log_data.update(_redact(record.extra_fields))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: ("***" if k in REDACTED_KEYS else _redact(v))
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(v) for v in value]
    return value


def setup_logging(log_level: Union[int, str] = logging.INFO, log_file: Optional[str] = None):
    """
    Configure the root logger with JSON output on stderr and, optionally, a file.

    Args:
        log_level: numeric level or level name ("DEBUG", "INFO", ...)
        log_file: path of a JSON-lines log file; None disables file output
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if root_logger.handlers:
        root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    logging.info("Logging infrastructure initialized.", extra={"extra_fields": {"status": "ready"}})


def set_request_id(request_id: str) -> Token:
    """Set the current request ID in context. The token restores the previous one."""
    return _request_id.set(request_id)


def get_request_id() -> str:
    """Get the current request ID, generating one if none was set."""
    request_id = _request_id.get()
    if request_id is None:
        request_id = str(uuid.uuid4())
        _request_id.set(request_id)
    return request_id


def clear_request_id(token: Optional[Token] = None):
    if token is not None:
        _request_id.reset(token)
    else:
        _request_id.set(None)


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """
    Adapter that turns arbitrary keyword arguments into structured fields:

        logger.info("Transactions fetched", account_id=acc, booked=12)
    """
    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.get("extra") or {})
        fields = dict(extra.get("extra_fields") or {})

        standard_args = {'exc_info', 'stack_info', 'stacklevel', 'extra'}
        new_kwargs = {}
        for key, value in kwargs.items():
            if key in standard_args:
                new_kwargs[key] = value
            elif key == "extra_fields" and isinstance(value, dict):
                fields.update(value)
            else:
                fields[key] = value

        extra["extra_fields"] = fields
        new_kwargs["extra"] = extra
        return msg, new_kwargs


def get_logger(name: str) -> StructuredLoggerAdapter:
    """
    Return a structured logger for the given name.
    """
    return StructuredLoggerAdapter(logging.getLogger(name), {})
