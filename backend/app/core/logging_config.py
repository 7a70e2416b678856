"""
Panel Admin - Centralized Logging Configuration
Plain text logs in development, JSON structured logs in production
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Iterable, List, Optional
from contextvars import ContextVar

from app.core.config import settings


# Context variables for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

# LogRecord attributes that are not `extra=` fields
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {
    'message', 'asctime', 'request_id', 'user_id',
}

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024

DEV_CONSOLE_FORMAT = "%(levelname)-8s | %(message)s"
DEV_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] | "
    "%(name)s:%(funcName)s:%(lineno)d | %(message)s"
)


def get_request_id() -> str:
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_user_id() -> str:
    return user_id_var.get() or ''


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def generate_request_id() -> str:
    """Short id for X-Request-ID"""
    return uuid.uuid4().hex[:8]


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with the request context and any `extra=` fields"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        for key, value in (("request_id", get_request_id()), ("user_id", get_user_id())):
            if value:
                entry[key] = value

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        entry.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith('_')
        )
        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Readable formatter that fills %(request_id)s and %(user_id)s"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user_id = get_user_id() or '-'
        return super().format(record)


class PanelLogger(logging.Logger):
    """Logger with helpers for the panel's recurring events"""

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **kwargs) -> None:
        """Login attempts; failures at WARNING"""
        parts = [f"Auth {event}: {'success' if success else 'failed'}"]
        parts.extend(part for part in (user_email, reason) if part)
        self.log(
            logging.INFO if success else logging.WARNING,
            " - ".join(parts),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_mutation(self, action: str, subject_type: str, subject_id: Optional[str],
                     **kwargs) -> None:
        """A create/update/delete on a managed entity (mirrors the audit log)"""
        self.info(
            f"{subject_type} {action}" + (f": {subject_id}" if subject_id else ""),
            extra={
                "event_type": "mutation",
                "mutation_action": action,
                "subject_type": subject_type,
                "subject_id": subject_id,
                **kwargs
            }
        )

    def log_validation_failure(self, area: str, errors: Iterable[str]) -> None:
        """Rejected form input; only field names are logged, never values"""
        fields = sorted(errors)
        self.info(
            f"[{area}] Validation failed: {', '.join(fields)}",
            extra={"event_type": "validation_failed", "fields": fields},
        )


def _build_handlers(production: bool) -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(JSONFormatter() if production else ContextualFormatter(DEV_CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console]

    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=10 if production else 5,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter() if production else ContextualFormatter(DEV_FILE_FORMAT))
        handlers.append(file_handler)

    return handlers


def setup_logging() -> PanelLogger:
    """Configure the `panel` logger (and the `app` tree) for the current environment"""
    logging.setLoggerClass(PanelLogger)

    logger = logging.getLogger("panel")
    logger.__class__ = PanelLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    is_production = settings.ENVIRONMENT == "production"
    handlers = _build_handlers(is_production)
    logger.handlers = handlers

    # Module loggers (app.services.*, app.api.*) share the same handlers
    app_logger = logging.getLogger("app")
    app_logger.setLevel(logger.level)
    app_logger.handlers = list(handlers)
    app_logger.propagate = False

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info(
        "Logging initialized",
        extra={
            "environment": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "json_logging": is_production
        }
    )

    return logger


logger: PanelLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_request_id',
    'set_request_id',
    'get_user_id',
    'set_user_id',
    'generate_request_id',
    'PanelLogger',
]
