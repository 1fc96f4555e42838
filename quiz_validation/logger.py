"""
Structured logging for quiz answer validation.

JSON logs for production, readable output for development.
Carries a request_id for tracing one submission across log lines.

Usage:
    from quiz_validation.logger import logger

    logger.set_request("req_123")
    logger.info("Submission received", questions=4)
    logger.metric("rules_applied", 12, quiz="onboarding")
"""

import logging
import json
import os
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from quiz_validation.settings import settings


# Context-local request tracking, isolated between threads and tasks
_request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
_extra_context_var: ContextVar[Optional[Dict[str, Any]]] = ContextVar('extra_context', default=None)


class StructuredLogger:
    """
    Structured logger with JSON output and request tracing.

    - JSON format for production (LOG_FORMAT=json)
    - Readable format for development (default)
    - request_id attached to every line when set
    - metric() and event() helpers for analytics
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)

        if not self.logger.handlers:
            self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the underlying logger from settings and environment"""
        level_name = settings.get_nested("logging.level", "INFO")
        level = getattr(logging, str(level_name).upper(), logging.INFO)
        self.logger.setLevel(level)

        handler = logging.StreamHandler()
        handler.setLevel(level)

        log_format = os.environ.get("LOG_FORMAT", "readable")

        if log_format == "json":
            formatter = logging.Formatter("%(message)s")
        else:
            formatter = logging.Formatter(
                "[%(asctime)s] %(levelname)s - %(message)s",
                datefmt="%H:%M:%S"
            )

        handler.setFormatter(formatter)
        self.logger.addHandler(handler)

        self.logger.propagate = False

    @property
    def request_id(self) -> Optional[str]:
        """Context-local request_id"""
        return _request_id_var.get()

    def set_request(self, request_id: str) -> None:
        """Set request_id (context-local)"""
        _request_id_var.set(request_id)

    def clear_request(self) -> None:
        """Clear request_id"""
        _request_id_var.set(None)

    @property
    def _extra_context(self) -> Dict[str, Any]:
        """Context-local extra fields"""
        ctx = _extra_context_var.get()
        if ctx is None:
            ctx = {}
            _extra_context_var.set(ctx)
        return ctx

    def set_context(self, **kwargs: Any) -> None:
        """Set extra context fields (context-local)"""
        ctx = self._extra_context
        ctx.update(kwargs)
        _extra_context_var.set(ctx)

    def clear_context(self) -> None:
        """Clear extra context"""
        _extra_context_var.set({})

    def _format_structured(self, level: str, message: str, **kwargs: Any) -> Dict[str, Any]:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "logger": self.name,
            "message": message,
        }

        if self.request_id:
            log_entry["request_id"] = self.request_id

        if self._extra_context:
            log_entry.update(self._extra_context)

        if kwargs:
            log_entry.update(kwargs)

        return log_entry

    def _should_use_json(self) -> bool:
        return os.environ.get("LOG_FORMAT", "readable") == "json"

    def _readable(self, message: str, **kwargs: Any) -> str:
        if kwargs:
            extras = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            message = f"{message} [{extras}]"
        if self.request_id:
            message = f"[{self.request_id}] {message}"
        return message

    def _log(self, level: str, message: str, log_method, **kwargs: Any) -> None:
        if self._should_use_json():
            structured = self._format_structured(level, message, **kwargs)
            log_method(json.dumps(structured, ensure_ascii=False, default=str))
        else:
            log_method(self._readable(message, **kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message"""
        self._log("DEBUG", message, self.logger.debug, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message"""
        self._log("INFO", message, self.logger.info, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message"""
        self._log("WARNING", message, self.logger.warning, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message"""
        self._log("ERROR", message, self.logger.error, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log error with the current traceback"""
        if self._should_use_json():
            import traceback
            kwargs["traceback"] = traceback.format_exc()
            structured = self._format_structured("ERROR", message, **kwargs)
            self.logger.error(json.dumps(structured, ensure_ascii=False, default=str))
        else:
            self.logger.exception(self._readable(message, **kwargs))

    def metric(self, name: str, value: Any, **kwargs: Any) -> None:
        """
        Structured metric for analytics.

        Example:
            logger.metric("validation_errors", 2, quiz="onboarding")
        """
        self._log("METRIC", name, self.logger.info, value=value, **kwargs)

    def event(self, event_type: str, **kwargs: Any) -> None:
        """
        Business event for analytics.

        Example:
            logger.event("rule_created", rule_type="maxLength", params=(3,))
        """
        self._log("EVENT", event_type, self.logger.info, **kwargs)


logger = StructuredLogger("quiz_validation")


def create_test_logger(name: str = "test") -> StructuredLogger:
    """Create an isolated logger for tests"""
    return StructuredLogger(f"quiz_validation.{name}")
