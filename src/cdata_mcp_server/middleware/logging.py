"""Structured logging for tool requests."""

import logging
import json
from typing import Any, Dict, Optional
from datetime import datetime, timezone
import traceback


class StructuredLogger:
    """Structured logging with context."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _add_context(self, record: Dict[str, Any], context: Dict[str, Any]):
        """Add context to log record."""
        record['timestamp'] = datetime.now(timezone.utc).isoformat()
        record.update(context)
        return record

    def info(self, message: str, **context):
        """Log info with context."""
        record = self._add_context({'message': message}, context)
        self.logger.info(json.dumps(record, default=str) if context else message)

    def error(self, message: str, exception: Optional[BaseException] = None, **context):
        """Log error with context and exception."""
        record = self._add_context({'message': message}, context)

        if exception:
            record['exception'] = {
                'type': type(exception).__name__,
                'message': str(exception),
                'traceback': ''.join(traceback.format_exception(
                    type(exception), exception, exception.__traceback__
                )),
            }

        self.logger.error(json.dumps(record, default=str) if (context or exception) else message)

    def warning(self, message: str, **context):
        """Log warning with context."""
        record = self._add_context({'message': message}, context)
        self.logger.warning(json.dumps(record, default=str) if context else message)


class RequestLogger:
    """Request/response logging for tool invocations."""

    def __init__(self, logger_name: str = "mcp.requests"):
        self.logger = StructuredLogger(logger_name)

    def log_request(self, operation: str, **kwargs):
        """Log incoming request."""
        self.logger.info(f"Tool request: {operation}", operation=operation, **kwargs)

    def log_response(self, operation: str, success: bool, duration: float,
                     exception: Optional[BaseException] = None, **kwargs):
        """Log operation response."""
        message = f"Tool response: {operation} ({'success' if success else 'failed'})"
        if success:
            self.logger.info(message, operation=operation, success=True, duration=duration, **kwargs)
        else:
            self.logger.error(
                message, exception=exception,
                operation=operation, success=False, duration=duration, **kwargs
            )
