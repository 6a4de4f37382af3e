"""
Tool dispatch.

The dispatcher is the single place where failures become response
envelopes. Errors that already carry an ``ErrorKind`` keep it; anything
else is reported as ``InternalError`` with the original message.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .core.errors import AdapterError, ErrorKind, UnknownToolError
from .core.response_formatter import Failure, ResponseEnvelope, Success
from .middleware.logging import RequestLogger
from .registry import ToolRegistry, ToolSpec


@dataclass(frozen=True)
class ToolRequest:
    """A single inbound tool call."""
    name: str
    arguments: Optional[Dict[str, Any]] = field(default_factory=dict)


class Dispatcher:
    """Routes tool requests through the registry."""

    def __init__(self, registry: ToolRegistry, request_logger: Optional[RequestLogger] = None):
        self.registry = registry
        self.request_logger = request_logger or RequestLogger()

    def list_tools(self) -> List[ToolSpec]:
        return self.registry.list_tools()

    async def dispatch(self, request: ToolRequest) -> ResponseEnvelope:
        """
        Run a tool request to completion.

        Returns:
            ``Success`` with the result rows, or ``Failure`` with an error
            code and message. Never raises for handler failures.
        """
        arguments = request.arguments
        self.request_logger.log_request(
            request.name,
            argument_keys=sorted(arguments) if isinstance(arguments, dict) else None,
        )
        start_time = time.perf_counter()

        try:
            spec = self.registry.get(request.name)
            if spec is None:
                raise UnknownToolError(request.name)
            rows = await spec.invoke(arguments)
        except AdapterError as e:
            envelope = Failure(code=e.kind, message=e.message)
            self._log_failure(request.name, start_time, envelope, e)
            return envelope
        except Exception as e:
            envelope = Failure(code=ErrorKind.INTERNAL_ERROR, message=str(e) or type(e).__name__)
            self._log_failure(request.name, start_time, envelope, e)
            return envelope

        duration = time.perf_counter() - start_time
        self.request_logger.log_response(request.name, True, duration, row_count=len(rows))
        return Success(payload=rows)

    def _log_failure(self, name: str, start_time: float, envelope: Failure, exception: Exception):
        duration = time.perf_counter() - start_time
        self.request_logger.log_response(
            name, False, duration,
            exception=exception,
            error_code=envelope.code.value,
        )
