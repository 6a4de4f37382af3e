"""Error taxonomy shared by the validator, executor and dispatcher."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Error codes reported to MCP clients."""
    VALIDATION_ERROR = "ValidationError"
    UNKNOWN_METHOD = "UnknownMethod"
    CONNECTION_ERROR = "ConnectionError"
    QUERY_ERROR = "QueryError"
    INTERNAL_ERROR = "InternalError"


class AdapterError(Exception):
    """Base exception carrying an error kind that survives dispatch."""

    kind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AdapterError):
    """Tool arguments are missing or of the wrong type."""

    kind = ErrorKind.VALIDATION_ERROR

    def __init__(self, field: str, expectation: str, value: Optional[object] = None):
        super().__init__(f"Invalid argument '{field}': {expectation}")
        self.field = field
        self.expectation = expectation
        self.value = value


class UnknownToolError(AdapterError):
    """The requested tool is not in the registry."""

    kind = ErrorKind.UNKNOWN_METHOD

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class DatabaseConnectionError(AdapterError):
    """The remote service could not be reached or refused the login."""

    kind = ErrorKind.CONNECTION_ERROR


class QueryExecutionError(AdapterError):
    """The remote service accepted the connection but failed the statement."""

    kind = ErrorKind.QUERY_ERROR
