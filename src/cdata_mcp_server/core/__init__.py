"""Core components for the CData MCP Server."""

from .errors import (
    ErrorKind, AdapterError, ValidationError, UnknownToolError,
    DatabaseConnectionError, QueryExecutionError,
)
from .query_builder import QuerySpec, build_list_query, passthrough
from .database import SessionExecutor, Session, SessionState
from .response_formatter import Success, Failure, ResponseEnvelope

__all__ = [
    'ErrorKind', 'AdapterError', 'ValidationError', 'UnknownToolError',
    'DatabaseConnectionError', 'QueryExecutionError',
    'QuerySpec', 'build_list_query', 'passthrough',
    'SessionExecutor', 'Session', 'SessionState',
    'Success', 'Failure', 'ResponseEnvelope',
]
