"""Middleware components for the MCP server."""

from .logging import StructuredLogger, RequestLogger

__all__ = [
    'StructuredLogger',
    'RequestLogger',
]
