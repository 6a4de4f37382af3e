"""MCP tool handlers."""

from .base import BaseHandler
from .query import QueryHandler
from .tables import TablesHandler

__all__ = ['BaseHandler', 'QueryHandler', 'TablesHandler']
