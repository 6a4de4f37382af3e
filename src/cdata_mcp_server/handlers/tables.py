"""Table metadata handler."""

from typing import Any, Dict

from .base import BaseHandler
from ..core.database import ResultSet
from ..core.query_builder import build_list_query


class TablesHandler(BaseHandler):
    """Handle ``list_tables`` requests."""

    async def list_tables(self, arguments: Dict[str, Any]) -> ResultSet:
        """List rows of INFORMATION_SCHEMA.TABLES matching the supplied filters."""
        return await self.run_query(build_list_query(arguments))
