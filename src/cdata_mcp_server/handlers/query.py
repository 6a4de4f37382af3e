"""Raw SQL execution handler."""

from typing import Any, Dict

from .base import BaseHandler
from ..core.database import ResultSet
from ..core.query_builder import passthrough


class QueryHandler(BaseHandler):
    """Handle ``execute_query`` requests."""

    async def execute_query(self, arguments: Dict[str, Any]) -> ResultSet:
        """
        Run caller-supplied SQL as is.

        No read-only enforcement or statement filtering is applied: the
        statement is the caller's responsibility.
        """
        return await self.run_query(passthrough(arguments["query"]))
