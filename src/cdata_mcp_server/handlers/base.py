"""Base handler with common functionality."""

import logging

from ..core.database import ResultSet, SessionExecutor
from ..core.query_builder import QuerySpec

logger = logging.getLogger(__name__)


class BaseHandler:
    """Base handler with common functionality."""

    def __init__(self, executor: SessionExecutor):
        self.executor = executor

    async def run_query(self, query: QuerySpec) -> ResultSet:
        """Execute a query on its own session."""
        if query.parameters:
            logger.debug(f"Bound parameters: {sorted(query.parameters)}")
        return await self.executor.execute(query)
