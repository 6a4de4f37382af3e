"""
Tool registry.

The registry is the fixed catalog of tools: each entry pairs a name,
description and argument schema with the handler that serves it. It is
built once at startup and never mutated.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence

from .core.database import ResultSet, SessionExecutor
from .handlers import QueryHandler, TablesHandler
from .utils.validators import ArgumentValidator, FieldSpec, ParameterSchema

ToolHandler = Callable[[Dict[str, Any]], Awaitable[ResultSet]]


@dataclass(frozen=True)
class ToolSpec:
    """A named tool, its argument schema and its handler."""
    name: str
    description: str
    parameter_schema: ParameterSchema
    handler: ToolHandler

    def to_input_schema(self) -> Dict[str, Any]:
        return self.parameter_schema.to_json_schema()

    async def invoke(self, arguments: Optional[Mapping[str, Any]]) -> ResultSet:
        """Validate arguments, then run the handler."""
        validated = ArgumentValidator.validate(self.parameter_schema, arguments)
        return await self.handler(validated)


class ToolRegistry:
    """Immutable, ordered set of ``ToolSpec`` entries keyed by name."""

    def __init__(self, tools: Sequence[ToolSpec]):
        self._tools: Dict[str, ToolSpec] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            self._tools[tool.name] = tool

    def list_tools(self) -> List[ToolSpec]:
        return list(self._tools.values())

    def get(self, name: str) -> Optional[ToolSpec]:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


EXECUTE_QUERY_SCHEMA = ParameterSchema((
    FieldSpec("query", "string", required=True, description="SQL query to execute"),
))

LIST_TABLES_SCHEMA = ParameterSchema((
    FieldSpec("catalogName", "string", description="Only tables in this catalog"),
    FieldSpec("schemaName", "string", description="Only tables in this schema"),
    FieldSpec("tableName", "string", description="Only the table with this name"),
))


def build_registry(executor: SessionExecutor) -> ToolRegistry:
    """Create the registry of tools served by this process."""
    query_handler = QueryHandler(executor)
    tables_handler = TablesHandler(executor)

    return ToolRegistry([
        ToolSpec(
            name="execute_query",
            description="Execute SQL query on CData Connect Cloud",
            parameter_schema=EXECUTE_QUERY_SCHEMA,
            handler=query_handler.execute_query,
        ),
        ToolSpec(
            name="list_tables",
            description=(
                "List tables available through CData Connect Cloud, "
                "optionally filtered by catalog, schema and table name"
            ),
            parameter_schema=LIST_TABLES_SCHEMA,
            handler=tables_handler.list_tables,
        ),
    ])
