"""
Unit tests for the tool registry and response envelopes.
"""

import json
from datetime import datetime
from decimal import Decimal

import pytest
from unittest.mock import AsyncMock

from cdata_mcp_server.core.errors import ErrorKind, ValidationError
from cdata_mcp_server.core.response_formatter import Failure, Success
from cdata_mcp_server.registry import ToolRegistry, ToolSpec
from cdata_mcp_server.utils.validators import FieldSpec, ParameterSchema


class TestToolRegistry:
    """Test the default registry contents."""

    def test_tool_order_and_names(self, registry):
        assert [tool.name for tool in registry.list_tools()] == ["execute_query", "list_tables"]

    def test_execute_query_schema(self, registry):
        spec = registry.get("execute_query")

        assert spec.description == "Execute SQL query on CData Connect Cloud"
        assert spec.to_input_schema() == {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "SQL query to execute"},
            },
            "required": ["query"],
        }

    def test_list_tables_schema(self, registry):
        schema = registry.get("list_tables").to_input_schema()

        assert list(schema["properties"]) == ["catalogName", "schemaName", "tableName"]
        assert all(p["type"] == "string" for p in schema["properties"].values())
        assert "required" not in schema

    def test_lookup(self, registry):
        assert "execute_query" in registry
        assert "bogus" not in registry
        assert registry.get("bogus") is None
        assert len(registry) == 2

    def test_duplicate_names_rejected(self):
        spec = ToolSpec("t", "d", ParameterSchema(), AsyncMock())
        with pytest.raises(ValueError):
            ToolRegistry([spec, spec])


class TestToolSpecInvoke:
    """Test validation before the handler runs."""

    @pytest.mark.asyncio
    async def test_handler_receives_validated_arguments(self):
        handler = AsyncMock(return_value=[{"a": 1}])
        spec = ToolSpec("t", "d", ParameterSchema((FieldSpec("a", required=True),)), handler)

        assert await spec.invoke({"a": "v", "extra": 1}) == [{"a": 1}]
        handler.assert_awaited_once_with({"a": "v"})

    @pytest.mark.asyncio
    async def test_handler_not_called_on_invalid_arguments(self):
        handler = AsyncMock()
        spec = ToolSpec("t", "d", ParameterSchema((FieldSpec("a", required=True),)), handler)

        with pytest.raises(ValidationError):
            await spec.invoke({})
        handler.assert_not_awaited()


class TestEnvelopes:
    """Test Success and Failure serialization."""

    def test_success_is_pretty_json(self):
        envelope = Success(payload=[{"x": 1}])

        assert envelope.ok is True
        assert envelope.to_text() == '[\n  {\n    "x": 1\n  }\n]'

    def test_success_serializes_driver_types(self):
        envelope = Success(payload=[{"when": datetime(2024, 1, 2, 3, 4, 5), "amount": Decimal("1.50")}])

        assert json.loads(envelope.to_text()) == [{"when": "2024-01-02 03:04:05", "amount": "1.50"}]

    def test_failure(self):
        envelope = Failure(code=ErrorKind.UNKNOWN_METHOD, message="Unknown tool: bogus")

        assert envelope.ok is False
        assert envelope.to_text() == "UnknownMethod: Unknown tool: bogus"
        assert envelope.to_dict() == {"code": "UnknownMethod", "message": "Unknown tool: bogus"}
