"""
CData Connect Cloud MCP Server using FastMCP.

Exposes SQL access to CData Connect Cloud as MCP tools over stdio:
- execute_query: run a caller-supplied SQL statement
- list_tables: list INFORMATION_SCHEMA.TABLES rows, optionally filtered

Each tool call opens its own connection, runs one statement and closes the
connection before responding.
"""

import sys
import asyncio
import logging
import signal
from typing import Any, Awaitable, Callable, Dict, Optional

from fastmcp import FastMCP, Context
from fastmcp.exceptions import ToolError
from fastmcp.server.dependencies import get_context
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool, ToolResult
from pydantic.json_schema import SkipJsonSchema

from .config import AppConfig, LogLevel, load_config
from .core.database import SessionExecutor
from .core.response_formatter import ResponseEnvelope
from .dispatcher import Dispatcher, ToolRequest
from .registry import ToolSpec, build_registry

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

DispatchFn = Callable[[ToolRequest], Awaitable[ResponseEnvelope]]


def configure_logging(level: LogLevel = LogLevel.INFO) -> None:
    """Send logs to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=getattr(logging, level.value),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(getattr(logging, level.value))


async def to_tool_result(envelope: ResponseEnvelope, ctx: Optional[Context] = None) -> ToolResult:
    """Return a success envelope as text content; raise failures as ``ToolError``."""
    if not envelope.ok:
        if ctx is not None:
            await ctx.error(envelope.to_text())
        raise ToolError(envelope.to_text())
    return ToolResult(content=envelope.to_text())


class RegistryTool(Tool):
    """
    MCP tool backed by a registry entry.

    The advertised input schema is the entry's own schema, and arguments are
    handed to the dispatcher exactly as the client sent them, so validation
    (including ignoring unknown fields) happens in one place.
    """

    dispatch: SkipJsonSchema[DispatchFn]

    @classmethod
    def from_spec(cls, spec: ToolSpec, dispatch: DispatchFn) -> "RegistryTool":
        return cls(
            name=spec.name,
            description=spec.description,
            parameters=spec.to_input_schema(),
            dispatch=dispatch,
        )

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        ctx = get_context()
        await ctx.info(f"Running {self.name}")
        envelope = await self.dispatch(ToolRequest(name=self.name, arguments=arguments))
        return await to_tool_result(envelope, ctx)


class DispatchMiddleware(Middleware):
    """Send calls for names outside the registry to the dispatcher."""

    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        name = context.message.name
        if name in self.dispatcher.registry:
            return await call_next(context)
        envelope = await self.dispatcher.dispatch(
            ToolRequest(name=name, arguments=context.message.arguments)
        )
        return await to_tool_result(envelope, context.fastmcp_context)


def create_mcp_server(app_config: AppConfig, dispatcher: Dispatcher) -> FastMCP:
    """Create the FastMCP server and expose every registry tool through the dispatcher."""
    server = FastMCP(
        name=app_config.server.name,
        instructions="Query data sources connected to CData Connect Cloud with SQL.",
    )
    server.add_middleware(DispatchMiddleware(dispatcher))
    for spec in dispatcher.list_tools():
        server.add_tool(RegistryTool.from_spec(spec, dispatcher.dispatch))
    return server


async def serve(app_config: AppConfig) -> None:
    """
    Run the server on stdio until the client disconnects or a shutdown
    signal arrives, then drain in-flight sessions.
    """
    executor = SessionExecutor(app_config.database)
    dispatcher = Dispatcher(build_registry(executor))
    mcp = create_mcp_server(app_config, dispatcher)

    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops
            pass

    logger.info(f"Tools: {', '.join(t.name for t in dispatcher.list_tools())}")
    server_task = asyncio.create_task(mcp.run_async(transport="stdio"))
    stop_task = asyncio.create_task(stop.wait())

    try:
        logger.info(f"{app_config.server.name} {app_config.server.version} running on stdio")
        done, _ = await asyncio.wait({server_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        if stop_task in done:
            logger.info("Received shutdown signal, draining in-flight sessions...")
    finally:
        await executor.drain(app_config.server.shutdown_grace_seconds)
        for task in (server_task, stop_task):
            if not task.done():
                task.cancel()
        results = await asyncio.gather(server_task, stop_task, return_exceptions=True)
        logger.info("Server shutdown completed")

    error = results[0]
    if isinstance(error, Exception):
        logger.error(f"[MCP Error] {error}")
        raise error


async def main():
    """Main entry point: fail fast on configuration, then serve."""
    configure_logging()
    app_config = load_config()
    configure_logging(app_config.server.log_level)
    await serve(app_config)
