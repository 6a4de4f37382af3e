"""Session execution against CData Connect Cloud over TDS."""

import asyncio
import functools
import itertools
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pymssql

from ..config import DatabaseConfig
from .errors import DatabaseConnectionError, QueryExecutionError
from .query_builder import QuerySpec

logger = logging.getLogger(__name__)

ResultSet = List[Dict[str, Any]]


class SessionState(Enum):
    """Lifecycle of a single invocation's connection."""
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CLOSED = "closed"


class Session:
    """One remote connection, owned by one invocation."""

    _ids = itertools.count(1)

    def __init__(self):
        self.id = next(self._ids)
        self.state = SessionState.IDLE
        self.connection = None

    def __repr__(self) -> str:
        return f"<Session {self.id} {self.state.value}>"


def _sql_type_for(value: Any) -> str:
    if isinstance(value, bool):
        return "bit"
    if isinstance(value, int):
        return "bigint"
    if isinstance(value, float):
        return "float"
    return "nvarchar(max)"


def build_sp_executesql(query: QuerySpec) -> Tuple[str, Tuple[Any, ...]]:
    """
    Translate a ``@name`` template into an ``sp_executesql`` call.

    The statement, the declaration list and every value are sent as pymssql
    bound parameters; only placeholder names appear in the operation text.

    Raises:
        ValueError: If the placeholders and parameter names disagree
    """
    names = list(query.parameters)
    placeholders = query.placeholders()
    if placeholders != set(names):
        raise ValueError(
            f"Placeholders {sorted(placeholders)} do not match parameters {sorted(names)}"
        )

    declarations = ", ".join(f"@{name} {_sql_type_for(query.parameters[name])}" for name in names)
    assignments = ", ".join(f"@{name} = %s" for name in names)
    operation = f"EXEC sp_executesql %s, %s, {assignments}"
    params = (query.statement, declarations) + tuple(query.parameters[name] for name in names)
    return operation, params


class SessionExecutor:
    """Runs each query on a connection of its own and always closes it."""

    def __init__(self, config: DatabaseConfig):
        """
        Initialize the executor.

        Args:
            config: Connection settings, read once at startup
        """
        self.config = config
        self._connection_params = config.get_pymssql_params()
        self._connection_params['autocommit'] = True
        self._active = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def active_sessions(self) -> int:
        """Number of sessions not yet closed."""
        return self._active

    def _session_started(self):
        self._active += 1
        self._idle.clear()

    def _session_finished(self):
        self._active -= 1
        if self._active == 0:
            self._idle.set()

    def _close(self, session: Session):
        if session.connection is not None:
            try:
                session.connection.close()
            except Exception as e:
                logger.warning(f"Error closing connection for {session!r}: {e}")
            session.connection = None
        session.state = SessionState.CLOSED
        logger.debug(f"Session {session.id} closed")

    @staticmethod
    def _close_abandoned(connecting: asyncio.Future):
        """Close a connection that finished opening after its caller was cancelled."""
        if connecting.cancelled() or connecting.exception() is not None:
            return
        try:
            connecting.result().close()
        except Exception as e:
            logger.warning(f"Error closing abandoned connection: {e}")

    @asynccontextmanager
    async def open_session(self):
        """
        Async context manager yielding a connected ``Session``.

        The connection is closed on every exit path, including a failed
        connect and a call cancelled while still connecting.

        Raises:
            DatabaseConnectionError: If the connection cannot be established
        """
        session = Session()
        self._session_started()
        try:
            session.state = SessionState.CONNECTING
            logger.debug(f"Session {session.id} connecting to {self.config.get_connection_info()}")
            loop = asyncio.get_running_loop()
            connecting = loop.run_in_executor(
                None, functools.partial(pymssql.connect, **self._connection_params)
            )
            try:
                session.connection = await asyncio.shield(connecting)
            except asyncio.CancelledError:
                # The connect thread keeps running; close what it returns.
                connecting.add_done_callback(self._close_abandoned)
                raise
            except (pymssql.Error, OSError) as e:
                session.state = SessionState.FAILED
                logger.error(f"Database connection failed: {e}")
                raise DatabaseConnectionError(f"Failed to connect to CData Connect Cloud: {e}") from e
            session.state = SessionState.CONNECTED
            yield session
        finally:
            self._close(session)
            self._session_finished()

    async def execute(self, query: QuerySpec) -> ResultSet:
        """
        Execute a query on a fresh connection.

        Args:
            query: Statement template and bound parameters

        Returns:
            All result rows as column name to value mappings

        Raises:
            DatabaseConnectionError: If the service cannot be reached
            QueryExecutionError: If the service rejects or fails the statement
        """
        async with self.open_session() as session:
            logger.info(f"Executing query: {query.statement}")
            session.state = SessionState.EXECUTING
            loop = asyncio.get_running_loop()
            try:
                rows = await loop.run_in_executor(
                    None, self._run_statement, session.connection, query
                )
            except pymssql.Error as e:
                session.state = SessionState.FAILED
                logger.error(f"SQL execution error: {e}")
                raise QueryExecutionError(f"Query execution failed: {e}") from e
            except BaseException:
                session.state = SessionState.FAILED
                raise

            session.state = SessionState.SUCCEEDED
            logger.info(f"Query returned {len(rows)} rows")
            return rows

    @staticmethod
    def _run_statement(connection, query: QuerySpec) -> ResultSet:
        """Blocking part of ``execute``; runs on a worker thread."""
        cursor = connection.cursor(as_dict=True)
        try:
            if query.parameters:
                operation, params = build_sp_executesql(query)
                cursor.execute(operation, params)
            else:
                cursor.execute(query.statement)

            if not cursor.description:
                return []
            return [dict(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    async def drain(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for in-flight sessions to close.

        Returns:
            True if every session closed before the timeout
        """
        if self._active == 0:
            return True
        logger.info(f"Waiting for {self._active} in-flight session(s) to close")
        try:
            await asyncio.wait_for(self._idle.wait(), timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(f"{self._active} session(s) still open after {timeout}s")
            return False
