"""
Configuration management for the CData Connect Cloud MCP Server.
Provides an immutable configuration built once from environment variables.
"""

import os
import logging
from typing import Optional, Dict, Any, Mapping
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


CATALOG_ENV = "CDATA_CONNECT_CLOUD_CATALOG_NAME"
USER_ENV = "CDATA_CONNECT_CLOUD_USER"
PAT_ENV = "CDATA_CONNECT_CLOUD_PAT"

REQUIRED_ENV_VARS = (CATALOG_ENV, USER_ENV, PAT_ENV)


class ConfigurationError(Exception):
    """Raised when the process environment cannot produce a usable configuration."""
    pass


class TransportType(Enum):
    """Supported transport types for MCP server."""
    STDIO = "stdio"


class LogLevel(Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings for the CData Connect Cloud TDS endpoint."""
    database: str
    username: str
    password: str = field(repr=False)
    server: str = "tds.cdata.com"
    port: int = 14333
    encrypt: bool = True
    login_timeout: int = 30
    timeout: int = 60
    appname: str = "cdata-mcp-server"

    def get_pymssql_params(self) -> Dict[str, Any]:
        """Get connection parameters for pymssql."""
        params = {
            'server': self.server,
            'port': self.port,
            'database': self.database,
            'user': self.username,
            'password': self.password,
            'login_timeout': self.login_timeout,
            'timeout': self.timeout,
            'charset': 'UTF-8',
            'appname': self.appname,
        }
        if self.encrypt:
            params['encryption'] = 'require'
        return params

    def get_connection_info(self) -> str:
        """Connection description without the credential."""
        return f"{self.server}:{self.port}/{self.database} as {self.username}"


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration."""
    name: str = "cdata-mcp-server"
    version: str = "0.0.1"
    log_level: LogLevel = LogLevel.INFO
    transport: TransportType = TransportType.STDIO
    shutdown_grace_seconds: float = 30.0


@dataclass(frozen=True)
class AppConfig:
    """Application configuration combining all components."""
    database: DatabaseConfig
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> 'AppConfig':
        """
        Load configuration from environment variables.

        Every required variable is checked before failing, so the error
        names all of the missing ones at once.

        Raises:
            ConfigurationError: If a required variable is absent or blank
                or an optional one holds an unusable value
        """
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_ENV_VARS if not (env.get(name) or "").strip()]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        log_level_name = (env.get("LOG_LEVEL") or LogLevel.INFO.value).strip().upper()
        try:
            log_level = LogLevel(log_level_name)
        except ValueError:
            raise ConfigurationError(f"Invalid LOG_LEVEL: {log_level_name}")

        database_config = DatabaseConfig(
            database=env[CATALOG_ENV].strip(),
            username=env[USER_ENV].strip(),
            password=env[PAT_ENV].strip(),
        )
        server_config = ServerConfig(log_level=log_level)

        return cls(database=database_config, server=server_config)


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Load application configuration.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Returns:
        AppConfig: Loaded and validated configuration
    """
    try:
        config = AppConfig.from_environment(environ)
        logger.info(f"Configuration loaded for {config.database.get_connection_info()}")
        return config
    except ConfigurationError as e:
        logger.error(f"Failed to load configuration: {e}")
        raise
