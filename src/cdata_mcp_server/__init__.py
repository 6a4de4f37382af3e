"""MCP server for SQL access to CData Connect Cloud."""

import asyncio
import logging
import sys

from .config import ConfigurationError

__version__ = "0.0.1"
__all__ = ['main']


def main():
    """
    Console entry point.

    Exits 0 when interrupted and 1 when startup fails. A configuration
    error is reported as a single line; anything else with its traceback.
    """
    from . import server
    try:
        asyncio.run(server.main())
    except KeyboardInterrupt:
        logging.info("Server stopped by user")
    except ConfigurationError as e:
        logging.error(f"Invalid configuration: {e}")
        sys.exit(1)
    except Exception as e:
        logging.error(f"Server failed: {e}", exc_info=True)
        sys.exit(1)
