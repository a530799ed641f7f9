#!/usr/bin/env python3
"""
Database Configuration
Reads the connection string from the environment (or a .env file) and opens
SQLite connections with the image database attached as the `images` schema.
"""

import os
import sqlite3
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

SCHEMA_NAME = "images"
CONNECTION_STRING_VAR = "CONNECTION_STRING"
TIMEOUT_VAR = "DB_TIMEOUT"
DEFAULT_TIMEOUT = 5.0


class ConfigurationError(ValueError):
    """Raised when the database configuration is missing or invalid."""


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings for the image database.

    connection_string is a SQLite database path or a `file:` URI.
    """

    connection_string: str
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        if not self.connection_string or not self.connection_string.strip():
            raise ConfigurationError("connection_string is required")
        if self.timeout < 0:
            raise ConfigurationError(f"timeout must be non-negative, got {self.timeout}")


def load_config(environ: Optional[Mapping[str, str]] = None) -> DatabaseConfig:
    """Build a DatabaseConfig from environment variables.

    When no mapping is given, the nearest `.env` file at or above the working
    directory is loaded first and then os.environ is read.
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    connection_string = environ.get(CONNECTION_STRING_VAR, "").strip()
    if not connection_string:
        raise ConfigurationError(f"{CONNECTION_STRING_VAR} is not set")

    raw_timeout = environ.get(TIMEOUT_VAR)
    if raw_timeout is None or not raw_timeout.strip():
        return DatabaseConfig(connection_string)

    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"{TIMEOUT_VAR} must be a number, got {raw_timeout!r}")
    return DatabaseConfig(connection_string, timeout=timeout)


def connect(config: DatabaseConfig) -> sqlite3.Connection:
    """Open a connection with the configured database attached as `images`.

    The caller owns the returned connection and must close it.
    """
    conn = sqlite3.connect(":memory:", timeout=config.timeout, uri=True)
    try:
        conn.execute(f"ATTACH DATABASE ? AS {SCHEMA_NAME}", (config.connection_string,))
    except sqlite3.Error:
        conn.close()
        raise
    return conn
