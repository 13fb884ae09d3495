from __future__ import annotations

import logging
import re
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from pagewalk.utils.exceptions import NotConnected

logger = logging.getLogger(__name__)

_clients: dict[str, AsyncMongoClient] = {}
_databases: dict[str, AsyncDatabase] = {}

_DB_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


async def connect(uri: str, *, alias: str = "default", **client_options: Any) -> AsyncDatabase:
    """Open a MongoDB client and register its database under ``alias``.

    Args:
        uri: MongoDB connection URI, including the database name.
        alias: Name under which sources look the database up.
        **client_options: Passed through to ``AsyncMongoClient``
            (e.g. ``serverSelectionTimeoutMS``).

    Returns:
        The AsyncDatabase instance.

    Raises:
        ValueError: If the URI carries no usable database name
    """
    db_name = _extract_db_name(uri)
    if alias in _clients:
        logger.warning(f"Replacing existing connection registered as '{alias}'")
        await disconnect(alias)

    client = AsyncMongoClient(uri, **client_options)
    db = client[db_name]
    _clients[alias] = client
    _databases[alias] = db
    logger.info(f"Registered database '{db_name}' as '{alias}'")
    return db


async def disconnect(alias: str = "default") -> None:
    """Close and forget the connection registered under ``alias``."""
    client = _clients.pop(alias, None)
    _databases.pop(alias, None)
    if client is not None:
        await client.close()
        logger.info(f"Closed connection '{alias}'")


def get_database(alias: str = "default") -> AsyncDatabase:
    """Return the database registered under ``alias``.

    Raises:
        NotConnected: If nothing is registered under the alias
    """
    try:
        return _databases[alias]
    except KeyError:
        raise NotConnected(
            f"No connection registered for alias '{alias}'. Call connect() first."
        ) from None


def get_client(alias: str = "default") -> AsyncMongoClient:
    """Return the client registered under ``alias``.

    Raises:
        NotConnected: If nothing is registered under the alias
    """
    try:
        return _clients[alias]
    except KeyError:
        raise NotConnected(
            f"No client registered for alias '{alias}'. Call connect() first."
        ) from None


def _extract_db_name(uri: str) -> str:
    """Pull the database name out of a MongoDB URI.

    Raises:
        ValueError: If the URI is empty, has no path, or names an invalid database
    """
    if not uri:
        raise ValueError("MongoDB URI cannot be empty")

    path = uri.split("?", 1)[0]
    scheme, sep, rest = path.partition("://")
    if not sep or "/" not in rest:
        raise ValueError(
            "Cannot extract database name from URI. "
            "Expected format: mongodb://host:port/database"
        )

    db_name = rest.rsplit("/", 1)[-1]
    if not db_name:
        raise ValueError(
            "Cannot extract database name from URI. "
            "Expected format: mongodb://host:port/database"
        )
    if not _DB_NAME_PATTERN.match(db_name):
        raise ValueError(
            f"Invalid database name '{db_name}'. "
            f"Database names can only contain letters, numbers, underscores, and hyphens."
        )

    logger.debug(f"Extracted database name: {db_name}")
    return db_name
