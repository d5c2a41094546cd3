"""
Shoe Store Backend — MongoDB Client Management
================================================

What:  AsyncMongoClient construction, index setup, and the FastAPI dependency
       that hands the shoe collection to route handlers.
How:   The lifespan handler in main.py builds one client, stores it and the
       collection on `app.state`, and closes it on shutdown. Handlers reach the
       collection through `get_shoe_collection`, never through a module global.
Who:   main.py (lifecycle) and routes (dependency injection).

Connection Pooling:
    AsyncMongoClient keeps a pool per server (maxPoolSize) and is safe for
    concurrent in-flight operations from many coroutines, so every request
    shares the single client.
"""

import logging

from fastapi import Request
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from shoestore import __version__
from shoestore.config import Settings
from shoestore.models.shoe import ID_FIELD, ID_INDEX_NAME

logger = logging.getLogger(__name__)


def create_mongo_client(settings: Settings) -> AsyncMongoClient:
    """
    Build the process-wide MongoDB client.

    The client connects lazily; no network I/O happens until the first operation.
    """
    return AsyncMongoClient(
        settings.mongodb_url,
        maxPoolSize=settings.mongodb_max_pool_size,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
        appname=f"shoestore/{__version__}",
    )


def get_collection(client: AsyncMongoClient, settings: Settings) -> AsyncCollection:
    """Resolve the configured database and collection on a client."""
    return client[settings.mongodb_database][settings.mongodb_collection]


async def ensure_indexes(collection: AsyncCollection) -> None:
    """
    Create the unique index on the application-level `id` field.

    Every lookup, update and delete filters on `id`; without the index each
    one is a collection scan. create_index is a no-op when the index exists.
    """
    await collection.create_index(
        [(ID_FIELD, ASCENDING)],
        name=ID_INDEX_NAME,
        unique=True,
    )
    logger.info("Ensured index %s on %s", ID_INDEX_NAME, collection.full_name)


async def ping(collection: AsyncCollection) -> None:
    """Round-trip a `ping` command through the collection's database."""
    await collection.database.command("ping")


# ── Collection Dependency ─────────────────────────────────────────────────
def get_shoe_collection(request: Request) -> AsyncCollection:
    """
    FastAPI dependency returning the shoe collection stored on app state.

    Example usage in a route:
        @router.get("/getall")
        async def list_shoes(collection: AsyncCollection = Depends(get_shoe_collection)):
            ...
    """
    return request.app.state.shoe_collection


async def close_client(client: AsyncMongoClient) -> None:
    """
    What:  Closes all pooled connections.
    When:  Called during application shutdown (lifespan handler).
    """
    await client.close()
