"""
Data stores for campaign records.

Usage:
    # Build the configured chain (PostgreSQL when DATABASE_URL is set,
    # local store always last):
    from sprint_lab.store import create_store

    store = await create_store()
    logs = await store.list_logs(user_id)
"""

import logging
import os
from typing import List

from .base import DataStore, StoreError, StoreUnavailableError
from .fallback import FallbackStore
from .local import LocalStore
from .postgres import PostgresStore

logger = logging.getLogger(__name__)


async def create_store() -> DataStore:
    """
    Create the store chain from environment configuration.

    Config (env vars):
        DATABASE_URL: PostgreSQL DSN (optional, remote store disabled if unset)
        LOCAL_STORE_PATH: JSON file for the local store (optional, memory only if unset)

    A PostgreSQL connection failure is logged and the chain degrades to the
    local store instead of failing start-up.
    """
    stores: List[DataStore] = []

    if os.getenv("DATABASE_URL"):
        postgres = PostgresStore()
        try:
            await postgres.connect()
            await postgres.init_schema()
            logger.info("PostgreSQL store initialized")
        except Exception as e:
            logger.error(f"PostgreSQL unavailable, continuing with local store: {e}")
            await postgres.disconnect()
        stores.append(postgres)
    else:
        logger.warning("DATABASE_URL not set - running in offline mode (local store only)")

    local_path = os.getenv("LOCAL_STORE_PATH") or None
    stores.append(LocalStore(local_path))
    logger.info(f"Store chain: {[s.name for s in stores]}")

    return FallbackStore(stores)


__all__ = [
    'DataStore',
    'StoreError',
    'StoreUnavailableError',
    'FallbackStore',
    'LocalStore',
    'PostgresStore',
    'create_store',
]
