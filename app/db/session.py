import logging
import asyncpg
from asyncpg.pool import Pool
from asyncpg import Connection
from typing import AsyncGenerator
from fastapi import Request

from app.core.config import Settings
from app.core.exceptions import DatabaseError


async def connect_db_pool(settings: Settings) -> Pool:
    try:
        pool = await asyncpg.create_pool(
            dsn=settings.asyncpg_url,
            min_size=5,
            max_size=20,
            timeout=30,
            command_timeout=settings.DB_COMMAND_TIMEOUT,
        )
    except Exception as e:
        logging.error(f"❌ Error connecting to database: {e}")
        raise
    logging.info("✅ AsyncPG Connection Pool created successfully.")
    return pool


async def close_db_pool(pool: Pool | None):
    if pool:
        await pool.close()
        logging.info("❌ AsyncPG Connection Pool closed.")


async def get_db_connection(request: Request) -> AsyncGenerator[Connection, None]:
    pool = getattr(request.app.state, "db_pool", None)
    if pool is None:
        raise DatabaseError("Database pool is not initialized.")
    async with pool.acquire() as connection:
        yield connection
