"""Engines, sessions and the declarative base.

The API runs on the asyncpg engine.  The seeding script builds its own
psycopg2 engine through ``create_sync_engine`` so the web process never
loads the sync driver.
"""
from collections.abc import AsyncGenerator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from bookkeeper.config import settings

async_engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)

AsyncSessionLocal = async_sessionmaker(bind=async_engine, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


def create_sync_engine() -> Engine:
    return create_engine(settings.DATABASE_URL_SYNC)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request, closed when the response is sent."""
    async with AsyncSessionLocal() as session:
        yield session
