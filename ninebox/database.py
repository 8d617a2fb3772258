"""Database engine, declarative base and session dependency."""

import ssl
from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ninebox.config import settings


def ssl_for_mode(mode: str) -> ssl.SSLContext | bool:
    """asyncpg ``ssl`` argument for a libpq-style sslmode."""
    mode = mode.lower()
    if mode in ("disable", "allow", "false"):
        return False
    ctx = ssl.create_default_context()
    if mode in ("prefer", "require"):
        # Encrypted, certificate not verified
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    elif mode == "verify-ca":
        ctx.check_hostname = False
    return ctx


def split_ssl_options(url: str) -> tuple[str, dict]:
    """Move sslmode/ssl query options out of the URL into asyncpg connect_args.

    asyncpg rejects ``sslmode`` in the DSN, so the option is stripped and
    translated into an explicit ``ssl`` connect argument.
    """
    connect_args: dict = {}
    if "sslmode=" not in url and "ssl=" not in url:
        return url, connect_args
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    modes = query.pop("sslmode", None) or query.pop("ssl", None)
    query.pop("ssl", None)
    stripped = urlunparse(parsed._replace(query=urlencode(query, doseq=True)))
    if modes:
        connect_args["ssl"] = ssl_for_mode(modes[0])
    return stripped, connect_args


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def build_engine(url: str | None = None, **kwargs) -> AsyncEngine:
    """Create the async engine for ``url`` (defaults to configured database)."""
    db_url, connect_args = split_ssl_options(url or settings.database_url)
    return create_async_engine(
        db_url,
        echo=settings.log_level == "DEBUG",
        connect_args=connect_args,
        **kwargs,
    )


engine = build_engine()

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database sessions."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
