from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from typing import AsyncGenerator
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse
from fleetops.config import get_settings

settings = get_settings()


def normalize_database_url(url: str) -> str:
    """
    Convert DATABASE_URL to an async driver URL.
    Postgres URLs are rewritten for asyncpg, sqlite URLs for aiosqlite.
    """
    if not url:
        raise ValueError("DATABASE_URL cannot be empty")

    if url.startswith("sqlite"):
        if url.startswith("sqlite://"):
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return url

    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif not url.startswith("postgresql"):
        raise ValueError(f"Invalid DATABASE_URL format: {url[:50]}...")

    try:
        parsed = urlparse(url)
        query_params = parse_qs(parsed.query)
    except Exception as e:
        raise ValueError(f"Failed to parse DATABASE_URL: {str(e)}")

    # asyncpg uses ssl, not sslmode
    if "sslmode" in query_params:
        sslmode = query_params.pop("sslmode")[0].lower()
        if sslmode in ["require", "prefer", "allow"]:
            query_params["ssl"] = ["require"]

    # Parameters asyncpg rejects
    for param in ["channel_binding", "connect_timeout", "application_name"]:
        query_params.pop(param, None)

    new_query = urlencode(query_params, doseq=True)
    return urlunparse(parsed._replace(query=new_query))


def build_engine_options(db_url: str) -> dict:
    """Engine keyword arguments for the given async URL"""
    options = {"echo": settings.ENVIRONMENT == "development"}

    if db_url.startswith("sqlite"):
        # In-memory databases must share one connection across sessions
        if ":memory:" in db_url:
            options["poolclass"] = StaticPool
        return options

    options.update(
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
    )
    if settings.ENVIRONMENT == "production":
        options["connect_args"] = {"server_settings": {"application_name": "fleetops"}}
    return options


try:
    db_url = normalize_database_url(settings.DATABASE_URL)
except Exception as e:
    raise ValueError(
        f"Failed to convert DATABASE_URL: {str(e)}\n"
        f"Please check your DATABASE_URL in .env file or environment variables."
    ) from e

engine = create_async_engine(db_url, **build_engine_options(db_url))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Initialize database tables"""
    async with engine.begin() as conn:
        # Import all models to ensure they're registered
        from fleetops import models  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)
