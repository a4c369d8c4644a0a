from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from loggers import get_logger

logger = get_logger("database")


def create_engine(dsn: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(
        dsn,
        echo=echo,
        pool_size=10,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=60 * 30,  # Restart the pool after 30 minutes
        pool_pre_ping=True,
    )


async def on_database_startup(app: FastAPI, dsn: str, echo: bool = False) -> None:
    """
    Create the async engine and session factory and attach them to app.state for DI access.
    """
    engine = create_engine(dsn, echo=echo)
    app.state.db_engine = engine
    app.state.session_factory = async_sessionmaker(bind=engine, expire_on_commit=False)
    logger.info("Database engine created successfully.")


async def on_database_shutdown(app: FastAPI) -> None:
    engine: AsyncEngine | None = getattr(app.state, "db_engine", None)
    if engine is not None:
        logger.info("Disposing database engine...")
        await engine.dispose()
        logger.info("Database engine disposed.")
