import logging

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from article_api.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Database:
    """
    Owns the pooled async engine for the document store.

    One instance lives for the whole process: ``connect()`` is called
    from the application lifespan on startup and ``disconnect()`` on
    shutdown.  Handlers never reach the engine directly; they receive a
    session through the ``get_db`` dependency.
    """

    def __init__(self, url: str | None = None, echo: bool = False) -> None:
        self.url = url or settings.DATABASE_URL
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    async def connect(self) -> None:
        """Open the connection pool and make sure the collections exist."""
        self._engine = create_async_engine(
            self.url,
            echo=self.echo,
            pool_pre_ping=True,
        )
        self._sessionmaker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        # Table definitions must be registered on Base.metadata first.
        import article_api.models  # noqa: F401

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Document store connected: %s", self._engine.url.render_as_string())

    async def disconnect(self) -> None:
        """Dispose of the connection pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("Document store disconnected")

    def session(self) -> AsyncSession:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not connected")
        return self._sessionmaker()


async def get_db(request: Request):
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
