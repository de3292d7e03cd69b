"""
Database Manager
Datenbankoperationen mit SQLAlchemy (sync) und optionalem asyncpg Pool
"""

import logging
from collections.abc import Iterable, Sequence
from contextlib import asynccontextmanager, contextmanager
from typing import Any, Optional

import asyncpg
from sqlalchemy import create_engine, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from ..core.config import Settings, settings as default_settings
from .schema import Base


class DatabaseManager:
    """Datenbankverwaltung mit SQLAlchemy und AsyncPG"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.engine = None
        self.SessionLocal = None
        self.pool = None  # AsyncPG Pool
        self.logger = logging.getLogger(__name__)

    @property
    def database_url(self) -> str:
        return self.settings.database_url

    @property
    def is_postgres(self) -> bool:
        return self.database_url.startswith("postgresql")

    def initialize_sync(self):
        """Initialisiert synchrone SQLAlchemy Engine und SessionFactory"""
        try:
            database_url = self.database_url
            if "+asyncpg" in database_url:
                database_url = database_url.replace("+asyncpg", "+psycopg2")

            if database_url.startswith("sqlite"):
                # Eine geteilte Verbindung, damit In-Memory-DBs über Threads hinweg sichtbar bleiben
                self.engine = create_engine(
                    database_url,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                    future=True,
                )
            else:
                self.engine = create_engine(
                    database_url,
                    poolclass=QueuePool,
                    pool_size=self.settings.database_pool_size,
                    pool_pre_ping=True,
                    future=True,
                )
            self.SessionLocal = sessionmaker(
                bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
            )
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            self.logger.info(f"Sync database engine initialized ({self.engine.dialect.name})")
        except Exception as e:
            self.logger.error(f"Failed to initialize sync database: {e}")
            self.engine = None
            self.SessionLocal = None
            raise

    async def initialize_async(self):
        """Initialisiert asynchronen asyncpg Pool (nur PostgreSQL)"""
        if not self.is_postgres or not self.settings.database_enable_async_pool:
            self.logger.debug("Async database pool disabled for this database URL")
            return
        try:
            dsn = self.database_url
            # asyncpg erwartet postgresql:// ohne Treiberangabe
            for driver in ("+asyncpg", "+psycopg2"):
                dsn = dsn.replace(driver, "")
            self.pool = await asyncpg.create_pool(
                dsn=dsn,
                min_size=self.settings.database_pool_min_size,
                max_size=self.settings.database_pool_max_size,
                command_timeout=60,
            )
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            self.logger.info("Async database pool initialized (asyncpg)")
        except Exception as e:
            self.logger.error(f"Failed to initialize async database pool: {e}")
            self.pool = None
            raise

    async def initialize(self):
        """Initialisiert beide Verbindungstypen"""
        self.initialize_sync()
        await self.initialize_async()

    def get_session(self) -> Session:
        """Gibt eine neue SQLAlchemy Session zurück"""
        if not self.SessionLocal:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self.SessionLocal()

    @contextmanager
    def session_scope(self):
        """Session mit Commit bei Erfolg und Rollback bei Fehlern"""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @asynccontextmanager
    async def get_async_connection(self):
        """Context Manager für AsyncPG Verbindungen"""
        if not self.pool:
            raise RuntimeError("Async database pool not initialized")

        async with self.pool.acquire() as connection:
            yield connection

    async def execute_query(self, query: str, *args) -> list[dict]:
        """Führt eine Abfrage über den asyncpg Pool aus"""
        async with self.get_async_connection() as conn:
            result = await conn.fetch(query, *args)
            return [dict(row) for row in result]

    def upsert(
        self,
        session: Session,
        model,
        rows: Sequence[dict[str, Any]],
        index_elements: Iterable[str],
        update_columns: Iterable[str] = (),
    ) -> int:
        """INSERT ... ON CONFLICT für PostgreSQL und SQLite.

        Ohne ``update_columns`` werden Konflikte ignoriert (DO NOTHING).
        Gibt die Anzahl der übergebenen Zeilen zurück.
        """
        if not rows:
            return 0

        dialect = session.get_bind().dialect.name
        if dialect == "postgresql":
            insert = postgresql.insert
        elif dialect == "sqlite":
            insert = sqlite.insert
        else:
            raise NotImplementedError(f"Upsert not supported for dialect '{dialect}'")

        stmt = insert(model).values(list(rows))
        update_columns = list(update_columns)
        if update_columns:
            stmt = stmt.on_conflict_do_update(
                index_elements=list(index_elements),
                set_={col: stmt.excluded[col] for col in update_columns},
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=list(index_elements))
        session.execute(stmt)
        return len(rows)

    def create_tables(self):
        """Erstellt alle Tabellen"""
        if not self.engine:
            raise RuntimeError("Sync database not initialized")

        Base.metadata.create_all(bind=self.engine)
        self.logger.info("Database tables created")

    def drop_tables(self):
        """Löscht alle Tabellen (Vorsicht!)"""
        if not self.engine:
            raise RuntimeError("Sync database not initialized")

        Base.metadata.drop_all(bind=self.engine)
        self.logger.warning("All database tables dropped")

    async def health_check(self) -> dict[str, Any]:
        """Führt einen Gesundheitscheck der Datenbank durch"""
        try:
            status: dict[str, Any] = {}
            if self.pool:
                async with self.get_async_connection() as conn:
                    result = await conn.fetchval("SELECT 1")
                    status["async_pool"] = "healthy" if result == 1 else "unhealthy"
                status["pool_size"] = self.pool.get_size()
                status["pool_idle"] = self.pool.get_idle_size()

            with self.get_session() as session:
                session.execute(text("SELECT 1"))
                status["sync_engine"] = "healthy"

            return status

        except Exception as e:
            self.logger.error(f"Database health check failed: {e}")
            return {"sync_engine": "unhealthy", "error": str(e)}

    async def close(self):
        """Schließt alle Datenbankverbindungen"""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("Async database pool closed")

        self.dispose()

    def dispose(self):
        """Gibt die Sync-Engine frei (auch aus Worker-Signal-Handlern nutzbar)"""
        if self.engine:
            self.engine.dispose()
            self.logger.info("Sync database engine disposed")
