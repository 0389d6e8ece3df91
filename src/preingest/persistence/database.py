# src/preingest/persistence/database.py
"""
Conexão com o banco e escopo transacional.

`DatabaseManager` cria o engine SQLAlchemy e a fábrica de sessões;
`session_scope` abre uma sessão que faz commit ao sair sem erro e
rollback (com log) quando uma exceção atravessa o bloco. A exceção é
sempre propagada ao chamador.

SQLite é o banco padrão (arquivo local, um único escritor por vez);
conexões são compartilháveis entre threads.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Engine e fábrica de sessões do store de status."""

    def __init__(self, database_url: str, *, echo: bool = False):
        self.database_url = database_url
        kwargs = {"echo": echo}
        if database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
                # uma única conexão, senão cada conexão vê um banco vazio
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(database_url, **kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def create_tables(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError:
            logger.exception("Failed to create tables on %s", self.database_url)
            raise
        logger.info("Status tables ready on %s", self.database_url)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error("Database transaction rolled back due to error: %s", e)
            raise
        finally:
            session.close()
