"""Schema management helpers."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from src.app.core.services.database.db_session import get_db_service


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine or get_db_service().engine

    def create_all(self) -> None:
        """Create all database tables."""
        import src.app.entities  # noqa: F401  registers every table

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with {} tables", len(SQLModel.metadata.tables))

    def drop_all(self) -> None:
        import src.app.entities  # noqa: F401

        SQLModel.metadata.drop_all(self._engine)
        logger.warning("All database tables dropped")
