import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, TypeVar

import sqlalchemy as sa
from pydantic import BaseModel, field_validator
from pydantic import Field as PydanticField
from sqlmodel import Field, Session, SQLModel, func, select

# SQLite drops tzinfo on the way back; entities re-attach UTC on load.
TZDateTime = sa.DateTime(timezone=True)


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are assumed UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Entity(BaseModel):
    """Base entity class with auto-generated UUID identifier."""

    id: str = PydanticField(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = PydanticField(default_factory=utc_now)
    updated_at: datetime = PydanticField(default_factory=utc_now)

    @field_validator("*", mode="after")
    @classmethod
    def _normalize_datetimes(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return as_utc(value)
        return value


class EntityTable(SQLModel, table=False):
    """Base entity class with auto-generated UUID identifier."""

    id: str = Field(
        primary_key=True,
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        sa_type=TZDateTime,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )


EntityT = TypeVar("EntityT", bound=Entity)
TableT = TypeVar("TableT", bound=EntityTable)


class Repository(Generic[EntityT, TableT]):
    """Generic data-access layer mapping one table to one domain entity.

    Subclasses set ``entity_cls`` and ``table_cls`` and add their own queries.
    Repositories only flush; committing is left to the caller so several
    repositories can take part in one transaction.
    """

    entity_cls: ClassVar[type[Entity]]
    table_cls: ClassVar[type[EntityTable]]

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, row: TableT) -> EntityT:
        return self.entity_cls.model_validate(row, from_attributes=True)  # type: ignore[return-value]

    def _to_entities(self, rows: Sequence[TableT]) -> list[EntityT]:
        return [self._to_entity(row) for row in rows]

    def _get_row(self, entity_id: str, *, for_update: bool = False) -> TableT | None:
        if for_update:
            statement = (
                select(self.table_cls)
                .where(self.table_cls.id == entity_id)
                .with_for_update()
            )
            return self._session.exec(statement).first()  # type: ignore[return-value]
        return self._session.get(self.table_cls, entity_id)  # type: ignore[return-value]

    def get(self, entity_id: str) -> EntityT | None:
        row = self._get_row(entity_id)
        if row is None:
            return None
        return self._to_entity(row)

    def create(self, entity: EntityT) -> EntityT:
        row = self.table_cls(**entity.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)  # type: ignore[arg-type]

    def update(self, entity: EntityT) -> EntityT:
        row = self._get_row(entity.id)
        if row is None:
            raise ValueError(f"{self.entity_cls.__name__} {entity.id} not found")
        for field_name, value in entity.model_dump(
            exclude={"id", "created_at", "updated_at"}
        ).items():
            setattr(row, field_name, value)
        row.updated_at = utc_now()
        self._session.add(row)
        self._session.flush()
        return self._to_entity(row)

    def delete(self, entity_id: str) -> bool:
        row = self._get_row(entity_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list_all(self) -> list[EntityT]:
        rows = self._session.exec(select(self.table_cls)).all()
        return self._to_entities(rows)  # type: ignore[arg-type]

    def count(self, *conditions: Any) -> int:
        statement = select(func.count()).select_from(self.table_cls)
        if conditions:
            statement = statement.where(*conditions)
        return int(self._session.exec(statement).one())
