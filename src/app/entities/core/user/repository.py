"""User repository for data access operations."""

from datetime import datetime

from sqlmodel import col, func, select

from src.app.entities.core._base import Repository
from src.app.entities.core.user.entity import User, UserRole
from src.app.entities.core.user.table import UserTable


class UserRepository(Repository[User, UserTable]):
    """Data-access layer for users."""

    entity_cls = User
    table_cls = UserTable

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(
            func.lower(UserTable.email) == email.strip().lower()
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return self._to_entity(row)

    def get_by_refresh_token(self, refresh_token: str) -> User | None:
        statement = select(UserTable).where(UserTable.refresh_token == refresh_token)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return self._to_entity(row)

    def list_page(self, offset: int, limit: int) -> tuple[list[User], int]:
        statement = (
            select(UserTable)
            .order_by(col(UserTable.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return self._to_entities(rows), self.count()

    def count_by_role(self) -> dict[str, int]:
        statement = select(UserTable.role, func.count()).group_by(UserTable.role)
        return {
            (role.value if isinstance(role, UserRole) else str(role)): int(total)
            for role, total in self._session.exec(statement).all()
        }

    def count_created_between(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> int:
        conditions = []
        if start is not None:
            conditions.append(UserTable.created_at >= start)
        if end is not None:
            conditions.append(UserTable.created_at <= end)
        return self.count(*conditions)
