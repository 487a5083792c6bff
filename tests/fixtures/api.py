"""TestClient fixtures bound to the per-test in-memory database."""

from __future__ import annotations

from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import Session

from src.app.api.http.app import app, build_dependencies
from src.app.api.http.deps import get_db_session
from src.app.core.services import DbSessionService, JwtGeneratorService
from src.app.entities.core.user import User
from src.app.runtime.context import get_config

__all__ = ["admin_client", "auth_headers", "client", "user_client"]


@pytest.fixture
def client(engine: Engine, session: Session) -> Generator[TestClient]:
    """An anonymous client; every request shares the test ``session``."""

    def _session_override() -> Iterator[Session]:
        yield session

    app.state.app_dependencies = build_dependencies(DbSessionService(engine=engine))
    app.dependency_overrides[get_db_session] = _session_override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    def _auth_headers(user: User) -> dict[str, str]:
        token = JwtGeneratorService().generate_access_token(
            user_id=user.id, email=user.email, role=user.role.value
        )
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


def _with_cookie(client: TestClient, user: User) -> TestClient:
    token = JwtGeneratorService().generate_access_token(
        user_id=user.id, email=user.email, role=user.role.value
    )
    client.cookies.set(get_config().security.access_cookie_name, token)
    return client


@pytest.fixture
def user_client(client: TestClient, user: User) -> TestClient:
    return _with_cookie(client, user)


@pytest.fixture
def admin_client(client: TestClient, admin: User) -> TestClient:
    """A separate cookie jar authenticated as an admin, sharing the overrides."""
    return _with_cookie(TestClient(app), admin)
