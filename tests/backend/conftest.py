from collections.abc import Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from backend.app.auth.dependencies import get_current_user
from backend.app.dependencies import get_github_client
from backend.app.main import create_app
from core.api.github_api import GitHubReposClient
from core.db import get_db
from core.models import User


@pytest.fixture
def test_app_client(test_db) -> Iterator[tuple[TestClient, sessionmaker]]:
    db_url, TestingSessionLocal, engine = test_db

    app = create_app()

    def override_get_db() -> Iterator[Session]:
        db = TestingSessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    # 500 responses are asserted on, not raised into the test
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client, TestingSessionLocal


@pytest.fixture
def authorized_client(
    test_app_client, make_user
) -> Iterator[tuple[TestClient, User, sessionmaker]]:
    client, TestingSessionLocal = test_app_client
    user = make_user("Tester")

    def override_current_user() -> User:
        session_inner = TestingSessionLocal()
        try:
            return session_inner.query(User).filter(User.id == user.id).one()
        finally:
            session_inner.close()

    client.app.dependency_overrides[get_current_user] = override_current_user

    yield client, user, TestingSessionLocal

    client.app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def stub_github(test_app_client) -> Callable[[Callable[[httpx.Request], httpx.Response]], None]:
    """Route GitHub calls of the test app to `handler`."""
    client, _ = test_app_client

    def _stub(handler: Callable[[httpx.Request], httpx.Response]) -> None:
        github = GitHubReposClient(token="test-pat-token", transport=httpx.MockTransport(handler))
        client.app.dependency_overrides[get_github_client] = lambda: github

    yield _stub

    client.app.dependency_overrides.pop(get_github_client, None)
