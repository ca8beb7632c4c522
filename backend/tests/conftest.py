from __future__ import annotations

import asyncio
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="imageshare-tests-")
os.environ["IMAGESHARE_DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_DB_DIR) / 'test.db'}"
os.environ["IMAGESHARE_SECRET_KEY"] = "test-secret"
os.environ["IMAGESHARE_SESSION_COOKIE_SECURE"] = "false"
os.environ["IMAGESHARE_CSRF_ENABLED"] = "true"

from fastapi.testclient import TestClient  # noqa: E402

from imageshare.db.session import dispose_engine, drop_models  # noqa: E402
from imageshare.main import app  # noqa: E402


async def _drop_all() -> None:
    await drop_models()
    await dispose_engine()


@pytest.fixture()
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
    asyncio.run(_drop_all())


@pytest.fixture()
def csrf_client(client: TestClient) -> TestClient:
    """Client holding a CSRF cookie and echoing it on every request."""

    response = client.get("/api/csrf/restore")
    assert response.status_code == 200
    client.headers["XSRF-Token"] = response.json()["XSRF-Token"]
    return client
