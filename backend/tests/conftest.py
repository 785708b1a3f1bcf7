import json
import os
import sys

# In-memory backend and a known secret; must be set before chatline is imported
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("REDIS_CACHE_ENABLED", "false")

# Add backend directory to path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + '/..'))

import pytest
from fastapi.testclient import TestClient

from chatline.config.settings import TestingConfig
from chatline.fastapi_app import create_fastapi_app
from jwt_generation import generate_jwt_token

TEST_SECRET = "test-secret"

DIRECTORY = [
    {"id": 3, "name": "Ada Lovelace", "email": "ada@example.com"},
    {"id": 7, "name": "Linus", "email": "linus@example.com"},
    {"id": 9, "name": "Grace Hopper", "email": "grace@example.com"},
]


def token_for(user_id: int) -> str:
    return generate_jwt_token(user_id, secret=TEST_SECRET)


def auth_for(user_id: int) -> dict:
    return {"Authorization": f"Bearer {token_for(user_id)}"}


@pytest.fixture()
def config(tmp_path):
    """Testing config isolated to this test's temp directory."""
    directory_file = tmp_path / "users.json"
    directory_file.write_text(json.dumps(DIRECTORY), encoding="utf-8")

    class IsolatedConfig(TestingConfig):
        JWT_SECRET = TEST_SECRET
        MEDIA_BASE = str(tmp_path / "media")
        USER_DIRECTORY_FILE = str(directory_file)

    return IsolatedConfig


@pytest.fixture()
def app(config):
    """Create a new FastAPI app (own container, registry and stores) for each test."""
    return create_fastapi_app(config)


@pytest.fixture()
def client(app):
    """
    A test client for the FastAPI app.

    Entered as a context manager so every WebSocket session of the test
    shares one event loop.
    """
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def auth_headers():
    """Authentication headers for user 3 (Ada)."""
    return auth_for(3)


@pytest.fixture()
def auth():
    """auth(user_id) -> Authorization headers for that user."""
    return auth_for


@pytest.fixture()
def token():
    """token(user_id) -> raw credential token for that user."""
    return token_for
