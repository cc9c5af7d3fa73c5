import os
import sys
from pathlib import Path

# Settings and the engine are built at import time, so the environment has to
# be in place before anything from tasky is imported.
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["CLOUDINARY_CLOUD_NAME"] = ""

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

import tasky.db.session as db_session  # noqa: E402
from tasky.main import app  # noqa: E402
from tasky.services.asset_host import get_asset_host  # noqa: E402

from fakes import FakeAssetHost  # noqa: E402
from helpers import auth_headers  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_tables():
    engine = db_session.engine
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db():
    with Session(db_session.engine) as s:
        yield s


@pytest.fixture
def asset_host():
    return FakeAssetHost()


@pytest.fixture
def client(asset_host):
    app.dependency_overrides[get_asset_host] = lambda: asset_host
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def alice(client):
    return auth_headers(client, "alice")


@pytest.fixture
def bob(client):
    return auth_headers(client, "bob")
