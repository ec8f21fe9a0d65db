import io

import pytest
from unittest.mock import MagicMock
from werkzeug.datastructures import FileStorage

from config import TestConfig
from classfolders import create_app
from classfolders.extensions import db


def _running_app(tmp_path, **settings):
    settings.setdefault("STORAGE_DIR", str(tmp_path / "bucket"))
    app = create_app(type("_Config", (TestConfig,), settings))
    ctx = app.app_context()
    ctx.push()
    yield app
    app.store.cancel_reload()
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def app(tmp_path):
    """A fresh app with an in-memory database and a temporary bucket."""
    yield from _running_app(tmp_path)


@pytest.fixture
def live_app(tmp_path):
    """Same as ``app`` but with the store subscribed to the change feed."""
    yield from _running_app(tmp_path, SYNC_LIVE_RELOAD=True)


@pytest.fixture
def store(app):
    app.store.notify = MagicMock()
    return app.store


@pytest.fixture
def client(app):
    return app.test_client()


def make_upload(filename="notes.pdf", content_type="application/pdf", data=b"%PDF-1.4 test"):
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=content_type)


@pytest.fixture
def upload_factory():
    return make_upload


def login_as(client, role="student", name="Ms Host", password="letmein"):
    if role == "host":
        return client.post("/auth/host", data={"name": name, "password": password})
    return client.post("/auth/student")


@pytest.fixture
def host_client(client):
    login_as(client, "host")
    return client


@pytest.fixture
def student_client(client):
    login_as(client, "student")
    return client
