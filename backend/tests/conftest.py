import importlib

import httpx
import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def app(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("REQUEST_TTL_SECONDS", "3600")
    monkeypatch.setenv("NOTE_TTL_SECONDS", "3600")

    # reload modules so that api/notes.py picks up new env vars
    import syncnotes.api.notes
    import syncnotes.main
    importlib.reload(syncnotes.api.notes)
    importlib.reload(syncnotes.main)

    return syncnotes.main.app


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def notes_api(app):
    import syncnotes.api.notes
    return syncnotes.api.notes


@pytest.fixture()
def asgi_transport(app):
    return httpx.ASGITransport(app=app)
