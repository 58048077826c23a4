from __future__ import annotations

from datetime import date

import pytest

from src.timeclock.timeclock.classification import classifier
from src.timeclock.timeclock.container import build_container
from src.timeclock.timeclock.database.bootstrap import apply_schema
from src.timeclock.timeclock.main import create_app
from src.timeclock.timeclock.reports import service as report_service_module

FIXED_TODAY = date(2026, 2, 5)


@pytest.fixture
def container():
    c = build_container(database_url="sqlite://")
    apply_schema(c.conn)
    yield c
    c.conn.dispose()


@pytest.fixture
def db(container):
    return container.conn


@pytest.fixture
def fixed_today(monkeypatch):
    """Pin "today" to Thursday 2026-02-05 for code that asks the clock."""
    monkeypatch.setattr(report_service_module, "today_local", lambda: FIXED_TODAY)
    monkeypatch.setattr(classifier, "today_local", lambda: FIXED_TODAY)
    return FIXED_TODAY


@pytest.fixture
def app():
    app = create_app(
        {
            "DATABASE_URL": "sqlite://",
            "AUTO_INIT_DB": True,
            "LOG_LEVEL": "WARNING",
            "MAX_UPLOAD_MB": 1,
            "SECRET_KEY": "test-secret",
        }
    )
    app.config["TESTING"] = True
    yield app
    app.extensions["timeclock"].conn.dispose()


@pytest.fixture
def client(app):
    return app.test_client()
