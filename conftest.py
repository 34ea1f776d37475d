import os

# Keep test runs off the real database and log file
os.environ.setdefault("ACADEMIC_RECORDS_DATABASE_URL", "sqlite://")
os.environ.setdefault("ACADEMIC_RECORDS_LOG_FILE", "")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, create_engine
from sqlmodel.pool import StaticPool

from main import app, get_analysis_client, get_records
from repository import AcademicRecords
from store import PersistentStore


class FakeAnalysisClient:
    def __init__(self, text="## Overall Performance\n- All good"):
        self.text = text
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        return self.text


# Create in-memory SQLite database for testing
@pytest.fixture(name="engine")
def engine_fixture():
    """Fresh in-memory engine with the store table for each test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="broken_engine")
def broken_engine_fixture():
    """In-memory engine without the store table, so every read and write fails"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture(name="store")
def store_fixture(engine):
    return PersistentStore(engine)


@pytest.fixture(name="records")
def records_fixture(store):
    return AcademicRecords(store)


@pytest.fixture(name="analysis_client")
def analysis_client_fixture():
    return FakeAnalysisClient()


@pytest.fixture(name="client")
def client_fixture(records, analysis_client):
    """Create a test client with dependency overrides"""
    app.dependency_overrides[get_records] = lambda: records
    app.dependency_overrides[get_analysis_client] = lambda: analysis_client
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
