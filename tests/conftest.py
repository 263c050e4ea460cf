import os
import tempfile

# Configure a throw-away SQLite database before the application is imported
TEST_DB_DIR = tempfile.mkdtemp(prefix="agency-tests-")
os.environ["SQLITE_FILE"] = os.path.join(TEST_DB_DIR, "testcase.db")
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("DB_HOST", None)
os.environ.pop("LOG_FILE", None)

import pytest
from fastapi.testclient import TestClient

from app.main import agency_app
from tests.helpers import register_agency


@pytest.fixture(scope="session")
def client():
    """
    Test client; entering it runs the lifespan, which creates the tables.
    """
    with TestClient(agency_app) as test_client:
        yield test_client


@pytest.fixture
def tenant(client: TestClient) -> dict:
    """A freshly provisioned and signed-in agency"""
    return register_agency(client)


@pytest.fixture
def auth_headers(tenant: dict) -> dict:
    return tenant["headers"]
