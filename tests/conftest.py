"""Shared fixtures for store, storage and API tests."""

import pytest
from fastapi.testclient import TestClient

from campus_portal.core.storage import MemoryStorage
from campus_portal.main import create_app
from campus_portal.services.data_store import DataStore


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def empty_store(storage):
    """Store over empty storage with no demo data."""
    return DataStore(storage, defaults={})


@pytest.fixture
def seeded_store(storage):
    """Store seeded with the default demo dataset."""
    return DataStore(storage)


@pytest.fixture
def client(storage):
    with TestClient(create_app(storage)) as test_client:
        yield test_client


def login(client, username, password):
    response = client.post("/auth/login", data={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, "admin", "svit2023")


@pytest.fixture
def faculty_headers(client):
    return login(client, "faculty", "faculty2023")


@pytest.fixture
def student_headers(client):
    return login(client, "student", "student2023")
