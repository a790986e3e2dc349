"""Mini README: Shared pytest fixtures.

Every test gets a fresh in-memory SQLite store, so tests never see each
other's records. ``client`` wires that store into the FastAPI factory with
fast bcrypt settings and a fixed signing secret.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from donationtrust.auth import AccessGate, TokenIssuer
from donationtrust.configuration import DonationTrustSettings
from donationtrust.interface import create_application
from donationtrust.store import RecordStore

TEST_SECRET = "donationtrust-test-signing-secret-0001"


@pytest.fixture
def store() -> RecordStore:
    return RecordStore.from_url("sqlite://")


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET, ttl=timedelta(hours=24))


@pytest.fixture
def gate(store: RecordStore, issuer: TokenIssuer) -> AccessGate:
    return AccessGate(store, issuer, bcrypt_rounds=4)


@pytest.fixture
def settings(tmp_path) -> DonationTrustSettings:
    return DonationTrustSettings(
        data_directory=tmp_path,
        database_url="sqlite://",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
    )


@pytest.fixture
def client(settings: DonationTrustSettings, store: RecordStore) -> TestClient:
    return TestClient(create_application(settings=settings, store=store))


@pytest.fixture
def admin_headers(client: TestClient) -> dict:
    response = client.post("/api/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
