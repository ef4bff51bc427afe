"""Pytest fixtures for testing"""

import random
from typing import Any, Dict

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mock.store_server.main import create_app as create_store_app
from perpus_portal.api.dependencies import get_store_client
from perpus_portal.api.main import create_app
from perpus_portal.config import settings
from perpus_portal.domain.models import MemberRegistration
from perpus_portal.infrastructure.clients.store import RealtimeStoreClient
from perpus_portal.infrastructure.store.repositories import MemberRepository, TransactionRepository

from factories import STORE_AUTH_TOKEN, STORE_BASE_URL


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Minimum bcrypt cost keeps the suite fast"""
    monkeypatch.setattr(settings, "password_hash_rounds", 4)


@pytest.fixture
def store_app() -> FastAPI:
    """Fresh in-memory store emulator"""
    return create_store_app(auth_token=STORE_AUTH_TOKEN)


@pytest.fixture
def store_tree(store_app: FastAPI) -> Dict[str, Any]:
    """Direct access to the emulator's JSON tree for seeding and assertions"""
    return store_app.state.tree


@pytest.fixture
def store_client(store_app: FastAPI) -> RealtimeStoreClient:
    return RealtimeStoreClient(
        base_url=STORE_BASE_URL,
        auth_token=STORE_AUTH_TOKEN,
        timeout=2.0,
        transport=httpx.ASGITransport(app=store_app),
    )


@pytest.fixture
def member_repository(store_client: RealtimeStoreClient) -> MemberRepository:
    return MemberRepository(store_client, rng=random.Random(7))


@pytest.fixture
def transaction_repository(store_client: RealtimeStoreClient) -> TransactionRepository:
    return TransactionRepository(store_client)


@pytest.fixture
def client(store_client: RealtimeStoreClient) -> TestClient:
    """Create FastAPI test client wired to the store emulator"""
    app = create_app()
    app.dependency_overrides[get_store_client] = lambda: store_client
    return TestClient(app)


@pytest.fixture
def registration() -> MemberRegistration:
    return MemberRegistration(
        name="Siti Rahma",
        email="siti@example.com",
        password="rahasia123",
        phone="081234567890",
        address="Jl. Merdeka No. 10, Bandung",
        type="Student",
    )

