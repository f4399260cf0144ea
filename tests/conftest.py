"""Pytest fixtures for testing"""

import os

# Settings are read at import time
os.environ["SHOPIFY_API_SECRET"] = "test-app-secret"
os.environ["SHOPIFY_ACCESS_TOKEN"] = "shpat_test"
os.environ["SHOPIFY_STORE_DOMAIN"] = "bazi-test.myshopify.com"
os.environ["LOG_LEVEL"] = "WARNING"

import time
import pytest
import httpx
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Dict, List
from fastapi.testclient import TestClient

from bazicash_gateway.api.main import create_app
from bazicash_gateway.api.dependencies import get_admin_client
from bazicash_gateway.config import settings
from bazicash_gateway.domain.models import HistoryEntry, StoreCreditTransaction, TransactionKind
from bazicash_gateway.domain.signature import compute_signature
from bazicash_gateway.infrastructure.clients.admin import ShopifyAdminClient
from mock_shopify.admin_server.main import app as mock_admin_app

MOCK_GRAPHQL_URL = "http://mock-admin/admin/api/2024-07/graphql.json"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def sign_params(params: Dict[str, str], secret: str | None = None, timestamp: int | None = None) -> Dict[str, str]:
    """Add the parameters Shopify injects into App Proxy requests, signed"""
    signed = {
        "shop": settings.shopify_store_domain,
        "path_prefix": f"/{settings.app_proxy_prefix}/{settings.app_proxy_subpath}",
        "timestamp": str(timestamp if timestamp is not None else int(time.time())),
        "logged_in_customer_id": "",
        **params,
    }
    signed["signature"] = compute_signature(signed.items(), secret or settings.shopify_api_secret)
    return signed


@pytest.fixture
def signed() -> Callable[..., Dict[str, str]]:
    return sign_params


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client; Admin API calls are patched per test"""
    return TestClient(create_app())


def mock_admin_client() -> ShopifyAdminClient:
    """Real Admin client talking to the in-process mock Admin API"""
    return ShopifyAdminClient(
        graphql_url=MOCK_GRAPHQL_URL,
        access_token="shpat_test",
        transport=httpx.ASGITransport(app=mock_admin_app),
    )


@pytest.fixture
def admin_client() -> ShopifyAdminClient:
    return mock_admin_client()


@pytest.fixture
def mock_backed_app():
    """Gateway app wired to the mock Admin API"""
    app = create_app()
    app.dependency_overrides[get_admin_client] = mock_admin_client
    return app


def make_transaction(tail: str, amount: str, created_at: str, typename: str = "") -> StoreCreditTransaction:
    return StoreCreditTransaction(
        id=f"gid://shopify/StoreCreditAccountTransaction/{tail}",
        amount=Decimal(amount),
        currency="BRL",
        created_at=datetime.fromisoformat(created_at).replace(tzinfo=timezone.utc),
        typename=typename,
    )


def make_entry(id: str, kind: str, amount: str, created_at: str) -> HistoryEntry:
    moment = datetime.fromisoformat(created_at).replace(tzinfo=timezone.utc)
    return HistoryEntry(
        id=id,
        kind=TransactionKind(kind),
        amount=Decimal(amount),
        description=f"Transação {id}",
        date=moment.date(),
        timestamp=moment,
    )


@pytest.fixture
def sample_transactions() -> List[StoreCreditTransaction]:
    """Credits of 150 and 320.50, one debit of 200, out of order"""
    return [
        make_transaction("9001", "150.00", "2024-03-01T10:00:00"),
        make_transaction("9003", "320.50", "2024-03-10T18:30:00"),
        make_transaction("9002", "-200.00", "2024-03-05T14:15:00"),
    ]
