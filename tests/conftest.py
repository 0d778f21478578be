"""
Shared fixtures: in-memory stores standing in for Supabase tables.
"""
import os

# Settings are read at import time; keep the limiter out of the way of API tests
os.environ.setdefault("API_RATE_LIMIT", "10000")

import hashlib
import hmac
import time
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.core.auth import get_current_user
from app.main import app
from app.models.db_models import Identity, Profile
from app.services.billing_provider import StripeProvider
from app.services.checkout_service import CheckoutService
from app.services.post_service import PostService
from app.services.profile_service import ProfileService
from app.services.webhook_service import WebhookService

WEBHOOK_SECRET = "whsec_test_secret"
FRONTEND_URL = "http://localhost:3000"
PRICE_ID = "price_premium_monthly"


class FakeProfileStore:
    """Dict-backed `profiles` table."""

    def __init__(self):
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.insert_count = 0

    def add(self, profile_id: str, plan: str = "free", customer_id: Optional[str] = None,
            subscription_id: Optional[str] = None) -> None:
        self.rows[profile_id] = {
            "id": profile_id,
            "plan": plan,
            "stripe_customer_id": customer_id,
            "stripe_subscription_id": subscription_id,
        }

    def get(self, profile_id: str) -> Optional[Profile]:
        row = self.rows.get(profile_id)
        return Profile(**row) if row else None

    def create_default(self, profile_id: str) -> Profile:
        if profile_id not in self.rows:
            self.add(profile_id)
            self.insert_count += 1
        return Profile(**self.rows[profile_id])

    def update(self, profile_id: str, fields: Dict[str, Any]) -> Optional[Profile]:
        row = self.rows.get(profile_id)
        if row is None:
            return None
        row.update(fields)
        return Profile(**row)

    def update_by_customer(self, customer_id: str, fields: Dict[str, Any]) -> List[Profile]:
        updated = []
        for row in self.rows.values():
            if row["stripe_customer_id"] == customer_id:
                row.update(fields)
                updated.append(Profile(**row))
        return updated


class FakePostStore:
    """List-backed `blogs` table."""

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.next_id = 1

    def add(self, owner_id: str, count: int = 1) -> None:
        for i in range(count):
            self.insert(owner_id, f"Post {i + 1}", "Body")

    def count_for_owner(self, owner_id: str) -> int:
        return len([row for row in self.rows if row["user_id"] == owner_id])

    def list_for_owner(self, owner_id: str) -> List[Dict[str, Any]]:
        return sorted((row for row in self.rows if row["user_id"] == owner_id), key=lambda row: row["id"])

    def insert(self, owner_id: str, title: str, content: str) -> Dict[str, Any]:
        row = {"id": self.next_id, "user_id": owner_id, "title": title, "content": content}
        self.next_id += 1
        self.rows.append(row)
        return dict(row)

    def _find(self, post_id, owner_id: str) -> Optional[Dict[str, Any]]:
        for row in self.rows:
            if str(row["id"]) == str(post_id) and row["user_id"] == owner_id:
                return row
        return None

    def update(self, post_id, owner_id: str, title: str, content: str) -> Optional[Dict[str, Any]]:
        row = self._find(post_id, owner_id)
        if row is None:
            return None
        row.update({"title": title, "content": content})
        return dict(row)

    def delete(self, post_id, owner_id: str) -> Optional[Dict[str, Any]]:
        row = self._find(post_id, owner_id)
        if row is None:
            return None
        self.rows.remove(row)
        return row


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """Build a Stripe-Signature header the way Stripe does."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.".encode() + payload
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture
def identity():
    return Identity(id="user-1", email="alice@example.com")


@pytest.fixture
def profile_store():
    return FakeProfileStore()


@pytest.fixture
def post_store():
    return FakePostStore()


@pytest.fixture
def profile_service(profile_store, post_store):
    return ProfileService(profile_store, post_store)


@pytest.fixture
def post_service(profile_service, post_store):
    return PostService(profile_service, post_store)


@pytest.fixture
def stripe_mock():
    """Mocked Stripe provider for checkout tests."""
    provider = Mock(spec=StripeProvider)
    provider.webhook_secret = WEBHOOK_SECRET
    provider.create_customer.return_value = "cus_new"
    provider.create_checkout_session.return_value = "https://checkout.stripe.com/c/pay/cs_test_1"
    return provider


@pytest.fixture
def checkout_service(profile_service, profile_store, stripe_mock):
    return CheckoutService(profile_service, profile_store, stripe_mock, price_id=PRICE_ID, frontend_url=FRONTEND_URL)


@pytest.fixture
def stripe_provider():
    """Real provider: webhook signatures are verified by the stripe library."""
    return StripeProvider("sk_test_dummy", WEBHOOK_SECRET)


@pytest.fixture
def webhook_service(profile_store, stripe_provider):
    return WebhookService(profile_store, stripe_provider)


@pytest.fixture
def client(identity, profile_store, post_store, checkout_service, webhook_service):
    """API client with the stores and billing wired to the in-memory fakes."""
    app.dependency_overrides[get_current_user] = lambda: identity
    app.dependency_overrides[deps.get_profile_store] = lambda: profile_store
    app.dependency_overrides[deps.get_post_store] = lambda: post_store
    app.dependency_overrides[deps.get_checkout_service] = lambda: checkout_service
    app.dependency_overrides[deps.get_webhook_service] = lambda: webhook_service
    yield TestClient(app)
    app.dependency_overrides.clear()
