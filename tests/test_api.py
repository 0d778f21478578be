"""
Tests for the API endpoints.
"""
import json
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.api import deps
from app.main import app
from app.services.post_store import PostStore
from tests.conftest import sign_payload


class TestProfileAPI:
    """Tests for GET /profile."""

    def test_new_user_gets_free_plan(self, client, profile_store):
        response = client.get("/profile")

        assert response.status_code == 200
        assert response.json() == {"plan": "free", "blogCount": 0, "maxBlogs": 4}
        assert "user-1" in profile_store.rows

    def test_premium_user(self, client, profile_store, post_store):
        profile_store.add("user-1", plan="premium")
        post_store.add("user-1", count=7)

        response = client.get("/profile")

        assert response.json() == {"plan": "premium", "blogCount": 7, "maxBlogs": 20}


class TestBlogsAPI:
    """Tests for the /blogs endpoints."""

    def test_create_and_list(self, client):
        response = client.post("/blogs", json={"title": "Hello", "content": "World"})

        assert response.status_code == 200
        created = response.json()
        assert created["title"] == "Hello"
        assert created["user_id"] == "user-1"

        response = client.get("/blogs")
        assert response.status_code == 200
        assert [blog["id"] for blog in response.json()] == [created["id"]]

    def test_create_requires_title_and_content(self, client):
        response = client.post("/blogs", json={"title": "Hello"})

        assert response.status_code == 400
        assert response.json() == {"error": "Title and content are required."}

    def test_plan_limit(self, client, post_store):
        post_store.add("user-1", count=4)

        response = client.post("/blogs", json={"title": "Fifth", "content": "Too many"})

        assert response.status_code == 403
        assert response.json() == {"error": "Plan limit reached. Upgrade to add more than 4 blogs."}
        assert post_store.count_for_owner("user-1") == 4

    def test_update_blog(self, client, post_store):
        post_store.add("user-1")

        response = client.put("/blogs/1", json={"title": "Edited", "content": "Changed"})

        assert response.status_code == 200
        assert response.json()["title"] == "Edited"

    def test_update_is_not_count_gated(self, client, post_store):
        post_store.add("user-1", count=4)

        response = client.put("/blogs/4", json={"title": "Edited", "content": "Changed"})

        assert response.status_code == 200

    def test_update_other_users_blog(self, client, post_store):
        post_store.add("user-2")

        response = client.put("/blogs/1", json={"title": "Edited", "content": "Changed"})

        assert response.status_code == 404
        assert response.json() == {"error": "Blog not found."}
        assert post_store.rows[0]["title"] == "Post 1"

    def test_delete_blog(self, client, post_store):
        post_store.add("user-1")

        response = client.delete("/blogs/1")

        assert response.status_code == 200
        assert response.json() == {"message": "Blog deleted successfully."}
        assert post_store.rows == []

    def test_delete_missing_blog(self, client):
        response = client.delete("/blogs/42")

        assert response.status_code == 404

    def test_non_numeric_blog_id(self, client):
        supabase = MagicMock()
        invalid = APIError({"message": 'invalid input syntax for type bigint: "abc"', "code": "22P02"})
        supabase.table.return_value.update.return_value.eq.return_value.eq.return_value.execute.side_effect = invalid
        supabase.table.return_value.delete.return_value.eq.return_value.eq.return_value.execute.side_effect = invalid
        app.dependency_overrides[deps.get_post_store] = lambda: PostStore(supabase)

        updated = client.put("/blogs/abc", json={"title": "t", "content": "c"})
        deleted = client.delete("/blogs/abc")

        assert updated.status_code == 404
        assert updated.json() == {"error": "Blog not found."}
        assert deleted.status_code == 404

    def test_create_without_body(self, client):
        response = client.post("/blogs")

        assert response.status_code == 400
        assert response.json() == {"error": "Title and content are required."}

    def test_malformed_body(self, client):
        response = client.post("/blogs", content="not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert "error" in response.json()


class TestAuth:
    """Requests without a valid bearer token are refused."""

    def test_missing_token(self):
        response = TestClient(app).get("/profile")

        assert response.status_code == 401
        assert response.json() == {"error": "Missing auth token."}

    def test_wrong_scheme(self):
        response = TestClient(app).get("/blogs", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401

    @patch("app.services.auth_service.AuthService.get_identity")
    def test_token_is_verified(self, mock_get_identity, profile_store, post_store):
        from app.models.db_models import Identity

        mock_get_identity.return_value = Identity(id="user-9")
        app.dependency_overrides[deps.get_profile_store] = lambda: profile_store
        app.dependency_overrides[deps.get_post_store] = lambda: post_store
        try:
            response = TestClient(app).get("/profile", headers={"Authorization": "Bearer token-abc"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        mock_get_identity.assert_called_once_with("token-abc")
        assert "user-9" in profile_store.rows


class TestBillingAPI:
    """Tests for POST /billing/checkout."""

    def test_checkout(self, client, stripe_mock):
        response = client.post("/billing/checkout")

        assert response.status_code == 200
        assert response.json() == {"checkoutUrl": "https://checkout.stripe.com/c/pay/cs_test_1"}

    def test_checkout_when_premium(self, client, profile_store):
        profile_store.add("user-1", plan="premium")

        response = client.post("/billing/checkout")

        assert response.status_code == 400
        assert response.json() == {"error": "You already have the premium plan."}

    def test_checkout_not_configured(self, client, checkout_service):
        checkout_service.provider = None

        response = client.post("/billing/checkout")

        assert response.status_code == 500
        assert response.json() == {"error": "Stripe not configured."}

    def test_billing_status(self, client):
        response = client.get("/billing/status")

        assert response.status_code == 200
        assert set(response.json()) == {"stripeConfigured", "webhookConfigured"}


class TestStripeWebhookAPI:
    """Tests for POST /stripe/webhook."""

    def _payload(self, user_id="user-1"):
        return json.dumps({
            "id": "evt_1",
            "object": "event",
            "type": "checkout.session.completed",
            "data": {"object": {
                "id": "cs_1",
                "object": "checkout.session",
                "customer": "cus_1",
                "subscription": "sub_1",
                "metadata": {"supabaseUserId": user_id},
            }},
        }).encode()

    def test_signed_event_upgrades_plan(self, client, profile_store):
        profile_store.add("user-1")
        payload = self._payload()

        response = client.post(
            "/stripe/webhook",
            content=payload,
            headers={"Stripe-Signature": sign_payload(payload), "Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert profile_store.rows["user-1"]["plan"] == "premium"

        assert client.get("/profile").json()["maxBlogs"] == 20

    def test_bad_signature(self, client, profile_store):
        profile_store.add("user-1")
        payload = self._payload()

        response = client.post(
            "/stripe/webhook",
            content=payload,
            headers={"Stripe-Signature": sign_payload(payload, secret="whsec_other")},
        )

        assert response.status_code == 400
        assert "error" in response.json()
        assert profile_store.rows["user-1"]["plan"] == "free"

    def test_webhook_not_configured(self, client, webhook_service):
        webhook_service.provider = None

        response = client.post("/stripe/webhook", content=b"{}", headers={"Stripe-Signature": "t=1,v1=x"})

        assert response.status_code == 400
        assert response.json() == {"error": "Stripe webhook not configured."}


class TestMeta:
    """Root and health endpoints."""

    def test_health(self):
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_unknown_route(self):
        response = TestClient(app).get("/nope")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_openapi_documents_error_bodies(self):
        schema = TestClient(app).get("/openapi.json").json()

        create = schema["paths"]["/blogs"]["post"]["responses"]
        assert create["403"]["content"]["application/json"]["schema"]["$ref"] == "#/components/schemas/ErrorResponse"
        assert "ErrorResponse" in schema["components"]["schemas"]
