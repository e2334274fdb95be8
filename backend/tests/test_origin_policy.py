"""
MemoPad Backend — Origin Policy Tests
======================================

What:  Tests for the OriginPolicy predicate and the gate middleware.
Why:   The gate is the API's only access control; a loose comparison here
       opens the API to every site a user visits.

What we test:
    ✅ No Origin header is admitted
    ✅ Exact allow-list matches are admitted (with credentials)
    ✅ Near-misses (scheme, port, trailing slash, case) are rejected
    ✅ Rejection happens before routing, preflight included
"""

import pytest

from memopad.exceptions import OriginDeniedError
from memopad.middleware.origin_policy import OriginPolicy

ALLOWED_ORIGIN = "http://localhost:3000"
OTHER_ALLOWED_ORIGIN = "http://127.0.0.1:8080"


class TestOriginPolicy:
    """Tests for the pure predicate."""

    def setup_method(self):
        self.policy = OriginPolicy([OTHER_ALLOWED_ORIGIN, ALLOWED_ORIGIN])

    def test_absent_origin_allowed(self):
        assert self.policy.is_allowed(None)
        assert self.policy.is_allowed("")

    def test_allow_listed_origins_allowed(self):
        assert self.policy.is_allowed(ALLOWED_ORIGIN)
        assert self.policy.is_allowed(OTHER_ALLOWED_ORIGIN)

    @pytest.mark.parametrize(
        "origin",
        [
            "http://evil.example",
            "https://localhost:3000",
            "http://localhost:3001",
            "http://localhost:3000/",
            "HTTP://LOCALHOST:3000",
            "http://localhost",
            "null",
        ],
    )
    def test_other_origins_rejected(self, origin):
        assert not self.policy.is_allowed(origin)

    def test_check_raises_for_rejected_origin(self):
        with pytest.raises(OriginDeniedError) as exc_info:
            self.policy.check("http://evil.example")

        assert exc_info.value.status_code == 403
        assert exc_info.value.origin == "http://evil.example"

    def test_check_passes_for_allowed_origin(self):
        self.policy.check(ALLOWED_ORIGIN)

    def test_cors_options(self):
        options = self.policy.cors_options()

        assert options["allow_origins"] == sorted([ALLOWED_ORIGIN, OTHER_ALLOWED_ORIGIN])
        assert options["allow_methods"] == ["GET", "POST", "PUT", "DELETE"]
        assert options["allow_headers"] == ["Content-Type", "Authorization"]
        assert options["allow_credentials"] is True


class TestOriginPolicyMiddleware:
    """Tests for the gate in front of the routes."""

    @pytest.mark.asyncio
    async def test_request_without_origin_passes(self, test_client):
        response = await test_client.get("/memo/")

        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.asyncio
    async def test_allowed_origin_gets_cors_headers(self, test_client):
        response = await test_client.get("/memo/", headers={"Origin": ALLOWED_ORIGIN})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert response.headers["access-control-allow-credentials"] == "true"

    @pytest.mark.asyncio
    async def test_disallowed_origin_rejected(self, test_client):
        response = await test_client.get("/memo/", headers={"Origin": "http://evil.example"})

        assert response.status_code == 403
        assert response.json() == {"error": "Not allowed by CORS"}
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.asyncio
    async def test_disallowed_origin_never_reaches_handler(self, test_client):
        response = await test_client.post(
            "/memo/submit/",
            json={"text": "smuggled"},
            headers={"Origin": "http://evil.example"},
        )

        assert response.status_code == 403
        assert (await test_client.get("/memo/")).json()["data"]["content"] == []

    @pytest.mark.asyncio
    async def test_preflight_for_allowed_origin(self, test_client):
        response = await test_client.options(
            "/memo/submit/",
            headers={
                "Origin": ALLOWED_ORIGIN,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert response.headers["access-control-allow-credentials"] == "true"
        assert "POST" in response.headers["access-control-allow-methods"]

    @pytest.mark.asyncio
    async def test_preflight_for_disallowed_origin(self, test_client):
        response = await test_client.options(
            "/memo/submit/",
            headers={
                "Origin": "http://evil.example",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 403
