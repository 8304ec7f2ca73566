"""
Tests for pass-through API routes.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from fastapi.testclient import TestClient

from relay import config
from relay.main import app
from relay.middleware.rate_limit import api_limiter
from relay.services.llm_proxy import llm_proxy

client = TestClient(app)

COMPLETION = {"choices": [{"message": {"role": "assistant", "content": "hi"}}]}


def _mock_client(post: AsyncMock) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    mock_client.post = post
    return mock_client


class TestChatCompletions:
    def test_forwards_body_and_returns_upstream_json(self):
        mock_response = MagicMock()
        mock_response.json.return_value = COMPLETION
        mock_response.raise_for_status = MagicMock()
        post = AsyncMock(return_value=mock_response)

        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            response = client.post(
                "/api/llm/chat/completions",
                json={"model": "llama", "messages": [{"role": "user", "content": "hello"}]},
            )

        assert response.status_code == 200
        assert response.json() == COMPLETION
        assert post.call_args.kwargs["json"]["model"] == "llama"
        assert post.call_args.kwargs["headers"]["Authorization"].startswith("Bearer ")

    def test_relays_upstream_error_status(self):
        upstream = httpx.Response(
            429,
            json={"error": {"message": "slow down"}},
            request=httpx.Request("POST", config.settings.LLM_API_URL),
        )
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "429", request=upstream.request, response=upstream
        )
        post = AsyncMock(return_value=mock_response)

        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            response = client.post("/api/llm/chat/completions", json={"messages": []})

        assert response.status_code == 429
        body = response.json()
        assert body["error"] == {"error": {"message": "slow down"}}
        assert "timestamp" in body

    def test_non_json_success_body_is_relayed_as_text(self):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.text = "<html>gateway page</html>"
        mock_response.json.side_effect = ValueError("not json")
        mock_response.raise_for_status = MagicMock()
        post = AsyncMock(return_value=mock_response)

        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            response = client.post("/api/llm/chat/completions", json={"messages": []})

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == {"message": "<html>gateway page</html>"}
        assert "timestamp" in body

    def test_unreachable_upstream_returns_502(self):
        post = AsyncMock(side_effect=httpx.ConnectError("refused"))

        with patch("httpx.AsyncClient", return_value=_mock_client(post)):
            response = client.post("/api/llm/chat/completions", json={"messages": []})

        assert response.status_code == 502

    def test_missing_api_key_returns_500(self):
        with patch.object(llm_proxy, "_api_key", ""):
            response = client.post("/api/llm/chat/completions", json={"messages": []})

        assert response.status_code == 500
        assert "not configured" in response.json()["detail"]

    def test_generic_rate_limit(self):
        with patch.object(llm_proxy, "_api_key", ""):
            for _ in range(api_limiter.policy.max_requests):
                client.post("/api/llm/chat/completions", json={"messages": []})

            response = client.post("/api/llm/chat/completions", json={"messages": []})

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) >= 1
        assert response.json()["detail"]["retry_after"] > 0


class TestClientConfig:
    def test_complete_config(self):
        values = {name: f"value-{name}" for name in config.settings.CLIENT_CONFIG}

        with patch.object(config.settings, "CLIENT_CONFIG", values):
            response = client.get("/api/client-config")

        assert response.status_code == 200
        assert response.json() == values

    def test_incomplete_config(self):
        values = {name: f"value-{name}" for name in config.settings.CLIENT_CONFIG}
        values["appId"] = None

        with patch.object(config.settings, "CLIENT_CONFIG", values):
            response = client.get("/api/client-config")

        assert response.status_code == 500
        assert "incomplete" in response.json()["detail"]


class TestHealth:
    def test_health(self):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["environment"] == config.settings.ENVIRONMENT
        assert "timestamp" in data

    def test_status_reports_key_presence_only(self):
        response = client.get("/api/status")

        assert response.status_code == 200
        data = response.json()
        assert data["llm_api_key_set"] is True
        assert "test-llm-key" not in response.text

    def test_health_is_not_rate_limited(self):
        for _ in range(api_limiter.policy.max_requests + 5):
            assert client.get("/api/health").status_code == 200
