"""HTTP tests for the OpenPRD API."""

from __future__ import annotations

import pytest

from openprd.models.generation_log import GenerationLog
from openprd.models.prd import PRD
from tests.conftest import SAMPLE_PRD, count_rows, openai_reply

pytestmark = pytest.mark.integration

NAMED_INPUT = "A tool that summarizes long PDFs, call it Falcon"


class TestModelsEndpoints:
    """Tests for the provider catalog and connectivity endpoints."""

    @pytest.mark.asyncio
    async def test_list_models(self, client):
        response = await client.get("/api/models")

        assert response.status_code == 200
        providers = response.json()["providers"]
        assert list(providers) == [
            "openai", "anthropic", "google", "openrouter", "deepseek", "moonshot", "zai",
        ]
        assert providers["openai"]["models"][1]["contextWindow"] == 128000
        assert providers["moonshot"]["availableBaseUrls"][0]["name"] == "Global"

    @pytest.mark.asyncio
    async def test_provider_models(self, client, fake_http):
        fake_http.reply(json={"data": [{"id": "gpt-4o-mini"}]})

        response = await client.post(
            "/api/provider-models", json={"provider": "openai", "apiKey": "sk-test"}
        )

        assert response.status_code == 200
        assert response.json() == {"models": [{
            "name": "gpt-4o-mini",
            "contextWindow": 128000,
            "inputCostPer1k": 0.00015,
            "outputCostPer1k": 0.0006,
            "description": None,
        }]}

    @pytest.mark.asyncio
    async def test_provider_models_bad_key(self, client, fake_http):
        fake_http.reply(401, json={"error": {"message": "Incorrect API key provided"}})

        response = await client.post(
            "/api/provider-models", json={"provider": "openai", "apiKey": "sk-bad"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    @pytest.mark.asyncio
    async def test_provider_models_none_supported(self, client, fake_http):
        fake_http.reply(json={"data": [{"id": "whisper-1"}]})

        response = await client.post(
            "/api/provider-models", json={"provider": "openai", "apiKey": "sk"}
        )

        assert response.status_code == 404
        assert response.json()["error"]["message"] == (
            "No supported OpenAI models found for your API key."
        )

    @pytest.mark.asyncio
    async def test_provider_models_malformed_listing(self, client, fake_http):
        fake_http.reply(json=["gpt-4o"])

        response = await client.post(
            "/api/provider-models", json={"provider": "openai", "apiKey": "sk"}
        )

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "UPSTREAM_ERROR"

    @pytest.mark.asyncio
    async def test_provider_models_unknown_provider(self, client, fake_http):
        response = await client.post(
            "/api/provider-models", json={"provider": "mistral", "apiKey": "k"}
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": {"code": "INVALID_ARGUMENT", "message": "Unsupported provider: mistral"}
        }
        assert fake_http.call_count == 0

    @pytest.mark.asyncio
    async def test_connection_valid(self, client, fake_http):
        fake_http.reply(json=openai_reply("Hello"))

        response = await client.post("/api/test-connection", json={"provider": "zai", "apiKey": "k"})

        assert response.status_code == 200
        assert response.json() == {"valid": True, "model": "glm-4.5", "contextWindow": 128000}

    @pytest.mark.asyncio
    async def test_connection_invalid(self, client, fake_http):
        fake_http.reply(401, json={"error": {"message": "nope"}})

        response = await client.post("/api/test-connection", json={"provider": "openai", "apiKey": "k"})

        assert response.status_code == 200
        assert response.json() == {"valid": False, "error": "Invalid API key"}

    @pytest.mark.asyncio
    async def test_missing_field(self, client):
        response = await client.post("/api/test-connection", json={"provider": "openai"})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "apiKey" in error["message"]


class TestKeysEndpoints:
    """Tests for stored key endpoints."""

    @pytest.mark.asyncio
    async def test_save_list_delete(self, client):
        saved = await client.post("/api/keys", json={
            "userId": "user-1", "provider": "openai", "apiKey": "sk-secret-4321", "label": "work",
        })
        assert saved.status_code == 200
        assert saved.json()["keyHint"] == "...4321"
        key_id = saved.json()["id"]

        listed = await client.get("/api/keys/user-1")
        assert listed.status_code == 200
        keys = listed.json()["keys"]
        assert len(keys) == 1
        assert keys[0]["id"] == key_id
        assert keys[0]["provider"] == "openai"
        assert keys[0]["label"] == "work"
        assert keys[0]["isActive"] is True
        assert "sk-secret-4321" not in listed.text

        deleted = await client.delete(f"/api/keys/user-1/{key_id}")
        assert deleted.status_code == 204

        assert (await client.get("/api/keys/user-1")).json() == {"keys": []}
        again = await client.delete(f"/api/keys/user-1/{key_id}")
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_save_unknown_provider(self, client):
        response = await client.post("/api/keys", json={
            "userId": "user-1", "provider": "mistral", "apiKey": "k",
        })
        assert response.status_code == 400


class TestGenerateEndpoint:
    """Tests for POST /api/generate and the PRD history endpoints."""

    @pytest.mark.asyncio
    async def test_generate_and_fetch(self, client, seeded_prompt, fake_http):
        fake_http.reply(json=openai_reply(SAMPLE_PRD))

        response = await client.post("/api/generate", json={
            "userId": "user-1",
            "input": NAMED_INPUT,
            "provider": "openai",
            "model": "gpt-4o",
            "apiKey": "sk-inline",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["filename"] == "falcon-prd.md"
        assert body["content"] == SAMPLE_PRD
        assert body["tokens"] > 0
        assert body["cost"] > 0
        assert [s["type"] for s in body["sections"]] == [
            "executive_summary", "problem_statement", "solution_overview",
        ]

        listed = await client.get("/api/prds/user/user-1")
        assert listed.status_code == 200
        prds = listed.json()["prds"]
        assert [p["id"] for p in prds] == [body["prdId"]]
        assert prds[0]["title"] == "Falcon: PDF Summarizer"
        assert prds[0]["modelProvider"] == "openai"

        detail = await client.get(f"/api/prds/{body['prdId']}")
        assert detail.status_code == 200
        assert detail.json()["generatedContent"] == SAMPLE_PRD
        assert [s["sectionOrder"] for s in detail.json()["sections"]] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_generate_without_key(self, client, session_factory, seeded_prompt, fake_http):
        response = await client.post("/api/generate", json={
            "userId": "user-1", "input": NAMED_INPUT, "provider": "openai", "model": "gpt-4o",
        })

        assert response.status_code == 404
        assert response.json()["error"]["message"] == (
            "No API key found for this provider. Please provide one or save it for future use."
        )
        assert fake_http.call_count == 0

    @pytest.mark.asyncio
    async def test_generate_with_stored_key(self, client, seeded_prompt, fake_http):
        await client.post("/api/keys", json={
            "userId": "user-1", "provider": "deepseek", "apiKey": "sk-ds-stored",
        })
        fake_http.reply(json=openai_reply(SAMPLE_PRD))

        response = await client.post("/api/generate", json={
            "userId": "user-1", "input": NAMED_INPUT, "provider": "deepseek", "model": "deepseek-chat",
        })

        assert response.status_code == 200
        assert fake_http.requests[0].headers["Authorization"] == "Bearer sk-ds-stored"

    @pytest.mark.asyncio
    async def test_generate_input_too_long(self, client, session_factory, seeded_prompt, fake_http):
        response = await client.post("/api/generate", json={
            "userId": "user-1",
            "input": "x" * 20_000,
            "provider": "moonshot",
            "model": "moonshot-v1-8k",
            "apiKey": "sk",
        })

        assert response.status_code == 400
        assert response.json()["error"]["message"] == (
            "Input too long for selected model context window"
        )
        assert fake_http.call_count == 0
        assert await count_rows(session_factory, GenerationLog) == 1

    @pytest.mark.asyncio
    async def test_generate_rejected_key(self, client, session_factory, seeded_prompt, fake_http):
        fake_http.reply(401, json={"error": {"message": "Incorrect API key provided"}})

        response = await client.post("/api/generate", json={
            "userId": "user-1", "input": NAMED_INPUT, "provider": "openai", "model": "gpt-4o",
            "apiKey": "sk-bad",
        })

        assert response.status_code == 401
        assert await count_rows(session_factory, PRD) == 0

    @pytest.mark.asyncio
    async def test_invalid_mode(self, client):
        response = await client.post("/api/generate", json={
            "userId": "user-1", "input": "x", "provider": "openai", "model": "gpt-4o",
            "mode": "essay",
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_prd_not_found(self, client):
        response = await client.get("/api/prds/999")

        assert response.status_code == 404
        assert response.json() == {"error": {"code": "NOT_FOUND", "message": "PRD 999 not found"}}

    @pytest.mark.asyncio
    async def test_prd_sections(self, client, seeded_prompt, fake_http):
        fake_http.reply(json=openai_reply(SAMPLE_PRD))
        created = await client.post("/api/generate", json={
            "userId": "user-1", "input": NAMED_INPUT, "provider": "openai", "model": "gpt-4o",
            "apiKey": "sk-inline",
        })

        response = await client.get(f"/api/prds/{created.json()['prdId']}/sections")

        assert response.status_code == 200
        sections = response.json()
        assert [s["sectionType"] for s in sections] == [
            "executive_summary", "problem_statement", "solution_overview",
        ]
        assert [s["sectionOrder"] for s in sections] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_prd_sections_not_found(self, client):
        response = await client.get("/api/prds/999/sections")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestLogsEndpoint:
    """Tests for the generation log history endpoint."""

    @pytest.mark.asyncio
    async def test_lists_success_and_failure(self, client, seeded_prompt, fake_http):
        fake_http.reply(401, json={"error": {"message": "Incorrect API key provided"}})
        await client.post("/api/generate", json={
            "userId": "user-1", "input": NAMED_INPUT, "provider": "openai", "model": "gpt-4o",
            "apiKey": "sk-bad",
        })
        fake_http.reply(json=openai_reply(SAMPLE_PRD))
        created = await client.post("/api/generate", json={
            "userId": "user-1", "input": NAMED_INPUT, "provider": "openai", "model": "gpt-4o",
            "apiKey": "sk-good",
        })

        response = await client.get("/api/logs/user/user-1")

        assert response.status_code == 200
        logs = response.json()["logs"]
        assert len(logs) == 2
        by_prd = {log["prdId"]: log for log in logs}
        success = by_prd[created.json()["prdId"]]
        assert success["error"] is None
        assert success["modelProvider"] == "openai"
        assert success["totalTokens"] > 0
        assert by_prd[None]["error"]
        assert by_prd[None]["totalTokens"] is None

    @pytest.mark.asyncio
    async def test_limit(self, client, seeded_prompt, fake_http):
        for _ in range(2):
            fake_http.reply(json=openai_reply(SAMPLE_PRD))
            await client.post("/api/generate", json={
                "userId": "user-1", "input": NAMED_INPUT, "provider": "openai", "model": "gpt-4o",
                "apiKey": "sk-good",
            })

        response = await client.get("/api/logs/user/user-1", params={"limit": 1})

        assert len(response.json()["logs"]) == 1

    @pytest.mark.asyncio
    async def test_unknown_user_is_empty(self, client):
        response = await client.get("/api/logs/user/nobody")

        assert response.status_code == 200
        assert response.json() == {"logs": []}


class TestHealthAndHeaders:
    """Tests for health probes and response headers."""

    @pytest.mark.asyncio
    async def test_liveness(self, client):
        response = await client.get("/health/live")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    @pytest.mark.asyncio
    async def test_security_headers(self, client):
        response = await client.get("/")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"
        assert "Strict-Transport-Security" not in response.headers
