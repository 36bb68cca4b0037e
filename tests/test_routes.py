"""API tests for the /ai routes."""

import json

import pytest

from better_projects_ai.errors import UpstreamError


def _events(body: str):
    return [json.loads(line[len("data: "):]) for line in body.splitlines() if line.startswith("data: ")]


class TestSummaryEndpoints:
    def test_task_summary(self, test_client, llm_client):
        resp = test_client.post("/ai/task-summary", json={"taskId": "task-01"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["summary"] == llm_client.complete.return_value
        assert data["model"] == "openai/gpt-4o"
        assert data["cached"] is False
        assert data["stale"] is False
        assert data["source"] == "llm"
        assert data["generatedAt"] is not None

    def test_second_request_is_cached(self, test_client, llm_client):
        test_client.post("/ai/task-summary", json={"taskId": "task-01"})
        resp = test_client.post("/ai/task-summary", json={"taskId": "task-01"})

        assert resp.json()["cached"] is True
        assert resp.json()["source"] == "cache"
        assert llm_client.complete.await_count == 1

    def test_force_refresh(self, test_client, llm_client):
        test_client.post("/ai/task-summary", json={"taskId": "task-01"})
        resp = test_client.post("/ai/task-summary", json={"taskId": "task-01", "forceRefresh": True})

        assert resp.json()["cached"] is False
        assert llm_client.complete.await_count == 2

    def test_project_and_team_summaries(self, test_client):
        project = test_client.post(
            "/ai/project-summary", json={"projectId": "proj-01", "model": "anthropic/claude-3-haiku"}
        )
        team = test_client.post("/ai/team-summary", json={"teamId": "team-01"})

        assert project.status_code == 200
        assert project.json()["model"] == "anthropic/claude-3-haiku"
        assert team.status_code == 200

    def test_missing_id(self, test_client):
        resp = test_client.post("/ai/task-summary", json={})

        assert resp.status_code == 400
        assert resp.json() == {"error": "validation_error", "message": "Task ID is required"}

    def test_missing_project_id(self, test_client):
        resp = test_client.post("/ai/project-summary", json={"model": "openai/gpt-4o"})

        assert resp.status_code == 400
        assert resp.json()["message"] == "Project ID is required"

    def test_malformed_body(self, test_client):
        resp = test_client.post(
            "/ai/task-summary", content="not json", headers={"Content-Type": "application/json"}
        )

        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    def test_unsupported_model(self, test_client):
        resp = test_client.post("/ai/task-summary", json={"taskId": "task-01", "model": "acme/unknown-1"})

        assert resp.status_code == 400
        assert "Unsupported model" in resp.json()["message"]

    def test_unknown_task(self, test_client, llm_client):
        resp = test_client.post("/ai/task-summary", json={"taskId": "task-99"})

        assert resp.status_code == 404
        assert resp.json() == {"error": "not_found", "message": "Task not found: task-99"}
        llm_client.complete.assert_not_called()

    def test_upstream_failure_returns_placeholder(self, test_client, llm_client):
        llm_client.complete.side_effect = UpstreamError("OpenRouter API error: boom", status_code=500)

        resp = test_client.post("/ai/team-summary", json={"teamId": "team-01"})

        assert resp.status_code == 200
        assert resp.json()["source"] == "mock"
        assert resp.json()["summary"].startswith("# Team Performance Report")

    def test_unexpected_failure_is_500(self, test_client, llm_client):
        llm_client.complete.side_effect = RuntimeError("bug")

        resp = test_client.post("/ai/task-summary", json={"taskId": "task-01"})

        assert resp.status_code == 500
        assert resp.json()["message"] == "Failed to generate task summary"


class TestStreamingEndpoints:
    def test_task_summary_stream(self, test_client, llm_client):
        resp = test_client.post("/ai/task-summary/stream", json={"taskId": "task-01"})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        events = _events(resp.text)
        deltas = [e["delta"] for e in events if "delta" in e]
        assert "".join(deltas) == llm_client.complete.return_value
        assert events[-1]["done"] is True
        assert events[-1]["source"] == "llm"
        assert events[-1]["model"] == "openai/gpt-4o"

    def test_stream_errors_before_streaming(self, test_client):
        resp = test_client.post("/ai/project-summary/stream", json={"projectId": "proj-99"})

        assert resp.status_code == 404


class TestCreateTask:
    def test_llm_draft(self, test_client, llm_client):
        llm_client.complete.return_value = json.dumps(
            {"title": "Fix checkout crash", "priority": "HIGH", "estimatedHours": 2, "dueDate": "2024-06-01"}
        )

        resp = test_client.post("/ai/create-task", json={"prompt": "checkout crashes"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["source"] == "llm"
        assert data["task"]["title"] == "Fix checkout crash"
        assert data["task"]["estimatedHours"] == 2
        assert data["task"]["dueDate"] == "2024-06-01"

    def test_heuristic_fallback(self, test_client):
        # the default double answers with Markdown, not JSON
        resp = test_client.post("/ai/create-task", json={"prompt": "Fix login bug urgent"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["source"] == "heuristic"
        assert data["task"]["title"] == "Fix login bug urgent"
        assert data["task"]["priority"] == "HIGHEST"
        assert data["task"]["tags"] == ["bug"]

    @pytest.mark.parametrize("body", [{}, {"prompt": "   "}])
    def test_missing_prompt(self, test_client, body):
        resp = test_client.post("/ai/create-task", json=body)

        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"


class TestCacheAdministration:
    def test_clear_all(self, test_client):
        test_client.post("/ai/task-summary", json={"taskId": "task-01"})
        test_client.post("/ai/project-summary", json={"projectId": "proj-01"})

        resp = test_client.post("/ai/clear-cache")

        assert resp.status_code == 200
        assert resp.json() == {"message": "Cache cleared successfully", "cleared": 2}

    def test_clear_one_kind(self, test_client, llm_client):
        test_client.post("/ai/task-summary", json={"taskId": "task-01"})
        test_client.post("/ai/project-summary", json={"projectId": "proj-01"})

        resp = test_client.post("/ai/clear-cache", json={"kind": "task"})

        assert resp.json() == {"message": "Task cache cleared successfully", "cleared": 1}
        project = test_client.post("/ai/project-summary", json={"projectId": "proj-01"})
        assert project.json()["cached"] is True

    def test_cleared_summary_is_regenerated(self, test_client, llm_client):
        test_client.post("/ai/task-summary", json={"taskId": "task-01"})
        test_client.post("/ai/clear-cache", json={})

        resp = test_client.post("/ai/task-summary", json={"taskId": "task-01"})

        assert resp.json()["source"] == "llm"
        assert llm_client.complete.await_count == 2

    def test_unknown_kind(self, test_client):
        resp = test_client.post("/ai/clear-cache", json={"kind": "sprint"})

        assert resp.status_code == 400


class TestInfoEndpoints:
    def test_models(self, test_client):
        resp = test_client.get("/ai/models")

        data = resp.json()
        assert data["default"] == "openai/gpt-4o"
        assert {"id": "openai/gpt-4o", "name": "GPT-4o", "provider": "OpenAI"} in data["models"]

    def test_status(self, test_client):
        test_client.post("/ai/task-summary", json={"taskId": "task-01"})

        data = test_client.get("/ai/status").json()

        assert data["message"] == "AI routes are working"
        assert data["llmConfigured"] is True
        assert data["defaultModel"] == "openai/gpt-4o"
        assert data["cacheExpirationSecs"] == 86400
        assert data["cacheStatus"] == {"task": 1, "project": 0, "team": 0}

    def test_health(self, test_client):
        data = test_client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["llm_configured"] is True
        assert data["cache_entries"] == 0

    def test_root(self, test_client):
        data = test_client.get("/").json()

        assert data["service"] == "Better Projects AI"
        assert data["health"] == "/health"

    def test_metrics(self, test_client):
        test_client.post("/ai/task-summary", json={"taskId": "task-01"})

        resp = test_client.get("/metrics/")

        assert resp.status_code == 200
        assert "ai_summary_requests_total" in resp.text
