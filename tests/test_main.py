# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

from typing import Generator
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from codeflow.config import CodeflowConfig
from codeflow.main import create_app, main
from helpers import RecordingTransport, request_json

AUTH = {"Authorization": "Bearer user-jwt"}


class Backend:
    """Routes mocked requests for Supabase, Daytona and OpenAI."""

    def __init__(self) -> None:
        self.exec_status = 200
        self.create_status = 201
        self.create_text: str | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host, path = request.url.host, request.url.path
        if host == "supabase.test" and path == "/auth/v1/user":
            if request.headers.get("Authorization") != "Bearer user-jwt":
                return httpx.Response(401, json={"message": "invalid JWT"})
            return httpx.Response(200, json={"id": "user-1", "email": "dev@example.com"})
        if host == "supabase.test" and path.startswith("/rest/v1/"):
            if request.method == "GET":
                return httpx.Response(200, json=[{"role": "user", "content": "hello"}])
            return httpx.Response(201, json=[{"id": "conv-new"}])
        if host == "daytona.test":
            if request.method == "POST" and path == "/v1/sandboxes":
                if self.create_text is not None:
                    return httpx.Response(self.create_status, text=self.create_text)
                return httpx.Response(self.create_status, json={"id": "sbx-1"})
            if path.endswith("/exec"):
                return httpx.Response(self.exec_status, json={"stdout": "1\n", "stderr": "", "exit_code": 0})
            if request.method == "DELETE":
                return httpx.Response(204)
        if host == "openai.test":
            return httpx.Response(200, json={"choices": [{"message": {"content": "Answer"}}]})
        return httpx.Response(404)


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
def transport(backend: Backend) -> RecordingTransport:
    return RecordingTransport(backend)


@pytest.fixture
def client(config: CodeflowConfig, transport: RecordingTransport) -> Generator[TestClient, None, None]:
    app = create_app(config, client=httpx.AsyncClient(transport=transport))
    with TestClient(app) as test_client:
        yield test_client


def test_execute_route(client: TestClient, transport: RecordingTransport) -> None:
    response = client.post("/daytona-execute", json={"code": "print(1)", "language": "py"}, headers=AUTH)

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["success"] is True
    assert result["output"] == "1\n"
    assert result["error"] is None
    assert result["exitCode"] == 0
    assert result["backend"] == "daytona"
    assert result["language"] == "python"
    assert result["sandboxId"] == "sbx-1"
    assert len(transport.calls("DELETE", "/sandboxes/sbx-1")) == 1


def test_execute_persists_result(client: TestClient, transport: RecordingTransport) -> None:
    body = {"code": "print(1)", "language": "python", "conversationId": "conv-1", "projectId": "proj-1"}
    response = client.post("/daytona-execute", json=body, headers=AUTH)

    assert response.status_code == 200
    [insert] = transport.calls("POST", "/rest/v1/messages")
    assert insert.headers["Authorization"] == "Bearer user-jwt"
    row = request_json(insert)
    assert row["conversation_id"] == "conv-1"
    assert row["content"].startswith("**Code Execution Result (Daytona - PYTHON)**")


def test_execute_rejects_unsupported_language(client: TestClient, transport: RecordingTransport) -> None:
    response = client.post("/daytona-execute", json={"code": "puts 1", "language": "ruby"}, headers=AUTH)

    assert response.status_code == 400
    assert "Unsupported language" in response.json()["error"]
    assert transport.requests == []


def test_execute_requires_code(client: TestClient) -> None:
    response = client.post("/daytona-execute", json={"language": "python"}, headers=AUTH)

    assert response.status_code == 400
    assert response.json() == {"error": "Code is required"}


def test_execute_requires_auth(client: TestClient, transport: RecordingTransport) -> None:
    response = client.post("/daytona-execute", json={"code": "print(1)", "language": "python"})

    assert response.status_code == 401
    assert transport.calls("POST", "/sandboxes") == []


def test_execute_invalid_token(client: TestClient, transport: RecordingTransport) -> None:
    response = client.post(
        "/daytona-execute",
        json={"code": "print(1)", "language": "python"},
        headers={"Authorization": "Bearer forged"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert transport.calls("POST", "/sandboxes") == []


def test_execute_provisioning_failure(client: TestClient, backend: Backend, transport: RecordingTransport) -> None:
    backend.create_status = 503
    response = client.post("/daytona-execute", json={"code": "print(1)", "language": "python"}, headers=AUTH)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create execution environment", "backend": "daytona"}
    assert transport.calls("DELETE") == []


def test_execute_failure_cleans_up(client: TestClient, backend: Backend, transport: RecordingTransport) -> None:
    backend.exec_status = 500
    response = client.post("/daytona-execute", json={"code": "print(1)", "language": "python"}, headers=AUTH)

    assert response.status_code == 500
    assert response.json() == {"error": "Code execution failed", "backend": "daytona"}
    assert len(transport.calls("DELETE", "/sandboxes/sbx-1")) == 1


def test_chat_route(client: TestClient) -> None:
    response = client.post("/ai-chat", json={"message": "hello"}, headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {"response": "Answer", "conversationId": "conv-new"}


def test_chat_requires_message(client: TestClient) -> None:
    response = client.post("/ai-chat", json={}, headers=AUTH)

    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}


def test_code_generation_route(client: TestClient, transport: RecordingTransport) -> None:
    response = client.post(
        "/openai-code-generation",
        json={"prompt": "fizzbuzz", "conversationId": "conv-1", "projectId": "proj-1"},
        headers=AUTH,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["conversationId"] == "conv-1"
    assert data["projectId"] == "proj-1"
    assert data["response"].startswith("Answer")
    assert data["metadata"]["daytona_available"] is True
    assert len(transport.calls("POST", "/rest/v1/code_sessions")) == 1


def test_render_route(client: TestClient) -> None:
    response = client.post("/render", json={"content": "Hi **there**\n```bash\necho 1\n```"})

    assert response.status_code == 200
    segments = response.json()["segments"]
    assert [s["type"] for s in segments] == ["text", "code"]
    assert segments[0]["html"] == '<p class="mb-4">Hi <strong>there</strong></p>'
    assert segments[1]["executable"] is True


def test_cors_preflight(client: TestClient) -> None:
    response = client.options(
        "/daytona-execute",
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, content-type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_main_runs_uvicorn(config: CodeflowConfig) -> None:
    with patch("codeflow.main.CodeflowConfig", return_value=config), patch("codeflow.main.uvicorn.run") as run:
        main()

    run.assert_called_once()
    assert run.call_args.kwargs == {"host": "0.0.0.0", "port": 8000}


def test_execute_rejects_non_string_language(client: TestClient, transport: RecordingTransport) -> None:
    response = client.post("/daytona-execute", json={"code": "x", "language": 5}, headers=AUTH)

    assert response.status_code == 400
    assert response.json() == {"error": "language: Input should be a valid string"}
    assert transport.requests == []


def test_invalid_json_body(client: TestClient) -> None:
    response = client.post(
        "/ai-chat",
        content=b'{"message": ',
        headers={**AUTH, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Request body is not valid JSON"}


def test_provisioning_unreadable_body(client: TestClient, backend: Backend, transport: RecordingTransport) -> None:
    backend.create_status = 200
    backend.create_text = "<html>gateway</html>"
    response = client.post("/daytona-execute", json={"code": "print(1)", "language": "python"}, headers=AUTH)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create execution environment", "backend": "daytona"}
    assert transport.calls("DELETE") == []


def test_unexpected_error_hides_details(config: CodeflowConfig, transport: RecordingTransport) -> None:
    app = create_app(config, client=httpx.AsyncClient(transport=transport))
    with TestClient(app, raise_server_exceptions=False) as test_client:
        app.state.orchestrator.execute = AsyncMock(side_effect=RuntimeError("db password is hunter2"))
        response = test_client.post(
            "/daytona-execute", json={"code": "print(1)", "language": "python"}, headers=AUTH
        )

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
