"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from zendoc.config import ConfigError
from zendoc.orchestrator import GenerateOutcome, Orchestrator
from zendoc.service import create_app


class _StubOrchestrator:
    def __init__(self) -> None:
        self.generate_calls: list[dict[str, object]] = []
        self.error: Exception | None = None

    def plan(self, path: str):
        return Orchestrator(environ={}).plan(path)

    def run_generate(self, path: str, *, offline: bool = False) -> GenerateOutcome:
        self.generate_calls.append({"path": path, "offline": offline})
        if self.error is not None:
            raise self.error
        return GenerateOutcome(
            output_dir=Path(path) / "docs",
            written=[Path("a.md"), Path("b.md")],
            fallbacks=["lib/a.ts"],
        )


@pytest.fixture
def orchestrator() -> _StubOrchestrator:
    return _StubOrchestrator()


@pytest.fixture
def client(orchestrator: _StubOrchestrator) -> TestClient:
    return TestClient(create_app(lambda: orchestrator))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_plan_endpoint(client: TestClient, next_app) -> None:
    response = client.post("/plan", json={"path": str(next_app.path())})

    assert response.status_code == 200
    data = response.json()
    assert data["counts"]["pages"] == 3
    users = next(t for t in data["targets"] if t["relative_path"] == "app/api/users/route.ts")
    assert users == {
        "relative_path": "app/api/users/route.ts",
        "category": "api",
        "slug": "get-all-users",
        "doc_path": "api/get-all-users.md",
        "route": "/api/users",
        "http_method": "get",
    }
    assert [group["label"] for group in data["sidebar"]] == [
        "Components",
        "Pages",
        "API Routes",
        "Libraries & Utilities",
    ]


def test_plan_endpoint_missing_path(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/plan", json={"path": str(tmp_path / "nope")})
    assert response.status_code == 404


def test_generate_endpoint(client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path) -> None:
    response = client.post("/generate", json={"path": str(tmp_path), "offline": True})

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "output_dir": str(tmp_path / "docs"),
        "written": 2,
        "fallbacks": ["lib/a.ts"],
        "failed": [],
        "translated": False,
    }
    assert orchestrator.generate_calls == [{"path": str(tmp_path), "offline": True}]


@pytest.mark.parametrize(
    "error, status",
    [
        (ConfigError(".zendoc.yml not found"), 422),
        (RuntimeError("No LLM API key configured"), 400),
    ],
)
def test_generate_endpoint_maps_errors(
    client: TestClient, orchestrator: _StubOrchestrator, tmp_path: Path, error, status
) -> None:
    orchestrator.error = error
    response = client.post("/generate", json={"path": str(tmp_path)})
    assert response.status_code == status
    assert response.json() == {"detail": str(error)}
