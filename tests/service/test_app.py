"""Tests for the FastAPI service mode."""

from __future__ import annotations

from typing import List, Optional

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from reusebom.resolver import SourceResolver
from reusebom.service import create_app
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def requested_configs() -> List[Optional[str]]:
    return []


@pytest.fixture
def client(repo_builder: RepoBuilder, requested_configs: List[Optional[str]]) -> TestClient:
    def _factory(package_config: Optional[str]) -> SourceResolver:
        requested_configs.append(package_config)
        return SourceResolver(package_config)

    return TestClient(create_app(_factory))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_sbom_endpoint_returns_document(
    client: TestClient, repo_builder: RepoBuilder, requested_configs: List[Optional[str]]
) -> None:
    repo_builder.write(
        {
            "a.py": "# SPDX-License-Identifier: MIT\n",
            "b.py": "# SPDX-FileCopyrightText: 2023 Bob\n",
        }
    )

    response = client.post(
        "/sbom",
        json={"name": "svc", "tool": "svc-tool", "paths": ["a.py", "b.py"], "package_config": None},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "svc"
    assert data["creationInfo"]["creators"] == ["Tool: svc-tool"]
    assert [entry["fileName"] for entry in data["files"]] == ["./a.py", "./b.py"]
    assert data["files"][0]["licenseInfoInFiles"] == ["MIT"]
    assert data["files"][1]["copyrightText"] == "2023 Bob"
    assert requested_configs == [None]


def test_inspect_endpoint_uses_default_package_config(
    client: TestClient, repo_builder: RepoBuilder, requested_configs: List[Optional[str]]
) -> None:
    repo_builder.write({"a.py": "x = 1\n"})
    repo_builder.write_dep5(
        """
        Upstream-Name: example
        Copyright: 2023 Header
        License: MIT
        """
    )

    response = client.post("/inspect", json={"path": "a.py"})

    assert response.status_code == 200
    assert response.json()["copyrightText"] == "2023 Header"
    assert requested_configs == [".reuse/dep5"]


def test_missing_file_maps_to_404(client: TestClient, repo_builder: RepoBuilder) -> None:
    response = client.post("/inspect", json={"path": "missing.py", "package_config": None})

    assert response.status_code == 404
    assert "missing.py" in response.json()["detail"]


def test_malformed_package_config_maps_to_400(client: TestClient, repo_builder: RepoBuilder) -> None:
    repo_builder.write({"a.py": "x = 1\n", "bad.dep5": "Upstream-Name: broken\n"})

    response = client.post("/inspect", json={"path": "a.py", "package_config": "bad.dep5"})

    assert response.status_code == 400
