"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from story_planner.core.dependencies import get_store
from story_planner.core.security import create_admin_token
from story_planner.db.repositories.document_repository import DocumentStore
from story_planner.domains.documents.services import DocumentService
from story_planner.main import app


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """Path of the JSON document used by a test store."""
    return tmp_path / "story_planner_data.json"


@pytest.fixture
def store(data_file: Path) -> DocumentStore:
    """Provide a store backed by a temporary file."""
    return DocumentStore(data_file)


@pytest.fixture
def service(store: DocumentStore) -> DocumentService:
    """Provide a document service over the temporary store."""
    return DocumentService(store)


@pytest.fixture
def client(store: DocumentStore):
    """Create a test client whose requests use the temporary store."""
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Authorization headers carrying a valid admin token."""
    return {"Authorization": f"Bearer {create_admin_token()}"}
