"""Pytest fixtures shared by the unit and HTTP tests.

The asyncpg repositories and the Cloudinary client are replaced with
in-memory fakes so the whole API runs without Postgres or network access.
"""

import pytest
from fastapi.testclient import TestClient

from app.api.v1.deps import get_admin_repo, get_client_repo, get_settings, get_storage
from app.core.config import Settings
from app.main import create_app
from app.services.storage_service import AttachmentUploader
from fakes import FakeStorage, InMemoryAdminRepository, InMemoryClientRepository


@pytest.fixture
def upload_dir(tmp_path):
    return str(tmp_path / "uploads")


@pytest.fixture
def settings(upload_dir):
    return Settings(
        _env_file=None,
        SECRET_KEY="test-secret-key",
        DB_HOST="localhost",
        DB_PORT=5432,
        DB_NAME="driving_school_test",
        DB_USER="test",
        DB_PASS="test",
        CLOUD_NAME="demo",
        CLOUD_API_KEY="key",
        CLOUD_API_SECRET="secret",
        UPLOAD_DIR=upload_dir,
    )


@pytest.fixture
def client_repo():
    return InMemoryClientRepository()


@pytest.fixture
def admin_repo():
    return InMemoryAdminRepository()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def uploader(storage, upload_dir):
    return AttachmentUploader(storage, upload_dir)


@pytest.fixture
def app(settings, client_repo, admin_repo, storage):
    application = create_app(settings)
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_client_repo] = lambda: client_repo
    application.dependency_overrides[get_admin_repo] = lambda: admin_repo
    application.dependency_overrides[get_storage] = lambda: storage
    return application


@pytest.fixture
def http(app):
    return TestClient(app)
