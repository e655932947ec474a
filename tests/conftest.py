import pytest
from fastapi.testclient import TestClient

from drive_files_api.config.settings import Settings
from drive_files_api.dependencies import get_container_client_factory, get_drive_service_factory
from drive_files_api.main import create_app
from tests.consts import (
    TEST_CONNECTION_STRING,
    TEST_CONTAINER_NAME,
    TEST_PRIVATE_KEY,
    TEST_ROOT_FOLDER_ID,
    TEST_SERVICE_ACCOUNT_EMAIL,
)

pytest_plugins = [
    "tests.fixtures.drive_fixtures",
    "tests.fixtures.blob_fixtures",
]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        google_service_account_email=TEST_SERVICE_ACCOUNT_EMAIL,
        google_private_key=TEST_PRIVATE_KEY,
        google_drive_folder_id=TEST_ROOT_FOLDER_ID,
        azure_storage_connection_string=TEST_CONNECTION_STRING,
        azure_container_name=TEST_CONTAINER_NAME,
    )


@pytest.fixture
def app(settings, fake_drive, fake_container):
    """App wired to the in-memory Drive and Blob fakes."""
    app = create_app(settings=settings)
    app.dependency_overrides[get_drive_service_factory] = lambda: (lambda: fake_drive)
    app.dependency_overrides[get_container_client_factory] = lambda: (lambda: fake_container)
    return app


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as client:
        yield client
