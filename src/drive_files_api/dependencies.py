"""FastAPI dependencies that hand routes lazily-built provider clients.

Clients are built on first use inside the route, so request validation (400s) happens
before any credential problem can surface.
"""

from typing import Callable

from azure.storage.blob import ContainerClient
from fastapi import Request
from googleapiclient.discovery import Resource

from drive_files_api.blob.client import get_container_client
from drive_files_api.config.settings import Settings
from drive_files_api.drive.client import get_drive_service

DriveServiceFactory = Callable[[], Resource]
ContainerClientFactory = Callable[[], ContainerClient]


def get_app_settings(request: Request) -> Settings:
    """Settings attached to the running app by `create_app`."""
    return request.app.state.settings


def get_drive_service_factory(request: Request) -> DriveServiceFactory:
    """Dependency returning a factory for the Drive v3 resource."""
    settings = get_app_settings(request)
    return lambda: get_drive_service(settings)


def get_container_client_factory(request: Request) -> ContainerClientFactory:
    """Dependency returning a factory for the download container client."""
    settings = get_app_settings(request)
    return lambda: get_container_client(settings)
