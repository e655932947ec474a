"""Construction of the Azure Blob container client."""

import logging

from azure.storage.blob import BlobServiceClient, ContainerClient

from drive_files_api.config.settings import Settings
from drive_files_api.errors import ProviderError

logger = logging.getLogger(__name__)


def get_container_client(settings: Settings) -> ContainerClient:
    """
    Create a client for the configured download container.

    :raises ProviderError: when no connection string is configured.
    """
    if not settings.azure_storage_connection_string:
        raise ProviderError("AZURE_STORAGE_CONNECTION_STRING environment variable is not set")

    blob_service_client = BlobServiceClient.from_connection_string(
        settings.azure_storage_connection_string
    )
    logger.debug(f"Using blob container '{settings.azure_container_name}'")
    return blob_service_client.get_container_client(settings.azure_container_name)
