"""Functions for deleting files from Google Drive--the "D" in CRUD."""

import logging

from googleapiclient.discovery import Resource

logger = logging.getLogger(__name__)


def delete_file(drive_service: Resource, file_id: str) -> None:
    """
    Delete a file or folder from Google Drive.

    :param drive_service: A Drive v3 resource.
    :param file_id: The id of the file or folder to delete.
    """
    drive_service.files().delete(fileId=file_id).execute()
    logger.info(f"Deleted {file_id}")
