"""Functions for creating and locating folders in Google Drive."""

import logging
from typing import Optional

from googleapiclient.discovery import Resource

from drive_files_api.errors import ValidationError
from drive_files_api.schemas import FOLDER_MIME_TYPE

logger = logging.getLogger(__name__)

FOLDER_FIELDS = "id,name,createdTime,modifiedTime"


def create_folder(drive_service: Resource, name: str, parent_id: Optional[str] = None) -> dict:
    """
    Create a folder in Google Drive.

    :param drive_service: A Drive v3 resource.
    :param name: The folder name; surrounding whitespace is stripped.
    :param parent_id: Optional id of the parent folder.
    :return: The created folder's `id`, `name`, `createdTime` and `modifiedTime`.
    :raises ValidationError: if the name is blank.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Folder name is required")

    file_metadata = {"name": name, "mimeType": FOLDER_MIME_TYPE}
    if parent_id:
        file_metadata["parents"] = [parent_id]

    logger.info(f"Creating folder '{name}' under {parent_id or 'drive root'}")
    folder = drive_service.files().create(body=file_metadata, fields=FOLDER_FIELDS).execute()
    logger.info(f"Created folder {folder.get('id')}")
    return folder


def escape_query_value(value: str) -> str:
    """Escape a string literal for a Drive `q` expression."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def find_or_create_folder(drive_service: Resource, name: str, parent_id: Optional[str] = None) -> dict:
    """
    Return the first non-trashed folder called `name` under `parent_id`, creating it if absent.

    :param drive_service: A Drive v3 resource.
    :param name: Exact folder name to look for.
    :param parent_id: Optional id of the parent folder to search in.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Folder name is required")

    query = (
        f"name='{escape_query_value(name)}' and mimeType='{FOLDER_MIME_TYPE}' and trashed=false"
    )
    if parent_id:
        query += f" and '{escape_query_value(parent_id)}' in parents"

    response = drive_service.files().list(q=query, fields="files(id,name)").execute()
    existing = response.get("files") or []
    if existing:
        logger.info(f"Found existing folder '{name}' ({existing[0]['id']})")
        return existing[0]

    return create_folder(drive_service, name, parent_id)
