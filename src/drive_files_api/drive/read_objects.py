"""Functions for reading files and listings from Google Drive--the "R" in CRUD."""

import io
import logging
from typing import List, Optional

from googleapiclient.discovery import Resource
from googleapiclient.http import MediaIoBaseDownload

from drive_files_api.drive.folders import escape_query_value
from drive_files_api.schemas import FOLDER_MIME_TYPE

logger = logging.getLogger(__name__)

LIST_FIELDS = "nextPageToken,files(id,name,mimeType,size,createdTime,modifiedTime,webViewLink,parents)"
LIST_ORDER = "folder,name"


def build_list_query(folder_id: Optional[str] = None) -> str:
    """Drive `q` expression for the non-trashed children of `folder_id` (or everything)."""
    if folder_id:
        return f"'{escape_query_value(folder_id)}' in parents and trashed=false"
    return "trashed=false"


def to_listing_entry(raw: dict) -> dict:
    """Shape a raw Drive file resource into a listing entry."""
    mime_type = raw.get("mimeType", "")
    return {
        "id": raw["id"],
        "name": raw.get("name", ""),
        "mime_type": mime_type,
        "size": int(raw.get("size") or 0),
        "created_time": raw.get("createdTime"),
        "modified_time": raw.get("modifiedTime"),
        "web_view_link": raw.get("webViewLink"),
        "is_folder": mime_type == FOLDER_MIME_TYPE,
    }


def list_files(drive_service: Resource, folder_id: Optional[str] = None) -> List[dict]:
    """
    List the contents of a folder, folders first and then by name.

    Every page is fetched; Drive does the ordering.

    :param drive_service: A Drive v3 resource.
    :param folder_id: The folder to list; everything visible to the account when omitted.
    """
    query = build_list_query(folder_id)
    entries: List[dict] = []
    page_token = None

    while True:
        request_kwargs = {"q": query, "fields": LIST_FIELDS, "orderBy": LIST_ORDER}
        if page_token:
            request_kwargs["pageToken"] = page_token
        response = drive_service.files().list(**request_kwargs).execute()

        entries.extend(to_listing_entry(raw) for raw in response.get("files") or [])
        page_token = response.get("nextPageToken")
        if not page_token:
            break

    logger.info(f"Listed {len(entries)} entries in {folder_id or 'drive root'}")
    return entries


def get_file_metadata(drive_service: Resource, file_id: str) -> dict:
    """Fetch the `id`, `name` and `mimeType` of a single file."""
    return drive_service.files().get(fileId=file_id, fields="id,name,mimeType").execute()


def download_file(drive_service: Resource, file_id: str) -> bytes:
    """
    Download the content of a file stored in Drive.

    :param drive_service: A Drive v3 resource.
    :param file_id: The id of the file.
    :return: The file bytes.
    """
    request = drive_service.files().get_media(fileId=file_id)
    buffer = io.BytesIO()
    downloader = MediaIoBaseDownload(buffer, request)
    done = False
    while not done:
        status, done = downloader.next_chunk()
        if status:
            logger.debug(f"Downloading {file_id}: {int(status.progress() * 100)}%")
    return buffer.getvalue()
