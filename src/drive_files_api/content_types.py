"""Content type resolution for uploaded files."""

from typing import Optional

GENERIC_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES_BY_EXTENSION = {
    "heic": "image/heic",
    "heif": "image/heif",
    "mov": "video/quicktime",
    "m4v": "video/x-m4v",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "mp4": "video/mp4",
    "pdf": "application/pdf",
    "txt": "text/plain",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def file_extension(file_name: str) -> str:
    """Lower-cased text after the last dot, or the whole name when there is no dot."""
    return file_name.lower().rsplit(".", 1)[-1]


def resolve_content_type(file_name: str, reported_type: Optional[str] = None) -> str:
    """
    Pick the content type a file is stored with.

    The client-reported type wins unless it is missing or the generic fallback;
    then the extension table decides, and anything unknown is stored as binary.
    """
    if reported_type and reported_type != GENERIC_CONTENT_TYPE:
        return reported_type
    return CONTENT_TYPES_BY_EXTENSION.get(file_extension(file_name), GENERIC_CONTENT_TYPE)
