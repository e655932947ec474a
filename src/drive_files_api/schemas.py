####################################
# --- Request/response schemas --- #
####################################

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
DEFAULT_ARCHIVE_NAME = "files"


class CamelModel(BaseModel):
    """Wire format is camelCase; Python attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateFolderRequest(CamelModel):
    """Request body for `POST /create-folder`."""
    name: Optional[str] = Field(None, description="Name of the new folder.")
    parent_id: Optional[str] = Field(
        None,
        description="Parent folder id; the configured root folder is used when omitted.",
    )


class FolderMetadata(CamelModel):
    """A folder as returned after creation."""
    id: str
    name: str
    mime_type: str = FOLDER_MIME_TYPE
    created_time: Optional[str] = None
    modified_time: Optional[str] = None
    is_folder: bool = True


class CreateFolderResponse(BaseModel):
    """Response model for `POST /create-folder`."""
    message: str
    folder: FolderMetadata

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Folder created successfully",
                "folder": {
                    "id": "1AbCdEfGh",
                    "name": "Holiday photos",
                    "mimeType": FOLDER_MIME_TYPE,
                    "createdTime": "2024-01-01T00:00:00.000Z",
                    "modifiedTime": "2024-01-01T00:00:00.000Z",
                    "isFolder": True,
                },
            }
        }
    )


class DeleteFileRequest(CamelModel):
    """Request body for `DELETE /delete`."""
    file_id: Optional[str] = Field(None, description="Drive id of the file or folder.")


class DeleteFileResponse(CamelModel):
    """Response model for `DELETE /delete`."""
    message: str
    file_id: str


class DriveFileEntry(CamelModel):
    """One entry of a folder listing."""
    id: str
    name: str
    mime_type: str
    size: int = Field(0, description="Size in bytes; 0 for folders and native Google docs.")
    created_time: Optional[str] = None
    modified_time: Optional[str] = None
    web_view_link: Optional[str] = None
    is_folder: bool = False


class ListFilesResponse(BaseModel):
    """Response model for `GET /list`."""
    files: List[DriveFileEntry]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "files": [
                    {
                        "id": "1AbCdEfGh",
                        "name": "photo.heic",
                        "mimeType": "image/heic",
                        "size": 2048,
                        "createdTime": "2024-01-01T00:00:00.000Z",
                        "modifiedTime": "2024-01-01T00:00:00.000Z",
                        "webViewLink": "https://drive.google.com/file/d/1AbCdEfGh/view",
                        "isFolder": False,
                    }
                ]
            }
        }
    )


class UploadedFile(CamelModel):
    """Metadata of a freshly uploaded file."""
    id: str
    name: str
    size: int = 0
    mime_type: Optional[str] = None
    created_time: Optional[str] = None
    modified_time: Optional[str] = None
    web_view_link: Optional[str] = None


class UploadFileResponse(BaseModel):
    """Response model for `POST /upload`."""
    message: str
    file: UploadedFile


class DownloadRequest(CamelModel):
    """Request body for `POST /download`."""
    file_names: Optional[List[str]] = Field(None, description="Blob names to fetch.")
    folder_name: Optional[str] = Field(
        None,
        description=f"Archive name without extension; defaults to '{DEFAULT_ARCHIVE_NAME}'.",
    )
    single_file: bool = Field(False, description="Return the only named blob unzipped.")


class HealthResponse(BaseModel):
    """Response model for `GET /health`."""
    status: str
    components: dict
    ready: bool
