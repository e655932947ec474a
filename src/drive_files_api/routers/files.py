import logging
from typing import Optional
from urllib.parse import quote

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Path,
    Query,
    Response,
    UploadFile,
    status,
)
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from drive_files_api.blob.read_objects import (
    ARCHIVE_CONTENT_TYPE,
    build_zip_archive,
    open_blob_stream,
)
from drive_files_api.config.settings import Settings
from drive_files_api.content_types import resolve_content_type
from drive_files_api.dependencies import (
    ContainerClientFactory,
    DriveServiceFactory,
    get_app_settings,
    get_container_client_factory,
    get_drive_service_factory,
)
from drive_files_api.drive.delete_objects import delete_file
from drive_files_api.drive.folders import create_folder, find_or_create_folder
from drive_files_api.drive.read_objects import download_file, get_file_metadata, list_files
from drive_files_api.drive.write_objects import upload_file
from drive_files_api.errors import FilesApiError, ProviderError, ValidationError
from drive_files_api.schemas import (
    DEFAULT_ARCHIVE_NAME,
    CreateFolderRequest,
    CreateFolderResponse,
    DeleteFileRequest,
    DeleteFileResponse,
    DownloadRequest,
    DriveFileEntry,
    FolderMetadata,
    ListFilesResponse,
    UploadedFile,
    UploadFileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def attachment_header(file_name: str) -> str:
    """
    `Content-Disposition` value for a download.

    Names that are not Latin-1, or that contain a quote or backslash, use the RFC 5987
    `filename*` form so the header stays well formed.
    """
    try:
        file_name.encode("latin-1")
        plain = '"' not in file_name and "\\" not in file_name
    except UnicodeEncodeError:
        plain = False

    if plain:
        return f'attachment; filename="{file_name}"'
    return f"attachment; filename*=UTF-8''{quote(file_name, safe='')}"


def require_folder_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Folder name is required")
    return name


@router.post(
    "/create-folder",
    response_model=CreateFolderResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_folder_route(
    body: CreateFolderRequest,
    drive_factory: DriveServiceFactory = Depends(get_drive_service_factory),
    settings: Settings = Depends(get_app_settings),
) -> CreateFolderResponse:
    """
    Create a folder in Drive.

    The folder is created under `parentId`, or under the configured root folder when
    no parent is given.
    """
    name = require_folder_name(body.name)
    parent_id = body.parent_id or settings.google_drive_folder_id
    logger.info(f"Create folder request: name={name!r} parent={parent_id}")

    try:
        folder = create_folder(drive_factory(), name, parent_id)
    except ValidationError:
        raise
    except Exception as e:
        raise ProviderError.from_exception("Failed to create folder", e) from e

    return CreateFolderResponse(
        message="Folder created successfully",
        folder=FolderMetadata(
            id=folder["id"],
            name=folder.get("name", name),
            created_time=folder.get("createdTime"),
            modified_time=folder.get("modifiedTime"),
        ),
    )


@router.post("/find-or-create-folder", response_model=CreateFolderResponse)
def find_or_create_folder_route(
    body: CreateFolderRequest,
    drive_factory: DriveServiceFactory = Depends(get_drive_service_factory),
    settings: Settings = Depends(get_app_settings),
) -> CreateFolderResponse:
    """Return the folder named `name` under the parent, creating it when absent."""
    name = require_folder_name(body.name)
    parent_id = body.parent_id or settings.google_drive_folder_id

    try:
        folder = find_or_create_folder(drive_factory(), name, parent_id)
    except ValidationError:
        raise
    except Exception as e:
        raise ProviderError.from_exception("Failed to find or create folder", e) from e

    return CreateFolderResponse(
        message="Folder ready",
        folder=FolderMetadata(
            id=folder["id"],
            name=folder.get("name", name),
            created_time=folder.get("createdTime"),
            modified_time=folder.get("modifiedTime"),
        ),
    )


@router.delete("/delete", response_model=DeleteFileResponse)
def delete_file_route(
    body: DeleteFileRequest,
    drive_factory: DriveServiceFactory = Depends(get_drive_service_factory),
) -> DeleteFileResponse:
    """Delete a file or folder from Drive by id."""
    if not body.file_id:
        raise ValidationError("File ID is required")

    try:
        delete_file(drive_factory(), body.file_id)
    except Exception as e:
        raise ProviderError.from_exception("Failed to delete file", e) from e

    return DeleteFileResponse(message="File deleted successfully", file_id=body.file_id)


@router.get("/list", response_model=ListFilesResponse)
def list_files_route(
    folder_id: Optional[str] = Query(None, alias="folderId", description="Folder to list"),
    drive_factory: DriveServiceFactory = Depends(get_drive_service_factory),
    settings: Settings = Depends(get_app_settings),
) -> ListFilesResponse:
    """
    List a folder's contents, folders first and then by name.

    Without `folderId` the configured root folder is listed.
    """
    try:
        entries = list_files(drive_factory(), folder_id or settings.google_drive_folder_id)
    except Exception as e:
        raise ProviderError.from_exception("Failed to list files", e) from e

    return ListFilesResponse(files=[DriveFileEntry(**entry) for entry in entries])


@router.post("/upload", response_model=UploadFileResponse)
async def upload_file_route(
    file: Optional[UploadFile] = File(None, description="The file to upload"),
    parent_id: Optional[str] = Form(None, alias="parentId", description="Destination folder id"),
    drive_factory: DriveServiceFactory = Depends(get_drive_service_factory),
    settings: Settings = Depends(get_app_settings),
) -> UploadFileResponse:
    """
    Upload one file to Drive.

    The stored content type is the client-reported one unless it is missing or generic,
    in which case the file extension decides.
    """
    if file is None or not file.filename:
        raise ValidationError("File is required")

    file_bytes = await file.read()
    content_type = resolve_content_type(file.filename, file.content_type)
    destination = parent_id or settings.google_drive_folder_id

    try:
        uploaded = await run_in_threadpool(
            lambda: upload_file(drive_factory(), file.filename, file_bytes, content_type, destination)
        )
    except Exception as e:
        raise ProviderError.from_exception("Failed to upload file", e) from e

    return UploadFileResponse(
        message="File uploaded successfully",
        file=UploadedFile(
            id=uploaded["id"],
            name=uploaded.get("name", file.filename),
            size=uploaded.get("size", 0),
            mime_type=uploaded.get("mimeType", content_type),
            created_time=uploaded.get("createdTime"),
            modified_time=uploaded.get("modifiedTime"),
            web_view_link=uploaded.get("webViewLink"),
        ),
    )


@router.get("/files/{file_id}/content")
def get_drive_file_content(
    file_id: str = Path(..., description="Drive id of the file to download"),
    drive_factory: DriveServiceFactory = Depends(get_drive_service_factory),
) -> Response:
    """Download a file straight from Drive with its stored MIME type."""
    try:
        drive_service = drive_factory()
        metadata = get_file_metadata(drive_service, file_id)
        content = download_file(drive_service, file_id)
    except Exception as e:
        raise ProviderError.from_exception("Failed to download file", e) from e

    return Response(
        content=content,
        media_type=metadata.get("mimeType") or "application/octet-stream",
        headers={"Content-Disposition": attachment_header(metadata.get("name") or file_id)},
    )


@router.post("/download")
def download_route(
    body: DownloadRequest,
    container_factory: ContainerClientFactory = Depends(get_container_client_factory),
) -> Response:
    """
    Download blobs from the storage container.

    A single blob is streamed back as-is when `singleFile` is set; otherwise every named
    blob is bundled into one zip. Any blob that cannot be fetched fails the whole request.
    """
    container_client = container_factory()

    if not body.file_names:
        raise ValidationError("File names are required")

    if body.single_file and len(body.file_names) == 1:
        try:
            blob_stream = open_blob_stream(container_client, body.file_names[0])
        except Exception as e:
            logger.error(f"Failed to download {body.file_names[0]}: {str(e)}")
            raise ProviderError.from_exception("Failed to download file", e) from e

        return StreamingResponse(
            blob_stream.chunks,
            media_type=blob_stream.content_type,
            headers={"Content-Disposition": attachment_header(blob_stream.file_name)},
        )

    try:
        archive = build_zip_archive(container_client, body.file_names)
    except FilesApiError:
        raise
    except Exception as e:
        raise ProviderError.from_exception("Failed to process download", e) from e

    archive_name = f"{body.folder_name or DEFAULT_ARCHIVE_NAME}.zip"
    return Response(
        content=archive,
        media_type=ARCHIVE_CONTENT_TYPE,
        headers={"Content-Disposition": attachment_header(archive_name)},
    )
