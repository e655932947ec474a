from textwrap import dedent
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware

from drive_files_api.config.settings import Settings
from drive_files_api.errors import (
    FilesApiError,
    handle_broad_exceptions,
    handle_files_api_errors,
    handle_request_validation_errors,
)
from drive_files_api.routers.files import router as files_router
from drive_files_api.routers.health import router as health_router
from drive_files_api.utils.decorators import configure_logging

# Set up logging
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Drive Files API",
        summary="Browse, upload and download files kept in Google Drive and Azure Blob Storage",
        version="v1",
        description=dedent(
            """\
        | Endpoint | Provider |
        | --- | --- |
        | `POST /create-folder`, `DELETE /delete`, `GET /list`, `POST /upload` | Google Drive |
        | `POST /download` | Azure Blob Storage |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    # Add CORS middleware so the browser front end can call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    app.state.settings = settings

    app.include_router(files_router, tags=["files"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=FilesApiError,
        handler=handle_files_api_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    logger.info(f"{settings.app_name} created (root folder: {settings.google_drive_folder_id or 'drive root'})")
    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
