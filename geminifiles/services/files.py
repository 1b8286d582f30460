from geminifiles.config import get_settings
from geminifiles.exceptions import AuthenticationError
from geminifiles.file_manager import FileManager
from geminifiles.models.files import (
    FileMetadata,
    FileMetadataResponse,
    ListFilesResponse,
    ListParams,
    UploadFileResponse,
)
from geminifiles.request import RequestOptions


def _get_manager() -> FileManager:
    settings = get_settings()
    if not settings.gemini_api_key:
        raise AuthenticationError(
            "Gemini API key not configured. Get one at "
            "https://aistudio.google.com/apikey and set GEMINI_API_KEY in .env"
        )
    return FileManager(
        settings.gemini_api_key,
        RequestOptions(
            base_url=settings.files_base_url,
            api_version=settings.files_api_version,
            timeout=settings.request_timeout,
        ),
    )


def upload_file(
    path: str,
    mime_type: str,
    display_name: str | None = None,
    name: str | None = None,
) -> UploadFileResponse:
    """Upload a local file to the Files API."""
    metadata = FileMetadata(mime_type=mime_type, display_name=display_name, name=name)
    return _get_manager().upload_file(path, metadata)


def list_files(page_size: int | None = None, page_token: str | None = None) -> ListFilesResponse:
    """List uploaded files. Pass next_page_token from a previous page as page_token."""
    return _get_manager().list_files(ListParams(page_size=page_size, page_token=page_token))


def get_file(file_id: str) -> FileMetadataResponse:
    return _get_manager().get_file(file_id)


def delete_file(file_id: str) -> None:
    _get_manager().delete_file(file_id)


def wait_for_active(file_id: str, timeout: float = 120) -> FileMetadataResponse:
    """Block until an uploaded file finishes processing."""
    return _get_manager().wait_for_active(file_id, timeout=timeout)
