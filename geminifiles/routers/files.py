from fastapi import APIRouter

from geminifiles.models.files import (
    DeleteFileResponse,
    FileMetadataResponse,
    ListFilesResponse,
    UploadFileRequest,
    UploadFileResponse,
)
from geminifiles.services import files as files_service

router = APIRouter(prefix="/api/files", tags=["files"])


@router.post("/upload")
def upload_file(request: UploadFileRequest) -> UploadFileResponse:
    return files_service.upload_file(request.path, request.mime_type, request.display_name, request.name)


@router.get("")
def list_files(page_size: int | None = None, page_token: str | None = None) -> ListFilesResponse:
    return files_service.list_files(page_size, page_token)


@router.get("/{file_id:path}")
def get_file(file_id: str) -> FileMetadataResponse:
    return files_service.get_file(file_id)


@router.delete("/{file_id:path}")
def delete_file(file_id: str) -> DeleteFileResponse:
    files_service.delete_file(file_id)
    return DeleteFileResponse(deleted=file_id)
