"""Client for the Files API: upload, list, get and delete files owned by an API key."""

import json
import logging
import random
import time
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel

from geminifiles.exceptions import FilesError, IntegrationError, RequestInputError
from geminifiles.models.files import (
    FileMetadata,
    FileMetadataResponse,
    FileState,
    ListFilesResponse,
    ListParams,
    UploadFileResponse,
)
from geminifiles.request import (
    FilesRequestUrl,
    FilesTask,
    RequestOptions,
    get_headers,
    make_files_request,
)

logger = logging.getLogger(__name__)

FILES_PREFIX = "files/"

ModelT = TypeVar("ModelT", bound=BaseModel)


class FileManager:
    """Manage file uploads for one API key.

    The request options are forwarded unchanged to every call.
    """

    def __init__(self, api_key: str, request_options: RequestOptions | None = None):
        if not api_key:
            raise RequestInputError("An API key is required to manage files.")
        self.api_key = api_key
        self._request_options = request_options

    def _url(self, task: FilesTask) -> FilesRequestUrl:
        return FilesRequestUrl(task, self.api_key, self._request_options)

    def upload_file(self, file_path: str | Path, file_metadata: FileMetadata) -> UploadFileResponse:
        """Upload a local file. The metadata must carry a MIME type."""
        upload_metadata = get_upload_metadata(file_metadata)
        path = Path(file_path)
        if not path.is_file():
            raise RequestInputError(f"File not found: {path}")
        return self._upload(path.read_bytes(), upload_metadata)

    def upload_bytes(self, data: bytes, file_metadata: FileMetadata) -> UploadFileResponse:
        """Upload in-memory bytes. The metadata must carry a MIME type."""
        return self._upload(data, get_upload_metadata(file_metadata))

    def _upload(self, data: bytes, upload_metadata: FileMetadata) -> UploadFileResponse:
        url = self._url(FilesTask.UPLOAD)
        headers = get_headers(url)
        boundary = generate_boundary()
        headers["X-Goog-Upload-Protocol"] = "multipart"
        headers["Content-Type"] = f"multipart/related; boundary={boundary}"

        metadata_json = json.dumps(
            {"file": upload_metadata.model_dump(by_alias=True, exclude_none=True)}
        )
        body = build_multipart_body(boundary, metadata_json, upload_metadata.mime_type, data)
        logger.info("Uploading %d bytes as %s", len(data), upload_metadata.mime_type)
        resp = make_files_request(url, headers, body)
        return _parse_response(resp, UploadFileResponse)

    def list_files(self, list_params: ListParams | None = None) -> ListFilesResponse:
        """List uploaded files, one page at a time."""
        url = self._url(FilesTask.LIST)
        if list_params and list_params.page_size:
            url.append_param("pageSize", str(list_params.page_size))
        if list_params and list_params.page_token:
            url.append_param("pageToken", list_params.page_token)
        resp = make_files_request(url, get_headers(url))
        return _parse_response(resp, ListFilesResponse)

    def get_file(self, file_id: str) -> FileMetadataResponse:
        """Get metadata for the file with the given ID."""
        url = self._url(FilesTask.GET)
        url.append_path(parse_file_id(file_id))
        resp = make_files_request(url, get_headers(url))
        return _parse_response(resp, FileMetadataResponse)

    def delete_file(self, file_id: str) -> None:
        """Delete the file with the given ID."""
        url = self._url(FilesTask.DELETE)
        url.append_path(parse_file_id(file_id))
        make_files_request(url, get_headers(url))

    def wait_for_active(
        self,
        file_id: str,
        timeout: float = 120,
        poll_interval: float = 2,
    ) -> FileMetadataResponse:
        """Poll a freshly uploaded file until the server marks it ACTIVE."""
        deadline = time.monotonic() + timeout
        while True:
            f = self.get_file(file_id)
            if f.state == FileState.ACTIVE:
                return f
            if f.state == FileState.FAILED:
                reason = f.error.message if f.error and f.error.message else "unknown reason"
                raise IntegrationError(f"File {f.name} failed processing: {reason}")
            if time.monotonic() >= deadline:
                raise IntegrationError(
                    f"Timed out after {timeout}s waiting for {f.name} to become ACTIVE"
                )
            time.sleep(poll_interval)


def _parse_response(resp, model: type[ModelT]) -> ModelT:
    """Decode a successful reply into model; a body that is not the expected JSON is an IntegrationError."""
    try:
        return model.model_validate(resp.json())
    except ValueError as e:
        raise IntegrationError(f"Unexpected Files API response from {resp.url}: {e}") from e


def parse_file_id(file_id: str) -> str:
    """If file_id is prefixed with "files/", remove the prefix."""
    if file_id.startswith(FILES_PREFIX):
        file_id = file_id[len(FILES_PREFIX):]
    if not file_id:
        raise FilesError(
            f'Invalid fileId {file_id!r}. Must be in the format "files/filename" or "filename"'
        )
    return file_id


def generate_boundary() -> str:
    return "".join(f"{random.random():.16f}"[2:] for _ in range(2))


def get_upload_metadata(input_metadata: FileMetadata) -> FileMetadata:
    if not input_metadata.mime_type:
        raise RequestInputError("Must provide a mimeType.")
    upload_metadata = FileMetadata(
        mime_type=input_metadata.mime_type,
        display_name=input_metadata.display_name,
    )
    if input_metadata.name:
        upload_metadata.name = (
            input_metadata.name
            if "/" in input_metadata.name
            else f"{FILES_PREFIX}{input_metadata.name}"
        )
    return upload_metadata


def build_multipart_body(boundary: str, metadata_json: str, mime_type: str, file_bytes: bytes) -> bytes:
    """Assemble a two-part multipart/related body: JSON metadata, then the raw file."""
    pre = (
        f"--{boundary}\r\n"
        "Content-Type: application/json; charset=utf-8\r\n\r\n"
        f"{metadata_json}\r\n"
        f"--{boundary}\r\n"
        f"Content-Type: {mime_type}\r\n\r\n"
    )
    post = f"\r\n--{boundary}--"
    return pre.encode("utf-8") + file_bytes + post.encode("utf-8")
