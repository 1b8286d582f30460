"""URL building, headers and dispatch for the Files REST API."""

import logging
from enum import Enum
from urllib.parse import urlencode

import requests
from pydantic import BaseModel

from geminifiles.exceptions import (
    AuthenticationError,
    FetchError,
    IntegrationError,
    RateLimitError,
    RequestInputError,
)
from geminifiles.http_client import get_session

logger = logging.getLogger(__name__)

PACKAGE_VERSION = "0.1.0"
PACKAGE_LOG_HEADER = "genai-py"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_API_VERSION = "v1beta"

API_CLIENT_HEADER = "x-goog-api-client"
API_KEY_HEADER = "x-goog-api-key"


class FilesTask(str, Enum):
    UPLOAD = "upload"
    LIST = "list"
    GET = "get"
    DELETE = "delete"


TASK_METHODS = {
    FilesTask.UPLOAD: "POST",
    FilesTask.LIST: "GET",
    FilesTask.GET: "GET",
    FilesTask.DELETE: "DELETE",
}


class RequestOptions(BaseModel):
    timeout: float | None = None
    api_version: str | None = None
    base_url: str | None = None
    api_client: str | None = None
    custom_headers: dict[str, str] | None = None


class FilesRequestUrl:
    """Files endpoint URL for one task, with optional path segments and query params."""

    def __init__(self, task: FilesTask, api_key: str, request_options: RequestOptions | None = None):
        self.task = task
        self.api_key = api_key
        self.request_options = request_options or RequestOptions()
        api_version = self.request_options.api_version or DEFAULT_API_VERSION
        base_url = (self.request_options.base_url or DEFAULT_BASE_URL).rstrip("/")
        if task == FilesTask.UPLOAD:
            base_url += "/upload"
        self._path = f"{base_url}/{api_version}/files"
        self._params: list[tuple[str, str]] = []

    @property
    def method(self) -> str:
        return TASK_METHODS[self.task]

    def append_path(self, path: str) -> None:
        self._path += f"/{path}"

    def append_param(self, key: str, value: str) -> None:
        self._params.append((key, value))

    @property
    def params(self) -> list[tuple[str, str]]:
        return list(self._params)

    def __str__(self) -> str:
        if not self._params:
            return self._path
        return f"{self._path}?{urlencode(self._params)}"


def _client_header(request_options: RequestOptions) -> str:
    header = f"{PACKAGE_LOG_HEADER}/{PACKAGE_VERSION}"
    if request_options.api_client:
        header += f" {request_options.api_client}"
    return header


def get_headers(url: FilesRequestUrl) -> dict[str, str]:
    """Build auth and client headers, then merge any custom headers from the request options."""
    headers = {
        API_CLIENT_HEADER: _client_header(url.request_options),
        API_KEY_HEADER: url.api_key,
    }
    reserved = {API_CLIENT_HEADER, API_KEY_HEADER}
    for name, value in (url.request_options.custom_headers or {}).items():
        if name.lower() in reserved:
            raise RequestInputError(f"Cannot set reserved header name {name}")
        headers[name] = value
    return headers


def _error_message(resp: requests.Response) -> tuple[str, list | None]:
    try:
        error = resp.json()["error"]
    except (ValueError, KeyError, TypeError):
        return "", None
    message = error.get("message", "")
    details = error.get("details")
    if details:
        message += f" {details}"
    return message, details


def _handle_response(url: FilesRequestUrl, resp: requests.Response) -> None:
    if resp.ok:
        return
    message, details = _error_message(resp)
    text = f"Error fetching from {url}: [{resp.status_code} {resp.reason}] {message}".rstrip()
    logger.warning("Files API %s %s failed with HTTP %s", url.method, url, resp.status_code)
    if resp.status_code in (401, 403):
        raise AuthenticationError(text, resp.status_code, resp.reason, details)
    if resp.status_code == 429:
        raise RateLimitError(text, resp.status_code, resp.reason, details)
    raise FetchError(text, resp.status_code, resp.reason, details)


def make_files_request(
    url: FilesRequestUrl,
    headers: dict[str, str],
    body: bytes | None = None,
) -> requests.Response:
    """Send one request to the Files API and return the successful response.

    Raises FetchError (or a subclass) on a non-2xx status and IntegrationError
    on transport failure. Nothing is retried.
    """
    logger.debug("Files API %s %s", url.method, url)
    try:
        resp = get_session().request(
            url.method,
            str(url),
            headers=headers,
            data=body,
            timeout=url.request_options.timeout,
        )
    except requests.RequestException as e:
        logger.warning("Files API %s %s transport failure: %s", url.method, url, e)
        raise IntegrationError(f"Error fetching from {url}: {e}") from e
    _handle_response(url, resp)
    return resp
