from fastmcp import FastMCP

from geminifiles.config import get_settings
from geminifiles.exceptions import (
    AuthenticationError,
    FilesError,
    IntegrationError,
    RateLimitError,
)
from geminifiles.services import files as files_service

mcp = FastMCP("Gemini Files")


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, AuthenticationError):
        return {"error": "auth_error", "message": str(e), "action": "Ask user to set GEMINI_API_KEY in .env"}
    if isinstance(e, RateLimitError):
        return {"error": "rate_limit", "message": str(e), "action": "Wait a moment and retry"}
    if isinstance(e, IntegrationError):
        return {"error": "integration_error", "message": str(e)}
    if isinstance(e, FilesError):
        return {"error": "invalid_request", "message": str(e)}
    return {"error": "unknown_error", "message": str(e)}


# --- Files tools ---

@mcp.tool
def files_upload(path: str, mime_type: str, display_name: str | None = None, name: str | None = None) -> dict:
    """Upload a local file so it can be referenced in Gemini prompts.
    Provide the absolute path and its MIME type (e.g. 'video/mp4', 'application/pdf').
    Returns the file resource; use its name with files_wait_active before prompting with videos."""
    try:
        return files_service.upload_file(path, mime_type, display_name, name).model_dump(mode="json", exclude_none=True)
    except FilesError as e:
        return _handle_mcp_error(e)


@mcp.tool
def files_list(page_size: int | None = None, page_token: str | None = None) -> dict:
    """List files uploaded with the configured API key.
    If next_page_token is returned, pass it as page_token to get the next page."""
    try:
        result = files_service.list_files(page_size, page_token)
        data = result.model_dump(mode="json", exclude_none=True)
        data["count"] = len(result.files)
        return data
    except FilesError as e:
        return _handle_mcp_error(e)


@mcp.tool
def files_get(file_id: str) -> dict:
    """Get metadata (state, size, uri, expiration) for an uploaded file.
    Accepts either 'files/abc123' or 'abc123'."""
    try:
        return files_service.get_file(file_id).model_dump(mode="json", exclude_none=True)
    except FilesError as e:
        return _handle_mcp_error(e)


@mcp.tool
def files_delete(file_id: str) -> dict:
    """Delete an uploaded file. Accepts either 'files/abc123' or 'abc123'."""
    try:
        files_service.delete_file(file_id)
        return {"deleted": file_id}
    except FilesError as e:
        return _handle_mcp_error(e)


@mcp.tool
def files_wait_active(file_id: str, timeout: float = 120) -> dict:
    """Wait until an uploaded file has finished processing and is ACTIVE.
    Videos must be ACTIVE before they can be used in a prompt."""
    try:
        return files_service.wait_for_active(file_id, timeout=timeout).model_dump(mode="json", exclude_none=True)
    except FilesError as e:
        return _handle_mcp_error(e)


# --- Status tool ---

@mcp.tool
def geminifiles_status() -> dict:
    """Check whether a Gemini API key is configured and which endpoint is used."""
    settings = get_settings()
    configured = bool(settings.gemini_api_key)
    return {
        "configured": configured,
        "base_url": settings.files_base_url,
        "api_version": settings.files_api_version,
        "message": (
            "API key configured"
            if configured
            else "No API key; user should set GEMINI_API_KEY in .env"
        ),
    }
