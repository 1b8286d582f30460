import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient


# --- Canned API responses ---

FILE_RESOURCE = {
    "name": "files/abc123",
    "displayName": "clip.mp4",
    "mimeType": "video/mp4",
    "sizeBytes": "2048",
    "createTime": "2025-01-01T00:00:00Z",
    "updateTime": "2025-01-01T00:00:00Z",
    "expirationTime": "2025-01-03T00:00:00Z",
    "sha256Hash": "ZmFrZWhhc2g=",
    "uri": "https://generativelanguage.googleapis.com/v1beta/files/abc123",
    "state": "ACTIVE",
}

PROCESSING_FILE = {**FILE_RESOURCE, "state": "PROCESSING"}

LIST_RESPONSE = {
    "files": [FILE_RESOURCE],
    "nextPageToken": "page2",
}

UPLOAD_RESPONSE = {"file": FILE_RESOURCE}


def make_response(json_data=None, status_code=200, reason="OK"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.reason = reason
    resp.ok = status_code < 400
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON")
    else:
        resp.json.return_value = json_data
    return resp


@pytest.fixture
def mock_session(mocker):
    """Shared requests.Session replaced with a mock; set .request.return_value per test."""
    session = MagicMock()
    session.request.return_value = make_response({})
    mocker.patch("geminifiles.request.get_session", return_value=session)
    return session


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from geminifiles.main import api
    return TestClient(api)
