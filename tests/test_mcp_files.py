import pytest

from geminifiles.exceptions import AuthenticationError, FetchError, IntegrationError, RateLimitError
from geminifiles.models.files import FileMetadataResponse, ListFilesResponse, UploadFileResponse
from conftest import FILE_RESOURCE, LIST_RESPONSE, make_response

SAMPLE_FILE = FileMetadataResponse.model_validate(FILE_RESOURCE)


@pytest.fixture(autouse=True)
def mock_svc(mocker):
    return mocker.patch("geminifiles.mcp_server.files_service")


class TestFilesUpload:
    def test_returns_dict(self, mock_svc):
        mock_svc.upload_file.return_value = UploadFileResponse(file=SAMPLE_FILE)
        from geminifiles.mcp_server import files_upload
        result = files_upload.fn(path="/tmp/clip.mp4", mime_type="video/mp4")
        assert isinstance(result, dict)
        assert result["file"]["name"] == "files/abc123"
        assert result["file"]["state"] == "ACTIVE"

    def test_error_returns_dict_not_raises(self, mock_svc):
        mock_svc.upload_file.side_effect = AuthenticationError("No key")
        from geminifiles.mcp_server import files_upload
        result = files_upload.fn(path="/tmp/a", mime_type="text/plain")
        assert result["error"] == "auth_error"


class TestFilesList:
    def test_returns_dict_with_count(self, mock_svc):
        mock_svc.list_files.return_value = ListFilesResponse.model_validate(LIST_RESPONSE)
        from geminifiles.mcp_server import files_list
        result = files_list.fn()
        assert result["count"] == 1
        assert result["next_page_token"] == "page2"

    def test_forwards_paging(self, mock_svc):
        mock_svc.list_files.return_value = ListFilesResponse()
        from geminifiles.mcp_server import files_list
        files_list.fn(page_size=3, page_token="t")
        mock_svc.list_files.assert_called_once_with(3, "t")

    def test_rate_limit_returns_dict(self, mock_svc):
        mock_svc.list_files.side_effect = RateLimitError("Slow down", 429)
        from geminifiles.mcp_server import files_list
        assert files_list.fn()["error"] == "rate_limit"


class TestFilesGet:
    def test_returns_dict(self, mock_svc):
        mock_svc.get_file.return_value = SAMPLE_FILE
        from geminifiles.mcp_server import files_get
        result = files_get.fn(file_id="files/abc123")
        assert result["mime_type"] == "video/mp4"

    def test_not_found_returns_dict(self, mock_svc):
        mock_svc.get_file.side_effect = FetchError("not found", 404)
        from geminifiles.mcp_server import files_get
        assert files_get.fn(file_id="nope")["error"] == "integration_error"


class TestFilesDelete:
    def test_returns_deleted_id(self, mock_svc):
        from geminifiles.mcp_server import files_delete
        assert files_delete.fn(file_id="abc123") == {"deleted": "abc123"}
        mock_svc.delete_file.assert_called_once_with("abc123")


class TestFilesWaitActive:
    def test_returns_dict(self, mock_svc):
        mock_svc.wait_for_active.return_value = SAMPLE_FILE
        from geminifiles.mcp_server import files_wait_active
        result = files_wait_active.fn(file_id="abc123", timeout=5)
        assert result["state"] == "ACTIVE"
        mock_svc.wait_for_active.assert_called_once_with("abc123", timeout=5)

    def test_timeout_returns_dict(self, mock_svc):
        mock_svc.wait_for_active.side_effect = IntegrationError("Timed out")
        from geminifiles.mcp_server import files_wait_active
        assert files_wait_active.fn(file_id="abc123")["error"] == "integration_error"


class TestStatus:
    def test_reports_configuration(self, mocker):
        from geminifiles.config import Settings
        mocker.patch("geminifiles.mcp_server.get_settings", return_value=Settings(gemini_api_key=""))
        from geminifiles.mcp_server import geminifiles_status
        result = geminifiles_status.fn()
        assert result["configured"] is False
        assert "GEMINI_API_KEY" in result["message"]


class TestErrorDictsFromClient:
    """Drive the tools through the real service so client-side failures are exercised."""

    @pytest.fixture
    def real_svc(self, mocker, mock_session):
        from geminifiles.config import Settings
        from geminifiles.services import files as real_files_service
        mocker.patch("geminifiles.mcp_server.files_service", real_files_service)
        mocker.patch("geminifiles.services.files.get_settings", return_value=Settings(gemini_api_key="k"))
        return mock_session

    def test_non_json_reply_returns_dict(self, real_svc):
        real_svc.request.return_value = make_response(None, 200)
        from geminifiles.mcp_server import files_get
        result = files_get.fn(file_id="abc")
        assert result["error"] == "integration_error"

    def test_unknown_state_passes_through(self, real_svc):
        real_svc.request.return_value = make_response({**FILE_RESOURCE, "state": "DELETING"})
        from geminifiles.mcp_server import files_get
        result = files_get.fn(file_id="abc")
        assert result["state"] == "DELETING"

    def test_empty_id_returns_invalid_request(self, real_svc):
        from geminifiles.mcp_server import files_delete
        result = files_delete.fn(file_id="files/")
        assert result["error"] == "invalid_request"
        real_svc.request.assert_not_called()
