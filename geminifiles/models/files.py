from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    """Files API payloads use camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class FileState(str, Enum):
    STATE_UNSPECIFIED = "STATE_UNSPECIFIED"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"


class FileMetadata(_CamelModel):
    mime_type: str | None = Field(default=None, alias="mimeType")
    display_name: str | None = Field(default=None, alias="displayName")
    name: str | None = None


class ListParams(BaseModel):
    page_size: int | None = None
    page_token: str | None = None


class RpcStatus(_CamelModel):
    code: int | None = None
    message: str | None = None
    details: list | None = None


class VideoMetadata(_CamelModel):
    video_duration: str | None = Field(default=None, alias="videoDuration")


class FileMetadataResponse(_CamelModel):
    name: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    mime_type: str | None = Field(default=None, alias="mimeType")
    size_bytes: str | None = Field(default=None, alias="sizeBytes")
    create_time: str | None = Field(default=None, alias="createTime")
    update_time: str | None = Field(default=None, alias="updateTime")
    expiration_time: str | None = Field(default=None, alias="expirationTime")
    sha256_hash: str | None = Field(default=None, alias="sha256Hash")
    uri: str | None = None
    state: FileState | str | None = Field(default=None, union_mode="left_to_right")
    error: RpcStatus | None = None
    video_metadata: VideoMetadata | None = Field(default=None, alias="videoMetadata")


class ListFilesResponse(_CamelModel):
    files: list[FileMetadataResponse] = []
    next_page_token: str | None = Field(default=None, alias="nextPageToken")


class UploadFileResponse(_CamelModel):
    file: FileMetadataResponse


class UploadFileRequest(BaseModel):
    path: str
    mime_type: str
    display_name: str | None = None
    name: str | None = None


class DeleteFileResponse(BaseModel):
    deleted: str
