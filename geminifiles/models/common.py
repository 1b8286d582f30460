from pydantic import BaseModel


class StatusResponse(BaseModel):
    integration: str
    configured: bool
    base_url: str
    api_version: str
    message: str
