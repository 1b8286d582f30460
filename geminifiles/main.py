import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from geminifiles.config import get_settings
from geminifiles.exceptions import (
    AuthenticationError,
    FetchError,
    FilesError,
    IntegrationError,
    RateLimitError,
    RequestInputError,
)
from geminifiles.mcp_server import mcp
from geminifiles.models.common import StatusResponse
from geminifiles.routers.files import router as files_router


# --- Localhost-only middleware ---

class LocalhostOnlyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else None
        if client_host not in ("127.0.0.1", "::1", "localhost"):
            return JSONResponse(
                status_code=403,
                content={"error_code": "forbidden", "message": "Localhost access only"},
            )
        return await call_next(request)


# --- FastAPI app ---

api = FastAPI(title="Gemini Files", version="0.1.0")
api.include_router(files_router)


@api.get("/api/status")
def api_status() -> StatusResponse:
    settings = get_settings()
    configured = bool(settings.gemini_api_key)
    return StatusResponse(
        integration="files",
        configured=configured,
        base_url=settings.files_base_url,
        api_version=settings.files_api_version,
        message="API key configured" if configured else "Set GEMINI_API_KEY in .env",
    )


# --- Exception handlers ---

def _error(status_code: int, error_code: str, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error_code": error_code, "message": str(exc)})


@api.exception_handler(RequestInputError)
async def input_error_handler(request: Request, exc: RequestInputError):
    return _error(400, "invalid_request", exc)


@api.exception_handler(AuthenticationError)
async def auth_error_handler(request: Request, exc: AuthenticationError):
    return _error(401, "auth_error", exc)


@api.exception_handler(RateLimitError)
async def rate_limit_error_handler(request: Request, exc: RateLimitError):
    return _error(429, "rate_limit", exc)


@api.exception_handler(FetchError)
async def fetch_error_handler(request: Request, exc: FetchError):
    if exc.status_code == 404:
        return _error(404, "not_found", exc)
    return _error(502, "integration_error", exc)


@api.exception_handler(IntegrationError)
async def integration_error_handler(request: Request, exc: IntegrationError):
    return _error(502, "integration_error", exc)


@api.exception_handler(FilesError)
async def files_error_handler(request: Request, exc: FilesError):
    return _error(400, "invalid_request", exc)


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    middleware=[Middleware(LocalhostOnlyMiddleware)],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
)


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "geminifiles.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
