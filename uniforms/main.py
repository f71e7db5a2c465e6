import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from uniforms.auth import router as auth_router
from uniforms.backend import BackendClient, build_backend
from uniforms.config import get_settings
from uniforms.exceptions import (
    AuthenticationError,
    FormValidationError,
    IntegrationError,
    NotFoundError,
    RateLimitError,
)
from uniforms.mcp_server import build_mcp
from uniforms.models.common import StatusResponse
from uniforms.routers.fill import router as fill_router
from uniforms.routers.forms import router as forms_router
from uniforms.routers.responses import router as responses_router

logger = logging.getLogger(__name__)


# --- Localhost-only middleware (agent tools) ---

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

def create_api(backend: BackendClient | None = None) -> FastAPI:
    api = FastAPI(title="UniForms", version="0.1.0")
    api.state.backend = backend or build_backend(get_settings())
    api.include_router(auth_router)
    api.include_router(forms_router)
    api.include_router(fill_router)
    api.include_router(responses_router)

    @api.get("/api/status")
    def api_status() -> StatusResponse:
        current = api.state.backend
        settings = current.settings
        ready = current.kind == "memory" or (
            bool(settings.firebase_api_key) and settings.service_account_file.exists()
        )
        return StatusResponse(
            backend=current.kind,
            project_id=settings.firebase_project_id or None,
            app_id=settings.firebase_app_id or None,
            ready=ready,
        )

    # --- Exception handlers ---

    @api.exception_handler(FormValidationError)
    async def validation_error_handler(request: Request, exc: FormValidationError):
        return JSONResponse(status_code=400, content={"error_code": "validation_error", "message": str(exc)})

    @api.exception_handler(AuthenticationError)
    async def auth_error_handler(request: Request, exc: AuthenticationError):
        return JSONResponse(status_code=401, content={"error_code": "auth_error", "message": str(exc)})

    @api.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error_code": "not_found", "message": str(exc)})

    @api.exception_handler(RateLimitError)
    async def rate_limit_error_handler(request: Request, exc: RateLimitError):
        return JSONResponse(status_code=429, content={"error_code": "rate_limit", "message": str(exc)})

    @api.exception_handler(IntegrationError)
    async def integration_error_handler(request: Request, exc: IntegrationError):
        logger.error("Backend request failed on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error_code": "integration_error", "message": str(exc)})

    return api


# --- Starlette root app ---

def create_app(backend: BackendClient | None = None) -> Starlette:
    api = create_api(backend)
    mcp_app = build_mcp(api.state.backend).http_app(path="/", stateless_http=True)
    return Starlette(
        routes=[
            Mount("/mcp", app=LocalhostOnlyMiddleware(mcp_app)),
            Mount("/", app=api),
        ],
        lifespan=mcp_app.lifespan,
    )


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "uniforms.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
