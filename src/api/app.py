from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from src.app.services.auth_settings import AuthSettings
from src.app.services.token_service import TokenService
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {
        "code": exc.base_error.code,
        "message": exc.base_error.message,
        **exc.base_error.details,
    }
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def create_app(ApplicationConfig) -> FastAPI:
    # Refuses to build a production app on development secrets
    auth_settings = AuthSettings.from_config(ApplicationConfig)
    auth_settings.ensure_production_safe()

    app = FastAPI(title="LegalSaaS Auth API", version="0.1.0")
    app.state.auth_settings = auth_settings
    app.state.token_service = TokenService(auth_settings)
    app.state.storage_timeout = float(ApplicationConfig.STORAGE_TIMEOUT_SECONDS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import auth, health_check, permissions, registration_keys

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(registration_keys.router, tags=["Registration Keys"])
    app.include_router(permissions.router, tags=["Permissions"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
