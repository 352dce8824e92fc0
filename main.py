"""Authgate - user authentication and session service."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authgate.config import get_settings
from authgate.errors import AuthError, ErrorKind
from authgate.routers import auth_router

settings = get_settings()

# Logging
logger = logging.getLogger("authgate")
logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

for warning in settings.validate():
    logger.warning("Config: %s", warning)

app = FastAPI(title="Authgate", version="0.1.0")

app.include_router(auth_router)


ERROR_KIND_TO_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: 422,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.EXPIRED_OR_INVALID_TOKEN: 400,
}


# --- Auth error handler ---
@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Translate an auth error kind into its HTTP status."""
    status_code = ERROR_KIND_TO_STATUS[exc.kind]
    logger.warning("%s %s -> %d %s", request.method, request.url.path, status_code, exc.kind.value)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.kind.value},
        headers=headers,
    )


# --- Request shape error handler ---
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies in the same shape as auth errors."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    logger.warning("%s %s -> 422 %s", request.method, request.url.path, ErrorKind.INVALID_INPUT.value)
    return JSONResponse(
        status_code=ERROR_KIND_TO_STATUS[ErrorKind.INVALID_INPUT],
        content={"detail": problems or "Invalid request", "code": ErrorKind.INVALID_INPUT.value},
    )


# --- Health check ---
@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "app": "authgate", "version": "0.1.0"}
