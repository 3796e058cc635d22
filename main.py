"""
AI Relay Bridge - FastAPI application relaying chat, text-to-speech and image
generation requests to OpenAI, ElevenLabs and Gemini with server-held keys.
"""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings
from errors import RelayError
from routes import chat, image, tts
from utils.logger import app_logger, configure_logging


def validation_message(error: dict) -> str:
    """Readable message for the first pydantic error of a request body."""
    error_type = error.get('type', '')
    loc = [str(part) for part in error.get('loc', []) if part != 'body']
    field = loc[-1] if loc else 'body'

    if error_type == 'missing':
        return f"No {field} provided in the request body." if loc else "Request body is missing."
    message = error.get('msg', 'Validation error')
    if error_type == 'value_error':
        return message.removeprefix('Value error, ')
    return f"{'.'.join(loc) or field}: {message}"


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup and shutdown events."""
        settings.validate(app_logger)
        app_logger.info(f"{settings.APP_TITLE} ready, providers: {settings.configured_providers()}")
        yield

    app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.CORS_ORIGINS),
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RelayError)
    async def relay_exception_handler(request: Request, exc: RelayError):
        """Render relay errors as {"error", "message"?, "details"?}."""
        log = app_logger.error if exc.status_code >= 500 else app_logger.warning
        log(f"{request.method} {request.url.path} failed with {exc.status_code}: {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors with user-friendly messages"""
        errors = exc.errors()
        app_logger.warning(f"Validation error for {request.url.path}: {errors}")

        message = validation_message(errors[0]) if errors else "Invalid request body."
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.get("/health")
    async def health(current: Settings = Depends(get_settings)):
        """Health check listing which providers have credentials."""
        return {"status": "ok", "providers": current.configured_providers()}

    app.include_router(chat.router, tags=["chat"])
    app.include_router(tts.router, tags=["tts"])
    app.include_router(image.router, tags=["image"])

    static_dir = Path(settings.STATIC_DIR) if settings.STATIC_DIR else None
    if static_dir is not None and static_dir.is_dir():
        index_file = static_dir / settings.INDEX_FILE

        @app.get("/", include_in_schema=False)
        async def index():
            if not index_file.is_file():
                raise StarletteHTTPException(status_code=404, detail="Not Found")
            return FileResponse(index_file)

        app.mount("/", StaticFiles(directory=static_dir), name="static")
    else:
        if static_dir is not None:
            app_logger.warning(f"STATIC_DIR {static_dir} is not a directory, static files disabled")

        @app.get("/")
        async def root():
            """Root endpoint - health check."""
            return {"message": f"{settings.APP_TITLE} is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
