"""Define fastAPI endpoints."""

import logging.config
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pydantic
from fastapi import APIRouter, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from .config import Settings, configure_logging, get_settings
from .exceptions import HistoryError, history_exception_handler
from .history import HistoryClient
from .models import JellyfinStop, JellyfinWebhookPayload, PlexStop, PlexWebhookPayload, StopEvent
from .relay import WatchRelay
from .writer import DescriptorWriter

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

router = APIRouter()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown logic."""
    settings: Settings = app.state.settings
    logger.info("Server running on port %d, writing to %s", settings.PORT, settings.OUTPUT_DIR)
    if settings.history_configured:
        logger.info("Plex webhook support is enabled")
    else:
        logger.warning("API_HOST or API_KEY not set; Plex stop events will fail")
    logger.info("Jellyfin webhook support is enabled")
    yield
    logger.info("Application shutdown")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:  # noqa: ARG001
    """Answer routing and input errors with a short text body."""
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:  # noqa: ARG001
    """Treat request validation failures as bad input."""
    return PlainTextResponse("Invalid request", status_code=status.HTTP_400_BAD_REQUEST)


async def _read_plex_event(request: Request) -> PlexStop:
    """Pull the JSON payload field out of Plex's multipart form."""
    try:
        form = await request.form()
    except MultiPartException as e:
        logger.warning("Error parsing multipart form: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Error parsing form") from e

    payload = form.get("payload")
    if not isinstance(payload, str) or not payload:
        logger.warning("No payload found in request")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No payload found")

    try:
        parsed = PlexWebhookPayload.model_validate_json(payload)
    except pydantic.ValidationError as e:
        logger.warning("Error parsing Plex payload: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Error parsing payload") from e
    return parsed.to_stop_event()


async def _read_jellyfin_event(request: Request) -> JellyfinStop:
    """Decode the JSON body posted by the Jellyfin webhook plugin."""
    body = await request.body()
    try:
        parsed = JellyfinWebhookPayload.model_validate_json(body)
    except pydantic.ValidationError as e:
        logger.warning("Error parsing Jellyfin payload: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Error parsing payload") from e
    return parsed.to_stop_event()


async def _relay(request: Request, event: StopEvent) -> PlainTextResponse:
    relay: WatchRelay = request.app.state.relay
    try:
        await relay.process_event(event)
    except HistoryError as e:
        logger.error("Error fetching metadata from history API: %s", e)
        raise
    return PlainTextResponse("OK")


@router.post("/plex")
async def plex_webhook_endpoint(request: Request) -> PlainTextResponse:
    """Receives webhooks from Plex Media Server."""
    return await _relay(request, await _read_plex_event(request))


@router.post("/jellyfin")
async def jellyfin_webhook_endpoint(request: Request) -> PlainTextResponse:
    """Receives webhooks from the Jellyfin webhook plugin."""
    return await _relay(request, await _read_jellyfin_event(request))


@router.post("/")
async def detect_webhook_endpoint(request: Request) -> PlainTextResponse:
    """Route by content type: Plex posts multipart forms, Jellyfin posts JSON."""
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" in content_type:
        logger.debug("Detected Plex webhook based on Content-Type")
        return await _relay(request, await _read_plex_event(request))
    if "application/json" in content_type:
        logger.debug("Detected Jellyfin webhook based on Content-Type")
        return await _relay(request, await _read_jellyfin_event(request))

    logger.warning("Unable to determine webhook type from request")
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unable to determine webhook type")


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Check health."""
    return {"status": "ok"}


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around a single settings instance."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(lifespan=lifespan, title="Watched Relay")
    app.state.settings = settings
    app.state.relay = WatchRelay(HistoryClient(settings), DescriptorWriter(settings.OUTPUT_DIR))

    app.add_exception_handler(HistoryError, history_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Uvicorn server...")
    uvicorn.run(app, host="0.0.0.0", port=get_settings().PORT)  # noqa: S104
