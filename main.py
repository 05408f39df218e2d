# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.database import init_db
from core.responses import create_response
from services import config_service
from services.geocoding_service import GoogleGeocodingClient
from services.notification_service import NotificationDispatcher, TwilioSmsTransport
from services.video_storage import VideoStorage
from services.video_token_service import VideoTokenService

from api import incidents

log = logging.getLogger(__name__)

app = FastAPI(
    title="SafeWalk Incident API",
    description="Personal-safety incident reporting with SMS alerts and tokenized video access",
    version="1.0.0"
)

app.include_router(incidents.router, prefix="/api")


def build_collaborators(target: FastAPI) -> None:
    """Composition root: one instance of each external collaborator per process."""
    twilio = config_service.get_twilio_settings()
    target.state.geocoder = GoogleGeocodingClient(
        api_key=config_service.get_google_maps_api_key(),
        timeout=config_service.get_geocoding_timeout_seconds(),
    )
    target.state.dispatcher = NotificationDispatcher(
        transport=TwilioSmsTransport(
            account_sid=twilio["account_sid"],
            auth_token=twilio["auth_token"],
            timeout=twilio["timeout"],
        ),
        from_number=twilio["from_number"],
    )
    target.state.token_service = VideoTokenService(
        secret_key=config_service.get_video_token_secret(),
        ttl_seconds=config_service.get_video_token_ttl_seconds(),
    )

    video_dir = Path(config_service.get_video_dir())
    video_dir.mkdir(parents=True, exist_ok=True)
    target.state.video_storage = VideoStorage(video_dir)


@app.on_event("startup")
def startup() -> None:
    init_db()
    build_collaborators(app)
    log.info("Video tokens expire after %s seconds", app.state.token_service.ttl_seconds)


# ==================== ERROR ENVELOPE ====================
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return create_response(
        error=str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return create_response(error="Invalid request.", status_code=400)

    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
    message = first.get("msg", "Invalid value")
    return create_response(error=f"'{field}': {message}" if field else message, status_code=400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return create_response(error="Internal server error", status_code=500)


# ==================== HEALTH CHECK ====================
@app.get("/health")
def health_check():
    """Health check endpoint for Docker and Kubernetes."""
    return {
        "status": "healthy",
        "service": "SafeWalk Incident API",
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
