from fastapi import Request

from services.geocoding_service import GoogleGeocodingClient
from services.notification_service import NotificationDispatcher
from services.video_storage import VideoStorage
from services.video_token_service import VideoTokenService


# Collaborators are built once in main's startup hook and live on app.state;
# tests replace them through app.dependency_overrides.
def get_geocoder(request: Request) -> GoogleGeocodingClient:
    return request.app.state.geocoder


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_token_service(request: Request) -> VideoTokenService:
    return request.app.state.token_service


def get_video_storage(request: Request) -> VideoStorage:
    return request.app.state.video_storage
