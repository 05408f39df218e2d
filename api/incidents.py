import mimetypes
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from api.dependencies import get_dispatcher, get_geocoder, get_token_service, get_video_storage
from core.database import get_db
from core.exceptions import Unauthorized
from core.responses import create_response
from core.security import get_current_user_id
from schemas.incident import IncidentCreate, VideoShareCreate
from services.geocoding_service import GoogleGeocodingClient
from services.incident_service import (
    NOT_APP_USER_MESSAGE,
    CreationStatus,
    IncidentService,
    serialize_incident,
    serialize_share,
)
from services.notification_service import NotificationDispatcher
from services.video_storage import VideoStorage
from services.video_token_service import VideoTokenService

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.get("/video/token")
def issue_video_token(
    caller_id: UUID = Depends(get_current_user_id),
    token_service: VideoTokenService = Depends(get_token_service),
):
    """Short-lived token for fetching videos without a session."""
    return create_response(data={
        "token": token_service.issue(caller_id),
        "expiresIn": token_service.ttl_seconds,
    })


@router.get("/video/shares/{user_id}")
def list_video_shares(
    user_id: UUID,
    db: Session = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    shares = IncidentService.list_shares(caller_id, user_id, db)
    return create_response(data=[serialize_share(share) for share in shares])


@router.post("/video/shares/{incident_id}")
def create_video_share(
    incident_id: UUID,
    payload: Optional[VideoShareCreate] = None,
    db: Session = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    share_to = payload.share_to if payload else None
    share = IncidentService.create_share(caller_id, incident_id, share_to, db)
    return create_response(data=serialize_share(share), status_code=status.HTTP_201_CREATED)


@router.get("/video/{filename}")
def stream_video(
    filename: str,
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    token_service: VideoTokenService = Depends(get_token_service),
    storage: VideoStorage = Depends(get_video_storage),
):
    """Serve a recording to the bearer of a valid video token. No session required."""
    user_id = token_service.verify(token)
    if not IncidentService.can_view_video(user_id, filename, db):
        raise Unauthorized(detail="Forbidden", status_code=status.HTTP_403_FORBIDDEN)

    file_path = storage.path_for(filename)
    media_type = mimetypes.guess_type(file_path.name)[0] or "video/mp4"
    return FileResponse(
        file_path,
        media_type=media_type,
        headers={
            "Accept-Ranges": "bytes",
            "Content-Disposition": "inline",
        },
    )


@router.delete("/video/{incident_id}")
def delete_incident_video(
    incident_id: UUID,
    db: Session = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
    storage: VideoStorage = Depends(get_video_storage),
):
    incident = IncidentService.delete_video(caller_id, incident_id, db, storage)
    return create_response(data=serialize_incident(incident))


@router.get("/detail/{incident_id}")
def get_incident(
    incident_id: UUID,
    db: Session = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    incident = IncidentService.get_incident(caller_id, incident_id, db)
    return create_response(data=serialize_incident(incident))


@router.get("/{user_id}")
def list_user_incidents(
    user_id: UUID,
    db: Session = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    incidents = IncidentService.list_user_incidents(caller_id, user_id, db)
    return create_response(data=[serialize_incident(incident) for incident in incidents])


@router.post("")
def create_incident(
    payload: IncidentCreate,
    db: Session = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
    geocoder: GoogleGeocodingClient = Depends(get_geocoder),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Report an incident and alert the trusted contact by SMS.

    201 with the provider response merged into the incident when the SMS went
    out, 200 with the incident alone when it did not, and 200 with an error
    message when the reporter is not a registered app user.
    """
    result = IncidentService.create_incident(payload, caller_id, db, geocoder, dispatcher)

    if result.status is CreationStatus.NOT_APP_USER:
        return create_response(error=NOT_APP_USER_MESSAGE)

    incident = serialize_incident(result.incident)
    if result.status is CreationStatus.CREATED and result.delivery is not None:
        return create_response(
            data={**result.delivery.provider_response, **incident},
            status_code=status.HTTP_201_CREATED,
        )
    return create_response(data=incident)
