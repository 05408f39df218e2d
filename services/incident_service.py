import enum
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import ValidationError
from models.incident import Incident, IncidentType, VideoShare
from repository import incident_repository
from schemas.incident import IncidentCreate
from services.audit_service import AuditService
from services.authorization import authorize_loaded, can_access, require_access
from services.geocoding_service import GoogleGeocodingClient
from services.notification_service import DeliveryResult, NotificationDispatcher, SmsNotification
from services.video_storage import VideoStorage

log = logging.getLogger(__name__)

NOT_APP_USER_MESSAGE = "Operation allowed for app users only."
VIDEO_FILE_TAKEN_MESSAGE = "'videoFile' is already attached to another incident."


class CreationStatus(str, enum.Enum):
    CREATED = "CREATED"            # stored and the contact was notified
    RECORDED = "RECORDED"          # stored, but the SMS did not go out
    NOT_APP_USER = "NOT_APP_USER"  # reporter is not a registered user, nothing stored


@dataclass
class IncidentCreationResult:
    status: CreationStatus
    incident: Optional[Incident] = None
    delivery: Optional[DeliveryResult] = None


def serialize_incident(incident: Incident) -> dict:
    incident_type = incident.type.value if hasattr(incident.type, "value") else str(incident.type)
    return {
        "id": incident.id,
        "user": incident.user_id,
        "contact": {
            "displayName": incident.contact_display_name,
            "phone": incident.contact_phone,
        },
        "location": {
            "latitude": incident.latitude,
            "longitude": incident.longitude,
            "name": incident.location_name,
        },
        "type": incident_type,
        "sendSuccess": bool(incident.send_success),
        "videoFile": incident.video_file,
        "createdAt": incident.created_at,
    }


def serialize_share(share: VideoShare) -> dict:
    return {
        "id": share.id,
        "incident": share.incident_id,
        "user": share.user_id,
        "shareTo": share.share_to,
        "createdAt": share.created_at,
    }


class IncidentService:
    @staticmethod
    def create_incident(
        payload: IncidentCreate,
        caller_id: UUID,
        db: Session,
        geocoder: GoogleGeocodingClient,
        dispatcher: NotificationDispatcher,
    ) -> IncidentCreationResult:
        """Authorize, enrich, notify, then persist exactly one incident.

        The steps run in order: the stored record carries the notification
        outcome, so nothing is written before the SMS attempt has resolved.
        """
        require_access(caller_id, payload.user, detail="Unauthorized operation.")

        # A recording belongs to exactly one incident; claiming one already attached is refused
        if payload.video_file and incident_repository.find_incident_by_video_file(db, payload.video_file):
            raise ValidationError(VIDEO_FILE_TAKEN_MESSAGE)

        location_name = geocoder.reverse_geocode(payload.location.latitude, payload.location.longitude)

        reporter = incident_repository.find_user_by_id(db, payload.user)
        if reporter is None or not reporter.is_active:
            log.info("Incident rejected: %s is not a registered app user", payload.user)
            return IncidentCreationResult(status=CreationStatus.NOT_APP_USER)

        delivery = dispatcher.send(
            SmsNotification(
                recipient_name=payload.contact.display_name,
                recipient_phone=payload.contact.phone,
                sender_name=str(reporter.full_name),
                sender_phone=str(reporter.phone),
                location_name=location_name,
                latitude=payload.location.latitude,
                longitude=payload.location.longitude,
            )
        )

        incident = IncidentService._record_incident(payload, location_name, delivery, db)
        outcome = CreationStatus.CREATED if delivery.success else CreationStatus.RECORDED
        return IncidentCreationResult(status=outcome, incident=incident, delivery=delivery)

    @staticmethod
    def _record_incident(
        payload: IncidentCreate,
        location_name: str,
        delivery: DeliveryResult,
        db: Session,
    ) -> Incident:
        incident = incident_repository.create_incident(
            db,
            {
                "user_id": payload.user,
                "contact_display_name": payload.contact.display_name,
                "contact_phone": payload.contact.phone,
                "latitude": payload.location.latitude,
                "longitude": payload.location.longitude,
                "location_name": location_name,
                "type": IncidentType.SMS,
                "send_success": delivery.success,
                "video_file": payload.video_file,
            },
        )
        IncidentService._audit(
            db,
            action="incident.created",
            level="INFO" if delivery.success else "WARN",
            message=None if delivery.success else delivery.error,
            actor_id=payload.user,
            resource_id=incident.id,
            metadata={"type": IncidentType.SMS.value, "send_success": delivery.success},
        )
        return incident

    @staticmethod
    def _audit(db: Session, **entry) -> None:
        """Write an audit entry after the main change has been committed.

        A failed audit write is logged and rolled back; it never changes the
        outcome already reported for the incident.
        """
        try:
            AuditService.create_log(db, **entry)
        except SQLAlchemyError as exc:
            log.error("Audit write for %s failed: %s", entry.get("action"), exc, exc_info=True)
            db.rollback()

    @staticmethod
    def list_user_incidents(caller_id: UUID, user_id: UUID, db: Session) -> list[Incident]:
        require_access(caller_id, user_id, detail="unauthorized access")
        return incident_repository.list_incidents_by_user(db, caller_id)

    @staticmethod
    def get_incident(caller_id: UUID, incident_id: UUID, db: Session) -> Incident:
        return authorize_loaded(
            lambda: incident_repository.find_incident_by_id(db, incident_id),
            lambda incident: incident.user_id,
            caller_id,
            not_found_detail="Incident not found.",
        )

    @staticmethod
    def delete_video(caller_id: UUID, incident_id: UUID, db: Session, storage: VideoStorage) -> Incident:
        """Remove the recording and its reference. The incident itself is kept."""
        incident = authorize_loaded(
            lambda: incident_repository.find_incident_by_id(db, incident_id),
            lambda found: found.user_id,
            caller_id,
            not_found_detail="Incident not found.",
        )

        filename = incident.video_file
        if not filename:
            return incident

        # Reference is committed as cleared before the file is removed
        incident = incident_repository.clear_incident_video(db, incident)
        storage.remove(str(filename))
        IncidentService._audit(
            db,
            action="incident.video_deleted",
            actor_id=caller_id,
            resource_id=incident.id,
            metadata={"video_file": filename},
        )
        return incident

    @staticmethod
    def create_share(caller_id: UUID, incident_id: UUID, share_to: Optional[str], db: Session) -> VideoShare:
        if not share_to:
            raise ValidationError("'shareTo' is required.")

        incident = authorize_loaded(
            lambda: incident_repository.find_incident_by_id(db, incident_id),
            lambda found: found.user_id,
            caller_id,
            not_found_detail="Incident not found.",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

        share = incident_repository.create_share(
            db,
            {"incident_id": incident.id, "user_id": caller_id, "share_to": share_to},
        )
        IncidentService._audit(
            db,
            action="incident.video_shared",
            actor_id=caller_id,
            resource_id=incident.id,
            metadata={"share_to": share_to},
        )
        return share

    @staticmethod
    def list_shares(caller_id: UUID, user_id: UUID, db: Session) -> list[VideoShare]:
        require_access(caller_id, user_id, detail="Unauthorized access.")
        return incident_repository.find_shares_by_user(db, caller_id)

    @staticmethod
    def can_view_video(user_id: str, filename: str, db: Session) -> bool:
        """Owners and share recipients of the incident holding the recording may view it."""
        incident = incident_repository.find_incident_by_video_file(db, filename)
        if incident is None:
            return False
        if can_access(user_id, incident.user_id):
            return True
        return incident_repository.has_share_for(db, incident.id, user_id)
