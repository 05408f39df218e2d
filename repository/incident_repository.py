from typing import Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.incident import Incident, VideoShare
from models.user import User


def create_incident(db: Session, fields: dict) -> Incident:
    incident = Incident(**fields)
    db.add(incident)
    db.commit()
    db.refresh(incident)
    return incident


def find_incident_by_id(db: Session, incident_id: UUID) -> Optional[Incident]:
    return db.query(Incident).filter(Incident.id == incident_id).first()


def find_incident_by_video_file(db: Session, filename: str) -> Optional[Incident]:
    return db.query(Incident).filter(Incident.video_file == filename).first()


def list_incidents_by_user(db: Session, user_id: UUID) -> list[Incident]:
    return (
        db.query(Incident)
        .filter(Incident.user_id == user_id)
        .order_by(Incident.created_at.desc())
        .all()
    )


def clear_incident_video(db: Session, incident: Incident) -> Incident:
    incident.video_file = None  # type: ignore[assignment]
    db.commit()
    db.refresh(incident)
    return incident


def create_share(db: Session, fields: dict) -> VideoShare:
    share = VideoShare(**fields)
    db.add(share)
    db.commit()
    db.refresh(share)
    return share


def find_shares_by_user(db: Session, user_id: UUID) -> list[VideoShare]:
    """Shares the user created plus shares addressed to them."""
    return (
        db.query(VideoShare)
        .filter(or_(VideoShare.user_id == user_id, VideoShare.share_to == str(user_id)))
        .order_by(VideoShare.created_at.desc())
        .all()
    )


def has_share_for(db: Session, incident_id: UUID, share_to: str) -> bool:
    return (
        db.query(VideoShare)
        .filter(VideoShare.incident_id == incident_id, VideoShare.share_to == share_to)
        .first()
        is not None
    )


def find_user_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()
