from datetime import datetime
import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID

from core.database import Base


class IncidentType(str, enum.Enum):
    """Channel used to notify the trusted contact."""
    SMS = "SMS"


class Incident(Base):
    __tablename__ = "incidents"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), index=True, nullable=False)

    # Contact is embedded and never edited after creation
    contact_display_name = Column(String(120), nullable=False)
    contact_phone = Column(String(32), nullable=False)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    location_name = Column(String(255), nullable=True)

    type = Column(Enum(IncidentType), nullable=False, default=IncidentType.SMS)
    send_success = Column(Boolean, nullable=False)
    video_file = Column(String(255), unique=True, index=True, nullable=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)


class VideoShare(Base):
    __tablename__ = "video_shares"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    incident_id = Column(UUID(as_uuid=True), ForeignKey("incidents.id"), index=True, nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), index=True, nullable=False)
    share_to = Column(String(64), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
