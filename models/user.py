# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

from sqlalchemy import Column, String, Boolean
from sqlalchemy.dialects.postgresql import UUID
import uuid
from core.database import Base

class User(Base):
    """Registered app user. Owned by the account service; read here to sign SMS alerts."""
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)  # type: ignore
    full_name = Column(String(120), nullable=False)  # type: ignore
    phone = Column(String(32), nullable=False)  # type: ignore
    email = Column(String, unique=True, index=True, nullable=True)  # type: ignore
    is_active = Column(Boolean, default=True)  # type: ignore
