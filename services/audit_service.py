from __future__ import annotations

import json
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from models.audit_log import AuditLog


class AuditService:
    """Append-only trail of incident events (creation, video removal, sharing)."""

    LEVELS = {"DEBUG", "INFO", "WARN", "ERROR", "CRITICAL"}

    @staticmethod
    def generate_reference(at_time: datetime | None = None) -> str:
        timestamp = (at_time or datetime.utcnow()).strftime("%Y%m%d")
        return f"AUD-{timestamp}-{uuid4().hex[:8].upper()}"

    @staticmethod
    def _safe_level(level: str | None) -> str:
        normalized = (level or "INFO").strip().upper()
        return normalized if normalized in AuditService.LEVELS else "INFO"

    @staticmethod
    def create_log(
        db: Session,
        *,
        action: str,
        category: str = "incident",
        level: str = "INFO",
        message: str | None = None,
        actor_id: UUID | None = None,
        resource_id: UUID | str | None = None,
        metadata: dict | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            reference=AuditService.generate_reference(),
            level=AuditService._safe_level(level),
            category=(category or "incident").strip().lower(),
            action=action,
            message=message,
            actor_id=actor_id,
            resource_id=str(resource_id) if resource_id is not None else None,
            metadata_json=json.dumps(metadata or {}, default=str),
        )

        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def list_for_resource(db: Session, resource_id: UUID | str) -> list[AuditLog]:
        return (
            db.query(AuditLog)
            .filter(AuditLog.resource_id == str(resource_id))
            .order_by(AuditLog.event_time.asc())
            .all()
        )


__all__ = ["AuditService"]
