"""
Services module - Business logic layer for the SafeWalk incident API.
"""
from services.auth_service import AuthService
from services.incident_service import IncidentService
from services.notification_service import NotificationDispatcher
from services.video_token_service import VideoTokenService

__all__ = ["AuthService", "IncidentService", "NotificationDispatcher", "VideoTokenService"]
