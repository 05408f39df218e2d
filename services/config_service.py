"""
Configuration service for runtime settings of the incident API.

Every value is read from the environment (a local ``.env`` is loaded first),
so the composition root and the tests can change behaviour without touching
module state.
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_VIDEO_TOKEN_TTL_SECONDS = 300
DEFAULT_GEOCODING_TIMEOUT_SECONDS = 10.0
DEFAULT_SMS_TIMEOUT_SECONDS = 10.0
DEFAULT_VIDEO_DIR = "videos"


def _get_float(name: str, fallback: float) -> float:
    env_value = os.getenv(name)
    if env_value:
        try:
            return float(env_value)
        except ValueError:
            return fallback
    return fallback


def get_session_secret() -> str:
    """Key that signs the session JWTs issued by the login service."""
    return os.getenv("SECRET_KEY", "SUPER_SECRET_SAFEWALK_SESSION_KEY")


def get_video_token_secret() -> str:
    """Key that signs video access tokens. Kept apart from the session key."""
    return os.getenv("VIDEO_TOKEN_SECRET", "SUPER_SECRET_SAFEWALK_VIDEO_KEY")


def get_video_token_ttl_seconds() -> int:
    """Lifetime of a video access token (default five minutes)."""
    env_value = os.getenv("VIDEO_TOKEN_TTL_SECONDS")
    if env_value:
        try:
            ttl = int(env_value)
        except ValueError:
            return DEFAULT_VIDEO_TOKEN_TTL_SECONDS
        return ttl if ttl > 0 else DEFAULT_VIDEO_TOKEN_TTL_SECONDS
    return DEFAULT_VIDEO_TOKEN_TTL_SECONDS


def get_google_maps_api_key() -> Optional[str]:
    return os.getenv("GOOGLE_MAPS_API_KEY")


def get_geocoding_timeout_seconds() -> float:
    return _get_float("GEOCODING_TIMEOUT_SECONDS", DEFAULT_GEOCODING_TIMEOUT_SECONDS)


def get_twilio_settings() -> dict:
    return {
        "account_sid": os.getenv("TWILIO_ACCOUNT_SID"),
        "auth_token": os.getenv("TWILIO_AUTH_TOKEN"),
        "from_number": os.getenv("TWILIO_FROM_NUMBER"),
        "timeout": _get_float("SMS_TIMEOUT_SECONDS", DEFAULT_SMS_TIMEOUT_SECONDS),
    }


def get_video_dir() -> str:
    return os.getenv("VIDEO_DIR", DEFAULT_VIDEO_DIR)
