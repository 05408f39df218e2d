import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

from twilio.base.exceptions import TwilioException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

log = logging.getLogger(__name__)

MAPS_URL = "https://www.google.com/maps/search/?api=1&query={lat},{lng}"


@dataclass(frozen=True)
class SmsNotification:
    recipient_name: str
    recipient_phone: str
    sender_name: str
    sender_phone: str
    location_name: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one notification attempt. A failure here is data, not an error."""
    success: bool
    provider_response: dict = field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def delivered(cls, provider_response: dict) -> "DeliveryResult":
        return cls(success=True, provider_response=dict(provider_response or {}))

    @classmethod
    def failed(cls, error: str) -> "DeliveryResult":
        return cls(success=False, error=error)


class SmsTransport(Protocol):
    def send_message(self, to: str, from_: Optional[str], body: str) -> dict:
        ...


class TwilioSmsTransport:
    """SMS transport backed by the Twilio REST API.

    The REST client is built on first use so a missing credential surfaces as a
    failed delivery instead of a startup crash.
    """

    def __init__(self, account_sid: Optional[str], auth_token: Optional[str], timeout: float = 10.0) -> None:
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.timeout = timeout
        self._client: Optional[Client] = None

    def _get_client(self) -> Client:
        if self._client is None:
            if not self.account_sid or not self.auth_token:
                raise TwilioException("Twilio credentials are not configured")
            self._client = Client(
                self.account_sid,
                self.auth_token,
                http_client=TwilioHttpClient(timeout=self.timeout),
            )
        return self._client

    def send_message(self, to: str, from_: Optional[str], body: str) -> dict:
        message = self._get_client().messages.create(to=to, from_=from_, body=body)
        message_status = getattr(message.status, "value", message.status)
        return {
            "messageId": message.sid,
            "messageStatus": str(message_status) if message_status is not None else None,
        }


def build_alert_message(notification: SmsNotification) -> str:
    map_link = MAPS_URL.format(lat=notification.latitude, lng=notification.longitude)
    return (
        f"Hi {notification.recipient_name}, {notification.sender_name} "
        f"({notification.sender_phone}) has reported an emergency near "
        f"{notification.location_name}. Location: {map_link}"
    )


class NotificationDispatcher:
    def __init__(self, transport: SmsTransport, from_number: Optional[str] = None) -> None:
        self.transport = transport
        self.from_number = from_number

    def send(self, notification: SmsNotification) -> DeliveryResult:
        body = build_alert_message(notification)
        try:
            response = self.transport.send_message(
                to=notification.recipient_phone,
                from_=self.from_number,
                body=body,
            )
        except Exception as exc:
            log.warning(
                "SMS alert to %s failed: %s",
                notification.recipient_phone,
                exc,
                exc_info=True,
            )
            return DeliveryResult.failed(str(exc) or exc.__class__.__name__)

        log.info("SMS alert delivered to %s", notification.recipient_phone)
        return DeliveryResult.delivered(response)
