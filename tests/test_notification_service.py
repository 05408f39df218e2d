from services.notification_service import (
    DeliveryResult,
    NotificationDispatcher,
    SmsNotification,
    TwilioSmsTransport,
    build_alert_message,
)


def make_notification() -> SmsNotification:
    return SmsNotification(
        recipient_name="Sipho",
        recipient_phone="+27830000001",
        sender_name="Thandi Mokoena",
        sender_phone="+27821234567",
        location_name="12 Long Street, Cape Town",
        latitude=-33.9249,
        longitude=18.4241,
    )


def test_alert_message_names_sender_location_and_map_link():
    body = build_alert_message(make_notification())
    assert "Thandi Mokoena" in body
    assert "+27821234567" in body
    assert "12 Long Street, Cape Town" in body
    assert "https://www.google.com/maps/search/?api=1&query=-33.9249,18.4241" in body


def test_successful_send_returns_provider_response(sms_transport):
    dispatcher = NotificationDispatcher(sms_transport, from_number="+15550000000")
    result = dispatcher.send(make_notification())

    assert result.success is True
    assert result.provider_response == {"messageId": "SM0001", "messageStatus": "queued"}
    assert result.error is None
    assert sms_transport.sent[0]["to"] == "+27830000001"
    assert sms_transport.sent[0]["from_"] == "+15550000000"


def test_transport_failure_is_returned_not_raised(sms_transport):
    sms_transport.fail = True
    dispatcher = NotificationDispatcher(sms_transport)

    result = dispatcher.send(make_notification())

    assert result == DeliveryResult(success=False, provider_response={}, error="SMS gateway unreachable")


def test_missing_twilio_credentials_become_a_failed_delivery(monkeypatch):
    monkeypatch.delenv("TWILIO_ACCOUNT_SID", raising=False)
    monkeypatch.delenv("TWILIO_AUTH_TOKEN", raising=False)
    dispatcher = NotificationDispatcher(TwilioSmsTransport(None, None), from_number="+15550000000")

    result = dispatcher.send(make_notification())

    assert result.success is False
    assert result.error
