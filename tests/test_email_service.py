import asyncio
import smtplib
from unittest.mock import MagicMock, patch

from services.email_service import REMINDER_SUBJECT, EmailService


def make_service(port=587):
    return EmailService(sender="reminders@example.com", password="app-password", smtp_port=port)


def message_parts(msg):
    return {part.get_content_type(): part.get_payload(decode=True).decode("utf-8") for part in msg.get_payload()}


def test_send_uses_starttls_and_returns_true():
    service = make_service()

    with patch("services.email_service.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        sent = asyncio.run(service.send_reminder_email("ada@example.com", "Ada", "09:00"))

    assert sent is True
    smtp_cls.assert_called_once_with("smtp.gmail.com", 587, timeout=30.0)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("reminders@example.com", "app-password")
    msg = server.send_message.call_args[0][0]
    assert msg["Subject"] == REMINDER_SUBJECT
    assert msg["From"] == "reminders@example.com"
    assert msg["To"] == "ada@example.com"


def test_port_465_uses_implicit_tls():
    service = make_service(port=465)

    with patch("services.email_service.smtplib.SMTP_SSL") as ssl_cls, \
            patch("services.email_service.smtplib.SMTP") as smtp_cls:
        sent = asyncio.run(service.send_reminder_email("ada@example.com", "Ada", "09:00"))

    assert sent is True
    ssl_cls.assert_called_once()
    smtp_cls.assert_not_called()


def test_transport_error_returns_false():
    service = make_service()

    with patch("services.email_service.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
        sent = asyncio.run(service.send_reminder_email("ada@example.com", "Ada", "09:00"))

    assert sent is False


def test_connection_error_returns_false():
    service = make_service()

    with patch("services.email_service.smtplib.SMTP", side_effect=OSError("connection refused")):
        sent = asyncio.run(service.send_reminder_email("ada@example.com", "Ada", "09:00"))

    assert sent is False


def test_body_mentions_name_and_time():
    msg = make_service().build_message("ada@example.com", "Ada", "18:30")
    parts = message_parts(msg)

    assert "Hi Ada," in parts["text/html"]
    assert "<strong>18:30</strong>" in parts["text/html"]
    assert "Hi Ada," in parts["text/plain"]
    assert "18:30" in parts["text/plain"]


def test_empty_name_falls_back_to_student():
    service = make_service()
    server = MagicMock()

    with patch("services.email_service.smtplib.SMTP") as smtp_cls:
        smtp_cls.return_value.__enter__.return_value = server
        asyncio.run(service.send_reminder_email("ada@example.com", "", "09:00"))

    msg = server.send_message.call_args[0][0]
    assert "Hi Student," in message_parts(msg)["text/plain"]


def test_html_escapes_display_name():
    parts = message_parts(make_service().build_message("x@example.com", "<b>Eve</b>", "09:00"))

    assert "&lt;b&gt;Eve&lt;/b&gt;" in parts["text/html"]
    assert "<b>Eve</b>" not in parts["text/html"]
