"""Mail service: delivers the generated PDF through SMTP or an HTTP mail API.

The backend is picked once from ``MAIL_TRANSPORT``.  Both transports expose
``send(message)`` and raise :class:`MailDeliveryError` on failure.
"""
import base64
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

import httpx

from photomail.config import Settings

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class MailConfigError(RuntimeError):
    """Raised when a setting required by the selected transport is missing."""


class MailDeliveryError(RuntimeError):
    """Raised when the transport could not hand the message over."""


@dataclass
class OutgoingMessage:
    sender: str
    recipient: str
    subject: str
    body: str
    attachment_filename: str
    attachment: bytes
    content_type: str = PDF_CONTENT_TYPE


def _require(settings: Settings, *names: str) -> None:
    missing = [name for name in names if not getattr(settings, name)]
    if missing:
        raise MailConfigError(f"Missing configuration: {', '.join(missing)}")


def to_email_message(message: OutgoingMessage) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = message.sender
    msg["To"] = message.recipient
    msg["Subject"] = message.subject
    msg.set_content(message.body)
    maintype, _, subtype = message.content_type.partition("/")
    msg.add_attachment(
        message.attachment,
        maintype=maintype,
        subtype=subtype,
        filename=message.attachment_filename,
    )
    return msg


class SmtpTransport:
    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        secure: bool = False,
        timeout: float = 30,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.secure = secure
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        if self.secure:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        return smtplib.SMTP(self.host, self.port, timeout=self.timeout)

    def send(self, message: OutgoingMessage) -> None:
        logger.info(
            "SMTP: connecting host=%s port=%d secure=%s user=%s",
            self.host,
            self.port,
            self.secure,
            self.user,
        )
        try:
            with self._connect() as smtp:
                if not self.secure:
                    smtp.ehlo()
                    if smtp.has_extn("starttls"):
                        logger.info("SMTP: starting TLS")
                        smtp.starttls()
                        smtp.ehlo()
                if self.user:
                    smtp.login(self.user, self.password)
                    logger.info("SMTP: authenticated as %s", self.user)
                smtp.send_message(to_email_message(message))
        except smtplib.SMTPAuthenticationError as exc:
            logger.error("SMTP: authentication failed for %s: %s", self.user, exc)
            raise MailDeliveryError(
                "SMTP authentication failed (check SMTP_USER/SMTP_PASS)"
            ) from exc
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("SMTP: delivery failed: %s", exc)
            raise MailDeliveryError(f"SMTP delivery failed: {exc}") from exc

        logger.info("SMTP: sent to %s", message.recipient)


class HttpApiTransport:
    """JSON mail API: POST with a bearer key, base64-encoded attachment."""

    name = "http"

    def __init__(self, url: str, api_key: str, timeout: float = 30):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    def payload(self, message: OutgoingMessage) -> dict:
        return {
            "from": message.sender,
            "to": [message.recipient],
            "subject": message.subject,
            "text": message.body,
            "attachments": [
                {
                    "filename": message.attachment_filename,
                    "content": base64.b64encode(message.attachment).decode("ascii"),
                    "content_type": message.content_type,
                }
            ],
        }

    def send(self, message: OutgoingMessage) -> None:
        logger.info("Mail API: posting to %s", self.url)
        try:
            resp = httpx.post(
                self.url,
                json=self.payload(message),
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            logger.error("Mail API: request failed: %s", exc)
            raise MailDeliveryError(f"Mail API request failed: {exc}") from exc

        if not resp.is_success:
            logger.error(
                "Mail API: rejected with %d: %s", resp.status_code, resp.text[:500]
            )
            raise MailDeliveryError(
                f"Mail API rejected the message (HTTP {resp.status_code})"
            )
        logger.info("Mail API: sent to %s", message.recipient)


def build_transport(settings: Settings):
    """Return the configured transport, validating its required settings."""
    backend = settings.MAIL_TRANSPORT.strip().lower()
    if backend == "smtp":
        _require(settings, "SMTP_HOST", "TO_EMAIL")
        if not (settings.FROM_EMAIL or settings.SMTP_USER):
            raise MailConfigError("Missing configuration: FROM_EMAIL or SMTP_USER")
        return SmtpTransport(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            secure=settings.SMTP_SECURE,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )
    if backend == "http":
        _require(settings, "MAIL_API_URL", "MAIL_API_KEY", "FROM_EMAIL", "TO_EMAIL")
        return HttpApiTransport(
            url=settings.MAIL_API_URL,
            api_key=settings.MAIL_API_KEY,
            timeout=settings.MAIL_API_TIMEOUT_SECONDS,
        )
    raise MailConfigError(f"Unknown MAIL_TRANSPORT: {settings.MAIL_TRANSPORT!r}")


def build_message(
    settings: Settings, filename: str, subject: str, pdf_bytes: bytes
) -> OutgoingMessage:
    return OutgoingMessage(
        sender=settings.FROM_EMAIL or settings.SMTP_USER,
        recipient=settings.TO_EMAIL,
        subject=subject,
        body=f"Attached PDF file: {filename}",
        attachment_filename=filename,
        attachment=pdf_bytes,
    )
