"""
Mail transport with graceful degradation.

TransportProvider holds one process-wide transport. It verifies SMTP
connectivity lazily and at most once per retry interval; while the relay is
unreachable (or not configured outside development) a MockTransport that only
logs is handed out instead.
"""
from __future__ import annotations

import logging
import time
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from typing import Callable, Optional, Protocol

import aiosmtplib

from config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class MailConfigurationError(RuntimeError):
    pass


class MailHeaderError(ValueError):
    """An address contains characters that cannot appear in a mail header."""


class Transport(Protocol):
    is_mock: bool

    async def send(self, message: EmailMessage) -> str: ...


def build_message(to: str, subject: str, html: str, sender: Optional[str]) -> EmailMessage:
    sender = sender or "no-reply@localhost"
    for address in (to, sender):
        if "\r" in address or "\n" in address:
            raise MailHeaderError(f"Line break in mail address {address!r}")
    message = EmailMessage()
    message["From"] = sender
    message["To"] = to
    # Names typed into the form end up here; fold any line breaks into spaces
    message["Subject"] = " ".join(subject.split())
    message["Date"] = formatdate(localtime=True)
    domain = sender.split("@", 1)[1] if sender and "@" in sender else None
    message["Message-ID"] = make_msgid(domain=domain)
    message.set_content("This message requires an HTML-capable email client.")
    message.add_alternative(html, subtype="html")
    return message


class MockTransport:
    is_mock = True

    async def send(self, message: EmailMessage) -> str:
        logger.info("Email would have been sent: to=%s subject=%s", message["To"], message["Subject"])
        return f"mock-id-{int(time.time() * 1000)}"


class SmtpTransport:
    is_mock = False

    def __init__(self, host: str, port: int, username: str, password: str, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout

    @property
    def use_tls(self) -> bool:
        return self.port == 465

    async def verify(self) -> None:
        """Connect and authenticate once; raises aiosmtplib.SMTPException or OSError when unreachable."""
        smtp = aiosmtplib.SMTP(
            hostname=self.host,
            port=self.port,
            use_tls=self.use_tls,
            timeout=self.timeout,
        )
        async with smtp:
            await smtp.login(self.username, self.password)

    async def send(self, message: EmailMessage) -> str:
        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            use_tls=self.use_tls,
            timeout=self.timeout,
        )
        return message["Message-ID"]


class TransportProvider:
    def __init__(self, config: Optional[Settings] = None, clock: Callable[[], float] = time.monotonic):
        self.config = config or default_settings
        self._clock = clock
        self._transport: Optional[Transport] = None
        self._checked_at: Optional[float] = None

    def _retry_due(self) -> bool:
        if self._checked_at is None:
            return True
        return self._clock() - self._checked_at >= self.config.smtp_retry_interval

    async def get(self) -> Transport:
        if self._transport is not None and (not self._transport.is_mock or not self._retry_due()):
            return self._transport

        cfg = self.config
        if not cfg.smtp_configured:
            if cfg.is_development:
                raise MailConfigurationError(
                    "SMTP configuration is missing. Please set SMTP_HOST, SMTP_USER, and SMTP_PASSWORD environment variables."
                )
            if self._transport is None:
                logger.warning("SMTP configuration is incomplete. Email functionality will be limited.")
            self._transport = MockTransport()
            self._checked_at = self._clock()
            return self._transport

        candidate = SmtpTransport(cfg.smtp_host, cfg.smtp_port, cfg.smtp_user, cfg.smtp_password, cfg.smtp_timeout)
        self._checked_at = self._clock()
        try:
            await candidate.verify()
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.warning("SMTP connectivity check against %s:%s failed, using mock transport: %s",
                           cfg.smtp_host, cfg.smtp_port, exc)
            self._transport = MockTransport()
            return self._transport

        logger.info("SMTP transport verified for %s:%s", cfg.smtp_host, cfg.smtp_port)
        self._transport = candidate
        return self._transport

    def mark_failed(self) -> None:
        """Fall back to the mock until the next retry window after a failed send."""
        self._transport = MockTransport()
        self._checked_at = self._clock()

    async def send_email(self, to: str, subject: str, html: str, sender: Optional[str] = None) -> tuple[str, bool]:
        """Send through the current transport. Returns (message id, delivered for real)."""
        transport = await self.get()
        message = build_message(to, subject, html, sender or self.config.mail_sender)
        try:
            message_id = await transport.send(message)
        except (aiosmtplib.SMTPException, OSError):
            self.mark_failed()
            raise
        return message_id, not transport.is_mock


mail_transport = TransportProvider()


def get_mail_transport() -> TransportProvider:
    return mail_transport
