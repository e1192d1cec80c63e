from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, Protocol

from app.core.config import MailSettings, settings
from app.schemas.contact import NotificationMail

logger = logging.getLogger(__name__)


class MailDeliveryError(RuntimeError):
    pass


class MailTransport(Protocol):
    def send(self, mail: NotificationMail) -> None:
        ...


TransportFactory = Callable[[MailSettings], MailTransport]


def build_email_message(mail: NotificationMail) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = mail.sender
    msg["To"] = mail.recipient
    if mail.reply_to:
        msg["Reply-To"] = mail.reply_to
    msg["Subject"] = mail.subject
    msg.set_content(mail.text)
    msg.add_alternative(mail.html, subtype="html")
    return msg


class SmtpMailTransport:
    """Sends notification mail through an SMTP relay.

    Port 465 connects with implicit TLS; any other port starts plain and
    upgrades with STARTTLS when the server advertises it.
    """

    def __init__(self, mail_settings: MailSettings, timeout: float | None = None) -> None:
        self.mail_settings = mail_settings
        self.timeout = settings.SMTP_TIMEOUT_SECONDS if timeout is None else timeout

    def _connect(self) -> smtplib.SMTP:
        cfg = self.mail_settings
        context = ssl.create_default_context()
        if cfg.use_tls:
            return smtplib.SMTP_SSL(cfg.host, cfg.port, timeout=self.timeout, context=context)

        smtp = smtplib.SMTP(cfg.host, cfg.port, timeout=self.timeout)
        try:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls(context=context)
                smtp.ehlo()
        except Exception:
            smtp.close()
            raise
        return smtp

    def send(self, mail: NotificationMail) -> None:
        msg = build_email_message(mail)
        cfg = self.mail_settings
        try:
            with self._connect() as smtp:
                smtp.login(cfg.user, cfg.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"SMTP delivery via {cfg.host}:{cfg.port} failed: {e}") from e
        logger.debug("Relayed mail to %s via %s:%s", mail.recipient, cfg.host, cfg.port)


def smtp_transport_factory(mail_settings: MailSettings) -> MailTransport:
    return SmtpMailTransport(mail_settings)
