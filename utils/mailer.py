"""
Outgoing mail over SMTP.

send() is fire-and-forget: delivery runs on a daemon thread, failures are
logged and never reach the request that triggered them. Without an SMTP
host the message is only logged (dev mode).
"""
from __future__ import annotations

import logging
import smtplib
import ssl
import threading
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)


def redact(address: str) -> str:
    if "@" not in address:
        return "redacted"
    local, domain = address.split("@", 1)
    return f"{local[:2]}***@{domain}"


class Mailer:
    def __init__(
        self,
        host: Optional[str] = None,
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        from_email: Optional[str] = None,
        from_name: str = "Blog API",
        timeout: int = 30,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.from_email = from_email or user
        self.from_name = from_name
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> "Mailer":
        return cls(
            host=config.get("MAIL_SERVICE_HOST"),
            port=int(config.get("MAIL_SERVICE_PORT", 587)),
            user=config.get("MAIL_SERVICE_EMAIL"),
            password=config.get("MAIL_SERVICE_PASSWORD"),
            use_tls=config.get("MAIL_SERVICE_USE_TLS", True),
            from_name=config.get("APP_NAME", "Blog API"),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.from_email)

    def send(self, to_address: str, subject: str, html_body: str) -> None:
        if not self.is_configured:
            logger.info("mail not configured, dropping message to %s: %s", redact(to_address), subject)
            return
        thread = threading.Thread(
            target=self._deliver, args=(to_address, subject, html_body), name="mailer", daemon=True
        )
        thread.start()

    def _deliver(self, to_address: str, subject: str, html_body: str) -> bool:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_address
        msg.attach(MIMEText(html_body, "html"))

        context = ssl.create_default_context()
        try:
            if self.use_tls:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.starttls(context=context)
                    if self.user and self.password:
                        server.login(self.user, self.password)
                    server.sendmail(self.from_email, to_address, msg.as_string())
            else:
                with smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout) as server:
                    if self.user and self.password:
                        server.login(self.user, self.password)
                    server.sendmail(self.from_email, to_address, msg.as_string())
        except (smtplib.SMTPException, OSError):
            logger.exception("mail delivery to %s failed", redact(to_address))
            return False
        logger.info("mail sent to %s: %s", redact(to_address), subject)
        return True
