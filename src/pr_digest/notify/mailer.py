# src/pr_digest/notify/mailer.py

"""Sends the digest email over SMTP."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional, Union

from ..config.settings import split_csv

logger = logging.getLogger(__name__)


def normalize_recipients(recipients: Union[str, List[str]]) -> List[str]:
    """Accept a comma-separated string or a list of addresses."""
    if isinstance(recipients, str):
        return split_csv(recipients)
    return [address.strip() for address in recipients if address.strip()]


class EmailNotifier:
    """Delivers one message per call. Best effort: no retry, no receipt."""

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        sender: Optional[str] = None,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender or username

    def build_message(
        self,
        recipients: List[str],
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = ", ".join(recipients)
        # Plain part first; mail clients prefer the last alternative they can show.
        if text is not None:
            msg.attach(MIMEText(text, "plain", "utf-8"))
        if html is not None:
            msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    def send(
        self,
        recipients: Union[str, List[str]],
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
    ) -> None:
        """Send a message with an HTML body, a plain-text body, or both.

        Raises:
            ValueError: If there is no body or no recipient.
            smtplib.SMTPException: If the transport rejects the message.
        """
        if html is None and text is None:
            raise ValueError("An email needs an HTML or plain-text body")
        to_addrs = normalize_recipients(recipients)
        if not to_addrs:
            raise ValueError("An email needs at least one recipient")

        msg = self.build_message(to_addrs, subject, html=html, text=text)
        with smtplib.SMTP(self.host, self.port) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(msg, from_addr=self.sender, to_addrs=to_addrs)
        logger.info("Email sent to %s", ", ".join(to_addrs))
