"""Email notifier – sends HTML status and summary emails over SMTP."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Any, Dict, List

from core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Deliver HTML emails through an SMTP relay.

    Parameters
    ----------
    email_cfg : dict
        The ``email`` section of ``monitor.yaml``: ``from``, ``to`` (string or
        list), ``server``, ``port``, ``user``, ``password``, ``use_tls`` and
        ``timeout_s``.
    """

    def __init__(self, email_cfg: Dict[str, Any]):
        to = email_cfg.get("to", [])
        if isinstance(to, str):
            to = [to]
        self._from: str = email_cfg.get("from", "")
        self._to: List[str] = list(to)
        self._server: str = email_cfg.get("server", "")
        self._port = int(email_cfg.get("port", 587))
        self._user = email_cfg.get("user") or ""
        self._password = email_cfg.get("password") or ""
        self._use_tls = bool(email_cfg.get("use_tls", True))
        self._timeout = email_cfg.get("timeout_s", 30)

    @property
    def recipients(self) -> List[str]:
        return list(self._to)

    def build_message(self, subject: str, html_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._from
        msg["To"] = ", ".join(self._to)
        msg["Subject"] = subject
        msg.set_content(html_body, subtype="html")
        return msg

    def send(self, subject: str, html_body: str) -> None:
        """Send one email; raises NotificationError on any SMTP failure."""
        msg = self.build_message(subject, html_body)
        try:
            with smtplib.SMTP(self._server, self._port, timeout=self._timeout) as server:
                if self._use_tls:
                    server.starttls()
                if self._user and self._password:
                    server.login(self._user, self._password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(
                f"Cannot send '{subject}' via {self._server}:{self._port}: {exc}"
            ) from exc
        logger.info("Email sent: %s -> %s", subject, ", ".join(self._to))
