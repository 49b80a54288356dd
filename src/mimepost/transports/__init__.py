"""Transport implementations for mail delivery.

Available transports:
    - SendmailTransport: local sendmail binary (default)
    - SMTPTransport: SMTP relay with STARTTLS/SSL and login
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mimepost.exceptions import MailConfigurationError
from mimepost.transports.sendmail import DEFAULT_SENDMAIL_ARGS, DEFAULT_SENDMAIL_PATH, SendmailTransport
from mimepost.transports.smtp import SMTPCredentials, SMTPSecurity, SMTPTransport

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mimepost.transport import MailTransport

__all__ = [
    "SMTPCredentials",
    "SMTPSecurity",
    "SMTPTransport",
    "SendmailTransport",
    "create_transport",
]


def _create_sendmail(options: Mapping[str, Any]) -> SendmailTransport:
    timeout = options.get("timeout")
    return SendmailTransport(
        path=options.get("path") or DEFAULT_SENDMAIL_PATH,
        args=tuple(options.get("args") or DEFAULT_SENDMAIL_ARGS),
        timeout=float(timeout) if timeout is not None else None,
    )


def _create_smtp(options: Mapping[str, Any]) -> SMTPTransport:
    username = options.get("username")
    credentials = SMTPCredentials(username=username, password=options.get("password") or "") if username else None
    security = SMTPSecurity(
        use_starttls=bool(options.get("use_starttls", True)),
        use_ssl=bool(options.get("use_ssl", False)),
    )
    port = options.get("port")
    timeout = options.get("timeout")
    return SMTPTransport(
        options.get("host") or "localhost",
        port=int(port) if port is not None else 587,
        credentials=credentials,
        security=security,
        timeout=float(timeout) if timeout is not None else 10.0,
        envelope_sender=options.get("envelope_sender"),
    )


def create_transport(config: Mapping[str, Any]) -> MailTransport:
    """Build the transport selected by ``mail.transport.backend``.

    Args:
        config: Full configuration mapping.

    Returns:
        A sendmail or SMTP transport.

    Raises:
        MailConfigurationError: If the backend name is unknown.
    """
    section = (config.get("mail") or {}).get("transport") or {}
    backend = str(section.get("backend") or "sendmail").lower()
    if backend == "sendmail":
        return _create_sendmail(section.get("sendmail") or {})
    if backend == "smtp":
        return _create_smtp(section.get("smtp") or {})
    raise MailConfigurationError(f"Unknown mail transport backend: {backend!r}")
