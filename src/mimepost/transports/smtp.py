"""SMTP transport.

Relays compiled messages through an SMTP server with ``smtplib``. Envelope
recipients are collected from the ``To`` argument and the ``Cc``/``Bcc``
header lines; the ``Bcc`` line itself is never transmitted.

When TRACE logging is enabled the SMTP session (EHLO, STARTTLS, AUTH, MAIL
FROM, RCPT TO) is captured from smtplib's debug output and logged with an
``[SMTP]`` prefix.

Examples:
    Authenticated submission with STARTTLS::

        from mimepost.transports.smtp import SMTPCredentials, SMTPTransport

        transport = SMTPTransport(
            "smtp.example.com",
            credentials=SMTPCredentials(username="user", password="secret"),
        )
"""

from __future__ import annotations

import contextlib
import io
import logging
import re
import smtplib
import ssl
from dataclasses import dataclass
from email.utils import getaddresses, parseaddr

from mimepost.compiler import CRLF, assemble_raw_message
from mimepost.exceptions import MailConfigurationError, MailTransportError
from mimepost.logging import TRACE_LEVEL
from mimepost.transport import MailTransport

__all__ = ["SMTPCredentials", "SMTPSecurity", "SMTPTransport"]

log = logging.getLogger(__name__)

_EOL_PATTERN = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True, slots=True)
class SMTPCredentials:
    """Login credentials for the SMTP server."""

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class SMTPSecurity:
    """Connection security options.

    Attributes:
        use_starttls: Upgrade a plain connection with STARTTLS.
        use_ssl: Connect with implicit TLS (SMTPS). Takes precedence over STARTTLS.
    """

    use_starttls: bool = True
    use_ssl: bool = False


@dataclass(frozen=True, slots=True)
class _Envelope:
    sender: str
    recipients: list[str]
    headers: str


def _split_envelope(recipients: str, headers: str, envelope_sender: str | None) -> _Envelope:
    """Collect envelope addresses and drop ``Bcc`` from the transmitted headers."""
    rcpts = [addr for _, addr in getaddresses([recipients]) if addr]
    sender = envelope_sender or ""
    kept: list[str] = []
    for line in headers.split(CRLF) if headers else []:
        name, _, value = line.partition(":")
        field = name.strip().lower()
        if field in ("cc", "bcc"):
            rcpts.extend(addr for _, addr in getaddresses([value]) if addr)
        elif field == "from" and not sender:
            sender = parseaddr(value)[1]
        if field != "bcc":
            kept.append(line)
    return _Envelope(sender=sender, recipients=rcpts, headers=CRLF.join(kept))


def _to_wire(raw: str) -> bytes:
    return _EOL_PATTERN.sub(CRLF, raw).encode("utf-8")


def _log_smtp_debug_output(buffer: io.StringIO) -> None:
    """Log captured smtplib debug lines at TRACE level."""
    if not log.isEnabledFor(TRACE_LEVEL):
        return
    for line in buffer.getvalue().splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith("send:"):
            log.log(TRACE_LEVEL, "[SMTP] >>> %s", stripped[5:].strip())
        elif stripped.startswith("reply:"):
            log.log(TRACE_LEVEL, "[SMTP] <<< %s", stripped[6:].strip())
        else:
            log.log(TRACE_LEVEL, "[SMTP] %s", stripped)


class SMTPTransport(MailTransport):
    """Transport relaying messages through an SMTP server.

    Args:
        host: SMTP server host name.
        port: Server port (587 for submission, 465 for SMTPS).
        credentials: Optional login credentials.
        security: TLS options.
        timeout: Socket timeout in seconds.
        envelope_sender: ``MAIL FROM`` address. Defaults to the ``From`` header.

    Raises:
        MailConfigurationError: If *host* is empty or *timeout* is not positive.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        *,
        credentials: SMTPCredentials | None = None,
        security: SMTPSecurity | None = None,
        timeout: float = 10.0,
        envelope_sender: str | None = None,
    ) -> None:
        if not host:
            raise MailConfigurationError("SMTP host is required")
        if timeout <= 0:
            raise MailConfigurationError("Timeout must be greater than 0")
        self._host = host
        self._port = port
        self._credentials = credentials
        self._security = security or SMTPSecurity()
        self._timeout = timeout
        self._envelope_sender = envelope_sender

    def send(self, recipients: str, subject: str, body: str, headers: str) -> bool:
        """Relay the message to the SMTP server.

        Returns:
            False when the server refuses every recipient.

        Raises:
            MailTransportError: On connection, TLS, authentication or protocol errors.
        """
        envelope = _split_envelope(recipients, headers, self._envelope_sender)
        data = _to_wire(assemble_raw_message(recipients, subject, body, envelope.headers))
        trace_enabled = log.isEnabledFor(TRACE_LEVEL)
        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] Connecting to %s:%d (ssl=%s)", self._host, self._port, self._security.use_ssl)
            log.log(TRACE_LEVEL, "[SMTP] Envelope from=%r rcpt=%s", envelope.sender, envelope.recipients)

        buffer = io.StringIO()
        capture = contextlib.redirect_stderr(buffer) if trace_enabled else contextlib.nullcontext()
        try:
            with capture:
                refused = self._deliver(envelope, data, trace_enabled)
        except smtplib.SMTPRecipientsRefused as e:
            log.warning("SMTP server refused all recipients: %s", ", ".join(e.recipients))
            return False
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(f"SMTP delivery failed: {e}") from e
        finally:
            _log_smtp_debug_output(buffer)

        if refused:
            log.warning("SMTP server refused some recipients: %s", ", ".join(refused))
        log.debug("Message relayed via %s:%d", self._host, self._port)
        return True

    def _deliver(self, envelope: _Envelope, data: bytes, trace_enabled: bool) -> dict[str, tuple[int, bytes]]:
        if self._security.use_ssl:
            client: smtplib.SMTP = smtplib.SMTP_SSL(
                host=self._host,
                port=self._port,
                timeout=self._timeout,
                context=ssl.create_default_context(),
            )
        else:
            client = smtplib.SMTP(host=self._host, port=self._port, timeout=self._timeout)

        with client:
            if trace_enabled:
                client.set_debuglevel(1)
            client.ehlo()
            if self._security.use_starttls and not self._security.use_ssl:
                if not client.has_extn("STARTTLS"):
                    raise MailTransportError(f"SMTP server {self._host} does not support STARTTLS")
                client.starttls(context=ssl.create_default_context())
                client.ehlo()
            if self._credentials is not None:
                client.login(self._credentials.username, self._credentials.password)
            return client.sendmail(envelope.sender, envelope.recipients, data)
