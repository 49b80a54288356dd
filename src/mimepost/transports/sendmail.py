"""Sendmail transport.

Pipes the assembled message to a local ``sendmail`` compatible binary, which
reads recipients from the ``To``, ``Cc`` and ``Bcc`` headers (``-t``) and
strips ``Bcc`` before delivery. This is the transport used when no other
backend is configured.

Examples:
    Use a non-default binary::

        from mimepost.transports import SendmailTransport

        transport = SendmailTransport(path="/usr/local/bin/msmtp", args=("-t",))
"""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

from mimepost.compiler import assemble_raw_message
from mimepost.exceptions import MailConfigurationError, MailTransportError
from mimepost.logging import TRACE_LEVEL
from mimepost.transport import MailTransport

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["DEFAULT_SENDMAIL_ARGS", "DEFAULT_SENDMAIL_PATH", "SendmailTransport"]

log = logging.getLogger(__name__)

DEFAULT_SENDMAIL_PATH = "/usr/sbin/sendmail"
DEFAULT_SENDMAIL_ARGS = ("-t", "-i")


class SendmailTransport(MailTransport):
    """Transport delivering through a local sendmail binary.

    Args:
        path: Location of the sendmail binary.
        args: Command-line arguments passed to the binary.
        timeout: Seconds to wait for the binary, ``None`` waits forever.

    Raises:
        MailConfigurationError: If *path* is empty or *timeout* is not positive.
    """

    def __init__(
        self,
        path: str = DEFAULT_SENDMAIL_PATH,
        args: Sequence[str] = DEFAULT_SENDMAIL_ARGS,
        *,
        timeout: float | None = None,
    ) -> None:
        if not path:
            raise MailConfigurationError("Sendmail path is required")
        if timeout is not None and timeout <= 0:
            raise MailConfigurationError("Timeout must be greater than 0")
        self._path = path
        self._args = tuple(args)
        self._timeout = timeout

    @property
    def command(self) -> list[str]:
        """Return the command line used to invoke sendmail."""
        return [self._path, *self._args]

    def send(self, recipients: str, subject: str, body: str, headers: str) -> bool:
        """Pipe the message to sendmail.

        Returns:
            False when sendmail exits with a non-zero status.

        Raises:
            MailTransportError: If the binary cannot be run or times out.
        """
        raw = assemble_raw_message(recipients, subject, body, headers)
        if log.isEnabledFor(TRACE_LEVEL):
            log.log(TRACE_LEVEL, "[SENDMAIL] Running %s", " ".join(self.command))
            log.log(TRACE_LEVEL, "[SENDMAIL] To: %s, %d byte(s)", recipients, len(raw))

        try:
            result = subprocess.run(
                self.command,
                input=raw.encode("utf-8"),
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise MailTransportError(f"sendmail timed out after {self._timeout}s") from e
        except OSError as e:
            raise MailTransportError(f"Cannot run sendmail at {self._path}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            log.warning("sendmail exited with status %d: %s", result.returncode, stderr or "no output")
            return False

        log.debug("Message handed to sendmail for %s", recipients)
        return True
