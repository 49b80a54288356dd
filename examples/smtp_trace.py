"""Send a message over SMTP with TRACE logging of the session.

Usage:
    export SMTP_HOST=smtp.example.com SMTP_USER=user SMTP_PASS=secret
    python examples/smtp_trace.py recipient@example.com
"""

from __future__ import annotations

import os
import sys

from mimepost import Address, Message, MimepostError
from mimepost.logging import init_logging
from mimepost.transports.smtp import SMTPCredentials, SMTPTransport


def main(recipient: str) -> int:
    """Send one message and return a process exit code."""
    init_logging("TRACE")
    user = os.getenv("SMTP_USER")
    credentials = SMTPCredentials(user, os.getenv("SMTP_PASS", "")) if user else None
    transport = SMTPTransport(os.getenv("SMTP_HOST", "localhost"), credentials=credentials)

    message = (
        Message("mimepost SMTP trace", "If you can read this, the relay works.", transport=transport)
        .add_to(Address(recipient))
        .set_from(Address(user or "mimepost@localhost"))
    )
    try:
        message.send()
    except MimepostError as e:
        print(f"Send failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - manual example
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else "test@example.com"))
