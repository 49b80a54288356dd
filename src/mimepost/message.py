"""Mail message builder.

Examples:
    Send a report through the configured transport::

        from mimepost import Address, Message

        message = Message("Weekly report", "Numbers attached.")
        message.set_from(Address("reports@example.com", "Reports"))
        message.add_to(Address("team@example.com"))
        message.add_attachment("report.pdf")
        message.send()
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from mimepost.address import format_address_list
from mimepost.compiler import CRLF, CompiledMessage, compile_body, compile_headers, generate_boundary
from mimepost.config import get_config, get_mail_settings
from mimepost.exceptions import (
    AttachmentNotFoundError,
    MailTransportError,
    MailValidationError,
    NoRecipientsError,
    SendFailedError,
)
from mimepost.filesystem import LocalFilesystem
from mimepost.transports import create_transport

if TYPE_CHECKING:
    from os import PathLike

    from mimepost.address import Address
    from mimepost.config import MailSettings
    from mimepost.filesystem import MailFilesystem
    from mimepost.transport import MailTransport

__all__ = ["Message"]

log = logging.getLogger(__name__)

# Printable ASCII except the colon, per RFC 5322 field names
_HEADER_NAME_PATTERN = re.compile(r"^[!-9;-~]+$")
_LINE_BREAKS = re.compile(r"[\r\n\0]")


def _reject_line_breaks(value: str, what: str) -> None:
    if _LINE_BREAKS.search(value):
        raise MailValidationError(f"{what} must not contain line breaks: {value!r}")


class Message:
    """Email message accumulated through mutator calls, then sent.

    Mutators change the message in place and return it, so calls can be
    chained. Nothing is compiled until :meth:`compile` or :meth:`send`.

    Args:
        subject: Subject of the email.
        body: Email body text (plain text or whatever :meth:`set_content_type` declares).
        transport: Transport used by :meth:`send`. Built from configuration when omitted.
        filesystem: File access for attachments. Defaults to the local disk.
        settings: Compilation defaults. Read from configuration when omitted.

    Raises:
        MailValidationError: If *subject* contains a line break.
    """

    def __init__(
        self,
        subject: str,
        body: str,
        *,
        transport: MailTransport | None = None,
        filesystem: MailFilesystem | None = None,
        settings: MailSettings | None = None,
    ) -> None:
        _reject_line_breaks(subject, "Subject")
        self.subject = subject
        self.body = body
        self.to: list[Address] = []
        self.from_: Address | None = None
        self.sender: Address | None = None
        self.reply_to: Address | None = None
        self.cc: list[Address] = []
        self.bcc: list[Address] = []
        self.custom_headers: list[str] = []
        self.content_type: str | None = None
        self.charset: str | None = None
        self.attachments: list[str] = []
        self._transport = transport
        self._filesystem = filesystem or LocalFilesystem()
        self._settings = settings

    def add_to(self, address: Address) -> Message:
        """Add an address to send the mail to."""
        self.to.append(address)
        return self

    def set_from(self, address: Address) -> Message:
        """Set the author's address."""
        self.from_ = address
        return self

    def set_sender(self, address: Address) -> Message:
        """Set the submitter, when the mail agent sends on behalf of someone else."""
        self.sender = address
        return self

    def set_reply_to(self, address: Address) -> Message:
        """Set the address recipients must use when replying."""
        self.reply_to = address
        return self

    def add_cc(self, address: Address) -> Message:
        """Add an address to publicly send a copy of the message to."""
        self.cc.append(address)
        return self

    def add_bcc(self, address: Address) -> Message:
        """Add an address to discreetly send a copy of the message to."""
        self.bcc.append(address)
        return self

    def set_content_type(self, content_type: str, charset: str) -> Message:
        """Set the body content type and charset, e.g. ``text/html`` and ``utf-8``.

        Raises:
            MailValidationError: If either value contains a line break.
        """
        _reject_line_breaks(content_type, "Content type")
        _reject_line_breaks(charset, "Charset")
        self.content_type = content_type
        self.charset = charset
        return self

    def add_custom_header(self, name: str, value: str) -> Message:
        """Append a ``name: value`` header after the standard headers.

        No collision detection is done against standard headers.

        Raises:
            MailValidationError: If the name is not a valid field name or the
                value contains a line break.
        """
        if not _HEADER_NAME_PATTERN.match(name):
            raise MailValidationError(f"Invalid header name: {name!r}")
        _reject_line_breaks(value, "Header value")
        self.custom_headers.append(f"{name}: {value}")
        return self

    def add_attachment(self, path: str | PathLike[str]) -> Message:
        """Attach a file by path. Its content is read when the message is compiled.

        Raises:
            AttachmentNotFoundError: If *path* does not point to an existing file.
        """
        file_path = str(path)
        if not self._filesystem.exists(file_path):
            raise AttachmentNotFoundError(file_path)
        self.attachments.append(file_path)
        return self

    def set_transport(self, transport: MailTransport) -> Message:
        """Use *transport* for subsequent sends."""
        self._transport = transport
        return self

    def compile(self, boundary: str | None = None) -> CompiledMessage:
        """Compile headers and body from the current fields.

        Args:
            boundary: Boundary token to use. A fresh one is generated when omitted.

        Returns:
            The compiled message.
        """
        if boundary is None:
            boundary = generate_boundary(self.body)
        settings = self._settings or get_mail_settings()
        return CompiledMessage(
            recipients=format_address_list(self.to),
            subject=self.subject,
            body=compile_body(self, boundary, filesystem=self._filesystem, settings=settings),
            headers=CRLF.join(compile_headers(self, boundary)),
            boundary=boundary,
        )

    def send(self) -> None:
        """Compile the message with a fresh boundary and hand it to the transport.

        Raises:
            NoRecipientsError: If no ``To`` address was added.
            SendFailedError: If the transport rejects the message or fails.
        """
        if not self.to:
            raise NoRecipientsError()

        compiled = self.compile()
        transport = self._transport or create_transport(get_config())
        log.debug(
            "Sending message via %s to %d recipient(s) with %d attachment(s)",
            type(transport).__name__,
            len(self.to),
            len(self.attachments),
        )

        try:
            accepted = transport.send(compiled.recipients, compiled.subject, compiled.body, compiled.headers)
        except SendFailedError:
            raise
        except MailTransportError as e:
            raise SendFailedError(compiled.recipients, str(e)) from e

        if not accepted:
            raise SendFailedError(compiled.recipients)
