"""MIME header and body compilation.

Compilation is a pure function of a message's current fields plus a boundary
token. Without attachments the body is the caller's text as is, and MIME
headers are only emitted when a content type was set explicitly. With
attachments the body becomes a ``multipart/mixed`` payload::

    --<boundary>
    Content-Type: text/plain; charset="iso-8859-1"
    Content-Transfer-Encoding: 8bit

    <text>
    --<boundary>
    Content-Type: application/pdf; name="report.pdf"
    Content-Transfer-Encoding: base64
    Content-Disposition: attachment

    <base64 wrapped at 76 characters>
    --<boundary>--

All lines are joined with CRLF.
"""

from __future__ import annotations

import base64
import hashlib
import os
import time
from dataclasses import dataclass
from email.header import Header
from typing import TYPE_CHECKING

from mimepost.address import format_address_list
from mimepost.config import MailSettings

if TYPE_CHECKING:
    from mimepost.filesystem import MailFilesystem
    from mimepost.message import Message

__all__ = [
    "CRLF",
    "MIME_NOTICE",
    "CompiledMessage",
    "assemble_raw_message",
    "compile_body",
    "compile_headers",
    "encode_subject",
    "generate_boundary",
    "wrap_base64",
]

CRLF = "\r\n"
MIME_NOTICE = "This is a MIME encoded message"


@dataclass(frozen=True, slots=True)
class CompiledMessage:
    """Result of compiling a message, in the shape transports receive.

    Attributes:
        recipients: Comma-joined rendered ``To`` addresses.
        subject: Message subject.
        body: Compiled body.
        headers: CRLF-joined header block, empty when there are no headers.
        boundary: Boundary token used for this compilation.
    """

    recipients: str
    subject: str
    body: str
    headers: str
    boundary: str

    def as_string(self) -> str:
        """Return the full RFC 5322 text a mail agent would receive."""
        return assemble_raw_message(self.recipients, self.subject, self.body, self.headers)


def generate_boundary(text: str = "") -> str:
    """Return a fresh high-entropy boundary token.

    The token is a hash over a nanosecond timestamp and random bytes. It is
    regenerated in the unlikely case it already occurs in *text*. Base64 data
    never contains ``-``, so ``--<token>`` cannot collide with attachments.

    Args:
        text: Message text the token must not occur in.

    Returns:
        A 32-character lowercase hexadecimal token.
    """
    while True:
        seed = str(time.time_ns()).encode("ascii") + os.urandom(16)
        token = hashlib.sha256(seed).hexdigest()[:32]
        if token not in text:
            return token


def wrap_base64(data: bytes, line_length: int = 76) -> str:
    """Base64-encode *data* and terminate every *line_length* chunk with CRLF.

    Examples:
        >>> wrap_base64(b"hello")
        'aGVsbG8=\\r\\n'
        >>> wrap_base64(b"")
        ''
    """
    encoded = base64.b64encode(data).decode("ascii")
    return "".join(encoded[i : i + line_length] + CRLF for i in range(0, len(encoded), line_length))


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def compile_headers(message: Message, boundary: str) -> list[str]:
    """Return the header lines for *message*, in emission order.

    Args:
        message: Message to compile.
        boundary: Boundary token announced in the multipart content type.

    Returns:
        Header lines without line terminators.
    """
    headers: list[str] = []
    if message.attachments:
        headers.append("MIME-Version: 1.0")
        headers.append(f'Content-Type: multipart/mixed; boundary="{boundary}"')
        headers.append("Content-Transfer-Encoding: 7bit")
        headers.append(f"X-MIME-Notice: {MIME_NOTICE}")
    elif message.content_type:
        headers.append("MIME-Version: 1.0")
        headers.append(f'Content-type:{message.content_type}; charset="{message.charset}"')

    if message.from_ is not None:
        headers.append(f"From: {message.from_}")
    if message.sender is not None:
        headers.append(f"Sender: {message.sender}")
    if message.reply_to is not None:
        headers.append(f"Reply-To: {message.reply_to}")
    if message.cc:
        headers.append(f"Cc: {format_address_list(message.cc)}")
    if message.bcc:
        headers.append(f"Bcc: {format_address_list(message.bcc)}")

    headers.extend(message.custom_headers)
    return headers


def compile_body(
    message: Message,
    boundary: str,
    *,
    filesystem: MailFilesystem,
    settings: MailSettings | None = None,
) -> str:
    """Return the body for *message*.

    Args:
        message: Message to compile.
        boundary: Boundary token delimiting the parts.
        filesystem: Source of attachment bytes, MIME types and names.
        settings: Defaults for the text part and base64 wrapping.

    Returns:
        The raw text when there are no attachments, else the multipart body.
    """
    if not message.attachments:
        return message.body

    settings = settings or MailSettings()
    content_type = message.content_type or settings.default_content_type
    charset = message.charset or settings.default_charset

    parts = [
        f"--{boundary}",
        f'Content-Type: {content_type}; charset="{charset}"',
        "Content-Transfer-Encoding: 8bit",
        "",
        message.body,
    ]
    for path in message.attachments:
        data = filesystem.read_bytes(path)
        name = _quote(filesystem.basename(path))
        parts.extend(
            [
                f"--{boundary}",
                f'Content-Type: {filesystem.mime_type(path)}; name="{name}"',
                "Content-Transfer-Encoding: base64",
                "Content-Disposition: attachment",
                "",
                wrap_base64(data, settings.base64_line_length),
            ]
        )
    parts.append(f"--{boundary}--")
    return CRLF.join(parts)


def encode_subject(subject: str) -> str:
    """Return *subject* as an RFC 2047 encoded word when it is not plain ASCII.

    Long subjects are folded with CRLF continuation lines.

    Examples:
        >>> encode_subject("Hello")
        'Hello'
    """
    if subject.isascii():
        return subject
    return Header(subject, "utf-8").encode(linesep=CRLF)


def assemble_raw_message(recipients: str, subject: str, body: str, headers: str) -> str:
    """Assemble the RFC 5322 text for a compiled message.

    ``To`` and ``Subject`` lead, followed by the header block, a blank line
    and the body.
    """
    lines = [f"To: {recipients}", f"Subject: {encode_subject(subject)}"]
    if headers:
        lines.append(headers)
    return CRLF.join(lines) + CRLF + CRLF + body
