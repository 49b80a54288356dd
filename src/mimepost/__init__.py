"""Compose MIME email messages and hand them to a mail transport.

Examples:
    >>> from mimepost import Address, Message
    >>> message = Message("Hi", "Hello").add_to(Address("a@x.com"))
    >>> compiled = message.compile()
    >>> compiled.recipients, compiled.headers, compiled.body
    ('a@x.com', '', 'Hello')
"""

from mimepost.address import Address, format_address_list
from mimepost.compiler import CompiledMessage
from mimepost.exceptions import (
    AttachmentNotFoundError,
    MailConfigurationError,
    MailError,
    MailTransportError,
    MailValidationError,
    MimepostError,
    NoRecipientsError,
    SendFailedError,
)
from mimepost.filesystem import LocalFilesystem, MailFilesystem
from mimepost.message import Message
from mimepost.meta import __version__
from mimepost.transport import MailTransport

__all__ = [
    "Address",
    "AttachmentNotFoundError",
    "CompiledMessage",
    "LocalFilesystem",
    "MailConfigurationError",
    "MailError",
    "MailFilesystem",
    "MailTransport",
    "MailTransportError",
    "MailValidationError",
    "Message",
    "MimepostError",
    "NoRecipientsError",
    "SendFailedError",
    "__version__",
    "format_address_list",
]
