"""Email address value rendered as a single header token."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mimepost.exceptions import MailValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["Address", "format_address_list"]

_LINE_BREAKS = frozenset("\r\n\0")
_FORBIDDEN_IN_EMAIL = frozenset(',<>"')


@dataclass(frozen=True, slots=True)
class Address:
    """Email address with an optional display name.

    Values are stored as given. Construction only rejects input that would
    break the header line it is rendered into: line breaks anywhere, and
    list or angle-bracket delimiters inside the email itself.

    Display names are rendered as given, without RFC 2047 encoding. A
    non-ASCII name therefore produces 8-bit header text, which transports
    send as UTF-8 (RFC 6532).

    Attributes:
        email: Mailbox address, e.g. ``jane@example.com``.
        name: Optional display name.

    Examples:
        >>> Address("jane@example.com", "Jane Doe").render()
        '"Jane Doe" <jane@example.com>'
        >>> str(Address("jane@example.com"))
        'jane@example.com'
    """

    email: str
    name: str | None = None

    def __post_init__(self) -> None:
        if not self.email:
            raise MailValidationError("Email address must not be empty")
        if _LINE_BREAKS.intersection(self.email) or (self.name and _LINE_BREAKS.intersection(self.name)):
            raise MailValidationError(f"Address contains a line break: {self.email!r}")
        if _FORBIDDEN_IN_EMAIL.intersection(self.email) or any(ch.isspace() for ch in self.email):
            raise MailValidationError(f"Email address contains a forbidden character: {self.email!r}")

    def render(self) -> str:
        """Return the header token for this address.

        Quotes and backslashes in the name are escaped. Other characters,
        non-ASCII ones included, are emitted unchanged.
        """
        if not self.name:
            return self.email
        escaped = self.name.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}" <{self.email}>'

    def __str__(self) -> str:
        return self.render()


def format_address_list(addresses: Iterable[Address]) -> str:
    """Join rendered addresses with commas, as used by list headers.

    Examples:
        >>> format_address_list([Address("a@x.com"), Address("b@x.com", "B")])
        'a@x.com,"B" <b@x.com>'
    """
    return ",".join(address.render() for address in addresses)
