"""Mail transport abstraction.

A transport receives an already compiled message as four strings, the same
shape a local ``mail()`` primitive accepts, and reports whether the message
was accepted for delivery.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

__all__ = ["MailTransport"]


class MailTransport(ABC):
    """Base class for transports delivering compiled messages.

    Implementations return ``False`` when the mail agent rejects the message
    and raise :class:`~mimepost.exceptions.MailTransportError` when the agent
    cannot be reached at all.
    """

    @abstractmethod
    def send(self, recipients: str, subject: str, body: str, headers: str) -> bool:
        """Deliver a compiled message.

        Args:
            recipients: Comma-joined rendered ``To`` addresses.
            subject: Message subject.
            body: Compiled message body.
            headers: CRLF-joined extra header lines, possibly empty.

        Returns:
            True when the message was accepted for delivery.
        """
