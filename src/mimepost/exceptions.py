"""Specialized exceptions raised by mimepost.

Exception hierarchy::

    MimepostError
        ConfigError
            ConfigFileNotFoundError
            ConfigFormatError
        MailError (base for all mail errors)
            MailValidationError (invalid input, also ValueError)
                AttachmentNotFoundError (attached file missing)
                NoRecipientsError (send without any To address)
            MailConfigurationError (transport or settings misconfigured)
            MailTransportError (transport failure)
                SendFailedError (transport rejected the message)
"""

from __future__ import annotations


class MimepostError(Exception):
    """Base exception for every error raised by mimepost."""


class ConfigError(MimepostError):
    """Base exception for configuration loading errors."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """Raised when an explicitly requested configuration file does not exist.

    Attributes:
        path: The configuration path that was requested.
    """

    def __init__(self, path: str) -> None:
        """Initialize ConfigFileNotFoundError.

        Args:
            path: The configuration path that was requested.
        """
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class ConfigFormatError(ConfigError):
    """Raised when a configuration file cannot be parsed into a mapping."""


class MailError(MimepostError):
    """Base exception for all mail composition and delivery errors."""


class MailValidationError(MailError, ValueError):
    """Raised when message input is invalid or unsafe to put in a header."""


class AttachmentNotFoundError(MailValidationError):
    """Raised when an attachment path does not point to an existing file.

    Attributes:
        path: The attachment path that could not be found.

    Examples:
        >>> raise AttachmentNotFoundError("missing.pdf")
        Traceback (most recent call last):
        ...
        mimepost.exceptions.AttachmentNotFoundError: Attached file doesn't exist: missing.pdf
    """

    def __init__(self, path: str) -> None:
        """Initialize AttachmentNotFoundError.

        Args:
            path: The attachment path that could not be found.
        """
        super().__init__(f"Attached file doesn't exist: {path}")
        self.path = path


class NoRecipientsError(MailValidationError):
    """Raised when a message is sent without any ``To`` recipient."""

    def __init__(self) -> None:
        """Initialize NoRecipientsError."""
        super().__init__("You must add at least one recipient to mail message")


class MailConfigurationError(MailError):
    """Raised when a transport or mail setting is misconfigured."""


class MailTransportError(MailError):
    """Raised when a transport cannot deliver a message."""


class SendFailedError(MailTransportError):
    """Raised when the transport reports that sending failed.

    Attributes:
        recipients: The comma-joined recipient list handed to the transport.
    """

    def __init__(self, recipients: str, reason: str | None = None) -> None:
        """Initialize SendFailedError.

        Args:
            recipients: The comma-joined recipient list handed to the transport.
            reason: Optional description of the underlying failure.
        """
        message = f"Send failed for {recipients}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.recipients = recipients
        self.reason = reason


__all__ = [
    "AttachmentNotFoundError",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "MailConfigurationError",
    "MailError",
    "MailTransportError",
    "MailValidationError",
    "MimepostError",
    "NoRecipientsError",
    "SendFailedError",
]
