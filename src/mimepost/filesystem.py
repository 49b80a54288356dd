"""File-system access used for attachments.

:class:`~mimepost.message.Message` never touches the disk directly. It asks a
:class:`MailFilesystem` whether an attachment exists when it is added, and
reads its bytes, MIME type and file name when the message is compiled. Tests
inject an in-memory implementation; production code uses
:class:`LocalFilesystem`.
"""

from __future__ import annotations

import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path

__all__ = ["DEFAULT_MIME_TYPE", "LocalFilesystem", "MailFilesystem"]

DEFAULT_MIME_TYPE = "application/octet-stream"


class MailFilesystem(ABC):
    """Interface for the file operations attachments depend on."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True when *path* is an existing regular file."""

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        """Return the full contents of *path*."""

    @abstractmethod
    def mime_type(self, path: str) -> str:
        """Return the MIME type of *path*."""

    def basename(self, path: str) -> str:
        """Return the final component of *path*."""
        return Path(path).name


class LocalFilesystem(MailFilesystem):
    """File operations backed by the local disk.

    MIME types are guessed from the file name, falling back to
    ``application/octet-stream`` for unknown or missing extensions.

    Examples:
        >>> LocalFilesystem().mime_type("report.pdf")
        'application/pdf'
        >>> LocalFilesystem().mime_type("blob")
        'application/octet-stream'
    """

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def read_bytes(self, path: str) -> bytes:
        with Path(path).open("rb") as handle:
            return handle.read()

    def mime_type(self, path: str) -> str:
        mime, _ = mimetypes.guess_type(Path(path).name)
        return mime or DEFAULT_MIME_TYPE
