"""Tests for building transports from configuration."""

from __future__ import annotations

import pytest

from mimepost.config import load_config
from mimepost.exceptions import MailConfigurationError
from mimepost.transports import SendmailTransport, SMTPTransport, create_transport


def test_default_config_builds_sendmail() -> None:
    """The built-in configuration selects the local sendmail binary."""
    transport = create_transport(load_config())

    assert isinstance(transport, SendmailTransport)
    assert transport.command == ["/usr/sbin/sendmail", "-t", "-i"]


def test_empty_mapping_builds_sendmail() -> None:
    """A mapping without a mail section still yields the default backend."""
    assert isinstance(create_transport({}), SendmailTransport)


def test_custom_sendmail_options() -> None:
    """Path and arguments come from the sendmail subsection."""
    config = {"mail": {"transport": {"backend": "sendmail", "sendmail": {"path": "/opt/msmtp", "args": ["-t"]}}}}
    transport = create_transport(config)

    assert isinstance(transport, SendmailTransport)
    assert transport.command == ["/opt/msmtp", "-t"]


def test_smtp_backend() -> None:
    """The smtp backend builds a configured SMTPTransport."""
    config = {
        "mail": {
            "transport": {
                "backend": "SMTP",
                "smtp": {
                    "host": "mail.example.com",
                    "port": "465",
                    "username": "user",
                    "password": "secret",
                    "use_ssl": True,
                    "timeout": 3,
                },
            }
        }
    }

    transport = create_transport(config)

    assert isinstance(transport, SMTPTransport)
    assert transport._host == "mail.example.com"
    assert transport._port == 465
    assert transport._credentials is not None
    assert transport._credentials.username == "user"
    assert transport._security.use_ssl is True
    assert transport._timeout == 3.0


def test_smtp_without_username_has_no_credentials() -> None:
    """Login is skipped when no username is configured."""
    transport = create_transport({"mail": {"transport": {"backend": "smtp", "smtp": {}}}})

    assert isinstance(transport, SMTPTransport)
    assert transport._credentials is None
    assert transport._host == "localhost"


def test_unknown_backend() -> None:
    """Unknown backend names are configuration errors."""
    with pytest.raises(MailConfigurationError, match="carrier-pigeon"):
        create_transport({"mail": {"transport": {"backend": "carrier-pigeon"}}})


def test_smtp_defaults_when_port_and_timeout_unset() -> None:
    """Port 587 and a 10 second timeout apply when the keys are missing."""
    transport = create_transport({"mail": {"transport": {"backend": "smtp", "smtp": {"host": "h"}}}})

    assert isinstance(transport, SMTPTransport)
    assert transport._port == 587
    assert transport._timeout == 10.0


@pytest.mark.parametrize("backend", ["smtp", "sendmail"])
def test_configured_zero_timeout_is_rejected(backend: str) -> None:
    """A zero timeout in the configuration is passed through and rejected, not replaced."""
    config = {"mail": {"transport": {"backend": backend, backend: {"timeout": 0}}}}

    with pytest.raises(MailConfigurationError, match="Timeout"):
        create_transport(config)


def test_configured_port_zero_is_kept() -> None:
    """An explicit port is used as configured, even a falsy one."""
    transport = create_transport({"mail": {"transport": {"backend": "smtp", "smtp": {"port": 0}}}})

    assert isinstance(transport, SMTPTransport)
    assert transport._port == 0
