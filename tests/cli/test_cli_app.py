"""Tests for the mimepost command line interface."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

import mimepost.logging as mimepost_logging
from mimepost import meta
from mimepost.cli import app
from mimepost.transport import MailTransport

# Run with: pytest -m cli
pytestmark = pytest.mark.cli

runner = CliRunner()


class RecordingTransport(MailTransport):
    """Transport keeping every call in memory."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.calls: list[tuple[str, str, str, str]] = []

    def send(self, recipients: str, subject: str, body: str, headers: str) -> bool:
        self.calls.append((recipients, subject, body, headers))
        return self.result


@pytest.fixture(autouse=True)
def _drop_log_handler() -> Iterator[None]:
    """Detach the Rich handler installed by each command."""
    yield
    logger = logging.getLogger(mimepost_logging.ROOT_LOGGER_NAME)
    if mimepost_logging._handler is not None:
        logger.removeHandler(mimepost_logging._handler)
        mimepost_logging._handler = None
    logger.setLevel(logging.NOTSET)


@pytest.fixture(name="transport")
def _transport(monkeypatch: pytest.MonkeyPatch) -> RecordingTransport:
    transport = RecordingTransport()
    monkeypatch.setattr("mimepost.cli.create_transport", lambda config: transport)
    return transport


def test_app_version() -> None:
    """--version prints the package version."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert meta.__version__ in result.stdout


def test_app_help() -> None:
    """Both commands are listed in the help output."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "preview" in result.stdout
    assert "send" in result.stdout


def test_preview_plain_message() -> None:
    """Preview prints headers and body of a single-part message."""
    result = runner.invoke(
        app,
        ["preview", "-s", "Status", "-b", "All good", "-t", "Ops <ops@example.com>", "--from", "bot@example.com"],
    )

    assert result.exit_code == 0, result.output
    assert 'To: "Ops" <ops@example.com>' in result.stdout
    assert "Subject: Status" in result.stdout
    assert "From: bot@example.com" in result.stdout
    assert "MIME-Version" not in result.stdout
    assert result.stdout.rstrip().endswith("All good")


def test_preview_with_attachment_and_html(tmp_path: Path) -> None:
    """Attachments switch the preview to multipart/mixed."""
    attachment = tmp_path / "report.pdf"
    attachment.write_bytes(b"%PDF-1.4 minimal")

    result = runner.invoke(
        app,
        [
            "preview",
            "-s",
            "Report",
            "-b",
            "<p>See attached</p>",
            "-t",
            "team@example.com",
            "--content-type",
            "text/html",
            "-a",
            str(attachment),
            "-H",
            "X-Campaign: q3",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Content-Type: multipart/mixed; boundary=" in result.stdout
    assert 'Content-Type: text/html; charset="utf-8"' in result.stdout
    assert 'Content-Type: application/pdf; name="report.pdf"' in result.stdout
    assert "Content-Transfer-Encoding: base64" in result.stdout
    assert "X-Campaign: q3" in result.stdout


def test_preview_body_from_file(tmp_path: Path) -> None:
    """--body-file reads the body as UTF-8 text."""
    body_file = tmp_path / "body.txt"
    body_file.write_text("Grüße aus der Datei", encoding="utf-8")

    result = runner.invoke(app, ["preview", "-s", "Hi", "--body-file", str(body_file), "-t", "a@example.com"])

    assert result.exit_code == 0, result.output
    assert "Grüße aus der Datei" in result.stdout


def test_preview_missing_attachment_exits_1(tmp_path: Path) -> None:
    """A missing attachment is reported on stderr with exit code 1."""
    result = runner.invoke(
        app, ["preview", "-s", "Hi", "-b", "x", "-t", "a@example.com", "-a", str(tmp_path / "nope.pdf")]
    )

    assert result.exit_code == 1
    assert "Attached file doesn't exist" in result.output


def test_preview_requires_body() -> None:
    """Without --body or --body-file the command fails with a usage error."""
    result = runner.invoke(app, ["preview", "-s", "Hi", "-t", "a@example.com"])
    assert result.exit_code == 2


def test_charset_without_content_type_is_usage_error() -> None:
    """--charset alone is rejected."""
    result = runner.invoke(app, ["preview", "-s", "Hi", "-b", "x", "--charset", "utf-8"])
    assert result.exit_code == 2


def test_malformed_header_is_usage_error() -> None:
    """Custom headers need a colon separator."""
    result = runner.invoke(app, ["preview", "-s", "Hi", "-b", "x", "-H", "NoColonHere"])
    assert result.exit_code == 2


def test_send_uses_configured_transport(transport: RecordingTransport) -> None:
    """send compiles the message and hands it to the transport."""
    result = runner.invoke(
        app,
        ["send", "-s", "Hi", "-b", "Hello", "-t", "a@example.com", "-t", "b@example.com", "--cc", "c@example.com"],
    )

    assert result.exit_code == 0, result.output
    assert "Message sent to 2 recipient(s)" in result.stdout
    recipients, subject, body, headers = transport.calls[0]
    assert recipients == "a@example.com,b@example.com"
    assert subject == "Hi"
    assert body == "Hello"
    assert "Cc: c@example.com" in headers


def test_send_without_recipients_exits_1(transport: RecordingTransport) -> None:
    """A message without To recipients is refused."""
    result = runner.invoke(app, ["send", "-s", "Hi", "-b", "Hello"])

    assert result.exit_code == 1
    assert transport.calls == []


def test_send_rejected_by_transport_exits_1(transport: RecordingTransport) -> None:
    """A transport returning False surfaces as a send failure."""
    transport.result = False

    result = runner.invoke(app, ["send", "-s", "Hi", "-b", "Hello", "-t", "a@example.com"])

    assert result.exit_code == 1
    assert "Send failed for a@example.com" in result.output


def test_send_reads_config_file(tmp_path: Path, transport: RecordingTransport) -> None:
    """Mail defaults from --config apply to the compiled message."""
    config = tmp_path / "custom.yml"
    config.write_text("mail:\n  defaults:\n    charset: utf-8\n", encoding="utf-8")
    notes = tmp_path / "notes.txt"
    notes.write_text("remember", encoding="utf-8")

    result = runner.invoke(
        app, ["send", "-s", "Hi", "-b", "Hello", "-t", "a@example.com", "-a", str(notes), "-c", str(config)]
    )

    assert result.exit_code == 0, result.output
    assert 'Content-Type: text/plain; charset="utf-8"' in transport.calls[0][2]


def test_missing_config_file_exits_1(tmp_path: Path) -> None:
    """An explicit configuration path that does not exist is an error."""
    result = runner.invoke(app, ["preview", "-s", "Hi", "-b", "x", "-c", str(tmp_path / "missing.yml")])
    assert result.exit_code == 1


def test_from_name_sets_display_name() -> None:
    """--from-name supplies the display name for a bare --from address."""
    result = runner.invoke(
        app,
        [
            "preview",
            *("-s", "Hi", "-b", "x", "-t", "a@example.com"),
            *("--from", "bot@example.com", "--from-name", "Build Bot"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert 'From: "Build Bot" <bot@example.com>' in result.stdout


def test_from_name_overrides_parsed_name() -> None:
    """An explicit --from-name wins over a name given inside --from."""
    result = runner.invoke(
        app,
        ["preview", "-s", "Hi", "-b", "x", "--from", "Old <bot@example.com>", "--from-name", "New"],
    )

    assert result.exit_code == 0, result.output
    assert 'From: "New" <bot@example.com>' in result.stdout


def test_from_name_without_from_is_usage_error() -> None:
    """--from-name alone is rejected."""
    result = runner.invoke(app, ["preview", "-s", "Hi", "-b", "x", "--from-name", "Nobody"])
    assert result.exit_code == 2
