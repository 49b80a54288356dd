"""Demonstrate multipart messages with file attachments."""

from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory

from mimepost import Address, Message


def build_message_with_attachments() -> None:
    """Create an HTML message carrying a text report as attachment."""
    with TemporaryDirectory() as tmp_dir:
        report_path = Path(tmp_dir) / "daily-report.txt"
        report_path.write_text("Daily metrics: 42 conversions", encoding="utf-8")

        compiled = (
            Message("Daily metrics report", "<p>Please find the report attached.</p>")
            .set_content_type("text/html", "utf-8")
            .add_to(Address("ops@example.com"))
            .set_from(Address("reports@example.com", "Reporting"))
            .add_custom_header("X-Report", "daily")
            .add_attachment(report_path)
            .compile()
        )

        print(compiled.as_string())


if __name__ == "__main__":  # pragma: no cover - manual example
    build_message_with_attachments()
