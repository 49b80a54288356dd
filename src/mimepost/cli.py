"""Command line interface for mimepost.

Examples:
    Preview the RFC 5322 text of a message with an attachment::

        mimepost preview --subject "Report" --body "See attached" \\
            --to team@example.com --attach report.pdf

    Send through the transport configured in ``mimepost.conf.yml``::

        mimepost send --subject "Hi" --body "Hello" --to "Jane <jane@example.com>"
"""

from __future__ import annotations

from email.utils import parseaddr
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.markup import escape

from mimepost import meta
from mimepost.address import Address
from mimepost.config import get_mail_settings, load_config
from mimepost.exceptions import MimepostError
from mimepost.logging import init_logging
from mimepost.message import Message
from mimepost.transports import create_transport

if TYPE_CHECKING:
    from box import Box

__all__ = ["app"]

app = typer.Typer(
    name=meta.__app_name__,
    help=meta.__description__,
    no_args_is_help=True,
    add_completion=False,
)

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

SubjectOption = Annotated[str, typer.Option("--subject", "-s", help="Message subject.")]
BodyOption = Annotated[str | None, typer.Option("--body", "-b", help="Message body text.")]
BodyFileOption = Annotated[
    Path | None,
    typer.Option("--body-file", help="Read the message body from a UTF-8 file.", exists=True, dir_okay=False),
]
ToOption = Annotated[list[str] | None, typer.Option("--to", "-t", help="Recipient, 'email' or 'Name <email>'.")]
FromOption = Annotated[str | None, typer.Option("--from", help="Author address.")]
FromNameOption = Annotated[str | None, typer.Option("--from-name", help="Display name for the --from address.")]
SenderOption = Annotated[str | None, typer.Option("--sender", help="Submitter address.")]
ReplyToOption = Annotated[str | None, typer.Option("--reply-to", help="Reply-To address.")]
CcOption = Annotated[list[str] | None, typer.Option("--cc", help="Carbon copy recipient.")]
BccOption = Annotated[list[str] | None, typer.Option("--bcc", help="Blind carbon copy recipient.")]
HeaderOption = Annotated[list[str] | None, typer.Option("--header", "-H", help="Custom header as 'Name: value'.")]
AttachOption = Annotated[list[Path] | None, typer.Option("--attach", "-a", help="File to attach.")]
ContentTypeOption = Annotated[str | None, typer.Option("--content-type", help="Body content type, e.g. text/html.")]
CharsetOption = Annotated[
    str | None,
    typer.Option("--charset", help="Body charset, utf-8 when only --content-type is given."),
]
ConfigOption = Annotated[Path | None, typer.Option("--config", "-c", help="Configuration file.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{meta.__app_name__} {meta.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Compose MIME email messages and hand them to a mail transport."""


def _parse_address(value: str) -> Address:
    """Parse ``email`` or ``Name <email>`` into an :class:`Address`."""
    name, email = parseaddr(value)
    if not email:
        raise typer.BadParameter(f"Invalid address: {value!r}")
    return Address(email, name or None)


def _read_body(body: str | None, body_file: Path | None) -> str:
    if body is not None and body_file is not None:
        raise typer.BadParameter("Use either --body or --body-file, not both")
    if body_file is not None:
        return body_file.read_text(encoding="utf-8")
    if body is None:
        raise typer.BadParameter("A message body is required (--body or --body-file)")
    return body


def _build_message(
    *,
    subject: str,
    body: str,
    to: list[str] | None,
    from_: str | None,
    from_name: str | None,
    sender: str | None,
    reply_to: str | None,
    cc: list[str] | None,
    bcc: list[str] | None,
    headers: list[str] | None,
    attachments: list[Path] | None,
    content_type: str | None,
    charset: str | None,
) -> Message:
    """Translate command line options into a :class:`Message`."""
    message = Message(subject, body, settings=get_mail_settings())
    for value in to or []:
        message.add_to(_parse_address(value))
    if from_name and not from_:
        raise typer.BadParameter("--from-name requires --from")
    if from_:
        author = _parse_address(from_)
        message.set_from(Address(author.email, from_name) if from_name else author)
    if sender:
        message.set_sender(_parse_address(sender))
    if reply_to:
        message.set_reply_to(_parse_address(reply_to))
    for value in cc or []:
        message.add_cc(_parse_address(value))
    for value in bcc or []:
        message.add_bcc(_parse_address(value))
    for header in headers or []:
        name, separator, value = header.partition(":")
        if not separator:
            raise typer.BadParameter(f"Header must look like 'Name: value': {header!r}")
        message.add_custom_header(name.strip(), value.strip())
    if charset and not content_type:
        raise typer.BadParameter("--charset requires --content-type")
    if content_type:
        message.set_content_type(content_type, charset or "utf-8")
    for path in attachments or []:
        message.add_attachment(path)
    return message


def _setup(config_path: Path | None, verbose: bool) -> Box:
    config = load_config(config_path)
    init_logging("DEBUG" if verbose else None, config=config)
    return config


@app.command()
def preview(
    subject: SubjectOption,
    body: BodyOption = None,
    body_file: BodyFileOption = None,
    to: ToOption = None,
    from_: FromOption = None,
    from_name: FromNameOption = None,
    sender: SenderOption = None,
    reply_to: ReplyToOption = None,
    cc: CcOption = None,
    bcc: BccOption = None,
    header: HeaderOption = None,
    attach: AttachOption = None,
    content_type: ContentTypeOption = None,
    charset: CharsetOption = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the message a mail agent would receive, without sending it."""
    try:
        _setup(config, verbose)
        message = _build_message(
            subject=subject,
            body=_read_body(body, body_file),
            to=to,
            from_=from_,
            from_name=from_name,
            sender=sender,
            reply_to=reply_to,
            cc=cc,
            bcc=bcc,
            headers=header,
            attachments=attach,
            content_type=content_type,
            charset=charset,
        )
        compiled = message.compile()
    except MimepostError as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(code=1) from e

    console.print(compiled.as_string().replace("\r\n", "\n"), markup=False, highlight=False)


@app.command()
def send(
    subject: SubjectOption,
    body: BodyOption = None,
    body_file: BodyFileOption = None,
    to: ToOption = None,
    from_: FromOption = None,
    from_name: FromNameOption = None,
    sender: SenderOption = None,
    reply_to: ReplyToOption = None,
    cc: CcOption = None,
    bcc: BccOption = None,
    header: HeaderOption = None,
    attach: AttachOption = None,
    content_type: ContentTypeOption = None,
    charset: CharsetOption = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Build the message and send it through the configured transport."""
    try:
        loaded = _setup(config, verbose)
        message = _build_message(
            subject=subject,
            body=_read_body(body, body_file),
            to=to,
            from_=from_,
            from_name=from_name,
            sender=sender,
            reply_to=reply_to,
            cc=cc,
            bcc=bcc,
            headers=header,
            attachments=attach,
            content_type=content_type,
            charset=charset,
        )
        message.set_transport(create_transport(loaded))
        message.send()
    except MimepostError as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]Message sent to {len(message.to)} recipient(s)[/]")


if __name__ == "__main__":  # pragma: no cover - manual entry point
    app()
