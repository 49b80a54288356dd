"""Plain-text message composition with :class:`mimepost.Message`."""

from __future__ import annotations

from mimepost import Address, Message


def build_plain_message() -> None:
    """Construct a plain-text message and print what a transport would receive."""
    compiled = (
        Message("Plain Greetings", "Hello from mimepost!\nThis message has no attachments.")
        .add_to(Address("user@example.com", "Jane Doe"))
        .set_from(Address("sender@example.com"))
        .compile()
    )
    print(compiled.as_string())


if __name__ == "__main__":  # pragma: no cover - manual example
    build_plain_message()
