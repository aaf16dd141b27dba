"""Inline content models: rich text spans and file references."""

from dataclasses import dataclass
from typing import Any

from notion_export.errors import MalformedDocumentError


@dataclass(frozen=True)
class RichText:
    """A single styled run of text. Only the plain text is rendered."""

    plain_text: str
    href: str | None = None


@dataclass(frozen=True)
class HostedFile:
    """A file uploaded to Notion. The URL expires after about an hour."""

    url: str
    expiry_time: str | None = None


@dataclass(frozen=True)
class ExternalFile:
    """A file linked from elsewhere, with a stable URL."""

    url: str


FileObject = HostedFile | ExternalFile


def parse_rich_text(data: list[dict[str, Any]] | None) -> list[RichText]:
    """Parse a Notion rich text array."""
    return [
        RichText(plain_text=span.get("plain_text", ""), href=span.get("href"))
        for span in data or ()
    ]


def parse_file_object(data: dict[str, Any]) -> FileObject:
    """Parse a Notion file object (hosted or external).

    Raises:
        MalformedDocumentError: If the file type is unknown or the URL is missing.
    """
    file_type = data.get("type")
    try:
        if file_type == "file":
            return HostedFile(url=data["file"]["url"], expiry_time=data["file"].get("expiry_time"))
        if file_type == "external":
            return ExternalFile(url=data["external"]["url"])
    except (KeyError, TypeError) as e:
        msg = f"file object without url: {data!r}"
        raise MalformedDocumentError(msg) from e
    msg = f"unexpected file object type: {file_type!r}"
    raise MalformedDocumentError(msg)
