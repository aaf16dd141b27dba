"""Render inline content: rich text spans, file references and links."""

from collections.abc import Iterable

from notion_export.models.rich_text import ExternalFile, FileObject, HostedFile, RichText


def render_rich_text(rich_text: Iterable[RichText]) -> str:
    """Concatenate the plain text of all spans, in order, dropping all styling."""
    return "".join(span.plain_text for span in rich_text)


def render_file_object(file_object: FileObject) -> str:
    """Return the URL of a hosted or external file.

    Hosted file URLs are signed and expire, so exported links to them go stale.
    """
    if isinstance(file_object, HostedFile):
        return file_object.url
    if isinstance(file_object, ExternalFile):
        return file_object.url
    msg = f"not a file object: {file_object!r}"
    raise TypeError(msg)


def internal_embed(text: str | None, link: str) -> str:
    if text:
        return f"![[{link}|{text}]]"
    return f"![[{link}]]"


def internal_link(text: str | None, link: str) -> str:
    if text:
        return f"[[{link}|{text}]]"
    return f"[[{link}]]"
