"""Notion block models.

Every block type Notion can return maps to exactly one subclass of ``Block``.
The type tag lives on the class, so a block can never carry a payload that
disagrees with its tag. Types we do not know become ``UnknownBlock``.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar

from notion_export.errors import MalformedDocumentError
from notion_export.models.rich_text import FileObject, RichText, parse_file_object, parse_rich_text


@dataclass(kw_only=True)
class Block:
    """A node of a page's block tree."""

    type: ClassVar[str] = ""
    # Whether children are part of this block's rendering (and so worth fetching).
    container: ClassVar[bool] = False

    id: str
    has_children: bool = False
    children: list["Block"] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        """Build the block from its type-specific payload."""
        return cls(**common)


@dataclass(kw_only=True)
class TextBlock(Block):
    """A block whose content is a single rich text array."""

    rich_text: list[RichText] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(rich_text=parse_rich_text(payload.get("rich_text")), **common)


@dataclass(kw_only=True)
class ParagraphBlock(TextBlock):
    type: ClassVar[str] = "paragraph"
    container: ClassVar[bool] = True


@dataclass(kw_only=True)
class HeadingBlock(TextBlock):
    level: ClassVar[int] = 1


@dataclass(kw_only=True)
class Heading1Block(HeadingBlock):
    type: ClassVar[str] = "heading_1"
    level: ClassVar[int] = 1


@dataclass(kw_only=True)
class Heading2Block(HeadingBlock):
    type: ClassVar[str] = "heading_2"
    level: ClassVar[int] = 2


@dataclass(kw_only=True)
class Heading3Block(HeadingBlock):
    type: ClassVar[str] = "heading_3"
    level: ClassVar[int] = 3


@dataclass(kw_only=True)
class CalloutBlock(TextBlock):
    type: ClassVar[str] = "callout"


@dataclass(kw_only=True)
class QuoteBlock(TextBlock):
    type: ClassVar[str] = "quote"
    container: ClassVar[bool] = True


@dataclass(kw_only=True)
class BulletedListItemBlock(TextBlock):
    type: ClassVar[str] = "bulleted_list_item"
    container: ClassVar[bool] = True


@dataclass(kw_only=True)
class NumberedListItemBlock(TextBlock):
    type: ClassVar[str] = "numbered_list_item"
    container: ClassVar[bool] = True


@dataclass(kw_only=True)
class ToggleBlock(TextBlock):
    type: ClassVar[str] = "toggle"
    container: ClassVar[bool] = True


@dataclass(kw_only=True)
class TemplateBlock(TextBlock):
    type: ClassVar[str] = "template"


@dataclass(kw_only=True)
class ToDoBlock(TextBlock):
    type: ClassVar[str] = "to_do"
    container: ClassVar[bool] = True

    checked: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(
            rich_text=parse_rich_text(payload.get("rich_text")),
            checked=bool(payload.get("checked", False)),
            **common,
        )


@dataclass(kw_only=True)
class CodeBlock(TextBlock):
    type: ClassVar[str] = "code"

    language: str = "plain text"
    caption: list[RichText] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(
            rich_text=parse_rich_text(payload.get("rich_text")),
            language=payload.get("language") or "plain text",
            caption=parse_rich_text(payload.get("caption")),
            **common,
        )


@dataclass(kw_only=True)
class ChildPageBlock(Block):
    """Reference to a sub-page. The block id is the sub-page's id."""

    type: ClassVar[str] = "child_page"

    title: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(title=payload.get("title", ""), **common)


@dataclass(kw_only=True)
class ChildDatabaseBlock(Block):
    type: ClassVar[str] = "child_database"

    title: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(title=payload.get("title", ""), **common)


@dataclass(kw_only=True)
class MediaBlock(Block):
    """A block pointing at a hosted or external file."""

    file: FileObject
    caption: list[RichText] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(
            file=parse_file_object(payload),
            caption=parse_rich_text(payload.get("caption")),
            **common,
        )


@dataclass(kw_only=True)
class ImageBlock(MediaBlock):
    type: ClassVar[str] = "image"


@dataclass(kw_only=True)
class VideoBlock(MediaBlock):
    type: ClassVar[str] = "video"


@dataclass(kw_only=True)
class FileBlock(MediaBlock):
    type: ClassVar[str] = "file"


@dataclass(kw_only=True)
class PdfBlock(MediaBlock):
    type: ClassVar[str] = "pdf"


@dataclass(kw_only=True)
class UrlBlock(Block):
    """A block carrying a bare URL rather than a file object."""

    url: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(url=payload["url"], **common)


@dataclass(kw_only=True)
class EmbedBlock(UrlBlock):
    type: ClassVar[str] = "embed"


@dataclass(kw_only=True)
class LinkPreviewBlock(UrlBlock):
    type: ClassVar[str] = "link_preview"


@dataclass(kw_only=True)
class BookmarkBlock(UrlBlock):
    type: ClassVar[str] = "bookmark"

    caption: list[RichText] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(url=payload["url"], caption=parse_rich_text(payload.get("caption")), **common)


@dataclass(kw_only=True)
class EquationBlock(Block):
    type: ClassVar[str] = "equation"

    expression: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(expression=payload.get("expression", ""), **common)


@dataclass(kw_only=True)
class DividerBlock(Block):
    type: ClassVar[str] = "divider"


@dataclass(kw_only=True)
class TableOfContentsBlock(Block):
    type: ClassVar[str] = "table_of_contents"


@dataclass(kw_only=True)
class BreadcrumbBlock(Block):
    type: ClassVar[str] = "breadcrumb"


@dataclass(kw_only=True)
class ColumnListBlock(Block):
    type: ClassVar[str] = "column_list"
    container: ClassVar[bool] = True


@dataclass(kw_only=True)
class ColumnBlock(Block):
    type: ClassVar[str] = "column"
    container: ClassVar[bool] = True


@dataclass(kw_only=True)
class LinkToPageBlock(Block):
    type: ClassVar[str] = "link_to_page"

    # One of "page_id", "database_id", "comment_id".
    target_type: str = ""
    target_id: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        target_type = payload.get("type", "")
        return cls(target_type=target_type, target_id=payload.get(target_type, ""), **common)


@dataclass(kw_only=True)
class TableBlock(Block):
    type: ClassVar[str] = "table"

    table_width: int = 0
    has_column_header: bool = False
    has_row_header: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(
            table_width=payload.get("table_width", 0),
            has_column_header=bool(payload.get("has_column_header", False)),
            has_row_header=bool(payload.get("has_row_header", False)),
            **common,
        )


@dataclass(kw_only=True)
class TableRowBlock(Block):
    type: ClassVar[str] = "table_row"

    cells: list[list[RichText]] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        return cls(cells=[parse_rich_text(cell) for cell in payload.get("cells", ())], **common)


@dataclass(kw_only=True)
class SyncedBlock(Block):
    type: ClassVar[str] = "synced_block"

    # Id of the original block, None if this block is the original.
    synced_from: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any], **common: Any) -> "Block":
        synced_from = payload.get("synced_from") or {}
        return cls(synced_from=synced_from.get("block_id"), **common)


@dataclass(kw_only=True)
class UnsupportedBlock(Block):
    """A block type the Notion API itself does not expose."""

    type: ClassVar[str] = "unsupported"


@dataclass(kw_only=True)
class UnknownBlock(Block):
    """A block type this exporter does not know about."""

    type: ClassVar[str] = "unknown"

    type_name: str = ""


BLOCK_TYPES: dict[str, type[Block]] = {
    cls.type: cls
    for cls in (
        ParagraphBlock,
        Heading1Block,
        Heading2Block,
        Heading3Block,
        CalloutBlock,
        QuoteBlock,
        BulletedListItemBlock,
        NumberedListItemBlock,
        ToggleBlock,
        ToDoBlock,
        CodeBlock,
        ChildPageBlock,
        ChildDatabaseBlock,
        ImageBlock,
        VideoBlock,
        FileBlock,
        PdfBlock,
        DividerBlock,
        EmbedBlock,
        BookmarkBlock,
        EquationBlock,
        TableOfContentsBlock,
        BreadcrumbBlock,
        ColumnListBlock,
        ColumnBlock,
        LinkPreviewBlock,
        TemplateBlock,
        LinkToPageBlock,
        TableBlock,
        TableRowBlock,
        SyncedBlock,
        UnsupportedBlock,
    )
}


def parse_block(data: dict[str, Any]) -> Block:
    """Parse a block object as returned by the Notion API.

    Children are not included by the API; they are attached later by the fetcher.

    Raises:
        MalformedDocumentError: If the block id or a required payload field is missing.
    """
    if "id" not in data:
        msg = f"block without id: {data!r}"
        raise MalformedDocumentError(msg)
    common: dict[str, Any] = {"id": data["id"], "has_children": bool(data.get("has_children"))}

    block_type = data.get("type")
    cls = BLOCK_TYPES.get(block_type or "")
    if cls is None:
        return UnknownBlock(type_name=str(block_type), **common)

    payload = data.get(cls.type) or {}
    try:
        return cls.from_payload(payload, **common)
    except (KeyError, TypeError) as e:
        msg = f"bad {cls.type!r} payload in block {data['id']!r}: {payload!r}"
        raise MalformedDocumentError(msg) from e
