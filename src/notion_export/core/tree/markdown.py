"""Render Notion block trees as markdown (Obsidian flavoured).

Each block type has a function returning its fragment: a list of literal text
pieces and child blocks, in output order. ``render_block`` walks fragments with
an explicit stack, so deeply nested pages do not hit the recursion limit.

List items, quotes and to-dos wrap their children in START/END marker lines.
These are not valid markdown; they make nesting visible in the flat output.
"""

import io
from collections.abc import Callable, Iterable
from typing import Any, TextIO

from notion_export.core.tree.inline import (
    internal_embed,
    internal_link,
    render_file_object,
    render_rich_text,
)
from notion_export.models.block import (
    Block,
    BookmarkBlock,
    BreadcrumbBlock,
    BulletedListItemBlock,
    CalloutBlock,
    ChildDatabaseBlock,
    ChildPageBlock,
    CodeBlock,
    ColumnBlock,
    ColumnListBlock,
    DividerBlock,
    EmbedBlock,
    EquationBlock,
    FileBlock,
    Heading1Block,
    Heading2Block,
    Heading3Block,
    HeadingBlock,
    ImageBlock,
    LinkPreviewBlock,
    LinkToPageBlock,
    MediaBlock,
    NumberedListItemBlock,
    ParagraphBlock,
    PdfBlock,
    QuoteBlock,
    SyncedBlock,
    TableBlock,
    TableOfContentsBlock,
    TableRowBlock,
    TemplateBlock,
    ToDoBlock,
    ToggleBlock,
    UnknownBlock,
    UnsupportedBlock,
    UrlBlock,
    VideoBlock,
)

Fragment = list[str | Block]


def _with_children(block: Block, head: str, name: str) -> Fragment:
    return [head, f"START {name} CHILDREN:\n", *block.children, f"END {name} CHILDREN:\n"]


def _paragraph(block: ParagraphBlock) -> Fragment:
    return [f"{render_rich_text(block.rich_text)}\n", *block.children]


def _heading(block: HeadingBlock) -> Fragment:
    return [f"\n{'#' * block.level} {render_rich_text(block.rich_text)}\n\n"]


def _callout(block: CalloutBlock) -> Fragment:
    # TODO: render the callout icon once we map Notion emoji/icons to admonition types.
    # Split on "\n" only; other Unicode line breaks stay inside the quoted line.
    lines = [line.removesuffix("\r") for line in render_rich_text(block.rich_text).split("\n")]
    if lines[-1] == "":
        lines.pop()
    return ["> [!info]\n" + "".join(f"> {line}\n" for line in lines) + "\n"]


def _quote(block: QuoteBlock) -> Fragment:
    return _with_children(block, f"> {render_rich_text(block.rich_text)}\n", "QUOTE")


def _bulleted(block: BulletedListItemBlock) -> Fragment:
    return _with_children(block, f"* {render_rich_text(block.rich_text)}\n", "BULLET")


def _numbered(block: NumberedListItemBlock) -> Fragment:
    return _with_children(block, f"1. {render_rich_text(block.rich_text)}\n", "NUMBERED")


def _toggle(block: ToggleBlock) -> Fragment:
    summary = render_rich_text(block.rich_text)
    return [f"<details> <summary>{summary}</summary> \n", *block.children, "</details>\n\n"]


def _to_do(block: ToDoBlock) -> Fragment:
    checkbox = "[x]" if block.checked else "[ ]"
    return _with_children(block, f"- {checkbox} {render_rich_text(block.rich_text)}\n", "TODO")


def _code(block: CodeBlock) -> Fragment:
    # Notion languages look like "Python" or "plain text"; fences want one lower-case word.
    language = "".join(block.language.lower().split())
    content = render_rich_text(block.rich_text)
    return [f"\n```{language}\n{content}\n```\n\n"]


def _child_page(block: ChildPageBlock) -> Fragment:
    return [f"Child page: {internal_link(None, block.title)}\n"]


def _child_database(block: ChildDatabaseBlock) -> Fragment:
    return [f"Child database: {block.title}\n"]


def _media(block: MediaBlock) -> Fragment:
    return [internal_embed(None, render_file_object(block.file)) + "\n"]


def _url(block: UrlBlock) -> Fragment:
    return [internal_embed(None, block.url) + "\n"]


def _bookmark(block: BookmarkBlock) -> Fragment:
    caption = render_rich_text(block.caption)
    return [f"caption {caption} \n{internal_embed(None, block.url)}\n"]


def _equation(block: EquationBlock) -> Fragment:
    return [f"Equation {block.expression}\n"]


def _divider(block: DividerBlock) -> Fragment:
    return ["----\n"]


def _columns(block: ColumnListBlock | ColumnBlock) -> Fragment:
    # Columns are laid out one after the other; there is no side-by-side markdown.
    if not block.children:
        return ["COLUMN LIST\n\n", "COLUMN LIST END\n\n"]
    fragment: Fragment = []
    for child in block.children:
        fragment += ["COLUMN LIST\n\n", child, "COLUMN LIST END\n\n"]
    return fragment


def _template(block: TemplateBlock) -> Fragment:
    return [f"\nTEMPLATE {render_rich_text(block.rich_text)}\n"]


def _placeholder(label: str) -> Callable[[Block], Fragment]:
    def render(block: Block) -> Fragment:
        return [f"\n{label}\n"]

    return render


_RENDERERS: dict[type[Block], Callable[[Any], Fragment]] = {
    ParagraphBlock: _paragraph,
    Heading1Block: _heading,
    Heading2Block: _heading,
    Heading3Block: _heading,
    CalloutBlock: _callout,
    QuoteBlock: _quote,
    BulletedListItemBlock: _bulleted,
    NumberedListItemBlock: _numbered,
    ToggleBlock: _toggle,
    ToDoBlock: _to_do,
    CodeBlock: _code,
    ChildPageBlock: _child_page,
    ChildDatabaseBlock: _child_database,
    ImageBlock: _media,
    VideoBlock: _media,
    FileBlock: _media,
    PdfBlock: _media,
    DividerBlock: _divider,
    EmbedBlock: _url,
    BookmarkBlock: _bookmark,
    EquationBlock: _equation,
    TableOfContentsBlock: _placeholder("TABLE OF CONTENTS"),
    BreadcrumbBlock: _placeholder("BREADCRUMB"),
    ColumnListBlock: _columns,
    ColumnBlock: _columns,
    LinkPreviewBlock: _url,
    TemplateBlock: _template,
    LinkToPageBlock: _placeholder("LINK TO PAGE"),
    TableBlock: _placeholder("TABLE"),
    TableRowBlock: _placeholder("TABLE ROW"),
    SyncedBlock: _placeholder("SYNCED BLOCK"),
    UnsupportedBlock: _placeholder("UNSUPPORTED"),
    UnknownBlock: _placeholder("UNKNOWN"),
}


def render_block(block: Block, out: TextIO) -> None:
    """Append the markdown for a block, and its children where rendered, to ``out``.

    Block types without a renderer fall back to the UNKNOWN placeholder.
    Errors raised by ``out.write`` propagate.
    """
    stack: Fragment = [block]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.write(item)
            continue
        render = _RENDERERS.get(type(item), _RENDERERS[UnknownBlock])
        stack.extend(reversed(render(item)))


def render_blocks(blocks: Iterable[Block]) -> str:
    """Render a sequence of blocks (e.g. a page's top-level children) to a string."""
    out = io.StringIO()
    for block in blocks:
        render_block(block, out)
    return out.getvalue()
