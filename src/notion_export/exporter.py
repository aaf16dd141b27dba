"""Export all Notion pages visible to the integration as markdown files."""

from dataclasses import dataclass

from loguru import logger

from notion_export.config import UNKNOWN_TITLE
from notion_export.core.title_cache import PageTitleCache
from notion_export.core.tree.fetcher import fetch_block_tree, iterate_cursor
from notion_export.core.tree.markdown import render_blocks
from notion_export.errors import MalformedDocumentError, TransportError
from notion_export.models.block import Block, ChildPageBlock
from notion_export.models.page import CursorPage, Database, Page, SearchObject
from notion_export.protocols import ApiProtocol, WriterProtocol


@dataclass
class ExportStats:
    """Summary of an export run."""

    pages_exported: int = 0
    pages_failed: int = 0
    databases_seen: int = 0
    others_seen: int = 0


def sanitize_title(title: str) -> str:
    """Turn a page title into a filename stem (path separators become dashes)."""
    return title.replace("/", "-")


def _require_title(page: Page) -> str:
    if page.title is None:
        msg = f"page {page.id!r} has no title property"
        raise MalformedDocumentError(msg)
    return page.title


async def _resolve_child_page_titles(blocks: list[Block], title_cache: PageTitleCache) -> None:
    """Fill in child page references that came without a title.

    A reference whose page cannot be fetched keeps the parent exportable and
    links to UNKNOWN_TITLE instead.
    """
    todo: list[Block] = list(blocks)
    while todo:
        block = todo.pop()
        if isinstance(block, ChildPageBlock) and not block.title.strip():
            try:
                block.title = await title_cache.resolve(block.id)
            except TransportError as e:
                logger.warning("Cannot resolve title of child page {!r}: {}", block.id, e)
                block.title = UNKNOWN_TITLE
        todo.extend(block.children)


class Exporter:
    """Search for every page, render it, and hand the text to the writer.

    One page failing to fetch or render is logged and skipped. Failing to
    search, to read a page's own metadata, or to write output ends the run.
    """

    def __init__(self, writer: WriterProtocol) -> None:
        self._writer = writer
        self.stats = ExportStats()

    async def export_all(self, api: ApiProtocol) -> ExportStats:
        """Page through an empty-query search and export every page found."""
        title_cache = PageTitleCache(api)

        async def fetch(cursor: str | None) -> CursorPage[SearchObject]:
            return await api.search("", start_cursor=cursor)

        async for batch in iterate_cursor(fetch):
            for obj in batch:
                if isinstance(obj, Page):
                    title = _require_title(obj)
                    logger.info("Page: {} {}", title, obj.url)
                    await self.process_page(api, obj.id, title_cache)
                elif isinstance(obj, Database):
                    self.stats.databases_seen += 1
                    logger.info("Database: {} {}", obj.title, obj.url)
                else:
                    self.stats.others_seen += 1
                    logger.info("{}", obj.object_type.capitalize())

        log = logger.warning if self.stats.pages_failed else logger.info
        log(
            "Exported {} pages, {} failed; skipped {} databases and {} other objects",
            self.stats.pages_exported,
            self.stats.pages_failed,
            self.stats.databases_seen,
            self.stats.others_seen,
        )
        return self.stats

    async def process_page(
        self, api: ApiProtocol, page_id: str, title_cache: PageTitleCache
    ) -> None:
        """Fetch, render and write a single page."""
        page = await api.get_page(page_id)
        page_title = _require_title(page)

        try:
            blocks = await fetch_block_tree(api, page.id)
            await _resolve_child_page_titles(blocks, title_cache)
            page_text = render_blocks(blocks)
        except (TransportError, MalformedDocumentError) as e:
            self.stats.pages_failed += 1
            logger.warning("Failed for {} with error {}", page_title, e)
            return

        self._writer.make_data_file(f"{sanitize_title(page_title)}.md", contents=page_text)
        self.stats.pages_exported += 1
