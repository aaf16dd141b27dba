"""Protocols for dependency injection in the exporter."""

from typing import Protocol, runtime_checkable

from notion_export.models.block import Block
from notion_export.models.page import CursorPage, Page, SearchObject


@runtime_checkable
class ApiProtocol(Protocol):
    """Protocol for Notion API clients."""

    async def search(
        self, query: str = "", *, start_cursor: str | None = None
    ) -> CursorPage[SearchObject]:
        """Return one batch of search results."""
        ...

    async def get_page(self, page_id: str) -> Page:
        """Retrieve a single page object."""
        ...

    async def get_block_children(
        self, block_id: str, *, start_cursor: str | None = None
    ) -> CursorPage[Block]:
        """Return one batch of a block's direct children."""
        ...


@runtime_checkable
class WriterProtocol(Protocol):
    """Protocol for file writers used by the exporter."""

    def make_data_file(self, fname_rel: str, *, contents: str) -> None:
        """Write a file to the output directory."""
        ...
