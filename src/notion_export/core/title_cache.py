"""Per-run memo of page id -> title."""

from loguru import logger

from notion_export.config import UNKNOWN_TITLE
from notion_export.protocols import ApiProtocol


class PageTitleCache:
    """Resolve page titles, fetching each page at most once per lookup miss.

    Entries are never invalidated and failures are not cached. Two overlapping
    ``resolve`` calls for the same uncached id both fetch; callers on a single
    task never overlap.
    """

    def __init__(self, api: ApiProtocol) -> None:
        self._api = api
        self._page_to_title: dict[str, str] = {}

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._page_to_title

    def __len__(self) -> int:
        return len(self._page_to_title)

    async def resolve(self, page_id: str) -> str:
        """Return the title of a page, falling back to UNKNOWN_TITLE for blank titles."""
        title = self._page_to_title.get(page_id)
        if title is not None:
            return title

        page = await self._api.get_page(page_id)
        # An empty title array gives "", which would render as an empty link.
        title = page.title if page.title and page.title.strip() else UNKNOWN_TITLE
        logger.debug("Resolved title of page {!r}: {!r}", page_id, title)
        self._page_to_title[page_id] = title
        return title
