"""Fetch block trees through the cursor-paginated Notion API."""

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TypeVar

from loguru import logger

from notion_export.models.block import Block
from notion_export.models.page import CursorPage
from notion_export.protocols import ApiProtocol

T = TypeVar("T")


async def iterate_cursor(
    fetch: Callable[[str | None], Awaitable[CursorPage[T]]],
) -> AsyncIterator[list[T]]:
    """Yield each batch of a paginated listing, in the order the server returns them.

    ``fetch`` is first called with None, then with each continuation cursor, until
    a batch arrives without one. There is no guard against a server that never
    stops returning cursors.

    Args:
        fetch: Coroutine function returning the batch that starts at the given cursor.

    Yields:
        The results of each batch.
    """
    cursor: str | None = None
    while True:
        batch = await fetch(cursor)
        yield batch.results
        if not batch.next_cursor:
            return
        cursor = batch.next_cursor


async def fetch_all_children(api: ApiProtocol, block_id: str) -> list[Block]:
    """Return all direct children of a block (or page), across all result batches.

    Any API error aborts the fetch; batches fetched so far are discarded.
    """

    async def fetch(cursor: str | None) -> CursorPage[Block]:
        return await api.get_block_children(block_id, start_cursor=cursor)

    children: list[Block] = []
    async for batch in iterate_cursor(fetch):
        children.extend(batch)
    return children


async def fetch_block_tree(api: ApiProtocol, block_id: str) -> list[Block]:
    """Fetch the children of ``block_id`` and, below them, every container's children.

    Only container blocks (those whose rendering includes their children) are
    descended into; child pages, tables and synced blocks are left as leaves.

    Returns:
        The top-level blocks, with ``children`` filled in.
    """
    top_level = await fetch_all_children(api, block_id)
    num_fetches = 1

    # Pre-order, same order as shown in the UI. A work list instead of recursion,
    # since nesting depth is up to the page author.
    todo: list[Block] = [b for b in top_level if b.container and b.has_children]
    while todo:
        block = todo.pop(0)
        block.children = await fetch_all_children(api, block.id)
        num_fetches += 1
        todo = [b for b in block.children if b.container and b.has_children] + todo

    logger.debug("Fetched block tree of {!r} with {} children listings", block_id, num_fetches)
    return top_level
