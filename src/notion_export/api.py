"""Async Notion API client with optional caching."""

import hashlib
import json
from pathlib import Path
from types import TracebackType
from typing import Any

import httpx
from loguru import logger

from notion_export.config import API_CACHE_PREFIX, NOTION_API_URL, NOTION_VERSION, PAGE_SIZE
from notion_export.errors import TransportError
from notion_export.models.block import Block, parse_block
from notion_export.models.page import CursorPage, Page, SearchObject, parse_search_object


class NotionApi:
    """Encapsulated Notion API with caching.

    Only the three read endpoints the exporter needs are wrapped. The client is
    an async context manager; leaving the context closes the HTTP connection pool.
    """

    def __init__(
        self,
        api_key: str,
        *,
        from_cache: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.from_cache = from_cache
        self.client = httpx.AsyncClient(
            base_url=NOTION_API_URL,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Notion-Version": NOTION_VERSION,
            },
            timeout=httpx.Timeout(30.0),
            transport=transport,
        )

        self.api_cache_prefix: str | None = API_CACHE_PREFIX

        if not self.from_cache:
            # We could imagine "write-only" cache mode, but for now, we do not bother.
            self.api_cache_prefix = None

        logger.debug(
            "API ready: from_cache {!r}, api_cache_prefix {!r}",
            self.from_cache,
            self.api_cache_prefix,
        )

        if self.api_cache_prefix:
            Path(self.api_cache_prefix).parent.mkdir(parents=True, exist_ok=True)

    async def __aenter__(self) -> "NotionApi":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Invoke Notion API, return json.

        Raises:
            TransportError: On network errors, HTTP error statuses and Notion error objects.
        """
        name_last = f"{method.lower()}-{path.strip('/')}"
        args = {**(params or {}), **(body or {})}
        if args:
            params_str = json.dumps(args, sort_keys=True, separators=(",", ":"))
            if len(params_str) > 64:
                params_str = hashlib.sha1(params_str.encode("utf-8")).hexdigest()
            name_last += "--" + params_str

        log_name: str | None = None
        if self.api_cache_prefix:
            log_name = self.api_cache_prefix + name_last.replace("/", "--")

            if self.from_cache and Path(log_name).exists():
                logger.debug("Filled from cache: {!r}", log_name)
                with open(log_name, encoding="utf-8") as f:
                    return json.load(f)  # type: ignore[no-any-return]

        logger.debug("Making request: {} {!r} {}", method, path, repr(args)[:32])

        try:
            r = await self.client.request(method, path, params=params, json=body)
        except httpx.HTTPError as e:
            msg = f"API call failed: ({method} {path!r}) -> {e!r}"
            raise TransportError(msg) from e

        try:
            rv: dict[str, Any] = r.json()
        except ValueError as e:
            msg = f"API call failed: ({method} {path!r}) -> HTTP {r.status_code}, not json"
            raise TransportError(msg) from e

        if r.is_error or rv.get("object") == "error":
            msg = (
                f"API call failed: ({method} {path!r}) -> "
                f"(HTTP {r.status_code}, {rv.get('code')!r}, {rv.get('message')!r})"
            )
            raise TransportError(msg)

        if self.api_cache_prefix and log_name:
            with open(log_name, "w", encoding="utf-8") as f:
                f.write(r.text)

        return rv

    async def search(
        self, query: str = "", *, start_cursor: str | None = None
    ) -> CursorPage[SearchObject]:
        """Search pages and databases shared with the integration."""
        body: dict[str, Any] = {"query": query, "page_size": PAGE_SIZE}
        if start_cursor:
            body["start_cursor"] = start_cursor
        data = await self.call("POST", "/search", body=body)
        return CursorPage.from_api(data, parse_search_object)

    async def get_page(self, page_id: str) -> Page:
        data = await self.call("GET", f"/pages/{page_id}")
        return Page.from_api(data)

    async def get_block_children(
        self, block_id: str, *, start_cursor: str | None = None
    ) -> CursorPage[Block]:
        """Fetch one batch of a block's direct children (a page is a block, too)."""
        params: dict[str, Any] = {"page_size": PAGE_SIZE}
        if start_cursor:
            params["start_cursor"] = start_cursor
        data = await self.call("GET", f"/blocks/{block_id}/children", params=params)
        return CursorPage.from_api(data, parse_block)
