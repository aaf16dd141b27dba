"""Notion top-level objects: pages, databases and paginated result lists."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from notion_export.errors import MalformedDocumentError
from notion_export.models.rich_text import parse_rich_text

T = TypeVar("T")


def notion_id_to_url(notion_id: str) -> str:
    """Return the web URL of a page or database."""
    return f"http://notion.so/{notion_id.replace('-', '')}"


def _object_id(data: dict[str, Any]) -> str:
    try:
        return str(data["id"])
    except KeyError as e:
        msg = f"{data.get('object')!r} object without id"
        raise MalformedDocumentError(msg) from e


@dataclass(frozen=True)
class Page:
    """A Notion page. ``title`` is None when the page has no title property."""

    id: str
    title: str | None = None

    @property
    def url(self) -> str:
        return notion_id_to_url(self.id)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Page":
        title: str | None = None
        # Exactly one property of a page has type "title"; its name varies.
        for prop in (data.get("properties") or {}).values():
            if prop.get("type") == "title":
                title = "".join(span.plain_text for span in parse_rich_text(prop.get("title")))
                break
        return cls(id=_object_id(data), title=title)


@dataclass(frozen=True)
class Database:
    """A Notion database. Databases are listed but never exported."""

    id: str
    title: str = ""

    @property
    def url(self) -> str:
        return notion_id_to_url(self.id)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Database":
        title = "".join(span.plain_text for span in parse_rich_text(data.get("title")))
        return cls(id=_object_id(data), title=title)


@dataclass(frozen=True)
class OtherObject:
    """Any other search result ("block", "list", "user" or "error")."""

    object_type: str


SearchObject = Page | Database | OtherObject


def parse_search_object(data: dict[str, Any]) -> SearchObject:
    """Classify one search result by its ``object`` tag."""
    object_type = str(data.get("object", "error"))
    if object_type == "page":
        return Page.from_api(data)
    if object_type == "database":
        return Database.from_api(data)
    return OtherObject(object_type=object_type)


@dataclass(frozen=True)
class CursorPage(Generic[T]):
    """One batch of a cursor-paginated API listing.

    A missing (or empty) ``next_cursor`` means this is the last batch.
    """

    results: list[T] = field(default_factory=list)
    next_cursor: str | None = None

    @classmethod
    def from_api(
        cls, data: dict[str, Any], parse: Callable[[dict[str, Any]], T]
    ) -> "CursorPage[T]":
        if data.get("object") != "list" or not isinstance(data.get("results"), list):
            msg = f"expected a list object, got {data.get('object')!r}"
            raise MalformedDocumentError(msg)
        next_cursor = data.get("next_cursor") if data.get("has_more", True) else None
        return cls(
            results=[parse(item) for item in data["results"]],
            next_cursor=next_cursor or None,
        )
