"""Tests for Exporter: search pagination, per-page export and failure handling."""

import asyncio

import pytest

from notion_export.config import UNKNOWN_TITLE
from notion_export.core.title_cache import PageTitleCache
from notion_export.errors import MalformedDocumentError, SinkWriteError, TransportError
from notion_export.exporter import Exporter, sanitize_title
from notion_export.models.block import Block, ChildPageBlock, ParagraphBlock, parse_block
from notion_export.models.page import CursorPage, Database, OtherObject, Page
from notion_export.models.rich_text import RichText
from tests.unit.fakes import FakeApi, FakeWriter


def _single_page_api(title: str, text: str) -> FakeApi:
    api = FakeApi()
    api.add_page(Page(id="page-1", title=title))
    api.add_children("page-1", [ParagraphBlock(id="b1", rich_text=[RichText(text)])])
    api.add_search_results([Page(id="page-1", title=title)])
    return api


def test_sanitize_title_replaces_path_separator() -> None:
    assert sanitize_title("A/B/C") == "A-B-C"
    assert sanitize_title("Plain") == "Plain"


def test_page_with_slash_in_title_exports_to_dashed_filename() -> None:
    writer = FakeWriter()
    api = _single_page_api("A/B", "hi")

    stats = asyncio.run(Exporter(writer).export_all(api))

    assert writer.files == {"A-B.md": "hi\n"}
    assert stats.pages_exported == 1


def test_export_renders_nested_tree(fake_api: FakeApi) -> None:
    writer = FakeWriter()

    asyncio.run(Exporter(writer).export_all(fake_api))

    assert writer.files["Notes.md"] == (
        "\n# Notes\n\n"
        "* first\n"
        "START BULLET CHILDREN:\n"
        "- [x] nested\n"
        "START TODO CHILDREN:\n"
        "END TODO CHILDREN:\n"
        "END BULLET CHILDREN:\n"
        "last\n"
    )


def test_export_pages_through_search_results() -> None:
    api = FakeApi()
    for page_id in ("p1", "p2"):
        api.add_page(Page(id=page_id, title=page_id.upper()))
    api.add_search_results(
        [Page(id="p1", title="P1"), Database(id="db", title="Tasks")],
        [OtherObject("user"), Page(id="p2", title="P2")],
    )
    writer = FakeWriter()

    stats = asyncio.run(Exporter(writer).export_all(api))

    assert sorted(writer.files) == ["P1.md", "P2.md"]
    assert (stats.pages_exported, stats.databases_seen, stats.others_seen) == (2, 1, 1)
    assert [c[2] for c in api.calls_to("search")] == [None, "search#1"]


def test_database_is_logged_but_not_exported(log_messages: list[str]) -> None:
    api = FakeApi()
    api.add_search_results([Database(id="ab-cd", title="Tasks")])
    writer = FakeWriter()

    asyncio.run(Exporter(writer).export_all(api))

    assert writer.files == {}
    assert "Database: Tasks http://notion.so/abcd" in log_messages


def test_render_failure_is_logged_and_run_continues(log_messages: list[str]) -> None:
    api = FakeApi()
    api.add_page(Page(id="bad", title="Broken"))
    api.add_page(Page(id="good", title="Fine"))
    api.add_children("good", [ParagraphBlock(id="b", rich_text=[RichText("ok")])])
    api.failing_children.add("bad")
    api.add_search_results([Page(id="bad", title="Broken"), Page(id="good", title="Fine")])
    writer = FakeWriter()

    stats = asyncio.run(Exporter(writer).export_all(api))

    assert writer.files == {"Fine.md": "ok\n"}
    assert stats.pages_failed == 1
    assert any(m.startswith("Failed for Broken") for m in log_messages)


def test_page_metadata_failure_is_fatal() -> None:
    api = FakeApi()
    api.add_search_results([Page(id="gone", title="Gone")])

    with pytest.raises(TransportError):
        asyncio.run(Exporter(FakeWriter()).export_all(api))


def test_search_result_without_title_is_fatal() -> None:
    api = FakeApi()
    api.add_search_results([Page(id="p", title=None)])

    with pytest.raises(MalformedDocumentError, match="no title"):
        asyncio.run(Exporter(FakeWriter()).export_all(api))


def test_blank_child_page_titles_are_resolved_through_cache() -> None:
    api = FakeApi()
    api.add_page(Page(id="page-1", title="Parent"))
    api.add_page(Page(id="sub", title="Resolved"))
    api.add_children(
        "page-1",
        [ChildPageBlock(id="sub", title=""), ChildPageBlock(id="sub", title="")],
    )
    writer = FakeWriter()
    exporter = Exporter(writer)

    asyncio.run(exporter.process_page(api, "page-1", PageTitleCache(api)))

    assert writer.files["Parent.md"] == "Child page: [[Resolved]]\n" * 2
    assert api.calls_to("get_page") == [("get_page", "page-1", None), ("get_page", "sub", None)]


class _FailingWriter(FakeWriter):
    def make_data_file(self, fname_rel: str, *, contents: str) -> None:
        msg = f"Cannot write {fname_rel!r}: disk full"
        raise SinkWriteError(msg)


def test_write_failure_ends_the_run() -> None:
    api = FakeApi()
    for page_id in ("a", "b"):
        api.add_page(Page(id=page_id, title=page_id.upper()))
    api.add_search_results([Page(id="a", title="A"), Page(id="b", title="B")])
    exporter = Exporter(_FailingWriter())

    with pytest.raises(SinkWriteError, match="disk full"):
        asyncio.run(exporter.export_all(api))
    assert api.calls_to("get_page") == [("get_page", "a", None)]
    assert exporter.stats.pages_failed == 0


class _MalformedChildrenApi(FakeApi):
    """Serves a block without an id for one page, parsed the way NotionApi parses it."""

    async def get_block_children(
        self, block_id: str, *, start_cursor: str | None = None
    ) -> CursorPage[Block]:
        if block_id != "bad":
            return await super().get_block_children(block_id, start_cursor=start_cursor)
        self.calls.append(("get_block_children", block_id, start_cursor))
        data = {
            "object": "list",
            "results": [{"object": "block", "type": "paragraph", "paragraph": {}}],
            "has_more": False,
        }
        return CursorPage.from_api(data, parse_block)


def test_malformed_block_fails_only_that_page(log_messages: list[str]) -> None:
    api = _MalformedChildrenApi()
    api.add_page(Page(id="bad", title="Broken"))
    api.add_page(Page(id="good", title="Fine"))
    api.add_children("good", [ParagraphBlock(id="b", rich_text=[RichText("ok")])])
    api.add_search_results([Page(id="bad", title="Broken"), Page(id="good", title="Fine")])
    writer = FakeWriter()

    stats = asyncio.run(Exporter(writer).export_all(api))

    assert writer.files == {"Fine.md": "ok\n"}
    assert (stats.pages_exported, stats.pages_failed) == (1, 1)
    assert any(
        m.startswith("Failed for Broken") and "block without id" in m for m in log_messages
    )


def test_unreachable_child_page_links_to_unknown_title(log_messages: list[str]) -> None:
    api = FakeApi()
    api.add_page(Page(id="page-1", title="Parent"))
    api.add_children("page-1", [ChildPageBlock(id="gone", title=" ")])
    writer = FakeWriter()
    exporter = Exporter(writer)

    asyncio.run(exporter.process_page(api, "page-1", PageTitleCache(api)))

    assert writer.files["Parent.md"] == f"Child page: [[{UNKNOWN_TITLE}]]\n"
    assert exporter.stats.pages_failed == 0
    assert any("Cannot resolve title of child page 'gone'" in m for m in log_messages)


def test_child_page_with_empty_title_links_to_unknown_title() -> None:
    api = FakeApi()
    api.add_page(Page(id="page-1", title="Parent"))
    api.add_page(Page(id="sub", title=""))
    api.add_children("page-1", [ChildPageBlock(id="sub", title="")])
    writer = FakeWriter()

    asyncio.run(Exporter(writer).process_page(api, "page-1", PageTitleCache(api)))

    assert writer.files["Parent.md"] == f"Child page: [[{UNKNOWN_TITLE}]]\n"
