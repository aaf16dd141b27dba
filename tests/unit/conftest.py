"""Shared test fixtures."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from notion_export.models.block import (
    BulletedListItemBlock,
    Heading1Block,
    ParagraphBlock,
    ToDoBlock,
)
from notion_export.models.page import Page
from notion_export.models.rich_text import RichText
from tests.unit.fakes import FakeApi


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def token_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    """Point the token file search at a temporary directory, with no env override."""
    paths = [tmp_path / "config" / "token.txt", tmp_path / "secret" / "token.txt"]
    monkeypatch.setattr("notion_export.config.API_TOKEN_FILES", paths)
    monkeypatch.delenv("NOTION_API_KEY", raising=False)
    return paths


@pytest.fixture
def fake_api() -> FakeApi:
    """Return a FakeApi holding one page with a small nested block tree.

    page-1 ("Notes")
        heading "Notes"
        bullet "first" (has children)
            to-do "nested" (checked)
        paragraph "last"
    """
    api = FakeApi()
    api.add_page(Page(id="page-1", title="Notes"))
    bullet = BulletedListItemBlock(id="b2", has_children=True, rich_text=[RichText("first")])
    api.add_children(
        "page-1",
        [Heading1Block(id="b1", rich_text=[RichText("Notes")]), bullet],
        [ParagraphBlock(id="b4", rich_text=[RichText("last")])],
    )
    api.add_children("b2", [ToDoBlock(id="b3", checked=True, rich_text=[RichText("nested")])])
    api.add_search_results([Page(id="page-1", title="Notes")])
    return api
