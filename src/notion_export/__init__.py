"""Notion to markdown export tools."""

from notion_export.api import NotionApi
from notion_export.exporter import Exporter, ExportStats
from notion_export.protocols import ApiProtocol, WriterProtocol
from notion_export.writer import FileWriter

__all__ = ["ApiProtocol", "ExportStats", "Exporter", "FileWriter", "NotionApi", "WriterProtocol"]
