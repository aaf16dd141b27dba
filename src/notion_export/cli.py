"""Command-line interface for notion-export."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from notion_export.api import NotionApi
from notion_export.config import OUTPUT_DIRECTORY, AppConfig
from notion_export.errors import ExportError
from notion_export.exporter import Exporter, ExportStats
from notion_export.logging_config import configure_logging
from notion_export.protocols import ApiProtocol
from notion_export.writer import FileWriter

app = typer.Typer(help="Export every Notion page shared with an integration as markdown.")


async def run_export(writer: FileWriter, api: ApiProtocol) -> ExportStats:
    """Execute the export pipeline.

    Args:
        writer: File writer for the output directory.
        api: API client for fetching Notion data.
    """
    exporter = Exporter(writer)
    stats = await exporter.export_all(api)
    writer.finalize()
    return stats


async def _export(
    config: AppConfig, *, output_dir: Path, dry_run: bool, from_cache: bool
) -> ExportStats:
    writer = FileWriter(output_dir, dry_run=dry_run)
    async with NotionApi(config.notion_api_key, from_cache=from_cache) as api:
        return await run_export(writer, api)


@app.command()
def main(
    save_token: bool = typer.Option(
        False, "--save-token", "-s", help="Prompt for the Notion API key, save it and exit"
    ),
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-o", help="Directory for the exported .md files"),
    ] = OUTPUT_DIRECTORY,
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write anything"),
    cache: bool = typer.Option(
        False,
        "--cache",
        "-C",
        help="Cache requests and use cache. Returns stale data, but prevents ratelimits "
        "while developing",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Export all pages, or store the API key with --save-token."""
    configure_logging(verbose=verbose)

    try:
        if save_token:
            api_key = typer.prompt("Notion api key", hide_input=True)
            AppConfig(notion_api_key=api_key).save_user_config()
            return

        config = AppConfig.load_user_config()
        asyncio.run(_export(config, output_dir=output_dir, dry_run=dry_run, from_cache=cache))
    except ExportError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
