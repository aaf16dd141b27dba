"""File writer for exported pages that tracks what changed."""

from pathlib import Path

from loguru import logger

from notion_export.errors import SinkWriteError


class FileWriter:
    """Write output files in a smart way.

    - Create or overwrite; never append.
    - Do not touch files whose contents are the same, so mtimes stay put.
    - Keep a list of written files, for statistics and to spot two pages that
      map to the same filename.
    """

    def __init__(self, datadir: str | Path, dry_run: bool) -> None:
        self.datadir = str(Path(datadir).resolve())
        self.dry_run = dry_run

        if not dry_run:
            try:
                Path(self.datadir).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                msg = f"Cannot create output directory {self.datadir!r}: {e}"
                raise SinkWriteError(msg) from e

        logger.debug("Writer ready, datadir {!r}, dry_run {!r}", datadir, dry_run)
        # Files written this run. Set of absolute paths.
        self._files_made: set[str] = set()

        # Change list, list of (action, filename) tuples.
        self._updates: list[tuple[str, str]] = []

        self._num_same = 0
        self._finalized = False

    def make_data_file(self, fname_rel: str, *, contents: str) -> None:
        """Write contents to a file relative to the output directory.

        Args:
            fname_rel: Path relative to output directory.
            contents: Text to write, encoded as UTF-8.

        Raises:
            ValueError: If the path is absolute, escapes the output directory or is
                not a markdown file.
            SinkWriteError: If the file cannot be written.
        """
        if Path(fname_rel).is_absolute():
            msg = f"must be relative: {fname_rel!r}"
            raise ValueError(msg)

        fname = str((Path(self.datadir) / fname_rel).resolve())
        if not fname.startswith(self.datadir + "/"):
            msg = f"Path escapes datadir: {fname!r}"
            raise ValueError(msg)
        if not fname.endswith(".md"):
            msg = f"Wanted to write {fname!r} but only .md files are written"
            raise ValueError(msg)

        if fname in self._files_made:
            logger.warning("Overwriting {!r}, already written during this run", fname)
        self._files_made.add(fname)

        action = "create"
        try:
            with open(fname, encoding="utf-8") as f:
                if f.read() == contents:
                    self._num_same += 1
                    return
            action = "update"
        except (FileNotFoundError, UnicodeDecodeError):
            pass
        except OSError as e:
            msg = f"Cannot read {fname!r}: {e}"
            raise SinkWriteError(msg) from e

        self._updates.append((action, fname))

        if self.dry_run:
            logger.info("dry-run: would {} {!r}", action, fname)
            return

        logger.debug("Writing ({}) {!r}", action, fname)
        try:
            Path(fname).parent.mkdir(parents=True, exist_ok=True)
            with open(fname, "w", encoding="utf-8") as f:
                f.write(contents)
        except OSError as e:
            msg = f"Cannot write {fname!r}: {e}"
            raise SinkWriteError(msg) from e

    def finalize(self) -> None:
        """Log update statistics."""
        if self._finalized:
            msg = "finalize() called twice"
            raise RuntimeError(msg)
        self._finalized = True

        created: list[str] = []
        updated: list[str] = []
        for action, fname in sorted(self._updates):
            (created if action == "create" else updated).append(Path(fname).stem)

        log_msg = f"Outputs: {self._num_same} same, {len(updated)} changed, {len(created)} new"
        if self._num_same == len(self._files_made):
            logger.debug(log_msg)
        else:
            logger.info(log_msg)
        if created or updated:
            logger.debug("Details: create {!r}, update {!r}", created, updated)
