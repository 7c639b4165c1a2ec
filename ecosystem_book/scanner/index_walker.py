"""Walk a registry index checkout and stream the records it contains."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, Iterator

from ecosystem_book.errors import DecodeError
from ecosystem_book.models import PackageRecord
from ecosystem_book.scanner.record_schema import decode_line

logger = logging.getLogger(__name__)

DEFAULT_SKIP_DIRS = [".git"]


class IndexWalker:
    """Discover record files in an index tree and decode them line by line."""

    def __init__(self, skip_dirs: list[str] | None = None):
        self.skip_dirs = skip_dirs if skip_dirs is not None else list(DEFAULT_SKIP_DIRS)

    def discover(self, directory: Path) -> list[Path]:
        """Return every record file under ``directory``, sorted."""
        files: list[Path] = []
        for path in sorted(directory.rglob("*")):
            if path.is_dir():
                continue
            rel = path.relative_to(directory)
            if self._should_skip(rel):
                continue
            # config.json lives at the root of the registry index
            if path.name.endswith(".json"):
                continue
            files.append(path)
        return files

    def iter_file(self, path: Path) -> Iterator[PackageRecord]:
        with path.open("rb") as fh:
            for line_number, raw in enumerate(fh, start=1):
                if not raw.strip():
                    continue
                try:
                    line = raw.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise DecodeError(str(path), line_number, f"invalid UTF-8: {e}") from e
                yield decode_line(line, source=str(path), line_number=line_number)

    def iter_records(self, paths: Iterable[Path]) -> Iterator[PackageRecord]:
        for path in paths:
            logger.debug("reading %s", path)
            yield from self.iter_file(path)

    def _should_skip(self, rel: Path) -> bool:
        for part in rel.parts[:-1]:
            for pattern in self.skip_dirs:
                if fnmatch.fnmatch(part, pattern):
                    return True
        return False
