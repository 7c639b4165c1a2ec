"""Record source: index-tree discovery and line decoding."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from ecosystem_book.models import PackageRecord
from ecosystem_book.scanner.index_walker import DEFAULT_SKIP_DIRS, IndexWalker
from ecosystem_book.scanner.record_schema import decode_line


def discover_record_files(
    index_dir: Path,
    skip_dirs: list[str] | None = None,
) -> list[Path]:
    """List the record files of a registry index checkout."""
    return IndexWalker(skip_dirs).discover(index_dir)


def iter_records(paths: Iterable[Path]) -> Iterator[PackageRecord]:
    """Decode every record in ``paths``; the first bad line raises DecodeError."""
    return IndexWalker().iter_records(paths)


def scan_index(
    index_dir: Path,
    skip_dirs: list[str] | None = None,
) -> Iterator[PackageRecord]:
    walker = IndexWalker(skip_dirs)
    return walker.iter_records(walker.discover(index_dir))


__all__ = [
    "DEFAULT_SKIP_DIRS",
    "IndexWalker",
    "decode_line",
    "discover_record_files",
    "iter_records",
    "scan_index",
]
