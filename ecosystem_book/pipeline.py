"""Pipeline orchestrator: scan -> index -> closure -> book."""

from __future__ import annotations

import logging
from typing import Callable

from ecosystem_book.analysis import ClosureResult, Index, IndexBuilder, compute_closure
from ecosystem_book.exporter import generate_manifest, write_book
from ecosystem_book.models import BookConfig, BookResult
from ecosystem_book.scanner import IndexWalker

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


def run_index(config: BookConfig, progress: ProgressCallback | None = None) -> Index:
    """Stages 1-2: discover record files and build the index."""
    if not config.index_dir.is_dir():
        raise ValueError(f"Index directory not found: {config.index_dir}")

    walker = IndexWalker(skip_dirs=config.skip_dirs)
    if progress:
        progress("Scanning", 0, 1)
    paths = walker.discover(config.index_dir)
    if progress:
        progress("Scanning", 1, 1)
    logger.info("Found %d record files under %s", len(paths), config.index_dir)

    def _records():
        for i, path in enumerate(paths):
            if progress:
                progress("Indexing", i, len(paths))
            yield from walker.iter_file(path)
        if progress:
            progress("Indexing", len(paths), len(paths))

    return IndexBuilder().build(_records())


def run_closure(
    index: Index,
    config: BookConfig,
    progress: ProgressCallback | None = None,
) -> ClosureResult:
    """Stage 3: compute the closure of the configured seeds."""
    if not config.seeds:
        raise ValueError("At least one seed package is required")
    if progress:
        progress("Closure", 0, 1)
    closure = compute_closure(index, config.seeds, respider_upward=config.respider_upward)
    if progress:
        progress("Closure", 1, 1)
    return closure


def run_pipeline(
    config: BookConfig,
    progress: ProgressCallback | None = None,
) -> BookResult:
    """Run the full pipeline and write the book."""
    index = run_index(config, progress=progress)
    closure = run_closure(index, config, progress=progress)
    return run_book(index, closure, config, progress=progress)


def run_book(
    index: Index,
    closure: ClosureResult,
    config: BookConfig,
    progress: ProgressCallback | None = None,
) -> BookResult:
    """Stage 4: write pages and the manifest."""
    if progress:
        progress("Writing", 0, 1)
    result = write_book(index, closure.members, config)
    result.manifest_path = generate_manifest(closure, index, result, config.index_dir)
    result.files_created.append(result.manifest_path)
    if progress:
        progress("Writing", 1, 1)
    logger.info("Book written to %s (%d files)", result.output_dir, len(result.files_created))
    return result
