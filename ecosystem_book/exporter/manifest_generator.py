"""Generate manifest.json."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from ecosystem_book.analysis.graph_models import ClosureResult, Index
from ecosystem_book.analysis.ranking import rank_by_in_closure_reverse_deps
from ecosystem_book.models import BookResult


def generate_manifest(
    closure: ClosureResult,
    index: Index,
    result: BookResult,
    index_dir: Path,
) -> Path:
    """Generate a manifest.json summarizing the closure behind the book."""
    ranking = rank_by_in_closure_reverse_deps(closure.members, index)

    manifest = {
        "version": "1.0",
        "generated": datetime.now().isoformat(),
        "index_directory": str(index_dir),
        "output_directory": str(result.output_dir),
        "seeds": sorted(closure.seed),
        "missing_seeds": sorted(closure.missing_seeds),
        "closure_size": len(closure.members),
        "members": sorted(closure.members),
        "ranking": [{"name": name, "reverse_deps": count} for count, name in ranking],
        "unpublished_members": sorted(closure.skipped),
        "maybe_respider": sorted(closure.maybe_respider),
        "downward_passes": closure.pass_sizes,
        "files_created": [str(f) for f in result.files_created],
    }

    manifest_path = result.output_dir / "manifest.json"
    manifest_path.write_text(
        json.dumps(manifest, indent=2) + "\n",
        encoding="utf-8",
    )
    return manifest_path
