"""Write the closure out as an mdBook source tree: one page per package plus index pages."""

from __future__ import annotations

import logging
from pathlib import Path

from ecosystem_book.analysis.graph_models import Index
from ecosystem_book.analysis.ranking import (
    direct_dependencies,
    in_closure_dependents,
    out_of_closure_dependents,
    rank_by_in_closure_reverse_deps,
    sorted_versions,
)
from ecosystem_book.models import BookConfig, BookResult

logger = logging.getLogger(__name__)

# Description and downloads are not tracked yet
_PLACEHOLDER = "TODO!"


def write_book(index: Index, closure: set[str], config: BookConfig) -> BookResult:
    """Render every closure member and the index pages under ``<output_dir>/src``."""
    src_dir = config.output_dir / "src"
    crates_dir = src_dir / "crates"
    crates_dir.mkdir(parents=True, exist_ok=True)

    result = BookResult(output_dir=config.output_dir, closure_size=len(closure))
    ranking = rank_by_in_closure_reverse_deps(closure, index)
    by_alpha = sorted(closure)

    for _count, name in ranking:
        page = crates_dir / f"{safe_filename(name)}.md"
        page.write_text(render_package_page(name, closure, index, config), encoding="utf-8")
        result.files_created.append(page)
    logger.info("Wrote %d package pages to %s", len(ranking), crates_dir)

    result.files_created.append(_write(src_dir / "rdep-index.md", render_rdep_index(ranking, config)))
    result.files_created.append(_write(src_dir / "alpha-index.md", render_alpha_index(by_alpha, config)))
    result.files_created.append(_write(src_dir / "crates.md", render_all_crates(by_alpha, config)))

    result.summary_path = _write(src_dir / "SUMMARY.md", render_summary(by_alpha, config))
    result.files_created.append(result.summary_path)
    return result


def render_package_page(name: str, closure: set[str], index: Index, config: BookConfig) -> str:
    lines = [
        f"# `{name}`\n",
        "Description!\n",
        f"**See more info on [crates.io]({config.registry_url}/{name})**\n",
        "## Versions\n",
    ]

    versions = sorted_versions(name, index)
    if versions:
        for record in versions:
            suffix = " (yanked)" if record.yanked else ""
            lines.append(f"* `{record.version}`{suffix}")
        lines.append("")
    else:
        lines.append("No published record of this package is known.\n")

    lines.append("## Dependencies\n")
    lines.extend(_link_list(sorted(direct_dependencies(name, index))))

    lines.append(f"## {config.ecosystem_label} Reverse Dependencies\n")
    lines.extend(_link_list(in_closure_dependents(name, closure, index)))

    lines.append(f"## Non {config.ecosystem_label} Reverse Dependencies\n")
    lines.extend(_link_list(out_of_closure_dependents(name, closure, index)))

    return "\n".join(lines)


def render_rdep_index(ranking: list[tuple[int, str]], config: BookConfig) -> str:
    lines = [
        f"# {config.title}\n",
        f"Sorted by {config.ecosystem_label} reverse dependencies.\n",
        "| Reverse Dependencies | Name | Description |",
        "| :--- | :--- | :--- |",
    ]
    for count, name in ranking:
        lines.append(f"| {count} | [`{name}`](./crates/{safe_filename(name)}.md) | {_PLACEHOLDER} |")
    return "\n".join(lines) + "\n"


def render_alpha_index(names: list[str], config: BookConfig) -> str:
    lines = [
        f"# {config.title}\n",
        "Sorted alphabetically.\n",
        "| Name | Description |",
        "| :--- | :--- |",
    ]
    for name in names:
        lines.append(f"| [`{name}`](./crates/{safe_filename(name)}.md) | {_PLACEHOLDER} |")
    return "\n".join(lines) + "\n"


def render_all_crates(names: list[str], config: BookConfig) -> str:
    lines = ["# All Crates\n", f"{len(names)} crates in {config.title}.\n"]
    for name in names:
        lines.append(f"* [`{name}`](./crates/{safe_filename(name)}.md)")
    return "\n".join(lines) + "\n"


def render_summary(names: list[str], config: BookConfig) -> str:
    lines = [
        f"# {config.title}\n",
        "- [Alphabetically](./alpha-index.md)",
        "- [By Reverse Dependencies](./rdep-index.md)",
        "- [All Crates](./crates.md)",
    ]
    for name in names:
        lines.append(f"    - [`{name}`](./crates/{safe_filename(name)}.md)")
    return "\n".join(lines) + "\n"


def safe_filename(name: str) -> str:
    return name.replace("/", "_").replace("\\", "_")


def _link_list(names: list[str]) -> list[str]:
    if not names:
        return []
    return [f"* [`{n}`](./{safe_filename(n)}.md)" for n in names] + [""]


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path
