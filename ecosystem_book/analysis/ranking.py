"""Queries the report generator runs against the index and closure."""

from __future__ import annotations

import re

from ecosystem_book.analysis.graph_models import Index
from ecosystem_book.models import PackageRecord


def direct_dependencies(name: str, index: Index) -> set[str]:
    """Union of normal-kind effective dependency names across all versions of ``name``.

    Unknown packages have no dependencies.
    """
    deps: set[str] = set()
    for record in index.packages.get(name, {}).values():
        deps.update(record.normal_dependencies())
    return deps


def in_closure_dependents(name: str, closure: set[str], index: Index) -> list[str]:
    return sorted(r for r in index.dependents_of(name) if r in closure)


def out_of_closure_dependents(name: str, closure: set[str], index: Index) -> list[str]:
    return sorted(r for r in index.dependents_of(name) if r not in closure)


def rank_by_in_closure_reverse_deps(closure: set[str], index: Index) -> list[tuple[int, str]]:
    """Rank closure members by how many closure members depend on them.

    Largest count first; equal counts are ordered by name.
    """
    ranked = [
        (sum(1 for r in index.dependents_of(name) if r in closure), name)
        for name in closure
    ]
    ranked.sort(key=lambda pair: (-pair[0], pair[1]))
    return ranked


def sorted_versions(name: str, index: Index) -> list[PackageRecord]:
    """Published versions of ``name``, oldest first."""
    records = list(index.packages.get(name, {}).values())
    records.sort(key=lambda r: _version_key(r.version))
    return records


_NUMERIC = re.compile(r"^\d+$")


def _version_key(version: str) -> tuple:
    # semver-ish: release numbers, then pre-release (sorting before release)
    core, _, _build = version.partition("+")
    release, dash, pre = core.partition("-")
    release_parts = tuple(
        (0, int(p), "") if _NUMERIC.match(p) else (1, 0, p)
        for p in release.split(".")
    )
    if not dash:
        return (release_parts, 1, ())
    pre_parts = tuple(
        (0, int(p), "") if _NUMERIC.match(p) else (1, 0, p)
        for p in pre.split(".")
    )
    return (release_parts, 0, pre_parts)
