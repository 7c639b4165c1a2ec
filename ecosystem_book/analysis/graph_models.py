"""Data models for the package index and closure results."""

from __future__ import annotations

from dataclasses import dataclass, field

from ecosystem_book.errors import MissingPackageError
from ecosystem_book.models import PackageRecord


@dataclass
class Index:
    packages: dict[str, dict[str, PackageRecord]] = field(default_factory=dict)  # name -> version -> record
    reverse_deps: dict[str, set[str]] = field(default_factory=dict)  # name -> {dependent names}

    def has_package(self, name: str) -> bool:
        return name in self.packages

    def versions_of(self, name: str) -> dict[str, PackageRecord]:
        """Return every published version of ``name``.

        Raises MissingPackageError when the name was never published, e.g.
        a dependency target with no record of its own.
        """
        versions = self.packages.get(name)
        if versions is None:
            raise MissingPackageError(name)
        return versions

    def dependents_of(self, name: str) -> set[str]:
        return self.reverse_deps.get(name, set())

    def dangling_names(self) -> set[str]:
        """Names referenced as dependencies that have no published record."""
        return {name for name in self.reverse_deps if name not in self.packages}

    @property
    def version_count(self) -> int:
        return sum(len(v) for v in self.packages.values())


@dataclass
class ClosureResult:
    seed: set[str]
    members: set[str] = field(default_factory=set)
    maybe_respider: set[str] = field(default_factory=set)
    missing_seeds: set[str] = field(default_factory=set)
    skipped: set[str] = field(default_factory=set)  # members with no record to expand
    pass_sizes: list[int] = field(default_factory=list)  # closure size after each downward pass

    def __contains__(self, name: str) -> bool:
        return name in self.members

    def __len__(self) -> int:
        return len(self.members)
