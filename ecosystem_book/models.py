"""Data models for the ecosystem-book pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path


class DependencyKind(enum.Enum):
    NORMAL = "normal"
    BUILD = "build"
    DEV = "dev"


@dataclass
class DependencyEdge:
    """One dependency declaration inside a package record."""
    required_name: str
    rename_target: str | None = None
    kind: DependencyKind | None = None  # None means normal
    req: str = "*"
    features: list[str] = field(default_factory=list)
    optional: bool = False
    default_features: bool = True
    target: str | None = None

    @property
    def effective_name(self) -> str:
        if self.rename_target is not None:
            return self.rename_target
        return self.required_name

    @property
    def is_normal(self) -> bool:
        return self.kind is None or self.kind is DependencyKind.NORMAL


@dataclass
class PackageRecord:
    """One published version of one package."""
    name: str
    version: str
    dependencies: list[DependencyEdge] = field(default_factory=list)
    checksum: str = ""
    features: dict[str, list[str]] = field(default_factory=dict)
    yanked: bool = False
    links: str | None = None

    def normal_dependencies(self) -> list[str]:
        """Effective names of the normal-kind dependencies, in manifest order."""
        return [dep.effective_name for dep in self.dependencies if dep.is_normal]


@dataclass
class BookResult:
    """Result from the book-writing stage."""
    output_dir: Path
    files_created: list[Path] = field(default_factory=list)
    summary_path: Path | None = None
    manifest_path: Path | None = None
    closure_size: int = 0


@dataclass
class BookConfig:
    """Configuration for the ecosystem-book pipeline."""
    index_dir: Path = field(default_factory=lambda: Path("crates.io-index"))
    output_dir: Path = field(default_factory=lambda: Path("book"))
    seeds: list[str] = field(default_factory=lambda: ["cortex-m"])
    title: str = "The Embedded Rust Ecosystem"
    ecosystem_label: str = "Embedded Rust"
    registry_url: str = "https://crates.io/crates"
    respider_upward: bool = False
    skip_dirs: list[str] = field(default_factory=lambda: [".git"])
