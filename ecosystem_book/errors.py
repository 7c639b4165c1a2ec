"""Exception types raised by the indexing and closure stages."""

from __future__ import annotations

from pathlib import Path


class DecodeError(Exception):
    """A registry record line could not be decoded. Fatal for the run."""

    def __init__(self, source: Path | str, line_number: int, reason: str):
        self.source = source
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"{source}:{line_number}: {reason}")


class MissingPackageError(KeyError):
    """A package name has no published record in the index."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"no published record for package {self.name!r}"


class SeedNotFoundError(MissingPackageError):
    """A seed package has no published record in the index."""

    def __str__(self) -> str:
        return f"seed package {self.name!r} not found in index"


class ConfigError(Exception):
    """The configuration file is missing or invalid."""
