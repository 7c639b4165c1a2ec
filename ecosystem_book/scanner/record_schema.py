"""Wire schema for registry index lines, validated with pydantic."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ecosystem_book.errors import DecodeError
from ecosystem_book.models import DependencyEdge, DependencyKind, PackageRecord


class RawDependency(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    req: str
    features: list[str]
    optional: bool
    default_features: bool
    package: Optional[str] = None  # rename target
    target: Optional[str] = None
    kind: Optional[Literal["normal", "build", "dev"]] = None

    def to_edge(self) -> DependencyEdge:
        return DependencyEdge(
            required_name=self.name,
            rename_target=self.package,
            kind=DependencyKind(self.kind) if self.kind else None,
            req=self.req,
            features=list(self.features),
            optional=self.optional,
            default_features=self.default_features,
            target=self.target,
        )


class RawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    vers: str = Field(min_length=1)
    deps: list[RawDependency]
    cksum: str
    features: dict[str, list[str]]
    yanked: bool
    links: Optional[str] = None

    def to_record(self) -> PackageRecord:
        return PackageRecord(
            name=self.name,
            version=self.vers,
            dependencies=[dep.to_edge() for dep in self.deps],
            checksum=self.cksum,
            features={k: list(v) for k, v in self.features.items()},
            yanked=self.yanked,
            links=self.links,
        )


def decode_line(line: str, source: str = "<string>", line_number: int = 1) -> PackageRecord:
    """Decode one JSON index line into a PackageRecord.

    Raises DecodeError naming the source and line on malformed JSON or on
    a schema violation.
    """
    try:
        raw = RawRecord.model_validate_json(line)
    except ValidationError as e:
        raise DecodeError(source, line_number, _summarize(e)) from e
    return raw.to_record()


def _summarize(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)
