"""Index builder: forward index from records, then the reverse-dependency pass."""

from __future__ import annotations

import logging
from typing import Iterable

from ecosystem_book.analysis.graph_models import Index
from ecosystem_book.models import PackageRecord

logger = logging.getLogger(__name__)


class IndexBuilder:
    """Build a package index from a stream of decoded records."""

    def build(self, records: Iterable[PackageRecord]) -> Index:
        index = Index()

        logger.info("Building forward deps tree...")
        for record in records:
            self.add_record(index, record)
        logger.info(
            "Forward index: %d packages, %d versions",
            len(index.packages), index.version_count,
        )

        logger.info("Building reverse deps tree...")
        index.reverse_deps = self.build_reverse(index)
        logger.info("Reverse index: %d names", len(index.reverse_deps))
        return index

    @staticmethod
    def add_record(index: Index, record: PackageRecord) -> None:
        # Same (name, version) twice: the later record wins
        index.packages.setdefault(record.name, {})[record.version] = record

    @staticmethod
    def build_reverse(index: Index) -> dict[str, set[str]]:
        # Every published package gets an entry, even with no dependents
        rindex: dict[str, set[str]] = {name: set() for name in index.packages}

        for name, versions in index.packages.items():
            for record in versions.values():
                for dep_name in record.normal_dependencies():
                    if dep_name not in rindex:
                        logger.debug("dependency %s has no published record", dep_name)
                        rindex[dep_name] = set()
                    rindex[dep_name].add(name)

        return rindex


def build_index(records: Iterable[PackageRecord]) -> Index:
    """Build the forward and reverse indices from ``records``."""
    return IndexBuilder().build(records)
