"""Closure engine: grow a seed set upward through dependents, then downward to a fixed point.

The two directions are asymmetric: the upward spider runs once
from the seed, and packages pulled in by the downward passes do not have
their own dependents added. ``respider_upward=True`` opts into alternating
both directions until neither grows the set.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ecosystem_book.analysis.graph_models import ClosureResult, Index
from ecosystem_book.errors import MissingPackageError, SeedNotFoundError

logger = logging.getLogger(__name__)


def spider_upward(index: Index, start: Iterable[str], members: set[str]) -> set[str]:
    """Add ``start`` and everything that transitively depends on it to ``members``.

    Returns the names that were not members before the call.
    """
    added: set[str] = set()
    todo = list(start)

    while todo:
        name = todo.pop()
        if name not in members:
            added.add(name)
        members.add(name)
        logger.debug("%s", name)

        if name not in index.reverse_deps:
            logger.debug("%s has no rdeps", name)
            continue

        for rdep in index.reverse_deps[name]:
            if rdep not in members:
                logger.debug("  -> %s", rdep)
                todo.append(rdep)
            else:
                logger.debug("  -x %s", rdep)

    return added


def spider_downward(index: Index, result: ClosureResult) -> set[str]:
    """Pull in the normal dependencies of every member until nothing changes.

    Members without a published record are skipped for expansion and
    remembered in ``result.skipped``. Returns the names added.
    """
    members = result.members
    added: set[str] = set()

    while True:
        size = len(members)
        todo = list(members)

        while todo:
            name = todo.pop()
            try:
                versions = index.versions_of(name)
            except MissingPackageError as e:
                if name not in result.skipped:
                    logger.info("%s, skipping downward expansion", e)
                    result.skipped.add(name)
                continue

            for record in versions.values():
                for dep_name in record.normal_dependencies():
                    if dep_name not in members:
                        result.maybe_respider.add(dep_name)
                        added.add(dep_name)
                    members.add(dep_name)

        result.maybe_respider -= members
        result.pass_sizes.append(len(members))

        if len(members) == size:
            return added


def compute_closure(
    index: Index,
    seed: Iterable[str],
    respider_upward: bool = False,
) -> ClosureResult:
    """Compute the closed package set anchored at ``seed``."""
    result = ClosureResult(seed=set(seed))

    for name in sorted(result.seed):
        if not index.has_package(name):
            logger.warning("%s", SeedNotFoundError(name))
            result.missing_seeds.add(name)

    logger.info("Building embedded tree from %d seed(s)...", len(result.seed))
    spider_upward(index, result.seed, result.members)
    logger.info("Upward spider: %d members", len(result.members))

    while True:
        added = spider_downward(index, result)
        logger.info(
            "Downward fixed point: %d members (+%d)", len(result.members), len(added),
        )
        if not respider_upward or not added:
            break
        grown = spider_upward(index, added, result.members)
        logger.info("Respider upward: +%d members", len(grown))
        if not grown:
            break

    logger.info("Closure built: %d members", len(result.members))
    return result
