"""Index construction, closure computation, and report queries."""

from ecosystem_book.analysis.closure import compute_closure, spider_downward, spider_upward
from ecosystem_book.analysis.graph_models import ClosureResult, Index
from ecosystem_book.analysis.index_builder import IndexBuilder, build_index
from ecosystem_book.analysis.ranking import (
    direct_dependencies,
    in_closure_dependents,
    out_of_closure_dependents,
    rank_by_in_closure_reverse_deps,
    sorted_versions,
)

__all__ = [
    "ClosureResult",
    "Index",
    "IndexBuilder",
    "build_index",
    "compute_closure",
    "direct_dependencies",
    "in_closure_dependents",
    "out_of_closure_dependents",
    "rank_by_in_closure_reverse_deps",
    "sorted_versions",
    "spider_downward",
    "spider_upward",
]
