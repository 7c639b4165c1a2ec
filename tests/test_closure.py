"""Tests for the two-phase closure engine."""

from pathlib import Path

from ecosystem_book.analysis import (
    ClosureResult,
    build_index,
    compute_closure,
    spider_downward,
    spider_upward,
)
from ecosystem_book.models import DependencyEdge, DependencyKind, PackageRecord
from ecosystem_book.scanner import scan_index

FIXTURES = Path(__file__).parent / "fixtures"


# ── Helpers ───────────────────────────────────────────────────

def _dep(name, kind=None, rename=None):
    return DependencyEdge(required_name=name, rename_target=rename, kind=kind)


def _record(name, *deps, version="1.0.0"):
    return PackageRecord(name=name, version=version, dependencies=list(deps))


def _graph(edges):
    """Build an index from {name: [dep, ...]}; a dep may be a DependencyEdge or a name."""
    records = []
    for name, deps in edges.items():
        records.append(_record(name, *[d if isinstance(d, DependencyEdge) else _dep(d) for d in deps]))
    return build_index(records)


def _downward_complete(index, members):
    for name in members:
        for record in index.packages.get(name, {}).values():
            for dep in record.normal_dependencies():
                if dep not in members:
                    return False
    return True


# ── Scenarios ─────────────────────────────────────────────────

class TestScenarios:
    def test_dependent_pulled_in(self):
        index = _graph({"A": ["B"], "B": []})
        result = compute_closure(index, {"B"})
        assert result.members == {"A", "B"}

    def test_rename_followed_downward(self):
        index = _graph({"A": [_dep("pkg-old", rename="pkg-new")], "pkg-new": [], "pkg-old": []})
        result = compute_closure(index, {"A"})
        assert "pkg-new" in result.members
        assert "pkg-old" not in result.members

    def test_dangling_dependency(self):
        index = _graph({"A": ["ghost"]})
        result = compute_closure(index, {"A"})
        assert result.members == {"A", "ghost"}
        assert result.skipped == {"ghost"}

    def test_dev_edge_not_followed(self):
        index = _graph({"A": [_dep("B", kind=DependencyKind.DEV)], "B": [], "C": [_dep("A", kind=DependencyKind.BUILD)]})
        result = compute_closure(index, {"A"})
        assert result.members == {"A"}

    def test_missing_seed_is_member(self):
        index = _graph({"A": []})
        result = compute_closure(index, {"nowhere"})
        assert result.members == {"nowhere"}
        assert result.missing_seeds == {"nowhere"}

    def test_seed_subset(self):
        index = _graph({"A": ["B"], "B": ["C"], "C": [], "D": []})
        seed = {"B", "D", "missing"}
        assert seed <= compute_closure(index, seed).members


# ── Phases ────────────────────────────────────────────────────

class TestUpward:
    def test_transitive_dependents(self):
        index = _graph({"app": ["lib"], "lib": ["core"], "core": [], "other": []})
        members = set()
        added = spider_upward(index, ["core"], members)
        assert members == {"core", "lib", "app"}
        assert added == members

    def test_cycle_terminates(self):
        index = _graph({"a": ["b"], "b": ["a"]})
        members = set()
        spider_upward(index, ["a"], members)
        assert members == {"a", "b"}


class TestDownward:
    def test_fixed_point(self):
        index = _graph({"a": ["b"], "b": ["c"], "c": ["d"], "d": []})
        result = ClosureResult(seed={"a"}, members={"a"})
        added = spider_downward(index, result)
        assert result.members == {"a", "b", "c", "d"}
        assert added == {"b", "c", "d"}

    def test_monotonic_pass_sizes(self):
        index = _graph({"a": ["b"], "b": ["c"], "c": ["d"], "d": []})
        result = ClosureResult(seed={"a"}, members={"a"})
        spider_downward(index, result)
        sizes = result.pass_sizes
        assert sizes == sorted(sizes)
        assert sizes[-1] == sizes[-2]

    def test_maybe_respider_cleared(self):
        index = _graph({"a": ["b"], "b": []})
        result = ClosureResult(seed={"a"}, members={"a"})
        spider_downward(index, result)
        assert result.maybe_respider == set()


# ── Asymmetry and options ─────────────────────────────────────

class TestAsymmetry:
    def _index(self):
        # app -> lib -> shared <- sibling ; seed is lib
        return _graph({"app": ["lib"], "lib": ["shared"], "shared": [], "sibling": ["shared"]})

    def test_downward_members_not_respidered(self):
        result = compute_closure(self._index(), {"lib"})
        assert result.members == {"app", "lib", "shared"}
        assert "sibling" not in result.members

    def test_respider_opt_in(self):
        result = compute_closure(self._index(), {"lib"}, respider_upward=True)
        assert result.members == {"app", "lib", "shared", "sibling"}

    def test_deterministic(self):
        index = self._index()
        first = compute_closure(index, {"lib"})
        second = compute_closure(index, {"lib"})
        assert first.members == second.members

    def test_index_not_mutated(self):
        index = self._index()
        before = {k: set(v) for k, v in index.reverse_deps.items()}
        compute_closure(index, {"lib", "ghost"}, respider_upward=True)
        assert index.reverse_deps == before


# ── Fixture registry ──────────────────────────────────────────

class TestFixtureIndex:
    def test_embedded_closure(self):
        index = build_index(scan_index(FIXTURES / "index"))
        result = compute_closure(index, ["cortex-m"])
        assert result.members == {
            "cortex-m", "cortex-m-rt", "stm32f4", "stm32f4xx-hal",
            "bare-metal", "volatile-register", "aligned", "r0", "vcell",
            "embedded-hal", "nb", "void",
        }
        assert result.skipped == {"aligned"}
        assert _downward_complete(index, result.members)

    def test_excluded_packages(self):
        index = build_index(scan_index(FIXTURES / "index"))
        members = compute_closure(index, ["cortex-m"]).members
        for name in ("linux-embedded-hal", "panic-itm", "quickcheck", "cc", "serde", "serde_json"):
            assert name not in members

    def test_respider_reaches_sibling(self):
        index = build_index(scan_index(FIXTURES / "index"))
        members = compute_closure(index, ["cortex-m"], respider_upward=True).members
        assert "linux-embedded-hal" in members
        assert "panic-itm" not in members
        assert _downward_complete(index, members)
