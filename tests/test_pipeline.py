"""Tests for the full pipeline and the book output."""

import json
from pathlib import Path

import pytest

from ecosystem_book.errors import DecodeError
from ecosystem_book.models import BookConfig
from ecosystem_book.pipeline import run_closure, run_index, run_pipeline

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def config(tmp_path):
    return BookConfig(
        index_dir=FIXTURES / "index",
        output_dir=tmp_path / "book",
        seeds=["cortex-m"],
    )


def test_run_index(config):
    index = run_index(config)
    assert index.has_package("cortex-m")
    assert index.reverse_deps["embedded-hal"] == {"stm32f4xx-hal", "linux-embedded-hal"}
    assert index.dangling_names() == {"aligned"}


def test_run_index_missing_dir(tmp_path):
    with pytest.raises(ValueError):
        run_index(BookConfig(index_dir=tmp_path / "nope"))


def test_run_index_decode_error(tmp_path):
    with pytest.raises(DecodeError):
        run_index(BookConfig(index_dir=FIXTURES / "broken"))


def test_run_closure_requires_seed(config):
    index = run_index(config)
    config.seeds = []
    with pytest.raises(ValueError):
        run_closure(index, config)


def test_progress_reported(config):
    stages = []
    run_pipeline(config, progress=lambda stage, cur, total: stages.append(stage))
    for stage in ("Scanning", "Indexing", "Closure", "Writing"):
        assert stage in stages


class TestBook:
    def test_files(self, config):
        result = run_pipeline(config)
        src = result.output_dir / "src"
        assert result.closure_size == 12
        assert result.summary_path == src / "SUMMARY.md"
        for name in ("SUMMARY.md", "rdep-index.md", "alpha-index.md", "crates.md"):
            assert (src / name).exists()
        pages = sorted(p.stem for p in (src / "crates").glob("*.md"))
        assert len(pages) == 12
        assert "linux-embedded-hal" not in pages

    def test_package_page(self, config):
        run_pipeline(config)
        page = (config.output_dir / "src" / "crates" / "embedded-hal.md").read_text()
        assert page.startswith("# `embedded-hal`")
        assert "https://crates.io/crates/embedded-hal" in page
        assert "* `0.2.3`\n* `1.0.0-alpha.1`" in page

        deps = page.split("## Dependencies")[1].split("## Embedded Rust Reverse Dependencies")[0]
        assert "[`nb`](./nb.md)" in deps
        assert "[`void`](./void.md)" in deps

        in_closure, outside = page.split("## Embedded Rust Reverse Dependencies")[1].split(
            "## Non Embedded Rust Reverse Dependencies"
        )
        assert "stm32f4xx-hal" in in_closure
        assert "linux-embedded-hal" not in in_closure
        assert "linux-embedded-hal" in outside

    def test_yanked_and_unpublished(self, config):
        run_pipeline(config)
        crates = config.output_dir / "src" / "crates"
        assert "* `0.5.0` (yanked)" in (crates / "cortex-m.md").read_text()
        assert "No published record" in (crates / "aligned.md").read_text()

    def test_rdep_index_order(self, config):
        run_pipeline(config)
        text = (config.output_dir / "src" / "rdep-index.md").read_text()
        rows = [line for line in text.splitlines() if line.startswith("| ") and "crates/" in line]
        assert rows[0] == "| 2 | [`bare-metal`](./crates/bare-metal.md) | TODO! |"
        assert rows[1].startswith("| 2 | [`cortex-m`]")
        assert rows[-1].startswith("| 0 | [`stm32f4xx-hal`]")

    def test_summary(self, config):
        run_pipeline(config)
        text = (config.output_dir / "src" / "SUMMARY.md").read_text()
        assert text.startswith("# The Embedded Rust Ecosystem")
        assert "- [All Crates](./crates.md)" in text
        assert "    - [`vcell`](./crates/vcell.md)" in text

    def test_manifest(self, config):
        result = run_pipeline(config)
        manifest = json.loads(result.manifest_path.read_text())
        assert manifest["seeds"] == ["cortex-m"]
        assert manifest["closure_size"] == 12
        assert manifest["unpublished_members"] == ["aligned"]
        assert manifest["maybe_respider"] == []
        assert manifest["ranking"][0] == {"name": "bare-metal", "reverse_deps": 2}
