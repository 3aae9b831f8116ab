"""Tests for sei_debug/output.py."""

from pathlib import Path

import pytest

from sei_debug.models import Citation, DebugReport, Segment
from sei_debug.output import _excerpt, _slug, analysis_text, print_report, save_to_file


def test_slug_basic():
    assert _slug("Transaction failed with revert!") == "transaction-failed-with-revert"


def test_slug_max_len():
    assert len(_slug("a" * 100)) <= 40


def test_excerpt_truncates():
    citation = Citation(url="u", title="t", excerpt="x" * 150)
    assert _excerpt(citation) == "x" * 100 + "..."
    assert _excerpt(Citation(url="u", title="t")) == ""


def test_excerpt_leaves_short_text_alone():
    assert _excerpt(Citation(url="u", title="t", excerpt="short")) == "short"
    assert _excerpt(Citation(url="u", title="t", excerpt="x" * 100)) == "x" * 100


@pytest.fixture
def sample_report(sample_citation) -> DebugReport:
    return DebugReport(
        segments=(
            Segment(kind="text", text="Root cause: nonce collision."),
            Segment(kind="server_tool_use"),
            Segment(kind="text", text="1. Refresh the nonce."),
        ),
        sources=(sample_citation,),
        model_id="claude-opus-4-20250514",
        tools_used=frozenset({"web_search"}),
        root_cause="nonce collision.",
        suggestions=("Refresh the nonce.",),
        citations=(sample_citation,),
    )


def test_analysis_text_joins_text_segments(sample_report):
    assert analysis_text(sample_report) == "Root cause: nonce collision.\n1. Refresh the nonce."


def test_print_report_does_not_crash(sample_report):
    print_report(sample_report)


def test_print_report_minimal():
    print_report(DebugReport(segments=(), sources=(), model_id="m", tools_used=frozenset()))


def test_save_to_file_creates_file(tmp_path: Path, sample_report):
    saved = save_to_file(sample_report, "nonce collision on mainnet", tmp_path / "nested" / "reports")
    assert saved.exists()
    assert saved.suffix == ".md"
    assert "nonce-collision-on-mainnet" in saved.name


def test_save_to_file_content(tmp_path: Path, sample_report, sample_citation):
    saved = save_to_file(sample_report, "nonce collision", tmp_path)
    content = saved.read_text(encoding="utf-8")
    assert "# Sei Debug Report: nonce collision" in content
    assert "**Model:** claude-opus-4-20250514" in content
    assert "**Tools:** web_search" in content
    assert "## Root Cause" in content
    assert "1. Refresh the nonce." in content
    assert f"[{sample_citation.title}]({sample_citation.url})" in content


def test_save_to_file_skips_empty_sections(tmp_path: Path):
    report = DebugReport(segments=(Segment(kind="text", text="Nothing found."),), sources=(), model_id="m", tools_used=frozenset())
    content = save_to_file(report, "???", tmp_path).read_text(encoding="utf-8")
    assert "## Root Cause" not in content
    assert "## Suggestions" not in content
    assert "## Sources" not in content
    assert "**Tools:** none" in content
