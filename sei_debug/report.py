"""Assemble model responses into a DebugReport: citations, tools, root cause, suggestions."""

import re
from collections.abc import Sequence

from sei_debug.models import DebugReport, RawModelResponse, Segment

_ROOT_CAUSE_RE = re.compile(r"root cause[:\s]+([^.]+\.)", re.IGNORECASE)
_SUGGESTION_RE = re.compile(r"(\d+\.|•|\*)\s*([^.\n]+\.)")


def _full_text(segments: Sequence[Segment]) -> str:
    return " ".join(seg.text or "" for seg in segments if seg.kind == "text")


def extract_root_cause(segments: Sequence[Segment]) -> str | None:
    """Return the first 'Root cause: ...' sentence, or None."""
    match = _ROOT_CAUSE_RE.search(_full_text(segments))
    return match.group(1) if match else None


def extract_suggestions(segments: Sequence[Segment]) -> tuple[str, ...] | None:
    """Return numbered or bulleted sentences with the list marker stripped.

    None when nothing in the text looks like a list item.
    """
    suggestions = tuple(m.group(2) for m in _SUGGESTION_RE.finditer(_full_text(segments)))
    return suggestions or None


def assemble(primary: RawModelResponse, extras: Sequence[RawModelResponse] = ()) -> DebugReport:
    """Combine the final response with earlier responses of the same session.

    Citations are concatenated in order without deduplication; tool names are
    merged into a set.
    """
    responses = [primary, *extras]
    citations = tuple(c for resp in responses for c in resp.citations)
    tools_used = frozenset().union(*(resp.used_tools for resp in responses))

    return DebugReport(
        segments=primary.segments,
        sources=citations,
        model_id=primary.model_id,
        tools_used=tools_used,
        root_cause=extract_root_cause(primary.segments),
        suggestions=extract_suggestions(primary.segments),
        citations=citations,
    )
