"""Frozen dataclasses for the Sei debug pipeline. No deps."""

from dataclasses import dataclass, field
from enum import Enum


class ModelTier(str, Enum):
    HIGH = "high"          # capable, expensive model
    STANDARD = "standard"  # economical model


@dataclass(frozen=True)
class TaskDescriptor:
    kind: str              # "transaction", "contract", "gas", "parallel", "general"
    complexity: str        # "high", "medium", "low"
    subject_text: str
    user_context: str | None = None
    needs_deep_analysis: bool = False
    needs_code_execution: bool = False
    is_simple_query: bool = False
    is_status_check: bool = False
    estimated_search_count: int | None = None
    estimated_token_count: int | None = None


@dataclass(frozen=True)
class CostEstimate:
    search_cost: float
    token_cost: float
    total: float


@dataclass(frozen=True)
class Citation:
    url: str
    title: str
    excerpt: str | None = None


@dataclass(frozen=True)
class Segment:
    kind: str              # "text" or the provider's block type
    text: str | None = None
    citations: tuple[Citation, ...] = ()


@dataclass(frozen=True)
class RawModelResponse:
    segments: tuple[Segment, ...]
    model_id: str
    used_tools: frozenset[str] = field(default_factory=frozenset)

    @property
    def citations(self) -> tuple[Citation, ...]:
        """Citations attached to the text segments, in segment order."""
        return tuple(c for seg in self.segments if seg.kind == "text" for c in seg.citations)


@dataclass(frozen=True)
class DebugReport:
    segments: tuple[Segment, ...]
    sources: tuple[Citation, ...]
    model_id: str
    tools_used: frozenset[str]
    root_cause: str | None = None
    suggestions: tuple[str, ...] | None = None
    citations: tuple[Citation, ...] = ()
