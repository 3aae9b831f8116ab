"""Rule-based classification of a free-text debugging request."""

import re
from collections.abc import Callable

from sei_debug.models import TaskDescriptor

TX_HASH_PATTERN = re.compile(r"0x[a-fA-F0-9]{64}")

# Each predicate receives (lowercased text, hash present). First match wins.
_Rule = tuple[str, Callable[[str, bool], bool]]


def _contains_any(text: str, *words: str) -> bool:
    return any(w in text for w in words)


_KIND_RULES: list[_Rule] = [
    ("transaction", lambda text, has_hash: has_hash),
    ("gas", lambda text, _: "gas" in text),
    ("parallel", lambda text, _: _contains_any(text, "parallel", "state")),
    ("contract", lambda text, _: "contract" in text),
]

_COMPLEXITY_RULES: list[_Rule] = [
    ("high", lambda text, _: _contains_any(text, "revert", "failed", "error")),
    ("low", lambda text, _: _contains_any(text, "how", "what", "status")),
]


def _first_match(rules: list[_Rule], text: str, has_hash: bool, default: str) -> str:
    for value, predicate in rules:
        if predicate(text, has_hash):
            return value
    return default


def classify(issue_text: str, user_context: str | None = None) -> TaskDescriptor:
    """Classify an issue description into a TaskDescriptor.

    Never raises: text matching no rule yields a general, medium-complexity task.
    """
    lowered = issue_text.lower()
    has_hash = TX_HASH_PATTERN.search(issue_text) is not None

    kind = _first_match(_KIND_RULES, lowered, has_hash, default="general")
    complexity = _first_match(_COMPLEXITY_RULES, lowered, has_hash, default="medium")

    return TaskDescriptor(
        kind=kind,
        complexity=complexity,
        subject_text=issue_text,
        user_context=user_context,
        needs_deep_analysis=complexity == "high" or kind == "parallel",
        needs_code_execution=has_hash or kind == "gas" or "analyze" in lowered,
        is_simple_query=complexity == "low" and not has_hash,
        is_status_check=_contains_any(lowered, "status", "check"),
        estimated_search_count=3 if has_hash else 2,
        estimated_token_count=3000 if complexity == "high" else 1500,
    )
