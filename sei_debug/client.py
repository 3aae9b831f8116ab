"""Prompt-level model calls: route each task to a tier and send the matching prompt."""

import json
import logging
from collections.abc import Callable
from dataclasses import asdict

from config.config_loader import AppConfig
from sei_debug.models import ModelTier, RawModelResponse, TaskDescriptor
from sei_debug.providers.base import CODE_EXECUTION, WEB_SEARCH, AIProvider
from sei_debug.selector import estimate_cost, select_tier

logger = logging.getLogger(__name__)


def _context_line(task: TaskDescriptor) -> str:
    return f"Context: {task.user_context}" if task.user_context else ""


def segments_json(response: RawModelResponse | None) -> str:
    """Serialize a prior response's segments for embedding in a follow-up prompt."""
    if response is None:
        return "None"
    return json.dumps([asdict(seg) for seg in response.segments], ensure_ascii=False)


class DebugClient:
    """Sends search, code-analysis, interactive and report prompts to the right tier."""

    def __init__(
        self,
        providers: dict[ModelTier, AIProvider],
        config: AppConfig,
        on_progress: Callable[[str], None] | None = None,
    ) -> None:
        if not providers:
            raise ValueError("At least one provider is required")
        self._providers = providers
        self._config = config
        self._on_progress = on_progress

    def provider_for(self, task: TaskDescriptor) -> AIProvider:
        """Return the provider for the task's tier, or the other tier if it is not configured."""
        tier = select_tier(task)
        provider = self._providers.get(tier)
        if provider is not None:
            return provider
        fallback = next(iter(self._providers.values()))
        logger.warning("No provider for %s tier, falling back to %s", tier.value, fallback.name())
        return fallback

    def log_cost_estimate(self, task: TaskDescriptor) -> None:
        estimate = estimate_cost(task)
        logger.info(
            "Cost estimate: model=%s search=$%.4f tokens=$%.4f total=$%.4f",
            self.provider_for(task).model_string(),
            estimate.search_cost,
            estimate.token_cost,
            estimate.total,
        )

    def _progress(self, message: str) -> None:
        if self._on_progress:
            self._on_progress(message)

    def gas_prompt(self, logs: str) -> str:
        return self._config.prompts.gas_analysis.format(logs=logs)

    async def search_docs(self, query: str, task: TaskDescriptor) -> RawModelResponse:
        search = self._config.search
        max_uses = min(task.estimated_search_count or search.default_max_uses, search.max_uses_cap)
        prompt = self._config.prompts.search.format(query=query, context=_context_line(task))

        self._progress("Searching Sei documentation...")
        return await self.provider_for(task).generate(
            prompt,
            tools=frozenset({WEB_SEARCH}),
            search_max_uses=max_uses,
            allowed_domains=search.allowed_domains,
        )

    async def analyze_with_code_execution(self, data: str, task: TaskDescriptor) -> RawModelResponse:
        prompt = self._config.prompts.code_analysis.format(data=data)

        self._progress("Analyzing with Python...")
        return await self.provider_for(task).generate(prompt, tools=frozenset({CODE_EXECUTION}))

    async def debug_interactive(self, issue: str, task: TaskDescriptor) -> RawModelResponse:
        prompt = self._config.prompts.interactive.format(issue=issue, context=_context_line(task))

        self._progress("Analyzing issue...")
        return await self.provider_for(task).generate(
            prompt,
            tools=frozenset({WEB_SEARCH, CODE_EXECUTION}),
            on_progress=self._progress,
        )

    async def generate_report(
        self,
        issue: str,
        search_results: RawModelResponse | None = None,
        analysis: RawModelResponse | None = None,
    ) -> RawModelResponse:
        task = TaskDescriptor(
            kind="general",
            complexity="medium",
            subject_text=issue,
            needs_deep_analysis=True,
        )
        network = self._config.network
        prompt = self._config.prompts.report.format(
            issue=issue,
            search_results=segments_json(search_results),
            analysis_results=segments_json(analysis),
            block_time=network.block_time,
            parallel_execution=network.parallel_execution,
            network=network.network,
        )

        self._progress("Generating comprehensive report...")
        provider = self.provider_for(task)
        response = await provider.generate(prompt)
        if not any(seg.kind == "text" and seg.text for seg in response.segments):
            raise RuntimeError(f"Report model {provider.name()} returned empty content")
        return response
