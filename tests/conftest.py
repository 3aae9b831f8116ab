"""Shared pytest fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from config.config_loader import (
    AppConfig,
    DefaultsConfig,
    ModelConfig,
    NetworkConfig,
    PromptsConfig,
    SearchConfig,
)
from sei_debug.models import Citation, RawModelResponse, Segment
from sei_debug.providers.base import AIProvider

TX_HASH = "0x" + "ab" * 32


def text_response(
    text: str,
    citations: tuple[Citation, ...] = (),
    model_id: str = "mock-model",
    used_tools: frozenset[str] = frozenset(),
) -> RawModelResponse:
    return RawModelResponse(
        segments=(Segment(kind="text", text=text, citations=citations),),
        model_id=model_id,
        used_tools=used_tools,
    )


@pytest.fixture
def sample_model_config() -> ModelConfig:
    return ModelConfig(
        tier="high",
        model="claude-opus-4-20250514",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        max_tokens=1024,
    )


@pytest.fixture
def sample_prompts_config() -> PromptsConfig:
    return PromptsConfig(
        search="Search: {query}\n{context}",
        code_analysis="Analyze: {data}",
        interactive="Debug: {issue}\n{context}",
        report=(
            "Report for {issue}\nSearch: {search_results}\nAnalysis: {analysis_results}\n"
            "{network} {block_time} {parallel_execution}"
        ),
        gas_analysis="Gas logs: {logs}",
    )


@pytest.fixture
def sample_app_config(tmp_path: Path, sample_prompts_config: PromptsConfig) -> AppConfig:
    models = {
        "high": ModelConfig("high", "claude-opus-4-20250514", "ANTHROPIC_API_KEY", 60, 4096),
        "standard": ModelConfig("standard", "claude-sonnet-4-20250514", "ANTHROPIC_API_KEY", 60, 4096),
    }
    return AppConfig(
        defaults=DefaultsConfig(output_dir=tmp_path / "reports"),
        models=models,
        network=NetworkConfig(),
        search=SearchConfig(allowed_domains=["docs.sei.io"], default_max_uses=3, max_uses_cap=5),
        prompts=sample_prompts_config,
        available_tiers={"high", "standard"},
    )


@pytest.fixture
def sample_citation() -> Citation:
    return Citation(
        url="https://docs.sei.io/evm/parallelization",
        title="Parallelization",
        excerpt="Sei executes transactions optimistically in parallel.",
    )


class MockProvider(AIProvider):
    """Test double AIProvider."""

    def __init__(self, provider_name: str = "mock", response_text: str = "Mock response") -> None:
        self._name = provider_name
        self._response_text = response_text
        # Shadow the class method with an AsyncMock at the instance level.
        # ABC check passes because generate is defined in the class body below.
        self.generate = AsyncMock(  # type: ignore[assignment]
            return_value=text_response(response_text, model_id=f"{provider_name}-model")
        )

    def name(self) -> str:
        return self._name

    def model_string(self) -> str:
        return f"{self._name}-model"

    async def generate(self, prompt: str, **kwargs) -> RawModelResponse:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return text_response(self._response_text, model_id=f"{self._name}-model")


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()
