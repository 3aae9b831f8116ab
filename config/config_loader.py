"""Load settings.yaml into typed dataclasses. Checks API keys at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


@dataclass
class ModelConfig:
    tier: str              # "high" or "standard"
    model: str
    api_key_env: str
    timeout_sec: int
    max_tokens: int


@dataclass
class NetworkConfig:
    network: str = "Sei EVM"
    rpc_endpoint: str = "https://evm-rpc.sei-apis.com"
    block_explorer: str = "https://seitrace.com"
    block_time: str = "400ms"
    parallel_execution: bool = True
    docs: str = "https://docs.sei.io/evm/"
    features: list[str] = field(default_factory=list)


@dataclass
class SearchConfig:
    allowed_domains: list[str] = field(default_factory=list)
    default_max_uses: int = 3
    max_uses_cap: int = 5


@dataclass
class PromptsConfig:
    search: str
    code_analysis: str
    interactive: str
    report: str
    gas_analysis: str


@dataclass
class DefaultsConfig:
    output_dir: Path


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    models: dict[str, ModelConfig]
    network: NetworkConfig
    search: SearchConfig
    prompts: PromptsConfig
    available_tiers: set[str] = field(default_factory=set)


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    Logs missing API keys but does not raise; callers check available_tiers.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults = DefaultsConfig(output_dir=Path(raw["defaults"]["output_dir"]))

    network_raw = raw.get("network") or {}
    network = NetworkConfig(
        **{k: v for k, v in network_raw.items() if k in NetworkConfig.__dataclass_fields__}
    )

    search_raw = raw.get("search") or {}
    search = SearchConfig(
        allowed_domains=list(search_raw.get("allowed_domains", [])),
        default_max_uses=int(search_raw.get("default_max_uses", 3)),
        max_uses_cap=int(search_raw.get("max_uses_cap", 5)),
    )

    prompts_raw = raw["prompts"]
    prompts = PromptsConfig(
        search=prompts_raw["search"],
        code_analysis=prompts_raw["code_analysis"],
        interactive=prompts_raw["interactive"],
        report=prompts_raw["report"],
        gas_analysis=prompts_raw["gas_analysis"],
    )

    models: dict[str, ModelConfig] = {}
    available_tiers: set[str] = set()

    for tier, model_raw in raw["models"].items():
        models[tier] = ModelConfig(
            tier=tier,
            model=model_raw["model"],
            api_key_env=model_raw["api_key_env"],
            timeout_sec=int(model_raw["timeout_sec"]),
            max_tokens=int(model_raw["max_tokens"]),
        )

        api_key = os.environ.get(model_raw["api_key_env"], "").strip()
        if api_key:
            available_tiers.add(tier)
            logger.debug("Model tier available: %s (%s)", tier, model_raw["model"])
        else:
            logger.info(
                "Model tier skipped (no API key): %s, set %s in .env",
                tier,
                model_raw["api_key_env"],
            )

    return AppConfig(
        defaults=defaults,
        models=models,
        network=network,
        search=search,
        prompts=prompts,
        available_tiers=available_tiers,
    )
