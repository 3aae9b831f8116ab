"""Abstract base for model providers."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from sei_debug.models import RawModelResponse

WEB_SEARCH = "web_search"
CODE_EXECUTION = "code_execution"


class ProviderError(Exception):
    """Raised when a provider call fails."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


class AIProvider(ABC):
    """Abstract base for model providers with server-side tools."""

    @abstractmethod
    def name(self) -> str:
        """Return the short provider name (e.g. 'claude-high')."""
        ...

    @abstractmethod
    def model_string(self) -> str:
        """Return the actual model identifier string."""
        ...

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        tools: frozenset[str] = frozenset(),
        search_max_uses: int | None = None,
        allowed_domains: list[str] | None = None,
        on_progress: Callable[[str], None] | None = None,
    ) -> RawModelResponse:
        """Send a prompt with the requested server tools.

        Args:
            prompt: The full prompt text to send.
            tools: Tool names to enable (WEB_SEARCH, CODE_EXECUTION).
            search_max_uses: Cap on web searches for this request.
            allowed_domains: Restrict web search to these domains.
            on_progress: If given, the request is streamed and each tool
                invocation is reported through this callback.

        Returns:
            RawModelResponse with segments, citations and tools used.

        Raises:
            ProviderError: On API failure or timeout.
        """
        ...
