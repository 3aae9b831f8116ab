"""Command surface: one method per CLI command, with transaction-hash validation."""

import logging
import re

from sei_debug.agent import SeiDebugAgent
from sei_debug.classifier import TX_HASH_PATTERN
from sei_debug.models import DebugReport

logger = logging.getLogger(__name__)

_FULL_TX_HASH = re.compile(r"0x[a-fA-F0-9]{64}")


class InvalidTxHashError(ValueError):
    """Raised when a command that needs a transaction hash gets something else."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__("Invalid transaction hash format")


def is_valid_tx_hash(value: str) -> bool:
    return _FULL_TX_HASH.fullmatch(value) is not None


def extract_tx_hash(text: str) -> str | None:
    """Return the first transaction hash embedded in text, if any."""
    match = TX_HASH_PATTERN.search(text)
    return match.group(0) if match else None


class DebugCommands:
    def __init__(self, agent: SeiDebugAgent) -> None:
        self._agent = agent

    async def debug_transaction(self, tx_hash: str, user_context: str | None = None) -> DebugReport:
        logger.info("Starting transaction debug for %s", tx_hash)
        if not is_valid_tx_hash(tx_hash):
            raise InvalidTxHashError(tx_hash)

        issue = f"Debug transaction {tx_hash}" + (f" - {user_context}" if user_context else "")
        return await self._agent.debug(issue, user_context)

    async def debug_parallel_execution(self, tx_hash: str, user_context: str | None = None) -> DebugReport:
        logger.info("Starting parallel execution debug for %s", tx_hash)
        if not is_valid_tx_hash(tx_hash):
            raise InvalidTxHashError(tx_hash)

        return await self._agent.debug_parallel_execution(tx_hash, user_context)

    async def debug_gas_issues(self, data_or_tx_hash: str, user_context: str | None = None) -> DebugReport:
        """A hash gets a full debug session; anything else is treated as gas logs."""
        logger.info("Starting gas issues debug")
        if is_valid_tx_hash(data_or_tx_hash):
            return await self._agent.debug(f"Analyze gas usage for transaction {data_or_tx_hash}", user_context)
        return await self._agent.analyze_gas_patterns(data_or_tx_hash)

    async def debug_contract_deployment(self, data: str, user_context: str | None = None) -> DebugReport:
        logger.info("Starting contract deployment debug")
        return await self._agent.debug(f"Debug contract deployment: {data}", user_context)

    async def debug_evm_cosmwasm_interop(self, data: str, user_context: str | None = None) -> DebugReport:
        logger.info("Starting EVM-Cosmwasm interop debug")
        return await self._agent.debug(f"Debug EVM-Cosmwasm interoperability issue: {data}", user_context)

    async def debug_block_timing(self, data: str, user_context: str | None = None) -> DebugReport:
        logger.info("Starting block timing debug")
        return await self._agent.debug(f"Debug block timing issue (400ms blocks): {data}", user_context)

    async def debug_general_issue(self, issue: str, user_context: str | None = None) -> DebugReport:
        logger.info("Starting general issue debug")
        return await self._agent.debug(issue, user_context)

    async def explain_sei_features(self, feature: str | None = None) -> DebugReport:
        logger.info("Explaining Sei features: %s", feature or "all")
        query = (
            f"Explain Sei EVM feature: {feature}"
            if feature
            else "Explain Sei EVM key features: parallel execution, 400ms blocks, EVM-Cosmwasm interop"
        )
        return await self._agent.debug(query)

    async def analyze_performance(self, data: str, user_context: str | None = None) -> DebugReport:
        logger.info("Starting performance analysis")
        return await self._agent.debug(
            f"Analyze Sei EVM performance: {data}. Focus on parallel execution efficiency and block timing.",
            user_context,
        )
