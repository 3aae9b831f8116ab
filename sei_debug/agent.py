"""Debugging sessions: classify, call the model tiers in sequence, assemble the report."""

import logging
from collections.abc import Callable

from sei_debug.classifier import TX_HASH_PATTERN, classify
from sei_debug.client import DebugClient, segments_json
from sei_debug.models import DebugReport, RawModelResponse, TaskDescriptor
from sei_debug.report import assemble

logger = logging.getLogger(__name__)

# Search text that warrants a follow-up code analysis in parallel-execution sessions
_PARALLEL_FOLLOW_UP_SIGNALS = ("revert", "state", "nonce")


def _extras(*responses: RawModelResponse | None) -> list[RawModelResponse]:
    return [r for r in responses if r is not None]


class SeiDebugAgent:
    """Runs multi-step debugging sessions against a DebugClient."""

    def __init__(
        self,
        client: DebugClient,
        on_status: Callable[[str], None] | None = None,
    ) -> None:
        self._client = client
        self._on_status = on_status

    def _status(self, message: str) -> None:
        logger.debug(message)
        if self._on_status:
            self._on_status(message)

    async def debug(self, issue: str, user_context: str | None = None) -> DebugReport:
        """Debug any issue: interactive pass, transaction drill-down, final report."""
        task = classify(issue, user_context)
        logger.info("Classified issue as %s/%s", task.kind, task.complexity)
        self._client.log_cost_estimate(task)

        self._status("Starting debug session...")
        initial_analysis = await self._client.debug_interactive(issue, task)

        transaction_analysis: RawModelResponse | None = None
        tx_match = TX_HASH_PATTERN.search(issue)
        if tx_match:
            self._status("Analyzing transaction details...")
            transaction_analysis = await self.analyze_transaction(tx_match.group(0), task)

        self._status("Generating final report...")
        report = await self._client.generate_report(
            issue,
            search_results=initial_analysis,
            analysis=transaction_analysis,
        )
        return assemble(report, _extras(initial_analysis, transaction_analysis))

    async def debug_parallel_execution(self, tx_hash: str, user_context: str | None = None) -> DebugReport:
        task = TaskDescriptor(
            kind="parallel",
            complexity="high",
            subject_text=tx_hash,
            user_context=user_context,
            needs_deep_analysis=True,
            needs_code_execution=True,
        )

        self._status("Debugging parallel execution...")
        search_results = await self._client.search_docs(
            f"parallel execution state conflicts nonce issues transaction {tx_hash}",
            task,
        )

        code_analysis: RawModelResponse | None = None
        if any(
            signal in (seg.text or "")
            for seg in search_results.segments
            for signal in _PARALLEL_FOLLOW_UP_SIGNALS
        ):
            code_analysis = await self._client.analyze_with_code_execution(
                f"Transaction {tx_hash} - Search Results: {segments_json(search_results)}",
                task,
            )

        self._status("Generating final report...")
        report = await self._client.generate_report(
            f"Parallel execution debug for transaction {tx_hash}",
            search_results=search_results,
            analysis=code_analysis,
        )
        return assemble(report, _extras(search_results, code_analysis))

    async def analyze_gas_patterns(self, logs: str) -> DebugReport:
        task = TaskDescriptor(
            kind="gas",
            complexity="medium",
            subject_text=logs,
            needs_code_execution=True,
        )

        self._status("Analyzing gas usage...")
        analysis = await self._client.analyze_with_code_execution(
            self._client.gas_prompt(logs),
            task,
        )

        self._status("Generating final report...")
        report = await self._client.generate_report("Gas usage analysis", analysis=analysis)
        return assemble(report, _extras(analysis))

    async def analyze_transaction(self, tx_hash: str, task: TaskDescriptor | None = None) -> RawModelResponse:
        """Search for a transaction, then analyze whatever the search found."""
        if task is None:
            task = TaskDescriptor(
                kind="transaction",
                complexity="medium",
                subject_text=tx_hash,
                needs_code_execution=True,
            )

        search_results = await self._client.search_docs(f"transaction {tx_hash} sei evm error revert", task)
        if not search_results.segments:
            return search_results

        return await self._client.analyze_with_code_execution(
            f"Transaction {tx_hash} data: {segments_json(search_results)}",
            task,
        )
