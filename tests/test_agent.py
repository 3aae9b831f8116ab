"""Tests for sei_debug/agent.py with a mocked DebugClient."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from sei_debug.agent import SeiDebugAgent
from sei_debug.models import Citation, DebugReport, RawModelResponse, TaskDescriptor
from tests.conftest import TX_HASH, text_response

SEARCH_CITE = Citation(url="https://docs.sei.io/a", title="A")
REPORT_CITE = Citation(url="https://docs.sei.io/b", title="B")


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.debug_interactive = AsyncMock(
        return_value=text_response("interactive", citations=(SEARCH_CITE,), used_tools=frozenset({"web_search"}))
    )
    client.search_docs = AsyncMock(
        return_value=text_response("found a revert", citations=(SEARCH_CITE,), used_tools=frozenset({"web_search"}))
    )
    client.analyze_with_code_execution = AsyncMock(
        return_value=text_response("python output", used_tools=frozenset({"code_execution"}))
    )
    client.generate_report = AsyncMock(
        return_value=text_response(
            "Root cause: nonce reuse. Fix:\n1. Refresh the nonce.",
            citations=(REPORT_CITE,),
            model_id="claude-opus-4-20250514",
        )
    )
    client.gas_prompt = MagicMock(side_effect=lambda logs: f"Gas logs: {logs}")
    return client


async def test_debug_without_hash(client):
    statuses: list[str] = []
    agent = SeiDebugAgent(client, on_status=statuses.append)

    report = await agent.debug("contract call failed", user_context="testnet")

    assert isinstance(report, DebugReport)
    task: TaskDescriptor = client.debug_interactive.call_args.args[1]
    assert task.kind == "contract"
    assert task.user_context == "testnet"
    client.log_cost_estimate.assert_called_once_with(task)
    client.search_docs.assert_not_called()
    assert report.root_cause == "nonce reuse."
    assert report.suggestions == ("Refresh the nonce.",)
    assert report.sources == (REPORT_CITE, SEARCH_CITE)
    assert report.tools_used == frozenset({"web_search"})
    assert report.model_id == "claude-opus-4-20250514"
    assert statuses[0] == "Starting debug session..."
    assert statuses[-1] == "Generating final report..."


async def test_debug_with_hash_analyzes_transaction(client):
    agent = SeiDebugAgent(client)

    report = await agent.debug(f"Debug transaction {TX_HASH}")

    client.search_docs.assert_awaited_once()
    assert TX_HASH in client.search_docs.call_args.args[0]
    client.analyze_with_code_execution.assert_awaited_once()
    kwargs = client.generate_report.call_args.kwargs
    assert kwargs["analysis"].segments[0].text == "python output"
    assert report.tools_used == frozenset({"web_search", "code_execution"})


async def test_analyze_transaction_skips_code_when_search_empty(client):
    client.search_docs = AsyncMock(return_value=RawModelResponse(segments=(), model_id="m"))
    agent = SeiDebugAgent(client)

    result = await agent.analyze_transaction(TX_HASH)

    assert result.segments == ()
    client.analyze_with_code_execution.assert_not_called()
    task = client.search_docs.call_args.args[1]
    assert task.kind == "transaction"
    assert task.needs_code_execution is True


async def test_parallel_execution_follows_up_on_signals(client):
    agent = SeiDebugAgent(client)

    report = await agent.debug_parallel_execution(TX_HASH, user_context="two txs same block")

    task = client.search_docs.call_args.args[1]
    assert task.kind == "parallel"
    assert task.complexity == "high"
    assert task.user_context == "two txs same block"
    client.analyze_with_code_execution.assert_awaited_once()
    assert client.generate_report.call_args.args[0] == f"Parallel execution debug for transaction {TX_HASH}"
    assert report.tools_used == frozenset({"web_search", "code_execution"})


async def test_parallel_execution_without_signals_skips_code(client):
    client.search_docs = AsyncMock(return_value=text_response("nothing relevant"))
    agent = SeiDebugAgent(client)

    await agent.debug_parallel_execution(TX_HASH)

    client.analyze_with_code_execution.assert_not_called()
    assert client.generate_report.call_args.kwargs["analysis"] is None


async def test_analyze_gas_patterns(client):
    agent = SeiDebugAgent(client)

    report = await agent.analyze_gas_patterns("gasUsed=90000")

    data, task = client.analyze_with_code_execution.call_args.args
    assert data == "Gas logs: gasUsed=90000"
    assert task.kind == "gas"
    assert task.needs_code_execution is True
    assert client.generate_report.call_args.args[0] == "Gas usage analysis"
    assert report.tools_used == frozenset({"code_execution"})
    assert report.sources == (REPORT_CITE,)
