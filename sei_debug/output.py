"""Rich console output and markdown file save for debug reports."""

import logging
import re
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from config.config_loader import AppConfig, NetworkConfig
from sei_debug.models import Citation, CostEstimate, DebugReport, ModelTier
from sei_debug.selector import SEARCH_COST, TOKEN_RATE_PER_1K

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_EXCERPT_LEN = 100


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len]


def _excerpt(citation: Citation) -> str:
    if not citation.excerpt:
        return ""
    if len(citation.excerpt) <= _EXCERPT_LEN:
        return citation.excerpt
    return citation.excerpt[:_EXCERPT_LEN] + "..."


def analysis_text(report: DebugReport) -> str:
    return "\n".join(seg.text for seg in report.segments if seg.kind == "text" and seg.text)


def print_report(report: DebugReport) -> None:
    """Print a debug report to the console."""
    console.print(Rule("[bold green]Debug Report[/bold green]"))
    tools = ", ".join(sorted(report.tools_used)) or "none"
    console.print(Text(f"Model: {report.model_id} | Tools: {tools}", style="dim"))

    if report.root_cause:
        console.print(Panel(Text(report.root_cause), title="[bold]Root Cause[/bold]", border_style="red"))

    if report.suggestions:
        body = "\n".join(f"{i}. {s}" for i, s in enumerate(report.suggestions, 1))
        console.print(Panel(Text(body), title="[bold]Suggestions[/bold]", border_style="yellow"))

    if report.citations:
        table = Table(title="Sources", show_lines=False)
        table.add_column("Title")
        table.add_column("URL", style="cyan")
        table.add_column("Excerpt", style="dim")
        for citation in report.citations:
            table.add_row(Text(citation.title), Text(citation.url), Text(_excerpt(citation)))
        console.print(table)

    text = analysis_text(report)
    if text:
        console.print(Rule("[bold cyan]Analysis[/bold cyan]"))
        console.print(Markdown(text))


def print_cost_estimate(model: str, estimate: CostEstimate) -> None:
    console.print(
        Text(
            f"Model: {model} | Search: ${estimate.search_cost:.4f} | "
            f"Tokens: ${estimate.token_cost:.4f} | Total: ${estimate.total:.4f}",
            style="dim",
        )
    )


def print_network_info(network: NetworkConfig) -> None:
    table = Table(title="Sei Network Information", show_header=False)
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("Network", network.network)
    table.add_row("Block time", network.block_time)
    table.add_row("Parallel execution", "yes" if network.parallel_execution else "no")
    table.add_row("RPC", network.rpc_endpoint)
    table.add_row("Explorer", network.block_explorer)
    table.add_row("Docs", network.docs)
    if network.features:
        table.add_row("Features", "\n".join(network.features))
    console.print(table)


def print_cost_info(config: AppConfig) -> None:
    table = Table(title="Cost Information")
    table.add_column("Tier", style="bold")
    table.add_column("Model")
    table.add_column("Used for")
    table.add_column("$ / 1K tokens", justify="right")
    usage = {
        ModelTier.HIGH: "Complex analysis and code execution",
        ModelTier.STANDARD: "Simple queries, status checks, cost efficiency",
    }
    for tier in ModelTier:
        model_cfg = config.models.get(tier.value)
        table.add_row(
            tier.value,
            model_cfg.model if model_cfg else "-",
            usage[tier],
            f"{TOKEN_RATE_PER_1K[tier]:.3f}",
        )
    console.print(table)
    console.print(Text(f"Web search: ~${SEARCH_COST:.2f} per search. Model chosen by task complexity.", style="dim"))


def save_to_file(report: DebugReport, issue: str, output_dir: Path) -> Path:
    """Save a debug report as a markdown file.

    Args:
        report: The assembled DebugReport.
        issue: The issue text the session was started with.
        output_dir: Directory to save the file in.

    Returns:
        Path to the saved file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = output_dir / f"{timestamp}_{_slug(issue) or 'report'}.md"

    lines: list[str] = [
        f"# Sei Debug Report: {issue[:80]}",
        "",
        f"**Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Model:** {report.model_id}",
        f"**Tools:** {', '.join(sorted(report.tools_used)) or 'none'}",
        "",
        "---",
        "",
    ]

    if report.root_cause:
        lines += ["## Root Cause", "", report.root_cause, ""]

    if report.suggestions:
        lines += ["## Suggestions", ""]
        lines += [f"{i}. {s}" for i, s in enumerate(report.suggestions, 1)]
        lines.append("")

    lines += ["## Analysis", "", analysis_text(report), ""]

    if report.citations:
        lines += ["## Sources", ""]
        lines += [f"- [{c.title or c.url}]({c.url})" for c in report.citations]
        lines.append("")

    filepath.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Report saved to: %s", filepath)
    return filepath
