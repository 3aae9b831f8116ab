"""Click CLI: loads config, builds tier providers, runs debug sessions, renders reports."""

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import AppConfig, load_config
from sei_debug.agent import SeiDebugAgent
from sei_debug.classifier import classify
from sei_debug.client import DebugClient
from sei_debug.commands import DebugCommands, InvalidTxHashError, extract_tx_hash, is_valid_tx_hash
from sei_debug.issue_file import parse_issue_file
from sei_debug.models import DebugReport, ModelTier
from sei_debug.output import (
    console,
    print_cost_estimate,
    print_cost_info,
    print_network_info,
    print_report,
    save_to_file,
)
from sei_debug.providers.anthropic import AnthropicProvider
from sei_debug.providers.base import AIProvider, ProviderError
from sei_debug.selector import estimate_cost, select_tier

logger = logging.getLogger(__name__)

# name -> (DebugCommands method, needs a transaction hash, data required)
COMMANDS: dict[str, tuple[str, bool, bool]] = {
    "debug": ("debug_general_issue", False, True),
    "tx": ("debug_transaction", True, True),
    "parallel": ("debug_parallel_execution", True, True),
    "gas": ("debug_gas_issues", False, True),
    "contract": ("debug_contract_deployment", False, True),
    "interop": ("debug_evm_cosmwasm_interop", False, True),
    "timing": ("debug_block_timing", False, True),
    "explain": ("explain_sei_features", False, False),
    "performance": ("analyze_performance", False, True),
}


@dataclass
class CliState:
    config: AppConfig
    output_dir: Path | None


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    # The SDK's HTTP client is chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _build_providers(config: AppConfig) -> dict[ModelTier, AIProvider]:
    """Build one provider per tier that has an API key."""
    providers: dict[ModelTier, AIProvider] = {}
    for tier in ModelTier:
        if tier.value not in config.available_tiers:
            continue
        try:
            providers[tier] = AnthropicProvider(config.models[tier.value])
        except ProviderError as exc:
            logger.warning("Failed to instantiate provider for tier '%s': %s", tier.value, exc)
    return providers


def _resolve_tx_hash(data: str) -> str:
    """Accept a bare hash or text containing one."""
    if is_valid_tx_hash(data):
        return data
    extracted = extract_tx_hash(data)
    if extracted is None:
        raise InvalidTxHashError(data)
    return extracted


def _run_command(state: CliState, name: str, data: str, user_context: str | None = None) -> DebugReport:
    """Run one debug command under a spinner, then print (and optionally save) the report."""
    providers = _build_providers(state.config)
    if not providers:
        env_names = sorted({m.api_key_env for m in state.config.models.values()})
        raise click.ClickException(
            f"Missing API key. Set {' or '.join(env_names)} in your environment or .env file."
        )

    method_name, needs_hash, _ = COMMANDS[name]
    if needs_hash:
        data = _resolve_tx_hash(data)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Starting...", total=None)

        def on_status(message: str) -> None:
            progress.update(task_id, description=message)

        client = DebugClient(providers, state.config, on_progress=on_status)
        commands = DebugCommands(SeiDebugAgent(client, on_status=on_status))
        method = getattr(commands, method_name)
        if name == "explain":
            report = asyncio.run(method(data or None))
        else:
            report = asyncio.run(method(data, user_context))

    print_report(report)
    if state.output_dir is not None:
        saved_path = save_to_file(report, data or name, state.output_dir)
        console.print(f"\n[dim]Saved to: {saved_path}[/dim]")
    return report


def _invoke(state: CliState, name: str, data: str, user_context: str | None = None) -> None:
    """Run a command from a one-shot CLI invocation; failures exit with status 1."""
    try:
        _run_command(state, name, data, user_context)
    except InvalidTxHashError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}: {escape(repr(exc.value))}")
        console.print("Transaction hash must be 0x followed by 64 hex characters.")
        sys.exit(1)
    except (ProviderError, RuntimeError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(1)


def _print_help() -> None:
    console.print("[bold]Commands:[/bold]")
    for name in COMMANDS:
        console.print(f"  {name} <data>")
    console.print("  info | cost | help | exit")


def _interactive_loop(state: CliState) -> None:
    console.print("[bold cyan]Sei Debug Agent[/bold cyan] - interactive mode. Type 'help' for commands or 'exit' to quit.")
    while True:
        try:
            line = click.prompt("\nsei-debug>", default="", show_default=False, prompt_suffix=" ").strip()
        except click.Abort:
            break

        if line in ("exit", "quit"):
            break
        if not line:
            continue
        if line == "help":
            _print_help()
            continue
        if line == "info":
            print_network_info(state.config.network)
            continue
        if line == "cost":
            print_cost_info(state.config)
            continue

        name, _, data = line.partition(" ")
        if name not in COMMANDS:
            # Unknown commands are debugged as general issues
            name, data = "debug", line
        data = data.strip()
        if COMMANDS[name][2] and not data:
            console.print(f"[yellow]'{name}' needs data, e.g. {name} <text>[/yellow]")
            continue

        try:
            _run_command(state, name, data)
        except (click.ClickException, InvalidTxHashError, ProviderError, RuntimeError) as exc:
            console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")

    console.print("Goodbye!")


@click.group(invoke_without_command=True)
@click.option("--output", "output_path", default=None, type=click.Path(file_okay=False),
              help="Save each report as markdown in this directory")
@click.option("--save", is_flag=True, help="Save each report to the configured output directory")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.pass_context
def main(ctx: click.Context, output_path: str | None, save: bool, verbose: bool) -> None:
    """Sei Debug Agent -- blockchain debugging with Claude.

    \b
    Examples:
      sei-debug debug "transaction failed with revert"
      sei-debug tx 0x1234...abcd
      sei-debug gas "high gas usage in contract call"
      sei-debug explain "parallel execution"
      sei-debug cost "what is the status of my tx"
      sei-debug --save gas "gasUsed=210000"
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config()
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    # --output implies saving; --save alone uses defaults.output_dir
    if output_path:
        effective_output: Path | None = Path(output_path)
    elif save:
        effective_output = config.defaults.output_dir
    else:
        effective_output = None

    ctx.obj = CliState(config=config, output_dir=effective_output)

    if ctx.invoked_subcommand is None:
        _interactive_loop(ctx.obj)


def _data_command(name: str, help_text: str, argument: str) -> click.Command:
    @click.argument(argument, nargs=-1, required=True)
    @click.option("--context", "user_context", default=None, help="Extra context for the model")
    @click.pass_obj
    def command(state: CliState, user_context: str | None, **kwargs: tuple[str, ...]) -> None:
        _invoke(state, name, " ".join(kwargs[argument]), user_context)

    return main.command(name=name, help=help_text)(command)


_data_command("tx", "Debug a specific transaction.", "tx_hash")
_data_command("parallel", "Debug parallel execution conflicts for a transaction.", "tx_hash")
_data_command("gas", "Analyze gas usage from a transaction hash or logs.", "data")
_data_command("contract", "Debug contract deployment issues.", "data")
_data_command("interop", "Debug EVM-Cosmwasm interoperability issues.", "data")
_data_command("timing", "Debug 400ms block timing issues.", "data")
_data_command("performance", "Analyze performance metrics.", "data")


@main.command()
@click.argument("issue", nargs=-1)
@click.option("--file", "issue_file", type=click.Path(exists=True, dir_okay=False),
              help="Read the issue from a .md file (frontmatter 'context' is used as context)")
@click.option("--context", "user_context", default=None, help="Extra context for the model")
@click.pass_obj
def debug(state: CliState, issue: tuple[str, ...], issue_file: str | None, user_context: str | None) -> None:
    """Debug any Sei EVM issue."""
    if issue_file:
        issue_text, meta = parse_issue_file(Path(issue_file))
        if user_context is None and "context" in meta:
            user_context = str(meta["context"])
    else:
        issue_text = " ".join(issue)

    if not issue_text:
        console.print("[bold red]Error:[/bold red] Provide an ISSUE argument or --file.")
        console.print("Example: sei-debug debug 'transaction failed with revert'")
        sys.exit(1)

    _invoke(state, "debug", issue_text, user_context)


@main.command()
@click.argument("feature", nargs=-1)
@click.pass_obj
def explain(state: CliState, feature: tuple[str, ...]) -> None:
    """Explain Sei EVM features."""
    _invoke(state, "explain", " ".join(feature))


@main.command()
@click.pass_obj
def info(state: CliState) -> None:
    """Show Sei network information."""
    print_network_info(state.config.network)


@main.command()
@click.argument("issue", nargs=-1)
@click.pass_obj
def cost(state: CliState, issue: tuple[str, ...]) -> None:
    """Show model pricing, or the estimate for ISSUE without calling the API."""
    if not issue:
        print_cost_info(state.config)
        return

    task = classify(" ".join(issue))
    tier = select_tier(task)
    model_cfg = state.config.models.get(tier.value)
    console.print(f"Task: [bold]{task.kind}[/bold] / complexity [bold]{task.complexity}[/bold] -> {tier.value} tier")
    print_cost_estimate(model_cfg.model if model_cfg else tier.value, estimate_cost(task))


@main.command()
@click.pass_obj
def interactive(state: CliState) -> None:
    """Start the interactive prompt."""
    _interactive_loop(state)


if __name__ == "__main__":
    main()
