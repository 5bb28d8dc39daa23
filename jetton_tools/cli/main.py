"""CLI entry point for the jetton toolkit.

Usage:
    jetton-tools metadata encode --uri https://kiwi.eu.com/kwt/metadata.json
    jetton-tools metadata encode --file metadata.json
    jetton-tools metadata dry-run --file metadata.json
    jetton-tools allocation plan --network mainnet --output json --save plan.json
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..allocation import build_plan
from ..core.config import ToolConfig
from ..core.exceptions import JettonToolsError
from ..core.models import MetadataRecord
from ..core.units import to_nano
from ..ledger import InMemoryLedger, publish_metadata
from ..metadata import encode_metadata, load_metadata_file
from ..output.formatters import MetadataFormatter, PlanJSONFormatter, PlanTableFormatter

# Initialize app
app = typer.Typer(
    name="jetton-tools",
    help="Jetton metadata encoding and initial allocation planning",
    add_completion=False,
)
metadata_app = typer.Typer(help="Build and check content metadata cells")
allocation_app = typer.Typer(help="Plan the initial supply allocation")
app.add_typer(metadata_app, name="metadata")
app.add_typer(allocation_app, name="allocation")

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )


def _load_config(config: Optional[Path], network: Optional[str]) -> ToolConfig:
    try:
        return ToolConfig.load(config, network)
    except JettonToolsError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)


def _resolve_record(
    uri: Optional[str],
    file: Optional[Path],
    config: Optional[Path],
    network: Optional[str],
) -> MetadataRecord:
    if uri and file:
        console.print("[red]Use either --uri or --file, not both[/]")
        raise typer.Exit(1)
    if file:
        return MetadataRecord.onchain(load_metadata_file(file))
    if uri:
        return MetadataRecord.offchain(uri)

    network_config = _load_config(config, network).network
    if not network_config.metadata_uri:
        console.print(f"[red]No metadata_uri configured for {network_config.name}[/]")
        raise typer.Exit(1)
    return MetadataRecord.offchain(network_config.metadata_uri)


@metadata_app.command("encode")
def encode(
    uri: Optional[str] = typer.Option(None, "--uri", "-u", help="Off-chain metadata URI"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Metadata JSON/YAML for on-chain encoding"
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to network config YAML"),
    network: Optional[str] = typer.Option(None, "--network", "-n", help="Network name"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Encode metadata into a content cell and print its tree.

    Without --uri or --file, the configured metadata URI is used.
    """
    setup_logging(verbose)
    formatter = MetadataFormatter()

    try:
        record = _resolve_record(uri, file, config, network)
        cell = encode_metadata(record)
    except JettonToolsError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    console.print(formatter.format_record(record))
    console.print(formatter.format_cell(cell))


@metadata_app.command("dry-run")
def dry_run(
    uri: Optional[str] = typer.Option(None, "--uri", "-u", help="Off-chain metadata URI"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Metadata JSON/YAML for on-chain encoding"
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to network config YAML"),
    network: Optional[str] = typer.Option(None, "--network", "-n", help="Network name"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Submit metadata to an in-memory ledger and verify the read-back.

    Exercises the same encode, submit, poll and verify path as a real
    content update, without touching any network.
    """
    setup_logging(verbose)
    formatter = MetadataFormatter()

    try:
        record = _resolve_record(uri, file, config, network)
        ledger = InMemoryLedger(confirm_after=1, network="dry-run")
        check = publish_metadata(ledger, record, interval_seconds=0)
    except JettonToolsError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    console.print(formatter.format_check(check))
    console.print(f"Content hash: {check.cell_hash}")
    if not check.ok:
        raise typer.Exit(1)


@allocation_app.command("plan")
def plan(
    config: Optional[Path] = typer.Option(None, "--config", help="Path to network config YAML"),
    network: Optional[str] = typer.Option(None, "--network", "-n", help="Network name"),
    total: Optional[str] = typer.Option(
        None, "--total", help="Override total supply (display units)"
    ),
    reserved: Optional[str] = typer.Option(
        None, "--reserved", help="Override reserved amount (display units)"
    ),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
    save: Optional[Path] = typer.Option(None, "--save", "-s", help="Save output to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Compute the initial allocation plan. Nothing is minted.
    """
    setup_logging(verbose)
    tool_config = _load_config(config, network)
    allocation = tool_config.allocation

    try:
        total_nano = to_nano(total, allocation.decimals) if total else allocation.max_supply
        reserved_nano = (
            to_nano(reserved, allocation.decimals) if reserved else allocation.reserved
        )
        result = build_plan(
            total_nano,
            reserved_nano,
            allocation.weights,
            reserved_label=allocation.reserved_label,
        )
    except JettonToolsError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    if output.lower() == "json":
        formatter = PlanJSONFormatter()
        print(formatter.format(result))
    else:
        formatter = PlanTableFormatter(decimals=allocation.decimals)
        console.print(formatter.format(result))
        console.print(f"[bold]Destinations ({tool_config.network.name}):[/]")
        for bucket in result.buckets:
            wallet = tool_config.network.wallets.get(bucket.label, "[yellow]not configured[/]")
            console.print(f"  {bucket.label}: {wallet}")

    if save:
        save.parent.mkdir(parents=True, exist_ok=True)
        formatter.format_to_file(result, str(save))
        console.print(f"[green]Saved to {save}[/]")


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__

    console.print(f"Jetton Tools v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
