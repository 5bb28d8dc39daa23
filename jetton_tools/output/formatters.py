"""Output formatters for allocation plans and metadata.

Provides:
- JSON: Machine-readable, complete plan
- Table: Human-readable CLI output (rich), plain text for files
- Metadata: Decoded records and verification results
"""

import json
import logging
from abc import ABC, abstractmethod
from io import StringIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..cell import Cell
from ..core.models import AllocationPlan, MetadataCheck, MetadataRecord
from ..core.types import NANO_DECIMALS, BucketKind, MetadataVariant
from ..core.units import format_nano

logger = logging.getLogger(__name__)


class PlanFormatter(ABC):
    """Abstract base class for allocation plan formatters."""

    @abstractmethod
    def format(self, plan: AllocationPlan) -> str:
        """Format the plan as a string."""
        pass

    def format_to_file(self, plan: AllocationPlan, filepath: str) -> None:
        """Write the formatted plan to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format(plan))
        logger.info(f"Wrote plan {plan.fingerprint[:12]} to {filepath}")


class PlanJSONFormatter(PlanFormatter):
    """Formats plans as JSON. Amounts stay exact integers."""

    def __init__(self, indent: int = 2, include_notes: bool = True):
        self.indent = indent
        self.include_notes = include_notes

    def format(self, plan: AllocationPlan) -> str:
        data = plan.model_dump(mode="json")
        if not self.include_notes:
            data.pop("calculation_notes", None)
        return json.dumps(data, indent=self.indent)


class PlanTableFormatter(PlanFormatter):
    """Formats plans as tables for CLI output."""

    def __init__(self, use_rich: bool = True, width: int = 100, decimals: int = NANO_DECIMALS):
        """
        Initialize table formatter.

        Args:
            use_rich: Use rich for colored output; plain text otherwise
            width: Maximum table width
            decimals: Fractional digits of one display unit
        """
        self.use_rich = use_rich
        self.width = width
        self.decimals = decimals

    def format(self, plan: AllocationPlan) -> str:
        if self.use_rich:
            return self._format_rich(plan)
        return self._format_plain(plan)

    def _share(self, plan: AllocationPlan, amount: int) -> str:
        if not plan.total:
            return "-"
        # Basis points, integer arithmetic only
        bps = amount * 10_000 // plan.total
        return f"{bps // 100}.{bps % 100:02d}%"

    def _format_plain(self, plan: AllocationPlan) -> str:
        lines = []
        lines.append("=" * 70)
        lines.append("ALLOCATION PLAN")
        lines.append("=" * 70)
        lines.append(f"Fingerprint: {plan.fingerprint}")
        lines.append(f"Total:       {format_nano(plan.total, self.decimals)}")
        lines.append(f"Reserved:    {format_nano(plan.reserved, self.decimals)}")
        lines.append(f"Remaining:   {format_nano(plan.remaining, self.decimals)}")
        lines.append("")
        lines.append(f"{'Bucket':<16} {'Weight':>7} {'Amount':>28} {'Share':>8}")
        lines.append("-" * 70)
        for bucket in plan.buckets:
            weight = f"{bucket.weight}%" if bucket.weight is not None else "fixed"
            lines.append(
                f"{bucket.label:<16} {weight:>7} "
                f"{format_nano(bucket.amount, self.decimals):>28} "
                f"{self._share(plan, bucket.amount):>8}"
            )
        lines.append("-" * 70)
        lines.append(f"{'TOTAL':<16} {'':>7} {format_nano(plan.allocated, self.decimals):>28}")
        if plan.remainder:
            lines.append("")
            lines.append(f"Remainder of {plan.remainder} nano absorbed by {plan.absorber}")
        return "\n".join(lines) + "\n"

    def _format_rich(self, plan: AllocationPlan) -> str:
        output = StringIO()
        console = Console(file=output, force_terminal=True, width=self.width)

        console.print(Panel(
            f"[bold cyan]Total {format_nano(plan.total, self.decimals)}[/]\n"
            f"[dim]Fingerprint: {plan.fingerprint[:16]}...[/]",
            title="Allocation Plan",
            expand=False,
        ))

        table = Table(title="Buckets")
        table.add_column("Bucket", style="cyan")
        table.add_column("Weight", justify="right", style="dim")
        table.add_column("Amount", justify="right", style="green")
        table.add_column("Share", justify="right", style="dim")

        for bucket in plan.buckets:
            weight = f"{bucket.weight}%" if bucket.kind is BucketKind.WEIGHTED else "fixed"
            amount = format_nano(bucket.amount, self.decimals)
            if bucket.absorbed_remainder:
                amount += f" [yellow](+{bucket.absorbed_remainder} nano)[/]"
            table.add_row(bucket.label, weight, amount, self._share(plan, bucket.amount))

        status = "[green]Exact[/]" if plan.allocated == plan.total else "[red]MISMATCH[/]"
        table.add_row("", "", "", "", end_section=True)
        table.add_row(
            "[bold]TOTAL[/]", "", f"[bold]{format_nano(plan.allocated, self.decimals)}[/]", status
        )
        console.print(table)

        return output.getvalue()

    def format_to_file(self, plan: AllocationPlan, filepath: str) -> None:
        """Write plain text (no ANSI codes) to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self._format_plain(plan))
        logger.info(f"Wrote plan {plan.fingerprint[:12]} to {filepath}")


class MetadataFormatter:
    """Formats decoded metadata, content cells and verification results."""

    def format_record(self, record: MetadataRecord) -> str:
        lines = [f"Format: {record.variant.value} (flag={record.variant.flag})"]
        if record.variant is MetadataVariant.OFFCHAIN:
            lines.append(f"URI: {record.uri}")
        else:
            for field, value in record.content.as_strings().items():
                lines.append(f"{field.value}: {value!r}")
        return "\n".join(lines)

    def format_cell(self, cell: Cell) -> str:
        return f"Hash: {cell.hash_hex}\nDepth: {cell.depth}\n{cell.describe()}"

    def format_check(self, check: MetadataCheck) -> str:
        lines = []
        if check.expected_variant != check.actual_variant:
            lines.append(
                f"[FAIL] format: expected {check.expected_variant.value}, "
                f"found {check.actual_variant.value}"
            )
        for field_check in check.checks:
            status = "OK" if field_check.matches else "FAIL"
            line = f"[{status}] {field_check.field}: {field_check.actual!r}"
            if not field_check.matches:
                line += f" (expected {field_check.expected!r})"
            lines.append(line)
        lines.append("Metadata matches" if check.ok else "Metadata does NOT match")
        return "\n".join(lines)
