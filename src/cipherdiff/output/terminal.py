"""Rich terminal reporter — per-file outcomes and per-line reuse decisions."""

from __future__ import annotations

from typing import List

from rich.console import Console
from rich.table import Table
from rich.text import Text

from cipherdiff.engine.context import EncryptionContext
from cipherdiff.engine.policy import should_re_encrypt_line
from cipherdiff.lines import is_blank
from cipherdiff.pipeline.models import OutcomeStatus, ProcessResult

_STATUS_STYLE = {
    OutcomeStatus.ENCRYPTED: "bold green",
    OutcomeStatus.DECRYPTED: "bold cyan",
    OutcomeStatus.SKIPPED: "dim",
    OutcomeStatus.FAILED: "bold red",
}


def _status_pill(status: OutcomeStatus) -> Text:
    return Text(status.value.upper(), style=_STATUS_STYLE.get(status, ""))


def render(result: ProcessResult, *, show_summary: bool = True, console: Console | None = None) -> None:
    """Print processing results to the terminal using Rich."""
    console = console or Console(stderr=True)

    if not result.outcomes:
        console.print()
        console.print("[dim]No files to process.[/dim]")
        return

    console.print()
    table = Table(
        title=f"cipherdiff {result.operation.value}",
        show_lines=False,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Status", justify="center", width=11)
    table.add_column("File", style="magenta")
    table.add_column("Reused", justify="right", style="green")
    table.add_column("Fresh", justify="right", style="yellow")
    table.add_column("Note")

    for outcome in result.outcomes:
        note = outcome.message or (f"→ {outcome.target}" if outcome.target else "")
        table.add_row(
            _status_pill(outcome.status),
            outcome.path,
            str(outcome.reused_lines) if outcome.reused_lines else "-",
            str(outcome.encrypted_lines) if outcome.encrypted_lines else "-",
            note,
        )

    console.print(table)

    if show_summary:
        _print_summary(console, result)

    console.print()
    if result.failed:
        console.print(f"[bold red]✗ {len(result.failed)} file(s) failed.[/bold red]")
    elif result.cancelled:
        console.print("[bold yellow]⚠  Cancelled before all files were processed.[/bold yellow]")
    else:
        verb = "Encrypted" if result.operation.value == "encrypt" else "Decrypted"
        console.print(f"[bold green]✓ {verb} {len(result.processed)} file(s).[/bold green]")


def _print_summary(console: Console, result: ProcessResult) -> None:
    console.print()
    console.print(f"[dim]Git repository:[/dim] {'yes' if result.is_git_repo else 'no'}")
    console.print(f"[dim]Processed:[/dim]      {len(result.processed)}")
    console.print(f"[dim]Skipped:[/dim]        {len(result.skipped)}")
    console.print(f"[dim]Failed:[/dim]         {len(result.failed)}")
    console.print(f"[dim]Lines reused:[/dim]   {result.reused_lines}")
    console.print(f"[dim]Duration:[/dim]       {result.duration_ms:.0f}ms")


def render_context(
    path: str,
    lines: List[str],
    context: EncryptionContext,
    *,
    console: Console | None = None,
) -> None:
    """Show, per line, whether the next encrypt would reuse or re-encrypt it."""
    console = console or Console(stderr=True)
    table = Table(title=path, title_style="bold", border_style="dim")
    table.add_column("Line", justify="right", style="green")
    table.add_column("Decision", justify="center")

    for number, line in enumerate(lines, 1):
        if is_blank(line):
            decision = Text("blank", style="dim")
        elif should_re_encrypt_line(number, context):
            decision = Text("re-encrypt", style="yellow")
        else:
            decision = Text("reuse", style="green")
        table.add_row(str(number), decision)

    console.print(table)
    console.print(
        f"[dim]git repo:[/dim] {context.is_git_repo}  "
        f"[dim]new file:[/dim] {context.is_new_file}  "
        f"[dim]reusable lines:[/dim] {context.reused_count}"
    )
