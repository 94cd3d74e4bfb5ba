# deploy_sentry/cli/utils/output.py
"""Output formatting utilities"""

from rich.console import Console
from rich.panel import Panel

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS
from ...models import ReconcileResult

console = Console()


def format_reconcile_result(result: ReconcileResult) -> None:
    """Format and display a reconciliation result"""
    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] Release synchronized!",
        "",
        f"[bold]Release:[/bold] {result.release_version}",
        f"[bold]Action:[/bold] {result.action.value if result.action else 'unknown'}",
    ]

    if result.deleted_files:
        lines.append(f"[bold]Replaced:[/bold] {len(result.deleted_files)} file(s)")
    if result.uploaded_files:
        lines.append(f"[bold]Uploaded:[/bold] {len(result.uploaded_files)} file(s)")
    if result.duration is not None:
        lines.append(f"[bold]Duration:[/bold] {result.duration:.1f}s")

    if result.remote_files:
        lines.append("")
        lines.append("[bold]Files known to Sentry:[/bold]")
        for name in result.remote_file_names:
            lines.append(f"  {EMOJI_SUCCESS} {name}")

    for warning in result.warnings:
        lines.append(f"[yellow]! {warning}[/yellow]")

    console.print(Panel("\n".join(lines), title="Upload Result", border_style="green"))


def format_error(title: str, error: Exception) -> None:
    """Display an error panel"""
    lines = [f"[red]{EMOJI_ERROR} {error}[/red]"]

    status = getattr(error, "status", None)
    if status is not None:
        lines.append(f"[bold]HTTP status:[/bold] {status}")
    release = getattr(error, "release", None)
    if release:
        lines.append(f"[bold]Release:[/bold] {release}")
    error_code = getattr(error, "error_code", None)
    if error_code:
        lines.append(f"[dim]Error code: {error_code}[/dim]")

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold red]{title}[/bold red]",
        border_style="red"
    ))
