# webapp_publisher/cli/utils/output.py
"""Output formatting utilities"""

from rich.console import Console
from rich.panel import Panel

from ...api.exceptions import WebAppPublisherError
from ...constants import (
    EMOJI_ERROR,
    EMOJI_WARNING,
    MSG_CLEANUP_SUCCESS,
    MSG_PUBLISH_SUCCESS,
)
from ...models import PublishResult, Result
from ...utils.file_utils import format_size

console = Console()


def _format_duration(seconds) -> str:
    if seconds is None:
        return "N/A"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s"


def format_publish_result(result: PublishResult) -> None:
    """Format and display publish operation result"""
    headline = MSG_PUBLISH_SUCCESS.format(files=result.files_uploaded, app=result.web_app_name)
    lines = [
        f"[green]{headline}[/green]",
        "",
        f"[bold]Web App:[/bold] {result.web_app_name}",
        f"[bold]Resource Group:[/bold] {result.resource_group}",
        f"[bold]Provisioned:[/bold] {'yes' if result.provisioned else 'no (already existed)'}",
    ]

    transfer = result.transfer
    if transfer:
        lines.append(f"[bold]Host:[/bold] {transfer.host}")
        lines.append(f"[bold]Remote root:[/bold] {transfer.remote_root}")
        lines.append(f"[bold]Directories:[/bold] {result.directories_created}")
        lines.append(f"[bold]Files:[/bold] {result.files_uploaded}")
        if transfer.metadata.get('bytes_uploaded'):
            lines.append(f"[bold]Size:[/bold] {format_size(transfer.metadata['bytes_uploaded'])}")

    lines.append(f"[bold]Duration:[/bold] {_format_duration(result.duration)}")

    for warning in result.warnings:
        lines.append(f"[yellow]{EMOJI_WARNING} {warning}[/yellow]")

    panel = Panel(
        "\n".join(lines),
        title="Publish Result",
        border_style="green"
    )
    console.print(panel)


def format_cleanup_result(result: Result) -> None:
    """Format and display cleanup operation result"""
    headline = MSG_CLEANUP_SUCCESS.format(rg=result.metadata.get('resource_group', ''))
    panel = Panel(
        f"[green]{headline}[/green]",
        title="Cleanup Result",
        border_style="green"
    )
    console.print(panel)


def format_error(error: WebAppPublisherError, title: str = "Error") -> None:
    """Display a pipeline error with its stage and code"""
    lines = [f"[red]{EMOJI_ERROR} {error}[/red]"]
    if error.stage:
        lines.append(f"[bold]Stage:[/bold] {error.stage}")
    if error.error_code:
        lines.append(f"[bold]Code:[/bold] {error.error_code}")
    missing = getattr(error, 'missing_fields', None)
    if missing:
        lines.append("")
        lines.append("[bold]Missing fields:[/bold]")
        for name in missing:
            lines.append(f"  • {name}")
    if error.__cause__ is not None:
        lines.append(f"[dim]Caused by: {error.__cause__}[/dim]")

    panel = Panel(
        "\n".join(lines),
        title=f"[bold red]{title}[/bold red]",
        border_style="red"
    )
    console.print(panel)
