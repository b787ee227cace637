"""
Message Formatter Module

Builds rich-markup, emoji-enhanced messages for operator output.
Process fields are escaped since command lines may contain markup brackets.
"""

from typing import Sequence

from rich.markup import escape

from ..process_models import ProcessHandle


def format_scan_start(ports: Sequence[int]) -> str:
    """Format scan banner with the port list."""
    port_list = ", ".join(str(port) for port in ports)
    return f"[blue]🔍 Scanning for processes on ports: {port_list} ...[/blue]"


def format_invalid_token(token: str) -> str:
    kind = "port range" if "-" in token else "port"
    return f"[yellow]⚠️ Warning: Invalid {kind} '{escape(token)}'. Skipping.[/yellow]"


def format_no_valid_ports() -> str:
    return "[yellow]No valid ports to scan. Please provide valid port numbers or ranges.[/yellow]"


def format_no_processes() -> str:
    return "[green]✅ No active processes found on the specified ports.[/green]"


def format_none_selected() -> str:
    return "[yellow]No processes selected to kill. Exiting.[/yellow]"


def format_termination_start() -> str:
    return "\n[blue]Attempting to terminate selected processes...[/blue]"


def format_terminating(handle: ProcessHandle) -> str:
    return f"[yellow]🔪 Terminating {escape(handle.name)} (PID: {handle.pid}) on port {handle.port}...[/yellow]"


def format_success(handle: ProcessHandle) -> str:
    return f"[green]  ✓ Successfully terminated process {escape(handle.name)} (PID: {handle.pid}) on port {handle.port}[/green]"


def format_failure(handle: ProcessHandle) -> str:
    return f"[red]  ✗ Failed to fully terminate process {escape(handle.name)} (PID: {handle.pid}) on port {handle.port}[/red]"


def format_port_busy_hint(handle: ProcessHandle) -> str:
    return (
        f"[yellow]    Port {handle.port} is still in use. You may need to terminate the process manually with:[/yellow]\n"
        f"[yellow]    sudo kill -9 {handle.pid}[/yellow]"
    )


def format_permission_hint() -> str:
    return "[yellow]    Reason: Insufficient permissions. Try running with sudo:[/yellow]\n[yellow]    sudo kill-dev[/yellow]"


def format_error_detail(error: Exception) -> str:
    return f"[red]    {escape(str(error))}[/red]"


def format_summary(success_count: int, failure_count: int) -> str:
    lines = ["\n[blue]Termination Summary:[/blue]"]
    if success_count:
        lines.append(f"[green]  {success_count} process(es) were successfully terminated.[/green]")
    if failure_count:
        lines.append(f"[red]  {failure_count} process(es) could not be terminated.[/red]")
    return "\n".join(lines)


def format_prompt_unavailable() -> str:
    return "[red]Error: Interactive prompt could not be rendered in this environment.[/red]\n[yellow]Try running in a standard terminal.[/yellow]"


def format_critical_error(error: BaseException) -> str:
    return f"[bold red]A critical error occurred in the kill-dev application:[/bold red]\n[red]{escape(str(error))}[/red]"
