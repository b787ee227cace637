"""Banner help screen."""

_BANNER = r"""
   _  _____ _     _          ____  _______     __
  | |/ /_ _| |   | |        |  _ \| ____\ \   / /
  | ' / | || |   | |   _____| | | |  _|  \ \ / /
  | . \ | || |___| |__|_____| |_| | |___  \ V /
  |_|\_\___|_____|_____|    |____/|_____|  \_/
"""

_EXAMPLES = (
    ("kill-dev", "# Scan default ports"),
    ("kill-dev 3000", "# Scan specific port"),
    ("kill-dev 3000 8080", "# Scan multiple ports"),
    ("kill-dev 3000-3005", "# Scan port range"),
    ("kill-dev 3000 8000-8010", "# Mix ports and ranges"),
)

_CONTROLS = (
    ("Space", "Select/deselect process"),
    ("a", "Toggle all processes"),
    ("i", "Invert selection"),
    ("Enter", "Confirm and proceed"),
)


def build_help_text(default_port_tokens) -> str:
    """Return the help screen as rich markup."""
    border = "[cyan]" + "━" * 80 + "[/cyan]"
    section = "[cyan]" + "─" * 40 + "[/cyan]"
    lines = [border, f"[bold cyan]{_BANNER}[/bold cyan]", border]

    lines.append("\n[bold yellow]📋 Description:[/bold yellow]")
    lines.append("  A CLI tool to find and terminate development server processes.")
    lines.append("  Cleans up development servers that won't quit.")

    lines.append("\n[bold yellow]🛠  Usage:[/bold yellow]")
    lines.append("  [green]kill-dev[/green] [options] [port_or_range ...]")

    lines.append("\n[bold yellow]📌 Arguments:[/bold yellow]")
    lines.append("  port_or_range    Single port (3000) or port range (3000-3005)")

    lines.append("\n[bold yellow]🔧 Options:[/bold yellow]")
    lines.append("  -h, --help       Show this help menu")
    lines.append("  -v, --verbose    Show debug logging")
    lines.append("  --parallel       Terminate selected processes concurrently")

    lines.append("\n[bold yellow]🎯 Default Ports:[/bold yellow]")
    for token in default_port_tokens:
        lines.append(f"  • [green]{token}[/green]")

    lines.append("\n[bold yellow]💡 Examples:[/bold yellow]")
    lines.append(section)
    for command, comment in _EXAMPLES:
        lines.append(f"  [green]{command:<26}[/green] [bright_black]{comment}[/bright_black]")

    lines.append("\n[bold yellow]🎮 Controls:[/bold yellow]")
    for key, description in _CONTROLS:
        lines.append(f"  [cyan]{key:<8}[/cyan] {description}")

    lines.append(border + "\n")
    return "\n".join(lines)
