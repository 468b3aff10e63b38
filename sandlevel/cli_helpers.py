"""
sandlevel CLI Helpers

Shared formatting utilities for consistent CLI output across all commands.
"""

from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from sandlevel.config.models import SandboxMode
from sandlevel.sandbox.levels import SandboxLevel

# Single shared Console instance for the entire CLI
console = Console()


def print_error(message: str, fix_hint: str = "") -> None:
    """Print an error message with red X and optional fix hint."""
    console.print(f"[red]✗[/red] {escape(message)}")
    if fix_hint:
        console.print(f"  [white]Hint: {fix_hint}[/white]")


def format_command_example(command: str, description: str) -> str:
    """Format a single command example line."""
    return f"  {command:<40s} {description}"


def build_examples_epilog(examples: List[Tuple[str, str]]) -> str:
    """
    Build a formatted epilog string with command examples.

    Args:
        examples: List of (command, description) tuples.

    Returns:
        Multi-line string suitable for Click's epilog parameter.
    """
    lines = ["\nExamples:"]
    for cmd, desc in examples:
        lines.append(format_command_example(cmd, desc))
    return "\n".join(lines) + "\n"


def format_level_color(level: SandboxLevel) -> str:
    """Return a Rich-markup colored name for a sandbox level."""
    colors = {
        SandboxLevel.DISABLED: "red",
        SandboxLevel.RESTRICTED_TOKEN: "yellow",
        SandboxLevel.ELEVATED: "green",
    }
    color = colors.get(level, "white")
    return f"[{color}]{level.name.lower()}[/{color}]"


def format_mode(mode: Optional[SandboxMode]) -> str:
    if mode is None:
        return "[dim]not set[/dim]"
    return mode.value
