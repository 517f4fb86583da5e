"""CLI command for finding fragments that may hold a type.

The check is the same substring test the registry uses before it tries to
deserialize, so matches are candidates only.

Usage:
    dpu-config probe config.xml eu.example.FaultTolerance_-Config__V1
"""

from __future__ import annotations

from pathlib import Path

import typer


def probe(
    path: Path = typer.Argument(
        ...,
        help="File holding a serialized master configuration",
    ),
    tag: str = typer.Argument(
        ...,
        help="Type tag or alias to look for",
    ),
) -> None:
    """Print the fragments whose text contains the tag.

    Exits with code 1 when no fragment matches.
    """
    from rich.console import Console

    from dpu_config.cli._loading import load_manager
    from dpu_config.serialization.containment import can_contain

    console = Console()
    manager = load_manager(path, console)

    matches = [name for name in sorted(manager.names()) if can_contain(manager.get_string(name), tag)]
    if not matches:
        console.print(f"[yellow]No fragment contains[/yellow] {tag}")
        raise typer.Exit(code=1)

    for name in matches:
        console.print(name)
