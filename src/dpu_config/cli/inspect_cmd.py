"""CLI command for listing the fragments of a master configuration.

Usage:
    dpu-config inspect config.xml
    dpu-config inspect config.xml --format json
"""

from __future__ import annotations

from pathlib import Path
from typing import TypedDict

import typer


class FragmentInfo(TypedDict):
    name: str
    empty: bool
    size: int
    tag: str | None


def inspect(
    path: Path = typer.Argument(
        ...,
        help="File holding a serialized master configuration",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text, json",
    ),
) -> None:
    """List fragment names, sizes and root tags."""
    import orjson
    from rich.console import Console
    from rich.table import Table

    from dpu_config.cli._loading import load_manager
    from dpu_config.serialization.xml import root_tag

    console = Console()
    manager = load_manager(path, console)

    fragments: list[FragmentInfo] = []
    for name in sorted(manager.names()):
        text = manager.get_string(name)
        fragments.append(
            {
                "name": name,
                "empty": text is None,
                "size": len(text) if text is not None else 0,
                "tag": root_tag(text),
            }
        )

    if output_format == "json":
        typer.echo(orjson.dumps(fragments, option=orjson.OPT_INDENT_2).decode())
        return

    if not fragments:
        console.print("[yellow]No fragments[/yellow]")
        return

    table = Table(title=str(path))
    table.add_column("Fragment")
    table.add_column("Tag")
    table.add_column("Size", justify="right")
    for fragment in fragments:
        tag = fragment["tag"] or ("[dim]empty[/dim]" if fragment["empty"] else "[red]invalid[/red]")
        table.add_row(fragment["name"], tag, str(fragment["size"]))
    console.print(table)
