"""Shared loading for CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from dpu_config.fragments.manager import ConfigManager
from dpu_config.serialization.errors import SerializationFailure


def load_manager(path: Path, console: Console) -> ConfigManager:
    """Read a master configuration file, exiting with code 1 on failure."""
    if not path.is_file():
        console.print(f"[red]File not found:[/red] {path}")
        raise typer.Exit(code=1)

    try:
        return ConfigManager.deserialize_all(path.read_text(encoding="utf-8"))
    except SerializationFailure as e:
        console.print(f"[red]Not a master configuration:[/red] {path}: {e}")
        raise typer.Exit(code=1) from e
