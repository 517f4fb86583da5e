"""CLI commands for dpu-config.

Provides command-line interface using Typer:
- dpu-config inspect: List the fragments of a stored master configuration
- dpu-config probe: Find fragments that may contain a type tag

Usage:
    dpu-config --help
    dpu-config inspect config.xml
    dpu-config probe config.xml eu.example.FaultTolerance_-Config__V1
"""

import typer

from dpu_config.cli.inspect_cmd import inspect
from dpu_config.cli.probe_cmd import probe
from dpu_config.config import settings
from dpu_config.observability.logging import configure_logging

# Main CLI application
app = typer.Typer(
    name="dpu-config",
    help="dpu-config: inspect serialized DPU configurations",
    no_args_is_help=True,
)

# Add subcommands
app.command(name="inspect")(inspect)
app.command(name="probe")(probe)


@app.callback()
def callback() -> None:
    """dpu-config: inspect serialized DPU configurations."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    configure_logging(
        json_format=settings.log_json,
        level=settings.log_level,
        use_colors=settings.log_colors,
    )
    app()


if __name__ == "__main__":
    main()
