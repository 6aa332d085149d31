#!/usr/bin/env python3
"""ocpinit CLI - point scaffolded operator projects at downstream images."""
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ocpinit.cli_support import (
    handle_cli_error,
    print_info,
    print_success,
    print_warning,
    resolve_project_file,
    setup_file_logging,
)
from ocpinit.core.logger import get_logger
from ocpinit.errors import OcpInitError
from ocpinit.project import ProjectConfig
from ocpinit.scaffold import (
    IMAGE_SUBSTITUTIONS,
    PLUGIN_KEY,
    InitSubcommand,
    LocalFilesystem,
    MemoryFilesystem,
)

app = typer.Typer(
    name="ocpinit",
    help="""ocpinit - OpenShift images for freshly scaffolded operator projects

Run inside a project right after the base scaffold has been generated:
  ocpinit init                    # Rewrite images and record the plugin
  ocpinit init --dry-run          # Show which files would change
  ocpinit substitutions           # List every rewrite rule
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.command()
def init(
    path: str = typer.Option(".", "--path", help="Generated project directory"),
    project_file: Optional[str] = typer.Option(None, "--project-file", help="PROJECT file (default: <path>/PROJECT)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Apply in memory and report changes only"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also log to this file"),
):
    """Replace upstream images with OpenShift ones and record the plugin.

    Examples:
        ocpinit init
        ocpinit init --path ./memcached-operator
        ocpinit init --dry-run
    """
    setup_file_logging(log_file=log_file, verbose=verbose)

    project_dir = Path(path)
    project_path = resolve_project_file(project_dir, project_file)

    try:
        config = ProjectConfig.load(project_path)
        local_fs = LocalFilesystem(project_dir)
        if dry_run:
            fs = MemoryFilesystem.snapshot(local_fs, IMAGE_SUBSTITUTIONS.paths())
        else:
            fs = local_fs

        subcommand = InitSubcommand()
        subcommand.inject_config(config)
        written = subcommand.scaffold(fs)

        if dry_run:
            for rel_path in written:
                if fs.read_file(rel_path) != local_fs.read_file(rel_path):
                    print_info(console, f"Would update {rel_path}")
                else:
                    console.print(f"  [dim]unchanged[/dim] {rel_path}")
            print_warning(console, "Dry run: no files were written")
            return

        config.save(project_path)
    except OcpInitError as e:
        handle_cli_error(e, console, verbose=verbose)

    for rel_path in written:
        print_success(console, f"Updated {rel_path}")
    if PLUGIN_KEY in config.plugins:
        print_success(console, f"Recorded {PLUGIN_KEY} in {project_path.name}")
    else:
        print_info(console, f"Project version {config.version} does not record plugin metadata")


@app.command()
def substitutions():
    """List every image and version substitution applied by init."""
    table = Table(title="Image substitutions")
    table.add_column("File", style="cyan")
    table.add_column("Pattern")
    table.add_column("Replacement", style="green")

    for rel_path, rules in IMAGE_SUBSTITUTIONS:
        for rule in rules:
            table.add_row(rel_path, rule.pattern.pattern.decode(), rule.replacement.decode())

    console.print(table)


if __name__ == "__main__":
    app()
