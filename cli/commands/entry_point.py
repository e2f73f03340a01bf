"""Entry point command."""

from pathlib import Path
from typing import Optional

import click

from bundler import BundlerError, resolve_entry_point
from cli.config import load_settings
from cli.commands.options import settings_options


@click.command("entry-point")
@settings_options
def entry_point(project_root: Path, config_file: Optional[Path], application: str, env: str):
    """Print the file the library should be loaded from."""
    try:
        settings = load_settings(project_root, config_file=config_file, application=application, env=env)
    except BundlerError as e:
        click.echo(f"❌ {e}", err=True)
        raise click.Abort()
    click.echo(str(resolve_entry_point(settings.source_root, settings.compiled_path)))
