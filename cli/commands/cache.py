"""Cache clear command."""

import shutil
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from bundler import BundlerError, SetupError
from cli.config import Settings, load_settings, resolve_modules
from cli.commands.compile import run_compile
from cli.commands.options import settings_options
from cli.hooks import PostCommandHooks


def clear_cache(cache_dir: Path) -> int:
    """Remove everything inside ``cache_dir`` but keep the directory. Returns the number of entries removed."""
    if not cache_dir.is_dir():
        return 0
    removed = 0
    for entry in cache_dir.iterdir():
        try:
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            raise SetupError(f'Could not remove "{entry}": {e}') from e
        removed += 1
    logger.debug(f"Removed {removed} entries from {cache_dir}")
    return removed


def build_hooks(settings: Settings) -> PostCommandHooks:
    """Register the post-command hooks enabled by ``settings``."""
    hooks = PostCommandHooks()
    if settings.auto_compile:

        def recompile(ctx: click.Context) -> None:
            run_compile(settings, resolve_modules(settings))

        hooks.register("cache-clear", recompile)
    return hooks


@click.command("cache-clear")
@settings_options
@click.pass_context
def cache_clear(ctx: click.Context, project_root: Path, config_file: Optional[Path], application: str, env: str):
    """Clear the cache and recompile the bundle when auto compile is enabled."""
    try:
        settings = load_settings(project_root, config_file=config_file, application=application, env=env)
        removed = clear_cache(settings.cache_dir)
        click.echo(f"🗑️  Cleared {removed} cache entries in {settings.cache_dir}")
        build_hooks(settings).run("cache-clear", ctx)
    except BundlerError as e:
        click.echo(f"❌ Cache clear failed: {e}", err=True)
        raise click.Abort()
