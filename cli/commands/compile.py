"""Compile command."""

from pathlib import Path
from typing import List, Optional

import click
from loguru import logger

from bundler import Bundler, BundleRequest, BundlerError, get_template
from cli.config import Settings, load_settings, resolve_modules
from cli.commands.options import settings_options


def build_bundler(settings: Settings) -> Bundler:
    """Create a Bundler with the template and timeout from ``settings``."""
    options = {}
    if settings.interpreter:
        options["interpreter"] = settings.interpreter
    if settings.template == "python":
        options["module"] = settings.compiler_module
    template = get_template(settings.template, **options)
    return Bundler(template=template, timeout=settings.timeout)


def compile_bundle(settings: Settings, modules: List[str]) -> Path:
    """Compile the library described by ``settings``; raises BundlerError on failure."""
    request = BundleRequest(
        source_root=settings.source_root,
        output_path=settings.compiled_path,
        scratch_script_path=settings.compiler_path,
        modules=modules,
    )
    result = build_bundler(settings).compile(request)
    if not result.ok:
        logger.debug(f"Compile failed ({result.kind.value}): {result.diagnostic}")
    return result.unwrap()


def run_compile(settings: Settings, modules: List[str]) -> Path:
    """Compile and report progress on the console."""
    if modules:
        click.echo(f"🔧 Compile core classes and classes for these drivers: [{', '.join(modules)}]")
    else:
        click.echo("🔧 Compile core classes")

    click.echo("  Start compiling...")
    target = compile_bundle(settings, modules)
    click.echo(f'  ✅ Compiled classes were saved to "{target}"')
    return target


@click.command("compile-core")
@settings_options
@click.option("--source-path", type=click.Path(path_type=Path), help="The directory where Doctrine.php may be found")
@click.option("--compiled-path", "--path", type=click.Path(path_type=Path), help="Where to write the compiled bundle")
@click.option("--compiler-path", type=click.Path(path_type=Path), help="Where to write the generated compiler script")
@click.option("--drivers", help="Comma separated list of drivers to compile, e.g. mysql,mssql,sqlite")
@click.option("--no-drivers", is_flag=True, help="Include no drivers in the compile process")
@click.option("--template", type=click.Choice(["doctrine", "python"]), help="Launcher template to render")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="Seconds to wait for the compiler")
def compile_core(
    project_root: Path,
    config_file: Optional[Path],
    application: str,
    env: str,
    source_path: Optional[Path],
    compiled_path: Optional[Path],
    compiler_path: Optional[Path],
    drivers: Optional[str],
    no_drivers: bool,
    template: Optional[str],
    timeout: Optional[float],
):
    """Compile the library core into a single file.

    By default the classes for the database drivers in use according to
    config/databases.yml are compiled too. Use --drivers=mysql,mssql to pick
    them by hand, or --no-drivers to leave them out.
    """
    try:
        settings = load_settings(
            project_root,
            config_file=config_file,
            overrides={
                "source_root": source_path,
                "compiled_path": compiled_path,
                "compiler_path": compiler_path,
                "template": template,
                "timeout": timeout,
            },
            application=application,
            env=env,
        )
        modules = resolve_modules(settings, drivers, no_drivers)
        run_compile(settings, modules)
    except BundlerError as e:
        click.echo(f"❌ Compile error: {e}", err=True)
        raise click.Abort()
