"""Options shared by the commands that need project settings."""

from pathlib import Path

import click


_SETTINGS_OPTIONS = [
    click.option(
        "--project-root",
        type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
        default=".",
        show_default=True,
        help="Root directory of the project",
    ),
    click.option(
        "--config", "config_file", type=click.Path(path_type=Path), help="Settings file (default: config/bundler.yml)"
    ),
    click.option("--application", default="frontend", show_default=True, help="The application name"),
    click.option("--env", default="dev", show_default=True, help="The environment"),
]


def settings_options(func):
    """Add the project root, config file, application and env options."""
    for option in reversed(_SETTINGS_OPTIONS):
        func = option(func)
    return func
