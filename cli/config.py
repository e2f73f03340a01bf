"""Configuration for the CLI.

Settings are read from (later wins):

1. built-in defaults derived from the project root
2. ``config/bundler.yml`` (``all`` section, then the section of the current env)
3. ``apps/<application>/config/bundler.yml``, sections read the same way
4. ``BUNDLER_*`` environment variables
5. command-line options
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bundler import ConfigError, load_modules_from_file
from bundler.compiler import scratch_path_for


CONFIG_FILE = Path("config") / "bundler.yml"
APPS_DIR = "apps"
ENV_PREFIX = "BUNDLER_"
CONFIG_SECTION = "bundler"

PATH_KEYS = ("cache_dir", "source_root", "compiled_path", "compiler_path", "databases_config")
ENV_KEYS = PATH_KEYS + ("modules", "auto_compile", "timeout", "template", "interpreter", "compiler_module")


class Settings(BaseModel):
    """Resolved, immutable settings for one CLI run."""

    model_config = ConfigDict(frozen=True)

    project_root: Path
    application: str = "frontend"
    env: str = "dev"
    cache_dir: Path
    source_root: Path
    compiled_path: Path
    compiler_path: Path
    databases_config: Path
    modules: Optional[List[str]] = None
    auto_compile: bool = True
    timeout: Optional[float] = Field(default=None, gt=0)
    template: str = "doctrine"
    interpreter: Optional[str] = None
    compiler_module: str = "bundle_compiler"

    @field_validator("modules", mode="before")
    @classmethod
    def _split_modules(cls, value):
        if isinstance(value, str):
            return split_modules(value)
        return value


def split_modules(value: str) -> List[str]:
    """Split a comma separated module list, dropping blanks."""
    return [name.strip() for name in value.split(",") if name.strip()]


def _read_config_file(path: Path, env: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f'Could not parse "{path}": {e}') from e

    if not isinstance(document, Mapping):
        raise ConfigError(f'Expected a mapping at the top of "{path}"')

    values: Dict[str, Any] = {}
    for section in ("all", env):
        block = document.get(section) or {}
        if not isinstance(block, Mapping):
            raise ConfigError(f'Section "{section}" of "{path}" must be a mapping')
        options = block.get(CONFIG_SECTION) or {}
        if not isinstance(options, Mapping):
            raise ConfigError(f'"{section}.{CONFIG_SECTION}" in "{path}" must be a mapping')
        values.update(options)
    return values


def _read_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key in ENV_KEYS:
        raw = environ.get(ENV_PREFIX + key.upper())
        if raw is None or raw == "":
            continue
        if key == "auto_compile":
            values[key] = raw.strip().lower() in ("1", "true", "yes", "on")
        else:
            values[key] = raw
    return values


def load_settings(
    project_root: Path,
    config_file: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    application: str = "frontend",
    env: str = "dev",
) -> Settings:
    """Build the settings for ``project_root``."""
    project_root = Path(project_root).resolve()
    environ = os.environ if environ is None else environ

    values: Dict[str, Any] = {}
    config_path = Path(config_file) if config_file else project_root / CONFIG_FILE
    if config_path.exists():
        values.update(_read_config_file(config_path, env))
    elif config_file:
        raise ConfigError(f'File "{config_path}" not found')

    if not application or Path(application).name != application or application in (".", ".."):
        raise ConfigError(f"Invalid application name: {application!r}")
    app_config_path = project_root / APPS_DIR / application / CONFIG_FILE
    if app_config_path.exists():
        values.update(_read_config_file(app_config_path, env))

    values.update(_read_environment(environ))
    values.update({key: value for key, value in (overrides or {}).items() if value is not None})
    values = {key: value for key, value in values.items() if key in ENV_KEYS}

    for key in PATH_KEYS:
        if values.get(key) is not None:
            path = Path(values[key]).expanduser()
            values[key] = path if path.is_absolute() else project_root / path

    cache_dir = values.setdefault("cache_dir", project_root / "cache")
    values.setdefault("source_root", project_root / "lib" / "vendor" / "doctrine")
    compiled_path = values.setdefault("compiled_path", cache_dir / "doctrine" / "Doctrine.compiled.php")
    values.setdefault("compiler_path", scratch_path_for(compiled_path))
    values.setdefault("databases_config", project_root / "config" / "databases.yml")

    try:
        return Settings(project_root=project_root, application=application, env=env, **values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def resolve_modules(settings: Settings, modules_option: Optional[str] = None, no_modules: bool = False) -> List[str]:
    """Work out which modules to compile: explicit flags first, then settings, then discovery."""
    if no_modules:
        return []
    if modules_option is not None:
        return split_modules(modules_option)
    if settings.modules is not None:
        return list(settings.modules)
    return load_modules_from_file(settings.databases_config)
