"""Derive the default module (driver) list from a databases config file."""

from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

import yaml

from .exceptions import ConfigError


DSN_DELIMITER = ":"


def _dsn_of(connection: Any) -> Optional[str]:
    if not isinstance(connection, Mapping):
        return None
    param = connection.get("param")
    if not isinstance(param, Mapping):
        return None
    dsn = param.get("dsn")
    return dsn if isinstance(dsn, str) else None


def collect_modules(config: Mapping[str, Any]) -> List[str]:
    """
    Collect driver names from a databases config.

    The config maps environment names (``all``, ``dev``, ...) to connection
    profiles, each with a ``param.dsn`` like ``mysql:host=localhost``. The
    driver is the part of the DSN before the first colon. Names are unique and
    keep the order they were first seen in.
    """
    modules: List[str] = []
    for environment in config.values():
        if not isinstance(environment, Mapping):
            continue
        for connection in environment.values():
            dsn = _dsn_of(connection)
            if not dsn:
                continue
            driver = dsn.split(DSN_DELIMITER, 1)[0].strip()
            if driver and driver not in modules:
                modules.append(driver)
    return modules


def load_modules_from_file(path: Union[str, Path]) -> List[str]:
    """Load a YAML databases config and collect its driver names."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f'File "{path}" not found')

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f'Could not parse "{path}": {e}') from e

    if config is None:
        return []
    if not isinstance(config, Mapping):
        raise ConfigError(f'Expected a mapping at the top of "{path}"')
    return collect_modules(config)
