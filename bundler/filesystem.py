"""Filesystem operations used by the Bundler."""

import os
from pathlib import Path
from typing import Union

from loguru import logger

from .exceptions import SetupError


PathLike = Union[str, Path]

EXECUTABLE_MODE = 0o775


class Filesystem:
    """Thin wrapper over the OS so the Bundler can be driven by a fake in tests."""

    def mkdirs(self, path: PathLike) -> None:
        path = Path(path)
        if path.is_dir():
            return
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SetupError(f'Could not create directory "{path}": {e}') from e
        logger.debug(f"dir+ {path}")

    def write_file(self, path: PathLike, content: str) -> None:
        path = Path(path)
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise SetupError(f'Could not save the generated compiler file "{path}": {e}') from e
        logger.debug(f"file+ {path}")

    def set_executable(self, path: PathLike) -> None:
        path = Path(path)
        try:
            os.chmod(path, EXECUTABLE_MODE)
        except OSError as e:
            raise SetupError(f'Could not change permissions of "{path}": {e}') from e
        if not os.access(path, os.X_OK):
            raise SetupError(f'Could not make the generated compiler file "{path}" executable by the user')
        logger.debug(f"chmod {oct(EXECUTABLE_MODE)} {path}")

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def remove(self, path: PathLike) -> None:
        """Remove a file. A missing file is not an error."""
        path = Path(path)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        logger.debug(f"file- {path}")
