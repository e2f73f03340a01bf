"""Pick the file a host application should load the library from."""

from pathlib import Path

from loguru import logger


ENTRY_FILE = "Doctrine.php"


def resolve_entry_point(source_root: Path, compiled_path: Path, entry_file: str = ENTRY_FILE) -> Path:
    """Return the compiled bundle when it exists, otherwise the library's own entry file."""
    compiled_path = Path(compiled_path)
    if compiled_path.is_file():
        logger.debug(f"Using compiled bundle {compiled_path}")
        return compiled_path
    entry = Path(source_root) / entry_file
    logger.debug(f"No compiled bundle at {compiled_path}, falling back to {entry}")
    return entry
