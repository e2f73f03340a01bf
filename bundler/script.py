"""Launcher script templates.

A template turns a source root, an output path and a list of module names into
the text of an executable script. When run, the script compiles the library and
reports back through stdout and its exit code:

- exit 1: the first stdout line is the path of the compiled artifact
- exit 0: the first stdout line is a diagnostic

Rendering is pure; writing and running the script is the Bundler's job.
"""

import re
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .exceptions import ConfigError


EXIT_SUCCESS = 1
EXIT_FAILURE = 0


class ScriptTemplate(ABC):
    """Interface for rendering a launcher script in some target language."""

    name: str

    @abstractmethod
    def quote(self, value: str) -> str:
        """Return a string literal of the target language holding ``value``."""
        pass

    @abstractmethod
    def render(self, source_root: Path, output_path: Path, modules: Sequence[str]) -> str:
        """
        Render the launcher script.

        Args:
            source_root: Directory holding the library to compile
            output_path: Where the compiled bundle should be written
            modules: Names of optional extension modules (drivers) to fold in

        Returns:
            The script text, starting with a shebang line
        """
        pass

    def quote_list(self, values: Iterable[str]) -> str:
        return ", ".join(self.quote(value) for value in values)


PHP_LAUNCHER = """#!%interpreter%
<?php
require_once(%entry_point%);
spl_autoload_register(array('Doctrine', 'autoload'));

try
{
  $target = Doctrine::compile(%compiled_path%, array(%drivers%));
  echo $target;
  exit(%exit_success%);
}
catch (Doctrine_Compiler_Exception $e)
{
  echo $e->getMessage();
  exit(%exit_failure%);
}
"""


class PhpDoctrineTemplate(ScriptTemplate):
    """Launcher that calls ``Doctrine::compile()`` from a PHP CLI process."""

    name = "doctrine"
    entry_file = "Doctrine.php"

    def __init__(self, interpreter: str = "/usr/bin/env php"):
        self.interpreter = interpreter

    def quote(self, value: str) -> str:
        # Inside single quotes PHP only interprets \\ and \'
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"

    def render(self, source_root: Path, output_path: Path, modules: Sequence[str]) -> str:
        replacements = {
            "%interpreter%": self.interpreter,
            "%entry_point%": self.quote(str(Path(source_root) / self.entry_file)),
            "%compiled_path%": self.quote(str(output_path)),
            "%drivers%": self.quote_list(modules),
            "%exit_success%": str(EXIT_SUCCESS),
            "%exit_failure%": str(EXIT_FAILURE),
        }
        pattern = re.compile("|".join(re.escape(key) for key in replacements))
        # Single pass, so placeholder text inside a value is never expanded again
        return pattern.sub(lambda match: replacements[match.group(0)], PHP_LAUNCHER)


PYTHON_LAUNCHER = """#!{interpreter}
import sys

sys.path.insert(0, {source_root})

try:
    from {module} import compile as compile_bundle

    target = compile_bundle({output_path}, [{modules}])
except Exception as exc:
    message = str(exc).strip() or type(exc).__name__
    print(message.splitlines()[0])
    sys.exit({exit_failure})

print(target)
sys.exit({exit_success})
"""

_MODULE_PATH = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")

# Linux reads at most 256 bytes of a script for the "#!" line
MAX_SHEBANG_LENGTH = 256


class PythonTemplate(ScriptTemplate):
    """Launcher for libraries that expose ``compile(output_path, modules)`` in Python."""

    name = "python"

    def __init__(self, interpreter: Optional[str] = None, module: str = "bundle_compiler"):
        if not _MODULE_PATH.match(module):
            raise ConfigError(f"Invalid compiler module name: {module!r}")
        self.interpreter = interpreter or sys.executable
        self.module = module
        if not self.interpreter or any(c.isspace() for c in self.interpreter):
            raise ConfigError(f"Interpreter path cannot be used in a shebang line: {self.interpreter!r}")
        if len(f"#!{self.interpreter}\n".encode("utf-8")) > MAX_SHEBANG_LENGTH:
            raise ConfigError(f"Interpreter path is too long for a shebang line: {self.interpreter!r}")

    def quote(self, value: str) -> str:
        return repr(str(value))

    def render(self, source_root: Path, output_path: Path, modules: Sequence[str]) -> str:
        return PYTHON_LAUNCHER.format(
            interpreter=self.interpreter,
            source_root=self.quote(str(source_root)),
            module=self.module,
            output_path=self.quote(str(output_path)),
            modules=self.quote_list(modules),
            exit_success=EXIT_SUCCESS,
            exit_failure=EXIT_FAILURE,
        )


TEMPLATES = {
    PhpDoctrineTemplate.name: PhpDoctrineTemplate,
    PythonTemplate.name: PythonTemplate,
}


def get_template(name: str = "doctrine", **options) -> ScriptTemplate:
    """Get the launcher template registered under ``name``."""
    try:
        template_cls = TEMPLATES[name]
    except KeyError:
        known = ", ".join(sorted(TEMPLATES))
        raise ConfigError(f"Unknown template '{name}' (expected one of: {known})")
    return template_cls(**options)
