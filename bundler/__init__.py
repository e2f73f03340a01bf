"""Single-file bundler that compiles a library through an isolated launcher process."""

from .compiler import Bundler, scratch_path_for
from .discovery import collect_modules, load_modules_from_file
from .exceptions import (
    BundlerError,
    CompileFailure,
    CompileTimeout,
    ConfigError,
    HygieneError,
    ProtocolViolation,
    SetupError,
)
from .filesystem import Filesystem
from .loader import resolve_entry_point
from .models import (
    BundleRequest,
    BundlerState,
    CompileResult,
    Failure,
    FailureKind,
    ProcessOutput,
    Success,
)
from .process import ProcessRunner
from .script import PhpDoctrineTemplate, PythonTemplate, ScriptTemplate, get_template

__version__ = "1.0.0"

__all__ = [
    "Bundler",
    "BundleRequest",
    "BundlerError",
    "BundlerState",
    "CompileFailure",
    "CompileResult",
    "CompileTimeout",
    "ConfigError",
    "Failure",
    "FailureKind",
    "Filesystem",
    "HygieneError",
    "PhpDoctrineTemplate",
    "ProcessOutput",
    "ProcessRunner",
    "ProtocolViolation",
    "PythonTemplate",
    "ScriptTemplate",
    "SetupError",
    "Success",
    "collect_modules",
    "get_template",
    "load_modules_from_file",
    "resolve_entry_point",
    "scratch_path_for",
]
