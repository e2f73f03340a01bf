"""
Core models for the bundler.

Requests and results are immutable pydantic models; a request is built once per
invocation and never mutated.
"""

from enum import Enum
from pathlib import Path
from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import (
    BundlerError,
    CompileFailure,
    CompileTimeout,
    HygieneError,
    ProtocolViolation,
    SetupError,
)


UNKNOWN_REASON = "unknown reason"


class FailureKind(str, Enum):
    """Why a compile did not produce a usable artifact"""

    SETUP = "setup"
    COMPILE = "compile"
    PROTOCOL = "protocol"
    HYGIENE = "hygiene"
    TIMEOUT = "timeout"


class BundlerState(str, Enum):
    """States a Bundler passes through during one compile() call"""

    IDLE = "idle"
    SCRIPT_WRITTEN = "script_written"
    EXECUTED = "executed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class BundleRequest(BaseModel):
    """Everything needed to compile one bundle."""

    model_config = ConfigDict(frozen=True)

    source_root: Path
    output_path: Path
    scratch_script_path: Path
    modules: Tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("modules", mode="before")
    @classmethod
    def _freeze_modules(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            raise ValueError("modules must be a sequence of names, not a single string")
        return tuple(value)

    @field_validator("modules")
    @classmethod
    def _check_module_names(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for name in value:
            if not name:
                raise ValueError("module names must be non-empty")
        return value


class Success(BaseModel):
    """The launcher produced an artifact and the scratch script is gone."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    artifact_path: Path

    def unwrap(self) -> Path:
        return self.artifact_path


_ERRORS = {
    FailureKind.SETUP: SetupError,
    FailureKind.COMPILE: CompileFailure,
    FailureKind.HYGIENE: HygieneError,
    FailureKind.TIMEOUT: CompileTimeout,
}


class Failure(BaseModel):
    """A compile that did not yield a usable artifact."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    kind: FailureKind
    diagnostic: str
    exit_code: Optional[int] = None

    def to_exception(self) -> BundlerError:
        if self.kind == FailureKind.PROTOCOL:
            return ProtocolViolation(self.diagnostic, exit_code=self.exit_code)
        return _ERRORS[self.kind](self.diagnostic)

    def unwrap(self) -> Path:
        raise self.to_exception()


CompileResult = Union[Success, Failure]


class ProcessOutput(BaseModel):
    """Exit status and captured stdout lines of a finished child process."""

    exit_code: Optional[int] = None
    lines: List[str] = Field(default_factory=list)
    timed_out: bool = False

    @property
    def first_line(self) -> Optional[str]:
        return self.lines[0] if self.lines else None
