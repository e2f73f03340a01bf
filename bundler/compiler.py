"""
Bundler - compiles a library into a single file through a generated launcher.

The launcher runs in its own process so faults inside the wrapped compile
routine never reach the caller. Its exit code is the only thing that decides
the outcome; see ``bundler.script`` for the protocol.
"""

import uuid
from pathlib import Path
from typing import Optional

from loguru import logger

from .exceptions import SetupError
from .filesystem import Filesystem
from .models import (
    UNKNOWN_REASON,
    BundleRequest,
    BundlerState,
    CompileResult,
    Failure,
    FailureKind,
    Success,
)
from .process import ProcessRunner
from .script import EXIT_FAILURE, EXIT_SUCCESS, ScriptTemplate, get_template


def scratch_path_for(output_path: Path, token: Optional[str] = None) -> Path:
    """
    Build the launcher path that sits next to ``output_path``.

    ``Doctrine.compiled.php`` maps to ``Doctrine.compiler.php``. Pass a token
    (or ``"auto"`` for a random one) when several compiles may run at once.
    """
    output_path = Path(output_path)
    base = output_path.name.split(".", 1)[0] or "bundle"
    if token == "auto":
        token = uuid.uuid4().hex[:12]
    parts = [base, "compiler"]
    if token:
        parts.append(token)
    return output_path.parent / (".".join(parts) + output_path.suffix)


class Bundler:
    """Runs one compile per ``compile()`` call; collaborators are injectable."""

    def __init__(
        self,
        template: Optional[ScriptTemplate] = None,
        filesystem: Optional[Filesystem] = None,
        runner: Optional[ProcessRunner] = None,
        timeout: Optional[float] = None,
    ):
        self.template = template or get_template("doctrine")
        self.filesystem = filesystem or Filesystem()
        self.runner = runner or ProcessRunner()
        self.timeout = timeout
        self.state = BundlerState.IDLE

    def compile(self, request: BundleRequest) -> CompileResult:
        """Compile ``request`` into a single file. Never raises for an expected failure."""
        self.state = BundlerState.IDLE
        try:
            self._generate_launcher(request)
            self.filesystem.mkdirs(request.output_path.parent)
        except SetupError as e:
            return self._fail(FailureKind.SETUP, str(e))

        logger.info(f"Compiling {request.source_root} -> {request.output_path}")
        try:
            output = self.runner.run(request.scratch_script_path, timeout=self.timeout)
        except OSError as e:
            return self._fail(
                FailureKind.SETUP, f'Could not execute the generated compiler file "{request.scratch_script_path}": {e}'
            )
        self.state = BundlerState.EXECUTED

        if output.timed_out:
            return self._fail(FailureKind.TIMEOUT, f"The compiler did not finish within {self.timeout} seconds")

        if output.exit_code == EXIT_FAILURE:
            return self._fail(FailureKind.COMPILE, output.first_line or UNKNOWN_REASON, exit_code=output.exit_code)

        if output.exit_code == EXIT_SUCCESS:
            target = output.first_line
            if not target:
                return self._fail(
                    FailureKind.PROTOCOL,
                    "The compiler reported success without an artifact path",
                    exit_code=output.exit_code,
                )
            return self._finish(request, Path(target))

        return self._fail(
            FailureKind.PROTOCOL,
            f'The compiler returned an unknown value: "{output.exit_code}"',
            exit_code=output.exit_code,
        )

    def _generate_launcher(self, request: BundleRequest) -> None:
        scratch = request.scratch_script_path
        self.filesystem.mkdirs(scratch.parent)
        content = self.template.render(request.source_root, request.output_path, request.modules)
        self.filesystem.write_file(scratch, content)
        self.filesystem.set_executable(scratch)
        self.state = BundlerState.SCRIPT_WRITTEN

    def _finish(self, request: BundleRequest, target: Path) -> CompileResult:
        scratch = request.scratch_script_path
        reason = ""
        try:
            self.filesystem.remove(scratch)
        except OSError as e:
            reason = f": {e}"

        if self.filesystem.exists(scratch):
            return self._fail(FailureKind.HYGIENE, f'Could not delete the generated compiler file "{scratch}"{reason}')

        self.state = BundlerState.SUCCEEDED
        logger.info(f"Compiled bundle written to {target}")
        return Success(artifact_path=target)

    def _fail(self, kind: FailureKind, diagnostic: str, exit_code: Optional[int] = None) -> Failure:
        self.state = BundlerState.FAILED
        return Failure(kind=kind, diagnostic=diagnostic, exit_code=exit_code)
