"""Runs a launcher script as a child process."""

import subprocess
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .models import ProcessOutput


class ProcessRunner:
    """
    Executes a file and captures its standard output line by line.

    A non-zero exit is never raised; the exit code is returned so the caller
    can decide what it means.
    """

    def run(self, executable: Union[str, Path], timeout: Optional[float] = None) -> ProcessOutput:
        command = [str(executable)]
        logger.debug(f"exec {command[0]} (timeout={timeout})")
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            stdout = e.stdout or ""
            if isinstance(stdout, bytes):
                stdout = stdout.decode("utf-8", errors="replace")
            return ProcessOutput(exit_code=None, lines=stdout.splitlines(), timed_out=True)

        if result.stderr:
            logger.debug(f"stderr from {command[0]}: {result.stderr.strip()}")
        return ProcessOutput(exit_code=result.returncode, lines=result.stdout.splitlines())
