"""Error taxonomy for the bundler core."""

from typing import Optional


class BundlerError(Exception):
    """Base class for every bundler error."""


class ConfigError(BundlerError):
    """Configuration or module discovery could not be loaded."""


class SetupError(BundlerError):
    """Scratch or output directory, or the launcher script, could not be prepared."""


class CompileFailure(BundlerError):
    """The launcher reported a failed compilation."""


class ProtocolViolation(BundlerError):
    """The launcher exited with a code outside the success/failure protocol."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code


class HygieneError(BundlerError):
    """Compilation worked but the launcher script could not be removed."""


class CompileTimeout(BundlerError):
    """The launcher did not exit within the configured timeout."""
