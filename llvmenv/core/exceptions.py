"""
Centralized exception hierarchy for llvmenv.

Every error raised by the configuration layer, the build registry, the
active-build resolver and the build pipeline derives from LLVMEnvError, so
the CLI can report any of them uniformly and map them to exit codes.
"""

from pathlib import Path
from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class LLVMEnvError(Exception):
    """Base exception for all llvmenv errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(LLVMEnvError):
    """Configuration is missing, malformed or contains duplicate entries."""

    pass


class UnknownEntryError(ConfigError):
    """Raised when no declared entry has the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No entry named '{name}' in configuration")


# ============================================================================
# Build / Resolution Exceptions
# ============================================================================


class UnknownBuildError(LLVMEnvError):
    """Raised when a name does not resolve to an installed build."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"Build '{name}' does not exist")


class DanglingMarkerError(UnknownBuildError):
    """Raised when a marker file names a build that is not installed."""

    def __init__(self, name: str, marker: Path):
        self.marker = marker
        super().__init__(
            name, f"Build '{name}' set by {marker} does not exist"
        )


class InvalidMarkerError(LLVMEnvError):
    """Raised when a marker file exists but does not hold one valid name."""

    def __init__(self, marker: Path, reason: str):
        self.marker = marker
        self.reason = reason
        super().__init__(f"Invalid build marker {marker}: {reason}")


class NoActiveBuildError(LLVMEnvError):
    """Raised when neither a local override nor a global default is set."""

    def __init__(self, start: Path):
        self.start = start
        super().__init__(
            f"No active build for {start}. "
            "Use 'llvmenv global NAME' or 'llvmenv local NAME' to set one."
        )


# ============================================================================
# Pipeline Exceptions
# ============================================================================


class PipelineError(LLVMEnvError):
    """
    Base exception for failures of an external tool during a pipeline stage.

    Attributes:
        entry: Name of the entry being processed
        stage: Pipeline stage that failed
        returncode: Exit status of the failing tool (None if it never ran)
        command: Command line that failed, when there was one
    """

    stage = "pipeline"

    def __init__(
        self,
        entry: str,
        returncode: Optional[int] = None,
        command: Optional[Sequence[str]] = None,
        detail: Optional[str] = None,
        stage: Optional[str] = None,
    ):
        self.entry = entry
        if stage is not None:
            self.stage = stage
        self.returncode = returncode
        self.command = list(command) if command else []
        self.detail = detail

        msg = f"{self.stage} failed for entry '{entry}'"
        if self.command:
            msg += f": {self.command[0]}"
        if returncode is not None:
            msg += f" exited with status {returncode}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)

    @property
    def tool(self) -> Optional[str]:
        """Name of the external tool that failed."""
        return self.command[0] if self.command else None


class CheckoutFailed(PipelineError):
    """Raised when the initial clone/checkout/download of a source fails."""

    stage = "checkout"


class FetchFailed(PipelineError):
    """Raised when updating an existing source tree fails."""

    stage = "fetch"


class BuildFailed(PipelineError):
    """Raised when configure, compile or install exits non-zero."""

    stage = "build"
