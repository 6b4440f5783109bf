"""
External process invocation for llvmenv.

Every VCS and build tool call goes through a ProcessRunner, so the pipeline
can be exercised in tests with a fake runner instead of real compilers.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

# Shell convention for "command not found"
EXIT_COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    """Outcome of one external command."""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    cwd: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def tool(self) -> str:
        return self.args[0] if self.args else ""


class ProcessRunner(ABC):
    """
    Capability to run a named tool with arguments in a working directory.

    Implementations return the exit status instead of raising on failure;
    interpreting the status is up to the caller.
    """

    @abstractmethod
    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> CommandResult:
        """
        Run a command to completion.

        Args:
            args: Command line, tool name first
            cwd: Working directory (default: current directory)
            env: Extra environment variables layered over os.environ

        Returns:
            CommandResult with the exit status
        """
        pass


@dataclass
class SubprocessRunner(ProcessRunner):
    """
    ProcessRunner backed by subprocess.run.

    By default output streams straight to the terminal, which is what a
    multi-hour compiler build wants. With capture=True stdout/stderr are
    collected into the CommandResult instead.
    """

    capture: bool = False
    base_env: Dict[str, str] = field(default_factory=dict)

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> CommandResult:
        args = [str(a) for a in args]
        full_env = None
        if env or self.base_env:
            full_env = dict(os.environ)
            full_env.update(self.base_env)
            full_env.update(env or {})

        logger.debug(f"Running: {' '.join(args)}" + (f" (cwd={cwd})" if cwd else ""))

        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                env=full_env,
                capture_output=self.capture,
                text=True,
            )
        except FileNotFoundError:
            logger.error(f"{args[0]} not found in PATH")
            return CommandResult(
                args=args,
                returncode=EXIT_COMMAND_NOT_FOUND,
                stderr=f"{args[0]}: command not found",
                cwd=cwd,
            )

        if completed.returncode != 0:
            logger.debug(f"{args[0]} exited with status {completed.returncode}")

        return CommandResult(
            args=args,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            cwd=cwd,
        )


def available_cpu_count() -> int:
    """
    Number of processing units available to this process.

    Honors CPU affinity where the platform exposes it.
    """
    if hasattr(os, "sched_getaffinity"):
        try:
            return max(1, len(os.sched_getaffinity(0)))
        except OSError:
            pass
    return os.cpu_count() or 1
