"""Downstream build invocation used as a pass/fail oracle."""

import os
import re
import signal
import subprocess
import time
from pathlib import Path
from typing import Optional, Union

from ..errors import BuildValidationFailure
from ..output.models import BuildResult
from ..utils.helpers import command_executable, is_tool_available


# Operators and expansions that make the first word a poor guess at what runs
SHELL_SYNTAX_RE = re.compile(r"[;&|<>()`$\n]")
SHELL_BUILTINS = frozenset({
    ".", ":", "alias", "builtin", "cd", "command", "eval", "exec", "export",
    "set", "source", "test", "[", "true", "ulimit", "umask", "unset",
})

# POSIX shells exit with 127 when a command cannot be found
COMMAND_NOT_FOUND = 127


class BuildValidator:
    """Runs the site build once after a full corpus pass.

    The build only reports template errors for the whole site, so it is never
    run per file. A failing build does not undo any written file.
    """

    def __init__(self, command: str, cwd: Union[str, Path], timeout: Optional[float] = None):
        """Initialize the validator.

        Args:
            command: Shell command line, e.g. ``bundle exec jekyll build``.
            cwd: Directory the build runs in (the corpus root).
            timeout: Seconds before the build is killed and reported as failed.
        """
        self.command = command
        self.cwd = Path(cwd)
        self.timeout = timeout

    def preflight(self) -> Optional[str]:
        """Reason the command cannot run, if that is known without running it.

        Only a plain ``program args...`` command line is checked; compound
        commands and builtins are left to the shell.
        """
        executable = command_executable(self.command)
        if not executable:
            return "empty or unparsable build command"
        if SHELL_SYNTAX_RE.search(self.command) or executable in SHELL_BUILTINS or os.sep in executable:
            return None
        if not is_tool_available(executable):
            return f"'{executable}' not found on PATH"
        return None

    def validate(self) -> BuildResult:
        """Run the build and capture its exit status and combined output."""
        reason = self.preflight()
        if reason:
            return BuildResult(self.command, passed=False, reason=reason)

        start_time = time.time()
        try:
            # A session of its own, so a timeout can kill the whole process group
            process = subprocess.Popen(
                self.command,
                shell=True,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                start_new_session=True,
            )
        except OSError as e:
            return BuildResult(self.command, passed=False, reason=str(e), duration=time.time() - start_time)

        try:
            output, _ = process.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            _kill_group(process)
            output, _ = process.communicate()
            return BuildResult(
                self.command,
                passed=False,
                returncode=process.returncode,
                output=output or "",
                duration=time.time() - start_time,
                timed_out=True,
            )

        result = BuildResult(
            self.command,
            passed=process.returncode == 0,
            returncode=process.returncode,
            output=output or "",
            duration=time.time() - start_time,
        )
        if process.returncode == COMMAND_NOT_FOUND:
            result.reason = f"command not found (shell exit status {COMMAND_NOT_FOUND})"
        return result

    def require(self) -> BuildResult:
        """Like :meth:`validate` but raise on failure.

        Raises:
            BuildValidationFailure: If the build does not pass.
        """
        result = self.validate()
        if not result.passed:
            raise BuildValidationFailure(result)
        return result


def _kill_group(process: subprocess.Popen) -> None:
    if hasattr(os, "killpg"):
        try:
            os.killpg(process.pid, signal.SIGKILL)
            return
        except ProcessLookupError:
            return
    process.kill()
