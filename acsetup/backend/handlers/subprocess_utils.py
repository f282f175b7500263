"""
Guarded command execution.

Every external program acsetup runs (tar, unzip, gio, protontricks) goes
through CommandRunner. Output is captured with stderr merged into stdout.
run() always returns a CommandResult; check() raises CommandFailedError on a
non-zero exit so the frontend can print the report and stop.
"""

import os
import sys
import shlex
import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from ..core.exceptions import CommandFailedError

logger = logging.getLogger(__name__)


def get_clean_subprocess_env(extra_env=None):
    """
    Returns a copy of os.environ with bundled-runtime variables removed.
    Optionally merges in extra_env dict.
    """
    env = os.environ.copy()

    for key in ['APPIMAGE', 'APPDIR', 'ARGV0', 'OWD']:
        env.pop(key, None)
    for k in list(env):
        if k.startswith('_MEIPASS'):
            del env[k]

    # Keep system tools reachable even from a stripped-down PATH
    path_parts = env.get('PATH', '').split(os.pathsep) if env.get('PATH') else []
    for sys_path in ['/usr/bin', '/usr/local/bin', '/bin']:
        if sys_path not in path_parts and os.path.isdir(sys_path):
            path_parts.append(sys_path)
    env['PATH'] = os.pathsep.join(path_parts)

    if extra_env:
        env.update(extra_env)
    return env


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""
    command: List[str]
    returncode: int
    output: str
    call_site: str = "unknown"

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(shlex.quote(part) for part in self.command)


def _caller_location(depth: int) -> str:
    frame = sys._getframe(depth + 1)
    return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"


class CommandRunner:
    """
    Runs external commands with merged, captured output.
    """

    def __init__(self, env: Optional[dict] = None):
        self.env = env

    def run(self, *cmd, cwd=None, env=None, _depth: int = 1) -> CommandResult:
        """Execute cmd and return its result. Never raises on failure."""
        command = [str(part) for part in cmd]
        call_site = _caller_location(_depth)
        logger.debug(f"Running '{' '.join(command)}' (from {call_site})")
        if env is None:
            env = self.env if self.env is not None else get_clean_subprocess_env()
        try:
            proc = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                errors="replace",
                cwd=cwd,
                env=env,
            )
            returncode, output = proc.returncode, proc.stdout or ""
        except OSError as e:
            # Missing executable behaves like the shell's "command not found"
            returncode, output = 127, str(e)

        result = CommandResult(command, returncode, output, call_site)
        if result.success:
            logger.debug(f"Command succeeded: {result.command_line}")
        else:
            logger.warning(f"Command failed ({returncode}): {result.command_line}\n{output}")
        return result

    def check(self, *cmd, cwd=None, env=None) -> CommandResult:
        """Execute cmd, raising CommandFailedError if it exits non-zero."""
        result = self.run(*cmd, cwd=cwd, env=env, _depth=2)
        if not result.success:
            raise CommandFailedError(result)
        return result

