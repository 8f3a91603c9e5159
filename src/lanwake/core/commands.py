"""Run local network-diagnostic utilities and hand back their output lines."""

import logging
import shlex
import subprocess
from typing import Callable, Optional, Sequence, Union

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]

# Signature shared by run_lines and any canned-output replacement used in tests.
Runner = Callable[..., list[str]]


class CommandError(Exception):
    """Raised when an external utility could not produce any output."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        self.command = list(command)
        self.reason = reason
        super().__init__(f"{shlex.join(self.command)}: {reason}")


class CommandLaunchError(CommandError):
    """Raised when the utility could not be started at all."""


class CommandTimeoutError(CommandError):
    """Raised when the utility did not finish inside the configured timeout."""


def run_lines(command: Command, timeout: Optional[float] = None) -> list[str]:
    """
    Run a command and return its standard output split into lines.

    The exit status is not inspected; callers decide success from the text.
    With ``timeout=None`` the call blocks until the utility closes its output.

    Args:
        command: argv list, or a command string that is split with ``shlex``
        timeout: Seconds to wait before giving up, or None to wait forever

    Returns:
        Output lines without trailing newlines

    Raises:
        CommandLaunchError: If the executable is missing or cannot be run
        CommandTimeoutError: If ``timeout`` elapsed first
    """
    argv = shlex.split(command) if isinstance(command, str) else list(command)
    logger.debug("Running: %s", shlex.join(argv))
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandTimeoutError(argv, f"timed out after {timeout}s") from exc
    except OSError as exc:
        raise CommandLaunchError(argv, exc.strerror or str(exc)) from exc

    if result.returncode != 0:
        logger.debug("%s exited %d", argv[0], result.returncode)
    return (result.stdout or "").splitlines()
