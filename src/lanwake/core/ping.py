"""Single-shot liveness probe built on the system ``ping`` utility."""

import logging
from typing import Iterable, Optional

from lanwake.core.commands import Runner, run_lines

logger = logging.getLogger(__name__)

# BSD/macOS and iputils word the all-lost summary differently.
FAILURE_PHRASES = (
    "1 packets transmitted, 0 packets received",
    "1 packets transmitted, 0 received",
)


def build_ping_command(ip: str, ping_bin: str = "ping") -> list[str]:
    """Return the argv for one echo request to ``ip``."""
    return [ping_bin, "-c", "1", ip]


def parse_ping_output(lines: Iterable[str]) -> bool:
    """Return False if any line reports the single packet as lost, True otherwise."""
    for line in lines:
        if any(phrase in line for phrase in FAILURE_PHRASES):
            return False
    return True


def is_reachable(
    ip: str,
    ping_bin: str = "ping",
    timeout: Optional[float] = None,
    runner: Runner = run_lines,
) -> bool:
    """
    Send exactly one echo request to ``ip`` and report whether it was answered.

    Host down, network unreachable and timeout all come back as False.

    Raises:
        CommandError: If ``ping`` could not be launched (or timed out when
            ``timeout`` is set)
    """
    lines = runner(build_ping_command(ip, ping_bin), timeout=timeout)
    reachable = parse_ping_output(lines)
    logger.debug("ping %s → %s", ip, "reachable" if reachable else "unreachable")
    return reachable
