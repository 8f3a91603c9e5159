"""
Hardware address lookup through the system neighbor (ARP) table.

``arp <ip>`` output differs between platforms::

    Address        HWtype  HWaddress           Flags Mask  Iface   (Linux)
    192.168.1.5    ether   a:1b:2:3c:4:5       C           eth0

    ? (192.168.1.5) at a:1b:2:3c:4:5 on en0 ifscope [ethernet]  (BSD/macOS)

Both carry the MAC as the only colon-bearing whitespace token on the line,
which is all the parser relies on.
"""

import logging
from typing import Iterable, Optional

from lanwake.core.commands import Runner, run_lines
from lanwake.core.mac import normalize

logger = logging.getLogger(__name__)

NO_MAC_FOUND = "no MAC found"


def build_arp_command(ip: str, arp_bin: str = "arp") -> list[str]:
    """Return the argv for a neighbor-table query for ``ip``."""
    return [arp_bin, ip]


def parse_arp_output(lines: Iterable[str]) -> Optional[str]:
    """
    Return the first colon-bearing token found in ``lines``, unnormalized.

    Lines are scanned in order and scanning stops at the first line that
    yields a token. Returns None when no line has one.
    """
    for line in lines:
        for token in line.split():
            if ":" in token:
                return token
    return None


def mac_for_ip(
    ip: str,
    arp_bin: str = "arp",
    timeout: Optional[float] = None,
    runner: Runner = run_lines,
) -> Optional[str]:
    """
    Look up the MAC address last seen at ``ip``.

    Args:
        ip: Dotted-quad address to look up
        arp_bin: Name or path of the ``arp`` executable
        timeout: Seconds to wait for ``arp``, or None to wait forever
        runner: Callable returning the command's output lines

    Returns:
        The MAC with every octet padded to two digits, or None if the
        table has no entry for ``ip``

    Raises:
        CommandError: If ``arp`` could not be launched
    """
    raw = parse_arp_output(runner(build_arp_command(ip, arp_bin), timeout=timeout))
    if raw is None:
        logger.debug("No neighbor entry for %s", ip)
        return None
    mac = normalize(raw)
    logger.debug("Neighbor entry for %s: %s (raw %s)", ip, mac, raw)
    return mac


def mac_for_ip_text(ip: str, **kwargs) -> str:
    """Like ``mac_for_ip`` but returns ``NO_MAC_FOUND`` in place of None."""
    mac = mac_for_ip(ip, **kwargs)
    return mac if mac is not None else NO_MAC_FOUND
