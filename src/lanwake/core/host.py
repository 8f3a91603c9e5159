"""Combined reachability / MAC / model report for one host."""

import ipaddress
import logging
import socket
from dataclasses import dataclass, field
from typing import Optional

from lanwake.config.loader import Settings
from lanwake.core.arp import mac_for_ip
from lanwake.core.commands import CommandError, Runner, run_lines
from lanwake.core.devinfo import device_model
from lanwake.core.ping import is_reachable

logger = logging.getLogger(__name__)


class HostLookupError(Exception):
    """Raised when a host name cannot be resolved to an IPv4 address."""


@dataclass
class HostReport:
    """What could be learned about a host in one pass."""

    host: str
    ip: str
    reachable: Optional[bool] = None
    mac: Optional[str] = None
    model: Optional[str] = None
    errors: list[str] = field(default_factory=list)


def resolve_address(host: str) -> str:
    """
    Return the dotted-quad address for ``host``.

    IPv4 literals are returned unchanged; names go through the system resolver.

    Raises:
        HostLookupError: If the name does not resolve
    """
    try:
        return str(ipaddress.IPv4Address(host))
    except ValueError:
        pass
    try:
        ip = socket.gethostbyname(host)
    except (socket.gaierror, UnicodeError) as exc:
        raise HostLookupError(f"cannot resolve '{host}': {exc}") from exc
    logger.debug("Resolved %s → %s", host, ip)
    return ip


def inspect_host(
    host: str,
    settings: Optional[Settings] = None,
    runner: Runner = run_lines,
) -> HostReport:
    """
    Probe ``host`` for liveness, MAC address and device model.

    The three lookups are independent: a utility that fails to launch is
    noted in ``errors`` and the remaining lookups still run.

    The device-info query goes unicast to the resolved address, the host
    itself being the responder; ``settings.mdns_server`` is only used when
    no address is known, as in the ``model`` command without ``--ip``.

    Raises:
        HostLookupError: If ``host`` is a name that does not resolve
    """
    settings = settings or Settings()
    report = HostReport(host=host, ip=resolve_address(host))
    timeout = settings.command_timeout

    try:
        report.reachable = is_reachable(
            report.ip, ping_bin=settings.ping_bin, timeout=timeout, runner=runner
        )
    except CommandError as exc:
        logger.warning("Liveness probe for %s failed: %s", report.ip, exc)
        report.errors.append(f"ping: {exc}")

    try:
        report.mac = mac_for_ip(report.ip, arp_bin=settings.arp_bin, timeout=timeout, runner=runner)
    except CommandError as exc:
        logger.warning("MAC lookup for %s failed: %s", report.ip, exc)
        report.errors.append(f"arp: {exc}")

    try:
        report.model = device_model(
            host,
            report.ip,
            server_port=settings.mdns_port,
            dig_bin=settings.dig_bin,
            timeout=timeout,
            runner=runner,
        )
    except CommandError as exc:
        logger.warning("Device info query for %s failed: %s", host, exc)
        report.errors.append(f"dig: {exc}")

    return report
