"""Command-line interface for lanwake."""

import dataclasses
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn, Optional

import click

from lanwake import __version__

if TYPE_CHECKING:
    from lanwake.config.loader import Settings

DEFAULT_CONFIG = Path.home() / ".config" / "lanwake" / "config.yaml"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_settings(config: str) -> "Settings":
    from lanwake.config.loader import ConfigError, load_settings

    try:
        return load_settings(Path(config))
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(2)


def _fail(message: str, code: int = 1) -> NoReturn:
    click.echo(message, err=True)
    sys.exit(code)


# ── Root group ────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="lanwake")
@click.option(
    "--config",
    "-c",
    default=str(DEFAULT_CONFIG),
    envvar="LANWAKE_CONFIG",
    show_default=True,
    help="Path to lanwake config.yaml",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config: str, verbose: bool) -> None:
    """lanwake: find hosts on the LAN and wake them up."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# ── Discovery commands ────────────────────────────────────────────────────────


@main.command()
@click.argument("ip")
@click.pass_context
def ping(ctx: click.Context, ip: str) -> None:
    """Send one echo request to IP; exit 1 if it goes unanswered."""
    from lanwake.core.commands import CommandError
    from lanwake.core.ping import is_reachable

    settings = _load_settings(ctx.obj["config"])
    try:
        alive = is_reachable(ip, ping_bin=settings.ping_bin, timeout=settings.command_timeout)
    except CommandError as exc:
        _fail(f"ping failed: {exc}")
    if alive:
        click.echo(f"{ip} is up")
    else:
        _fail(f"{ip} is down")


@main.command()
@click.argument("ip")
@click.pass_context
def mac(ctx: click.Context, ip: str) -> None:
    """Print the MAC address the neighbor table holds for IP."""
    from lanwake.core.arp import NO_MAC_FOUND, mac_for_ip
    from lanwake.core.commands import CommandError

    settings = _load_settings(ctx.obj["config"])
    try:
        found = mac_for_ip(ip, arp_bin=settings.arp_bin, timeout=settings.command_timeout)
    except CommandError as exc:
        _fail(f"arp failed: {exc}")
    if found is None:
        _fail(NO_MAC_FOUND)
    click.echo(found)


@main.command()
@click.argument("host")
@click.option("--ip", default=None, help="Query this address instead of the mDNS group")
@click.pass_context
def model(ctx: click.Context, host: str, ip: Optional[str]) -> None:
    """Print the device model HOST advertises over mDNS."""
    from lanwake.core.commands import CommandError
    from lanwake.core.devinfo import device_model

    settings = _load_settings(ctx.obj["config"])
    try:
        found = device_model(
            host,
            ip or settings.mdns_server,
            server_port=settings.mdns_port,
            dig_bin=settings.dig_bin,
            timeout=settings.command_timeout,
        )
    except CommandError as exc:
        _fail(f"dig failed: {exc}")
    if not found:
        _fail(f"No model advertised by {host}")
    click.echo(found)


@main.command()
@click.argument("host")
@click.pass_context
def inspect(ctx: click.Context, host: str) -> None:
    """Show reachability, MAC address and model for HOST."""
    from lanwake.core.arp import NO_MAC_FOUND
    from lanwake.core.host import HostLookupError, inspect_host

    settings = _load_settings(ctx.obj["config"])
    try:
        report = inspect_host(host, settings)
    except HostLookupError as exc:
        _fail(str(exc), code=2)

    if report.reachable is None:
        state = "unknown"
    else:
        state = "up" if report.reachable else "down"
    click.echo(f"{'HOST':<10} {report.host}")
    click.echo(f"{'IP':<10} {report.ip}")
    click.echo(f"{'STATE':<10} {state}")
    click.echo(f"{'MAC':<10} {report.mac or NO_MAC_FOUND}")
    click.echo(f"{'MODEL':<10} {report.model or '-'}")
    for err in report.errors:
        click.echo(f"  • {err}", err=True)


# ── MAC / wake commands ───────────────────────────────────────────────────────


@main.command()
@click.argument("mac_address")
def normalize(mac_address: str) -> None:
    """Pad single-digit octets of MAC_ADDRESS and print it."""
    from lanwake.core.mac import is_valid_mac, normalize as do_normalize

    fixed = do_normalize(mac_address)
    click.echo(fixed)
    if not is_valid_mac(fixed):
        _fail(f"'{fixed}' is not a valid MAC address", code=2)


@main.command()
@click.argument("mac_address")
@click.option("--broadcast", "-b", default=None, help="Broadcast address (default from config)")
@click.option("--port", "-p", type=int, default=None, help="UDP port (default from config)")
@click.pass_context
def wake(
    ctx: click.Context, mac_address: str, broadcast: Optional[str], port: Optional[int]
) -> None:
    """Send a Wake-on-LAN magic packet to MAC_ADDRESS."""
    from lanwake.core.mac import normalize as do_normalize
    from lanwake.core.wol import InvalidMacAddressError, WakeError
    from lanwake.core.wol import wake as do_wake

    settings = _load_settings(ctx.obj["config"])
    overrides: dict = {}
    if broadcast:
        overrides["broadcast_address"] = broadcast
    if port is not None:
        overrides["port"] = port
    options = dataclasses.replace(settings.wake_options, **overrides)
    target = do_normalize(mac_address)
    try:
        do_wake(target, options)
    except InvalidMacAddressError as exc:
        _fail(str(exc), code=2)
    except WakeError as exc:
        _fail(f"Wake failed: {exc}")
    click.echo(f"WOL packet sent to {target} via {options.broadcast_address}:{options.port}")


if __name__ == "__main__":
    main()
