"""Wake-on-LAN functionality."""

import logging
import socket
from dataclasses import dataclass

from wakeonlan import create_magic_packet

from lanwake.core.mac import MacAddressError, decode

logger = logging.getLogger(__name__)

MAGIC_PACKET_LENGTH = 102
DEFAULT_BROADCAST = "255.255.255.255"
DEFAULT_PORT = 60000


class WakeError(Exception):
    """Base class for failures while sending a magic packet."""


class InvalidMacAddressError(WakeError):
    """Raised when the MAC address string cannot be decoded."""


class WakeSocketError(WakeError):
    """Raised when the UDP socket cannot be created or set to broadcast."""


class WakeSendError(WakeError):
    """Raised when the datagram could not be sent."""


@dataclass(frozen=True)
class WakeOptions:
    """Where the magic packet goes."""

    broadcast_address: str = DEFAULT_BROADCAST
    port: int = DEFAULT_PORT


def build_magic_packet(hw_address: bytes) -> bytes:
    """
    Build the 102-byte magic packet for a 6-byte hardware address.

    Layout: 6 x ``0xFF`` followed by the address repeated 16 times.
    """
    if len(hw_address) != 6:
        raise ValueError(f"hardware address must be 6 bytes, got {len(hw_address)}")
    packet = create_magic_packet(hw_address.hex())
    if len(packet) != MAGIC_PACKET_LENGTH:
        raise ValueError(f"magic packet is {len(packet)} bytes, expected {MAGIC_PACKET_LENGTH}")
    return packet


def _open_broadcast_socket() -> socket.socket:
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    except OSError as exc:
        raise WakeSocketError(f"cannot create UDP socket: {exc}") from exc
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    except OSError as exc:
        sock.close()
        raise WakeSocketError(f"cannot enable broadcast: {exc}") from exc
    return sock


def wake(mac_address: str, options: WakeOptions = WakeOptions()) -> bool:
    """
    Send a Wake-on-LAN magic packet to wake a remote machine.

    The address is validated before any socket is opened. Delivery is not
    confirmed; the protocol has no acknowledgement.

    Args:
        mac_address: MAC address of the target machine (e.g., "AA:BB:CC:DD:EE:FF")
        options: Broadcast address and UDP port (default 255.255.255.255:60000)

    Returns:
        True if the packet was handed to the network stack

    Raises:
        InvalidMacAddressError: If ``mac_address`` is not XX:XX:XX:XX:XX:XX
        WakeSocketError: If the broadcast socket cannot be set up
        WakeSendError: If ``sendto`` fails
    """
    try:
        hw_address = decode(mac_address)
    except MacAddressError as exc:
        raise InvalidMacAddressError(str(exc)) from exc

    packet = build_magic_packet(hw_address)
    destination = (options.broadcast_address, options.port)

    sock = _open_broadcast_socket()
    try:
        logger.info(
            "Sending WOL magic packet to %s via %s:%d",
            mac_address,
            options.broadcast_address,
            options.port,
        )
        try:
            sock.sendto(packet, destination)
        except OSError as exc:
            raise WakeSendError(f"sendto {destination[0]}:{destination[1]} failed: {exc}") from exc
    finally:
        sock.close()
    logger.debug("WOL packet sent successfully")
    return True
