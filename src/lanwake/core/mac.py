"""
MAC address text handling.

Two jobs live here:

* ``normalize`` pads the single-digit octets that ``arp`` prints
  (``a:1b:2:3c:4:5`` becomes ``0a:1b:02:3c:04:05``).  Only the width is
  fixed; letter case and digit content are left as they came in.
* ``decode`` turns a canonical ``XX:XX:XX:XX:XX:XX`` string into the six
  raw bytes used on the wire.
"""

import re

MAC_LENGTH = 17

_CANONICAL_RE = re.compile(r"[0-9A-Fa-f]{2}(?::[0-9A-Fa-f]{2}){5}")


class MacAddressError(ValueError):
    """Raised when a MAC address string does not match XX:XX:XX:XX:XX:XX."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"invalid MAC address '{text}'")


def normalize(raw: str) -> str:
    """
    Left-pad one-character octets with ``0`` and rejoin them with colons.

    Empty segments (``a::b``) are dropped the way a tokenizer would drop them.
    No hex validation is done; an empty input gives an empty result.
    """
    octets = [octet for octet in raw.split(":") if octet]
    return ":".join(octet.rjust(2, "0") if len(octet) == 1 else octet for octet in octets)


def is_valid_mac(text: str) -> bool:
    """Return True if ``text`` is exactly six two-digit hex octets joined by colons."""
    return len(text) == MAC_LENGTH and _CANONICAL_RE.fullmatch(text) is not None


def decode(text: str) -> bytes:
    """
    Convert a canonical MAC address string to its 6-byte hardware address.

    Hex digits may be either case.

    Raises:
        MacAddressError: If ``text`` is not exactly 17 characters of the
            form ``XX:XX:XX:XX:XX:XX``
    """
    if not is_valid_mac(text):
        raise MacAddressError(text)
    return bytes.fromhex(text.replace(":", ""))
