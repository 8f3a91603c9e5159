"""
Device model lookup over multicast DNS.

Apple devices (and anything running a Bonjour responder) advertise a
``_device-info._tcp`` TXT record whose payload looks like::

    macmini._device-info._tcp.local. 10 IN TXT "model=Macmini6,2" "osxvers=18"

``dig`` is pointed at either the host itself or the mDNS multicast group and
the ``model`` value is pulled out of the first ``key=value`` token in its
answer.
"""

import enum
import logging
import re
import shlex
from typing import Iterable, Iterator, Optional

from lanwake.core.commands import Runner, run_lines

logger = logging.getLogger(__name__)

MDNS_ADDRESS = "224.0.0.251"
MDNS_PORT = 5353
DEVICE_INFO_SERVICE = "_device-info._tcp"
LOCAL_DOMAIN = "local"
TXT_QUERY = "TXT"
MODEL_KEY = "model"

_TOKEN_RE = re.compile(r'[^"=]+')


class _Scan(enum.Enum):
    SCANNING = "scanning"
    KEY_MATCHED = "key_matched"
    DONE = "done"


def build_query(
    server: Optional[str],
    host_name: str,
    port: int = MDNS_PORT,
    service_type: str = DEVICE_INFO_SERVICE,
    domain: str = LOCAL_DOMAIN,
    query_type: str = TXT_QUERY,
    dig_bin: str = "dig",
) -> str:
    """
    Assemble the ``dig`` command line for a service-discovery query.

    An empty or missing ``server`` sends the query to the mDNS multicast group.
    The record name is shell-quoted; device names may contain spaces or
    apostrophes ("Bob's iMac").

    >>> build_query("", "macmini")
    'dig @224.0.0.251 -p5353 macmini._device-info._tcp.local TXT'
    """
    target = server or MDNS_ADDRESS
    record = shlex.quote(f"{host_name}.{service_type}.{domain}")
    return f"{dig_bin} @{target} -p{port} {record} {query_type}"


def iter_tokens(blob: str) -> Iterator[str]:
    """Yield the non-empty pieces of ``blob`` between ``"`` and ``=`` characters."""
    for match in _TOKEN_RE.finditer(blob):
        yield match.group(0)


def extract_model(blob: str, key: str = MODEL_KEY) -> Optional[str]:
    """
    Return the value that follows ``key`` in a quoted ``key=value`` blob.

    Only the token right after a ``key`` token counts as its value; a
    repeated ``key`` keeps the match armed. Returns None if ``key`` never
    appears or nothing follows it.
    """
    state = _Scan.SCANNING
    value: Optional[str] = None
    for token in iter_tokens(blob):
        if token == key:
            state = _Scan.KEY_MATCHED
        elif state is _Scan.KEY_MATCHED:
            value = token
            state = _Scan.DONE
            break
    return value if state is _Scan.DONE else None


def parse_dig_output(lines: Iterable[str]) -> Optional[str]:
    """Find the first ``=``-bearing token in ``lines`` and extract the model from it."""
    for line in lines:
        for token in line.split():
            if "=" in token:
                return extract_model(token)
    return None


def instance_name(host: str, domain: str = LOCAL_DOMAIN) -> str:
    """Strip a trailing ``.local`` (or ``domain``) so it is not doubled in the query."""
    suffix = f".{domain}"
    name = host.rstrip(".")
    if name.lower().endswith(suffix.lower()):
        name = name[: -len(suffix)]
    return name


def device_model(
    host: str,
    ip: Optional[str] = None,
    server_port: int = MDNS_PORT,
    dig_bin: str = "dig",
    timeout: Optional[float] = None,
    runner: Runner = run_lines,
) -> Optional[str]:
    """
    Query the device-info record for ``host`` and return its model identifier.

    Args:
        host: Host name, with or without the ``.local`` suffix
        ip: Unicast address to query; None or "" uses the multicast group
        server_port: Port the responder listens on
        dig_bin: Name or path of the ``dig`` executable
        timeout: Seconds to wait for ``dig``, or None to wait forever
        runner: Callable returning the command's output lines

    Returns:
        Model identifier such as ``"Macmini6,2"``, or None if not advertised

    Raises:
        CommandError: If ``dig`` could not be launched
    """
    command = build_query(ip, instance_name(host), port=server_port, dig_bin=dig_bin)
    model = parse_dig_output(runner(command, timeout=timeout))
    if model is None:
        logger.debug("No %s record with a model for %s", TXT_QUERY, host)
    else:
        logger.debug("Model for %s: %s", host, model)
    return model


def device_model_text(host: str, ip: Optional[str] = None, **kwargs) -> str:
    """Like ``device_model`` but returns an empty string when no model is found."""
    return device_model(host, ip, **kwargs) or ""
