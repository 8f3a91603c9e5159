"""YAML configuration loader and validator."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from lanwake.core.devinfo import MDNS_ADDRESS, MDNS_PORT
from lanwake.core.wol import DEFAULT_BROADCAST, DEFAULT_PORT, WakeOptions

_KNOWN_SETTINGS = {
    "ping_bin",
    "arp_bin",
    "dig_bin",
    "command_timeout",
    "mdns_server",
    "mdns_port",
    "wol_broadcast",
    "wol_port",
}


class ConfigError(Exception):
    """Raised for invalid or missing configuration."""


@dataclass
class Settings:
    """Tunables for the probes and the magic-packet sender."""

    ping_bin: str = "ping"
    arp_bin: str = "arp"
    dig_bin: str = "dig"
    # None keeps the blocking behaviour: wait for the utility however long it takes.
    command_timeout: Optional[float] = None
    mdns_server: str = MDNS_ADDRESS
    mdns_port: int = MDNS_PORT
    wol_broadcast: str = DEFAULT_BROADCAST
    wol_port: int = DEFAULT_PORT

    @property
    def wake_options(self) -> WakeOptions:
        return WakeOptions(broadcast_address=self.wol_broadcast, port=self.wol_port)


def load_config(path: Path) -> Optional[dict[str, Any]]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML config file

    Returns:
        Parsed configuration dictionary, or None if file is empty

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    with open(path) as f:
        result: Optional[dict[str, Any]] = yaml.safe_load(f)
        return result


def _is_port(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value < 65536


def validate_config(config: dict[str, Any]) -> list[str]:
    """
    Validate a loaded configuration dictionary.

    Returns:
        List of validation error messages (empty list = valid)
    """
    if not isinstance(config, dict):
        return ["Config root must be a YAML mapping"]

    settings = config.get("settings", {})
    if settings is None:
        return []
    if not isinstance(settings, dict):
        return ["'settings' must be a mapping"]

    errors: list[str] = []
    for key in sorted(set(settings) - _KNOWN_SETTINGS):
        errors.append(f"settings: unknown key '{key}'")

    for key in ("ping_bin", "arp_bin", "dig_bin", "mdns_server", "wol_broadcast"):
        value = settings.get(key)
        if key in settings and (not isinstance(value, str) or not value.strip()):
            errors.append(f"settings.{key}: must be a non-empty string")

    for key in ("mdns_port", "wol_port"):
        if key in settings and not _is_port(settings[key]):
            errors.append(f"settings.{key}: must be a port number (1-65535)")

    timeout = settings.get("command_timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
    ):
        errors.append("settings.command_timeout: must be a positive number or null")

    return errors


def settings_from_config(config: Optional[dict[str, Any]]) -> Settings:
    """
    Build a Settings object from a validated config dict.

    A None or empty config yields the defaults.
    """
    raw = (config or {}).get("settings") or {}
    defaults = Settings()
    timeout = raw.get("command_timeout", defaults.command_timeout)
    return Settings(
        ping_bin=raw.get("ping_bin", defaults.ping_bin),
        arp_bin=raw.get("arp_bin", defaults.arp_bin),
        dig_bin=raw.get("dig_bin", defaults.dig_bin),
        command_timeout=float(timeout) if timeout is not None else None,
        mdns_server=raw.get("mdns_server", defaults.mdns_server),
        mdns_port=int(raw.get("mdns_port", defaults.mdns_port)),
        wol_broadcast=raw.get("wol_broadcast", defaults.wol_broadcast),
        wol_port=int(raw.get("wol_port", defaults.wol_port)),
    )


def load_settings(path: Path) -> Settings:
    """
    Load, validate and convert a config file in one step.

    A missing or empty file gives the defaults.

    Raises:
        ConfigError: If the file cannot be read, the YAML is malformed, or
            validation fails
    """
    if not path.exists():
        return Settings()
    try:
        raw = load_config(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"{path}: cannot read config: {exc.strerror or exc}") from exc
    if not raw:
        return Settings()
    errors = validate_config(raw)
    if errors:
        raise ConfigError("; ".join(errors))
    return settings_from_config(raw)
