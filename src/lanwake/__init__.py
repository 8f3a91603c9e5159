"""lanwake: find hosts on the local network and wake them with a magic packet."""

__version__ = "0.1.0"
