"""Host discovery and Wake-on-LAN primitives."""
