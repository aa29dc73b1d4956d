"""udpcomm — scriptable UDP datagram communication CLI."""

__version__ = "0.1.0"
