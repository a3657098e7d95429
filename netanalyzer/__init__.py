"""Parallel ICMP/TCP host discovery, network information and device identification."""

__version__ = "2.0.0"