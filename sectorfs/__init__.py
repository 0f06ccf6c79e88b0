"""Sector-based file system with block devices, partitions and simulated PC devices."""

__version__ = "0.1.0"