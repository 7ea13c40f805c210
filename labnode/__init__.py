"""Node-kind drivers for container-based network labs."""

__version__ = "0.1.0"
