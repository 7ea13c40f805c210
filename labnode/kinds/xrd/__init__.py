"""Cisco XRd node kind."""

from labnode.kinds.xrd.interfaces import (
    check_interface_name,
    interface_mapping,
    interfaces_env,
    to_linux_name,
)
from labnode.kinds.xrd.node import KIND_NAMES, XRD_DESCRIPTOR, XRDNode, register

__all__ = [
    "KIND_NAMES",
    "XRD_DESCRIPTOR",
    "XRDNode",
    "register",
    "check_interface_name",
    "interface_mapping",
    "interfaces_env",
    "to_linux_name",
]
