"""XRd interface naming.

XRd takes its data-plane interfaces from the XR_INTERFACES variable, a
table mapping linux interfaces to XR names. The table is read once at
boot, so every slot up to the maximum is always listed whether or not the
lab wires it.
"""

from __future__ import annotations

import re

from labnode.config import settings
from labnode.errors import InterfaceNameError

LINUX_PREFIX = "eth"
XR_PREFIX = "Gi0/0/0/"

_LINUX_RE = re.compile(r"^eth([1-9]\d*)$")
_XR_RE = re.compile(r"^(?:Gi|GigabitEthernet)0/0/0/(\d+)$")


def interface_mapping(max_interfaces: int | None = None) -> list[tuple[str, str]]:
    """Return (linux name, XR name) pairs for slots 1..max_interfaces.

    eth0 is the management interface and is never part of the table, so
    eth1 maps to Gi0/0/0/0.
    """
    if max_interfaces is None:
        max_interfaces = settings.xrd_max_interfaces
    if max_interfaces < 1:
        raise ValueError(f"max_interfaces must be at least 1, got {max_interfaces}")
    return [
        (f"{LINUX_PREFIX}{i}", f"{XR_PREFIX}{i - 1}")
        for i in range(1, max_interfaces + 1)
    ]


def interfaces_env(max_interfaces: int | None = None) -> str:
    """Encode the interface table as the XR_INTERFACES value."""
    return "".join(
        f"linux:{linux},xr_name={xr};"
        for linux, xr in interface_mapping(max_interfaces)
    )


def check_interface_name(name: str, max_interfaces: int | None = None) -> None:
    """Validate a link endpoint interface name for an XRd node.

    Raises:
        InterfaceNameError: name is not eth1..eth<max_interfaces>
    """
    if max_interfaces is None:
        max_interfaces = settings.xrd_max_interfaces
    match = _LINUX_RE.match(name)
    if not match:
        raise InterfaceNameError(
            f"interface {name!r} does not match the required pattern eth<N> (N >= 1)"
        )
    if int(match.group(1)) > max_interfaces:
        raise InterfaceNameError(
            f"interface {name!r} is above the supported maximum eth{max_interfaces}"
        )


def to_linux_name(name: str, max_interfaces: int | None = None) -> str:
    """Map an XR interface name (Gi0/0/0/N) to its linux name.

    Linux names are returned unchanged, so links may use either form. Both
    forms must fall inside the interface table.

    Raises:
        InterfaceNameError: unknown name or slot above max_interfaces
    """
    match = _XR_RE.match(name)
    if match:
        linux = f"{LINUX_PREFIX}{int(match.group(1)) + 1}"
    elif _LINUX_RE.match(name):
        linux = name
    else:
        raise InterfaceNameError(f"interface {name!r} is not a known XRd interface name")
    check_interface_name(linux, max_interfaces)
    return linux
