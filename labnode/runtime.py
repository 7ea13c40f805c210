"""Container runtime view used by node drivers.

Drivers do not create containers or networks. They only need to know the
management network's gateways at pre-deploy time, which the network has
by then because it is created before any node is launched.
"""

from __future__ import annotations

import ipaddress
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import docker
from docker.errors import APIError, DockerException, NotFound

from labnode.config import settings
from labnode.errors import RuntimeUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MgmtNetwork:
    """Management network as seen by the nodes."""
    network: str
    ipv4_gateway: str | None = None
    ipv6_gateway: str | None = None


class ContainerRuntime(ABC):
    """Abstract container runtime."""

    @abstractmethod
    def mgmt(self) -> MgmtNetwork:
        """Describe the management network."""
        ...


class StaticRuntime(ContainerRuntime):
    """Runtime with a fixed, already known management network."""

    def __init__(self, mgmt: MgmtNetwork):
        self._mgmt = mgmt

    def mgmt(self) -> MgmtNetwork:
        return self._mgmt


def gateways_from_ipam(ipam_configs: list[dict]) -> tuple[str | None, str | None]:
    """Pick the IPv4 and IPv6 gateways out of a docker IPAM config list.

    Pools without an explicit gateway get the first host address of the
    subnet, which is what docker assigns by default.
    """
    ipv4_gw = None
    ipv6_gw = None
    for pool in ipam_configs:
        gateway = pool.get("Gateway")
        if not gateway and pool.get("Subnet"):
            gateway = str(ipaddress.ip_network(pool["Subnet"], strict=False).network_address + 1)
        if not gateway:
            continue
        addr = ipaddress.ip_address(gateway.split("/")[0])
        if addr.version == 4 and ipv4_gw is None:
            ipv4_gw = str(addr)
        elif addr.version == 6 and ipv6_gw is None:
            ipv6_gw = str(addr)
    return ipv4_gw, ipv6_gw


class DockerRuntime(ContainerRuntime):
    """Docker runtime reading the management network through the Docker SDK."""

    def __init__(self, network_name: str | None = None, client: docker.DockerClient | None = None):
        self.network_name = network_name or settings.mgmt_network_name
        self._docker = client
        self._mgmt: MgmtNetwork | None = None

    @property
    def docker(self) -> docker.DockerClient:
        """Lazy-initialize Docker client."""
        if self._docker is None:
            self._docker = docker.DockerClient(base_url=settings.docker_socket)
        return self._docker

    def mgmt(self) -> MgmtNetwork:
        if self._mgmt is not None:
            return self._mgmt

        try:
            network = self.docker.networks.get(self.network_name)
        except NotFound as e:
            raise RuntimeUnavailableError(
                f"management network {self.network_name} does not exist"
            ) from e
        except (APIError, DockerException) as e:
            raise RuntimeUnavailableError(
                f"cannot inspect management network {self.network_name}: {e}"
            ) from e

        configs = (network.attrs.get("IPAM") or {}).get("Config") or []
        ipv4_gw, ipv6_gw = gateways_from_ipam(configs)
        self._mgmt = MgmtNetwork(
            network=self.network_name,
            ipv4_gateway=ipv4_gw,
            ipv6_gateway=ipv6_gw,
        )
        logger.debug(
            f"Management network {self.network_name}: ipv4 gw {ipv4_gw}, ipv6 gw {ipv6_gw}"
        )
        return self._mgmt
