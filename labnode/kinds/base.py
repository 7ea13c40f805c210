"""Base node interface for node-kind drivers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from labnode import netconf
from labnode.errors import NodeStateError
from labnode.templates import TemplateRenderer

if TYPE_CHECKING:
    from labnode.runtime import ContainerRuntime

logger = logging.getLogger(__name__)


class NodeState(str, Enum):
    """Lifecycle state of a node driver."""
    UNCONFIGURED = "unconfigured"
    INITIALIZED = "initialized"
    PREDEPLOYED = "predeployed"
    RUNNING = "running"
    CONFIG_SAVED = "config_saved"


@dataclass(frozen=True)
class NodeKindDescriptor:
    """Static metadata for a node kind, shared by all its instances."""
    aliases: frozenset[str]
    default_username: str
    default_password: str
    management_protocol: str  # Platform name used by the management session

    def __post_init__(self):
        if not self.aliases:
            raise ValueError("a node kind needs at least one alias")


@dataclass(frozen=True)
class Credentials:
    """Username/password pair for management access."""
    username: str
    password: str


@dataclass
class NodeConfig:
    """Generic per-instance node configuration, owned by the orchestrator.

    Drivers mutate env and binds during init, and the startup-config and
    gateway fields during pre_deploy.
    """
    kind: str
    short_name: str
    long_name: str  # Container name, resolvable on the management network
    lab_dir: str
    image: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    binds: list[str] = field(default_factory=list)  # "host:container"
    startup_config: str | None = None  # User-supplied config file
    res_startup_config: str | None = None  # Resolved config written for the node
    mgmt_ipv4_address: str | None = None
    mgmt_ipv6_address: str | None = None
    mgmt_ipv4_gateway: str | None = None
    mgmt_ipv6_gateway: str | None = None

    @property
    def mgmt_address(self) -> str:
        """Address used to reach the node's management interface."""
        return self.mgmt_ipv4_address or self.mgmt_ipv6_address or self.long_name


SaveSession = Callable[..., Awaitable[None]]
NodeOption = Callable[["DefaultNode"], None]


def with_runtime(runtime: ContainerRuntime) -> NodeOption:
    """Attach the container runtime that owns the management network."""
    def apply(node: DefaultNode) -> None:
        node.runtime = runtime
    return apply


def with_renderer(renderer: TemplateRenderer) -> NodeOption:
    """Use a specific template renderer."""
    def apply(node: DefaultNode) -> None:
        node.renderer = renderer
    return apply


def with_session(save: SaveSession) -> NodeOption:
    """Use a specific management-session save function."""
    def apply(node: DefaultNode) -> None:
        node.save_session = save
    return apply


class Node(ABC):
    """Abstract base class for node-kind drivers.

    The orchestrator calls init, pre_deploy, post_deploy and save_config in
    that order for a single instance, never concurrently.
    """

    @property
    @abstractmethod
    def descriptor(self) -> NodeKindDescriptor:
        """Static metadata of the node kind."""
        ...

    @abstractmethod
    def init(self, cfg: NodeConfig, *opts: NodeOption) -> None:
        """Bind the driver to a node config and set env/binds."""
        ...

    @abstractmethod
    async def pre_deploy(self) -> None:
        """Prepare lab files before the container is created."""
        ...

    @abstractmethod
    async def post_deploy(self) -> None:
        """Called once the container is running."""
        ...

    @abstractmethod
    async def save_config(self) -> None:
        """Persist the running configuration of the node."""
        ...


class DefaultNode(Node):
    """Shared behaviour for node kinds.

    Subclasses set ``kind_descriptor`` and extend init/pre_deploy.
    """

    kind_descriptor: NodeKindDescriptor

    def __init__(self):
        self.cfg: NodeConfig | None = None
        self.runtime: ContainerRuntime | None = None
        self.renderer = TemplateRenderer()
        self.save_session: SaveSession = netconf.save_config
        self._state = NodeState.UNCONFIGURED

    @property
    def descriptor(self) -> NodeKindDescriptor:
        return self.kind_descriptor

    @property
    def state(self) -> NodeState:
        return self._state

    def config(self) -> NodeConfig:
        """Return the bound node config."""
        if self.cfg is None:
            raise NodeStateError("node is not initialized")
        return self.cfg

    def _require_state(self, operation: str, *allowed: NodeState) -> None:
        if self._state not in allowed:
            name = self.cfg.short_name if self.cfg else None
            raise NodeStateError(
                f"cannot {operation} in state {self._state.value}", name
            )

    def init(self, cfg: NodeConfig, *opts: NodeOption) -> None:
        self._require_state("init", NodeState.UNCONFIGURED, NodeState.INITIALIZED)
        self.cfg = cfg
        for opt in opts:
            opt(self)
        self._state = NodeState.INITIALIZED

    async def pre_deploy(self) -> None:
        self._require_state("pre-deploy", NodeState.INITIALIZED, NodeState.PREDEPLOYED)
        self._state = NodeState.PREDEPLOYED

    async def post_deploy(self) -> None:
        self._require_state("post-deploy", NodeState.PREDEPLOYED)
        self._state = NodeState.RUNNING

    def template_params(self) -> dict[str, Any]:
        """Parameters available to config templates."""
        params = asdict(self.config())
        params["username"] = self.descriptor.default_username
        params["password"] = self.descriptor.default_password
        return params

    def generate_config(self, dst: str, template_text: str, *, verbatim: bool = False) -> bool:
        """Write the node's startup config to dst.

        An existing file is left alone unless the user supplied a startup
        config, so configs saved by the device survive a redeploy.

        Returns:
            True if the file was written
        """
        cfg = self.config()
        if Path(dst).exists() and not cfg.startup_config:
            logger.debug(
                f"Config file {dst} for node {cfg.short_name} already exists, not generating"
            )
            return False

        if verbatim:
            self.renderer.write(dst, template_text)
        else:
            self.renderer.render(dst, template_text, self.template_params())
        logger.debug(f"Generated config file {dst} for node {cfg.short_name}")
        return True
