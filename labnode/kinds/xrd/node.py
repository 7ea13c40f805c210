"""Cisco XRd control-plane node kind."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from labnode.errors import FilesystemError, RegistrationConflict
from labnode.kinds.base import (
    DefaultNode,
    NodeConfig,
    NodeKindDescriptor,
    NodeOption,
    NodeState,
)
from labnode.kinds.registry import NodeRegistry
from labnode.kinds.xrd.interfaces import interfaces_env
from labnode.templates import load_default_template

logger = logging.getLogger(__name__)

KIND_NAMES = ("xrd", "cisco_xrd")

DEFAULT_USER = "clab"
DEFAULT_PASSWORD = "clab@123"
MANAGEMENT_PROTOCOL = "cisco_iosxr"

FIRST_BOOT_CONFIG = "first-boot.cfg"
STORAGE_DIR = "xr-storage"

# Paths inside the container
CONTAINER_FIRST_BOOT_CONFIG = "/etc/xrd/first-boot.cfg"
CONTAINER_STORAGE_DIR = "/xr-storage"

XRD_ENV = {
    "XR_FIRST_BOOT_CONFIG": CONTAINER_FIRST_BOOT_CONFIG,
    "XR_MGMT_INTERFACES": "linux:eth0,xr_name=Mg0/RP0/CPU0/0,chksum,snoop_v4,snoop_v6",
}

DEFAULT_TEMPLATE = "xrd.cfg.j2"

XRD_DESCRIPTOR = NodeKindDescriptor(
    aliases=frozenset(KIND_NAMES),
    default_username=DEFAULT_USER,
    default_password=DEFAULT_PASSWORD,
    management_protocol=MANAGEMENT_PROTOCOL,
)


def register(registry: NodeRegistry) -> None:
    """Register the XRd kind and its default credentials.

    Failing to register credentials only costs the save-config default
    login, so it is logged and registration carries on.
    """
    registry.register(KIND_NAMES, XRDNode)
    try:
        registry.set_default_credentials(KIND_NAMES, DEFAULT_USER, DEFAULT_PASSWORD)
    except RegistrationConflict as e:
        logger.error(
            f"Failed to set default credentials for XRd: {e}", extra={"error": e.to_dict()}
        )


class XRDNode(DefaultNode):
    """Driver for a single XRd node."""

    kind_descriptor = XRD_DESCRIPTOR

    def init(self, cfg: NodeConfig, *opts: NodeOption) -> None:
        super().init(cfg, *opts)

        # Precedence: kind defaults < interface table < user env
        env = dict(XRD_ENV)
        env["XR_INTERFACES"] = interfaces_env()
        env.update(cfg.env)
        cfg.env = env

        for bind in self._binds():
            if bind not in cfg.binds:
                cfg.binds.append(bind)

    def _binds(self) -> list[str]:
        lab_dir = self.config().lab_dir
        return [
            # first-boot config read by XR at initial start-up
            f"{os.path.join(lab_dir, FIRST_BOOT_CONFIG)}:{CONTAINER_FIRST_BOOT_CONFIG}",
            # persistent XR state
            f"{os.path.join(lab_dir, STORAGE_DIR)}:{CONTAINER_STORAGE_DIR}",
        ]

    async def pre_deploy(self) -> None:
        self._require_state("pre-deploy", NodeState.INITIALIZED, NodeState.PREDEPLOYED)
        cfg = self.config()
        await asyncio.to_thread(self._make_dir, Path(cfg.lab_dir))
        await self._create_xrd_files()
        await super().pre_deploy()

    def _make_dir(self, path: Path) -> None:
        try:
            path.mkdir(mode=0o777, parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"failed to create directory ({e.strerror or e})", str(path), self.config().short_name
            ) from e

    async def _create_xrd_files(self) -> None:
        cfg = self.config()
        lab_dir = Path(cfg.lab_dir)

        await asyncio.to_thread(self._make_dir, lab_dir / STORAGE_DIR)

        cfg.res_startup_config = str(lab_dir / FIRST_BOOT_CONFIG)

        # The management network exists before any node is launched, so its
        # gateways can go into the first-boot config as the default route.
        if self.runtime is not None:
            mgmt = await asyncio.to_thread(self.runtime.mgmt)
            cfg.mgmt_ipv4_gateway = mgmt.ipv4_gateway
            cfg.mgmt_ipv6_gateway = mgmt.ipv6_gateway

        verbatim = bool(cfg.startup_config)
        if verbatim:
            template = await asyncio.to_thread(self._read_startup_config, cfg.startup_config)
        else:
            template = load_default_template("labnode.kinds.xrd.templates", DEFAULT_TEMPLATE)

        await asyncio.to_thread(
            self.generate_config, cfg.res_startup_config, template, verbatim=verbatim
        )

    def _read_startup_config(self, path: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise FilesystemError(
                f"failed to read startup config ({e.strerror or e})", path, self.config().short_name
            ) from e

    async def save_config(self) -> None:
        self._require_state(
            "save config",
            NodeState.INITIALIZED,
            NodeState.PREDEPLOYED,
            NodeState.RUNNING,
            NodeState.CONFIG_SAVED,
        )
        cfg = self.config()
        await self.save_session(
            cfg.mgmt_address,
            self.descriptor.default_username,
            self.descriptor.default_password,
            self.descriptor.management_protocol,
        )
        logger.info(f"saved {cfg.short_name} running configuration to startup configuration file")
        if self._state in (NodeState.RUNNING, NodeState.CONFIG_SAVED):
            self._state = NodeState.CONFIG_SAVED
