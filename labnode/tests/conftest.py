"""Shared pytest fixtures for node driver tests."""
from __future__ import annotations

import pytest

from labnode.kinds import NodeConfig, NodeRegistry, register_builtin_kinds
from labnode.runtime import MgmtNetwork, StaticRuntime


@pytest.fixture
def registry():
    """Fresh registry with the built-in kinds."""
    return register_builtin_kinds(NodeRegistry())


@pytest.fixture
def lab_dir(tmp_path):
    return tmp_path / "lab1"


@pytest.fixture
def node_config(lab_dir):
    return NodeConfig(
        kind="xrd",
        short_name="xr1",
        long_name="clab-lab1-xr1",
        lab_dir=str(lab_dir),
    )


@pytest.fixture
def runtime():
    return StaticRuntime(
        MgmtNetwork(network="clab", ipv4_gateway="192.0.2.1", ipv6_gateway="2001:db8::1")
    )
