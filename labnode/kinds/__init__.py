"""Node kind drivers."""

from labnode.kinds.base import (
    Credentials,
    DefaultNode,
    Node,
    NodeConfig,
    NodeKindDescriptor,
    NodeOption,
    NodeState,
    with_renderer,
    with_runtime,
    with_session,
)
from labnode.kinds.registry import NodeRegistry


def register_builtin_kinds(registry: NodeRegistry) -> NodeRegistry:
    """Register every node kind shipped with labnode."""
    from labnode.kinds import xrd

    xrd.register(registry)
    return registry


__all__ = [
    # Base classes and types
    "Node",
    "DefaultNode",
    "NodeConfig",
    "NodeKindDescriptor",
    "NodeOption",
    "NodeState",
    "Credentials",
    # Options
    "with_runtime",
    "with_renderer",
    "with_session",
    # Registry
    "NodeRegistry",
    "register_builtin_kinds",
]
