"""Error types raised by node drivers.

Every error carries a category so the orchestrator can tell a failed
deployment (filesystem, render) from a failed management action
(session) without parsing messages.
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Categories of node driver errors."""
    # Registration
    REGISTRATION_CONFLICT = "registration_conflict"  # Alias already taken

    # Deployment
    FILESYSTEM = "filesystem"  # Directory creation or file read failed
    RENDER = "render"  # Template render or write failed
    RUNTIME_UNAVAILABLE = "runtime_unavailable"  # Management network unknown

    # Management
    MANAGEMENT_SESSION = "management_session"  # Connect, auth or RPC failed

    # Usage
    INVALID_STATE = "invalid_state"  # Lifecycle call out of order
    INVALID_INTERFACE = "invalid_interface"  # Bad link endpoint name


class NodeError(Exception):
    """Base class for node driver errors."""

    category: ErrorCategory = ErrorCategory.INVALID_STATE

    def __init__(self, message: str, node_name: str | None = None):
        self.message = message
        self.node_name = node_name
        super().__init__(message)

    def __str__(self) -> str:
        if self.node_name:
            return f"{self.node_name}: {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "category": self.category.value,
            "message": self.message,
            "node_name": self.node_name,
        }


class RegistrationConflict(NodeError):
    """Raised when a kind alias is already registered."""

    category = ErrorCategory.REGISTRATION_CONFLICT

    def __init__(self, alias: str, what: str = "kind"):
        self.alias = alias
        super().__init__(f"{what} {alias!r} is already registered")


class FilesystemError(NodeError):
    """Raised when lab directories or files cannot be created or read."""

    category = ErrorCategory.FILESYSTEM

    def __init__(self, message: str, path: str, node_name: str | None = None):
        self.path = path
        super().__init__(f"{message}: {path}", node_name)


class RenderError(NodeError):
    """Raised when a config template cannot be rendered or written."""

    category = ErrorCategory.RENDER

    def __init__(self, message: str, path: str, node_name: str | None = None):
        self.path = path
        super().__init__(f"{message}: {path}", node_name)


class RuntimeUnavailableError(NodeError):
    """Raised when the container runtime cannot describe the management network."""

    category = ErrorCategory.RUNTIME_UNAVAILABLE


class ManagementSessionError(NodeError):
    """Raised when a management session cannot save the configuration."""

    category = ErrorCategory.MANAGEMENT_SESSION

    def __init__(self, message: str, address: str, node_name: str | None = None):
        self.address = address
        super().__init__(f"{message} ({address})", node_name)


class NodeStateError(NodeError):
    """Raised when a lifecycle operation is called in the wrong state."""

    category = ErrorCategory.INVALID_STATE


class InterfaceNameError(NodeError):
    """Raised when an interface name is not valid for a node kind."""

    category = ErrorCategory.INVALID_INTERFACE
