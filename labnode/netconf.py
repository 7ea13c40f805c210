"""NETCONF management session used to persist node configurations."""

from __future__ import annotations

import asyncio
import logging

import asyncssh
from scrapli.exceptions import (
    ScrapliAuthenticationFailed,
    ScrapliException,
    ScrapliTimeout,
)
from scrapli_netconf.driver import AsyncNetconfDriver

from labnode.config import settings
from labnode.errors import ManagementSessionError

logger = logging.getLogger(__name__)

# platform -> (source datastore, target datastore) for saving the config
SAVE_DATASTORES: dict[str, tuple[str, str]] = {
    "cisco_iosxr": ("running", "startup"),
}


def _driver(address: str, username: str, password: str, port: int, timeout: float) -> AsyncNetconfDriver:
    return AsyncNetconfDriver(
        host=address,
        port=port,
        auth_username=username,
        auth_password=password,
        auth_strict_key=False,  # Lab nodes regenerate host keys on every deploy
        transport="asyncssh",
        timeout_socket=timeout,
        timeout_transport=timeout,
        timeout_ops=timeout,
    )


async def _copy_config(
    address: str,
    username: str,
    password: str,
    source: str,
    target: str,
    port: int,
    timeout: float,
) -> None:
    async with _driver(address, username, password, port, timeout) as conn:
        response = await conn.copy_config(source=source, target=target)

    if response.failed:
        raise ManagementSessionError(
            f"copy-config {source} -> {target} rejected: {response.result}", address
        )


async def save_config(
    address: str,
    username: str,
    password: str,
    platform: str,
    *,
    port: int | None = None,
    timeout: float | None = None,
) -> None:
    """Save the running configuration of a node to its startup configuration.

    Args:
        address: Management address or resolvable container name
        username: Login username
        password: Login password
        platform: Platform name selecting the datastores (e.g. "cisco_iosxr")
        port: NETCONF port (settings.netconf_port if not set)
        timeout: Overall timeout in seconds (settings.netconf_timeout if not set)

    Raises:
        ManagementSessionError: connect, authentication, timeout or RPC failure
    """
    if platform not in SAVE_DATASTORES:
        raise ManagementSessionError(f"unsupported management platform {platform!r}", address)
    source, target = SAVE_DATASTORES[platform]
    port = port or settings.netconf_port
    timeout = timeout or settings.netconf_timeout

    logger.debug(f"Opening NETCONF session to {address}:{port} ({platform})")
    try:
        await asyncio.wait_for(
            _copy_config(address, username, password, source, target, port, timeout),
            timeout=timeout,
        )
    except (ScrapliAuthenticationFailed, asyncssh.PermissionDenied) as e:
        raise ManagementSessionError(f"authentication failed for user {username}", address) from e
    except (ScrapliTimeout, asyncio.TimeoutError) as e:
        raise ManagementSessionError(f"NETCONF session timed out after {timeout}s", address) from e
    except (ScrapliException, asyncssh.Error) as e:
        raise ManagementSessionError(f"NETCONF session failed: {e}", address) from e
    except OSError as e:
        raise ManagementSessionError(f"cannot connect to port {port}: {e}", address) from e
