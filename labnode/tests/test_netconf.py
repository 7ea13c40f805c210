"""Tests for the NETCONF save-config session."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from scrapli.exceptions import ScrapliAuthenticationFailed, ScrapliConnectionError

from labnode import netconf
from labnode.errors import ManagementSessionError


def _mock_driver(failed: bool = False, result: str = "<ok/>", open_error: Exception | None = None):
    """Patch the NETCONF driver with one whose copy-config returns a canned response."""
    response = MagicMock()
    response.failed = failed
    response.result = result

    conn = MagicMock()
    conn.copy_config = AsyncMock(return_value=response)

    driver = MagicMock()
    driver.__aenter__ = AsyncMock(return_value=conn, side_effect=open_error)
    driver.__aexit__ = AsyncMock(return_value=False)
    return patch("labnode.netconf.AsyncNetconfDriver", return_value=driver), conn


# --- save_config ---

@pytest.mark.asyncio
async def test_save_config_success():
    patcher, conn = _mock_driver()

    with patcher as driver_cls:
        await netconf.save_config("10.0.0.5", "clab", "clab@123", "cisco_iosxr", port=830)

    kwargs = driver_cls.call_args.kwargs
    assert kwargs["host"] == "10.0.0.5"
    assert kwargs["port"] == 830
    assert kwargs["auth_username"] == "clab"
    assert kwargs["auth_password"] == "clab@123"
    assert kwargs["auth_strict_key"] is False
    assert kwargs["transport"] == "asyncssh"
    conn.copy_config.assert_awaited_once_with(source="running", target="startup")


@pytest.mark.asyncio
async def test_save_config_uses_settings_defaults():
    patcher, _ = _mock_driver()

    with patcher as driver_cls:
        await netconf.save_config("10.0.0.5", "clab", "clab@123", "cisco_iosxr")

    kwargs = driver_cls.call_args.kwargs
    assert kwargs["port"] == 830
    assert kwargs["timeout_ops"] == 30.0


@pytest.mark.asyncio
async def test_save_config_rejected():
    patcher, _ = _mock_driver(failed=True, result="<rpc-error>startup not supported</rpc-error>")

    with patcher:
        with pytest.raises(ManagementSessionError, match="rejected"):
            await netconf.save_config("10.0.0.5", "clab", "clab@123", "cisco_iosxr")


@pytest.mark.asyncio
async def test_save_config_auth_failure():
    patcher, conn = _mock_driver(open_error=ScrapliAuthenticationFailed("denied"))

    with patcher:
        with pytest.raises(ManagementSessionError, match="authentication failed"):
            await netconf.save_config("10.0.0.5", "clab", "wrong", "cisco_iosxr")

    conn.copy_config.assert_not_awaited()


@pytest.mark.asyncio
async def test_save_config_connection_error():
    patcher, _ = _mock_driver(open_error=ScrapliConnectionError("refused"))

    with patcher:
        with pytest.raises(ManagementSessionError) as exc_info:
            await netconf.save_config("10.0.0.5", "clab", "clab@123", "cisco_iosxr")

    assert exc_info.value.address == "10.0.0.5"


@pytest.mark.asyncio
async def test_save_config_os_error():
    patcher, _ = _mock_driver(open_error=ConnectionRefusedError("refused"))

    with patcher:
        with pytest.raises(ManagementSessionError, match="cannot connect"):
            await netconf.save_config("10.0.0.5", "clab", "clab@123", "cisco_iosxr")


@pytest.mark.asyncio
async def test_save_config_unknown_platform():
    with pytest.raises(ManagementSessionError, match="unsupported"):
        await netconf.save_config("10.0.0.5", "u", "p", "juniper_junos")


@pytest.mark.asyncio
async def test_save_config_unreachable_address():
    """Test a real connection attempt to a closed port."""
    with pytest.raises(ManagementSessionError):
        await netconf.save_config("127.0.0.1", "clab", "clab@123", "cisco_iosxr", port=1, timeout=5)
