"""Node driver configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Driver settings loaded from environment variables."""

    # Container runtime
    docker_socket: str = "unix:///var/run/docker.sock"
    mgmt_network_name: str = "clab"  # Network carrying eth0 of every node

    # XRd interface table size, pre-allocated by the XR boot process
    xrd_max_interfaces: int = 90

    # Management session (SaveConfig)
    netconf_port: int = 830
    netconf_timeout: float = 30.0  # Connect and per-RPC timeout (seconds)

    # Logging configuration
    log_format: str = "json"  # "json" or "text"
    log_level: str = "INFO"

    class Config:
        env_prefix = "LABNODE_"


settings = Settings()
