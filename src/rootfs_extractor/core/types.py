"""Configuration types for talking to the container runtime."""

import os
from dataclasses import dataclass

DEFAULT_ENDPOINT = "unix:///var/run/docker.sock"
DEFAULT_API_VERSION = "v1.41"


@dataclass(frozen=True)
class RuntimeConfig:
    """Container runtime endpoint configuration.

    Attributes:
        endpoint: Runtime address, ``unix:///path/to.sock`` or ``tcp://host:port``
        api_version: Engine API version prefix (e.g. ``v1.41``)
        timeout: Total request timeout in seconds, ``None`` for no timeout
    """

    endpoint: str = DEFAULT_ENDPOINT
    api_version: str = DEFAULT_API_VERSION
    timeout: float | None = None

    @classmethod
    def from_env(cls, **overrides) -> "RuntimeConfig":
        """Build a config from ``DOCKER_HOST``, letting explicit values win."""
        values = {"endpoint": os.environ.get("DOCKER_HOST") or DEFAULT_ENDPOINT}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def is_unix_socket(self) -> bool:
        return self.endpoint.startswith("unix://")

    @property
    def socket_path(self) -> str:
        return self.endpoint[len("unix://") :]

    @property
    def base_url(self) -> str:
        """HTTP base URL including the API version prefix."""
        if self.is_unix_socket:
            # Host is ignored by the unix connector
            host = "http://localhost"
        elif self.endpoint.startswith("tcp://"):
            host = "http://" + self.endpoint[len("tcp://") :]
        else:
            host = self.endpoint
        version = self.api_version.strip("/")
        if version and not version.startswith("v"):
            version = f"v{version}"
        return f"{host.rstrip('/')}/{version}" if version else host.rstrip("/")
