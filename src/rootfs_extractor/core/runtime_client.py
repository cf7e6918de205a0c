"""Docker Engine API async client for the operations the extractor needs."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import aiohttp

from ..exceptions import (
    ContainerCreateError,
    ContainerRemoveError,
    ExportError,
    PullFailedError,
    RuntimeConnectionError,
)
from ..models import ImageReference, PullProgressMessage
from .types import RuntimeConfig

logger = logging.getLogger(__name__)


async def _error_message(resp: aiohttp.ClientResponse) -> str:
    """Extract the runtime's error message from a failed response."""
    text = await resp.text()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return f"{resp.status}: {data['message']}"
    return f"{resp.status}: {text.strip() or resp.reason}"


class RuntimeClient:
    """Async client for a local container runtime speaking the Docker Engine API."""

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        connector: Optional[aiohttp.BaseConnector] = None,
    ) -> None:
        """Initialize the runtime client.

        Args:
            config: Endpoint configuration, defaults to the local docker socket
            connector: aiohttp connector, overrides the one derived from config
        """
        self.config = config or RuntimeConfig()
        self.base_url = self.config.base_url
        self.connector = connector
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "RuntimeClient":
        """Enter async context manager."""
        if not self.session:
            connector = self.connector
            if connector is None and self.config.is_unix_socket:
                connector = aiohttp.UnixConnector(path=self.config.socket_path)
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the client session."""
        if self.session and not self.session.closed:
            await self.session.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _require_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            raise RuntimeConnectionError(
                "Runtime client is not open; use it as an async context manager"
            )
        return self.session

    async def ping(self) -> bool:
        """Check that the runtime endpoint answers.

        Returns:
            True if the runtime responded to ``/_ping``
        """
        session = self._require_session()
        try:
            async with session.get(self._url("/_ping")) as resp:
                return resp.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError):
            return False

    async def pull_image(
        self, reference: ImageReference
    ) -> AsyncIterator[PullProgressMessage]:
        """Start pulling an image and yield progress messages as they arrive.

        The response body is a sequence of JSON documents, one per line. The
        generator holds the HTTP response open; closing it early releases the
        connection.

        Args:
            reference: Image to pull; an empty tag asks for ``latest``

        Yields:
            Decoded progress messages, in stream order

        Raises:
            PullFailedError: If the request fails, times out or a message
                cannot be decoded
        """
        session = self._require_session()
        params = {"fromImage": reference.name, "tag": reference.tag or "latest"}
        try:
            async with session.post(self._url("/images/create"), params=params) as resp:
                if resp.status >= 400:
                    raise PullFailedError(
                        f"Failed to pull image {reference}: {await _error_message(resp)}"
                    )
                async for line in resp.content:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError as e:
                        raise PullFailedError(
                            f"Malformed progress message while pulling {reference}: {e}"
                        ) from e
                    if not isinstance(data, dict):
                        raise PullFailedError(
                            f"Malformed progress message while pulling {reference}: "
                            f"expected an object, got {type(data).__name__}"
                        )
                    yield PullProgressMessage.from_dict(data)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise PullFailedError(f"Failed to pull image {reference}: {e}") from e

    async def create_container(
        self, name: str, image: str, entrypoint: List[str]
    ) -> Dict[str, Any]:
        """Create (but do not start) a container.

        Args:
            name: Container name
            image: Source image string
            entrypoint: Entrypoint command stored with the container

        Returns:
            Runtime response with ``Id`` and ``Warnings``

        Raises:
            ContainerCreateError: If creation fails
        """
        session = self._require_session()
        body = {
            "Image": image,
            "Entrypoint": entrypoint,
            "HostConfig": {},
            "NetworkingConfig": {},
        }
        try:
            async with session.post(
                self._url("/containers/create"), params={"name": name}, json=body
            ) as resp:
                if resp.status >= 400:
                    raise ContainerCreateError(
                        f"Failed to create container {name!r}: {await _error_message(resp)}",
                        container_name=name,
                    )
                return await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ContainerCreateError(
                f"Failed to create container {name!r}: {e}", container_name=name
            ) from e

    @asynccontextmanager
    async def export_container(
        self, container_id: str
    ) -> AsyncIterator[aiohttp.StreamReader]:
        """Open the tar export of a container's filesystem.

        Args:
            container_id: Container id

        Yields:
            The response body stream; the response is released on exit

        Raises:
            ExportError: If the export request fails
        """
        session = self._require_session()
        try:
            resp = await session.get(self._url(f"/containers/{container_id}/export"))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ExportError(
                f"Failed to export container {container_id!r}: {e}",
                container_id=container_id,
            ) from e
        try:
            if resp.status >= 400:
                raise ExportError(
                    f"Failed to export container {container_id!r}: "
                    f"{await _error_message(resp)}",
                    container_id=container_id,
                )
            yield resp.content
        finally:
            resp.release()

    async def remove_container(self, container_id: str, force: bool = True) -> None:
        """Delete a container.

        Args:
            container_id: Container id
            force: Kill and remove even if the container is running

        Raises:
            ContainerRemoveError: If removal fails
        """
        session = self._require_session()
        params = {"force": "true" if force else "false"}
        try:
            async with session.delete(
                self._url(f"/containers/{container_id}"), params=params
            ) as resp:
                if resp.status >= 400:
                    raise ContainerRemoveError(
                        f"Failed to remove container {container_id!r}: "
                        f"{await _error_message(resp)}",
                        container_id=container_id,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ContainerRemoveError(
                f"Failed to remove container {container_id!r}: {e}",
                container_id=container_id,
            ) from e
