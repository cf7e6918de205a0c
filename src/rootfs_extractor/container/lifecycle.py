"""Create and remove the disposable container used for exports."""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

from ..core.runtime_client import RuntimeClient
from ..exceptions import ContainerCreateError, ContainerRemoveError
from ..models import ContainerDescriptor

logger = logging.getLogger(__name__)

# The container is never started; the runtime only requires a command to exist.
INERT_ENTRYPOINT = ["ls"]


def generate_container_name() -> str:
    """Return a fresh name that will not collide with existing containers."""
    return str(uuid.uuid4())


async def create_container(
    client: RuntimeClient, name: str, image: str
) -> ContainerDescriptor:
    """Create a stopped container for ``image``.

    Args:
        client: Open runtime client
        name: Container name
        image: Source image string

    Returns:
        Descriptor holding the runtime-assigned id

    Raises:
        ContainerCreateError: If the runtime refuses to create the container
    """
    resp = await client.create_container(name, image, INERT_ENTRYPOINT)
    for warning in resp.get("Warnings") or []:
        logger.debug("create %s: %s", name, warning)
    container_id = resp.get("Id")
    if not container_id:
        raise ContainerCreateError(
            f"Failed to create container {name!r}: runtime returned no container id",
            container_name=name,
        )
    return ContainerDescriptor(id=container_id, name=name)


async def remove_container(client: RuntimeClient, container_id: str) -> None:
    """Force-delete a container.

    Raises:
        ContainerRemoveError: If the runtime fails to remove it
    """
    await client.remove_container(container_id, force=True)


@asynccontextmanager
async def ephemeral_container(
    client: RuntimeClient, image: str
) -> AsyncIterator[ContainerDescriptor]:
    """Create a disposable container and remove it when the block exits.

    Removal is attempted exactly once, whether the block succeeds or raises.
    A removal failure is logged and never replaces the block's own outcome.

    Args:
        client: Open runtime client
        image: Source image string

    Yields:
        Descriptor of the created container
    """
    container = await create_container(client, generate_container_name(), image)
    logger.info("Successfully created a temporary container %r", container.id)
    try:
        yield container
    finally:
        try:
            await remove_container(client, container.id)
        except ContainerRemoveError as e:
            logger.warning(
                "Unable to remove the temporary container %r: %s", container.id, e
            )
        else:
            logger.info("Successfully removed container %r", container.id)
