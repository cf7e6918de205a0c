"""Drive an image pull to completion."""

import logging
from contextlib import aclosing

from ..core.runtime_client import RuntimeClient
from ..exceptions import PullFailedError
from ..models import ImageReference
from .reference import parse_image_reference

logger = logging.getLogger(__name__)


async def pull_image(client: RuntimeClient, image: str) -> ImageReference:
    """Pull an image through the runtime and wait for the pull to finish.

    Every progress message is consumed until the stream ends. The first
    message carrying an error aborts the pull; the stream is closed without
    reading the rest.

    Args:
        client: Open runtime client
        image: Image string in ``name[:tag]`` form

    Returns:
        The parsed reference that was pulled

    Raises:
        InvalidReferenceError: If the image string is malformed
        PullFailedError: If the runtime reports an error or the stream breaks
    """
    reference = parse_image_reference(image)

    async with aclosing(client.pull_image(reference)) as messages:
        async for message in messages:
            if message.error is not None:
                raise PullFailedError(
                    f"Failed to pull image {reference}: {message.error}"
                )
            logger.debug(
                "pull %s: %s %s %s",
                reference,
                message.id,
                message.status,
                message.progress,
            )

    return reference
