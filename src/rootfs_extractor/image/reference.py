"""Image reference parsing."""

from ..exceptions import InvalidReferenceError
from ..models import ImageReference


def parse_image_reference(image: str) -> ImageReference:
    """Parse an ``name[:tag]`` string into its name and tag.

    Only one ``:`` separator is accepted, so references that carry a
    registry port (``localhost:5000/app:1.0``) are rejected.

    Args:
        image: Image string
            - "nginx" -> ("nginx", "")
            - "repo/app:1.2" -> ("repo/app", "1.2")

    Returns:
        ImageReference; an empty tag means the registry default

    Raises:
        InvalidReferenceError: If the string is empty or has more than one ``:``

    Examples:
        ref = parse_image_reference("repo/app:1.2")
        # ref.name == "repo/app", ref.tag == "1.2"
    """
    if not image:
        raise InvalidReferenceError("image name must be non-empty")

    chunks = image.split(":")
    if len(chunks) == 1:
        return ImageReference(name=chunks[0])
    if len(chunks) == 2:
        return ImageReference(name=chunks[0], tag=chunks[1])

    raise InvalidReferenceError(f"invalid image name {image!r}; expect <image:tag>")
