"""Image reference parsing and pulling."""

from .puller import pull_image
from .reference import parse_image_reference

__all__ = ["parse_image_reference", "pull_image"]
