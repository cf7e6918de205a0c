"""Tests for image reference parsing."""

import pytest

from rootfs_extractor.exceptions import InvalidReferenceError
from rootfs_extractor.image.reference import parse_image_reference
from rootfs_extractor.models import ImageReference


def test_parse_name_and_tag():
    """Test parsing name:tag strings."""
    assert parse_image_reference("repo/app:1.2") == ImageReference("repo/app", "1.2")
    assert parse_image_reference("nginx:alpine") == ImageReference("nginx", "alpine")


def test_parse_name_only():
    """Test that a missing tag leaves the tag empty."""
    ref = parse_image_reference("busybox")
    assert ref.name == "busybox"
    assert ref.tag == ""
    assert str(ref) == "busybox"


def test_parse_empty_tag():
    """Test that a trailing colon yields an empty tag."""
    assert parse_image_reference("app:") == ImageReference("app", "")


@pytest.mark.parametrize(
    "image", ["localhost:5000/app:1.0", "a:b:c", "::", "registry.io:443/user/app"]
)
def test_parse_rejects_multiple_colons(image):
    """Test that more than one colon is rejected."""
    with pytest.raises(InvalidReferenceError, match="expect <image:tag>"):
        parse_image_reference(image)


def test_parse_rejects_empty():
    """Test that an empty image string is rejected."""
    with pytest.raises(InvalidReferenceError, match="non-empty"):
        parse_image_reference("")


def test_reference_str_round_trip():
    """Test that rendering a parsed reference gives back the input."""
    for image in ["repo/app:1.2", "busybox", "nginx:latest"]:
        assert str(parse_image_reference(image)) == image
