"""Integration tests against a real docker daemon."""

import os

import pytest

from rootfs_extractor import ExtractionError, RuntimeClient, RuntimeConfig, extract_rootfs

IMAGE = os.getenv("TEST_IMAGE", "busybox:latest")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_extract_busybox(tmp_path):
    """Test extracting a small image end to end."""
    config = RuntimeConfig.from_env()
    dest = tmp_path / "rootfs"

    result = await extract_rootfs(IMAGE, dest, config)

    assert result.entries > 0
    assert (dest / "bin").exists()
    assert (dest / "etc").is_dir()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_extract_missing_image_fails(tmp_path):
    """Test that pulling a missing image fails cleanly."""
    config = RuntimeConfig.from_env()

    async with RuntimeClient(config) as client:
        with pytest.raises(ExtractionError) as exc_info:
            await extract_rootfs(
                "rootfs-extractor/does-not-exist:never", tmp_path / "out", client=client
            )

    assert exc_info.value.stage == "pulling"
