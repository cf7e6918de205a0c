"""Example usage of the async rootfs extractor."""

import asyncio
import logging
import sys

from rootfs_extractor import (
    ExtractionError,
    RuntimeClient,
    RuntimeConfig,
    extract_rootfs,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main(image: str, rootfs_dir: str) -> int:
    """Extract one image, reusing a single runtime connection."""
    config = RuntimeConfig.from_env()

    async with RuntimeClient(config) as client:
        logger.info("Checking runtime connectivity...")
        if not await client.ping():
            logger.error(f"Runtime at {config.endpoint} is not reachable")
            return 1

        try:
            result = await extract_rootfs(image, rootfs_dir, client=client)
        except ExtractionError as e:
            logger.error(f"Extraction failed during {e.stage}: {e}")
            return 1

    logger.info(f"Wrote {result.entries} entries to {result.rootfs_dir}")
    return 0


if __name__ == "__main__":
    image = sys.argv[1] if len(sys.argv) > 1 else "busybox:latest"
    rootfs_dir = sys.argv[2] if len(sys.argv) > 2 else "/tmp/busybox-rootfs"
    sys.exit(asyncio.run(main(image, rootfs_dir)))
