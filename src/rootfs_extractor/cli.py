"""Command-line interface for the rootfs extractor."""

import argparse
import asyncio
import contextlib
import logging
import sys
from typing import Optional

from .core.runtime_client import RuntimeClient
from .core.types import DEFAULT_API_VERSION, RuntimeConfig
from .exceptions import ExtractionError
from .extract import extract_rootfs
from .utils.destination import DEFAULT_ROOTFS_DIR
from .utils.log import flush_log_handlers, setup_logging, start_periodic_flush

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="rootfs-extractor",
        description="Pull a container image and unpack its root filesystem to a directory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  rootfs-extractor --image busybox:latest --rootfs-dir /tmp/busybox
  DOCKER_HOST=tcp://127.0.0.1:2375 rootfs-extractor --image repo/app:1.2
        """,
    )

    parser.add_argument("--image", default="", help="Image to fetch, as name[:tag]")
    parser.add_argument(
        "--rootfs-dir",
        default=DEFAULT_ROOTFS_DIR,
        help=f"Path to store the rootfs (default: {DEFAULT_ROOTFS_DIR})",
    )
    parser.add_argument(
        "--docker-host",
        default=None,
        help="Runtime endpoint (default: $DOCKER_HOST or unix:///var/run/docker.sock)",
    )
    parser.add_argument(
        "--api-version",
        default=DEFAULT_API_VERSION,
        help=f"Engine API version (default: {DEFAULT_API_VERSION})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: none)",
    )
    parser.add_argument(
        "--no-path-guard",
        action="store_true",
        help="Allow archive entries to be written outside the rootfs directory",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    return parser


async def _run(args: argparse.Namespace) -> int:
    flush_task = start_periodic_flush()
    try:
        config = RuntimeConfig.from_env(
            endpoint=args.docker_host,
            api_version=args.api_version,
            timeout=args.timeout,
        )
        logger.info("Connecting to docker on %s", config.endpoint)
        async with RuntimeClient(config) as client:
            if not await client.ping():
                logger.error("Unable to connect to docker on %s", config.endpoint)
                return 1
            await extract_rootfs(
                args.image,
                args.rootfs_dir,
                client=client,
                guard_paths=not args.no_path_guard,
            )
        return 0

    except ExtractionError as e:
        logger.error("%s", e)
        return 1

    finally:
        flush_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await flush_task
        flush_log_handlers()


def run_cli(argv: Optional[list] = None) -> int:
    """
    Run the CLI application.

    Args:
        argv: Command-line arguments (for testing purposes)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    return asyncio.run(_run(args))


def main() -> None:
    """Console script entry point."""
    sys.exit(run_cli())
