"""Test configuration and fixtures."""

import os

import pytest

from tests.helpers import FakeRuntimeClient, build_tar


@pytest.fixture(autouse=True)
def fixed_umask():
    """Pin the umask so created modes match archive modes."""
    old = os.umask(0o022)
    yield
    os.umask(old)


@pytest.fixture
def rootfs_tar():
    """Small rootfs archive with a directory, a file and a nested file."""
    return build_tar(
        [
            ("etc", "dir", 0o755, None),
            ("etc/passwd", "file", 0o644, b"root:x:0:0:root:/root:/bin/sh\n"),
            ("var", "dir", 0o755, None),
            ("bin", "dir", 0o755, None),
            ("bin/busybox", "file", 0o755, b"\x7fELF" + b"\x00" * 2048),
        ]
    )


@pytest.fixture
def fake_client(rootfs_tar):
    """Runtime client that succeeds at every step."""
    return FakeRuntimeClient(tar_bytes=rootfs_tar)


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring docker"
    )
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless a docker daemon is declared available."""
    skip_integration = pytest.mark.skip(reason="Docker not available")

    for item in items:
        if (
            "integration" in item.keywords
            and os.getenv("DOCKER_AVAILABLE", "false").lower() != "true"
        ):
            item.add_marker(skip_integration)
