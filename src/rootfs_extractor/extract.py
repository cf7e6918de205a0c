"""Materialize a container image's root filesystem on local disk."""

import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .container.exporter import export_container
from .container.lifecycle import ephemeral_container
from .core.runtime_client import RuntimeClient
from .core.types import RuntimeConfig
from .exceptions import ExtractionError, RootfsExtractorError
from .image.puller import pull_image
from .models import ContainerDescriptor, ImageReference
from .utils.destination import DEFAULT_ROOTFS_DIR, ensure_rootfs_dir

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Steps of an extraction run, in order."""

    IDLE = "idle"
    PULLING = "pulling"
    PULLED = "pulled"
    CONTAINER_CREATING = "container-creating"
    CONTAINER_CREATED = "container-created"
    EXPORTING = "exporting"
    DONE = "done"


@dataclass
class ExtractionResult:
    """Outcome of a successful extraction run."""

    reference: ImageReference
    container: ContainerDescriptor
    rootfs_dir: Path
    entries: int


def _transition(stage: Stage) -> Stage:
    logger.debug("Extraction stage: %s", stage.value)
    return stage


async def _run(
    client: RuntimeClient, image: str, rootfs_dir: str | Path, guard_paths: bool
) -> ExtractionResult:
    stage = _transition(Stage.PULLING)
    logger.info("Starting to pull image %r", image)
    try:
        reference = await pull_image(client, image)
    except RootfsExtractorError as e:
        raise ExtractionError(f"Failed to pull image {image!r}: {e}", stage) from e
    logger.info("Successfully pulled image %r", image)

    stage = _transition(Stage.PULLED)
    try:
        dest = ensure_rootfs_dir(rootfs_dir)
    except RootfsExtractorError as e:
        raise ExtractionError(
            f"Invalid rootfs directory {str(rootfs_dir)!r}: {e}", stage
        ) from e

    async with AsyncExitStack() as stack:
        stage = _transition(Stage.CONTAINER_CREATING)
        try:
            container = await stack.enter_async_context(
                ephemeral_container(client, image)
            )
        except RootfsExtractorError as e:
            raise ExtractionError(
                f"Unable to create a temporary container for image {image!r}: {e}",
                stage,
            ) from e

        # Removal is registered on the stack from here on
        _transition(Stage.CONTAINER_CREATED)

        stage = _transition(Stage.EXPORTING)
        try:
            entries = await export_container(
                client, container.id, dest, guard_paths=guard_paths
            )
        except RootfsExtractorError as e:
            raise ExtractionError(
                f"Unable to export the temporary container {container.id!r}: {e}",
                stage,
            ) from e
        logger.info("Successfully exported container to %r", str(dest))

    _transition(Stage.DONE)
    return ExtractionResult(
        reference=reference, container=container, rootfs_dir=dest, entries=entries
    )


async def extract_rootfs(
    image: str,
    rootfs_dir: str | Path = DEFAULT_ROOTFS_DIR,
    config: Optional[RuntimeConfig] = None,
    *,
    client: Optional[RuntimeClient] = None,
    guard_paths: bool = True,
) -> ExtractionResult:
    """컨테이너 이미지의 루트 파일시스템을 로컬 디렉토리에 풀어 놓습니다.

    이미지를 pull 하고, 일회용 컨테이너를 생성한 뒤 파일시스템을 export 하여
    rootfs_dir 에 압축 해제합니다. 컨테이너는 실패 시에도 항상 삭제되며,
    삭제 실패는 경고 로그로만 남습니다.

    Args:
        image: 이미지 문자열 (예: "repo/app:1.2", "busybox")
        rootfs_dir: 대상 디렉토리 (없으면 생성, 기본값: /tmp/rootfs)
        config: 런타임 엔드포인트 설정 (client 를 넘기면 무시됨)
        client: 이미 열려 있는 런타임 클라이언트
        guard_paths: 대상 디렉토리 밖으로 나가는 tar 항목 거부 여부

    Returns:
        ExtractionResult: 참조, 컨테이너, 대상 경로, 기록된 항목 수

    Raises:
        ExtractionError: 단계 실패 시 (stage 에 실패 단계, __cause__ 에 원인)

    Examples:
        # busybox 이미지의 rootfs 추출
        result = await extract_rootfs("busybox:latest", "/tmp/busybox-rootfs")
        print(f"{result.entries}개 항목 기록: {result.rootfs_dir}")
    """
    if client is not None:
        return await _run(client, image, rootfs_dir, guard_paths)

    async with RuntimeClient(config) as runtime:
        return await _run(runtime, image, rootfs_dir, guard_paths)
