"""Custom exceptions for the rootfs extractor."""


class RootfsExtractorError(Exception):
    """Base exception for all extractor errors."""

    pass


class RuntimeConnectionError(RootfsExtractorError):
    """Raised when the container runtime endpoint cannot be used."""

    pass


class InvalidReferenceError(RootfsExtractorError):
    """Raised when an image string is empty or malformed."""

    pass


class PullFailedError(RootfsExtractorError):
    """Raised when the runtime reports an error while pulling an image."""

    pass


class DestinationInvalidError(RootfsExtractorError):
    """Raised when the rootfs directory is not a directory or cannot be created."""

    pass


class ContainerCreateError(RootfsExtractorError):
    """Raised when the disposable container cannot be created."""

    def __init__(self, message: str, container_name: str) -> None:
        super().__init__(message)
        self.container_name = container_name


class ExportError(RootfsExtractorError):
    """Raised when exporting or unpacking a container filesystem fails."""

    def __init__(self, message: str, container_id: str) -> None:
        super().__init__(message)
        self.container_id = container_id


class UnpackError(RootfsExtractorError):
    """Raised when a tar stream is malformed or cannot be written to disk."""

    pass


class ContainerRemoveError(RootfsExtractorError):
    """Raised when the disposable container cannot be removed."""

    def __init__(self, message: str, container_id: str) -> None:
        super().__init__(message)
        self.container_id = container_id


class ExtractionError(RootfsExtractorError):
    """Raised by the orchestrator, naming the stage that failed."""

    def __init__(self, message: str, stage: str) -> None:
        super().__init__(message)
        self.stage = stage
