"""Domain exceptions for reader stages and CLI diagnostics."""

from __future__ import annotations


class ReaderStageError(RuntimeError):
    """Raised when a specific reader stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped reader error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class SourceFetchError(RuntimeError):
    """Raised when a remote catalog or text request fails."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        """Initialize fetch error metadata for log diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
