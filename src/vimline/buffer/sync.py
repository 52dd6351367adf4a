"""Adapter boundary types for syncing the line buffer with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: int
    mark: int
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """How adapters exchange data with the buffer layer."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest buffer snapshot that the host should render."""
        ...

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Submit an external edit (e.g. a paste from the terminal) to the buffer."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when a computed offset or range falls outside the buffer."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset
