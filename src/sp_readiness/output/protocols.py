"""Export collaborator protocols.

The dashboard core shapes export payloads; saving bytes and rendering the
visual report are host capabilities injected through these interfaces.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ExportSink(Protocol):
    """Destination for exported bytes (download prompt, directory, HTTP response ...).

    Example implementation:
        class MemorySink:
            def save(self, filename: str, data: bytes, mime_type: str) -> str:
                self.files[filename] = data
                return filename
    """

    def save(self, filename: str, data: bytes, mime_type: str) -> str:
        """Store the bytes and return where they went."""
        ...


@runtime_checkable
class RenderService(Protocol):
    """Renders the current dashboard view to document bytes (e.g. a PDF)."""

    def render(self) -> bytes: ...


__all__ = ["ExportSink", "RenderService"]
