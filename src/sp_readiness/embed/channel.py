"""
Host page bridge for an embedded dashboard.

The dashboard talks to its host (an iframe parent such as a SharePoint page)
with small typed messages. The transport is injected as a MessageChannel so
the bridge can run against a browser bridge, a websocket or a test recorder.

Inbound:  LOAD_CSV_DATA {csvText}, RESIZE {height}
Outbound: AI_READINESS_LOADED, AI_READINESS_READY {source},
          AI_READINESS_DATA_CHANGE {payload: {rowCount, headers}},
          AI_READINESS_EXPORT {format}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from sp_readiness.analysis.pipeline import DashboardPipeline
from sp_readiness.core.constants import (
    MESSAGE_SOURCE,
    MSG_DATA_CHANGE,
    MSG_EXPORT,
    MSG_LOAD_CSV_DATA,
    MSG_LOADED,
    MSG_READY,
    MSG_RESIZE,
)
from sp_readiness.core.exceptions import IngestionError

logger = logging.getLogger(__name__)

DEFAULT_HEIGHT = "100vh"


@runtime_checkable
class MessageChannel(Protocol):
    """Outbound message transport to the host page."""

    def post(self, message: dict[str, Any]) -> None: ...


class RecordingChannel:
    """In-memory MessageChannel that keeps every posted message."""

    def __init__(self):
        self.messages: list[dict[str, Any]] = []

    def post(self, message: dict[str, Any]) -> None:
        self.messages.append(dict(message))

    def types(self) -> list[str]:
        return [m.get("type") for m in self.messages]

    def clear(self) -> None:
        self.messages.clear()


class EmbedBridge:
    """
    Connects a DashboardPipeline to its host page.

    Outbound messages are only posted when running embedded; inbound messages
    are always handled.
    """

    def __init__(self, pipeline: DashboardPipeline, channel: MessageChannel, embedded: bool = True):
        self.pipeline = pipeline
        self.channel = channel
        self.embedded = embedded
        self.requested_height: str | int | None = None
        pipeline.on_dataset_change(self._on_dataset_change)

    def _post(self, message: dict[str, Any]) -> None:
        if not self.embedded:
            return
        logger.debug(f"Posting {message['type']} to host")
        self.channel.post(message)

    def start(self) -> None:
        """Announce to the host that the dashboard is loaded and ready."""
        self._post({"type": MSG_LOADED})
        self._post({"type": MSG_READY, "source": MESSAGE_SOURCE})

    def _on_dataset_change(self, row_count: int, headers: list[str]) -> None:
        self._post({"type": MSG_DATA_CHANGE, "payload": {"rowCount": row_count, "headers": headers}})

    def notify_export(self, fmt: str) -> None:
        self._post({"type": MSG_EXPORT, "format": fmt})

    def handle_message(self, message: Mapping[str, Any] | None) -> None:
        """Dispatch one inbound host message; unknown or malformed messages are ignored."""
        if not message or not isinstance(message, Mapping) or not message.get("type"):
            return

        message_type = message["type"]
        if message_type == MSG_LOAD_CSV_DATA:
            self._load_csv(message.get("csvText"))
        elif message_type == MSG_RESIZE:
            self.requested_height = message.get("height") or DEFAULT_HEIGHT
            logger.debug(f"Host requested height {self.requested_height}")
        else:
            logger.debug(f"Ignoring host message type {message_type!r}")

    def _load_csv(self, csv_text: str | bytes | None) -> None:
        if not csv_text:
            logger.debug("LOAD_CSV_DATA without csvText ignored")
            return
        try:
            if isinstance(csv_text, bytes):
                self.pipeline.load_bytes(csv_text, source="host")
            else:
                self.pipeline.load_text(str(csv_text), source="host")
        except IngestionError as e:
            logger.error(f"CSV load from host failed: {e}")


__all__ = ["DEFAULT_HEIGHT", "EmbedBridge", "MessageChannel", "RecordingChannel"]
