"""Embedding bridge - typed message exchange with a host page."""

from sp_readiness.embed.channel import DEFAULT_HEIGHT, EmbedBridge, MessageChannel, RecordingChannel

__all__ = ["DEFAULT_HEIGHT", "EmbedBridge", "MessageChannel", "RecordingChannel"]
