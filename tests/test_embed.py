"""
Tests for the host page bridge.
"""

import logging

import pytest

from sp_readiness.analysis.pipeline import DashboardPipeline
from sp_readiness.embed import EmbedBridge, MessageChannel, RecordingChannel


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def bridge(channel):
    return EmbedBridge(DashboardPipeline(), channel, embedded=True)


class TestRecordingChannel:
    """Tests for RecordingChannel class."""

    def test_is_a_message_channel(self):
        assert isinstance(RecordingChannel(), MessageChannel)

    def test_records_copies(self, channel):
        message = {"type": "X"}
        channel.post(message)
        message["type"] = "Y"
        assert channel.types() == ["X"]
        channel.clear()
        assert channel.messages == []


class TestEmbedBridge:
    """Tests for EmbedBridge class."""

    def test_start_announces_loaded_then_ready(self, bridge, channel):
        bridge.start()
        assert channel.messages == [
            {"type": "AI_READINESS_LOADED"},
            {"type": "AI_READINESS_READY", "source": "ai-readiness-dashboard"},
        ]

    def test_load_csv_data_posts_data_change(self, bridge, channel, sample_csv_text):
        bridge.handle_message({"type": "LOAD_CSV_DATA", "csvText": sample_csv_text})
        assert channel.messages == [
            {
                "type": "AI_READINESS_DATA_CHANGE",
                "payload": {
                    "rowCount": 5,
                    "headers": ["SiteName", "FileName", "FileSize", "LastModified", "Permissions"],
                },
            }
        ]
        assert len(bridge.pipeline.sites) == 3

    def test_load_csv_bytes(self, bridge, channel):
        bridge.handle_message({"type": "LOAD_CSV_DATA", "csvText": b"Site\nA\nB"})
        assert channel.messages[-1]["payload"]["rowCount"] == 2

    @pytest.mark.parametrize("message", [None, {}, {"type": None}, {"csvText": "Site\nA"}, "LOAD_CSV_DATA"])
    def test_malformed_messages_ignored(self, bridge, channel, message):
        bridge.handle_message(message)
        assert channel.messages == []
        assert bridge.pipeline.dataset.is_empty

    def test_load_without_text_ignored(self, bridge, channel):
        bridge.handle_message({"type": "LOAD_CSV_DATA", "csvText": ""})
        assert channel.messages == []

    def test_unknown_type_ignored(self, bridge, channel):
        bridge.handle_message({"type": "SOMETHING_ELSE"})
        assert channel.messages == []

    def test_undecodable_bytes_keep_dataset(self, bridge, channel, sample_csv_text, caplog):
        bridge.handle_message({"type": "LOAD_CSV_DATA", "csvText": sample_csv_text})
        channel.clear()
        with caplog.at_level(logging.ERROR, logger="sp_readiness.embed.channel"):
            bridge.handle_message({"type": "LOAD_CSV_DATA", "csvText": b"\x00\x01"})
        assert channel.messages == []
        assert bridge.pipeline.dataset.row_count == 5
        assert "CSV load from host failed" in caplog.text

    def test_resize(self, bridge):
        bridge.handle_message({"type": "RESIZE", "height": "800px"})
        assert bridge.requested_height == "800px"

    def test_resize_without_height_uses_full_viewport(self, bridge):
        bridge.handle_message({"type": "RESIZE"})
        assert bridge.requested_height == "100vh"

    def test_notify_export(self, bridge, channel):
        bridge.notify_export("csv")
        assert channel.messages == [{"type": "AI_READINESS_EXPORT", "format": "csv"}]

    def test_not_embedded_posts_nothing(self, channel, sample_csv_text):
        bridge = EmbedBridge(DashboardPipeline(), channel, embedded=False)
        bridge.start()
        bridge.handle_message({"type": "LOAD_CSV_DATA", "csvText": sample_csv_text})
        bridge.notify_export("pdf")
        assert channel.messages == []
        assert bridge.pipeline.dataset.row_count == 5

    def test_direct_pipeline_loads_are_reported(self, bridge, channel):
        bridge.pipeline.load_text("Site\nA")
        assert channel.types() == ["AI_READINESS_DATA_CHANGE"]
