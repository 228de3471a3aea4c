"""Integration tests for the typed command flow with JSON storage."""

import json
from pathlib import Path

import pytest

from pbl_assistant.app import AssistantApp
from pbl_assistant.config import AssistantConfig, StorageConfig, UserConfig, VoiceConfig
from pbl_assistant.sink import ListSink


@pytest.fixture
def config(tmp_path: Path) -> AssistantConfig:
    return AssistantConfig(
        storage=StorageConfig(data_dir=str(tmp_path / "data")),
        voice=VoiceConfig(player="none"),
        user=UserConfig(display_name="John Smith", department="CSE"),
    )


class TestReminderFlow:
    """Reminders set through the app survive a restart."""

    def test_reminder_persists_across_apps(self, config: AssistantConfig, tmp_path: Path) -> None:
        sink = ListSink()
        app = AssistantApp.from_config(config, sink=sink)

        app.handle_line("set reminder for 10am for study session")
        app.handle_line("remind me about assignment for math homework")
        app.close()

        assert "⏰ 10am" in sink.assistant_texts[0]
        assert sink.assistant_texts[1].startswith("I can help you set reminders!")

        with open(tmp_path / "data" / "reminders.json") as f:
            data = json.load(f)
        assert [(r["task"], r["time"]) for r in data["reminders"]] == [("study session", "10am")]

        second = AssistantApp.from_config(config, sink=ListSink())
        second.handle_line("schedule cse lab at 2pm for lab prep")
        with open(tmp_path / "data" / "reminders.json") as f:
            tasks = [r["task"] for r in json.load(f)["reminders"]]
        assert tasks == ["study session", "lab prep"]


class TestNoticeFlow:
    """Seeded notices are read back by the assistant."""

    def test_seeded_notices_for_department(self, config: AssistantConfig) -> None:
        sink = ListSink()
        app = AssistantApp.from_config(config, sink=sink)
        app.seed()

        app.handle_line("show latest notices from my department")

        reply = sink.assistant_texts[-1]
        assert reply.startswith("📢 Latest notices from CSE Department:")
        assert "CSE Department - Lab Schedule Update" in reply
        assert "🚨 Welcome to PBL Season 3" in reply
        assert "EEE Workshop" not in reply

    def test_named_department(self, config: AssistantConfig) -> None:
        sink = ListSink()
        app = AssistantApp.from_config(config, sink=sink)
        app.seed()

        app.handle_line("EEE notices")

        reply = sink.assistant_texts[-1]
        assert "Latest notices from EEE Department" in reply
        assert "EEE Workshop on Renewable Energy Systems" in reply
        assert "Lab Schedule" not in reply

    def test_corrupt_notice_file_reports_failure(
        self, config: AssistantConfig, tmp_path: Path
    ) -> None:
        """Test an unreadable store gives the generic failure reply."""
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "notices.json").write_text("{broken")
        sink = ListSink()
        app = AssistantApp.from_config(config, sink=sink)

        app.handle_line("show notices")

        assert sink.assistant_texts[-1].startswith("Sorry, something went wrong")
