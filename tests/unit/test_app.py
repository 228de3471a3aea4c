"""Unit tests for application wiring and console line handling."""

from pathlib import Path

import pytest

from pbl_assistant.app import (
    DELETE_USAGE,
    PUBLISH_USAGE,
    UNKNOWN_SLASH_MESSAGE,
    AssistantApp,
    create_stores,
    create_user_provider,
)
from pbl_assistant.config import AssistantConfig, StorageConfig, UserConfig, VoiceConfig
from pbl_assistant.notices import JSONNoticeStore
from pbl_assistant.notices.board import NO_NOTICES_FOUND
from pbl_assistant.reminders import ReminderStore
from pbl_assistant.sink import ListSink
from pbl_assistant.users import SessionFileUserProvider, UserContext
from pbl_assistant.voice import VoiceState
from pbl_assistant.voice.session import LISTENING_MESSAGE, RECOGNITION_FAILED_MESSAGE


def make_config(tmp_path: Path, **user: str) -> AssistantConfig:
    return AssistantConfig(
        storage=StorageConfig(data_dir=str(tmp_path)),
        voice=VoiceConfig(player="none"),
        user=UserConfig(**user),
    )


class TestCreateStores:
    """Tests for create_stores."""

    def test_json_backend(self, tmp_path: Path) -> None:
        notices, reminders, client = create_stores(StorageConfig(data_dir=str(tmp_path)))

        assert isinstance(notices, JSONNoticeStore)
        assert notices.path == tmp_path / "notices.json"
        assert isinstance(reminders, ReminderStore)
        assert client is None

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError):
            create_stores(StorageConfig(backend="sqlite"))


class TestCreateUserProvider:
    """Tests for create_user_provider."""

    def test_explicit_user_wins(self) -> None:
        user = UserContext(display_name="Ravi")
        provider = create_user_provider(UserConfig(display_name="John"), user)
        assert provider.current_user() == user

    def test_session_file(self, tmp_path: Path) -> None:
        provider = create_user_provider(UserConfig(session_file=str(tmp_path / "s.json")))
        assert isinstance(provider, SessionFileUserProvider)

    def test_configured_name(self) -> None:
        provider = create_user_provider(UserConfig(display_name="John", department="CSE"))
        assert provider.current_user() == UserContext(display_name="John", department="CSE")

    def test_nobody(self) -> None:
        assert create_user_provider(UserConfig()).current_user() is None


class TestHandleLine:
    """Tests for AssistantApp.handle_line."""

    @pytest.fixture
    def sink(self) -> ListSink:
        return ListSink()

    @pytest.fixture
    def app(self, tmp_path: Path, sink: ListSink) -> AssistantApp:
        config = make_config(tmp_path, display_name="John Smith", department="CSE")
        return AssistantApp.from_config(config, sink=sink)

    def test_quit(self, app: AssistantApp) -> None:
        assert app.handle_line("/quit") is False

    def test_typed_command(self, app: AssistantApp, sink: ListSink) -> None:
        assert app.handle_line("hello")
        assert sink.assistant_texts[-1].startswith("Hello John Smith!")

    def test_blank_line(self, app: AssistantApp, sink: ListSink) -> None:
        assert app.handle_line("   ")
        assert sink.messages == []

    def test_voice_then_transcript(self, app: AssistantApp, sink: ListSink) -> None:
        """Test the line after /voice is treated as speech."""
        app.handle_line("/voice")
        assert app.session.state == VoiceState.LISTENING
        assert sink.assistant_texts == [LISTENING_MESSAGE]

        app.handle_line("what is the time")

        assert app.session.state == VoiceState.IDLE
        assert sink.assistant_texts[-1].startswith("The current time is")

    def test_voice_toggle(self, app: AssistantApp) -> None:
        app.handle_line("/voice")
        app.handle_line("/voice")
        assert app.session.state == VoiceState.IDLE

    def test_voice_blank_transcript(self, app: AssistantApp, sink: ListSink) -> None:
        app.handle_line("/voice")
        app.handle_line("")
        assert sink.assistant_texts[-1] == RECOGNITION_FAILED_MESSAGE
        assert app.session.state == VoiceState.IDLE

    def test_quick(self, app: AssistantApp, sink: ListSink) -> None:
        app.handle_line("/quick help")
        assert sink.assistant_texts[-1].startswith("🤖 PBL Season 3 AI Assistant")

    def test_unknown_quick(self, app: AssistantApp, sink: ListSink) -> None:
        app.handle_line("/quick dance")
        assert sink.assistant_texts[-1].startswith("Unknown quick command.")

    def test_read_notices(self, app: AssistantApp, sink: ListSink) -> None:
        app.handle_line("/read-notices")
        assert sink.assistant_texts[-1].startswith("Reading latest notices from CSE department.")

    def test_unknown_slash(self, app: AssistantApp, sink: ListSink) -> None:
        app.handle_line("/dance")
        assert sink.assistant_texts[-1] == UNKNOWN_SLASH_MESSAGE

    def test_uses_console_recognizer(self, app: AssistantApp) -> None:
        assert app.session.supports_recognition
        assert not app.session.supports_speech

    def test_seed(self, app: AssistantApp) -> None:
        assert app.seed() == 3
        assert app.seed() == 0



class TestNoticeBoardCommands:
    """Tests for /notices, /publish and /delete."""

    @pytest.fixture
    def sink(self) -> ListSink:
        return ListSink()

    def make_app(self, tmp_path: Path, sink: ListSink, admin: bool) -> AssistantApp:
        config = AssistantConfig(
            storage=StorageConfig(data_dir=str(tmp_path)),
            voice=VoiceConfig(player="none"),
            user=UserConfig(display_name="Dr. Rao", department="EEE", is_admin=admin),
        )
        app = AssistantApp.from_config(config, sink=sink)
        app.seed()
        return app

    def test_browse_my_department(self, tmp_path: Path, sink: ListSink) -> None:
        app = self.make_app(tmp_path, sink, admin=False)
        app.handle_line("/notices my")

        reply = sink.assistant_texts[-1]
        assert reply.startswith("📢 Notice board (2):")
        assert "EEE Workshop" in reply
        assert "Lab Schedule" not in reply

    def test_browse_with_search(self, tmp_path: Path, sink: ListSink) -> None:
        app = self.make_app(tmp_path, sink, admin=False)
        app.handle_line("/notices workshop")
        assert sink.assistant_texts[-1].startswith("📢 Notice board (1):")

    def test_browse_code_and_search(self, tmp_path: Path, sink: ListSink) -> None:
        app = self.make_app(tmp_path, sink, admin=False)
        app.handle_line("/notices cse nothing-matches")
        assert sink.assistant_texts[-1] == NO_NOTICES_FOUND

    def test_student_cannot_publish(self, tmp_path: Path, sink: ListSink) -> None:
        app = self.make_app(tmp_path, sink, admin=False)
        app.handle_line("/publish EEE high Exam | Moved to Monday")

        assert sink.assistant_texts[-1] == "⛔ Only admin users can create notices"
        assert len(app.notices.list_notices()) == 3

    def test_student_cannot_delete(self, tmp_path: Path, sink: ListSink) -> None:
        app = self.make_app(tmp_path, sink, admin=False)
        app.handle_line("/delete 1")

        assert sink.assistant_texts[-1] == "⛔ Only admin users can delete notices"
        assert len(app.notices.list_notices()) == 3

    def test_admin_publishes_and_deletes(self, tmp_path: Path, sink: ListSink) -> None:
        app = self.make_app(tmp_path, sink, admin=True)

        app.handle_line("/publish eee high Exam | Moved to Monday")
        published = app.notices.list_notices()[0]
        assert published.title == "Exam"
        assert published.content == "Moved to Monday"
        assert published.department == "EEE"
        assert sink.assistant_texts[-1].startswith(f"✅ Published notice #{published.id}")

        app.handle_line(f"/delete {published.id}")
        assert sink.assistant_texts[-1] == f"Deleted notice #{published.id}"
        assert len(app.notices.list_notices()) == 3

        app.handle_line(f"/delete {published.id}")
        assert sink.assistant_texts[-1] == f"No notice #{published.id}"

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("/publish EEE high", PUBLISH_USAGE),
            ("/publish EEE urgent Exam | Monday", PUBLISH_USAGE),
            ("/delete", DELETE_USAGE),
            ("/delete first", DELETE_USAGE),
        ],
    )
    def test_usage(self, tmp_path: Path, sink: ListSink, line: str, expected: str) -> None:
        app = self.make_app(tmp_path, sink, admin=True)
        app.handle_line(line)
        assert sink.assistant_texts[-1] == expected

    def test_unknown_department(self, tmp_path: Path, sink: ListSink) -> None:
        app = self.make_app(tmp_path, sink, admin=True)
        app.handle_line("/publish Physics low Talk | Friday")
        assert sink.assistant_texts[-1].startswith("Unknown department 'Physics'")
