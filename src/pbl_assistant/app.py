"""Application wiring for the campus assistant.

Builds stores, the dispatcher and the voice session from configuration,
and interprets console input lines.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .assistant import AssistantDispatcher, ResponseGenerator
from .assistant.departments import DepartmentDirectory
from .errors import PermissionDeniedError, UnsupportedCapabilityError
from .notices import (
    ALL_DEPARTMENTS,
    MY_DEPARTMENT,
    JSONNoticeStore,
    NoticePriority,
    WritableNoticeStore,
    seed_sample_notices,
)
from .notices.board import NoticeBoard, format_board
from .reminders import ReminderStore
from .sink import ConsoleSink, MessageSink, Role
from .users import SessionFileUserProvider, StaticUserProvider, UserContext, UserProvider
from .voice import (
    QUICK_COMMANDS,
    ConsoleRecognizer,
    SpeechPlayer,
    SpeechRecognizer,
    VoiceSession,
    create_player,
    create_recognizer,
)

if TYPE_CHECKING:
    from .config import AssistantConfig, StorageConfig, UserConfig
    from .reminders import ReminderSink
    from .storage import MongoStorageClient

logger = logging.getLogger(__name__)

UNKNOWN_SLASH_MESSAGE = (
    "Unknown command. Available: /voice, /quick NAME, /read-notices, "
    "/notices [my|CODE] [TEXT], /publish, /delete ID, /quit"
)
PUBLISH_USAGE = "Usage: /publish DEPT|all high|medium|low TITLE | CONTENT"
DELETE_USAGE = "Usage: /delete NOTICE_ID"


def create_stores(
    config: "StorageConfig",
) -> tuple[WritableNoticeStore, "ReminderSink", "MongoStorageClient | None"]:
    """Create the notice and reminder stores for the configured backend.

    Returns:
        Tuple of (notice store, reminder store, MongoDB client or None).

    Raises:
        ValueError: If the backend name is unknown.
        StoreError: If the backend cannot be opened.
    """
    if config.backend == "json":
        data_dir = Path(config.data_dir).expanduser()
        notices = JSONNoticeStore(data_dir / config.notices_file)
        reminders = ReminderStore(data_dir / config.reminders_file)
        logger.info(f"Storage: JSON files in {data_dir}")
        return notices, reminders, None

    if config.backend == "mongodb":
        from .storage import MongoStorageClient

        client = MongoStorageClient(
            uri=config.mongodb_uri,
            database_name=config.database,
            timeout_ms=config.timeout_ms,
        )
        client.connect()
        return client.notices, client.reminders, client

    raise ValueError(f"Unknown storage backend: {config.backend!r}")


def create_user_provider(
    config: "UserConfig",
    user: UserContext | None = None,
) -> UserProvider:
    """Create the user provider.

    An explicit user wins, then the session file, then the configured
    name and department.
    """
    if user is not None:
        return StaticUserProvider(user)
    if config.session_file:
        return SessionFileUserProvider(config.session_file)
    if config.display_name or config.department or config.email:
        return StaticUserProvider(
            UserContext(
                display_name=config.display_name,
                department=config.department,
                email=config.email,
                is_admin=config.is_admin,
            )
        )
    return StaticUserProvider()


class AssistantApp:
    """A wired-up assistant: stores, dispatcher and voice session."""

    def __init__(
        self,
        dispatcher: AssistantDispatcher,
        session: VoiceSession,
        notices: WritableNoticeStore,
        sink: MessageSink,
        recognizer: SpeechRecognizer | None = None,
        storage_client: "MongoStorageClient | None" = None,
        board: NoticeBoard | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._session = session
        self._notices = notices
        self._board = board or NoticeBoard(notices, dispatcher)
        self._directory = DepartmentDirectory()
        self._sink = sink
        self._recognizer = recognizer
        self._storage_client = storage_client

    @classmethod
    def from_config(
        cls,
        config: "AssistantConfig",
        sink: MessageSink | None = None,
        use_mocks: bool = False,
        user: UserContext | None = None,
    ) -> "AssistantApp":
        """Create the application from configuration.

        Args:
            config: Assistant configuration
            sink: Where messages go, defaults to stdout
            use_mocks: Use mock speech backends
            user: Acting user, overriding the configured one

        Returns:
            Configured AssistantApp instance
        """
        sink = sink or ConsoleSink()
        notices, reminders, client = create_stores(config.storage)
        provider = create_user_provider(config.user, user)

        try:
            recognizer = create_recognizer(config.voice, use_mock=use_mocks)
        except UnsupportedCapabilityError as e:
            logger.warning(f"Speech input unavailable: {e}")
            recognizer = None
        try:
            player: SpeechPlayer | None = create_player(config.voice, use_mock=use_mocks)
        except UnsupportedCapabilityError as e:
            logger.warning(f"Speech output unavailable: {e}")
            player = None

        dispatcher = AssistantDispatcher(
            ResponseGenerator(notices, reminders),
            user_provider=provider,
        )
        session = VoiceSession(dispatcher, sink, recognizer=recognizer, player=player)
        return cls(
            dispatcher=dispatcher,
            session=session,
            notices=notices,
            sink=sink,
            recognizer=recognizer,
            storage_client=client,
            board=NoticeBoard(notices, provider),
        )

    @property
    def dispatcher(self) -> AssistantDispatcher:
        return self._dispatcher

    @property
    def session(self) -> VoiceSession:
        return self._session

    @property
    def notices(self) -> WritableNoticeStore:
        return self._notices

    @property
    def board(self) -> NoticeBoard:
        return self._board

    def seed(self) -> int:
        """Write the sample notices into an empty notice store."""
        return seed_sample_notices(self._notices)

    def handle_line(self, line: str) -> bool:
        """Interpret one console line.

        While the session is listening, the line is the spoken transcript.
        Otherwise it is a slash command or a typed assistant command.

        Returns:
            False when the user asked to quit, True otherwise.
        """
        text = line.strip()

        if text == "/quit":
            return False

        if text == "/voice":
            self._session.start()
            return True

        if self._session.is_listening and isinstance(self._recognizer, ConsoleRecognizer):
            self._recognizer.submit(text)
            return True

        if not text:
            return True

        command, _, rest = text.partition(" ")
        rest = rest.strip()

        if text == "/read-notices":
            self._session.read_notices_aloud()
        elif command == "/notices":
            self._show_notices(rest)
        elif command == "/publish":
            self._publish(rest)
        elif command == "/delete":
            self._delete(rest)
        elif text.startswith("/quick"):
            name = text[len("/quick") :].strip()
            if self._session.quick_command(name) is None:
                available = ", ".join(QUICK_COMMANDS)
                self._reply(f"Unknown quick command. Available: {available}")
        elif text.startswith("/"):
            self._reply(UNKNOWN_SLASH_MESSAGE)
        else:
            self._session.send_text(text)
        return True

    def _reply(self, text: str) -> None:
        self._sink.emit(text, Role.ASSISTANT)

    def _show_notices(self, args: str) -> None:
        """Handle ``/notices [all|my|CODE] [search text]``."""
        first, _, remainder = args.partition(" ")
        if first.lower() in (ALL_DEPARTMENTS, MY_DEPARTMENT):
            department_filter, search = first.lower(), remainder.strip()
        elif first and self._directory.canonical(first):
            department_filter, search = first, remainder.strip()
        else:
            department_filter, search = ALL_DEPARTMENTS, args

        if self._board.current_user() is None:
            self._reply("Sign in to browse the notice board.")
            return
        self._reply(format_board(self._board.browse(department_filter, search)))

    def _publish(self, args: str) -> None:
        """Handle ``/publish DEPT PRIORITY TITLE | CONTENT``."""
        parts = args.split(maxsplit=2)
        if len(parts) < 3 or "|" not in parts[2]:
            self._reply(PUBLISH_USAGE)
            return

        department, priority_name, body = parts
        title, _, content = body.partition("|")
        try:
            priority = NoticePriority(priority_name.lower())
        except ValueError:
            self._reply(PUBLISH_USAGE)
            return

        try:
            notice = self._board.publish(title, content, department, priority)
        except PermissionDeniedError as e:
            self._reply(f"⛔ {e}")
            return
        except ValueError as e:
            self._reply(f"{e}\n{PUBLISH_USAGE}")
            return
        self._reply(f"✅ Published notice #{notice.id} for {notice.department}: {notice.title}")

    def _delete(self, args: str) -> None:
        """Handle ``/delete ID``."""
        try:
            notice_id = int(args)
        except ValueError:
            self._reply(DELETE_USAGE)
            return

        try:
            removed = self._board.delete(notice_id)
        except PermissionDeniedError as e:
            self._reply(f"⛔ {e}")
            return
        self._reply(f"Deleted notice #{notice_id}" if removed else f"No notice #{notice_id}")

    def close(self) -> None:
        """Stop speech and release the storage connection."""
        self._session.close()
        if self._storage_client is not None:
            self._storage_client.disconnect()


__all__ = ["AssistantApp", "create_stores", "create_user_provider"]
