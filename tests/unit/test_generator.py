"""Unit tests for response generation."""

import re
from datetime import UTC, datetime, timedelta

import pytest

from pbl_assistant.assistant.command import Command
from pbl_assistant.assistant.generator import (
    HELP_RESPONSE,
    REMINDER_USAGE,
    UNKNOWN_RESPONSE,
    ResponseGenerator,
    extract_reminder,
    format_clock_time,
    format_long_date,
)
from pbl_assistant.assistant.intent import IntentType
from pbl_assistant.notices import InMemoryNoticeStore, Notice, NoticePriority
from pbl_assistant.reminders import ReminderStore
from pbl_assistant.users import UserContext

NOW = datetime(2026, 10, 19, 15, 4, 5, tzinfo=UTC)


def make_notice(
    notice_id: int,
    department: str,
    title: str | None = None,
    priority: NoticePriority = NoticePriority.MEDIUM,
    age: timedelta = timedelta(hours=1),
) -> Notice:
    """Build a notice created ``age`` before NOW."""
    return Notice(
        id=notice_id,
        title=title or f"Notice {notice_id}",
        content="Body",
        department=department,
        priority=priority,
        created_at=NOW - age,
        author="Admin",
    )


@pytest.fixture
def notices() -> InMemoryNoticeStore:
    return InMemoryNoticeStore()


@pytest.fixture
def reminders() -> ReminderStore:
    return ReminderStore()


@pytest.fixture
def generator(notices: InMemoryNoticeStore, reminders: ReminderStore) -> ResponseGenerator:
    """Create a generator with a fixed clock."""
    return ResponseGenerator(notices, reminders, clock=lambda: NOW)


@pytest.fixture
def cse_user() -> UserContext:
    return UserContext(display_name="John Smith", department="CSE")


def reply(
    generator: ResponseGenerator,
    intent: IntentType,
    text: str,
    user: UserContext | None = None,
) -> str:
    return generator.generate(intent, Command(text=text, user=user), user)


class TestFormatting:
    """Tests for time and date formatting helpers."""

    def test_clock_time_afternoon(self) -> None:
        """Test 12-hour clock with seconds."""
        assert format_clock_time(NOW) == "3:04:05 PM"

    def test_clock_time_midnight(self) -> None:
        """Test midnight shows as 12 AM."""
        assert format_clock_time(datetime(2026, 1, 1, 0, 0, 9)) == "12:00:09 AM"

    def test_clock_time_noon(self) -> None:
        """Test noon shows as 12 PM."""
        assert format_clock_time(datetime(2026, 1, 1, 12, 30, 0)) == "12:30:00 PM"

    def test_long_date(self) -> None:
        """Test long weekday date."""
        assert format_long_date(NOW) == "Monday, October 19, 2026"


class TestExtractReminder:
    """Tests for reminder slot extraction."""

    def test_time_and_task(self) -> None:
        """Test the task is the text after the last 'for'."""
        assert extract_reminder("set reminder for 10am for study session") == (
            "study session",
            "10am",
        )

    def test_about(self) -> None:
        """Test 'about' also introduces the task."""
        assert extract_reminder("remind me at 3:30 pm about lab report") == (
            "lab report",
            "3:30 pm",
        )

    def test_no_time(self) -> None:
        """Test no time token means no reminder."""
        assert extract_reminder("remind me about assignment for math homework") is None

    def test_no_task(self) -> None:
        """Test no 'for'/'about' means no reminder."""
        assert extract_reminder("set reminder 10am") is None

    def test_time_not_validated(self) -> None:
        """Test impossible times are kept as typed."""
        assert extract_reminder("reminder for 99:99pm for nothing") == ("nothing", "99:99pm")


class TestGreeting:
    """Tests for greeting replies."""

    def test_greets_user_by_name(
        self, generator: ResponseGenerator, cse_user: UserContext
    ) -> None:
        """Test the display name is used."""
        assert reply(generator, IntentType.GREETING, "hi", cse_user).startswith(
            "Hello John Smith! I'm your academic assistant."
        )

    def test_greets_anonymous(self, generator: ResponseGenerator) -> None:
        """Test anonymous users are greeted as 'there'."""
        assert reply(generator, IntentType.GREETING, "hi").startswith("Hello there!")


class TestTimeAndDate:
    """Tests for time and date replies."""

    def test_time(self, generator: ResponseGenerator) -> None:
        """Test time reply contains clock time and date."""
        assert reply(generator, IntentType.TIME_QUERY, "time") == (
            "The current time is 3:04:05 PM. Today is Monday, October 19, 2026."
        )

    def test_date(self, generator: ResponseGenerator) -> None:
        """Test date reply."""
        assert reply(generator, IntentType.DATE_QUERY, "date") == (
            "Today's date is Monday, October 19, 2026."
        )


class TestReminder:
    """Tests for reminder replies."""

    def test_sets_reminder(self, generator: ResponseGenerator, reminders: ReminderStore) -> None:
        """Test a complete request appends exactly one reminder."""
        text = reply(generator, IntentType.REMINDER, "set reminder for 10am for study session")

        stored = reminders.list_all()
        assert len(stored) == 1
        assert stored[0].task == "study session"
        assert stored[0].time == "10am"
        assert stored[0].completed is False
        assert '"study session"' in text
        assert "⏰ 10am" in text

    def test_usage_when_time_missing(
        self, generator: ResponseGenerator, reminders: ReminderStore
    ) -> None:
        """Test a request with no time gets usage text and stores nothing."""
        text = reply(
            generator, IntentType.REMINDER, "remind me about assignment for math homework"
        )

        assert text == REMINDER_USAGE
        assert len(reminders) == 0


class TestNotices:
    """Tests for notice replies."""

    def test_limits_to_five(
        self,
        generator: ResponseGenerator,
        notices: InMemoryNoticeStore,
        cse_user: UserContext,
    ) -> None:
        """Test at most five notices are listed."""
        for i in range(7):
            notices.add(make_notice(i, "CSE" if i % 2 else "all"))

        text = reply(generator, IntentType.NOTICE, "show notices", cse_user)

        assert text.startswith("📢 Latest notices from CSE Department:")
        assert len(re.findall(r"^\d\. ", text, re.MULTILINE)) == 5
        assert "5. " in text
        assert "6. " not in text

    def test_department_in_text_wins(
        self,
        generator: ResponseGenerator,
        notices: InMemoryNoticeStore,
        cse_user: UserContext,
    ) -> None:
        """Test a department named in the command overrides the user's."""
        notices.add(make_notice(1, "CSE", title="CSE only"))
        notices.add(make_notice(2, "EEE", title="EEE only"))

        text = reply(generator, IntentType.NOTICE, "any updates from eee?", cse_user)

        assert "Latest notices from EEE Department" in text
        assert "EEE only" in text
        assert "CSE only" not in text

    def test_stored_order_and_icons(
        self,
        generator: ResponseGenerator,
        notices: InMemoryNoticeStore,
        cse_user: UserContext,
    ) -> None:
        """Test notices keep stored order and show a priority icon."""
        notices.add(make_notice(1, "all", title="Older", age=timedelta(days=2)))
        notices.add(make_notice(2, "CSE", title="Urgent", priority=NoticePriority.HIGH))

        text = reply(generator, IntentType.NOTICE, "show notices", cse_user)

        assert "1. 🚨 Urgent\n   📅 1h ago" in text
        assert "2. 📌 Older\n   📅 2d ago" in text
        assert text.endswith("Visit the Notices page for complete details and older announcements.")

    def test_no_notices(self, generator: ResponseGenerator, cse_user: UserContext) -> None:
        """Test the empty reply names the department."""
        text = reply(generator, IntentType.NOTICE, "show notices", cse_user)
        assert text.startswith("📭 No recent notices found for the CSE department.")

    def test_anonymous_sees_only_all(
        self, generator: ResponseGenerator, notices: InMemoryNoticeStore
    ) -> None:
        """Test users without a department only see notices for everyone."""
        notices.add(make_notice(1, "CSE", title="CSE only"))
        notices.add(make_notice(2, "all", title="Everyone"))

        text = reply(generator, IntentType.NOTICE, "show notices")

        assert "Latest notices from your Department" in text
        assert "Everyone" in text
        assert "CSE only" not in text


class TestOtherIntents:
    """Tests for the fixed-text intents."""

    def test_assignments(self, generator: ResponseGenerator) -> None:
        """Test assignment list."""
        text = reply(generator, IntentType.ASSIGNMENT, "assignment")
        assert text.startswith("📚 Your Upcoming Assignments:")
        assert "1. 🔴 Data Structures" in text
        assert "2. 🟡 Calculus" in text
        assert "⏳ Due in: 1 week" in text

    def test_own_department(self, generator: ResponseGenerator, cse_user: UserContext) -> None:
        """Test asking about 'department' describes the user's department."""
        text = reply(generator, IntentType.DEPARTMENT, "my department", cse_user)
        assert text.startswith("🎓 You are in the CSE Department.")
        assert "Computer Science" in text

    def test_department_listing(self, generator: ResponseGenerator) -> None:
        """Test naming a department without the word lists them all."""
        text = reply(generator, IntentType.DEPARTMENT, "cse")
        assert text.startswith("🏫 Department Information:")
        for code in ("CSE", "EEE", "Civil", "Mechanical", "English", "BBA"):
            assert f"{code}: " in text

    def test_help(self, generator: ResponseGenerator) -> None:
        assert reply(generator, IntentType.HELP, "help") == HELP_RESPONSE

    @pytest.mark.parametrize(
        "text,heading",
        [
            ("programming tutorial", "💻 Programming Resources:"),
            ("calculus book", "📐 Mathematics Resources:"),
            ("engineering material", "⚙️ Engineering Resources:"),
            ("study", "📖 Study Resources Available:"),
        ],
    )
    def test_study(self, generator: ResponseGenerator, text: str, heading: str) -> None:
        """Test study resources are chosen by subject."""
        assert reply(generator, IntentType.STUDY, text).startswith(heading)

    def test_unknown(self, generator: ResponseGenerator) -> None:
        assert reply(generator, IntentType.UNKNOWN, "xyzzy") == UNKNOWN_RESPONSE
