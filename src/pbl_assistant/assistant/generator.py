"""Response generation for classified commands.

Turns an intent plus the command that produced it into reply text. Only
two intents touch the outside world: notices read the notice store and
reminders append to the reminder store.
"""

import logging
import re
from collections.abc import Callable
from datetime import datetime

from ..notices.models import Notice
from ..notices.query import NoticeQuery, format_relative_date
from ..notices.store import NoticeStore
from ..reminders.store import ReminderSink
from ..users import UserContext
from .command import Command
from .departments import DepartmentDirectory
from .intent import IntentType

logger = logging.getLogger(__name__)

# Reminder slots: the first time-looking token, and the text after the last
# "for"/"about". Neither is validated; "25:99" is kept as typed.
REMINDER_TIME_PATTERN = re.compile(r"(\d{1,2}(?::\d{2})?\s*(?:am|pm)?)", re.IGNORECASE)
REMINDER_TASK_PATTERN = re.compile(r".*\b(?:for|about)\s+(.+)", re.IGNORECASE | re.DOTALL)

NOTICE_DEPARTMENT_PATTERN = re.compile(r"(CSE|EEE|Civil|Mechanical|English|BBA)", re.IGNORECASE)

REMINDER_USAGE = (
    "I can help you set reminders! Try saying something like:\n\n"
    '• "Set reminder for tomorrow 10am study session"\n'
    '• "Remind me about assignment due Friday"\n'
    '• "Schedule meeting with group at 3pm"'
)

UNKNOWN_RESPONSE = (
    "I'm not sure I understand. I can help with:\n"
    "• Reminders and schedules\n"
    "• Department notices\n"
    "• Assignment tracking\n"
    "• Study resources\n"
    "• Time and date\n"
    "• General academic questions\n\n"
    "Try saying 'help' for more options!"
)

HELP_RESPONSE = """🤖 PBL Season 3 AI Assistant - Available Commands:

🎓 ACADEMIC HELP:
• "What assignments do I have?"
• "Show me study resources for [subject]"
• "What's my department information?"

📢 NOTICES & UPDATES:
• "Show latest notices"
• "Any updates from CSE department?"
• "What's new in my department?"

⏰ REMINDERS & SCHEDULING:
• "Set reminder for [time] [task]"
• "Remind me about [event]"
• "Schedule study session"

📅 GENERAL:
• "What time is it?"
• "What's today's date?"
• "Help" - Show this message

🎤 Voice commands also work! Click the microphone icon."""

DEPARTMENT_FALLBACK = "Connect with your department peers and share resources!"

# Placeholder list; assignments are not tracked anywhere yet
SAMPLE_ASSIGNMENTS: tuple[dict[str, str], ...] = (
    {
        "subject": "Data Structures",
        "task": "Binary Tree Implementation",
        "due": "2 days",
        "priority": "high",
    },
    {"subject": "Calculus", "task": "Chapter 5 Problems", "due": "5 days", "priority": "medium"},
    {
        "subject": "Database Systems",
        "task": "ER Diagram Project",
        "due": "1 week",
        "priority": "medium",
    },
)

# (trigger words, heading, resources, tip), checked in order
STUDY_BUCKETS: tuple[tuple[tuple[str, ...], str, tuple[str, ...], str], ...] = (
    (
        ("programming", "code"),
        "💻 Programming Resources:",
        ("FreeCodeCamp.org", "Codecademy", "LeetCode for practice", "GeeksforGeeks tutorials"),
        "💡 Practice daily and work on projects to improve!",
    ),
    (
        ("math", "calculus"),
        "📐 Mathematics Resources:",
        ("Khan Academy", "Paul's Online Math Notes", "Wolfram Alpha", "MIT OpenCourseWare"),
        "💡 Practice problems regularly and understand concepts deeply!",
    ),
    (
        ("engineering",),
        "⚙️ Engineering Resources:",
        (
            "Coursera engineering courses",
            "edX technical programs",
            "YouTube engineering channels",
            "University lecture archives",
        ),
        "💡 Focus on practical applications and real-world problems!",
    ),
)

GENERAL_STUDY = (
    "📖 Study Resources Available:",
    (
        "Coursera online courses",
        "edX university programs",
        "YouTube educational channels",
        "Academic journals and papers",
    ),
    "🔍 You can ask for specific subjects like programming, mathematics, or engineering!",
)


def format_clock_time(now: datetime) -> str:
    """Format a time as "3:04:05 PM" (US English, whatever the voice language)."""
    hour = now.hour % 12 or 12
    period = "AM" if now.hour < 12 else "PM"
    return f"{hour}:{now.minute:02d}:{now.second:02d} {period}"


def format_long_date(now: datetime) -> str:
    """Format a date as "Monday, October 19, 2026" (US English)."""
    return f"{now.strftime('%A')}, {now.strftime('%B')} {now.day}, {now.year}"


def extract_reminder(text: str) -> tuple[str, str] | None:
    """Pull the (task, time) pair out of a reminder command.

    Returns:
        The task and time text, or None if either is missing.
    """
    time_match = REMINDER_TIME_PATTERN.search(text)
    task_match = REMINDER_TASK_PATTERN.match(text)
    if not time_match or not task_match:
        return None

    time_text = time_match.group(1).strip()
    task_text = task_match.group(1).strip()
    if not time_text or not task_text:
        return None
    return task_text, time_text


class ResponseGenerator:
    """Produces reply text for each intent."""

    def __init__(
        self,
        notices: NoticeStore,
        reminders: ReminderSink,
        directory: DepartmentDirectory | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            notices: Store read by the notice intent.
            reminders: Store appended to by the reminder intent.
            directory: Department lookup table.
            clock: Returns the current local time. Injectable for tests.
        """
        self._notice_query = NoticeQuery(notices)
        self._reminders = reminders
        self._directory = directory or DepartmentDirectory()
        self._clock = clock or datetime.now

        self._handlers: dict[IntentType, Callable[[Command, UserContext | None], str]] = {
            IntentType.GREETING: self._greeting,
            IntentType.TIME_QUERY: self._time_query,
            IntentType.DATE_QUERY: self._date_query,
            IntentType.REMINDER: self._reminder,
            IntentType.NOTICE: self._notices,
            IntentType.ASSIGNMENT: self._assignments,
            IntentType.DEPARTMENT: self._department,
            IntentType.HELP: self._help,
            IntentType.STUDY: self._study,
            IntentType.UNKNOWN: self._unknown,
        }

    def generate(self, intent: IntentType, command: Command, user: UserContext | None) -> str:
        """Generate the reply for a classified command.

        Args:
            intent: Intent assigned by the classifier.
            command: The command being answered.
            user: Acting user, or None.

        Returns:
            Reply text.

        Raises:
            StoreError: If the notice or reminder store fails.
        """
        return self._handlers[intent](command, user)

    def _greeting(self, command: Command, user: UserContext | None) -> str:
        name = (user.display_name if user else None) or "there"
        return (
            f"Hello {name}! I'm your academic assistant. I can help you with academic "
            "queries, reminders, notices, and more. How can I assist you today?"
        )

    def _time_query(self, command: Command, user: UserContext | None) -> str:
        now = self._clock()
        return f"The current time is {format_clock_time(now)}. Today is {format_long_date(now)}."

    def _date_query(self, command: Command, user: UserContext | None) -> str:
        return f"Today's date is {format_long_date(self._clock())}."

    def _reminder(self, command: Command, user: UserContext | None) -> str:
        slots = extract_reminder(command.text)
        if slots is None:
            logger.debug(f"No time/task in reminder request {command.text!r}")
            return REMINDER_USAGE

        task, time_text = slots
        self._reminders.append_reminder(task, time_text)
        return (
            f'✅ I\'ve set a reminder for you:\n\n"{task}"\n⏰ {time_text}\n\n'
            "I'll help you remember when the time comes!"
        )

    def _notices(self, command: Command, user: UserContext | None) -> str:
        match = NOTICE_DEPARTMENT_PATTERN.search(command.text)
        if match:
            department = self._directory.canonical(match.group(1))
        else:
            department = user.department if user else None

        notices = self._notice_query.for_department(department)
        label = department or "your"

        if not notices:
            return (
                f"📭 No recent notices found for the {label} department.\n\n"
                "Check back later for updates!"
            )

        now = self._clock()
        if now.tzinfo is None:
            now = now.astimezone()

        lines = [f"📢 Latest notices from {label} Department:\n"]
        for index, notice in enumerate(notices, start=1):
            lines.append(self._format_notice(index, notice, now))
        lines.append("Visit the Notices page for complete details and older announcements.")
        return "\n".join(lines)

    @staticmethod
    def _format_notice(index: int, notice: Notice, now: datetime) -> str:
        icon = "🚨 " if notice.is_high_priority else "📌 "
        when = format_relative_date(notice.created_at, now)
        return f"{index}. {icon}{notice.title}\n   📅 {when}\n"

    def _assignments(self, command: Command, user: UserContext | None) -> str:
        lines = ["📚 Your Upcoming Assignments:\n"]
        for index, item in enumerate(SAMPLE_ASSIGNMENTS, start=1):
            icon = "🔴 " if item["priority"] == "high" else "🟡 "
            lines.append(
                f"{index}. {icon}{item['subject']}\n"
                f"   📖 {item['task']}\n"
                f"   ⏳ Due in: {item['due']}\n"
            )
        lines.append("💡 Tip: Start with high-priority assignments and break them into smaller tasks!")
        return "\n".join(lines)

    def _department(self, command: Command, user: UserContext | None) -> str:
        if "department" in command.lowered:
            code = user.department if user else None
            description = self._directory.describe(code) or DEPARTMENT_FALLBACK
            return f"🎓 You are in the {code or 'your'} Department.\n\n{description}"

        listing = "\n\n".join(f"{code}: {info}" for code, info in self._directory.items())
        return f"🏫 Department Information:\n\n{listing}"

    def _help(self, command: Command, user: UserContext | None) -> str:
        return HELP_RESPONSE

    def _study(self, command: Command, user: UserContext | None) -> str:
        text = command.lowered
        for triggers, heading, resources, tip in STUDY_BUCKETS:
            if any(word in text for word in triggers):
                return self._format_resources(heading, resources, tip)
        return self._format_resources(*GENERAL_STUDY)

    @staticmethod
    def _format_resources(heading: str, resources: tuple[str, ...], tip: str) -> str:
        bullets = "\n".join(f"• {item}" for item in resources)
        return f"{heading}\n\n{bullets}\n\n{tip}"

    def _unknown(self, command: Command, user: UserContext | None) -> str:
        return UNKNOWN_RESPONSE


__all__ = [
    "HELP_RESPONSE",
    "REMINDER_USAGE",
    "ResponseGenerator",
    "SAMPLE_ASSIGNMENTS",
    "UNKNOWN_RESPONSE",
    "extract_reminder",
    "format_clock_time",
    "format_long_date",
]
