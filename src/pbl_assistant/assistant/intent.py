"""Intent classification for assistant commands.

Classifies user commands into one intent type by ordered keyword matching.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class IntentType(Enum):
    """Types of intents the assistant can handle."""

    GREETING = "greeting"
    TIME_QUERY = "time_query"
    DATE_QUERY = "date_query"
    REMINDER = "reminder"
    NOTICE = "notice"
    ASSIGNMENT = "assignment"
    DEPARTMENT = "department"
    HELP = "help"
    STUDY = "study"
    UNKNOWN = "unknown"


class IntentClassifier:
    """Rule-based intent classifier for assistant commands.

    Each intent owns a keyword set. The lower-cased command is tested against
    the rules in order, and the first intent with a keyword occurring
    anywhere in the text wins, substrings of longer words included. The
    order is observable: "schedule cse lab" is a reminder, not a department
    query.
    """

    # Highest priority first
    RULES: tuple[tuple[IntentType, tuple[str, ...]], ...] = (
        (
            IntentType.GREETING,
            ("hello", "hi", "hey", "greetings", "good morning", "good afternoon"),
        ),
        (
            IntentType.TIME_QUERY,
            ("time", "what time is it", "current time", "what is the time"),
        ),
        (
            IntentType.DATE_QUERY,
            ("date", "what date is it", "today's date", "what day is it"),
        ),
        (
            IntentType.REMINDER,
            ("reminder", "remind me", "set reminder", "schedule", "alert"),
        ),
        (
            IntentType.NOTICE,
            ("notices", "announcements", "news", "updates", "department news"),
        ),
        (
            IntentType.ASSIGNMENT,
            ("assignment", "homework", "due date", "deadline", "project", "submission"),
        ),
        (
            IntentType.DEPARTMENT,
            ("department", "cse", "eee", "civil", "mechanical", "english", "bba"),
        ),
        (
            IntentType.HELP,
            ("help", "what can you do", "commands", "features", "assistance"),
        ),
        (
            IntentType.STUDY,
            ("study", "resource", "material", "book", "reference", "learn", "tutorial"),
        ),
    )

    def classify(self, text: str) -> IntentType:
        """Classify the given text into an intent.

        Args:
            text: The user's command, typed or transcribed.

        Returns:
            The first matching intent, or UNKNOWN.
        """
        lowered = text.lower()

        for intent, keywords in self.RULES:
            if any(keyword in lowered for keyword in keywords):
                logger.debug(f"Classified {text!r} as {intent.value}")
                return intent

        return IntentType.UNKNOWN

    def priority_order(self) -> list[IntentType]:
        """Intents in the order they are tested."""
        return [intent for intent, _ in self.RULES]


_default_classifier = IntentClassifier()


def classify(text: str) -> IntentType:
    """Classify text with the default rule set."""
    return _default_classifier.classify(text)


__all__ = ["IntentClassifier", "IntentType", "classify"]
