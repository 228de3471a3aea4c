"""Assistant dispatcher: classify a command, then generate its reply."""

import logging
import time

from ..users import StaticUserProvider, UserContext, UserProvider
from .command import Command
from .generator import ResponseGenerator
from .intent import IntentClassifier

logger = logging.getLogger(__name__)


class AssistantDispatcher:
    """Handles one command at a time.

    Holds no state between calls. The only shared mutation is the reminder
    store append done by the generator.
    """

    def __init__(
        self,
        generator: ResponseGenerator,
        classifier: IntentClassifier | None = None,
        user_provider: UserProvider | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            generator: Produces the reply for a classified command.
            classifier: Intent classifier, defaults to the standard rules.
            user_provider: Looked up when ``handle`` is called without a user.
        """
        self._generator = generator
        self._classifier = classifier or IntentClassifier()
        self._user_provider = user_provider or StaticUserProvider()

    @property
    def user_provider(self) -> UserProvider:
        return self._user_provider

    def current_user(self) -> UserContext | None:
        """Get the signed-in user from the provider."""
        return self._user_provider.current_user()

    def handle(self, raw_text: str, user: UserContext | None = None) -> str:
        """Answer a single command.

        Args:
            raw_text: Command text as typed or transcribed.
            user: Acting user. Looked up from the provider when omitted.

        Returns:
            Reply text.

        Raises:
            StoreError: If a store call fails. Callers show their own
                failure message.
        """
        start = time.time()
        if user is None:
            user = self.current_user()

        intent = self._classifier.classify(raw_text)
        reply = self._generator.generate(intent, Command(text=raw_text, user=user), user)

        latency_ms = int((time.time() - start) * 1000)
        logger.debug(f"Handled {intent.value} command in {latency_ms}ms")
        return reply


__all__ = ["AssistantDispatcher"]
