"""PBL campus assistant - rule-based academic chat and voice assistant.

The assistant answers short commands from students:
- Greetings, time and date
- Reminders ("set reminder for 10am for study session")
- Department notices, assignments and study resources

Replies can be spoken back, and commands can arrive by voice.

Usage:
    python -m pbl_assistant --profile dev
    python -m pbl_assistant --config config/dev.yaml --seed
"""

__version__ = "0.1.0"

from .config import AssistantConfig
from .config.loader import load_config

__all__ = [
    "AssistantConfig",
    "__version__",
    "load_config",
]
