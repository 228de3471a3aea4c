"""Assistant core: intent classification, reply generation and dispatch."""

from pbl_assistant.assistant.command import Command
from pbl_assistant.assistant.departments import Department, DepartmentDirectory
from pbl_assistant.assistant.dispatcher import AssistantDispatcher
from pbl_assistant.assistant.generator import ResponseGenerator, extract_reminder
from pbl_assistant.assistant.intent import IntentClassifier, IntentType, classify

__all__ = [
    "AssistantDispatcher",
    "Command",
    "Department",
    "DepartmentDirectory",
    "IntentClassifier",
    "IntentType",
    "ResponseGenerator",
    "classify",
    "extract_reminder",
]
