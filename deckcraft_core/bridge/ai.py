"""Prompt builders for AI invocations."""

from enum import Enum


class AIIntent(str, Enum):
    """What the user asked the assistant to do."""

    PLAN = "plan"
    CREATE = "create"
    ADD = "add"
    REGENERATE = "regenerate"
    TIGHTEN = "tighten"
    CHART = "chart"
    EDIT = "edit"
    REPAIR = "repair"


PROMPT_TEMPLATES: dict[AIIntent, str] = {
    AIIntent.PLAN: "Plan a deck: {text}",
    AIIntent.CREATE: "Create a deck: {text}",
    AIIntent.ADD: "Add slides to the deck: {text}",
    AIIntent.REGENERATE: "Regenerate the selected slide: {text}",
    AIIntent.TIGHTEN: "Tighten the wording of the selected content: {text}",
    AIIntent.CHART: "Add a chart: {text}",
    AIIntent.EDIT: "Edit the deck: {text}",
}

REPAIR_PROMPT = (
    "Repair the following DeckJSON to be valid per schema. Output JSON only.\n\n"
    "{broken}"
)


def build_prompt(intent: AIIntent | str, text: str) -> str:
    """Build the prompt for a user request.

    Raises:
        ValueError: For the repair intent, which uses build_repair_prompt
    """
    intent = AIIntent(intent)
    if intent == AIIntent.REPAIR:
        raise ValueError("Use build_repair_prompt for repair requests")
    return PROMPT_TEMPLATES[intent].format(text=text.strip())


def build_repair_prompt(broken: str) -> str:
    """Ask the model to fix the structure of a deck without changing content."""
    return REPAIR_PROMPT.format(broken=broken)
