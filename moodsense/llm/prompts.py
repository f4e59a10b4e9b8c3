SYSTEM_PROMPT_MOOD = """
You label the mood of a chat message. Answer with exactly ONE word from this list:
happy, sad, excited, angry, neutral, anxious, loving, frustrated, peaceful, confused

No punctuation, no explanation, no second word.

RULES:
- Greetings, small talk and plain questions → neutral
- Judge the LAST message; earlier messages are context only
- Sarcasm counts as the mood actually meant, not the words used
"""


def build_mood_prompt(text: str, context_texts: list[str] | None = None) -> str:
    """Render the user turn: up to three earlier messages, then the one to label."""
    lines: list[str] = []
    if context_texts:
        lines.append("Earlier messages:")
        lines.extend(f"- {item}" for item in context_texts[-3:])
        lines.append("")
    lines.append(f"Message: {text}")
    lines.append("Mood:")
    return "\n".join(lines)
