"""
System prompts for the chat modes.
"""
from datetime import UTC, datetime
from typing import Dict, Optional

DEFAULT_MODE = "helper"


def current_date_string(now: Optional[datetime] = None) -> str:
    """Format a date like ``Monday, October 19, 2026`` (UTC)."""
    now = (now or datetime.now(UTC)).astimezone(UTC)
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"


def system_prompts(now: Optional[datetime] = None) -> Dict[str, str]:
    """All mode prompts, each carrying today's date."""
    date_context = (
        f"Today's date is {current_date_string(now)}. Always use current, up-to-date information. "
        "If asked about recent events, news, or data, acknowledge that your training data has a "
        "cutoff date and recommend checking reliable sources for the most recent information."
    )
    return {
        "auto": (
            f"You are VEER in Auto mode. {date_context} Choose the best style (helper, coder, tutor, "
            "study, silent, explain) based on the user request and respond accordingly."
        ),
        "helper": f"You are VEER, a helpful AI assistant. {date_context} Provide clear, concise, and friendly responses.",
        "coder": (
            f"You are VEER in Coder mode. {date_context} Help with programming, debugging, and code "
            "explanations. Format code properly."
        ),
        "tutor": (
            f"You are VEER in Tutor mode. {date_context} Explain concepts clearly, break down complex "
            "topics, and help with learning."
        ),
        "study": (
            f"You are VEER in Study mode. {date_context} Help organize notes, create summaries, and "
            "generate study materials."
        ),
        "silent": (
            f"You are VEER in Silent mode. {date_context} Respond only when directly asked. Keep "
            "responses extremely brief."
        ),
        "explain": (
            f"You are VEER in Explain mode. {date_context} Provide detailed, thorough explanations "
            "with examples and context."
        ),
    }


def system_prompt_for(mode: Optional[str], now: Optional[datetime] = None) -> str:
    prompts = system_prompts(now)
    return prompts.get(mode or DEFAULT_MODE, prompts[DEFAULT_MODE])
