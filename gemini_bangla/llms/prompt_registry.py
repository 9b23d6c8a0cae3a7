from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Prompt:
    name: str
    template: str


PROMPTS: Dict[str, Prompt] = {
    "gemini_bangla": Prompt(
        name="gemini_bangla",
        template=(
            "You are Gemini Bangla, a helpful and knowledgeable AI assistant specializing in Bangladesh. "
            "Your personality is friendly, warm, and enthusiastic about Bengali culture. "
            "You have a Muslim persona. "
            "Your responses MUST be in Bengali by default, unless the user explicitly asks for English. "
            "Use your general knowledge to answer questions related to Bangladesh. "
            "If a question is outside your scope, politely say so. "
            "Keep answers concise and engaging."
        ),
    ),
    "user_context": Prompt(
        name="user_context",
        template=(
            "\n\nHere is some context about the user you are talking to. "
            "Use this information to provide personalized responses:\n{user_context}"
        ),
    ),
}


def get_prompt(name: str) -> str:
    if name not in PROMPTS:
        raise KeyError(f"Unknown prompt: {name}")
    return PROMPTS[name].template


def build_system_instruction(user_context: str = "") -> str:
    """Persona prompt, with the aggregated user context appended when there is any."""
    instruction = get_prompt("gemini_bangla")
    if user_context:
        instruction += get_prompt("user_context").format(user_context=user_context)
    return instruction


# Fixed user-facing replies. Provider/storage error text is never shown instead of these.
REPLIES: Dict[str, str] = {
    "greeting": "স্বাগতম! আমি জেমিনি বাংলা। আজ আপনাকে কীভাবে সাহায্য করতে পারি?",
    "init_failed": "চ্যাট শুরু করতে একটি সমস্যা হয়েছে। অনুগ্রহ করে আবার চেষ্টা করুন।",
    "send_failed": "দুঃখিত, আমি এখন সংযোগ করতে পারছি না। অনুগ্রহ করে একটু পরে আবার চেষ্টা করুন।",
    "reset_done": "চ্যাট নতুন করে শুরু হয়েছে। আজ আপনাকে কীভাবে সাহায্য করতে পারি?",
    "reset_failed": "চ্যাট রিসেট করতে একটি সমস্যা হয়েছে। অনুগ্রহ করে আবার চেষ্টা করুন।",
}


def get_reply(name: str) -> str:
    if name not in REPLIES:
        raise KeyError(f"Unknown reply: {name}")
    return REPLIES[name]
