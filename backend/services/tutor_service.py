"""
Tutor service using an OpenAI-compatible chat completions API.

Formats a prompt from the difficulty tier and recent history, calls the
model via OpenRouter (or any compatible endpoint), and falls back to a fixed
apology when the model cannot answer.
"""

import httpx
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
from config import settings, Environment
from core.exceptions import UpstreamFailure
from models import DifficultyLevel, Role, Turn, PROMPT_HISTORY_WINDOW
from utils import get_logger, truncate

logger = get_logger(__name__)

FALLBACK_RESPONSE = (
    "I apologize, but I'm having trouble processing your question right now. "
    "Could you please try rephrasing it, or ask something else? I'm here to help!"
)

_PLAIN_TEXT_RULE = (
    "IMPORTANT: Use plain text only. Do NOT use markdown formatting like **bold**, "
    "*italic*, or __underline__. Just write naturally."
)

SYSTEM_PROMPTS: Dict[DifficultyLevel, str] = {
    DifficultyLevel.BEGINNER: f"""You are a patient and encouraging AI tutor helping a beginner learn programming and computer science concepts.

Your teaching style:
- Use simple, everyday language and avoid jargon
- Break down complex concepts into small, digestible pieces
- Provide lots of concrete examples and analogies
- Encourage questions and celebrate understanding
- Use step-by-step explanations
- Include visual descriptions when helpful

{_PLAIN_TEXT_RULE}

Keep responses concise (2-4 paragraphs) unless the student asks for more detail.""",

    DifficultyLevel.INTERMEDIATE: f"""You are an AI tutor helping an intermediate-level student deepen their understanding of programming and computer science.

Your teaching style:
- Use technical terminology appropriately
- Provide clear explanations with some implementation details
- Include code examples when relevant
- Connect concepts to real-world applications
- Challenge the student with follow-up questions
- Balance theory with practice

{_PLAIN_TEXT_RULE}

Keep responses focused and informative (3-5 paragraphs).""",

    DifficultyLevel.ADVANCED: f"""You are an AI tutor working with an advanced student on sophisticated programming and computer science topics.

Your teaching style:
- Use precise technical language
- Discuss trade-offs, edge cases, and optimizations
- Reference algorithms, design patterns, and established practice
- Provide concise, high-level explanations
- Assume strong foundational knowledge
- Connect to research and industry practices

{_PLAIN_TEXT_RULE}

Keep responses concise and technical (2-4 paragraphs).""",
}


@dataclass(frozen=True)
class TutorReply:
    """Model output, flagged when it is the canned apology."""
    text: str
    is_fallback: bool = False


def system_prompt_for(level: DifficultyLevel) -> str:
    """System prompt for a difficulty tier."""
    return SYSTEM_PROMPTS[level]


def format_history(history: Sequence[Turn]) -> List[Dict[str, str]]:
    """Last 10 turns (5 exchanges) as chat messages."""
    return [
        {"role": turn.role.value, "content": turn.content}
        for turn in history[-PROMPT_HISTORY_WINDOW:]
    ]


def build_messages(
    message: str,
    history: Sequence[Turn],
    level: DifficultyLevel
) -> List[Dict[str, str]]:
    """Full chat payload: system prompt, recent history, new user message."""
    return [
        {"role": "system", "content": system_prompt_for(level)},
        *format_history(history),
        {"role": Role.USER.value, "content": message},
    ]


class TutorService:
    """
    Calls the language model for tutoring replies.

    Never raises to the caller: any upstream failure, after one retry on the
    fallback model, turns into FALLBACK_RESPONSE. Without an API key no call
    is made at all.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None
    ):
        self.model = model or settings.llm_model
        self.api_key = api_key or settings.llm_api_key
        self.fallback_models = [m for m in settings.llm_fallback_models if m != self.model]

        # HTTP client for API calls
        self.client = client or httpx.AsyncClient(
            timeout=settings.llm_timeout_seconds
        )

        logger.info(f"Tutor service created: model={self.model}")

    async def respond(
        self,
        message: str,
        history: Sequence[Turn],
        level: DifficultyLevel = DifficultyLevel.BEGINNER
    ) -> TutorReply:
        """
        Get a tutoring reply for a user message.

        Args:
            message: New user message
            history: Stored conversation turns (only the last 10 are sent)
            level: Current difficulty tier

        Returns:
            The model's reply, or the fallback apology
        """
        if not self.api_key:
            return TutorReply(text=FALLBACK_RESPONSE, is_fallback=True)

        messages = build_messages(message, history, level)

        for model in [self.model, *self.fallback_models[:1]]:
            try:
                text = await self._complete(messages, model)
                logger.info(f"[TUTOR] ✅ Reply from {model}: '{truncate(text)}'")
                return TutorReply(text=text)

            except UpstreamFailure as e:
                logger.error(f"[TUTOR] ❌ {model} failed: {e}")

        logger.warning("[TUTOR] All models failed, using fallback reply")
        return TutorReply(text=FALLBACK_RESPONSE, is_fallback=True)

    async def _complete(self, messages: List[Dict[str, str]], model: str) -> str:
        """
        One chat completion call.

        Raises:
            UpstreamFailure: Transport error, non-2xx status, or unusable body
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": model,
            "messages": messages,
            "temperature": settings.llm_temperature,
            "max_tokens": settings.llm_max_tokens,
            "top_p": settings.llm_top_p,
        }

        try:
            response = await self.client.post(
                f"{settings.llm_base_url}/chat/completions",
                json=payload,
                headers=headers
            )
            response.raise_for_status()
            result = response.json()

        except httpx.HTTPError as e:
            raise UpstreamFailure(f"LLM API error: {e}") from e
        except ValueError as e:
            raise UpstreamFailure("LLM API returned invalid JSON") from e

        try:
            text = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamFailure("Invalid AI response format") from e

        if not isinstance(text, str) or not text.strip():
            raise UpstreamFailure("Empty AI response")

        return text.strip()

    async def cleanup(self):
        """Cleanup resources."""
        await self.client.aclose()


def suggest_follow_ups(user_message: str, reply: str) -> List[str]:
    """Keyword-based follow-up questions to offer the student (at most 3)."""
    suggestions: List[str] = []
    lowered = user_message.lower()

    if "what is" in lowered:
        suggestions.append("Can you give me an example?")
        suggestions.append("How is this used in practice?")

    if "how" in lowered:
        suggestions.append("Can you explain that in simpler terms?")
        suggestions.append("What are the key steps?")

    if "example" in reply.lower() or "```" in reply:
        suggestions.append("Can you explain this example step-by-step?")
        suggestions.append("What would happen if I changed this?")

    # Default suggestions
    if not suggestions:
        suggestions.append("Can you explain more?")
        suggestions.append("Do you have another example?")
        suggestions.append("What should I learn next?")

    return suggestions[:3]


# Global tutor service instance
_tutor_service: Optional[TutorService] = None


def get_tutor_service() -> TutorService:
    """Get the global tutor service instance."""
    global _tutor_service
    if _tutor_service is None:
        _tutor_service = TutorService()
    return _tutor_service


def validate_tutor_config():
    """Validate tutor configuration."""
    if not settings.llm_api_key:
        if settings.environment == Environment.PRODUCTION:
            raise ValueError("LLM API key not configured")
        logger.warning("LLM API key not configured; every chat will get the fallback reply")
        return

    logger.info(
        f"Tutor configuration validated: model={settings.llm_model}, "
        f"fallbacks={settings.llm_fallback_models}"
    )
