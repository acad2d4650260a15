"""Content-generation collaborator (LLM) and mentor persona prompts.

The engine only owns the prompt contract and the response parsing; the
writing itself is delegated to a chat-completion model. Generators take a
list of role-tagged messages and return the raw text reply.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from openai import AsyncOpenAI, OpenAIError

from dreamgame.config import Settings
from dreamgame.errors import ContentGenerationError

logger = logging.getLogger(__name__)

MENTOR_PERSONALITIES: dict[str, str] = {
    "balanced": (
        "You are a well-rounded entrepreneurial mentor, balancing encouragement with practical advice.\n"
        "Keep your responses clear and simple:\n"
        "- Use natural, conversational language\n"
        "- Give practical, actionable advice\n"
        "- Focus on one point at a time\n"
        "- Avoid using markdown formatting or special characters"
    ),
    "motivational": (
        "You are a high-energy, enthusiastic entrepreneurial mentor focused on motivation and celebration.\n"
        "Keep your responses clear and simple:\n"
        "- Use energetic, positive language\n"
        "- Celebrate achievements naturally\n"
        "- Keep formatting minimal and clean\n"
        "- Focus on building confidence through clear communication"
    ),
    "analytical": (
        "You are a data-driven entrepreneurial mentor focused on strategic planning and analysis.\n"
        "Keep your responses clear and simple:\n"
        "- Present information clearly without special formatting\n"
        "- Use clear, logical structure\n"
        "- Present data in a readable format\n"
        "- Keep technical explanations accessible"
    ),
    "challenger": (
        "You are a results-driven entrepreneurial mentor who pushes users to excel.\n"
        "Keep your responses clear and simple:\n"
        "- Present challenges directly\n"
        "- Give clear, actionable feedback\n"
        "- Maintain a direct communication style\n"
        "- Keep formatting minimal and clean"
    ),
}

BASE_PERSONALITY = """As a mentor in "The Game", a gamified entrepreneurship platform:
Remember to:
1. Keep responses clear and natural, avoid using markdown symbols or special formatting
2. Structure advice in simple paragraphs
3. Use clear language that's easy to read
4. Present information in a conversational way
5. Maintain a consistent, clean format without special characters or symbols
6. Tailor advice based on the user's profile:
   - Business: {industry} industry, {stage} stage
   - Experience: {experience}
   - Goals: {goals}
   - Skills: {skills}
   - Business Metrics:
     * Business Name: {business_name}
     * Monthly Revenue: {monthly_revenue}
     * Customer Count: {customer_count}
     * Social Followers: {social_followers}
     * Employee Count: {employee_count}
     * Website Visitors: {website_visitors}"""


@dataclass
class MentorContext:
    """Everything the persona prompt is tailored with."""

    level: int = 1
    xp: int = 0
    personality: str = "balanced"
    industry: str | None = None
    stage: str | None = None
    experience: str | None = None
    goals: list[str] = field(default_factory=list)
    skill_levels: dict[str, int] = field(default_factory=dict)
    business_name: str | None = None
    monthly_revenue: int | None = None
    customer_count: int | None = None
    social_followers: int | None = None
    employee_count: int | None = None
    website_visitors: int | None = None


def persona_prompt(ctx: MentorContext) -> str:
    """System prompt: the mentor personality followed by the user's profile."""
    personality = MENTOR_PERSONALITIES.get(ctx.personality, MENTOR_PERSONALITIES["balanced"])
    skills = ", ".join(f"{skill}: {level}/5" for skill, level in ctx.skill_levels.items())
    base = BASE_PERSONALITY.format(
        industry=ctx.industry or "unspecified",
        stage=ctx.stage or "unspecified",
        experience=ctx.experience or "unspecified",
        goals=", ".join(ctx.goals) or "unspecified",
        skills=skills or "unspecified",
        business_name=ctx.business_name or "unspecified",
        monthly_revenue=ctx.monthly_revenue or 0,
        customer_count=ctx.customer_count or 0,
        social_followers=ctx.social_followers or 0,
        employee_count=ctx.employee_count or 0,
        website_visitors=ctx.website_visitors or 0,
    )
    return f"{personality}\n\n{base}"


def build_messages(
    prompt: str,
    ctx: MentorContext,
    history: list[dict[str, str]] | None = None,
) -> list[dict[str, str]]:
    """Persona, prior turns, a stats line, then the request itself."""
    return [
        {"role": "system", "content": persona_prompt(ctx)},
        *(history or []),
        {"role": "system", "content": f"Current user stats: Level {ctx.level}, XP: {ctx.xp}"},
        {"role": "user", "content": prompt},
    ]


class ContentGenerator(Protocol):
    async def complete(self, messages: list[dict[str, str]]) -> str: ...


class OpenAIContentGenerator:
    """Chat-completion generator. One attempt per call, bounded by a timeout."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.7,
        max_tokens: int = 500,
        timeout: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        # Built on first use; raises OpenAIError when no API key is configured
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key or None, max_retries=0, timeout=self.timeout)
        return self._client

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIContentGenerator:
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            timeout=settings.openai_timeout_seconds,
        )

    async def complete(self, messages: list[dict[str, str]]) -> str:
        logger.debug("Requesting completion from %s (%d messages)", self.model, len(messages))
        try:
            client = self._get_client()
            response = await client.chat.completions.create(
                model=self.model,
                messages=messages,  # type: ignore[arg-type]
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            raise ContentGenerationError(f"Chat completion failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ContentGenerationError("Chat completion returned no content")
        return content
