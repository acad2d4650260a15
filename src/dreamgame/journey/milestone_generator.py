"""Daily milestone batch generation.

A batch is always five milestones: four tasks of growing length and reward,
then a boss battle. Titles, descriptions and reflection fields come from the
content generator; a slot whose content cannot be generated or parsed gets a
fixed generic milestone instead, so a batch never fails.
"""

from __future__ import annotations

import dataclasses
import logging
import random
from dataclasses import dataclass
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from dreamgame.errors import ContentGenerationError
from dreamgame.gamification.reward_roller import roll_item
from dreamgame.journey.content_generator import ContentGenerator, MentorContext, build_messages
from dreamgame.journey.personalization import PersonalizationResult

logger = logging.getLogger(__name__)

DAILY_MILESTONE_COUNT = 5
BOSS_TITLE_PREFIX = "Boss Battle: "
BOSS_REWARD_SENTENCE = "Complete this boss battle to earn XP, coins, and a mystical business item!"
FALLBACK_FIELDS = ["planningDocument", "implementation", "results"]

TASK_XP_PER_DIFFICULTY = 100
TASK_COINS_PER_DIFFICULTY = 50
BOSS_XP_PER_DIFFICULTY = 500
BOSS_COINS_PER_DIFFICULTY = 250


# ---------------------------------------------------------------------------
# Requirements (stored as JSON on the milestone row)
# ---------------------------------------------------------------------------


class ItemReward(BaseModel):
    type: Literal["item"] = "item"
    name: str
    description: str
    rarity: Literal["common", "rare", "epic", "legendary"]
    category: str


class BossRewards(BaseModel):
    items: list[ItemReward] = Field(min_length=1, max_length=1)


class TaskRequirements(BaseModel):
    kind: Literal["task"] = "task"
    fields: list[str]


class BossBattleRequirements(BaseModel):
    kind: Literal["boss_battle"] = "boss_battle"
    fields: list[str]
    rewards: BossRewards


Requirements = Annotated[
    Union[TaskRequirements, BossBattleRequirements],
    Field(discriminator="kind"),
]

requirements_adapter: TypeAdapter[Requirements] = TypeAdapter(Requirements)


def parse_requirements(raw: dict) -> TaskRequirements | BossBattleRequirements:
    """Validate a stored requirements payload."""
    return requirements_adapter.validate_python(raw)


# ---------------------------------------------------------------------------
# Generated content
# ---------------------------------------------------------------------------


class MilestoneContent(BaseModel):
    """Shape the content generator must reply with."""

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    fields: list[str] = Field(min_length=1)


@dataclass
class GeneratedMilestone:
    title: str
    description: str
    type: str
    category: str
    difficulty: int
    estimated_duration: str
    xp_reward: int
    coin_reward: int
    order: int
    requirements: TaskRequirements | BossBattleRequirements
    ai_generated: bool = True


def build_prompt(
    phase: int,
    is_boss: bool,
    personalization: PersonalizationResult,
    ctx: MentorContext,
) -> str:
    """Structured request for one milestone of the batch."""
    context = personalization.industry_context
    if context.terminology:
        industry_line = "Focusing on " + ", ".join(context.terminology)
    else:
        industry_line = personalization.industry or ctx.industry or "General"
    focus_areas = personalization.focus_areas
    phase_focus = focus_areas[phase % len(focus_areas)] if focus_areas else "business fundamentals"
    kind = "boss battle" if is_boss else "task"

    return f"""Generate a unique {personalization.difficulty}/5 difficulty business milestone {kind} for phase {phase} of {DAILY_MILESTONE_COUNT}.

Context:
- Industry: {industry_line}
- Business Stage: {ctx.stage or "Ideation"}
- Experience Level: {ctx.experience or "Beginner"}
- Primary Goals: {", ".join(ctx.goals) or "Not specified"}
- Focus Areas: {", ".join(focus_areas)}
- Industry-Specific Goals: {", ".join(context.goals)}
- Key Metrics to Track: {", ".join(context.metrics)}

Ensure this milestone is different from any previous ones by focusing on:
1. Different aspects of {phase_focus}
2. Progressive complexity ({phase}/{DAILY_MILESTONE_COUNT} progression)
3. Building upon skills from previous phases
4. Incorporating industry-specific metrics and terminology

Format the response as JSON:
{{
  "title": "string",
  "description": "string",
  "category": "string",
  "fields": ["string"]
}}"""


def _strip_code_fence(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_content(raw: str) -> MilestoneContent:
    """Parse a generator reply. Raises pydantic.ValidationError on bad input."""
    return MilestoneContent.model_validate_json(_strip_code_fence(raw))


def fallback_content(is_boss: bool, industry: str | None) -> MilestoneContent:
    if is_boss:
        return MilestoneContent(
            title="Boss Battle: Industry Challenge",
            description=(
                f"Complete key objectives for your {industry or 'business'} venture "
                "and earn XP, coins, and a mystical business item!"
            ),
            category="development",
            fields=list(FALLBACK_FIELDS),
        )
    return MilestoneContent(
        title="Business Development Task",
        description=f"Complete key tasks for your {industry or 'business'} venture",
        category="development",
        fields=list(FALLBACK_FIELDS),
    )


async def generate_content(
    generator: ContentGenerator,
    phase: int,
    is_boss: bool,
    personalization: PersonalizationResult,
    ctx: MentorContext,
) -> MilestoneContent:
    """Content for one slot, falling back to the generic milestone on any failure."""
    terminology = personalization.industry_context.terminology
    mentor_ctx = dataclasses.replace(
        ctx,
        personality="analytical",
        industry=terminology[0] if terminology else (personalization.industry or ctx.industry),
    )
    messages = build_messages(build_prompt(phase, is_boss, personalization, ctx), mentor_ctx)

    try:
        raw = await generator.complete(messages)
        content = parse_content(raw)
    except PydanticValidationError as e:
        logger.warning("Unparseable milestone content for phase %d, using fallback: %s", phase, e)
        return fallback_content(is_boss, personalization.industry or ctx.industry)
    except ContentGenerationError:
        logger.warning("Content generation failed for phase %d, using fallback", phase, exc_info=True)
        return fallback_content(is_boss, personalization.industry or ctx.industry)
    except Exception:
        # Custom generators may raise anything
        logger.warning("Unexpected content generator error for phase %d", phase, exc_info=True)
        return fallback_content(is_boss, personalization.industry or ctx.industry)

    if is_boss:
        content.title = f"{BOSS_TITLE_PREFIX}{content.title}"
        content.description = f"{content.description}\n\n{BOSS_REWARD_SENTENCE}"
    return content


async def generate_daily_milestones(
    generator: ContentGenerator,
    personalization: PersonalizationResult,
    ctx: MentorContext,
    rng: random.Random | None = None,
) -> list[GeneratedMilestone]:
    """Build today's five milestones in order.

    The boss slot carries a preview item roll; the item actually awarded is
    rolled again when the boss battle is completed.
    """
    difficulty = personalization.difficulty
    milestones: list[GeneratedMilestone] = []

    for i in range(DAILY_MILESTONE_COUNT):
        is_boss = i == DAILY_MILESTONE_COUNT - 1
        content = await generate_content(generator, i + 1, is_boss, personalization, ctx)
        multiplier = 1 + i * 0.2

        requirements: TaskRequirements | BossBattleRequirements
        if is_boss:
            requirements = BossBattleRequirements(
                fields=content.fields,
                rewards=BossRewards(items=[ItemReward(**roll_item(rng))]),
            )
            xp = round(BOSS_XP_PER_DIFFICULTY * difficulty * multiplier)
            coins = round(BOSS_COINS_PER_DIFFICULTY * difficulty * multiplier)
        else:
            requirements = TaskRequirements(fields=content.fields)
            xp = round(TASK_XP_PER_DIFFICULTY * difficulty * multiplier)
            coins = round(TASK_COINS_PER_DIFFICULTY * difficulty * multiplier)

        milestones.append(GeneratedMilestone(
            title=content.title,
            description=content.description,
            type="boss_battle" if is_boss else "task",
            category=content.category,
            difficulty=difficulty,
            estimated_duration="2h" if is_boss else f"{30 + i * 15}min",
            xp_reward=xp,
            coin_reward=coins,
            order=i + 1,
            requirements=requirements,
        ))

    logger.info("Generated %d milestones at difficulty %d", len(milestones), difficulty)
    return milestones
