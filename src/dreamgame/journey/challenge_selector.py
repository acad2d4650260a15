"""Daily challenge selection from the rule-based template pool.

Selection for a user on a given day is deterministic: the candidate order,
tie-breaks and reward jitter are all derived from the user id and the day
of the month, so repeated reads on the same day agree.

Steps:
  1. Drop templates whose description is in the recent history. If fewer
     than ``count`` remain, reset the history and use the whole pool.
  2. Shuffle with the per-user, per-day seed, then stable-sort by score
     (+2 category in goals, +1 category skill below 3).
  3. Take one quiz, fill with tasks, backfill from whatever is left.
  4. Scale rewards by level, experience and a jitter in [0.9, 1.1].
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field

from dreamgame.journey.challenge_templates import ChallengeTemplate, template_pool

logger = logging.getLogger(__name__)

CHALLENGES_PER_DAY = 3
HISTORY_SIZE = 90
COMPETENCY_THRESHOLD = 3

EXPERIENCE_MULTIPLIERS: dict[str, float] = {
    "none": 1.0,
    "beginner": 1.0,
    "some": 1.5,
    "intermediate": 1.5,
    "experienced": 2.0,
    "advanced": 2.0,
}


@dataclass
class SelectionContext:
    user_id: int
    day: int  # day of month, 1-31
    level: int = 1
    industry: str | None = None
    stage: str | None = None
    experience: str | None = None
    goals: list[str] = field(default_factory=list)
    skill_levels: dict[str, int] = field(default_factory=dict)
    history: list[str] = field(default_factory=list)


@dataclass
class SelectedChallenge:
    template: ChallengeTemplate
    xp_reward: int
    coin_reward: int


@dataclass
class ChallengeSelection:
    challenges: list[SelectedChallenge]
    history: list[str]
    history_reset: bool = False


def deterministic_jitter(user_id: int, day: int, draw_index: int) -> float:
    """Reward jitter in [0.9, 1.1] for the n-th draw of a user's day."""
    x = math.sin(user_id + day + draw_index) * 10000
    return 0.9 + (x - math.floor(x)) * 0.2


def level_multiplier(level: int) -> float:
    return 1 + (level // 10) * 0.2


def experience_multiplier(experience: str | None) -> float:
    return EXPERIENCE_MULTIPLIERS.get(experience or "", 1.0)


def score_template(template: ChallengeTemplate, goals: list[str], skill_levels: dict[str, int]) -> int:
    score = 0
    if template.category in goals:
        score += 2
    level = skill_levels.get(template.category)
    if level is not None and level < COMPETENCY_THRESHOLD:
        score += 1
    return score


def _pick(ranked: list[ChallengeTemplate], count: int) -> list[ChallengeTemplate]:
    quizzes = [t for t in ranked if t.type == "quiz"]
    tasks = [t for t in ranked if t.type == "task"]

    picked: list[ChallengeTemplate] = quizzes[:1]
    picked += tasks[: count - len(picked)]
    if len(picked) < count:
        rest = [t for t in ranked if t not in picked]
        picked += rest[: count - len(picked)]
    return picked


def select_challenges(
    ctx: SelectionContext,
    count: int = CHALLENGES_PER_DAY,
    history_size: int = HISTORY_SIZE,
) -> ChallengeSelection:
    """Pick today's challenges and return them with the updated history."""
    pool = template_pool(ctx.industry, ctx.stage)
    recent = list(ctx.history[-history_size:])
    available = [t for t in pool if t.description not in recent]

    history_reset = False
    if len(available) < count:
        logger.info(
            "User %d ran out of unique challenges (%d available), resetting history",
            ctx.user_id,
            len(available),
        )
        recent = []
        available = list(pool)
        history_reset = True

    rng = random.Random(f"{ctx.user_id}:{ctx.day}")
    rng.shuffle(available)
    ranked = sorted(
        available,
        key=lambda t: score_template(t, ctx.goals, ctx.skill_levels),
        reverse=True,
    )

    multiplier = level_multiplier(ctx.level) * experience_multiplier(ctx.experience)
    challenges = []
    for i, template in enumerate(_pick(ranked, count)):
        challenges.append(SelectedChallenge(
            template=template,
            xp_reward=round(template.xp_reward * multiplier * deterministic_jitter(ctx.user_id, ctx.day, 2 * i)),
            coin_reward=round(
                template.coin_reward * multiplier * deterministic_jitter(ctx.user_id, ctx.day, 2 * i + 1)
            ),
        ))

    history = (recent + [c.template.description for c in challenges])[-history_size:]
    return ChallengeSelection(challenges=challenges, history=history, history_reset=history_reset)
