"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from dreamgame.config import get_settings
from dreamgame.database import get_session as _get_session
from dreamgame.journey.content_generator import ContentGenerator, OpenAIContentGenerator
from dreamgame.journey.personalization import Personalizer, RuleBasedPersonalizer
from dreamgame.redis_client import get_redis as _get_redis

get_db = _get_session


async def get_redis_dep() -> AsyncGenerator[object | None, None]:
    """Yield the Redis client, or None when Redis is not configured."""
    try:
        redis = _get_redis()
    except RuntimeError:
        redis = None
    yield redis


@lru_cache
def get_content_generator() -> ContentGenerator:
    """Process-wide content generator (overridden in tests)."""
    return OpenAIContentGenerator.from_settings(get_settings())


def get_personalizer() -> Personalizer:
    return RuleBasedPersonalizer()
