import logging
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.exceptions import StorageUnavailableException

logger = logging.getLogger(__name__)

WINDOW_TTL_SECONDS = 30 * 24 * 3600


class ViewCounter:
    """Trainer profile view counters in Redis.

    Constructed once per application and injected; the connection pool is
    created on first use and released by ``close()``.
    """

    def __init__(self, url: str, client: Optional[aioredis.Redis] = None) -> None:
        self.url = url
        self._client = client

    def _get_client(self) -> aioredis.Redis:
        if self._client is None:
            self._client = aioredis.from_url(self.url, decode_responses=True)
        return self._client

    @staticmethod
    def _keys(trainer_id: str) -> tuple[str, str]:
        return (
            f"profile:views:30d:{trainer_id}",
            f"profile:views:total:{trainer_id}",
        )

    async def record_view(self, trainer_id: str) -> tuple[int, int]:
        window_key, total_key = self._keys(trainer_id)
        client = self._get_client()
        try:
            window = await client.incr(window_key)
            if window == 1:
                await client.expire(window_key, WINDOW_TTL_SECONDS)
            total = await client.incr(total_key)
        except RedisError as e:
            logger.error(
                "View counter increment failed trainer_id=%s",
                trainer_id,
                exc_info=e,
                extra={"trainer_id": trainer_id},
            )
            raise StorageUnavailableException(
                "View counter store unavailable", operation="incr"
            )
        return int(window), int(total)

    async def get_views(self, trainer_id: str) -> tuple[int, int]:
        window_key, total_key = self._keys(trainer_id)
        client = self._get_client()
        try:
            window, total = await client.mget(window_key, total_key)
        except RedisError as e:
            logger.error(
                "View counter read failed trainer_id=%s",
                trainer_id,
                exc_info=e,
                extra={"trainer_id": trainer_id},
            )
            raise StorageUnavailableException(
                "View counter store unavailable", operation="mget"
            )
        return int(window or 0), int(total or 0)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
