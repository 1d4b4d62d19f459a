"""Per-user client key-value store with Redis backend and in-memory fallback.

Holds the string values the storefront keeps between requests:
``auth_token``, ``auth_user`` (JSON) and ``token_expires_in`` (epoch ms).
"""
from __future__ import annotations

import os
import time

import redis

from app.core.constants import SESSION_TTL_SECONDS
from logging_config import logger


class SessionStore:
    """String store keyed by Telegram user id, 7 day TTL per user."""

    KEY_PREFIX = "kantin:session"

    def __init__(self, redis_url: str | None = None, ttl_seconds: int = SESSION_TTL_SECONDS):
        self._redis_url = redis_url if redis_url is not None else os.getenv("REDIS_URL")
        self._ttl = ttl_seconds
        self._client = self._init_client()
        self._memory: dict[int, dict[str, str]] = {}
        self._memory_last_access: dict[int, float] = {}

    def _init_client(self):
        if not self._redis_url:
            logger.info("REDIS_URL is not set; session store uses in-memory mode")
            return None
        try:
            client = redis.from_url(
                self._redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
            logger.info("Redis session store enabled")
            return client
        except redis.RedisError as exc:
            logger.warning("Redis session init failed, fallback to in-memory: %s", exc)
            return None

    @property
    def backend(self) -> str:
        return "redis" if self._client else "memory"

    def _switch_to_memory_fallback(self, reason: Exception | str) -> None:
        logger.warning("Redis session fallback to memory mode: %s", reason)
        self._client = None

    def _key(self, user_id: int) -> str:
        return f"{self.KEY_PREFIX}:{int(user_id)}"

    # ------------------------------------------------------------------
    # memory backend
    # ------------------------------------------------------------------

    def _cleanup_memory_expired(self) -> None:
        now = time.time()
        expired = [
            user_id
            for user_id, last_access in self._memory_last_access.items()
            if now - last_access > self._ttl
        ]
        for user_id in expired:
            self._memory.pop(user_id, None)
            self._memory_last_access.pop(user_id, None)

    def _memory_bucket(self, user_id: int) -> dict[str, str]:
        self._cleanup_memory_expired()
        self._memory_last_access[user_id] = time.time()
        return self._memory.setdefault(user_id, {})

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------

    def get(self, user_id: int, key: str) -> str | None:
        if self._client:
            try:
                return self._client.hget(self._key(user_id), key)
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        return self._memory_bucket(user_id).get(key)

    def set(self, user_id: int, key: str, value: str) -> None:
        if self._client:
            try:
                name = self._key(user_id)
                self._client.hset(name, key, value)
                self._client.expire(name, self._ttl)
                return
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        self._memory_bucket(user_id)[key] = value

    def delete(self, user_id: int, *keys: str) -> None:
        if not keys:
            return
        if self._client:
            try:
                self._client.hdel(self._key(user_id), *keys)
                return
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        bucket = self._memory_bucket(user_id)
        for key in keys:
            bucket.pop(key, None)

    def clear(self, user_id: int) -> None:
        if self._client:
            try:
                self._client.delete(self._key(user_id))
                return
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.pop(user_id, None)
        self._memory_last_access.pop(user_id, None)
