"""
Conversation Storage Module

Keyed, mutable store of per-thread ConversationState with two interchangeable
backends:
- InMemoryConversationStore: dict-backed, used in tests and single-process runs
- RedisConversationStore: one JSON document per thread with a TTL

Every mutation goes through `update(thread_id, command)`, which applies exactly
one command via `apply_command` and is atomic for that thread. Whole-message
processing is serialized per thread with `thread_lock(thread_id)`; different
threads never contend.
"""

import asyncio
import json
import weakref
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from redis.exceptions import LockError, WatchError

from config import CONVERSATION_TTL_SECONDS, THREAD_LOCK_TIMEOUT_SECONDS
from conversation_state import ConversationState, apply_command
from errors import StateStoreError
from logger_config import logger


class ConversationStateStore:
    """Common interface of the conversation stores."""

    async def get(self, thread_id: str) -> Optional[ConversationState]:
        raise NotImplementedError

    async def get_or_create(self, thread_id: str) -> ConversationState:
        raise NotImplementedError

    async def update(self, thread_id: str, command) -> ConversationState:
        raise NotImplementedError

    async def delete(self, thread_id: str) -> bool:
        raise NotImplementedError

    def thread_lock(self, thread_id: str):
        raise NotImplementedError

    @staticmethod
    def _stamp(state: ConversationState) -> ConversationState:
        state.updated_at = datetime.now(timezone.utc)
        return state


class InMemoryConversationStore(ConversationStateStore):
    """Dict-backed store. Updates never await, so each one is atomic on the event loop."""

    def __init__(self):
        self._states = {}
        self._locks = weakref.WeakValueDictionary()

    async def get(self, thread_id: str) -> Optional[ConversationState]:
        state = self._states.get(thread_id)
        return state.model_copy(deep=True) if state is not None else None

    async def get_or_create(self, thread_id: str) -> ConversationState:
        if thread_id not in self._states:
            self._states[thread_id] = ConversationState(thread_id=thread_id)
            logger.info(f"Created conversation state for thread {thread_id}")
        return self._states[thread_id].model_copy(deep=True)

    async def update(self, thread_id: str, command) -> ConversationState:
        current = self._states.get(thread_id) or ConversationState(thread_id=thread_id)
        new_state = self._stamp(apply_command(current, command))
        self._states[thread_id] = new_state
        return new_state.model_copy(deep=True)

    async def delete(self, thread_id: str) -> bool:
        return self._states.pop(thread_id, None) is not None

    @asynccontextmanager
    async def thread_lock(self, thread_id: str) -> AsyncIterator[None]:
        lock = self._locks.get(thread_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[thread_id] = lock
        async with lock:
            yield


class RedisConversationStore(ConversationStateStore):
    """Stores each thread as a JSON document in Redis."""

    def __init__(self, redis_client=None, conversation_ttl: int = CONVERSATION_TTL_SECONDS,
                 lock_timeout: float = THREAD_LOCK_TIMEOUT_SECONDS, max_update_retries: int = 10):
        self.redis_client = redis_client
        self.conversation_ttl = conversation_ttl
        self.lock_timeout = lock_timeout
        self.max_update_retries = max_update_retries

    def set_redis_client(self, redis_client):
        """Set the Redis client to use for conversation storage"""
        self.redis_client = redis_client

    @staticmethod
    def _state_key(thread_id: str) -> str:
        return f"conversation:{thread_id}:state"

    @staticmethod
    def _lock_key(thread_id: str) -> str:
        return f"conversation:{thread_id}:lock"

    @staticmethod
    def _load(raw) -> ConversationState:
        return ConversationState.model_validate(json.loads(raw))

    def _dump(self, state: ConversationState) -> str:
        return json.dumps(state.to_document(), ensure_ascii=False)

    async def get(self, thread_id: str) -> Optional[ConversationState]:
        raw = await self.redis_client.get(self._state_key(thread_id))
        return self._load(raw) if raw else None

    async def get_or_create(self, thread_id: str) -> ConversationState:
        state = await self.get(thread_id)
        if state is not None:
            return state

        state = ConversationState(thread_id=thread_id)
        # NX so a concurrent creator never clobbers an existing document
        created = await self.redis_client.set(
            self._state_key(thread_id), self._dump(state), ex=self.conversation_ttl, nx=True
        )
        if created:
            logger.info(f"Created conversation state for thread {thread_id}")
            return state
        return await self.get(thread_id) or state

    async def update(self, thread_id: str, command) -> ConversationState:
        """
        Apply one command with an optimistic WATCH/MULTI transaction.

        Args:
            thread_id: Conversation thread identifier
            command: One of the StateCommand variants

        Returns:
            The new state

        Raises:
            StateStoreError: when the document keeps changing underneath us
        """
        key = self._state_key(thread_id)
        async with self.redis_client.pipeline(transaction=True) as pipe:
            for attempt in range(self.max_update_retries):
                try:
                    await pipe.watch(key)
                    raw = await pipe.get(key)
                    current = self._load(raw) if raw else ConversationState(thread_id=thread_id)
                    new_state = self._stamp(apply_command(current, command))
                    pipe.multi()
                    pipe.set(key, self._dump(new_state), ex=self.conversation_ttl)
                    await pipe.execute()
                    return new_state
                except WatchError:
                    logger.warning(f"Concurrent update on thread {thread_id}, retrying ({attempt + 1}/{self.max_update_retries})")
                    continue

        raise StateStoreError(f"Could not apply {command.type} to thread {thread_id} after {self.max_update_retries} attempts")

    async def delete(self, thread_id: str) -> bool:
        deleted = await self.redis_client.delete(self._state_key(thread_id))
        logger.info(f"Cleared all data for conversation {thread_id}")
        return bool(deleted)

    @asynccontextmanager
    async def thread_lock(self, thread_id: str) -> AsyncIterator[None]:
        lock = self.redis_client.lock(
            self._lock_key(thread_id),
            timeout=self.lock_timeout,
            blocking_timeout=self.lock_timeout,
        )
        acquired = await lock.acquire()
        if not acquired:
            raise StateStoreError(f"Timed out waiting for the lock on thread {thread_id}")
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError as e:
                # Lock expired while the message was still being processed
                logger.warning(f"Lock for thread {thread_id} was lost before release: {e}")


def create_conversation_store(backend: str, redis_client=None) -> ConversationStateStore:
    """
    Build the store for the configured backend.

    Args:
        backend: "redis" or "memory"
        redis_client: Async Redis client, required for the redis backend
    """
    if backend == "memory":
        return InMemoryConversationStore()
    if backend == "redis":
        return RedisConversationStore(redis_client=redis_client)
    raise ValueError(f"Unknown STATE_BACKEND: {backend}")
