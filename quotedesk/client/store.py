"""
client/store.py — Query cache and toast queue for the quotation dashboard.

The cache holds one QueryState per key. Data only ever changes by running
the key's fetcher again: invalidate() triggers a full refetch, never a local
patch. A failed fetch records the error on the state instead of leaving it
loading. When fetches for one key overlap, the one started last wins
whatever order the responses arrive in.

Called by: client/board.py, client/poller.py
Depends on: nothing outside the stdlib
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

log = logging.getLogger("quotedesk.client")

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[["QueryState"], None]


@dataclass(frozen=True)
class QueryState:
    status: str = "idle"  # idle | loading | success | error
    data: Any = None
    error: Exception | None = None
    updated_at: datetime | None = None

    @property
    def is_loading(self) -> bool:
        return self.status == "loading"

    @property
    def is_error(self) -> bool:
        return self.status == "error"


class QueryCache:
    def __init__(self):
        self._fetchers: dict[str, Fetcher] = {}
        self._states: dict[str, QueryState] = {}
        self._listeners: dict[str, list[Listener]] = {}
        self._inflight: dict[str, set[asyncio.Task]] = {}
        self._generations: dict[str, int] = {}

    def register(self, key: str, fetcher: Fetcher) -> None:
        self._fetchers[key] = fetcher

    def state(self, key: str) -> QueryState:
        return self._states.get(key, QueryState())

    def subscribe(self, key: str, listener: Listener) -> Callable[[], None]:
        """Call listener on every state change. Returns the unsubscribe function."""
        self._listeners.setdefault(key, []).append(listener)

        def unsubscribe():
            listeners = self._listeners.get(key, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def _set(self, key: str, state: QueryState) -> QueryState:
        self._states[key] = state
        for listener in list(self._listeners.get(key, [])):
            listener(state)
        return state

    async def fetch(self, key: str) -> QueryState:
        """Run the key's fetcher and store the outcome. Previous data stays visible while loading.

        Only the most recently started fetch for a key writes its outcome.
        An older fetch that finishes later returns the current state untouched.
        """
        fetcher = self._fetchers.get(key)
        if fetcher is None:
            raise KeyError(f"No fetcher registered for {key!r}")

        generation = self._generations[key] = self._generations.get(key, 0) + 1
        self._set(key, replace(self.state(key), status="loading", error=None))
        task = asyncio.ensure_future(fetcher())
        self._inflight.setdefault(key, set()).add(task)
        try:
            data = await task
        except asyncio.CancelledError:
            if self._is_latest(key, generation):
                previous = self.state(key)
                self._set(key, replace(previous, status="success" if previous.data is not None else "idle"))
            raise
        except Exception as e:
            if not self._is_latest(key, generation):
                log.debug("Dropping stale failure for %s: %s", key, e)
                return self.state(key)
            log.warning("Query %s failed: %s", key, e)
            return self._set(key, replace(self.state(key), status="error", error=e))
        finally:
            self._inflight[key].discard(task)
        if not self._is_latest(key, generation):
            log.debug("Dropping stale result for %s", key)
            return self.state(key)
        return self._set(
            key, QueryState(status="success", data=data, updated_at=datetime.now(timezone.utc))
        )

    def _is_latest(self, key: str, generation: int) -> bool:
        return self._generations.get(key) == generation

    async def invalidate(self, key: str) -> QueryState | None:
        """Mark key stale and refetch it in full. No-op for unregistered keys."""
        if key not in self._fetchers:
            return None
        return await self.fetch(key)

    def cancel(self, key: str | None = None) -> None:
        """Cancel in-flight fetches for one key, or for every key."""
        keys = [key] if key is not None else list(self._inflight)
        for k in keys:
            for task in list(self._inflight.get(k, ())):
                task.cancel()


# ── Toasts ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Toast:
    title: str
    description: str
    variant: str = "default"  # default | destructive


@dataclass
class ToastQueue:
    toasts: list[Toast] = field(default_factory=list)

    def push(self, title: str, description: str, variant: str = "default") -> Toast:
        toast = Toast(title, description, variant)
        self.toasts.append(toast)
        return toast

    def success(self, description: str) -> Toast:
        return self.push("Success", description)

    def error(self, description: str) -> Toast:
        return self.push("Error", description, "destructive")

    @property
    def latest(self) -> Toast | None:
        return self.toasts[-1] if self.toasts else None

    def drain(self) -> list[Toast]:
        out, self.toasts = self.toasts, []
        return out

    def __len__(self):
        return len(self.toasts)
