"""Municipality suggestions and a single-flight debouncer for typing input."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from ..config import settings

_LOGGER = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
MAX_SUGGESTIONS = 5


def suggest(
    municipalities: Sequence[str],
    text: str,
    limit: int = MAX_SUGGESTIONS,
    min_length: int = MIN_QUERY_LENGTH,
) -> List[str]:
    """Case-insensitive substring matches, in feed order."""
    needle = (text or "").strip().lower()
    if len(needle) < min_length:
        return []

    matches: List[str] = []
    for name in municipalities:
        if needle in name.lower():
            matches.append(name)
            if len(matches) >= limit:
                break
    return matches


class Debouncer:
    """Runs only the latest scheduled call once input has been quiet for ``delay``.

    Scheduling again before the delay elapses cancels the pending task, so
    at most one call is ever waiting.
    """

    def __init__(self, delay: Optional[float] = None):
        self.delay = settings.autocomplete_debounce_seconds if delay is None else delay
        self._task: Optional[asyncio.Task[Any]] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        **kwargs: Any,
    ) -> asyncio.Task[Any]:
        """Replace any pending call with ``func(*args, **kwargs)``."""
        self.cancel()
        self._task = asyncio.create_task(self._run_later(func, *args, **kwargs), name="debounced-call")
        return self._task

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self.pending:
            self._task.cancel()
        self._task = None

    async def _run_later(self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        await asyncio.sleep(self.delay)
        return await func(*args, **kwargs)


class MunicipalityAutocomplete:
    """Debounced suggestions backed by the municipality feed."""

    def __init__(self, load_municipalities: Callable[[], Awaitable[List[str]]], delay: Optional[float] = None):
        self._load = load_municipalities
        self._debouncer = Debouncer(delay)

    async def suggestions(self, text: str) -> List[str]:
        """Suggestions for ``text``; an empty feed just yields no matches."""
        municipalities = await self._load()
        return suggest(municipalities, text)

    def on_input(self, text: str) -> Optional[asyncio.Task[List[str]]]:
        """
        Handle one keystroke.

        Short input cancels any pending lookup and returns None; otherwise
        the returned task resolves to the suggestions unless a newer
        keystroke cancels it first.
        """
        if len((text or "").strip()) < MIN_QUERY_LENGTH:
            self._debouncer.cancel()
            return None
        _LOGGER.debug("Scheduling autocomplete lookup for %r", text)
        return self._debouncer.schedule(self.suggestions, text)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending
