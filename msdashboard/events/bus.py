"""In-process publish/subscribe event bus.

Delivery is synchronous and in subscription order.  Coroutine handlers are
scheduled as tasks on the running event loop, so an async handler never
delays the publisher.  A handler that returns a task it started itself keeps
ownership of it.  A failing handler is logged and the remaining handlers
still receive the event.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Coroutine, List, Optional, Set, Tuple, Type, Union

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Union[None, Awaitable[Any]]]


class EventBus:
    """Publish/subscribe dispatcher keyed by event type.

    A handler subscribed to a type also receives events of its subclasses.
    """

    def __init__(self) -> None:
        self._subscriptions: List[Tuple[Type[Any], Handler]] = []
        self._background_tasks: Set[asyncio.Task[Any]] = set()

    # ── Subscription ─────────────────────────────────────────────────────

    def subscribe(self, event_type: Type[Any], handler: Handler) -> None:
        """Register *handler* for events of *event_type*."""
        self._subscriptions.append((event_type, handler))
        logger.debug(
            "Subscribed %s to %s",
            getattr(handler, "__qualname__", repr(handler)),
            event_type.__name__,
        )

    def unsubscribe(self, event_type: Type[Any], handler: Handler) -> bool:
        """Remove a registration.  Returns ``False`` if it was not found."""
        try:
            self._subscriptions.remove((event_type, handler))
        except ValueError:
            return False
        return True

    def handlers_for(self, event: Any) -> List[Handler]:
        return [h for etype, h in self._subscriptions if isinstance(event, etype)]

    # ── Publishing ───────────────────────────────────────────────────────

    def publish(self, event: Any) -> None:
        """Deliver *event* to every matching handler."""
        handlers = self.handlers_for(event)
        if not handlers:
            logger.debug("No handlers for %s", type(event).__name__)
            return
        for handler in handlers:
            try:
                result = handler(event)
            except Exception:
                logger.exception(
                    "Event handler %s failed for %s",
                    getattr(handler, "__qualname__", repr(handler)),
                    type(event).__name__,
                )
                continue
            if inspect.iscoroutine(result):
                self._schedule(handler, event, result)

    def _schedule(self, handler: Handler, event: Any, coro: Coroutine[Any, Any, Any]) -> None:
        async def _run() -> None:
            try:
                await coro
            except Exception:
                logger.exception(
                    "Async event handler %s failed for %s",
                    getattr(handler, "__qualname__", repr(handler)),
                    type(event).__name__,
                )

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.error(
                "No running event loop; dropped async handler %s for %s",
                getattr(handler, "__qualname__", repr(handler)),
                type(event).__name__,
            )
            return
        task = loop.create_task(_run())
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    @property
    def pending(self) -> int:
        """Number of async handler tasks still running."""
        return len(self._background_tasks)

    async def join(self, timeout: Optional[float] = None) -> None:
        """Wait until every scheduled async handler has finished."""
        while self._background_tasks:
            await asyncio.wait(set(self._background_tasks), timeout=timeout)
            if timeout is not None:
                break
