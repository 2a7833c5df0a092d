import asyncio
import functools
import inspect
from typing import Any, Callable

from peernet.core.helpers.spawn import TaskSpawner


Listener = Callable[..., Any]


class EventEmitter:
    """
    A callback registry keyed by event name.

    Listeners are plain functions or coroutine functions registered with
    `on` (usable as a decorator) or `once`. They are invoked in
    registration order with the positional arguments passed to `emit`.

    Two dispatch modes are offered:
    - `emit` calls every listener immediately; awaitables returned by
      listeners are scheduled as background tasks and not waited for.
    - `emit_async` calls every listener and awaits all of their results
      together, propagating the first error raised.

    The emitter performs no validation of event names: any string is a
    valid event, which lets messengers re-emit application-defined events.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._spawner = TaskSpawner()

    def on(self, event: str, listener: Listener | None = None) -> Any:
        if listener is not None:
            self._listeners.setdefault(event, []).append(listener)
            return listener

        def decorator(func: Listener) -> Listener:
            self._listeners.setdefault(event, []).append(func)
            return func

        return decorator

    def once(self, event: str, listener: Listener | None = None) -> Any:
        def register(func: Listener) -> Listener:
            @functools.wraps(func)
            def wrapper(*args: Any) -> Any:
                self.off(event, wrapper)
                return func(*args)

            self._listeners.setdefault(event, []).append(wrapper)
            return func

        if listener is not None:
            return register(listener)

        return register

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event, [])
        for i, registered in enumerate(listeners):
            if registered == listener or getattr(registered, "__wrapped__", None) == listener:
                del listeners[i]
                break

        if not listeners:
            self._listeners.pop(event, None)

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any) -> bool:
        listeners = self.listeners(event)

        for listener in listeners:
            result = listener(*args)
            if inspect.isawaitable(result):
                self._spawner.spawn(self._await(result), name=f"emit:{event}")

        return bool(listeners)

    async def emit_async(self, event: str, *args: Any) -> list[Any]:
        results: list[Any] = []
        try:
            for listener in self.listeners(event):
                results.append(listener(*args))
        except BaseException:
            for r in results:
                if inspect.iscoroutine(r):
                    r.close()
            raise

        pending = [r for r in results if inspect.isawaitable(r)]

        if not pending:
            return results

        awaited = iter(await asyncio.gather(*pending))
        return [next(awaited) if inspect.isawaitable(r) else r for r in results]

    @staticmethod
    async def _await(awaitable: Any) -> Any:
        return await awaitable
