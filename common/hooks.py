"""Process-wide hook bus.

Apps register listeners under a hook name; callers execute the hook with a
default value and a context mapping. Listeners run in ascending priority
(ties keep registration order) and each receives the value returned by the
previous one, so the result is a left fold starting at the default.
"""

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger("shopcart.hooks")

HookCallback = Callable[[Any, dict], Any]


class HookManager:
    """Ordered-listener registry with fold-style execution."""

    def __init__(self):
        self._listeners: dict[str, list[tuple[int, int, HookCallback]]] = defaultdict(list)
        self._sequence = 0

    def register(self, name: str, callback: HookCallback, priority: int = 10) -> None:
        self._sequence += 1
        listeners = self._listeners[name]
        listeners.append((priority, self._sequence, callback))
        listeners.sort(key=lambda entry: (entry[0], entry[1]))

    def unregister(self, name: str, callback: HookCallback) -> None:
        listeners = self._listeners.get(name, [])
        self._listeners[name] = [entry for entry in listeners if entry[2] is not callback]

    def has_listeners(self, name: str) -> bool:
        return bool(self._listeners.get(name))

    def listeners(self, name: str) -> list[HookCallback]:
        return [callback for _, _, callback in self._listeners.get(name, [])]

    def execute(self, name: str, default: Any = None, context: dict | None = None) -> Any:
        """Run every listener of `name` over `default` and return the result."""

        value = default
        ctx = context or {}
        for callback in self.listeners(name):
            value = callback(value, ctx)
        logger.debug("hook.executed", extra={"event": "hook.executed", "hook": name})
        return value


hooks = HookManager()
