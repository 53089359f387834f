"""
Pointer-event source: the environment pushes move/click coordinates (surface space),
the engine subscribes its hit-test handlers.
"""

from __future__ import annotations

from typing import Callable

from cloudlayout.core.types import PointerEvent

PointerHandler = Callable[[PointerEvent], object]

EVENT_KINDS: tuple[str, ...] = ("move", "click")


class PointerEventSource:
    """Minimal listener registry for 'move' and 'click' pointer events."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[PointerHandler]] = {kind: [] for kind in EVENT_KINDS}

    def add_listener(self, kind: str, handler: PointerHandler) -> None:
        if kind not in self._handlers:
            raise ValueError(f"Unknown pointer event kind: {kind!r}")
        self._handlers[kind].append(handler)

    def remove_listener(self, kind: str, handler: PointerHandler) -> None:
        handlers = self._handlers.get(kind, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, kind: str) -> int:
        return len(self._handlers.get(kind, []))

    def emit(self, kind: str, x: float, y: float, raw: object = None) -> list[object]:
        """Deliver one event to every listener of kind; returns their results in order."""
        if kind not in self._handlers:
            raise ValueError(f"Unknown pointer event kind: {kind!r}")
        event = PointerEvent(x=x, y=y, raw=raw)
        return [handler(event) for handler in list(self._handlers[kind])]
