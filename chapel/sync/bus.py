"""
In-process event bus used to announce confirmed writes.

Views elsewhere in the application subscribe by event name (for example
"sermonsChanged") and refresh whatever they cache. Delivery is synchronous
and fire-and-forget: a handler that raises is logged and skipped.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

ALL_EVENTS = "*"


@dataclass(frozen=True)
class ChangeEvent:
  """A notification published after the backend confirmed a mutation."""
  name: str
  payload: Any
  action: Optional[str] = None
  emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Handler = Callable[[ChangeEvent], None]


@runtime_checkable
class EventPublisher(Protocol):
  """Anything repositories can publish change events to."""

  def emit(self, name: str, payload: Any, action: Optional[str] = None) -> ChangeEvent:
    ...


class EventBus:
  """Minimal publish/subscribe bus keyed by event name."""

  def __init__(self):
    self._handlers: dict[str, list[Handler]] = {}
    self._lock = threading.Lock()

  def subscribe(self, name: str, handler: Handler) -> None:
    """Register a handler for one event name."""
    with self._lock:
      handlers = self._handlers.setdefault(name, [])
      if handler not in handlers:
        handlers.append(handler)

  def subscribe_all(self, handler: Handler) -> None:
    """Register a handler for every event."""
    self.subscribe(ALL_EVENTS, handler)

  def unsubscribe(self, name: str, handler: Handler) -> None:
    """Remove a handler. Unknown handlers are ignored."""
    with self._lock:
      handlers = self._handlers.get(name, [])
      if handler in handlers:
        handlers.remove(handler)

  def emit(self, name: str, payload: Any, action: Optional[str] = None) -> ChangeEvent:
    """Publish an event to its subscribers and to catch-all subscribers."""
    event = ChangeEvent(name=name, payload=payload, action=action)
    with self._lock:
      handlers = list(self._handlers.get(name, [])) + list(self._handlers.get(ALL_EVENTS, []))

    logger.debug("Emitting %s (%s) to %d handler(s)", name, action, len(handlers))
    for handler in handlers:
      try:
        handler(event)
      except Exception:
        logger.warning("Handler %r failed for event %s", handler, name, exc_info=True)
    return event

  def clear(self) -> None:
    """Drop all subscriptions."""
    with self._lock:
      self._handlers.clear()


_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
  """Get the process-wide event bus (singleton)."""
  global _bus
  if _bus is None:
    _bus = EventBus()
  return _bus


def reset_event_bus() -> None:
  """Reset the bus singleton (useful for testing)."""
  global _bus
  _bus = None
