"""
Change notification for Chapel.
"""

from chapel.sync.bus import (
  ChangeEvent,
  EventBus,
  EventPublisher,
  get_event_bus,
  reset_event_bus,
)

__all__ = [
  "ChangeEvent",
  "EventBus",
  "EventPublisher",
  "get_event_bus",
  "reset_event_bus",
]
