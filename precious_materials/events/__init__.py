"""
Events module - logowanie zdarzeń silnika do formatu JSON.

Zawiera:
- SyncEvent: Dataclass reprezentująca zdarzenie
- EventType: Enum typów zdarzeń
- EventLogger: Klasa logująca zdarzenia
"""

from .event_logger import SyncEvent, EventType, EventLogger, WARNING_EVENTS

__all__ = ["SyncEvent", "EventType", "EventLogger", "WARNING_EVENTS"]
