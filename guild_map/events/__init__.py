"""
Events module - dziennik zdarzeń mapy w formacie JSON.

Zawiera:
- MapEvent: Dataclass reprezentująca zdarzenie
- MapEventType: Enum typów zdarzeń
- MapEventLogger: Klasa zbierająca zdarzenia
"""

from .event_logger import MapEvent, MapEventType, MapEventLogger

__all__ = ["MapEvent", "MapEventType", "MapEventLogger"]
