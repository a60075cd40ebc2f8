"""
Dziennik zdarzeń mapy zapisywany do formatu JSON.

Każda operacja sesji (edycja hexa, reset, import, eksport, wyznaczenie
trasy) jest zapisywana z kontekstem. Dziennik pozwala odtworzyć jak
mapa była odkrywana i dlaczego import został odrzucony.

TYPY ZDARZEŃ:
═══════════════════════════════════════════════════════════════════

    MAP_CREATED
    ─────────────────────────────────────────────────────────────
    Nowa mapa. Data: radius, cells

    CELL_EDITED / CELL_EDIT_REJECTED
    ─────────────────────────────────────────────────────────────
    Zmiana terenu hexa (lub jej odrzucenie).
    Data: terrain, previous | reason

    MAP_RESET
    ─────────────────────────────────────────────────────────────
    Mapa wyczyszczona do stanu startowego.

    SNAPSHOT_EXPORTED / SNAPSHOT_IMPORTED / SNAPSHOT_REJECTED
    ─────────────────────────────────────────────────────────────
    Eksport/import snapshotu. Data: discovered, camp_restored | reason

    ROUTE_FOUND / ROUTE_NOT_FOUND
    ─────────────────────────────────────────────────────────────
    Wyznaczenie trasy z obozu. Data: steps

FORMAT LOGU:
═══════════════════════════════════════════════════════════════════

{
    "metadata": {
        "version": "1.0",
        "radius": 16,
        "timestamp": "2026-10-18T12:00:00"
    },
    "events": [
        {"seq": 0, "type": "MAP_CREATED", "data": {"radius": 16, "cells": 817}},
        {"seq": 1, "type": "CELL_EDITED", "position": [1, 0],
         "data": {"terrain": "mountain", "previous": "unknown"}},
        ...
    ]
}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime
import json
from pathlib import Path


class MapEventType(Enum):
    """Typ zdarzenia na mapie."""

    MAP_CREATED = auto()
    MAP_RESET = auto()

    # Edycja
    CELL_EDITED = auto()
    CELL_EDIT_REJECTED = auto()

    # Snapshoty
    SNAPSHOT_EXPORTED = auto()
    SNAPSHOT_IMPORTED = auto()
    SNAPSHOT_REJECTED = auto()

    # Trasy
    ROUTE_FOUND = auto()
    ROUTE_NOT_FOUND = auto()


@dataclass
class MapEvent:
    """
    Pojedyncze zdarzenie w dzienniku.

    Attributes:
        seq (int): Numer kolejny zdarzenia
        event_type (MapEventType): Typ zdarzenia
        position (Optional[Tuple[int, int]]): Hex (q, r) jeśli dotyczy
        data (Dict): Dodatkowe dane specyficzne dla typu zdarzenia
    """
    seq: int
    event_type: MapEventType
    position: Optional[Tuple[int, int]] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serializuje zdarzenie do słownika."""
        result: Dict[str, Any] = {
            "seq": self.seq,
            "type": self.event_type.name,
        }

        if self.position is not None:
            result["position"] = list(self.position)
        if self.data:
            result["data"] = self.data

        return result


class MapEventLogger:
    """
    Dziennik zdarzeń sesji edycji mapy.

    Attributes:
        events (List[MapEvent]): Lista wszystkich zdarzeń
        metadata (Dict): Metadane sesji

    Example:
        >>> journal = MapEventLogger(radius=16)
        >>> journal.log_cell_edit(1, 0, "mountain", previous="unknown")
        >>> journal.save("output/journal.json")
    """

    def __init__(self, radius: int):
        """
        Args:
            radius: Promień mapy sesji
        """
        self.events: List[MapEvent] = []
        self.metadata: Dict[str, Any] = {
            "version": "1.0",
            "radius": radius,
            "timestamp": datetime.now().isoformat(),
        }

    # ─────────────────────────────────────────────────────────────────────────
    # LOGOWANIE OGÓLNE
    # ─────────────────────────────────────────────────────────────────────────

    def log(self, event: MapEvent) -> None:
        """Dodaje zdarzenie do dziennika."""
        self.events.append(event)

    def log_event(
        self,
        event_type: MapEventType,
        position: Optional[Tuple[int, int]] = None,
        **data: Any,
    ) -> MapEvent:
        """
        Tworzy i loguje zdarzenie z kolejnym numerem seq.

        Returns:
            MapEvent: Utworzone zdarzenie
        """
        event = MapEvent(
            seq=len(self.events),
            event_type=event_type,
            position=position,
            data=dict(data),
        )
        self.log(event)
        return event

    # ─────────────────────────────────────────────────────────────────────────
    # POMOCNICZE METODY LOGOWANIA
    # ─────────────────────────────────────────────────────────────────────────

    def log_map_created(self, radius: int, cells: int) -> None:
        """Loguje utworzenie mapy."""
        self.log_event(MapEventType.MAP_CREATED, radius=radius, cells=cells)

    def log_reset(self) -> None:
        """Loguje wyczyszczenie mapy."""
        self.log_event(MapEventType.MAP_RESET)

    def log_cell_edit(self, q: int, r: int, terrain: str, previous: str) -> None:
        """Loguje zmianę terenu hexa."""
        self.log_event(
            MapEventType.CELL_EDITED,
            position=(q, r),
            terrain=terrain,
            previous=previous,
        )

    def log_cell_edit_rejected(self, q: int, r: int, terrain: str, reason: str) -> None:
        """Loguje odrzuconą edycję."""
        self.log_event(
            MapEventType.CELL_EDIT_REJECTED,
            position=(q, r),
            terrain=terrain,
            reason=reason,
        )

    def log_export(self, discovered: int) -> None:
        """Loguje eksport snapshotu."""
        self.log_event(MapEventType.SNAPSHOT_EXPORTED, discovered=discovered)

    def log_import(self, discovered: int, camp_restored: bool) -> None:
        """Loguje udany import."""
        self.log_event(
            MapEventType.SNAPSHOT_IMPORTED,
            discovered=discovered,
            camp_restored=camp_restored,
        )

    def log_import_rejected(self, reason: str) -> None:
        """Loguje odrzucony import."""
        self.log_event(MapEventType.SNAPSHOT_REJECTED, reason=reason)

    def log_route(self, q: int, r: int, steps: int) -> None:
        """Loguje wynik wyznaczania trasy (steps=0 -> brak trasy)."""
        event_type = MapEventType.ROUTE_FOUND if steps else MapEventType.ROUTE_NOT_FOUND
        self.log_event(event_type, position=(q, r), steps=steps)

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Serializuje cały dziennik do słownika."""
        return {
            "metadata": self.metadata,
            "events": [e.to_dict() for e in self.events],
        }

    def save(self, filepath: str) -> None:
        """
        Zapisuje dziennik do pliku JSON.

        Args:
            filepath: Ścieżka do pliku (katalogi są tworzone)
        """
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPYTANIA
    # ─────────────────────────────────────────────────────────────────────────

    def get_events_at(self, q: int, r: int) -> List[MapEvent]:
        """Filtruje zdarzenia dotyczące hexa (q, r)."""
        return [e for e in self.events if e.position == (q, r)]
