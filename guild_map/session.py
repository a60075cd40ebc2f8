"""
Sesja edycji mapy - interfejs dla kolaboratora (UI, API, CLI).

Sesja jest jedynym właścicielem mapy. Kolaborator nie dotyka HexMap
bezpośrednio, tylko woła operacje sesji:

OPERACJE:
═══════════════════════════════════════════════════════════════════

    edit_cell(q, r, terrain)
    ─────────────────────────────────────────────────────────────
    • Zmienia teren hexa
    • (0, 0) i obóz poza originem -> InvariantViolation
    • Hex spoza mapy -> InvalidCoordinate

    find_route(q, r) -> Route
    ─────────────────────────────────────────────────────────────
    • Trasa A* z obozu (0, 0) do (q, r)
    • Brak trasy to NIE błąd - Route.reachable == False, pusta ścieżka
    • Hex spoza mapy -> InvalidCoordinate

    reset_map()
    ─────────────────────────────────────────────────────────────
    • Wszystko unknown, obóz w (0, 0)

    export_snapshot() -> dict
    ─────────────────────────────────────────────────────────────
    • Dokument {version, radius, cells, timestamp}

    import_snapshot(document) -> ImportResult
    ─────────────────────────────────────────────────────────────
    • NIGDY nie rzuca dla złego dokumentu
    • Błąd -> ImportResult(ok=False, error=...), mapa bez zmian
    • Sukces -> mapa podmieniona w całości, obóz wymuszony w (0, 0)

WSPÓŁBIEŻNOŚĆ:
═══════════════════════════════════════════════════════════════════

    Wszystkie operacje biorą ten sam lock. Endpointy API są zwykłymi
    funkcjami (FastAPI woła je w puli wątków), więc trasa nigdy nie
    zobaczy mapy w trakcie importu.

Trasa nie jest cache'owana - każda zmiana mapy ją unieważnia,
kolaborator woła find_route ponownie.

Przykład użycia:
    >>> session = MapSession(radius=2)
    >>> session.edit_cell(1, 0, "mountain")
    >>> session.edit_cell(1, -1, "field")
    >>> session.find_route(2, -1).path
    [HexCoord(q=0, r=0), HexCoord(q=1, r=-1), HexCoord(q=2, r=-1)]
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union
import logging
import threading

from .core.config_loader import ConfigLoader
from .core.errors import InvalidCoordinate, InvariantViolation, MalformedSnapshot
from .core.hex_coord import HexCoord, ORIGIN, to_pixel, hex_corners
from .core.hex_map import HexMap
from .core.pathfinding import find_path
from .core.snapshot import encode, decode_with_report, save_snapshot
from .core.terrain import Terrain, TerrainStyle, DEFAULT_STYLES
from .events.event_logger import MapEventLogger

logger = logging.getLogger(__name__)


@dataclass
class Route:
    """
    Wynik wyznaczania trasy z obozu.

    Attributes:
        destination (HexCoord): Cel trasy
        path (List[HexCoord]): Hexy od obozu do celu (włącznie), [] gdy brak trasy

    Note:
        steps to liczba hexów na trasie - tyle pokazuje UI ("N steps").
    """
    destination: HexCoord
    path: List[HexCoord] = field(default_factory=list)

    @property
    def reachable(self) -> bool:
        return bool(self.path)

    @property
    def steps(self) -> int:
        return len(self.path)

    def to_dict(self) -> Dict[str, Any]:
        """Serializuje trasę do słownika (pozycje jako [q, r])."""
        return {
            "destination": list(self.destination.axial),
            "reachable": self.reachable,
            "steps": self.steps,
            "path": [list(pos.axial) for pos in self.path],
        }


@dataclass
class ImportResult:
    """
    Wynik importu snapshotu.

    Attributes:
        ok (bool): Czy import się udał
        hex_map (Optional[HexMap]): Nowa mapa (kopia) przy sukcesie
        error (Optional[MalformedSnapshot]): Powód odrzucenia
        camp_restored (bool): Czy dokument nadpisywał obóz i trzeba go było przywrócić
    """
    ok: bool
    hex_map: Optional[HexMap] = None
    error: Optional[MalformedSnapshot] = None
    camp_restored: bool = False


class MapSession:
    """
    Właściciel mapy i jedyny punkt wejścia dla kolaboratora.

    Attributes:
        radius (int): Promień mapy, stały w sesji
        journal (MapEventLogger): Dziennik operacji
        palette (Dict[Terrain, TerrainStyle]): Paleta do renderowania
        hex_size (float): Promień hexa w pikselach
        snapshot_indent (Optional[int]): Wcięcie JSON przy zapisie do pliku
    """

    def __init__(
        self,
        radius: int = 16,
        palette: Optional[Mapping[Terrain, TerrainStyle]] = None,
        hex_size: float = 15.0,
        snapshot_indent: Optional[int] = 2,
    ):
        self.radius = radius
        self.palette: Dict[Terrain, TerrainStyle] = dict(palette or DEFAULT_STYLES)
        self.hex_size = hex_size
        self.snapshot_indent = snapshot_indent
        self._map = HexMap.create(radius)
        self._lock = threading.Lock()
        self.journal = MapEventLogger(radius=radius)
        self.journal.log_map_created(radius, len(self._map))

    @classmethod
    def from_config(cls, loader: ConfigLoader) -> MapSession:
        """
        Tworzy sesję z ustawień YAML.

        Example:
            >>> session = MapSession.from_config(ConfigLoader("data/"))
            >>> session.radius
            16
        """
        return cls(
            radius=loader.get_map_radius(),
            palette=loader.get_palette(),
            hex_size=float(loader.get_layout_config()["hex_size"]),
            snapshot_indent=loader.get_snapshot_config()["indent"],
        )

    # ─────────────────────────────────────────────────────────────────────────
    # ODCZYT
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def hex_map(self) -> HexMap:
        """Kopia bieżącej mapy (zmiany w kopii nie wpływają na sesję)."""
        with self._lock:
            return self._map.copy()

    def get_cell(self, q: int, r: int) -> Terrain:
        """
        Teren hexa (q, r).

        Raises:
            InvalidCoordinate: Jeśli hex jest poza mapą
        """
        pos = HexCoord(q, r)
        with self._lock:
            self._map.require_valid(pos)
            return self._map.get(pos)

    def stats(self) -> Dict[str, Any]:
        """Liczba hexów każdego terenu i liczba odkrytych hexów."""
        with self._lock:
            counts = self._map.terrain_counts()
            return {
                "radius": self.radius,
                "cells": len(self._map),
                "discovered": self._map.discovered_count(),
                "terrain": {terrain.value: n for terrain, n in counts.items()},
            }

    def layout(self) -> List[Dict[str, Any]]:
        """
        Pozycje hexów w pikselach razem z wyglądem terenu (dla renderera).

        Returns:
            List[Dict]: {q, r, x, y, corners, terrain, color, label}
        """
        with self._lock:
            cells = self._map.cells()

        result = []
        for pos, terrain in cells.items():
            x, y = to_pixel(pos, self.hex_size)
            style = self.palette[terrain]
            result.append({
                "q": pos.q,
                "r": pos.r,
                "x": round(x, 3),
                "y": round(y, 3),
                "corners": [
                    [round(cx, 3), round(cy, 3)]
                    for cx, cy in hex_corners((x, y), self.hex_size)
                ],
                "terrain": terrain.value,
                "color": style.color,
                "label": style.label,
            })
        return result

    def render_ascii(self, route: Optional[Route] = None) -> str:
        """Widok ASCII mapy z opcjonalnie nałożoną trasą."""
        with self._lock:
            return self._map.debug_print(
                path=route.path if route else None,
                palette=self.palette,
            )

    # ─────────────────────────────────────────────────────────────────────────
    # OPERACJE KOLABORATORA
    # ─────────────────────────────────────────────────────────────────────────

    def edit_cell(self, q: int, r: int, terrain: Union[Terrain, str]) -> None:
        """
        Zmienia teren hexa (q, r).

        Args:
            q, r: Pozycja hexa
            terrain: Nowy teren (Terrain lub tag tekstowy)

        Raises:
            ValueError: Nieznany tag terenu
            InvalidCoordinate: Hex spoza mapy
            InvariantViolation: Próba zmiany obozu lub postawienia drugiego
        """
        terrain = Terrain.parse(terrain)
        pos = HexCoord(q, r)

        with self._lock:
            previous = self._map.get(pos)
            try:
                self._map.set_cell(pos, terrain)
            except (InvalidCoordinate, InvariantViolation) as e:
                self.journal.log_cell_edit_rejected(q, r, terrain.value, str(e))
                raise

            self.journal.log_cell_edit(q, r, terrain.value, previous.value)

    def find_route(self, q: int, r: int) -> Route:
        """
        Wyznacza trasę z obozu do (q, r).

        Returns:
            Route: Trasa; route.reachable == False gdy trasy nie ma

        Raises:
            InvalidCoordinate: Cel poza mapą
        """
        destination = HexCoord(q, r)

        with self._lock:
            route = Route(destination=destination, path=find_path(self._map, ORIGIN, destination))
            self.journal.log_route(q, r, route.steps)

        return route

    def reset_map(self) -> None:
        """Czyści mapę do stanu startowego."""
        with self._lock:
            self._map.clear()
            self.journal.log_reset()

    def export_snapshot(self) -> Dict[str, Any]:
        """Zwraca dokument snapshotu bieżącej mapy."""
        with self._lock:
            document = encode(self._map)
            self.journal.log_export(self._map.discovered_count())
        return document

    def import_snapshot(self, document: Union[str, bytes, Mapping[str, Any]]) -> ImportResult:
        """
        Podmienia mapę na zawartość snapshotu.

        Dokument jest w całości walidowany zanim mapa sesji zostanie
        podmieniona. Przy błędzie mapa zostaje nietknięta.

        Args:
            document: Tekst JSON albo sparsowany słownik

        Returns:
            ImportResult: ok=True z kopią nowej mapy lub ok=False z błędem
        """
        try:
            new_map, camp_restored = decode_with_report(document, expected_radius=self.radius)
        except MalformedSnapshot as e:
            logger.info("Snapshot rejected: %s", e)
            with self._lock:
                self.journal.log_import_rejected(str(e))
            return ImportResult(ok=False, error=e)

        with self._lock:
            self._map = new_map
            result_map = new_map.copy()
            self.journal.log_import(result_map.discovered_count(), camp_restored)

        return ImportResult(ok=True, hex_map=result_map, camp_restored=camp_restored)

    # ─────────────────────────────────────────────────────────────────────────
    # PLIKI
    # ─────────────────────────────────────────────────────────────────────────

    def save(self, filepath: Union[str, Path]) -> Path:
        """Zapisuje snapshot mapy do pliku JSON."""
        with self._lock:
            path = save_snapshot(self._map, filepath, indent=self.snapshot_indent)
            self.journal.log_export(self._map.discovered_count())
        return path

    def load(self, filepath: Union[str, Path]) -> ImportResult:
        """
        Wczytuje snapshot z pliku.

        Plik czytany jest binarnie - złe kodowanie to błąd dokumentu
        (ImportResult z MalformedSnapshot), nie wyjątek.

        Raises:
            OSError: Jeśli pliku nie da się odczytać (błąd I/O, nie dokumentu)
        """
        with open(filepath, 'rb') as f:
            return self.import_snapshot(f.read())


    # ─────────────────────────────────────────────────────────────────────────
    # DZIENNIK
    # ─────────────────────────────────────────────────────────────────────────

    def journal_entries(self, q: Optional[int] = None, r: Optional[int] = None) -> Dict[str, Any]:
        """
        Zawartość dziennika jako słownik (opcjonalnie tylko hex (q, r)).

        Returns:
            Dict: {metadata, events} w formacie MapEventLogger.to_dict
        """
        with self._lock:
            if q is not None and r is not None:
                events = self.journal.get_events_at(q, r)
            else:
                events = list(self.journal.events)
            return {
                "metadata": dict(self.journal.metadata),
                "events": [e.to_dict() for e in events],
            }

    def save_journal(self, filepath: Union[str, Path]) -> None:
        """Zapisuje dziennik do pliku JSON."""
        with self._lock:
            self.journal.save(filepath)
