"""
Mapa hexagonalna (HexMap) - stan odkrytego terenu.

HexMap przechowuje teren każdego hexa w sześciokątnym obszarze
o promieniu R wokół obozu:
- Mapa jest totalna: każdy hex w obszarze ma wpis (domyślnie unknown)
- Obóz jest zawsze w (0, 0) i jest jedynym obozem
- Żaden klucz spoza obszaru nie trafia do mapy

Niezmienniki pilnowane są tutaj, na granicy magazynu:
    set_cell    - odrzuca (0, 0), obóz poza originem i hexy spoza obszaru
    replace_all - waliduje całość zanim podmieni stan, potem
                  wymusza obóz w (0, 0) niezależnie od danych wejściowych
    clear       - to samo co nowa mapa o tym samym promieniu

Błąd nigdy nie zostawia mapy w połowie zmienionej.

Przykład użycia:
    >>> hex_map = HexMap.create(radius=2)
    >>> hex_map.get(HexCoord(0, 0))
    <Terrain.CAMP: 'camp'>
    >>> hex_map.set_cell(HexCoord(1, 0), Terrain.MOUNTAIN)
    >>> hex_map.is_walkable(HexCoord(1, 0))
    False
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional
import logging

from .errors import InvalidCoordinate, InvariantViolation
from .hex_coord import HexCoord, ORIGIN, enumerate_region, neighbors_in_region
from .terrain import Terrain, DEFAULT_STYLES, TerrainStyle, is_traversable

logger = logging.getLogger(__name__)


def _default_cells(radius: int) -> Dict[HexCoord, Terrain]:
    """Mapa startowa: wszystko unknown, (0, 0) = camp."""
    cells = {pos: Terrain.UNKNOWN for pos in enumerate_region(radius)}
    cells[ORIGIN] = Terrain.CAMP
    return cells


@dataclass
class HexMap:
    """
    Stan mapy: promień i teren każdego hexa.

    Attributes:
        radius (int): Promień mapy, stały przez całą sesję
        _cells (Dict[HexCoord, Terrain]): Mapa pozycja -> teren

    Note:
        Twórz przez HexMap.create(radius) - konstruktor z pustym
        _cells sam uzupełnia stan domyślny.
    """
    radius: int
    _cells: Dict[HexCoord, Terrain] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ValueError(f"Radius must be non-negative, got {self.radius}")
        if not self._cells:
            self._cells = _default_cells(self.radius)

    @classmethod
    def create(cls, radius: int) -> HexMap:
        """
        Tworzy nową mapę: wszystkie hexy unknown, obóz w (0, 0).

        Args:
            radius: Promień mapy (>= 0)

        Returns:
            HexMap: Świeża mapa z region_size(radius) wpisami
        """
        return cls(radius=radius)

    # ─────────────────────────────────────────────────────────────────────────
    # WALIDACJA POZYCJI
    # ─────────────────────────────────────────────────────────────────────────

    def is_valid(self, pos: HexCoord) -> bool:
        """
        Sprawdza czy pozycja leży w obszarze mapy.

        Example:
            >>> HexMap.create(2).is_valid(HexCoord(2, -2))
            True
            >>> HexMap.create(2).is_valid(HexCoord(2, 1))
            False
        """
        return pos.is_within(self.radius)

    def require_valid(self, pos: HexCoord) -> None:
        """
        Rzuca InvalidCoordinate jeśli pozycja jest poza mapą.

        Raises:
            InvalidCoordinate: Dla hexa spoza obszaru
        """
        if not self.is_valid(pos):
            raise InvalidCoordinate(pos.q, pos.r, self.radius)

    def is_walkable(self, pos: HexCoord) -> bool:
        """
        Czy trasa może wejść na pole.

        Pole jest walkable jeśli:
        - Jest w obszarze mapy
        - Jego teren jest przechodni (patrz is_traversable)
        """
        return self.is_valid(pos) and is_traversable(self.get(pos))

    # ─────────────────────────────────────────────────────────────────────────
    # ODCZYT
    # ─────────────────────────────────────────────────────────────────────────

    def get(self, pos: HexCoord) -> Terrain:
        """
        Zwraca teren hexa.

        Returns:
            Terrain: Teren lub UNKNOWN gdy brak wpisu
        """
        return self._cells.get(pos, Terrain.UNKNOWN)

    def cells(self) -> Dict[HexCoord, Terrain]:
        """Kopia mapy pozycja -> teren (zmiany w kopii nie wpływają na mapę)."""
        return dict(self._cells)

    def get_walkable_neighbors(self, pos: HexCoord) -> List[HexCoord]:
        """
        Sąsiedzi pos w obszarze mapy, na których teren jest przechodni.

        Kolejność zgodna z HEX_DIRECTIONS.
        """
        return [
            n for n in neighbors_in_region(pos, self.radius)
            if is_traversable(self.get(n))
        ]

    # ─────────────────────────────────────────────────────────────────────────
    # STATYSTYKI
    # ─────────────────────────────────────────────────────────────────────────

    def terrain_counts(self) -> Dict[Terrain, int]:
        """
        Liczba hexów każdego terenu (również te z zerem).

        Returns:
            Dict[Terrain, int]: Mapa teren -> liczba hexów
        """
        counts = Counter(self._cells.values())
        return {terrain: counts.get(terrain, 0) for terrain in Terrain}

    def discovered_count(self) -> int:
        """Liczba hexów o terenie innym niż unknown (obóz się liczy)."""
        return sum(1 for t in self._cells.values() if t is not Terrain.UNKNOWN)

    # ─────────────────────────────────────────────────────────────────────────
    # MUTACJE
    # ─────────────────────────────────────────────────────────────────────────

    def set_cell(self, pos: HexCoord, terrain: Terrain) -> None:
        """
        Ustawia teren pojedynczego hexa.

        Args:
            pos: Pozycja do zmiany
            terrain: Nowy teren (poprzedni jest porzucany)

        Raises:
            InvalidCoordinate: Jeśli pozycja jest poza mapą
            InvariantViolation: Jeśli pos to obóz albo terrain to CAMP
        """
        self.require_valid(pos)

        if pos == ORIGIN:
            raise InvariantViolation("The camp at (0, 0) cannot be changed")
        if terrain is Terrain.CAMP:
            raise InvariantViolation(f"Cannot place a second camp at {pos}")

        self._cells[pos] = terrain

    def replace_all(self, new_cells: Mapping[HexCoord, Terrain]) -> bool:
        """
        Podmienia cały stan mapy (używane przy imporcie).

        Proces:
        1. Zbuduj nową mapę domyślną (unknown + obóz)
        2. Nanieś wpisy z new_cells, walidując każdy
        3. Wymuś obóz w (0, 0), nawet jeśli new_cells mówi inaczej
        4. Dopiero teraz podmień stan

        Args:
            new_cells: Mapa pozycja -> teren. Brakujące hexy -> unknown.

        Returns:
            bool: True jeśli obóz trzeba było przywrócić
                  (new_cells miał w (0, 0) inny teren)

        Raises:
            InvalidCoordinate: Wpis spoza obszaru mapy
            InvariantViolation: Obóz poza (0, 0)
        """
        cells = _default_cells(self.radius)
        repinned = False

        for pos, terrain in new_cells.items():
            self.require_valid(pos)
            if pos == ORIGIN:
                repinned = terrain is not Terrain.CAMP
                continue
            if terrain is Terrain.CAMP:
                raise InvariantViolation(f"Camp is only allowed at (0, 0), found at {pos}")
            cells[pos] = terrain

        if repinned:
            logger.warning("Imported cells overwrote the camp at (0, 0); camp restored")

        self._cells = cells
        return repinned

    def clear(self) -> None:
        """Przywraca stan startowy: wszystko unknown, obóz w (0, 0)."""
        self._cells = _default_cells(self.radius)

    def copy(self) -> HexMap:
        """Niezależna kopia mapy (np. dla czytelników wielowątkowych)."""
        return HexMap(radius=self.radius, _cells=dict(self._cells))

    # ─────────────────────────────────────────────────────────────────────────
    # DEBUG / WIZUALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def debug_print(
        self,
        path: Optional[Iterable[HexCoord]] = None,
        palette: Optional[Mapping[Terrain, TerrainStyle]] = None,
    ) -> str:
        """
        Tekstowa reprezentacja mapy do debugowania.

        Wiersze to kolejne r, wcięte o |r| żeby zachować kształt hexa.
        Hexy na ścieżce (poza obozem) oznaczone są '*'.

        Args:
            path: Opcjonalna trasa do nałożenia
            palette: Paleta z symbolami (domyślnie DEFAULT_STYLES)

        Returns:
            str: Wizualizacja mapy
        """
        styles = palette or DEFAULT_STYLES
        on_path = set(path or ())
        lines = []

        for r in range(-self.radius, self.radius + 1):
            row = []
            q1 = max(-self.radius, -r - self.radius)
            q2 = min(self.radius, -r + self.radius)
            for q in range(q1, q2 + 1):
                pos = HexCoord(q, r)
                if pos in on_path and pos != ORIGIN:
                    row.append("*")
                else:
                    row.append(styles[self.get(pos)].symbol)
            lines.append(" " * abs(r) + " ".join(row))

        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, pos: object) -> bool:
        return pos in self._cells
