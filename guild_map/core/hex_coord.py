"""
System współrzędnych hexagonalnych (Axial / Cube Coordinates).

Używamy Axial Coordinates (q, r) gdzie:
- q = kolumna (oś pozioma)
- r = wiersz (oś ukośna)

Konwersja do Cube Coordinates:
    s = -q - r
    Cube: (q, r, s) gdzie q + r + s = 0

Mapa jest sześciokątnym obszarem o promieniu R wokół obozu (0, 0).
Hex należy do mapy gdy:
    max(|q|, |r|, |s|) <= R

Liczba hexów w obszarze:
    3·R² + 3·R + 1      (R=0 -> 1, R=1 -> 7, R=2 -> 19, R=16 -> 817)

Układ sąsiadów (przeciwnie do zegara od E):
    Kierunek   (dq, dr)
    ─────────────────────
    E  (→)     (+1,  0)
    NE (↗)     (+1, -1)
    NW (↖)     ( 0, -1)
    W  (←)     (-1,  0)
    SW (↙)     (-1, +1)
    SE (↘)     ( 0, +1)

    Kolejność ma znaczenie - od niej zależy który z równie krótkich
    wariantów trasy zwróci pathfinding.

Odległość między hexami:
    distance = max(|dq|, |dr|, |ds|)

Przykład użycia:
    >>> a = HexCoord(0, 0)
    >>> b = HexCoord(2, -1)
    >>> a.distance(b)
    2
    >>> len(list(enumerate_region(2)))
    19
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple, Iterator
import math
import re


# Kierunki sąsiadów w układzie axial
# Kolejność: E, NE, NW, W, SW, SE
HEX_DIRECTIONS: List[Tuple[int, int]] = [
    (+1, 0),   # E
    (+1, -1),  # NE
    (0, -1),   # NW
    (-1, 0),   # W
    (-1, +1),  # SW
    (0, +1),   # SE
]

# Separator w kluczu "q,r" używanym w snapshotach
KEY_SEPARATOR = ","

# Kanoniczny zapis liczby: 0 albo opcjonalny minus i cyfra 1-9 na początku.
# Każdy hex ma dokładnie jeden poprawny klucz.
_KEY_PATTERN = re.compile(r"(0|-?[1-9][0-9]*),(0|-?[1-9][0-9]*)")


@dataclass(frozen=True)
class HexCoord:
    """
    Współrzędna hexagonalna w systemie axial (q, r).

    Klasa jest niemutowalna (frozen=True), więc może być kluczem
    w słowniku mapy lub elementem zbioru.

    Attributes:
        q (int): Współrzędna kolumny
        r (int): Współrzędna wiersza

    Note:
        Współrzędna s jest wyliczana: s = -q - r
    """
    q: int
    r: int

    # ─────────────────────────────────────────────────────────────────────────
    # WŁAŚCIWOŚCI
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def s(self) -> int:
        """Trzecia współrzędna cube, spełnia q + r + s = 0."""
        return -self.q - self.r

    @property
    def axial(self) -> Tuple[int, int]:
        """Krotka (q, r)."""
        return (self.q, self.r)

    def ring_index(self) -> int:
        """
        Numer pierścienia wokół (0, 0), czyli odległość od obozu.

        Returns:
            int: max(|q|, |r|, |s|)
        """
        return max(abs(self.q), abs(self.r), abs(self.s))

    def is_within(self, radius: int) -> bool:
        """
        Sprawdza czy hex leży w sześciokątnym obszarze o promieniu radius.

        Args:
            radius: Promień mapy (>= 0)

        Returns:
            bool: True jeśli max(|q|, |r|, |s|) <= radius
        """
        return self.ring_index() <= radius

    # ─────────────────────────────────────────────────────────────────────────
    # ODLEGŁOŚĆ
    # ─────────────────────────────────────────────────────────────────────────

    def distance(self, other: HexCoord) -> int:
        """
        Odległość w krokach między dwoma hexami.

        Wzór (cube distance):
            distance = max(|dq|, |dr|, |ds|)

        Jest to dokładna odległość grafowa na siatce bez przeszkód,
        więc nadaje się jako heurystyka A* (dopuszczalna i spójna).

        Args:
            other: Druga współrzędna

        Returns:
            int: Liczba kroków

        Example:
            >>> HexCoord(0, 0).distance(HexCoord(2, 1))
            3
        """
        return max(
            abs(self.q - other.q),
            abs(self.r - other.r),
            abs(self.s - other.s),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # SĄSIEDZI
    # ─────────────────────────────────────────────────────────────────────────

    def neighbors(self) -> List[HexCoord]:
        """
        Zwraca 6 sąsiednich hexów, bez ograniczenia do mapy.

        Kolejność: E, NE, NW, W, SW, SE

        Returns:
            List[HexCoord]: Lista 6 sąsiadów
        """
        return [
            HexCoord(self.q + dq, self.r + dr)
            for dq, dr in HEX_DIRECTIONS
        ]

    # ─────────────────────────────────────────────────────────────────────────
    # KLUCZ TEKSTOWY
    # ─────────────────────────────────────────────────────────────────────────

    def to_key(self) -> str:
        """
        Klucz "q,r" używany w dokumencie snapshotu.

        Example:
            >>> HexCoord(-3, 1).to_key()
            '-3,1'
        """
        return f"{self.q}{KEY_SEPARATOR}{self.r}"

    @classmethod
    def from_key(cls, key: str) -> HexCoord:
        """
        Parsuje klucz "q,r".

        Args:
            key: Tekst dokładnie w formacie zwracanym przez to_key
                 (bez spacji, bez "+", bez zer wiodących)

        Returns:
            HexCoord: Sparsowana współrzędna

        Raises:
            ValueError: Jeśli klucz nie ma formatu "int,int"
        """
        match = _KEY_PATTERN.fullmatch(key)
        if match is None:
            raise ValueError(f"Invalid coordinate key: {key!r}")
        return cls(int(match.group(1)), int(match.group(2)))

    # ─────────────────────────────────────────────────────────────────────────
    # REPREZENTACJA
    # ─────────────────────────────────────────────────────────────────────────

    def __repr__(self) -> str:
        return f"HexCoord(q={self.q}, r={self.r})"

    def __str__(self) -> str:
        return f"({self.q}, {self.r})"


ORIGIN = HexCoord(0, 0)


# ─────────────────────────────────────────────────────────────────────────────
# OBSZAR MAPY
# ─────────────────────────────────────────────────────────────────────────────

def region_size(radius: int) -> int:
    """Liczba hexów w obszarze o promieniu radius: 3R² + 3R + 1."""
    return 3 * radius * radius + 3 * radius + 1


def enumerate_region(radius: int) -> Iterator[HexCoord]:
    """
    Generuje wszystkie hexy obszaru o promieniu radius.

    Kolejność: kolumnami po q rosnąco, w kolumnie po r rosnąco.
    Dla każdego q zakres r jest przycięty tak, żeby |s| <= radius.

    Args:
        radius: Promień obszaru (>= 0)

    Yields:
        HexCoord: Kolejne hexy, dokładnie region_size(radius) sztuk

    Raises:
        ValueError: Dla ujemnego promienia
    """
    if radius < 0:
        raise ValueError(f"Radius must be non-negative, got {radius}")

    for q in range(-radius, radius + 1):
        r1 = max(-radius, -q - radius)
        r2 = min(radius, -q + radius)
        for r in range(r1, r2 + 1):
            yield HexCoord(q, r)


def neighbors_in_region(pos: HexCoord, radius: int) -> List[HexCoord]:
    """
    Sąsiedzi pos ograniczeni do obszaru mapy.

    Na krawędzi mapy zwraca mniej niż 6 hexów (3 w narożniku, 4 na boku).

    Args:
        pos: Pozycja bazowa
        radius: Promień mapy

    Returns:
        List[HexCoord]: Sąsiedzi w kolejności HEX_DIRECTIONS
    """
    return [n for n in pos.neighbors() if n.is_within(radius)]


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """Odległość hex między a i b (skrót do HexCoord.distance)."""
    return a.distance(b)


# ─────────────────────────────────────────────────────────────────────────────
# RZUTOWANIE NA PŁASZCZYZNĘ (tylko do renderowania)
# ─────────────────────────────────────────────────────────────────────────────

SQRT3 = math.sqrt(3)


def to_pixel(pos: HexCoord, size: float = 15.0) -> Tuple[float, float]:
    """
    Środek hexa w pikselach, obóz (0, 0) w punkcie (0, 0).

    Wzór:
        x = size * (√3 * q + √3/2 * r)
        y = size * (3/2 * r)

    Pathfinding z tego nie korzysta - to wyłącznie dla renderera.

    Args:
        pos: Hex
        size: Promień hexa w pikselach (środek -> wierzchołek)

    Returns:
        Tuple[float, float]: (x, y)
    """
    x = size * (SQRT3 * pos.q + SQRT3 / 2 * pos.r)
    y = size * (1.5 * pos.r)
    return (x, y)


def hex_corners(center: Tuple[float, float], size: float = 15.0) -> List[Tuple[float, float]]:
    """
    Sześć wierzchołków wielokąta hexa (kąty 30°, 90°, ..., 330°).

    Args:
        center: Środek hexa w pikselach
        size: Promień hexa

    Returns:
        List[Tuple[float, float]]: Wierzchołki w kolejności rysowania
    """
    cx, cy = center
    corners = []
    for i in range(6):
        angle = math.pi / 3 * i + math.pi / 6
        corners.append((cx + size * math.cos(angle), cy + size * math.sin(angle)))
    return corners

