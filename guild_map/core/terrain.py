"""
Typy terenu i reguła przechodniości.

Każdy hex mapy ma dokładnie jeden typ terenu z zamkniętego zbioru:

    Tag        Nazwa               Przechodni
    ─────────────────────────────────────────
    unknown    Unknown             TAK  (nieodkryty - zakładamy optymistycznie)
    camp       Camp                TAK  (tylko (0, 0))
    field      Field               TAK
    signal     Unknown Signal      TAK
    chest      Chest               TAK
    mine       Mine                TAK
    enemy      Enemy Encampment    TAK
    mountain   Mountain            NIE
    lake       Lake                NIE

Nieodkryty teren jest przechodni. Trasy planowane są przez "mgłę"
i dopiero odkrycie góry lub jeziora je blokuje.

Kolor i etykieta są tylko dla renderera. Można je nadpisać
w sekcji `terrain` pliku defaults.yaml (patrz ConfigLoader).
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Mapping, Any, Optional

from .errors import ConfigError


class Terrain(str, Enum):
    """
    Tag terenu. Wartość enuma to tag zapisywany w snapshocie.

    Dziedziczy po str, więc Terrain.LAKE == "lake".
    """
    UNKNOWN = "unknown"
    CAMP = "camp"
    FIELD = "field"
    SIGNAL = "signal"
    MOUNTAIN = "mountain"
    LAKE = "lake"
    CHEST = "chest"
    MINE = "mine"
    ENEMY = "enemy"

    @classmethod
    def parse(cls, tag: Any) -> "Terrain":
        """
        Zamienia tag tekstowy na Terrain.

        Args:
            tag: Tag ("lake") lub gotowy Terrain

        Returns:
            Terrain: Typ terenu

        Raises:
            ValueError: Dla nieznanego tagu
        """
        if isinstance(tag, Terrain):
            return tag
        try:
            return cls(tag)
        except ValueError:
            raise ValueError(f"Unknown terrain tag: {tag!r}") from None

    def __str__(self) -> str:
        return self.value


# Teren nieprzechodni - jedyne tagi blokujące trasę
IMPASSABLE: frozenset = frozenset({Terrain.MOUNTAIN, Terrain.LAKE})


def is_traversable(terrain: Terrain) -> bool:
    """
    Czy trasa może przejść przez hex o danym terenie.

    Returns:
        bool: False dla gór i jezior, True dla reszty (również unknown)
    """
    return terrain not in IMPASSABLE


# ─────────────────────────────────────────────────────────────────────────────
# PREZENTACJA
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TerrainStyle:
    """
    Dane prezentacyjne terenu (bez znaczenia dla pathfindingu).

    Attributes:
        color: Kolor wypełnienia hexa (#rrggbb)
        label: Ikona rysowana na hexie (może być pusta)
        name: Nazwa wyświetlana w palecie
        symbol: Znak w widoku ASCII
    """
    color: str
    label: str
    name: str
    symbol: str


DEFAULT_STYLES: Dict[Terrain, TerrainStyle] = {
    Terrain.UNKNOWN: TerrainStyle("#2a2a2a", "", "Unknown", "."),
    Terrain.CAMP: TerrainStyle("#4ade80", "🏕️", "Camp", "C"),
    Terrain.FIELD: TerrainStyle("#4ade80", "🌾", "Field", "f"),
    Terrain.SIGNAL: TerrainStyle("#fbbf24", "📡", "Unknown Signal", "?"),
    Terrain.MOUNTAIN: TerrainStyle("#78716c", "⛰️", "Mountain", "^"),
    Terrain.LAKE: TerrainStyle("#3b82f6", "💧", "Lake", "~"),
    Terrain.CHEST: TerrainStyle("#f59e0b", "📦", "Chest", "$"),
    Terrain.MINE: TerrainStyle("#dc2626", "⛏️", "Mine", "m"),
    Terrain.ENEMY: TerrainStyle("#dc2626", "🗡️", "Enemy Encampment", "E"),
}


def editable_terrains() -> List[Terrain]:
    """Tereny dostępne w palecie edycji - wszystkie poza obozem."""
    return [t for t in Terrain if t is not Terrain.CAMP]


def build_palette(
    overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> Dict[Terrain, TerrainStyle]:
    """
    Buduje paletę: DEFAULT_STYLES nadpisane wartościami z konfiguracji.

    Args:
        overrides: Mapa tag -> {color, label, name, symbol} (pola opcjonalne)

    Returns:
        Dict[Terrain, TerrainStyle]: Pełna paleta

    Raises:
        ConfigError: Dla nieznanego tagu lub nieznanego pola stylu

    Example:
        >>> palette = build_palette({"lake": {"color": "#0000ff"}})
        >>> palette[Terrain.LAKE].color
        '#0000ff'
    """
    palette = dict(DEFAULT_STYLES)
    if not overrides:
        return palette

    for tag, fields in overrides.items():
        try:
            terrain = Terrain.parse(tag)
        except ValueError:
            raise ConfigError(f"Unknown terrain tag in palette: {tag!r}") from None

        fields = dict(fields or {})
        unknown_fields = set(fields) - {"color", "label", "name", "symbol"}
        if unknown_fields:
            raise ConfigError(
                f"Unknown style fields for {tag!r}: {sorted(unknown_fields)}"
            )
        palette[terrain] = replace(palette[terrain], **fields)

    return palette
