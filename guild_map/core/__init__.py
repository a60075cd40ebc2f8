"""
Core module - podstawowe komponenty mapy.

Zawiera:
- HexCoord: System współrzędnych hexagonalnych
- Terrain: Typy terenu i reguła przechodniości
- HexMap: Stan mapy z niezmiennikiem obozu
- find_path: Algorytm A* dla mapy hex
- snapshot: Zapis/odczyt mapy do JSON
- ConfigLoader: Wczytywanie konfiguracji z defaults
"""

from .errors import (
    MapError,
    InvalidCoordinate,
    InvariantViolation,
    MalformedSnapshot,
    ConfigError,
)
from .hex_coord import HexCoord, ORIGIN, enumerate_region, neighbors_in_region, hex_distance
from .terrain import Terrain, TerrainStyle, is_traversable, editable_terrains
from .hex_map import HexMap
from .pathfinding import find_path
from .snapshot import encode, decode
from .config_loader import ConfigLoader

__all__ = [
    "MapError", "InvalidCoordinate", "InvariantViolation", "MalformedSnapshot", "ConfigError",
    "HexCoord", "ORIGIN", "enumerate_region", "neighbors_in_region", "hex_distance",
    "Terrain", "TerrainStyle", "is_traversable", "editable_terrains",
    "HexMap", "find_path", "encode", "decode", "ConfigLoader",
]
