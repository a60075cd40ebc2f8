"""
Guild Map - odkrywana mapa hexagonalna z planowaniem tras od obozu.

Zawiera:
- core: współrzędne hex, teren, stan mapy, A*, snapshoty, konfiguracja
- events: dziennik operacji na mapie
- session: MapSession - interfejs dla UI / API / CLI
"""

from .core import HexCoord, HexMap, Terrain, find_path
from .session import MapSession, Route, ImportResult

__all__ = ["HexCoord", "HexMap", "Terrain", "find_path", "MapSession", "Route", "ImportResult"]

__version__ = "1.0.0"
