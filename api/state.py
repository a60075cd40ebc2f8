"""
Współdzielony stan API - konfiguracja i sesja mapy.

Jedna sesja na proces. Routery importują get_session() zamiast
trzymać własną kopię, żeby wszystkie widziały tę samą mapę.
"""

from pathlib import Path

from guild_map.core.config_loader import ConfigLoader
from guild_map.session import MapSession


DATA_PATH = Path(__file__).parent.parent / "data"
_loader = ConfigLoader(str(DATA_PATH))
_session = MapSession.from_config(_loader)


def get_session() -> MapSession:
    return _session


def reset_session() -> MapSession:
    """Tworzy nową sesję od zera (konfiguracja wczytana ponownie)."""
    global _session
    _loader.reload()
    _session = MapSession.from_config(_loader)
    return _session
