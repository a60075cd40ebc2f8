"""
Loader konfiguracji z automatycznym uzupełnianiem wartości domyślnych.

Konfiguracja edytora mapy jest w plikach YAML:
- defaults.yaml: wartości bazowe (promień mapy, layout, snapshot, paleta)
- settings.yaml: opcjonalne nadpisania lokalne (ten sam kształt)

Logika merge (uzupełniania defaults):
    1. Wczytaj defaults.yaml
    2. Wczytaj settings.yaml (jeśli istnieje)
    3. Nested dicts łączone rekurencyjnie, settings wygrywa

Przykład:
    defaults.yaml:
        map:
            radius: 16
        layout:
            hex_size: 15

    settings.yaml:
        map:
            radius: 8   # nadpisuje default
            # hex_size nie podany -> 15 z defaults

Użycie:
    >>> loader = ConfigLoader("data/")
    >>> loader.get_map_radius()
    16
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional
import copy
import logging

import yaml

from .errors import ConfigError
from .terrain import Terrain, TerrainStyle, build_palette

logger = logging.getLogger(__name__)

# Wartości używane gdy plik YAML nie zawiera danej sekcji
FALLBACK_RADIUS = 16
FALLBACK_HEX_SIZE = 15.0
FALLBACK_SNAPSHOT_FILENAME = "guild_map.json"


class ConfigLoader:
    """
    Ładuje konfigurację z plików YAML z automatycznym merge defaults.

    Attributes:
        data_path (Path): Ścieżka do folderu data/
        _defaults (Dict): Cache wczytanych defaults
        _settings (Dict): Cache połączonej konfiguracji
        _palette (Dict): Cache palety terenów

    Example:
        >>> loader = ConfigLoader("data/")
        >>> loader.get_layout_config()["hex_size"]
        15
    """

    def __init__(self, data_path: str = "data/"):
        """
        Args:
            data_path: Ścieżka do folderu z plikami YAML
        """
        self.data_path = Path(data_path)
        self._defaults: Optional[Dict] = None
        self._settings: Optional[Dict] = None
        self._palette: Optional[Dict[Terrain, TerrainStyle]] = None

    # ─────────────────────────────────────────────────────────────────────────
    # WCZYTYWANIE PLIKÓW
    # ─────────────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str, required: bool = True) -> Dict:
        """
        Wczytuje plik YAML.

        Args:
            filename: Nazwa pliku (bez ścieżki)
            required: Czy brak pliku jest błędem

        Returns:
            Dict: Zawartość pliku YAML ({} dla pustego lub brakującego opcjonalnego)

        Raises:
            FileNotFoundError: Jeśli wymagany plik nie istnieje
            ConfigError: Jeśli plik nie zawiera mapowania
        """
        filepath = self.data_path / filename
        if not required and not filepath.exists():
            return {}

        with open(filepath, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"{filepath} must contain a mapping at top level")
        return data

    def get_defaults(self) -> Dict:
        """
        Zwraca zawartość defaults.yaml.

        Cache'uje wczytany plik - kolejne wywołania są szybkie.
        """
        if self._defaults is None:
            self._defaults = self._load_yaml("defaults.yaml")
        return self._defaults

    def get_settings(self) -> Dict:
        """Zwraca defaults.yaml połączone z opcjonalnym settings.yaml."""
        if self._settings is None:
            overrides = self._load_yaml("settings.yaml", required=False)
            if overrides:
                logger.debug("Applying settings.yaml overrides: %s", sorted(overrides))
            self._settings = self._deep_merge(self.get_defaults(), overrides)
        return self._settings

    # ─────────────────────────────────────────────────────────────────────────
    # SEKCJE
    # ─────────────────────────────────────────────────────────────────────────

    def get_map_config(self) -> Dict:
        """Sekcja `map` (radius)."""
        return self.get_settings().get("map", {})

    def get_map_radius(self) -> int:
        """
        Promień mapy.

        Raises:
            ConfigError: Jeśli radius nie jest nieujemną liczbą całkowitą
        """
        radius = self.get_map_config().get("radius", FALLBACK_RADIUS)
        if not isinstance(radius, int) or isinstance(radius, bool) or radius < 0:
            raise ConfigError(f"map.radius must be a non-negative integer, got {radius!r}")
        return radius

    def get_layout_config(self) -> Dict:
        """Sekcja `layout` (hex_size) uzupełniona wartościami awaryjnymi."""
        layout = {"hex_size": FALLBACK_HEX_SIZE}
        layout.update(self.get_settings().get("layout", {}))
        return layout

    def get_snapshot_config(self) -> Dict:
        """Sekcja `snapshot` (filename, indent)."""
        snapshot = {"filename": FALLBACK_SNAPSHOT_FILENAME, "indent": 2}
        snapshot.update(self.get_settings().get("snapshot", {}))
        return snapshot

    def get_palette(self) -> Dict[Terrain, TerrainStyle]:
        """
        Paleta terenów: DEFAULT_STYLES + sekcja `terrain` z YAML.

        Raises:
            ConfigError: Dla nieznanego tagu w sekcji terrain
        """
        if self._palette is None:
            self._palette = build_palette(self.get_settings().get("terrain"))
        return self._palette

    # ─────────────────────────────────────────────────────────────────────────
    # HELPERY
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _deep_merge(base: Dict, override: Dict) -> Dict:
        """
        Głęboko łączy dwa słowniki.

        Override nadpisuje wartości w base.
        Nested dicts są merge'owane rekurencyjnie.
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def reload(self) -> None:
        """
        Czyści cache i wymusza ponowne wczytanie plików.

        Przydatne podczas edycji plików YAML w runtime.
        """
        self._defaults = None
        self._settings = None
        self._palette = None
