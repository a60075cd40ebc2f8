"""
Hierarchia wyjątków mapy.

Wszystkie błędy rdzenia dziedziczą po MapError, więc kolaborator
(UI, API, CLI) może złapać je jednym except na granicy wywołania.

    MapError
    ├── InvalidCoordinate   - współrzędna poza promieniem mapy
    ├── InvariantViolation  - próba zmiany obozu (origin) lub drugi obóz
    ├── MalformedSnapshot   - dokument importu nie przeszedł walidacji
    └── ConfigError         - błędna sekcja w plikach YAML

Brak ścieżki NIE jest wyjątkiem - find_path zwraca pustą listę.
"""

from __future__ import annotations


class MapError(Exception):
    """Bazowy wyjątek dla wszystkich błędów mapy."""


class InvalidCoordinate(MapError, ValueError):
    """
    Współrzędna (q, r) leży poza obszarem mapy.

    Attributes:
        q, r: Odrzucona współrzędna
        radius: Promień mapy, względem którego walidowano
    """

    def __init__(self, q: int, r: int, radius: int):
        self.q = q
        self.r = r
        self.radius = radius
        super().__init__(f"Coordinate ({q}, {r}) is outside map of radius {radius}")


class InvariantViolation(MapError):
    """Operacja złamałaby niezmiennik 'obóz jest dokładnie w (0, 0)'."""


class MalformedSnapshot(MapError, ValueError):
    """Dokument snapshotu nie ma oczekiwanego kształtu."""


class ConfigError(MapError, KeyError):
    """Błąd w konfiguracji YAML (np. nieznany typ terenu)."""

    def __str__(self) -> str:
        # KeyError domyślnie owija komunikat w apostrofy
        return str(self.args[0]) if self.args else ""
