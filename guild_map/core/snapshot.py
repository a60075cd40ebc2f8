"""
Snapshot mapy - zapis i odczyt stanu do przenośnego dokumentu JSON.

FORMAT DOKUMENTU:
═══════════════════════════════════════════════════════════════════

{
    "version": "1.0",
    "radius": 16,
    "cells": {
        "0,0": "camp",
        "1,0": "mountain",
        "-3,2": "field",
        ...
    },
    "timestamp": "2026-10-18T12:00:00+00:00"
}

- Klucz komórki to "q,r" (s zawsze da się wyliczyć)
- Eksport zapisuje wszystkie hexy mapy (również unknown)
- Przy imporcie brakujące hexy stają się unknown
- "version" jest opcjonalne przy imporcie (starsze pliki go nie mają)

WALIDACJA IMPORTU:
═══════════════════════════════════════════════════════════════════

decode() odrzuca dokument (MalformedSnapshot) gdy:
    - tekst nie jest poprawnym JSON (również zbyt głęboko zagnieżdżony)
    - dokument nie jest obiektem
    - brak "cells" albo "cells" nie jest obiektem
    - "radius" nie jest nieujemną liczbą całkowitą
    - klucz komórki nie ma formatu "q,r"
    - komórka leży poza promieniem
    - tag terenu jest nieznany (NIE zamieniamy go na unknown)
    - obóz pojawia się poza (0, 0)
    - promień różni się od oczekiwanego (gdy podano expected_radius)

Wpis dla (0, 0) jest ignorowany - obóz zawsze wraca na swoje miejsce.
Cały dokument jest walidowany zanim powstanie nowa mapa.
"""

from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union
import json

from .errors import InvalidCoordinate, InvariantViolation, MalformedSnapshot
from .hex_coord import HexCoord
from .hex_map import HexMap
from .terrain import Terrain

SNAPSHOT_VERSION = "1.0"

Document = Dict[str, Any]


# ─────────────────────────────────────────────────────────────────────────────
# ENCODE
# ─────────────────────────────────────────────────────────────────────────────

def encode(hex_map: HexMap, timestamp: Optional[datetime] = None) -> Document:
    """
    Serializuje mapę do dokumentu snapshotu.

    Args:
        hex_map: Mapa do zapisania
        timestamp: Czas wygenerowania (domyślnie teraz, UTC)

    Returns:
        Document: Słownik gotowy do json.dump
    """
    generated_at = timestamp or datetime.now(timezone.utc)
    return {
        "version": SNAPSHOT_VERSION,
        "radius": hex_map.radius,
        "cells": {
            pos.to_key(): terrain.value
            for pos, terrain in hex_map.cells().items()
        },
        "timestamp": generated_at.isoformat(),
    }


# ─────────────────────────────────────────────────────────────────────────────
# DECODE
# ─────────────────────────────────────────────────────────────────────────────

def decode(
    document: Union[str, bytes, Mapping[str, Any]],
    expected_radius: Optional[int] = None,
) -> HexMap:
    """
    Odtwarza mapę z dokumentu snapshotu.

    Skrót do decode_with_report bez informacji o przywróceniu obozu.

    Args:
        document: Tekst JSON albo już sparsowany słownik
        expected_radius: Jeśli podany - promień dokumentu musi się zgadzać.
                         Dokument bez "radius" dostaje ten promień.

    Returns:
        HexMap: Nowa mapa z obozem w (0, 0)

    Raises:
        MalformedSnapshot: Dla każdego dokumentu, który nie przeszedł walidacji
    """
    hex_map, _ = decode_with_report(document, expected_radius)
    return hex_map


def decode_with_report(
    document: Union[str, bytes, Mapping[str, Any]],
    expected_radius: Optional[int] = None,
) -> Tuple[HexMap, bool]:
    """
    Jak decode, ale zwraca też informację czy obóz trzeba było przywrócić.

    Returns:
        Tuple[HexMap, bool]: (mapa, True jeśli dokument nadpisywał (0, 0))

    Raises:
        MalformedSnapshot: Dla każdego dokumentu, który nie przeszedł walidacji
    """
    data = _parse(document)

    cells_raw = data.get("cells")
    if not isinstance(cells_raw, dict):
        raise MalformedSnapshot("Snapshot has no 'cells' object")

    radius = _read_radius(data, expected_radius)
    cells = _read_cells(cells_raw)

    hex_map = HexMap.create(radius)
    try:
        camp_restored = hex_map.replace_all(cells)
    except InvalidCoordinate as e:
        raise MalformedSnapshot(f"Cell {e.q},{e.r} is outside radius {radius}") from e
    except InvariantViolation as e:
        raise MalformedSnapshot(str(e)) from e

    return hex_map, camp_restored


def _parse(document: Union[str, bytes, Mapping[str, Any]]) -> Mapping[str, Any]:
    """Parsuje JSON (jeśli trzeba) i sprawdza czy wynik jest obiektem."""
    if isinstance(document, (str, bytes, bytearray)):
        try:
            document = json.loads(document)
        except (ValueError, UnicodeDecodeError) as e:
            raise MalformedSnapshot(f"Snapshot is not valid JSON: {e}") from e
        except RecursionError as e:
            # json.loads rekurencyjnie schodzi w zagnieżdżone tablice/obiekty
            raise MalformedSnapshot("Snapshot is nested too deeply") from e

    if not isinstance(document, Mapping):
        raise MalformedSnapshot(
            f"Snapshot must be a JSON object, got {type(document).__name__}"
        )
    return document


def _read_radius(data: Mapping[str, Any], expected_radius: Optional[int]) -> int:
    """Odczytuje i waliduje promień dokumentu."""
    radius = data.get("radius", expected_radius)
    if radius is None:
        raise MalformedSnapshot("Snapshot has no 'radius'")

    # bool jest podklasą int - odrzucamy "radius": true
    if not isinstance(radius, int) or isinstance(radius, bool) or radius < 0:
        raise MalformedSnapshot(f"Invalid radius: {radius!r}")

    if expected_radius is not None and radius != expected_radius:
        raise MalformedSnapshot(
            f"Snapshot radius {radius} does not match map radius {expected_radius}"
        )
    return radius


def _read_cells(cells_raw: Mapping[str, Any]) -> Dict[HexCoord, Terrain]:
    """Parsuje klucze "q,r" i tagi terenu."""
    cells: Dict[HexCoord, Terrain] = {}
    for key, tag in cells_raw.items():
        if not isinstance(key, str):
            raise MalformedSnapshot(f"Invalid coordinate key: {key!r}")
        try:
            pos = HexCoord.from_key(key)
        except ValueError as e:
            raise MalformedSnapshot(str(e)) from e
        try:
            cells[pos] = Terrain.parse(tag)
        except ValueError as e:
            raise MalformedSnapshot(f"Cell {key}: {e}") from e
    return cells


# ─────────────────────────────────────────────────────────────────────────────
# PLIKI
# ─────────────────────────────────────────────────────────────────────────────

def save_snapshot(hex_map: HexMap, filepath: Union[str, Path], indent: Optional[int] = 2) -> Path:
    """
    Zapisuje snapshot do pliku JSON.

    Args:
        hex_map: Mapa do zapisania
        filepath: Ścieżka do pliku (katalogi są tworzone)
        indent: Wcięcie JSON

    Returns:
        Path: Ścieżka zapisanego pliku
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(encode(hex_map), f, indent=indent, ensure_ascii=False)

    return path


def load_snapshot(filepath: Union[str, Path], expected_radius: Optional[int] = None) -> HexMap:
    """
    Wczytuje mapę z pliku JSON.

    Raises:
        FileNotFoundError: Jeśli plik nie istnieje
        MalformedSnapshot: Jeśli zawartość nie jest poprawnym snapshotem
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        return decode(f.read(), expected_radius=expected_radius)
