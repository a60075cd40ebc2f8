"""
Testy dla MapSession - interfejsu kolaboratora.

Testuje edycję, trasy z obozu, reset, eksport/import i dziennik zdarzeń.
"""

import pytest
import json
import sys
import threading
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from guild_map.core.errors import InvalidCoordinate, InvariantViolation, MalformedSnapshot
from guild_map.core.hex_coord import HexCoord, ORIGIN
from guild_map.core.terrain import Terrain
from guild_map.events import MapEventType
from guild_map.session import MapSession, Route


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def session():
    """Sesja z mapą o promieniu 2."""
    return MapSession(radius=2)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: EDYCJA
# ═══════════════════════════════════════════════════════════════════════════

def test_edit_cell_accepts_tag_and_enum(session):
    """edit_cell przyjmuje tag tekstowy i Terrain."""
    session.edit_cell(1, 0, "mountain")
    session.edit_cell(0, 1, Terrain.LAKE)

    assert session.get_cell(1, 0) is Terrain.MOUNTAIN
    assert session.get_cell(0, 1) is Terrain.LAKE


def test_edit_camp_rejected(session):
    """Obozu nie można edytować, mapa bez zmian."""
    with pytest.raises(InvariantViolation):
        session.edit_cell(0, 0, "field")
    assert session.get_cell(0, 0) is Terrain.CAMP


def test_edit_outside_rejected(session):
    """Edycja spoza mapy to InvalidCoordinate."""
    with pytest.raises(InvalidCoordinate):
        session.edit_cell(5, 5, "field")


def test_edit_unknown_tag_rejected(session):
    """Nieznany tag to ValueError."""
    with pytest.raises(ValueError):
        session.edit_cell(1, 0, "swamp")


def test_get_cell_outside_rejected(session):
    """Odczyt spoza mapy to InvalidCoordinate."""
    with pytest.raises(InvalidCoordinate):
        session.get_cell(3, 0)


def test_hex_map_property_is_copy(session):
    """session.hex_map nie pozwala obejść sesji."""
    session.hex_map.set_cell(HexCoord(1, 0), Terrain.LAKE)
    assert session.get_cell(1, 0) is Terrain.UNKNOWN


# ═══════════════════════════════════════════════════════════════════════════
# TEST: TRASY
# ═══════════════════════════════════════════════════════════════════════════

def test_find_route_example(session):
    """Trasa z obozu omija górę w (1, 0)."""
    session.edit_cell(1, 0, "mountain")
    session.edit_cell(1, -1, "field")

    route = session.find_route(2, -1)

    assert isinstance(route, Route)
    assert route.reachable
    assert route.steps == 3
    assert route.path[0] == ORIGIN
    assert route.path[-1] == HexCoord(2, -1)
    assert HexCoord(1, 0) not in route.path


def test_find_route_unreachable_is_not_error(session):
    """Nieosiągalny cel to pusta trasa, nie wyjątek."""
    session.edit_cell(2, 0, "lake")
    route = session.find_route(2, 0)

    assert not route.reachable
    assert route.path == []
    assert route.steps == 0


def test_find_route_invalid_destination_raises(session):
    """Cel spoza mapy jest odróżnialny od braku trasy."""
    with pytest.raises(InvalidCoordinate):
        session.find_route(4, 0)


def test_route_to_dict(session):
    """Route.to_dict używa list [q, r]."""
    data = session.find_route(1, 0).to_dict()
    assert data == {
        "destination": [1, 0],
        "reachable": True,
        "steps": 2,
        "path": [[0, 0], [1, 0]],
    }


def test_route_recomputed_after_edit(session):
    """Po edycji nowa trasa uwzględnia zmiany."""
    assert HexCoord(1, 0) in session.find_route(2, 0).path
    session.edit_cell(1, 0, "mountain")
    assert HexCoord(1, 0) not in session.find_route(2, 0).path


# ═══════════════════════════════════════════════════════════════════════════
# TEST: RESET / STATYSTYKI / LAYOUT
# ═══════════════════════════════════════════════════════════════════════════

def test_reset_map(session):
    """reset_map przywraca stan startowy."""
    session.edit_cell(1, 0, "mountain")
    session.edit_cell(-1, 1, "chest")
    session.reset_map()

    stats = session.stats()
    assert stats["discovered"] == 1
    assert stats["terrain"]["unknown"] == 18
    assert session.get_cell(0, 0) is Terrain.CAMP


def test_stats(session):
    """stats liczy hexy każdego terenu."""
    session.edit_cell(1, 0, "mountain")
    session.edit_cell(0, 1, "mountain")
    stats = session.stats()

    assert stats["radius"] == 2
    assert stats["cells"] == 19
    assert stats["discovered"] == 3
    assert stats["terrain"]["mountain"] == 2
    assert stats["terrain"]["camp"] == 1


def test_layout(session):
    """layout zwraca pozycję i wygląd każdego hexa."""
    layout = session.layout()
    assert len(layout) == 19

    camp = next(cell for cell in layout if cell["q"] == 0 and cell["r"] == 0)
    assert camp["x"] == 0 and camp["y"] == 0
    assert camp["terrain"] == "camp"
    assert camp["color"] == "#4ade80"
    assert len(camp["corners"]) == 6


def test_render_ascii_with_route(session):
    """Widok ASCII pokazuje trasę."""
    route = session.find_route(2, 0)
    text = session.render_ascii(route)
    assert text.count("*") == 2


# ═══════════════════════════════════════════════════════════════════════════
# TEST: EKSPORT / IMPORT
# ═══════════════════════════════════════════════════════════════════════════

def test_export_import_round_trip(session):
    """Eksport jednej sesji importuje się do drugiej."""
    session.edit_cell(1, 0, "mountain")
    session.edit_cell(-2, 2, "enemy")
    document = session.export_snapshot()

    other = MapSession(radius=2)
    result = other.import_snapshot(document)

    assert result.ok
    assert result.error is None
    assert other.hex_map.cells() == session.hex_map.cells()


def test_import_json_text(session):
    """Import przyjmuje tekst JSON."""
    text = json.dumps({"radius": 2, "cells": {"1,0": "lake"}})
    assert session.import_snapshot(text).ok
    assert session.get_cell(1, 0) is Terrain.LAKE


def test_import_missing_cells_keeps_map(session):
    """Dokument bez cells - błąd, poprzednia mapa nietknięta."""
    session.edit_cell(1, 0, "mountain")
    before = session.hex_map.cells()

    result = session.import_snapshot({"radius": 2, "timestamp": "2026-10-18T00:00:00"})

    assert not result.ok
    assert isinstance(result.error, MalformedSnapshot)
    assert result.hex_map is None
    assert session.hex_map.cells() == before


@pytest.mark.parametrize("document", [
    "not json at all",
    "[]",
    {"radius": 3, "cells": {}},
    {"radius": 2, "cells": {"1,0": "volcano"}},
    "[" * 200000,
])
def test_import_never_raises(session, document):
    """Import złego dokumentu zwraca błąd zamiast rzucać."""
    result = session.import_snapshot(document)
    assert not result.ok
    assert session.get_cell(0, 0) is Terrain.CAMP


def test_import_deeply_nested_json_is_rejected(session):
    """Głęboko zagnieżdżony JSON to zwykły błąd importu, mapa bez zmian."""
    session.edit_cell(1, 0, "field")
    result = session.import_snapshot("[" * 200000)

    assert not result.ok
    assert isinstance(result.error, MalformedSnapshot)
    assert session.get_cell(1, 0) is Terrain.FIELD


def test_import_restores_camp(session):
    """Import nadpisujący obóz jest korygowany i zgłaszany."""
    result = session.import_snapshot({"radius": 2, "cells": {"0,0": "mountain"}})

    assert result.ok
    assert result.camp_restored
    assert session.get_cell(0, 0) is Terrain.CAMP


def test_save_and_load(session, tmp_path):
    """Zapis do pliku i odczyt w nowej sesji."""
    session.edit_cell(1, -1, "signal")
    path = session.save(tmp_path / "guild_map.json")

    other = MapSession(radius=2)
    result = other.load(path)

    assert result.ok
    assert other.get_cell(1, -1) is Terrain.SIGNAL


def test_load_invalid_utf8_is_import_error(session, tmp_path):
    """Plik z niepoprawnym UTF-8 to błąd dokumentu, nie wyjątek."""
    path = tmp_path / "broken.json"
    path.write_bytes(b'{"radius": 2, "cells": {"1,0": "\xff\xfe"}}')

    result = session.load(path)

    assert not result.ok
    assert isinstance(result.error, MalformedSnapshot)
    assert session.journal.events[-1].event_type is MapEventType.SNAPSHOT_REJECTED


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DZIENNIK
# ═══════════════════════════════════════════════════════════════════════════

def test_journal_records_operations(session):
    """Każda operacja trafia do dziennika."""
    session.edit_cell(1, 0, "mountain")
    with pytest.raises(InvariantViolation):
        session.edit_cell(0, 0, "lake")
    session.find_route(2, -1)
    session.find_route(1, 0)
    session.reset_map()
    session.export_snapshot()
    session.import_snapshot("{")

    types = [e.event_type for e in session.journal.events]
    assert types == [
        MapEventType.MAP_CREATED,
        MapEventType.CELL_EDITED,
        MapEventType.CELL_EDIT_REJECTED,
        MapEventType.ROUTE_FOUND,
        MapEventType.ROUTE_NOT_FOUND,
        MapEventType.MAP_RESET,
        MapEventType.SNAPSHOT_EXPORTED,
        MapEventType.SNAPSHOT_REJECTED,
    ]


def test_journal_cell_edit_details(session):
    """CELL_EDITED zapisuje poprzedni teren."""
    session.edit_cell(1, 0, "field")
    session.edit_cell(1, 0, "mine")

    edits = session.journal.get_events_at(1, 0)
    assert [e.data["previous"] for e in edits] == ["unknown", "field"]
    assert edits[-1].to_dict() == {
        "seq": 2,
        "type": "CELL_EDITED",
        "position": [1, 0],
        "data": {"terrain": "mine", "previous": "field"},
    }


def test_journal_save(session, tmp_path):
    """Dziennik zapisuje się do JSON."""
    session.edit_cell(1, 0, "field")
    path = tmp_path / "out" / "journal.json"
    session.save_journal(path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["metadata"]["radius"] == 2
    assert len(data["events"]) == 2
    assert data["events"][1]["type"] == "CELL_EDITED"


def test_journal_entries_filter_by_hex(session):
    """journal_entries zwraca cały dziennik albo zdarzenia jednego hexa."""
    session.edit_cell(1, 0, "field")
    session.edit_cell(0, 1, "lake")
    session.find_route(1, 0)

    everything = session.journal_entries()
    only_hex = session.journal_entries(1, 0)

    assert len(everything["events"]) == 4
    assert [e["type"] for e in only_hex["events"]] == ["CELL_EDITED", "ROUTE_FOUND"]
    assert only_hex["metadata"]["radius"] == 2


# ═══════════════════════════════════════════════════════════════════════════
# TEST: WSPÓŁBIEŻNOŚĆ
# ═══════════════════════════════════════════════════════════════════════════

def test_concurrent_import_and_routing():
    """Trasy liczone w trakcie importów zawsze widzą całą mapę."""
    session = MapSession(radius=3)
    walled = {"radius": 3, "cells": {pos.to_key(): "lake" for pos in ORIGIN.neighbors()}}
    open_doc = {"radius": 3, "cells": {}}
    errors = []

    def importer():
        for i in range(50):
            session.import_snapshot(walled if i % 2 else open_doc)

    def router():
        for _ in range(50):
            route = session.find_route(3, 0)
            # Albo pełna trasa (mapa otwarta), albo brak (obóz otoczony)
            if route.path and len(route.path) != 4:
                errors.append(route.path)

    threads = [threading.Thread(target=importer), threading.Thread(target=router)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
