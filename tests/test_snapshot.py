"""
Testy dla snapshotów mapy (encode / decode / pliki).

Testuje format dokumentu, walidację importu i korektę obozu.
"""

import pytest
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from guild_map.core.errors import MalformedSnapshot
from guild_map.core.hex_coord import HexCoord, ORIGIN
from guild_map.core.hex_map import HexMap
from guild_map.core.snapshot import (
    encode, decode, decode_with_report,
    save_snapshot, load_snapshot, SNAPSHOT_VERSION,
)
from guild_map.core.terrain import Terrain


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def explored_map():
    """Mapa o promieniu 3 z kilkoma odkrytymi hexami."""
    hex_map = HexMap.create(radius=3)
    hex_map.set_cell(HexCoord(1, 0), Terrain.MOUNTAIN)
    hex_map.set_cell(HexCoord(1, -1), Terrain.FIELD)
    hex_map.set_cell(HexCoord(-3, 2), Terrain.LAKE)
    hex_map.set_cell(HexCoord(0, 3), Terrain.ENEMY)
    return hex_map


# ═══════════════════════════════════════════════════════════════════════════
# TEST: ENCODE
# ═══════════════════════════════════════════════════════════════════════════

def test_encode_document_shape(explored_map):
    """Dokument ma version, radius, cells i timestamp."""
    doc = encode(explored_map)

    assert doc["version"] == SNAPSHOT_VERSION
    assert doc["radius"] == 3
    assert len(doc["cells"]) == 37
    assert doc["cells"]["0,0"] == "camp"
    assert doc["cells"]["1,0"] == "mountain"
    assert doc["cells"]["-3,2"] == "lake"
    assert doc["cells"]["2,0"] == "unknown"


def test_encode_timestamp_is_iso():
    """timestamp to ISO-8601."""
    moment = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
    doc = encode(HexMap.create(1), timestamp=moment)
    assert doc["timestamp"] == "2026-10-18T12:00:00+00:00"
    assert datetime.fromisoformat(encode(HexMap.create(1))["timestamp"])


def test_encode_is_json_serializable(explored_map):
    """Dokument przechodzi przez json.dumps."""
    text = json.dumps(encode(explored_map))
    assert json.loads(text)["cells"]["0,3"] == "enemy"


# ═══════════════════════════════════════════════════════════════════════════
# TEST: ROUND TRIP
# ═══════════════════════════════════════════════════════════════════════════

def test_round_trip_dict(explored_map):
    """decode(encode(map)) odtwarza mapę."""
    restored = decode(encode(explored_map))
    assert restored.radius == explored_map.radius
    assert restored.cells() == explored_map.cells()


def test_round_trip_json_text(explored_map):
    """Tekst JSON też jest akceptowany."""
    restored = decode(json.dumps(encode(explored_map)))
    assert restored.cells() == explored_map.cells()


def test_round_trip_file(explored_map, tmp_path):
    """Zapis i odczyt z pliku."""
    path = save_snapshot(explored_map, tmp_path / "maps" / "guild_map.json")
    assert path.exists()

    restored = load_snapshot(path, expected_radius=3)
    assert restored.cells() == explored_map.cells()


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DECODE - TOLERANCJA
# ═══════════════════════════════════════════════════════════════════════════

def test_decode_without_version_and_timestamp():
    """Starsze pliki bez version są akceptowane."""
    hex_map = decode({"radius": 2, "cells": {"1,0": "lake"}})
    assert hex_map.get(HexCoord(1, 0)) is Terrain.LAKE


def test_decode_sparse_cells_fill_unknown():
    """Brakujące hexy stają się unknown, mapa jest totalna."""
    hex_map = decode({"radius": 2, "cells": {"1,0": "lake"}})
    assert len(hex_map) == 19
    assert hex_map.get(HexCoord(-1, 0)) is Terrain.UNKNOWN
    assert hex_map.get(ORIGIN) is Terrain.CAMP


def test_decode_missing_radius_uses_expected():
    """Bez radius używany jest expected_radius."""
    hex_map = decode({"cells": {"1,0": "field"}}, expected_radius=4)
    assert hex_map.radius == 4


def test_decode_repins_camp():
    """Dokument nadpisujący obóz jest korygowany, nie odrzucany."""
    hex_map, camp_restored = decode_with_report(
        {"radius": 2, "cells": {"0,0": "lake", "1,0": "field"}}
    )
    assert camp_restored is True
    assert hex_map.get(ORIGIN) is Terrain.CAMP
    assert hex_map.get(HexCoord(1, 0)) is Terrain.FIELD


def test_decode_report_false_for_clean_document(explored_map):
    """Poprawny dokument nie zgłasza korekty obozu."""
    _, camp_restored = decode_with_report(encode(explored_map))
    assert camp_restored is False


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DECODE - ODRZUCANIE
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("document", [
    "{not json",
    b"\xff\xfe",
    "[1, 2, 3]",
    "42",
    [],
    None,
    {"radius": 2},
    {"radius": 2, "cells": ["0,0"]},
    {"radius": 2, "cells": None},
    {"radius": -1, "cells": {}},
    {"radius": "2", "cells": {}},
    {"radius": True, "cells": {}},
    {"cells": {}},
    {"radius": 2, "cells": {"1;0": "lake"}},
    {"radius": 2, "cells": {"a,b": "lake"}},
    {"radius": 2, "cells": {" 1,0": "lake"}},
    {"radius": 2, "cells": {"+1,0": "lake"}},
    {"radius": 2, "cells": {"3,0": "lake"}},
    {"radius": 2, "cells": {"1,0": "swamp"}},
    {"radius": 2, "cells": {"1,0": 7}},
    {"radius": 2, "cells": {"1,0": "camp"}},
])
def test_decode_rejects_malformed(document):
    """Każdy zły dokument to MalformedSnapshot."""
    with pytest.raises(MalformedSnapshot):
        decode(document)


@pytest.mark.parametrize("document", [
    "[" * 200000,
    '{"cells": ' * 200000,
    b"[" * 200000,
])
def test_decode_rejects_deeply_nested_json(document):
    """Zbyt głębokie zagnieżdżenie to MalformedSnapshot, nie RecursionError."""
    with pytest.raises(MalformedSnapshot, match="nested"):
        decode(document)


def test_decode_rejects_radius_mismatch(explored_map):
    """Promień dokumentu musi pasować do mapy sesji."""
    with pytest.raises(MalformedSnapshot, match="radius"):
        decode(encode(explored_map), expected_radius=5)


def test_malformed_snapshot_is_value_error():
    """MalformedSnapshot da się złapać jako ValueError."""
    with pytest.raises(ValueError):
        decode("{}")


def test_load_missing_file_raises(tmp_path):
    """Brak pliku to FileNotFoundError, nie MalformedSnapshot."""
    with pytest.raises(FileNotFoundError):
        load_snapshot(tmp_path / "missing.json")
