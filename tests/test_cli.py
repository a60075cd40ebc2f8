"""
Testy dla CLI (main.py).
"""

import json
import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from main import main


DATA_PATH = str(Path(__file__).parent.parent / "data")


def test_cli_route_and_save(tmp_path, capsys):
    """--set, --route i --save w jednym wywołaniu."""
    out_file = tmp_path / "guild_map.json"
    code = main([
        "--data", DATA_PATH, "--radius", "2",
        "--set", "1", "0", "mountain",
        "--set", "1", "-1", "field",
        "--route", "2", "-1",
        "--show",
        "--save", str(out_file),
    ])

    output = capsys.readouterr().out
    assert code == 0
    assert "Route to (2, -1): 3 steps" in output
    assert "^" in output

    document = json.loads(out_file.read_text(encoding="utf-8"))
    assert document["radius"] == 2
    assert document["cells"]["1,0"] == "mountain"


def test_cli_no_path(capsys):
    code = main(["--data", DATA_PATH, "--radius", "2", "--set", "2", "0", "lake", "--route", "2", "0"])
    assert code == 0
    assert "No path available" in capsys.readouterr().out


def test_cli_rejects_camp_edit(capsys):
    code = main(["--data", DATA_PATH, "--radius", "2", "--set", "0", "0", "lake"])
    assert code == 1
    assert "Cannot set" in capsys.readouterr().err


def test_cli_rejects_malformed_snapshot(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text('{"radius": 2}', encoding="utf-8")

    code = main(["--data", DATA_PATH, "--radius", "2", "--load", str(bad)])
    assert code == 1
    assert "Error importing map data" in capsys.readouterr().err


def test_cli_load_round_trip(tmp_path, capsys):
    saved = tmp_path / "map.json"
    main(["--data", DATA_PATH, "--radius", "3", "--set", "0", "2", "chest", "--save", str(saved)])
    capsys.readouterr()

    code = main(["--data", DATA_PATH, "--radius", "3", "--load", str(saved)])
    assert code == 0
    assert "Discovered: 2/37" in capsys.readouterr().out


def test_cli_save_uses_configured_filename(tmp_path, monkeypatch, capsys):
    """--save bez argumentu zapisuje pod snapshot.filename z defaults.yaml."""
    monkeypatch.chdir(tmp_path)
    code = main(["--data", DATA_PATH, "--radius", "1", "--save"])

    assert code == 0
    assert (tmp_path / "guild_map.json").exists()


def test_cli_load_invalid_utf8(tmp_path, capsys):
    """Plik z bajtami spoza UTF-8 to błąd importu (kod 1), nie traceback."""
    bad = tmp_path / "bad.json"
    bad.write_bytes(b'{"radius": 2, "cells": {"1,0": "\xff\xfe"}}')

    code = main(["--data", DATA_PATH, "--radius", "2", "--load", str(bad)])
    assert code == 1
    assert "Error importing map data" in capsys.readouterr().err


def test_cli_rejects_negative_radius(capsys):
    """Ujemny promień odrzuca już argparse (kod 2)."""
    with pytest.raises(SystemExit) as exc_info:
        main(["--data", DATA_PATH, "--radius", "-1"])

    assert exc_info.value.code == 2
    assert "must be non-negative" in capsys.readouterr().err


def test_cli_saves_journal(tmp_path, capsys):
    journal_file = tmp_path / "journal.json"
    code = main([
        "--data", DATA_PATH, "--radius", "2",
        "--set", "1", "0", "lake",
        "--journal", str(journal_file),
    ])

    assert code == 0
    events = json.loads(journal_file.read_text(encoding="utf-8"))["events"]
    assert [e["type"] for e in events] == ["MAP_CREATED", "CELL_EDITED"]
