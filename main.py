#!/usr/bin/env python3
"""
Guild Map Editor - Entry Point
═══════════════════════════════════════════════════════════════════════════

Edycja mapy hexagonalnej i planowanie tras z obozu z linii poleceń.

Użycie:
    python main.py --show                          # Pusta mapa z defaults.yaml
    python main.py --radius 4 --set 1 0 mountain --route 2 -1 --show
    python main.py --load guild_map.json --route 5 -3
    python main.py --set 2 2 lake --save guild_map.json
    python main.py --verbose                       # Logi DEBUG
    python main.py --set 1 0 lake --journal journal.json

Wynik:
    - Wypisuje mapę ASCII (z trasą jeśli podano --route)
    - Zapisuje snapshot jeśli podano --save
    - Zapisuje dziennik operacji jeśli podano --journal
    - Kod wyjścia 1 gdy import lub edycja się nie powiodły
"""

import argparse
import logging
import sys

from guild_map.core.config_loader import ConfigLoader
from guild_map.core.errors import MapError
from guild_map.core.terrain import Terrain
from guild_map.session import MapSession


def non_negative_int(value: str) -> int:
    """Typ argparse: liczba całkowita >= 0."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Guild Map Editor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--data",
        default="data/",
        help="Folder z plikami YAML (domyślnie: data/)"
    )
    parser.add_argument(
        "--radius",
        type=non_negative_int,
        default=None,
        help="Promień mapy (domyślnie: z defaults.yaml)"
    )
    parser.add_argument(
        "--load",
        metavar="FILE",
        help="Wczytaj snapshot JSON"
    )
    parser.add_argument(
        "--set",
        nargs=3,
        action="append",
        default=[],
        metavar=("Q", "R", "TERRAIN"),
        help=f"Ustaw teren hexa ({', '.join(t.value for t in Terrain if t is not Terrain.CAMP)})"
    )
    parser.add_argument(
        "--route",
        nargs=2,
        type=int,
        metavar=("Q", "R"),
        help="Wyznacz trasę z obozu do (Q, R)"
    )
    parser.add_argument(
        "--save",
        nargs="?",
        const="",
        default=None,
        metavar="FILE",
        help="Zapisz snapshot JSON (bez FILE: snapshot.filename z YAML)"
    )
    parser.add_argument(
        "--journal",
        metavar="FILE",
        help="Zapisz dziennik operacji JSON"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Wypisz mapę ASCII"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Szczegółowy output"
    )
    return parser


def main(argv=None) -> int:
    """Główna funkcja."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - [%(module)s:%(lineno)d] - %(message)s",
    )

    # Załaduj konfigurację
    loader = ConfigLoader(args.data)
    session = MapSession.from_config(loader)
    if args.radius is not None:
        session = MapSession(
            radius=args.radius,
            palette=session.palette,
            hex_size=session.hex_size,
            snapshot_indent=session.snapshot_indent,
        )

    print("=" * 60)
    print("GUILD MAP EDITOR")
    print("=" * 60)
    print(f"Radius: {session.radius}")

    if args.load:
        try:
            result = session.load(args.load)
        except OSError as e:
            print(f"Cannot read {args.load}: {e}", file=sys.stderr)
            return 1
        if not result.ok:
            print(f"Error importing map data: {result.error}", file=sys.stderr)
            return 1
        if result.camp_restored:
            print("Warning: snapshot overwrote the camp at (0, 0); camp restored")

    for q, r, tag in args.set:
        try:
            session.edit_cell(int(q), int(r), tag)
        except (MapError, ValueError) as e:
            print(f"Cannot set ({q}, {r}) to {tag}: {e}", file=sys.stderr)
            return 1

    route = None
    if args.route:
        q, r = args.route
        try:
            route = session.find_route(q, r)
        except MapError as e:
            print(f"Cannot route to ({q}, {r}): {e}", file=sys.stderr)
            return 1

        if route.reachable:
            print(f"Route to ({q}, {r}): {route.steps} steps")
            print("  " + " -> ".join(str(pos) for pos in route.path))
        else:
            print(f"Route to ({q}, {r}): No path available")

    stats = session.stats()
    print(f"Discovered: {stats['discovered']}/{stats['cells']}")

    if args.show:
        print()
        print(session.render_ascii(route))

    if args.save is not None:
        path = session.save(args.save or loader.get_snapshot_config()["filename"])
        print(f"\nSnapshot saved to: {path}")

    if args.journal:
        session.save_journal(args.journal)
        print(f"Journal saved to: {args.journal}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
