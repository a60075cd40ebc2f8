"""
Algorytm A* (A-star) dla mapy hexagonalnej.

A* znajduje najkrótszą trasę między dwoma hexami,
omijając teren nieprzechodni (góry, jeziora).

Jak działa A*:
    1. Utrzymuj frontier: hexy odkryte, ale jeszcze nie rozwinięte
    2. Dla każdego hexa oblicz:
       - g_cost: liczba kroków od startu
       - h_cost: heurystyka (odległość hex do celu)
       - f_cost: g_cost + h_cost
    3. Zawsze rozwijaj hex z najniższym f_cost
    4. Gdy wybrany hex to cel, odtwórz trasę po rodzicach

Heurystyka:
    HexCoord.distance - dokładna odległość na siatce bez przeszkód.
    Jest dopuszczalna i spójna, więc pierwsze zdjęcie celu z frontiera
    daje trasę o minimalnej liczbie kroków.

Koszt ruchu:
    Każdy krok na sąsiedni hex kosztuje 1 (siatka bez wag).

Rozstrzyganie remisów:
    Z kilku hexów o tym samym f_cost wybierany jest ten, który
    najwcześniej trafił do frontiera. Hex, któremu poprawiono g_cost
    gdy już czekał we frontierze, zachowuje swoje miejsce w kolejce.
    Razem z kolejnością HEX_DIRECTIONS daje to deterministyczną trasę.

Przykład użycia:
    >>> hex_map = HexMap.create(radius=2)
    >>> hex_map.set_cell(HexCoord(1, 0), Terrain.MOUNTAIN)
    >>> find_path(hex_map, HexCoord(0, 0), HexCoord(2, -1))
    [HexCoord(q=0, r=0), HexCoord(q=1, r=-1), HexCoord(q=2, r=-1)]

Edge cases:
    - Start == Goal (przechodni): zwraca [start]
    - Cel nieprzechodni: zwraca [] bez przeszukiwania
    - Brak trasy: zwraca []
    - Start lub Goal poza mapą: InvalidCoordinate
"""

from __future__ import annotations
from typing import List, Dict, Tuple
import heapq
import itertools
import logging

from .hex_coord import HexCoord
from .hex_map import HexMap

logger = logging.getLogger(__name__)

# Wpis w kolejce: (f_cost, numer kolejności we frontierze, pozycja)
_HeapEntry = Tuple[int, int, HexCoord]


def find_path(
    hex_map: HexMap,
    start: HexCoord,
    goal: HexCoord,
) -> List[HexCoord]:
    """
    Znajduje najkrótszą trasę między dwoma hexami.

    Args:
        hex_map: Mapa z informacją o terenie
        start: Pozycja startowa (jej teren nie jest sprawdzany)
        goal: Pozycja docelowa

    Returns:
        List[HexCoord]: Trasa od start do goal (włącznie z oboma).
                        Pusta lista jeśli trasa nie istnieje.

    Raises:
        InvalidCoordinate: Jeśli start lub goal leży poza mapą

    Algorithm:
        1. Waliduj start i goal, odrzuć nieprzechodni cel
        2. Inicjalizuj frontier hexem startowym
        3. Dopóki frontier nie jest pusty:
           a. Weź hex z najniższym (f_cost, kolejność)
           b. Jeśli to goal - odtwórz i zwróć trasę
           c. Dla każdego przechodniego sąsiada:
              - tentative_g = g_cost + 1
              - Jeśli lepszy niż dotychczasowy - zapisz rodzica
                i (ponownie) wpuść sąsiada do frontiera
        4. Frontier pusty - brak trasy

    Complexity:
        Time: O(n log n), n = liczba hexów mapy (3R² + 3R + 1)
        Space: O(n) dla g_costs i parents
    """
    hex_map.require_valid(start)
    hex_map.require_valid(goal)

    # Cel nieprzechodni - nieosiągalny z definicji
    if not hex_map.is_walkable(goal):
        logger.debug("Goal %s is impassable (%s)", goal, hex_map.get(goal))
        return []

    if start == goal:
        return [start]

    # Struktury A*
    counter = itertools.count()
    open_heap: List[_HeapEntry] = []
    # Hexy obecnie we frontierze -> ich aktualny wpis w kolejce
    open_entries: Dict[HexCoord, _HeapEntry] = {}
    g_costs: Dict[HexCoord, int] = {start: 0}
    parents: Dict[HexCoord, HexCoord] = {}

    entry = (start.distance(goal), next(counter), start)
    open_entries[start] = entry
    heapq.heappush(open_heap, entry)

    expanded = 0

    while open_heap:
        entry = heapq.heappop(open_heap)
        _, _, current = entry

        # Nieaktualny wpis (hex ma nowszy f_cost albo już go zdjęto)
        if open_entries.get(current) != entry:
            continue
        del open_entries[current]
        expanded += 1

        if current == goal:
            logger.debug("Path %s -> %s found after %d expansions", start, goal, expanded)
            return _reconstruct_path(parents, start, goal)

        for neighbor in hex_map.get_walkable_neighbors(current):
            tentative_g = g_costs[current] + 1

            if neighbor not in g_costs or tentative_g < g_costs[neighbor]:
                g_costs[neighbor] = tentative_g
                parents[neighbor] = current

                f_cost = tentative_g + neighbor.distance(goal)
                queued = open_entries.get(neighbor)
                # Hex już czekający zachowuje swoje miejsce w kolejności
                order = queued[1] if queued is not None else next(counter)

                new_entry = (f_cost, order, neighbor)
                open_entries[neighbor] = new_entry
                heapq.heappush(open_heap, new_entry)

    logger.debug("No path %s -> %s (%d expansions)", start, goal, expanded)
    return []


def _reconstruct_path(
    parents: Dict[HexCoord, HexCoord],
    start: HexCoord,
    goal: HexCoord
) -> List[HexCoord]:
    """
    Odtwarza trasę od goal do start używając mapy rodziców.

    Returns:
        List[HexCoord]: Trasa od start do goal
    """
    path = [goal]
    current = goal

    while current != start:
        current = parents[current]
        path.append(current)

    path.reverse()
    return path

