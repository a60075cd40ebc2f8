"""
Hex map router - odczyt mapy, edycja hexów, reset, trasy i dziennik.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import List, Dict, Any, Optional

from guild_map.core.terrain import Terrain, editable_terrains
from api.state import get_session


router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════
# REQUEST/RESPONSE MODELS
# ═══════════════════════════════════════════════════════════════════════════

class CellEdit(BaseModel):
    """Nowy teren hexa."""
    terrain: Terrain


class CellInfo(BaseModel):
    """Teren pojedynczego hexa."""
    q: int
    r: int
    terrain: Terrain


class RouteResponse(BaseModel):
    """Trasa z obozu do celu."""
    destination: List[int]  # [q, r]
    reachable: bool
    steps: int
    path: List[List[int]]  # [[q, r], ...]


# ═══════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════

@router.get("/terrains")
def get_terrains() -> List[Dict[str, Any]]:
    """
    Zwraca paletę terenów.

    Obóz jest na liście (do legendy), ale ma editable=False.
    """
    session = get_session()
    editable = set(editable_terrains())

    result = []
    for terrain in Terrain:
        style = session.palette[terrain]
        result.append({
            "id": terrain.value,
            "name": style.name,
            "color": style.color,
            "label": style.label,
            "editable": terrain in editable,
        })
    return result


@router.get("/map")
def get_map() -> Dict[str, Any]:
    """
    Zwraca statystyki mapy i teren każdego hexa.
    """
    session = get_session()
    hex_map = session.hex_map
    return {
        "stats": session.stats(),
        "cells": {pos.to_key(): terrain.value for pos, terrain in hex_map.cells().items()},
    }


@router.get("/map/cells/{q}/{r}", response_model=CellInfo)
def get_cell(q: int, r: int) -> CellInfo:
    """Zwraca teren hexa (q, r)."""
    terrain = get_session().get_cell(q, r)
    return CellInfo(q=q, r=r, terrain=terrain)


@router.put("/map/cells/{q}/{r}", response_model=CellInfo)
def edit_cell(q: int, r: int, edit: CellEdit) -> CellInfo:
    """
    Zmienia teren hexa (q, r).

    Errors:
        409 - próba zmiany obozu albo postawienia drugiego
        422 - hex poza mapą
    """
    get_session().edit_cell(q, r, edit.terrain)
    return CellInfo(q=q, r=r, terrain=edit.terrain)


@router.delete("/map")
def reset_map() -> Dict[str, Any]:
    """Czyści mapę (obóz zostaje)."""
    session = get_session()
    session.reset_map()
    return session.stats()


@router.get("/route/{q}/{r}", response_model=RouteResponse)
def get_route(q: int, r: int) -> Dict[str, Any]:
    """
    Wyznacza trasę z obozu do (q, r).

    Brak trasy to poprawna odpowiedź (reachable=False, path=[]).
    """
    return get_session().find_route(q, r).to_dict()


@router.get("/layout")
def get_layout() -> Dict[str, Any]:
    """
    Pozycje hexów w pikselach dla renderera.
    """
    session = get_session()
    return {
        "hex_size": session.hex_size,
        "cells": session.layout(),
    }


@router.get("/journal")
def get_journal(q: Optional[int] = None, r: Optional[int] = None) -> Dict[str, Any]:
    """
    Dziennik operacji sesji.

    Z parametrami ?q=&r= zwraca tylko zdarzenia dotyczące tego hexa.
    """
    return get_session().journal_entries(q, r)
