"""
Snapshot router - eksport i import mapy.
"""

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from typing import Dict, Any

from api.state import get_session


router = APIRouter()


@router.get("/snapshot")
def export_snapshot() -> Dict[str, Any]:
    """
    Zwraca snapshot mapy ({version, radius, cells, timestamp}).
    """
    return get_session().export_snapshot()


@router.post("/snapshot")
async def import_snapshot(request: Request):
    """
    Importuje snapshot z surowego body (JSON).

    Body jest czytane bez walidacji FastAPI - zły dokument to
    odpowiedź 400 z opisem, a mapa zostaje bez zmian. Samo
    dekodowanie i podmiana mapy idą w puli wątków, jak pozostałe
    endpointy.
    """
    raw = await request.body()
    result = await run_in_threadpool(get_session().import_snapshot, raw)

    if not result.ok:
        return JSONResponse(
            status_code=400,
            content={"error": "MalformedSnapshot", "detail": str(result.error)},
        )

    return {
        "imported": True,
        "camp_restored": result.camp_restored,
        "discovered": result.hex_map.discovered_count(),
    }
