#  Mission Control - Health Route
#
#  Liveness probe. Public: the only path outside the bearer credential.
#
#  Depends on: (none)
#  Used by:    app.py

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"ok": True}
