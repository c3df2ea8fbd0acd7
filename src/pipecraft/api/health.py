"""Health check endpoints.

Learn: /pingme answers without touching anything (load balancer probe);
/health also verifies the database is reachable.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft import __version__
from pipecraft.db.engine import get_db
from pipecraft.errors import envelope

router = APIRouter()


@router.get("/pingme")
async def pingme():
    return envelope("Pong! Server is up and running.", {"version": __version__})


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return envelope("Health check", {"status": status, **checks})
