from fastapi import APIRouter, Depends
from dependencies import get_repository
from repository.base import ClinicRepository

router = APIRouter(prefix="/admin")


@router.get("/status")
async def connection_status(repository: ClinicRepository = Depends(get_repository)):
    connected = await repository.ping()
    return {
        "database": "connected" if connected else "disconnected",
        # reads are answered from the demo snapshot while disconnected
        "offline_mode": bool(getattr(repository, "degraded", False)) or not connected,
    }
