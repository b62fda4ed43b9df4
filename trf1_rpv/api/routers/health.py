# trf1_rpv/api/routers/health.py
from datetime import datetime, timezone
from fastapi import APIRouter, status
from trf1_rpv.models_api.consulta import HealthResponse

router = APIRouter()

@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK, summary="Health Check")
async def health_check():
    # Millisecond precision with a Z suffix, like JavaScript toISOString()
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return HealthResponse(status="ok", timestamp=timestamp)
