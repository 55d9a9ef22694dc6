# orderflow/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health():
    """Liveness probe. No auth, no database access."""
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
