"""
Share Recovery :: FastAPI Service Layer
========================================

Exposes secret recovery over HTTP.

Endpoints:
  GET  /health   - liveness / readiness probe
  POST /recover  - recover the secret from a share record (JSON body,
                   flat or explicit layout)
  GET  /audit    - the audit trail of every recovery served

Integers are returned as decimal strings: share values and secrets
routinely exceed what JSON consumers can hold in a double.
"""

import time
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException
from pydantic import BaseModel

from share_recovery.audit_log import AuditLog
from share_recovery.config import load_config
from share_recovery.errors import RecoveryError
from share_recovery.record import parse_record
from share_recovery.recovery import recover_secret


config = load_config()

app = FastAPI(
    title="Share Recovery",
    description="Shamir secret reconstruction from base-encoded shares",
    version="0.1.0"
)

audit_log = AuditLog()
START_TIME = time.time()


# ── Response Models ──

class PointOut(BaseModel):
    x: str
    y: str


class RecoverResponse(BaseModel):
    threshold: int
    points: List[PointOut]
    secret: str


def _failure(e: RecoveryError) -> HTTPException:
    return HTTPException(status_code=422, detail={
        "stage": e.stage,
        "error": type(e).__name__,
        "message": str(e),
    })


# ── Endpoints ──

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": config.service_name,
        "uptime_seconds": round(time.time() - START_TIME, 2)
    }


@app.post("/recover", response_model=RecoverResponse)
async def recover(payload: Dict[str, Any] = Body(...)):
    """Recover f(0) from the first K shares declared in *payload*."""
    try:
        record = parse_record(payload)
        audit_log.append_entry("parse", "record_loaded", source="http",
                               n=record.keys.n, k=record.keys.k, shares=len(record.shares))
        result = recover_secret(record, audit_log)
    except RecoveryError as e:
        if e.stage == "parse":
            audit_log.append_entry(e.stage, "recovery_failed", source="http",
                                   error=type(e).__name__, message=str(e))
        raise _failure(e)
    return RecoverResponse(
        threshold=result.threshold,
        points=[PointOut(x=str(p.x), y=str(p.y)) for p in result.points],
        secret=str(result.secret),
    )


@app.get("/audit")
async def audit_trail(stage: Optional[str] = None, event: Optional[str] = None, limit: int = 50):
    entries = audit_log.get_entries(stage=stage, event=event, limit=limit)
    return {
        "integrity": audit_log.verify_integrity(),
        "total": len(audit_log),
        "entries": [
            {
                "index": e.index,
                "timestamp": e.timestamp,
                "stage": e.stage,
                "event": e.event,
                "data": e.data,
                "entry_hash": e.entry_hash[:16] + "...",
            }
            for e in entries
        ],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.port)
