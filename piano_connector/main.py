"""
Piano Connector API — request preview over HTTP

Endpoints:
    GET  /health               — Liveness
    POST /piano/{operation}    — Map an event (page, track, user) to the
                                 Piano collection request, without sending it
"""

from fastapi import FastAPI, HTTPException
import logging

from piano_connector.config import PianoSettings
from piano_connector.connector import PianoConnector
from piano_connector.errors import PianoError, UnsupportedOperation
from piano_connector.models import EdgeeRequest, RenderRequest

logger = logging.getLogger(__name__)

app = FastAPI(title="Piano Connector API", version="1.0.0")

OPERATIONS = ("page", "track", "user")


def _get_connector() -> PianoConnector:
    return PianoConnector(PianoSettings.from_env())


@app.get("/health")
def health():
    return {"ok": True, "service": "piano-connector"}


@app.post("/piano/{operation}", response_model=EdgeeRequest)
def render(operation: str, request: RenderRequest):
    """Build the request the host would send to Piano for this event."""
    if operation not in OPERATIONS:
        raise HTTPException(status_code=404, detail=f"Unknown operation '{operation}'")

    handler = getattr(_get_connector(), operation)
    try:
        return handler(request.event, request.settings)
    except UnsupportedOperation as e:
        raise HTTPException(status_code=501, detail=str(e))
    except PianoError as e:
        logger.info(f"[Piano API] {operation} event {request.event.uuid} rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
