"""REST API endpoints serving live Dexcom Share readings"""

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional

from dateutil import parser as date_parser
from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .client import DexcomShareClient
from .config import get_share_config
from .errors import ShareAuthenticationError, ShareError, ShareSessionError
from .types import GlucoseReading

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Dexcom Share Readings API",
    description="Read-only REST API proxying recent glucose readings from Dexcom Share",
    version="1.0.0"
)

# Shared client (created on first use)
_client: Optional[DexcomShareClient] = None
_client_lock = threading.Lock()


def get_client() -> DexcomShareClient:
    """Get or create the shared Dexcom Share client"""
    global _client

    with _client_lock:
        if _client is None:
            try:
                config = get_share_config()
            except ValueError as e:
                logger.error(f"Dexcom Share client is not configured: {e}")
                raise HTTPException(status_code=503, detail=str(e)) from e
            logger.info(f"Connecting to Dexcom Share for user: {config['username']}")
            _client = DexcomShareClient(**config)
    return _client


# Response models
class HealthResponse(BaseModel):
    status: str


class ReadingResponse(BaseModel):
    timestamp: str
    value: int = Field(..., description="Glucose value in mg/dL")
    mmol_l: float = Field(..., description="Glucose value in mmol/L")
    trend: str
    trend_arrow: str


class ReadingsListResponse(BaseModel):
    readings: List[ReadingResponse]
    count: int


def to_response(reading: GlucoseReading) -> ReadingResponse:
    return ReadingResponse(
        timestamp=reading.timestamp.isoformat(),
        value=reading.value,
        mmol_l=reading.mmol_l,
        trend=reading.trend,
        trend_arrow=reading.trend_arrow,
    )


def share_error_to_http(e: ShareError, client: DexcomShareClient) -> HTTPException:
    if isinstance(e, ShareSessionError):
        # Expired session: the next request logs in again
        client.reset_session()
    if isinstance(e, ShareAuthenticationError):
        return HTTPException(status_code=401, detail=f"Dexcom Share login failed: {e}")
    return HTTPException(status_code=502, detail=f"Error fetching readings: {e}")


def parse_since(since: str) -> datetime:
    try:
        parsed = date_parser.isoparse(since)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid since date: {since}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# API endpoints
@app.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(status="healthy")


@app.get("/api/readings", response_model=ReadingsListResponse)
def list_readings(
    minutes: int = Query(1440, ge=1, le=1440, description="Lookback window in minutes"),
    max_count: int = Query(288, ge=1, le=288, description="Maximum number of readings to return"),
    since: Optional[str] = Query(None, description="Only readings at or after this instant (ISO format)"),
    client: DexcomShareClient = Depends(get_client),
):
    """
    Get recent glucose readings, most recent first

    - **minutes**: Lookback window (1-1440)
    - **max_count**: Maximum number of readings (1-288)
    - **since**: Drop readings older than this instant
    """
    start = parse_since(since) if since else None
    try:
        readings = client.get_readings(minutes=minutes, max_count=max_count)
    except ShareError as e:
        logger.error(f"Error fetching readings: {e}", exc_info=True)
        raise share_error_to_http(e, client) from e

    if start is not None:
        readings = [r for r in readings if r.timestamp >= start]

    reading_responses = [to_response(r) for r in readings]
    return ReadingsListResponse(readings=reading_responses, count=len(reading_responses))


@app.get("/api/readings/latest", response_model=ReadingResponse)
def get_latest_reading(client: DexcomShareClient = Depends(get_client)):
    """Get the most recent glucose reading"""
    try:
        reading = client.get_latest_reading()
    except ShareError as e:
        logger.error(f"Error fetching latest reading: {e}", exc_info=True)
        raise share_error_to_http(e, client) from e

    if reading is None:
        raise HTTPException(status_code=404, detail="No readings found")
    return to_response(reading)
