"""
api_server.py - FastAPI Surface for the Display Core
=====================================================

Exposes fatigue scale conversion, performance decomposition and
timezone rendering to the dashboard frontend.

Endpoints:
- GET  /api/scales - KSS / Samn-Perelli / PVT for a performance score
- POST /api/decompose - Factor contributions for one timeline point
- POST /api/decompose/timeline - Contributions + FHA for a timeline
- POST /api/time/triple - Zulu/local/home strings for a flight segment
- POST /api/time/sleep-triple - Zulu/local/home strings for a sleep window
- GET  /api/time/convert - UTC timestamp in an IANA timezone
- GET  /api/airports/{iata_code} - Airport timezone & coordinates

Usage:
    uvicorn api.api_server:app --reload --host 0.0.0.0 --port 8000
"""

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
import logging
import os
import pytz

from core import (
    ModelConfig,
    FatigueScaleConverter,
    PerformanceDecomposer,
    AirportDirectory,
    fha_summary,
    performance_color,
)
from core.timezones import (
    utc_to_timezone,
    utc_day_hour,
    utc_offset_hours,
    utc_to_zulu,
    get_acclimatized_timezone,
    build_triple_time,
    build_sleep_triple_time,
    coerce_backend_state,
)
from models.data_models import AcclimatizationContext, PerformancePoint

logger = logging.getLogger(__name__)

# ============================================================================
# FASTAPI APP INITIALIZATION
# ============================================================================

CONFIG = ModelConfig.from_preset(os.environ.get("FATIGUE_CONFIG_PRESET", "default"))

scale_converter = FatigueScaleConverter.from_config(CONFIG)
decomposer = PerformanceDecomposer(CONFIG.scale_calibration)
airport_directory = AirportDirectory()

app = FastAPI(
    title="Fatigue Insight API",
    description="Fatigue scale conversion, performance decomposition and EASA timezone rendering",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
        "*"  # For development - restrict in production!
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class ScaleReadingResponse(BaseModel):
    value: float
    label: str
    severity: str  # "success", "warning", "critical"


class ScalesResponse(BaseModel):
    performance: float
    risk_level: str  # "low", "moderate", "high", "critical", "extreme"
    color: str       # HSL string for chart cells
    action: str      # recommended roster action for the risk level
    action_description: str
    kss: ScaleReadingResponse
    samn_perelli: ScaleReadingResponse
    reaction_time: ScaleReadingResponse
    reaction_time_bar_pct: float


class TimelinePointRequest(BaseModel):
    """One backend timeline point (values as computed by the fatigue model)"""
    performance: float
    sleep_pressure: float = 0.0
    circadian: float = 0.0
    sleep_inertia: float = 0.0
    time_on_task_penalty: float = 0.0
    hours_on_duty: float = 0.0


class DecompositionResponse(BaseModel):
    performance: float
    hours_on_duty: float
    s_contribution: float
    c_contribution: float
    w_contribution: float
    tot_contribution: float
    unmodeled_deficit: float
    alert_remaining: float


class TimelineDecompositionRequest(BaseModel):
    points: List[TimelinePointRequest]


class TimelineDecompositionResponse(BaseModel):
    points: List[DecompositionResponse]
    fha: int            # Fatigue Hazard Area, %-minutes
    fha_label: str
    fha_severity: str


class AcclimatizationRequest(BaseModel):
    hours_away_from_base: float = 0.0
    backend_state: Optional[str] = None  # 'acclimatized', 'unacclimatized', 'unknown', 'departed'


class SegmentTimeRequest(BaseModel):
    departure_utc: str  # UTC ISO format
    arrival_utc: str    # UTC ISO format
    departure_timezone: str
    arrival_timezone: str
    home_base_timezone: str
    departure_code: str
    arrival_code: str
    acclimatization: Optional[AcclimatizationRequest] = None


class SleepTimeRequest(BaseModel):
    sleep_start_utc: str
    sleep_end_utc: str
    location_timezone: str
    home_base_timezone: str
    acclimatization: Optional[AcclimatizationRequest] = None


class TimeTripleResponse(BaseModel):
    zulu: str   # "HH:mmZ – HH:mmZ"
    local: str
    home: str
    local_is_home_ref: bool
    reference_timezone: str  # body-clock reference under ORO.FTL.105


class ConvertedTimeResponse(BaseModel):
    zulu: str
    hh_mm: str
    day: int
    hour: float
    utc_day: int
    utc_hour: float


class AirportResponse(BaseModel):
    """Airport information from the airportsdata database"""
    code: str           # IATA code (e.g., "LHR")
    timezone: str       # IANA timezone (e.g., "Europe/London")
    utc_offset_hours: Optional[float] = None  # Current UTC offset (accounts for DST)
    latitude: float = 0.0
    longitude: float = 0.0
    name: str = ""
    city: str = ""
    country: str = ""


# ============================================================================
# HELPERS
# ============================================================================

def _to_context(request: Optional[AcclimatizationRequest]) -> Optional[AcclimatizationContext]:
    if request is None:
        return None
    return AcclimatizationContext(
        hours_away_from_base=request.hours_away_from_base,
        backend_state=coerce_backend_state(request.backend_state),
    )


def _reference_timezone(ctx: Optional[AcclimatizationContext], location_tz: str, home_base_tz: str) -> str:
    return get_acclimatized_timezone(AcclimatizationContext(
        hours_away_from_base=ctx.hours_away_from_base if ctx else 0.0,
        location_timezone=location_tz,
        home_base_timezone=home_base_tz,
        backend_state=ctx.backend_state if ctx else None,
    ), CONFIG.easa_framework)


def _decomposition_response(point: TimelinePointRequest) -> DecompositionResponse:
    decomp = decomposer.decompose(PerformancePoint(**point.model_dump()))
    return DecompositionResponse(**decomp.get_component_breakdown())


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now(pytz.utc).isoformat()}


@app.get("/api/scales", response_model=ScalesResponse)
async def get_scales(performance: float = Query(..., description="Model performance score (20-100)")):
    readings = scale_converter.convert(performance)
    action = scale_converter.risk_action(performance)
    return ScalesResponse(
        performance=performance,
        risk_level=scale_converter.classify_performance(performance),
        color=performance_color(performance),
        action=action["action"],
        action_description=action["description"],
        kss=ScaleReadingResponse(**readings.kss.to_dict()),
        samn_perelli=ScaleReadingResponse(**readings.samn_perelli.to_dict()),
        reaction_time=ScaleReadingResponse(**readings.reaction_time.to_dict()),
        reaction_time_bar_pct=readings.reaction_time_bar_pct,
    )


@app.post("/api/decompose", response_model=DecompositionResponse)
async def decompose_point(point: TimelinePointRequest):
    return _decomposition_response(point)


@app.post("/api/decompose/timeline", response_model=TimelineDecompositionResponse)
async def decompose_timeline(request: TimelineDecompositionRequest):
    summary = fha_summary([p.performance for p in request.points], CONFIG.hazard_params)
    return TimelineDecompositionResponse(
        points=[_decomposition_response(p) for p in request.points],
        fha=summary['fha'],
        fha_label=summary['label'],
        fha_severity=summary['severity'],
    )


@app.post("/api/time/triple", response_model=TimeTripleResponse)
async def segment_triple_time(request: SegmentTimeRequest):
    ctx = _to_context(request.acclimatization)
    triple = build_triple_time(
        request.departure_utc,
        request.arrival_utc,
        request.departure_timezone,
        request.arrival_timezone,
        request.home_base_timezone,
        request.departure_code,
        request.arrival_code,
        ctx,
    )
    reference = _reference_timezone(ctx, request.arrival_timezone, request.home_base_timezone)
    return TimeTripleResponse(
        zulu=triple.zulu,
        local=triple.local,
        home=triple.home,
        local_is_home_ref=triple.local_is_home_ref,
        reference_timezone=reference,
    )


@app.post("/api/time/sleep-triple", response_model=TimeTripleResponse)
async def sleep_triple_time(request: SleepTimeRequest):
    ctx = _to_context(request.acclimatization)
    triple = build_sleep_triple_time(
        request.sleep_start_utc,
        request.sleep_end_utc,
        request.location_timezone,
        request.home_base_timezone,
        ctx,
    )
    reference = _reference_timezone(ctx, request.location_timezone, request.home_base_timezone)
    return TimeTripleResponse(
        zulu=triple.zulu,
        local=triple.local,
        home=triple.home,
        local_is_home_ref=triple.local_is_home_ref,
        reference_timezone=reference,
    )


@app.get("/api/time/convert", response_model=ConvertedTimeResponse)
async def convert_time(
    iso: str = Query(..., description="UTC ISO 8601 timestamp"),
    tz: str = Query("UTC", description="IANA timezone"),
):
    """Bad timestamps come back as empty strings / zeros rather than errors."""
    result = utc_to_timezone(iso, tz)
    utc_day, utc_hour = utc_day_hour(iso)
    return ConvertedTimeResponse(
        zulu=utc_to_zulu(iso),
        hh_mm=result.hh_mm,
        day=result.day,
        hour=result.hour,
        utc_day=utc_day,
        utc_hour=utc_hour,
    )


@app.get("/api/airports/{iata_code}", response_model=AirportResponse)
async def get_airport(iata_code: str):
    airport = airport_directory.get(iata_code)
    if airport is None:
        raise HTTPException(status_code=404, detail=f"Airport '{iata_code.upper()}' not found")

    return AirportResponse(
        code=airport.code,
        timezone=airport.timezone,
        utc_offset_hours=utc_offset_hours(airport.timezone),
        latitude=airport.latitude,
        longitude=airport.longitude,
        name=airport.name,
        city=airport.city,
        country=airport.country,
    )


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Use the PORT env var or default to 8000 for local dev
    port = int(os.environ.get("PORT", 8000))
    logger.info(f"Starting Fatigue Insight API on http://localhost:{port} (docs at /docs)")

    uvicorn.run(app, host="0.0.0.0", port=port)
