"""
API for crowd analysis, forecasts and destination validation.
"""
from datetime import date
from typing import List, Optional

from fastapi import FastAPI, HTTPException

from .....common.schemas import (
    DayPredictionSchema, HourlyPredictionSchema, RedirectDecisionSchema,
    SpotAnalysisSchema, TrafficInfoSchema, TrendAnalysisSchema, ValidateRequest,
)
from ....application.analyzer import CrowdAnalysisService
from ....application.traffic import TrafficEstimator

app = FastAPI()

# Singletons
_service: Optional[CrowdAnalysisService] = None
_traffic: Optional[TrafficEstimator] = None


def init_service(service: CrowdAnalysisService, traffic: Optional[TrafficEstimator] = None):
    global _service, _traffic
    _service = service
    _traffic = traffic


def get_service() -> CrowdAnalysisService:
    if _service is None:
        raise HTTPException(status_code=503, detail="Crowd service not initialized")
    return _service


def get_traffic() -> TrafficEstimator:
    if _traffic is None:
        raise HTTPException(status_code=503, detail="Traffic estimator not initialized")
    return _traffic


@app.get("/crowd/spots", response_model=List[SpotAnalysisSchema], response_model_by_alias=True)
def analyze_all():
    """Analysis of every known spot."""
    service = get_service()
    return [SpotAnalysisSchema.from_domain(a) for a in service.analyze_all()]


@app.get("/crowd/spots/{name}", response_model=SpotAnalysisSchema, response_model_by_alias=True)
def analyze_spot(name: str):
    service = get_service()
    return SpotAnalysisSchema.from_domain(service.analyze_spot(name))


@app.get("/crowd/spots/{name}/predictions", response_model=List[HourlyPredictionSchema],
         response_model_by_alias=True)
def predict_next_24_hours(name: str, base_score: Optional[float] = None):
    """Hourly predictions for the next 24 hours, starting at the current hour."""
    if base_score is not None and not 0 <= base_score <= 100:
        raise HTTPException(status_code=400, detail="base_score must be between 0 and 100")
    service = get_service()
    return [HourlyPredictionSchema.from_domain(p) for p in service.predict_next_24_hours(name, base_score)]


@app.get("/crowd/spots/{name}/day", response_model=DayPredictionSchema, response_model_by_alias=True)
def predict_day(name: str, day: Optional[date] = None):
    service = get_service()
    return DayPredictionSchema.from_domain(service.predict_day(name, day or date.today()))


@app.get("/crowd/spots/{name}/trend", response_model=TrendAnalysisSchema, response_model_by_alias=True)
def analyze_trend(name: str):
    service = get_service()
    return TrendAnalysisSchema.from_domain(service.analyze_trend(name))


@app.post("/validate", response_model=RedirectDecisionSchema, response_model_by_alias=True)
def validate_destination(request: ValidateRequest):
    """
    Checks whether a visitor should be routed to a destination.

    Body example:
    {
        "spotId": "ooty-lake"
    }
    """
    if not request.spot_id:
        raise HTTPException(status_code=400, detail="spotId is required")
    service = get_service()
    return RedirectDecisionSchema.from_domain(service.validate_destination(request.spot_id))


@app.get("/traffic/{location}", response_model=TrafficInfoSchema, response_model_by_alias=True)
def estimate_traffic(location: str):
    traffic = get_traffic()
    return TrafficInfoSchema.from_domain(traffic.estimate(location))
