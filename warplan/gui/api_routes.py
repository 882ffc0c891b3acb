"""API routes for the WarPlan service."""

import dataclasses
import os
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from warplan.config import ConfigError, WarPlanSettings, load_settings
from warplan.main import make_dice, recommend
from warplan.parsing import VectorParseError, parse_attack_vector, parse_attack_vectors
from warplan.planners.allocation import PlanningError, PlanningTimeout
from warplan.predictor import predict_attack
from warplan.reports.run_report import build_war_report
from warplan.validators import InputLimitError, validate_run_parameters, validate_vectors
from warplan.war_sim import simulate_war

router = APIRouter()

# Process pool size a client may ask for
MAX_REQUEST_WORKERS = os.cpu_count() or 1

# Request models
class PredictRequest(BaseModel):
    vector: str = Field(..., examples=["7:3,3,1"])
    bonus_units: int = Field(0, ge=0)
    iterations: Optional[int] = None
    seed: Optional[int] = None

class SimulateRequest(BaseModel):
    vectors: List[str] = Field(..., examples=[["7:1,1,2", "4:5,1"]])
    bonus_units: int = Field(0, ge=0)
    iterations: Optional[int] = None
    seed: Optional[int] = None

class PlanRequest(BaseModel):
    vectors: List[str] = Field(..., examples=[["3:2,2", "4:1,1,1,1", "2:2,1,2"]])
    bonus_units: int = Field(..., ge=0)
    likelihood_threshold: float = 0.0
    iterations: Optional[int] = None
    seed: Optional[int] = None
    workers: Optional[int] = Field(None, ge=1, le=MAX_REQUEST_WORKERS)
    deadline_seconds: Optional[float] = Field(None, gt=0)


def _settings(request: BaseModel) -> WarPlanSettings:
    """Environment-derived defaults with the request's explicit fields on top."""
    try:
        base = load_settings()
    except ConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))
    fields = {f.name for f in dataclasses.fields(WarPlanSettings)}
    updates = {
        k: v for k, v in request.model_dump().items()
        if k in fields and v is not None
    }
    return dataclasses.replace(base, **updates)


# ============================================================================
# Predictions
# ============================================================================

@router.post("/predict")
def predict(request: PredictRequest) -> Dict[str, Any]:
    """Predict one vector at one bonus level."""
    settings = _settings(request)
    try:
        vector = parse_attack_vector(request.vector)
        validate_run_parameters(settings.iterations, settings.bonus_units, settings.max_bonus_units)
        validate_vectors([vector], settings)
    except (VectorParseError, InputLimitError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    prediction = predict_attack(
        vector,
        settings.bonus_units,
        settings.iterations,
        dice=make_dice(settings),
        debug=settings.debug,
    )
    return {
        "vector": vector.to_dict(),
        "bonus_units": settings.bonus_units,
        "iterations": settings.iterations,
        "prediction": prediction.to_dict(),
    }


@router.post("/simulate")
def simulate(request: SimulateRequest) -> Dict[str, Any]:
    """Predict every vector independently, in request order."""
    settings = _settings(request)
    try:
        vectors = parse_attack_vectors(request.vectors)
        validate_run_parameters(settings.iterations, settings.bonus_units, settings.max_bonus_units)
        validate_vectors(vectors, settings)
    except (VectorParseError, InputLimitError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    predictions = simulate_war(
        vectors,
        settings.iterations,
        bonus_units=settings.bonus_units,
        dice=make_dice(settings),
        debug=settings.debug,
    )
    return build_war_report(vectors, predictions, settings.iterations, settings.bonus_units).to_dict()


# ============================================================================
# Planning
# ============================================================================

@router.post("/plan")
def plan(request: PlanRequest) -> Dict[str, Any]:
    """Search the best bonus allocation; a zero pool falls back to simulation."""
    settings = _settings(request)
    try:
        vectors = parse_attack_vectors(request.vectors)
        report = recommend(vectors, settings)
    except (VectorParseError, InputLimitError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PlanningTimeout as e:
        raise HTTPException(status_code=504, detail=str(e))
    except PlanningError as e:
        raise HTTPException(status_code=500, detail=f"Planning aborted: {e}")
    return report.to_dict()
