from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from boardroom.application.use_cases.health_check import UNHEALTHY, HealthChecks
from boardroom.wiring.dependencies import get_health_checks

router = APIRouter(prefix="/health")


@router.get("")
def health(checks: HealthChecks = Depends(get_health_checks)) -> JSONResponse:
    result = checks.quick()
    return JSONResponse(result, status_code=503 if result["status"] == UNHEALTHY else 200)


@router.get("/detailed")
def health_detailed(checks: HealthChecks = Depends(get_health_checks)) -> JSONResponse:
    result = checks.run_all()
    # degraded still serves requests
    return JSONResponse(result, status_code=503 if result["status"] == UNHEALTHY else 200)
