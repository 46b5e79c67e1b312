"""
REST API Gateway for MEKD
Provides HTTP API and dashboard for regional corruption / IPM estimates
"""
import logging
import math
from typing import Any, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from mekd import __version__
from mekd.core.engine import get_engine
from mekd.core.exceptions import format_failure_message
from mekd.executors.input_parser.executor import build_indicator_set
from mekd.executors.input_parser.normalization import normalize_numeric_text, parse_number
from mekd.executors.input_validator.validation import validate
from mekd.gateway.api.dashboard import dashboard_response
from mekd.gateway.api.settings import configure_logging, get_settings, router as settings_router

logger = logging.getLogger(__name__)

RawValue = Optional[Union[float, str]]


app = FastAPI(
    title="MEKD API",
    description="Model Estimasi Korupsi Daerah: regional corruption and IPM estimates from fiscal indicators",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(settings_router)


# Request/Response models
class IndicatorForm(BaseModel):
    """Raw form values as typed by the user."""
    pad: RawValue = None
    dau: RawValue = None
    dak: RawValue = None
    dbh: RawValue = None
    belanja: RawValue = None
    pendapatan: RawValue = None
    temuan: RawValue = None
    penduduk: RawValue = None
    asn: RawValue = None
    pdrb: RawValue = None
    usia: RawValue = None
    jawa: RawValue = None
    tipe: Optional[str] = None


class TextRequest(BaseModel):
    text: Optional[str] = None


def finite_or_none(value: Any) -> Any:
    """JSON has no NaN/inf; non-finite numbers are sent as null."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: finite_or_none(v) for k, v in value.items()}
    if isinstance(value, list):
        return [finite_or_none(v) for v in value]
    return value


# Endpoints
@app.get("/health")
async def health():
    return {"status": "ok", "service": "mekd"}


@app.get("/")
async def dashboard():
    """Serve the estimation dashboard"""
    return dashboard_response(get_engine().get_indicator_specs())


@app.get("/api/indicators")
async def list_indicators():
    """Indicator knowledge base"""
    return get_engine().knowledge.get("indicators", {})


@app.post("/api/normalize")
async def normalize_text(request: TextRequest):
    """Reformat text as the user types"""
    return {"text": normalize_numeric_text(request.text)}


@app.post("/api/parse")
async def parse_text(request: TextRequest):
    """Parse Indonesian formatted text to a number"""
    return {"value": finite_or_none(parse_number(request.text))}


@app.post("/api/validate")
async def validate_form(form: IndicatorForm):
    """Check a form without estimating"""
    indicators = build_indicator_set(form.model_dump(), get_engine().get_indicator_specs())
    result = validate(indicators)
    return finite_or_none({
        **result.to_dict(),
        "message": "" if result.valid else format_failure_message(result.failures),
    })


@app.post("/api/estimate")
async def estimate(form: IndicatorForm):
    """Parse, validate and estimate"""
    engine = get_engine()
    result = await engine.run_workflow("estimate", inputs={"form": form.model_dump()})

    if not result["success"]:
        failures = result["stages"].get("validate", {}).get("outputs", {}).get("failures")
        if failures:
            raise HTTPException(
                status_code=422,
                detail={"message": result["error"], "failures": failures}
            )
        raise HTTPException(status_code=500, detail={"message": result["error"]})

    return finite_or_none(result["outputs"])


def serve():
    """Run the API with uvicorn"""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("=" * 60)
    logger.info(f"MEKD API v{__version__}")
    logger.info(f"Dashboard: http://localhost:{settings.port}/")
    logger.info(f"Health: http://localhost:{settings.port}/health")
    logger.info("=" * 60)

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()
