"""
SDC Engine - FastAPI Application
Stateless endpoints for risk assessment, anonymization and utility measurement
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import List, Dict, Any, Optional
import logging
import structlog

from pydantic import BaseModel, Field

from .config import EngineConfig
from .constants import AttackScenarios, ErrorCodes, SERVICE_NAME, SERVICE_VERSION
from .exceptions import EngineError
from .models import (
    RiskMetrics,
    KAnonymityResult,
    LDiversityResult,
    TClosenessResult,
    DifferentialPrivacyResult,
    SyntheticDataResult,
    UtilityMeasurement,
)
from .privacy.risk import RiskEstimator
from .privacy.k_anonymity import KAnonymizer
from .privacy.l_diversity import LDiversityEnforcer
from .privacy.t_closeness import TClosenessEnforcer
from .privacy.dp_mechanisms import NoiseMechanism
from .privacy.synthetic import SyntheticSampler
from .privacy.utility import UtilityMeter

# Global settings
settings = EngineConfig()

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


# =============================================================================
# REQUEST MODELS
# =============================================================================

class TableRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    quasi_identifiers: List[str] = Field(default_factory=list)


class RiskAssessRequest(TableRequest):
    k_threshold: Optional[int] = None
    attack_scenario: str = AttackScenarios.PROSECUTOR
    population_size: Optional[int] = None


class KAnonymityRequest(TableRequest):
    k_value: int
    suppression_limit: float = 0.1


class LDiversityRequest(TableRequest):
    l_value: int
    sensitive_attribute: str


class TClosenessRequest(TableRequest):
    t_value: float
    sensitive_attribute: str


class DifferentialPrivacyRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    epsilon: float
    columns: Optional[List[str]] = None
    seed: Optional[int] = None


class SyntheticDataRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    sample_percent: float = 100.0
    columns: Optional[List[str]] = None
    seed: Optional[int] = None


class UtilityRequest(BaseModel):
    original: List[Dict[str, Any]] = Field(default_factory=list)
    processed: List[Dict[str, Any]] = Field(default_factory=list)
    information_loss: float = 0.0


class EngineConfigOut(BaseModel):
    """Subset of engine configuration exposed via API for ops tooling."""

    max_rows: int
    strict_columns: bool
    default_k_threshold: int
    population_multiplier: int
    min_population_size: int
    generalization_bucket_width: int
    dp_sensitivity: float
    debug_mode: bool
    log_level: str


def _engine_error(exc: EngineError) -> HTTPException:
    """Map an engine error to an HTTP error"""
    status_code = 413 if exc.error_code == ErrorCodes.TABLE_TOO_LARGE else 400
    logger.warning("Engine request rejected", error=exc.error_code, message=exc.message)
    return HTTPException(status_code=status_code, detail=exc.to_dict())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting SDC Engine", version=SERVICE_VERSION, max_rows=settings.max_rows)
    yield
    logger.info("Shutting down SDC Engine")

# Create FastAPI app
app = FastAPI(
    title="SDC Engine",
    description="Re-identification risk assessment and anonymization of tabular data",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@app.get("/engine/config", response_model=EngineConfigOut)
async def read_engine_config():
    """Return a sanitized view of engine configuration"""
    return EngineConfigOut(
        max_rows=settings.max_rows,
        strict_columns=settings.strict_columns,
        default_k_threshold=settings.default_k_threshold,
        population_multiplier=settings.population_multiplier,
        min_population_size=settings.min_population_size,
        generalization_bucket_width=settings.generalization_bucket_width,
        dp_sensitivity=settings.dp_sensitivity,
        debug_mode=settings.debug_mode,
        log_level=settings.log_level,
    )


# =============================================================================
# RISK ASSESSMENT
# =============================================================================

@app.post("/risk/assess", response_model=RiskMetrics)
def assess_risk(request: RiskAssessRequest):
    """Assess re-identification risk under the three attacker models"""
    try:
        return RiskEstimator(settings).assess(
            request.records,
            request.quasi_identifiers,
            k_threshold=request.k_threshold,
            attack_scenario=request.attack_scenario,
            population_size=request.population_size,
        )
    except EngineError as exc:
        raise _engine_error(exc)


# =============================================================================
# PRIVACY ENHANCEMENT
# =============================================================================

@app.post("/privacy/k-anonymity", response_model=KAnonymityResult)
def apply_k_anonymity(request: KAnonymityRequest):
    """Suppress or generalize equivalence classes smaller than k"""
    try:
        anonymizer = KAnonymizer(request.k_value, request.suppression_limit, config=settings)
        return anonymizer.anonymize(request.records, request.quasi_identifiers)
    except EngineError as exc:
        raise _engine_error(exc)


@app.post("/privacy/l-diversity", response_model=LDiversityResult)
def apply_l_diversity(request: LDiversityRequest):
    """Suppress equivalence classes with fewer than l distinct sensitive values"""
    try:
        enforcer = LDiversityEnforcer(request.l_value, config=settings)
        return enforcer.anonymize(request.records, request.quasi_identifiers,
                                  request.sensitive_attribute)
    except EngineError as exc:
        raise _engine_error(exc)


@app.post("/privacy/t-closeness", response_model=TClosenessResult)
def apply_t_closeness(request: TClosenessRequest):
    """Suppress equivalence classes further than t from the global distribution"""
    try:
        enforcer = TClosenessEnforcer(request.t_value, config=settings)
        return enforcer.anonymize(request.records, request.quasi_identifiers,
                                  request.sensitive_attribute)
    except EngineError as exc:
        raise _engine_error(exc)


@app.post("/privacy/differential-privacy", response_model=DifferentialPrivacyResult)
def apply_differential_privacy(request: DifferentialPrivacyRequest):
    """Add Laplace noise to numeric columns"""
    try:
        mechanism = NoiseMechanism(request.epsilon, seed=request.seed, config=settings)
        return mechanism.apply(request.records, request.columns)
    except EngineError as exc:
        raise _engine_error(exc)


@app.post("/privacy/synthetic-data", response_model=SyntheticDataResult)
def generate_synthetic_data(request: SyntheticDataRequest):
    """Resample rows with jitter into a synthetic table"""
    try:
        sampler = SyntheticSampler(seed=request.seed, config=settings)
        return sampler.generate(request.records, request.sample_percent, request.columns)
    except EngineError as exc:
        raise _engine_error(exc)


# =============================================================================
# UTILITY MEASUREMENT
# =============================================================================

@app.post("/utility/measure", response_model=UtilityMeasurement)
def measure_utility(request: UtilityRequest):
    """Compare a processed table against its source"""
    try:
        return UtilityMeter(settings).measure(request.original, request.processed,
                                              request.information_loss)
    except EngineError as exc:
        raise _engine_error(exc)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "SDC Engine",
        "version": SERVICE_VERSION,
        "status": "operational",
        "features": {
            "risk_assessment": True,
            "k_anonymity": True,
            "l_diversity": True,
            "t_closeness": True,
            "differential_privacy": True,
            "synthetic_data": True,
            "utility_measurement": True,
        }
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
