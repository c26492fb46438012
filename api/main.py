"""
ClaimFlow API

Claim fulfillment workflow service: excess payment, routing, repairer
recommendations, availability and appointment scheduling.

Environment:
    CLAIMFLOW_RULES_PACK            Path to a rules pack (default: packs/standard_fulfillment.yaml)
    CLAIMFLOW_LOG_LEVEL             Log level (default: INFO)
    CLAIMFLOW_PAYMENT_DELAY_SECONDS Overrides the simulated card payment delay
    CLAIMFLOW_SEED_DEMO             Load the demo claims (default: true)
"""

import json
import logging
import os
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from claimflow import __version__
from claimflow.engine import FulfillmentServices
from claimflow.exceptions import (
    ClaimFlowError,
    ClaimNotFoundError,
    CollaboratorError,
    FulfillmentValidationError,
    InvalidTransitionError,
    PersistenceError,
    ReferenceGenerationError,
)
from claimflow.models import FulfillmentRules
from claimflow.packs import RulesPackLoader
from claimflow.stores import (
    InMemoryClaimStore,
    InMemoryCoveredItemStore,
    InMemoryDeviceCatalog,
    InMemoryFulfillmentStore,
    InMemoryPolicyStore,
    InMemoryRepairerDirectory,
)

from api.demo_cases import seed_demo_data
from api.routes import demo, fulfillment, repairers

# =============================================================================
# Configuration
# =============================================================================

DEFAULT_RULES_PACK = Path(__file__).parent.parent / "packs" / "standard_fulfillment.yaml"

CLAIMFLOW_LOG_LEVEL = os.getenv("CLAIMFLOW_LOG_LEVEL", "INFO")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# =============================================================================
# Logging Setup (Structured JSON)
# =============================================================================

class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    EXTRA_FIELDS = ("claim_id", "step", "status", "code", "path", "duration_ms")

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Add extra fields if present
        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


logger = logging.getLogger("claimflow")
logger.setLevel(getattr(logging, CLAIMFLOW_LOG_LEVEL.upper(), logging.INFO))
if not any(isinstance(h.formatter, JSONFormatter) for h in logger.handlers):
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)


# =============================================================================
# Services
# =============================================================================

SERVICES: FulfillmentServices = None
RULES: FulfillmentRules = None
DEMO_CLAIMS_LOADED = 0


def load_rules() -> FulfillmentRules:
    """Load the configured rules pack, falling back to the built-in defaults."""
    pack_path = Path(os.getenv("CLAIMFLOW_RULES_PACK", str(DEFAULT_RULES_PACK)))
    if pack_path.exists():
        rules = RulesPackLoader(strict_version=False).load(pack_path)
    else:
        logger.warning("Rules pack not found, using defaults", extra={"path": str(pack_path)})
        rules = FulfillmentRules()

    delay = os.getenv("CLAIMFLOW_PAYMENT_DELAY_SECONDS")
    if delay is not None:
        rules = replace(rules, payment_delay_seconds=float(delay))
    return rules


def build_services(rules: FulfillmentRules, seed_demo: bool = True) -> FulfillmentServices:
    """In-memory service bundle, optionally seeded with the demo claims."""
    global DEMO_CLAIMS_LOADED

    claims = InMemoryClaimStore()
    policies = InMemoryPolicyStore()
    covered_items = InMemoryCoveredItemStore()
    catalog = InMemoryDeviceCatalog()
    directory = InMemoryRepairerDirectory()

    DEMO_CLAIMS_LOADED = 0
    if seed_demo:
        DEMO_CLAIMS_LOADED = seed_demo_data(claims, policies, covered_items, catalog, directory)

    return FulfillmentServices(
        fulfillments=InMemoryFulfillmentStore(),
        claims=claims,
        policies=policies,
        covered_items=covered_items,
        repairers=directory,
        catalog=catalog,
        rules=rules,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the rules pack and build the services on startup."""
    global SERVICES, RULES

    RULES = load_rules()
    logger.info(f"Using rules pack {RULES.id} ({RULES.version})")

    SERVICES = build_services(RULES, seed_demo=_env_flag("CLAIMFLOW_SEED_DEMO", True))
    logger.info(f"Loaded {DEMO_CLAIMS_LOADED} demo claims")

    # Share services with routes
    fulfillment.set_services(SERVICES)
    repairers.set_services(SERVICES)

    yield

    logger.info("Shutting down...")


# Create app
app = FastAPI(
    title="ClaimFlow API",
    description="""
**Claim fulfillment workflow service.**

Takes an accepted device-protection claim from excess payment to a booked
repair or a replacement voucher.

## Routing

- **Large items** (TVs, home appliances): engineer visit, `ENG-` reference
- **Confirmed value under the voucher threshold**: replacement voucher
- **Everything else**: courier collection, `LOG-` reference

## Quick Start

1. `GET /demo/claims` - See pre-built claims
2. `POST /fulfillment/{claim_id}/excess` - Pay the excess
3. `GET /fulfillment/{claim_id}/recommendations` - Pick a repairer
4. `GET /repairers/{repairer_id}/slots?date=YYYY-MM-DD` - Find a slot
5. `POST /fulfillment/{claim_id}/schedule` - Book it
    """,
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(fulfillment.router)
app.include_router(repairers.router)
app.include_router(demo.router)


# =============================================================================
# Error Handling
# =============================================================================

def status_for(exc: ClaimFlowError) -> int:
    """HTTP status for a workflow error."""
    if isinstance(exc, ClaimNotFoundError):
        return 404
    if isinstance(exc, FulfillmentValidationError):
        return 422
    if isinstance(exc, InvalidTransitionError):
        return 409
    if isinstance(exc, (PersistenceError, ReferenceGenerationError)):
        return 503
    if isinstance(exc, CollaboratorError):
        return 502
    return 500


@app.exception_handler(ClaimFlowError)
async def claimflow_error_handler(request: Request, exc: ClaimFlowError):
    status_code = status_for(exc)
    logger.warning(
        str(exc),
        extra={"claim_id": exc.claim_id, "code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# =============================================================================
# Info Endpoints
# =============================================================================

@app.get("/api", tags=["Health"])
async def api_info():
    """API info endpoint - JSON health check and info."""
    return {
        "service": "ClaimFlow API",
        "version": __version__,
        "status": "running",
        "rules_pack": RULES.id if RULES else None,
        "rules_version": RULES.version if RULES else None,
        "demo_claims_loaded": DEMO_CLAIMS_LOADED,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["Health"])
async def health():
    """Health check endpoint."""
    return {
        "healthy": SERVICES is not None,
        "rules_pack": RULES.id if RULES else None,
        "demo_claims_loaded": DEMO_CLAIMS_LOADED,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
