"""Repairer availability endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from api.schemas.responses import AvailabilityResponse, SlotsResponse
from claimflow.engine import FulfillmentFlowController, FulfillmentServices

router = APIRouter(prefix="/repairers", tags=["Repairers"])

# Shared services (set by main.py)
services: FulfillmentServices = None


def set_services(s: FulfillmentServices):
    global services
    services = s


def _require_repairer(repairer_id: str):
    repairer = services.repairers.get_repairer(repairer_id)
    if not repairer:
        raise HTTPException(status_code=404, detail=f"Repairer '{repairer_id}' not found")
    return repairer


def _superseded(kind: str):
    raise HTTPException(
        status_code=409,
        detail=f"{kind} request was superseded by a newer request for this claim",
    )


@router.get("/{repairer_id}/availability", response_model=AvailabilityResponse)
def get_availability(repairer_id: str, claim_id: Optional[str] = None):
    """
    Fully booked dates for a repairer over the look-ahead window.

    With ``claim_id`` the lookup runs in that claim's flow and a superseded
    lookup returns 409.
    """
    _require_repairer(repairer_id)

    if claim_id:
        flow = FulfillmentFlowController(claim_id, services)
        flow.load()
        dates = flow.fetch_unavailable_dates(repairer_id)
        if dates is None:
            _superseded("Availability")
    else:
        dates = services.oracle.unavailable_dates(repairer_id)

    first_available = None
    if hasattr(services.oracle, "first_available_date"):
        first_available = services.oracle.first_available_date(repairer_id).isoformat()

    return AvailabilityResponse(
        repairer_id=repairer_id,
        unavailable_dates=sorted(d.isoformat() for d in dates),
        first_available_date=first_available,
    )


@router.get("/{repairer_id}/slots", response_model=SlotsResponse)
def get_slots(
    repairer_id: str,
    on_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    claim_id: Optional[str] = None,
):
    """Bookable slots for a repairer on a date (YYYY-MM-DD)."""
    _require_repairer(repairer_id)

    if claim_id:
        flow = FulfillmentFlowController(claim_id, services)
        flow.load()
        slots = flow.fetch_available_slots(on_date, repairer_id)
        if slots is None:
            _superseded("Slot")
    else:
        slots = services.oracle.available_slots(repairer_id, on_date)

    return SlotsResponse(repairer_id=repairer_id, date=on_date.isoformat(), slots=slots)
