"""Demo claims endpoint."""

from fastapi import APIRouter, HTTPException

from api.demo_cases import get_demo_case, get_demo_cases
from api.schemas.responses import DemoClaim

router = APIRouter(prefix="/demo", tags=["Demo"])


def _demo_claim(case: dict) -> DemoClaim:
    return DemoClaim(
        claim_id=case["claim_id"],
        claim_number=case["claim_number"],
        name=case["name"],
        description=case["description"],
        product_name=case["product_name"],
        purchase_price=case["purchase_price"],
        excess_amount=case["excess_amount"],
        payment_on_file=case["payment_on_file"],
        coverage_area=case["coverage_area"],
        expected_fulfillment=case["expected_fulfillment"],
    )


@router.get("/claims", response_model=list[DemoClaim])
async def list_demo_claims():
    """List pre-built demo claims, one per routing outcome."""
    return [_demo_claim(c) for c in get_demo_cases()]


@router.get("/claims/{claim_id}", response_model=DemoClaim)
async def get_demo_claim(claim_id: str):
    """Get a specific demo claim by ID."""
    case = get_demo_case(claim_id)
    if not case:
        raise HTTPException(status_code=404, detail=f"Demo claim '{claim_id}' not found")
    return _demo_claim(case)
